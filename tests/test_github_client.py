import pytest

from cicd_gate import github_client
from cicd_gate.evaluator import Review
from cicd_gate.github_client import (
    GitHubClientError,
    auth_headers,
    get_pull_request_files,
    get_pull_request_reviews,
    normalize_api_base,
)


def _fake_pages(pages, calls):
    def fake_request(method, url, payload=None, headers=None):
        calls.append((method, url, headers))
        page = int(url.rsplit("page=", 1)[1])
        data = pages[page - 1] if page <= len(pages) else []
        return 200, data, "[]"

    return fake_request


def test_files_are_flattened_across_pages_in_order(monkeypatch):
    first = [{"filename": f"src/f{i}.py"} for i in range(100)]
    second = [{"filename": ".github/workflows/ci.yml"}, {"filename": "  "}, {}]
    calls = []
    monkeypatch.setattr(github_client, "_api_json_request", _fake_pages([first, second], calls))

    files = get_pull_request_files("https://api.github.com/", "octo", "repo", 7, headers={"Authorization": "token x"})

    assert len(files) == 101
    assert files[0] == "src/f0.py"
    assert files[-1] == ".github/workflows/ci.yml"
    assert [url for _, url, _ in calls] == [
        "https://api.github.com/repos/octo/repo/pulls/7/files?per_page=100&page=1",
        "https://api.github.com/repos/octo/repo/pulls/7/files?per_page=100&page=2",
    ]
    assert calls[0][2] == {"Authorization": "token x"}


def test_exactly_full_page_fetches_one_more(monkeypatch):
    first = [{"filename": f"f{i}"} for i in range(100)]
    calls = []
    monkeypatch.setattr(github_client, "_api_json_request", _fake_pages([first], calls))
    assert len(get_pull_request_files("https://api.github.com", "o", "r", 1)) == 100
    assert len(calls) == 2


def test_reviews_are_converted_in_delivery_order(monkeypatch):
    page = [
        {"state": "CHANGES_REQUESTED", "submitted_at": "2026-01-01T00:00:00Z", "user": {"login": "chumyin"}},
        {"state": "APPROVED", "submitted_at": "2026-01-02T00:00:00Z", "user": {"login": "chumyin"}},
        {"state": "APPROVED", "user": None},
    ]
    monkeypatch.setattr(github_client, "_api_json_request", _fake_pages([page], []))
    reviews = get_pull_request_reviews("https://api.github.com", "o", "r", 3)
    assert reviews == [
        Review("chumyin", "CHANGES_REQUESTED", "2026-01-01T00:00:00Z"),
        Review("chumyin", "APPROVED", "2026-01-02T00:00:00Z"),
        Review(None, "APPROVED", ""),
    ]


def test_non_200_raises_with_endpoint(monkeypatch):
    monkeypatch.setattr(
        github_client,
        "_api_json_request",
        lambda method, url, payload=None, headers=None: (404, {"message": "Not Found"}, '{"message": "Not Found"}'),
    )
    with pytest.raises(GitHubClientError) as exc:
        get_pull_request_reviews("https://api.github.com", "o", "r", 9)
    assert "endpoint=pulls/9/reviews" in str(exc.value)
    assert "status=404" in str(exc.value)


def test_non_list_body_raises(monkeypatch):
    monkeypatch.setattr(
        github_client,
        "_api_json_request",
        lambda method, url, payload=None, headers=None: (200, {"files": []}, "{}"),
    )
    with pytest.raises(GitHubClientError):
        get_pull_request_files("https://api.github.com", "o", "r", 9)


def test_missing_api_base_raises():
    with pytest.raises(GitHubClientError):
        normalize_api_base("  ")
    assert normalize_api_base("https://ghe.example.com/api/v3/") == "https://ghe.example.com/api/v3"


def test_auth_headers_from_env():
    assert auth_headers({"GITHUB_TOKEN": "abc"}) == {"Authorization": "token abc"}
    assert auth_headers({"GH_TOKEN": "def"}) == {"Authorization": "token def"}
    assert auth_headers({}) == {}
