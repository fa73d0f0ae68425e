import json
import urllib.error
import urllib.parse
import urllib.request

from cicd_gate.evaluator import Review


DEFAULT_API_BASE = "https://api.github.com"
PER_PAGE = 100
MAX_PAGES = 100


class GitHubClientError(Exception):
    pass


def normalize_api_base(api_base):
    if api_base is not None and not isinstance(api_base, str):
        raise GitHubClientError(f"Invalid api_base: {api_base!r}")
    base = (api_base or "").strip().rstrip("/")
    if not base:
        raise GitHubClientError("Missing api_base")
    return base


def _api_json_request(method, url, payload=None, headers=None):
    req_headers = {"Accept": "application/vnd.github+json"}
    if headers:
        req_headers.update(headers)
    data = None
    if payload is not None:
        req_headers["Content-Type"] = "application/json"
        data = json.dumps(payload).encode("utf-8")

    req = urllib.request.Request(url, data=data, headers=req_headers, method=method)
    try:
        with urllib.request.urlopen(req, timeout=10) as response:
            body = response.read()
            status = response.status
    except urllib.error.HTTPError as e:
        raw = e.read().decode("utf-8", errors="replace") if e.fp else ""
        parsed = None
        if raw:
            try:
                parsed = json.loads(raw)
            except ValueError:
                parsed = None
        return e.code, parsed, raw
    except (urllib.error.URLError, OSError) as e:
        raise GitHubClientError(f"API request failed url={url} error={e}") from e

    raw = body.decode("utf-8", errors="replace")
    try:
        parsed = json.loads(raw) if raw else None
    except ValueError as e:
        raise GitHubClientError(
            f"API response is not JSON url={url} status={status} body={raw[:200]}"
        ) from e
    return status, parsed, raw


def _require_list_response(status, data, endpoint_label, raw):
    if status != 200 or not isinstance(data, list):
        raise GitHubClientError(
            f"CI/CD gate API failure endpoint={endpoint_label} status={status} body={raw}"
        )
    return data


def _paginate(url, endpoint_label, headers=None):
    items = []
    for page in range(1, MAX_PAGES + 1):
        query = urllib.parse.urlencode({"per_page": PER_PAGE, "page": page})
        status, data, raw = _api_json_request("GET", f"{url}?{query}", headers=headers)
        batch = _require_list_response(status, data, endpoint_label, raw)
        items.extend(batch)
        if len(batch) < PER_PAGE:
            return items
    raise GitHubClientError(
        f"CI/CD gate API failure endpoint={endpoint_label} pages_exceeded={MAX_PAGES}"
    )


def get_pull_request_files(api_base, owner, repo, pr_number, headers=None):
    base = normalize_api_base(api_base)
    url = f"{base}/repos/{owner}/{repo}/pulls/{pr_number}/files"
    file_entries = _paginate(url, f"pulls/{pr_number}/files", headers=headers)
    return [
        (item.get("filename") or "").strip()
        for item in file_entries
        if (item.get("filename") or "").strip()
    ]


def get_pull_request_reviews(api_base, owner, repo, pr_number, headers=None):
    base = normalize_api_base(api_base)
    url = f"{base}/repos/{owner}/{repo}/pulls/{pr_number}/reviews"
    entries = _paginate(url, f"pulls/{pr_number}/reviews", headers=headers)
    return [Review.from_api(entry) for entry in entries if isinstance(entry, dict)]


def auth_headers(env):
    token = env.get("GITHUB_TOKEN") or env.get("GH_TOKEN")
    headers = {}
    if token:
        headers["Authorization"] = f"token {token}"
    return headers
