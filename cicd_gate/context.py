import dataclasses
import json


class PreconditionError(Exception):
    pass


@dataclasses.dataclass(frozen=True)
class PullRequestContext:
    owner: str
    repo: str
    number: int
    head_sha: str


def repo_identity(event, env, override=None):
    """
    Resolves owner/repo from an explicit override, the event payload, or
    GITHUB_REPOSITORY, in that order.
    """
    full_name = override or ((event.get("repository") or {}).get("full_name")) or env.get("GITHUB_REPOSITORY") or ""
    owner, _, repo = full_name.strip().partition("/")
    if not owner or not repo or "/" in repo:
        raise PreconditionError(f"Missing repository context: {full_name!r}")
    return owner, repo


def load_event(event_path):
    if not event_path:
        raise PreconditionError("Missing pull_request context.")
    try:
        with open(event_path, "r", encoding="utf-8") as f:
            event = json.load(f)
    except (OSError, ValueError) as exc:
        raise PreconditionError(f"Missing pull_request context: {exc}") from exc
    if not isinstance(event, dict):
        raise PreconditionError("Missing pull_request context.")
    return event


def load_pull_request_context(event_path, env, repo_override=None):
    event = load_event(event_path)
    pull_request = event.get("pull_request") or {}
    number = pull_request.get("number")
    if not isinstance(number, int) or isinstance(number, bool) or number <= 0:
        raise PreconditionError("Missing pull_request context.")
    owner, repo = repo_identity(event, env, override=repo_override)
    head_sha = ((pull_request.get("head") or {}).get("sha") or "").strip()
    return PullRequestContext(owner=owner, repo=repo, number=number, head_sha=head_sha)
