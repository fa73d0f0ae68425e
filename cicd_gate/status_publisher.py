from cicd_gate.github_client import GitHubClientError, _api_json_request, normalize_api_base
from cicd_gate.logger import log_event


class StatusPublishError(Exception):
    pass


DEFAULT_CONTEXT = "ci/cicd-approval"
MAX_DESCRIPTION = 140

_NO_FILES_DESCRIPTION = "No CI/CD related files changed"


def status_for_decision(decision):
    """Commit status state and description shown on the pull request for a gate decision."""
    if not decision.sensitive_files:
        return "success", _NO_FILES_DESCRIPTION
    if decision.passed:
        return "success", f"Approved by @{decision.required_approver}"
    description = decision.message
    if len(description) > MAX_DESCRIPTION:
        description = description[: MAX_DESCRIPTION - 3] + "..."
    return "failure", description


def publish_gate_status(api_base, owner, repo, sha, decision, headers=None, context=DEFAULT_CONTEXT):
    if not sha:
        raise StatusPublishError("Status publish failed: missing head sha")
    if not (headers or {}).get("Authorization"):
        raise StatusPublishError("Status publish failed: missing Authorization token header")
    try:
        base = normalize_api_base(api_base)
    except GitHubClientError as exc:
        raise StatusPublishError(f"Status publish failed: {exc}") from exc

    state, description = status_for_decision(decision)
    url = f"{base}/repos/{owner}/{repo}/statuses/{sha}"
    payload = {"state": state, "context": context, "description": description}

    try:
        status, _, raw = _api_json_request("POST", url, payload=payload, headers=headers)
    except GitHubClientError as exc:
        log_event("status_publish", f"context={context} state={state} sha={sha} http=ERR")
        raise StatusPublishError(f"Status publish failed: {exc}") from exc

    log_event(
        "status_publish",
        f"context={context} state={state} outcome={decision.outcome} sha={sha} http={status}",
    )
    if status not in (200, 201):
        raise StatusPublishError(f"Status publish failed: HTTP {status} url={url} body={raw}")
    return state
