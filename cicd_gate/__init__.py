from cicd_gate.config_loader import (
    ConfigLoadError,
    load_config,
    resolve_config,
)
from cicd_gate.context import (
    PreconditionError,
    PullRequestContext,
    load_pull_request_context,
)
from cicd_gate.evaluator import (
    FAIL_MISSING_REQUIRED_APPROVER,
    FAIL_NO_APPROVALS,
    PASS_APPROVED,
    PASS_NO_SENSITIVE_FILES,
    GateDecision,
    Review,
    decide,
    evaluate_gate,
    latest_review_states,
)
from cicd_gate.github_client import (
    GitHubClientError,
    get_pull_request_files,
    get_pull_request_reviews,
)
from cicd_gate.report import (
    ActionsSink,
    gate_report,
    write_gate_artifact,
)
from cicd_gate.rules import (
    REQUIRED_APPROVER,
    SENSITIVE_PATH_RULES,
    SensitivePathRule,
    classify_paths,
)
from cicd_gate.runner import (
    run_approval_gate,
)
from cicd_gate.status_publisher import (
    StatusPublishError,
    publish_gate_status,
    status_for_decision,
)

__all__ = [
    "ActionsSink",
    "ConfigLoadError",
    "FAIL_MISSING_REQUIRED_APPROVER",
    "FAIL_NO_APPROVALS",
    "GateDecision",
    "GitHubClientError",
    "PASS_APPROVED",
    "PASS_NO_SENSITIVE_FILES",
    "PreconditionError",
    "PullRequestContext",
    "REQUIRED_APPROVER",
    "Review",
    "SENSITIVE_PATH_RULES",
    "SensitivePathRule",
    "StatusPublishError",
    "classify_paths",
    "decide",
    "evaluate_gate",
    "gate_report",
    "get_pull_request_files",
    "get_pull_request_reviews",
    "latest_review_states",
    "load_config",
    "load_pull_request_context",
    "publish_gate_status",
    "resolve_config",
    "run_approval_gate",
    "status_for_decision",
    "write_gate_artifact",
]
