import dataclasses
from datetime import datetime, timezone
from typing import Any

from cicd_gate.rules import REQUIRED_APPROVER, SENSITIVE_PATH_RULES, classify_paths


STATE_APPROVED = "APPROVED"

PASS_NO_SENSITIVE_FILES = "PASS_NO_SENSITIVE_FILES"
PASS_APPROVED = "PASS_APPROVED"
FAIL_NO_APPROVALS = "FAIL_NO_APPROVALS"
FAIL_MISSING_REQUIRED_APPROVER = "FAIL_MISSING_REQUIRED_APPROVER"

_PASSING_OUTCOMES = {PASS_NO_SENSITIVE_FILES, PASS_APPROVED}


@dataclasses.dataclass(frozen=True)
class Review:
    login: str | None
    state: str
    submitted_at: str = ""

    @classmethod
    def from_api(cls, payload: dict[str, Any]) -> "Review":
        user = payload.get("user")
        if not isinstance(user, dict):
            user = {}
        login = user.get("login")
        return cls(
            login=login if isinstance(login, str) and login else None,
            state=str(payload.get("state") or ""),
            submitted_at=str(payload.get("submitted_at") or ""),
        )


@dataclasses.dataclass(frozen=True)
class GateDecision:
    outcome: str
    required_approver: str
    sensitive_files: tuple[str, ...] = ()
    approvers: tuple[str, ...] = ()
    reviewer_states: dict[str, str] = dataclasses.field(default_factory=dict)
    message: str = ""

    @property
    def passed(self) -> bool:
        return self.outcome in _PASSING_OUTCOMES

    def to_dict(self) -> dict[str, Any]:
        payload = dataclasses.asdict(self)
        payload["sensitive_files"] = list(self.sensitive_files)
        payload["approvers"] = list(self.approvers)
        payload["passed"] = self.passed
        return payload


def latest_review_states(reviews):
    """
    Collapse review history into one state per reviewer.
    Reviews must be in delivery order (oldest first); later entries overwrite
    earlier ones for the same case-folded login. Reviews without a login are
    dropped.
    """
    states = {}
    for review in reviews:
        login = review.login or ""
        if not login:
            continue
        states[login.lower()] = review.state
    return states


def _parse_timestamp(value):
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def find_order_anomalies(reviews):
    """Index pairs where submitted_at goes backwards; unparseable timestamps are skipped."""
    anomalies = []
    previous = None
    for index, review in enumerate(reviews):
        submitted = _parse_timestamp(review.submitted_at)
        if submitted is None:
            continue
        if previous is not None and submitted < previous[1]:
            anomalies.append((previous[0], index))
        previous = (index, submitted)
    return anomalies


def approved_reviewers(states):
    return [login for login, state in states.items() if state == STATE_APPROVED]


def decide(states, sensitive_files, required_approver=REQUIRED_APPROVER):
    sensitive = tuple(sensitive_files)
    approvers = approved_reviewers(states)

    if not approvers:
        return GateDecision(
            outcome=FAIL_NO_APPROVALS,
            required_approver=required_approver,
            sensitive_files=sensitive,
            reviewer_states=dict(states),
            message="CI/CD related files changed but no approving review is present.",
        )

    if required_approver.lower() not in approvers:
        return GateDecision(
            outcome=FAIL_MISSING_REQUIRED_APPROVER,
            required_approver=required_approver,
            sensitive_files=sensitive,
            approvers=tuple(approvers),
            reviewer_states=dict(states),
            message=(
                f"CI/CD related files changed. Approvals found ({', '.join(approvers)}), "
                f"but @{required_approver} approval is required."
            ),
        )

    return GateDecision(
        outcome=PASS_APPROVED,
        required_approver=required_approver,
        sensitive_files=sensitive,
        approvers=tuple(approvers),
        reviewer_states=dict(states),
        message=f"Required CI/CD approval present: @{required_approver}",
    )


def no_sensitive_files_decision(required_approver=REQUIRED_APPROVER):
    return GateDecision(
        outcome=PASS_NO_SENSITIVE_FILES,
        required_approver=required_approver,
        message="No CI/CD related files changed in this PR.",
    )


def evaluate_gate(paths, reviews, rules=SENSITIVE_PATH_RULES, required_approver=REQUIRED_APPROVER):
    sensitive = classify_paths(paths, rules)
    if not sensitive:
        return no_sensitive_files_decision(required_approver)
    return decide(latest_review_states(reviews), sensitive, required_approver)
