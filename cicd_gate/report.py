import json
import os
import sys

from cicd_gate.logger import log_event


class ActionsSink:
    """Reports to a CI runner log the way workflow commands expect."""

    def __init__(self, stream=None):
        self.stream = stream or sys.stdout
        self.failed = False
        self.failure_message = None

    def info(self, message):
        print(message, file=self.stream)

    def set_failed(self, message):
        self.failed = True
        self.failure_message = message
        escaped = str(message).replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")
        print(f"::error::{escaped}", file=self.stream)

    def exit_code(self):
        return 1 if self.failed else 0


def gate_report(pr_number, head_sha, config_hash, decision):
    payload = {
        "pr_number": pr_number,
        "head_sha": head_sha,
        "config_hash": config_hash,
        "passed": decision.passed,
        "outcome": decision.outcome,
        "required_approver": decision.required_approver,
        "sensitive_files": len(decision.sensitive_files),
    }
    return "CICD_GATE_REPORT " + json.dumps(payload, sort_keys=True)


def write_gate_artifact(pr_number, head_sha, config_hash, decision, root="artifacts/governance"):
    os.makedirs(root, exist_ok=True)
    payload = {
        "pr_number": pr_number,
        "head_sha": head_sha,
        "config_hash": config_hash,
        "decision": decision.to_dict(),
    }
    name = f"cicd-approval-pr-{pr_number}-{head_sha}.json" if head_sha else f"cicd-approval-pr-{pr_number}.json"
    path = os.path.join(root, name)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(payload, f, sort_keys=True, indent=2)
        f.write("\n")
    status = "PASS" if decision.passed else "FAIL"
    log_event("artifact", f"wrote {name} status={status}")
    return path
