from cicd_gate.evaluator import (
    decide,
    find_order_anomalies,
    latest_review_states,
    no_sensitive_files_decision,
)
from cicd_gate.logger import log_event
from cicd_gate.rules import REQUIRED_APPROVER, SENSITIVE_PATH_RULES, classify_paths


def run_approval_gate(
    list_files,
    list_reviews,
    sink,
    rules=SENSITIVE_PATH_RULES,
    required_approver=REQUIRED_APPROVER,
):
    """
    Runs classifier, reducer and gate against injected data sources.
    list_reviews is only called when sensitive files changed.
    """
    files = list(list_files())
    sensitive = classify_paths(files, rules)
    log_event("classifier", f"files={len(files)} sensitive={len(sensitive)}")

    if not sensitive:
        decision = no_sensitive_files_decision(required_approver)
        sink.info(decision.message)
        log_event("gate", f"FINAL result=PASS outcome={decision.outcome}")
        return decision

    sink.info("CI/CD related files changed:\n- " + "\n- ".join(sensitive))
    sink.info(f"Required approver: @{required_approver}")

    reviews = list(list_reviews())
    for earlier, later in find_order_anomalies(reviews):
        log_event(
            "reducer",
            f"order_anomaly earlier_index={earlier} later_index={later} delivery_order_kept=true",
        )
    states = latest_review_states(reviews)
    log_event(
        "reducer",
        f"reviews={len(reviews)} reviewers={len(states)} "
        f"states={','.join(f'{login}:{state}' for login, state in states.items())}",
    )

    decision = decide(states, sensitive, required_approver)
    if decision.passed:
        sink.info(decision.message)
    else:
        sink.set_failed(decision.message)
    log_event(
        "gate",
        f"FINAL result={'PASS' if decision.passed else 'FAIL'} outcome={decision.outcome} "
        f"approvers={list(decision.approvers)}",
    )
    return decision
