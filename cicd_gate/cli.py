import argparse
import os

from cicd_gate.config_loader import ConfigLoadError, resolve_config
from cicd_gate.context import PreconditionError, load_pull_request_context
from cicd_gate.github_client import (
    GitHubClientError,
    auth_headers,
    get_pull_request_files,
    get_pull_request_reviews,
)
from cicd_gate.logger import log_event
from cicd_gate.report import ActionsSink, gate_report, write_gate_artifact
from cicd_gate.runner import run_approval_gate
from cicd_gate.status_publisher import StatusPublishError, publish_gate_status


def build_parser():
    ap = argparse.ArgumentParser(
        prog="cicd-approval-gate",
        description="Require the CI/CD owner's approval on pull requests that touch CI/CD paths",
    )
    ap.add_argument("--event-path", default=None, help="pull request event payload (default: $GITHUB_EVENT_PATH)")
    ap.add_argument("--repo", default=None, help="owner/repo (default: from event or $GITHUB_REPOSITORY)")
    ap.add_argument("--config", default=None, help="YAML config (default: $CICD_GATE_CONFIG_PATH)")
    return ap


def _publish(config, pr, headers, decision):
    publish_gate_status(
        api_base=config["api_base"],
        owner=pr.owner,
        repo=pr.repo,
        sha=pr.head_sha,
        decision=decision,
        headers=headers,
        context=config["status_context"],
    )


def main(argv=None, env=None, stream=None):
    args = build_parser().parse_args(argv)
    env = os.environ if env is None else env
    sink = ActionsSink(stream=stream)

    log_event("CICD_GATE", "run start")
    try:
        config, config_hash = resolve_config(args.config, env)
        pr = load_pull_request_context(
            args.event_path or env.get("GITHUB_EVENT_PATH"),
            env,
            repo_override=args.repo,
        )
        headers = auth_headers(env)
        api_base = config["api_base"]

        decision = run_approval_gate(
            lambda: get_pull_request_files(api_base, pr.owner, pr.repo, pr.number, headers=headers),
            lambda: get_pull_request_reviews(api_base, pr.owner, pr.repo, pr.number, headers=headers),
            sink,
        )
        write_gate_artifact(pr.number, pr.head_sha, config_hash, decision, root=config["artifact_root"])
        if config.get("publish_status"):
            _publish(config, pr, headers, decision)
    except (
        ConfigLoadError,
        PreconditionError,
        GitHubClientError,
        StatusPublishError,
        OSError,
    ) as exc:
        log_event("CICD_GATE", f"FAIL_CLOSED reason={exc}")
        if not sink.failed:
            sink.set_failed(str(exc))
        return 1

    sink.info(gate_report(pr.number, pr.head_sha, config_hash, decision))
    log_event("CICD_GATE", "run end")
    return sink.exit_code()


if __name__ == "__main__":
    raise SystemExit(main())
