from cicd_gate.logger import log_event


def test_log_event_redacts_tokens(tmp_path, monkeypatch):
    log_path = tmp_path / "logs" / "cicd-gate.log"
    monkeypatch.setenv("CICD_GATE_LOG_PATH", str(log_path))
    log_event("client", "request Authorization: token ghp_secret123 failed\n  retry=no")
    log_event("client", "header bearer abc.def-ghi")
    lines = log_path.read_text(encoding="utf-8").splitlines()
    assert len(lines) == 2
    assert "ghp_secret123" not in lines[0]
    assert "Authorization=[REDACTED]" in lines[0]
    assert lines[0].endswith("[client] request Authorization=[REDACTED] failed retry=no")
    assert "abc.def-ghi" not in lines[1]
    assert "bearer [REDACTED]" in lines[1]


def test_log_event_never_raises_on_unwritable_path(tmp_path, monkeypatch):
    blocker = tmp_path / "file"
    blocker.write_text("x", encoding="utf-8")
    monkeypatch.setenv("CICD_GATE_LOG_PATH", str(blocker / "nested" / "cicd-gate.log"))
    log_event("gate", "still fine")
