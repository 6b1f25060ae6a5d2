import os
import subprocess
import sys
from pathlib import Path

import pytest

from servo_ci.entrypoint import build_parser, main
from servo_ci.testing import MockGithubServer, MockMonitorServer

SELECT_ARGS = [
    "runner",
    "select",
    "--github-repository",
    "servo/servo",
    "--github-run-id",
    "12345",
    "--monitor-api-token",
    "monitor-token",
    "--github-hosted-runner-label",
    "ubuntu-22.04",
    "--self-hosted-image-name",
    "servo-ubuntu2204",
]


def _outputs(path: Path) -> dict:
    return dict(line.split("=", 1) for line in path.read_text(encoding="utf-8").splitlines())


def test_hello() -> None:
    assert main(["hello"]) == 0


def test_parser_requires_subcommand() -> None:
    with pytest.raises(SystemExit) as ei:
        build_parser().parse_args(["runner"])
    assert ei.value.code == 2


def test_select_forced_github_hosted_writes_outputs(tmp_path: Path, monkeypatch) -> None:
    out = tmp_path / "github_output"
    monkeypatch.setenv("GITHUB_OUTPUT", str(out))
    monkeypatch.delenv("NO_SELF_HOSTED_RUNNERS", raising=False)
    assert main(SELECT_ARGS + ["--force-github-hosted-runner"]) == 0
    outputs = _outputs(out)
    assert list(outputs) == ["unique_id", "selected_runner_label", "is_self_hosted"]
    assert outputs["selected_runner_label"] == "ubuntu-22.04"
    assert outputs["is_self_hosted"] == "false"


def test_select_reserves_from_configured_monitor(tmp_path: Path, monkeypatch) -> None:
    out = tmp_path / "github_output"
    monkeypatch.setenv("GITHUB_OUTPUT", str(out))
    monkeypatch.delenv("NO_SELF_HOSTED_RUNNERS", raising=False)
    with MockMonitorServer(grant={"ok": True}, token="monitor-token") as srv:
        monkeypatch.setenv("SERVO_CI_MONITOR_URLS", srv.base_url)
        assert main(SELECT_ARGS) == 0
    outputs = _outputs(out)
    assert outputs["selected_runner_label"] == f"reserved-for:{outputs['unique_id']}"
    assert outputs["is_self_hosted"] == "true"


def test_select_without_github_output_fails(monkeypatch) -> None:
    monkeypatch.delenv("GITHUB_OUTPUT", raising=False)
    assert main(SELECT_ARGS + ["--force-github-hosted-runner"]) == 1


def _timeout_args(unique_id: str) -> list:
    return [
        "runner",
        "timeout",
        unique_id,
        "--wait-time",
        "0",
        "--github-repository",
        "servo/servo",
        "--github-run-id",
        "42",
        "--github-token",
        "ghtok",
    ]


def test_timeout_cancels_stuck_run(monkeypatch) -> None:
    with MockGithubServer([{"name": "build [abc-123]", "status": "queued"}]) as srv:
        monkeypatch.setenv("SERVO_CI_GITHUB_API_URL", srv.base_url)
        assert main(_timeout_args("abc-123")) == 0
        assert len(srv.cancel_requests) == 1


def test_timeout_missing_job_exits_nonzero(monkeypatch) -> None:
    with MockGithubServer([{"name": "build [abc-123]", "status": "queued"}]) as srv:
        monkeypatch.setenv("SERVO_CI_GITHUB_API_URL", srv.base_url)
        assert main(_timeout_args("other-id")) == 1
        assert srv.cancel_requests == []


def test_package_runs_as_module() -> None:
    env = dict(os.environ)
    src = str(Path(__file__).resolve().parents[1] / "src")
    env["PYTHONPATH"] = f"{src}:{env.get('PYTHONPATH', '')}"
    env["SERVO_CI_LOG_LEVEL"] = "INFO"
    proc = subprocess.run(
        [sys.executable, "-m", "servo_ci", "hello"],
        env=env,
        capture_output=True,
        text=True,
        timeout=60,
    )
    assert proc.returncode == 0, proc.stderr
    assert "hello world" in proc.stderr
