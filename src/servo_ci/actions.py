"""
GitHub Actions plumbing: step outputs and workflow-command annotations.

Outputs go to the file named by $GITHUB_OUTPUT, one `name=value` per line:
<https://docs.github.com/en/actions/reference/workflows-and-actions/workflow-commands#setting-an-output-parameter>
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Any, Optional, Protocol

from .config import github_output_path
from .errors import InvalidResult, ResultSinkUnavailable


class ResultSink(Protocol):
    def write(self, name: str, value: str) -> None: ...


class GithubOutputFile:
    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def write(self, name: str, value: str) -> None:
        with self.path.open("a", encoding="utf-8") as f:
            f.write(f"{name}={value}\n")


def default_sink() -> GithubOutputFile:
    path = github_output_path()
    if not path:
        raise ResultSinkUnavailable("GITHUB_OUTPUT is not set")
    return GithubOutputFile(path)


def _render(value: Any) -> str:
    # Workflow expressions compare against lowercase booleans.
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def emit_result(name: str, value: Any, *, sink: Optional[ResultSink] = None) -> None:
    rendered = _render(value)
    if "=" in name or "\n" in name:
        raise InvalidResult(f"invalid output name: {name!r}")
    if "\n" in rendered or rendered.startswith("<<"):
        raise InvalidResult(f"invalid value for output {name!r}")
    if sink is None:
        sink = default_sink()
    sink.write(name, rendered)


def _escape_command_data(message: str) -> str:
    return message.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


def annotate_error(message: str) -> None:
    print(f"::error::{_escape_command_data(message)}", file=sys.stdout, flush=True)


def annotate_warning(message: str) -> None:
    print(f"::warning::{_escape_command_data(message)}", file=sys.stdout, flush=True)
