# Make src/servo_ci a Python package
from .actions import GithubOutputFile, ResultSink, emit_result
from .errors import CancellationFailure, InvalidResult, JobNotFound, ServoCiError, TransportFailure
from .ids import generate_identifier
from .selector import RunnerDecision, SelectionInput, select
from .watchdog import TimeoutInput, watch

__all__ = [
    "GithubOutputFile",
    "ResultSink",
    "emit_result",
    "generate_identifier",
    "ServoCiError",
    "InvalidResult",
    "TransportFailure",
    "JobNotFound",
    "CancellationFailure",
    "RunnerDecision",
    "SelectionInput",
    "select",
    "TimeoutInput",
    "watch",
]
