from __future__ import annotations

from typing import Optional


class ServoCiError(RuntimeError):
    pass


class InvalidResult(ServoCiError):
    """Name or value cannot be written to the workflow output file."""


class ResultSinkUnavailable(ServoCiError):
    pass


class TransportFailure(ServoCiError):
    def __init__(self, message: str, *, url: str = "", status: Optional[int] = None) -> None:
        super().__init__(message)
        self.url = url
        self.status = status


class JobNotFound(ServoCiError):
    def __init__(self, unique_id: str, run_id: str) -> None:
        super().__init__(f"no job in run {run_id} has [{unique_id}] in its name")
        self.unique_id = unique_id
        self.run_id = run_id


class CancellationFailure(ServoCiError):
    def __init__(self, message: str, *, status: Optional[int] = None) -> None:
        super().__init__(message)
        self.status = status
