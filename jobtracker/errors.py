"""
Error types raised by the job store and the export encoder.

Every error is recoverable at the boundary: callers catch JobTrackerError,
show ``message`` to the user and answer with ``status``.
"""

from typing import Any, List, Optional


class JobTrackerError(Exception):
    """Base class for all job tracker failures."""

    status = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(JobTrackerError):
    """Raised when input to create (or an export request) is invalid."""

    def __init__(self, errors: List[str]):
        self.errors = list(errors)
        super().__init__("; ".join(self.errors) or "Invalid input")


class NotFoundError(JobTrackerError):
    """Raised when an operation references a job id that does not exist."""

    status = 404

    def __init__(self, job_id: Any):
        self.job_id = job_id
        super().__init__(f"Job not found: {job_id}")


class UnsupportedFormatError(JobTrackerError):
    """Raised when an export is requested in a format other than json or csv."""

    def __init__(self, fmt: Optional[Any]):
        self.format = fmt
        super().__init__(f"Invalid format: {fmt}. Valid formats: json, csv")
