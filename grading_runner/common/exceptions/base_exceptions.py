from enum import Enum
from typing import Optional, Dict, Any
from datetime import datetime, timezone

from grading_runner.common.config.constants import ExitCode


class ErrorCode(str, Enum):
    UNKNOWN = "E0000"

    CONFIGURATION_ERROR = "E1000"
    MISSING_REQUIRED_FIELD = "E1001"

    ACQUISITION_FAILED = "E2000"
    ACQUISITION_TIMEOUT = "E2001"
    REVISION_NOT_FOUND = "E2002"

    UNSUPPORTED_TOOLCHAIN = "E3000"

    COMPILATION_FAILED = "E4000"
    NO_SOURCE_FOUND = "E4001"

    REPORT_PARSE_ERROR = "E5000"

    INTERRUPTED = "E6000"

    INVALID_STATE_TRANSITION = "E7000"
    ALREADY_EMITTED = "E7001"


class GraderBaseException(Exception):
    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.UNKNOWN,
        details: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None,
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        self.cause = cause
        self.timestamp = datetime.now(timezone.utc)

    def __str__(self) -> str:
        return f"[{self.error_code.value}] {self.message}"

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"error_code={self.error_code}, "
            f"details={self.details})"
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "error_code": self.error_code.value,
            "message": self.message,
            "details": self.details,
            "timestamp": self.timestamp.isoformat(),
            "exception_type": self.__class__.__name__,
        }


class JobFailedException(GraderBaseException):
    default_exit_code: ExitCode = ExitCode.FAILURE

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.UNKNOWN,
        exit_code: Optional[ExitCode] = None,
        details: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None,
    ):
        super().__init__(message, error_code, details, cause)
        self.exit_code = exit_code if exit_code is not None else self.default_exit_code


class PipelineStateError(GraderBaseException):
    pass


class InvalidStateTransition(PipelineStateError):
    def __init__(self, current: str, requested: str):
        super().__init__(
            message=f"Cannot move pipeline from {current} to {requested}",
            error_code=ErrorCode.INVALID_STATE_TRANSITION,
            details={"current": current, "requested": requested},
        )
        self.current = current
        self.requested = requested


class AlreadyEmittedError(PipelineStateError):
    def __init__(self, grading_job_id: str):
        super().__init__(
            message=f"Result for job {grading_job_id} was already emitted",
            error_code=ErrorCode.ALREADY_EMITTED,
            details={"grading_job_id": grading_job_id},
        )
