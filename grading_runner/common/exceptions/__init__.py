from grading_runner.common.exceptions.base_exceptions import (
    GraderBaseException,
    ErrorCode,
    JobFailedException,
    PipelineStateError,
    InvalidStateTransition,
    AlreadyEmittedError,
)
from grading_runner.common.exceptions.job_exceptions import (
    ConfigError,
    AcquisitionError,
    AcquisitionTimeout,
    RevisionNotFound,
    UnsupportedToolchain,
    CompilationFailed,
    NoSourceFound,
    JobInterrupted,
    ReportParseError,
)

__all__ = [
    "GraderBaseException",
    "ErrorCode",
    "JobFailedException",
    "PipelineStateError",
    "InvalidStateTransition",
    "AlreadyEmittedError",
    "ConfigError",
    "AcquisitionError",
    "AcquisitionTimeout",
    "RevisionNotFound",
    "UnsupportedToolchain",
    "CompilationFailed",
    "NoSourceFound",
    "JobInterrupted",
    "ReportParseError",
]
