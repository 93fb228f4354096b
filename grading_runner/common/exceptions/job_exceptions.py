from typing import Optional, Dict, Any

from grading_runner.common.config.constants import ExitCode
from grading_runner.common.exceptions.base_exceptions import (
    GraderBaseException,
    JobFailedException,
    ErrorCode,
)


class ConfigError(JobFailedException):
    def __init__(
        self,
        message: str,
        field_name: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None,
    ):
        details = details or {}
        if field_name:
            details["field_name"] = field_name
        super().__init__(
            message=message,
            error_code=ErrorCode.MISSING_REQUIRED_FIELD if field_name else ErrorCode.CONFIGURATION_ERROR,
            details=details,
            cause=cause,
        )
        self.field_name = field_name


class AcquisitionError(JobFailedException):
    def __init__(
        self,
        message: str,
        repo_url: Optional[str] = None,
        error_code: ErrorCode = ErrorCode.ACQUISITION_FAILED,
        output: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None,
    ):
        details = details or {}
        if repo_url:
            details["repo_url"] = repo_url
        if output:
            details["output"] = output[-1000:]
        super().__init__(
            message=message,
            error_code=error_code,
            details=details,
            cause=cause,
        )
        self.repo_url = repo_url
        self.output = output


class AcquisitionTimeout(AcquisitionError):
    def __init__(
        self,
        message: str,
        repo_url: Optional[str] = None,
        timeout_seconds: Optional[int] = None,
        output: Optional[str] = None,
    ):
        details: Dict[str, Any] = {}
        if timeout_seconds:
            details["timeout_seconds"] = timeout_seconds
        super().__init__(
            message=message,
            repo_url=repo_url,
            error_code=ErrorCode.ACQUISITION_TIMEOUT,
            output=output,
            details=details,
        )
        self.timeout_seconds = timeout_seconds


class RevisionNotFound(AcquisitionError):
    def __init__(
        self,
        message: str,
        revision: str,
        repo_url: Optional[str] = None,
        output: Optional[str] = None,
    ):
        super().__init__(
            message=message,
            repo_url=repo_url,
            error_code=ErrorCode.REVISION_NOT_FOUND,
            output=output,
            details={"revision": revision},
        )
        self.revision = revision


class UnsupportedToolchain(JobFailedException):
    def __init__(
        self,
        message: str,
        variant: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        details = details or {}
        if variant:
            details["variant"] = variant
        super().__init__(
            message=message,
            error_code=ErrorCode.UNSUPPORTED_TOOLCHAIN,
            details=details,
        )
        self.variant = variant


class CompilationFailed(JobFailedException):
    default_exit_code = ExitCode.COMPILATION_FAILURE

    def __init__(
        self,
        message: str = "Compilation failed",
        variant: Optional[str] = None,
        exit_code_of_command: Optional[int] = None,
        timed_out: bool = False,
        transcript: Optional[str] = None,
        error_code: ErrorCode = ErrorCode.COMPILATION_FAILED,
        details: Optional[Dict[str, Any]] = None,
    ):
        details = details or {}
        if variant:
            details["variant"] = variant
        if exit_code_of_command is not None:
            details["command_exit_code"] = exit_code_of_command
        if timed_out:
            details["timed_out"] = True
        if transcript:
            details["transcript_excerpt"] = transcript[-1000:]
        super().__init__(
            message=message,
            error_code=error_code,
            details=details,
        )
        self.variant = variant
        self.command_exit_code = exit_code_of_command
        self.timed_out = timed_out
        self.transcript = transcript


class NoSourceFound(CompilationFailed):
    def __init__(
        self,
        message: str = "No Java files found in repository",
        search_root: Optional[str] = None,
    ):
        details: Dict[str, Any] = {}
        if search_root:
            details["search_root"] = search_root
        super().__init__(
            message=message,
            error_code=ErrorCode.NO_SOURCE_FOUND,
            details=details,
        )
        self.search_root = search_root


class JobInterrupted(JobFailedException):
    default_exit_code = ExitCode.INTERRUPTED

    def __init__(
        self,
        message: str = "Test runner interrupted",
        signal_name: Optional[str] = None,
    ):
        details: Dict[str, Any] = {}
        if signal_name:
            details["signal"] = signal_name
        super().__init__(
            message=message,
            error_code=ErrorCode.INTERRUPTED,
            details=details,
        )
        self.signal_name = signal_name


class ReportParseError(GraderBaseException):
    def __init__(
        self,
        message: str,
        report_path: Optional[str] = None,
        cause: Optional[Exception] = None,
    ):
        details: Dict[str, Any] = {}
        if report_path:
            details["report_path"] = report_path
        super().__init__(
            message=message,
            error_code=ErrorCode.REPORT_PARSE_ERROR,
            details=details,
            cause=cause,
        )
        self.report_path = report_path
