import logging
from datetime import datetime
from pathlib import Path
from typing import Optional, List, Dict, FrozenSet

from grading_runner.common.config.constants import (
    ExitCode,
    JobStatus,
    LogEntryType,
    PipelineState,
    ToolchainVariant,
)
from grading_runner.common.config.logging_config import get_job_logger
from grading_runner.common.dto.code_file import CodeFile
from grading_runner.common.dto.compilation import CompilationRecord
from grading_runner.common.dto.execution_log import ExecutionLogEntry
from grading_runner.common.dto.job import GradingJob, JobResult
from grading_runner.common.dto.test_result import TestCaseResult
from grading_runner.common.exceptions.base_exceptions import InvalidStateTransition
from grading_runner.common.utils.time_utils import utc_now


_TERMINAL_STATES: FrozenSet[PipelineState] = frozenset({PipelineState.EMITTED, PipelineState.FAILED})

_TRANSITIONS: Dict[PipelineState, FrozenSet[PipelineState]] = {
    PipelineState.INIT: frozenset({PipelineState.ACQUIRED, PipelineState.FAILED}),
    PipelineState.ACQUIRED: frozenset({PipelineState.DETECTED, PipelineState.FAILED}),
    PipelineState.DETECTED: frozenset({PipelineState.BUILT, PipelineState.FAILED}),
    PipelineState.BUILT: frozenset({PipelineState.TESTED, PipelineState.FAILED}),
    PipelineState.TESTED: frozenset({PipelineState.EMITTED, PipelineState.FAILED}),
    PipelineState.EMITTED: frozenset(),
    PipelineState.FAILED: frozenset(),
}

_LOG_LEVELS: Dict[LogEntryType, int] = {
    LogEntryType.ERROR: logging.ERROR,
    LogEntryType.WARNING: logging.WARNING,
    LogEntryType.TEST_FAILED: logging.WARNING,
}


class JobContext:
    def __init__(
        self,
        job: GradingJob,
        repo_dir: Path,
        classes_dir: Path,
    ):
        self.job = job
        self.repo_dir = repo_dir
        self.classes_dir = classes_dir
        self.started_at: datetime = utc_now()
        self.completed_at: Optional[datetime] = None
        self.state = PipelineState.INIT
        self.variant: Optional[ToolchainVariant] = None
        self.compilation: Optional[CompilationRecord] = None
        self.compilation_output = ""
        self.test_results: List[TestCaseResult] = []
        self.error_message: Optional[str] = None
        self.exit_code: int = ExitCode.SUCCESS
        self.extracted_code: Optional[str] = None
        self.code_files: List[CodeFile] = []
        self.result: Optional[JobResult] = None
        self._logs: List[ExecutionLogEntry] = []
        self._logger = get_job_logger(job.job_id)

    @property
    def logs(self) -> List[ExecutionLogEntry]:
        return list(self._logs)

    @property
    def status(self) -> JobStatus:
        return JobStatus.COMPLETED if self.exit_code == ExitCode.SUCCESS else JobStatus.FAILED

    @property
    def is_terminal(self) -> bool:
        return self.state in _TERMINAL_STATES

    def log(self, entry_type: LogEntryType, message: str) -> ExecutionLogEntry:
        entry = ExecutionLogEntry(type=entry_type, message=message)
        self._logs.append(entry)
        self._logger.log(
            _LOG_LEVELS.get(entry_type, logging.INFO),
            message,
            extra={"entry_type": entry_type.value},
        )
        return entry

    def info(self, message: str) -> ExecutionLogEntry:
        return self.log(LogEntryType.INFO, message)

    def warning(self, message: str) -> ExecutionLogEntry:
        return self.log(LogEntryType.WARNING, message)

    def error(self, message: str) -> ExecutionLogEntry:
        return self.log(LogEntryType.ERROR, message)

    def advance(self, state: PipelineState) -> None:
        if state not in _TRANSITIONS[self.state]:
            raise InvalidStateTransition(self.state.value, state.value)
        self.state = state

    def record_compilation(self, record: CompilationRecord) -> None:
        self.compilation = record
        self.compilation_output = record.transcript

    def fail(self, message: str, exit_code: int = ExitCode.FAILURE) -> None:
        if exit_code == ExitCode.SUCCESS:
            raise ValueError("A failed job needs a non-zero exit code")
        self.error(message)
        self.error_message = message
        self.exit_code = int(exit_code)
        self.advance(PipelineState.FAILED)

    def build_result(self) -> JobResult:
        completed_at = self.completed_at or utc_now()
        grading_job_id = self.job.numeric_job_id
        return JobResult(
            grading_job_id=grading_job_id if grading_job_id is not None else 0,
            status=self.status,
            started_at=self.started_at,
            completed_at=completed_at,
            test_results=list(self.test_results),
            compilation_output=self.compilation_output,
            error_message=self.error_message,
            exit_code=self.exit_code,
            execution_logs=self.logs,
            extracted_code=self.extracted_code,
            code_files=list(self.code_files),
        )
