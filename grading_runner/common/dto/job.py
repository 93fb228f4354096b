from datetime import datetime
from typing import Optional, List, Any, Dict

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator

from grading_runner.common.config.constants import (
    DEFAULT_JOB_ID,
    DEFAULT_REVISION,
    DEFAULT_TIMEOUT_SECONDS,
    ExitCode,
    JobStatus,
)
from grading_runner.common.dto.base import WireModel, serialize_timestamp
from grading_runner.common.dto.code_file import CodeFile
from grading_runner.common.dto.execution_log import ExecutionLogEntry
from grading_runner.common.dto.test_result import TestCaseResult


CODE_FIELDS = {"extracted_code", "code_files"}


class GradingJob(BaseModel):
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    job_id: str = Field(default=DEFAULT_JOB_ID)
    repo_url: Optional[str] = None
    revision: str = Field(default=DEFAULT_REVISION)
    timeout_seconds: int = Field(default=DEFAULT_TIMEOUT_SECONDS, gt=0)

    @field_validator("revision")
    @classmethod
    def default_revision(cls, v: str) -> str:
        return v or DEFAULT_REVISION

    @property
    def wants_specific_revision(self) -> bool:
        return self.revision != DEFAULT_REVISION

    @property
    def numeric_job_id(self) -> Optional[int]:
        try:
            return int(self.job_id)
        except (TypeError, ValueError):
            return None


class JobResult(WireModel):
    grading_job_id: int
    status: JobStatus
    started_at: datetime
    completed_at: datetime
    test_results: List[TestCaseResult] = Field(default_factory=list)
    compilation_output: str = ""
    error_message: Optional[str] = None
    exit_code: int = ExitCode.SUCCESS
    execution_logs: List[ExecutionLogEntry] = Field(default_factory=list)
    extracted_code: Optional[str] = None
    code_files: List[CodeFile] = Field(default_factory=list)

    @field_serializer("started_at", "completed_at")
    def _serialize_timestamp(self, value: datetime) -> str:
        return serialize_timestamp(value)

    def to_document(self, include_code: bool = False) -> Dict[str, Any]:
        exclude = None if include_code else CODE_FIELDS
        return self.to_wire(exclude=exclude)
