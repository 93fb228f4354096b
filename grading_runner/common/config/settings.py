from functools import lru_cache
from pathlib import Path
from typing import Optional, TYPE_CHECKING

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field, field_validator

from grading_runner.common.config.constants import (
    DEFAULT_JOB_ID,
    DEFAULT_REVISION,
    DEFAULT_TIMEOUT_SECONDS,
    MAX_CODE_FILE_CHARS,
    MAX_CODE_FILES,
    UNIT_TIMEOUT_SECONDS,
    OutputFormat,
)

if TYPE_CHECKING:
    from grading_runner.common.dto.job import GradingJob


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    grading_job_id: str = Field(
        default=DEFAULT_JOB_ID,
        description="Identifier of the grading job being executed"
    )
    repo_url: Optional[str] = Field(
        default=None,
        description="Location of the repository holding the submission"
    )
    git_commit_hash: str = Field(
        default=DEFAULT_REVISION,
        description="Revision to check out after cloning"
    )
    timeout_seconds: int = Field(default=DEFAULT_TIMEOUT_SECONDS, gt=0)
    output_format: OutputFormat = Field(default=OutputFormat.JSON)

    workspace_dir: Path = Field(default=Path("/workspace"))
    unit_timeout_seconds: int = Field(default=UNIT_TIMEOUT_SECONDS, gt=0)

    include_code: bool = Field(default=False)
    max_code_files: int = Field(default=MAX_CODE_FILES, ge=1)
    max_code_file_chars: int = Field(default=MAX_CODE_FILE_CHARS, ge=1)

    log_level: str = Field(default="INFO", description="Logging level")
    log_json: bool = Field(default=True)
    log_dir: Optional[str] = Field(default=None)

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper_v = v.upper()
        if upper_v not in valid_levels:
            raise ValueError(f"Invalid log level: {v}. Must be one of {valid_levels}")
        return upper_v

    @field_validator("repo_url", mode="before")
    @classmethod
    def blank_repo_url_is_unset(cls, v: Optional[str]) -> Optional[str]:
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @property
    def repo_dir(self) -> Path:
        return self.workspace_dir / "repo"

    @property
    def classes_dir(self) -> Path:
        return self.workspace_dir / "classes"

    def to_grading_job(self) -> "GradingJob":
        from grading_runner.common.dto.job import GradingJob

        return GradingJob(
            job_id=self.grading_job_id,
            repo_url=self.repo_url,
            revision=self.git_commit_hash or DEFAULT_REVISION,
            timeout_seconds=self.timeout_seconds,
        )


@lru_cache()
def get_settings() -> Settings:
    return Settings()
