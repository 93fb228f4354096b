from grading_runner.common.config.settings import Settings, get_settings
from grading_runner.common.config.logging_config import (
    setup_logging,
    get_logger,
    get_job_logger,
    flush_logging,
)
from grading_runner.common.config.constants import (
    JobStatus,
    ExitCode,
    ToolchainVariant,
    LogEntryType,
    PipelineState,
    OutputFormat,
)

__all__ = [
    "Settings",
    "get_settings",
    "setup_logging",
    "get_logger",
    "get_job_logger",
    "flush_logging",
    "JobStatus",
    "ExitCode",
    "ToolchainVariant",
    "LogEntryType",
    "PipelineState",
    "OutputFormat",
]
