from pathlib import Path

from grading_runner.builder.command_runner import CommandRunner
from grading_runner.common.config.logging_config import get_logger
from grading_runner.common.dto.job import GradingJob
from grading_runner.common.exceptions.job_exceptions import (
    AcquisitionError,
    AcquisitionTimeout,
    ConfigError,
    RevisionNotFound,
)
from grading_runner.common.utils.file_utils import ensure_directory, remove_directory


logger = get_logger(__name__)


class RepositoryAcquirer:
    def __init__(self, runner: CommandRunner):
        self._runner = runner

    async def acquire(self, job: GradingJob, repo_dir: Path) -> Path:
        if not job.repo_url:
            raise ConfigError("Repository URL is required", field_name="repo_url")

        remove_directory(repo_dir)
        ensure_directory(repo_dir.parent)

        clone = await self._runner.run(
            ["git", "clone", job.repo_url, str(repo_dir)],
            cwd=repo_dir.parent,
            timeout=job.timeout_seconds,
        )

        message = f"Failed to clone repository within {job.timeout_seconds} seconds"
        if clone.timed_out:
            raise AcquisitionTimeout(
                message,
                repo_url=job.repo_url,
                timeout_seconds=job.timeout_seconds,
                output=clone.output,
            )
        if not clone.succeeded:
            raise AcquisitionError(message, repo_url=job.repo_url, output=clone.output)

        if job.wants_specific_revision:
            await self._checkout(job, repo_dir)

        logger.debug(f"Working tree ready at {repo_dir}")
        return repo_dir

    async def _checkout(self, job: GradingJob, repo_dir: Path) -> None:
        checkout = await self._runner.run(
            ["git", "checkout", job.revision],
            cwd=repo_dir,
            timeout=job.timeout_seconds,
        )
        if not checkout.succeeded:
            raise RevisionNotFound(
                f"Failed to checkout commit: {job.revision}",
                revision=job.revision,
                repo_url=job.repo_url,
                output=checkout.output,
            )
