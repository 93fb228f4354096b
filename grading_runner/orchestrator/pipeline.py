import asyncio
from typing import Optional

from grading_runner.builder.build_executor import BuildExecutor
from grading_runner.builder.code_extractor import CodeExtractor
from grading_runner.builder.command_runner import CommandRunner
from grading_runner.builder.context import JobContext
from grading_runner.builder.report_parser import JUnitReportParser
from grading_runner.builder.repository import RepositoryAcquirer
from grading_runner.builder.test_runner import TestExecutor
from grading_runner.builder.toolchain_detector import ToolchainDetector
from grading_runner.common.config.constants import PipelineState, ToolchainVariant
from grading_runner.common.config.logging_config import get_logger
from grading_runner.common.config.settings import Settings
from grading_runner.common.dto.job import GradingJob, JobResult
from grading_runner.common.exceptions.job_exceptions import ConfigError, UnsupportedToolchain
from grading_runner.common.utils.time_utils import Timer
from grading_runner.orchestrator.emitter import ResultEmitter


logger = get_logger(__name__)


class GradingPipeline:
    def __init__(
        self,
        settings: Settings,
        runner: Optional[CommandRunner] = None,
        acquirer: Optional[RepositoryAcquirer] = None,
        detector: Optional[ToolchainDetector] = None,
        build_executor: Optional[BuildExecutor] = None,
        test_executor: Optional[TestExecutor] = None,
        code_extractor: Optional[CodeExtractor] = None,
        emitter: Optional[ResultEmitter] = None,
    ):
        self._settings = settings
        runner = runner or CommandRunner()
        self._acquirer = acquirer or RepositoryAcquirer(runner)
        self._detector = detector or ToolchainDetector()
        self._build_executor = build_executor or BuildExecutor(runner)
        self._test_executor = test_executor or TestExecutor(
            runner,
            JUnitReportParser(),
            unit_timeout_seconds=settings.unit_timeout_seconds,
        )
        if code_extractor is None and settings.include_code:
            code_extractor = CodeExtractor(
                max_files=settings.max_code_files,
                max_file_chars=settings.max_code_file_chars,
            )
        self._code_extractor = code_extractor
        self._emitter = emitter or ResultEmitter(
            output_format=settings.output_format,
            include_code=settings.include_code,
        )
        self._task: Optional[asyncio.Task] = None
        self._context: Optional[JobContext] = None

    @property
    def context(self) -> Optional[JobContext]:
        return self._context

    async def run(
        self,
        job: GradingJob,
        config_error: Optional[ConfigError] = None,
    ) -> JobResult:
        context = JobContext(
            job,
            repo_dir=self._settings.repo_dir,
            classes_dir=self._settings.classes_dir,
        )
        self._context = context
        self._task = asyncio.current_task()

        timer = Timer().start()
        try:
            async with self._emitter.emission_scope(context):
                if config_error is not None:
                    raise config_error
                await self._execute(context)
        finally:
            self._task = None

        logger.info(
            f"Job {job.job_id} finished with exit code {context.exit_code} "
            f"in {timer.elapsed_formatted}"
        )
        return context.result

    def interrupt(self, signal_name: Optional[str] = None) -> bool:
        context = self._context
        if self._task is None or context is None or context.result is not None:
            logger.info(f"Ignoring {signal_name or 'interrupt'}: no job in progress")
            return False

        logger.warning(f"Received {signal_name or 'interrupt'}, stopping job {context.job.job_id}")
        self._emitter.note_interrupt(signal_name)
        self._task.cancel()
        return True

    async def _execute(self, context: JobContext) -> None:
        job = context.job
        context.info(f"Starting test runner for grading job: {job.job_id}")
        context.info(f"Repository: {job.repo_url or ''}")
        context.info(f"Commit: {job.revision}")
        if job.numeric_job_id is None:
            context.warning(f"Grading job id '{job.job_id}' is not numeric, reporting it as 0")

        await self._acquire(context)

        if self._code_extractor is not None:
            self._code_extractor.apply(context)

        self._detect(context)

        await self._build_executor.compile(context)
        context.advance(PipelineState.BUILT)

        await self._test_executor.run(context)
        context.advance(PipelineState.TESTED)

        context.info("Test execution completed successfully")

    async def _acquire(self, context: JobContext) -> None:
        job = context.job
        if job.repo_url:
            context.info(f"Cloning repository: {job.repo_url}")
        await self._acquirer.acquire(job, context.repo_dir)
        context.info("Repository cloned successfully")
        if job.wants_specific_revision:
            context.info(f"Checked out commit: {job.revision}")
        context.advance(PipelineState.ACQUIRED)

    def _detect(self, context: JobContext) -> None:
        try:
            variant = self._detector.detect(context.repo_dir)
        except UnsupportedToolchain:
            context.variant = ToolchainVariant.UNSUPPORTED
            context.info(f"Detected build system: {ToolchainVariant.UNSUPPORTED.value}")
            raise
        context.variant = variant
        context.info(f"Detected build system: {variant.value}")
        context.advance(PipelineState.DETECTED)
