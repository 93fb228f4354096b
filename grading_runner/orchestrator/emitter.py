import asyncio
import json
import sys
from contextlib import asynccontextmanager
from typing import Optional, TextIO, AsyncIterator

from grading_runner.builder.context import JobContext
from grading_runner.common.config.constants import (
    SUMMARY_FOOTER,
    SUMMARY_HEADER,
    ExitCode,
    LogEntryType,
    OutputFormat,
    PipelineState,
)
from grading_runner.common.config.logging_config import get_logger, flush_logging
from grading_runner.common.dto.job import JobResult
from grading_runner.common.dto.test_result import TestRunSummary
from grading_runner.common.exceptions.base_exceptions import (
    AlreadyEmittedError,
    JobFailedException,
)
from grading_runner.common.exceptions.job_exceptions import JobInterrupted
from grading_runner.common.utils.time_utils import to_iso_format, utc_now


logger = get_logger(__name__)


class ResultEmitter:
    def __init__(
        self,
        stream: Optional[TextIO] = None,
        output_format: OutputFormat = OutputFormat.JSON,
        include_code: bool = False,
    ):
        self._stream = stream
        self._output_format = output_format
        self._include_code = include_code
        self._interrupt_signal: Optional[str] = None

    @property
    def stream(self) -> TextIO:
        return self._stream or sys.stdout

    def note_interrupt(self, signal_name: Optional[str]) -> None:
        self._interrupt_signal = signal_name

    @asynccontextmanager
    async def emission_scope(self, context: JobContext) -> AsyncIterator[JobContext]:
        try:
            yield context
        except JobFailedException as e:
            logger.debug(f"Job {context.job.job_id} failed: {e}")
            self._record_failure(context, e.message, e.exit_code)
        except asyncio.CancelledError:
            interrupted = JobInterrupted(signal_name=self._interrupt_signal)
            logger.debug(f"Job {context.job.job_id} cancelled: {interrupted}")
            self._record_failure(context, interrupted.message, interrupted.exit_code)
        except Exception as e:
            logger.exception(f"Unexpected error in job {context.job.job_id}: {e}")
            self._record_failure(context, f"Unexpected error: {e}", ExitCode.FAILURE)
        finally:
            self.emit(context)

    def emit(self, context: JobContext) -> JobResult:
        if context.result is not None:
            raise AlreadyEmittedError(context.job.job_id)

        context.completed_at = context.completed_at or utc_now()
        if context.state == PipelineState.TESTED:
            context.advance(PipelineState.EMITTED)

        self._log_summary(context)
        result = context.build_result()
        context.result = result

        flush_logging()
        self._write(result)
        return result

    def render(self, result: JobResult) -> str:
        document = result.to_document(include_code=self._include_code)
        if self._output_format == OutputFormat.JSON_PRETTY:
            return json.dumps(document, indent=2, ensure_ascii=False)
        return json.dumps(document, ensure_ascii=False)

    def _write(self, result: JobResult) -> None:
        stream = self.stream
        stream.write(self.render(result))
        stream.write("\n")
        stream.flush()

    def _record_failure(self, context: JobContext, message: str, exit_code: int) -> None:
        if context.state == PipelineState.FAILED:
            return
        context.fail(message, exit_code)

    def _log_summary(self, context: JobContext) -> None:
        job = context.job
        summary = TestRunSummary(results=context.test_results)

        context.info(SUMMARY_HEADER)
        context.info(f"Grading Job ID: {job.job_id}")
        context.info(f"Status: {context.status.value}")
        context.info(f"Repository: {job.repo_url or ''}")
        context.info(f"Commit: {job.revision}")
        context.info(f"Started: {to_iso_format(context.started_at)}")
        context.info(f"Completed: {to_iso_format(context.completed_at)}")

        context.info(f"Total tests executed: {summary.total}")
        if summary.total:
            context.info(f"Tests passed: {summary.passed_count}")
            context.info(f"Tests failed: {summary.failed_count}")
            for test_result in summary.results:
                context.log(LogEntryType.TEST_RESULT, test_result.summary_line())

        if context.compilation_output:
            context.log(LogEntryType.COMPILATION, "Compilation output:")
            context.log(LogEntryType.COMPILATION, context.compilation_output)

        if self._include_code:
            context.info(f"Code files extracted: {len(context.code_files)}")
            for code_file in context.code_files:
                context.log(LogEntryType.CODE_FILE, f"File: {code_file.file_path} ({code_file.size} bytes)")

        if context.error_message:
            context.error(f"Error message: {context.error_message}")

        context.info(SUMMARY_FOOTER)
