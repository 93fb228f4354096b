import asyncio
import os
import signal
import sys
from typing import Optional, Tuple

from pydantic import ValidationError

from grading_runner.common.config.constants import DEFAULT_JOB_ID
from grading_runner.common.config.logging_config import setup_logging, get_logger
from grading_runner.common.config.settings import Settings, get_settings
from grading_runner.common.dto.job import JobResult
from grading_runner.common.exceptions.job_exceptions import ConfigError
from grading_runner.orchestrator.pipeline import GradingPipeline


logger = get_logger(__name__)

HANDLED_SIGNALS = (signal.SIGINT, signal.SIGTERM)


def load_settings() -> Tuple[Settings, Optional[ConfigError]]:
    try:
        return get_settings(), None
    except ValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
            for error in e.errors()
        )
        fallback = Settings.model_construct(
            grading_job_id=os.environ.get("GRADING_JOB_ID", DEFAULT_JOB_ID),
        )
        return fallback, ConfigError(f"Invalid configuration: {problems}", cause=e)


def install_signal_handlers(pipeline: GradingPipeline) -> None:
    loop = asyncio.get_running_loop()
    for sig in HANDLED_SIGNALS:
        try:
            loop.add_signal_handler(sig, pipeline.interrupt, sig.name)
        except NotImplementedError:
            logger.warning(f"Signal handler for {sig.name} not supported on this platform")


async def run_job(settings: Settings, config_error: Optional[ConfigError] = None) -> JobResult:
    pipeline = GradingPipeline(settings)
    install_signal_handlers(pipeline)
    return await pipeline.run(settings.to_grading_job(), config_error=config_error)


def main() -> None:
    settings, config_error = load_settings()
    setup_logging(
        log_level=settings.log_level,
        json_format=settings.log_json,
        log_dir=settings.log_dir,
    )

    if config_error is not None:
        logger.error(f"Configuration error: {config_error.message}")

    result = asyncio.run(run_job(settings, config_error))
    sys.exit(result.exit_code)


if __name__ == "__main__":
    main()
