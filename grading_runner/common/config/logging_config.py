import logging
import logging.config
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional, Dict, Any

from pythonjsonlogger import json as jsonlogger


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    def add_fields(
        self,
        log_record: Dict[str, Any],
        record: logging.LogRecord,
        message_dict: Dict[str, Any]
    ) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["logger"] = record.name
        log_record["module"] = record.module
        log_record["function"] = record.funcName
        log_record["line"] = record.lineno

        if hasattr(record, "grading_job_id"):
            log_record["grading_job_id"] = record.grading_job_id
        if hasattr(record, "entry_type"):
            log_record["entry_type"] = record.entry_type

        if record.exc_info:
            log_record["exception"] = self.formatException(record.exc_info)


def get_logging_config(
    log_level: str = "INFO",
    log_file: Optional[str] = None,
    json_format: bool = True,
    log_dir: Optional[str] = None
) -> Dict[str, Any]:
    handlers_config = {
        "console": {
            "class": "logging.StreamHandler",
            "level": log_level,
            "stream": "ext://sys.stderr",
        }
    }

    if json_format:
        handlers_config["console"]["formatter"] = "json"
    else:
        handlers_config["console"]["formatter"] = "standard"

    if log_file or log_dir:
        if log_dir:
            log_path = Path(log_dir)
            log_path.mkdir(parents=True, exist_ok=True)
            log_file = str(log_path / "grading_runner.log")

        handlers_config["file"] = {
            "class": "logging.handlers.RotatingFileHandler",
            "level": log_level,
            "filename": log_file,
            "maxBytes": 10485760,
            "backupCount": 5,
            "formatter": "json" if json_format else "standard",
        }

    handler_names = list(handlers_config.keys())

    config = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "standard": {
                "format": "[%(asctime)s] [%(levelname)s] %(message)s",
                "datefmt": "%Y-%m-%dT%H:%M:%S%z",
            },
            "json": {
                "()": CustomJsonFormatter,
                "format": "%(timestamp)s %(level)s %(name)s %(message)s",
            },
        },
        "handlers": handlers_config,
        "loggers": {
            "": {
                "handlers": handler_names,
                "level": log_level,
                "propagate": True,
            },
            "grading_runner": {
                "handlers": handler_names,
                "level": log_level,
                "propagate": False,
            },
            "asyncio": {
                "handlers": handler_names,
                "level": "WARNING",
                "propagate": False,
            },
        },
    }

    return config


def setup_logging(
    log_level: str = "INFO",
    log_file: Optional[str] = None,
    json_format: bool = True,
    log_dir: Optional[str] = None
) -> None:
    config = get_logging_config(
        log_level=log_level,
        log_file=log_file,
        json_format=json_format,
        log_dir=log_dir
    )
    logging.config.dictConfig(config)


def flush_logging() -> None:
    for handler in logging.getLogger("grading_runner").handlers:
        handler.flush()
    for handler in logging.getLogger().handlers:
        handler.flush()


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


class LoggerAdapter(logging.LoggerAdapter):
    def __init__(
        self,
        logger: logging.Logger,
        extra: Optional[Dict[str, Any]] = None
    ):
        super().__init__(logger, extra or {})

    def process(
        self,
        msg: str,
        kwargs: Dict[str, Any]
    ) -> tuple:
        extra = dict(kwargs.get("extra", {}))
        extra.update(self.extra)
        kwargs["extra"] = extra
        return msg, kwargs


def get_job_logger(grading_job_id: str) -> LoggerAdapter:
    logger = get_logger("grading_runner.job")
    return LoggerAdapter(logger, {"grading_job_id": grading_job_id})
