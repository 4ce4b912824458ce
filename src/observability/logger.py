"""
Structured JSON logging for the record materializer

Driver and executor code log through the same helpers. Partition-level
events go through a PartitionLogger so every line carries the partition
index and row format of the task that emitted it.
"""
import logging
import os
import sys
import time
from typing import Any, MutableMapping

from pythonjsonlogger import jsonlogger

DEFAULT_LOGGER_NAME = "record-materializer"

JSON_FORMAT = "%(timestamp)s %(level)s %(logger)s %(module)s %(function)s %(message)s"
TEXT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(module)s:%(funcName)s - %(message)s"


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """
    JSON formatter adding timestamp, level, logger, call site and process info
    """

    def add_fields(self, log_record: dict, record: logging.LogRecord, message_dict: dict) -> None:
        super().add_fields(log_record, record, message_dict)

        log_record["timestamp"] = log_record.get("timestamp") or self.formatTime(record, self.datefmt)
        log_record["level"] = (log_record.get("level") or record.levelname).upper()
        log_record["logger"] = record.name
        log_record["module"] = record.module
        log_record["function"] = record.funcName

        # Executors run in separate Python workers
        log_record["process_id"] = record.process
        log_record["thread_id"] = record.thread


def _build_formatter(format_type: str) -> logging.Formatter:
    if format_type == "json":
        return CustomJsonFormatter(fmt=JSON_FORMAT, datefmt="%Y-%m-%dT%H:%M:%S")
    return logging.Formatter(fmt=TEXT_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")


def setup_logger(
    name: str = DEFAULT_LOGGER_NAME,
    level: str | None = None,
    format_type: str | None = None,
) -> logging.Logger:
    """
    Setup and configure a logger

    Args:
        name: Logger name
        level: Log level, defaults to LOG_LEVEL or INFO
        format_type: "json" or "text", defaults to LOG_FORMAT or json

    Returns:
        Configured logger instance
    """
    level_name = (level or os.getenv("LOG_LEVEL", "INFO")).upper()
    log_level = logging.getLevelName(level_name)
    if not isinstance(log_level, int):
        log_level = logging.INFO

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(log_level)
    handler.setFormatter(_build_formatter(format_type or os.getenv("LOG_FORMAT", "json")))

    logger = logging.getLogger(name)
    logger.setLevel(log_level)
    logger.handlers.clear()
    logger.addHandler(handler)
    logger.propagate = False
    return logger


def get_logger(name: str = DEFAULT_LOGGER_NAME) -> logging.Logger:
    """Get a logger instance, configuring it on first use"""
    logger = logging.getLogger(name)
    return logger if logger.handlers else setup_logger(name)


class PartitionLogger(logging.LoggerAdapter):
    """
    Logger adapter stamping partition context onto every record

    Usage:
        log = PartitionLogger(logger, partition_id=3, row_format="columnar")
        log.info("Partition ready", extra={"fields": 4})
    """

    def __init__(self, logger: logging.Logger, partition_id: int, row_format: str):
        super().__init__(logger, {"partition_id": partition_id, "row_format": row_format})

    def process(self, msg: Any, kwargs: MutableMapping[str, Any]) -> tuple[Any, MutableMapping[str, Any]]:
        kwargs["extra"] = {**self.extra, **kwargs.get("extra", {})}
        return msg, kwargs


class log_operation:
    """
    Context manager logging the start, end and duration of an operation

    Exceptions are logged with their type and re-raised.

    Usage:
        with log_operation("Planning record materialization", logger=logger, row_format="columnar"):
            ...
    """

    def __init__(self, operation_name: str, logger: logging.Logger | None = None, **extra_fields):
        self.operation_name = operation_name
        self.logger = logger or get_logger()
        self.extra_fields = extra_fields
        self.start_time: float | None = None

    def _fields(self, **fields) -> dict:
        return {"operation": self.operation_name, **fields, **self.extra_fields}

    def __enter__(self):
        self.start_time = time.perf_counter()
        self.logger.info(f"Starting: {self.operation_name}", extra=self._fields())
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        duration = round(time.perf_counter() - self.start_time, 3)

        if exc_type is None:
            self.logger.info(
                f"Completed: {self.operation_name}",
                extra=self._fields(duration_seconds=duration, status="success"),
            )
            return False

        self.logger.error(
            f"Failed: {self.operation_name}",
            extra=self._fields(
                duration_seconds=duration,
                status="error",
                error_type=exc_type.__name__,
                error_message=str(exc_val),
            ),
            exc_info=(exc_type, exc_val, exc_tb),
        )
        return False
