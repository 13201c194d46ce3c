"""Logging for ingestion passes.

Everything logs through module loggers under the ``event_catalog`` namespace.
setup_logging() installs one handler set on that logger:
- text lines for terminals, or one JSON object per record for log shippers
- stderr and/or a log file
- pass context (run_id, source_id, stage) attached with with_context()
"""

from __future__ import annotations

import json
import logging
import sys
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

ROOT_LOGGER_NAME = "event_catalog"

# Record attribute -> short label used in text output
CONTEXT_FIELDS: dict[str, str] = {
    "run_id": "run",
    "source_id": "source",
    "stage": "stage",
}

_HANDLER_MARKER = "_event_catalog_handler"


def _record_context(record: logging.LogRecord) -> dict[str, Any]:
    return {
        name: getattr(record, name)
        for name in CONTEXT_FIELDS
        if getattr(record, name, None)
    }


class JsonFormatter(logging.Formatter):
    """One JSON object per record, with pass context and optional payload."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "time": datetime.fromtimestamp(record.created, UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            **_record_context(record),
        }
        # stats dumps and other structured data ride along as "payload"
        payload = getattr(record, "payload", None)
        if isinstance(payload, dict):
            entry["payload"] = payload
        if record.exc_info:
            entry["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=False, default=str)


class TextFormatter(logging.Formatter):
    """``LEVEL logger [run=.. stage=..] message`` lines."""

    def format(self, record: logging.LogRecord) -> str:
        context = _record_context(record)
        line = f"{record.levelname} {record.name}"
        if context:
            tags = " ".join(f"{CONTEXT_FIELDS[k]}={v}" for k, v in context.items())
            line += f" [{tags}]"
        line += f" {record.getMessage()}"
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


@dataclass(frozen=True)
class LoggingOptions:
    """Where and how the package logs."""

    level: str = "INFO"
    json_logs: bool = False
    enable_console: bool = True
    log_file: Path | None = None


def setup_logging(options: LoggingOptions | None = None) -> logging.Logger:
    """
    Configure the ``event_catalog`` logger.

    Calling it again replaces the handlers installed by the previous call, so
    the CLI can reconfigure after reading its flags. Records do not propagate
    to the root logger.
    """
    options = options or LoggingOptions()
    package_logger = logging.getLogger(ROOT_LOGGER_NAME)
    level = logging.getLevelName(options.level.upper())
    package_logger.setLevel(level if isinstance(level, int) else logging.INFO)
    package_logger.propagate = False

    for handler in list(package_logger.handlers):
        if getattr(handler, _HANDLER_MARKER, False):
            package_logger.removeHandler(handler)
            handler.close()

    handlers: list[logging.Handler] = []
    if options.enable_console:
        handlers.append(logging.StreamHandler(sys.stderr))
    if options.log_file is not None:
        options.log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(options.log_file, encoding="utf-8"))

    formatter = JsonFormatter() if options.json_logs else TextFormatter()
    for handler in handlers:
        handler.setFormatter(formatter)
        setattr(handler, _HANDLER_MARKER, True)
        package_logger.addHandler(handler)

    return package_logger


class ContextAdapter(logging.LoggerAdapter):
    """LoggerAdapter whose context is merged into each call's ``extra``."""

    def process(self, msg: str, kwargs: dict[str, Any]) -> tuple[str, dict[str, Any]]:
        kwargs["extra"] = {**self.extra, **kwargs.get("extra", {})}
        return msg, kwargs


def with_context(
    logger: logging.Logger | logging.LoggerAdapter,
    *,
    run_id: str | None = None,
    source_id: str | None = None,
    stage: str | None = None,
) -> ContextAdapter:
    """
    Wrap a logger so its records carry pass context.

    Wrapping an existing adapter keeps its context and adds to it, so the
    orchestrator can derive a per-stage logger from its per-run logger.
    """
    context: dict[str, Any] = {}
    if isinstance(logger, logging.LoggerAdapter):
        context.update(logger.extra or {})
        logger = logger.logger
    new_values = {"run_id": run_id, "source_id": source_id, "stage": stage}
    context.update({k: v for k, v in new_values.items() if v})
    return ContextAdapter(logger, context)
