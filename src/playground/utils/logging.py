"""Logging for the playground domain.

structlog and the standard library share one processor chain. Records from
Protean, uvicorn and our own loggers are rendered by ``ProcessorFormatter``
per handler: the console gets rich tracebacks in development and JSON in
production, and ``logs/playground.log`` always gets JSON lines so that order
and installation events can be grepped by id.
"""

import logging
import logging.handlers
import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import structlog

_LEVELS_BY_ENV = {
    "production": "INFO",
    "staging": "INFO",
    "dev": "DEBUG",
    "development": "DEBUG",
    "test": "WARNING",
}

_QUIET_LOGGERS = ("uvicorn.access", "asyncio", "sqlalchemy.engine")

_MAX_BYTES = 10 * 1024 * 1024


@dataclass(frozen=True)
class LogSettings:
    env: str
    level: str
    json_console: bool
    directory: Path

    @classmethod
    def from_env(cls) -> "LogSettings":
        env = (os.getenv("PROTEAN_ENV") or "dev").lower()
        log_format = os.getenv("LOG_FORMAT")
        json_console = log_format.lower() == "json" if log_format else env in ("production", "staging")
        return cls(
            env=env,
            level=os.getenv("LOG_LEVEL", _LEVELS_BY_ENV.get(env, "INFO")).upper(),
            json_console=json_console,
            directory=Path(os.getenv("LOG_DIR", "logs")),
        )


# Applied to every record, structlog or stdlib, before rendering
_SHARED_PROCESSORS = [
    structlog.contextvars.merge_contextvars,
    structlog.stdlib.add_logger_name,
    structlog.stdlib.add_log_level,
    structlog.stdlib.ExtraAdder(),
    structlog.processors.TimeStamper(fmt="iso", utc=True),
    structlog.processors.StackInfoRenderer(),
]


def _formatter(*processors) -> structlog.stdlib.ProcessorFormatter:
    return structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=_SHARED_PROCESSORS,
        processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, *processors],
    )


def _console_processors(settings: LogSettings) -> list:
    if settings.json_console:
        return [structlog.processors.dict_tracebacks, structlog.processors.JSONRenderer()]
    return [
        structlog.dev.ConsoleRenderer(
            colors=sys.stdout.isatty(),
            exception_formatter=structlog.dev.RichTracebackFormatter(show_locals=settings.env != "production"),
        )
    ]


def _handlers(settings: LogSettings) -> list[logging.Handler]:
    console = logging.StreamHandler(sys.stdout)
    console.setFormatter(_formatter(*_console_processors(settings)))

    settings.directory.mkdir(parents=True, exist_ok=True)
    log_file = logging.handlers.RotatingFileHandler(
        settings.directory / "playground.log", maxBytes=_MAX_BYTES, backupCount=5, encoding="utf-8"
    )
    log_file.setFormatter(_formatter(structlog.processors.dict_tracebacks, structlog.processors.JSONRenderer()))
    return [console, log_file]


def configure_logging(settings: LogSettings | None = None) -> LogSettings:
    """Route structlog and stdlib logging through the shared handlers."""
    settings = settings or LogSettings.from_env()

    root = logging.getLogger()
    root.handlers = _handlers(settings)
    root.setLevel(settings.level)
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            *_SHARED_PROCESSORS,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.CallsiteParameterAdder(
                parameters=[
                    structlog.processors.CallsiteParameter.MODULE,
                    structlog.processors.CallsiteParameter.LINENO,
                ]
            ),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
    return settings


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


def add_context(**kwargs: Any) -> None:
    """Bind request-scoped keys (actor, request path) for later log lines."""
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    structlog.contextvars.clear_contextvars()
