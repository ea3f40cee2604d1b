"""Structured logging for Evalboard.

Provides:
- Correlation ID propagation (one ID per analysed session or request)
- JSON output for production, pretty console output for development
- Common fields (version, hostname) on every event
- Per-module log levels
- Redaction of sensitive keys and log-injection sanitizing

Example usage:
    from evalboard.core.logging import configure_logging, get_logger

    configure_logging()
    logger = get_logger(__name__)

    with correlation_context(session_id):
        logger.info("report_built", evaluations=4)
"""

import logging
import re
import socket
import sys
import uuid
from collections.abc import Mapping
from contextvars import ContextVar
from functools import lru_cache
from typing import TYPE_CHECKING, Any

import structlog
from structlog.types import EventDict, Processor, WrappedLogger

from evalboard import __version__

if TYPE_CHECKING:
    from evalboard.core.settings import EvalboardSettings

_correlation_id: ContextVar[str | None] = ContextVar("correlation_id", default=None)

_bound_context: ContextVar[dict[str, Any]] = ContextVar("bound_context", default={})

_module_log_levels: dict[str, int] = {}

SENSITIVE_KEY_PATTERNS = frozenset(
    {
        "password",
        "secret",
        "token",
        "api_key",
        "authorization",
        "credential",
        "email",
    }
)

# Control characters other than tab are stripped from event names
_CONTROL_CHARS = re.compile(r"[\x00-\x08\x0b-\x1f\x7f]")

_LEVELS_BY_METHOD = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "warn": logging.WARNING,
    "error": logging.ERROR,
    "critical": logging.CRITICAL,
    "exception": logging.ERROR,
}


def generate_correlation_id() -> str:
    """Generate a unique correlation ID."""
    return str(uuid.uuid4())


def get_correlation_id() -> str | None:
    """Get the current correlation ID from context."""
    return _correlation_id.get()


def set_correlation_id(correlation_id: str | None) -> None:
    """Set the correlation ID in the current context."""
    _correlation_id.set(correlation_id)


class correlation_context:
    """Context manager establishing a correlation ID scope.

    Example:
        with correlation_context("session-42"):
            logger.info("processing")  # Includes correlation_id="session-42"
    """

    def __init__(self, correlation_id: str | None = None) -> None:
        self.correlation_id = correlation_id or generate_correlation_id()
        self._token: Any = None

    def __enter__(self) -> str:
        self._token = _correlation_id.set(self.correlation_id)
        return self.correlation_id

    def __exit__(self, *args: Any) -> None:
        _correlation_id.reset(self._token)


class bind_context:
    """Context manager to bind additional fields to every log event.

    Example:
        with bind_context(session_id="s1", template_id="t1"):
            logger.info("action")
    """

    def __init__(self, **kwargs: Any) -> None:
        self.ctx = kwargs
        self._token: Any = None

    def __enter__(self) -> "bind_context":
        new_context = {**_bound_context.get(), **self.ctx}
        self._token = _bound_context.set(new_context)
        return self

    def __exit__(self, *args: Any) -> None:
        _bound_context.reset(self._token)


# =============================================================================
# Structlog Processors
# =============================================================================


def add_correlation_id(
    logger: WrappedLogger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Add correlation ID to log events if available."""
    correlation_id = get_correlation_id()
    if correlation_id is not None:
        event_dict["correlation_id"] = correlation_id
    return event_dict


def add_bound_context(
    logger: WrappedLogger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Add bound context variables to log events."""
    for key, value in _bound_context.get().items():
        event_dict.setdefault(key, value)
    return event_dict


@lru_cache(maxsize=1)
def _get_hostname() -> str:
    try:
        return socket.gethostname()
    except OSError:
        return "unknown"


def add_common_fields(
    logger: WrappedLogger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Add version and hostname."""
    event_dict.setdefault("evalboard_version", __version__)
    event_dict.setdefault("hostname", _get_hostname())
    return event_dict


def _is_sensitive_key(key: str) -> bool:
    key_lower = key.lower()
    return any(pattern in key_lower for pattern in SENSITIVE_KEY_PATTERNS)


def _redact_dict(d: dict[str, Any]) -> dict[str, Any]:
    result: dict[str, Any] = {}
    for key, value in d.items():
        if _is_sensitive_key(key):
            result[key] = "[REDACTED]"
        elif isinstance(value, dict):
            result[key] = _redact_dict(value)
        else:
            result[key] = value
    return result


def redact_sensitive_data(
    logger: WrappedLogger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Redact values whose key names look sensitive, recursing into dicts."""
    return _redact_dict(event_dict)


def sanitize_event(
    logger: WrappedLogger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Strip newlines and control characters from the event name."""
    event = event_dict.get("event", "")
    if isinstance(event, str):
        event = event.replace("\r", "\\r").replace("\n", "\\n")
        event_dict["event"] = _CONTROL_CHARS.sub("", event)
    return event_dict


def filter_by_module_level(
    logger: WrappedLogger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Drop events below the most specific module-level override."""
    if not _module_log_levels:
        return event_dict

    logger_name = event_dict.get("logger", "")
    if not logger_name:
        return event_dict

    level_threshold = None
    matched_prefix = ""
    for module, level in _module_log_levels.items():
        if logger_name == module or logger_name.startswith(f"{module}."):
            if len(module) > len(matched_prefix):
                level_threshold = level
                matched_prefix = module

    if level_threshold is not None:
        current_level = _LEVELS_BY_METHOD.get(method_name.lower(), logging.INFO)
        if current_level < level_threshold:
            raise structlog.DropEvent

    return event_dict


# =============================================================================
# Logging Configuration
# =============================================================================


def set_module_log_level(module: str, level: int | str) -> None:
    """Set the log level for a specific module (e.g. "evalboard.timeline")."""
    if isinstance(level, str):
        numeric_level: int = getattr(logging, level.upper(), logging.INFO)
    else:
        numeric_level = level
    _module_log_levels[module] = numeric_level
    logging.getLogger(module).setLevel(numeric_level)


def get_module_log_level(module: str) -> int | None:
    """Get the log level override for a module, if any."""
    return _module_log_levels.get(module)


def clear_module_log_levels() -> None:
    """Clear all module-specific log level overrides."""
    for module in _module_log_levels:
        logging.getLogger(module).setLevel(logging.NOTSET)
    _module_log_levels.clear()


def _shared_processors() -> list[Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        add_correlation_id,
        add_bound_context,
        add_common_fields,
        filter_by_module_level,
        redact_sensitive_data,
        sanitize_event,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
        structlog.processors.format_exc_info,
    ]


def configure_logging(
    level: str | int = logging.INFO,
    json_output: bool | None = None,
    log_file: str | None = None,
    module_levels: Mapping[str, str | int] | None = None,
) -> None:
    """Configure structured logging for the application.

    Args:
        level: Global log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_output: Use JSON output format. If None, auto-detects:
                     True if stdout is not a TTY, False otherwise
        log_file: Optional file path for log output
        module_levels: Dict of module name to log level
    """
    if json_output is None:
        json_output = not sys.stdout.isatty()

    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)

    if module_levels:
        for module, mod_level in module_levels.items():
            set_module_log_level(module, mod_level)

    # Handlers must pass records from modules set more verbose than the root
    handler_level = min([level, *_module_log_levels.values()])

    shared_processors = _shared_processors()

    structlog.configure(
        processors=shared_processors
        + [
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        # Module-level loggers must pick up a later reset_logging()
        cache_logger_on_first_use=False,
    )

    if json_output:
        renderer: Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=True)
    formatter = structlog.stdlib.ProcessorFormatter(
        processor=renderer,
        foreign_pre_chain=shared_processors,
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    # stderr keeps stdout clean for `--output json`
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(handler_level)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(handler_level)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)


def configure_logging_from_settings(
    settings: "EvalboardSettings | None" = None,
    level: str | None = None,
) -> None:
    """Configure logging from EvalboardSettings.

    Args:
        settings: Settings to apply; defaults to the cached settings.
        level: Overrides settings.logging.level (e.g. for --verbose).
    """
    from evalboard.core.settings import get_cached_settings

    if settings is None:
        settings = get_cached_settings()

    configure_logging(
        level=level or settings.logging.level,
        json_output=settings.logging.json_output,
        log_file=settings.logging.file,
        module_levels=settings.logging.module_levels,
    )


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a structured logger instance.

    Example:
        logger = get_logger(__name__)
        logger.debug("unknown_criterion_skipped", criterion_id="c9")
    """
    return structlog.get_logger(name)


def reset_logging() -> None:
    """Reset logging configuration to defaults (used by tests)."""
    clear_module_log_levels()
    _correlation_id.set(None)
    _bound_context.set({})

    structlog.reset_defaults()

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.WARNING)
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
