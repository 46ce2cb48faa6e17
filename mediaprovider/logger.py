import logging
import re
import threading
from typing import Any

import structlog
from structlog.types import EventDict, Processor


def drop_color_message_key(_, __, event_dict: EventDict) -> EventDict:
    """
    Some servers log the message a second time in the extra `color_message`.
    This processor drops the key from the event dict if it exists.
    """
    event_dict.pop("color_message", None)
    return event_dict


def setup_logging(json_logs: bool = False, log_level: str = "INFO"):
    """Configure structlog for the mediaprovider package"""

    # An application embedding the providers may already own the configuration
    root_logger = logging.getLogger()
    for handler in root_logger.handlers:
        if (isinstance(handler, logging.StreamHandler) and
                isinstance(handler.formatter, structlog.stdlib.ProcessorFormatter)):
            return

    timestamper = structlog.processors.TimeStamper(fmt="iso")

    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.stdlib.ExtraAdder(),
        drop_color_message_key,
        timestamper,
        structlog.processors.StackInfoRenderer(),
    ]

    if json_logs:
        # Format the exception only for JSON logs, as we want to pretty-print them when
        # using the ConsoleRenderer
        shared_processors.append(structlog.processors.format_exc_info)

    structlog.configure(
        processors=shared_processors
        + [
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    log_renderer: structlog.types.Processor
    if json_logs:
        log_renderer = structlog.processors.JSONRenderer()
    else:
        log_renderer = structlog.dev.ConsoleRenderer()

    formatter = structlog.stdlib.ProcessorFormatter(
        # These run ONLY on `logging` entries that do NOT originate within
        # structlog.
        foreign_pre_chain=shared_processors,
        # These run on ALL entries after the pre_chain is done.
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            log_renderer,
        ],
    )

    handler = logging.StreamHandler()
    handler.setFormatter(formatter)

    root_logger.addHandler(handler)
    root_logger.setLevel(log_level.upper())


class MediaProviderStructLogger:
    """
    Structured logger for the mediaprovider package.

    Values bound with :meth:`bind` stay local to the returned logger, so two
    provider stores logging from different threads never mix their context.
    """

    def __init__(self, log_name: str = "mediaprovider", logger=None):
        self.log_name = log_name
        self.logger = logger if logger is not None else structlog.stdlib.get_logger(log_name)

    @staticmethod
    def _to_snake_case(name):
        """Convert CamelCase to snake_case"""
        return re.sub(r"(?<!^)(?=[A-Z])", "_", name).lower()

    def bind(self, *args, **new_values: Any) -> "MediaProviderStructLogger":
        """
        Return a child logger with additional context.

        Args:
            *args: Objects that have an 'id' attribute (the key is the snake_case class name)
            **new_values: Key-value pairs to bind to the context
        """
        for arg in args:
            if hasattr(arg, 'id'):
                key = self._to_snake_case(type(arg).__name__)
                new_values[f"{key}_id"] = arg.id
            else:
                self.logger.error(
                    "Unsupported argument when trying to log.",
                    invalid_argument=type(arg).__name__
                )

        return MediaProviderStructLogger(self.log_name, self.logger.bind(**new_values))

    def debug(self, event: str | None = None, *args: Any, **kw: Any):
        self.logger.debug(event, *args, **kw)

    def info(self, event: str | None = None, *args: Any, **kw: Any):
        self.logger.info(event, *args, **kw)

    def warning(self, event: str | None = None, *args: Any, **kw: Any):
        self.logger.warning(event, *args, **kw)

    warn = warning

    def error(self, event: str | None = None, *args: Any, **kw: Any):
        self.logger.error(event, *args, **kw)

    def critical(self, event: str | None = None, *args: Any, **kw: Any):
        self.logger.critical(event, *args, **kw)

    def exception(self, event: str | None = None, *args: Any, **kw: Any):
        self.logger.exception(event, *args, **kw)


_logger_instance: MediaProviderStructLogger | None = None
_logger_lock = threading.Lock()


def get_mediaprovider_logger() -> MediaProviderStructLogger:
    """Return the package-wide structured logger."""
    global _logger_instance
    with _logger_lock:
        if _logger_instance is None:
            _logger_instance = MediaProviderStructLogger("mediaprovider")
        return _logger_instance


def init_logger(config):
    """
    Initialize the structured logger for mediaprovider package.

    Args:
        config: SystemConfig object with logging settings

    Returns:
        MediaProviderStructLogger: Configured structured logger instance
    """
    setup_logging(json_logs=config.logging.json_logs, log_level=config.logging.level)
    return get_mediaprovider_logger()
