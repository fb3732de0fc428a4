"""Python logging handler adapter for featurelink.

This adapter bridges Python's standard library logging module to a
FeatureReporter, so that records logged while a step runs are attached to
that step's report item.
"""

import logging
import traceback

from featurelink.core.reporter import FeatureReporter

# Attributes every LogRecord carries; anything else was passed as extra
_STANDARD_LOGRECORD_ATTRS = frozenset(vars(logging.makeLogRecord({}))) | {
    "asctime",
    "message",
}

# Report log levels differ from stdlib names for these two
_LEVEL_NAMES = {"WARNING": "WARN", "CRITICAL": "FATAL"}

_OWN_LOGGER_PREFIX = "featurelink"


class ReportingLogHandler(logging.Handler):
    """Logging handler that attaches log records to the running report item.

    Records emitted by featurelink itself are skipped.

    Example:
        ```python
        handler = ReportingLogHandler(reporter)
        logging.getLogger().addHandler(handler)
        ```
    """

    def __init__(self, reporter: FeatureReporter, level: int = logging.NOTSET) -> None:
        """Initialize the handler with the reporter receiving the logs.

        Args:
            reporter: Reporter whose current item receives each record.
            level: Minimum level of forwarded records.
        """
        super().__init__(level)
        self._reporter = reporter

    def emit(self, record: logging.LogRecord) -> None:
        """Forward a log record to the reporter.

        Args:
            record: The log record to emit.
        """
        if record.name == _OWN_LOGGER_PREFIX or record.name.startswith(
            _OWN_LOGGER_PREFIX + "."
        ):
            return

        attributes: dict[str, str | int | float | bool] = {
            "logger": record.name,
            "lineno": record.lineno,
        }

        # Add any extra attributes passed via logging call
        for key, value in record.__dict__.items():
            if key not in _STANDARD_LOGRECORD_ATTRS and isinstance(
                value, (str, int, float, bool)
            ):
                attributes[key] = value

        message = record.getMessage()
        if record.exc_info:
            exc_type, exc_value, exc_tb = record.exc_info
            if exc_type is not None:
                message = "".join(
                    [message, "\n"]
                    + traceback.format_exception(exc_type, exc_value, exc_tb)
                )

        self._reporter.emit_log(
            message,
            level=_LEVEL_NAMES.get(record.levelname, record.levelname),
            timestamp=record.created,
            attributes=attributes,
        )
