"""Python logging handler adapter for telemetripy.

This adapter bridges Python's standard library logging module to the
LogDispatchPort, turning each log record into an EventLog with typed
properties.
"""

import asyncio
import logging

from telemetripy.core.errors import (
    InvalidKeyError,
    TooManyPropertiesError,
    UnsupportedValueTypeError,
)
from telemetripy.core.events import EventLog
from telemetripy.core.limits import DEFAULT_LIMITS, ModelLimits
from telemetripy.core.ports import LogDispatchPort
from telemetripy.core.properties import TypedPropertyMap

# Standard LogRecord attributes that should not be treated as extra fields
_STANDARD_LOGRECORD_ATTRS = frozenset(
    {
        "args",
        "asctime",
        "created",
        "exc_info",
        "exc_text",
        "filename",
        "funcName",
        "levelname",
        "levelno",
        "lineno",
        "message",
        "module",
        "msecs",
        "msg",
        "name",
        "pathname",
        "process",
        "processName",
        "relativeCreated",
        "stack_info",
        "taskName",
        "thread",
        "threadName",
    }
)


# Default attributes to extract from LogRecord
_DEFAULT_INCLUDE_ATTRS = ["module", "funcName", "lineno", "pathname"]


class EventLogHandler(logging.Handler):
    """Logging handler that dispatches log records as event logs.

    The record message and level always become the "message" and "level"
    properties. Properties the map rejects (unsupported values, invalid
    names, or anything past the property limit) are skipped.

    Example:
        ```python
        from telemetripy.adapters.dispatch import InMemoryLogDispatch
        from telemetripy.adapters.logging import EventLogHandler

        dispatch = InMemoryLogDispatch()
        logging.getLogger().addHandler(EventLogHandler(dispatch))
        ```
    """

    def __init__(
        self,
        port: LogDispatchPort,
        include_attrs: list[str] | None = None,
        event_name: str | None = None,
        limits: ModelLimits = DEFAULT_LIMITS,
    ) -> None:
        """Initialize the handler with a dispatch port.

        Args:
            port: Adapter implementing LogDispatchPort.
            include_attrs: List of LogRecord attributes to include. Defaults to
                ["module", "funcName", "lineno", "pathname"].
            event_name: Fixed event name. Defaults to the logger name.
            limits: Limits for the generated property maps.
        """
        super().__init__()
        self._port = port
        self._include_attrs = (
            _DEFAULT_INCLUDE_ATTRS if include_attrs is None else include_attrs
        )
        self._event_name = event_name
        self._limits = limits

    def _add(self, properties: TypedPropertyMap, name: str, value: object) -> None:
        try:
            properties.set(name, value)
        except (InvalidKeyError, UnsupportedValueTypeError, TooManyPropertiesError):
            # Skipped, the record is still dispatched
            return

    def build_event(self, record: logging.LogRecord) -> EventLog:
        """Convert a log record into an EventLog."""
        properties = TypedPropertyMap(limits=self._limits)
        properties.set_string("message", record.getMessage())
        properties.set_string("level", record.levelname)

        # Map of attribute names to their values from LogRecord
        attr_mapping: dict[str, object] = {
            "module": record.name,
            "funcName": record.funcName or "",
            "lineno": record.lineno,
            "pathname": record.pathname,
        }
        for key in self._include_attrs:
            if key in attr_mapping:
                self._add(properties, key, attr_mapping[key])

        # Add any extra attributes passed via logging call
        for key, value in record.__dict__.items():
            if key not in _STANDARD_LOGRECORD_ATTRS and not key.startswith("_"):
                self._add(properties, key, value)

        # Extract exception info if present
        if record.exc_info:
            exc_type, exc_value, _ = record.exc_info
            if exc_type is not None:
                self._add(properties, "exc_type", exc_type.__name__)
            if exc_value is not None:
                self._add(properties, "exc_message", str(exc_value))

        return EventLog(
            self._event_name or record.name,
            properties,
            limits=self._limits,
        )

    def emit(self, record: logging.LogRecord) -> None:
        """Emit a log record to the dispatch port.

        Args:
            record: The log record to emit.
        """
        try:
            event = self.build_event(record)
            asyncio.run(self._port.dispatch(event))
        except Exception:
            self.handleError(record)
