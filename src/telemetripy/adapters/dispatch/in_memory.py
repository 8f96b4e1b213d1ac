"""In-memory dispatch adapter for event logs."""

from collections.abc import AsyncIterable

from telemetripy.core.events import EventLog


class InMemoryLogDispatch:
    """In-memory implementation of LogDispatchPort.

    Keeps dispatched logs in a list. Suitable for testing and for
    inspecting what an application would send.
    """

    def __init__(self) -> None:
        self._logs: list[EventLog] = []

    async def dispatch(self, log: EventLog) -> None:
        """Record a dispatched event log."""
        self._logs.append(log)

    async def read(self, name: str | None = None) -> AsyncIterable[EventLog]:
        """Read dispatched logs in dispatch order, optionally by event name."""
        for log in list(self._logs):
            if name is None or log.name == name:
                yield log

    def clear(self) -> None:
        self._logs.clear()

    def __len__(self) -> int:
        return len(self._logs)
