"""Port interface for the log dispatch pipeline.

Transmission, batching and retries happen outside this package. The
pipeline receives finished event logs through this protocol.
"""

from typing import Protocol, runtime_checkable

from telemetripy.core.events import EventLog


@runtime_checkable
class LogDispatchPort(Protocol):
    """Port for handing finished event logs to the dispatch pipeline.

    Adapters implementing this protocol take ownership of the logs they
    receive. Examples: InMemoryLogDispatch.
    """

    async def dispatch(self, log: EventLog) -> None:
        """Hand an event log over to the pipeline."""
        ...
