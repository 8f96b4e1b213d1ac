"""Event log model and helper for recording analytics events."""

import uuid
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from telemetripy.core.errors import InvalidEventNameError, WireFormatError
from telemetripy.core.limits import DEFAULT_LIMITS, ModelLimits, utf8_length
from telemetripy.core.properties import FrozenPropertyMap, PropertyEntry, TypedPropertyMap


@dataclass(frozen=True)
class EventLog:
    """One recorded analytics occurrence.

    The properties passed in may be None, a TypedPropertyMap or a
    FrozenPropertyMap. Either map is re-validated against the event's own
    limits and frozen on construction, so the event owns its own snapshot
    and the key, count and aggregate size limits are enforced here.

    Attributes:
        name: Event name.
        properties: Immutable typed properties.
        id: Random UUID4 assigned at construction.
        limits: Limits used to validate the event name and properties.
    """

    name: str
    properties: FrozenPropertyMap = field(default_factory=FrozenPropertyMap)
    id: uuid.UUID = field(default_factory=uuid.uuid4)
    limits: ModelLimits = field(default=DEFAULT_LIMITS, compare=False, repr=False)

    def __post_init__(self) -> None:
        if not isinstance(self.name, str) or not self.name:
            raise InvalidEventNameError(
                f"event name must be a non-empty string, got {self.name!r}"
            )
        if len(self.name) > self.limits.max_event_name_length:
            raise InvalidEventNameError(
                f"event name is {len(self.name)} characters, "
                f"limit is {self.limits.max_event_name_length}"
            )
        utf8_length(self.name, InvalidEventNameError)

        properties: object = self.properties
        if properties is None:
            entries: Iterable[PropertyEntry] = ()
        elif isinstance(properties, TypedPropertyMap):
            entries = [PropertyEntry(name, value) for name, value in properties.items()]
        elif isinstance(properties, FrozenPropertyMap):
            entries = properties.entries
        else:
            raise TypeError(
                "properties must be a TypedPropertyMap or FrozenPropertyMap, "
                f"got {type(properties).__name__}"
            )
        # Re-checked against this event's limits whatever the source map was
        frozen = TypedPropertyMap.from_entries(entries, limits=self.limits).freeze()
        object.__setattr__(self, "properties", frozen)

        if not isinstance(self.id, uuid.UUID):
            raise TypeError(f"id must be a UUID, got {type(self.id).__name__}")

    def to_wire(self) -> dict[str, Any]:
        """Encode as {id, name, properties}."""
        return {
            "id": str(self.id),
            "name": self.name,
            "properties": self.properties.to_wire(),
        }

    @classmethod
    def from_wire(
        cls, data: object, *, limits: ModelLimits = DEFAULT_LIMITS
    ) -> "EventLog":
        """Decode an event log, keeping the transmitted id.

        Validation errors from the decoded values propagate unchanged.

        Raises:
            WireFormatError: If the data is malformed.
            InvalidEventNameError: If the name is empty or too long.
            InvalidKeyError: If a property name is empty or too long.
            TooManyPropertiesError: If there are too many properties.
            PayloadTooLargeError: If the properties exceed the payload limit.
        """
        if not isinstance(data, Mapping):
            raise WireFormatError(f"event log must be an object, got {data!r}")
        try:
            raw_id, name = data["id"], data["name"]
        except KeyError as exc:
            raise WireFormatError(f"event log is missing {exc.args[0]!r}") from exc
        try:
            event_id = uuid.UUID(str(raw_id))
        except ValueError as exc:
            raise WireFormatError(f"invalid event id: {raw_id!r}") from exc
        properties = TypedPropertyMap.from_wire(data.get("properties", []), limits=limits)
        return cls(name=name, properties=properties, id=event_id, limits=limits)  # type: ignore[arg-type]


def track_event(name: str, /, **properties: object) -> EventLog:
    """Create an event log from keyword properties.

    Args:
        name: Event name
        **properties: Property values (str, int, float, bool, datetime or
            homogeneous lists of those)

    Returns:
        EventLog with a fresh id
    """
    return EventLog(name, TypedPropertyMap(properties))  # type: ignore[arg-type]
