"""Typed property values and the property map used by event logs.

A property value is a closed tagged union over five kinds: string, number,
boolean, date and homogeneous array. Anything else is rejected when the
value enters a map, so the wire encoding never has to guess at a type.
"""

import logging
import math
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from telemetripy.core.errors import (
    InvalidKeyError,
    PayloadTooLargeError,
    TooManyPropertiesError,
    UnsupportedValueTypeError,
    WireFormatError,
)
from telemetripy.core.limits import DEFAULT_LIMITS, ModelLimits, utf8_length

logger = logging.getLogger(__name__)


class PropertyType(str, Enum):
    """Wire type tags for property values."""

    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    DATE = "date"
    ARRAY = "array"


LeafValue = str | int | float | bool | datetime

# Estimated encoded size in bytes of fixed-width kinds
_FIXED_SIZES = {
    PropertyType.NUMBER: 8,
    PropertyType.BOOLEAN: 1,
    PropertyType.DATE: 8,
}


def _leaf_type(value: object) -> PropertyType:
    # bool is a subclass of int, so it has to be checked first
    if isinstance(value, bool):
        return PropertyType.BOOLEAN
    if isinstance(value, str):
        utf8_length(value, UnsupportedValueTypeError)
        return PropertyType.STRING
    if isinstance(value, (int, float)):
        if isinstance(value, float) and not math.isfinite(value):
            raise UnsupportedValueTypeError(f"non-finite number {value!r} is not supported")
        return PropertyType.NUMBER
    if isinstance(value, datetime):
        return PropertyType.DATE
    raise UnsupportedValueTypeError(
        f"unsupported property value type: {type(value).__name__}"
    )


def _normalize_leaf(kind: PropertyType, value: Any) -> LeafValue:
    if kind is PropertyType.DATE:
        # Naive datetimes are taken to be UTC
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        try:
            return value.astimezone(timezone.utc)
        except OverflowError as exc:
            raise UnsupportedValueTypeError(
                f"date {value.isoformat()} is out of range in UTC"
            ) from exc
    return value


def _leaf_size(kind: PropertyType, value: LeafValue) -> int:
    if kind is PropertyType.STRING:
        return utf8_length(value, UnsupportedValueTypeError)  # type: ignore[arg-type]
    return _FIXED_SIZES[kind]


def _coerce_array(
    values: object, item_type: PropertyType | None
) -> tuple[tuple[LeafValue, ...], PropertyType | None]:
    if not isinstance(values, (list, tuple)):
        raise UnsupportedValueTypeError(
            f"array value must be a list or tuple, got {type(values).__name__}"
        )
    if item_type is PropertyType.ARRAY:
        raise UnsupportedValueTypeError("nested arrays are not supported")
    items: list[LeafValue] = []
    for value in values:
        if isinstance(value, (list, tuple)):
            raise UnsupportedValueTypeError("nested arrays are not supported")
        kind = _leaf_type(value)
        if item_type is None:
            item_type = kind
        elif kind is not item_type:
            raise UnsupportedValueTypeError(
                f"array items must all be {item_type.value}, got {kind.value}"
            )
        items.append(_normalize_leaf(kind, value))
    return tuple(items), item_type


def _parse_type(tag: object) -> PropertyType:
    try:
        return PropertyType(tag)
    except (ValueError, TypeError) as exc:
        raise WireFormatError(f"unknown property type tag: {tag!r}") from exc


def _decode_leaf(kind: PropertyType, raw: object) -> object:
    if kind is PropertyType.DATE:
        if not isinstance(raw, str):
            raise WireFormatError(f"date value must be an ISO-8601 string, got {raw!r}")
        try:
            return datetime.fromisoformat(raw)
        except ValueError as exc:
            raise WireFormatError(f"invalid date value: {raw!r}") from exc
    return raw


def _encode_leaf(kind: PropertyType, value: LeafValue) -> str | int | float | bool:
    if kind is PropertyType.DATE:
        return value.isoformat()  # type: ignore[union-attr]
    return value  # type: ignore[return-value]


@dataclass(frozen=True)
class PropertyValue:
    """A single typed property value.

    Attributes:
        type: Discriminant of the value. Fixed at construction.
        value: The Python value. Arrays are stored as tuples, dates as
            timezone-aware UTC datetimes.
        item_type: Element kind of an array value; None for scalars and
            for empty arrays built without an explicit element kind.
    """

    type: PropertyType
    value: LeafValue | tuple[LeafValue, ...]
    item_type: PropertyType | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.type, PropertyType):
            try:
                object.__setattr__(self, "type", PropertyType(self.type))
            except (ValueError, TypeError) as exc:
                raise UnsupportedValueTypeError(
                    f"unknown property type: {self.type!r}"
                ) from exc

        if self.type is PropertyType.ARRAY:
            items, item_type = _coerce_array(self.value, self.item_type)
            object.__setattr__(self, "value", items)
            object.__setattr__(self, "item_type", item_type)
            return

        if self.item_type is not None:
            raise UnsupportedValueTypeError("item_type only applies to array values")
        actual = _leaf_type(self.value)
        if actual is not self.type:
            raise UnsupportedValueTypeError(
                f"expected a {self.type.value} value, got {actual.value}"
            )
        object.__setattr__(self, "value", _normalize_leaf(actual, self.value))

    @classmethod
    def of(cls, raw: object) -> "PropertyValue":
        """Infer the kind of a raw Python value and wrap it.

        Raises:
            UnsupportedValueTypeError: If the value is not one of the
                supported kinds.
        """
        if isinstance(raw, PropertyValue):
            return raw
        if isinstance(raw, (list, tuple)):
            return cls(PropertyType.ARRAY, raw)
        return cls(_leaf_type(raw), raw)

    def estimated_size(self) -> int:
        """Estimated encoded size of the value in bytes."""
        if self.type is PropertyType.ARRAY:
            return sum(_leaf_size(self.item_type, v) for v in self.value)  # type: ignore[arg-type,union-attr]
        return _leaf_size(self.type, self.value)  # type: ignore[arg-type]

    def to_wire(self) -> Any:
        """Encode the value part of the wire representation."""
        if self.type is PropertyType.ARRAY:
            return [_encode_leaf(self.item_type, v) for v in self.value]  # type: ignore[arg-type,union-attr]
        return _encode_leaf(self.type, self.value)  # type: ignore[arg-type]

    @classmethod
    def from_wire(
        cls, tag: object, raw: object, item_tag: object = None
    ) -> "PropertyValue":
        """Decode a value from its wire type tag and encoded value."""
        kind = _parse_type(tag)
        item_type = _parse_type(item_tag) if item_tag is not None else None
        try:
            if kind is PropertyType.ARRAY:
                if not isinstance(raw, list):
                    raise WireFormatError(f"array value must be a list, got {raw!r}")
                if item_type is None and raw:
                    raise WireFormatError("non-empty array is missing its itemType")
                items = tuple(_decode_leaf(item_type, v) for v in raw)  # type: ignore[arg-type]
                return cls(kind, items, item_type)  # type: ignore[arg-type]
            if item_type is not None:
                raise WireFormatError("itemType only applies to array values")
            return cls(kind, _decode_leaf(kind, raw))  # type: ignore[arg-type]
        except UnsupportedValueTypeError as exc:
            raise WireFormatError(str(exc)) from exc


@dataclass(frozen=True)
class PropertyEntry:
    """A named property value, one element of the wire property list."""

    name: str
    value: PropertyValue

    def to_wire(self) -> dict[str, Any]:
        item: dict[str, Any] = {
            "name": self.name,
            "type": self.value.type.value,
            "value": self.value.to_wire(),
        }
        if self.value.item_type is not None:
            item["itemType"] = self.value.item_type.value
        return item

    @classmethod
    def from_wire(cls, item: object) -> "PropertyEntry":
        if not isinstance(item, Mapping):
            raise WireFormatError(f"property item must be an object, got {item!r}")
        try:
            name, tag, raw = item["name"], item["type"], item["value"]
        except KeyError as exc:
            raise WireFormatError(f"property item is missing {exc.args[0]!r}") from exc
        if not isinstance(name, str):
            raise WireFormatError(f"property name must be a string, got {name!r}")
        return cls(name=name, value=PropertyValue.from_wire(tag, raw, item.get("itemType")))


@dataclass(frozen=True)
class FrozenPropertyMap:
    """Immutable snapshot of a property map, owned by one event log.

    Equality compares the ordered (name, type, value) entries.
    """

    entries: tuple[PropertyEntry, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "entries", tuple(self.entries))

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self) -> Iterator[str]:
        return (entry.name for entry in self.entries)

    def __contains__(self, name: object) -> bool:
        return any(entry.name == name for entry in self.entries)

    def __getitem__(self, name: str) -> PropertyValue:
        for entry in self.entries:
            if entry.name == name:
                return entry.value
        raise KeyError(name)

    def get(self, name: str) -> PropertyValue | None:
        try:
            return self[name]
        except KeyError:
            return None

    def estimated_size(self) -> int:
        return sum(
            utf8_length(entry.name, InvalidKeyError) + entry.value.estimated_size()
            for entry in self.entries
        )

    def to_wire(self) -> list[dict[str, Any]]:
        return [entry.to_wire() for entry in self.entries]


class TypedPropertyMap:
    """Ordered, bounded mapping from property name to typed value.

    The map is a builder: application code fills it in and then commits it
    with freeze(), which is also where the aggregate size limit is checked.
    Setting a name that is already present overwrites its value and keeps
    the original insertion position.

    Example:
        ```python
        props = TypedPropertyMap()
        props.set("screen", "checkout").set("items", 3)
        log = EventLog("purchase", props)
        ```
    """

    def __init__(
        self,
        properties: Mapping[str, object] | None = None,
        *,
        limits: ModelLimits = DEFAULT_LIMITS,
    ) -> None:
        """Initialize the map, optionally from an existing mapping.

        Args:
            properties: Initial name/value pairs, set in iteration order.
            limits: Limits to enforce. Defaults to DEFAULT_LIMITS.
        """
        self._limits = limits
        self._entries: dict[str, PropertyValue] = {}
        if properties:
            for name, value in properties.items():
                self.set(name, value)

    @property
    def limits(self) -> ModelLimits:
        return self._limits

    def _check_key(self, name: object) -> None:
        if not isinstance(name, str) or not name:
            raise InvalidKeyError(f"property name must be a non-empty string, got {name!r}")
        if len(name) > self._limits.max_key_length:
            raise InvalidKeyError(
                f"property name {name[:20]!r}... is {len(name)} characters, "
                f"limit is {self._limits.max_key_length}"
            )
        utf8_length(name, InvalidKeyError)

    def _put(self, name: str, value: PropertyValue) -> "TypedPropertyMap":
        if name in self._entries:
            logger.debug("Overwriting property %r", name)
        elif len(self._entries) >= self._limits.max_properties:
            logger.debug(
                "Rejected property %r: map already holds %d entries",
                name,
                len(self._entries),
            )
            raise TooManyPropertiesError(
                f"cannot add property {name!r}: limit of "
                f"{self._limits.max_properties} properties reached"
            )
        self._entries[name] = value
        return self

    def set(self, name: str, value: object) -> "TypedPropertyMap":
        """Set a property, inferring its kind from the Python value.

        Args:
            name: Property name.
            value: str, int, float, bool, datetime, a homogeneous list or
                tuple of those, or a PropertyValue.

        Returns:
            The map itself, so calls can be chained.

        Raises:
            InvalidKeyError: If the name is empty or too long.
            UnsupportedValueTypeError: If the value has an unsupported type.
            TooManyPropertiesError: If the name is new and the map is full.
        """
        self._check_key(name)
        return self._put(name, PropertyValue.of(value))

    def _set_typed(
        self, name: str, kind: PropertyType, value: object
    ) -> "TypedPropertyMap":
        self._check_key(name)
        return self._put(name, PropertyValue(kind, value))  # type: ignore[arg-type]

    def set_string(self, name: str, value: str) -> "TypedPropertyMap":
        return self._set_typed(name, PropertyType.STRING, value)

    def set_number(self, name: str, value: int | float) -> "TypedPropertyMap":
        return self._set_typed(name, PropertyType.NUMBER, value)

    def set_boolean(self, name: str, value: bool) -> "TypedPropertyMap":
        return self._set_typed(name, PropertyType.BOOLEAN, value)

    def set_date(self, name: str, value: datetime) -> "TypedPropertyMap":
        return self._set_typed(name, PropertyType.DATE, value)

    def set_array(
        self,
        name: str,
        values: list[LeafValue] | tuple[LeafValue, ...],
        item_type: PropertyType | None = None,
    ) -> "TypedPropertyMap":
        """Set an array property, optionally pinning its element kind."""
        self._check_key(name)
        return self._put(name, PropertyValue(PropertyType.ARRAY, values, item_type))

    def get(self, name: str) -> PropertyValue | None:
        return self._entries.get(name)

    def remove(self, name: str) -> PropertyValue:
        """Remove a property and return its value.

        Raises:
            KeyError: If the name is not present.
        """
        return self._entries.pop(name)

    def items(self) -> Iterator[tuple[str, PropertyValue]]:
        return iter(list(self._entries.items()))

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._entries))

    def __contains__(self, name: object) -> bool:
        return name in self._entries

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TypedPropertyMap):
            return NotImplemented
        return self._entries == other._entries

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"TypedPropertyMap({self._entries!r})"

    def estimated_size(self) -> int:
        """Estimated serialized size: UTF-8 name bytes plus value bytes."""
        return sum(
            utf8_length(name, InvalidKeyError) + value.estimated_size()
            for name, value in self._entries.items()
        )

    def check_size(self) -> None:
        """Raise PayloadTooLargeError if the map exceeds the payload limit."""
        size = self.estimated_size()
        if size > self._limits.max_payload_bytes:
            raise PayloadTooLargeError(
                f"properties are {size} bytes, limit is {self._limits.max_payload_bytes}"
            )

    def freeze(self) -> FrozenPropertyMap:
        """Commit the map into an immutable snapshot.

        Later changes to this map do not affect the returned snapshot.

        Raises:
            PayloadTooLargeError: If the map exceeds the payload limit.
        """
        self.check_size()
        logger.debug(
            "Committing %d properties (%d bytes)", len(self._entries), self.estimated_size()
        )
        return FrozenPropertyMap(
            tuple(PropertyEntry(name, value) for name, value in self._entries.items())
        )

    def to_wire(self) -> list[dict[str, Any]]:
        """Ordered list of {name, type, value} items in insertion order."""
        return [PropertyEntry(name, value).to_wire() for name, value in self._entries.items()]

    @classmethod
    def from_wire(
        cls, items: object, *, limits: ModelLimits = DEFAULT_LIMITS
    ) -> "TypedPropertyMap":
        """Rebuild a map from its wire representation.

        Raises:
            WireFormatError: If the items are malformed.
            InvalidKeyError: If an item name is empty or too long.
            TooManyPropertiesError: If there are more items than the limit
                allows.
        """
        if not isinstance(items, list):
            raise WireFormatError(f"properties must be a list, got {type(items).__name__}")
        props = cls(limits=limits)
        for item in items:
            entry = PropertyEntry.from_wire(item)
            props.set(entry.name, entry.value)
        return props

    @classmethod
    def from_entries(
        cls, entries: Iterable[PropertyEntry], *, limits: ModelLimits = DEFAULT_LIMITS
    ) -> "TypedPropertyMap":
        """Rebuild a map from committed entries, checking them against limits.

        Raises:
            TypeError: If an entry is not a PropertyEntry.
            InvalidKeyError: If a name is invalid or appears more than once.
            TooManyPropertiesError: If there are more entries than the limit
                allows.
        """
        props = cls(limits=limits)
        for entry in entries:
            if not isinstance(entry, PropertyEntry):
                raise TypeError(
                    f"entries must be PropertyEntry, got {type(entry).__name__}"
                )
            if entry.name in props:
                raise InvalidKeyError(f"duplicate property name {entry.name!r}")
            props.set(entry.name, entry.value)
        return props
