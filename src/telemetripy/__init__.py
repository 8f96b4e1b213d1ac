"""Typed analytics events and diagnostic attachments for telemetry SDKs."""

from telemetripy.core.attachments import BinaryPayload, DiagnosticAttachment
from telemetripy.core.errors import (
    AttachmentTooLargeError,
    EmptyAttachmentError,
    InvalidEventNameError,
    InvalidKeyError,
    MissingMimeTypeError,
    PayloadTooLargeError,
    TelemetryModelError,
    TooManyPropertiesError,
    UnsupportedValueTypeError,
    WireFormatError,
)
from telemetripy.core.events import EventLog, track_event
from telemetripy.core.limits import DEFAULT_LIMITS, ModelLimits
from telemetripy.core.properties import (
    FrozenPropertyMap,
    PropertyEntry,
    PropertyType,
    PropertyValue,
    TypedPropertyMap,
)

__all__ = [
    "DEFAULT_LIMITS",
    "AttachmentTooLargeError",
    "BinaryPayload",
    "DiagnosticAttachment",
    "EmptyAttachmentError",
    "EventLog",
    "FrozenPropertyMap",
    "InvalidEventNameError",
    "InvalidKeyError",
    "MissingMimeTypeError",
    "ModelLimits",
    "PayloadTooLargeError",
    "PropertyEntry",
    "PropertyType",
    "PropertyValue",
    "TelemetryModelError",
    "TooManyPropertiesError",
    "TypedPropertyMap",
    "UnsupportedValueTypeError",
    "WireFormatError",
    "track_event",
]
