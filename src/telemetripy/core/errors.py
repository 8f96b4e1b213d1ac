"""Exceptions raised while building and decoding telemetry models.

Every error is raised synchronously to the caller that supplied the bad
input. None of them leave a partially built object behind.
"""


class TelemetryModelError(Exception):
    """Base class for all model validation errors."""


class InvalidKeyError(TelemetryModelError, ValueError):
    """Property name is empty, not a string, or too long."""


class UnsupportedValueTypeError(TelemetryModelError, TypeError):
    """Property value is not one of the supported kinds."""


class TooManyPropertiesError(TelemetryModelError, ValueError):
    """A new property was added to a map that is already full."""


class PayloadTooLargeError(TelemetryModelError, ValueError):
    """Estimated size of a property map exceeds the payload limit."""


class InvalidEventNameError(TelemetryModelError, ValueError):
    """Event name is empty, not a string, or too long."""


class EmptyAttachmentError(TelemetryModelError, ValueError):
    """Attachment payload is missing or empty."""


class MissingMimeTypeError(TelemetryModelError, ValueError):
    """Binary attachment was given without a MIME type."""


class AttachmentTooLargeError(TelemetryModelError, ValueError):
    """Attachment payload exceeds the attachment size limit."""


class WireFormatError(TelemetryModelError, ValueError):
    """Wire representation cannot be decoded into a model."""
