"""Diagnostic attachments sent alongside crash reports.

An attachment carries a text payload, a binary payload, or both. Each
payload is validated and size checked when the attachment is built.
"""

import base64
import binascii
import mimetypes
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from telemetripy.core.errors import (
    AttachmentTooLargeError,
    EmptyAttachmentError,
    MissingMimeTypeError,
    WireFormatError,
)
from telemetripy.core.limits import DEFAULT_LIMITS, ModelLimits, utf8_length

PLACEHOLDER_FILENAME = "attachment"


def placeholder_filename(mime_type: str) -> str:
    """Filename used for binary payloads attached without one.

    Derived from the MIME type only, so two attachments built from the same
    arguments compare equal.
    """
    extension = mimetypes.guess_extension(mime_type, strict=False) or ""
    return f"{PLACEHOLDER_FILENAME}{extension}"


def _check_size(kind: str, size: int, limits: ModelLimits) -> None:
    if size > limits.max_attachment_bytes:
        raise AttachmentTooLargeError(
            f"{kind} attachment is {size} bytes, limit is {limits.max_attachment_bytes}"
        )


@dataclass(frozen=True)
class BinaryPayload:
    """Binary part of an attachment.

    Attributes:
        data: Raw bytes. Must be non-empty.
        mime_type: MIME type of the data. Must be non-empty.
        filename: File name shown to whoever inspects the crash report.
            Generated from the MIME type when not given.
    """

    data: bytes
    mime_type: str
    filename: str | None = None
    limits: ModelLimits = field(default=DEFAULT_LIMITS, compare=False, repr=False)

    def __post_init__(self) -> None:
        if not isinstance(self.data, (bytes, bytearray, memoryview)) or not len(self.data):
            raise EmptyAttachmentError("binary attachment data must be non-empty bytes")
        object.__setattr__(self, "data", bytes(self.data))
        if not isinstance(self.mime_type, str) or not self.mime_type:
            raise MissingMimeTypeError("binary attachment requires a MIME type")
        _check_size("binary", len(self.data), self.limits)
        if self.filename is not None and not isinstance(self.filename, str):
            raise TypeError(
                f"filename must be a string or None, got {type(self.filename).__name__}"
            )
        if not self.filename:
            object.__setattr__(self, "filename", placeholder_filename(self.mime_type))

    def __repr__(self) -> str:
        return (
            f"BinaryPayload(filename={self.filename!r}, mime_type={self.mime_type!r}, "
            f"size={len(self.data)})"
        )

    def to_wire(self) -> dict[str, Any]:
        return {
            "data": base64.b64encode(self.data).decode("ascii"),
            "filename": self.filename,
            "mimeType": self.mime_type,
        }

    @classmethod
    def from_wire(
        cls, data: object, *, limits: ModelLimits = DEFAULT_LIMITS
    ) -> "BinaryPayload":
        if not isinstance(data, Mapping):
            raise WireFormatError(f"binary attachment must be an object, got {data!r}")
        encoded = data.get("data")
        if not isinstance(encoded, str):
            raise WireFormatError("binary attachment data must be a base64 string")
        try:
            raw = base64.b64decode(encoded, validate=True)
        except binascii.Error as exc:
            raise WireFormatError("binary attachment data is not valid base64") from exc
        filename = data.get("filename")
        if filename is not None and not isinstance(filename, str):
            raise WireFormatError(
                f"binary attachment filename must be a string, got {filename!r}"
            )
        return cls(
            data=raw,
            mime_type=data.get("mimeType", ""),
            filename=filename,
            limits=limits,
        )


@dataclass(frozen=True)
class DiagnosticAttachment:
    """Text and/or binary attachment for a crash report.

    Use with_text(), with_binary() or with_text_and_binary() to build one.
    All of them go through the same validation in __post_init__.

    Attributes:
        text: Plain text payload, or None.
        binary: Binary payload, or None.
    """

    text: str | None = None
    binary: BinaryPayload | None = None
    limits: ModelLimits = field(default=DEFAULT_LIMITS, compare=False, repr=False)

    def __post_init__(self) -> None:
        if self.text is None and self.binary is None:
            raise EmptyAttachmentError("attachment needs a text or binary payload")
        if self.text is not None:
            if not isinstance(self.text, str) or not self.text:
                raise EmptyAttachmentError("text attachment must be a non-empty string")
            _check_size("text", utf8_length(self.text, EmptyAttachmentError), self.limits)
        if self.binary is not None and not isinstance(self.binary, BinaryPayload):
            raise TypeError(
                f"binary must be a BinaryPayload, got {type(self.binary).__name__}"
            )

    @classmethod
    def with_text(
        cls, text: str, *, limits: ModelLimits = DEFAULT_LIMITS
    ) -> "DiagnosticAttachment":
        """Create a text-only attachment.

        Raises:
            EmptyAttachmentError: If the text is empty or is not valid unicode.
            AttachmentTooLargeError: If the text exceeds the size limit.
        """
        return cls(text=text, limits=limits)

    @classmethod
    def with_binary(
        cls,
        data: bytes,
        filename: str | None,
        mime_type: str,
        *,
        limits: ModelLimits = DEFAULT_LIMITS,
    ) -> "DiagnosticAttachment":
        """Create a binary-only attachment.

        Raises:
            EmptyAttachmentError: If the data is empty.
            MissingMimeTypeError: If the MIME type is empty.
            AttachmentTooLargeError: If the data exceeds the size limit.
            TypeError: If the filename is neither a string nor None.
        """
        binary = BinaryPayload(data=data, mime_type=mime_type, filename=filename, limits=limits)
        return cls(binary=binary, limits=limits)

    @classmethod
    def with_text_and_binary(
        cls,
        text: str,
        data: bytes,
        filename: str | None,
        mime_type: str,
        *,
        limits: ModelLimits = DEFAULT_LIMITS,
    ) -> "DiagnosticAttachment":
        """Create an attachment carrying both payloads.

        Fails with the same errors as with_text() and with_binary().
        """
        binary = BinaryPayload(data=data, mime_type=mime_type, filename=filename, limits=limits)
        return cls(text=text, binary=binary, limits=limits)

    def is_equal(self, other: "DiagnosticAttachment | None") -> bool:
        """Structural comparison that never raises.

        Returns False for None and for anything that is not an attachment.
        """
        if not isinstance(other, DiagnosticAttachment):
            return False
        return self == other

    def to_wire(self) -> dict[str, Any]:
        """Encode as {text?, binary?: {data, filename, mimeType}}."""
        wire: dict[str, Any] = {}
        if self.text is not None:
            wire["text"] = self.text
        if self.binary is not None:
            wire["binary"] = self.binary.to_wire()
        return wire

    @classmethod
    def from_wire(
        cls, data: object, *, limits: ModelLimits = DEFAULT_LIMITS
    ) -> "DiagnosticAttachment":
        """Decode an attachment.

        Raises:
            WireFormatError: If the data is malformed. Validation errors
                (empty payloads, size) are raised as for the constructors.
        """
        if not isinstance(data, Mapping):
            raise WireFormatError(f"attachment must be an object, got {data!r}")
        binary = None
        if data.get("binary") is not None:
            binary = BinaryPayload.from_wire(data["binary"], limits=limits)
        return cls(text=data.get("text"), binary=binary, limits=limits)
