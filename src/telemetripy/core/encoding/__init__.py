"""Wire encodings for telemetry models."""

from telemetripy.core.encoding.ndjson import (
    decode_attachments,
    decode_events,
    encode_attachments,
    encode_events,
)

__all__ = [
    "decode_attachments",
    "decode_events",
    "encode_attachments",
    "encode_events",
]
