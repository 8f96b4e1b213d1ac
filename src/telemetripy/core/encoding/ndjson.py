"""NDJSON encoding for batches of event logs and attachments."""

import json
from collections.abc import Iterable, Iterator
from typing import Any

from telemetripy.core.attachments import DiagnosticAttachment
from telemetripy.core.errors import WireFormatError
from telemetripy.core.events import EventLog


def _encode(objects: Iterable[dict[str, Any]]) -> str:
    lines = [json.dumps(obj) for obj in objects]

    if not lines:
        return ""

    return "\n".join(lines) + "\n"


def _decode(text: str) -> Iterator[Any]:
    for lineno, line in enumerate(text.splitlines(), start=1):
        if not line.strip():
            continue
        try:
            yield json.loads(line)
        except json.JSONDecodeError as exc:
            raise WireFormatError(f"line {lineno} is not valid JSON: {exc.msg}") from exc


def encode_events(events: Iterable[EventLog]) -> str:
    """Encode event logs to newline-delimited JSON.

    Args:
        events: An iterable of EventLog objects.

    Returns:
        NDJSON string with one JSON object per line.
        Empty string if no events.
    """
    return _encode(event.to_wire() for event in events)


def decode_events(text: str) -> list[EventLog]:
    """Decode newline-delimited JSON produced by encode_events.

    Blank lines are ignored.

    Raises:
        WireFormatError: If a line is not valid JSON or not an event log.
    """
    return [EventLog.from_wire(obj) for obj in _decode(text)]


def encode_attachments(attachments: Iterable[DiagnosticAttachment]) -> str:
    """Encode diagnostic attachments to newline-delimited JSON."""
    return _encode(attachment.to_wire() for attachment in attachments)


def decode_attachments(text: str) -> list[DiagnosticAttachment]:
    """Decode newline-delimited JSON produced by encode_attachments."""
    return [DiagnosticAttachment.from_wire(obj) for obj in _decode(text)]
