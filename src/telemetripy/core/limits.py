"""Size and count limits applied when building telemetry models."""

from dataclasses import dataclass, fields

DEFAULT_MAX_KEY_LENGTH = 125
DEFAULT_MAX_PROPERTIES = 20
DEFAULT_MAX_PAYLOAD_BYTES = 64 * 1024
DEFAULT_MAX_EVENT_NAME_LENGTH = 256
DEFAULT_MAX_ATTACHMENT_BYTES = 7 * 1024 * 1024


@dataclass(frozen=True)
class ModelLimits:
    """Limits enforced by property maps, event logs and attachments.

    Attributes:
        max_key_length: Maximum property name length in characters.
        max_properties: Maximum number of entries in a property map.
        max_payload_bytes: Maximum estimated size of a committed property map.
        max_event_name_length: Maximum event name length in characters.
        max_attachment_bytes: Maximum size of each attachment payload.
    """

    max_key_length: int = DEFAULT_MAX_KEY_LENGTH
    max_properties: int = DEFAULT_MAX_PROPERTIES
    max_payload_bytes: int = DEFAULT_MAX_PAYLOAD_BYTES
    max_event_name_length: int = DEFAULT_MAX_EVENT_NAME_LENGTH
    max_attachment_bytes: int = DEFAULT_MAX_ATTACHMENT_BYTES

    def __post_init__(self) -> None:
        for f in fields(self):
            value = getattr(self, f.name)
            if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
                raise ValueError(f"{f.name} must be a positive integer, got {value!r}")


DEFAULT_LIMITS = ModelLimits()


def utf8_length(text: str, error: type[Exception]) -> int:
    """Size of text in UTF-8 bytes.

    Raises:
        error: If the text holds lone surrogates and has no UTF-8 form.
    """
    try:
        return len(text.encode("utf-8"))
    except UnicodeEncodeError as exc:
        raise error(f"{text[:20]!r} is not valid unicode text") from exc
