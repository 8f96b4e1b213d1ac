"""Shared test fixtures for all test modules."""

from datetime import datetime, timezone

import pytest

from telemetripy.core.limits import ModelLimits

MB = 1024 * 1024


@pytest.fixture
def small_limits() -> ModelLimits:
    """Tight limits so size and count failures are cheap to trigger."""
    return ModelLimits(
        max_key_length=8,
        max_properties=3,
        max_payload_bytes=32,
        max_event_name_length=16,
        max_attachment_bytes=64,
    )


@pytest.fixture
def launch_time() -> datetime:
    """A fixed timezone-aware timestamp."""
    return datetime(2024, 3, 1, 12, 30, 15, 250000, tzinfo=timezone.utc)


@pytest.fixture
def png_bytes() -> bytes:
    """A small PNG-looking payload."""
    return b"\x89PNG\r\n\x1a\n" + bytes(range(32))


@pytest.fixture
def megabytes():
    """Factory fixture returning a payload of the given size in MiB."""

    def _payload(size: int) -> bytes:
        return b"\x00" * (size * MB)

    return _payload
