"""Example: recording analytics events and building crash attachments.

Run with:
    python examples/crash_report_example.py

Prints the NDJSON an external dispatch pipeline would receive.
"""

import asyncio
import logging
from datetime import datetime, timezone

from telemetripy import DiagnosticAttachment, EventLog, TypedPropertyMap, track_event
from telemetripy.adapters.dispatch import InMemoryLogDispatch
from telemetripy.adapters.logging import EventLogHandler
from telemetripy.core.encoding import encode_attachments, encode_events

dispatch = InMemoryLogDispatch()

# Bridge application logging into event logs
logger = logging.getLogger("shop.checkout")
logger.setLevel(logging.INFO)
logger.addHandler(EventLogHandler(dispatch, include_attrs=["funcName"]))


async def main() -> None:
    props = TypedPropertyMap()
    props.set("screen", "cart").set("items", 3).set("gift", False)
    props.set_date("opened_at", datetime.now(timezone.utc))
    props.set("skus", ["A1", "B7"])

    await dispatch.dispatch(EventLog("checkout_started", props))
    await dispatch.dispatch(track_event("coupon_applied", code="SPRING", discount=0.15))

    events = [event async for event in dispatch.read()]
    print(encode_events(events), end="")

    attachments = [
        DiagnosticAttachment.with_text("last 20 log lines..."),
        DiagnosticAttachment.with_text_and_binary(
            "screen state", b"\x89PNG\r\n\x1a\n", None, "image/png"
        ),
    ]
    print(encode_attachments(attachments), end="")


if __name__ == "__main__":
    # The handler runs its own event loop, so log outside of main()
    logger.info("checkout finished", extra={"order_total": 42.5})
    asyncio.run(main())
