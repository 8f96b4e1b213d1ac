"""BDD step definitions for diagnostic attachment features."""

from dataclasses import dataclass

import pytest
from pytest_bdd import given, parsers, then, when

import telemetripy.core.errors as errors
from telemetripy.core.attachments import DiagnosticAttachment

MB = 1024 * 1024


@dataclass
class AttachmentScenarioContext:
    """State shared between steps of one scenario."""

    attachment: DiagnosticAttachment | None = None
    other: DiagnosticAttachment | None = None
    error: Exception | None = None


@pytest.fixture
def ctx() -> AttachmentScenarioContext:
    """Fresh scenario context for each test."""
    return AttachmentScenarioContext()


def _attempt(ctx: AttachmentScenarioContext, build) -> None:
    try:
        ctx.attachment = build()
    except errors.TelemetryModelError as exc:
        ctx.error = exc


@when(parsers.parse('I attach the text "{text}"'))
def step_attach_text(ctx: AttachmentScenarioContext, text: str) -> None:
    _attempt(ctx, lambda: DiagnosticAttachment.with_text(text))


@when(parsers.parse('I attach the text ""'))
def step_attach_empty_text(ctx: AttachmentScenarioContext) -> None:
    _attempt(ctx, lambda: DiagnosticAttachment.with_text(""))


@when(
    parsers.re(
        r'I attach (?P<size>\d+) MiB of data as "(?P<filename>[^"]*)" '
        r'with type "(?P<mime_type>[^"]*)"'
    ),
    converters={"size": int},
)
def step_attach_binary(
    ctx: AttachmentScenarioContext, size: int, filename: str, mime_type: str
) -> None:
    data = b"\x00" * (size * MB)
    _attempt(ctx, lambda: DiagnosticAttachment.with_binary(data, filename, mime_type))


@given(
    parsers.parse(
        'an attachment with text "{text}" and data "{data}" as "{filename}" with type "{mime_type}"'
    )
)
def step_given_attachment(
    ctx: AttachmentScenarioContext, text: str, data: str, filename: str, mime_type: str
) -> None:
    ctx.attachment = DiagnosticAttachment.with_text_and_binary(
        text, data.encode(), filename, mime_type
    )


@given(
    parsers.parse(
        'another attachment with text "{text}" and data "{data}" as "{filename}" '
        'with type "{mime_type}"'
    )
)
def step_given_other(
    ctx: AttachmentScenarioContext, text: str, data: str, filename: str, mime_type: str
) -> None:
    ctx.other = DiagnosticAttachment.with_text_and_binary(
        text, data.encode(), filename, mime_type
    )


@then(parsers.parse('the attachment text is "{text}"'))
def step_text_is(ctx: AttachmentScenarioContext, text: str) -> None:
    assert ctx.error is None
    assert ctx.attachment is not None
    assert ctx.attachment.text == text


@then("the attachment has no binary payload")
def step_no_binary(ctx: AttachmentScenarioContext) -> None:
    assert ctx.attachment is not None
    assert ctx.attachment.binary is None


@then(parsers.parse('the attachment binary filename is "{filename}"'))
def step_binary_filename(ctx: AttachmentScenarioContext, filename: str) -> None:
    assert ctx.error is None
    assert ctx.attachment is not None
    assert ctx.attachment.binary is not None
    assert ctx.attachment.binary.filename == filename


@then(parsers.parse("attaching fails with {error_name}"))
def step_fails_with(ctx: AttachmentScenarioContext, error_name: str) -> None:
    assert ctx.attachment is None
    assert isinstance(ctx.error, getattr(errors, error_name))


@then("the attachments are equal")
def step_equal(ctx: AttachmentScenarioContext) -> None:
    assert ctx.attachment is not None
    assert ctx.attachment.is_equal(ctx.other)


@then("the attachments are not equal")
def step_not_equal(ctx: AttachmentScenarioContext) -> None:
    assert ctx.attachment is not None
    assert not ctx.attachment.is_equal(ctx.other)


@then("the attachment is not equal to None")
def step_not_equal_none(ctx: AttachmentScenarioContext) -> None:
    assert ctx.attachment is not None
    assert ctx.attachment.is_equal(None) is False
