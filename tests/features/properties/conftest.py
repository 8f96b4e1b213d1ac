"""BDD step definitions for typed property map features."""

from dataclasses import dataclass, field

import pytest
from pytest_bdd import given, parsers, then, when

import telemetripy.core.errors as errors
from telemetripy.core.events import EventLog
from telemetripy.core.properties import PropertyValue, TypedPropertyMap


@dataclass
class PropertyScenarioContext:
    """State shared between steps of one scenario."""

    properties: TypedPropertyMap = field(default_factory=TypedPropertyMap)
    event: EventLog | None = None
    error: Exception | None = None


@pytest.fixture
def ctx() -> PropertyScenarioContext:
    """Fresh scenario context for each test."""
    return PropertyScenarioContext()


def _attempt(ctx: PropertyScenarioContext, name: str, value: object) -> None:
    try:
        ctx.properties.set(name, value)
    except errors.TelemetryModelError as exc:
        ctx.error = exc


@given("an empty property map")
def step_empty_map(ctx: PropertyScenarioContext) -> None:
    ctx.properties = TypedPropertyMap()


@given(parsers.parse("a property map with {count:d} properties"))
def step_filled_map(ctx: PropertyScenarioContext, count: int) -> None:
    ctx.properties = TypedPropertyMap({f"p{i}": i for i in range(count)})


@when(parsers.parse("I set a property with a {length:d} character name"))
def step_set_long_name(ctx: PropertyScenarioContext, length: int) -> None:
    _attempt(ctx, "k" * length, "value")


@when(parsers.parse('I set the property "{name}" to "{value}"'))
def step_set_property(ctx: PropertyScenarioContext, name: str, value: str) -> None:
    _attempt(ctx, name, value)


@when(parsers.parse('I record the event "{name}"'))
def step_record_event(ctx: PropertyScenarioContext, name: str) -> None:
    ctx.event = EventLog(name, ctx.properties)  # type: ignore[arg-type]


@then(parsers.parse("setting fails with {error_name}"))
def step_fails_with(ctx: PropertyScenarioContext, error_name: str) -> None:
    assert isinstance(ctx.error, getattr(errors, error_name))


@then(parsers.re(r"the map holds (?P<count>\d+) propert(y|ies)"), converters={"count": int})
def step_map_holds(ctx: PropertyScenarioContext, count: int) -> None:
    assert len(ctx.properties) == count


@then(parsers.parse('the wire names are "{names}"'))
def step_wire_names(ctx: PropertyScenarioContext, names: str) -> None:
    assert [item["name"] for item in ctx.properties.to_wire()] == names.split(",")


@then(parsers.parse('the wire value of "{name}" is "{value}"'))
def step_wire_value(ctx: PropertyScenarioContext, name: str, value: str) -> None:
    wire = {item["name"]: item["value"] for item in ctx.properties.to_wire()}
    assert wire[name] == value


@then(parsers.parse('the event property "{name}" is "{value}"'))
def step_event_property(ctx: PropertyScenarioContext, name: str, value: str) -> None:
    assert ctx.event is not None
    assert ctx.event.properties[name] == PropertyValue.of(value)
