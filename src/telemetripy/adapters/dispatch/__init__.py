"""Dispatch adapters implementing LogDispatchPort."""

from telemetripy.adapters.dispatch.in_memory import InMemoryLogDispatch

__all__ = ["InMemoryLogDispatch"]
