"""Tests for the in-process message bus."""

from __future__ import annotations

from dataclasses import dataclass

import pytest

from shared.application.message_bus import MessageBus
from shared.domain.base import DomainEvent
from shared.domain.exceptions import InvalidStateError


@dataclass
class Ping:
    value: int


@dataclass(kw_only=True)
class Pinged(DomainEvent):
    value: int


def test_command_routes_to_single_handler():
    bus = MessageBus()
    bus.register_command_handler(Ping, lambda command: command.value * 2)

    assert bus.handle_command(Ping(21)) == 42
    with pytest.raises(ValueError):
        bus.register_command_handler(Ping, lambda command: None)


def test_unknown_command_raises_lookup_error():
    with pytest.raises(LookupError):
        MessageBus().handle_command(Ping(1))


def test_engine_errors_propagate_from_handlers():
    bus = MessageBus()

    def reject(command):
        raise InvalidStateError()

    bus.register_command_handler(Ping, reject)

    with pytest.raises(InvalidStateError):
        bus.handle_command(Ping(1))


def test_failing_event_handler_does_not_stop_others():
    bus = MessageBus()
    seen = []

    def broken(event):
        raise RuntimeError("handler bug")

    bus.register_event_handler(Pinged, broken)
    bus.register_event_handler(Pinged, lambda event: seen.append(event.value))
    bus.publish_events([Pinged(value=7)])

    assert seen == [7]
