"""
Base Domain Classes

Foundational building blocks used across the bounded contexts:
- ValueObject: Immutable objects compared by value
- EventRecorder: Mixin letting an aggregate root (a Django model here)
  collect domain events until its transaction commits
- DomainEvent: Events that represent something that happened
"""

from abc import ABC
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, List
from uuid import UUID, uuid4


@dataclass(frozen=True)
class ValueObject(ABC):
    """
    Base class for value objects

    Value objects are immutable and have no identity.
    Two value objects are equal if all their attributes are equal.
    """
    pass


class EventRecorder:
    """
    Mixin for aggregate roots

    Aggregates are the consistency boundaries in DDD. They collect domain
    events that will be published after a successful transaction. Events are
    kept in the instance ``__dict__`` so the mixin works for Django models,
    whose ``__init__`` we do not control.
    """

    def add_event(self, event: 'DomainEvent'):
        """Add a domain event to be published"""
        self.__dict__.setdefault('_pending_events', []).append(event)

    def clear_events(self):
        """Clear all collected events (called after publishing)"""
        self.__dict__.pop('_pending_events', None)

    @property
    def events(self) -> List['DomainEvent']:
        """Get copy of collected events"""
        return list(self.__dict__.get('_pending_events', []))


@dataclass
class DomainEvent:
    """
    Base class for domain events

    Domain events represent something that happened in the domain.
    They are used to communicate between bounded contexts.
    """
    event_id: UUID = field(default_factory=uuid4)
    occurred_at: datetime = field(default_factory=datetime.now)
    aggregate_id: Any = None

    def to_dict(self) -> dict:
        """Convert event to dictionary for serialization"""
        return {
            'event_id': str(self.event_id),
            'event_type': self.__class__.__name__,
            'occurred_at': self.occurred_at.isoformat(),
            'aggregate_id': str(self.aggregate_id) if self.aggregate_id is not None else None,
        }
