# File: trainset/infrastructure/messaging.py
"""
Messaging Infrastructure for Train Composition

This module implements in-process event-driven communication:
1. Event Types - Names of the domain events a train raises
2. Event Handlers - Callbacks reacting to published events
3. Event Bus - Synchronous publish/subscribe within the process
4. Console Notifications - Start/stop announcements for operators

Handlers never break publication: a failing handler is logged and the
remaining handlers still run.
"""

from abc import ABC, abstractmethod
from typing import Dict, List, Optional, TextIO
from enum import Enum
import logging
import sys

from ..domain.models import DomainEvent, TrainStartedEvent, TrainStoppedEvent


# ============================================================================
# EVENT TYPES
# ============================================================================

class EventType(str, Enum):
    """Domain event types"""
    TRAIN_STARTED = "train_started"
    TRAIN_STOPPED = "train_stopped"
    PART_ATTACHED = "part_attached"
    PART_DETACHED = "part_detached"

    @classmethod
    def of(cls, event: DomainEvent) -> 'EventType':
        """Resolve the event type of a domain event"""
        return cls(event.event_type)


# ============================================================================
# EVENT HANDLERS
# ============================================================================

class EventHandler(ABC):
    """Abstract base class for event handlers"""

    @abstractmethod
    def handle(self, event: DomainEvent) -> None:
        """Handle a domain event"""
        pass

    def can_handle(self, event: DomainEvent) -> bool:
        """Check if this handler can handle the event"""
        return True


class ConsoleNotificationHandler(EventHandler):
    """
    Announces train starts and stops on a text stream
    Other events are ignored
    """

    def __init__(self, stream: Optional[TextIO] = None):
        self._stream = stream

    @property
    def stream(self) -> TextIO:
        return self._stream or sys.stdout

    def can_handle(self, event: DomainEvent) -> bool:
        return isinstance(event, (TrainStartedEvent, TrainStoppedEvent))

    def handle(self, event: DomainEvent) -> None:
        if isinstance(event, TrainStartedEvent):
            message = f"Train {event.train_id}: we started!"
        else:
            message = f"Train {event.train_id}: we stopped"
        print(message, file=self.stream)


# ============================================================================
# EVENT BUS (In-memory)
# ============================================================================

class EventBus:
    """
    In-memory event bus for intra-process event publishing

    Implements publish/subscribe pattern within the same process.
    Useful for domain events that need to trigger side effects.
    """

    def __init__(self):
        self._subscribers: Dict[EventType, List[EventHandler]] = {}
        self._logger = logging.getLogger(self.__class__.__name__)

    def subscribe(self, event_type: EventType, handler: EventHandler) -> None:
        """Subscribe to events of a specific type"""
        if event_type not in self._subscribers:
            self._subscribers[event_type] = []

        if handler not in self._subscribers[event_type]:
            self._subscribers[event_type].append(handler)
            self._logger.debug(f"Subscribed {handler.__class__.__name__} to {event_type.value}")

    def subscribe_all(self, handler: EventHandler) -> None:
        """Subscribe a handler to every event type"""
        for event_type in EventType:
            self.subscribe(event_type, handler)

    def unsubscribe(self, event_type: EventType, handler: EventHandler) -> None:
        """Unsubscribe handler from events"""
        handlers = self._subscribers.get(event_type, [])
        if handler in handlers:
            handlers.remove(handler)
            self._logger.debug(f"Unsubscribed {handler.__class__.__name__} from {event_type.value}")

    def publish(self, event: DomainEvent) -> int:
        """
        Publish an event to all subscribers
        Returns: number of handlers that processed the event
        """
        event_type = EventType.of(event)
        self._logger.info(f"Publishing event: {event_type.value} (ID: {event.event_id})")

        handled = 0
        for handler in list(self._subscribers.get(event_type, [])):
            if not handler.can_handle(event):
                continue
            try:
                handler.handle(event)
                handled += 1
                self._logger.debug(f"Event handled by {handler.__class__.__name__}")
            except Exception as e:
                self._logger.error(
                    f"Error handling event {event_type.value} with {handler.__class__.__name__}: {e}"
                )
        return handled

    def publish_all(self, events: List[DomainEvent]) -> None:
        """Publish events in the order they were raised"""
        for event in events:
            self.publish(event)
