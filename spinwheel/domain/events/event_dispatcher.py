# spinwheel/domain/events/event_dispatcher.py
import logging
from enum import Enum
from typing import Callable, Dict, List, Type

from .event_types import DomainEvent

EventHandler = Callable[[DomainEvent], None]


class EventDispatcher:
    """
    Synchronous publish/subscribe for domain events.

    Handlers subscribe either to one event type (SpinEventType.TICK) or to an
    event class; class subscriptions also receive events of its subclasses.
    Type handlers run before class handlers, each group in registration order.
    """
    def __init__(self):
        self.logger = logging.getLogger("domain.events.dispatcher")
        self.handlers: Dict[Enum, List[EventHandler]] = {}
        self.class_handlers: Dict[type, List[EventHandler]] = {}

    def register(self, event_type: Enum, handler: EventHandler):
        self.handlers.setdefault(event_type, []).append(handler)
        self.logger.debug(f"Registered handler for event type: {event_type.name}")

    def register_for_class(self, event_class: Type[DomainEvent], handler: EventHandler):
        self.class_handlers.setdefault(event_class, []).append(handler)
        self.logger.debug(f"Registered handler for event class: {event_class.__name__}")

    def has_listeners(self, event_type: Enum, event_class: Type[DomainEvent] = DomainEvent) -> bool:
        """True if dispatching such an event would reach at least one handler."""
        if self.handlers.get(event_type):
            return True
        return any(handlers and issubclass(event_class, cls)
                   for cls, handlers in self.class_handlers.items())

    def dispatch(self, event: DomainEvent):
        """
        Deliver an event to every matching handler.

        A handler that raises is logged and skipped, the remaining handlers
        and the caller carry on.
        """
        matching = list(self.handlers.get(event.type, []))
        for cls, handlers in self.class_handlers.items():
            if isinstance(event, cls):
                matching.extend(handlers)

        for handler in matching:
            try:
                handler(event)
            except Exception as e:
                self.logger.error(f"Error in event handler for {event}: {str(e)}")

    def unregister(self, event_type: Enum, handler: EventHandler) -> bool:
        """Returns False if the handler was not registered for event_type."""
        return self._remove(self.handlers, event_type, handler)

    def unregister_for_class(self, event_class: Type[DomainEvent], handler: EventHandler) -> bool:
        """Returns False if the handler was not registered for event_class."""
        return self._remove(self.class_handlers, event_class, handler)

    def _remove(self, registry: Dict, key, handler: EventHandler) -> bool:
        handlers = registry.get(key, [])
        if handler not in handlers:
            return False
        handlers.remove(handler)
        self.logger.debug(f"Unregistered handler for {getattr(key, 'name', None) or key.__name__}")
        return True
