"""Task update events."""

from .hub import EventHub, EventKind, SubscriberGroup, event_for_category

__all__ = [
    "EventHub",
    "EventKind",
    "SubscriberGroup",
    "event_for_category",
]
