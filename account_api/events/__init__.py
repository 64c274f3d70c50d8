# Events: in-process bus and the domain events it dispatches.

from account_api.events.bus import EventBus, HandleableEvent, event_bus
from account_api.events.user_events import UserLoggedIn, UserRegistered

__all__ = [
    "EventBus",
    "HandleableEvent",
    "UserLoggedIn",
    "UserRegistered",
    "event_bus",
]
