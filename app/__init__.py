from .bus import EventBus

event_bus = EventBus()
