from .bus import Listener, NotificationBus, TopicBus

__all__ = ["Listener", "NotificationBus", "TopicBus"]
