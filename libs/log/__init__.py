from .logconf import configure_logging
from .tracing import envelope, mk_trace, new_id, now_ms

__all__ = ["configure_logging", "envelope", "mk_trace", "new_id", "now_ms"]
