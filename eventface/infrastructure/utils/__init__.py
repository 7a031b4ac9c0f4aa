from .retry import backoff_delay, retry_with_backoff
from .scheduler import AsyncioScheduler, Scheduler

__all__ = [
    "AsyncioScheduler",
    "Scheduler",
    "backoff_delay",
    "retry_with_backoff",
]
