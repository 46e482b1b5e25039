"""Remote call guard: unbounded retry with capped backoff and cancellation."""

from .guard import (
    RemoteCallGuard,
    RetryCancelled,
    backoff_delay,
    parse_payload,
    unlimited_retry,
)

__all__ = [
    "RemoteCallGuard",
    "RetryCancelled",
    "backoff_delay",
    "parse_payload",
    "unlimited_retry",
]
