"""
Retry-until-success wrapper for remote calls.

The upstream video API is flaky but eventually recovers, so a remote call is
never reported as failed to the pipeline: it is retried until it returns a
well-formed payload. Retries back off exponentially up to a ceiling, and
the wait happens on a threading.Event so a shutdown request interrupts it.
"""

import json
import threading
from typing import Any, Callable, Optional, TypeVar, Union

from vodsync.logger import setup_logging

logger = setup_logging(logger_name="remote_guard")

T = TypeVar("T")

# 2**16 * base_delay is already far above any sensible ceiling
MAX_BACKOFF_EXPONENT = 16


class RetryCancelled(BaseException):
    """
    Raised when the guard is asked to stop while a call is still failing.

    Derives from BaseException (like asyncio.CancelledError) so that the
    per-item `except Exception` handlers of the pipeline let it through.
    """


def parse_payload(payload: Union[str, bytes]) -> Any:
    """Parse a raw text payload into loosely-typed JSON values."""
    return json.loads(payload)


def backoff_delay(attempt: int, base_delay: float, max_delay: float) -> float:
    """Delay before retry number `attempt` (0-based): base * 2**attempt, capped."""
    return min(base_delay * (2 ** min(attempt, MAX_BACKOFF_EXPONENT)), max_delay)


def unlimited_retry(
    operation: Callable[[], Union[str, bytes]],
    decode: Callable[[Any], T] = lambda value: value,
    cancel_event: Optional[threading.Event] = None,
    base_delay: float = 1.0,
    max_delay: float = 60.0,
    description: str = "remote call",
) -> T:
    """
    Invoke `operation` until it succeeds, then parse and decode its payload.

    Any exception raised by the operation, the JSON parser, or the decoder
    counts as a failed attempt: it is logged and the call is retried.

    Args:
        operation: Zero-argument callable returning the raw text payload.
        decode: Turns the parsed JSON into a typed response.
        cancel_event: When set, stops retrying and raises RetryCancelled.
        base_delay: Delay before the first retry, in seconds.
        max_delay: Upper bound for the delay between retries.
        description: Label used in log messages.

    Returns:
        The decoded response of the first successful attempt.

    Raises:
        RetryCancelled: If cancel_event is set before a call succeeds.
    """
    if cancel_event is None:
        cancel_event = threading.Event()

    attempt = 0
    while True:
        if cancel_event.is_set():
            raise RetryCancelled(f"{description} cancelled after {attempt} retries")
        try:
            return decode(parse_payload(operation()))
        except Exception as e:
            delay = backoff_delay(attempt, base_delay, max_delay)
            attempt += 1
            logger.warning(
                f"{description} failed ({type(e).__name__}: {e}), "
                f"retry #{attempt} in {delay:.1f}s"
            )
        if cancel_event.wait(delay):
            raise RetryCancelled(f"{description} cancelled after {attempt} retries")


class RemoteCallGuard:
    """
    unlimited_retry bound to one cancellation event and backoff policy.

    Usage:
        guard = RemoteCallGuard(cancel_event, base_delay=1, max_delay=60)
        stat = guard(lambda: store.file_stat(title, label), decode_file_response)
    """

    def __init__(
        self,
        cancel_event: Optional[threading.Event] = None,
        base_delay: float = 1.0,
        max_delay: float = 60.0,
    ):
        self.cancel_event = cancel_event or threading.Event()
        self.base_delay = base_delay
        self.max_delay = max_delay

    @classmethod
    def from_config(cls, config, cancel_event: Optional[threading.Event] = None):
        return cls(
            cancel_event=cancel_event,
            base_delay=config.retry_base_delay,
            max_delay=config.retry_max_delay,
        )

    def __call__(
        self,
        operation: Callable[[], Union[str, bytes]],
        decode: Callable[[Any], T] = lambda value: value,
        description: str = "remote call",
    ) -> T:
        return unlimited_retry(
            operation,
            decode=decode,
            cancel_event=self.cancel_event,
            base_delay=self.base_delay,
            max_delay=self.max_delay,
            description=description,
        )
