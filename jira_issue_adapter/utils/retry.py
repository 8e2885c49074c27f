"""Per-attempt deadlines with bounded linear backoff.

Jira's search endpoint slows down under load. Each attempt gets a short
deadline; when it expires the call is retried after sleeping for the new
attempt number in seconds (2, 3, 4, ...) until the retry budget runs out.
Only deadline expiry is retried. Anything else the operation raises goes
straight back to the caller.

Attempts never overlap. A timed-out attempt keeps running in its worker
thread (Python cannot interrupt a blocking call), so the next attempt only
starts once it has finished. Retry loops nested inside an attempt see that
attempt's cancellation event and stop starting new work once its deadline
has passed.
"""

import logging
import threading
import time
from collections.abc import Callable
from concurrent.futures import Future, ThreadPoolExecutor, wait
from concurrent.futures import TimeoutError as FutureTimeoutError
from contextvars import ContextVar, copy_context
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from ..errors import AttemptTimeout, TimeoutExceeded

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_RETRY_LIMIT = 10

# How often a waiting loop rechecks its cancellation event
POLL_INTERVAL_SECONDS = 0.05

Sleeper = Callable[[float], None]
DeadlineRunner = Callable[[Callable[[], T], float], T]

# Set inside an attempt's worker thread; fires when that attempt times out
_attempt_cancelled: ContextVar[threading.Event | None] = ContextVar(
    "attempt_cancelled", default=None
)


def cancellation_event() -> threading.Event | None:
    """Return the event that fires when the enclosing attempt times out."""
    return _attempt_cancelled.get()


@dataclass(frozen=True)
class RetryResult(Generic[T]):
    """Outcome of a retried call: either a value or the last timeout."""

    attempts: int
    timeout: float
    value: T | None = None
    error: AttemptTimeout | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> T:
        """Return the value, or raise TimeoutExceeded for a failed result."""
        if self.error is not None:
            raise TimeoutExceeded(self.attempts, self.timeout) from self.error
        return self.value  # type: ignore[return-value]


def run_with_deadline(operation: Callable[[], T], timeout: float) -> T:
    """Run ``operation`` and stop waiting for it after ``timeout`` seconds.

    The attempt runs in a worker thread with its own cancellation event,
    which is set when the deadline passes. The late attempt is left to
    finish; the AttemptTimeout carries its future as ``pending``.

    Raises:
        AttemptTimeout: If the operation is still running at the deadline
    """
    cancelled = threading.Event()
    context = copy_context()
    context.run(_attempt_cancelled.set, cancelled)

    executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="jira-attempt")
    future = executor.submit(context.run, operation)
    try:
        return future.result(timeout=timeout)
    except FutureTimeoutError:
        if future.done():
            # Finished at the deadline, or raised TimeoutError itself
            return future.result()
        cancelled.set()
        raise AttemptTimeout(timeout, future) from None
    finally:
        executor.shutdown(wait=False, cancel_futures=True)


def _wait_for(pending: "Future[Any] | None", cancelled: threading.Event | None) -> None:
    """Block until ``pending`` finishes, or until ``cancelled`` fires."""
    if pending is None:
        return
    if cancelled is None:
        wait([pending])
        return
    while not pending.done() and not cancelled.is_set():
        wait([pending], timeout=POLL_INTERVAL_SECONDS)


def _backoff(
    seconds: float, sleep: Sleeper | None, cancelled: threading.Event | None
) -> None:
    if sleep is not None:
        sleep(seconds)
    elif cancelled is not None:
        cancelled.wait(seconds)
    else:
        time.sleep(seconds)


def retry_on_timeout(
    operation: Callable[[], T],
    timeout: float,
    retry_limit: int = DEFAULT_RETRY_LIMIT,
    sleep: Sleeper | None = None,
    run: DeadlineRunner = run_with_deadline,
) -> RetryResult[T]:
    """Call ``operation`` under a deadline, retrying timed-out attempts.

    Args:
        operation: Zero-argument callable to run
        timeout: Deadline for each attempt, in seconds
        retry_limit: Total number of attempts allowed
        sleep: Backoff sleeper, replaced by a fake in tests. Defaults to a
            sleep that wakes early when the enclosing attempt is cancelled.
        run: Deadline runner, replaced by a fake in tests

    Returns:
        RetryResult holding the value, or the last AttemptTimeout once
        ``retry_limit`` attempts have all timed out or the enclosing
        attempt has been cancelled
    """
    cancelled = cancellation_event()
    attempt = 1
    last_timeout: AttemptTimeout | None = None

    while True:
        if cancelled is not None and cancelled.is_set():
            if last_timeout is not None:
                # Let the in-flight call end before the enclosing retry moves on
                _wait_for(last_timeout.pending, None)
            logger.debug(
                f"Enclosing attempt cancelled; stopping before attempt {attempt}"
            )
            return RetryResult(
                attempts=attempt - 1,
                timeout=timeout,
                error=last_timeout or AttemptTimeout(timeout),
            )

        try:
            value = run(operation, timeout)
        except AttemptTimeout as e:
            last_timeout = e
            attempt += 1
            if attempt > retry_limit:
                logger.error(
                    f"Attempt {attempt - 1} timed out after {timeout}s; "
                    f"retry budget of {retry_limit} exhausted"
                )
                return RetryResult(attempts=attempt - 1, timeout=timeout, error=e)

            logger.warning(
                f"Attempt {attempt - 1} timed out after {timeout}s; "
                f"retrying in {attempt}s"
            )
            _backoff(attempt, sleep, cancelled)
            _wait_for(e.pending, cancelled)
            continue

        return RetryResult(attempts=attempt, timeout=timeout, value=value)


def call_with_retry(
    operation: Callable[[], T],
    timeout: float,
    retry_limit: int = DEFAULT_RETRY_LIMIT,
    sleep: Sleeper | None = None,
    run: DeadlineRunner = run_with_deadline,
) -> T:
    """Like retry_on_timeout, but raise TimeoutExceeded instead of returning it."""
    return retry_on_timeout(operation, timeout, retry_limit, sleep, run).unwrap()
