"""Backoff and deadline helpers for polling long-running operations."""

import itertools
import threading
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterator, List, Optional

from rich.progress import Progress, SpinnerColumn, TextColumn, TimeElapsedColumn

from artifact_import.common import POLL_BACKOFF_MULTIPLIER, POLL_INITIAL_BACKOFF_SECONDS, POLL_MAX_BACKOFF_SECONDS
from artifact_import.utils.logging_utils import _console, get_logger


class RetryTimeout(Exception):
    """Raised when the deadline passes before the check completes."""

    def __init__(self, attempts: int, elapsed: float):
        super().__init__(f"not completed after {attempts} attempts in {elapsed:.0f} seconds")
        self.attempts = attempts
        self.elapsed = elapsed


class RetryCancelled(Exception):
    """Raised when the cancellation event is set while waiting."""

    def __init__(self, attempts: int):
        super().__init__(f"cancelled after {attempts} attempts")
        self.attempts = attempts


@dataclass(frozen=True)
class Backoff:
    """Exponential backoff: ``initial``, then multiplied each step, never above ``maximum``."""

    initial: float = POLL_INITIAL_BACKOFF_SECONDS
    maximum: float = POLL_MAX_BACKOFF_SECONDS
    multiplier: float = POLL_BACKOFF_MULTIPLIER

    def intervals(self) -> Iterator[float]:
        delay = min(self.initial, self.maximum)
        while True:
            yield delay
            delay = min(delay * self.multiplier, self.maximum)

    def first(self, count: int) -> List[float]:
        return list(itertools.islice(self.intervals(), count))


def wait_with_backoff(
    description: str,
    check_function: Callable[[], Dict[str, Any]],
    timeout_seconds: float,
    backoff: Optional[Backoff] = None,
    cancel_event: Optional[threading.Event] = None,
    clock: Callable[[], float] = time.monotonic,
    sleep: Optional[Callable[[float], bool]] = None,
) -> Any:
    """
    Call ``check_function`` until it reports completion, backing off between attempts.

    Args:
        description: Base description for the progress display
        check_function: Function that returns:
            - Dict: {"completed": bool, "result": Any, "progress": int, "description": str}
            Exceptions raised by it are terminal and propagate unchanged.
        timeout_seconds: Overall deadline, measured with ``clock``
        backoff: Interval schedule between attempts
        cancel_event: Event that aborts the wait when set
        clock: Monotonic time source
        sleep: Waits for the given seconds and returns True if cancelled while waiting.
            Defaults to waiting on ``cancel_event``, so a cancellation wakes the loop at once.

    Returns:
        Any: The "result" value of the completing check

    Raises:
        RetryTimeout: If the deadline passes first
        RetryCancelled: If ``cancel_event`` is set
    """
    logger = get_logger()
    logger.info(description)

    backoff = backoff or Backoff()
    event = cancel_event or threading.Event()
    sleep = sleep or event.wait
    intervals = backoff.intervals()

    start_time = clock()
    attempts = 0

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        TimeElapsedColumn(),
        console=_console,
        transient=True,
    ) as progress:
        task = progress.add_task(description, total=None)

        while True:
            if event.is_set():
                raise RetryCancelled(attempts)

            attempts += 1
            result = check_function()

            if result.get("completed", False):
                return result.get("result")

            progress_percent = result.get("progress", 0)
            progress_desc = result.get("description", description)
            display_desc = f"{progress_desc} ({progress_percent}%)" if progress_percent > 0 else progress_desc
            progress.update(task, description=display_desc)

            remaining = timeout_seconds - (clock() - start_time)
            if remaining <= 0:
                raise RetryTimeout(attempts, clock() - start_time)

            delay = min(next(intervals), remaining)
            logger.debug(f"{progress_desc}: next check in {delay:g}s")
            if sleep(delay) or event.is_set():
                raise RetryCancelled(attempts)

            if clock() - start_time >= timeout_seconds:
                raise RetryTimeout(attempts, clock() - start_time)
