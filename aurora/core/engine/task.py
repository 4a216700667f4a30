"""
Pipeline task — run a job on a worker thread and wait for it with a deadline.

The worker publishes exactly one outcome (result or exception) through a
``concurrent.futures.Future``.  The waiter races that future against a
deadline and an optional cancellation event; whichever settles first
wins.

Cancellation only stops the WAITING.  In-flight git clones and go
commands cannot be interrupted, so the worker keeps running until it
finishes (or fails and rolls back) on its own.  The thread is not a
daemon: the interpreter waits for it before exiting.
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable
from concurrent.futures import Future, wait
from typing import Generic, TypeVar

from aurora.core.services.scaffold.errors import Cancelled, TimedOut

logger = logging.getLogger(__name__)

T = TypeVar("T")

_POLL_INTERVAL = 0.1


class PipelineTask(Generic[T]):
    """Handle to a job running on its own worker thread."""

    def __init__(self, fn: Callable[[], T], *, name: str = "aurora-worker"):
        self._fn = fn
        self._future: Future[T] = Future()
        self._thread = threading.Thread(target=self._run, name=name)

    @classmethod
    def start(cls, fn: Callable[[], T], *, name: str = "aurora-worker") -> PipelineTask[T]:
        task = cls(fn, name=name)
        task._thread.start()
        return task

    def _run(self) -> None:
        if not self._future.set_running_or_notify_cancel():
            return
        try:
            result = self._fn()
        except BaseException as e:
            self._future.set_exception(e)
        else:
            self._future.set_result(result)

    @property
    def future(self) -> Future[T]:
        return self._future

    def done(self) -> bool:
        return self._future.done()

    def join(self, timeout: float | None = None) -> bool:
        """Block until the worker thread exits; True if it has."""
        self._thread.join(timeout)
        return not self._thread.is_alive()

    def wait(
        self,
        timeout: float | None = None,
        cancel_event: threading.Event | None = None,
    ) -> T:
        """Wait for the worker's outcome.

        Returns the worker's result or re-raises its exception.

        Raises:
            TimedOut: ``timeout`` seconds elapsed first.
            Cancelled: ``cancel_event`` was set, or the wait was interrupted.
        """
        deadline = time.monotonic() + timeout if timeout is not None else None

        try:
            while True:
                if cancel_event is not None and cancel_event.is_set():
                    raise Cancelled("Project creation was cancelled")

                step = _POLL_INTERVAL
                if deadline is not None:
                    remaining = deadline - time.monotonic()
                    if remaining <= 0:
                        raise TimedOut(f"Project creation timed out after {timeout}s")
                    step = min(step, remaining)

                finished, _ = wait([self._future], timeout=step)
                if finished:
                    return self._future.result()
        except KeyboardInterrupt:
            raise Cancelled("Project creation was interrupted") from None
        finally:
            if not self._future.done():
                logger.info("Stopped waiting; worker %s keeps running", self._thread.name)
