# -*- coding: utf-8 -*-
"""Background execution of blocking remote calls with marshaled continuations."""

from __future__ import annotations

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor, wait
from typing import Any, Callable


logger = logging.getLogger(__name__)


TaskCallable = Callable[[], Any]
Dispatcher = Callable[[Callable[[], None]], None]
SuccessCallback = Callable[[Any], None]
FailureCallback = Callable[[Exception], None]


def run_inline(callback: Callable[[], None]) -> None:
    """Dispatcher that runs continuations on whichever thread finished the call."""
    callback()


class RemoteRunner:
    """Run remote calls on a worker pool; deliver results through a dispatcher.

    The dispatcher decides which thread continuations run on. The GUI passes
    one that posts to the Qt event loop; tests and the CLI run inline.
    """

    def __init__(self, max_workers: int = 2, dispatcher: Dispatcher | None = None) -> None:
        self.max_workers = int(max_workers)
        self.dispatcher: Dispatcher = dispatcher or run_inline
        self._executor = ThreadPoolExecutor(max_workers=self.max_workers, thread_name_prefix="sambalessons")
        self._futures: list[Future] = []
        self._lock = threading.Lock()
        self._closed = False

    def submit(
        self,
        name: str,
        func: TaskCallable,
        on_success: SuccessCallback | None = None,
        on_failure: FailureCallback | None = None,
    ) -> Future:
        """Run `func` in the background.

        Exactly one of the callbacks runs afterwards, through the dispatcher.
        The returned future completes after that callback has been handed to
        the dispatcher and carries the call's result or exception.
        """
        if self._closed:
            raise RuntimeError("RemoteRunner is shut down")
        future = self._executor.submit(self._run, name, func, on_success, on_failure)
        with self._lock:
            self._futures = [f for f in self._futures if not f.done()]
            self._futures.append(future)
        return future

    def _run(
        self,
        name: str,
        func: TaskCallable,
        on_success: SuccessCallback | None,
        on_failure: FailureCallback | None,
    ) -> Any:
        try:
            result = func()
        except Exception as exc:
            logger.warning("Remote call %s failed: %s", name, exc)
            if on_failure is not None:
                self.dispatcher(lambda error=exc: on_failure(error))
            raise
        logger.debug("Remote call %s finished", name)
        if on_success is not None:
            self.dispatcher(lambda value=result: on_success(value))
        return result

    def wait_for_all(self, timeout: float | None = None) -> None:
        # Continuations may submit follow-up calls, so drain until quiet.
        while True:
            futures = self._snapshot_pending()
            if not futures:
                return
            _, not_done = wait(futures, timeout=timeout)
            if not_done:
                return

    def shutdown(self, wait_for_tasks: bool = True) -> None:
        self._closed = True
        self._executor.shutdown(wait=wait_for_tasks, cancel_futures=not wait_for_tasks)

    def _snapshot_pending(self) -> list[Future]:
        with self._lock:
            return [f for f in self._futures if not f.done()]
