# -*- coding: utf-8 -*-
"""Tests for the background remote-call runner."""

from __future__ import annotations

import threading
import time

import pytest

from sambalessons.core.remote_runner import RemoteRunner


def test_submit_returns_future_with_result() -> None:
    runner = RemoteRunner(max_workers=2)
    future = runner.submit("one", lambda: 1)
    runner.wait_for_all()
    assert future.result() == 1
    runner.shutdown()


def test_caller_not_blocked_during_call() -> None:
    runner = RemoteRunner(max_workers=1)

    def _slow():
        time.sleep(0.1)
        return "ok"

    start = time.perf_counter()
    runner.submit("slow", _slow)
    elapsed = time.perf_counter() - start
    assert elapsed < 0.05
    runner.wait_for_all()
    runner.shutdown()


def test_success_callback_receives_result() -> None:
    runner = RemoteRunner(max_workers=1)
    results: list[int] = []
    failures: list[Exception] = []
    runner.submit("calc", lambda: 41 + 1, on_success=results.append, on_failure=failures.append)
    runner.wait_for_all()
    assert results == [42]
    assert failures == []
    runner.shutdown()


def test_failure_callback_receives_exception_and_future_carries_it() -> None:
    runner = RemoteRunner(max_workers=1)
    results: list[object] = []
    failures: list[Exception] = []

    def _boom():
        raise RuntimeError("offline")

    future = runner.submit("boom", _boom, on_success=results.append, on_failure=failures.append)
    runner.wait_for_all()
    assert results == []
    assert len(failures) == 1
    assert str(failures[0]) == "offline"
    with pytest.raises(RuntimeError):
        future.result()
    runner.shutdown()


def test_continuations_go_through_dispatcher() -> None:
    posted: list[object] = []

    def _dispatcher(callback):
        posted.append(callback)

    runner = RemoteRunner(max_workers=1, dispatcher=_dispatcher)
    results: list[int] = []
    runner.submit("value", lambda: 7, on_success=results.append)
    runner.wait_for_all()
    assert results == []
    assert len(posted) == 1

    posted[0]()
    assert results == [7]
    runner.shutdown()


def test_deferred_failure_continuation_keeps_exception() -> None:
    posted: list[object] = []
    runner = RemoteRunner(max_workers=1, dispatcher=posted.append)
    failures: list[Exception] = []

    def _boom():
        raise ValueError("late")

    runner.submit("boom", _boom, on_failure=failures.append)
    runner.wait_for_all()
    posted[0]()
    assert isinstance(failures[0], ValueError)
    runner.shutdown()


def test_calls_run_in_parallel_up_to_max_workers() -> None:
    runner = RemoteRunner(max_workers=2)
    barrier = threading.Barrier(2)

    def _task():
        barrier.wait(timeout=1)
        time.sleep(0.05)
        return True

    first = runner.submit("a", _task)
    second = runner.submit("b", _task)
    runner.wait_for_all()
    # Both calls can only pass the barrier if they ran at the same time
    assert first.result() is True
    assert second.result() is True
    runner.shutdown()


def test_wait_for_all_drains_follow_up_calls() -> None:
    runner = RemoteRunner(max_workers=1)
    results: list[str] = []

    def _first_done(_value):
        runner.submit("second", lambda: "second", on_success=results.append)

    runner.submit("first", lambda: "first", on_success=_first_done)
    runner.wait_for_all(timeout=2)
    assert results == ["second"]
    runner.shutdown()


def test_submit_after_shutdown_raises() -> None:
    runner = RemoteRunner(max_workers=1)
    runner.shutdown()
    with pytest.raises(RuntimeError):
        runner.submit("late", lambda: None)
