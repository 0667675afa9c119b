import time

from database import QueryError
from task_runner import TaskRunner


def _wait_for(runner, timeout=5.0):
    deadline = time.time() + timeout
    out = []
    while time.time() < deadline:
        out.extend(runner.drain())
        if out and runner.in_flight() == 0:
            return out
        time.sleep(0.01)
    return out


def test_synchronous_success_goes_through_queue():
    runner = TaskRunner(synchronous=True)
    runner.submit("t", lambda: 41, lambda r: ("ok", r + 1), lambda e: ("err", e))
    assert runner.in_flight() == 0
    assert runner.drain() == [("ok", 42)]
    assert runner.drain() == []


def test_failures_become_messages():
    runner = TaskRunner(synchronous=True)

    def bad_query():
        raise QueryError("no such column: x")

    def crash():
        raise RuntimeError()

    runner.submit("q", bad_query, lambda r: r, lambda e: ("err", e))
    runner.submit("c", crash, lambda r: r, lambda e: ("err", e))
    assert runner.drain() == [("err", "no such column: x"), ("err", "RuntimeError")]


def test_threaded_tasks_post_exactly_one_message_each():
    runner = TaskRunner()
    for i in range(5):
        runner.submit(f"t{i}", lambda i=i: i, lambda r: r, lambda e: e)
    results = _wait_for(runner)
    while len(results) < 5:
        results.extend(_wait_for(runner))
    assert sorted(results) == [0, 1, 2, 3, 4]
    assert runner.in_flight() == 0


def test_drain_respects_max_items():
    runner = TaskRunner(synchronous=True)
    for i in range(3):
        runner.submit("t", lambda i=i: i, lambda r: r, lambda e: e)
    assert runner.drain(max_items=2) == [0, 1]
    assert runner.drain() == [2]
