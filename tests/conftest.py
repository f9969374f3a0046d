"""
Shared fixtures for the obligations tests.

Provides a fake USAspending client whose responses can be held back per
fiscal year, and an executor that runs submitted work in the calling thread.
"""
import sys
import threading
import time
from concurrent.futures import Executor, Future
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))


class InlineExecutor(Executor):
    """Runs each submitted callable immediately in the caller's thread."""

    def submit(self, fn, *args, **kwargs):
        future = Future()
        try:
            future.set_result(fn(*args, **kwargs))
        except BaseException as exc:  # noqa: BLE001
            future.set_exception(exc)
        return future


class FakeClient:
    """Stands in for USASpendingClient.

    ``responses`` maps a fiscal year to either a payload or an exception
    instance to raise. Years listed in ``gated`` block until ``release(year)``.
    """

    def __init__(self, responses=None, gated=()):
        self.responses = dict(responses or {})
        self.calls = []
        self._gates = {year: threading.Event() for year in gated}
        self._lock = threading.Lock()

    def release(self, year):
        self._gates[year].set()

    def get_federal_obligations(self, fiscal_year):
        # The response is chosen when the call starts, not when its gate opens.
        with self._lock:
            self.calls.append(fiscal_year)
            response = self.responses.get(fiscal_year, {"results": []})
        gate = self._gates.get(fiscal_year)
        if gate is not None:
            assert gate.wait(timeout=5), f"gate for {fiscal_year} never released"
        if isinstance(response, BaseException):
            raise response
        return response


def wait_until(predicate, timeout=5.0):
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.01)
    return predicate()


def payload(*pairs):
    return {"results": [{"account_title": t, "obligated_amount": a} for t, a in pairs]}


SUPPORTED_YEARS = list(range(2019, 2026))


@pytest.fixture()
def inline_executor():
    return InlineExecutor()
