"""Test doubles shared by several test modules"""

from concurrent.futures import Executor, Future
from typing import Any, Callable


class ManualExecutor(Executor):
    """
    Holds on to submitted jobs until `run_pending()` is called.

    The futures are marked as running on submission: they behave like a search that is already in flight
    (cannot be cancelled anymore).
    """

    def __init__(self) -> None:
        self.jobs: list[tuple[Future, Callable[..., Any], tuple, dict]] = []

    def submit(self, fn: Callable[..., Any], /, *args: Any, **kwargs: Any) -> Future:
        future: Future = Future()
        future.set_running_or_notify_cancel()
        self.jobs.append((future, fn, args, kwargs))
        return future

    def run_pending(self) -> None:
        jobs, self.jobs = self.jobs, []
        for future, fn, args, kwargs in jobs:
            try:
                future.set_result(fn(*args, **kwargs))
            except Exception as error:
                future.set_exception(error)
