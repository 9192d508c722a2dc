"""Concurrent execution of independent store operations with a join barrier."""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

from flask import current_app, has_app_context

from muluparty.errors import AppError

from .config import get_setting

T = TypeVar("T")


@dataclass
class FanOutResult(Generic[T]):
    """Outcome of a fan-out: successful results plus unique failure messages."""

    results: list[T] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)

    @property
    def error_descriptor(self) -> str | None:
        """All failure messages joined by newlines, or None."""
        return "\n".join(self.errors) if self.errors else None

    @property
    def succeeded(self) -> bool:
        """Whether every sub-operation succeeded."""
        return not self.errors


def _bind_app_context(operation: Callable[[], T]) -> Callable[[], T]:
    """Run ``operation`` inside the caller's app context, if there is one."""
    if not has_app_context():
        return operation
    app = current_app._get_current_object()  # type: ignore[attr-defined]

    def task() -> T:
        with app.app_context():
            return operation()

    return task


def fan_out(
    operations: Sequence[Callable[[], T]],
    completion: Callable[[FanOutResult[T]], Any] | None = None,
    max_workers: int | None = None,
) -> FanOutResult[T]:
    """Run independent operations concurrently and join on all of them.

    Each operation either returns a value or raises ``AppError``. The call
    returns only after every operation has finished, so the result always
    accounts for exactly ``len(operations)`` outcomes. Successful values keep
    submission order; failure messages are deduplicated, first seen first.

    Results are gathered on the calling thread, so nothing is shared between
    workers. There is no timeout: an operation that never returns blocks the
    barrier. ``completion``, when given, is called exactly once with the result.
    """
    total = len(operations)
    outcomes: dict[int, tuple[bool, Any]] = {}

    if total:
        workers = max(1, min(max_workers or get_setting("FANOUT_MAX_WORKERS"), total))
        with ThreadPoolExecutor(max_workers=workers) as pool:
            futures = {
                pool.submit(_bind_app_context(operation)): index
                for index, operation in enumerate(operations)
            }
            for future in as_completed(futures):
                index = futures[future]
                try:
                    outcomes[index] = (True, future.result())
                except AppError as e:
                    outcomes[index] = (False, e.message)

    result: FanOutResult[T] = FanOutResult()
    for index in range(total):
        ok, value = outcomes[index]
        if ok:
            result.results.append(value)
        elif value not in result.errors:
            result.errors.append(value)

    logging.debug(
        f"Fan-out finished: {len(result.results)}/{total} succeeded, "
        f"{len(result.errors)} unique error(s)."
    )
    if completion is not None:
        completion(result)
    return result
