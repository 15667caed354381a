"""Cooperative deadline and cancellation checks for the search loops."""

from __future__ import annotations

import threading
import time


class SearchBudget:
    """Wall-clock budget shared by the algorithms of one optimization call.

    Algorithms call :meth:`exhausted` at each generation, iteration or
    annealing step and stop with their best solution so far once it returns
    True. Nothing is interrupted preemptively.
    """

    def __init__(
        self,
        time_limit_minutes: float | None = None,
        cancel_event: threading.Event | None = None,
        *,
        clock=time.monotonic,
    ) -> None:
        self._clock = clock
        self._started = clock()
        self._deadline = None if time_limit_minutes is None else self._started + time_limit_minutes * 60.0
        self._cancel_event = cancel_event
        self.deadline_hit = False
        self.cancelled = False

    @classmethod
    def unlimited(cls) -> "SearchBudget":
        return cls(None)

    def elapsed_ms(self) -> float:
        return (self._clock() - self._started) * 1000.0

    def exhausted(self) -> bool:
        if self._cancel_event is not None and self._cancel_event.is_set():
            self.cancelled = True
            return True
        if self._deadline is not None and self._clock() >= self._deadline:
            self.deadline_hit = True
            return True
        return False
