from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Protocol


class ScheduledTask(Protocol):
    @property
    def cancelled(self) -> bool: ...

    def cancel(self) -> None: ...


class Scheduler(Protocol):
    def call_later(self, delay: float, callback: Callable[[], None]) -> ScheduledTask: ...


@dataclass
class ManualTask:
    due: float
    callback: Callable[[], None]
    seq: int
    cancelled: bool = False
    fired: bool = False

    def cancel(self) -> None:
        self.cancelled = True


@dataclass
class ManualScheduler:
    """Deterministic clock-driven scheduler.

    Time only moves when advance() is called: the pygame client feeds it the
    frame delta, tests feed it explicit durations.
    """

    now: float = 0.0
    _tasks: list[ManualTask] = field(default_factory=list)
    _seq: int = 0

    def call_later(self, delay: float, callback: Callable[[], None]) -> ManualTask:
        self._seq += 1
        task = ManualTask(due=self.now + max(0.0, delay), callback=callback, seq=self._seq)
        self._tasks.append(task)
        return task

    def advance(self, dt: float) -> int:
        """Move the clock forward and fire due tasks in due order. Returns the number fired."""
        self.now += max(0.0, dt)
        fired = 0
        while True:
            ready = [t for t in self._tasks if not t.cancelled and t.due <= self.now]
            if not ready:
                break
            task = min(ready, key=lambda t: (t.due, t.seq))
            self._tasks.remove(task)
            task.fired = True
            task.callback()
            fired += 1
        self._tasks = [t for t in self._tasks if not t.cancelled]
        return fired

    def pending(self) -> list[ManualTask]:
        return [t for t in self._tasks if not t.cancelled]
