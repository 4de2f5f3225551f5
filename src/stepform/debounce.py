"""Debounced validation scheduler.

An arena of cancelable validation tasks keyed by owner and field name.
At most one task is pending per ``(owner, field)`` key: scheduling the
key again cancels its previous task first, so a superseded value can
never be validated after a newer one (last write wins). Owners are
compared by identity, so several forms can share one scheduler without
touching each other's tasks.

The scheduler owns an anyio task group and must be entered before use::

    async with DebounceScheduler() as scheduler:
        scheduler.schedule("email", "a@", 300, on_fire)
        scheduler.schedule("email", "a@b.co", 300, on_fire)
        # only on_fire("email", "a@b.co") ever runs

Leaving the context cancels every pending task, so no callback outlives
the form that scheduled it.

Threading model:
    Single event loop. ``schedule`` and ``cancel`` are synchronous and
    must be called from the loop that entered the scheduler.
"""

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from types import TracebackType
from typing import Self

import anyio
from anyio.abc import TaskGroup

logger = logging.getLogger("stepform.debounce")

type DebounceCallback = Callable[[str, str], None]
type Sleep = Callable[[float], Awaitable[None]]
type TaskKey = tuple[int, str]


@dataclass(slots=True, eq=False)
class PendingValidation:
    """One scheduled validation and the value snapshot it will use."""

    field: str
    value: str
    delay_ms: int
    owner: object = None
    cancelled: bool = False
    scope: anyio.CancelScope | None = None

    @property
    def key(self) -> TaskKey:
        return _key(self.owner, self.field)

    def cancel(self) -> None:
        self.cancelled = True
        if self.scope is not None:
            self.scope.cancel()


def _key(owner: object, field: str) -> TaskKey:
    return (id(owner), field)


class DebounceScheduler:
    """Schedule and cancel delayed per-field validation callbacks.

    Args:
        sleep: Awaitable delay in seconds. Defaults to ``anyio.sleep``;
            tests inject a controllable clock here.
    """

    __slots__ = ("_pending", "_sleep", "_task_group")

    def __init__(self, *, sleep: Sleep = anyio.sleep) -> None:
        self._sleep = sleep
        self._pending: dict[TaskKey, PendingValidation] = {}
        self._task_group: TaskGroup | None = None

    # -- Lifecycle --

    @property
    def running(self) -> bool:
        return self._task_group is not None

    async def __aenter__(self) -> Self:
        if self._task_group is not None:
            msg = "DebounceScheduler is already running"
            raise RuntimeError(msg)
        task_group = anyio.create_task_group()
        await task_group.__aenter__()
        self._task_group = task_group
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> bool | None:
        self.cancel_all()
        task_group, self._task_group = self._task_group, None
        assert task_group is not None
        return await task_group.__aexit__(exc_type, exc, tb)

    # -- Scheduling --

    def schedule(
        self,
        field: str,
        value: str,
        delay_ms: int,
        callback: DebounceCallback,
        *,
        owner: object = None,
    ) -> PendingValidation:
        """Cancel *owner*'s pending task for *field*, then arm a new one.

        When the delay elapses, ``callback(field, value)`` runs with the
        *value* captured here, not whatever the field holds by then.
        Tasks of other owners are never touched.
        """
        if self._task_group is None:
            msg = "DebounceScheduler is not running; enter it with 'async with' first"
            raise RuntimeError(msg)

        task = PendingValidation(field=field, value=value, delay_ms=delay_ms, owner=owner)
        previous = self._pending.pop(task.key, None)
        if previous is not None:
            previous.cancel()
            logger.debug("Debounce: superseded pending validation for %r", field)

        self._pending[task.key] = task
        self._task_group.start_soon(self._run, task, callback, name=f"debounce:{field}")
        logger.debug("Debounce: scheduled %r in %d ms", field, delay_ms)
        return task

    def cancel(self, field: str, *, owner: object = None) -> bool:
        """Drop *owner*'s pending task for *field* without running it.

        Returns True if a task was pending.
        """
        task = self._pending.pop(_key(owner, field), None)
        if task is None:
            return False
        task.cancel()
        logger.debug("Debounce: cancelled pending validation for %r", field)
        return True

    def cancel_owner(self, owner: object) -> int:
        """Cancel every task scheduled by *owner*. Returns how many were pending."""
        tasks = [task for task in self._pending.values() if task.owner is owner]
        for task in tasks:
            del self._pending[task.key]
            task.cancel()
        return len(tasks)

    def cancel_all(self) -> int:
        """Cancel every pending task. Returns how many were pending."""
        tasks = list(self._pending.values())
        self._pending.clear()
        for task in tasks:
            task.cancel()
        return len(tasks)

    def pending(self, field: str, *, owner: object = None) -> PendingValidation | None:
        return self._pending.get(_key(owner, field))

    def __contains__(self, field: object) -> bool:
        return any(task.field == field for task in self._pending.values())

    def __len__(self) -> int:
        return len(self._pending)

    async def _run(self, task: PendingValidation, callback: DebounceCallback) -> None:
        with anyio.CancelScope() as scope:
            task.scope = scope
            if task.cancelled:
                return
            await self._sleep(task.delay_ms / 1000)

        # Superseded or cancelled while sleeping
        if task.cancelled or self._pending.get(task.key) is not task:
            return
        del self._pending[task.key]
        logger.debug("Debounce: firing validation for %r", task.field)
        callback(task.field, task.value)
