"""Cancellable repeating callback scheduled on the running event loop."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable

from storyvibe_player.domain.shared.messages import LogTemplates

logger = logging.getLogger(__name__)


class RepeatingTask:
    """Runs a synchronous callback every ``interval_seconds``.

    The callback runs immediately on start and then after each interval.
    Returning ``False`` from the callback ends the task. ``cancel()`` is
    synchronous: once it returns, the callback never runs again.
    """

    def __init__(
        self,
        name: str,
        callback: Callable[[], bool | None],
        interval_seconds: float,
    ) -> None:
        self._name = name
        self._callback = callback
        self._interval = interval_seconds
        self._task: asyncio.Task[None] | None = None
        self._cancelled = False

    @property
    def name(self) -> str:
        return self._name

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done() and not self._cancelled

    def start(self) -> None:
        if self._task is not None:
            return
        self._task = asyncio.get_running_loop().create_task(self._run(), name=self._name)

    def cancel(self) -> None:
        self._cancelled = True
        if self._task is not None and not self._task.done():
            self._task.cancel()

    async def _run(self) -> None:
        while not self._cancelled:
            try:
                keep_going = self._callback()
            except Exception as e:
                logger.exception(LogTemplates.TASK_CALLBACK_ERROR, self._name, e)
                keep_going = None

            if keep_going is False or self._cancelled:
                return

            await asyncio.sleep(self._interval)
