"""
Frame schedulers.

The renderer never talks to a display clock directly. It asks a scheduler for
the next frame and keeps the returned handle so the loop can be cancelled.
"""

import asyncio
import logging
from typing import Any, Callable, List, Optional, Protocol, Tuple

logger = logging.getLogger(__name__)

FrameCallback = Callable[[float], None]


class FrameScheduler(Protocol):

    def request_frame(self, callback: FrameCallback) -> Any: ...

    def cancel_frame(self, handle: Any) -> None: ...


class ManualScheduler:
    """
    Scheduler driven by the caller: frames fire only on ``step``.

    Useful wherever frames must be counted exactly (tests, one-shot renders).
    """

    def __init__(self, frame_interval: float = 1 / 60):
        self.frame_interval = frame_interval
        self.time = 0.0
        self._pending: List[Tuple[int, FrameCallback]] = []
        self._next_handle = 0

    @property
    def pending(self) -> int:
        return len(self._pending)

    def request_frame(self, callback: FrameCallback) -> int:
        self._next_handle += 1
        self._pending.append((self._next_handle, callback))
        return self._next_handle

    def cancel_frame(self, handle: int):
        self._pending = [(h, cb) for h, cb in self._pending if h != handle]

    def step(self, frames: int = 1) -> int:
        """Advance ``frames`` ticks; returns how many callbacks ran."""
        ran = 0
        for _ in range(frames):
            if not self._pending:
                break
            self.time += self.frame_interval
            due, self._pending = self._pending, []
            for _, callback in due:
                callback(self.time)
                ran += 1
        return ran


class AsyncioScheduler:
    """
    Fires frames from an asyncio loop at a fixed rate.

    Without an explicit ``loop`` it binds to the loop running at construction,
    so it has to be built inside a coroutine.
    """

    def __init__(self, frames_per_second: float = 60, loop: Optional[asyncio.AbstractEventLoop] = None):
        if frames_per_second <= 0:
            raise ValueError(f"frames_per_second must be positive, got {frames_per_second}")
        self.frame_interval = 1.0 / frames_per_second
        if loop is None:
            try:
                loop = asyncio.get_running_loop()
            except RuntimeError as e:
                raise RuntimeError("AsyncioScheduler needs a running event loop; "
                                   "build it inside a coroutine or pass loop=") from e
        self.loop = loop

    def request_frame(self, callback: FrameCallback) -> asyncio.TimerHandle:
        loop = self.loop
        return loop.call_later(self.frame_interval, lambda: callback(loop.time()))

    def cancel_frame(self, handle: asyncio.TimerHandle):
        handle.cancel()
