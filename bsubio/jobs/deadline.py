"""Per-call deadline shared by every suspension point of one workflow."""

import asyncio
from typing import Awaitable, Optional, TypeVar

from bsubio.exceptions import JobCancelledError

T = TypeVar("T")


class Deadline:
    """Absolute deadline on the running loop's clock; None means no limit.

    Network calls run under the remaining time and sleeps are cut short, so
    an expired deadline surfaces as JobCancelledError at the next
    suspension point.
    """

    def __init__(self, timeout: Optional[float] = None):
        loop = asyncio.get_running_loop()
        self._loop = loop
        self._expires_at = None if timeout is None else loop.time() + timeout

    @property
    def remaining(self) -> Optional[float]:
        if self._expires_at is None:
            return None
        return max(0.0, self._expires_at - self._loop.time())

    @property
    def expired(self) -> bool:
        return self._expires_at is not None and self._loop.time() >= self._expires_at

    def check(self, stage: str) -> None:
        if self.expired:
            raise JobCancelledError(stage)

    async def run(self, aw: Awaitable[T], stage: str) -> T:
        """Await `aw`, aborting it when the deadline passes."""
        if self.expired:
            if asyncio.iscoroutine(aw):
                aw.close()
            raise JobCancelledError(stage)
        try:
            return await asyncio.wait_for(aw, self.remaining)
        except asyncio.TimeoutError as exc:
            raise JobCancelledError(stage) from exc

    async def sleep(self, delay: float, stage: str) -> None:
        """Sleep for `delay`, or until the deadline and then raise."""
        remaining = self.remaining
        if remaining is not None and remaining < delay:
            await asyncio.sleep(remaining)
            raise JobCancelledError(stage)
        await asyncio.sleep(delay)
