"""
Wire - update streaming channel for one agent turn.

The turn runs in a background task and writes every AgentUpdate to the Wire;
the caller's context iterates read() until the wire is closed.

Usage:
    wire = Wire()
    task = asyncio.create_task(session._run_turn(..., wire=wire))

    async for update in wire.read():
        yield update
"""

import asyncio
from typing import Any, AsyncIterator


class Wire:
    """
    Thin wrapper around asyncio.Queue with an end-of-stream sentinel.

    A failure raised by the writer can be attached with fail(); read() then
    raises it after draining everything written before it.
    """

    _SENTINEL = object()

    def __init__(self, maxsize: int = 0):
        """
        Args:
            maxsize: Maximum queue size (0 = unlimited)
        """
        self._queue: asyncio.Queue = asyncio.Queue(maxsize=maxsize)
        self._closed = False
        self._error: BaseException | None = None

    async def write(self, update: Any) -> None:
        """Write an update. Writes after close are ignored."""
        if self._closed:
            return
        await self._queue.put(update)

    async def close(self) -> None:
        """Signal that no more updates will be written."""
        if self._closed:
            return
        self._closed = True
        await self._queue.put(self._SENTINEL)

    async def fail(self, error: BaseException) -> None:
        """Close the wire and make readers raise error once drained."""
        self._error = error
        await self.close()

    async def read(self) -> AsyncIterator[Any]:
        """Yield updates until the wire is closed."""
        while True:
            item = await self._queue.get()
            if item is self._SENTINEL:
                # Re-put sentinel for other readers
                await self._queue.put(self._SENTINEL)
                if self._error is not None:
                    raise self._error
                break
            yield item

    @property
    def closed(self) -> bool:
        return self._closed

    def __repr__(self) -> str:
        return f"Wire(closed={self._closed}, qsize={self._queue.qsize()})"


__all__ = ["Wire"]
