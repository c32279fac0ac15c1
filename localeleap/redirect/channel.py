"""
Hint Channel - one-way Page Scanner -> orchestrator message pipe.

Single consumer. Each page load may deliver at most one message. Only the
latest load per tab is remembered, so repeats for it are dropped at the
sender side and a new load replaces it.

Example:
    channel = HintChannel()

    # Scanner side
    channel.post(tab_id, load_id, {"type": "EXTERNAL_HINT_DISCOVERED", "candidates": [...]})

    # Orchestrator side
    async for session_id, message in channel:
        await orchestrator.handle_hint_message(session_id, message)
"""

import asyncio
import logging
from typing import Any, AsyncIterator, Dict, Hashable, Tuple, Union

from pydantic import ValidationError

from localeleap.core.models import HintMessage

logger = logging.getLogger(__name__)


class HintChannel:
    """Asyncio-queue backed channel with at-most-once delivery per page load."""

    # Sentinel value to signal stream end
    _STREAM_END = object()

    def __init__(self):
        self._queue: asyncio.Queue = asyncio.Queue()
        # Latest delivered load per tab
        self._delivered: Dict[int, Hashable] = {}
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def post(
        self,
        session_id: int,
        load_id: Hashable,
        message: Union[HintMessage, Dict[str, Any]],
    ) -> bool:
        """
        Enqueue a message for the orchestrator.

        Returns:
            False if the message was dropped (closed channel, page load
            already delivered, or malformed payload)
        """
        if self._closed:
            logger.debug(f"[HintChannel] Closed, dropping message for tab {session_id}")
            return False

        if self._delivered.get(session_id) == load_id:
            logger.debug(f"[HintChannel] Load {load_id!r} of tab {session_id} already delivered")
            return False

        try:
            parsed = message if isinstance(message, HintMessage) else HintMessage.model_validate(message)
        except ValidationError as e:
            logger.warning(f"[HintChannel] Malformed hint message from tab {session_id}: {e.error_count()} errors")
            return False

        self._delivered[session_id] = load_id
        self._queue.put_nowait((session_id, parsed))
        return True

    def forget_session(self, session_id: int) -> None:
        """Drop delivery bookkeeping for a closed tab."""
        self._delivered.pop(session_id, None)

    def close(self) -> None:
        """Stop accepting messages and end the consumer's iteration."""
        if self._closed:
            return
        self._closed = True
        self._queue.put_nowait(self._STREAM_END)

    async def receive(self) -> AsyncIterator[Tuple[int, HintMessage]]:
        """Yield (session_id, message) pairs until the channel is closed."""
        while True:
            item = await self._queue.get()
            if item is self._STREAM_END:
                return
            yield item

    def __aiter__(self) -> AsyncIterator[Tuple[int, HintMessage]]:
        return self.receive()
