from __future__ import annotations

import contextlib
import logging
import pathlib

import trio

from ..keycodes import EventType, describe_key
from .deviceutil import EventDevice

logger = logging.getLogger(__name__)

IGNORED_EVENT_TYPES = frozenset({EventType.EV_SYN, EventType.EV_MSC})


class KeypadListener:
    """Reads one event device and sends the code of every keydown to a channel.

    Releases and autorepeats are dropped. The send channel is closed when the device
    reaches end of file or the listener is cancelled, which ends the matcher loop.
    """

    def __init__(self, device_path: pathlib.Path, send_channel: trio.MemorySendChannel[int]):
        self.device = EventDevice(device_path)
        self.send_channel = send_channel
        self.cancel_scope = trio.CancelScope()

    async def run(self, *, task_status=trio.TASK_STATUS_IGNORED):
        with self.cancel_scope:
            async with self.send_channel, self.device:
                logger.debug("Getting events for %s", self.device.device_path)
                task_status.started()
                try:
                    await self._forward_keys()
                except (trio.BrokenResourceError, trio.ClosedResourceError):
                    logger.debug("Nobody is listening for keys from %s any more", self.device.device_path)

    async def _forward_keys(self):
        async with contextlib.aclosing(self.device.events()) as events:
            async for evt in events:
                if evt.is_keydown:
                    await self.send_channel.send(evt.code)
                elif evt.type == EventType.EV_KEY or evt.type in IGNORED_EVENT_TYPES:
                    continue
                elif evt.type == EventType.EV_LED:
                    logger.debug("LED %d = %d", evt.code, evt.value)
                else:
                    logger.debug("Unhandled event type=%d code=%s value=%d", evt.type, describe_key(evt.code), evt.value)
        logger.debug("End of events from %s", self.device.device_path)
