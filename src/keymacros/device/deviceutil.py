import collections.abc
import contextlib
import errno
import os
import pathlib

import trio

from ..commontypes import DeviceError, NotInContextError
from .hwtypes import EVENT_SIZE, InputEvent

# read up to this many records at a time
READ_RECORDS = 64


def decode_events(data: bytes) -> list[InputEvent]:
    "Decode a buffer of complete input_event records. Trailing partial records are an error."
    if len(data) % EVENT_SIZE != 0:
        raise ValueError(f"Expected a multiple of {EVENT_SIZE} bytes, got {len(data)}")
    return [InputEvent.unpack(data[offset : offset + EVENT_SIZE]) for offset in range(0, len(data), EVENT_SIZE)]


class EventDevice(contextlib.AbstractAsyncContextManager):
    """An evdev character device (/dev/input/eventN), read as a stream of InputEvents.

    The device is opened non-blocking so that waiting for the next record is a trio
    checkpoint and can be cancelled.
    """

    def __init__(self, device_path: str | pathlib.Path):
        if not isinstance(device_path, pathlib.Path):
            device_path = pathlib.Path(device_path)
        if not device_path.is_absolute():
            raise ValueError("Device path must be absolute")
        self.device_path = device_path
        self._stream = None

    def open(self):
        try:
            fd = os.open(self.device_path, os.O_RDONLY | os.O_NONBLOCK)
        except OSError as exc:
            raise DeviceError(f"Could not open {self.device_path}: {exc.strerror}") from exc
        self._stream = trio.lowlevel.FdStream(fd)

    async def close(self):
        if self._stream is not None:
            await self._stream.aclose()
            self._stream = None

    async def __aenter__(self):
        self.open()
        return self

    async def events(self) -> collections.abc.AsyncIterator[InputEvent]:
        if self._stream is None:
            raise NotInContextError()

        pending = bytearray()
        while True:
            try:
                chunk = await self._stream.receive_some(EVENT_SIZE * READ_RECORDS)
            except trio.BrokenResourceError as exc:
                cause = exc.__cause__
                if isinstance(cause, OSError) and cause.errno == errno.ENODEV:
                    raise DeviceError(f"{self.device_path} went away") from exc
                raise DeviceError(f"Could not read {self.device_path}") from exc
            if not chunk:
                return
            pending += chunk
            complete = len(pending) - len(pending) % EVENT_SIZE
            for event in decode_events(bytes(pending[:complete])):
                yield event
            del pending[:complete]

    async def __aexit__(self, _exc_type, _exc_value, _traceback):
        await self.close()
        return False  # to reraise exceptions if needed
