from __future__ import annotations

import datetime
import struct

import msgspec

from ..keycodes import EventType, KeyPress

# struct input_event on 64-bit Linux: struct timeval (two longs), __u16 type, __u16 code, __s32 value
INPUT_EVENT = struct.Struct("=qqHHi")
EVENT_SIZE = INPUT_EVENT.size


class InputEvent(msgspec.Struct, frozen=True):
    timestamp: datetime.timedelta
    type: int
    code: int
    value: int

    @classmethod
    def unpack(cls, record: bytes) -> InputEvent:
        tv_sec, tv_usec, type, code, value = INPUT_EVENT.unpack(record)
        return cls(
            timestamp=datetime.timedelta(seconds=tv_sec, microseconds=tv_usec),
            type=type,
            code=code,
            value=value,
        )

    def pack(self) -> bytes:
        tv_sec, remainder = divmod(self.timestamp, datetime.timedelta(seconds=1))
        return INPUT_EVENT.pack(tv_sec, remainder // datetime.timedelta(microseconds=1), self.type, self.code, self.value)

    @property
    def is_keydown(self) -> bool:
        return self.type == EventType.EV_KEY and self.value == KeyPress.PRESSED


class XinputDevice(msgspec.Struct, frozen=True, kw_only=True):
    name: str
    id: int
    keyboard: bool = False
    pointer: bool = False
    master: bool = False
    slave: bool = False
    floating: bool = False
    device_node: str = ""
    vid: int = 0
    pid: int = 0
