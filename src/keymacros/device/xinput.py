"""Finding the keypad through the xinput command-line tool.

xinput --list names every X input device and its id; xinput --list-props <id> then gives
the evdev node and the USB vendor/product ids. The keypad is picked out with a
DeviceFilter and "floated" so that X stops turning its keys into ordinary keystrokes.
"""
from __future__ import annotations

import logging
import re
import subprocess
import typing

import msgspec
import trio

from ..commontypes import DeviceError
from .hwtypes import XinputDevice

logger = logging.getLogger(__name__)

LIST_LINE_MATCHER = re.compile(r"^[^A-Za-z]+(?P<name>.+?)\s+id=(?P<id>[0-9]+)\s+\[(?P<role>.+)\]")
DEVICE_NODE_MATCHER = re.compile(r'^\s*Device Node.+:\s*"(?P<node>.+?)"')
PRODUCT_ID_MATCHER = re.compile(r"^\s*Device Product ID.+:\s*(?P<vid>[0-9]+)\s*,\s*(?P<pid>[0-9]+)")


class DeviceFilter(msgspec.Struct, frozen=True, tag=True):
    def matches(self, device: XinputDevice) -> bool:
        raise NotImplementedError()


class Always(DeviceFilter, frozen=True):
    def matches(self, device: XinputDevice) -> bool:
        return True


class NameContains(DeviceFilter, frozen=True):
    text: str

    def matches(self, device: XinputDevice) -> bool:
        return self.text in device.name


class NameExcludes(DeviceFilter, frozen=True):
    text: str

    def matches(self, device: XinputDevice) -> bool:
        return self.text not in device.name


class VendorIs(DeviceFilter, frozen=True):
    vid: int

    def matches(self, device: XinputDevice) -> bool:
        return device.vid == self.vid


class ProductIs(DeviceFilter, frozen=True):
    pid: int

    def matches(self, device: XinputDevice) -> bool:
        return device.pid == self.pid


class AllOf(DeviceFilter, frozen=True):
    filters: tuple[DeviceFilter, ...]

    def matches(self, device: XinputDevice) -> bool:
        return all(f.matches(device) for f in self.filters)


def parse_list_line(line: str) -> typing.Optional[XinputDevice]:
    if (m := LIST_LINE_MATCHER.match(line)) is None:
        return None
    role = m["role"]
    return XinputDevice(
        name=m["name"],
        id=int(m["id"]),
        keyboard="keyboard" in role,
        pointer="pointer" in role,
        master="master" in role,
        slave="slave" in role,
        floating="floating" in role,
    )


def apply_props(device: XinputDevice, props: str) -> XinputDevice:
    "Fill in the device node and USB ids from the output of xinput --list-props."
    changes = {}
    for line in props.splitlines():
        if (m := DEVICE_NODE_MATCHER.match(line)) is not None:
            changes["device_node"] = m["node"]
        elif (m := PRODUCT_ID_MATCHER.match(line)) is not None:
            changes["vid"] = int(m["vid"])
            changes["pid"] = int(m["pid"])
    return msgspec.structs.replace(device, **changes)


async def run_xinput(*args: str) -> str:
    try:
        result = await trio.run_process(["xinput", *args], capture_stdout=True, stderr=subprocess.DEVNULL)
    except FileNotFoundError as exc:
        raise DeviceError("xinput is not installed") from exc
    except subprocess.CalledProcessError as exc:
        raise DeviceError(f"xinput {' '.join(args)} failed with status {exc.returncode}") from exc
    return result.stdout.decode("utf-8", errors="replace")


async def list_devices() -> tuple[XinputDevice, ...]:
    found = []
    for line in (await run_xinput("--list")).splitlines():
        device = parse_list_line(line)
        if device is None:
            logger.warning("Could not parse xinput line %r", line)
            continue
        found.append(apply_props(device, await run_xinput("--list-props", str(device.id))))
    return tuple(found)


def select_device(devices: typing.Iterable[XinputDevice], device_filter: DeviceFilter) -> XinputDevice:
    # master devices are virtual and have no device node
    matching = [d for d in devices if not d.master and device_filter.matches(d)]
    if not matching:
        raise DeviceError(f"No input device matches {msgspec.to_builtins(device_filter)}")
    if len(matching) > 1:
        names = ", ".join(f"{d.name!r} (id={d.id})" for d in matching)
        raise DeviceError(f"More than one input device matches: {names}")
    device = matching[0]
    if not device.device_node:
        raise DeviceError(f"xinput reports no device node for {device.name!r}")
    return device


async def float_device(device: XinputDevice):
    "Detach the device from the X master keyboard, so X ignores its keys."
    if device.floating:
        return
    logger.debug("Floating %r (id=%d)", device.name, device.id)
    try:
        await run_xinput("float", str(device.id))
    except DeviceError as exc:
        logger.warning("Could not float %r; X will still see its keys: %s", device.name, exc)


async def find_device(device_filter: DeviceFilter, make_floating: bool = True) -> XinputDevice:
    device = select_device(await list_devices(), device_filter)
    logger.info("Using %r (id=%d, %04x:%04x) at %s", device.name, device.id, device.vid, device.pid, device.device_node)
    if make_floating:
        await float_device(device)
    return device
