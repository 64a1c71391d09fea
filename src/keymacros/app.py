# SPDX-FileCopyrightText: 2021 Rose Davidson <rose@metaclassical.com>
#
# SPDX-License-Identifier: GPL-3.0-or-later
from __future__ import annotations

import argparse
import datetime
import logging
import pathlib
import sys

import trio

from .commontypes import DeviceError
from .config import load_config
from .device.keypad import KeypadListener
from .device.xinput import find_device
from .dispatch import Dispatcher
from .durations import format_duration
from .keycodes import describe_key
from .matcher import SequenceMatcher
from .sequences import SequenceTrie
from .settings import Settings, structure_delay

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = pathlib.Path("~/.config/keymacros/keymacros.conf")
KEY_CHANNEL_SIZE = 10


async def resolve_device_path(settings: Settings) -> pathlib.Path:
    if settings.device is not None:
        return settings.device
    device = await find_device(settings.device_filter(), make_floating=settings.float_device)
    return pathlib.Path(device.device_node)


async def show_keys(receive_channel: trio.MemoryReceiveChannel[int]):
    async with receive_channel:
        async for code in receive_channel:
            print(describe_key(code), flush=True)


async def start_keymacros(settings: Settings, trie: SequenceTrie, showing_keys: bool = False):
    device_path = await resolve_device_path(settings)
    send_channel, receive_channel = trio.open_memory_channel[int](KEY_CHANNEL_SIZE)
    async with trio.open_nursery() as nursery:
        listener = KeypadListener(device_path, send_channel)
        await nursery.start(listener.run)
        if showing_keys:
            print("Showing codes of key strokes received (Ctrl-C to abort)", file=sys.stderr)
            await show_keys(receive_channel)
        else:
            matcher = SequenceMatcher(
                trie,
                max_delay=settings.delay,
                quit_command=settings.quit_command,
                restart_on_mismatch=settings.restart_on_mismatch,
            )
            await matcher.run(receive_channel, Dispatcher(nursery))
        # stops the listener and stops waiting on launched commands; the commands keep running
        nursery.cancel_scope.cancel()


def delay_arg(value: str):
    try:
        return structure_delay(value, datetime.timedelta)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from exc


parser = argparse.ArgumentParser(prog="keymacros", description="Run shell commands for key sequences typed on a dedicated keypad.")
parser.add_argument("--config", type=pathlib.Path, default=DEFAULT_CONFIG_PATH, help=f"config file (default: {DEFAULT_CONFIG_PATH})")
parser.add_argument("-k", "--show-keys", action="store_true", help="show key strokes received instead of matching them")
parser.add_argument("--delay", type=delay_arg, help="maximum pause between keys of one sequence, in seconds or as a duration like 1500ms")
parser.add_argument("--device", type=pathlib.Path, help="read this event device instead of searching with xinput")
parser.add_argument("-v", "--verbose", action="store_true", help="log debugging details, including the key sequence tree")


def main(argv=sys.argv):
    """
    Args:
        argv (list): List of arguments

    Returns:
        int: A return code
    """
    parsed = parser.parse_args(argv[1:])
    logging.basicConfig(level=logging.DEBUG if parsed.verbose else logging.INFO)

    config = load_config(parsed.config.expanduser())
    settings = Settings.from_values(config.values).override(delay=parsed.delay, device=parsed.device)
    logger.debug("Settings: %r", settings.describe())
    logger.debug("Key sequences:\n%s", config.trie.dump())
    logger.info("Loaded %d key sequences, maximum delay %s", len(list(config.trie.items())), format_duration(settings.delay))

    status = 0
    try:
        trio.run(start_keymacros, settings, config.trie, parsed.show_keys)
    except* DeviceError as group:
        for exc in group.exceptions:
            logger.error("%s", exc)
        status = 1
    except* KeyboardInterrupt:
        pass
    return status
