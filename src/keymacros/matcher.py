# SPDX-FileCopyrightText: 2021 Rose Davidson <rose@metaclassical.com>
#
# SPDX-License-Identifier: GPL-3.0-or-later
from __future__ import annotations

import datetime
import logging
import typing

import msgspec
import trio

from .keycodes import describe_key
from .sequences import Found, KeySequence, NoPath, Partial, SequenceTrie

if typing.TYPE_CHECKING:
    from .dispatch import Dispatcher

logger = logging.getLogger(__name__)

DEFAULT_DELAY = datetime.timedelta(seconds=2)
DEFAULT_QUIT_COMMAND = "Quit"


class Pending(msgspec.Struct, frozen=True):
    sequence: KeySequence


class DeadEnd(msgspec.Struct, frozen=True):
    sequence: KeySequence


class Matched(msgspec.Struct, frozen=True):
    sequence: KeySequence
    command: str


class Quit(msgspec.Struct, frozen=True):
    sequence: KeySequence


MatchOutcome = Pending | DeadEnd | Matched | Quit


class SequenceMatcher:
    """Accumulates key codes into a candidate sequence and resolves it against a trie.

    The candidate is reset after a match, after a dead end, and when more than
    max_delay passes between two keys.
    """

    sequence: KeySequence
    last_key_time: typing.Optional[float]

    def __init__(
        self,
        trie: SequenceTrie,
        *,
        max_delay: datetime.timedelta = DEFAULT_DELAY,
        quit_command: str = DEFAULT_QUIT_COMMAND,
        restart_on_mismatch: bool = False,
    ):
        self.trie = trie
        self.max_delay = max_delay
        self.quit_command = quit_command
        self.restart_on_mismatch = restart_on_mismatch
        self.sequence = KeySequence()
        self.last_key_time = None

    def reset(self):
        self.sequence = KeySequence()

    def feed(self, code: int, timestamp: float) -> MatchOutcome:
        if self.sequence and self.last_key_time is not None:
            if timestamp - self.last_key_time > self.max_delay.total_seconds():
                logger.debug("Pause before %s; dropping %s", describe_key(code), self.sequence.describe())
                self.reset()
        self.last_key_time = timestamp
        self.sequence = self.sequence.extended(code)
        outcome = self._resolve()
        if isinstance(outcome, DeadEnd) and self.restart_on_mismatch and len(outcome.sequence) > 1:
            logger.debug("Retrying %s as the start of a new sequence", describe_key(code))
            self.sequence = KeySequence.of(code)
            outcome = self._resolve()
        return outcome

    def _resolve(self) -> MatchOutcome:
        current = self.sequence
        match self.trie.find(current):
            case Partial():
                return Pending(sequence=current)
            case Found(command=command):
                self.reset()
                if command == self.quit_command:
                    return Quit(sequence=current)
                return Matched(sequence=current, command=command)
            case NoPath():
                self.reset()
                return DeadEnd(sequence=current)
            case other:
                raise NotImplementedError(f"Don't know how to handle {type(other)}.")

    async def run(self, key_codes: trio.abc.ReceiveChannel[int], dispatcher: Dispatcher):
        async with key_codes:
            async for code in key_codes:
                outcome = self.feed(code, trio.current_time())
                match outcome:
                    case Pending(sequence=sequence):
                        logger.debug("Waiting for more after %s", sequence.describe())
                    case DeadEnd(sequence=sequence):
                        logger.debug("No binding starts with %s", sequence.describe())
                    case Matched(sequence=sequence, command=command):
                        logger.info("%s => %s", sequence.describe(), command)
                        await dispatcher.dispatch(command)
                    case Quit(sequence=sequence):
                        logger.info("%s => quit", sequence.describe())
                        return
