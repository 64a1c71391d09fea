# SPDX-FileCopyrightText: 2021 Rose Davidson <rose@metaclassical.com>
#
# SPDX-License-Identifier: GPL-3.0-or-later
"""Reading keymacros configuration files.

A configuration file is line oriented:

    # comment (also ; and //)
    delay = 1.5
    vid = 0x1a2c
    name = "Macro Keypad"
    KEY_F13 => "gromit-mpx -t"
    30, 48, 46 -> "notify-send 'abc'"
    KEY_ESC, KEY_ESC => Quit

Assignments go into a key/value table, bindings go into a SequenceTrie. Lines that
can't be understood are logged and skipped; a broken line never stops the rest of
the file from loading.
"""
from __future__ import annotations

import collections.abc
import dataclasses
import logging
import pathlib
import re
import typing

from .commontypes import ConfigError
from .keycodes import KEY_CODE_MAX, code_from_name
from .sequences import KeySequence, SequenceTrie

logger = logging.getLogger(__name__)

Value = typing.Union[str, int, float, None]

COMMENT_PREFIXES = ("#", ";", "//")
QUIT = "Quit"
ASSIGNMENT_MATCHER = re.compile(r"^(?P<key>[a-zA-Z][a-zA-Z_0-9]*)\s*=(?![=-]*>)\s*(?P<value>.+)$")
BINDING_MATCHER = re.compile(r'^(?P<keys>.+?)\s*[=-]{1,2}>\s*(?P<command>Quit|".+")$')


def parse_value(raw: str) -> Value:
    """Turn the right-hand side of an assignment into a typed value.

    Double-quoted text is a string (without the quotes), None is None, 0x... is a
    hexadecimal integer, anything with a decimal point is a float and everything else
    has to be a decimal integer.
    """
    raw = raw.strip()
    if len(raw) >= 2 and raw.startswith('"') and raw.endswith('"'):
        return raw[1:-1]
    if raw == "None":
        return None
    try:
        if raw.lower().startswith("0x"):
            return int(raw[2:], 16)
        if "." in raw:
            return float(raw)
        return int(raw)
    except ValueError:
        raise ValueError(f"Could not parse value {raw!r}") from None


def parse_key_code(token: str) -> int:
    token = token.strip()
    if not token:
        raise ValueError("Empty key in sequence")
    if token.lower().startswith("0x"):
        code = int(token[2:], 16)
    elif token.isdigit():
        code = int(token)
    else:
        code = code_from_name(token)
        if code is None:
            raise ValueError(f"Unknown key name {token!r}")
    if not 0 <= code <= KEY_CODE_MAX:
        raise ValueError(f"Key code out of range: {token!r}")
    return code


def parse_key_sequence(raw: str) -> KeySequence:
    return KeySequence.of(*(parse_key_code(token) for token in raw.split(",")))


def parse_command(raw: str) -> str:
    if raw == QUIT:
        return QUIT
    return raw[1:-1]


def is_ignorable(line: str) -> bool:
    stripped = line.strip()
    return not stripped or stripped.startswith(COMMENT_PREFIXES)


@dataclasses.dataclass(kw_only=True)
class Config:
    trie: SequenceTrie = dataclasses.field(default_factory=SequenceTrie)
    values: dict[str, Value] = dataclasses.field(default_factory=dict)
    errors: list[ConfigError] = dataclasses.field(default_factory=list)

    def add_line(self, line: str | bytes, lineno: typing.Optional[int] = None):
        "Apply a single line. Raises ConfigError if the line can't be used."
        if isinstance(line, bytes):
            try:
                line = line.decode("utf-8")
            except UnicodeDecodeError as exc:
                raise ConfigError(f"Line is not valid UTF-8 ({exc.reason} at byte {exc.start})", lineno) from exc
        if is_ignorable(line):
            return
        line = line.strip()
        if (assignment := ASSIGNMENT_MATCHER.match(line)) is not None:
            try:
                self.values[assignment["key"]] = parse_value(assignment["value"])
            except ValueError as exc:
                raise ConfigError(str(exc), lineno) from exc
        elif (binding := BINDING_MATCHER.match(line)) is not None:
            try:
                sequence = parse_key_sequence(binding["keys"])
            except ValueError as exc:
                raise ConfigError(str(exc), lineno) from exc
            command = parse_command(binding["command"])
            if self.trie.insert(sequence, command):
                logger.warning("Line %s: %s was already bound; now bound to %r", lineno, sequence.describe(), command)
        else:
            raise ConfigError(f"Could not parse {line!r}", lineno)

    def add_lines(self, lines: collections.abc.Iterable[str | bytes]):
        for lineno, line in enumerate(lines, start=1):
            try:
                self.add_line(line, lineno)
            except ConfigError as exc:
                logger.warning("Skipping config %s", exc)
                self.errors.append(exc)


def load_config(path: pathlib.Path) -> Config:
    "Load a config file. A missing or unreadable file is logged and gives an empty Config."
    config = Config()
    try:
        # decoded line by line, so one bad byte only costs its own line
        with path.open("rb") as f:
            config.add_lines(f)
    except OSError as exc:
        logger.error("Could not read config file %s: %s", path, exc)
        config.errors.append(ConfigError(f"Could not read {path}: {exc.strerror}"))
    return config
