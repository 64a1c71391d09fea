# SPDX-FileCopyrightText: 2021 Rose Davidson <rose@metaclassical.com>
#
# SPDX-License-Identifier: GPL-3.0-or-later
from __future__ import annotations

import collections.abc
import typing

import msgspec

from .keycodes import KEY_CODE_MAX, describe_key


class KeySequence(msgspec.Struct, frozen=True):
    codes: tuple[int, ...] = ()

    def __post_init__(self):
        for code in self.codes:
            if not 0 <= code <= KEY_CODE_MAX:
                raise ValueError(f"Key code out of range: {code!r}")

    @classmethod
    def of(cls, *codes: int):
        return cls(codes=tuple(int(code) for code in codes))

    def extended(self, code: int) -> KeySequence:
        return KeySequence(codes=self.codes + (int(code),))

    def __len__(self):
        return len(self.codes)

    def __iter__(self):
        return iter(self.codes)

    def __bool__(self):
        return bool(self.codes)

    def describe(self) -> str:
        return ", ".join(describe_key(code) for code in self.codes)


class NoPath(msgspec.Struct, frozen=True):
    pass


class Partial(msgspec.Struct, frozen=True):
    pass


class Found(msgspec.Struct, frozen=True):
    command: str


Lookup = NoPath | Partial | Found

ROOT = 0


class TrieNode(msgspec.Struct):
    code: typing.Optional[int]
    command: typing.Optional[str] = None
    children: dict[int, int] = msgspec.field(default_factory=dict)


class SequenceTrie:
    """Prefix tree of key sequences, each optionally bound to a command.

    Nodes live in a list and refer to their children by index. Nothing is ever
    removed, so an index stays valid for the lifetime of the trie. The root is
    index 0 and represents the empty sequence.
    """

    _nodes: list[TrieNode]

    def __init__(self):
        self._nodes = [TrieNode(code=None)]

    def __len__(self):
        return len(self._nodes)

    def _walk(self, sequence: KeySequence) -> typing.Optional[int]:
        handle = ROOT
        for code in sequence:
            handle = self._nodes[handle].children.get(code)
            if handle is None:
                return None
        return handle

    def insert(self, sequence: KeySequence, command: typing.Optional[str]) -> bool:
        """Bind command to sequence, creating any missing nodes along the way.

        An existing binding for the exact same sequence is replaced. Returns True
        if that happened, so callers can report the duplicate.
        """
        handle = ROOT
        for code in sequence:
            node = self._nodes[handle]
            child = node.children.get(code)
            if child is None:
                child = len(self._nodes)
                self._nodes.append(TrieNode(code=code))
                node.children[code] = child
            handle = child
        node = self._nodes[handle]
        replaced = node.command is not None
        node.command = command
        return replaced

    def find(self, sequence: KeySequence) -> Lookup:
        handle = self._walk(sequence)
        if handle is None:
            return NoPath()
        command = self._nodes[handle].command
        if command is None:
            return Partial()
        return Found(command=command)

    def has_node(self, sequence: KeySequence) -> bool:
        return self._walk(sequence) is not None

    def has_command(self, sequence: KeySequence) -> bool:
        return isinstance(self.find(sequence), Found)

    def command_for(self, sequence: KeySequence) -> typing.Optional[str]:
        match self.find(sequence):
            case Found(command=command):
                return command
            case _:
                return None

    def items(self) -> collections.abc.Iterator[tuple[KeySequence, str]]:
        "Yield every bound (sequence, command) pair, depth first, siblings in key code order."
        stack = [(ROOT, KeySequence())]
        while stack:
            handle, prefix = stack.pop()
            node = self._nodes[handle]
            if node.command is not None:
                yield prefix, node.command
            for code, child in sorted(node.children.items(), reverse=True):
                stack.append((child, prefix.extended(code)))

    def dump(self) -> str:
        lines = ["<root>" + self._command_suffix(self._nodes[ROOT])]
        self._dump_children(ROOT, 1, lines)
        return "\n".join(lines)

    def _dump_children(self, handle: int, depth: int, lines: list[str]):
        for code, child in sorted(self._nodes[handle].children.items()):
            node = self._nodes[child]
            lines.append("  " * depth + describe_key(code) + self._command_suffix(node))
            self._dump_children(child, depth + 1, lines)

    @staticmethod
    def _command_suffix(node: TrieNode) -> str:
        return "" if node.command is None else f" => {node.command!r}"
