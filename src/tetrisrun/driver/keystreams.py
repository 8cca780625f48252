# SPDX-FileCopyrightText: 2021 Rose Davidson <rose@metaclassical.com>
#
# SPDX-License-Identifier: GPL-3.0-or-later
from __future__ import annotations

import collections.abc
import logging
import typing

import trio
import tricycle

from ..commontypes import Command, EndOfInput, InputReadError
from ..settings import Settings, key_byte
from .signals import PauseGate

logger = logging.getLogger(__name__)

ESC = 0x1B
BRACKET = ord("[")


class KeyTable:
    """Byte-level lookup tables built from settings."""

    def __init__(
        self,
        keymaps: dict[Command, list[str]],
        quit_keys: collections.abc.Iterable[str],
        pause_keys: collections.abc.Iterable[str],
        arrow_keys: dict[str, Command],
    ):
        self.commands = {key_byte(key)[0]: command for command, keys in keymaps.items() for key in keys}
        self.quit = frozenset(key_byte(key)[0] for key in quit_keys)
        self.pause = frozenset(key_byte(key)[0] for key in pause_keys)
        self.arrows = {key_byte(key)[0]: command for key, command in arrow_keys.items()}

    @classmethod
    def from_settings(cls, settings: Settings):
        return cls(settings.keymaps, settings.quit_keys, settings.pause_keys, settings.arrow_keys)


class KeyTranslator:
    """Turns raw terminal bytes into commands.

    Aliases map straight onto commands. Quit keys, end of input and read errors all
    raise EndOfInput. A pause key enters the pause gate and swallows input until the
    next pause key. ESC starts an escape sequence; if nothing follows within the
    escape timeout it is a lone ESC, which quits.
    """

    def __init__(self, reader: tricycle.BufferedReceiveStream, table: KeyTable, pause: PauseGate, escape_timeout: float):
        self.reader = reader
        self.table = table
        self.pause = pause
        self.escape_timeout = escape_timeout

    @classmethod
    def from_settings(cls, reader: tricycle.BufferedReceiveStream, pause: PauseGate, settings: Settings):
        return cls(reader, KeyTable.from_settings(settings), pause, settings.escape_timeout.total_seconds())

    async def _read(self) -> int:
        try:
            b = await self.reader.receive_all_or_none(1)
        except (trio.BrokenResourceError, trio.ClosedResourceError, OSError) as e:
            raise InputReadError(e) from e
        if b is None:
            raise EndOfInput("end of input")
        return b[0]

    async def _wait_out_pause(self):
        self.pause.enter()
        while await self._read() not in self.table.pause:
            pass
        self.pause.exit()

    async def _escape_sequence(self) -> typing.Optional[Command]:
        b = None
        # a cancelled read consumes nothing, so a byte arriving after the timeout is kept for the next read
        with trio.move_on_after(self.escape_timeout):
            b = await self._read()
        if b is None:
            raise EndOfInput("escape key")
        if b != BRACKET:
            self.reader.unget(bytes([b]))
            raise EndOfInput("escape key")
        final = await self._read()
        if final not in self.table.arrows:
            logger.debug("Ignoring escape sequence ESC [ %r", bytes([final]))
        return self.table.arrows.get(final)

    async def next_command(self) -> Command:
        while True:
            b = await self._read()
            if b in self.table.commands:
                return self.table.commands[b]
            if b in self.table.quit:
                raise EndOfInput(f"quit key {bytes([b])!r}")
            if b in self.table.pause:
                await self._wait_out_pause()
            elif b == ESC:
                command = await self._escape_sequence()
                if command is not None:
                    return command

    async def commands(self) -> collections.abc.AsyncIterator[Command]:
        while True:
            try:
                command = await self.next_command()
            except InputReadError:
                raise
            except EndOfInput:
                return
            yield command
