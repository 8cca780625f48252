# SPDX-FileCopyrightText: 2021 Rose Davidson <rose@metaclassical.com>
#
# SPDX-License-Identifier: GPL-3.0-or-later
import datetime
import enum

import msgspec


@enum.unique
class Command(enum.Enum):
    """The single-byte commands understood by the downstream game."""

    ROTATE = b"i"
    LEFT = b"j"
    DROP = b"k"
    RIGHT = b"l"
    QUIT = b"\x1b"

    @property
    def wire(self) -> bytes:
        return self.value


class DropSchedule(msgspec.Struct, frozen=True):
    """Gravity speeds up by delta per drop, from initial down to final."""

    initial: datetime.timedelta
    final: datetime.timedelta
    delta: datetime.timedelta

    def next(self, rate: datetime.timedelta) -> datetime.timedelta:
        # never below the floor, even when delta doesn't divide evenly
        if rate <= self.final:
            return self.final
        return max(rate - self.delta, self.final)


class TetrisrunError(Exception):
    pass


class SettingsError(TetrisrunError):
    pass


class EndOfInput(TetrisrunError):
    """Raised by the translator when input ends or a quit key is read."""


class InputReadError(EndOfInput):
    def __init__(self, cause: BaseException):
        super().__init__(f"error reading input: {cause!r}")
        self.cause = cause
