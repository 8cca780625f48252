# SPDX-FileCopyrightText: 2021 Rose Davidson <rose@metaclassical.com>
#
# SPDX-License-Identifier: GPL-3.0-or-later
import dataclasses
import datetime
import json
import operator
import pathlib
import typing

import cattrs

from .commontypes import Command, DropSchedule, SettingsError
from .durations import format_duration, parse_duration

KEYMAPS = {
    "ROTATE": ["i", "w"],
    "LEFT": ["j", "a"],
    "DROP": ["k", "s"],
    "RIGHT": ["l", "d"],
}

# q, ^@, ^C, ^D, ^Z
QUIT_KEYS = ["q", "\x00", "\x03", "\x04", "\x1a"]
PAUSE_KEYS = ["p", " "]

# final byte of the ANSI cursor key sequences ESC [ A..D
ARROW_KEYS = {
    "A": "ROTATE",
    "B": "DROP",
    "C": "RIGHT",
    "D": "LEFT",
}

ESCAPE_TIMEOUT = "100ms"
INITIAL_DROP_RATE = "1s"
FINAL_DROP_RATE = "400us"
DROP_RATE_DELTA = "1ms"


def timedelta_seconds(seconds: datetime.timedelta | int | str):
    if isinstance(seconds, datetime.timedelta):
        return seconds
    if isinstance(seconds, int):
        return datetime.timedelta(seconds=seconds)
    return parse_duration(seconds)


settings_converter = cattrs.Converter()
settings_converter.register_unstructure_hook(datetime.timedelta, format_duration)
settings_converter.register_structure_hook(datetime.timedelta, lambda d, _: timedelta_seconds(d))
settings_converter.register_unstructure_hook(pathlib.Path, str)
settings_converter.register_structure_hook(pathlib.Path, lambda v, _: pathlib.Path(v))
settings_converter.register_unstructure_hook(Command, operator.attrgetter("name"))
settings_converter.register_structure_hook(Command, lambda v, _: Command[v])


def key_byte(key: str) -> bytes:
    try:
        encoded = key.encode("latin-1")
    except UnicodeEncodeError:
        raise SettingsError(f"Key {key!r} is not a single byte") from None
    if len(encoded) != 1:
        raise SettingsError(f"Key {key!r} is not a single byte")
    return encoded


@dataclasses.dataclass(kw_only=True)
class Settings:
    _path: typing.Optional[pathlib.Path] = None
    keymaps: dict[Command, list[str]]
    quit_keys: list[str]
    pause_keys: list[str]
    arrow_keys: dict[str, Command]
    escape_timeout: datetime.timedelta
    initial_drop_rate: datetime.timedelta
    final_drop_rate: datetime.timedelta
    drop_rate_delta: datetime.timedelta
    gravity: bool = True

    def __post_init__(self):
        self.validate()

    def validate(self):
        seen: dict[bytes, str] = {}

        def claim(key: str, owner: str):
            b = key_byte(key)
            if b in seen:
                raise SettingsError(f"Key {key!r} is bound to both {seen[b]} and {owner}")
            seen[b] = owner

        for command, keys in self.keymaps.items():
            if command is Command.QUIT:
                raise SettingsError("QUIT is bound through quit_keys, not keymaps")
            for key in keys:
                claim(key, command.name)
        for key in self.quit_keys:
            claim(key, "quit")
        for key in self.pause_keys:
            claim(key, "pause")
        if b"\x1b" in seen:
            raise SettingsError("ESC is reserved for escape sequences")
        for key in self.arrow_keys:
            key_byte(key)

        for name in ("escape_timeout", "initial_drop_rate", "final_drop_rate", "drop_rate_delta"):
            if getattr(self, name) <= datetime.timedelta():
                raise SettingsError(f"{name} must be positive, not {format_duration(getattr(self, name))}")
        if self.final_drop_rate > self.initial_drop_rate:
            raise SettingsError("final_drop_rate must not exceed initial_drop_rate")

    @property
    def drop_schedule(self) -> DropSchedule:
        return DropSchedule(initial=self.initial_drop_rate, final=self.final_drop_rate, delta=self.drop_rate_delta)

    def replace(self, **changes) -> "Settings":
        return dataclasses.replace(self, **changes)

    def save(self, dest: typing.Optional[pathlib.Path] = None):
        if dest is None:
            dest = self._path
        if dest is None:
            raise SettingsError("No path to save settings to")
        raw = settings_converter.unstructure(self)
        del raw["_path"]
        with dest.open("w") as outfile:
            json.dump(raw, outfile, indent=2)

    @classmethod
    def load(cls, src: pathlib.Path):
        with src.open() as infile:
            raw = json.load(infile)
        # missing entries fall back to the defaults
        merged = settings_converter.unstructure(cls.default())
        merged.update(raw)
        merged["_path"] = src
        try:
            return settings_converter.structure(merged, cls)
        except cattrs.BaseValidationError as e:
            # validation failures from __post_init__ arrive wrapped
            for exc in e.exceptions:
                if isinstance(exc, SettingsError):
                    raise exc from e
            reasons = "; ".join(cattrs.transform_error(e))
            raise SettingsError(f"Invalid settings in {src}: {reasons}") from e

    @classmethod
    def default(cls):
        return settings_converter.structure(
            {
                "_path": None,
                "keymaps": KEYMAPS,
                "quit_keys": QUIT_KEYS,
                "pause_keys": PAUSE_KEYS,
                "arrow_keys": ARROW_KEYS,
                "escape_timeout": ESCAPE_TIMEOUT,
                "initial_drop_rate": INITIAL_DROP_RATE,
                "final_drop_rate": FINAL_DROP_RATE,
                "drop_rate_delta": DROP_RATE_DELTA,
                "gravity": True,
            },
            cls,
        )


settings_converter.register_structure_hook(Settings, cattrs.gen.make_dict_structure_fn(Settings, settings_converter))
