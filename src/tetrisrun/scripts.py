# SPDX-FileCopyrightText: 2021 Rose Davidson <rose@metaclassical.com>
#
# SPDX-License-Identifier: GPL-3.0-or-later
import argparse
import logging
import pathlib
import sys

import trio
import tricycle

from .commontypes import InputReadError, SettingsError
from .driver.keystreams import KeyTranslator
from .driver.signals import PauseGate
from .driver.streams import open_stdin
from .settings import Settings

logger = logging.getLogger(__name__)


async def print_commands(settings: Settings, input_stream: trio.abc.ReceiveStream, out=sys.stdout):
    async with tricycle.BufferedReceiveStream(input_stream) as reader:
        translator = KeyTranslator.from_settings(reader, PauseGate(), settings)
        async for command in translator.commands():
            print(command.name, file=out, flush=True)


print_commands_parser = argparse.ArgumentParser(prog="tetrisrun-commands")
print_commands_parser.add_argument("--settings", type=pathlib.Path)


def print_commands_cli(argv=sys.argv):
    args = print_commands_parser.parse_args(argv[1:])
    logging.basicConfig(level=logging.INFO, stream=sys.stderr)
    try:
        settings = Settings.load(args.settings) if args.settings is not None else Settings.default()
    except (SettingsError, OSError, ValueError) as e:
        logger.error("%s", e)
        return 2

    async def runner():
        await print_commands(settings, open_stdin())

    try:
        trio.run(runner)
    except InputReadError as e:
        logger.error("Could not read input: %s", e.cause)
        return 2
    return 0


default_settings_parser = argparse.ArgumentParser(prog="tetrisrun-settings")
default_settings_parser.add_argument("dest", type=pathlib.Path)


def default_settings_cli():
    dest = default_settings_parser.parse_args().dest
    Settings.default().save(dest)
    print(f"Wrote default settings to {dest}")
