# SPDX-FileCopyrightText: 2021 Rose Davidson <rose@metaclassical.com>
#
# SPDX-License-Identifier: GPL-3.0-or-later
from __future__ import annotations

import argparse
import logging
import pathlib
import signal
import sys
from typing import Optional

import trio
import tricycle

from .commontypes import SettingsError
from .driver.keystreams import KeyTranslator
from .driver.loops import GravityDriver, InputForwarder
from .driver.signals import PauseGate, Shutdown
from .driver.streams import open_stdin, open_stdout
from .driver.writer import CommandWriter
from .durations import parse_duration
from .settings import Settings

logger = logging.getLogger(__name__)


class Tetrisrun:
    """Feeds keystrokes and gravity to a game reading commands from a pipe."""

    def __init__(
        self,
        settings: Settings,
        input_stream: trio.abc.ReceiveStream,
        output_stream: trio.abc.SendStream,
        shutdown: Optional[Shutdown] = None,
        pause: Optional[PauseGate] = None,
    ):
        self.settings = settings
        self.shutdown = shutdown if shutdown is not None else Shutdown()
        self.pause = pause if pause is not None else PauseGate()
        self.reader = tricycle.BufferedReceiveStream(input_stream)
        self.writer = CommandWriter(output_stream, self.shutdown)
        self.translator = KeyTranslator.from_settings(self.reader, self.pause, settings)
        self.forwarder = InputForwarder(self.translator, self.writer, self.shutdown)
        self.gravity = GravityDriver(self.writer, self.pause, self.shutdown, settings.drop_schedule) if settings.gravity else None

    async def run(self, *, task_status=trio.TASK_STATUS_IGNORED):
        async with trio.open_nursery() as nursery:
            await nursery.start(self.forwarder.run)
            if self.gravity is not None:
                await nursery.start(self.gravity.run)
            task_status.started()
        logger.debug("goodbye")


async def start_tetrisrun(settings: Settings):
    async with open_stdin() as stdin, open_stdout() as stdout:
        app = Tetrisrun(settings, stdin, stdout)
        await app.run()


parser = argparse.ArgumentParser(prog="tetrisrun", description="Add gravity and key aliases to a terminal Tetris game.")
parser.add_argument("--settings", type=pathlib.Path, help="JSON settings file")
parser.add_argument("--escape-timeout", type=parse_duration, metavar="DURATION")
parser.add_argument("--initial-drop-rate", type=parse_duration, metavar="DURATION")
parser.add_argument("--final-drop-rate", type=parse_duration, metavar="DURATION")
parser.add_argument("--drop-rate-delta", type=parse_duration, metavar="DURATION")
parser.add_argument("--no-gravity", dest="gravity", action="store_false", default=None, help="only forward keys")
parser.add_argument("--log-level", default="WARNING", choices=["DEBUG", "INFO", "WARNING", "ERROR"])


def load_settings(parsed: argparse.Namespace) -> Settings:
    settings = Settings.load(parsed.settings) if parsed.settings is not None else Settings.default()
    overrides = {
        name: getattr(parsed, name)
        for name in ("escape_timeout", "initial_drop_rate", "final_drop_rate", "drop_rate_delta", "gravity")
        if getattr(parsed, name) is not None
    }
    if overrides:
        settings = settings.replace(**overrides)
    return settings


def main(argv=sys.argv):
    """
    Args:
        argv (list): List of arguments

    Returns:
        int: A return code

    Reads keystrokes from stdin and writes game commands to stdout until either side goes away.
    """
    parsed = parser.parse_args(argv[1:])
    logging.basicConfig(level=getattr(logging, parsed.log_level), stream=sys.stderr)
    try:
        settings = load_settings(parsed)
    except (SettingsError, OSError, ValueError) as e:
        logger.error("%s", e)
        return 2
    # a write to a closed pipe should fail with EPIPE, not kill the process
    signal.signal(signal.SIGPIPE, signal.SIG_IGN)
    trio.run(start_tetrisrun, settings)
    return 0
