# SPDX-FileCopyrightText: 2021 Rose Davidson <rose@metaclassical.com>
#
# SPDX-License-Identifier: GPL-3.0-or-later
import datetime
import logging

import trio
from trio_util import move_on_when

from ..commontypes import Command, DropSchedule, EndOfInput, InputReadError
from .keystreams import KeyTranslator
from .signals import PauseGate, Shutdown
from .writer import CommandWriter

logger = logging.getLogger(__name__)


class InputForwarder:
    def __init__(self, translator: KeyTranslator, writer: CommandWriter, shutdown: Shutdown):
        self.translator = translator
        self.writer = writer
        self.shutdown = shutdown

    async def run(self, *, task_status=trio.TASK_STATUS_IGNORED):
        task_status.started()
        async with move_on_when(self.shutdown.wait):
            while True:
                try:
                    command = await self.translator.next_command()
                except EndOfInput as e:
                    if isinstance(e, InputReadError):
                        logger.error("%s", e)
                    else:
                        logger.debug("Input finished: %s", e)
                    # the game quits on ESC
                    await self.writer.emit(Command.QUIT)
                    self.shutdown.trigger("input finished")
                    break
                if not await self.writer.emit(command):
                    break
        logger.debug("Input forwarder stopped")


class GravityDriver:
    """Sends a DROP on a timer that speeds up by one step after every drop.

    While the pause gate is closed the timer is stopped; on resume it starts over
    with the full current interval.
    """

    drop_rate: datetime.timedelta

    def __init__(self, writer: CommandWriter, pause: PauseGate, shutdown: Shutdown, schedule: DropSchedule):
        self.writer = writer
        self.pause = pause
        self.shutdown = shutdown
        self.schedule = schedule
        self.drop_rate = schedule.initial
        self.drops = 0

    async def _tick(self) -> bool:
        with trio.move_on_after(self.drop_rate.total_seconds()) as timer:
            await self.pause.wait_paused()
        if not timer.cancelled_caught:
            await self.pause.wait_resumed()
            return True
        if not await self.writer.emit(Command.DROP):
            return False
        self.drops += 1
        self.drop_rate = self.schedule.next(self.drop_rate)
        return True

    async def run(self, *, task_status=trio.TASK_STATUS_IGNORED):
        task_status.started()
        async with move_on_when(self.shutdown.wait):
            while await self._tick():
                pass
        logger.debug("Gravity stopped after %d drops", self.drops)
