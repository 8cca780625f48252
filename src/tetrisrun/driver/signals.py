# SPDX-FileCopyrightText: 2021 Rose Davidson <rose@metaclassical.com>
#
# SPDX-License-Identifier: GPL-3.0-or-later
import logging

import trio
from trio_util import AsyncBool

logger = logging.getLogger(__name__)


class Shutdown:
    """Set once, by whichever component notices first that the session is over."""

    def __init__(self):
        self._event = trio.Event()

    def trigger(self, reason: str = ""):
        if not self._event.is_set():
            logger.debug("Shutting down: %s", reason or "requested")
            self._event.set()

    def is_set(self) -> bool:
        return self._event.is_set()

    async def wait(self):
        await self._event.wait()


class PauseGate:
    """Pause handshake between the translator, which enters and exits, and the gravity loop, which waits."""

    def __init__(self):
        self.paused = AsyncBool(False)

    def enter(self):
        logger.debug("Paused")
        self.paused.value = True

    def exit(self):
        logger.debug("Resumed")
        self.paused.value = False

    @property
    def is_paused(self) -> bool:
        return self.paused.value

    async def wait_paused(self):
        await self.paused.wait_value(True)

    async def wait_resumed(self):
        await self.paused.wait_value(False)
