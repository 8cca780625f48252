# SPDX-FileCopyrightText: 2021 Rose Davidson <rose@metaclassical.com>
#
# SPDX-License-Identifier: GPL-3.0-or-later
import logging

import trio

from ..commontypes import Command
from .signals import Shutdown
from .streams import is_peer_closed

logger = logging.getLogger(__name__)


class CommandWriter:
    """Sends single command bytes downstream, shared by both loops."""

    def __init__(self, stream: trio.abc.SendStream, shutdown: Shutdown):
        self.stream = stream
        self.shutdown = shutdown
        # trio refuses overlapping send_all calls on one stream
        self._lock = trio.StrictFIFOLock()

    async def emit(self, command: Command) -> bool:
        async with self._lock:
            if self.shutdown.is_set():
                return False
            try:
                await self.stream.send_all(command.wire)
            except (trio.BrokenResourceError, trio.ClosedResourceError, OSError) as e:
                if is_peer_closed(e):
                    logger.debug("Downstream closed while sending %s", command.name)
                else:
                    logger.error("Unable to send %s: %s", command.name, e.__cause__ or e)
                self.shutdown.trigger("output closed")
                return False
        return True
