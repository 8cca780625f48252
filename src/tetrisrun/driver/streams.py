# SPDX-FileCopyrightText: 2021 Rose Davidson <rose@metaclassical.com>
#
# SPDX-License-Identifier: GPL-3.0-or-later
from __future__ import annotations

import errno
import os

import trio
import trio.lowlevel


def is_peer_closed(exc: BaseException) -> bool:
    """True if a failed send means the reading end went away, as opposed to a real I/O error."""
    if isinstance(exc, BrokenPipeError):
        return True
    if isinstance(exc, OSError) and exc.errno in (errno.EPIPE, errno.ECONNRESET):
        return True
    if isinstance(exc, trio.BrokenResourceError):
        if exc.__cause__ is None:
            # memory streams break with no cause when the receiver closes
            return True
        return is_peer_closed(exc.__cause__)
    return False


def open_stdin() -> trio.lowlevel.FdStream:
    # FdStream takes ownership of the fd (and makes it non-blocking), so give it a copy
    return trio.lowlevel.FdStream(os.dup(0))


def open_stdout() -> trio.lowlevel.FdStream:
    return trio.lowlevel.FdStream(os.dup(1))
