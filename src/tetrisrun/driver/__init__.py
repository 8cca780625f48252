# SPDX-FileCopyrightText: 2021 Rose Davidson <rose@metaclassical.com>
#
# SPDX-License-Identifier: GPL-3.0-or-later

# Keystroke path
# streams: raw bytes from stdin, one at a time, with push-back
# keystreams: aliases, quit and pause keys, escape sequences -> Command
# loops: input forwarder (keys) and gravity driver (timed drops), both through the one writer
