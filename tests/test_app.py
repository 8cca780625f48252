# SPDX-FileCopyrightText: 2021 Rose Davidson <rose@metaclassical.com>
#
# SPDX-License-Identifier: GPL-3.0-or-later
import datetime
import errno
import io
import json
import logging
import pathlib

import pytest
import trio
import trio.testing

from tetrisrun import scripts
from tetrisrun.app import Tetrisrun, load_settings, main, parser
from tetrisrun.scripts import print_commands, print_commands_cli
from tetrisrun.settings import Settings


def sent(stream: trio.testing.MemorySendStream) -> bytes:
    try:
        return stream.get_data_nowait()
    except trio.WouldBlock:
        return b""


def make_app(settings=None, output_stream=None):
    if settings is None:
        settings = Settings.default()
    send_stream, receive_stream = trio.testing.memory_stream_one_way_pair()
    if output_stream is None:
        output_stream = trio.testing.MemorySendStream()
    return send_stream, output_stream, Tetrisrun(settings, receive_stream, output_stream)


async def test_keys_then_quit(autojump_clock: trio.testing.MockClock):
    send_stream, output, app = make_app()
    await send_stream.send_all(b"wjsdq")
    with trio.fail_after(5):
        await app.run()
    assert sent(output) == b"ijkl\x1b"
    assert app.shutdown.is_set()
    assert trio.current_time() == 0


async def test_gravity_and_keys_interleave(autojump_clock: trio.testing.MockClock):
    send_stream, output, app = make_app()
    async with trio.open_nursery() as nursery:
        await nursery.start(app.run)
        await trio.sleep(0.5)
        await send_stream.send_all(b"a")
        await trio.sleep(1)
        await send_stream.send_all(b"\x1b[C")
        await trio.sleep(1)
        await send_stream.send_all(b"\x04")
    # drops at 1.0s and 1.999s
    assert sent(output) == b"jklk\x1b"
    assert trio.current_time() == pytest.approx(2.5)


async def test_downstream_closed_before_any_key(autojump_clock: trio.testing.MockClock, caplog: pytest.LogCaptureFixture):
    output_send, output_receive = trio.testing.memory_stream_one_way_pair()
    await output_receive.aclose()
    send_stream, _, app = make_app(output_stream=output_send)
    with trio.fail_after(5):
        await app.run()
    # the first gravity drop finds the pipe closed; the forwarder is still waiting for a key
    assert trio.current_time() == pytest.approx(1)
    assert app.shutdown.is_set()
    assert app.gravity.drops == 0
    assert not [r for r in caplog.records if r.levelno >= logging.WARNING]


async def test_pause_freezes_gravity(autojump_clock: trio.testing.MockClock):
    send_stream, output, app = make_app()
    async with trio.open_nursery() as nursery:
        await nursery.start(app.run)
        await send_stream.send_all(b"p")
        await trio.sleep(5)
        assert app.pause.is_paused
        assert sent(output) == b""
        await send_stream.send_all(b" ")
        await trio.sleep(0.9995)
        assert not app.pause.is_paused
        assert sent(output) == b""
        await trio.sleep(0.001)
        assert sent(output) == b"k"
        await send_stream.send_all(b"q")
    assert sent(output) == b"\x1b"


async def test_no_gravity(autojump_clock: trio.testing.MockClock):
    settings = Settings.default().replace(gravity=False)
    send_stream, output, app = make_app(settings)
    assert app.gravity is None
    async with trio.open_nursery() as nursery:
        await nursery.start(app.run)
        await trio.sleep(60)
        await send_stream.send_all(b"sq")
    assert sent(output) == b"k\x1b"


async def test_print_commands():
    send_stream, receive_stream = trio.testing.memory_stream_one_way_pair()
    await send_stream.send_all(b"iwj\x1b[Bp dq")
    out = io.StringIO()
    with trio.fail_after(1):
        await print_commands(Settings.default(), receive_stream, out=out)
    assert out.getvalue().split() == ["ROTATE", "ROTATE", "LEFT", "DROP", "RIGHT"]


def test_load_settings_defaults():
    assert load_settings(parser.parse_args([])) == Settings.default()


def test_load_settings_overrides(tmp_path: pathlib.Path):
    settings_path = tmp_path / "settings.json"
    settings_path.write_text(json.dumps({"initial_drop_rate": "2s"}))
    parsed = parser.parse_args(
        ["--settings", str(settings_path), "--final-drop-rate", "10ms", "--drop-rate-delta", "5ms", "--no-gravity"]
    )
    settings = load_settings(parsed)
    assert settings.initial_drop_rate == datetime.timedelta(seconds=2)
    assert settings.final_drop_rate == datetime.timedelta(milliseconds=10)
    assert settings.drop_rate_delta == datetime.timedelta(milliseconds=5)
    assert settings.escape_timeout == datetime.timedelta(milliseconds=100)
    assert settings.gravity is False


def test_main_rejects_bad_settings(tmp_path: pathlib.Path, caplog: pytest.LogCaptureFixture):
    settings_path = tmp_path / "settings.json"
    settings_path.write_text(json.dumps({"quit_keys": ["q", "w"]}))
    assert main(["tetrisrun", "--settings", str(settings_path)]) == 2
    assert "bound to both" in caplog.text


def test_main_rejects_missing_settings(tmp_path: pathlib.Path):
    assert main(["tetrisrun", "--settings", str(tmp_path / "nope.json")]) == 2


def test_main_rejects_inverted_drop_rates():
    assert main(["tetrisrun", "--initial-drop-rate", "1ms", "--final-drop-rate", "2ms"]) == 2


class BrokenReceiveStream(trio.abc.ReceiveStream):
    async def receive_some(self, max_bytes=None):
        await trio.lowlevel.checkpoint()
        raise trio.BrokenResourceError from OSError(errno.EIO, "Input/output error")

    async def aclose(self):
        pass


def test_print_commands_cli_rejects_bad_settings(tmp_path: pathlib.Path, caplog: pytest.LogCaptureFixture):
    settings_path = tmp_path / "settings.json"
    settings_path.write_text(json.dumps({"final_drop_rate": "2s"}))
    assert print_commands_cli(["tetrisrun-commands", "--settings", str(settings_path)]) == 2
    assert "must not exceed initial_drop_rate" in caplog.text
    assert print_commands_cli(["tetrisrun-commands", "--settings", str(tmp_path / "nope.json")]) == 2


def test_print_commands_cli_read_error(monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture):
    monkeypatch.setattr(scripts, "open_stdin", BrokenReceiveStream)
    assert print_commands_cli(["tetrisrun-commands"]) == 2
    assert "Could not read input" in caplog.text
