from __future__ import annotations

import datetime
import logging
import pathlib
import shlex
import time

import pytest

from keymacros.app import DEFAULT_CONFIG_PATH, main, parser
from keymacros.device.hwtypes import InputEvent
from keymacros.keycodes import EventType, KeyCode, KeyPress


def press(*codes: int) -> list[InputEvent]:
    events = []
    for code in codes:
        for value in (KeyPress.PRESSED, KeyPress.RELEASED):
            events.append(InputEvent(timestamp=datetime.timedelta(), type=EventType.EV_KEY, code=code, value=value))
            events.append(InputEvent(timestamp=datetime.timedelta(), type=EventType.EV_SYN, code=0, value=0))
    return events


def write_config(tmp_path: pathlib.Path, text: str) -> pathlib.Path:
    path = tmp_path / "keymacros.conf"
    path.write_text(text)
    return path


def test_parser_defaults():
    parsed = parser.parse_args([])
    assert parsed.config == DEFAULT_CONFIG_PATH
    assert parsed.delay is None
    assert parsed.device is None
    assert not parsed.show_keys
    assert not parsed.verbose


def test_parser_options():
    parsed = parser.parse_args(["--config", "/etc/keymacros.conf", "-k", "--delay", "1500ms", "--device", "/dev/input/event4", "-v"])
    assert parsed.config == pathlib.Path("/etc/keymacros.conf")
    assert parsed.show_keys
    assert parsed.delay == datetime.timedelta(milliseconds=1500)
    assert parsed.device == pathlib.Path("/dev/input/event4")
    assert parsed.verbose


@pytest.mark.parametrize("args", (["--delay", "whenever"], ["--delay", "inf"], ["--delay", "1e20"], ["--delay=-1s"]))
def test_parser_bad_delay(args: list[str]):
    with pytest.raises(SystemExit):
        parser.parse_args(args)


def test_main_missing_device(tmp_path: pathlib.Path, caplog):
    config = write_config(tmp_path, 'KEY_A => "true"\n')
    assert main(["keymacros", "--config", str(config), "--device", str(tmp_path / "event99")]) == 1
    assert "event99" in caplog.text


def test_main_runs_commands_until_quit(tmp_path: pathlib.Path, event_fifo, caplog):
    caplog.set_level(logging.INFO)
    target = tmp_path / "touched"
    config = write_config(
        tmp_path,
        f"""\
delay = 1
KEY_A, KEY_B => "touch {shlex.quote(str(target))}"
KEY_1, KEY_1, KEY_1 => Quit
KEY_C => "touch {shlex.quote(str(tmp_path / 'never'))}"
""",
    )
    device = event_fifo(press(KeyCode.KEY_A, KeyCode.KEY_B, KeyCode.KEY_1, KeyCode.KEY_1, KeyCode.KEY_1, KeyCode.KEY_C))
    assert main(["keymacros", "--config", str(config), "--device", str(device)]) == 0
    assert "Loaded 3 key sequences" in caplog.text
    assert "KEY_1, KEY_1, KEY_1 => quit" in caplog.text
    deadline = time.monotonic() + 5
    while not target.exists() and time.monotonic() < deadline:
        time.sleep(0.01)
    assert target.exists()
    assert not (tmp_path / "never").exists()


def test_main_show_keys(tmp_path: pathlib.Path, event_fifo, capsys):
    config = write_config(tmp_path, "")
    device = event_fifo(press(KeyCode.KEY_A, KeyCode.KEY_F13, 0x2FE))
    assert main(["keymacros", "--config", str(config), "--device", str(device), "--show-keys"]) == 0
    assert capsys.readouterr().out.splitlines() == ["KEY_A", "KEY_F13", "766"]


def test_main_without_config(tmp_path: pathlib.Path, event_fifo, caplog):
    device = event_fifo(press(KeyCode.KEY_A))
    assert main(["keymacros", "--config", str(tmp_path / "missing.conf"), "--device", str(device)]) == 0
    assert "missing.conf" in caplog.text
