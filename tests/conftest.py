import os
import pathlib

import pytest

from keymacros.device.hwtypes import InputEvent


@pytest.fixture
def event_fifo(tmp_path: pathlib.Path):
    """Make a named pipe that already holds the given events, followed by end of file.

    A reader end is held open until the test finishes, so the data written before the
    writer closed stays in the pipe for the code under test to read.
    """
    held_open = []

    def make(events: list[InputEvent], name: str = "event0") -> pathlib.Path:
        path = tmp_path / name
        os.mkfifo(path)
        held_open.append(os.open(path, os.O_RDONLY | os.O_NONBLOCK))
        writer = os.open(path, os.O_WRONLY)
        try:
            os.write(writer, b"".join(event.pack() for event in events))
        finally:
            os.close(writer)
        return path

    yield make
    for fd in held_open:
        os.close(fd)
