import os
import termios

import pytest

from lc3vm.console import RawInput, key_ready


@pytest.fixture
def pipe():
    read_fd, write_fd = os.pipe()
    reader = os.fdopen(read_fd, "rb", buffering=0)
    yield reader, write_fd
    reader.close()
    os.close(write_fd)


@pytest.fixture
def tty():
    master, slave = os.openpty()
    stream = os.fdopen(slave, "rb", buffering=0)
    yield stream
    stream.close()
    os.close(master)


def test_key_ready_false_when_empty(pipe):
    reader, _ = pipe
    assert key_ready(reader) is False


def test_key_ready_true_after_write(pipe):
    reader, write_fd = pipe
    os.write(write_fd, b"a")
    assert key_ready(reader) is True
    assert reader.read(1) == b"a"
    assert key_ready(reader) is False


def test_raw_input_leaves_non_terminal_alone(pipe):
    reader, _ = pipe
    with RawInput(reader) as raw:
        assert raw.active is False
    assert raw.active is False


def test_raw_input_disables_canonical_mode_and_echo(tty):
    fd = tty.fileno()
    before = termios.tcgetattr(fd)
    with RawInput(tty) as raw:
        assert raw.active is True
        lflag = termios.tcgetattr(fd)[3]
        assert lflag & termios.ICANON == 0
        assert lflag & termios.ECHO == 0
    assert raw.active is False
    assert termios.tcgetattr(fd) == before


def test_restore_is_idempotent(tty):
    fd = tty.fileno()
    before = termios.tcgetattr(fd)
    raw = RawInput(tty)
    raw.__enter__()
    raw.restore()
    raw.restore()
    assert raw.active is False
    assert termios.tcgetattr(fd) == before