import os
import time

import pytest

from shardproxy.filehandler import (
    FileHandler,
    RotatingFileHandler,
    TimeRotatingFileHandler,
    When,
)


def _read(path):
    with open(path, "rb") as fh:
        return fh.read()


def test_file_handler_writes(tmp_path):
    path = tmp_path / "plain.log"
    with FileHandler(str(path), "a") as handler:
        assert handler.write(b"hello ") == 6
        assert handler.write("world") == 5
    assert _read(path) == b"hello world"


def test_file_handler_creates_directory(tmp_path):
    path = tmp_path / "sub" / "plain.log"
    handler = FileHandler(str(path), "w")
    handler.write(b"x")
    handler.close()
    assert _read(path) == b"x"


def test_rotating_file_log(tmp_path):
    file_name = str(tmp_path / "test_log" / "test")
    handler = RotatingFileHandler(file_name, 1024 * 1024, 2)
    line = f"fileName={file_name}|fileName2={file_name}\n".encode()
    assert handler.write(line) == len(line)
    handler.close()
    assert _read(file_name) == line
    assert not os.path.exists(file_name + ".1")


def test_rotating_invalid_max_bytes(tmp_path):
    with pytest.raises(ValueError, match="invalid max bytes"):
        RotatingFileHandler(str(tmp_path / "x.log"), 0, 1)


def test_rotating_rolls_over_and_keeps_backups(tmp_path):
    name = str(tmp_path / "r.log")
    handler = RotatingFileHandler(name, 10, 2)
    handler.write(b"a" * 10)
    handler.write(b"b" * 10)
    handler.write(b"c")
    handler.close()
    assert _read(name) == b"c"
    assert _read(name + ".1") == b"b" * 10
    assert _read(name + ".2") == b"a" * 10


def test_rotating_drops_oldest_backup(tmp_path):
    name = str(tmp_path / "r.log")
    with RotatingFileHandler(name, 10, 2) as handler:
        for chunk in (b"a" * 10, b"b" * 10, b"c" * 10, b"d"):
            handler.write(chunk)
    assert _read(name) == b"d"
    assert _read(name + ".1") == b"c" * 10
    assert _read(name + ".2") == b"b" * 10
    assert not os.path.exists(name + ".3")


def test_rotating_without_backups_never_rotates(tmp_path):
    name = str(tmp_path / "r.log")
    with RotatingFileHandler(name, 5, 0) as handler:
        handler.write(b"12345")
        handler.write(b"67890")
    assert _read(name) == b"1234567890"
    assert not os.path.exists(name + ".1")


def test_time_rotating_invalid_when(tmp_path):
    with pytest.raises(ValueError, match="invalid when_rotate: 9"):
        TimeRotatingFileHandler(str(tmp_path / "t.log"), 9, 1)


def test_time_rotating_interval(tmp_path):
    with TimeRotatingFileHandler(str(tmp_path / "t.log"), When.HOUR, 2) as handler:
        assert handler.interval == 7200
        assert handler.suffix == "%Y-%m-%d_%H"


def test_time_rotating_no_rollover_within_period(tmp_path):
    name = str(tmp_path / "t.log")
    with TimeRotatingFileHandler(name, When.DAY, 1) as handler:
        handler.write(b"one")
        handler.write(b"two")
    assert _read(name) == b"onetwo"
    assert os.listdir(tmp_path) == ["t.log"]


def test_time_rotating_rolls_over_old_file(tmp_path):
    name = str(tmp_path / "t.log")
    with open(name, "wb") as fh:
        fh.write(b"old")
    past = time.time() - 3 * 24 * 3600
    os.utime(name, (past, past))

    with TimeRotatingFileHandler(name, When.DAY, 1) as handler:
        handler.write(b"new")

    assert _read(name) == b"new"
    others = [entry for entry in os.listdir(tmp_path) if entry != "t.log"]
    assert len(others) == 1
    assert others[0].startswith("t.log")
    assert _read(tmp_path / others[0]) == b"old"