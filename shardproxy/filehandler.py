"""Log handlers writing to plain, size-rotated and time-rotated files."""

from __future__ import annotations

import enum
import os
import time
from datetime import datetime
from typing import BinaryIO, Optional, Union

_Data = Union[bytes, bytearray, str]


class When(enum.IntEnum):
    """Unit of the rotation period of a TimeRotatingFileHandler."""

    SECOND = 0
    MINUTE = 1
    HOUR = 2
    DAY = 3


_WHEN_SETTINGS = {
    When.SECOND: (1, "%Y-%m-%d_%H-%M-%S"),
    When.MINUTE: (60, "%Y-%m-%d_%H-%M"),
    When.HOUR: (3600, "%Y-%m-%d_%H"),
    When.DAY: (3600 * 24, "%Y-%m-%d"),
}


def _ensure_dir(file_name: str) -> None:
    directory = os.path.dirname(file_name) or "."
    try:
        os.mkdir(directory, 0o777)
    except OSError:
        pass


def _open_append(file_name: str) -> BinaryIO:
    return open(file_name, "ab", buffering=0)


def _as_bytes(data: _Data) -> bytes:
    return data.encode("utf-8") if isinstance(data, str) else bytes(data)


class _Handler:
    _fd: Optional[BinaryIO]

    def _write(self, data: _Data) -> int:
        if self._fd is None:
            raise ValueError("handler is closed")
        return self._fd.write(_as_bytes(data))

    def close(self) -> None:
        """Close the underlying file."""
        if self._fd is not None:
            self._fd.close()
            self._fd = None

    def __enter__(self):
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


class FileHandler(_Handler):
    """Writes log data to one file."""

    def __init__(self, file_name: str, mode: str = "a") -> None:
        file_name = os.fspath(file_name)
        _ensure_dir(file_name)
        if "b" not in mode:
            mode += "b"
        self._fd = open(file_name, mode, buffering=0)

    def write(self, data: _Data) -> int:
        """Write ``data`` and return the number of bytes written."""
        return self._write(data)

    def close(self) -> None:
        """Close the file."""
        super().close()


class RotatingFileHandler(_Handler):
    """Writes to a file, moving it aside once it reaches ``max_bytes``.

    Backups are named ``<file>.1`` (newest) up to ``<file>.<backup_count>``;
    older ones are dropped. With no backups the file is never rotated.
    """

    def __init__(self, file_name: str, max_bytes: int, backup_count: int) -> None:
        file_name = os.fspath(file_name)
        _ensure_dir(file_name)
        if max_bytes <= 0:
            raise ValueError("invalid max bytes")
        self.file_name = file_name
        self.max_bytes = max_bytes
        self.backup_count = backup_count
        self._fd = _open_append(file_name)

    def write(self, data: _Data) -> int:
        """Rotate if needed, then write ``data``."""
        self._do_rollover()
        return self._write(data)

    def close(self) -> None:
        """Close the current file."""
        super().close()

    def _do_rollover(self) -> None:
        if self._fd is None:
            return
        try:
            size = os.fstat(self._fd.fileno()).st_size
        except OSError:
            return
        if size < self.max_bytes or self.backup_count <= 0:
            return

        self._fd.close()
        for i in range(self.backup_count - 1, 0, -1):
            _rename_quietly(f"{self.file_name}.{i}", f"{self.file_name}.{i + 1}")
        _rename_quietly(self.file_name, f"{self.file_name}.1")
        self._fd = _open_append(self.file_name)


def _rename_quietly(src: str, dst: str) -> None:
    try:
        os.replace(src, dst)
    except OSError:
        pass


class TimeRotatingFileHandler(_Handler):
    """Writes to a file, moving it aside every ``interval`` units of ``when``.

    The moved file is named after the base name followed by the time of
    rotation; the first period ends ``interval`` after the file's last change.
    """

    def __init__(self, base_name: str, when: When | int, interval: int) -> None:
        base_name = os.fspath(base_name)
        _ensure_dir(base_name)
        try:
            unit, suffix = _WHEN_SETTINGS[When(when)]
        except ValueError:
            raise ValueError(f"invalid when_rotate: {int(when)}") from None
        self.base_name = base_name
        self.interval = unit * interval
        self.suffix = suffix
        self._fd = _open_append(base_name)
        mtime = int(os.fstat(self._fd.fileno()).st_mtime)
        self.rollover_at = mtime + self.interval

    def write(self, data: _Data) -> int:
        """Rotate if the period is over, then write ``data``."""
        self._do_rollover()
        return self._write(data)

    def close(self) -> None:
        """Close the current file."""
        super().close()

    def _do_rollover(self) -> None:
        now = datetime.now()
        if self.rollover_at > int(now.timestamp()):
            return
        target = self.base_name + now.strftime(self.suffix)
        if self._fd is not None:
            self._fd.close()
        os.replace(self.base_name, target)
        self._fd = _open_append(self.base_name)
        self.rollover_at = int(time.time()) + self.interval