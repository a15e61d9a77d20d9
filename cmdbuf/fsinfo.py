"""File metadata, stat output parsing and path localization."""

from __future__ import annotations

import enum
import re
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

MODE_DIR = 1 << 31
"""Mode bit marking a directory."""

MODE_PERM = 0o777
"""Mode bits holding the Unix permissions."""

MODE_TYPE = MODE_DIR
"""Mode bits describing the kind of file."""

_UNIX_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
_WINDOWS_EPOCH_DIFF = 116444736000000000

_DIGITS = {
    8: re.compile(r"[0-7]+"),
    10: re.compile(r"[0-9]+"),
    16: re.compile(r"[0-9a-fA-F]+"),
}


class UnsupportedOSError(Exception):
    """Raised when the remote system's kind is unknown."""

    def __init__(self, message: str = "unknown OS") -> None:
        super().__init__(message)


class FsKind(enum.Enum):
    """The family of commands a remote system offers for file access."""

    UNKNOWN = enum.auto()
    GNU = enum.auto()
    BSD = enum.auto()
    WINDOWS = enum.auto()
    DOS = enum.auto()


@dataclass(frozen=True)
class FileInfo:
    """Metadata describing one file."""

    name: str
    size: int
    mode: int
    mtime: datetime
    is_dir: bool

    @property
    def type(self) -> int:
        """The type bits of the mode."""
        return self.mode & MODE_TYPE


@dataclass(frozen=True)
class DirEntry:
    """An entry found while walking a directory tree."""

    name: str
    is_dir: bool
    type: int
    info: FileInfo
    path: str = ""


def _parse_uint(text: str, base: int, bits: int) -> int:
    if not _DIGITS[base].fullmatch(text):
        raise ValueError(f"invalid unsigned integer {text!r}")
    value = int(text, base)
    if value >= 1 << bits:
        raise ValueError(f"value out of range: {text!r}")
    return value


def _parse_int(text: str) -> int:
    sign = 1
    digits = text
    if digits[:1] in ("+", "-"):
        sign = -1 if digits[0] == "-" else 1
        digits = digits[1:]
    if not _DIGITS[10].fullmatch(digits):
        raise ValueError(f"invalid integer {text!r}")
    value = sign * int(digits, 10)
    if not -(1 << 63) <= value < (1 << 63):
        raise ValueError(f"value out of range: {text!r}")
    return value


def _base(name: str) -> str:
    if name == "":
        return "."
    stripped = name.rstrip("/\\")
    if stripped == "":
        return name[0]
    cut = max(stripped.rfind("/"), stripped.rfind("\\"))
    return stripped[cut + 1:]


def _fields(out: str) -> list[str]:
    fields = out.split()
    if len(fields) < 4:
        raise ValueError("invalid stat output")
    return fields


def _unix_stat(out: str, name: str, base: int, dir_bit: int) -> FileInfo:
    mode_str, size_str, mtime_str = _fields(out)[:3]
    raw_mode = _parse_uint(mode_str, base, 32)
    size = _parse_int(size_str)
    mtime = _UNIX_EPOCH + timedelta(seconds=_parse_int(mtime_str))
    is_dir = bool(raw_mode & dir_bit)
    mode = raw_mode & MODE_PERM
    if is_dir:
        mode |= MODE_DIR
    return FileInfo(_base(name), size, mode, mtime, is_dir)


def parse_gnu_stat(out: str, name: str) -> FileInfo:
    """Parse GNU ``stat -c '%f %s %Y %n'`` output for name."""
    return _unix_stat(out, name, 16, 0x4000)


def parse_bsd_stat(out: str, name: str) -> FileInfo:
    """Parse BSD ``stat -f '%p %z %m %N'`` output for name."""
    return _unix_stat(out, name, 8, 0o40000)


def parse_windows_stat(out: str, name: str) -> FileInfo:
    """Parse PowerShell ``Mode Length FileTime Name`` output for name."""
    mode_str, size_str, ftime_str = _fields(out)[:3]
    is_dir = "d" in mode_str
    mode = (0o755 | MODE_DIR) if is_dir else 0o644
    size = _parse_int(size_str)
    ftime = _parse_int(ftime_str)
    mtime = _UNIX_EPOCH + timedelta(
        microseconds=(ftime - _WINDOWS_EPOCH_DIFF) // 10
    )
    return FileInfo(_base(name), size, mode, mtime, is_dir)


def localize(kind: FsKind, name: str) -> str:
    """Convert a slash-separated path to the form kind's system expects."""
    if kind in (FsKind.GNU, FsKind.BSD):
        return name
    if kind in (FsKind.WINDOWS, FsKind.DOS):
        if "\\" in name:
            return name
        return name.replace("/", "\\")
    raise UnsupportedOSError()