"""Parsers for the directory listings produced while walking a tree."""

from __future__ import annotations

import re
from collections.abc import Iterator
from datetime import datetime, timedelta, timezone
from typing import Any

from .fsinfo import MODE_DIR, MODE_TYPE, DirEntry, FileInfo, _base, _parse_int

_CHUNK = 32 * 1024

_DOS_ENTRY = re.compile(r"^\d{4}-\d{2}-\d{2}", re.ASCII)
_DOS_TIME = re.compile(
    r"(\d{4})-(\d{2})-(\d{2}) (\d{2}):(\d{2}) (AM|PM)", re.ASCII
)
_POSIX_CLOCK = re.compile(r"([A-Za-z]{3}) (\d{1,2}) (\d{1,2}):(\d{2})", re.ASCII)
_POSIX_YEAR = re.compile(r"([A-Za-z]{3}) (\d{1,2}) (\d{4})", re.ASCII)
_WIN_TIME = re.compile(
    r"(\d{4})-(\d{2})-(\d{2})T(\d{1,2}):(\d{2}):(\d{2})(?:[.,](\d+))?Z",
    re.ASCII,
)

_MONTHS = {
    name: number
    for number, name in enumerate(
        ("jan", "feb", "mar", "apr", "may", "jun",
         "jul", "aug", "sep", "oct", "nov", "dec"),
        start=1,
    )
}


def _records(reader: Any, sep: bytes) -> Iterator[bytes]:
    """Yield the sep-separated records of reader; a final partial one too."""
    pending = b""
    while chunk := reader.read(_CHUNK):
        pending += bytes(chunk)
        *done, pending = pending.split(sep)
        yield from done
    if pending:
        yield pending


def _lines(reader: Any) -> Iterator[str]:
    for raw in _records(reader, b"\n"):
        yield raw.removesuffix(b"\r").decode("utf-8", errors="replace")


def _mode(is_dir: bool) -> int:
    return (0o755 | MODE_DIR) if is_dir else 0o644


def _entry(
    name: str, size: int, is_dir: bool, mtime: datetime, path: str
) -> DirEntry:
    mode = _mode(is_dir)
    info = FileInfo(name, size, mode, mtime, is_dir)
    return DirEntry(name, is_dir, mode & MODE_TYPE, info, path)


def _date(year: int, month: int, day: int, *rest: int) -> datetime:
    """Build a UTC datetime, rejecting days outside the month."""
    return datetime(year, month, day, *rest, tzinfo=timezone.utc)


def _parse_dos_time(text: str) -> datetime:
    m = _DOS_TIME.fullmatch(text)
    if not m:
        raise ValueError(f"cannot parse {text!r} as date and time")
    year, month, day, hour, minute = (int(g) for g in m.groups()[:5])
    if hour > 12:
        raise ValueError(f"hour out of range in {text!r}")
    if m.group(6) == "PM" and hour < 12:
        hour += 12
    elif m.group(6) == "AM" and hour == 12:
        hour = 0
    return _date(year, month, day, hour, minute)


def _month(name: str, text: str) -> int:
    try:
        return _MONTHS[name.lower()]
    except KeyError:
        raise ValueError(f"bad month in {text!r}") from None


def _parse_posix_time(text: str) -> datetime:
    m = _POSIX_CLOCK.fullmatch(text)
    if m:
        month = _month(m.group(1), text)
        day, hour, minute = int(m.group(2)), int(m.group(3)), int(m.group(4))
        # Validate against a leap year, then move to the current year,
        # rolling an impossible day over into the next month.
        _date(2000, month, day, hour, minute)
        start = _date(datetime.now().year, month, 1, hour, minute)
        return start + timedelta(days=day - 1)
    m = _POSIX_YEAR.fullmatch(text)
    if m:
        month = _month(m.group(1), text)
        return _date(int(m.group(3)), month, int(m.group(2)))
    raise ValueError(f"cannot parse {text!r} as date")


def _parse_windows_time(text: str) -> datetime:
    m = _WIN_TIME.fullmatch(text)
    if not m:
        raise ValueError(f"cannot parse {text!r} as timestamp")
    parts = [int(g) for g in m.groups()[:6]]
    micros = int((m.group(7) or "0")[:6].ljust(6, "0"))
    return _date(*parts, micros)


def dos_dir_entries(reader: Any, base_path: str) -> Iterator[DirEntry]:
    """Parse ``dir /a`` output, yielding one entry per file or directory.

    Entries get the path ``base_path + name`` when base_path is not empty.
    Raises ValueError on an unreadable size or timestamp.
    """
    for line in _lines(reader):
        if not _DOS_ENTRY.match(line):
            continue
        fields = line.split()
        if len(fields) < 4:
            continue
        mtime_str = " ".join(fields[0:3])
        size_str = fields[3]
        filename = " ".join(fields[4:])

        is_dir = False
        size = 0
        if size_str == "<DIR>":
            is_dir = True
        elif size_str.startswith("<"):
            continue
        else:
            try:
                size = _parse_int(size_str.replace(",", ""))
            except ValueError as e:
                raise ValueError(f"bad size: {e}") from e

        if filename in (".", "..") or filename.startswith("["):
            continue

        try:
            mtime = _parse_dos_time(mtime_str)
        except ValueError as e:
            raise ValueError(f"bad mtime: {e}") from e

        path = base_path + filename if base_path else ""
        yield _entry(filename, size, is_dir, mtime, path)


def posix_walk_entries(reader: Any) -> Iterator[DirEntry]:
    """Parse ``ls -ld`` output, yielding one entry per listed path.

    Raises ValueError on an unreadable size or timestamp.
    """
    for raw in _lines(reader):
        line = raw.strip()
        if not line:
            continue
        fields = line.split()
        if len(fields) < 9:
            continue
        permissions = fields[0]
        size_str = fields[4]
        time_str = " ".join(fields[5:8])
        full_path = " ".join(fields[8:])
        name = _base(full_path)
        if name in (".", ".."):
            continue

        is_dir = permissions.startswith("d")
        try:
            size = _parse_int(size_str)
        except ValueError as e:
            raise ValueError(f"bad size: {e}") from e
        try:
            mtime = _parse_posix_time(time_str)
        except ValueError as e:
            raise ValueError(f"bad mtime: {e}") from e

        yield _entry(name, size, is_dir, mtime, full_path)


def windows_walk_entries(reader: Any) -> Iterator[DirEntry]:
    """Parse walk records: fields split by 0x1F, records ended by 0x1E.

    Each record holds name, size (or ``DIR``), UTC mtime and full path.
    Raises ValueError on an unreadable size or timestamp.
    """
    for raw in _records(reader, b"\x1e"):
        record = raw.decode("utf-8", errors="replace")
        if not record:
            continue
        fields = record.split("\x1f")
        if len(fields) != 4:
            continue
        name, size_or_type, mtime_str, full_path = fields
        if name in (".", ".."):
            continue

        is_dir = size_or_type == "DIR"
        size = 0
        if not is_dir:
            try:
                size = _parse_int(size_or_type)
            except ValueError as e:
                raise ValueError(f"bad size: {e}") from e
        try:
            mtime = _parse_windows_time(mtime_str)
        except ValueError as e:
            raise ValueError(f"bad mtime: {e}") from e

        yield _entry(name, size, is_dir, mtime, full_path)