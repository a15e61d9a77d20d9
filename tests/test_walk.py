import io
from datetime import datetime, timezone

import pytest

from cmdbuf.fsinfo import MODE_DIR, DirEntry, FileInfo
from cmdbuf.walk import dos_dir_entries, posix_walk_entries, windows_walk_entries


def utc(*args):
    return datetime(*args, tzinfo=timezone.utc)


def file_entry(name, size, mtime, path=""):
    return DirEntry(name, False, 0, FileInfo(name, size, 0o644, mtime, False), path)


def dir_entry(name, size, mtime, path=""):
    return DirEntry(
        name, True, MODE_DIR,
        FileInfo(name, size, 0o755 | MODE_DIR, mtime, True), path,
    )


def reader(text):
    return io.BytesIO(text.encode())


DOS_CASES = [
    (
        """ Volume in drive C has no label.
 Volume Serial Number is 0000-0000

 Directory of C:\\test

2025-11-22  06:11 PM    <DIR>          .
2025-11-22  06:11 PM    <DIR>          ..
2021-12-31  09:44 AM                54 .bash_history
2025-11-22  06:11 PM    <DIR>          subdir
2025-11-22  06:11 PM               100 test.txt
               2 File(s)            154 bytes
               3 Dir(s)  1,234,567,890 bytes free""",
        [
            file_entry(".bash_history", 54, utc(2021, 12, 31, 9, 44)),
            dir_entry("subdir", 0, utc(2025, 11, 22, 18, 11)),
            file_entry("test.txt", 100, utc(2025, 11, 22, 18, 11)),
        ],
    ),
    (
        """ Directory of C:\\test

2025-11-22  06:11 PM               100 file1.txt
2025-11-22  06:11 PM               200 file2.txt
               2 File(s)            300 bytes""",
        [
            file_entry("file1.txt", 100, utc(2025, 11, 22, 18, 11)),
            file_entry("file2.txt", 200, utc(2025, 11, 22, 18, 11)),
        ],
    ),
    (
        """ Directory of C:\\test

2025-11-22  06:11 PM             1,234 largefile.bin
               1 File(s)          1,234 bytes""",
        [file_entry("largefile.bin", 1234, utc(2025, 11, 22, 18, 11))],
    ),
    (
        """ Directory of C:\\test

2025-11-22  06:11 PM               150 file with spaces.txt
               1 File(s)            150 bytes""",
        [file_entry("file with spaces.txt", 150, utc(2025, 11, 22, 18, 11))],
    ),
    (
        """ Volume in drive C has no label.
 Directory of C:\\test

2025-11-22  06:11 PM    <DIR>          .
2025-11-22  06:11 PM    <DIR>          ..
               0 File(s)              0 bytes""",
        [],
    ),
    (
        """ Directory of C:\\test

2009-02-02  03:04 PM               100 feb.txt
1970-01-01  12:00 AM               200 epoch.txt
               2 File(s)            300 bytes""",
        [
            file_entry("feb.txt", 100, utc(2009, 2, 2, 15, 4)),
            file_entry("epoch.txt", 200, utc(1970, 1, 1, 0, 0)),
        ],
    ),
]


@pytest.mark.parametrize(
    "text,want", DOS_CASES,
    ids=["mixed", "only-files", "size-commas", "spaces", "empty", "single-digit-days"],
)
def test_dos_dir_entries(text, want):
    assert list(dos_dir_entries(reader(text), "")) == want


def test_dos_dir_entries_crlf_and_base_path():
    text = "2025-11-22  06:11 PM               100 a.txt\r\n"
    got = list(dos_dir_entries(reader(text), "C:\\test\\"))
    assert got == [file_entry("a.txt", 100, utc(2025, 11, 22, 18, 11), "C:\\test\\a.txt")]


def test_dos_dir_entries_skips_junctions():
    text = (
        "2025-11-22  06:11 PM    <JUNCTION>     link [C:\\target]\n"
        "2025-11-22  06:11 PM               7 x.txt\n"
    )
    got = list(dos_dir_entries(reader(text), ""))
    assert [e.name for e in got] == ["x.txt"]


def test_dos_dir_entries_bad_mtime():
    text = "2025-13-22  06:11 PM               100 a.txt\n"
    with pytest.raises(ValueError, match="bad mtime"):
        list(dos_dir_entries(reader(text), ""))


def test_dos_dir_entries_bad_size():
    text = "2025-11-22  06:11 PM               1x0 a.txt\n"
    with pytest.raises(ValueError, match="bad size"):
        list(dos_dir_entries(reader(text), ""))


POSIX_CASES = [
    (
        """drwxr-xr-x  5 user  group  160 Nov 21 10:00 .
drwxr-xr-x 10 user  group  320 Nov 21 09:00 ..
-rw-r--r--  1 user  group    3 Nov 21 2024 file1.txt
-rw-r--r--  1 user  group    3 Dec 31 2023 file2.txt
drwxr-xr-x  2 user  group   64 Jan 15 2025 subdir""",
        [
            file_entry("file1.txt", 3, utc(2024, 11, 21), "file1.txt"),
            file_entry("file2.txt", 3, utc(2023, 12, 31), "file2.txt"),
            dir_entry("subdir", 64, utc(2025, 1, 15), "subdir"),
        ],
    ),
    (
        """-rw-r--r--  1 user  group  100 Mar 10 2024 test.txt
-rw-r--r--  1 user  group  200 Apr 20 2024 data.json""",
        [
            file_entry("test.txt", 100, utc(2024, 3, 10), "test.txt"),
            file_entry("data.json", 200, utc(2024, 4, 20), "data.json"),
        ],
    ),
    ("", []),
    (
        "-rw-r--r--  1 user  group  50 May 05 2024 file with spaces.txt",
        [
            file_entry(
                "file with spaces.txt", 50, utc(2024, 5, 5), "file with spaces.txt"
            )
        ],
    ),
    (
        """-rw-r--r--  1 user  group  100 Jan 1 1970 epoch.txt
-rw-r--r--  1 user  group  200 Feb 2 2009 recent.txt
drwxr-xr-x  2 user  group   64 Mar 9 2024 testdir""",
        [
            file_entry("epoch.txt", 100, utc(1970, 1, 1), "epoch.txt"),
            file_entry("recent.txt", 200, utc(2009, 2, 2), "recent.txt"),
            dir_entry("testdir", 64, utc(2024, 3, 9), "testdir"),
        ],
    ),
]


@pytest.mark.parametrize(
    "text,want", POSIX_CASES,
    ids=["mixed", "only-files", "empty", "spaces", "single-digit-days"],
)
def test_posix_walk_entries(text, want):
    assert list(posix_walk_entries(reader(text))) == want


def test_posix_walk_entries_full_path_and_clock_time():
    text = "-rw-r--r--  1 user  group  9 Jun 3 14:25 /srv/data/notes.txt\n"
    (entry,) = posix_walk_entries(reader(text))
    assert entry.name == "notes.txt"
    assert entry.path == "/srv/data/notes.txt"
    assert entry.info.size == 9
    mtime = entry.info.mtime
    assert (mtime.year, mtime.month, mtime.day) == (datetime.now().year, 6, 3)
    assert (mtime.hour, mtime.minute) == (14, 25)


def test_posix_walk_entries_skips_short_lines():
    text = "total 8\n-rw-r--r--  1 user  group  1 Jan 1 2020 a\n"
    assert [e.name for e in posix_walk_entries(reader(text))] == ["a"]


def test_posix_walk_entries_bad_size():
    text = "-rw-r--r--  1 user  group  big Jan 1 2020 a\n"
    with pytest.raises(ValueError, match="bad size"):
        list(posix_walk_entries(reader(text)))


def test_posix_walk_entries_bad_mtime():
    text = "-rw-r--r--  1 user  group  1 Foo 1 2020 a\n"
    with pytest.raises(ValueError, match="bad mtime"):
        list(posix_walk_entries(reader(text)))


def windows_input(records):
    return "\x1e".join("\x1f".join(fields) for fields in records) + "\x1e"


WINDOWS_CASES = [
    (
        [
            ["file1.txt", "50", "2024-11-21T10:30:00Z", "C:\\test\\file1.txt"],
            ["subdir", "DIR", "2025-01-15T08:45:00Z", "C:\\test\\subdir"],
            ["file2.txt", "100", "2023-12-31T23:59:59Z", "C:\\test\\file2.txt"],
        ],
        [
            file_entry("file1.txt", 50, utc(2024, 11, 21, 10, 30), "C:\\test\\file1.txt"),
            dir_entry("subdir", 0, utc(2025, 1, 15, 8, 45), "C:\\test\\subdir"),
            file_entry(
                "file2.txt", 100, utc(2023, 12, 31, 23, 59, 59), "C:\\test\\file2.txt"
            ),
        ],
    ),
    (
        [
            ["test.txt", "100", "2024-03-10T00:00:00Z", "C:\\test\\test.txt"],
            ["data.json", "200", "2024-04-20T00:00:00Z", "C:\\test\\data.json"],
        ],
        [
            file_entry("test.txt", 100, utc(2024, 3, 10), "C:\\test\\test.txt"),
            file_entry("data.json", 200, utc(2024, 4, 20), "C:\\test\\data.json"),
        ],
    ),
    (
        [
            ["file with spaces.txt", "50", "2024-05-05T00:00:00Z",
             "C:\\test\\file with spaces.txt"],
        ],
        [
            file_entry(
                "file with spaces.txt", 50, utc(2024, 5, 5),
                "C:\\test\\file with spaces.txt",
            )
        ],
    ),
    (
        [
            ["epoch.txt", "100", "1970-01-01T00:00:00Z", "C:\\test\\epoch.txt"],
            ["recent.txt", "200", "2009-02-02T15:04:00Z", "C:\\test\\recent.txt"],
            ["testdir", "DIR", "2024-03-09T00:00:00Z", "C:\\test\\testdir"],
        ],
        [
            file_entry("epoch.txt", 100, utc(1970, 1, 1), "C:\\test\\epoch.txt"),
            file_entry("recent.txt", 200, utc(2009, 2, 2, 15, 4), "C:\\test\\recent.txt"),
            dir_entry("testdir", 0, utc(2024, 3, 9), "C:\\test\\testdir"),
        ],
    ),
]


@pytest.mark.parametrize(
    "records,want", WINDOWS_CASES,
    ids=["mixed", "only-files", "spaces", "single-digit-days"],
)
def test_windows_walk_entries(records, want):
    assert list(windows_walk_entries(reader(windows_input(records)))) == want


def test_windows_walk_entries_empty():
    assert list(windows_walk_entries(reader(""))) == []


def test_windows_walk_entries_last_record_without_separator():
    text = "a.txt\x1f5\x1f2024-01-02T03:04:05Z\x1fC:\\a.txt"
    assert list(windows_walk_entries(reader(text))) == [
        file_entry("a.txt", 5, utc(2024, 1, 2, 3, 4, 5), "C:\\a.txt")
    ]


def test_windows_walk_entries_skips_malformed_records():
    text = windows_input([["only", "three", "fields"], ["b", "1", "2024-01-01T00:00:00Z", "C:\\b"]])
    assert [e.name for e in windows_walk_entries(reader(text))] == ["b"]


def test_windows_walk_entries_bad_size():
    text = windows_input([["a", "x", "2024-01-01T00:00:00Z", "C:\\a"]])
    with pytest.raises(ValueError, match="bad size"):
        list(windows_walk_entries(reader(text)))


def test_windows_walk_entries_bad_mtime():
    text = windows_input([["a", "1", "2024-01-01 00:00:00", "C:\\a"]])
    with pytest.raises(ValueError, match="bad mtime"):
        list(windows_walk_entries(reader(text)))