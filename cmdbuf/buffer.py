"""Buffer protocols: a running command whose output is read."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class Buffer(Protocol):
    """A command's execution; reading drives it and returns its output.

    The command starts on the first read and has completed once read
    returns ``b""``.
    """

    def read(self, size: int = -1) -> bytes: ...


@runtime_checkable
class WriteBuffer(Protocol):
    """A buffer that accepts input on the command's stdin.

    ``close`` closes stdin only; the buffer must still be read to the end
    to observe completion.
    """

    def read(self, size: int = -1) -> bytes: ...

    def write(self, data: bytes) -> int: ...

    def close(self) -> None: ...


@runtime_checkable
class AttachBuffer(Protocol):
    """A buffer that can connect its command to the controlling terminal.

    After ``attach`` the buffer must be read once; that read blocks until
    the command completes and returns ``b""``.
    """

    def read(self, size: int = -1) -> bytes: ...

    def attach(self) -> None: ...


@runtime_checkable
class LogBuffer(Protocol):
    """A buffer whose diagnostic output (stderr) can be captured."""

    def read(self, size: int = -1) -> bytes: ...

    def log(self, w: Any) -> None: ...


@dataclass(frozen=True)
class FailBuffer:
    """A buffer whose every read raises ``err``."""

    err: BaseException

    def read(self, size: int = -1) -> bytes:
        raise self.err


def attach(buf: Any) -> None:
    """Attach buf to the terminal if it supports it; otherwise do nothing."""
    if isinstance(buf, AttachBuffer):
        buf.attach()


def log(buf: Any, w: Any) -> None:
    """Send buf's diagnostic output to w if it supports it."""
    if isinstance(buf, LogBuffer):
        buf.log(w)


def fail(err: BaseException) -> FailBuffer:
    """Return a buffer that raises err on every read."""
    return FailBuffer(err)