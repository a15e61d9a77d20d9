"""Machines that create command buffers, and helpers that run them."""

from __future__ import annotations

import io
import sys
from typing import Any, Protocol, runtime_checkable

from .buffer import Buffer, attach
from .buffer import log as _set_log
from .env import Context
from .errors import CommandError, _chain

_CHUNK = 32 * 1024

TRACE: Any = None
"""Text stream that commands are traced to, or None to discard traces."""

STDOUT: Any = None
"""Binary stream for command output in exec_; None means sys.stdout."""

STDERR: Any = None
"""Binary stream for command diagnostics in exec_; None means sys.stderr."""


@runtime_checkable
class Machine(Protocol):
    """Something that executes commands."""

    def command(self, ctx: Context, *args: str) -> Buffer: ...


@runtime_checkable
class OSMachine(Protocol):
    """A machine that reports its own operating system."""

    def command(self, ctx: Context, *args: str) -> Buffer: ...

    def os(self, ctx: Context) -> str: ...


@runtime_checkable
class ArchMachine(Protocol):
    """A machine that reports its own architecture."""

    def command(self, ctx: Context, *args: str) -> Buffer: ...

    def arch(self, ctx: Context) -> str: ...


@runtime_checkable
class ShutdownMachine(Protocol):
    """A machine holding resources that must be released."""

    def command(self, ctx: Context, *args: str) -> Buffer: ...

    def shutdown(self, ctx: Context) -> None: ...


def _stdout() -> Any:
    if STDOUT is not None:
        return STDOUT
    return getattr(sys.stdout, "buffer", sys.stdout)


def _stderr() -> Any:
    if STDERR is not None:
        return STDERR
    return getattr(sys.stderr, "buffer", sys.stderr)


def _is_stringer(obj: Any) -> bool:
    return type(obj).__str__ is not object.__str__


def _read_all(buf: Any) -> bytes:
    chunks = []
    while chunk := buf.read(_CHUNK):
        chunks.append(bytes(chunk))
    return b"".join(chunks)


def _attach_log(err: BaseException, logged: bytes) -> None:
    if not logged:
        return
    for e in _chain(err):
        if isinstance(e, CommandError):
            e.log = logged
            return


def shutdown(ctx: Context, m: Any) -> None:
    """Shut m down if it supports it; otherwise do nothing."""
    if isinstance(m, ShutdownMachine):
        m.shutdown(ctx)


def exec_(ctx: Context, m: Any, *args: str) -> None:
    """Run a command with its output streamed to the terminal.

    Errors raised here carry no log output.
    """
    r = m.command(ctx, *args)
    trace(r)
    _exec(r)


def read(ctx: Context, m: Any, *args: str) -> str:
    """Run a command and return its output without trailing whitespace.

    A failing command's CommandError carries the captured log output.
    """
    r = m.command(ctx, *args)
    logged = io.BytesIO()
    _set_log(r, logged)
    trace(r)
    try:
        out = _read_all(r)
    except Exception as err:
        _attach_log(err, logged.getvalue())
        raise
    return out.decode("utf-8", errors="replace").rstrip()


def do(ctx: Context, m: Any, *args: str) -> None:
    """Run a command for its side effects, discarding its output.

    A failing command's CommandError carries the captured log output.
    """
    r = m.command(ctx, *args)
    logged = io.BytesIO()
    _set_log(r, logged)
    trace(r)
    try:
        while r.read(_CHUNK):
            pass
    except Exception as err:
        _attach_log(err, logged.getvalue())
        raise


def _exec(buf: Any) -> None:
    attach(buf)
    _set_log(buf, _stderr())
    out = _stdout()
    while chunk := buf.read(_CHUNK):
        out.write(chunk)


def trace(buf: Any) -> None:
    """Write a description of buf to TRACE, if tracing is enabled."""
    if TRACE is None:
        return
    if _is_stringer(buf):
        text = str(buf).rstrip("\n")
        if text:
            TRACE.write(text + "\n")
    else:
        TRACE.write(f"{buf!r}\n")