"""Errors raised by command buffers."""

from __future__ import annotations

import io
from collections.abc import Iterator


class CommandError(Exception):
    """A command execution failure.

    ``log`` holds diagnostic output (usually stderr), ``err`` the underlying
    error and ``code`` the exit code. A code of 0 does not indicate success.
    Commands attached to the terminal have an empty log.
    """

    def __init__(
        self,
        code: int = 0,
        err: BaseException | None = None,
        log: bytes = b"",
    ) -> None:
        super().__init__(code, err, log)
        self.code = code
        self.err = err
        self.log = log
        if err is not None:
            self.__cause__ = err

    def __str__(self) -> str:
        if self.err is not None:
            text = str(self.err)
        else:
            text = f"exit status {self.code}"
        if self.log:
            body = self.log.decode("utf-8", errors="replace")
            body = body.replace("\n", "\n\t").removesuffix("\n\t")
            text += "\n\t" + body
        return text


class BufferClosedError(ValueError):
    """Raised on reading from or writing to a closed buffer."""

    def __init__(self, message: str = "command: write to closed buffer"):
        super().__init__(message)


class ReadOnlyBufferError(io.UnsupportedOperation):
    """Raised on writing to a buffer that accepts no input."""

    def __init__(self, message: str = "command: write to read-only buffer"):
        super().__init__(message)


def _chain(err: BaseException | None) -> Iterator[BaseException]:
    """Yield err and every error it wraps, depth first."""
    seen: set[int] = set()
    stack = [err]
    while stack:
        current = stack.pop()
        if current is None or id(current) in seen:
            continue
        seen.add(id(current))
        yield current
        children: list[BaseException | None] = [current.__cause__]
        if isinstance(current, CommandError):
            children.append(current.err)
        nested = getattr(current, "exceptions", None)
        if isinstance(nested, (list, tuple)):
            children.extend(e for e in nested if isinstance(e, BaseException))
        stack.extend(reversed(children))


def not_found(err: BaseException | None) -> bool:
    """Report whether err represents a command that failed to start.

    The first CommandError in the chain counts as "not found" when it has an
    underlying error and an exit code of 0.
    """
    for e in _chain(err):
        if isinstance(e, CommandError):
            return e.err is not None and e.code == 0
    return False