"""Pipe the output of one stream into the input of the next."""

from __future__ import annotations

import threading
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

_CHUNK = 32 * 1024


@dataclass(frozen=True)
class CopyResult:
    """The outcome of one stage of a pipeline."""

    cmd: str
    err: BaseException | None = None


class CopyError(Exception):
    """A pipeline failure, reporting the outcome of every stage."""

    def __init__(self, results: Sequence[CopyResult], written: int = 0):
        super().__init__()
        self.results = list(results)
        self.written = written

    @property
    def exceptions(self) -> list[BaseException]:
        """The errors of the stages that failed, in stage order."""
        return [r.err for r in self.results if r.err is not None]

    def __str__(self) -> str:
        parts = []
        for result in self.results:
            if result.err is not None:
                body = str(result.err).replace("\n", "\n\t")
            else:
                body = "<success>"
            parts.append(f"{result.cmd}\n\t{body}")
        return "\n\n".join(parts)


class _JoinedError(Exception):
    """Several errors reported together."""

    def __init__(self, errors: Sequence[BaseException]):
        super().__init__(*errors)
        self.exceptions = tuple(errors)

    def __str__(self) -> str:
        return "\n".join(str(e) for e in self.exceptions)


def _join(*errors: BaseException | None) -> BaseException | None:
    present = [e for e in errors if e is not None]
    if not present:
        return None
    if len(present) == 1:
        return present[0]
    return _JoinedError(present)


def describe(obj: Any) -> str:
    """Name a pipeline stage: its own string form, or ``<TypeName>``."""
    if type(obj).__str__ is not object.__str__:
        return str(obj)
    return f"<{type(obj).__name__}>"


def _write_all(w: Any, data: bytes) -> int:
    written = 0
    while written < len(data):
        n = w.write(data[written:])
        if n is None:
            n = len(data) - written
        if n <= 0:
            raise OSError("short write")
        written += n
    return written


def _copy_stage(w: Any, r: Any) -> int:
    total = 0
    while True:
        chunk = r.read(_CHUNK)
        if not chunk:
            return total
        total += _write_all(w, bytes(chunk))


def copy(dst: Any, src: Any, *args: Any) -> int:
    """Copy src through each stage in args into dst, all concurrently.

    Each stage's writer is closed, when it can be, once its copy ends, so
    the next stage sees end of input. Returns the total bytes written by
    all stages that succeeded; raises CopyError if any stage failed.
    """
    readers = [src, *args]
    writers = [*args, dst]
    results: list[CopyResult] = [CopyResult("")] * len(readers)
    counts = [0] * len(readers)
    failed = [False] * len(readers)

    def run(i: int) -> None:
        r, w = readers[i], writers[i]
        err: BaseException | None = None
        try:
            counts[i] = _copy_stage(w, r)
        except Exception as e:
            err = e
            failed[i] = True
        close_err: BaseException | None = None
        close = getattr(w, "close", None)
        if callable(close):
            try:
                close()
            except Exception as e:
                close_err = e
        results[i] = CopyResult(describe(r), _join(err, close_err))

    threads = [
        threading.Thread(target=run, args=(i,), daemon=True)
        for i in range(len(readers))
    ]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    total = sum(counts)
    if any(failed):
        raise CopyError(results, total)
    return total