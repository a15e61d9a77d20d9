"""A reader that normalizes line endings to LF."""

from __future__ import annotations

from typing import Any

_CHUNK = 8192
_CR = 0x0D
_LF = 0x0A


class CRLFReader:
    """Wrap a binary reader, turning CRLF and lone CR into LF on read."""

    def __init__(self, raw: Any) -> None:
        self._raw = raw
        self._buf = b""
        self._pos = 0
        self._cr = False
        self._eof = False

    def _next_byte(self) -> int | None:
        if self._pos >= len(self._buf):
            if self._eof:
                return None
            chunk = self._raw.read(_CHUNK)
            if not chunk:
                self._eof = True
                return None
            self._buf = bytes(chunk)
            self._pos = 0
        ch = self._buf[self._pos]
        self._pos += 1
        return ch

    def read(self, size: int = -1) -> bytes:
        """Read up to size normalized bytes, or all of them if size < 0."""
        out = bytearray()
        while size < 0 or len(out) < size:
            ch = self._next_byte()
            if ch is None:
                if self._cr:
                    out.append(_LF)
                    self._cr = False
                break
            if self._cr:
                self._cr = False
                out.append(_LF)
                if ch != _LF:
                    self._pos -= 1
                continue
            if ch == _CR:
                self._cr = True
                continue
            out.append(ch)
        return bytes(out)

    def close(self) -> None:
        """Close the underlying reader."""
        close = getattr(self._raw, "close", None)
        if close is not None:
            close()

    def __enter__(self) -> CRLFReader:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()