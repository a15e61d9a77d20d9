"""Shell-style quoting for displaying commands."""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping

_UNSAFE = re.compile(r"[^\w@%+=:,./-]", re.ASCII)


def quote(s: str) -> str:
    """Quote s for display in a shell command line."""
    if s == "":
        return "''"
    if not _UNSAFE.search(s):
        return s
    return "'" + s.replace("'", "\\'") + "'"


def join(parts: Iterable[str]) -> str:
    """Join arguments with spaces, quoting each as needed."""
    return " ".join(quote(part) for part in parts)


def command_string(env: Mapping[str, str] | None, *args: str) -> str:
    """Render env assignments (sorted by name) followed by the arguments."""
    prefix = "".join(f"{k}={env[k]} " for k in sorted(env or {}))
    return prefix + join(args)