"""Immutable contexts and the environment variables they carry."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

_ENV_KEY = object()


class Context:
    """An immutable chain of key/value pairs passed to commands."""

    __slots__ = ("_parent", "_key", "_value")

    def __init__(self) -> None:
        self._parent: Context | None = None
        self._key: Any = None
        self._value: Any = None

    def with_value(self, key: Any, value: Any) -> Context:
        """Return a child context in which key maps to value."""
        child = Context()
        child._parent = self
        child._key = key
        child._value = value
        return child

    def value(self, key: Any) -> Any:
        """Return the nearest value stored under key, or None."""
        ctx: Context | None = self
        while ctx is not None:
            if ctx._parent is not None and ctx._key is key:
                return ctx._value
            ctx = ctx._parent
        return None


def envs(ctx: Context) -> dict[str, str] | None:
    """Return a copy of the environment variables stored in ctx, or None."""
    env = ctx.value(_ENV_KEY)
    if isinstance(env, dict):
        return dict(env)
    return None


def with_env(ctx: Context, env: Mapping[str, str]) -> Context:
    """Return a context with env merged over ctx's environment."""
    merged = envs(ctx) or {}
    merged.update(env)
    return ctx.with_value(_ENV_KEY, merged)


def without_env(ctx: Context) -> Context:
    """Return a context with every environment variable removed."""
    if envs(ctx) is None:
        return ctx
    return ctx.with_value(_ENV_KEY, None)


def unset_env(ctx: Context, name: str) -> Context:
    """Return a context with the named environment variable removed."""
    env = envs(ctx)
    if env is None:
        return ctx
    env.pop(name, None)
    return ctx.with_value(_ENV_KEY, env or None)