"""Command buffers: machine and buffer protocols, helpers to run and pipe them, and listing parsers."""

__version__ = "0.1.0"

__all__ = [
    "buffer",
    "crlf",
    "env",
    "errors",
    "fsinfo",
    "machine",
    "pipeline",
    "shquote",
    "walk",
]