"""CLI commands."""

from . import check, code, run

__all__ = [
    "check",
    "code",
    "run",
]
