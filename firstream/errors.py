"""Failures that abort a streaming session."""

from __future__ import annotations

from pathlib import Path


class FirStreamError(Exception):
    """Base class for stream I/O failures."""


class StreamOpenFailure(FirStreamError):
    """A stream could not be opened in the required mode."""

    def __init__(self, path: str | Path, mode: str, reason: str = ""):
        self.path = Path(path)
        self.mode = mode
        detail = f": {reason}" if reason else ""
        super().__init__(f"cannot open {self.path} for {mode}{detail}")


class ShortRead(FirStreamError):
    """Fewer samples arrived than a full block needs."""

    def __init__(self, path: str | Path, expected: int, received: int):
        self.path = Path(path)
        self.expected = expected
        self.received = received
        super().__init__(
            f"short read from {self.path}: expected {expected} samples, got {received}"
        )


class WriteFailure(FirStreamError):
    """The output stream did not accept a write."""

    def __init__(self, path: str | Path, reason: str = ""):
        self.path = Path(path)
        detail = f": {reason}" if reason else ""
        super().__init__(f"write to {self.path} failed{detail}")
