"""Error and outcome types raised by the generation pipeline."""
from __future__ import annotations

import threading


class MazeGenerationError(Exception):
    """Base class for anything that stops a generation run."""


class InvariantViolation(MazeGenerationError):
    """A structural guarantee did not hold; the run is aborted."""

    def __init__(self, message: str, phase: str | None = None):
        super().__init__(message)
        self.phase = phase


class GenerationCancelled(MazeGenerationError):
    """Raised inside the worker once a cancellation request is observed."""


class WallboardError(ValueError):
    """Illegal edit of the floorplan, e.g. removing a border-protected edge."""


class DecodeError(ValueError):
    """Persisted maze payload is incomplete or inconsistent."""

    def __init__(self, key: str, message: str = "missing key"):
        super().__init__(f"{message}: {key}")
        self.key = key


class CancellationToken:
    """Cooperative cancellation flag shared between caller and worker."""

    __slots__ = ("_event",)

    def __init__(self):
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def raise_if_cancelled(self) -> None:
        if self._event.is_set():
            raise GenerationCancelled("generation cancelled")


__all__ = [
    "MazeGenerationError",
    "InvariantViolation",
    "GenerationCancelled",
    "WallboardError",
    "DecodeError",
    "CancellationToken",
]
