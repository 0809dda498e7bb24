"""Generation requests.

An Order carries what is wanted (skill level, algorithm, perfect flag, seed)
and receives what comes back: progress updates from the worker thread and
finally the delivered maze. Progress is clamped to 0..100 and never moves
backwards, so a caller polling from another thread observes a monotonic
sequence.
"""
from __future__ import annotations

import threading
import uuid
from enum import Enum
from typing import Callable, Optional

from ..logging_utils import get_logger
from .config import MAX_SKILL_LEVEL, SkillSettings

_log = get_logger("order")

INT32_MIN = -(2**31)
INT32_SPAN = 2**32


class Builder(Enum):
    DFS = "dfs"
    PRIM = "prim"
    BORUVKA = "boruvka"

    @classmethod
    def parse(cls, value) -> "Builder":
        if isinstance(value, Builder):
            return value
        if isinstance(value, str):
            key = value.strip().lower()
            for b in cls:
                if b.value == key or b.name.lower() == key:
                    return b
        raise ValueError(f"unknown builder: {value!r}")


def coerce_seed(seed: int) -> int:
    """Wrap any int into the signed 32-bit range."""
    return (int(seed) - INT32_MIN) % INT32_SPAN + INT32_MIN


class Order:
    def __init__(
        self,
        skill_level: int = 0,
        builder: Builder = Builder.DFS,
        perfect: bool = True,
        seed: int = 13,
        on_progress: Optional[Callable[[int], None]] = None,
        on_deliver: Optional[Callable[["Order", object], None]] = None,
        order_id: Optional[str] = None,
    ):
        self.order_id = order_id or uuid.uuid4().hex[:12]
        self.skill_level = self._clamp_skill(skill_level)
        self.builder = Builder.parse(builder)
        self.perfect = bool(perfect)
        self.seed = coerce_seed(seed)
        self._on_progress = on_progress
        self._on_deliver = on_deliver
        self._lock = threading.Lock()
        self._progress = 0
        self._maze = None

    def __repr__(self) -> str:
        return (
            f"<Order {self.order_id} skill={self.skill_level} builder={self.builder.value} "
            f"perfect={self.perfect} seed={self.seed}>"
        )

    @staticmethod
    def _clamp_skill(skill_level) -> int:
        if isinstance(skill_level, int) and not isinstance(skill_level, bool) and 0 <= skill_level <= MAX_SKILL_LEVEL:
            return skill_level
        _log.error(event="skill_level_out_of_range", value=skill_level, used=0)
        return 0

    @property
    def settings(self) -> SkillSettings:
        return SkillSettings.for_level(self.skill_level, self.perfect)

    @property
    def progress(self) -> int:
        with self._lock:
            return self._progress

    @property
    def maze(self):
        with self._lock:
            return self._maze

    def update_progress(self, percentage: int) -> None:
        if percentage < 0 or percentage > 100:
            _log.error(event="progress_out_of_range", value=percentage)
            percentage = 0 if percentage < 0 else 100
        with self._lock:
            if percentage <= self._progress:
                return
            self._progress = percentage
        if self._on_progress is not None:
            # listeners never decide the outcome of a run
            try:
                self._on_progress(percentage)
            except Exception as exc:
                _log.error(event="progress_callback_failed", order_id=self.order_id, progress=percentage, error=repr(exc))

    def deliver(self, maze) -> None:
        with self._lock:
            self._maze = maze
        _log.info(event="order_delivered", order_id=self.order_id, width=maze.width, height=maze.height)
        if self._on_deliver is not None:
            try:
                self._on_deliver(self, maze)
            except Exception as exc:
                _log.error(event="deliver_callback_failed", order_id=self.order_id, error=repr(exc))


__all__ = ["Builder", "Order", "coerce_seed"]
