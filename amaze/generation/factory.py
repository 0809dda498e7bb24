"""MazeFactory: runs one order at a time on a background thread.

States: idle -> running -> delivered | cancelled | failed. An order placed
while another is running is rejected (``order()`` returns False). After a
cancellation the factory is ready again immediately; a failed run keeps the
exception on ``last_error``.
"""
from __future__ import annotations

import threading
from typing import Optional

from ..logging_utils import get_logger
from . import pipeline
from .errors import CancellationToken, GenerationCancelled, MazeGenerationError
from .order import Order

_log = get_logger("factory")

IDLE = "idle"
RUNNING = "running"
DELIVERED = "delivered"
CANCELLED = "cancelled"
FAILED = "failed"


class MazeFactory:
    def __init__(self, name: str = "maze-factory"):
        self.name = name
        self._lock = threading.Lock()
        self._thread: Optional[threading.Thread] = None
        self._token: Optional[CancellationToken] = None
        self._state = IDLE
        self.current_order: Optional[Order] = None
        self.last_maze = None
        self.last_order: Optional[Order] = None
        self.last_error: Optional[BaseException] = None

    @property
    def state(self) -> str:
        with self._lock:
            return self._state

    def is_busy(self) -> bool:
        with self._lock:
            return self._thread is not None and self._thread.is_alive()

    def order(self, order: Order) -> bool:
        with self._lock:
            if self._thread is not None and self._thread.is_alive():
                _log.warn(event="order_rejected", reason="busy", order_id=order.order_id)
                return False
            self._token = CancellationToken()
            self._state = RUNNING
            self.current_order = order
            self.last_error = None
            self._thread = threading.Thread(
                target=self._work,
                args=(order, self._token),
                name=f"{self.name}-{order.order_id}",
                daemon=True,
            )
            self._thread.start()
        _log.info(
            event="order_accepted",
            order_id=order.order_id,
            skill=order.skill_level,
            builder=order.builder.value,
            perfect=order.perfect,
            seed=order.seed,
        )
        return True

    def cancel(self) -> None:
        with self._lock:
            token, thread = self._token, self._thread
        if token is None or thread is None or not thread.is_alive():
            return
        token.cancel()
        _log.info(event="cancel_requested", order_id=self.current_order.order_id if self.current_order else None)

    def wait_until_delivered(self, timeout: Optional[float] = None) -> bool:
        """Join the worker; True once it has finished (whatever the outcome)."""
        with self._lock:
            thread = self._thread
        if thread is None:
            return True
        thread.join(timeout)
        return not thread.is_alive()

    def _work(self, order: Order, token: CancellationToken) -> None:
        try:
            maze = pipeline.run(order, token)
        except GenerationCancelled:
            _log.info(event="order_cancelled", order_id=order.order_id)
            self._finish(CANCELLED)
        except MazeGenerationError as exc:
            _log.error(event="order_failed", order_id=order.order_id, error=exc, phase=getattr(exc, "phase", None))
            self._finish(FAILED, error=exc)
        except Exception as exc:  # noqa: BLE001 - worker boundary, surfaced on last_error
            _log.error(event="order_crashed", order_id=order.order_id, error=repr(exc))
            self._finish(FAILED, error=exc)
        else:
            self._finish(DELIVERED, maze=maze, order=order)

    def _finish(self, state: str, maze=None, order=None, error: Optional[BaseException] = None) -> None:
        with self._lock:
            self._state = state
            if maze is not None:
                self.last_maze = maze
                self.last_order = order
            if error is not None:
                self.last_error = error


__all__ = ["MazeFactory", "IDLE", "RUNNING", "DELIVERED", "CANCELLED", "FAILED"]
