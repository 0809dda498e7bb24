"""Minimal structured logging helper.

Emits one key=value line (or one JSON object) per event with a timestamp and
level, so generation runs on worker threads can be followed in plain console
output and grepped afterwards.

Usage:
    from amaze.logging_utils import get_logger
    log = get_logger("factory")
    log.info(event="order_accepted", order_id="ab12", skill=3)

Level and format come from ``AMAZE_LOG_LEVEL`` (debug|info|warn|error) and
``AMAZE_LOG_JSON``. Reserved keys: level, ts, logger.
"""

from __future__ import annotations

import json
import os
import sys
import threading
import time

LEVELS = {"debug": 10, "info": 20, "warn": 30, "error": 40}
CURRENT_LEVEL = LEVELS.get(os.getenv("AMAZE_LOG_LEVEL", "info").lower(), 20)
JSON_MODE = os.getenv("AMAZE_LOG_JSON", "0") in ("1", "true", "TRUE", "yes", "on")

_write_lock = threading.Lock()


def set_level(level: str) -> None:
    global CURRENT_LEVEL
    CURRENT_LEVEL = LEVELS[level]


def _format(level: str, **fields) -> str:
    if JSON_MODE:
        rec = {k: v for k, v in fields.items() if v is not None}
        rec["level"] = level
        rec["ts"] = int(time.time())
        return json.dumps(rec, separators=(",", ":"), default=str)
    parts = [f"level={level}", f"ts={int(time.time())}"]
    for k, v in fields.items():
        if v is None:
            continue
        if isinstance(v, (int, float)):
            parts.append(f"{k}={v}")
        else:
            parts.append(f"{k}={str(v).replace(' ', '_')}")
    return " ".join(parts)


class _Logger:
    def __init__(self, name: str | None = None):
        self.name = name or "amaze"

    def _log(self, lvl: str, **fields) -> None:
        if LEVELS[lvl] < CURRENT_LEVEL:
            return
        fields.setdefault("logger", self.name)
        line = _format(lvl, **fields)
        # worker threads log concurrently with request handlers
        with _write_lock:
            print(line, file=sys.stderr if lvl == "error" else sys.stdout)

    def debug(self, **fields):
        self._log("debug", **fields)

    def info(self, **fields):
        self._log("info", **fields)

    def warn(self, **fields):
        self._log("warn", **fields)

    def error(self, **fields):
        self._log("error", **fields)


_LOGGER_CACHE: dict[str, _Logger] = {}


def get_logger(name: str) -> _Logger:
    if name not in _LOGGER_CACHE:
        _LOGGER_CACHE[name] = _Logger(name)
    return _LOGGER_CACHE[name]


log = get_logger("amaze")
