"""
project: aMaze
module: server.py
License: MIT

Server bootstrap and one-shot generation helpers used by run.py.
"""

import logging
import os
import sys
from logging.handlers import RotatingFileHandler

from amaze import create_app, socketio
from amaze.generation import Builder, MazeFactory, Order
from amaze.generation.text_view import render


def start_server(host="0.0.0.0", port=5000, debug: bool = False, app=None):  # pragma: no cover (runtime only)
    """Start the Socket.IO server.

    When debug=True, Flask's debugger and reloader provide verbose tracebacks.
    Also configures application logging to a rotating file and console.
    """
    app = app or create_app()
    _configure_logging(app.instance_path)
    try:
        print(f"[INFO] Starting Socket.IO server on {host}:{port} (async_mode={socketio.async_mode})")
        socketio.run(app, host=host, port=port, debug=debug, allow_unsafe_werkzeug=True)
    except KeyboardInterrupt:
        print("\n[INFO] Server stopped by user (Ctrl+C)")
        sys.exit(0)


def _configure_logging(log_dir: str):
    """Configure logging to both console and a rotating file in instance/.

    The file path will be instance/amaze.log. Retains a few backups to avoid growth.
    """
    try:
        os.makedirs(log_dir, exist_ok=True)
    except OSError:
        pass
    log_path = os.path.join(log_dir, "amaze.log")

    root = logging.getLogger()
    root.setLevel(logging.INFO)

    file_handler = RotatingFileHandler(log_path, maxBytes=1_000_000, backupCount=3)
    file_handler.setLevel(logging.INFO)
    file_handler.setFormatter(logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s"))

    console = logging.StreamHandler()
    console.setLevel(logging.INFO)
    console.setFormatter(logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s"))

    # Avoid duplicate handlers if reconfigured
    for h in list(root.handlers):
        root.removeHandler(h)

    root.addHandler(file_handler)
    root.addHandler(console)
    return log_path


def generate_once(skill_level: int, builder: str, perfect: bool, seed: int, timeout: float | None = None, on_progress=None):
    """Run one order through a private factory and wait for the result.

    Returns (factory, maze); maze is None when the run was cancelled or failed.
    """
    factory = MazeFactory(name="cli")
    order = Order(
        skill_level=skill_level,
        builder=Builder.parse(builder),
        perfect=perfect,
        seed=seed,
        on_progress=on_progress,
    )
    factory.order(order)
    if not factory.wait_until_delivered(timeout):
        factory.cancel()
        factory.wait_until_delivered()
    return factory, order.maze


def describe(maze) -> str:
    return render(maze.floorplan, maze.start_position(), maze.exit_position())
