"""
project: aMaze
module: __init__.py
License: MIT

Flask application factory and core extensions setup.

This module wires together the Flask app, SQLAlchemy and Flask-SocketIO
around a single MazeFactory. Configuration is sourced from environment
variables with reasonable defaults for development. A local `instance/`
directory is used for SQLite and the log file.
"""

import logging
import os
import uuid
from pathlib import Path

from dotenv import load_dotenv
from flask import Flask, jsonify
from flask_socketio import SocketIO
from flask_sqlalchemy import SQLAlchemy

# Load .env if present so `SECRET_KEY`, `DATABASE_URL`, etc. can be supplied
# without exporting shell variables during development.
load_dotenv()

__version__ = "0.3.0"

db = SQLAlchemy(session_options={"expire_on_commit": False})
socketio = SocketIO()

FACTORY_KEY = "amaze.factory"


def _env_flag(name: str, default: str = "0") -> bool:
    return os.getenv(name, default).lower() in ("1", "true", "yes", "on")


def create_app(test_config=None):
    """Build and configure the Flask app.

    `test_config` is merged last so tests can point the database elsewhere
    or flip feature flags without touching the environment.
    """
    app = Flask(__name__, instance_relative_config=True)
    try:
        os.makedirs(app.instance_path, exist_ok=True)
    except OSError:
        pass

    database_url = os.getenv("DATABASE_URL")
    if not database_url:
        # During pytest runs, isolate to a separate test database
        db_filename = "amaze_test.db" if os.getenv("PYTEST_CURRENT_TEST") else "amaze.db"
        db_path = Path(app.instance_path) / db_filename
        database_url = f"sqlite:///{db_path.as_posix()}"

    app.config.update(
        SECRET_KEY=os.getenv("SECRET_KEY", "dev-secret-change-me"),
        SQLALCHEMY_DATABASE_URI=database_url,
        SQLALCHEMY_TRACK_MODIFICATIONS=False,
        AMAZE_DEFAULT_BUILDER=os.getenv("AMAZE_DEFAULT_BUILDER", "dfs"),
        AMAZE_PERSIST_DELIVERED=_env_flag("AMAZE_PERSIST_DELIVERED"),
    )
    if test_config:
        app.config.update(test_config)

    engine_opts = {}
    if app.config["SQLALCHEMY_DATABASE_URI"].startswith("sqlite:"):
        # worker threads persist delivered mazes
        engine_opts["connect_args"] = {"timeout": 10, "check_same_thread": False}
    app.config.setdefault("SQLALCHEMY_ENGINE_OPTIONS", engine_opts)

    db.init_app(app)
    socketio.init_app(
        app,
        async_mode=os.getenv("SOCKETIO_ASYNC_MODE") or None,
        cors_allowed_origins=os.getenv("CORS_ALLOWED_ORIGINS", "*"),
    )

    from amaze.generation import MazeFactory

    app.extensions[FACTORY_KEY] = MazeFactory()

    from amaze.models import maze_record  # noqa: F401  (register table)
    from amaze.routes.maze_api import bp_maze

    app.register_blueprint(bp_maze)

    # Import websocket handlers so their event decorators register with Socket.IO (side-effect)
    from amaze.websockets import progress as _ws_progress  # noqa: F401

    with app.app_context():
        db.create_all()

    @app.errorhandler(500)
    def internal_error(e):
        error_id = uuid.uuid4().hex[:8]
        logging.exception("Unhandled exception (id=%s)", error_id)
        return jsonify({"error": "internal error", "error_id": error_id}), 500

    return app
