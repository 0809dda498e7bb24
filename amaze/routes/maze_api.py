"""
project: aMaze
module: maze_api.py
License: MIT

HTTP surface of the maze factory.

One factory per app: an order is accepted only while no other order is
running. Progress and delivery are also pushed over Socket.IO (see
amaze.websockets.progress).
"""

import uuid

from flask import Blueprint, current_app, jsonify, request

from amaze import FACTORY_KEY, db
from amaze.generation import Builder, MazeFactory, Order
from amaze.logging_utils import get_logger
from amaze.models.maze_record import MazeRecord
from amaze.websockets import progress as progress_ws

bp_maze = Blueprint("maze_api", __name__)

_log = get_logger("maze_api")

_INT_FIELDS = ("skill_level", "seed")


def _factory() -> MazeFactory:
    return current_app.extensions[FACTORY_KEY]


def _persist(app, order, maze):
    with app.app_context():
        try:
            record = MazeRecord.from_maze(order, maze)
            db.session.add(record)
            db.session.commit()
            _log.info(event="maze_persisted", order_id=order.order_id, record_id=record.id)
        except Exception as exc:
            db.session.rollback()
            _log.error(event="maze_persist_failed", order_id=order.order_id, error=repr(exc))


def _build_order(data):
    """Validate the request body and build an Order; returns (order, error)."""
    for key in _INT_FIELDS:
        if key in data and (isinstance(data[key], bool) or not isinstance(data[key], int)):
            return None, f"{key} must be an integer"
    perfect = data.get("perfect", True)
    if not isinstance(perfect, bool):
        return None, "perfect must be a boolean"
    try:
        builder = Builder.parse(data.get("builder") or current_app.config["AMAZE_DEFAULT_BUILDER"])
    except ValueError as exc:
        return None, str(exc)

    app = current_app._get_current_object()
    persist = bool(app.config.get("AMAZE_PERSIST_DELIVERED"))
    order_id = uuid.uuid4().hex[:12]

    def _on_progress(pct):
        progress_ws.broadcast_progress(order_id, pct)

    def _on_deliver(order, maze):
        progress_ws.broadcast_delivered(order, maze)
        if persist:
            _persist(app, order, maze)

    order = Order(
        skill_level=data.get("skill_level", 0),
        builder=builder,
        perfect=perfect,
        seed=data.get("seed", 13),
        on_progress=_on_progress,
        on_deliver=_on_deliver,
        order_id=order_id,
    )
    return order, None


@bp_maze.route("/api/maze/order", methods=["POST"])
def place_order():
    """Start generating a maze.

    Body JSON (all optional): { "skill_level": int, "builder": "dfs"|"prim"|"boruvka",
    "perfect": bool, "seed": int }

    202 { accepted: true, order_id } when started, 409 { accepted: false } while busy.
    """
    data = request.get_json(silent=True) or {}
    if not isinstance(data, dict):
        return jsonify({"error": "JSON object expected"}), 400
    order, error = _build_order(data)
    if error:
        return jsonify({"error": error}), 400
    if not _factory().order(order):
        return jsonify({"accepted": False, "error": "factory busy"}), 409
    return jsonify({"accepted": True, "order_id": order.order_id}), 202


def status_payload(factory: MazeFactory):
    order = factory.current_order
    return {
        "state": factory.state,
        "progress": order.progress if order else 0,
        "order_id": order.order_id if order else None,
        "error": str(factory.last_error) if factory.last_error else None,
    }


@bp_maze.route("/api/maze/status")
def maze_status():
    return jsonify(status_payload(_factory()))


@bp_maze.route("/api/maze/cancel", methods=["POST"])
def cancel_order():
    factory = _factory()
    factory.cancel()
    return jsonify({"state": factory.state})


@bp_maze.route("/api/maze/current")
def current_maze():
    maze = _factory().last_maze
    if maze is None:
        return jsonify({"error": "no maze delivered yet"}), 404
    body = maze.summary()
    body["metrics"] = maze.metrics
    return jsonify(body)


@bp_maze.route("/api/maze/save", methods=["POST"])
def save_current():
    factory = _factory()
    maze = factory.last_maze
    order = factory.last_order
    if maze is None or order is None:
        return jsonify({"error": "no maze delivered yet"}), 404
    record = MazeRecord.from_maze(order, maze)
    db.session.add(record)
    db.session.commit()
    return jsonify({"record_id": record.id, **record.to_dict()}), 201


@bp_maze.route("/api/maze/<int:record_id>")
def stored_maze(record_id: int):
    record = db.session.get(MazeRecord, record_id)
    if record is None:
        return jsonify({"error": "not found"}), 404
    try:
        maze = record.to_maze()
    except ValueError as exc:
        _log.error(event="maze_decode_failed", record_id=record_id, error=str(exc))
        return jsonify({"error": "stored maze is corrupt"}), 500
    return jsonify({**record.to_dict(), **maze.summary()})
