"""Socket.IO push channel for generation progress.

Events (server -> client):
    - maze_progress:  { order_id, progress }
    - maze_delivered: { order_id, width, height, start, exit }

Events (client -> server):
    - maze_status: replies with maze_status { state, progress, order_id, error }
"""

from flask import current_app
from flask_socketio import emit

from amaze import FACTORY_KEY, socketio
from amaze.logging_utils import get_logger

_log = get_logger("progress_ws")

MAZE_PROGRESS = "maze_progress"
MAZE_DELIVERED = "maze_delivered"
MAZE_STATUS = "maze_status"


def broadcast_progress(order_id, percentage):
    """Called from the worker thread; emits to every connected client."""
    socketio.emit(MAZE_PROGRESS, {"order_id": order_id, "progress": percentage})


def broadcast_delivered(order, maze):
    payload = {
        "order_id": order.order_id,
        "width": maze.width,
        "height": maze.height,
        "start": list(maze.start_position()),
        "exit": list(maze.exit_position()),
    }
    socketio.emit(MAZE_DELIVERED, payload)
    _log.debug(event="delivered_broadcast", order_id=order.order_id)


@socketio.on(MAZE_STATUS)
def on_maze_status(data=None):
    from amaze.routes.maze_api import status_payload

    emit(MAZE_STATUS, status_payload(current_app.extensions[FACTORY_KEY]))
