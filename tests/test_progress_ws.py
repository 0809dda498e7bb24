import pytest

from amaze import socketio
from amaze.generation import Order, generate
from amaze.websockets import progress as progress_ws


@pytest.fixture()
def ws(test_app):
    test_client = socketio.test_client(test_app, flask_test_client=test_app.test_client())
    yield test_client
    test_client.disconnect()


def _extract(event_name, received):
    return [p["args"][0] for p in received if p["name"] == event_name]


def test_status_request_replies_with_factory_state(ws):
    ws.emit(progress_ws.MAZE_STATUS)
    replies = _extract(progress_ws.MAZE_STATUS, ws.get_received())
    assert replies
    assert set(replies[-1]) == {"state", "progress", "order_id", "error"}


def test_progress_broadcast(ws):
    ws.get_received()
    progress_ws.broadcast_progress("abc", 42)
    msgs = _extract(progress_ws.MAZE_PROGRESS, ws.get_received())
    assert msgs == [{"order_id": "abc", "progress": 42}]


def test_delivered_broadcast(ws):
    order = Order(skill_level=0, seed=9)
    maze = generate(order)
    ws.get_received()
    progress_ws.broadcast_delivered(order, maze)
    msgs = _extract(progress_ws.MAZE_DELIVERED, ws.get_received())
    assert len(msgs) == 1
    assert msgs[0]["order_id"] == order.order_id
    assert msgs[0]["start"] == list(maze.start_position())
    assert msgs[0]["exit"] == list(maze.exit_position())
