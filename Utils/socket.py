import logging
import threading

from flask_socketio import SocketIO

socketio = SocketIO()

chat_logger = logging.getLogger("chat")

# sid -> user id, process local
_connected = {}
_connected_lock = threading.Lock()


def track_connection(sid, user_id):
    with _connected_lock:
        _connected[sid] = str(user_id)


def drop_connection(sid):
    with _connected_lock:
        return _connected.pop(sid, None)


def connected_user(sid):
    with _connected_lock:
        return _connected.get(sid)


def is_online(user_id) -> bool:
    user_id = str(user_id)
    with _connected_lock:
        return user_id in _connected.values()


def broadcast_to_room(event, payload, room) -> bool:
    """Best-effort emit to every socket in ``room``.

    Delivery is not tied to persistence: a failure here is logged and
    reported as False, never raised.
    """
    try:
        socketio.emit(event, payload, to=room)
        return True
    except Exception as e:
        chat_logger.warning(f"⚠️ Broadcast of {event} to {room} failed: {e}")
        return False
