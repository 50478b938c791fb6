"""
Real-time relay for chat rooms.

Sockets authenticate once on connect and may then join rooms, relay messages
and typing indicators to the other members. Nothing here touches the
database beyond resolving the connecting user; persistence stays with the
REST endpoints.
"""
import logging
from flask import request
from flask_socketio import ConnectionRefusedError, emit, join_room, leave_room

from Utils.auth_decorator import load_token_user
from Utils.jwt_utils import decode_token, extract_bearer_token
from Utils.socket import socketio, track_connection, drop_connection, connected_user

logger = logging.getLogger("chat")


def _socket_token(auth):
    if isinstance(auth, dict) and auth.get("token"):
        return auth["token"]
    return (request.args.get("token")
            or extract_bearer_token(request.headers.get("Authorization")))


def _room_of(data):
    room = data.get("room") if isinstance(data, dict) else None
    if not room:
        emit("error", {"message": "Room is required"})
        return None
    return room


@socketio.on("connect")
def on_connect(auth=None):
    token = _socket_token(auth)
    user = load_token_user(decode_token(token)) if token else None
    if not user:
        logger.warning(f"🔒 Socket connection refused from {request.remote_addr}")
        raise ConnectionRefusedError("unauthorized")

    track_connection(request.sid, user.id)
    logger.info(f"🔌 Socket {request.sid} connected as {user.id}")


@socketio.on("disconnect")
def on_disconnect(*args):
    user_id = drop_connection(request.sid)
    logger.info(f"🔌 Socket {request.sid} ({user_id}) disconnected")


@socketio.on("join_room")
def on_join_room(data):
    room = _room_of(data)
    if not room:
        return
    join_room(room)
    logger.info(f"🚪 {connected_user(request.sid)} joined {room}")
    emit("joined_room", {"room": room})


@socketio.on("leave_room")
def on_leave_room(data):
    room = _room_of(data)
    if not room:
        return
    leave_room(room)
    emit("left_room", {"room": room})


@socketio.on("send_message")
def on_send_message(data):
    room = _room_of(data)
    if not room:
        return
    # sender comes from the authenticated socket, never from the payload
    payload = dict(data, sender=connected_user(request.sid))
    emit("receive_message", payload, to=room, include_self=False)


def _relay_typing(data, typing):
    room = _room_of(data)
    if not room:
        return
    emit("user_typing", {
        "room": room,
        "user_id": connected_user(request.sid),
        "typing": typing
    }, to=room, include_self=False)


@socketio.on("typing_start")
def on_typing_start(data):
    _relay_typing(data, True)


@socketio.on("typing_stop")
def on_typing_stop(data):
    _relay_typing(data, False)
