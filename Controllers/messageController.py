import logging
from flask import request, jsonify
from mongoengine.errors import ValidationError as MongoValidationError
from pydantic import ValidationError

from Models.messageModel import Message
from Models.requestSchemas import SendMessageRequest, validation_message
from Models.userModel import User, Role
from Utils.appError import AppError
from Utils.auth_decorator import token_required
from Utils.socket import broadcast_to_room, is_online

logger = logging.getLogger("chat")

COUNTERPART_LIST_LIMIT = 50


def _request_body() -> dict:
    """JSON body, or form fields when the client posted form data."""
    data = request.get_json(silent=True)
    if isinstance(data, dict):
        return data
    return request.form.to_dict()


@token_required
def get_conversations(user):
    """List one summary per room the caller takes part in."""
    try:
        conversations = Message.get_conversations(user)
        for conversation in conversations:
            participant_id = conversation['participant']['id']
            conversation['participant_online'] = is_online(participant_id)

        return jsonify({"success": True, "data": conversations}), 200

    except Exception as e:
        logger.error(f"Error listing conversations for {user.id}: {str(e)}")
        raise AppError(f"Error fetching conversations: {str(e)}", 500)


@token_required
def get_room_messages(user, room):
    try:
        messages = Message.get_room_history(room)
        return jsonify({"success": True, "data": messages}), 200

    except Exception as e:
        logger.error(f"Error fetching room {room}: {str(e)}")
        raise AppError(f"Error fetching messages: {str(e)}", 500)


@token_required
def send_message(user):
    """Persist one message, then announce it to the room."""
    try:
        payload = SendMessageRequest(**_request_body())
    except ValidationError as e:
        raise AppError(validation_message(e), 400)

    if payload.receiver == str(user.id):
        raise AppError("You cannot message yourself", 400)

    try:
        receiver = User.objects(id=payload.receiver).first()
        if not receiver:
            raise AppError("Receiver not found", 404)

        room = Message.get_room_name(user, receiver)
        if payload.room and payload.room != room:
            raise AppError("Room does not match the conversation participants", 400)

        msg = Message(
            room=room,
            sender=user,
            receiver=receiver,
            content=payload.content,
            read=False
        )
        msg.save()

    except AppError as e:
        raise e
    except MongoValidationError as e:
        raise AppError(f"Invalid message: {str(e)}", 400)
    except Exception as e:
        logger.error(f"Error sending message from {user.id}: {str(e)}")
        raise AppError(f"Error sending message: {str(e)}", 500)

    data = msg.to_json()
    logger.info(f"✉️ Message {msg.id} sent in {room}")
    broadcast_to_room("receive_message", data, room)

    return jsonify({
        "success": True,
        "message": "Message sent successfully",
        "data": data
    }), 201


@token_required
def mark_room_read(user, room):
    try:
        updated = Message.mark_room_read(room, user)
        if updated:
            logger.info(f"👁️ {updated} message(s) read by {user.id} in {room}")

        return jsonify({
            "success": True,
            "message": "Messages marked as read",
            "updated": updated
        }), 200

    except Exception as e:
        logger.error(f"Error marking {room} read: {str(e)}")
        raise AppError(f"Error marking messages as read: {str(e)}", 500)


@token_required
def list_counterparts(user):
    """Users the caller can start a conversation with (farmers see buyers and vice versa)."""
    try:
        wanted = user.role.counterpart()
        users = User.objects(role=wanted).order_by('name').limit(COUNTERPART_LIST_LIMIT)

        return jsonify({
            "success": True,
            "data": [u.to_public_json() for u in users]
        }), 200

    except Exception as e:
        logger.error(f"Error listing counterparts for {user.id}: {str(e)}")
        raise AppError(f"Error fetching users: {str(e)}", 500)
