from flask import Blueprint
from Controllers.messageController import (
    get_conversations, get_room_messages, send_message, mark_room_read, list_counterparts
)

# ----------------------------
# Messaging API routes
# Registered under /api/messages and again under /api/chat
# ----------------------------
message_routes = Blueprint('message_routes', __name__, url_prefix='/api/messages')

message_routes.add_url_rule('', view_func=send_message, methods=['POST'])
message_routes.add_url_rule('/conversations', view_func=get_conversations, methods=['GET'])
message_routes.add_url_rule('/users/list', view_func=list_counterparts, methods=['GET'])
message_routes.add_url_rule('/<room>', view_func=get_room_messages, methods=['GET'])
message_routes.add_url_rule('/<room>/read', view_func=mark_room_read, methods=['PUT'])

CHAT_PREFIX = '/api/chat'
