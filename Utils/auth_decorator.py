# Utils/auth_decorator.py
from functools import wraps
from flask import request, jsonify
from mongoengine.errors import ValidationError as MongoValidationError
from Utils.jwt_utils import decode_token, extract_bearer_token
from Models.userModel import User


def load_token_user(decoded):
    """Load the user named by a decoded token payload, or return None."""
    if not decoded:
        return None
    try:
        return User.objects(id=decoded.get("user_id")).first()
    except MongoValidationError:
        # user_id claim is not an ObjectId
        return None


def token_required(f):
    """Ensure that a valid JWT is present and pass the caller as first argument."""
    @wraps(f)
    def decorated(*args, **kwargs):
        token = extract_bearer_token(request.headers.get("Authorization"))

        # Fallback to cookies
        if not token:
            token = request.cookies.get("access_token")

        if not token:
            return jsonify({"success": False, "message": "Authorization token missing"}), 401

        decoded = decode_token(token)
        if not decoded:
            return jsonify({"success": False, "message": "Invalid or expired token"}), 401

        user = load_token_user(decoded)
        if not user:
            return jsonify({"success": False, "message": "User not found"}), 404

        return f(user, *args, **kwargs)

    return decorated
