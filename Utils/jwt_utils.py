import jwt
from datetime import datetime, timedelta
import os
from dotenv import load_dotenv

load_dotenv()

JWT_ALGORITHM = "HS256"
JWT_EXPIRES_IN_MINUTES = int(os.getenv("JWT_EXPIRES_IN_MINUTES", 60))


def _secret():
    return os.getenv("JWT_SECRET", "default_secret")


def create_access_token(user_id, role, expires_in_minutes=JWT_EXPIRES_IN_MINUTES):
    """
    Generate a JWT access token for a user.
    Tokens are issued by the marketplace auth service; this service only
    mints them for tooling and tests.
    """
    payload = {
        "user_id": str(user_id),
        "role": role,
        "exp": datetime.utcnow() + timedelta(minutes=expires_in_minutes),
        "iat": datetime.utcnow()
    }
    return jwt.encode(payload, _secret(), algorithm=JWT_ALGORITHM)


def decode_token(token):
    """
    Verify and decode a JWT token.
    Returns payload dict if valid, or None if invalid/expired.
    """
    try:
        return jwt.decode(token, _secret(), algorithms=[JWT_ALGORITHM])
    except jwt.ExpiredSignatureError:
        return None
    except jwt.InvalidTokenError:
        return None


def extract_bearer_token(auth_header):
    """Return the token part of an ``Authorization: Bearer <token>`` header."""
    if not auth_header:
        return None
    try:
        token_type, token_val = auth_header.split(" ")
    except ValueError:
        return None
    if token_type.lower() == "bearer" and token_val:
        return token_val
    return None
