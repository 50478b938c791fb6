import os
from datetime import datetime, timezone
from flask import jsonify

from Utils.db import ping_db

APP_NAME = "AgriLink AI Messaging"
APP_VERSION = "1.0.0"


def _now():
    return datetime.now(timezone.utc).isoformat()


def api_status():
    return jsonify({
        "success": True,
        "message": f"🌾 {APP_NAME} backend is running!",
        "version": APP_VERSION,
        "timestamp": _now(),
        "environment": os.getenv("APP_ENV") or os.getenv("FLASK_ENV") or "development"
    }), 200


def health_check():
    connected = ping_db()
    return jsonify({
        "success": True,
        "status": "OK",
        "message": "Server is healthy",
        "timestamp": _now(),
        "database": "Connected" if connected else "Disconnected"
    }), 200
