import os

from dotenv import load_dotenv
from flask import Flask
from flask_cors import CORS
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address

load_dotenv()

# Import blueprints
from Controllers.errorController import error_bp
from Routes.healthRoutes import health_routes
from Routes.messageRoutes import message_routes, CHAT_PREFIX
from Utils.socket import socketio
import Controllers.socketController  # noqa: F401  registers socket events

#initialize database first
from Utils.db import init_db
init_db()

DEFAULT_CORS_ORIGINS = (
    "https://agrilink-ai.vercel.app,"
    "http://localhost:5173,"
    "http://127.0.0.1:5173"
)


def _flag(name, default):
    return os.getenv(name, default).lower() in ("1", "true", "yes")


def cors_origins():
    raw = os.getenv("CORS_ORIGINS", DEFAULT_CORS_ORIGINS)
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


# ----------------------------
# Flask app configuration
# ----------------------------
app = Flask(__name__)
app.secret_key = os.getenv("SECRET_KEY", "supersecretkey")
app.json.sort_keys = False
app.config['MAX_CONTENT_LENGTH'] = 1 * 1024 * 1024
app.config['RATELIMIT_ENABLED'] = _flag("RATELIMIT_ENABLED", "true")

CORS(
    app,
    resources={r"/api/*": {"origins": cors_origins()}},
    supports_credentials=True,
    methods=['GET', 'POST', 'PUT', 'DELETE', 'OPTIONS', 'PATCH'],
    allow_headers=['Content-Type', 'Authorization', 'X-Requested-With', 'Accept']
)

# ----------------------------
# Rate Limiter
# ----------------------------
limiter = Limiter(
    get_remote_address,
    app=app,
    default_limits=[
        os.getenv("LIMIT_DEFAULT_HOURLY", "600 per hour"),
        os.getenv("LIMIT_DEFAULT_SECONDLY", "10 per second")
    ],
)

# ----------------------------
# Register blueprints
# ----------------------------
app.register_blueprint(error_bp)
app.register_blueprint(health_routes)
app.register_blueprint(message_routes)
app.register_blueprint(message_routes, url_prefix=CHAT_PREFIX, name='chat_routes')

# ----------------------------
# Real-time layer
# ----------------------------
socketio.init_app(app, cors_allowed_origins=cors_origins(), async_mode="threading")

# ----------------------------
# Logging Configuration
# ----------------------------
from Utils.logger import setup_logging
setup_logging(app)


# ----------------------------
# Run the app
# ----------------------------
def run_server():
    port = int(os.getenv('PORT', 5000))
    # the Werkzeug server is for local development only
    debug = _flag("FLASK_DEBUG", "false")
    app.logger.info(f"🚀 AgriLink AI messaging running on port {port}...")
    socketio.run(app, host='0.0.0.0', port=port, debug=debug, allow_unsafe_werkzeug=debug)


if __name__ == '__main__':
    run_server()
