from flask import Blueprint, current_app, jsonify, request
from mongoengine.errors import ValidationError as MongoValidationError
from werkzeug.exceptions import HTTPException

from Utils.appError import AppError

error_bp = Blueprint('errors', __name__)

# Browser noise that should not fill the logs
SKIP_LOGGING_PATHS = (
    '/.well-known/appspecific/com.chrome.devtools.json',
    '/favicon.ico',
    '/robots.txt'
)


def _context():
    return f"URL: {request.url} | Method: {request.method} | IP: {request.remote_addr}"


@error_bp.app_errorhandler(AppError)
def handle_app_error(err):
    if err.status_code >= 500:
        current_app.logger.error(f"AppError {err.status_code}: {err} | {_context()}")
    else:
        current_app.logger.warning(f"AppError {err.status_code} at {request.path}: {err}")
    return jsonify(err.to_dict()), err.status_code


@error_bp.app_errorhandler(MongoValidationError)
def handle_validation_error(err):
    errors = [str(e) for e in (err.errors or {}).values()] or [str(err)]
    current_app.logger.warning(f"Validation error at {request.path}: {errors}")
    return jsonify({
        "success": False,
        "status": "fail",
        "message": "Validation Error",
        "errors": errors
    }), 400


@error_bp.app_errorhandler(404)
def not_found_error(e):
    if request.path not in SKIP_LOGGING_PATHS:
        current_app.logger.warning(f"404 Not Found: {_context()}")

    return jsonify({
        "success": False,
        "status": "fail",
        "message": "Route not found",
        "path": request.path,
        "method": request.method
    }), 404


@error_bp.app_errorhandler(429)
def ratelimit_handler(e):
    return jsonify({
        "success": False,
        "status": "fail",
        "message": "Rate limit exceeded. Please slow down."
    }), 429


@error_bp.app_errorhandler(HTTPException)
def handle_http_error(e):
    return jsonify({
        "success": False,
        "status": "fail" if e.code < 500 else "error",
        "message": e.description or e.name
    }), e.code


@error_bp.app_errorhandler(Exception)
def handle_unexpected_error(e):
    # This includes traceback automatically
    current_app.logger.exception(f"Unexpected Application Error: {e} | {_context()}")

    return jsonify({
        "success": False,
        "status": "error",
        "message": "Internal server error",
        "error": str(e) if current_app.debug else "Something went wrong"
    }), 500
