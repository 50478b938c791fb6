import os
import logging
from logging.handlers import TimedRotatingFileHandler, SMTPHandler
import gzip
import glob
import time
import re
from datetime import datetime
from collections import defaultdict
import click
from flask.cli import with_appcontext


def _log_dir():
    return os.getenv("LOG_DIR", "logs")


def _rotating_handler(filename, level, formatter, backup_count):
    handler = TimedRotatingFileHandler(
        os.path.join(_log_dir(), filename), when="midnight", interval=1,
        backupCount=backup_count, encoding="utf-8", delay=True
    )
    handler.suffix = "%Y-%m-%d"
    handler.setFormatter(formatter)
    handler.setLevel(level)
    return handler


def _console_handler(formatter):
    handler = logging.StreamHandler()
    handler.setFormatter(formatter)
    handler.setLevel(logging.INFO)
    return handler


# ==================================================
# LOGGING SETUP
# ==================================================
def setup_logging(app):
    """Configure logging for the Flask app."""
    os.makedirs(_log_dir(), exist_ok=True)

    # Prevent duplicate log handlers when Flask auto-reloads
    if getattr(app, "_logging_configured", False):
        return app.logger
    app._logging_configured = True

    log_format = "%(asctime)s [%(levelname)s] in %(module)s: %(message)s"
    formatter = logging.Formatter(log_format)
    access_formatter = logging.Formatter("%(asctime)s - %(message)s")

    # -------------------------
    # APP + ERROR LOGS
    # -------------------------
    app_logger = app.logger
    app_logger.setLevel(logging.INFO)
    app_logger.addHandler(_rotating_handler("app.log", logging.INFO, formatter, 14))
    app_logger.addHandler(_rotating_handler("error.log", logging.ERROR, formatter, 30))
    app_logger.addHandler(_console_handler(formatter))

    # -------------------------
    # ACCESS LOG
    # -------------------------
    access_logger = logging.getLogger("access")
    access_logger.setLevel(logging.INFO)
    access_logger.addHandler(_rotating_handler("access.log", logging.INFO, access_formatter, 7))
    # Mirror access logs to console so the platform captures them
    access_logger.addHandler(_console_handler(access_formatter))

    # -------------------------
    # CHAT LOG (messages, reads, sockets)
    # -------------------------
    chat_logger = logging.getLogger("chat")
    chat_logger.setLevel(logging.INFO)
    chat_logger.addHandler(_rotating_handler("chat.log", logging.INFO, formatter, 30))
    chat_logger.addHandler(_console_handler(formatter))

    # -------------------------
    # EMAIL ALERTS (OPT-IN)
    # -------------------------
    enable_smtp = os.getenv("ENABLE_SMTP_ALERTS", "false").lower() in ("1", "true", "yes")
    if enable_smtp and not app.debug:
        try:
            mail_handler = SMTPHandler(
                mailhost=(os.getenv("SMTP_HOST", "smtp.gmail.com"), int(os.getenv("SMTP_PORT", "587"))),
                fromaddr=os.getenv("SMTP_FROM", "noreply@agrilink.ai"),
                toaddrs=[addr.strip() for addr in os.getenv("SMTP_TO", "admin@agrilink.ai").split(",") if addr.strip()],
                subject=os.getenv("SMTP_SUBJECT", "🚨 AgriLink Critical Error"),
                credentials=(os.getenv("SMTP_USER", ""), os.getenv("SMTP_PASS", "")),
                secure=()
            )
            mail_handler.setLevel(logging.ERROR)
            mail_handler.setFormatter(formatter)
            app_logger.addHandler(mail_handler)
        except Exception as e:
            app_logger.warning(f"SMTP alerts disabled due to configuration error: {e}")

    # -------------------------
    # LOG HOOKS & TASKS
    # -------------------------
    register_access_log_hook(app, access_logger)
    cleanup_old_logs(app)
    register_log_summary_command(app)

    app_logger.info("🚀 Logging initialized successfully.")
    return app_logger


# ==================================================
# ACCESS LOGGING
# ==================================================
def register_access_log_hook(app, access_logger):
    """Logs each incoming request (IP, method, URL) into access.log."""
    from flask import request

    @app.before_request
    def log_request_info():
        access_logger.info(f"{request.remote_addr} {request.method} {request.url}")


# ==================================================
# OLD LOG CLEANUP & COMPRESSION
# ==================================================
def cleanup_old_logs(app, folder=None, days=7):
    """Compress rotated logs and delete compressed logs older than ``days``."""
    folder = folder or _log_dir()
    now = time.time()
    for log_file in glob.glob(os.path.join(folder, "*.log.*")):
        if log_file.endswith(".gz"):
            continue
        try:
            with open(log_file, "rb") as f_in:
                with gzip.open(f"{log_file}.gz", "wb") as f_out:
                    f_out.writelines(f_in)
            os.remove(log_file)
            app.logger.info(f"🗜️ Compressed log: {log_file}")
        except OSError as e:
            app.logger.error(f"❌ Failed to compress {log_file}: {e}")

    for gz_file in glob.glob(os.path.join(folder, "*.gz")):
        if os.stat(gz_file).st_mtime < now - days * 86400:
            os.remove(gz_file)
            app.logger.info(f"🧹 Deleted old log: {gz_file}")


# ==================================================
# CLI LOG SUMMARY COMMAND
# ==================================================
LOG_PATTERN = re.compile(r"^(\d{4}-\d{2}-\d{2}).*\[(INFO|ERROR|WARNING)\]")
SUMMARY_SOURCES = ("app.log", "error.log", "chat.log")


def summarize_log_dir(log_dir, days):
    """Count INFO/WARNING/ERROR lines per day in recent app, error and chat logs."""
    summary = defaultdict(lambda: {"INFO": 0, "ERROR": 0, "WARNING": 0})
    if not os.path.isdir(log_dir):
        return summary
    now = datetime.now()

    for filename in os.listdir(log_dir):
        if not filename.startswith(SUMMARY_SOURCES):
            continue

        path = os.path.join(log_dir, filename)
        mtime = datetime.fromtimestamp(os.path.getmtime(path))
        if (now - mtime).days > days:
            continue

        opener = gzip.open if filename.endswith(".gz") else open
        try:
            with opener(path, "rt", encoding="utf-8", errors="ignore") as f:
                for line in f:
                    match = LOG_PATTERN.match(line)
                    if match:
                        date_str, level = match.groups()
                        summary[date_str][level] += 1
        except OSError as e:
            click.echo(f"⚠️ Could not read {filename}: {e}")
    return summary


def register_log_summary_command(app):
    """Adds 'flask logs:summary' CLI command to view log stats."""

    @click.command("logs:summary")
    @with_appcontext
    @click.option("--days", default=7, help="Days of logs to summarize")
    def summarize_logs(days):
        summary = summarize_log_dir(_log_dir(), days)

        if not summary:
            click.echo("No log entries found in the specified time range.")
            return

        click.echo("\n📊 Log Summary\n──────────────────────────────")
        total_info = total_error = total_warn = 0

        for date_str in sorted(summary.keys()):
            counts = summary[date_str]
            total_info += counts["INFO"]
            total_error += counts["ERROR"]
            total_warn += counts["WARNING"]
            click.echo(
                f"{date_str}  INFO: {counts['INFO']:<5}  WARNING: {counts['WARNING']:<5}  ERROR: {counts['ERROR']:<5}"
            )

        click.echo("──────────────────────────────")
        click.echo(
            f"Total INFO: {total_info}   WARNING: {total_warn}   ERROR: {total_error}"
        )

    app.cli.add_command(summarize_logs)
