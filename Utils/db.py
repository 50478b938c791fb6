from mongoengine import connect
from mongoengine.connection import get_db
from dotenv import load_dotenv
import logging
import os
from urllib.parse import urlparse

load_dotenv()

logger = logging.getLogger(__name__)

DEFAULT_DB_NAME = "agrilink_ai"
# upper bound on server selection for queries and health pings
SERVER_SELECTION_TIMEOUT_MS = int(os.getenv("MONGODB_TIMEOUT_MS", 2000))


def init_db():
    mongo_uri = os.getenv("MONGODB_URI", f"mongodb://localhost:27017/{DEFAULT_DB_NAME}")

    # Auto-detect DB name from URI
    parsed = urlparse(mongo_uri)
    db_name = (parsed.path or "").lstrip("/") or DEFAULT_DB_NAME

    try:
        connect(
            db=db_name,
            host=mongo_uri,
            alias="default",
            serverSelectionTimeoutMS=SERVER_SELECTION_TIMEOUT_MS
        )
        logger.info(f"✅ MongoDB configured → {db_name}")
    except Exception as e:
        logger.error(f"❌ MongoDB connection error: {e}")
        raise
    return db_name


def ping_db() -> bool:
    """Return True when the default connection answers a ping."""
    try:
        get_db().command("ping")
        return True
    except Exception as e:
        logger.warning(f"⚠️ MongoDB ping failed: {e}")
        return False
