import os
import tempfile
from datetime import datetime, timedelta

import mongomock
import pytest
from mongoengine import connect, disconnect

os.environ.setdefault("MONGODB_URI", "mongodb://localhost:27017/agrilink_test")
os.environ.setdefault("LOG_DIR", tempfile.mkdtemp(prefix="agrilink-logs-"))
os.environ["RATELIMIT_ENABLED"] = "false"
os.environ["JWT_SECRET"] = "test-secret"

from app import app as flask_app  # noqa: E402
from Models.messageModel import Message  # noqa: E402
from Models.userModel import User, Role, Profile, Location  # noqa: E402
from Utils.jwt_utils import create_access_token  # noqa: E402

# Swap the lazy real connection for an in-memory one
disconnect(alias="default")
connect("agrilink_test", host="mongodb://localhost", alias="default",
        mongo_client_class=mongomock.MongoClient)

BASE_TIME = datetime(2020, 3, 1, 8, 0, 0)


@pytest.fixture(autouse=True)
def clean_db():
    yield
    Message.drop_collection()
    User.drop_collection()


@pytest.fixture
def app():
    flask_app.config.update(TESTING=True)
    return flask_app


@pytest.fixture
def client(app):
    return app.test_client()


def make_user(name, email, role, county="Nakuru"):
    user = User(
        name=name,
        email=email,
        password="secret123",
        role=role,
        profile=Profile(farm_name=f"{name} Farm" if role is Role.FARMER else None,
                        location=Location(county=county))
    )
    user.save()
    return user


@pytest.fixture
def farmer():
    return make_user("Wanjiru", "wanjiru@example.com", Role.FARMER)


@pytest.fixture
def buyer():
    return make_user("Otieno", "otieno@example.com", Role.BUYER, county="Kisumu")


@pytest.fixture
def other_buyer():
    return make_user("Achieng", "achieng@example.com", Role.BUYER, county="Nairobi")


def auth_headers(user):
    token = create_access_token(user.id, user.role.value)
    return {"Authorization": f"Bearer {token}"}


def add_message(sender, receiver, content, minutes, read=False):
    """Store a message created ``minutes`` after BASE_TIME."""
    msg = Message(
        room=Message.get_room_name(sender, receiver),
        sender=sender,
        receiver=receiver,
        content=content,
        read=read,
        created_at=BASE_TIME + timedelta(minutes=minutes)
    )
    msg.save()
    return msg
