import pytest
from mongoengine import ValidationError

from Models.userModel import User, Role


def test_password_is_hashed_on_save(farmer):
    stored = User.objects(id=farmer.id).first()
    assert stored.password.startswith("$2b$")
    assert stored.correct_password("secret123")
    assert not stored.correct_password("wrong-pass")


def test_resaving_keeps_existing_hash(farmer):
    original = farmer.password
    farmer.name = "Wanjiru K."
    farmer.save()
    assert farmer.password == original


def test_email_is_normalized():
    user = User(name="  Kamau ", email="Kamau@Example.COM ", password="secret123", role=Role.BUYER)
    user.save()
    assert user.email == "kamau@example.com"
    assert user.name == "Kamau"


def test_short_password_is_rejected():
    with pytest.raises(ValidationError):
        User(name="Njeri", email="njeri@example.com", password="123", role=Role.FARMER).save()


def test_role_counterpart():
    assert Role.FARMER.counterpart() is Role.BUYER
    assert Role.BUYER.counterpart() is Role.FARMER


def test_public_json_hides_private_fields(buyer):
    data = buyer.to_public_json()
    assert set(data) == {"id", "name", "role", "profile"}
    assert data["profile"]["location"]["county"] == "Kisumu"
    assert buyer.to_json()["email"] == "otieno@example.com"
