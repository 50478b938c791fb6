from mongoengine import (
    Document, EmbeddedDocument, EmbeddedDocumentField, EmailField, StringField,
    BooleanField, DateTimeField, EnumField, FloatField, IntField
)
from bcrypt import hashpw, gensalt, checkpw
from datetime import datetime
from enum import Enum


# =====================================
#  ROLE ENUM
# =====================================
class Role(Enum):
    FARMER = "farmer"
    BUYER = "buyer"

    def counterpart(self):
        """Farmers trade with buyers and buyers with farmers."""
        return Role.BUYER if self is Role.FARMER else Role.FARMER


# =====================================
#  PROFILE (embedded)
# =====================================
class Coordinates(EmbeddedDocument):
    lat = FloatField()
    lng = FloatField()


class Location(EmbeddedDocument):
    county = StringField(max_length=100)
    subcounty = StringField(max_length=100)
    coordinates = EmbeddedDocumentField(Coordinates)

    def to_json(self) -> dict:
        coords = self.coordinates
        return {
            'county': self.county,
            'subcounty': self.subcounty,
            'coordinates': {'lat': coords.lat, 'lng': coords.lng} if coords else None,
        }


class Profile(EmbeddedDocument):
    farm_name = StringField(max_length=150)
    business_name = StringField(max_length=150)
    location = EmbeddedDocumentField(Location)
    phone = StringField(max_length=20)
    profile_image = StringField()
    verified = BooleanField(default=False)
    rating = FloatField(default=0)
    total_ratings = IntField(default=0)

    def to_json(self) -> dict:
        return {
            'farm_name': self.farm_name,
            'business_name': self.business_name,
            'location': self.location.to_json() if self.location else None,
            'phone': self.phone,
            'profile_image': self.profile_image,
            'verified': self.verified,
            'rating': self.rating,
            'total_ratings': self.total_ratings,
        }


# =====================================
#  USER MODEL
# =====================================
class User(Document):
    name = StringField(required=True, max_length=100)
    email = EmailField(required=True, unique=True)
    password = StringField(required=True, min_length=6)
    role = EnumField(Role, required=True)
    profile = EmbeddedDocumentField(Profile, default=Profile)
    created_at = DateTimeField(default=datetime.utcnow)

    meta = {
        'collection': 'users',
        'indexes': ['email', 'role']
    }

    def clean(self):
        """Normalize user input before saving."""
        if self.name:
            self.name = self.name.strip()
        if self.email:
            self.email = self.email.strip().lower()

    def save(self, *args, **kwargs):
        # Hash password if not already hashed
        if self.password and not self.password.startswith("$2b$"):
            self.validate()
            self.password = self.hash_password(self.password)
        return super(User, self).save(*args, **kwargs)

    # =====================================
    #  PASSWORD HELPERS
    # =====================================
    def correct_password(self, candidate_password: str) -> bool:
        """Check if provided password matches the stored hash."""
        return checkpw(candidate_password.encode('utf-8'), self.password.encode('utf-8'))

    @staticmethod
    def hash_password(password: str) -> str:
        return hashpw(password.encode('utf-8'), gensalt(12)).decode('utf-8')

    # =====================================
    #  JSON SERIALIZERS
    # =====================================
    def to_public_json(self) -> dict:
        """Profile shown to the other side of a conversation."""
        return {
            'id': str(self.id),
            'name': self.name,
            'role': self.role.value if isinstance(self.role, Role) else self.role,
            'profile': self.profile.to_json() if self.profile else None,
        }

    def to_json(self) -> dict:
        data = self.to_public_json()
        data.update({
            'email': self.email,
            'created_at': self.created_at.isoformat() if self.created_at else None,
        })
        return data
