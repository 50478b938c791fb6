from mongoengine import Document, StringField, ReferenceField, DateTimeField, BooleanField, Q
from bson import DBRef, ObjectId
from datetime import datetime

from Models.userModel import User

MAX_CONTENT_LENGTH = 2000
ROOM_SEPARATOR = "_"


def _id_str(value) -> str:
    """String id of a User, DBRef, ObjectId or plain id."""
    if value is None:
        return ""
    if isinstance(value, (Document, DBRef)):
        return str(value.id)
    return str(value)


def _load_public_profiles(user_ids) -> dict:
    """Fetch public profiles for ``user_ids`` with a single query."""
    ids = [ObjectId(str(uid)) for uid in user_ids if uid]
    if not ids:
        return {}
    return {str(u.id): u.to_public_json() for u in User.objects(id__in=ids)}


def _public(profiles, user_id) -> dict:
    # Deleted users still show up in old threads
    return profiles.get(str(user_id)) or {'id': str(user_id)}


def _iso(value):
    return value.isoformat() if value else None


class Message(Document):
    room = StringField(required=True)
    sender = ReferenceField('User', required=True)
    receiver = ReferenceField('User', required=True)
    content = StringField(required=True, max_length=MAX_CONTENT_LENGTH)
    read = BooleanField(default=False)
    created_at = DateTimeField(default=datetime.utcnow)

    meta = {
        'collection': 'messages',
        'indexes': [
            'room',
            'sender',
            'receiver',
            'created_at',
            ('room', 'receiver', 'read'),
        ]
    }

    # =====================================
    #  ROOMS
    # =====================================
    @staticmethod
    def get_room_name(user1, user2) -> str:
        """Canonical room id for a pair of users, independent of argument order."""
        return ROOM_SEPARATOR.join(sorted([_id_str(user1), _id_str(user2)]))

    @classmethod
    def get_room_history(cls, room):
        """All messages of ``room``, oldest first, as JSON-ready dicts."""
        docs = cls.objects(room=room).order_by('created_at', 'id').as_pymongo()
        return cls.serialize_raw(docs)

    @classmethod
    def mark_room_read(cls, room, user) -> int:
        """Flag every unread message of ``room`` addressed to ``user`` as read.

        Returns the number of messages that changed.
        """
        return cls.objects(room=room, receiver=user, read=False).update(set__read=True)

    # =====================================
    #  CONVERSATIONS
    # =====================================
    @classmethod
    def count_unread_by_room(cls, user) -> dict:
        """Map of room id to unread message count for messages addressed to ``user``."""
        pipeline = [{"$group": {"_id": "$room", "count": {"$sum": 1}}}]
        rows = cls.objects(receiver=user, read=False).aggregate(pipeline)
        return {row["_id"]: row["count"] for row in rows}

    @classmethod
    def get_conversations(cls, user) -> list:
        """One summary per room ``user`` takes part in, most recent room first."""
        user_id = user.id if isinstance(user, User) else ObjectId(str(user))
        docs = cls.objects(Q(sender=user_id) | Q(receiver=user_id)) \
            .order_by('-created_at', '-id').as_pymongo()

        summaries = {}
        for doc in docs:
            other_id = doc['receiver'] if doc['sender'] == user_id else doc['sender']
            room = cls.get_room_name(user_id, other_id)
            if room in summaries:
                continue
            # newest first, so the first message seen is the room's latest
            summaries[room] = {
                'room': room,
                'participant_id': str(other_id),
                'last_message': doc['content'],
                'last_message_time': _iso(doc.get('created_at')),
            }

        if not summaries:
            return []

        unread = cls.count_unread_by_room(user_id)
        profiles = _load_public_profiles(s['participant_id'] for s in summaries.values())

        conversations = []
        for room, summary in summaries.items():
            count = unread.get(room, 0)
            conversations.append({
                'room': room,
                'participant': _public(profiles, summary['participant_id']),
                'last_message': summary['last_message'],
                'last_message_time': summary['last_message_time'],
                'unread': count > 0,
                'unread_count': count,
            })
        return conversations

    # =====================================
    #  JSON SERIALIZERS
    # =====================================
    @classmethod
    def serialize_raw(cls, docs) -> list:
        """Serialize raw message documents, loading participants in one query."""
        docs = list(docs)
        user_ids = {d['sender'] for d in docs} | {d['receiver'] for d in docs}
        profiles = _load_public_profiles(user_ids)
        return [{
            'id': str(d['_id']),
            'room': d['room'],
            'sender': _public(profiles, d['sender']),
            'receiver': _public(profiles, d['receiver']),
            'content': d['content'],
            'read': bool(d.get('read', False)),
            'created_at': _iso(d.get('created_at')),
        } for d in docs]

    def to_json(self) -> dict:
        """Serialize a message whose sender and receiver are loaded documents."""
        def participant(ref):
            if isinstance(ref, User):
                return ref.to_public_json()
            return {'id': _id_str(ref)}

        return {
            'id': str(self.id),
            'room': self.room,
            'sender': participant(self.sender),
            'receiver': participant(self.receiver),
            'content': self.content,
            'read': bool(self.read),
            'created_at': _iso(self.created_at),
        }
