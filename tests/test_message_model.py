import pytest
from bson import ObjectId

from Models.messageModel import Message
from conftest import add_message


@pytest.mark.parametrize("a, b", [
    ("u1", "u2"),
    ("64b7f0c2e1a4f2a9d1c3b001", "64b7f0c2e1a4f2a9d1c3b000"),
    ("same", "same"),
    ("", "u9"),
])
def test_room_name_is_symmetric(a, b):
    assert Message.get_room_name(a, b) == Message.get_room_name(b, a)


def test_room_name_sorts_and_joins_ids():
    assert Message.get_room_name("u2", "u1") == "u1_u2"


def test_room_name_accepts_documents_and_object_ids(farmer, buyer):
    from_docs = Message.get_room_name(farmer, buyer)
    from_ids = Message.get_room_name(ObjectId(str(buyer.id)), str(farmer.id))
    assert from_docs == from_ids
    assert from_docs == "_".join(sorted([str(farmer.id), str(buyer.id)]))


def test_conversation_shows_latest_reply_as_unread(farmer, buyer):
    add_message(farmer, buyer, "Hi", 0)
    add_message(buyer, farmer, "Hello", 1)

    conversations = Message.get_conversations(farmer)

    assert len(conversations) == 1
    conversation = conversations[0]
    assert conversation["room"] == Message.get_room_name(farmer, buyer)
    assert conversation["participant"]["id"] == str(buyer.id)
    assert conversation["participant"]["name"] == "Otieno"
    assert conversation["last_message"] == "Hello"
    assert conversation["unread"] is True
    assert conversation["unread_count"] == 1


def test_conversation_for_sender_of_latest_message_is_read(farmer, buyer):
    add_message(farmer, buyer, "Hi", 0)
    add_message(buyer, farmer, "Hello", 1)

    conversation = Message.get_conversations(buyer)[0]

    assert conversation["participant"]["id"] == str(farmer.id)
    assert conversation["last_message"] == "Hello"
    assert conversation["unread_count"] == 1  # the farmer's "Hi"


def test_one_conversation_per_counterpart_most_recent_first(farmer, buyer, other_buyer):
    add_message(buyer, farmer, "Need 20 crates of tomatoes", 0)
    add_message(other_buyer, farmer, "Are the avocados ready?", 5)
    add_message(farmer, buyer, "Yes, Friday delivery", 10)
    add_message(buyer, farmer, "Great", 11, read=True)

    conversations = Message.get_conversations(farmer)

    assert [c["participant"]["id"] for c in conversations] == [str(buyer.id), str(other_buyer.id)]
    assert conversations[0]["last_message"] == "Great"
    assert conversations[0]["unread_count"] == 1
    assert conversations[1]["last_message"] == "Are the avocados ready?"
    assert conversations[1]["unread"] is True


def test_conversations_empty_for_new_user(farmer):
    assert Message.get_conversations(farmer) == []


def test_conversation_keeps_deleted_counterpart_as_stub(farmer, buyer):
    add_message(buyer, farmer, "Still selling maize?", 0)
    buyer_id = str(buyer.id)
    buyer.delete()

    conversation = Message.get_conversations(farmer)[0]

    assert conversation["participant"] == {"id": buyer_id}
    assert conversation["last_message"] == "Still selling maize?"


def test_unread_counts_only_messages_addressed_to_user(farmer, buyer, other_buyer):
    add_message(buyer, farmer, "one", 0)
    add_message(buyer, farmer, "two", 1)
    add_message(farmer, buyer, "reply", 2)
    add_message(other_buyer, farmer, "seen", 3, read=True)

    counts = Message.count_unread_by_room(farmer.id)

    assert counts == {Message.get_room_name(farmer, buyer): 2}


def test_room_history_is_oldest_first(farmer, buyer, other_buyer):
    room = Message.get_room_name(farmer, buyer)
    add_message(buyer, farmer, "second", 2)
    add_message(farmer, buyer, "first", 1)
    add_message(other_buyer, farmer, "elsewhere", 0)

    history = Message.get_room_history(room)

    assert [m["content"] for m in history] == ["first", "second"]
    assert history[0]["sender"]["id"] == str(farmer.id)
    assert history[0]["receiver"]["name"] == "Otieno"


def test_mark_room_read_is_idempotent(farmer, buyer):
    room = Message.get_room_name(farmer, buyer)
    add_message(buyer, farmer, "one", 0)
    add_message(buyer, farmer, "two", 1)
    add_message(farmer, buyer, "mine", 2)

    assert Message.mark_room_read(room, farmer) == 2
    assert Message.mark_room_read(room, farmer) == 0

    assert Message.objects(room=room, receiver=farmer, read=False).count() == 0
    # messages the farmer sent stay unread for the buyer
    assert Message.objects(room=room, receiver=buyer, read=False).count() == 1


def test_to_json_embeds_participant_profiles(farmer, buyer):
    msg = add_message(farmer, buyer, "Karibu", 0)

    data = msg.to_json()

    assert data["sender"]["profile"]["farm_name"] == "Wanjiru Farm"
    assert data["receiver"]["role"] == "buyer"
    assert data["read"] is False
    assert data["created_at"].startswith("2020-03-01T08:00")
