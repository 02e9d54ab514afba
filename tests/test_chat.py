import pytest

from petbook.core import chat
from petbook.core.actor import PetActor, ProfessionalActor
from petbook.core.errors import NotFoundError, SelfChatError, ValidationError
from petbook.models.chat import ChatMessage, ChatRoom
from petbook.models.notification import Notification
from petbook.realtime.broker import hub, room_channel


# =============================================================================
# PAIRING
# =============================================================================

class TestGetOrCreateRoom:

    def test_same_room_from_either_side(self, db, actor1, actor2):
        room = chat.get_or_create_room(db, actor1, actor2)

        assert chat.get_or_create_room(db, actor2, actor1).id == room.id
        assert chat.get_or_create_room(db, actor1, actor2).id == room.id
        assert db.query(ChatRoom).count() == 1

    def test_parties_kept_in_call_order(self, db, actor1, pro_actor):
        room = chat.get_or_create_room(db, pro_actor, actor1)

        assert chat.parties(room) == (pro_actor, actor1)
        assert chat.other_party(room, pro_actor) == actor1
        assert chat.other_party(room, actor1) == pro_actor

    def test_self_chat_is_rejected(self, db, actor1, pro_actor):
        with pytest.raises(SelfChatError):
            chat.get_or_create_room(db, actor1, actor1)
        with pytest.raises(ValidationError):
            chat.get_or_create_room(db, pro_actor, pro_actor)

        assert db.query(ChatRoom).count() == 0

    def test_unknown_party(self, db, actor1):
        with pytest.raises(NotFoundError):
            chat.get_or_create_room(db, actor1, PetActor("missing"))
        with pytest.raises(NotFoundError):
            chat.get_or_create_room(db, actor1, ProfessionalActor("missing"))

    def test_guardian_account_is_not_a_professional_party(self, db, actor1, other_guardian):
        with pytest.raises(NotFoundError):
            chat.get_or_create_room(db, actor1, ProfessionalActor(other_guardian.id))
        assert db.query(ChatRoom).count() == 0

    def test_concurrent_first_contact_yields_one_room(self, db, actor1, pro_actor, monkeypatch):
        # Pr opened the room; P1's request had already read "no room"
        winner = chat.get_or_create_room(db, pro_actor, actor1)

        real = chat._find_room
        calls = []

        def stale_then_real(session, a, b):
            calls.append((a, b))
            if len(calls) == 1:
                return None
            return real(session, a, b)

        monkeypatch.setattr(chat, "_find_room", stale_then_real)

        assert chat.get_or_create_room(db, actor1, pro_actor).id == winner.id
        assert db.query(ChatRoom).count() == 1

    def test_list_rooms(self, db, actor1, actor2, pro_actor):
        a = chat.get_or_create_room(db, actor1, actor2)
        b = chat.get_or_create_room(db, pro_actor, actor1)

        assert {r.id for r in chat.list_rooms(db, actor1)} == {a.id, b.id}
        assert [r.id for r in chat.list_rooms(db, actor2)] == [a.id]
        assert [r.id for r in chat.list_rooms(db, pro_actor)] == [b.id]


# =============================================================================
# MESSAGES
# =============================================================================

class TestSendMessage:

    def test_send_orders_and_notifies(self, db, actor1, actor2):
        room = chat.get_or_create_room(db, actor1, actor2)

        chat.send_message(db, actor1, room.id, "hi")
        chat.send_message(db, actor2, room.id, "hello")

        assert [m.message for m in chat.list_messages(db, actor1, room.id)] == ["hi", "hello"]

        notes = db.query(Notification).order_by(Notification.id).all()
        assert [(n.pet_id, n.type) for n in notes] == [
            (actor2.id, "message"),
            (actor1.id, "message"),
        ]
        assert notes[0].message == "Rex sent you a message"

    def test_media_only_message(self, db, actor1, pro_actor):
        room = chat.get_or_create_room(db, actor1, pro_actor)
        msg = chat.send_message(db, pro_actor, room.id, media_url="chat/x.jpg")

        assert msg.sender_user_id == pro_actor.id
        assert msg.message is None

    def test_empty_message_is_rejected(self, db, actor1, actor2):
        room = chat.get_or_create_room(db, actor1, actor2)

        with pytest.raises(ValidationError):
            chat.send_message(db, actor1, room.id, "   ")
        assert db.query(ChatMessage).count() == 0

    def test_outsider_cannot_read_or_write(self, db, actor1, actor2, pro_actor):
        room = chat.get_or_create_room(db, actor1, actor2)

        with pytest.raises(NotFoundError):
            chat.send_message(db, pro_actor, room.id, "hey")
        with pytest.raises(NotFoundError):
            chat.list_messages(db, pro_actor, room.id)

    def test_subscribers_receive_each_message_once(self, db, actor1, actor2):
        room = chat.get_or_create_room(db, actor1, actor2)
        received = []
        unsubscribe = hub.subscribe(room_channel(room.id), received.append)

        try:
            first = chat.send_message(db, actor1, room.id, "one")
            second = chat.send_message(db, actor2, room.id, "two")
            # Replayed delivery of an already seen row
            hub.publish(room_channel(room.id), chat.message_event(first))
        finally:
            unsubscribe()

        chat.send_message(db, actor1, room.id, "after leaving")

        assert [e["id"] for e in received] == [first.id, second.id]
        assert [e["message"] for e in received] == ["one", "two"]
