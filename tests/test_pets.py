from datetime import date

import pytest
from sqlalchemy.exc import OperationalError

from petbook.core import chat, follow_graph, ledger, stories
from petbook.core.actor import PetActor
from petbook.core.errors import DependencyError, NotFoundError, ValidationError
from petbook.core.pets import create_pet, delete_pet, list_user_pets, search_pets
from petbook.core.posts import create_post
from petbook.models import (
    ChatMessage,
    ChatRoom,
    Comment,
    Follower,
    HealthRecord,
    Notification,
    Pet,
    Post,
    Reaction,
    StoryView,
)


class TestCreatePet:

    def test_guardian_registers_pet(self, db, guardian):
        pet = create_pet(db, guardian.id, {"name": "  Mia ", "species": "cat"})

        assert pet.name == "Mia"
        assert pet.guardian_name == "Ana Guardian"
        assert list_user_pets(db, guardian.id) == [pet]

    def test_professional_cannot_register_pets(self, db, professional):
        with pytest.raises(ValidationError):
            create_pet(db, professional.id, {"name": "Mia", "species": "cat"})

    def test_unknown_account(self, db):
        with pytest.raises(NotFoundError):
            create_pet(db, "nobody", {"name": "Mia", "species": "cat"})


class TestSearch:

    def test_by_pet_or_guardian_name(self, db, p1, p2):
        assert [p.id for p in search_pets(db, "rex")] == [p1.id]
        assert [p.id for p in search_pets(db, "LUN")] == [p2.id]

        p2.guardian_name = "Bruno"
        db.commit()
        assert [p.id for p in search_pets(db, "brun")] == [p2.id]

    def test_blank_query(self, db, p1):
        assert search_pets(db, "  ") == []


class TestDeletePet:

    def _count_references(self, db, pet_id):
        return {
            "followers": db.query(Follower)
            .filter((Follower.target_pet_id == pet_id) | (Follower.follower_id == pet_id))
            .count(),
            "reactions": db.query(Reaction).filter(Reaction.pet_id == pet_id).count(),
            "comments": db.query(Comment).filter(Comment.pet_id == pet_id).count(),
            "notifications": db.query(Notification)
            .filter((Notification.pet_id == pet_id) | (Notification.related_pet_id == pet_id))
            .count(),
            "posts": db.query(Post).filter(Post.pet_id == pet_id).count(),
            "views": db.query(StoryView).filter(StoryView.viewer_pet_id == pet_id).count(),
            "rooms": db.query(ChatRoom)
            .filter((ChatRoom.party_1_id == pet_id) | (ChatRoom.party_2_id == pet_id))
            .count(),
            "messages": db.query(ChatMessage).filter(ChatMessage.sender_pet_id == pet_id).count(),
            "health": db.query(HealthRecord).filter(HealthRecord.pet_id == pet_id).count(),
        }

    def test_no_orphans_remain(self, db, guardian, p1, actor1, make_user, make_pet, pro_actor):
        others = [PetActor(make_pet(make_user()).id) for _ in range(5)]

        # 3 followers
        for follower in others[:3]:
            follow_graph.follow(db, follower, p1.id)

        # 5 reactions authored by P1, plus a comment on each of those posts
        for other in others:
            post = create_post(db, other, "hello")
            ledger.toggle_reaction(db, actor1, post.id, "paw")
            ledger.add_comment(db, actor1, post.id, "nice")

        # Content of its own, with reactions, comments and story views by others
        own_post = create_post(db, actor1, "mine")
        ledger.toggle_reaction(db, others[0], own_post.id, "hug")
        ledger.add_comment(db, pro_actor, own_post.id, "great")
        story = stories.create_story(db, actor1, "stories/a.jpg")
        stories.record_view(db, others[1], story.id)

        # P1 follows and views others too
        follow_graph.follow(db, actor1, others[4].id)
        other_story = stories.create_story(db, others[4], "stories/b.jpg")
        stories.record_view(db, actor1, other_story.id)

        room = chat.get_or_create_room(db, actor1, pro_actor)
        chat.send_message(db, pro_actor, room.id, "checkup?")
        chat.send_message(db, actor1, room.id, "woof")

        db.add(HealthRecord(pet_id=p1.id, record_date=date(2024, 1, 5), record_type="vaccine", title="Rabies"))
        db.commit()

        pet_id, own_post_id, story_id, room_id = p1.id, own_post.id, story.id, room.id
        assert all(self._count_references(db, pet_id).values())

        delete_pet(db, guardian.id, pet_id)

        assert db.query(Pet).filter(Pet.id == pet_id).count() == 0
        assert not any(self._count_references(db, pet_id).values())
        assert db.query(Reaction).filter(Reaction.post_id == own_post_id).count() == 0
        assert db.query(Comment).filter(Comment.post_id == own_post_id).count() == 0
        assert db.query(StoryView).filter(StoryView.story_id == story_id).count() == 0
        assert db.query(ChatMessage).filter(ChatMessage.room_id == room_id).count() == 0

        # Everyone else's content survives
        assert db.query(Post).count() == 6
        assert db.query(Follower).count() == 0
        assert db.query(StoryView).count() == 0

    def test_only_the_guardian_can_delete(self, db, other_guardian, p1):
        with pytest.raises(NotFoundError):
            delete_pet(db, other_guardian.id, p1.id)

        assert db.get(Pet, p1.id) is not None

    def test_failure_removes_nothing(self, db, guardian, p1, actor1, actor2, p2, monkeypatch):
        follow_graph.follow(db, actor2, p1.id)

        def broken_commit():
            raise OperationalError("COMMIT", {}, Exception("connection lost"))

        monkeypatch.setattr(db, "commit", broken_commit)

        with pytest.raises(DependencyError):
            delete_pet(db, guardian.id, p1.id)

        monkeypatch.undo()
        assert db.get(Pet, p1.id) is not None
        assert follow_graph.follower_count(db, p1.id) == 1
