import pytest

from petbook.core import follow_graph
from petbook.core.actor import PetActor, ProfessionalActor
from petbook.core.errors import NotFoundError, SelfFollowError, ValidationError
from petbook.models.follower import Follower
from petbook.models.notification import Notification
from petbook.models.user import User
from petbook.utils.time import utcnow


class TestFollow:

    def test_follow_creates_edge_and_notifies(self, db, actor1, actor2, p2):
        assert follow_graph.follow(db, actor1, p2.id) is True

        assert follow_graph.is_following(db, actor1, p2.id)
        assert follow_graph.follower_count(db, p2.id) == 1
        assert follow_graph.following(db, actor1) == [p2.id]

        note = db.query(Notification).one()
        assert note.type == "follow"
        assert note.pet_id == p2.id
        assert note.related_pet_id == actor1.id
        assert "started following you" in note.message

    def test_duplicate_follow_is_a_noop(self, db, actor1, p2):
        assert follow_graph.follow(db, actor1, p2.id) is True
        assert follow_graph.follow(db, actor1, p2.id) is False

        assert db.query(Follower).count() == 1
        assert db.query(Notification).count() == 1

    def test_cannot_follow_own_pet(self, db, guardian, make_pet, actor1):
        sibling = make_pet(guardian)

        with pytest.raises(SelfFollowError):
            follow_graph.follow(db, actor1, sibling.id)
        with pytest.raises(ValidationError):
            follow_graph.follow(db, actor1, actor1.id)

        assert db.query(Follower).count() == 0

    def test_professional_cannot_follow_own_pet(self, db, professional, make_pet, pro_actor):
        own = make_pet(professional)

        with pytest.raises(SelfFollowError):
            follow_graph.follow(db, pro_actor, own.id)

    def test_professional_follows(self, db, pro_actor, p1):
        follow_graph.follow(db, pro_actor, p1.id)

        assert follow_graph.followers(db, p1.id) == [pro_actor]
        assert follow_graph.following_count(db, pro_actor) == 1

    def test_unknown_pet(self, db, actor1):
        with pytest.raises(NotFoundError):
            follow_graph.follow(db, actor1, "missing")


class TestUnfollow:

    def test_unfollow(self, db, actor1, p2):
        follow_graph.follow(db, actor1, p2.id)

        assert follow_graph.unfollow(db, actor1, p2.id) is True
        assert not follow_graph.is_following(db, actor1, p2.id)

    def test_unfollow_absent_edge_is_a_noop(self, db, actor1, p2):
        assert follow_graph.unfollow(db, actor1, p2.id) is False

    def test_pet_and_professional_edges_are_distinct(self, db, p1, p2):
        # Same raw id on both sides of the union
        db.add(User(id=p1.id, account_type="professional", created_at=utcnow()))
        db.commit()

        follow_graph.follow(db, ProfessionalActor(p1.id), p2.id)

        assert follow_graph.is_following(db, ProfessionalActor(p1.id), p2.id)
        assert not follow_graph.is_following(db, PetActor(p1.id), p2.id)
