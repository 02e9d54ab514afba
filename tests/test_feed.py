from datetime import timedelta

import pytest

from petbook.core import follow_graph
from petbook.core.actor import PetActor
from petbook.core.errors import ValidationError
from petbook.core.feed import assemble_feed
from petbook.core.posts import create_post
from petbook.core.stories import create_story
from petbook.utils.time import utcnow


@pytest.fixture
def post_at(db):
    base = utcnow() - timedelta(hours=1)

    def _post(actor, minutes, text="hello"):
        post = create_post(db, actor, text)
        post.created_at = base + timedelta(minutes=minutes)
        db.commit()
        return post

    return _post


class TestFeed:

    def test_pet_sees_self_and_followed(self, db, actor1, actor2, make_pet, make_user, post_at, p2):
        stranger = make_pet(make_user())

        mine = post_at(actor1, 1)
        theirs = post_at(actor2, 2)
        post_at(PetActor(stranger.id), 3)

        assert [p.id for p in assemble_feed(db, actor1)] == [mine.id]

        follow_graph.follow(db, actor1, p2.id)
        assert [p.id for p in assemble_feed(db, actor1)] == [theirs.id, mine.id]

    def test_professional_sees_everything(self, db, pro_actor, actor1, actor2, post_at):
        a = post_at(actor1, 1)
        b = post_at(actor2, 2)

        assert [p.id for p in assemble_feed(db, pro_actor)] == [b.id, a.id]

    def test_empty_feeds(self, db, actor1, pro_actor):
        assert assemble_feed(db, actor1) == []
        assert assemble_feed(db, pro_actor) == []

    def test_paging(self, db, actor1, post_at):
        posts = [post_at(actor1, i) for i in range(5)]
        newest_first = [p.id for p in reversed(posts)]

        assert [p.id for p in assemble_feed(db, actor1, limit=2)] == newest_first[:2]
        assert [p.id for p in assemble_feed(db, actor1, limit=2, offset=2)] == newest_first[2:4]

    def test_stories_stay_out_of_the_feed(self, db, actor1, post_at):
        post = post_at(actor1, 1)
        create_story(db, actor1, "stories/a.jpg")

        assert [p.id for p in assemble_feed(db, actor1)] == [post.id]


class TestCreatePost:

    def test_professional_cannot_post(self, db, pro_actor):
        with pytest.raises(ValidationError):
            create_post(db, pro_actor, "hi")

    def test_post_needs_content(self, db, actor1):
        with pytest.raises(ValidationError):
            create_post(db, actor1, "   ")

        assert create_post(db, actor1, None, "media/a.jpg").media_url == "media/a.jpg"
