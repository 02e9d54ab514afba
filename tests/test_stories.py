from datetime import timedelta

import pytest

from petbook.core import follow_graph, stories
from petbook.core.actor import PetActor
from petbook.core.posts import create_post
from petbook.core.errors import NotFoundError, ValidationError
from petbook.models.post import Post
from petbook.models.story_view import StoryView
from petbook.utils.time import utcnow


@pytest.fixture
def t0():
    return utcnow() - timedelta(hours=30)


class TestVisibility:

    def test_visibility_predicate(self, db, actor1, t0):
        story = stories.create_story(db, actor1, "stories/a.jpg", now=t0)

        assert story.expires_at == t0 + timedelta(hours=24)
        assert stories.is_visible(story, t0)
        assert stories.is_visible(story, t0 + timedelta(hours=23, minutes=59))
        assert not stories.is_visible(story, t0 + timedelta(hours=24))
        assert not stories.is_visible(story, t0 + timedelta(hours=25))

    def test_pet_sees_self_and_followed_latest_only(self, db, actor1, actor2, p2, t0):
        follow_graph.follow(db, actor1, p2.id)

        stories.create_story(db, actor2, "stories/old.jpg", now=t0)
        latest = stories.create_story(db, actor2, "stories/new.jpg", now=t0 + timedelta(hours=1))
        mine = stories.create_story(db, actor1, "stories/mine.jpg", now=t0 + timedelta(minutes=30))

        now = t0 + timedelta(hours=2)
        assert [s.id for s in stories.visible_stories_for(db, actor1, now)] == [latest.id, mine.id]
        # Not following back: only their own
        assert [s.id for s in stories.visible_stories_for(db, actor2, now)] == [latest.id]

    def test_professional_sees_latest_pets_capped(self, db, pro_actor, make_user, make_pet, t0, monkeypatch):
        monkeypatch.setattr(stories.settings, "STORY_PROFESSIONAL_LIMIT", 2)

        created = []
        for i in range(3):
            pet = make_pet(make_user())
            created.append(
                stories.create_story(db, PetActor(pet.id), "s.jpg", now=t0 + timedelta(minutes=i))
            )

        visible = stories.visible_stories_for(db, pro_actor, t0 + timedelta(hours=1))
        assert [s.id for s in visible] == [created[2].id, created[1].id]

    def test_only_pets_publish_media_stories(self, db, actor1, pro_actor):
        with pytest.raises(ValidationError):
            stories.create_story(db, pro_actor, "s.jpg")
        with pytest.raises(ValidationError):
            stories.create_story(db, actor1, "")


class TestStoryViewScenario:

    def test_views_are_counted_once_and_expire(self, db, actor1, actor2, p1, t0):
        follow_graph.follow(db, actor2, p1.id)
        story = stories.create_story(db, actor1, "stories/a.jpg", now=t0)

        assert stories.record_view(db, actor2, story.id, now=t0 + timedelta(hours=1)) is True
        assert stories.record_view(db, actor2, story.id, now=t0 + timedelta(hours=2)) is False
        assert db.query(StoryView).count() == 1

        assert [s.id for s in stories.visible_stories_for(db, actor2, t0 + timedelta(hours=2))] == [story.id]
        assert stories.visible_stories_for(db, actor2, t0 + timedelta(hours=25)) == []

        with pytest.raises(NotFoundError):
            stories.record_view(db, actor2, story.id, now=t0 + timedelta(hours=25))
        assert db.query(StoryView).count() == 1


class TestViews:

    def test_counts_and_viewers(self, db, actor1, actor2, pro_actor):
        story = stories.create_story(db, actor1, "stories/a.jpg")

        stories.record_view(db, actor2, story.id)
        stories.record_view(db, pro_actor, story.id)
        stories.record_view(db, pro_actor, story.id)

        assert stories.view_count(db, story.id) == 2
        assert stories.view_count(db, story.id, only_professional=True) == 1
        assert set(stories.list_viewers(db, actor1, story.id)) == {actor2, pro_actor}
        assert stories.viewed_story_ids(db, actor2, [story.id]) == {story.id}
        assert stories.viewed_story_ids(db, actor1, [story.id]) == set()

    def test_dialect_without_upsert_uses_savepoint(self, db, actor1, actor2, pro_actor, monkeypatch):
        monkeypatch.setattr(stories, "UPSERT_DIALECTS", {})
        story = stories.create_story(db, actor1, "stories/a.jpg")

        assert stories.record_view(db, actor2, story.id) is True
        assert stories.record_view(db, actor2, story.id) is False
        assert stories.record_view(db, pro_actor, story.id) is True

        assert stories.view_count(db, story.id) == 2

    def test_viewers_are_owner_only(self, db, actor1, actor2):
        story = stories.create_story(db, actor1, "stories/a.jpg")

        with pytest.raises(NotFoundError):
            stories.list_viewers(db, actor2, story.id)

    def test_a_post_is_not_a_story(self, db, actor1, actor2):

        post = create_post(db, actor1, "plain post")
        with pytest.raises(NotFoundError):
            stories.record_view(db, actor2, post.id)


class TestDeleteStory:

    def test_owner_deletes_with_views(self, db, actor1, actor2):
        story = stories.create_story(db, actor1, "stories/a.jpg")
        stories.record_view(db, actor2, story.id)

        stories.delete_story(db, actor1, story.id)

        assert db.query(Post).count() == 0
        assert db.query(StoryView).count() == 0

    def test_others_cannot_delete(self, db, actor1, actor2):
        story = stories.create_story(db, actor1, "stories/a.jpg")

        with pytest.raises(NotFoundError):
            stories.delete_story(db, actor2, story.id)
        assert db.query(Post).count() == 1
