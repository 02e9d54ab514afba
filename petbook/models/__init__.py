# Import every model so Base.metadata knows all tables
from petbook.models.user import User
from petbook.models.pet import Pet
from petbook.models.follower import Follower
from petbook.models.post import Post
from petbook.models.reaction import Reaction, REACTION_TYPES
from petbook.models.comment import Comment
from petbook.models.notification import Notification
from petbook.models.chat import ChatRoom, ChatMessage
from petbook.models.story_view import StoryView
from petbook.models.health_record import HealthRecord

__all__ = [
    "User",
    "Pet",
    "Follower",
    "Post",
    "Reaction",
    "REACTION_TYPES",
    "Comment",
    "Notification",
    "ChatRoom",
    "ChatMessage",
    "StoryView",
    "HealthRecord",
]
