"""SQLAlchemy ORM models.

Models represent database tables:
- posts: Shared content links with tags and vote counts
- user_votes: One row per (user, post) upvote
- team_tags: Tags a team filters its discover feed by, plus the bot's service URL
- team_preferences: Digest frequency and tags per team
- user_private_posts: Posts a user saved to their private list
- user_conversation_states: Users who already got the personal welcome card
"""

from sharenow.models.post import Post
from sharenow.models.team_preference import TeamPreference
from sharenow.models.team_tag import TeamTag
from sharenow.models.user_conversation_state import UserConversationState
from sharenow.models.user_private_post import UserPrivatePost
from sharenow.models.user_vote import UserVote

__all__ = [
    "Post",
    "TeamPreference",
    "TeamTag",
    "UserConversationState",
    "UserPrivatePost",
    "UserVote",
]
