"""Domain models for the community mood board."""

from dataclasses import dataclass, field
from datetime import datetime

EMOJI_OPTIONS = (
    "\U0001f60a",  # smiling face with smiling eyes
    "\U0001f622",  # crying face
    "\U0001f634",  # sleeping face
    "\U0001f624",  # face with steam from nose
    "\U0001f60c",  # relieved face
    "\U0001f914",  # thinking face
    "\U0001f60d",  # heart eyes
    "\U0001f973",  # partying face
    "\U0001f60e",  # sunglasses
    "\U0001f62d",  # loudly crying face
    "\U0001f621",  # pouting face
    "\U0001f917",  # hugging face
)
MAX_CONTENT_LENGTH = 500
ANONYMOUS_NICKNAME = "匿名"


@dataclass(frozen=True)
class MoodBoardPost:
    """Stored mood board post. likes always equals len(liked_by)."""

    id: str
    user_id: str
    user_nickname: str
    emoji: str
    content: str
    category: str
    created_at: datetime
    liked_by: list[str] = field(default_factory=list)

    @property
    def likes(self) -> int:
        """Return the like count."""
        return len(self.liked_by)


@dataclass(frozen=True)
class MoodBoardView:
    """Post as seen by a specific user."""

    post: MoodBoardPost
    is_liked: bool
    is_owner: bool
