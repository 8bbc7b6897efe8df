"""Community mood board service."""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Protocol

from nutriai.domain.errors import (
    NotFoundError,
    PermissionDeniedError,
    StorageError,
    ValidationError,
)
from nutriai.domain.mood_board import (
    ANONYMOUS_NICKNAME,
    EMOJI_OPTIONS,
    MAX_CONTENT_LENGTH,
    MoodBoardPost,
    MoodBoardView,
)

if TYPE_CHECKING:
    from nutriai.services.profiles import ProfileService

_logger = logging.getLogger(__name__)


class MoodBoardRepository(Protocol):
    """Persistence interface for mood board posts."""

    def list_posts(self, category: str) -> list[MoodBoardPost]:
        """Return posts in a category, any order."""

    def get_post(self, post_id: str) -> MoodBoardPost | None:
        """Return a post by id."""

    def create_post(self, post: MoodBoardPost) -> str:
        """Persist a new post (its id is ignored) and return the new id."""

    def update_liked_by(
        self, post_id: str, change: Callable[[list[str]], list[str]]
    ) -> None:
        """Atomically replace the likers with `change(current)`.

        The stored like count follows the new list. Raises NotFoundError
        when the post does not exist.
        """

    def delete_post(self, post_id: str) -> None:
        """Delete a post."""


@dataclass
class MoodBoardService:
    """Service for reading, posting and liking mood board posts."""

    repository: MoodBoardRepository
    profiles: "ProfileService"

    def list_posts(
        self, user_id: str, category: str | None = None
    ) -> list[MoodBoardView]:
        """Return posts newest first for a category; empty on failure.

        Without an explicit category the user's health focus is used.
        """
        resolved = category or self.profiles.get_profile(user_id).health_focus
        try:
            posts = self.repository.list_posts(resolved)
        except Exception:
            _logger.exception("Failed to load mood board category=%s", resolved)
            return []
        posts = sorted(posts, key=lambda post: post.created_at, reverse=True)
        return [
            MoodBoardView(
                post=post,
                is_liked=user_id in post.liked_by,
                is_owner=post.user_id == user_id,
            )
            for post in posts
        ]

    def create_post(self, user_id: str, emoji: str, content: str) -> str:
        """Publish a post under the author's nickname and health focus."""
        text = (content or "").strip()
        if emoji not in EMOJI_OPTIONS:
            raise ValidationError("Unsupported emoji")
        if not text:
            raise ValidationError("Post content is required")
        if len(text) > MAX_CONTENT_LENGTH:
            raise ValidationError(
                f"Post content must be at most {MAX_CONTENT_LENGTH} characters"
            )
        profile = self.profiles.get_profile(user_id)
        post = MoodBoardPost(
            id="",
            user_id=user_id,
            user_nickname=profile.nickname or ANONYMOUS_NICKNAME,
            emoji=emoji,
            content=text,
            category=profile.health_focus,
            created_at=datetime.now(tz=UTC),
        )
        try:
            return self.repository.create_post(post)
        except StorageError:
            raise
        except Exception as exc:
            raise StorageError("Failed to publish post") from exc

    def like_post(self, user_id: str, post_id: str) -> None:
        """Like a post; liking twice has no further effect."""
        self._change_likes(post_id, lambda liked_by: [*liked_by, user_id])

    def unlike_post(self, user_id: str, post_id: str) -> None:
        """Remove a like; a no-op when the user never liked the post."""
        self._change_likes(
            post_id, lambda liked_by: [uid for uid in liked_by if uid != user_id]
        )

    def delete_post(self, user_id: str, post_id: str) -> None:
        """Delete a post owned by the user."""
        post = self._require_post(post_id)
        if post.user_id != user_id:
            raise PermissionDeniedError("Only the author can delete this post")
        try:
            self.repository.delete_post(post_id)
        except Exception as exc:
            raise StorageError("Failed to delete post") from exc

    def _require_post(self, post_id: str) -> MoodBoardPost:
        try:
            post = self.repository.get_post(post_id)
        except Exception as exc:
            raise StorageError("Failed to load post") from exc
        if post is None:
            raise NotFoundError("Post not found")
        return post

    def _change_likes(
        self, post_id: str, change: Callable[[list[str]], list[str]]
    ) -> None:
        try:
            self.repository.update_liked_by(
                post_id, lambda liked_by: list(dict.fromkeys(change(liked_by)))
            )
        except (NotFoundError, StorageError):
            raise
        except Exception as exc:
            raise StorageError("Failed to update likes") from exc
