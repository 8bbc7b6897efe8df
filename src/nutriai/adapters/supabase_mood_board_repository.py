"""Supabase repository for mood board posts."""

import json
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime

from postgrest.exceptions import APIError
from supabase import Client

from nutriai.adapters.records import parse_liked_by
from nutriai.domain.errors import NotFoundError, StorageError
from nutriai.domain.mood_board import MoodBoardPost
from nutriai.services.mood_board import MoodBoardRepository

POST_COLUMNS = (
    "id, userId, userNickname, emoji, content, category, likes, likedBy, createdAt"
)
LIKE_UPDATE_ATTEMPTS = 5


@dataclass
class SupabaseMoodBoardRepository(MoodBoardRepository):
    """Supabase implementation for mood board posts."""

    client: Client

    def list_posts(self, category: str) -> list[MoodBoardPost]:
        """Return posts of a category."""
        response = (
            self.client.table("mood_board_posts")
            .select(POST_COLUMNS)
            .eq("category", category)
            .execute()
        )
        return [post_from_row(row) for row in response.data or []]

    def get_post(self, post_id: str) -> MoodBoardPost | None:
        """Return a post by id."""
        response = (
            self.client.table("mood_board_posts")
            .select(POST_COLUMNS)
            .eq("id", post_id)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return post_from_row(response.data[0])

    def create_post(self, post: MoodBoardPost) -> str:
        """Insert a post row and return its id."""
        try:
            response = (
                self.client.table("mood_board_posts")
                .insert(
                    {
                        "userId": post.user_id,
                        "userNickname": post.user_nickname,
                        "emoji": post.emoji,
                        "content": post.content,
                        "category": post.category,
                        "likes": post.likes,
                        "likedBy": json.dumps(post.liked_by),
                        "createdAt": post.created_at.isoformat(),
                    }
                )
                .execute()
            )
        except APIError as exc:
            raise StorageError(f"Failed to publish post: {exc.message}") from exc
        if not response.data:
            raise StorageError("Failed to publish post")
        return str(response.data[0]["id"])

    def update_liked_by(
        self, post_id: str, change: Callable[[list[str]], list[str]]
    ) -> None:
        """Rewrite the likers only if nobody changed them since the read."""
        for _ in range(LIKE_UPDATE_ATTEMPTS):
            response = (
                self.client.table("mood_board_posts")
                .select("likedBy")
                .eq("id", post_id)
                .limit(1)
                .execute()
            )
            if not response.data:
                raise NotFoundError("Post not found")
            stored = response.data[0].get("likedBy")
            current = parse_liked_by(stored)
            liked_by = change(current)
            if liked_by == current:
                return
            query = (
                self.client.table("mood_board_posts")
                .update({"likedBy": json.dumps(liked_by), "likes": len(liked_by)})
                .eq("id", post_id)
            )
            if stored is None:
                query = query.is_("likedBy", "null")
            else:
                query = query.eq("likedBy", stored)
            if query.execute().data:
                return
        raise StorageError("Likes changed too often, please retry")

    def delete_post(self, post_id: str) -> None:
        """Delete a post row."""
        self.client.table("mood_board_posts").delete().eq("id", post_id).execute()


def post_from_row(row: dict[str, object]) -> MoodBoardPost:
    """Build a post from a stored row."""
    return MoodBoardPost(
        id=str(row["id"]),
        user_id=str(row.get("userId") or ""),
        user_nickname=str(row.get("userNickname") or ""),
        emoji=str(row.get("emoji") or ""),
        content=str(row.get("content") or ""),
        category=str(row.get("category") or ""),
        created_at=datetime.fromisoformat(str(row["createdAt"])),
        liked_by=parse_liked_by(row.get("likedBy")),
    )

