"""Firestore repository for mood board posts."""

from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime

from google.cloud import firestore
from google.cloud.firestore_v1.base_query import FieldFilter

from nutriai.adapters.records import parse_liked_by
from nutriai.domain.errors import NotFoundError
from nutriai.domain.mood_board import MoodBoardPost
from nutriai.services.mood_board import MoodBoardRepository


@dataclass
class FirestoreMoodBoardRepository(MoodBoardRepository):
    """Firestore implementation for mood board posts."""

    client: firestore.Client

    def list_posts(self, category: str) -> list[MoodBoardPost]:
        """Return posts of a category."""
        query = self.client.collection("mood_board_posts").where(
            filter=FieldFilter("category", "==", category)
        )
        return [
            post_from_document(doc.id, doc.to_dict() or {}) for doc in query.stream()
        ]

    def get_post(self, post_id: str) -> MoodBoardPost | None:
        """Return a post by id."""
        snapshot = self.client.collection("mood_board_posts").document(post_id).get()
        if not snapshot.exists:
            return None
        return post_from_document(snapshot.id, snapshot.to_dict() or {})

    def create_post(self, post: MoodBoardPost) -> str:
        """Add a post document and return its id."""
        _, doc_ref = self.client.collection("mood_board_posts").add(
            {
                "userId": post.user_id,
                "userNickname": post.user_nickname,
                "emoji": post.emoji,
                "content": post.content,
                "category": post.category,
                "likes": post.likes,
                "likedBy": list(post.liked_by),
                "createdAt": post.created_at,
            }
        )
        return doc_ref.id

    def update_liked_by(
        self, post_id: str, change: Callable[[list[str]], list[str]]
    ) -> None:
        """Rewrite the likers and the like count inside a transaction."""
        ref = self.client.collection("mood_board_posts").document(post_id)

        @firestore.transactional
        def apply(transaction: firestore.Transaction) -> None:
            snapshot = ref.get(transaction=transaction)
            if not snapshot.exists:
                raise NotFoundError("Post not found")
            current = parse_liked_by((snapshot.to_dict() or {}).get("likedBy"))
            liked_by = change(current)
            if liked_by != current:
                transaction.update(ref, {"likedBy": liked_by, "likes": len(liked_by)})

        apply(self.client.transaction())

    def delete_post(self, post_id: str) -> None:
        """Delete a post document."""
        self.client.collection("mood_board_posts").document(post_id).delete()


def post_from_document(doc_id: str, data: dict[str, object]) -> MoodBoardPost:
    """Build a post from a document."""
    created_at = data.get("createdAt")
    if not isinstance(created_at, datetime):
        created_at = datetime.fromtimestamp(0, tz=UTC)
    return MoodBoardPost(
        id=doc_id,
        user_id=str(data.get("userId") or ""),
        user_nickname=str(data.get("userNickname") or ""),
        emoji=str(data.get("emoji") or ""),
        content=str(data.get("content") or ""),
        category=str(data.get("category") or ""),
        created_at=created_at,
        liked_by=parse_liked_by(data.get("likedBy")),
    )
