"""Supabase repository for diary entries."""

import json
from dataclasses import asdict, dataclass

from postgrest.exceptions import APIError
from supabase import Client

from nutriai.adapters.records import parse_ingredients
from nutriai.domain.diary import MealEntry
from nutriai.domain.errors import StorageError
from nutriai.services.diary import DiaryRepository

DIARY_COLUMNS = (
    "id, date, type, title, description, calories, time, imageUrl, ingredients"
)


@dataclass
class SupabaseDiaryRepository(DiaryRepository):
    """Supabase implementation for diary entries."""

    client: Client

    def list_entries(self, user_id: str) -> list[MealEntry]:
        """Return all entries of a user."""
        response = (
            self.client.table("diary_entries")
            .select(DIARY_COLUMNS)
            .eq("userId", user_id)
            .execute()
        )
        return [entry_from_row(row) for row in response.data or []]

    def create_entry(self, user_id: str, entry: MealEntry) -> str:
        """Insert an entry row and return its id."""
        try:
            response = (
                self.client.table("diary_entries")
                .insert(
                    {
                        "userId": user_id,
                        "date": entry.date,
                        "type": entry.type,
                        "title": entry.title,
                        "description": entry.description,
                        "calories": entry.calories,
                        "time": entry.time,
                        "imageUrl": entry.image_url,
                        "ingredients": json.dumps(
                            [asdict(item) for item in entry.ingredients],
                            ensure_ascii=False,
                        ),
                    }
                )
                .execute()
            )
        except APIError as exc:
            raise StorageError(f"Failed to save diary entry: {exc.message}") from exc
        if not response.data:
            raise StorageError("Failed to save diary entry")
        return str(response.data[0]["id"])


def entry_from_row(row: dict[str, object]) -> MealEntry:
    """Build an entry from a stored row."""
    return MealEntry(
        id=str(row["id"]),
        date=str(row.get("date") or ""),
        type=str(row.get("type") or "Snack"),
        title=str(row.get("title") or ""),
        description=str(row.get("description") or ""),
        calories=int(row.get("calories") or 0),
        time=str(row.get("time") or ""),
        image_url=str(row.get("imageUrl") or ""),
        ingredients=parse_ingredients(row.get("ingredients")),
    )

