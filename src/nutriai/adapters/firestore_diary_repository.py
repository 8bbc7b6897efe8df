"""Firestore repository for diary entries."""

from dataclasses import asdict, dataclass
from datetime import UTC, datetime

from google.cloud import firestore
from google.cloud.firestore_v1.base_query import FieldFilter

from nutriai.adapters.records import parse_ingredients
from nutriai.domain.diary import Ingredient, MealEntry
from nutriai.services.diary import DiaryRepository

UNKNOWN_TITLE = "未知"


@dataclass
class FirestoreDiaryRepository(DiaryRepository):
    """Firestore implementation for diary entries."""

    client: firestore.Client

    def list_entries(self, user_id: str) -> list[MealEntry]:
        """Return all entries of a user, normalizing older document shapes."""
        query = self.client.collection("diary_entries").where(
            filter=FieldFilter("userId", "==", user_id)
        )
        return [
            entry_from_document(doc.id, doc.to_dict() or {}) for doc in query.stream()
        ]

    def create_entry(self, user_id: str, entry: MealEntry) -> str:
        """Add an entry document and return its id."""
        _, doc_ref = self.client.collection("diary_entries").add(
            {
                "userId": user_id,
                "date": entry.date,
                "type": entry.type,
                "title": entry.title,
                "description": entry.description,
                "calories": entry.calories,
                "time": entry.time,
                "imageUrl": entry.image_url,
                "ingredients": [asdict(item) for item in entry.ingredients],
                "createdAt": firestore.SERVER_TIMESTAMP,
            }
        )
        return doc_ref.id


def entry_from_document(doc_id: str, data: dict[str, object]) -> MealEntry:
    """Build an entry from a document.

    Early documents stored a single food flat on the entry (name, portion,
    macros) and some lack a date; those are read back as one ingredient and
    the creation date respectively.
    """
    ingredients = parse_ingredients(data.get("ingredients"))
    if not ingredients and data.get("name"):
        ingredients = [
            Ingredient(
                name=str(data["name"]),
                portion=str(data.get("portion") or ""),
                calories=int(data.get("calories") or 0),
                protein=float(data.get("protein") or 0),
                carbs=float(data.get("carbs") or 0),
                fat=float(data.get("fat") or 0),
            )
        ]
    name = str(data.get("name") or "")
    return MealEntry(
        id=doc_id,
        date=_entry_date(data),
        type=str(data.get("type") or "Lunch"),
        title=str(data.get("title") or name or UNKNOWN_TITLE),
        description=str(data.get("description") or name),
        calories=int(data.get("calories") or 0),
        time=str(data.get("time") or ""),
        image_url=str(data.get("imageUrl") or ""),
        ingredients=ingredients,
    )


def _entry_date(data: dict[str, object]) -> str:
    if data.get("date"):
        return str(data["date"])
    created_at = data.get("createdAt")
    if isinstance(created_at, datetime):
        return created_at.astimezone(UTC).date().isoformat()
    return datetime.now(tz=UTC).date().isoformat()
