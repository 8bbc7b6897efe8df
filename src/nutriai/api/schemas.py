"""Pydantic request and response models for the HTTP API."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from nutriai.domain.diary import (
    DailyStats,
    DiaryGroups,
    Ingredient,
    MealEntry,
    TrendPoint,
)
from nutriai.domain.mood_board import MoodBoardView
from nutriai.domain.music import MusicTrack
from nutriai.domain.profile import UserProfile


class CamelModel(BaseModel):
    """Base model exchanging camelCase field names on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CredentialsRequest(CamelModel):
    """Email and password for register and login."""

    email: str
    password: str


class TokenResponse(CamelModel):
    """Session token issued on register or login."""

    token: str


class SuccessResponse(CamelModel):
    """Acknowledgement of a completed action."""

    success: bool = True


class CreatedResponse(SuccessResponse):
    """Acknowledgement carrying the new resource id."""

    id: str


class ProfilePayload(CamelModel):
    """User profile as sent and received by clients."""

    nickname: str = ""
    gender: str = "Male"
    age: int = Field(default=0, ge=0)
    height: float = Field(default=0, ge=0)
    weight: float = Field(default=0, ge=0)
    activity_level: str = "moderate"
    goal: str = "deficit"
    tdee: int = 0
    target_calories: int = 0
    health_focus: str = "general"

    def to_domain(self) -> UserProfile:
        return UserProfile(**self.model_dump())

    @classmethod
    def from_domain(cls, profile: UserProfile) -> "ProfilePayload":
        return cls(**profile.__dict__)


class EnergyTargetsResponse(CamelModel):
    """Computed energy targets."""

    tdee: int
    target_calories: int


class IngredientPayload(CamelModel):
    """Food item with macros."""

    name: str
    portion: str = ""
    calories: int = 0
    protein: float = 0
    carbs: float = 0
    fat: float = 0

    def to_domain(self) -> Ingredient:
        return Ingredient(**self.model_dump())

    @classmethod
    def from_domain(cls, ingredient: Ingredient) -> "IngredientPayload":
        return cls(**ingredient.__dict__)


class MealEntryPayload(CamelModel):
    """Diary entry; the id is ignored on create."""

    id: str | None = None
    date: str
    type: str
    title: str = ""
    description: str = ""
    calories: int = 0
    time: str = ""
    image_url: str = ""
    ingredients: list[IngredientPayload] = Field(default_factory=list)

    def to_domain(self) -> MealEntry:
        return MealEntry(
            id=None,
            date=self.date,
            type=self.type,
            title=self.title,
            description=self.description,
            calories=self.calories,
            time=self.time,
            image_url=self.image_url,
            ingredients=[item.to_domain() for item in self.ingredients],
        )

    @classmethod
    def from_domain(cls, entry: MealEntry) -> "MealEntryPayload":
        return cls(
            id=entry.id,
            date=entry.date,
            type=entry.type,
            title=entry.title,
            description=entry.description,
            calories=entry.calories,
            time=entry.time,
            image_url=entry.image_url,
            ingredients=[IngredientPayload.from_domain(i) for i in entry.ingredients],
        )


class GroupedDiaryResponse(CamelModel):
    """Diary entries grouped by date, newest date first."""

    dates: list[str]
    groups: dict[str, list[MealEntryPayload]]
    totals: dict[str, int]

    @classmethod
    def from_domain(cls, grouped: DiaryGroups) -> "GroupedDiaryResponse":
        return cls(
            dates=grouped.dates,
            groups={
                day: [MealEntryPayload.from_domain(entry) for entry in entries]
                for day, entries in grouped.entries.items()
            },
            totals=grouped.totals,
        )


class DailyStatsPayload(CamelModel):
    consumed: int
    target: int
    remaining: int
    percentage: int

    @classmethod
    def from_domain(cls, stats: DailyStats) -> "DailyStatsPayload":
        return cls(**stats.__dict__)


class TrendPointPayload(CamelModel):
    date: str
    label: str
    calories: int

    @classmethod
    def from_domain(cls, point: TrendPoint) -> "TrendPointPayload":
        return cls(
            date=point.day.isoformat(), label=point.label, calories=point.calories
        )


class OverviewResponse(CamelModel):
    """Today's progress with the 7-day calorie trend."""

    today: DailyStatsPayload
    weekly_trend: list[TrendPointPayload]
    average_calories: int


class AnalyzeRequest(CamelModel):
    """Base64 image or data URI to analyze."""

    image: str


class EstimateRequest(CamelModel):
    name: str
    portion: str = ""


class ChatRequest(CamelModel):
    message: str
    context: str | None = None


class ChatResponse(CamelModel):
    reply: str


class MusicTrackPayload(CamelModel):
    id: str
    name: str
    artist: str
    album_image_url: str
    external_url: str
    preview_url: str | None = None

    @classmethod
    def from_domain(cls, track: MusicTrack) -> "MusicTrackPayload":
        return cls(**track.__dict__)


class CreatePostRequest(CamelModel):
    emoji: str
    content: str


class MoodBoardPostPayload(CamelModel):
    """Mood board post as seen by the requesting user."""

    id: str
    user_id: str
    user_nickname: str
    emoji: str
    content: str
    category: str
    likes: int
    is_liked: bool
    is_owner: bool
    created_at: datetime

    @classmethod
    def from_domain(cls, view: MoodBoardView) -> "MoodBoardPostPayload":
        post = view.post
        return cls(
            id=post.id,
            user_id=post.user_id,
            user_nickname=post.user_nickname,
            emoji=post.emoji,
            content=post.content,
            category=post.category,
            likes=post.likes,
            is_liked=view.is_liked,
            is_owner=view.is_owner,
            created_at=post.created_at,
        )
