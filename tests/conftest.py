"""Shared test fixtures."""

from collections.abc import Callable
from dataclasses import dataclass, field, replace
from datetime import UTC, datetime, timedelta
from itertools import count

import pytest

from nutriai.config import Settings
from nutriai.containers import AppContainer
from nutriai.domain.diary import MealEntry
from nutriai.domain.errors import AlreadyExistsError, NotFoundError, ServiceError
from nutriai.domain.mood_board import MoodBoardPost
from nutriai.domain.profile import UserProfile
from nutriai.services.accounts import AccountCredentials
from nutriai.services.assistant import GenerativeClient, NutritionAssistantService
from nutriai.services.cache import AccessTokenCache
from nutriai.services.diary import DiaryRepository
from nutriai.services.mood_board import MoodBoardRepository, MoodBoardService
from nutriai.services.music import (
    MusicCatalogClient,
    MusicService,
    TokenRejectedError,
)
from nutriai.services.persistence import (
    PersistenceFacade,
    StorageBackend,
    UserRepository,
)
from nutriai.services.sessions import SessionTokenCodec
from nutriai.services.stats import StatsService


class BackendDown(RuntimeError):
    """Simulated storage outage."""


@dataclass
class FakeClock:
    """Settable clock for time-dependent code."""

    now: datetime = field(
        default_factory=lambda: datetime(2024, 5, 1, 12, tzinfo=UTC)
    )

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now += timedelta(**kwargs)


@dataclass
class InMemoryUserRepository(UserRepository):
    """In-memory accounts and profiles for tests."""

    accounts: dict[str, AccountCredentials] = field(default_factory=dict)
    profiles: dict[str, UserProfile] = field(default_factory=dict)
    revoked: dict[str, datetime] = field(default_factory=dict)
    fail_reads: bool = False
    fail_writes: bool = False
    _ids: count = field(default_factory=lambda: count(1))

    def create_account(self, email: str, password_hash: str) -> str:
        if email in self.accounts:
            raise AlreadyExistsError("Email already registered")
        user_id = str(next(self._ids))
        self.accounts[email] = AccountCredentials(user_id, email, password_hash)
        self.profiles[user_id] = UserProfile()
        return user_id

    def get_credentials(self, email: str) -> AccountCredentials | None:
        return self.accounts.get(email)

    def get_profile(self, user_id: str) -> UserProfile | None:
        if self.fail_reads:
            raise BackendDown("profiles unavailable")
        return self.profiles.get(user_id)

    def save_profile(self, user_id: str, profile: UserProfile) -> None:
        if self.fail_writes:
            raise BackendDown("profiles unavailable")
        self.profiles[user_id] = profile

    def revoke_session(self, token_id: str, expires_at: datetime) -> None:
        if self.fail_writes:
            raise BackendDown("sessions unavailable")
        self.revoked[token_id] = expires_at

    def is_session_revoked(self, token_id: str) -> bool:
        if self.fail_reads:
            raise BackendDown("sessions unavailable")
        return token_id in self.revoked


@dataclass
class InMemoryDiaryRepository(DiaryRepository):
    """In-memory diary storage for tests."""

    entries: dict[str, list[MealEntry]] = field(default_factory=dict)
    fail_reads: bool = False
    fail_writes: bool = False
    _ids: count = field(default_factory=lambda: count(1))

    def list_entries(self, user_id: str) -> list[MealEntry]:
        if self.fail_reads:
            raise BackendDown("diary unavailable")
        return list(self.entries.get(user_id, []))

    def create_entry(self, user_id: str, entry: MealEntry) -> str:
        if self.fail_writes:
            raise BackendDown("diary unavailable")
        entry_id = f"entry-{next(self._ids)}"
        self.entries.setdefault(user_id, []).append(replace(entry, id=entry_id))
        return entry_id


@dataclass
class InMemoryMoodBoardRepository(MoodBoardRepository):
    """In-memory mood board storage for tests."""

    posts: dict[str, MoodBoardPost] = field(default_factory=dict)
    fail_reads: bool = False
    _ids: count = field(default_factory=lambda: count(1))

    def list_posts(self, category: str) -> list[MoodBoardPost]:
        if self.fail_reads:
            raise BackendDown("mood board unavailable")
        return [post for post in self.posts.values() if post.category == category]

    def get_post(self, post_id: str) -> MoodBoardPost | None:
        return self.posts.get(post_id)

    def create_post(self, post: MoodBoardPost) -> str:
        post_id = f"post-{next(self._ids)}"
        self.posts[post_id] = replace(post, id=post_id)
        return post_id

    def update_liked_by(
        self, post_id: str, change: Callable[[list[str]], list[str]]
    ) -> None:
        post = self.posts.get(post_id)
        if post is None:
            raise NotFoundError("Post not found")
        self.posts[post_id] = replace(post, liked_by=change(list(post.liked_by)))

    def delete_post(self, post_id: str) -> None:
        self.posts.pop(post_id, None)


@dataclass
class FakeGenerativeClient(GenerativeClient):
    """Fake model returning queued replies and recording prompts."""

    replies: list[str] = field(default_factory=list)
    error: Exception | None = None
    calls: list[dict[str, object]] = field(default_factory=list)

    async def generate(  # noqa: PLR0913
        self,
        *,
        model: str,
        prompt: str,
        image_data_url: str | None = None,
        json_output: bool = False,
        temperature: float | None = None,
        max_tokens: int | None = None,
    ) -> str:
        self.calls.append(
            {
                "model": model,
                "prompt": prompt,
                "image_data_url": image_data_url,
                "json_output": json_output,
                "temperature": temperature,
                "max_tokens": max_tokens,
            }
        )
        if self.error is not None:
            raise self.error
        return self.replies.pop(0) if self.replies else ""


def make_track(track_id: str, name: str = "Song") -> dict[str, object]:
    return {
        "id": track_id,
        "name": name,
        "artists": [{"name": "Artist"}],
        "album": {"images": [{"url": f"https://img.example/{track_id}.jpg"}]},
        "external_urls": {"spotify": f"https://open.spotify.com/track/{track_id}"},
        "preview_url": None,
    }


@dataclass
class FakeMusicCatalogClient(MusicCatalogClient):
    """Fake catalog returning tracks per query."""

    results: dict[str, list[dict[str, object]]] = field(default_factory=dict)
    default_results: list[dict[str, object]] = field(default_factory=list)
    failing_queries: set[str] = field(default_factory=set)
    rejected_tokens: set[str] = field(default_factory=set)
    token_error: Exception | None = None
    token_requests: int = 0
    queries: list[str] = field(default_factory=list)

    async def request_token(self) -> tuple[str, int]:
        self.token_requests += 1
        if self.token_error is not None:
            raise self.token_error
        return f"token-{self.token_requests}", 3600

    async def search_tracks(
        self, token: str, query: str, limit: int = 10
    ) -> list[dict[str, object]]:
        self.queries.append(query)
        if token in self.rejected_tokens:
            raise TokenRejectedError(f"token {token} rejected")
        if query in self.failing_queries:
            raise ServiceError(f"search failed for {query}")
        return list(self.results.get(query, self.default_results))


@pytest.fixture
def settings() -> Settings:
    return Settings(
        storage_backend="supabase",
        supabase_url="https://example.supabase.co",
        supabase_service_key="service-key",
        session_secret="test-secret",
        gemini_api_key="gemini-key",
        spotify_client_id="spotify-id",
        spotify_client_secret="spotify-secret",
    )


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def tokens(clock: FakeClock) -> SessionTokenCodec:
    return SessionTokenCodec(secret="test-secret", ttl_days=30, clock=clock)


@pytest.fixture
def user_repository() -> InMemoryUserRepository:
    return InMemoryUserRepository()


@pytest.fixture
def diary_repository() -> InMemoryDiaryRepository:
    return InMemoryDiaryRepository()


@pytest.fixture
def mood_board_repository() -> InMemoryMoodBoardRepository:
    return InMemoryMoodBoardRepository()


@pytest.fixture
def persistence(
    user_repository: InMemoryUserRepository,
    diary_repository: InMemoryDiaryRepository,
    mood_board_repository: InMemoryMoodBoardRepository,
    tokens: SessionTokenCodec,
) -> PersistenceFacade:
    backend = StorageBackend(
        name="memory",
        users=user_repository,
        diary=diary_repository,
        mood_board=mood_board_repository,
    )
    return PersistenceFacade.create(backend, tokens=tokens)


@pytest.fixture
def generative_client() -> FakeGenerativeClient:
    return FakeGenerativeClient()


@pytest.fixture
def music_client() -> FakeMusicCatalogClient:
    return FakeMusicCatalogClient(default_results=[make_track("t1"), make_track("t2")])


@pytest.fixture
def container(
    settings: Settings,
    persistence: PersistenceFacade,
    mood_board_repository: InMemoryMoodBoardRepository,
    generative_client: FakeGenerativeClient,
    music_client: FakeMusicCatalogClient,
) -> AppContainer:
    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        persistence=persistence,
        stats_service=StatsService(persistence),
        mood_board_service=MoodBoardService(
            repository=mood_board_repository, profiles=persistence.profiles
        ),
        assistant_service=NutritionAssistantService(
            client=generative_client, model=settings.ai_model
        ),
        music_service=MusicService(client=music_client, token_cache=AccessTokenCache()),
        close_resources=close_resources,
    )
