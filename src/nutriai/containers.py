"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from google.cloud import firestore
from supabase import create_client

from nutriai.adapters.firestore_diary_repository import FirestoreDiaryRepository
from nutriai.adapters.firestore_mood_board_repository import (
    FirestoreMoodBoardRepository,
)
from nutriai.adapters.firestore_user_repository import FirestoreUserRepository
from nutriai.adapters.gemini_client import OpenAICompatibleGeminiClient
from nutriai.adapters.spotify_client import HttpxSpotifyClient
from nutriai.adapters.supabase_diary_repository import SupabaseDiaryRepository
from nutriai.adapters.supabase_mood_board_repository import (
    SupabaseMoodBoardRepository,
)
from nutriai.adapters.supabase_user_repository import SupabaseUserRepository
from nutriai.config import Settings
from nutriai.services.assistant import NutritionAssistantService
from nutriai.services.cache import AccessTokenCache
from nutriai.services.mood_board import MoodBoardService
from nutriai.services.music import MusicService
from nutriai.services.persistence import PersistenceFacade, StorageBackend
from nutriai.services.sessions import SessionTokenCodec
from nutriai.services.stats import StatsService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    persistence: PersistenceFacade
    stats_service: StatsService
    mood_board_service: MoodBoardService
    assistant_service: NutritionAssistantService
    music_service: MusicService
    close_resources: Callable[[], Awaitable[None]]


def build_storage_backend(settings: Settings) -> StorageBackend:
    """Create the repositories of the configured storage backend."""
    if settings.storage_backend == "firestore":
        client = firestore.Client(
            project=settings.firestore_project_id,
            database=settings.firestore_database,
        )
        return StorageBackend(
            name="firestore",
            users=FirestoreUserRepository(client),
            diary=FirestoreDiaryRepository(client),
            mood_board=FirestoreMoodBoardRepository(client),
        )
    client = create_client(settings.supabase_url, settings.supabase_service_key)
    return StorageBackend(
        name="supabase",
        users=SupabaseUserRepository(client),
        diary=SupabaseDiaryRepository(client),
        mood_board=SupabaseMoodBoardRepository(client),
    )


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    backend = build_storage_backend(resolved_settings)
    persistence = PersistenceFacade.create(
        backend,
        tokens=SessionTokenCodec(
            secret=resolved_settings.session_secret,
            ttl_days=resolved_settings.session_ttl_days,
        ),
        max_payload_bytes=resolved_settings.diary_max_payload_bytes,
    )
    gemini_client = OpenAICompatibleGeminiClient.create(
        api_key=resolved_settings.gemini_api_key,
        base_url=resolved_settings.gemini_base_url,
        timeout=resolved_settings.ai_timeout_seconds,
    )
    assistant_service = NutritionAssistantService(
        client=gemini_client,
        model=resolved_settings.ai_model,
        chat_temperature=resolved_settings.chat_temperature,
        chat_max_tokens=resolved_settings.chat_max_tokens,
    )
    spotify_client = None
    if resolved_settings.music_enabled:
        spotify_client = HttpxSpotifyClient.create(
            client_id=resolved_settings.spotify_client_id,
            client_secret=resolved_settings.spotify_client_secret,
            market=resolved_settings.spotify_market,
        )
    music_service = MusicService(client=spotify_client, token_cache=AccessTokenCache())
    mood_board_service = MoodBoardService(
        repository=backend.mood_board, profiles=persistence.profiles
    )

    async def close_resources() -> None:
        await gemini_client.close()
        if spotify_client is not None:
            await spotify_client.close()

    return AppContainer(
        settings=resolved_settings,
        persistence=persistence,
        stats_service=StatsService(persistence),
        mood_board_service=mood_board_service,
        assistant_service=assistant_service,
        music_service=music_service,
        close_resources=close_resources,
    )
