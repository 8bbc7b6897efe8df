"""Tests for music recommendations and the token cache."""

import asyncio
import random

import pytest

from nutriai.domain.errors import QuotaExceededError, ServiceError
from nutriai.services.cache import AccessTokenCache
from nutriai.services.music import FALLBACK_QUERY, MOOD_KEYWORDS, MusicService
from tests.conftest import FakeClock, FakeMusicCatalogClient, make_track


def _service(client: FakeMusicCatalogClient | None) -> MusicService:
    return MusicService(client=client, rng=random.Random(7))


def test_recommend_dedupes_by_id(music_client) -> None:
    tracks = asyncio.run(_service(music_client).recommend("happy"))

    assert sorted(track.id for track in tracks) == ["t1", "t2"]
    assert len(music_client.queries) == 4
    assert tracks[0].artist == "Artist"
    assert tracks[0].external_url.startswith("https://open.spotify.com/track/")


def test_recommend_limits_to_five() -> None:
    client = FakeMusicCatalogClient(
        default_results=[make_track(f"t{i}") for i in range(20)]
    )

    tracks = asyncio.run(_service(client).recommend("focus"))

    assert len(tracks) == 5
    assert len({track.id for track in tracks}) == 5


def test_unknown_mood_uses_default_keywords(music_client) -> None:
    asyncio.run(_service(music_client).recommend("bored"))

    default_keywords = {
        keyword for options in MOOD_KEYWORDS["default"].values() for keyword in options
    }
    assert set(music_client.queries) <= default_keywords


def test_failed_searches_fall_back_to_global_hits() -> None:
    all_keywords = {
        keyword for options in MOOD_KEYWORDS["sad"].values() for keyword in options
    }
    client = FakeMusicCatalogClient(
        results={FALLBACK_QUERY: [make_track("fallback")]},
        failing_queries=all_keywords,
    )

    tracks = asyncio.run(_service(client).recommend("sad"))

    assert [track.id for track in tracks] == ["fallback"]
    assert client.queries[-1] == FALLBACK_QUERY


def test_token_is_reused_between_calls(music_client) -> None:
    service = _service(music_client)

    asyncio.run(service.recommend("calm"))
    asyncio.run(service.recommend("calm"))

    assert music_client.token_requests == 1


def test_rejected_token_is_dropped_and_refreshed(music_client) -> None:
    service = _service(music_client)
    asyncio.run(service.recommend("calm"))
    music_client.rejected_tokens.add("token-1")

    tracks = asyncio.run(service.recommend("calm"))

    assert music_client.token_requests == 2
    assert service.token_cache.get() == "token-2"
    assert sorted(track.id for track in tracks) == ["t1", "t2"]


def test_rejected_fresh_token_is_service_error(music_client) -> None:
    music_client.rejected_tokens.update({"token-1", "token-2"})

    with pytest.raises(ServiceError):
        asyncio.run(_service(music_client).recommend("calm"))
    assert music_client.token_requests == 2


def test_missing_client_is_service_error() -> None:
    with pytest.raises(ServiceError):
        asyncio.run(_service(None).recommend("happy"))


def test_token_failures() -> None:
    failing = FakeMusicCatalogClient(token_error=RuntimeError("boom"))
    limited = FakeMusicCatalogClient(token_error=QuotaExceededError("429"))

    with pytest.raises(ServiceError):
        asyncio.run(_service(failing).recommend("happy"))
    with pytest.raises(QuotaExceededError):
        asyncio.run(_service(limited).recommend("happy"))


def test_token_cache_refreshes_sixty_seconds_early(clock: FakeClock) -> None:
    cache = AccessTokenCache(clock=clock)
    cache.set("abc", 3600)

    clock.advance(seconds=3539)
    assert cache.get() == "abc"

    clock.advance(seconds=1)
    assert cache.get() is None


def test_token_cache_clear(clock: FakeClock) -> None:
    cache = AccessTokenCache(clock=clock)
    cache.set("abc", 3600)
    cache.clear()

    assert cache.get() is None
