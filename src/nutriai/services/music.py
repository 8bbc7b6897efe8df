"""Mood-based music recommendations."""

import asyncio
import logging
import random
from dataclasses import dataclass, field
from typing import Protocol

from nutriai.domain.errors import QuotaExceededError, ServiceError
from nutriai.domain.music import MusicTrack
from nutriai.services.cache import AccessTokenCache

MOOD_KEYWORDS: dict[str, dict[str, list[str]]] = {
    "happy": {
        "global": ["feel good pop", "happy hits", "good vibes playlist"],
        "mandarin": ["快樂流行歌", "華語開心歌單", "台灣人氣流行"],
        "japanese": ["j-pop happy upbeat", "日文快節奏", "j-pop party"],
        "korean": ["k-pop dance hits", "k-pop party", "k-pop new hits"],
    },
    "focus": {
        "global": ["deep focus", "instrumental beats", "study beats"],
        "mandarin": ["華語咖啡廳音樂", "中文專注音樂"],
        "japanese": ["日文 lo-fi", "japanese study beats"],
        "korean": ["韓文專注音樂", "korean piano focus"],
    },
    "relaxed": {
        "global": ["lofi chill", "acoustic chill", "lazy sunday"],
        "mandarin": ["療癒吉他", "華語 chillhop"],
        "japanese": ["日文 chillhop", "japanese cafe acoustic"],
        "korean": ["korean cafe acoustic", "韓文慢歌放鬆"],
    },
    "calm": {
        "global": ["ambient calm", "night jazz calm", "peaceful piano"],
        "mandarin": ["睡前放鬆音樂", "華語冥想音樂"],
        "japanese": ["jp ambient piano", "japanese night calm"],
        "korean": ["kr calm night", "korean healing piano"],
    },
    "energetic": {
        "global": ["workout motivation", "beast mode", "cardio mix"],
        "mandarin": ["華語動感電音", "台灣健身歌單"],
        "japanese": ["j-pop edm", "japanese workout"],
        "korean": ["k-pop workout", "k-pop pump up"],
    },
    "sad": {
        "global": ["rainy day songs", "sad piano", "healing ballad"],
        "mandarin": ["華語抒情", "華語失戀歌單"],
        "japanese": ["j-ballad 感傷", "japanese sad ballad"],
        "korean": ["k-ballad healing", "korean sad songs"],
    },
    "default": {
        "global": ["global top 50", "top hits taiwan"],
        "mandarin": ["mandopop hits", "華語人氣新歌"],
        "japanese": ["j-pop hot hits"],
        "korean": ["k-pop today hits"],
    },
}
LANGUAGE_BUCKETS = ("global", "mandarin", "japanese", "korean")
FALLBACK_QUERY = "top hits global"

_logger = logging.getLogger(__name__)


class TokenRejectedError(ServiceError):
    """The catalog refused the access token (HTTP 401)."""


class MusicCatalogClient(Protocol):
    """Interface for the music catalog API.

    Implementations raise QuotaExceededError on rate limiting,
    TokenRejectedError when a search token is refused and ServiceError on
    any other failure.
    """

    async def request_token(self) -> tuple[str, int]:
        """Exchange client credentials for (access_token, expires_in_seconds)."""

    async def search_tracks(
        self, token: str, query: str, limit: int = 10
    ) -> list[dict[str, object]]:
        """Return raw track objects matching a keyword query."""


@dataclass
class MusicService:
    """Recommend tracks for a mood across several language buckets."""

    client: MusicCatalogClient | None
    token_cache: AccessTokenCache = field(default_factory=AccessTokenCache)
    rng: random.Random = field(default_factory=random.Random)
    limit: int = 5
    _token_lock: asyncio.Lock = field(
        default_factory=asyncio.Lock, init=False, repr=False
    )

    async def recommend(self, mood: str) -> list[MusicTrack]:
        """Return up to `limit` distinct tracks sampled for the mood."""
        if self.client is None:
            raise ServiceError("Music catalog credentials are not configured")
        keywords = MOOD_KEYWORDS.get(mood, MOOD_KEYWORDS["default"])
        try:
            collected = await self._collect(await self._get_token(), keywords)
        except TokenRejectedError:
            _logger.info("Music catalog rejected the cached token, refreshing")
            self.token_cache.clear()
            collected = await self._collect(await self._get_token(), keywords)

        unique: dict[str, dict[str, object]] = {}
        for track in collected:
            track_id = str(track.get("id") or "")
            if track_id and track_id not in unique:
                unique[track_id] = track
        sampled = self.rng.sample(list(unique.values()), min(self.limit, len(unique)))
        return [_parse_track(track) for track in sampled]

    async def _collect(
        self, token: str, keywords: dict[str, list[str]]
    ) -> list[dict[str, object]]:
        collected: list[dict[str, object]] = []
        for bucket in LANGUAGE_BUCKETS:
            options = keywords.get(bucket)
            if not options:
                continue
            query = self.rng.choice(options)
            try:
                collected.extend(await self.client.search_tracks(token, query))
            except TokenRejectedError:
                raise
            except (ServiceError, QuotaExceededError) as exc:
                _logger.warning("Music search failed for %r: %s", query, exc)
        if not collected:
            collected.extend(await self.client.search_tracks(token, FALLBACK_QUERY))
        return collected

    async def _get_token(self) -> str:
        async with self._token_lock:
            cached = self.token_cache.get()
            if cached:
                return cached
            try:
                token, expires_in = await self.client.request_token()
            except QuotaExceededError:
                raise
            except Exception as exc:
                raise ServiceError("Could not authenticate with music catalog") from exc
            self.token_cache.set(token, expires_in)
            return token


def _parse_track(track: dict[str, object]) -> MusicTrack:
    artists = track.get("artists") or []
    names = [a.get("name") for a in artists if isinstance(a, dict) and a.get("name")]
    album = track.get("album") or {}
    images = album.get("images") or []
    external = track.get("external_urls") or {}
    return MusicTrack(
        id=str(track["id"]),
        name=str(track.get("name", "")),
        artist=", ".join(names) or "Unknown Artist",
        album_image_url=str(images[0].get("url", "")) if images else "",
        external_url=str(external.get("spotify", "")),
        preview_url=track.get("preview_url") or None,
    )
