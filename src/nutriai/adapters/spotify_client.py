"""Spotify Web API client (client-credentials flow)."""

from dataclasses import dataclass

import httpx

from nutriai.domain.errors import QuotaExceededError, ServiceError
from nutriai.services.music import MusicCatalogClient, TokenRejectedError

TOKEN_URL = "https://accounts.spotify.com/api/token"
SEARCH_URL = "https://api.spotify.com/v1/search"


@dataclass
class HttpxSpotifyClient(MusicCatalogClient):
    """HTTPX-backed Spotify catalog client."""

    client_id: str
    client_secret: str
    http_client: httpx.AsyncClient
    market: str = "TW"
    timeout: float = 10

    @classmethod
    def create(
        cls, client_id: str, client_secret: str, market: str = "TW"
    ) -> "HttpxSpotifyClient":
        """Create a Spotify client with a managed httpx session."""
        return cls(
            client_id=client_id,
            client_secret=client_secret,
            http_client=httpx.AsyncClient(),
            market=market,
        )

    async def request_token(self) -> tuple[str, int]:
        """Exchange client credentials for an access token."""
        response = await self._send(
            "POST",
            TOKEN_URL,
            data={"grant_type": "client_credentials"},
            auth=(self.client_id, self.client_secret),
        )
        payload = response.json()
        return str(payload["access_token"]), int(payload.get("expires_in", 3600))

    async def search_tracks(
        self, token: str, query: str, limit: int = 10
    ) -> list[dict[str, object]]:
        """Search tracks by keyword."""
        response = await self._send(
            "GET",
            SEARCH_URL,
            params={
                "type": "track",
                "limit": limit,
                "market": self.market,
                "q": query,
            },
            headers={"Authorization": f"Bearer {token}"},
        )
        tracks = response.json().get("tracks") or {}
        return list(tracks.get("items") or [])

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()

    async def _send(self, method: str, url: str, **kwargs: object) -> httpx.Response:
        try:
            response = await self.http_client.request(
                method, url, timeout=self.timeout, **kwargs
            )
        except httpx.HTTPError as exc:
            raise ServiceError(f"Spotify request failed: {exc}") from exc
        if response.status_code == httpx.codes.TOO_MANY_REQUESTS:
            raise QuotaExceededError("Spotify rate limit reached")
        if response.status_code == httpx.codes.UNAUTHORIZED:
            raise TokenRejectedError("Spotify rejected the access token")
        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise ServiceError(
                f"Spotify error ({response.status_code}): {response.text[:200]}"
            ) from exc
        return response
