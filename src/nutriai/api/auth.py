"""Account endpoints and bearer-token authentication."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter, Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from nutriai.api.schemas import CredentialsRequest, SuccessResponse, TokenResponse
from nutriai.domain.errors import InvalidCredentialsError

if TYPE_CHECKING:
    from nutriai.containers import AppContainer

router = APIRouter(prefix="/api", tags=["auth"])

_bearer = HTTPBearer(auto_error=False)


def get_container(request: Request) -> AppContainer:
    """Return the container attached to the running app."""
    return request.app.state.container


async def require_user(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(_bearer),
) -> str:
    """Resolve the bearer token to a user id."""
    if credentials is None or not credentials.credentials:
        raise InvalidCredentialsError("Missing bearer token")
    return get_container(request).persistence.authenticate(credentials.credentials)


@router.post("/register", response_model=TokenResponse, status_code=201)
async def register(body: CredentialsRequest, request: Request) -> TokenResponse:
    """Create an account and start a session."""
    token = get_container(request).persistence.register(body.email, body.password)
    return TokenResponse(token=token)


@router.post("/login", response_model=TokenResponse)
async def login(body: CredentialsRequest, request: Request) -> TokenResponse:
    """Start a session for valid credentials."""
    token = get_container(request).persistence.login(body.email, body.password)
    return TokenResponse(token=token)


@router.post("/logout", response_model=SuccessResponse)
async def logout(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(_bearer),
) -> SuccessResponse:
    """End the current session; succeeds even without a valid token."""
    if credentials is not None and credentials.credentials:
        get_container(request).persistence.logout(credentials.credentials)
    return SuccessResponse()
