"""Community mood board endpoints."""

from fastapi import APIRouter, Depends, Request

from nutriai.api.auth import get_container, require_user
from nutriai.api.schemas import (
    CreatedResponse,
    CreatePostRequest,
    MoodBoardPostPayload,
    SuccessResponse,
)

router = APIRouter(prefix="/api/mood-board", tags=["mood-board"])


@router.get("", response_model=list[MoodBoardPostPayload])
async def list_posts(
    request: Request,
    category: str | None = None,
    user_id: str = Depends(require_user),
) -> list[MoodBoardPostPayload]:
    """Return posts of a category, defaulting to the caller's health focus."""
    views = get_container(request).mood_board_service.list_posts(user_id, category)
    return [MoodBoardPostPayload.from_domain(view) for view in views]


@router.post("", response_model=CreatedResponse, status_code=201)
async def create_post(
    body: CreatePostRequest, request: Request, user_id: str = Depends(require_user)
) -> CreatedResponse:
    """Publish a post."""
    post_id = get_container(request).mood_board_service.create_post(
        user_id, body.emoji, body.content
    )
    return CreatedResponse(id=post_id)


@router.post("/{post_id}/like", response_model=SuccessResponse)
async def like_post(
    post_id: str, request: Request, user_id: str = Depends(require_user)
) -> SuccessResponse:
    get_container(request).mood_board_service.like_post(user_id, post_id)
    return SuccessResponse()


@router.delete("/{post_id}/like", response_model=SuccessResponse)
async def unlike_post(
    post_id: str, request: Request, user_id: str = Depends(require_user)
) -> SuccessResponse:
    get_container(request).mood_board_service.unlike_post(user_id, post_id)
    return SuccessResponse()


@router.delete("/{post_id}", response_model=SuccessResponse)
async def delete_post(
    post_id: str, request: Request, user_id: str = Depends(require_user)
) -> SuccessResponse:
    """Delete the caller's own post."""
    get_container(request).mood_board_service.delete_post(user_id, post_id)
    return SuccessResponse()
