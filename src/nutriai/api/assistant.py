"""AI assistant and music endpoints."""

from fastapi import APIRouter, Depends, Request

from nutriai.api.auth import get_container, require_user
from nutriai.api.schemas import (
    AnalyzeRequest,
    ChatRequest,
    ChatResponse,
    EstimateRequest,
    IngredientPayload,
    MusicTrackPayload,
)
from nutriai.domain.vision import NutritionEstimate

router = APIRouter(
    prefix="/api", tags=["assistant"], dependencies=[Depends(require_user)]
)


@router.post("/ai/analyze", response_model=list[IngredientPayload])
async def analyze(body: AnalyzeRequest, request: Request) -> list[IngredientPayload]:
    """Detect foods and macros in a photo."""
    items = await get_container(request).assistant_service.analyze_food_image(
        body.image
    )
    return [IngredientPayload.from_domain(item) for item in items]


@router.post("/ai/estimate", response_model=NutritionEstimate)
async def estimate(body: EstimateRequest, request: Request) -> NutritionEstimate:
    """Estimate macros for a named food and portion."""
    return await get_container(request).assistant_service.estimate_nutrition(
        body.name, body.portion
    )


@router.post("/ai/chat", response_model=ChatResponse)
async def chat(body: ChatRequest, request: Request) -> ChatResponse:
    """Answer a nutrition question."""
    reply = await get_container(request).assistant_service.chat(
        body.message, body.context
    )
    return ChatResponse(reply=reply)


@router.get("/music", response_model=list[MusicTrackPayload])
async def music(request: Request, mood: str = "happy") -> list[MusicTrackPayload]:
    """Recommend tracks for a mood."""
    tracks = await get_container(request).music_service.recommend(mood)
    return [MusicTrackPayload.from_domain(track) for track in tracks]
