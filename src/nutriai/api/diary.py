"""Profile, diary and overview endpoints."""

from datetime import date

from fastapi import APIRouter, Depends, Request

from nutriai.api.auth import get_container, require_user
from nutriai.api.schemas import (
    CreatedResponse,
    DailyStatsPayload,
    EnergyTargetsResponse,
    GroupedDiaryResponse,
    MealEntryPayload,
    OverviewResponse,
    ProfilePayload,
    TrendPointPayload,
)
from nutriai.services.energy import compute_energy_targets

router = APIRouter(prefix="/api", tags=["diary"])


@router.get("/profile", response_model=ProfilePayload)
async def get_profile(
    request: Request, user_id: str = Depends(require_user)
) -> ProfilePayload:
    """Return the caller's profile."""
    profile = get_container(request).persistence.get_profile(user_id)
    return ProfilePayload.from_domain(profile)


@router.put("/profile", response_model=ProfilePayload)
async def save_profile(
    body: ProfilePayload, request: Request, user_id: str = Depends(require_user)
) -> ProfilePayload:
    """Save the profile with freshly computed energy targets."""
    saved = get_container(request).persistence.save_profile(user_id, body.to_domain())
    return ProfilePayload.from_domain(saved)


@router.post("/profile/targets", response_model=EnergyTargetsResponse)
async def preview_targets(
    body: ProfilePayload, user_id: str = Depends(require_user)
) -> EnergyTargetsResponse:
    """Compute energy targets without saving the profile."""
    targets = compute_energy_targets(body.to_domain())
    return EnergyTargetsResponse(
        tdee=targets.tdee, target_calories=targets.target_calories
    )


@router.get("/diary", response_model=list[MealEntryPayload])
async def list_diary(
    request: Request, user_id: str = Depends(require_user)
) -> list[MealEntryPayload]:
    """Return the caller's diary, most recent first."""
    entries = get_container(request).persistence.list_diary_entries(user_id)
    return [MealEntryPayload.from_domain(entry) for entry in entries]


@router.post("/diary", response_model=CreatedResponse, status_code=201)
async def create_diary_entry(
    body: MealEntryPayload, request: Request, user_id: str = Depends(require_user)
) -> CreatedResponse:
    """Log a meal."""
    entry_id = get_container(request).persistence.create_diary_entry(
        user_id, body.to_domain()
    )
    return CreatedResponse(id=entry_id)


@router.get("/diary/grouped", response_model=GroupedDiaryResponse)
async def grouped_diary(
    request: Request, user_id: str = Depends(require_user)
) -> GroupedDiaryResponse:
    """Return the diary grouped by date."""
    grouped = get_container(request).stats_service.get_grouped_diary(user_id)
    return GroupedDiaryResponse.from_domain(grouped)


@router.get("/overview", response_model=OverviewResponse)
async def overview(
    request: Request,
    today: date | None = None,
    user_id: str = Depends(require_user),
) -> OverviewResponse:
    """Return today's progress and the weekly trend."""
    result = get_container(request).stats_service.get_overview(user_id, today)
    return OverviewResponse(
        today=DailyStatsPayload.from_domain(result.today),
        weekly_trend=[TrendPointPayload.from_domain(p) for p in result.weekly_trend],
        average_calories=result.average_calories,
    )
