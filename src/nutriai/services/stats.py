"""Daily and weekly calorie statistics for diary entries."""

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import UTC, date, datetime, timedelta
from typing import TYPE_CHECKING

from nutriai.domain.diary import DailyStats, DiaryGroups, MealEntry, TrendPoint
from nutriai.domain.profile import UserProfile
from nutriai.services.energy import round_half_up

if TYPE_CHECKING:
    from nutriai.services.persistence import PersistenceFacade

TREND_DAYS = 7


@dataclass(frozen=True)
class Overview:
    """Today's stats with the rolling weekly trend."""

    today: DailyStats
    weekly_trend: list[TrendPoint]
    average_calories: int


@dataclass
class StatsService:
    """Service building summaries from the user's diary and profile."""

    persistence: "PersistenceFacade"

    def get_overview(self, user_id: str, today: date | None = None) -> Overview:
        """Return today's stats and the 7-day trend ending on today."""
        resolved_today = today or datetime.now(tz=UTC).date()
        entries = self.persistence.list_diary_entries(user_id)
        profile = self.persistence.get_profile(user_id)
        trend = weekly_trend(entries, resolved_today)
        return Overview(
            today=today_stats(entries, profile, resolved_today),
            weekly_trend=trend,
            average_calories=average_daily_calories(trend),
        )

    def get_grouped_diary(self, user_id: str) -> DiaryGroups:
        """Return the user's diary grouped by date."""
        return group_by_date(self.persistence.list_diary_entries(user_id))


def daily_total(entries: Iterable[MealEntry], day: date | str) -> int:
    """Sum calories of entries logged on the given date."""
    day_key = day.isoformat() if isinstance(day, date) else day
    return sum(entry.calories for entry in entries if entry.date == day_key)


def today_stats(
    entries: Iterable[MealEntry], profile: UserProfile, today: date
) -> DailyStats:
    """Return consumed/remaining calories and progress against the target."""
    consumed = daily_total(entries, today)
    target = profile.target_calories
    if target > 0:
        percentage = min(100, round_half_up(consumed / target * 100))
    else:
        percentage = 0
    return DailyStats(
        consumed=consumed,
        target=target,
        remaining=max(0, target - consumed),
        percentage=percentage,
    )


def weekly_trend(entries: Iterable[MealEntry], today: date) -> list[TrendPoint]:
    """Return one point per day from six days ago through today."""
    entries = list(entries)
    trend = []
    for offset in range(TREND_DAYS - 1, -1, -1):
        day = today - timedelta(days=offset)
        trend.append(
            TrendPoint(
                day=day,
                label=f"{day.month}/{day.day}",
                calories=daily_total(entries, day),
            )
        )
    return trend


def average_daily_calories(trend: list[TrendPoint]) -> int:
    """Return the rounded mean calories over the trend days."""
    if not trend:
        return 0
    return round_half_up(sum(point.calories for point in trend) / len(trend))


def group_by_date(entries: Iterable[MealEntry]) -> DiaryGroups:
    """Group entries by date, keeping input order inside each day."""
    grouped: dict[str, list[MealEntry]] = {}
    for entry in entries:
        grouped.setdefault(entry.date, []).append(entry)
    return DiaryGroups(
        dates=sorted(grouped, reverse=True),
        entries=grouped,
        totals={day: sum(e.calories for e in items) for day, items in grouped.items()},
    )
