from fastapi import APIRouter, HTTPException, Depends, Query
from typing import Optional

from core.models import AppState
from core import statistics
from shared.models import MonthStatsResponse, YearStatsResponse
from utils.datetime_utils import MONTH_KEY_FORMAT, parse_month_key, today_local

from ..config import DashboardSettings
from ..core.state_repository import StateRepository, StateRepositoryError
from ..dependencies import get_settings, get_state_repository

router = APIRouter(prefix="/api/stats", tags=["statistics"])


def _load_state(repository: StateRepository) -> AppState:
    try:
        return AppState.from_dict(repository.load())
    except StateRepositoryError as e:
        raise HTTPException(status_code=500, detail=f"Ошибка чтения состояния: {str(e)}")


@router.get("/month", response_model=MonthStatsResponse)
def get_month_stats(
    month: Optional[str] = Query(None, pattern=r"^\d{4}-\d{2}$"),
    repository: StateRepository = Depends(get_state_repository),
    settings: DashboardSettings = Depends(get_settings)
):
    """
    Статистика за месяц: общий процент, по привычкам, по дням
    """
    try:
        target = parse_month_key(month) if month else today_local(settings.TIMEZONE).replace(day=1)
    except ValueError:
        raise HTTPException(status_code=400, detail=f"Неверный месяц: {month}")

    state = _load_state(repository)
    habits, completions = state.habits, state.completions

    return {
        "month": target.strftime(MONTH_KEY_FORMAT),
        "overall": statistics.monthly_rollup(target, habits, completions).to_dict(),
        "quota": statistics.monthly_quota(target, habits, completions),
        "habits": statistics.habit_breakdown(target, habits, completions),
        "daily": [point.to_dict() for point in statistics.daily_progress(target, habits, completions)],
    }


@router.get("/year", response_model=YearStatsResponse)
def get_year_stats(
    year: Optional[int] = Query(None, ge=1, le=9999),
    repository: StateRepository = Depends(get_state_repository),
    settings: DashboardSettings = Depends(get_settings)
):
    """
    Статистика по 12 месяцам года
    """
    today = today_local(settings.TIMEZONE)
    target_year = year or today.year

    state = _load_state(repository)
    months = statistics.yearly_rollup(target_year, state.habits, state.completions, today=today)

    # Лучший месяц среди прошедших, где было что учитывать
    candidates = [m for m in months if not m.is_future and m.eligible_count > 0]
    best = max(candidates, key=lambda m: m.percentage) if candidates else None

    return {
        "year": target_year,
        "months": [m.to_dict() for m in months],
        "best_month": best.full_name if best else None,
    }
