from pydantic import BaseModel, Field
from typing import Any, Dict, List, Optional


# Служебные модели
class HealthCheck(BaseModel):
    status: str
    service: str
    version: str
    timestamp: float
    data: Dict[str, Any] = {}


class SaveResponse(BaseModel):
    ok: bool = True


# Модели статистики
class RollupModel(BaseModel):
    completed_count: int = 0
    eligible_count: int = 0
    percentage: int = Field(0, ge=0, le=100)


class HabitRollupModel(RollupModel):
    habit_id: str
    name: str


class DailyPointModel(RollupModel):
    day: int
    date_key: str  # YYYY-MM-DD


class QuotaModel(BaseModel):
    completed: int = 0
    incomplete: int = 0


class MonthStatsResponse(BaseModel):
    month: str  # YYYY-MM
    overall: RollupModel
    quota: QuotaModel
    habits: List[HabitRollupModel] = []
    daily: List[DailyPointModel] = []


class MonthRollupModel(RollupModel):
    month: int = Field(..., ge=0, le=11)
    name: str
    full_name: str
    is_future: bool = False


class YearStatsResponse(BaseModel):
    year: int
    months: List[MonthRollupModel]
    best_month: Optional[str] = None
