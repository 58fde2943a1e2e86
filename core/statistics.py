#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
DailyGrid v1.0 - Statistics
Чистые функции агрегации: по привычке, по дню, по месяцу, по году

Правило допустимости: день учитывается для привычки, если её статус
не SKIPPED. DONE увеличивает числитель, UNSET только знаменатель.
Процент округляется до целого (половина вверх), 0 при пустом знаменателе.

Версия: 1.0.0
Дата: 2025-07-02
"""

import calendar
from dataclasses import asdict, dataclass
from datetime import date
from typing import Any, Dict, Iterable, List, Optional, Sequence

from core.models import CompletionLog, Habit, HabitStatus
from utils.datetime_utils import date_key, days_between, month_end, month_start, today_local

MONTH_NAMES = [calendar.month_name[i] for i in range(1, 13)]
MONTH_ABBRS = [calendar.month_abbr[i] for i in range(1, 13)]


@dataclass(frozen=True)
class RollupStats:
    completed_count: int = 0
    eligible_count: int = 0

    @property
    def percentage(self) -> int:
        return percent(self.completed_count, self.eligible_count)

    def __add__(self, other: "RollupStats") -> "RollupStats":
        return RollupStats(
            self.completed_count + other.completed_count,
            self.eligible_count + other.eligible_count,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "completed_count": self.completed_count,
            "eligible_count": self.eligible_count,
            "percentage": self.percentage,
        }


@dataclass(frozen=True)
class MonthRollup:
    month: int  # 0-11
    name: str
    full_name: str
    completed_count: int
    eligible_count: int
    percentage: int
    is_future: bool

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class DailyPoint:
    day: int
    date_key: str
    completed_count: int
    eligible_count: int
    percentage: int

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def percent(numerator: int, denominator: int) -> int:
    """round(100 * n / d) с округлением половины вверх, без float"""
    if denominator <= 0:
        return 0
    return (200 * numerator + denominator) // (2 * denominator)


def _tally(statuses: Iterable[HabitStatus]) -> RollupStats:
    completed = 0
    eligible = 0
    for status in statuses:
        if status is HabitStatus.SKIPPED:
            continue
        eligible += 1
        if status is HabitStatus.DONE:
            completed += 1
    return RollupStats(completed, eligible)


def month_days(month: date) -> List[date]:
    """Все дни календарного месяца, в котором лежит month"""
    return days_between(month_start(month), month_end(month))

# ===== АГРЕГАЦИЯ =====

def habit_percentage(habit: Habit, dates: Iterable[date], completions: CompletionLog) -> RollupStats:
    """Статистика одной привычки по набору дат"""
    return _tally(completions.get(date_key(day), habit.id) for day in dates)


def daily_rollup(day: date, habits: Sequence[Habit], completions: CompletionLog) -> RollupStats:
    key = date_key(day)
    return _tally(completions.get(key, habit.id) for habit in habits)


def range_rollup(dates: Iterable[date], habits: Sequence[Habit], completions: CompletionLog) -> RollupStats:
    """Сумма по сетке дни x привычки (не среднее дневных процентов)"""
    total = RollupStats()
    for day in dates:
        total += daily_rollup(day, habits, completions)
    return total


def monthly_rollup(month: date, habits: Sequence[Habit], completions: CompletionLog) -> RollupStats:
    return range_rollup(month_days(month), habits, completions)


def yearly_rollup(year: int, habits: Sequence[Habit], completions: CompletionLog,
                  today: Optional[date] = None) -> List[MonthRollup]:
    """12 значений по месяцам года; is_future, если 1-е число месяца позже today"""
    today = today or today_local()
    months = []
    for index in range(12):
        first_day = date(year, index + 1, 1)
        stats = monthly_rollup(first_day, habits, completions)
        months.append(MonthRollup(
            month=index,
            name=MONTH_ABBRS[index],
            full_name=MONTH_NAMES[index],
            completed_count=stats.completed_count,
            eligible_count=stats.eligible_count,
            percentage=stats.percentage,
            is_future=first_day > today,
        ))
    return months

# ===== ПРЕДСТАВЛЕНИЯ ДЛЯ ДАШБОРДА =====

def habit_breakdown(month: date, habits: Sequence[Habit], completions: CompletionLog) -> List[Dict[str, Any]]:
    """Статистика каждой привычки за месяц в порядке отображения"""
    days = month_days(month)
    result = []
    for habit in habits:
        stats = habit_percentage(habit, days, completions)
        result.append({"habit_id": habit.id, "name": habit.name, **stats.to_dict()})
    return result


def daily_progress(month: date, habits: Sequence[Habit], completions: CompletionLog) -> List[DailyPoint]:
    points = []
    for day in month_days(month):
        stats = daily_rollup(day, habits, completions)
        points.append(DailyPoint(
            day=day.day,
            date_key=date_key(day),
            completed_count=stats.completed_count,
            eligible_count=stats.eligible_count,
            percentage=stats.percentage,
        ))
    return points


def monthly_quota(month: date, habits: Sequence[Habit], completions: CompletionLog) -> Dict[str, int]:
    """Доли выполнено/не выполнено для круговой диаграммы"""
    stats = monthly_rollup(month, habits, completions)
    completed = stats.percentage
    incomplete = 0 if stats.eligible_count == 0 else 100 - completed
    return {"completed": completed, "incomplete": incomplete}
