#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
DailyGrid v1.0 - Core Data Models
Привычки, журнал выполнения и снимки состояния для undo

Версия: 1.0.0
Дата: 2025-07-02
"""

import copy
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple
import logging

from utils.datetime_utils import is_date_key

logger = logging.getLogger(__name__)

# ===== ENUMS =====

class HabitStatus(Enum):
    """Статус привычки за конкретный день"""
    UNSET = "unset"
    DONE = "done"
    SKIPPED = "skipped"

    def next(self) -> "HabitStatus":
        """UNSET -> DONE -> SKIPPED -> UNSET"""
        return _STATUS_CYCLE[self]


_STATUS_CYCLE = {
    HabitStatus.UNSET: HabitStatus.DONE,
    HabitStatus.DONE: HabitStatus.SKIPPED,
    HabitStatus.SKIPPED: HabitStatus.UNSET,
}

# Представление статусов в JSON (совместимо с сохранёнными данными)
WIRE_DONE = True
WIRE_SKIPPED = "skipped"

# ===== VALIDATION HELPERS =====

class ValidationError(Exception):
    """Ошибка валидации данных"""
    pass


def validate_name(name: Any, field_name: str = "name") -> str:
    """Имя без пробелов по краям; пустое имя - ошибка. Длина не ограничена"""
    if not isinstance(name, str):
        raise ValidationError(f"{field_name} должен быть строкой")

    name = name.strip()
    if not name:
        raise ValidationError(f"{field_name} не может быть пустым")

    return name


def clean_name(name: Any) -> Optional[str]:
    """Обрезанное имя привычки или None, если оно пустое"""
    try:
        return validate_name(name)
    except ValidationError:
        return None


def new_habit_id() -> str:
    return uuid.uuid4().hex

# ===== CORE MODELS =====

@dataclass(frozen=True)
class Habit:
    """Привычка: неизменяемый id и отображаемое имя"""
    id: str
    name: str

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "name": self.name}

    @classmethod
    def from_dict(cls, data: Any) -> Optional["Habit"]:
        """Мягкий разбор: некорректные записи пропускаются (возвращается None)"""
        if not isinstance(data, dict):
            return None
        habit_id = data.get("id")
        name = data.get("name")
        if habit_id is None or not isinstance(name, str):
            return None
        return cls(id=str(habit_id), name=name)

    @classmethod
    def create(cls, name: str) -> "Habit":
        return cls(id=new_habit_id(), name=validate_name(name))


class CompletionLog:
    """
    Разреженный журнал: date_key -> {habit_id -> HabitStatus}

    UNSET никогда не хранится: запись UNSET удаляет ключ,
    а опустевший день удаляется целиком.
    """

    def __init__(self, entries: Optional[Dict[str, Dict[str, HabitStatus]]] = None):
        self._entries: Dict[str, Dict[str, HabitStatus]] = {}
        for day, statuses in (entries or {}).items():
            for habit_id, status in statuses.items():
                self.set(day, habit_id, status)

    def get(self, day: str, habit_id: str) -> HabitStatus:
        return self._entries.get(day, {}).get(habit_id, HabitStatus.UNSET)

    def set(self, day: str, habit_id: str, status: HabitStatus) -> None:
        if not isinstance(status, HabitStatus):
            raise ValidationError(f"Недопустимый статус: {status!r}")

        if status is HabitStatus.UNSET:
            statuses = self._entries.get(day)
            if statuses is None:
                return
            statuses.pop(habit_id, None)
            if not statuses:
                del self._entries[day]
            return

        self._entries.setdefault(day, {})[habit_id] = status

    def dates(self) -> List[str]:
        return sorted(self._entries)

    def copy(self) -> "CompletionLog":
        clone = CompletionLog()
        clone._entries = {day: dict(statuses) for day, statuses in self._entries.items()}
        return clone

    def __len__(self) -> int:
        return sum(len(statuses) for statuses in self._entries.values())

    def __eq__(self, other) -> bool:
        if not isinstance(other, CompletionLog):
            return NotImplemented
        return self._entries == other._entries

    def __repr__(self) -> str:
        return f"CompletionLog({self.to_dict()!r})"

    # ===== СЕРИАЛИЗАЦИЯ =====

    def to_dict(self) -> Dict[str, Dict[str, Any]]:
        result = {}
        for day, statuses in self._entries.items():
            result[day] = {
                habit_id: WIRE_DONE if status is HabitStatus.DONE else WIRE_SKIPPED
                for habit_id, status in statuses.items()
            }
        return result

    @classmethod
    def from_dict(cls, data: Any) -> "CompletionLog":
        """
        Разбор JSON-формата: true -> DONE, "skipped" -> SKIPPED.
        Всё остальное (false, null, неизвестные строки) трактуется как UNSET.
        """
        log = cls()
        if not isinstance(data, dict):
            return log

        for day, statuses in data.items():
            if not is_date_key(day) or not isinstance(statuses, dict):
                continue
            for habit_id, raw in statuses.items():
                if raw is True:
                    log.set(day, str(habit_id), HabitStatus.DONE)
                elif raw == WIRE_SKIPPED:
                    log.set(day, str(habit_id), HabitStatus.SKIPPED)
        return log


@dataclass
class AppState:
    """Полное состояние приложения: список привычек и журнал"""
    habits: List[Habit] = field(default_factory=list)
    completions: CompletionLog = field(default_factory=CompletionLog)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "habits": [habit.to_dict() for habit in self.habits],
            "completions": self.completions.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Any) -> "AppState":
        """Некорректный или пустой payload даёт пустое состояние"""
        if not isinstance(data, dict):
            if data is not None:
                logger.warning(f"Неожиданный формат состояния: {type(data).__name__}")
            return cls()

        habits = []
        raw_habits = data.get("habits")
        if isinstance(raw_habits, list):
            for item in raw_habits:
                habit = Habit.from_dict(item)
                if habit is None:
                    logger.warning(f"Пропущена некорректная привычка: {item!r}")
                    continue
                habits.append(habit)

        return cls(habits=habits, completions=CompletionLog.from_dict(data.get("completions")))

    @classmethod
    def empty_payload(cls) -> Dict[str, Any]:
        return {"habits": [], "completions": {}}


@dataclass(frozen=True)
class Snapshot:
    """Неизменяемая глубокая копия (habits, completions) для undo"""
    habits: Tuple[Habit, ...]
    completions: Dict[str, Dict[str, HabitStatus]]

    @classmethod
    def capture(cls, habits: List[Habit], completions: CompletionLog) -> "Snapshot":
        return cls(habits=tuple(habits), completions=copy.deepcopy(completions._entries))

    def restore(self) -> AppState:
        """Новая копия состояния; сам снимок не меняется"""
        log = CompletionLog()
        log._entries = copy.deepcopy(self.completions)
        return AppState(habits=list(self.habits), completions=log)
