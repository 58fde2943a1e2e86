#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
DailyGrid v1.0 - Habit Store
Единственный владелец состояния (habits, completions) и истории undo

Все мутации синхронные. Перед каждой принятой мутацией в UndoBuffer
кладётся снимок. Слушатели изменений вызываются только после гидратации
(первой загрузки из хранилища), чтобы значения по умолчанию не затёрли
сохранённые данные.

Версия: 1.0.0
Дата: 2025-07-02
"""

import logging
from typing import Callable, Hashable, Iterable, List, Optional

from core.history import DEFAULT_CAPACITY, UndoBuffer
from core.models import AppState, CompletionLog, Habit, HabitStatus, Snapshot, clean_name, new_habit_id
from utils.datetime_utils import is_date_key

logger = logging.getLogger(__name__)

ChangeListener = Callable[[AppState], None]


class HabitStore:
    """Хранилище привычек с undo и шлюзом гидратации"""

    def __init__(self, habits: Optional[Iterable[Habit]] = None,
                 completions: Optional[CompletionLog] = None,
                 undo_capacity: int = DEFAULT_CAPACITY):
        self._habits: List[Habit] = list(habits or [])
        self._completions: CompletionLog = completions.copy() if completions else CompletionLog()
        self._history = UndoBuffer(undo_capacity)
        self._listeners: List[ChangeListener] = []
        self._hydrated = False
        self._last_gesture: Optional[Hashable] = None

    # ===== ЧТЕНИЕ =====

    @property
    def habits(self) -> List[Habit]:
        return list(self._habits)

    @property
    def completions(self) -> CompletionLog:
        return self._completions.copy()

    @property
    def state(self) -> AppState:
        return AppState(habits=self.habits, completions=self.completions)

    @property
    def hydrated(self) -> bool:
        return self._hydrated

    @property
    def can_undo(self) -> bool:
        return len(self._history) > 0

    @property
    def history_size(self) -> int:
        return len(self._history)

    def get_habit(self, habit_id: str) -> Optional[Habit]:
        for habit in self._habits:
            if habit.id == habit_id:
                return habit
        return None

    def status(self, day: str, habit_id: str) -> HabitStatus:
        return self._completions.get(day, habit_id)

    # ===== СЛУШАТЕЛИ =====

    def add_listener(self, callback: ChangeListener) -> None:
        """Добавить callback, вызываемый после каждого изменения состояния"""
        self._listeners.append(callback)

    def _notify(self) -> None:
        if not self._hydrated:
            logger.debug("Состояние изменено до гидратации, сохранение пропущено")
            return

        state = self.state
        for callback in self._listeners:
            try:
                callback(state)
            except Exception as e:
                logger.warning(f"Change listener failed: {e}")

    def _snapshot(self) -> None:
        self._history.push(Snapshot.capture(self._habits, self._completions))

    # ===== МУТАЦИИ =====

    def add_habit(self, name: str) -> Optional[Habit]:
        """Добавить привычку в конец списка; пустое имя игнорируется"""
        name = clean_name(name)
        if name is None:
            return None

        self._snapshot()
        habit = Habit(id=new_habit_id(), name=name)
        self._habits.append(habit)
        logger.info(f"➕ Привычка добавлена: {habit.name} ({habit.id})")
        self._notify()
        return habit

    def rename_habit(self, habit_id: str, name: str) -> bool:
        name = clean_name(name)
        if name is None:
            return False

        for index, habit in enumerate(self._habits):
            if habit.id == habit_id:
                self._snapshot()
                self._habits[index] = Habit(id=habit.id, name=name)
                logger.info(f"✏️ Привычка {habit_id} переименована: {name}")
                self._notify()
                return True
        return False

    def delete_habit(self, habit_id: str) -> bool:
        """Удалить привычку. Записи журнала остаются (осиротевшие, инертные)"""
        if self.get_habit(habit_id) is None:
            return False

        self._snapshot()
        self._habits = [habit for habit in self._habits if habit.id != habit_id]
        logger.info(f"🗑 Привычка удалена: {habit_id}")
        self._notify()
        return True

    def cycle_status(self, day: str, habit_id: str,
                     gesture_id: Optional[Hashable] = None) -> Optional[HabitStatus]:
        """
        Сдвинуть статус ячейки на один шаг: UNSET -> DONE -> SKIPPED -> UNSET.

        Повторный вызов с тем же gesture_id (например, click и contextmenu от
        одного нажатия) игнорируется. Возвращает новый статус или None.
        """
        if gesture_id is not None and gesture_id == self._last_gesture:
            logger.debug(f"Повторный триггер жеста {gesture_id!r} проигнорирован")
            return None

        if not is_date_key(day) or self.get_habit(habit_id) is None:
            return None

        self._snapshot()
        status = self._completions.get(day, habit_id).next()
        self._completions.set(day, habit_id, status)
        if gesture_id is not None:
            self._last_gesture = gesture_id
        self._notify()
        return status

    def undo(self) -> bool:
        snapshot = self._history.pop()
        if snapshot is None:
            return False

        restored = snapshot.restore()
        self._habits = restored.habits
        self._completions = restored.completions
        logger.info(f"↩️ Отмена действия, в истории осталось {len(self._history)}")
        self._notify()
        return True

    def replace_all(self, habits: Iterable[Habit], completions: CompletionLog) -> bool:
        """
        Заменить состояние данными из хранилища (только первичная загрузка).

        Не попадает в историю undo; снимки, сделанные до загрузки, сбрасываются.
        После гидратации повторные вызовы игнорируются.
        """
        if self._hydrated:
            logger.warning("⚠️ Состояние уже загружено, повторная замена проигнорирована")
            return False

        self._habits = list(habits)
        self._completions = completions.copy()
        self._history.clear()
        self._last_gesture = None
        self._hydrated = True
        logger.info(f"📥 Загружено привычек: {len(self._habits)}, отметок: {len(self._completions)}")
        return True
