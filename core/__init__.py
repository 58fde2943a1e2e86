#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
DailyGrid v1.0 - Core Package
Модели, хранилище привычек, история undo и статистика
"""

from .models import (
    HabitStatus,
    Habit,
    CompletionLog,
    AppState,
    Snapshot,
    ValidationError
)

from .history import UndoBuffer

from .store import HabitStore

__all__ = [
    # Models
    'HabitStatus',
    'Habit',
    'CompletionLog',
    'AppState',
    'Snapshot',
    'ValidationError',

    # State
    'UndoBuffer',
    'HabitStore'
]
