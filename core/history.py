#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
DailyGrid v1.0 - Undo History
Ограниченный стек снимков состояния (по умолчанию 50 шагов)

Версия: 1.0.0
Дата: 2025-07-02
"""

from collections import deque
from typing import Deque, Optional

from core.models import Snapshot

DEFAULT_CAPACITY = 50


class UndoBuffer:
    """LIFO стек снимков с ограниченной ёмкостью (старые вытесняются)"""

    def __init__(self, capacity: int = DEFAULT_CAPACITY):
        if capacity < 1:
            raise ValueError("capacity должен быть положительным")
        self._items: Deque[Snapshot] = deque(maxlen=capacity)

    @property
    def capacity(self) -> int:
        return self._items.maxlen

    def push(self, snapshot: Snapshot) -> None:
        self._items.append(snapshot)

    def pop(self) -> Optional[Snapshot]:
        if not self._items:
            return None
        return self._items.pop()

    def clear(self) -> None:
        self._items.clear()

    def __len__(self) -> int:
        return len(self._items)
