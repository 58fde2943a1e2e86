#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
DailyGrid v1.0 - Tracker Service
Гидратация хранилища, фоновые сохранения и отчёты

Версия: 1.0.0
Дата: 2025-07-02
"""

import asyncio
import logging
from datetime import date
from typing import Any, Dict, Optional, Set

from core import statistics
from core.models import AppState
from core.store import HabitStore
from services.persistence import GatewayError, PersistenceGateway
from utils.datetime_utils import today_local

logger = logging.getLogger(__name__)


class TrackerService:
    """
    Связывает HabitStore с сервером состояния.

    - hydrate(): однократная загрузка; пока она не удалась, сохранения выключены
    - после каждой принятой мутации ставится fire-and-forget задача сохранения
    - drain(): дождаться незавершённых сохранений (перед выходом)
    """

    def __init__(self, store: HabitStore, gateway: PersistenceGateway, timezone: Optional[str] = None):
        self.store = store
        self.gateway = gateway
        self.timezone = timezone
        self._pending: Set[asyncio.Task] = set()
        self.saves_ok = 0
        self.saves_failed = 0
        store.add_listener(self._on_state_changed)

    async def hydrate(self) -> bool:
        if self.store.hydrated:
            return True

        try:
            state = await self.gateway.load()
        except GatewayError as e:
            logger.warning(f"⚠️ Загрузка не удалась, сохранения отключены: {e}")
            return False

        return self.store.replace_all(state.habits, state.completions)

    # ===== СОХРАНЕНИЕ =====

    def _on_state_changed(self, state: AppState) -> None:
        payload = state.to_dict()
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.warning("⚠️ Нет активного event loop, сохранение пропущено")
            return

        task = loop.create_task(self._save(payload))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def _save(self, payload: Dict[str, Any]) -> None:
        try:
            ok = await self.gateway.save_payload(payload)
        except Exception as e:
            logger.error(f"❌ Ошибка фонового сохранения: {e}")
            ok = False

        if ok:
            self.saves_ok += 1
            logger.debug("💾 Состояние сохранено")
        else:
            self.saves_failed += 1

    @property
    def pending_saves(self) -> int:
        return len(self._pending)

    async def drain(self) -> None:
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    # ===== СТАТИСТИКА =====

    def today(self) -> date:
        return today_local(self.timezone)

    def month_report(self, month: Optional[date] = None) -> Dict[str, Any]:
        month = month or self.today()
        habits, completions = self.store.habits, self.store.completions
        return {
            "month": month.replace(day=1),
            "overall": statistics.monthly_rollup(month, habits, completions),
            "quota": statistics.monthly_quota(month, habits, completions),
            "habits": statistics.habit_breakdown(month, habits, completions),
            "daily": statistics.daily_progress(month, habits, completions),
        }

    def year_report(self, year: Optional[int] = None):
        today = self.today()
        return statistics.yearly_rollup(year or today.year, self.store.habits,
                                        self.store.completions, today=today)
