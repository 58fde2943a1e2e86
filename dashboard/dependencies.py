#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
DailyGrid - Dashboard Dependencies
Провайдеры зависимостей для FastAPI приложения

Версия: 1.0.0
Дата: 2025-07-02
"""

import logging

from fastapi import HTTPException, Request, status

from dashboard.config import DashboardSettings
from dashboard.core.state_repository import StateRepository

logger = logging.getLogger(__name__)


async def init_state_repository(settings: DashboardSettings) -> StateRepository:
    """Инициализация хранилища состояния"""
    logger.info("🔄 Инициализация StateRepository...")
    repository = StateRepository(
        settings.DATABASE_URL,
        record_id=settings.STATE_RECORD_ID,
        echo=settings.DEBUG and settings.LOG_LEVEL == "DEBUG",
    )
    repository.initialize()
    return repository


def get_settings(request: Request) -> DashboardSettings:
    return request.app.state.settings


def get_state_repository(request: Request) -> StateRepository:
    repository = getattr(request.app.state, "repository", None)
    if repository is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Хранилище состояния не инициализировано"
        )
    return repository
