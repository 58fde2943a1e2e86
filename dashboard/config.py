#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
DailyGrid - Dashboard Configuration
Конфигурация сервера состояния с настройками для разных сред

Версия: 1.0.0
Дата: 2025-07-02
"""

import logging
from pathlib import Path
from typing import Annotated, List, Optional

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


class DashboardSettings(BaseSettings):
    """Настройки сервера DailyGrid"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # ===== ОСНОВНЫЕ НАСТРОЙКИ =====

    APP_NAME: str = Field(default="DailyGrid", description="Название приложения")

    VERSION: str = Field(default="1.0.0", description="Версия сервера")

    ENVIRONMENT: str = Field(
        default="development",
        description="Среда выполнения (development/production/testing)"
    )

    DEBUG: bool = Field(default=True, description="Режим отладки")

    # ===== СЕТЕВЫЕ НАСТРОЙКИ =====

    DASHBOARD_HOST: str = Field(default="0.0.0.0", description="Хост для запуска")

    DASHBOARD_PORT: int = Field(default=8000, description="Порт для запуска")

    ALLOWED_ORIGINS: Annotated[List[str], NoDecode] = Field(default=["*"], description="Разрешенные источники для CORS")

    # ===== ХРАНИЛИЩЕ =====

    DATABASE_URL: str = Field(
        default="sqlite:///data/dailygrid.db",
        description="URL базы данных SQLAlchemy"
    )

    STATE_RECORD_ID: int = Field(default=1, description="Идентификатор единственной записи состояния")

    TIMEZONE: str = Field(default="UTC", description="Часовой пояс для календарных дат")

    # ===== ЛОГИРОВАНИЕ =====

    LOG_LEVEL: str = Field(default="INFO", description="Уровень логирования")

    LOG_FORMAT: str = Field(
        default="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        description="Формат логов"
    )

    LOG_DATE_FORMAT: str = Field(default="%Y-%m-%d %H:%M:%S", description="Формат даты в логах")

    LOGS_DIR: Optional[Path] = Field(default=Path("logs"), description="Директория логов (None - только консоль)")

    # ===== ВАЛИДАТОРЫ =====

    @field_validator('ENVIRONMENT')
    @classmethod
    def validate_environment(cls, v):
        allowed_envs = ['development', 'production', 'testing', 'staging']
        if v.lower() not in allowed_envs:
            raise ValueError(f"ENVIRONMENT must be one of {allowed_envs}")
        return v.lower()

    @field_validator('LOG_LEVEL')
    @classmethod
    def validate_log_level(cls, v):
        allowed_levels = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
        if v.upper() not in allowed_levels:
            raise ValueError(f"LOG_LEVEL must be one of {allowed_levels}")
        return v.upper()

    @field_validator('DASHBOARD_PORT')
    @classmethod
    def validate_port(cls, v):
        if not 1 <= v <= 65535:
            raise ValueError("DASHBOARD_PORT must be between 1 and 65535")
        return v

    @field_validator('ALLOWED_ORIGINS', mode='before')
    @classmethod
    def validate_origins(cls, v):
        if isinstance(v, str):
            # Если передана строка, разделяем по запятой
            return [origin.strip() for origin in v.split(',') if origin.strip()]
        return v

    @model_validator(mode='after')
    def validate_production_settings(self):
        # В продакшене отключаем DEBUG
        if self.ENVIRONMENT == 'production':
            self.DEBUG = False
        return self

    # ===== МЕТОДЫ КОНФИГУРАЦИИ =====

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT == "production"

    @property
    def is_testing(self) -> bool:
        return self.ENVIRONMENT == "testing"

    def setup_logging(self) -> None:
        """Настройка логирования"""
        handlers: List[logging.Handler] = [logging.StreamHandler()]
        if self.LOGS_DIR is not None:
            self.LOGS_DIR.mkdir(exist_ok=True, parents=True)
            handlers.append(logging.FileHandler(self.LOGS_DIR / "dashboard.log", encoding='utf-8'))

        logging.basicConfig(
            level=getattr(logging, self.LOG_LEVEL),
            format=self.LOG_FORMAT,
            datefmt=self.LOG_DATE_FORMAT,
            handlers=handlers
        )

        # Настройка логгеров внешних библиотек
        if not self.DEBUG:
            logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
            logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


settings = DashboardSettings()
