#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
DailyGrid v1.0 - Client Configuration
Конфигурация клиента (CLI / синхронизация) из переменных окружения

Версия: 1.0.0
Дата: 2025-07-02
"""

import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Dict

import pytz

from core.history import DEFAULT_CAPACITY


class LogLevel(Enum):
    """Уровни логирования"""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class ConfigError(ValueError):
    """Ошибка конфигурации"""
    pass


@dataclass
class ApiConfig:
    """Подключение к серверу состояния"""
    base_url: str = "http://localhost:8000"
    request_timeout: float = 10.0


@dataclass
class TrackerConfig:
    """Поведение трекера"""
    undo_capacity: int = DEFAULT_CAPACITY
    timezone: str = "UTC"


@dataclass
class LoggingConfig:
    log_dir: Path = Path("logs")
    level: LogLevel = LogLevel.INFO
    log_to_file: bool = True

    @property
    def log_file(self) -> Path:
        return self.log_dir / "dailygrid.log"


class ClientConfig:
    """Главный класс конфигурации клиента"""

    def __init__(self, env: Dict[str, str] = None):
        self._env = os.environ if env is None else env
        self._load_config()
        self._validate_config()

    def _get(self, key: str, default: str) -> str:
        value = self._env.get(key)
        return value if value not in (None, "") else default

    def _load_config(self):
        """Загрузка конфигурации из переменных окружения"""
        try:
            self.api = ApiConfig(
                base_url=self._get('DAILYGRID_API_URL', 'http://localhost:8000').rstrip('/'),
                request_timeout=float(self._get('DAILYGRID_TIMEOUT', '10')),
            )
            self.tracker = TrackerConfig(
                undo_capacity=int(self._get('UNDO_CAPACITY', str(DEFAULT_CAPACITY))),
                timezone=self._get('TIMEZONE', 'UTC'),
            )
            self.logging = LoggingConfig(
                log_dir=Path(self._get('LOG_DIR', 'logs')),
                level=LogLevel(self._get('LOG_LEVEL', 'INFO').upper()),
                log_to_file=self._get('LOG_TO_FILE', 'true').lower() == 'true',
            )
        except ValueError as e:
            raise ConfigError(f"Некорректное значение в окружении: {e}") from e

    def _validate_config(self):
        """Валидация конфигурации"""
        errors = []

        if not self.api.base_url.startswith(('http://', 'https://')):
            errors.append(f"DAILYGRID_API_URL должен начинаться с http:// или https://: {self.api.base_url}")

        if self.api.request_timeout <= 0:
            errors.append("DAILYGRID_TIMEOUT должен быть положительным")

        if self.tracker.undo_capacity < 1:
            errors.append("UNDO_CAPACITY должен быть не меньше 1")

        if self.tracker.timezone not in pytz.all_timezones_set:
            errors.append(f"Неизвестный часовой пояс: {self.tracker.timezone}")

        if errors:
            raise ConfigError("Ошибки конфигурации:\n" + "\n".join(f"• {error}" for error in errors))

    def to_dict(self) -> Dict[str, Any]:
        return {
            'api_url': self.api.base_url,
            'request_timeout': self.api.request_timeout,
            'undo_capacity': self.tracker.undo_capacity,
            'timezone': self.tracker.timezone,
            'log_level': self.logging.level.value,
        }


def load_config() -> ClientConfig:
    return ClientConfig()
