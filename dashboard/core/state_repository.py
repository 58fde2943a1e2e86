#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
DailyGrid - State Repository
Хранение всего состояния приложения одной записью (singleton row)

Payload хранится как непрозрачный JSON-blob: любой корректный JSON
возвращается без изменений. Последняя запись побеждает.

Версия: 1.0.0
Дата: 2025-07-02
"""

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional

from sqlalchemy import Column, DateTime, Integer, MetaData, Table, Text, create_engine, select
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.exc import SQLAlchemyError

from core.models import AppState

logger = logging.getLogger(__name__)

metadata = MetaData()

app_state_table = Table(
    'app_state', metadata,
    Column('id', Integer, primary_key=True),
    Column('state_json', Text, nullable=False),
    Column('updated_at', DateTime, nullable=False),
)

# ===== EXCEPTIONS =====

class StateRepositoryError(Exception):
    """Ошибка доступа к хранилищу состояния"""
    pass


class StateRepository:
    """Единственная запись состояния в таблице app_state"""

    def __init__(self, database_url: str, record_id: int = 1, echo: bool = False):
        self.record_id = record_id
        self._ensure_sqlite_dir(database_url)
        connect_args = {"check_same_thread": False} if database_url.startswith("sqlite") else {}
        self.engine: Engine = create_engine(database_url, echo=echo, future=True,
                                            connect_args=connect_args)

    @staticmethod
    def _ensure_sqlite_dir(database_url: str) -> None:
        url = make_url(database_url)
        if url.get_backend_name() == "sqlite" and url.database and url.database != ":memory:":
            Path(url.database).parent.mkdir(parents=True, exist_ok=True)

    def initialize(self) -> None:
        """Создание таблицы при первом запуске"""
        try:
            metadata.create_all(self.engine)
            logger.info("✅ Хранилище состояния инициализировано")
        except SQLAlchemyError as e:
            logger.error(f"❌ Ошибка инициализации хранилища: {e}")
            raise StateRepositoryError(f"Failed to initialize storage: {e}") from e

    def close(self) -> None:
        self.engine.dispose()

    # ===== ЧТЕНИЕ =====

    def _fetch_row(self):
        query = select(app_state_table.c.state_json, app_state_table.c.updated_at).where(
            app_state_table.c.id == self.record_id
        )
        try:
            with self.engine.connect() as conn:
                return conn.execute(query).first()
        except SQLAlchemyError as e:
            raise StateRepositoryError(f"Failed to read state: {e}") from e

    def load_raw(self) -> Optional[str]:
        row = self._fetch_row()
        return row.state_json if row is not None else None

    def load(self) -> Any:
        """Сохранённый payload или пустое состояние по умолчанию"""
        raw = self.load_raw()
        if raw is None:
            return AppState.empty_payload()

        try:
            return json.loads(raw)
        except json.JSONDecodeError as e:
            logger.warning(f"⚠️ Сохранённое состояние повреждено, возвращаем пустое: {e}")
            return AppState.empty_payload()

    def updated_at(self) -> Optional[datetime]:
        row = self._fetch_row()
        return row.updated_at if row is not None else None

    # ===== ЗАПИСЬ =====

    def save(self, payload: Any) -> datetime:
        """Полная перезапись записи; без версий и проверки конфликтов"""
        state_json = json.dumps(payload, ensure_ascii=False)
        now = datetime.now(timezone.utc).replace(tzinfo=None)
        values = {"state_json": state_json, "updated_at": now}

        try:
            with self.engine.begin() as conn:
                result = conn.execute(
                    app_state_table.update()
                    .where(app_state_table.c.id == self.record_id)
                    .values(**values)
                )
                if result.rowcount == 0:
                    conn.execute(app_state_table.insert().values(id=self.record_id, **values))
        except SQLAlchemyError as e:
            logger.error(f"❌ Ошибка сохранения состояния: {e}")
            raise StateRepositoryError(f"Failed to save state: {e}") from e

        logger.debug(f"💾 Состояние сохранено ({len(state_json)} байт)")
        return now

    def get_stats(self) -> Dict[str, Any]:
        raw = self.load_raw()
        updated = self.updated_at()
        return {
            "has_record": raw is not None,
            "size_bytes": len(raw.encode("utf-8")) if raw is not None else 0,
            "updated_at": updated.isoformat() if updated else None,
        }
