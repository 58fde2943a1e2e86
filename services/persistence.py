#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
DailyGrid v1.0 - Persistence Gateway
HTTP-клиент сервера состояния: GET/POST /api/state

Версия: 1.0.0
Дата: 2025-07-02
"""

import asyncio
import json
import logging
from typing import Any, Optional

import aiohttp

from core.models import AppState

logger = logging.getLogger(__name__)

STATE_PATH = "/api/state"


class GatewayError(Exception):
    """Сервер состояния недоступен или ответил ошибкой"""
    pass


class PersistenceGateway:
    """
    HTTP-клиент контракта /api/state.

    load() - GET, некорректный payload превращается в пустое состояние;
    save() - POST всего состояния, ошибки только логируются.
    """

    def __init__(self, base_url: str, timeout: float = 10.0,
                 session: Optional[aiohttp.ClientSession] = None):
        self.url = base_url.rstrip("/") + STATE_PATH
        self.timeout = aiohttp.ClientTimeout(total=timeout)
        self._session = session
        self._owns_session = session is None

    async def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(timeout=self.timeout)
            self._owns_session = True
        return self._session

    async def close(self) -> None:
        if self._owns_session and self._session is not None and not self._session.closed:
            await self._session.close()

    async def __aenter__(self) -> "PersistenceGateway":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def fetch_payload(self) -> Any:
        """Сырой JSON с сервера; None, если тело не разбирается"""
        session = await self._get_session()
        try:
            async with session.get(self.url, headers={"cache-control": "no-store"}, timeout=self.timeout) as response:
                if response.status != 200:
                    raise GatewayError(f"GET {self.url} вернул {response.status}")
                text = await response.text()
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise GatewayError(f"Не удалось загрузить состояние: {e}") from e

        try:
            return json.loads(text)
        except json.JSONDecodeError:
            logger.warning("⚠️ Сервер вернул некорректный JSON, используем пустое состояние")
            return None

    async def load(self) -> AppState:
        return AppState.from_dict(await self.fetch_payload())

    async def save_payload(self, payload: Any) -> bool:
        session = await self._get_session()
        try:
            async with session.post(self.url, json=payload, timeout=self.timeout) as response:
                if response.status != 200:
                    logger.warning(f"⚠️ Сохранение отклонено сервером: HTTP {response.status}")
                    return False
                return True
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.warning(f"⚠️ Не удалось сохранить состояние: {e}")
            return False

    async def save(self, state: AppState) -> bool:
        return await self.save_payload(state.to_dict())
