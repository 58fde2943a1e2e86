#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
DailyGrid Server - FastAPI Application
Сервер состояния трекера привычек: загрузка/сохранение и статистика

Версия: 1.0.0
Дата: 2025-07-02
"""

import logging
import time
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request, HTTPException
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
import uvicorn

from dashboard.api import state, stats
from dashboard.config import DashboardSettings, settings as default_settings
from dashboard.core.state_repository import StateRepositoryError
from dashboard.dependencies import init_state_repository
from shared.models import HealthCheck

logger = logging.getLogger(__name__)


def create_app(settings: Optional[DashboardSettings] = None) -> FastAPI:
    """Фабрика для создания приложения"""
    settings = settings or default_settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Управление жизненным циклом приложения"""
        logger.info("🚀 Запуск DailyGrid Server...")
        app.state.start_time = time.time()
        app.state.repository = await init_state_repository(settings)
        logger.info(f"🌐 Сервер доступен на: http://{settings.DASHBOARD_HOST}:{settings.DASHBOARD_PORT}")

        yield

        logger.info("🛑 Остановка сервера...")
        app.state.repository.close()
        app.state.repository = None

    app = FastAPI(
        title=settings.APP_NAME,
        description="Сервер состояния трекера привычек",
        version=settings.VERSION,
        docs_url="/api/docs" if settings.DEBUG else None,
        redoc_url=None,
        openapi_url="/api/openapi.json" if settings.DEBUG else None,
        lifespan=lifespan
    )
    app.state.settings = settings
    app.state.repository = None
    app.state.start_time = time.time()

    # ===== MIDDLEWARE =====

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
    )

    app.add_middleware(GZipMiddleware, minimum_size=1000)

    @app.middleware("http")
    async def logging_middleware(request: Request, call_next):
        """Логирование запросов и времени обработки"""
        start_time = time.time()
        response = await call_next(request)
        process_time = time.time() - start_time

        logger.info(
            f"{request.method} {request.url.path} "
            f"- {response.status_code} "
            f"- {process_time:.3f}s"
        )
        response.headers["X-Process-Time"] = f"{process_time:.4f}"
        return response

    # ===== МАРШРУТЫ =====

    app.include_router(state.router)
    app.include_router(stats.router)

    @app.get("/health", response_model=HealthCheck)
    def health_check(request: Request):
        """Health check для мониторинга"""
        try:
            repository = request.app.state.repository
            if repository is None:
                raise StateRepositoryError("Хранилище не инициализировано")

            return HealthCheck(
                status="healthy",
                service="dailygrid",
                version=settings.VERSION,
                timestamp=time.time(),
                data={
                    **repository.get_stats(),
                    "environment": settings.ENVIRONMENT,
                    "uptime_seconds": round(time.time() - request.app.state.start_time, 2),
                }
            )
        except StateRepositoryError as e:
            logger.error(f"Health check failed: {e}")
            return JSONResponse(
                status_code=503,
                content={
                    "status": "unhealthy",
                    "service": "dailygrid",
                    "error": str(e),
                    "timestamp": time.time()
                }
            )

    # ===== ОБРАБОТЧИКИ ОШИБОК =====

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"detail": exc.detail, "status_code": exc.status_code}
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=422,
            content={"detail": "Некорректные параметры запроса", "errors": exc.errors(), "status_code": 422}
        )

    @app.exception_handler(StateRepositoryError)
    async def repository_error_handler(request: Request, exc: StateRepositoryError):
        logger.error(f"Internal storage error: {exc}")
        return JSONResponse(
            status_code=500,
            content={"detail": "Internal server error", "debug": settings.DEBUG, "status_code": 500}
        )

    return app


app = create_app()

# ===== ЗАПУСК ПРИЛОЖЕНИЯ =====

def run_dashboard(
    host: str = None,
    port: int = None,
    dev: bool = None,
    reload: bool = None
):
    """Запуск сервера"""
    settings = default_settings
    settings.setup_logging()

    host = host or settings.DASHBOARD_HOST
    port = port or settings.DASHBOARD_PORT
    dev = dev if dev is not None else settings.DEBUG
    reload = reload if reload is not None else False

    logger.info(f"🌐 Запуск DailyGrid на http://{host}:{port}")
    logger.info(f"🗄 База данных: {settings.DATABASE_URL}")
    logger.info(f"🔧 Режим отладки: {dev}")

    try:
        uvicorn.run(
            "dashboard.app:app",
            host=host,
            port=port,
            reload=reload,
            log_level="debug" if dev else "info",
            access_log=dev,
            server_header=False,
        )
    except KeyboardInterrupt:
        logger.info("👋 Сервер остановлен")


if __name__ == "__main__":
    import argparse

    parser = argparse.ArgumentParser(description='Запуск DailyGrid Server')
    parser.add_argument('--host', default=default_settings.DASHBOARD_HOST, help='Host для запуска')
    parser.add_argument('--port', type=int, default=default_settings.DASHBOARD_PORT, help='Port для запуска')
    parser.add_argument('--dev', action='store_true', help='Режим разработки')
    parser.add_argument('--reload', action='store_true', help='Автоперезагрузка')

    args = parser.parse_args()

    run_dashboard(host=args.host, port=args.port, dev=args.dev, reload=args.reload)
