import json
import logging
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Request, Response
from fastapi.responses import JSONResponse
from fastapi.concurrency import run_in_threadpool

from shared.models import SaveResponse

from ..core.state_repository import StateRepository, StateRepositoryError
from ..dependencies import get_state_repository

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/state", tags=["state"])

NO_STORE_HEADERS = {"cache-control": "no-store"}


@router.get("")
def get_state(repository: StateRepository = Depends(get_state_repository)):
    """
    Получить сохранённое состояние {habits, completions}.
    Нет записи или она повреждена - пустое состояние по умолчанию.
    """
    try:
        payload = repository.load()
    except StateRepositoryError as e:
        logger.error(f"Ошибка чтения состояния: {e}")
        raise HTTPException(status_code=500, detail="Ошибка чтения состояния")

    return JSONResponse(content=payload, headers=NO_STORE_HEADERS)


@router.post("", response_model=SaveResponse)
async def save_state(
    request: Request,
    response: Response,
    repository: StateRepository = Depends(get_state_repository)
):
    """
    Перезаписать состояние целиком. Последняя запись побеждает.
    Тело читается как сырой JSON; запись в БД выполняется в threadpool.
    """
    body = await request.body()
    try:
        payload: Any = json.loads(body)
    except (json.JSONDecodeError, UnicodeDecodeError):
        raise HTTPException(status_code=400, detail="Тело запроса должно быть JSON")

    try:
        await run_in_threadpool(repository.save, payload)
    except StateRepositoryError as e:
        logger.error(f"Ошибка сохранения состояния: {e}")
        raise HTTPException(status_code=500, detail="Ошибка сохранения состояния")

    response.headers.update(NO_STORE_HEADERS)
    return SaveResponse(ok=True)
