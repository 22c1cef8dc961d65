"""异常处理器 -- 领域异常到 HTTP 响应的映射

- ValidationError -> 400 INVALID_BODY
- AuthenticationError -> 401 UnauthorizedError
- InvalidReferenceError -> 401 INVALID_REFERENCE
- NotFoundError -> 404（空响应体）
- StorageError / aiosqlite.Error -> 500 SERVER_ERROR
"""

import aiosqlite
import structlog
from fastapi import FastAPI, Request
from mydo.core.exceptions import (
    AuthenticationError,
    InvalidReferenceError,
    NotFoundError,
    StorageError,
    ValidationError,
)
from starlette.responses import JSONResponse, Response

log = structlog.get_logger()

SERVER_ERROR_BODY = {"error": {"code": "SERVER_ERROR", "message": "Server crashed"}}


def error_body(code: str, message: str) -> dict:
    """统一错误响应体"""
    return {"error": {"code": code, "message": message}}


async def _handle_validation_error(request: Request, exc: ValidationError) -> JSONResponse:
    await log.ainfo("request_rejected", reason="invalid_body", detail=exc.message)
    return JSONResponse(status_code=400, content=error_body("INVALID_BODY", "Invalid body"))


async def _handle_authentication_error(
    request: Request, exc: AuthenticationError
) -> JSONResponse:
    return JSONResponse(
        status_code=401,
        content={"error": "UnauthorizedError", "message": exc.message},
    )


async def _handle_invalid_reference(
    request: Request, exc: InvalidReferenceError
) -> JSONResponse:
    await log.ainfo("request_rejected", reason="invalid_reference", detail=exc.message)
    return JSONResponse(
        status_code=401,
        content=error_body("INVALID_REFERENCE", exc.message),
    )


async def _handle_not_found(request: Request, exc: NotFoundError) -> Response:
    await log.ainfo("entity_not_found", entity=exc.entity, entity_id=exc.entity_id)
    return Response(status_code=404)


async def _handle_storage_error(request: Request, exc: Exception) -> JSONResponse:
    await log.aexception("storage_failure", error_type=type(exc).__name__, error=str(exc))
    return JSONResponse(status_code=500, content=SERVER_ERROR_BODY)


def register_exception_handlers(app: FastAPI) -> None:
    """在 app 上注册全部领域异常处理器"""
    app.add_exception_handler(ValidationError, _handle_validation_error)
    app.add_exception_handler(AuthenticationError, _handle_authentication_error)
    app.add_exception_handler(InvalidReferenceError, _handle_invalid_reference)
    app.add_exception_handler(NotFoundError, _handle_not_found)
    app.add_exception_handler(StorageError, _handle_storage_error)
    app.add_exception_handler(aiosqlite.Error, _handle_storage_error)
