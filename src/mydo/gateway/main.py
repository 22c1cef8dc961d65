"""FastAPI 应用主文件

app 创建 + lifespan 管理：DB 初始化/关闭 + 中间件/异常处理器/路由注册。
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from mydo.core.config import get_db_path
from mydo.core.store import create_store_group
from starlette.middleware.cors import CORSMiddleware

from .config import GatewayConfig, load_gateway_config
from .errors import register_exception_handlers
from .middleware.logging_config import setup_logfire, setup_logging
from .middleware.logging_mw import LoggingMiddleware
from .routes import health, tasklists, tasks

log = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """应用生命周期管理：启动时初始化 DB，关闭时清理连接"""
    db_path = get_db_path()
    store_group = await create_store_group(db_path)
    app.state.store_group = store_group
    await log.ainfo(
        "store_group_initialized",
        db_path=db_path,
        auth_mode=app.state.gateway_config.auth_mode,
    )

    yield

    if getattr(app.state, "store_group", None):
        await app.state.store_group.conn.close()


def create_app(config: GatewayConfig | None = None) -> FastAPI:
    """创建 FastAPI 应用实例

    Args:
        config: Gateway 配置，默认从环境变量加载
    """
    setup_logging()

    config = config or load_gateway_config()

    app = FastAPI(
        title="mydo Gateway",
        version="0.1.0",
        description="mydo 任务与清单管理 API",
        lifespan=lifespan,
    )
    app.state.gateway_config = config

    app.add_middleware(LoggingMiddleware)
    if config.cors_origins:
        # 会话 cookie 跨域携带
        app.add_middleware(
            CORSMiddleware,
            allow_origins=config.cors_origins,
            allow_credentials=True,
            allow_methods=["GET", "POST", "PUT", "DELETE"],
            allow_headers=["Content-Type", "Authorization", config.address_header],
        )

    setup_logfire(app)
    register_exception_handlers(app)

    app.include_router(tasks.router, tags=["task"])
    app.include_router(tasklists.router, tags=["tasklist"])
    app.include_router(health.router, tags=["health"])

    return app


# 默认 app 实例（uvicorn 入口）
app = create_app()
