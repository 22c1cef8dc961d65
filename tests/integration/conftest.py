"""集成测试共享 fixture

集成测试走完整 HTTP 链路，同时直接持有 StoreGroup 以检查存储状态。
"""

import os
from collections.abc import AsyncGenerator
from pathlib import Path

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from mydo.core.store import create_store_group
from mydo.gateway.config import GatewayConfig


@pytest_asyncio.fixture
async def integration_app(tmp_path: Path):
    """集成测试用 FastAPI app（postman 身份模式）"""
    os.environ["MYDO_DB_PATH"] = str(tmp_path / "test.db")
    os.environ["LOGFIRE_SEND_TO_LOGFIRE"] = "false"

    from mydo.gateway.main import create_app

    app = create_app(GatewayConfig(auth_mode="postman"))

    store_group = await create_store_group(str(tmp_path / "test.db"), default_list_title="Tasks")
    app.state.store_group = store_group

    yield app

    await store_group.conn.close()
    os.environ.pop("MYDO_DB_PATH", None)
    os.environ.pop("LOGFIRE_SEND_TO_LOGFIRE", None)


@pytest_asyncio.fixture
async def client(integration_app) -> AsyncGenerator[AsyncClient, None]:
    async with AsyncClient(
        transport=ASGITransport(app=integration_app),
        base_url="http://test",
    ) as ac:
        yield ac


@pytest_asyncio.fixture
async def stores(integration_app):
    """直接访问存储层"""
    return integration_app.state.store_group
