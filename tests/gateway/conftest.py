"""gateway 测试配置 -- FastAPI app + httpx AsyncClient fixture

默认使用 header 身份模式，请求通过 X-Wallet-Address 指定 owner。
"""

import os
from collections.abc import AsyncGenerator
from pathlib import Path

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from mydo.core.store import create_store_group
from mydo.gateway.config import GatewayConfig

OWNER = "0x1111111111111111111111111111111111111111"
OTHER = "0x2222222222222222222222222222222222222222"


@pytest.fixture
def gateway_config() -> GatewayConfig:
    """测试默认配置，单个测试可覆盖此 fixture"""
    return GatewayConfig(auth_mode="header")


@pytest_asyncio.fixture
async def test_app(tmp_path: Path, gateway_config: GatewayConfig):
    """测试 app（手动初始化 StoreGroup，绕过 lifespan）"""
    os.environ["MYDO_DB_PATH"] = str(tmp_path / "test.db")
    os.environ["LOGFIRE_SEND_TO_LOGFIRE"] = "false"

    from mydo.gateway.main import create_app

    app = create_app(gateway_config)

    store_group = await create_store_group(str(tmp_path / "test.db"), default_list_title="Tasks")
    app.state.store_group = store_group

    yield app

    await store_group.conn.close()
    os.environ.pop("MYDO_DB_PATH", None)
    os.environ.pop("LOGFIRE_SEND_TO_LOGFIRE", None)


@pytest_asyncio.fixture
async def client(test_app) -> AsyncGenerator[AsyncClient, None]:
    """已带 OWNER 身份头的客户端"""
    async with AsyncClient(
        transport=ASGITransport(app=test_app),
        base_url="http://test",
        headers={"X-Wallet-Address": OWNER},
    ) as ac:
        yield ac


@pytest_asyncio.fixture
async def anon_client(test_app) -> AsyncGenerator[AsyncClient, None]:
    """不带身份的客户端"""
    async with AsyncClient(
        transport=ASGITransport(app=test_app),
        base_url="http://test",
    ) as ac:
        yield ac
