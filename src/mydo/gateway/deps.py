"""依赖注入模块 -- 通过 FastAPI Depends 注入 Store、配置与请求体

Store 实例通过 app.state 管理，在 lifespan 中初始化/清理。
"""

import json
from typing import Any

from fastapi import Request
from mydo.core.config import INVALID_BODY_MESSAGE
from mydo.core.exceptions import ValidationError
from mydo.core.store import StoreGroup

from .config import GatewayConfig


def get_store_group(request: Request) -> StoreGroup:
    """从 app.state 获取 StoreGroup 实例"""
    return request.app.state.store_group


def get_gateway_config(request: Request) -> GatewayConfig:
    """从 app.state 获取 GatewayConfig 实例"""
    return request.app.state.gateway_config


async def get_json_body(request: Request) -> dict[str, Any]:
    """解析 JSON 请求体

    空请求体视为 {}。同一请求内多个依赖共享同一个 dict（FastAPI 依赖缓存），
    postman 模式从中移除 address 后，路由看到的是移除后的请求体。

    Raises:
        ValidationError: 请求体不是合法 JSON 对象
    """
    raw = await request.body()
    if not raw.strip():
        return {}
    try:
        payload = json.loads(raw)
    except ValueError as e:
        raise ValidationError(INVALID_BODY_MESSAGE) from e
    if not isinstance(payload, dict):
        raise ValidationError(INVALID_BODY_MESSAGE)
    return payload
