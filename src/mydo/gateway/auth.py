"""Identity Resolver -- 将请求解析为 owner 地址

三种模式：
- session: 校验 HMAC-SHA256 签名的会话令牌（cookie 或 Authorization: Bearer），
  令牌由钱包签名登录流程签发，payload 中的 address 即 owner
- header: 信任上游签名验证代理写入的地址请求头
- postman: 开发调试用，从请求体的 address 字段读取，读取后从请求体移除

无法解析出 owner 时抛出 AuthenticationError（401）。
"""

import base64
import hashlib
import hmac
import json
import time
from typing import Any

import structlog
from fastapi import Depends, Request

from mydo.core.exceptions import AuthenticationError

from .config import GatewayConfig
from .deps import get_gateway_config, get_json_body


def _b64url_encode(raw: bytes) -> str:
    return base64.urlsafe_b64encode(raw).decode("utf-8").rstrip("=")


def _b64url_decode(s: str) -> bytes:
    pad = "=" * (-len(s) % 4)
    return base64.urlsafe_b64decode((s + pad).encode("utf-8"))


def sign_session(payload: dict[str, Any], secret: str) -> str:
    """签发会话令牌：<base64url(payload)>.<base64url(hmac)>"""
    data = json.dumps(payload, ensure_ascii=False, separators=(",", ":")).encode("utf-8")
    sig = hmac.new(secret.encode("utf-8"), data, hashlib.sha256).digest()
    return f"{_b64url_encode(data)}.{_b64url_encode(sig)}"


def verify_session(token: str, secret: str) -> dict[str, Any] | None:
    """校验会话令牌，签名错误、格式错误或已过期时返回 None"""
    if not token or not secret:
        return None
    try:
        data_b64, sig_b64 = token.split(".", 1)
        data = _b64url_decode(data_b64)
        sig = _b64url_decode(sig_b64)
    except ValueError:
        return None

    expected = hmac.new(secret.encode("utf-8"), data, hashlib.sha256).digest()
    if not hmac.compare_digest(sig, expected):
        return None

    try:
        payload = json.loads(data.decode("utf-8"))
    except (UnicodeDecodeError, ValueError):
        return None
    if not isinstance(payload, dict):
        return None

    exp = payload.get("exp", 0)
    if isinstance(exp, (int, float)) and exp and time.time() > exp:
        return None
    return payload


def _session_token(request: Request, config: GatewayConfig) -> str | None:
    token = request.cookies.get(config.session_cookie)
    if token:
        return token
    authorization = request.headers.get("Authorization", "")
    scheme, _, credentials = authorization.partition(" ")
    if scheme.lower() == "bearer" and credentials:
        return credentials.strip()
    return None


def resolve_owner(
    request: Request,
    body: dict[str, Any],
    config: GatewayConfig,
) -> str | None:
    """按配置的模式解析 owner，解析失败返回 None"""
    if config.auth_mode == "session":
        token = _session_token(request, config)
        payload = verify_session(token or "", config.session_secret.get_secret_value())
        address = payload.get("address") if payload else None
    elif config.auth_mode == "header":
        address = request.headers.get(config.address_header)
    else:
        address = body.pop("address", None)

    if not isinstance(address, str) or not address.strip():
        return None
    return address.strip()


async def get_owner(
    request: Request,
    body: dict[str, Any] = Depends(get_json_body),
    config: GatewayConfig = Depends(get_gateway_config),
) -> str:
    """FastAPI 依赖：解析当前请求的 owner 并绑定到日志上下文

    Raises:
        AuthenticationError: 无法解析出 owner
    """
    owner = resolve_owner(request, body, config)
    if owner is None:
        await structlog.get_logger().ainfo("owner_unresolved", auth_mode=config.auth_mode)
        raise AuthenticationError()

    structlog.contextvars.bind_contextvars(owner=owner)
    return owner
