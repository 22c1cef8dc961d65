"""GatewayConfig -- Gateway 配置加载

从环境变量加载身份解析模式、会话密钥、CORS 与状态码兼容开关。
"""

import os
from typing import Literal

import structlog
from pydantic import BaseModel, Field, SecretStr

log = structlog.get_logger()

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


class GatewayConfig(BaseModel):
    """Gateway 配置 -- 从环境变量加载

    环境变量:
        MYDO_AUTH_MODE: 身份解析模式（session/header/postman）
        MYDO_SESSION_SECRET: 会话令牌 HMAC 密钥
        MYDO_SESSION_COOKIE: 会话 cookie 名称
        MYDO_ADDRESS_HEADER: header 模式下读取地址的请求头
        MYDO_LEGACY_STATUS_CODES: 删除清单时请求体错误是否返回 401
        MYDO_CORS_ORIGINS: 允许的跨域来源（逗号分隔）
    """

    auth_mode: Literal["session", "header", "postman"] = Field(
        default="session",
        description="身份解析模式",
    )
    session_secret: SecretStr = Field(
        default=SecretStr(""),
        description="会话令牌签名密钥（session 模式必填）",
    )
    session_cookie: str = Field(default="mydo_session", description="会话 cookie 名称")
    address_header: str = Field(
        default="X-Wallet-Address",
        description="由上游签名验证代理写入的钱包地址请求头",
    )
    legacy_status_codes: bool = Field(
        default=True,
        description="DELETE /tasklist/remove 请求体错误返回 401、清单不存在返回 400",
    )
    cors_origins: list[str] = Field(default_factory=list, description="允许的跨域来源")


def _parse_bool(env_var: str, value: str, fallback: bool) -> bool:
    lowered = value.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    log.warning("invalid_bool_config", env_var=env_var, value=value, fallback=fallback)
    return fallback


def load_gateway_config() -> GatewayConfig:
    """从环境变量加载 Gateway 配置

    环境变量映射:
        MYDO_AUTH_MODE -> auth_mode (默认 "session")
        MYDO_SESSION_SECRET -> session_secret (默认 "")
        MYDO_SESSION_COOKIE -> session_cookie (默认 "mydo_session")
        MYDO_ADDRESS_HEADER -> address_header (默认 "X-Wallet-Address")
        MYDO_LEGACY_STATUS_CODES -> legacy_status_codes (默认 true)
        MYDO_CORS_ORIGINS -> cors_origins (默认空)

    Returns:
        GatewayConfig 实例
    """
    kwargs: dict = {}

    if val := os.environ.get("MYDO_AUTH_MODE"):
        kwargs["auth_mode"] = val.strip().lower()

    if val := os.environ.get("MYDO_SESSION_SECRET"):
        kwargs["session_secret"] = SecretStr(val)

    if val := os.environ.get("MYDO_SESSION_COOKIE"):
        kwargs["session_cookie"] = val.strip()

    if val := os.environ.get("MYDO_ADDRESS_HEADER"):
        kwargs["address_header"] = val.strip()

    if val := os.environ.get("MYDO_LEGACY_STATUS_CODES"):
        kwargs["legacy_status_codes"] = _parse_bool("MYDO_LEGACY_STATUS_CODES", val, True)

    if val := os.environ.get("MYDO_CORS_ORIGINS"):
        kwargs["cors_origins"] = [origin.strip() for origin in val.split(",") if origin.strip()]

    config = GatewayConfig(**kwargs)

    if config.auth_mode == "session" and not config.session_secret.get_secret_value():
        # 未配置密钥时所有会话都无法通过校验，请求一律 401
        log.warning("session_secret_missing", auth_mode=config.auth_mode)

    return config
