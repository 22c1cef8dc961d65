"""ObjectId 辅助函数

对外 id 使用 24 位小写十六进制（文档库 ObjectId 形式）。
新 id 取 ULID 的前 12 字节：6 字节毫秒时间戳 + 6 字节随机数，按时间有序。
"""

import re

from ulid import ULID

from .config import OBJECT_ID_PATTERN
from .exceptions import InvalidObjectIdError

_OBJECT_ID_RE = re.compile(OBJECT_ID_PATTERN)


def new_object_id() -> str:
    """生成新的 24 位十六进制 id"""
    return ULID().bytes[:12].hex()


def is_object_id(value: object) -> bool:
    """判断值是否为合法的 ObjectId 字符串"""
    return isinstance(value, str) and _OBJECT_ID_RE.fullmatch(value) is not None


def to_object_id(value: object) -> str:
    """转换为规范化（小写）ObjectId

    Raises:
        InvalidObjectIdError: 值不是 24 位十六进制字符串
    """
    if not is_object_id(value):
        raise InvalidObjectIdError(value)
    return value.lower()
