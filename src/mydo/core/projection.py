"""Public Projection 模块

实体进入响应体之前，去掉存储内部字段（修订号、创建/更新时间）
并按对外字段名（myDay / dueDate / dueEvery）序列化。
单个实体与序列使用同一套规则。
"""

from collections.abc import Iterable
from typing import Any

from pydantic import BaseModel

# 仅存储层使用的字段（模型字段名）
INTERNAL_FIELDS: frozenset[str] = frozenset({"created_at", "updated_at", "revision"})


def to_public(entity: BaseModel) -> dict[str, Any]:
    """将单个实体转换为对外 JSON 对象

    未设置的可选字段（值为 None）一并省略。
    """
    return entity.model_dump(
        mode="json",
        by_alias=True,
        exclude=set(INTERNAL_FIELDS),
        exclude_none=True,
    )


def to_public_many(entities: Iterable[BaseModel]) -> list[dict[str, Any]]:
    """将实体序列转换为对外 JSON 数组"""
    return [to_public(entity) for entity in entities]
