"""Tasklist / DefaultList Domain Model

清单只记录成员关系（task id 序列），不负责 Task 的生命周期。
每个 owner 至多一个 DefaultList，由 default_lists.owner 唯一索引保证。
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .task import TrimmedTitle


class Tasklist(BaseModel):
    """用户显式创建的任务清单"""

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(description="唯一标识，24 位十六进制")
    title: TrimmedTitle = Field(description="清单标题")
    owner: str = Field(min_length=1, description="所有者地址")
    order: int = Field(ge=0, description="显示顺序（创建时为已有清单数 + 1）")
    tasks: list[str] = Field(default_factory=list, description="成员 task id")
    created_at: datetime = Field(alias="createdAt", description="创建时间")
    updated_at: datetime = Field(alias="updatedAt", description="更新时间")
    revision: int = Field(default=0, ge=0, description="修订号")

    @field_validator("order", mode="before")
    @classmethod
    def _order_must_be_integer(cls, value: object) -> object:
        if isinstance(value, bool) or (isinstance(value, float) and not value.is_integer()):
            raise ValueError("Must be an integer")
        return value


class DefaultList(BaseModel):
    """未指定清单时任务挂靠的隐式清单"""

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(description="唯一标识，24 位十六进制")
    title: TrimmedTitle = Field(description="清单标题")
    owner: str = Field(min_length=1, description="所有者地址（唯一）")
    tasks: list[str] = Field(default_factory=list, description="成员 task id")
    created_at: datetime = Field(alias="createdAt", description="创建时间")
    updated_at: datetime = Field(alias="updatedAt", description="更新时间")
    revision: int = Field(default=0, ge=0, description="修订号")
