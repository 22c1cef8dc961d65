"""Task Domain Model

Task 是唯一真正持有数据的实体；清单只通过 id 引用它。
owner 在创建后不可变，所有读写都以 (id, owner) 为作用域。
"""

from datetime import date, datetime
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, StringConstraints

from .enums import RepeatUnit

# 去除首尾空白后非空的标题
TrimmedTitle = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]


class Repeat(BaseModel):
    """任务重复规则，dueEvery 为同结构的嵌套规则"""

    model_config = ConfigDict(populate_by_name=True)

    amount: int = Field(ge=1, description="重复间隔数量")
    unit: RepeatUnit = Field(description="重复间隔单位")
    due_every: "Repeat | None" = Field(
        default=None,
        alias="dueEvery",
        description="每次重复后距离截止日期的间隔",
    )


class Step(BaseModel):
    """任务的子步骤"""

    order: float = Field(ge=0, description="步骤顺序")
    complete: bool = Field(default=False, description="是否完成")
    title: TrimmedTitle = Field(description="步骤标题")


class Task(BaseModel):
    """Task 数据模型

    created_at / updated_at / revision 由 Store 维护，客户端不可写。
    """

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(description="唯一标识，24 位十六进制")
    title: TrimmedTitle = Field(description="任务标题")
    due_date: date | None = Field(default=None, alias="dueDate", description="截止日期")
    important: bool = Field(default=False, description="是否重要")
    my_day: bool = Field(default=False, alias="myDay", description="是否加入“我的一天”")
    done: bool = Field(default=False, description="是否完成")
    owner: str = Field(min_length=1, description="所有者地址")
    repeat: Repeat | None = Field(default=None, description="重复规则")
    steps: list[Step] = Field(default_factory=list, description="子步骤")
    created_at: datetime = Field(alias="createdAt", description="创建时间")
    updated_at: datetime = Field(alias="updatedAt", description="更新时间")
    revision: int = Field(default=0, ge=0, description="修订号，每次写入 +1")
