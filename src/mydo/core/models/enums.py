"""枚举定义

包含重复周期单位 RepeatUnit 与可筛选的任务标记 TaskFlag。
"""

from enum import StrEnum


class RepeatUnit(StrEnum):
    """任务重复周期单位"""

    DAY = "DAY"
    WEEK = "WEEK"
    MONTH = "MONTH"


class TaskFlag(StrEnum):
    """可用于筛选查询的布尔标记

    值为对外（JSON）字段名。
    """

    IMPORTANT = "important"
    MY_DAY = "myDay"


# TaskFlag -> tasks 表列名
FLAG_COLUMNS: dict[TaskFlag, str] = {
    TaskFlag.IMPORTANT: "important",
    TaskFlag.MY_DAY: "my_day",
}
