"""mydo Core Domain Models -- 公共类型导出

所有公共模型类型从此入口导入。
"""

from .enums import FLAG_COLUMNS, RepeatUnit, TaskFlag
from .task import Repeat, Step, Task, TrimmedTitle
from .tasklist import DefaultList, Tasklist

__all__ = [
    # 枚举
    "RepeatUnit",
    "TaskFlag",
    "FLAG_COLUMNS",
    # Task
    "Task",
    "Repeat",
    "Step",
    "TrimmedTitle",
    # 清单
    "Tasklist",
    "DefaultList",
]
