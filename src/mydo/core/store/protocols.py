"""Store Protocol 接口定义

定义 TaskStore、ListStore 的抽象接口，
使用 Python Protocol 实现结构化子类型（duck typing）。
所有方法都以 owner 为作用域；方法本身不提交事务，由调用方逐步提交。
"""

from typing import Any, Protocol

from ..models.enums import TaskFlag
from ..models.task import Task
from ..models.tasklist import DefaultList, Tasklist


class TaskStore(Protocol):
    """Task 存储接口"""

    def build_task(self, fields: dict[str, Any], owner: str) -> Task:
        """构造任务（赋予 owner、应用默认值、模型二次校验），不写入"""
        ...

    async def insert_task(self, task: Task) -> Task:
        """写入已构造的任务"""
        ...

    async def create_task(self, fields: dict[str, Any], owner: str) -> Task:
        """创建任务记录（赋予 owner、应用默认值、模型二次校验）"""
        ...

    async def get_task(self, task_id: str, owner: str) -> Task | None:
        """根据 (task_id, owner) 查询任务"""
        ...

    async def list_tasks_by_flag(self, owner: str, flag: TaskFlag) -> list[Task]:
        """查询 owner 下指定标记为 true 的任务"""
        ...

    async def list_tasks_by_ids(self, task_ids: list[str], owner: str) -> list[Task]:
        """按给定顺序批量查询任务，跳过不存在的 id"""
        ...

    async def toggle_done(self, task_id: str, owner: str) -> bool:
        """翻转 done，返回新值"""
        ...

    async def patch_task(self, task_id: str, owner: str, updates: dict[str, Any]) -> Task:
        """局部更新任务"""
        ...

    async def delete_task(self, task_id: str, owner: str) -> Task | None:
        """删除任务，返回被删除的记录"""
        ...

    async def list_task_keys(self, owner: str | None = None) -> list[tuple[str, str]]:
        """列出 (task_id, owner)，owner 为 None 时列出全部"""
        ...


class ListStore(Protocol):
    """Tasklist / DefaultList 存储接口"""

    async def create_tasklist(self, title: str, owner: str) -> Tasklist:
        """创建清单，order = 已有清单数 + 1"""
        ...

    async def get_tasklist(self, list_id: str, owner: str) -> Tasklist | None:
        """根据 (list_id, owner) 查询清单"""
        ...

    async def list_tasklists(self, owner: str) -> list[Tasklist]:
        """查询 owner 的全部清单"""
        ...

    async def rename_tasklist(self, list_id: str, owner: str, new_title: str) -> Tasklist:
        """重命名清单"""
        ...

    async def delete_tasklist(self, list_id: str, owner: str) -> Tasklist | None:
        """删除清单记录（不级联，级联由调用方负责）"""
        ...

    async def add_task_to_tasklist(self, list_id: str, owner: str, task_id: str) -> bool:
        """追加成员，返回是否匹配到清单"""
        ...

    async def remove_task_from_tasklist(self, list_id: str, owner: str, task_id: str) -> bool:
        """移除成员，返回是否匹配到清单"""
        ...

    async def get_default_list(self, owner: str) -> DefaultList | None:
        """查询 owner 的 DefaultList"""
        ...

    async def get_or_create_default_list(self, owner: str) -> DefaultList:
        """查询或创建 owner 的 DefaultList（幂等）"""
        ...

    async def add_task_to_default_list(self, owner: str, task_id: str) -> bool:
        """向 DefaultList 追加成员"""
        ...

    async def remove_task_from_default_list(self, owner: str, task_id: str) -> bool:
        """从 DefaultList 移除成员"""
        ...

    async def referenced_task_ids(self, owner: str | None = None) -> set[str]:
        """所有清单引用的 task id"""
        ...
