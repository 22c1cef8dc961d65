"""TaskService -- 任务创建/标记/更新/删除业务逻辑

跨 Task 与清单两个存储的写操作在这里编排，每一步单独提交，后续步骤失败时
前面的步骤不回滚。顺序固定为“先建被引用者、再写引用”和“先删任务、再摘引用”，
失败时最多留下孤儿任务，或留下可被容忍的悬挂引用。

创建流程：
1. Validation Gate 校验请求体
2. 解析目标清单（listId 对应的 Tasklist，或查询/创建 DefaultList）
3. 创建 Task
4. 把 Task id 追加到目标清单
"""

from typing import Any

import structlog
from mydo.core.exceptions import NotFoundError
from mydo.core.models import TaskFlag
from mydo.core.projection import to_public, to_public_many
from mydo.core.schemas import require_valid
from mydo.core.store import StoreGroup

log = structlog.get_logger()


class TaskService:
    """任务业务服务"""

    def __init__(self, store_group: StoreGroup) -> None:
        self._stores = store_group

    async def _commit(self) -> None:
        await self._stores.conn.commit()

    async def create_task(self, owner: str, payload: dict[str, Any]) -> dict[str, Any]:
        """创建任务并挂到目标清单

        listId 未命中该 owner 的清单时，任务仍然保留（孤儿），只记录告警。

        Returns:
            任务的对外投影

        Raises:
            ValidationError: 请求体不合法，此时不发生任何写入
        """
        require_valid(payload, "create_task")
        task = self._stores.task_store.build_task(payload, owner)
        list_id = payload.get("listId")

        if list_id is None:
            default_list = await self._stores.list_store.get_or_create_default_list(owner)
            await self._commit()
            target_id = default_list.id
        else:
            target_id = list_id

        await self._stores.task_store.insert_task(task)
        await self._commit()

        if list_id is None:
            attached = await self._stores.list_store.add_task_to_default_list(owner, task.id)
        else:
            attached = await self._stores.list_store.add_task_to_tasklist(
                list_id, owner, task.id
            )
        await self._commit()

        if attached:
            await log.ainfo("task_created", task_id=task.id, list_id=target_id)
        else:
            await log.awarning("task_list_not_found", task_id=task.id, list_id=target_id)

        return to_public(task)

    async def list_flagged(self, owner: str, flag: TaskFlag) -> list[dict[str, Any]]:
        """查询带有 important / myDay 标记的任务"""
        tasks = await self._stores.task_store.list_tasks_by_flag(owner, flag)
        return to_public_many(tasks)

    async def toggle_done(self, owner: str, payload: dict[str, Any]) -> dict[str, Any]:
        """翻转任务完成状态

        Returns:
            {"id": 任务 id, "done": 翻转后的值}

        Raises:
            ValidationError: 请求体不合法
            NotFoundError: 任务不存在或不属于该 owner
        """
        require_valid(payload, "finish_task")
        task_id = payload["taskId"]

        done = await self._stores.task_store.toggle_done(task_id, owner)
        await self._commit()

        await log.ainfo("task_done_toggled", task_id=task_id, done=done)
        return {"id": task_id, "done": done}

    async def update_task(self, owner: str, payload: dict[str, Any]) -> dict[str, Any]:
        """局部更新任务字段（不含 done 与清单归属）

        Raises:
            ValidationError: 请求体不合法
            NotFoundError: 任务不存在或不属于该 owner
        """
        require_valid(payload, "update_task")
        updates = {key: value for key, value in payload.items() if key != "taskId"}

        task = await self._stores.task_store.patch_task(payload["taskId"], owner, updates)
        await self._commit()

        await log.ainfo("task_updated", task_id=task.id, fields=sorted(updates))
        return to_public(task)

    async def delete_task(self, owner: str, payload: dict[str, Any]) -> None:
        """删除任务并从清单中摘除引用

        无论第一步是否命中，都会执行摘除引用；两步都未命中时视为不存在。

        Raises:
            ValidationError: 请求体不合法
            NotFoundError: 任务与引用都不存在
            InvalidObjectIdError: taskId / listId 不是合法 id
        """
        require_valid(payload, "delete_task")
        task_id = payload["taskId"]
        list_id = payload.get("listId")

        deleted = await self._stores.task_store.delete_task(task_id, owner)
        await self._commit()

        if list_id is None:
            unlinked = await self._stores.list_store.remove_task_from_default_list(
                owner, task_id
            )
        else:
            unlinked = await self._stores.list_store.remove_task_from_tasklist(
                list_id, owner, task_id
            )
        await self._commit()

        if deleted is None and not unlinked:
            raise NotFoundError("task", task_id)

        await log.ainfo(
            "task_deleted",
            task_id=task_id,
            list_id=list_id,
            task_found=deleted is not None,
            reference_removed=unlinked,
        )
