"""TasklistService -- 清单创建/删除/重命名/查询业务逻辑

删除清单时级联删除其成员任务：逐个按 (id, owner) 删除，缺失的成员跳过，
最后删除清单本身。中途异常直接抛出，已删除的任务不恢复。
"""

from typing import Any

import structlog
from mydo.core.exceptions import NotFoundError
from mydo.core.projection import to_public, to_public_many
from mydo.core.schemas import require_valid
from mydo.core.store import StoreGroup

log = structlog.get_logger()


class TasklistService:
    """清单业务服务"""

    def __init__(self, store_group: StoreGroup) -> None:
        self._stores = store_group

    async def _commit(self) -> None:
        await self._stores.conn.commit()

    async def create_tasklist(self, owner: str, payload: dict[str, Any]) -> dict[str, Any]:
        """创建清单，order 为该 owner 已有清单数 + 1"""
        require_valid(payload, "create_tasklist")

        tasklist = await self._stores.list_store.create_tasklist(payload["title"], owner)
        await self._commit()

        await log.ainfo("tasklist_created", tasklist_id=tasklist.id, order=tasklist.order)
        return to_public(tasklist)

    async def delete_tasklist(self, owner: str, payload: dict[str, Any]) -> None:
        """删除清单及其全部成员任务

        Raises:
            ValidationError: 请求体不合法
            NotFoundError: 清单不存在或不属于该 owner
        """
        require_valid(payload, "delete_tasklist")
        list_id = payload["tasklistId"]

        tasklist = await self._stores.list_store.get_tasklist(list_id, owner)
        if tasklist is None:
            raise NotFoundError("tasklist", list_id)

        removed = 0
        for task_id in tasklist.tasks:
            deleted = await self._stores.task_store.delete_task(task_id, owner)
            await self._commit()
            if deleted is None:
                await log.awarning(
                    "tasklist_cascade_task_missing",
                    tasklist_id=tasklist.id,
                    task_id=task_id,
                )
            else:
                removed += 1

        await self._stores.list_store.delete_tasklist(tasklist.id, owner)
        await self._commit()

        await log.ainfo(
            "tasklist_deleted",
            tasklist_id=tasklist.id,
            member_count=len(tasklist.tasks),
            tasks_deleted=removed,
        )

    async def rename_tasklist(self, owner: str, payload: dict[str, Any]) -> dict[str, Any]:
        """修改清单标题

        Raises:
            ValidationError: 请求体不合法或新标题为空
            NotFoundError: 清单不存在或不属于该 owner
        """
        require_valid(payload, "rename_tasklist")

        tasklist = await self._stores.list_store.rename_tasklist(
            payload["tasklistId"], owner, payload["newTitle"]
        )
        await self._commit()

        await log.ainfo("tasklist_renamed", tasklist_id=tasklist.id)
        return to_public(tasklist)

    async def list_tasklist_titles(
        self, owner: str, payload: dict[str, Any]
    ) -> list[dict[str, str]]:
        """返回 owner 全部清单的 [{id, title}]"""
        require_valid(payload, "list_tasklists")
        tasklists = await self._stores.list_store.list_tasklists(owner)
        return [{"id": tasklist.id, "title": tasklist.title} for tasklist in tasklists]

    async def tasks_in_list(self, owner: str, params: dict[str, Any]) -> list[dict[str, Any]]:
        """按成员顺序返回清单内的任务

        未给出 tasklistId 时读取 DefaultList；DefaultList 尚未创建时返回空列表。
        成员中已不存在的任务（悬挂引用）直接跳过。

        Raises:
            ValidationError: 参数不合法
            NotFoundError: 给出的清单不存在或不属于该 owner
        """
        require_valid(params, "tasks_in_list")
        list_id = params.get("tasklistId")

        if list_id is None:
            container = await self._stores.list_store.get_default_list(owner)
            if container is None:
                return []
        else:
            container = await self._stores.list_store.get_tasklist(list_id, owner)
            if container is None:
                raise NotFoundError("tasklist", list_id)

        tasks = await self._stores.task_store.list_tasks_by_ids(container.tasks, owner)
        return to_public_many(tasks)
