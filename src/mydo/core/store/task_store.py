"""TaskStore SQLite 实现

所有查询与写入都以 (id, owner) 为作用域，owner 不匹配等同于不存在。
此处仅提供数据库操作，不提交事务。
"""

import json
from datetime import UTC, datetime
from typing import Any

import aiosqlite
from pydantic import ValidationError as PydanticValidationError

from ..exceptions import NotFoundError, ValidationError
from ..ids import new_object_id, to_object_id
from ..models.enums import FLAG_COLUMNS, TaskFlag
from ..models.task import Task

# 客户端在创建/更新时可写的字段（对外字段名）
WRITABLE_FIELDS: frozenset[str] = frozenset(
    {"title", "dueDate", "repeat", "important", "myDay", "steps"}
)

_SELECT_TASK = """
SELECT id, owner, title, due_date, important, my_day, done,
       repeat, steps, created_at, updated_at, revision
FROM tasks
"""


class SqliteTaskStore:
    """TaskStore 的 SQLite 实现"""

    def __init__(self, conn: aiosqlite.Connection) -> None:
        self._conn = conn

    def build_task(self, fields: dict[str, Any], owner: str) -> Task:
        """构造待写入的任务，不访问数据库

        只接收可写字段；id、owner、时间戳与修订号由 Store 赋值。

        Raises:
            ValidationError: 字段不满足 Task 模型约束
        """
        now = datetime.now(UTC)
        data = {key: value for key, value in fields.items() if key in WRITABLE_FIELDS}
        data.update(
            id=new_object_id(),
            owner=owner,
            createdAt=now,
            updatedAt=now,
            revision=0,
        )
        try:
            task = Task.model_validate(data)
        except PydanticValidationError as e:
            raise ValidationError.from_pydantic(e) from e
        return task

    async def insert_task(self, task: Task) -> Task:
        """写入由 build_task 构造的任务"""
        await self._conn.execute(
            """
            INSERT INTO tasks (id, owner, title, due_date, important, my_day, done,
                               repeat, steps, created_at, updated_at, revision)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                task.id,
                task.owner,
                task.title,
                *self._task_values(task),
                task.created_at.isoformat(),
                task.updated_at.isoformat(),
                task.revision,
            ),
        )
        return task

    async def create_task(self, fields: dict[str, Any], owner: str) -> Task:
        """创建任务记录（build_task + insert_task）"""
        return await self.insert_task(self.build_task(fields, owner))

    async def get_task(self, task_id: str, owner: str) -> Task | None:
        """根据 (task_id, owner) 查询任务"""
        cursor = await self._conn.execute(
            _SELECT_TASK + "WHERE id = ? AND owner = ?",
            (to_object_id(task_id), owner),
        )
        row = await cursor.fetchone()
        if row is None:
            return None
        return self._row_to_task(row)

    async def list_tasks_by_flag(self, owner: str, flag: TaskFlag) -> list[Task]:
        """查询 owner 下指定标记为 true 的任务，按创建时间正序"""
        column = FLAG_COLUMNS[TaskFlag(flag)]
        cursor = await self._conn.execute(
            _SELECT_TASK + f"WHERE owner = ? AND {column} = 1 ORDER BY created_at, id",
            (owner,),
        )
        rows = await cursor.fetchall()
        return [self._row_to_task(row) for row in rows]

    async def list_tasks_by_ids(self, task_ids: list[str], owner: str) -> list[Task]:
        """按给定顺序批量查询任务，跳过不存在或不属于 owner 的 id"""
        if not task_ids:
            return []
        cursor = await self._conn.execute(
            _SELECT_TASK + "WHERE owner = ? AND id IN (SELECT value FROM json_each(?))",
            (owner, json.dumps(task_ids)),
        )
        rows = await cursor.fetchall()
        by_id = {row[0]: self._row_to_task(row) for row in rows}
        return [by_id[task_id] for task_id in task_ids if task_id in by_id]

    async def toggle_done(self, task_id: str, owner: str) -> bool:
        """单条语句翻转 done，不改动其它业务字段

        Returns:
            翻转后的 done 值

        Raises:
            NotFoundError: 没有匹配的任务
        """
        oid = to_object_id(task_id)
        cursor = await self._conn.execute(
            """
            UPDATE tasks
            SET done = 1 - done, updated_at = ?, revision = revision + 1
            WHERE id = ? AND owner = ?
            """,
            (datetime.now(UTC).isoformat(), oid, owner),
        )
        if cursor.rowcount == 0:
            raise NotFoundError("task", oid)

        cursor = await self._conn.execute(
            "SELECT done FROM tasks WHERE id = ? AND owner = ?",
            (oid, owner),
        )
        row = await cursor.fetchone()
        return bool(row[0]) if row else False

    async def patch_task(self, task_id: str, owner: str, updates: dict[str, Any]) -> Task:
        """局部更新任务，合并后整体重新校验

        Raises:
            NotFoundError: 没有匹配的任务
            ValidationError: 合并结果不满足 Task 模型约束
        """
        current = await self.get_task(task_id, owner)
        if current is None:
            raise NotFoundError("task", task_id)

        data = current.model_dump(by_alias=True)
        data.update({key: value for key, value in updates.items() if key in WRITABLE_FIELDS})
        data["updatedAt"] = datetime.now(UTC)
        data["revision"] = current.revision + 1
        try:
            task = Task.model_validate(data)
        except PydanticValidationError as e:
            raise ValidationError.from_pydantic(e) from e

        await self._conn.execute(
            """
            UPDATE tasks
            SET title = ?, due_date = ?, important = ?, my_day = ?, done = ?,
                repeat = ?, steps = ?, updated_at = ?, revision = ?
            WHERE id = ? AND owner = ?
            """,
            (
                task.title,
                *self._task_values(task),
                task.updated_at.isoformat(),
                task.revision,
                task.id,
                owner,
            ),
        )
        return task

    async def delete_task(self, task_id: str, owner: str) -> Task | None:
        """删除任务

        Returns:
            被删除的任务，不存在时为 None
        """
        task = await self.get_task(task_id, owner)
        if task is None:
            return None
        await self._conn.execute(
            "DELETE FROM tasks WHERE id = ? AND owner = ?",
            (task.id, owner),
        )
        return task

    async def list_task_keys(self, owner: str | None = None) -> list[tuple[str, str]]:
        """列出 (task_id, owner)，用于孤儿任务清理"""
        if owner is None:
            cursor = await self._conn.execute("SELECT id, owner FROM tasks ORDER BY created_at")
        else:
            cursor = await self._conn.execute(
                "SELECT id, owner FROM tasks WHERE owner = ? ORDER BY created_at",
                (owner,),
            )
        rows = await cursor.fetchall()
        return [(row[0], row[1]) for row in rows]

    @staticmethod
    def _task_values(task: Task) -> tuple:
        """due_date .. steps 列的写入值"""
        return (
            task.due_date.isoformat() if task.due_date else None,
            int(task.important),
            int(task.my_day),
            int(task.done),
            task.repeat.model_dump_json(by_alias=True, exclude_none=True) if task.repeat else None,
            json.dumps([step.model_dump(mode="json") for step in task.steps], ensure_ascii=False),
        )

    @staticmethod
    def _row_to_task(row: aiosqlite.Row) -> Task:
        """将数据库行转换为 Task 模型"""
        return Task(
            id=row[0],
            owner=row[1],
            title=row[2],
            due_date=row[3],
            important=bool(row[4]),
            my_day=bool(row[5]),
            done=bool(row[6]),
            repeat=json.loads(row[7]) if row[7] else None,
            steps=json.loads(row[8]) if row[8] else [],
            created_at=datetime.fromisoformat(row[9]),
            updated_at=datetime.fromisoformat(row[10]),
            revision=row[11],
        )
