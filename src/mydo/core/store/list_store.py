"""ListStore SQLite 实现 -- Tasklist 与 DefaultList

成员关系（tasks 列）是 JSON 数组，追加/移除都在单条 UPDATE 内完成，
作用域为 (id, owner) 或 owner（DefaultList）。
DefaultList 的唯一性由 default_lists.owner 唯一索引保证，
查询或创建使用 INSERT ... ON CONFLICT DO NOTHING，避免先读后写的竞争窗口。
"""

import json
from datetime import UTC, datetime

import aiosqlite
from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from ..exceptions import NotFoundError, StorageError, ValidationError
from ..ids import new_object_id, to_object_id
from ..models.task import TrimmedTitle
from ..models.tasklist import DefaultList, Tasklist

_TITLE_ADAPTER = TypeAdapter(TrimmedTitle)

_TASKLISTS = "tasklists"
_DEFAULT_LISTS = "default_lists"

_SELECT_TASKLIST = """
SELECT id, owner, title, list_order, tasks, created_at, updated_at, revision
FROM tasklists
"""

_SELECT_DEFAULT_LIST = """
SELECT id, owner, title, tasks, created_at, updated_at, revision
FROM default_lists
"""


class SqliteListStore:
    """ListStore 的 SQLite 实现"""

    def __init__(self, conn: aiosqlite.Connection, default_list_title: str = "Tasks") -> None:
        self._conn = conn
        self._default_list_title = default_list_title

    # ---- Tasklist ----

    async def create_tasklist(self, title: str, owner: str) -> Tasklist:
        """创建清单

        order 取 owner 已有清单数 + 1，只作为显示提示，删除后重建可能出现重复或空缺。

        Raises:
            ValidationError: 标题为空或字段不满足 Tasklist 模型约束
        """
        cursor = await self._conn.execute(
            "SELECT COUNT(*) FROM tasklists WHERE owner = ?",
            (owner,),
        )
        row = await cursor.fetchone()
        existing = row[0] if row else 0

        now = datetime.now(UTC)
        try:
            tasklist = Tasklist(
                id=new_object_id(),
                title=title,
                owner=owner,
                order=existing + 1,
                tasks=[],
                created_at=now,
                updated_at=now,
            )
        except PydanticValidationError as e:
            raise ValidationError.from_pydantic(e) from e

        await self._conn.execute(
            """
            INSERT INTO tasklists (id, owner, title, list_order, tasks,
                                   created_at, updated_at, revision)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                tasklist.id,
                tasklist.owner,
                tasklist.title,
                tasklist.order,
                json.dumps(tasklist.tasks),
                tasklist.created_at.isoformat(),
                tasklist.updated_at.isoformat(),
                tasklist.revision,
            ),
        )
        return tasklist

    async def get_tasklist(self, list_id: str, owner: str) -> Tasklist | None:
        """根据 (list_id, owner) 查询清单"""
        cursor = await self._conn.execute(
            _SELECT_TASKLIST + "WHERE id = ? AND owner = ?",
            (to_object_id(list_id), owner),
        )
        row = await cursor.fetchone()
        if row is None:
            return None
        return self._row_to_tasklist(row)

    async def list_tasklists(self, owner: str) -> list[Tasklist]:
        """查询 owner 的全部清单，按 order 排序；没有清单时返回空列表"""
        cursor = await self._conn.execute(
            _SELECT_TASKLIST + "WHERE owner = ? ORDER BY list_order, created_at",
            (owner,),
        )
        rows = await cursor.fetchall()
        return [self._row_to_tasklist(row) for row in rows]

    async def rename_tasklist(self, list_id: str, owner: str, new_title: str) -> Tasklist:
        """重命名清单

        Raises:
            ValidationError: 新标题去空白后为空
            NotFoundError: 没有匹配的清单
        """
        oid = to_object_id(list_id)
        try:
            title = _TITLE_ADAPTER.validate_python(new_title)
        except PydanticValidationError as e:
            raise ValidationError.from_pydantic(e) from e

        cursor = await self._conn.execute(
            """
            UPDATE tasklists
            SET title = ?, updated_at = ?, revision = revision + 1
            WHERE id = ? AND owner = ?
            """,
            (title, datetime.now(UTC).isoformat(), oid, owner),
        )
        if cursor.rowcount == 0:
            raise NotFoundError("tasklist", oid)

        tasklist = await self.get_tasklist(oid, owner)
        if tasklist is None:
            raise NotFoundError("tasklist", oid)
        return tasklist

    async def delete_tasklist(self, list_id: str, owner: str) -> Tasklist | None:
        """删除清单记录本身，成员任务的级联删除由调用方先行完成

        Returns:
            被删除的清单，不存在时为 None
        """
        tasklist = await self.get_tasklist(list_id, owner)
        if tasklist is None:
            return None
        await self._conn.execute(
            "DELETE FROM tasklists WHERE id = ? AND owner = ?",
            (tasklist.id, owner),
        )
        return tasklist

    async def add_task_to_tasklist(self, list_id: str, owner: str, task_id: str) -> bool:
        """向清单追加成员

        Returns:
            是否匹配到 (list_id, owner) 的清单
        """
        return await self._push(
            _TASKLISTS,
            "id = ? AND owner = ?",
            (to_object_id(list_id), owner),
            to_object_id(task_id),
        )

    async def remove_task_from_tasklist(self, list_id: str, owner: str, task_id: str) -> bool:
        """从清单移除成员（id 不在清单中时为空操作）

        Returns:
            是否匹配到 (list_id, owner) 的清单
        """
        return await self._pull(
            _TASKLISTS,
            "id = ? AND owner = ?",
            (to_object_id(list_id), owner),
            to_object_id(task_id),
        )

    # ---- DefaultList ----

    async def get_default_list(self, owner: str) -> DefaultList | None:
        """查询 owner 的 DefaultList"""
        cursor = await self._conn.execute(
            _SELECT_DEFAULT_LIST + "WHERE owner = ?",
            (owner,),
        )
        row = await cursor.fetchone()
        if row is None:
            return None
        return self._row_to_default_list(row)

    async def get_or_create_default_list(self, owner: str) -> DefaultList:
        """查询或创建 owner 的 DefaultList

        已存在时直接返回已有记录；并发创建由唯一索引收敛为一条。

        Raises:
            ValidationError: owner 或默认标题不合法
            StorageError: 插入后仍查询不到记录
        """
        now = datetime.now(UTC)
        try:
            candidate = DefaultList(
                id=new_object_id(),
                title=self._default_list_title,
                owner=owner,
                tasks=[],
                created_at=now,
                updated_at=now,
            )
        except PydanticValidationError as e:
            raise ValidationError.from_pydantic(e) from e

        await self._conn.execute(
            """
            INSERT INTO default_lists (id, owner, title, tasks,
                                       created_at, updated_at, revision)
            VALUES (?, ?, ?, ?, ?, ?, ?)
            ON CONFLICT(owner) DO NOTHING
            """,
            (
                candidate.id,
                candidate.owner,
                candidate.title,
                json.dumps(candidate.tasks),
                candidate.created_at.isoformat(),
                candidate.updated_at.isoformat(),
                candidate.revision,
            ),
        )

        default_list = await self.get_default_list(owner)
        if default_list is None:
            raise StorageError(f"default list for owner {owner!r} missing after insert")
        return default_list

    async def add_task_to_default_list(self, owner: str, task_id: str) -> bool:
        """向 owner 的 DefaultList 追加成员"""
        return await self._push(_DEFAULT_LISTS, "owner = ?", (owner,), to_object_id(task_id))

    async def remove_task_from_default_list(self, owner: str, task_id: str) -> bool:
        """从 owner 的 DefaultList 移除成员"""
        return await self._pull(_DEFAULT_LISTS, "owner = ?", (owner,), to_object_id(task_id))

    # ---- 清理辅助 ----

    async def referenced_task_ids(self, owner: str | None = None) -> set[str]:
        """所有清单（含 DefaultList）引用的 task id"""
        referenced: set[str] = set()
        for table in (_TASKLISTS, _DEFAULT_LISTS):
            if owner is None:
                cursor = await self._conn.execute(
                    f"SELECT j.value FROM {table}, json_each({table}.tasks) AS j"
                )
            else:
                cursor = await self._conn.execute(
                    f"SELECT j.value FROM {table}, json_each({table}.tasks) AS j "
                    f"WHERE {table}.owner = ?",
                    (owner,),
                )
            rows = await cursor.fetchall()
            referenced.update(row[0] for row in rows)
        return referenced

    # ---- 内部实现 ----

    async def _push(self, table: str, where: str, params: tuple, task_id: str) -> bool:
        cursor = await self._conn.execute(
            f"""
            UPDATE {table}
            SET tasks = json_insert(tasks, '$[#]', ?),
                updated_at = ?, revision = revision + 1
            WHERE {where}
            """,
            (task_id, datetime.now(UTC).isoformat(), *params),
        )
        return cursor.rowcount > 0

    async def _pull(self, table: str, where: str, params: tuple, task_id: str) -> bool:
        cursor = await self._conn.execute(
            f"""
            UPDATE {table}
            SET tasks = (
                    SELECT json_group_array(j.value)
                    FROM json_each({table}.tasks) AS j
                    WHERE j.value != ?
                ),
                updated_at = ?, revision = revision + 1
            WHERE {where}
            """,
            (task_id, datetime.now(UTC).isoformat(), *params),
        )
        return cursor.rowcount > 0

    @staticmethod
    def _row_to_tasklist(row: aiosqlite.Row) -> Tasklist:
        """将数据库行转换为 Tasklist 模型"""
        return Tasklist(
            id=row[0],
            owner=row[1],
            title=row[2],
            order=row[3],
            tasks=json.loads(row[4]) if row[4] else [],
            created_at=datetime.fromisoformat(row[5]),
            updated_at=datetime.fromisoformat(row[6]),
            revision=row[7],
        )

    @staticmethod
    def _row_to_default_list(row: aiosqlite.Row) -> DefaultList:
        """将数据库行转换为 DefaultList 模型"""
        return DefaultList(
            id=row[0],
            owner=row[1],
            title=row[2],
            tasks=json.loads(row[3]) if row[3] else [],
            created_at=datetime.fromisoformat(row[4]),
            updated_at=datetime.fromisoformat(row[5]),
            revision=row[6],
        )
