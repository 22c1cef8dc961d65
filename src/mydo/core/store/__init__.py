"""mydo Core Store -- SQLite 持久化实现

提供工厂函数创建共享数据库连接的 Store 实例组。
"""

from pathlib import Path

import aiosqlite

from ..config import get_default_list_title
from .list_store import SqliteListStore
from .sqlite_init import init_db
from .task_store import SqliteTaskStore


class StoreGroup:
    """Store 实例组 -- 共享同一个数据库连接"""

    def __init__(
        self,
        conn: aiosqlite.Connection,
        default_list_title: str | None = None,
    ) -> None:
        self.conn = conn
        self.task_store = SqliteTaskStore(conn)
        self.list_store = SqliteListStore(
            conn,
            default_list_title=default_list_title or get_default_list_title(),
        )


async def create_store_group(
    db_path: str,
    default_list_title: str | None = None,
) -> StoreGroup:
    """创建 Store 实例组

    Args:
        db_path: SQLite 数据库文件路径
        default_list_title: 自动创建的 DefaultList 标题，默认读取配置

    Returns:
        StoreGroup 实例
    """
    # 确保数据库目录存在
    db_dir = Path(db_path).parent
    db_dir.mkdir(parents=True, exist_ok=True)

    conn = await aiosqlite.connect(db_path)
    conn.row_factory = aiosqlite.Row
    await init_db(conn)

    return StoreGroup(conn=conn, default_list_title=default_list_title)


__all__ = [
    "StoreGroup",
    "create_store_group",
    "SqliteTaskStore",
    "SqliteListStore",
    "init_db",
]
