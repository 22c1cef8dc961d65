"""SQLite 数据库初始化

PRAGMA 配置 + 三张表 DDL + 索引创建。
使用 aiosqlite 异步操作。嵌套值（repeat / steps / 成员 id 序列）以 JSON 文本存储。
"""

import aiosqlite

# tasks 表 DDL
_TASKS_DDL = """
CREATE TABLE IF NOT EXISTS tasks (
    id          TEXT PRIMARY KEY,
    owner       TEXT NOT NULL,
    title       TEXT NOT NULL,
    due_date    TEXT,
    important   INTEGER NOT NULL DEFAULT 0,
    my_day      INTEGER NOT NULL DEFAULT 0,
    done        INTEGER NOT NULL DEFAULT 0,
    repeat      TEXT,
    steps       TEXT NOT NULL DEFAULT '[]',
    created_at  TEXT NOT NULL,
    updated_at  TEXT NOT NULL,
    revision    INTEGER NOT NULL DEFAULT 0
);
"""

_TASKS_INDEXES = [
    "CREATE INDEX IF NOT EXISTS idx_tasks_owner_important ON tasks(owner, important);",
    "CREATE INDEX IF NOT EXISTS idx_tasks_owner_my_day ON tasks(owner, my_day);",
]

# tasklists 表 DDL（order 是 SQL 关键字，列名使用 list_order）
_TASKLISTS_DDL = """
CREATE TABLE IF NOT EXISTS tasklists (
    id          TEXT PRIMARY KEY,
    owner       TEXT NOT NULL,
    title       TEXT NOT NULL,
    list_order  INTEGER NOT NULL,
    tasks       TEXT NOT NULL DEFAULT '[]',
    created_at  TEXT NOT NULL,
    updated_at  TEXT NOT NULL,
    revision    INTEGER NOT NULL DEFAULT 0
);
"""

_TASKLISTS_INDEXES = [
    "CREATE INDEX IF NOT EXISTS idx_tasklists_owner_order ON tasklists(owner, list_order);",
]

# default_lists 表 DDL
_DEFAULT_LISTS_DDL = """
CREATE TABLE IF NOT EXISTS default_lists (
    id          TEXT PRIMARY KEY,
    owner       TEXT NOT NULL,
    title       TEXT NOT NULL,
    tasks       TEXT NOT NULL DEFAULT '[]',
    created_at  TEXT NOT NULL,
    updated_at  TEXT NOT NULL,
    revision    INTEGER NOT NULL DEFAULT 0
);
"""

_DEFAULT_LISTS_INDEXES = [
    # 每个 owner 至多一个 DefaultList
    "CREATE UNIQUE INDEX IF NOT EXISTS idx_default_lists_owner ON default_lists(owner);",
]


async def init_db(conn: aiosqlite.Connection) -> None:
    """初始化数据库：设置 PRAGMA + 创建表 + 创建索引

    Args:
        conn: aiosqlite 数据库连接
    """
    # 设置 PRAGMA
    await conn.execute("PRAGMA journal_mode = WAL;")
    await conn.execute("PRAGMA busy_timeout = 5000;")

    # 创建表
    await conn.execute(_TASKS_DDL)
    await conn.execute(_TASKLISTS_DDL)
    await conn.execute(_DEFAULT_LISTS_DDL)

    # 创建索引
    for idx_sql in _TASKS_INDEXES + _TASKLISTS_INDEXES + _DEFAULT_LISTS_INDEXES:
        await conn.execute(idx_sql)

    await conn.commit()


async def verify_wal_mode(conn: aiosqlite.Connection) -> bool:
    """验证 WAL 模式是否生效

    Returns:
        True 如果 WAL 模式已启用
    """
    cursor = await conn.execute("PRAGMA journal_mode;")
    row = await cursor.fetchone()
    return row is not None and row[0].lower() == "wal"
