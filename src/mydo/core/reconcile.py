"""孤儿任务清理

创建任务时先写 Task 再挂到清单，中途失败会留下不被任何清单引用的 Task。
这里提供一次性扫描：找出未被任何清单（含 DefaultList）引用的任务并删除。
仅由 CLI 手动触发，不在请求路径上自动运行。
"""

import time

import aiosqlite
import structlog

from .store.protocols import ListStore, TaskStore

log = structlog.get_logger()


async def find_orphans(
    task_store: TaskStore,
    list_store: ListStore,
    owner: str | None = None,
) -> list[tuple[str, str]]:
    """找出未被引用的任务

    Args:
        task_store: TaskStore 实例
        list_store: ListStore 实例
        owner: 只扫描该 owner；None 表示全部

    Returns:
        (task_id, owner) 列表，按创建时间排序
    """
    referenced = await list_store.referenced_task_ids(owner)
    keys = await task_store.list_task_keys(owner)
    return [(task_id, task_owner) for task_id, task_owner in keys if task_id not in referenced]


async def sweep_orphans(
    conn: aiosqlite.Connection,
    task_store: TaskStore,
    list_store: ListStore,
    owner: str | None = None,
    dry_run: bool = False,
) -> list[str]:
    """删除孤儿任务

    Args:
        conn: 数据库连接
        task_store: TaskStore 实例
        list_store: ListStore 实例
        owner: 只清理该 owner；None 表示全部
        dry_run: 只统计不删除

    Returns:
        孤儿任务 id 列表
    """
    start_time = time.monotonic()

    orphans = await find_orphans(task_store, list_store, owner)
    await log.ainfo(
        "orphan_sweep_started",
        owner=owner,
        orphan_count=len(orphans),
        dry_run=dry_run,
    )

    if not dry_run:
        for task_id, task_owner in orphans:
            await task_store.delete_task(task_id, task_owner)
        await conn.commit()

    elapsed_ms = int((time.monotonic() - start_time) * 1000)
    await log.ainfo(
        "orphan_sweep_completed",
        owner=owner,
        orphan_count=len(orphans),
        dry_run=dry_run,
        elapsed_ms=elapsed_ms,
    )

    return [task_id for task_id, _ in orphans]
