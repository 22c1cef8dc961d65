"""CLI 入口模块 -- python -m mydo.core <command>

支持的命令：
  sweep-orphans [owner] [--dry-run]  删除未被任何清单引用的任务
"""

import asyncio
import sys

from .config import get_db_path


def main() -> None:
    """CLI 主入口"""
    if len(sys.argv) < 2:
        print("用法: python -m mydo.core <command>")
        print("命令:")
        print("  sweep-orphans [owner] [--dry-run]  删除未被任何清单引用的任务")
        sys.exit(1)

    command = sys.argv[1]

    if command == "sweep-orphans":
        args = sys.argv[2:]
        dry_run = "--dry-run" in args
        positional = [arg for arg in args if not arg.startswith("--")]
        owner = positional[0] if positional else None
        asyncio.run(sweep(owner, dry_run))
    else:
        print(f"未知命令: {command}")
        print("可用命令: sweep-orphans")
        sys.exit(1)


async def sweep(owner: str | None, dry_run: bool) -> None:
    """执行孤儿任务清理"""
    from .reconcile import sweep_orphans
    from .store import create_store_group

    db_path = get_db_path()

    print(f"数据库路径: {db_path}")
    print(f"清理范围: {owner or '全部 owner'}")

    store_group = await create_store_group(db_path)

    try:
        orphan_ids = await sweep_orphans(
            store_group.conn,
            store_group.task_store,
            store_group.list_store,
            owner=owner,
            dry_run=dry_run,
        )
        verb = "发现" if dry_run else "删除"
        print(f"清理完成，{verb} {len(orphan_ids)} 个孤儿任务")
    finally:
        await store_group.conn.close()


if __name__ == "__main__":
    main()
