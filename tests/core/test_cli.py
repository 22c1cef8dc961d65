"""CLI 测试 -- python -m mydo.core

测试内容：
1. 缺少命令 / 未知命令退出码 1
2. sweep-orphans 删除孤儿任务
"""

import asyncio
import sys
from pathlib import Path

import pytest

from mydo.core.__main__ import main
from mydo.core.store import create_store_group

OWNER = "0xowner"


async def _seed_orphan(db_path: Path) -> str:
    group = await create_store_group(str(db_path))
    try:
        task = await group.task_store.create_task({"title": "orphan"}, OWNER)
        await group.conn.commit()
        return task.id
    finally:
        await group.conn.close()


async def _task_exists(db_path: Path, task_id: str) -> bool:
    group = await create_store_group(str(db_path))
    try:
        return await group.task_store.get_task(task_id, OWNER) is not None
    finally:
        await group.conn.close()


class TestCli:
    def test_no_command(self, monkeypatch):
        monkeypatch.setattr(sys, "argv", ["mydo.core"])
        with pytest.raises(SystemExit) as exc_info:
            main()
        assert exc_info.value.code == 1

    def test_unknown_command(self, monkeypatch, capsys):
        monkeypatch.setattr(sys, "argv", ["mydo.core", "frobnicate"])
        with pytest.raises(SystemExit):
            main()
        assert "frobnicate" in capsys.readouterr().out

    def test_sweep_dry_run_then_sweep(self, monkeypatch, tmp_path, capsys):
        db_path = tmp_path / "cli.db"
        monkeypatch.setenv("MYDO_DB_PATH", str(db_path))
        task_id = asyncio.run(_seed_orphan(db_path))

        monkeypatch.setattr(sys, "argv", ["mydo.core", "sweep-orphans", OWNER, "--dry-run"])
        main()
        assert "1 个孤儿任务" in capsys.readouterr().out
        assert asyncio.run(_task_exists(db_path, task_id))

        monkeypatch.setattr(sys, "argv", ["mydo.core", "sweep-orphans"])
        main()
        assert not asyncio.run(_task_exists(db_path, task_id))
