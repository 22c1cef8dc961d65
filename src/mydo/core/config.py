"""配置常量模块 -- 可通过环境变量覆盖

包含数据库路径、默认列表标题等可配置常量。
"""

import os
from pathlib import Path


def _get_base_dir() -> Path:
    """获取项目 data 基础目录"""
    return Path(os.environ.get("MYDO_DATA_DIR", "data"))


def get_db_path() -> str:
    """获取 SQLite 数据库路径"""
    return os.environ.get(
        "MYDO_DB_PATH",
        str(_get_base_dir() / "sqlite" / "mydo.db"),
    )


def get_default_list_title() -> str:
    """获取自动创建的 DefaultList 标题"""
    return os.environ.get("MYDO_DEFAULT_LIST_TITLE", "Tasks").strip() or "Tasks"


# 对外 id 格式：24 位十六进制（文档库 ObjectId 形式）
OBJECT_ID_PATTERN: str = r"[0-9a-fA-F]{24}"

# 校验失败时返回给调用方的通用提示（不保证字段级细节）
INVALID_BODY_MESSAGE: str = "Invalid body"
