"""任务路由

POST /task: 创建任务（挂到 listId 对应清单或 DefaultList）
GET /task/important, GET /task/myDay: 按标记查询
PUT /task/mark: 翻转完成状态
PUT /task: 局部更新任务字段
DELETE /task: 删除任务并摘除清单引用
"""

from typing import Any

from fastapi import APIRouter, Depends
from mydo.core.models import TaskFlag
from starlette.responses import JSONResponse, Response

from ..auth import get_owner
from ..deps import get_json_body, get_store_group
from ..services.task_service import TaskService

router = APIRouter(prefix="/task")


@router.post("")
async def create_task(
    owner: str = Depends(get_owner),
    body: dict[str, Any] = Depends(get_json_body),
    store_group=Depends(get_store_group),
):
    """创建任务，返回任务投影"""
    service = TaskService(store_group)
    task = await service.create_task(owner, body)
    return JSONResponse(status_code=200, content=task)


@router.get("/important")
async def list_important(
    owner: str = Depends(get_owner),
    store_group=Depends(get_store_group),
):
    """查询 important 为 true 的任务"""
    service = TaskService(store_group)
    return await service.list_flagged(owner, TaskFlag.IMPORTANT)


@router.get("/myDay")
async def list_my_day(
    owner: str = Depends(get_owner),
    store_group=Depends(get_store_group),
):
    """查询 myDay 为 true 的任务"""
    service = TaskService(store_group)
    return await service.list_flagged(owner, TaskFlag.MY_DAY)


@router.put("/mark")
async def mark_task(
    owner: str = Depends(get_owner),
    body: dict[str, Any] = Depends(get_json_body),
    store_group=Depends(get_store_group),
):
    """翻转完成状态，返回 {id, done}"""
    service = TaskService(store_group)
    return await service.toggle_done(owner, body)


@router.put("")
async def update_task(
    owner: str = Depends(get_owner),
    body: dict[str, Any] = Depends(get_json_body),
    store_group=Depends(get_store_group),
):
    """局部更新任务，返回更新后的投影"""
    service = TaskService(store_group)
    return await service.update_task(owner, body)


@router.delete("")
async def delete_task(
    owner: str = Depends(get_owner),
    body: dict[str, Any] = Depends(get_json_body),
    store_group=Depends(get_store_group),
):
    """删除任务

    - 任务或引用任一存在返回 204
    - 两者都不存在返回 404
    - id 无法转换时返回 500
    """
    service = TaskService(store_group)
    await service.delete_task(owner, body)
    return Response(status_code=204)
