"""清单路由

POST /tasklist: 创建清单
DELETE /tasklist/remove: 删除清单及其成员任务
PUT /tasklist/title: 重命名清单
GET /tasklist/allTasklists: 查询全部清单的 {id, title}
GET /tasklist/tasksInList: 按成员顺序查询清单内任务
"""

from typing import Any

from fastapi import APIRouter, Depends, Request
from mydo.core.exceptions import InvalidReferenceError, NotFoundError, ValidationError
from starlette.responses import JSONResponse, Response

from ..auth import get_owner
from ..config import GatewayConfig
from ..deps import get_gateway_config, get_json_body, get_store_group
from ..errors import error_body
from ..services.tasklist_service import TasklistService

router = APIRouter(prefix="/tasklist")


@router.post("")
async def create_tasklist(
    owner: str = Depends(get_owner),
    body: dict[str, Any] = Depends(get_json_body),
    store_group=Depends(get_store_group),
):
    """创建清单，返回清单投影"""
    service = TasklistService(store_group)
    tasklist = await service.create_tasklist(owner, body)
    return JSONResponse(status_code=200, content=tasklist)


@router.delete("/remove")
async def remove_tasklist(
    owner: str = Depends(get_owner),
    body: dict[str, Any] = Depends(get_json_body),
    store_group=Depends(get_store_group),
    config: GatewayConfig = Depends(get_gateway_config),
):
    """删除清单

    legacy_status_codes 开启时（默认）：
    - 请求体不合法返回 401
    - 清单不存在返回 400
    关闭时分别返回 400 / 404。
    """
    service = TasklistService(store_group)

    try:
        await service.delete_tasklist(owner, body)
    except ValidationError as e:
        if config.legacy_status_codes:
            raise InvalidReferenceError() from e
        raise
    except NotFoundError as e:
        if config.legacy_status_codes:
            return JSONResponse(
                status_code=400,
                content=error_body("TASKLIST_NOT_FOUND", e.message),
            )
        raise

    return Response(status_code=200)


@router.put("/title")
async def rename_tasklist(
    owner: str = Depends(get_owner),
    body: dict[str, Any] = Depends(get_json_body),
    store_group=Depends(get_store_group),
):
    """重命名清单，返回更新后的投影"""
    service = TasklistService(store_group)
    return await service.rename_tasklist(owner, body)


@router.get("/allTasklists")
async def all_tasklists(
    owner: str = Depends(get_owner),
    body: dict[str, Any] = Depends(get_json_body),
    store_group=Depends(get_store_group),
):
    """查询全部清单标题，请求体只能为空或 {}"""
    service = TasklistService(store_group)
    return await service.list_tasklist_titles(owner, body)


@router.get("/tasksInList")
async def tasks_in_list(
    request: Request,
    owner: str = Depends(get_owner),
    store_group=Depends(get_store_group),
):
    """查询清单内任务；未给出 tasklistId 时读取 DefaultList"""
    service = TasklistService(store_group)
    return await service.tasks_in_list(owner, dict(request.query_params))
