"""请求体校验规则集

每个接口对应一个命名规则，由 Validation Gate 在任何写操作之前执行。
"""

from typing import Any

from .config import INVALID_BODY_MESSAGE
from .exceptions import ValidationError
from .models.enums import RepeatUnit
from .validation import (
    ArrayRule,
    BooleanRule,
    EnumRule,
    IntegerRule,
    NumberRule,
    ObjectRule,
    Rule,
    StringRule,
    ValidationResult,
    validate,
)

_OBJECT_ID = StringRule(format="object-id")

_REPEAT_UNIT = EnumRule(values=[unit.value for unit in RepeatUnit])

_REPEAT = ObjectRule(
    properties={
        "amount": IntegerRule(minimum=1),
        "unit": _REPEAT_UNIT,
    },
    required=["amount", "unit"],
)
# dueEvery 与 repeat 同结构，可任意层嵌套
_REPEAT.properties["dueEvery"] = _REPEAT

_STEP = ObjectRule(
    properties={
        "order": NumberRule(minimum=0),
        "complete": BooleanRule(),
        "title": StringRule(min_length=1),
    },
    required=["order", "title"],
    additional_properties=False,
)

SCHEMAS: dict[str, Rule] = {
    "create_task": ObjectRule(
        properties={
            "title": StringRule(),
            "dueDate": StringRule(format="date"),
            "repeat": _REPEAT,
            "important": BooleanRule(),
            "myDay": BooleanRule(),
            "steps": ArrayRule(items=_STEP),
            "listId": _OBJECT_ID,
        },
        required=["title"],
    ),
    "update_task": ObjectRule(
        properties={
            "taskId": _OBJECT_ID,
            "title": StringRule(),
            "dueDate": StringRule(format="date"),
            "repeat": _REPEAT,
            "important": BooleanRule(),
            "myDay": BooleanRule(),
            "steps": ArrayRule(items=_STEP),
        },
        required=["taskId"],
        additional_properties=False,
    ),
    "finish_task": ObjectRule(
        properties={"taskId": _OBJECT_ID},
        required=["taskId"],
        additional_properties=False,
    ),
    # taskId 仅要求非空；格式错误会在存储层 cast 时失败
    "delete_task": ObjectRule(
        properties={
            "taskId": StringRule(min_length=1),
            "listId": StringRule(min_length=1),
        },
        required=["taskId"],
    ),
    "create_tasklist": ObjectRule(
        properties={"title": StringRule()},
        required=["title"],
        additional_properties=False,
    ),
    "delete_tasklist": ObjectRule(
        properties={"tasklistId": _OBJECT_ID},
        required=["tasklistId"],
    ),
    "rename_tasklist": ObjectRule(
        properties={
            "tasklistId": _OBJECT_ID,
            "newTitle": StringRule(),
        },
        required=["tasklistId", "newTitle"],
    ),
    "list_tasklists": ObjectRule(additional_properties=False),
    "tasks_in_list": ObjectRule(
        properties={"tasklistId": _OBJECT_ID},
        additional_properties=False,
    ),
}


def check_payload(payload: Any, schema_name: str) -> ValidationResult:
    """按命名规则校验请求体

    Raises:
        KeyError: 未知的规则名
    """
    return validate(payload, SCHEMAS[schema_name])


def require_valid(payload: Any, schema_name: str) -> dict[str, Any]:
    """校验请求体，失败时抛出 ValidationError

    Returns:
        通过校验的请求体（原对象）

    Raises:
        ValidationError: 存在任何校验问题
    """
    result = check_payload(payload, schema_name)
    if not result.ok:
        raise ValidationError(INVALID_BODY_MESSAGE, issues=result.errors)
    return payload
