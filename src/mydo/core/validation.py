"""Validation Gate -- 声明式校验规则 + 通用解释器

规则是一组带 kind 标签的 pydantic 模型（string / integer / number /
boolean / enum / array / object），由 validate() 统一解释执行。
校验是纯函数：不修改输入，不产生副作用，只返回问题列表。
"""

import re
from collections.abc import Callable
from datetime import date
from typing import Annotated, Any, Literal

from pydantic import BaseModel, Field

from .ids import is_object_id

_DATE_RE = re.compile(r"\d{4}-\d{2}-\d{2}")


class StringRule(BaseModel):
    """字符串规则"""

    kind: Literal["string"] = "string"
    min_length: int | None = Field(default=None, ge=0)
    pattern: str | None = Field(default=None, description="re.search 语义的正则")
    format: Literal["date", "object-id"] | None = Field(default=None)


class IntegerRule(BaseModel):
    """整数规则（整值浮点数视为整数，布尔值不是整数）"""

    kind: Literal["integer"] = "integer"
    minimum: int | None = None


class NumberRule(BaseModel):
    """数值规则"""

    kind: Literal["number"] = "number"
    minimum: float | None = None


class BooleanRule(BaseModel):
    """布尔规则"""

    kind: Literal["boolean"] = "boolean"


class EnumRule(BaseModel):
    """枚举规则"""

    kind: Literal["enum"] = "enum"
    values: list[Any] = Field(min_length=1)


class ArrayRule(BaseModel):
    """数组规则，items 为空时不检查元素"""

    kind: Literal["array"] = "array"
    items: "Rule | None" = None


class ObjectRule(BaseModel):
    """对象规则"""

    kind: Literal["object"] = "object"
    properties: dict[str, "Rule"] = Field(default_factory=dict)
    required: list[str] = Field(default_factory=list)
    additional_properties: bool = Field(default=True, description="是否允许未声明字段")


Rule = Annotated[
    StringRule | IntegerRule | NumberRule | BooleanRule | EnumRule | ArrayRule | ObjectRule,
    Field(discriminator="kind"),
]

ArrayRule.model_rebuild()
ObjectRule.model_rebuild()


class ValidationIssue(BaseModel):
    """单条校验问题"""

    path: str = Field(description="出错位置，形如 $.repeat.amount")
    message: str


class ValidationResult(BaseModel):
    """校验结果，errors 为空即为通过"""

    errors: list[ValidationIssue] = Field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


def validate(instance: Any, rule: Rule) -> ValidationResult:
    """按规则校验任意 JSON 值

    Args:
        instance: 已解析的 JSON 值
        rule: 校验规则

    Returns:
        ValidationResult，包含零个或多个问题
    """
    errors: list[ValidationIssue] = []
    _check(instance, rule, "$", errors)
    return ValidationResult(errors=errors)


def _check(instance: Any, rule: Rule, path: str, errors: list[ValidationIssue]) -> None:
    _CHECKERS[rule.kind](instance, rule, path, errors)


def _is_integer(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return True
    return isinstance(value, float) and value.is_integer()


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _is_date(value: str) -> bool:
    if not _DATE_RE.fullmatch(value):
        return False
    try:
        date.fromisoformat(value)
    except ValueError:
        return False
    return True


def _check_string(value: Any, rule: StringRule, path: str, errors: list[ValidationIssue]) -> None:
    if not isinstance(value, str):
        errors.append(ValidationIssue(path=path, message="is not of a type(s) string"))
        return
    if rule.min_length is not None and len(value) < rule.min_length:
        errors.append(
            ValidationIssue(
                path=path,
                message=f"does not meet minimum length of {rule.min_length}",
            )
        )
    if rule.pattern is not None and re.search(rule.pattern, value) is None:
        errors.append(
            ValidationIssue(path=path, message=f'does not match pattern "{rule.pattern}"')
        )
    if rule.format == "date" and not _is_date(value):
        errors.append(ValidationIssue(path=path, message='does not conform to the "date" format'))
    elif rule.format == "object-id" and not is_object_id(value):
        errors.append(
            ValidationIssue(path=path, message='does not conform to the "object-id" format')
        )


def _check_integer(value: Any, rule: IntegerRule, path: str, errors: list[ValidationIssue]) -> None:
    if not _is_integer(value):
        errors.append(ValidationIssue(path=path, message="is not of a type(s) integer"))
        return
    if rule.minimum is not None and value < rule.minimum:
        errors.append(
            ValidationIssue(path=path, message=f"must be greater than or equal to {rule.minimum}")
        )


def _check_number(value: Any, rule: NumberRule, path: str, errors: list[ValidationIssue]) -> None:
    if not _is_number(value):
        errors.append(ValidationIssue(path=path, message="is not of a type(s) number"))
        return
    if rule.minimum is not None and value < rule.minimum:
        errors.append(
            ValidationIssue(path=path, message=f"must be greater than or equal to {rule.minimum}")
        )


def _check_boolean(value: Any, rule: BooleanRule, path: str, errors: list[ValidationIssue]) -> None:
    if not isinstance(value, bool):
        errors.append(ValidationIssue(path=path, message="is not of a type(s) boolean"))


def _check_enum(value: Any, rule: EnumRule, path: str, errors: list[ValidationIssue]) -> None:
    # bool 与 int 在 Python 中相等，需要按类型区分
    matched = any(
        value == candidate and type(value) is type(candidate) for candidate in rule.values
    )
    if not matched:
        allowed = ",".join(str(v) for v in rule.values)
        errors.append(ValidationIssue(path=path, message=f"is not one of enum values: {allowed}"))


def _check_array(value: Any, rule: ArrayRule, path: str, errors: list[ValidationIssue]) -> None:
    if not isinstance(value, list):
        errors.append(ValidationIssue(path=path, message="is not of a type(s) array"))
        return
    if rule.items is None:
        return
    for index, item in enumerate(value):
        _check(item, rule.items, f"{path}[{index}]", errors)


def _check_object(value: Any, rule: ObjectRule, path: str, errors: list[ValidationIssue]) -> None:
    if not isinstance(value, dict):
        errors.append(ValidationIssue(path=path, message="is not of a type(s) object"))
        return

    for name in rule.required:
        if name not in value:
            errors.append(ValidationIssue(path=path, message=f'requires property "{name}"'))

    for name, item in value.items():
        child_rule = rule.properties.get(name)
        if child_rule is not None:
            _check(item, child_rule, f"{path}.{name}", errors)
        elif not rule.additional_properties:
            errors.append(
                ValidationIssue(
                    path=path,
                    message=f'is not allowed to have the additional property "{name}"',
                )
            )


_CHECKERS: dict[str, Callable[[Any, Any, str, list[ValidationIssue]], None]] = {
    "string": _check_string,
    "integer": _check_integer,
    "number": _check_number,
    "boolean": _check_boolean,
    "enum": _check_enum,
    "array": _check_array,
    "object": _check_object,
}
