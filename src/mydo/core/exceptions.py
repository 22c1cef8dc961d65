"""mydo 异常体系

领域层与存储层抛出的异常，由 gateway 统一映射为 HTTP 状态码：

- ValidationError -> 400
- AuthenticationError -> 401
- InvalidReferenceError -> 401（删除清单接口的历史行为）
- NotFoundError -> 404
- StorageError -> 500
"""

from pydantic import ValidationError as PydanticValidationError


class MydoError(Exception):
    """mydo 基础异常"""

    def __init__(self, message: str = "") -> None:
        super().__init__(message)
        self.message = message


class ValidationError(MydoError):
    """请求体或实体字段不满足约束

    Validation Gate 与存储层（实体模型二次校验）都会抛出此异常。
    """

    def __init__(self, message: str = "Invalid body", issues: list | None = None) -> None:
        """
        Args:
            message: 错误描述
            issues: 可选的字段级问题列表（不保证返回给调用方）
        """
        super().__init__(message)
        self.issues = issues or []

    @classmethod
    def from_pydantic(cls, exc: PydanticValidationError) -> "ValidationError":
        """由实体模型校验失败构造，错误压缩为单行描述"""
        message = "; ".join(
            f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in exc.errors()
        )
        return cls(message, issues=exc.errors())


class AuthenticationError(MydoError):
    """无法解析出请求的 owner"""

    def __init__(self, message: str = "User must be authenticated") -> None:
        super().__init__(message)


class NotFoundError(MydoError):
    """请求形状合法，但没有匹配的、属于该 owner 的记录"""

    def __init__(self, entity: str, entity_id: str | None = None) -> None:
        """
        Args:
            entity: 实体类型（task / tasklist / default_list）
            entity_id: 查询使用的 id
        """
        if entity_id:
            super().__init__(f"{entity} {entity_id} not found")
        else:
            super().__init__(f"{entity} not found")
        self.entity = entity
        self.entity_id = entity_id


class InvalidReferenceError(MydoError):
    """删除清单请求体形状错误（保留的 401 历史行为）"""

    def __init__(self, message: str = "Invalid tasklist reference") -> None:
        super().__init__(message)


class StorageError(MydoError):
    """持久化层异常，不做重试，直接以 500 暴露"""


class InvalidObjectIdError(StorageError):
    """id 无法转换为 ObjectId 形式（对应文档库的 cast 失败）"""

    def __init__(self, value: object) -> None:
        super().__init__(f"Cast to ObjectId failed for value {value!r}")
        self.value = value
