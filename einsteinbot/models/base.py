"""
报文模型基类。

运行时 API 的 JSON 使用 camelCase 键名，Python 侧使用 snake_case 字段名。
WireModel 通过 alias_generator 自动完成两者的映射，序列化时去掉值为 None 的字段。
"""

from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class WireModel(BaseModel):
    """所有请求/响应报文模型的基类。"""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,  # 允许用 snake_case 字段名构造
    )

    def to_payload(self) -> dict[str, Any]:
        """转换为可直接 JSON 编码的字典（camelCase 键名，省略 None）。"""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
