"""
上下文变量模型 - 随会话初始化消息或 setVariables 消息发送给 Bot 的变量。

运行时按 type 字段区分变量类型，这里用 Pydantic 的可辨识联合（discriminated union）
表达，反序列化时根据 type 自动选择具体的模型类。

【Java 开发者类比】
- AnyVariable 相当于 Jackson 的 @JsonTypeInfo + @JsonSubTypes 多态接口
- Literal["text"] 相当于子类上固定的 type 常量
"""

from typing import Annotated, Any, Literal, Union

from pydantic import Field

from einsteinbot.models.base import WireModel


class TextVariable(WireModel):
    name: str
    type: Literal["text"] = "text"
    value: str | None = None


class BooleanVariable(WireModel):
    name: str
    type: Literal["boolean"] = "boolean"
    value: bool | None = None


class NumberVariable(WireModel):
    name: str
    type: Literal["number"] = "number"
    value: float | None = None


class DateVariable(WireModel):
    name: str
    type: Literal["date"] = "date"
    value: str | None = None  # yyyy-MM-dd


class DateTimeVariable(WireModel):
    name: str
    type: Literal["dateTime"] = "dateTime"
    value: str | None = None  # ISO-8601


class MoneyVariable(WireModel):
    name: str
    type: Literal["money"] = "money"
    value: str | None = None  # 形如 "USD 10.00"


class RefVariable(WireModel):
    name: str
    type: Literal["ref"] = "ref"
    value: str | None = None  # 记录 ID


class ObjectVariable(WireModel):
    name: str
    type: Literal["object"] = "object"
    value: list["AnyVariable"] = Field(default_factory=list)


class ListVariable(WireModel):
    name: str
    type: Literal["list"] = "list"
    value: list[dict[str, Any]] = Field(default_factory=list)


AnyVariable = Annotated[
    Union[
        TextVariable,
        BooleanVariable,
        NumberVariable,
        DateVariable,
        DateTimeVariable,
        MoneyVariable,
        RefVariable,
        ObjectVariable,
        ListVariable,
    ],
    Field(discriminator="type"),
]

ObjectVariable.model_rebuild()
