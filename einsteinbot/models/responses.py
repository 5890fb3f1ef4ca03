"""
响应报文模型。

运行时返回的消息类型较多（text、choices、escalate、sessionEnded、
richContent 等），而且会随 API 版本扩充。SDK 不穷举这些类型，
ResponseMessage 只固定 type/id 等公共字段，其余字段原样保留（extra="allow"），
调用方可以通过 model_extra 或 to_payload() 访问。

- ResponseEnvelope            : 开启会话的响应（带 sessionId）
- ChatMessageResponseEnvelope : 继续/结束会话的响应（不带 sessionId）
- ErrorPayload                : 非 2xx 时的错误报文
- Status / SupportedVersions  : 健康检查与版本列表
"""

from typing import Any

from pydantic import ConfigDict, Field

from einsteinbot.models.base import WireModel


class ResponseMessage(WireModel):
    model_config = ConfigDict(extra="allow")

    type: str
    id: str | None = None
    schedule: dict[str, Any] | None = None

    @property
    def display_text(self) -> str | None:
        """文本类消息的正文，其余类型返回 None。"""
        extra = self.model_extra or {}
        return extra.get("text") or extra.get("message")


class ChatMessageResponseEnvelope(WireModel):
    model_config = ConfigDict(extra="allow")

    messages: list[ResponseMessage] = Field(default_factory=list)
    processed_sequence_ids: list[int] = Field(default_factory=list)
    bot_version: str | None = None
    links: dict[str, Any] | None = Field(default=None, alias="_links")


class ResponseEnvelope(ChatMessageResponseEnvelope):
    session_id: str
    external_session_key: str | None = None


class ErrorPayload(WireModel):
    model_config = ConfigDict(extra="allow")

    status: int | None = None
    path: str | None = None
    request_id: str | None = None
    error: str | None = None
    message: str | None = None
    timestamp: int | None = None


class Status(WireModel):
    status: str


class SupportedVersion(WireModel):
    version_number: str
    status: str | None = None
    url: str | None = None


class SupportedVersions(WireModel):
    versions: list[SupportedVersion] = Field(default_factory=list)


def to_response_envelope(
    session_id: str, envelope: ChatMessageResponseEnvelope
) -> ResponseEnvelope:
    """把不带会话 ID 的响应补全为 ResponseEnvelope，便于调用方统一处理。"""
    data = envelope.model_dump(by_alias=True)
    data["sessionId"] = session_id
    return ResponseEnvelope.model_validate(data)
