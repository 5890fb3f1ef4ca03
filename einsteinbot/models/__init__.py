"""
报文模型模块 - 运行时 REST API 的请求/响应数据结构。

- variables.py : 上下文变量（按 type 区分的可辨识联合）
- messages.py  : 请求消息变体、会话初始化消息、请求信封
- responses.py : 响应信封、错误报文、健康检查与版本列表
"""

from einsteinbot.models.messages import (
    AnyRequestMessage,
    ChatMessageEnvelope,
    ChoiceMessage,
    EndSessionMessage,
    EndSessionReason,
    ForceConfig,
    InitMessageEnvelope,
    RedirectMessage,
    Referrer,
    ResponseOptions,
    RichContentCapability,
    SetVariablesMessage,
    TextInitMessage,
    TextMessage,
    TransferFailedRequestMessage,
    TransferFailureReason,
    TransferSucceededRequestMessage,
    build_init_message,
)
from einsteinbot.models.responses import (
    ChatMessageResponseEnvelope,
    ErrorPayload,
    ResponseEnvelope,
    ResponseMessage,
    Status,
    SupportedVersion,
    SupportedVersions,
    to_response_envelope,
)
from einsteinbot.models.variables import AnyVariable, BooleanVariable, TextVariable

__all__ = [
    "AnyRequestMessage",
    "AnyVariable",
    "BooleanVariable",
    "ChatMessageEnvelope",
    "ChatMessageResponseEnvelope",
    "ChoiceMessage",
    "EndSessionMessage",
    "EndSessionReason",
    "ErrorPayload",
    "ForceConfig",
    "InitMessageEnvelope",
    "RedirectMessage",
    "Referrer",
    "ResponseEnvelope",
    "ResponseMessage",
    "ResponseOptions",
    "RichContentCapability",
    "SetVariablesMessage",
    "Status",
    "SupportedVersion",
    "SupportedVersions",
    "TextInitMessage",
    "TextMessage",
    "TextVariable",
    "TransferFailedRequestMessage",
    "TransferFailureReason",
    "TransferSucceededRequestMessage",
    "build_init_message",
    "to_response_envelope",
]
