"""
请求消息与会话报文模型。

【请求消息（AnyRequestMessage）】
发往运行时的消息是一个封闭的变体集合，用 type 字段区分：
- text              : 用户文本
- choice            : 用户点选了 Bot 给出的选项
- redirect          : 跳转到指定对话（dialog）
- transferSucceeded : 转人工成功
- transferFailed    : 转人工失败
- endSession        : 结束会话
- setVariables      : 设置上下文变量

每个变体都带 sequence_id，由会话管理器在发送前填写。

【会话初始化消息（TextInitMessage）】
会话的第一条消息必须是文本，发送前会被转换为不带 type 的 TextInitMessage。

【信封（Envelope）】
- InitMessageEnvelope : 开启会话的请求体
- ChatMessageEnvelope : 继续会话的请求体
"""

from enum import Enum
from typing import Annotated, Any, Literal, Union

from pydantic import Field

from einsteinbot.models.base import WireModel
from einsteinbot.models.variables import AnyVariable


class EndSessionReason(str, Enum):
    """结束会话的原因，通过 X-Session-End-Reason 请求头发送。"""

    USER_REQUEST = "UserRequest"
    TRANSFER = "Transfer"
    EXPIRATION = "Expiration"
    ERROR = "Error"
    OTHER = "Other"


class TransferFailureReason(str, Enum):
    NO_AGENT_AVAILABLE = "NoAgentAvailable"
    ERROR = "Error"


class TextMessage(WireModel):
    type: Literal["text"] = "text"
    text: str
    sequence_id: int | None = None
    in_reply_to_message_id: str | None = None


class ChoiceMessage(WireModel):
    type: Literal["choice"] = "choice"
    choice_index: int | None = None
    choice_id: str | None = None
    choice_label: str | None = None
    sequence_id: int | None = None
    in_reply_to_message_id: str | None = None


class RedirectMessage(WireModel):
    type: Literal["redirect"] = "redirect"
    dialog_id: str
    sequence_id: int | None = None


class TransferSucceededRequestMessage(WireModel):
    type: Literal["transferSucceeded"] = "transferSucceeded"
    sequence_id: int | None = None
    in_reply_to_message_id: str | None = None


class TransferFailedRequestMessage(WireModel):
    type: Literal["transferFailed"] = "transferFailed"
    reason: TransferFailureReason = TransferFailureReason.NO_AGENT_AVAILABLE
    description: str | None = None
    sequence_id: int | None = None
    in_reply_to_message_id: str | None = None


class EndSessionMessage(WireModel):
    type: Literal["endSession"] = "endSession"
    reason: EndSessionReason = EndSessionReason.USER_REQUEST
    sequence_id: int | None = None
    in_reply_to_message_id: str | None = None


class SetVariablesMessage(WireModel):
    type: Literal["setVariables"] = "setVariables"
    variables: list[AnyVariable] = Field(default_factory=list)
    sequence_id: int | None = None


AnyRequestMessage = Annotated[
    Union[
        TextMessage,
        ChoiceMessage,
        RedirectMessage,
        TransferSucceededRequestMessage,
        TransferFailedRequestMessage,
        EndSessionMessage,
        SetVariablesMessage,
    ],
    Field(discriminator="type"),
]


class TextInitMessage(WireModel):
    """会话初始化消息。"""

    text: str
    sequence_id: int | None = None


def build_init_message(message: Any) -> TextInitMessage:
    """
    将请求消息转换为会话初始化消息。

    只有文本消息可以开启新会话，其余类型属于调用方违约，直接抛出 ValueError。
    """
    match message:
        case TextMessage():
            return TextInitMessage(text=message.text, sequence_id=message.sequence_id)
        case _:
            raise ValueError(
                "Message needs to be of type TextMessage to create a new session. "
                f"But received : {type(message).__name__}"
            )


class ForceConfig(WireModel):
    endpoint: str


class Referrer(WireModel):
    type: str
    value: str


class ResponseOptions(WireModel):
    variables: dict[str, Any] | None = None
    metadata: dict[str, Any] | None = None


class RichContentCapability(WireModel):
    message_types: list[dict[str, Any]] = Field(default_factory=list)


class InitMessageEnvelope(WireModel):
    external_session_key: str
    force_config: ForceConfig
    message: TextInitMessage
    variables: list[AnyVariable] = Field(default_factory=list)
    referrers: list[Referrer] = Field(default_factory=list)
    tz: str | None = None
    response_options: ResponseOptions | None = None
    rich_content_capabilities: RichContentCapability | None = None


class ChatMessageEnvelope(WireModel):
    message: AnyRequestMessage
    response_options: ResponseOptions | None = None
