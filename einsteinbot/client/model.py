"""
客户端请求/响应模型 - SDK 调用方直接使用的数据结构。

与 models/ 下的报文模型不同，这里的类面向 SDK 使用者：
- RequestConfig         : 路由配置（org、bot、force 配置端点）
- ExternalSessionId     : 调用方渠道上的会话键（如 Slack 的 thread id）
- RuntimeSessionId      : 运行时签发的会话 ID
- BotSendMessageRequest : 发送消息请求（消息体 + 可选的初始化字段）
- BotEndSessionRequest  : 结束会话请求
- BotHttpHeaders        : 响应头的只读视图（大小写不敏感、支持多值）
- BotResponse           : 响应信封 + HTTP 状态码 + 响应头

【Java 开发者类比】
- @dataclass(frozen=True) 相当于不可变的 Java record
- dataclasses.replace() 相当于 Lombok 的 toBuilder() 克隆后修改
"""

import dataclasses
from dataclasses import dataclass, field
from typing import Any, Callable

from einsteinbot.models import (
    AnyVariable,
    EndSessionReason,
    Referrer,
    ResponseEnvelope,
    ResponseOptions,
    RichContentCapability,
)

HEADER_NAME_REQUEST_ID = "X-Request-ID"
HEADER_NAME_RUNTIME_CRC = "X-Runtime-CRC"

RequestEnvelopeInterceptor = Callable[[Any], None]


def _noop_interceptor(envelope: Any) -> None:
    return None


def _require(value: str, name: str) -> None:
    if not value or not value.strip():
        raise ValueError(f"{name} must not be empty")


@dataclass(frozen=True)
class RequestConfig:
    """
    请求路由配置。

    属性:
        bot_id: Bot ID（0Xx 开头）
        org_id: Salesforce 组织 ID（00D 开头）
        force_config_endpoint: 组织的 My Domain 地址，运行时据此加载 Bot 配置
    """

    bot_id: str
    org_id: str
    force_config_endpoint: str

    def __post_init__(self) -> None:
        _require(self.bot_id, "bot_id")
        _require(self.org_id, "org_id")
        _require(self.force_config_endpoint, "force_config_endpoint")


@dataclass(frozen=True)
class ExternalSessionId:
    """调用方渠道上的会话标识，在整个对话期间保持不变。"""

    value: str

    def __post_init__(self) -> None:
        _require(self.value, "external session id")


@dataclass(frozen=True)
class RuntimeSessionId:
    """运行时开启会话后返回的会话 ID。"""

    value: str

    def __post_init__(self) -> None:
        _require(self.value, "runtime session id")


@dataclass(frozen=True)
class BotSendMessageRequest:
    """
    发送消息请求。

    variables、tz、referrers、response_options、rich_content_capabilities
    只在开启新会话时随初始化信封发送；继续会话时只发送 message 和 response_options。

    request_envelope_interceptor 会在请求发出前收到最终的信封对象，便于调用方记录或审计。
    """

    message: Any
    request_id: str | None = None
    runtime_crc: str | None = None
    variables: list[AnyVariable] = field(default_factory=list)
    tz: str | None = None
    response_options: ResponseOptions | None = None
    referrers: list[Referrer] = field(default_factory=list)
    rich_content_capabilities: RichContentCapability | None = None
    request_envelope_interceptor: RequestEnvelopeInterceptor = _noop_interceptor

    def __post_init__(self) -> None:
        if self.message is None:
            raise ValueError("message must not be None")

    def with_variables(self, variables: list[AnyVariable]) -> "BotSendMessageRequest":
        """返回替换了变量列表的副本（原对象不变）。"""
        return dataclasses.replace(self, variables=list(variables))

    def with_message(self, message: Any) -> "BotSendMessageRequest":
        """返回替换了消息体的副本（原对象不变）。"""
        return dataclasses.replace(self, message=message)


@dataclass(frozen=True)
class BotEndSessionRequest:
    """结束会话请求。"""

    end_session_reason: EndSessionReason = EndSessionReason.USER_REQUEST
    request_id: str | None = None
    runtime_crc: str | None = None
    request_envelope_interceptor: RequestEnvelopeInterceptor = _noop_interceptor


class BotHttpHeaders:
    """响应头只读视图。键名大小写不敏感，同名头保留全部取值。"""

    def __init__(self, values: dict[str, list[str]] | None = None):
        self._values: dict[str, list[str]] = {}
        for name, items in (values or {}).items():
            self._values.setdefault(name.lower(), []).extend(items)

    @classmethod
    def from_pairs(cls, pairs: list[tuple[str, str]]) -> "BotHttpHeaders":
        values: dict[str, list[str]] = {}
        for name, value in pairs:
            values.setdefault(name, []).append(value)
        return cls(values)

    def get(self, name: str) -> list[str]:
        return list(self._values.get(name.lower(), []))

    def get_first(self, name: str) -> str | None:
        items = self._values.get(name.lower())
        return items[0] if items else None

    def get_all(self) -> dict[str, list[str]]:
        return {name: list(items) for name, items in self._values.items()}

    @property
    def request_id(self) -> str | None:
        return self.get_first(HEADER_NAME_REQUEST_ID)

    @property
    def runtime_crc(self) -> str | None:
        return self.get_first(HEADER_NAME_RUNTIME_CRC)

    def __eq__(self, other: object) -> bool:
        return isinstance(other, BotHttpHeaders) and self._values == other._values

    def __repr__(self) -> str:
        return f"BotHttpHeaders({self._values!r})"


@dataclass
class BotResponse:
    """运行时响应：信封 + HTTP 状态码 + 响应头。"""

    response_envelope: ResponseEnvelope
    http_status_code: int
    http_headers: BotHttpHeaders = field(default_factory=BotHttpHeaders)

    @property
    def session_id(self) -> str:
        return self.response_envelope.session_id
