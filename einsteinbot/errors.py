"""
SDK 异常类型定义模块。

所有 SDK 抛出的异常都继承自 EinsteinBotError，调用方可以按需捕获：

- ChatbotResponseError : Bot 运行时 API 返回非 2xx 状态码
- OAuthResponseError   : OAuth 令牌端点或内省端点返回非 2xx（或响应缺少 access_token）
- InactiveTokenError   : 内省结果显示令牌已失效
- SigningError         : 私钥加载失败或 JWT 断言签名失败（不可重试）
- SessionNotFoundError : 结束会话时缓存中找不到对应的运行时会话（状态错误）
- UnsupportedSDKError  : 运行时已不再支持当前 SDK 的 API 版本

参数错误（如首条消息类型不合法、集成名称过长）直接使用内置的 ValueError。
"""

from typing import Any


class EinsteinBotError(Exception):
    """SDK 所有异常的基类。"""


class ChatbotResponseError(EinsteinBotError):
    """
    Bot 运行时 API 返回了错误响应。

    属性:
        status_code: HTTP 状态码
        error: 解析后的错误报文（ErrorPayload），无法解析时为 None
        body: 原始响应体文本
        headers: 响应头
    """

    def __init__(
        self,
        status_code: int,
        error: Any = None,
        body: str = "",
        headers: dict[str, str] | None = None,
    ):
        self.status_code = status_code
        self.error = error
        self.body = body
        self.headers = headers or {}
        detail = getattr(error, "message", None) or body
        super().__init__(f"Chatbot runtime returned HTTP {status_code}: {detail}")

    def __repr__(self) -> str:
        return (
            f"ChatbotResponseError(status_code={self.status_code}, "
            f"error={self.error!r}, body={self.body!r})"
        )


class OAuthResponseError(EinsteinBotError):
    """
    OAuth 服务返回了错误响应。

    属性:
        status_code: HTTP 状态码
        error_response: 原始错误响应文本
    """

    def __init__(self, status_code: int, error_response: str = ""):
        self.status_code = status_code
        self.error_response = error_response
        super().__init__(f"OAuth server returned HTTP {status_code}: {error_response}")


class InactiveTokenError(EinsteinBotError):
    """内省端点报告令牌未激活。"""


class SigningError(EinsteinBotError):
    """私钥加载或 JWT 断言签名失败。"""


class SessionNotFoundError(EinsteinBotError, RuntimeError):
    """缓存中没有与外部会话键对应的运行时会话。"""

    def __init__(self, cache_key: str):
        self.cache_key = cache_key
        super().__init__(f"No session found for given cacheKey : {cache_key}")


class UnsupportedSDKError(EinsteinBotError):
    """当前 SDK 使用的 API 版本已不被运行时支持。"""

    def __init__(self, current_version: str, latest_version: str):
        self.current_version = current_version
        self.latest_version = latest_version
        super().__init__(
            "SDK failed to start chat as the API version is not supported. "
            f"Current API version in SDK is {current_version}, "
            f"latest supported API version is {latest_version}, "
            "please upgrade to the latest version."
        )
