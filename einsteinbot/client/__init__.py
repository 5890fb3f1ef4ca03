"""
客户端模块 - 运行时 API 客户端及其构造入口。

- BasicChatbotClient : 传输层，调用方自行管理运行时会话 ID
- ChatbotClients     : 构造 basic / session-managed 两种客户端的工厂
- create_client      : 根据 Config 一次性装配 认证 + 缓存 + 客户端

会话托管客户端位于 einsteinbot.session，这里按需延迟导入，避免循环依赖。
"""

from pathlib import Path
from typing import TYPE_CHECKING

from einsteinbot.auth.base import AuthMechanism
from einsteinbot.auth.jwt_bearer import JwtBearerOAuth
from einsteinbot.cache import Cache, InMemoryCache, create_cache
from einsteinbot.client.basic import API_VERSION, BasicChatbotClient
from einsteinbot.client.model import (
    BotEndSessionRequest,
    BotHttpHeaders,
    BotResponse,
    BotSendMessageRequest,
    ExternalSessionId,
    RequestConfig,
    RuntimeSessionId,
)
from einsteinbot.utils.http import DEFAULT_TIMEOUT_SECONDS
from einsteinbot.utils.release import ReleaseInfo

if TYPE_CHECKING:
    from einsteinbot.config.schema import AuthConfig, Config
    from einsteinbot.session.manager import SessionManagedChatbotClient


class ChatbotClients:
    """客户端工厂。"""

    @staticmethod
    def basic(
        auth: AuthMechanism,
        base_path: str | None = None,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        release_info: ReleaseInfo | None = None,
    ) -> BasicChatbotClient:
        return BasicChatbotClient(auth, base_path=base_path, timeout=timeout, release_info=release_info)

    @staticmethod
    def session_managed(
        auth: AuthMechanism,
        cache: Cache | None = None,
        base_path: str | None = None,
        integration_name: str | None = None,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        release_info: ReleaseInfo | None = None,
    ) -> "SessionManagedChatbotClient":
        """
        构造会话托管客户端。未提供 cache 时使用进程内缓存。

        异常:
            ValueError: integration_name 不合法
        """
        from einsteinbot.session.manager import SessionManagedChatbotClient

        basic = ChatbotClients.basic(auth, base_path, timeout, release_info)
        return SessionManagedChatbotClient(
            basic, cache or InMemoryCache(), integration_name=integration_name
        )


def create_auth(auth_config: "AuthConfig", cache: Cache | None = None) -> JwtBearerOAuth:
    """根据认证配置构造 JWT Bearer 认证（读取私钥文件）。"""
    return JwtBearerOAuth.from_private_key_file(
        Path(auth_config.private_key_path).expanduser(),
        login_endpoint=auth_config.login_endpoint,
        connected_app_id=auth_config.connected_app_id,
        connected_app_secret=auth_config.connected_app_secret,
        user_id=auth_config.user_id,
        cache=cache,
    )


def create_client(config: "Config") -> "SessionManagedChatbotClient":
    """
    根据完整配置装配会话托管客户端。

    同一个缓存后端同时存放 OAuth 令牌和会话映射（键前缀不同，互不冲突）。
    """
    cache = create_cache(config.cache)
    auth = create_auth(config.auth, cache)
    return ChatbotClients.session_managed(
        auth,
        cache=cache,
        base_path=config.bot.runtime_url,
        integration_name=config.integration_name,
        timeout=config.http.timeout_seconds,
    )


__all__ = [
    "API_VERSION",
    "BasicChatbotClient",
    "BotEndSessionRequest",
    "BotHttpHeaders",
    "BotResponse",
    "BotSendMessageRequest",
    "ChatbotClients",
    "ExternalSessionId",
    "RequestConfig",
    "RuntimeSessionId",
    "create_auth",
    "create_client",
]
