"""
会话托管客户端 - 在 BasicChatbotClient 之上自动维护 外部会话键 → 运行时会话 ID 的映射。

调用方只需要提供自己渠道上的会话键（ExternalSessionId），
客户端据此判断应当开启新会话还是继续已有会话：

- 缓存未命中：开启新会话（首条消息必须是文本消息），附加集成变量，
  成功后记录 缓存键 → 运行时会话 ID
- 缓存命中：向已有会话发送消息，成功后刷新该映射的过期时间
- 结束会话：缓存命中才调用运行时结束接口，成功后删除映射

【缓存键格式】
    chatbot-{orgId}-{botId}-{externalSessionKey}

【序列号】
每条发出的消息都带 sequenceId，取当前毫秒时间戳，并保证进程内严格递增
（同一毫秒内的多次调用依次 +1）。

【并发说明】
同一外部会话键的两个首条消息并发到达时，可能各自开启一个运行时会话，
后写入缓存的一方胜出。不做按键加锁，与 Redis 多实例部署的语义保持一致。

【Java 开发者类比】
- 类似 Spring Session 的 SessionRepositoryFilter：对调用方透明地维护会话
- Cache 相当于 SessionRepository 的存储后端（内存 / Redis）
"""

import threading
import time
from typing import Callable

from loguru import logger

from einsteinbot.cache.base import Cache
from einsteinbot.client.basic import BasicChatbotClient
from einsteinbot.client.model import (
    BotEndSessionRequest,
    BotResponse,
    BotSendMessageRequest,
    ExternalSessionId,
    RequestConfig,
    RuntimeSessionId,
)
from einsteinbot.errors import SessionNotFoundError
from einsteinbot.models import Status, build_init_message
from einsteinbot.utils.helpers import (
    add_integration_type_and_name_to_context_variables,
    validate_integration_name,
)


def cache_key(org_id: str, bot_id: str, external_session_key: str) -> str:
    """由路由配置和外部会话键拼出缓存键。"""
    return f"chatbot-{org_id}-{bot_id}-{external_session_key}"


class SequenceIdGenerator:
    """
    消息序列号生成器。

    返回毫秒时间戳，但保证同一生成器实例返回的值严格递增，
    时钟回拨或同一毫秒内多次调用时在上一个值的基础上 +1。
    """

    def __init__(self, clock: Callable[[], float] = time.time):
        self._clock = clock
        self._last = 0
        self._lock = threading.Lock()

    def next(self) -> int:
        with self._lock:
            now_ms = int(self._clock() * 1000)
            self._last = max(now_ms, self._last + 1)
            return self._last


class SessionManagedChatbotClient:
    """
    会话托管聊天客户端。

    参数:
        basic_client: 底层传输客户端
        cache: 会话映射缓存（InMemoryCache 或 RedisCache）
        integration_name: 可选的集成名称，开启会话时作为 $Context.IntegrationName 发送
        sequence: 可选的序列号生成器（测试时注入）

    异常:
        ValueError: integration_name 为空白或超过 128 个字符
    """

    def __init__(
        self,
        basic_client: BasicChatbotClient,
        cache: Cache,
        integration_name: str | None = None,
        sequence: SequenceIdGenerator | None = None,
    ):
        validate_integration_name(integration_name)
        self.basic_client = basic_client
        self.cache = cache
        self.integration_name = integration_name
        self.sequence = sequence or SequenceIdGenerator()

    async def send_message(
        self,
        config: RequestConfig,
        external_session_id: ExternalSessionId,
        request: BotSendMessageRequest,
    ) -> BotResponse:
        """
        发送消息；没有进行中的会话时自动开启新会话。

        参数:
            config: 路由配置
            external_session_id: 调用方渠道上的会话键
            request: 消息请求（调用方传入的对象不会被修改）

        返回:
            BotResponse

        异常:
            ValueError: 需要开启新会话但消息不是文本消息（不会发出任何请求）
            ChatbotResponseError: 运行时返回错误（缓存保持不变）
        """
        key = cache_key(config.org_id, config.bot_id, external_session_id.value)
        session_id = await self.cache.get(key)

        if session_id is None:
            return await self._start_session(config, external_session_id, request, key)

        logger.debug(f"Found session {session_id} for cache key {key}")
        response = await self.basic_client.send_message(
            config, RuntimeSessionId(session_id), self._stamp(request)
        )
        await self.cache.set(key, response.session_id)
        return response

    async def _start_session(
        self,
        config: RequestConfig,
        external_session_id: ExternalSessionId,
        request: BotSendMessageRequest,
        key: str,
    ) -> BotResponse:
        build_init_message(request.message)

        logger.debug(f"No session found for cache key {key}, starting a new one")
        variables = add_integration_type_and_name_to_context_variables(
            request.variables, self.integration_name
        )
        outgoing = self._stamp(request).with_variables(variables)
        response = await self.basic_client.start_chat_session(config, external_session_id, outgoing)

        await self.cache.set(key, response.session_id)
        return response

    def _stamp(self, request: BotSendMessageRequest) -> BotSendMessageRequest:
        """返回带新序列号的请求副本。"""
        message = request.message.model_copy(update={"sequence_id": self.sequence.next()})
        return request.with_message(message)

    async def end_chat_session(
        self,
        config: RequestConfig,
        external_session_id: ExternalSessionId,
        request: BotEndSessionRequest | None = None,
    ) -> BotResponse:
        """
        结束会话并删除映射。

        异常:
            SessionNotFoundError: 缓存中没有该外部会话键对应的会话（不会发出任何请求）
        """
        key = cache_key(config.org_id, config.bot_id, external_session_id.value)
        session_id = await self.cache.get(key)
        if session_id is None:
            raise SessionNotFoundError(key)

        response = await self.basic_client.end_chat_session(
            config, RuntimeSessionId(session_id), request or BotEndSessionRequest()
        )
        await self.cache.remove(key)
        logger.debug(f"Removed session mapping for cache key {key}")
        return response

    async def get_health_status(self, config: RequestConfig) -> Status:
        return await self.basic_client.get_health_status(config)

    async def aclose(self) -> None:
        await self.basic_client.aclose()
        await self.basic_client.auth.aclose()
        await self.cache.close()
