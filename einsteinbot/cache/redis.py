"""
Redis 缓存实现 - 多实例部署时共享会话映射和 OAuth 令牌。

使用 redis.asyncio 异步客户端，所有写入都带过期时间（SET ... EX），
默认 259140 秒（2 天 23 小时 59 分），略短于运行时自身保留会话的时长，
作为"会话未被显式结束"时的兜底清理。

键格式由调用方决定，本类不加前缀，以便与其他语言的 SDK 共享同一个 Redis：
- chatbot-{orgId}-{botId}-{externalSessionKey} → 运行时会话 ID
- bots-oAuthToken-{connectedAppId}            → OAuth 访问令牌
"""

from loguru import logger
from redis.asyncio import Redis

from einsteinbot.cache.base import Cache

DEFAULT_TTL_SECONDS = 259140
DEFAULT_REDIS_URL = "redis://127.0.0.1:6379"


class RedisCache(Cache):
    """
    基于 Redis 的缓存。

    参数:
        redis_url: Redis 连接地址，如 redis://127.0.0.1:6379
        ttl_seconds: set 未指定 ttl 时使用的默认过期秒数
        client: 可选的已创建客户端（测试或共享连接池时注入）
    """

    def __init__(
        self,
        redis_url: str = DEFAULT_REDIS_URL,
        ttl_seconds: int = DEFAULT_TTL_SECONDS,
        client: Redis | None = None,
    ):
        self.ttl_seconds = ttl_seconds
        self._redis = client or Redis.from_url(redis_url, decode_responses=True)

    async def get(self, key: str) -> str | None:
        value = await self._redis.get(key)
        if isinstance(value, bytes):
            return value.decode()
        return value

    async def set(self, key: str, value: str, ttl_seconds: int | None = None) -> None:
        ttl = self.ttl_seconds if ttl_seconds is None else ttl_seconds
        if ttl <= 0:
            # Redis 拒绝 EX 0，已过期的条目等价于不存在
            logger.debug(f"Non-positive TTL for {key}, removing instead of writing")
            await self._redis.delete(key)
            return
        await self._redis.set(key, value, ex=ttl)

    async def remove(self, key: str) -> None:
        await self._redis.delete(key)

    async def close(self) -> None:
        await self._redis.aclose()
