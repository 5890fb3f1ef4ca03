"""
缓存模块 - 会话映射与 OAuth 令牌的可插拔存储。

- Cache         : 抽象契约（get / set / remove）
- InMemoryCache : 进程内实现（单实例、测试）
- RedisCache    : Redis 实现（多实例共享）
- create_cache  : 按配置选择后端
"""

from einsteinbot.cache.base import Cache
from einsteinbot.cache.memory import InMemoryCache
from einsteinbot.cache.redis import RedisCache
from einsteinbot.config.schema import CacheConfig


def create_cache(config: CacheConfig) -> Cache:
    """根据缓存配置创建对应的后端实例。"""
    if config.backend == "redis":
        return RedisCache(redis_url=config.redis_url, ttl_seconds=config.ttl_seconds)
    return InMemoryCache(ttl_seconds=config.ttl_seconds)


__all__ = ["Cache", "InMemoryCache", "RedisCache", "create_cache"]
