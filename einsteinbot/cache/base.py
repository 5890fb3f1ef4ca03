"""
缓存抽象基类模块。

会话延续管理器和凭据生命周期管理器都只依赖这里定义的契约，
具体的存储后端（进程内字典、Redis 等）是可插拔的实现。

【契约】
- get(key)                   : 读取字符串值，不存在或已过期时返回 None
- set(key, value, ttl=None)  : 写入（整体覆盖），ttl 为 None 时使用后端默认过期策略
- remove(key)                : 删除条目，不存在时静默返回

【并发要求】
实现必须能被多个会话并发访问；不要求跨键事务。

【Java 开发者类比】
- Cache 相当于一个只有四个方法的 interface
- async 方法相当于返回 CompletableFuture 的接口方法
"""

from abc import ABC, abstractmethod


class Cache(ABC):
    """键 → 字符串的缓存契约，支持单条目 TTL。"""

    @abstractmethod
    async def get(self, key: str) -> str | None:
        """读取缓存值。不存在或已过期时返回 None。"""
        pass

    @abstractmethod
    async def set(self, key: str, value: str, ttl_seconds: int | None = None) -> None:
        """
        写入缓存值。

        参数:
            key: 缓存键
            value: 字符串值
            ttl_seconds: 条目存活秒数；None 表示使用后端的默认过期策略，
                0 表示立即过期（写入后不可读取）
        """
        pass

    @abstractmethod
    async def remove(self, key: str) -> None:
        """删除缓存条目。"""
        pass

    async def close(self) -> None:
        """释放后端资源（连接池等）。默认无事可做。"""
        return None
