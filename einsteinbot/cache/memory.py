"""
进程内内存缓存实现。

适用于单进程部署和测试场景。多实例部署时各进程的缓存互不可见，
此时应改用 RedisCache，否则同一外部会话键可能在不同实例上各自开启新会话。

【实现要点】
- 每个条目存储 (value, expires_at)，expires_at 基于 time.monotonic()，不受系统时钟调整影响
- 读取时惰性淘汰过期条目（不启动后台清理任务）
- 使用 threading.Lock 保护字典，既能在事件循环中使用，也能被多线程共享
"""

import threading
import time
from typing import Callable

from einsteinbot.cache.base import Cache


class InMemoryCache(Cache):
    """
    基于字典的内存缓存。

    属性:
        ttl_seconds: 默认过期秒数（set 未指定 ttl 时使用），None 表示永不过期
        clock: 单调时钟（测试时注入）
    """

    def __init__(self, ttl_seconds: int | None = None, clock: Callable[[], float] = time.monotonic):
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: dict[str, tuple[str, float | None]] = {}
        self._lock = threading.Lock()

    def _expiry(self, ttl_seconds: int | None) -> float | None:
        ttl = self.ttl_seconds if ttl_seconds is None else ttl_seconds
        if ttl is None:
            return None
        return self._clock() + max(0, ttl)

    def _lookup(self, key: str) -> str | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        value, expires_at = entry
        if expires_at is not None and self._clock() >= expires_at:
            del self._entries[key]  # 惰性淘汰
            return None
        return value

    async def get(self, key: str) -> str | None:
        with self._lock:
            return self._lookup(key)

    async def set(self, key: str, value: str, ttl_seconds: int | None = None) -> None:
        with self._lock:
            self._entries[key] = (value, self._expiry(ttl_seconds))

    async def remove(self, key: str) -> None:
        with self._lock:
            self._entries.pop(key, None)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
