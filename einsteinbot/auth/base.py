"""
认证机制抽象基类。

传输层每次调用运行时 API 前都会向 AuthMechanism 取令牌，
具体实现负责决定令牌从哪里来、缓存多久。
"""

from abc import ABC, abstractmethod

BEARER_PREFIX = "Bearer "


class AuthMechanism(ABC):
    """提供访问运行时 API 所需令牌的接口。"""

    @abstractmethod
    async def get_token(self) -> str:
        """返回原始令牌字符串。"""
        pass

    async def get_authorization_header(self) -> str:
        """返回 Authorization 请求头的值（带 "Bearer " 前缀）。"""
        return BEARER_PREFIX + await self.get_token()

    async def aclose(self) -> None:
        """释放实现持有的资源（HTTP 客户端等）。"""
        return None


class StaticTokenAuth(AuthMechanism):
    """固定令牌，适用于令牌由外部系统管理的场景以及测试。"""

    def __init__(self, token: str):
        self._token = token

    async def get_token(self) -> str:
        return self._token
