"""
HTTP 客户端辅助函数。

统一创建 httpx.AsyncClient：挂上请求日志钩子（Authorization 头脱敏），
设置超时与 User-Agent。超时是传输层的属性，上层的会话/凭据管理器不再额外加超时。
"""

import httpx
from loguru import logger

from einsteinbot.utils.helpers import mask_authorization_header

DEFAULT_TIMEOUT_SECONDS = 30.0


async def log_request(request: httpx.Request) -> None:
    """请求事件钩子：记录方法、URL 和脱敏后的请求头。"""
    logger.info(
        f"Making {request.method} request to {request.url} "
        f"with headers: {mask_authorization_header(dict(request.headers))}"
    )


def create_http_client(
    timeout: float = DEFAULT_TIMEOUT_SECONDS,
    user_agent: str | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """
    创建带日志钩子的异步 HTTP 客户端。

    参数:
        timeout: 连接/读取超时秒数
        user_agent: 可选的 User-Agent 请求头
        transport: 可选的底层传输（测试时注入 httpx.MockTransport）
    """
    headers = {"User-Agent": user_agent} if user_agent else None
    return httpx.AsyncClient(
        timeout=timeout,
        headers=headers,
        transport=transport,
        event_hooks={"request": [log_request]},
    )
