"""
令牌内省（Introspection）客户端。

JWT 断言里声明的过期时间只是"请求"，OAuth 服务器实际认可令牌多久才是事实来源。
Introspector 调用 /services/oauth2/introspect，拿到令牌是否有效以及真实的过期时间戳，
凭据管理器据此计算缓存时长。

请求格式：
    POST {endpoint}/services/oauth2/introspect
    Authorization: Basic base64(connectedAppId:connectedAppSecret)
    Content-Type: application/x-www-form-urlencoded
    token=<access_token>&token_type=access_token
"""

import base64

import httpx
from pydantic import BaseModel, ConfigDict

from einsteinbot.errors import OAuthResponseError
from einsteinbot.utils.http import create_http_client

INTROSPECT_PATH = "/services/oauth2/introspect"


class IntrospectionResult(BaseModel):
    """
    内省结果。

    属性:
        active: 令牌当前是否有效
        exp: 令牌过期时间（Unix 秒）
    """

    model_config = ConfigDict(extra="ignore")

    active: bool = False
    exp: int = 0


class Introspector:
    """调用 OAuth 内省端点校验令牌。"""

    def __init__(
        self,
        connected_app_id: str,
        connected_app_secret: str,
        endpoint: str,
        http: httpx.AsyncClient | None = None,
    ):
        self.connected_app_id = connected_app_id
        self.connected_app_secret = connected_app_secret
        self.endpoint = endpoint.rstrip("/")
        self._owns_http = http is None
        self._http = http or create_http_client()

    def _authorization(self) -> str:
        raw = f"{self.connected_app_id}:{self.connected_app_secret}".encode("ascii")
        return "Basic " + base64.b64encode(raw).decode("ascii")

    async def introspect(self, token: str) -> IntrospectionResult:
        """
        查询令牌状态。

        参数:
            token: 待校验的访问令牌

        返回:
            IntrospectionResult

        异常:
            OAuthResponseError: 内省端点返回非 2xx
        """
        resp = await self._http.post(
            self.endpoint + INTROSPECT_PATH,
            data={"token": token, "token_type": "access_token"},
            headers={
                "Accept": "application/json",
                "Authorization": self._authorization(),
            },
        )
        if resp.is_error:
            raise OAuthResponseError(resp.status_code, resp.text)
        return IntrospectionResult.model_validate(resp.json())

    async def aclose(self) -> None:
        if self._owns_http:
            await self._http.aclose()
