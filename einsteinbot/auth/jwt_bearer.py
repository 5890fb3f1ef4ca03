"""
JWT Bearer OAuth 认证 - 凭据生命周期管理器。

流程（缓存未命中时）：
1. 用私钥签发一个短期 JWT 断言（RS256，15 分钟有效）
   aud = 登录端点，iss = Connected App ID，sub = 用户名
2. 以 urn:ietf:params:oauth:grant-type:jwt-bearer 授权方式
   向 /services/oauth2/token 换取 access_token
3. 调用内省端点校验令牌，拿到服务器认可的真实过期时间
4. 缓存令牌，TTL = max(0, 真实剩余秒数 - 300)，预留 5 分钟应对时钟偏差和在途请求

缓存命中时直接返回令牌，热路径上不做任何网络调用。

【并发说明】
多个协程/进程在令牌过期后可能同时刷新，各自拿到一个（不同但都有效的）令牌
并覆盖缓存。这是可接受的重复获取，不做分布式加锁。

【Java 开发者类比】
- 类似 Spring Security OAuth2 的 JwtBearerOAuth2AuthorizedClientProvider
- 缓存层相当于给 OAuth2AuthorizedClientService 加了一个基于 TTL 的存储
"""

import time
from pathlib import Path
from typing import Any, Callable

import httpx
import jwt
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric.rsa import RSAPrivateKey
from loguru import logger

from einsteinbot.auth.base import AuthMechanism
from einsteinbot.auth.introspector import Introspector
from einsteinbot.cache.base import Cache
from einsteinbot.errors import InactiveTokenError, OAuthResponseError, SigningError
from einsteinbot.utils.http import create_http_client

TOKEN_PATH = "/services/oauth2/token"
JWT_BEARER_GRANT_TYPE = "urn:ietf:params:oauth:grant-type:jwt-bearer"
JWT_EXPIRY_SECONDS = 15 * 60
TOKEN_SAFETY_MARGIN_SECONDS = 300
CACHE_KEY_PREFIX = "bots-oAuthToken-"


def load_private_key(path: str | Path) -> RSAPrivateKey:
    """
    从文件加载 RSA 私钥。支持 PEM（PKCS#8 / PKCS#1）和 DER（PKCS#8）两种编码。

    异常:
        SigningError: 文件不存在、格式不对或不是 RSA 私钥
    """
    try:
        data = Path(path).expanduser().read_bytes()
        if data.lstrip().startswith(b"-----BEGIN"):
            key = serialization.load_pem_private_key(data, password=None)
        else:
            key = serialization.load_der_private_key(data, password=None)
    except (OSError, ValueError, TypeError) as e:
        raise SigningError(f"Failed to load private key from {path}: {e}") from e

    if not isinstance(key, RSAPrivateKey):
        raise SigningError(f"Private key in {path} is not an RSA key")
    return key


def compute_token_ttl(expires_at: int, now: float) -> int:
    """根据服务器报告的过期时间计算缓存秒数，扣除安全余量，下限为 0。"""
    return max(0, int(expires_at - now) - TOKEN_SAFETY_MARGIN_SECONDS)


class JwtBearerOAuth(AuthMechanism):
    """
    基于 JWT Bearer 授权的 OAuth 令牌提供者。

    参数:
        private_key: RSA 私钥（与 Connected App 上传的证书配对）
        login_endpoint: 登录端点，如 https://login.salesforce.com
        connected_app_id: Connected App 的 Consumer Key
        connected_app_secret: Connected App 的 Consumer Secret（内省时使用）
        user_id: 以哪个用户身份获取令牌
        cache: 可选的令牌缓存；为 None 时每次调用都重新获取
        http: 可选的 HTTP 客户端（测试时注入）
        introspector: 可选的内省客户端（测试时注入）
        clock: 返回当前 Unix 秒的函数（测试时注入）
    """

    def __init__(
        self,
        private_key: RSAPrivateKey,
        login_endpoint: str,
        connected_app_id: str,
        connected_app_secret: str,
        user_id: str,
        cache: Cache | None = None,
        http: httpx.AsyncClient | None = None,
        introspector: Introspector | None = None,
        clock: Callable[[], float] = time.time,
    ):
        for name, value in (
            ("login_endpoint", login_endpoint),
            ("connected_app_id", connected_app_id),
            ("connected_app_secret", connected_app_secret),
            ("user_id", user_id),
        ):
            if not value:
                raise ValueError(f"{name} is required")
        if private_key is None:
            raise ValueError("private_key is required")

        self.private_key = private_key
        self.login_endpoint = login_endpoint
        self.connected_app_id = connected_app_id
        self.user_id = user_id
        self.cache = cache
        self._clock = clock
        self._owns_http = http is None  # 只关闭自己创建的客户端
        self._http = http or create_http_client()
        self.introspector = introspector or Introspector(
            connected_app_id, connected_app_secret, login_endpoint, http=self._http
        )

    @classmethod
    def from_private_key_file(cls, private_key_path: str | Path, **kwargs: Any) -> "JwtBearerOAuth":
        """从私钥文件构造。其余参数同构造函数。"""
        return cls(load_private_key(private_key_path), **kwargs)

    @property
    def cache_key(self) -> str:
        return CACHE_KEY_PREFIX + self.connected_app_id

    async def get_token(self) -> str:
        """
        获取有效的访问令牌。

        返回:
            access_token 字符串

        异常:
            SigningError: 断言签名失败
            OAuthResponseError: 令牌端点或内省端点返回错误
            InactiveTokenError: 内省显示令牌无效
        """
        if self.cache is not None:
            token = await self.cache.get(self.cache_key)
            if token:
                logger.debug("Found cached OAuth token.")
                return token

        logger.debug("Did not find OAuth token in cache. Will retrieve from OAuth server.")
        assertion = self._create_assertion()
        token = await self._exchange(assertion)

        result = await self.introspector.introspect(token)
        if not result.active:
            raise InactiveTokenError("OAuth token is not active.")

        ttl = compute_token_ttl(result.exp, self._clock())
        if self.cache is not None:
            await self.cache.set(self.cache_key, token, ttl)
        logger.debug(f"Fetched OAuth token, cached for {ttl}s")
        return token

    def _create_assertion(self) -> str:
        """签发 RS256 JWT 断言。"""
        now = int(self._clock())
        claims = {
            "aud": self.login_endpoint,
            "iss": self.connected_app_id,
            "sub": self.user_id,
            "exp": now + JWT_EXPIRY_SECONDS,
        }
        try:
            return jwt.encode(claims, self.private_key, algorithm="RS256", headers={"alg": "RS256"})
        except (jwt.PyJWTError, ValueError, TypeError) as e:
            raise SigningError(f"Failed to sign JWT assertion: {e}") from e

    async def _exchange(self, assertion: str) -> str:
        """用断言向令牌端点换取 access_token。"""
        resp = await self._http.post(
            self.login_endpoint.rstrip("/") + TOKEN_PATH,
            data={"grant_type": JWT_BEARER_GRANT_TYPE, "assertion": assertion},
            headers={"Accept": "application/json"},
        )
        if resp.is_error:
            raise OAuthResponseError(resp.status_code, resp.text)

        try:
            token = resp.json().get("access_token")
        except ValueError as e:
            raise OAuthResponseError(resp.status_code, resp.text) from e
        if not token:
            raise OAuthResponseError(resp.status_code, f"No access_token in response: {resp.text}")
        return token

    async def aclose(self) -> None:
        if self._owns_http:
            await self._http.aclose()
