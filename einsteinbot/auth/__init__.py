"""
认证模块 - 为运行时 API 调用提供 Bearer 令牌。

- AuthMechanism   : 认证接口（get_token / get_authorization_header）
- JwtBearerOAuth  : JWT Bearer 授权 + 内省校验 + 按真实有效期缓存
- Introspector    : OAuth 令牌内省客户端
- StaticTokenAuth : 固定令牌
"""

from einsteinbot.auth.base import AuthMechanism, StaticTokenAuth
from einsteinbot.auth.introspector import IntrospectionResult, Introspector
from einsteinbot.auth.jwt_bearer import JwtBearerOAuth, compute_token_ttl, load_private_key

__all__ = [
    "AuthMechanism",
    "IntrospectionResult",
    "Introspector",
    "JwtBearerOAuth",
    "StaticTokenAuth",
    "compute_token_ttl",
    "load_private_key",
]
