"""
配置数据模型定义 (config/schema.py)
=================================
本模块使用 Pydantic 定义 einsteinbot 的完整配置结构。
所有配置项都有默认值，用户只需在 config.json 中覆盖需要修改的部分。

整体配置结构（树形）：
Config (根配置)
├── auth              - OAuth JWT Bearer 认证参数（登录端点、Connected App、用户、私钥）
├── bot               - Bot 路由参数（组织 ID、Bot ID、force 配置端点、运行时地址覆盖）
├── cache             - 会话映射与令牌缓存（memory / redis）
├── http              - HTTP 客户端参数（超时）
├── integration_name  - 可选的集成名称，开启会话时作为上下文变量发送
└── log_level         - CLI 日志级别

对于 Java 开发者：
- Pydantic 的 BaseModel 类似于 Java 的 POJO/Record，但自带字段验证和默认值
- BaseSettings 类似于 Spring 的 @ConfigurationProperties，额外支持从环境变量读取配置
"""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic_settings import BaseSettings


class AuthConfig(BaseModel):
    """OAuth JWT Bearer 认证配置。私钥对应的证书需上传到 Connected App。"""
    login_endpoint: str = "https://login.salesforce.com"  # OAuth 登录端点
    connected_app_id: str = ""  # Connected App 的 Consumer Key
    connected_app_secret: str = ""  # Connected App 的 Consumer Secret（内省时使用）
    user_id: str = ""  # 以哪个用户身份获取令牌（用户名）
    private_key_path: str = "~/.einsteinbot/private.key"  # RSA 私钥文件（PEM 或 DER）

    @property
    def key_path(self) -> Path:
        return Path(self.private_key_path).expanduser()


class BotConfig(BaseModel):
    """Bot 路由配置。"""
    org_id: str = ""  # 组织 ID（00D 开头）
    bot_id: str = ""  # Bot ID（0Xx 开头）
    force_config_endpoint: str = ""  # 组织的 My Domain 地址
    runtime_url: str | None = None  # 显式指定运行时地址；为空时通过 api-info 自动发现


class CacheConfig(BaseModel):
    """
    缓存配置。

    - memory: 进程内缓存，适合单实例和本地调试
    - redis:  多实例共享会话映射
    """
    backend: Literal["memory", "redis"] = "memory"
    redis_url: str = "redis://127.0.0.1:6379"
    ttl_seconds: int = 259140  # 会话映射默认保留时长（约 3 天）


class HttpConfig(BaseModel):
    """HTTP 客户端配置。"""
    timeout_seconds: float = 30.0  # 连接/读取超时（秒）


class Config(BaseSettings):
    """
    einsteinbot 根配置类。

    继承自 Pydantic 的 BaseSettings，除了支持从 JSON 文件加载外，
    还支持从环境变量读取配置：
    - 环境变量前缀: EINSTEINBOT_
    - 嵌套分隔符: __ (双下划线)
    - 示例: EINSTEINBOT_CACHE__BACKEND=redis 可覆盖 cache.backend
    """
    auth: AuthConfig = Field(default_factory=AuthConfig)
    bot: BotConfig = Field(default_factory=BotConfig)
    cache: CacheConfig = Field(default_factory=CacheConfig)
    http: HttpConfig = Field(default_factory=HttpConfig)
    integration_name: str | None = None
    log_level: str = "INFO"

    def request_config(self):
        """
        构造请求路由配置。

        异常:
            ValueError: bot 段缺少必填项
        """
        from einsteinbot.client.model import RequestConfig
        return RequestConfig(
            bot_id=self.bot.bot_id,
            org_id=self.bot.org_id,
            force_config_endpoint=self.bot.force_config_endpoint,
        )

    # Pydantic Settings 配置：支持 EINSTEINBOT_ 前缀的环境变量，嵌套用 __ 分隔
    model_config = ConfigDict(
        env_prefix="EINSTEINBOT_",
        env_nested_delimiter="__"
    )
