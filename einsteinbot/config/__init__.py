"""
配置模块 (config)
================
1. 定义配置数据模型（schema.py）：认证、Bot 路由、缓存、HTTP 等配置项的结构和默认值
2. 加载/保存配置文件（loader.py）：从 JSON 文件读取配置，支持 camelCase ↔ snake_case 自动转换
"""

from einsteinbot.config.loader import get_config_path, load_config, save_config
from einsteinbot.config.schema import AuthConfig, BotConfig, CacheConfig, Config, HttpConfig

__all__ = [
    "AuthConfig",
    "BotConfig",
    "CacheConfig",
    "Config",
    "HttpConfig",
    "get_config_path",
    "load_config",
    "save_config",
]
