"""
配置加载工具模块 (config/loader.py)
=================================
- 配置文件默认路径: ~/.einsteinbot/config.json
- 配置文件使用 camelCase（与运行时 API 报文一致），Python 内部使用 snake_case
- 加载时自动将 camelCase → snake_case，保存时自动将 snake_case → camelCase
"""

import json
from pathlib import Path
from typing import Any

from loguru import logger
from pydantic.alias_generators import to_camel, to_snake

from einsteinbot.config.schema import Config


def get_config_path() -> Path:
    """获取默认配置文件路径: ~/.einsteinbot/config.json"""
    return Path.home() / ".einsteinbot" / "config.json"


def load_config(config_path: Path | None = None) -> Config:
    """
    从 JSON 文件加载配置，若文件不存在则返回默认配置。

    文件不存在时由 BaseSettings 从 EINSTEINBOT_ 前缀的环境变量读取配置。

    参数:
        config_path: 可选的配置文件路径。为 None 时使用默认路径。
    """
    path = config_path or get_config_path()

    if path.exists():
        try:
            with open(path) as f:
                data = json.load(f)
            return Config.model_validate(convert_keys(data))
        except (json.JSONDecodeError, ValueError) as e:
            # 配置文件损坏时降级使用默认配置
            logger.warning(f"Failed to load config from {path}: {e}. Using default configuration.")

    return Config()


def save_config(config: Config, config_path: Path | None = None) -> None:
    """将配置对象以 camelCase 键名保存为 JSON 文件。"""
    path = config_path or get_config_path()
    path.parent.mkdir(parents=True, exist_ok=True)

    data = convert_to_camel(config.model_dump())

    with open(path, "w") as f:
        json.dump(data, f, indent=2)


def convert_keys(data: Any) -> Any:
    """
    递归地将字典中所有 camelCase 键名转换为 snake_case。

    示例: {"connectedAppId": "x"} → {"connected_app_id": "x"}
    """
    if isinstance(data, dict):
        return {to_snake(k): convert_keys(v) for k, v in data.items()}
    if isinstance(data, list):
        return [convert_keys(item) for item in data]
    return data


def convert_to_camel(data: Any) -> Any:
    """递归地将字典中所有 snake_case 键名转换为 camelCase。"""
    if isinstance(data, dict):
        return {to_camel(k): convert_to_camel(v) for k, v in data.items()}
    if isinstance(data, list):
        return [convert_to_camel(item) for item in data]
    return data

