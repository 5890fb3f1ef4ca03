"""
工具函数集合 - einsteinbot 项目全局通用的辅助函数。

本模块提供路径管理、上下文变量处理、请求头脱敏等基础工具函数，
被项目中的多个模块引用。

函数分类：
- 路径管理：ensure_dir, get_data_path
- 上下文变量：create_text_variable, add_integration_type_and_name_to_context_variables
- 校验：validate_integration_name
- 日志辅助：mask_authorization_header, to_pretty_json, truncate_string
- ID 生成：new_random_uuid
"""

import json
import uuid
from pathlib import Path
from typing import Any, Iterable, Mapping

from einsteinbot.models import AnyVariable, TextVariable

CONTEXT_VARIABLE_NAME_INTEGRATION_TYPE = "$Context.IntegrationType"
CONTEXT_VARIABLE_NAME_INTEGRATION_NAME = "$Context.IntegrationName"
CONTEXT_VARIABLE_VALUE_API = "API"

INTEGRATION_NAME_MAX_LENGTH = 128
AUTHORIZATION_HEADER_MASKED = "MASKED"


def ensure_dir(path: Path) -> Path:
    """
    确保目录存在，不存在则递归创建。

    参数:
        path: 目标目录路径

    返回:
        创建后的目录路径（原样返回）
    """
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_data_path() -> Path:
    """获取 einsteinbot 数据目录（~/.einsteinbot）。自动创建不存在的目录。"""
    return ensure_dir(Path.home() / ".einsteinbot")


def create_text_variable(name: str, value: str) -> TextVariable:
    """创建一个文本类型的上下文变量。"""
    return TextVariable(name=name, value=value)


def add_integration_type_and_name_to_context_variables(
    variables: Iterable[AnyVariable] | None,
    integration_name: str | None,
) -> list[AnyVariable]:
    """
    向上下文变量列表追加集成类型与集成名称两个变量。

    仅当 integration_name 非空时追加。$Context.IntegrationType 与
    $Context.IntegrationName 分别检查，只补上列表中缺少的那个；
    调用方已设置的同名变量保持原值不变，任何保留名都不会出现两次。
    函数不修改传入的列表，总是返回新列表。

    参数:
        variables: 调用方提供的变量列表（可为 None）
        integration_name: 集成名称（如 "Slack Connector"）

    返回:
        新的变量列表
    """
    context_variables = list(variables or [])

    if not integration_name:
        return context_variables

    existing = {v.name for v in context_variables}
    for name, value in (
        (CONTEXT_VARIABLE_NAME_INTEGRATION_TYPE, CONTEXT_VARIABLE_VALUE_API),
        (CONTEXT_VARIABLE_NAME_INTEGRATION_NAME, integration_name),
    ):
        if name not in existing:
            context_variables.append(create_text_variable(name, value))

    return context_variables


def validate_integration_name(name: str | None) -> None:
    """
    校验集成名称。None 表示不注入集成变量，合法；
    空白字符串或超过 128 个字符视为参数错误。
    """
    if name is None:
        return
    if not name.strip():
        raise ValueError("Integration name cannot be blank")
    if len(name) > INTEGRATION_NAME_MAX_LENGTH:
        raise ValueError("Integration name exceeds max length")


def mask_authorization_header(headers: Mapping[str, str]) -> dict[str, str]:
    """返回请求头副本，Authorization 类请求头的值替换为 MASKED，用于日志输出。"""
    return {
        name: AUTHORIZATION_HEADER_MASKED if "authorization" in name.lower() else value
        for name, value in headers.items()
    }


def new_random_uuid() -> str:
    """生成随机 UUID 字符串（用作 X-Request-ID）。"""
    return str(uuid.uuid4())


def to_pretty_json(data: Any) -> str:
    """将报文格式化为缩进的 JSON 字符串，便于调试日志阅读。"""
    if hasattr(data, "to_payload"):
        data = data.to_payload()
    return json.dumps(data, indent=2, ensure_ascii=False, default=str)


def truncate_string(s: str, max_len: int = 100, suffix: str = "...") -> str:
    """
    截断字符串到指定最大长度，超出时添加后缀。

    参数:
        s: 原始字符串
        max_len: 最大长度（包含后缀），默认 100
        suffix: 截断后缀，默认 "..."

    返回:
        截断后的字符串
    """
    if len(s) <= max_len:
        return s
    return s[: max_len - len(suffix)] + suffix
