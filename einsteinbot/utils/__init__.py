"""
工具函数模块 - 提供 einsteinbot 项目全局通用的辅助函数。

本模块包含：
- helpers.py：路径、上下文变量、请求头脱敏等辅助函数
- release.py：SDK 名称与版本号（User-Agent）
"""

from einsteinbot.utils.helpers import (
    add_integration_type_and_name_to_context_variables,
    ensure_dir,
    get_data_path,
    mask_authorization_header,
    new_random_uuid,
    validate_integration_name,
)
from einsteinbot.utils.release import ReleaseInfo

__all__ = [
    "ReleaseInfo",
    "add_integration_type_and_name_to_context_variables",
    "ensure_dir",
    "get_data_path",
    "mask_authorization_header",
    "new_random_uuid",
    "validate_integration_name",
]
