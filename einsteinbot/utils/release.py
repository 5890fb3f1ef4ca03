"""
发布信息 - SDK 名称与版本号，用于构造 User-Agent 请求头。

ReleaseInfo 是一个不可变值对象，由客户端在构造时注入，而不是全局单例；
默认值从已安装包的元数据中读取，读取失败时回退为 "UNKNOWN"。
"""

from dataclasses import dataclass
from importlib import metadata

from loguru import logger

SDK_DISTRIBUTION = "einsteinbot-sdk"
DEFAULT_VALUE = "UNKNOWN"


@dataclass(frozen=True)
class ReleaseInfo:
    sdk_name: str = DEFAULT_VALUE
    sdk_version: str = DEFAULT_VALUE

    @property
    def user_agent(self) -> str:
        return f"{self.sdk_name}/{self.sdk_version}"

    @classmethod
    def from_metadata(cls, distribution: str = SDK_DISTRIBUTION) -> "ReleaseInfo":
        """从已安装包的元数据读取名称与版本。"""
        try:
            version = metadata.version(distribution)
        except metadata.PackageNotFoundError:
            logger.debug(f"Package metadata for {distribution} not found")
            from einsteinbot import __version__

            version = __version__ or DEFAULT_VALUE
        return cls(sdk_name=distribution, sdk_version=version)
