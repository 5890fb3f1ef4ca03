"""
einsteinbot - Einstein Bots 运行时 API 的 Python 客户端 SDK

模块概述：
    本文件是 einsteinbot 包的入口文件（__init__.py），定义了包的元信息。
    SDK 负责与远端 Bot 运行时对话：认证、开启/继续/结束聊天会话，
    以及 SDK 请求模型与 REST 报文之间的转换。

    整个 SDK 的核心功能包括：
    - 会话延续管理（外部会话键 → 运行时会话 ID 的映射与自动续接）
    - 凭据生命周期管理（JWT Bearer 换取 OAuth 令牌、内省校验、按真实有效期缓存）
    - 可插拔缓存（进程内内存缓存、Redis 分布式缓存）
    - 命令行工具（单条消息、交互式对话、健康检查）
"""

# 版本号，遵循语义化版本规范（主版本.次版本.修订号）
__version__ = "0.1.0"

# 项目 logo 表情符号，用于 CLI 输出等场景的品牌标识
__logo__ = "🤖"
