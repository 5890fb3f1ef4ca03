"""
会话托管模块 - 自动维护外部会话键与运行时会话的对应关系。

【架构定位】
位于调用方和 BasicChatbotClient 之间：
- 调用方只关心自己渠道上的会话键（如 Slack thread、微信 openid）
- 管理器通过 Cache 查找运行时会话 ID，决定开启新会话还是继续已有会话
- 多实例部署时换用 RedisCache 即可共享会话映射

【Java 开发者类比】
- SessionManagedChatbotClient 类似 Spring Session 对 HttpSession 的透明托管
"""

from einsteinbot.session.manager import SequenceIdGenerator, SessionManagedChatbotClient, cache_key

__all__ = ["SequenceIdGenerator", "SessionManagedChatbotClient", "cache_key"]
