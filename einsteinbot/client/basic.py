"""
基础聊天客户端 - 直接调用 Bot 运行时 REST API 的传输层。

本客户端不做会话管理：调用方需要自己保存运行时返回的会话 ID，
并在继续/结束会话时传回。需要自动会话管理时使用 SessionManagedChatbotClient。

【REST 端点（API v5.0.0）】
- POST   {runtime}/v5.0.0/bots/{botId}/sessions          开启会话
- POST   {runtime}/v5.0.0/sessions/{sessionId}/messages  继续会话
- DELETE {runtime}/v5.0.0/sessions/{sessionId}           结束会话（X-Session-End-Reason）
- GET    {runtime}/status                                健康检查
- GET    {runtime}/versions                              支持的 API 版本

公共请求头：Authorization（Bearer 令牌）、X-Org-Id、X-Request-ID，
继续/结束会话时如有 runtime CRC 则附带 X-Runtime-CRC。

【运行时地址】
未显式指定 base_path 时，通过组织的 api-info 接口查询 runtimeBaseUrl，
按 force 配置端点缓存；开启会话后记录 会话 ID → 运行时地址，后续调用直接复用。
"""

import httpx
from loguru import logger

from einsteinbot.auth.base import AuthMechanism
from einsteinbot.cache.memory import InMemoryCache
from einsteinbot.client.model import (
    HEADER_NAME_REQUEST_ID,
    HEADER_NAME_RUNTIME_CRC,
    BotEndSessionRequest,
    BotHttpHeaders,
    BotResponse,
    BotSendMessageRequest,
    ExternalSessionId,
    RequestConfig,
    RuntimeSessionId,
)
from einsteinbot.errors import ChatbotResponseError, EinsteinBotError, UnsupportedSDKError
from einsteinbot.models import (
    ChatMessageEnvelope,
    ChatMessageResponseEnvelope,
    ErrorPayload,
    ForceConfig,
    InitMessageEnvelope,
    ResponseEnvelope,
    Status,
    SupportedVersions,
    build_init_message,
    to_response_envelope,
)
from einsteinbot.utils.helpers import new_random_uuid, to_pretty_json
from einsteinbot.utils.http import DEFAULT_TIMEOUT_SECONDS, create_http_client
from einsteinbot.utils.release import ReleaseInfo

API_VERSION = "5.0.0"
API_INFO_URI = "/services/data/v58.0/connect/bots/api-info"
SESSION_BASE_PATH_TTL_SECONDS = 3 * 24 * 3600


def build_init_message_envelope(
    config: RequestConfig,
    external_session_id: ExternalSessionId,
    request: BotSendMessageRequest,
) -> InitMessageEnvelope:
    """
    构造开启会话的请求信封。

    异常:
        ValueError: 消息不是文本消息
    """
    return InitMessageEnvelope(
        external_session_key=external_session_id.value,
        force_config=ForceConfig(endpoint=config.force_config_endpoint),
        message=build_init_message(request.message),
        variables=request.variables,
        referrers=request.referrers,
        tz=request.tz,
        response_options=request.response_options,
        rich_content_capabilities=request.rich_content_capabilities,
    )


def build_chat_message_envelope(request: BotSendMessageRequest) -> ChatMessageEnvelope:
    """构造继续会话的请求信封。"""
    return ChatMessageEnvelope(message=request.message, response_options=request.response_options)


class BasicChatbotClient:
    """
    运行时 API 传输层客户端。

    参数:
        auth: 认证机制，每次请求前获取令牌
        base_path: 运行时地址；为 None 时通过 api-info 自动发现
        http: 可选的 HTTP 客户端（测试时注入）；注入的客户端由调用方关闭
        timeout: 连接/读取超时秒数
        release_info: SDK 版本信息，用于 User-Agent
        check_api_version: 开启会话前是否校验 API 版本仍被支持
    """

    def __init__(
        self,
        auth: AuthMechanism,
        base_path: str | None = None,
        http: httpx.AsyncClient | None = None,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        release_info: ReleaseInfo | None = None,
        check_api_version: bool = True,
    ):
        self.auth = auth
        self.base_path = base_path.rstrip("/") if base_path else None
        self.release_info = release_info or ReleaseInfo.from_metadata()
        self.check_api_version = check_api_version
        self._owns_http = http is None
        self._http = http or create_http_client(timeout, self.release_info.user_agent)
        self._locations = InMemoryCache(ttl_seconds=SESSION_BASE_PATH_TTL_SECONDS)

    # ------------------------------------------------------------------
    # 会话操作
    # ------------------------------------------------------------------

    async def start_chat_session(
        self,
        config: RequestConfig,
        external_session_id: ExternalSessionId,
        request: BotSendMessageRequest,
    ) -> BotResponse:
        """
        开启新会话。

        参数:
            config: 路由配置
            external_session_id: 调用方渠道上的会话键
            request: 首条消息请求（消息必须是文本消息）

        返回:
            BotResponse，response_envelope.session_id 为运行时会话 ID
        """
        envelope = build_init_message_envelope(config, external_session_id, request)

        base_url = await self._runtime_url(config)
        if self.check_api_version:
            await self._ensure_api_version_supported(base_url)

        logger.debug(f"Init message envelope: {to_pretty_json(envelope)}")
        request.request_envelope_interceptor(envelope)
        resp = await self._http.post(
            f"{base_url}/v{API_VERSION}/bots/{config.bot_id}/sessions",
            json=envelope.to_payload(),
            headers=await self._headers(config, request.request_id),
        )
        self._raise_for_status(resp)

        response_envelope = ResponseEnvelope.model_validate(resp.json())
        await self._locations.set(self._session_key(response_envelope.session_id), base_url)
        logger.info(
            f"Started session {response_envelope.session_id} "
            f"for external key {external_session_id.value}"
        )
        return self._to_bot_response(response_envelope, resp)

    async def send_message(
        self,
        config: RequestConfig,
        runtime_session_id: RuntimeSessionId,
        request: BotSendMessageRequest,
    ) -> BotResponse:
        """向已有会话发送消息。"""
        envelope = build_chat_message_envelope(request)
        base_url = await self._session_url(config, runtime_session_id)

        logger.debug(f"Chat message envelope: {to_pretty_json(envelope)}")
        request.request_envelope_interceptor(envelope)
        resp = await self._http.post(
            f"{base_url}/v{API_VERSION}/sessions/{runtime_session_id.value}/messages",
            json=envelope.to_payload(),
            headers=await self._headers(config, request.request_id, request.runtime_crc),
        )
        self._raise_for_status(resp)

        chat_envelope = ChatMessageResponseEnvelope.model_validate(resp.json())
        return self._to_bot_response(
            to_response_envelope(runtime_session_id.value, chat_envelope), resp
        )

    async def end_chat_session(
        self,
        config: RequestConfig,
        runtime_session_id: RuntimeSessionId,
        request: BotEndSessionRequest,
    ) -> BotResponse:
        """结束会话。"""
        reason = request.end_session_reason
        base_url = await self._session_url(config, runtime_session_id)

        request.request_envelope_interceptor(f"EndSessionReason: {reason.value}")
        headers = await self._headers(config, request.request_id, request.runtime_crc)
        headers["X-Session-End-Reason"] = reason.value
        resp = await self._http.delete(
            f"{base_url}/v{API_VERSION}/sessions/{runtime_session_id.value}",
            headers=headers,
        )
        self._raise_for_status(resp)

        chat_envelope = ChatMessageResponseEnvelope.model_validate(resp.json() if resp.content else {})
        await self._locations.remove(self._session_key(runtime_session_id.value))
        logger.info(f"Ended session {runtime_session_id.value} with reason {reason.value}")
        return self._to_bot_response(
            to_response_envelope(runtime_session_id.value, chat_envelope), resp
        )

    # ------------------------------------------------------------------
    # 健康检查与版本
    # ------------------------------------------------------------------

    async def get_health_status(self, config: RequestConfig) -> Status:
        """查询运行时健康状态。"""
        base_url = await self._runtime_url(config)
        resp = await self._http.get(f"{base_url}/status")
        self._raise_for_status(resp)
        return Status.model_validate(resp.json())

    async def get_supported_versions(self, config: RequestConfig) -> SupportedVersions:
        """查询运行时支持的 API 版本列表。"""
        base_url = await self._runtime_url(config)
        return await self._fetch_versions(base_url)

    async def _fetch_versions(self, base_url: str) -> SupportedVersions:
        resp = await self._http.get(f"{base_url}/versions")
        self._raise_for_status(resp)
        versions = SupportedVersions.model_validate(resp.json())
        if not versions.versions:
            raise EinsteinBotError("Versions response was incorrect")
        return versions

    async def _ensure_api_version_supported(self, base_url: str) -> None:
        versions = await self._fetch_versions(base_url)
        if any(v.version_number == API_VERSION for v in versions.versions):
            return
        latest = next(
            (v.version_number for v in versions.versions if (v.status or "").upper() == "ACTIVE"),
            API_VERSION,
        )
        raise UnsupportedSDKError(API_VERSION, latest)

    # ------------------------------------------------------------------
    # 内部工具
    # ------------------------------------------------------------------

    @staticmethod
    def _session_key(session_id: str) -> str:
        return f"session-{session_id}"

    async def _session_url(self, config: RequestConfig, session_id: RuntimeSessionId) -> str:
        """会话所在的运行时地址。会话由其他进程开启时回退到按配置解析。"""
        cached = await self._locations.get(self._session_key(session_id.value))
        return cached or await self._runtime_url(config)

    async def _runtime_url(self, config: RequestConfig) -> str:
        """解析运行时地址：显式配置优先，否则查询 api-info 并按 force 端点缓存。"""
        if self.base_path:
            return self.base_path

        key = f"runtime-url-{config.force_config_endpoint}"
        cached = await self._locations.get(key)
        if cached:
            return cached

        resp = await self._http.get(
            config.force_config_endpoint.rstrip("/") + API_INFO_URI,
            headers={"Authorization": await self.auth.get_authorization_header()},
        )
        self._raise_for_status(resp)
        runtime_url = (resp.json() or {}).get("runtimeBaseUrl")
        if not runtime_url:
            raise EinsteinBotError("Could not get runtime URL")

        runtime_url = runtime_url.rstrip("/")
        await self._locations.set(key, runtime_url)
        logger.debug(f"Resolved runtime URL {runtime_url} for {config.force_config_endpoint}")
        return runtime_url

    async def _headers(
        self,
        config: RequestConfig,
        request_id: str | None,
        runtime_crc: str | None = None,
    ) -> dict[str, str]:
        headers = {
            "Authorization": await self.auth.get_authorization_header(),
            "X-Org-Id": config.org_id,
            HEADER_NAME_REQUEST_ID: request_id or new_random_uuid(),
        }
        if runtime_crc:
            headers[HEADER_NAME_RUNTIME_CRC] = runtime_crc
        return headers

    @staticmethod
    def _raise_for_status(resp: httpx.Response) -> None:
        """非 2xx 响应转换为 ChatbotResponseError，尽量解析错误报文。"""
        if not resp.is_error:
            return
        try:
            error = ErrorPayload.model_validate(resp.json())
        except ValueError:
            error = None
        raise ChatbotResponseError(resp.status_code, error, resp.text, dict(resp.headers))

    @staticmethod
    def _to_bot_response(envelope: ResponseEnvelope, resp: httpx.Response) -> BotResponse:
        return BotResponse(
            response_envelope=envelope,
            http_status_code=resp.status_code,
            http_headers=BotHttpHeaders.from_pairs(list(resp.headers.multi_items())),
        )

    async def aclose(self) -> None:
        if self._owns_http:
            await self._http.aclose()
