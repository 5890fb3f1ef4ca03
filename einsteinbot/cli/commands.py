"""
CLI 命令模块 - einsteinbot 的所有命令行命令定义。

本模块使用 Typer 框架定义 einsteinbot 的 CLI 命令：
- onboard：初始化默认配置文件
- token：获取 OAuth 令牌（脱敏显示），用于检查 Connected App 配置
- status：本地配置状态 + 运行时健康检查
- versions：运行时支持的 API 版本
- send：通过会话托管客户端发送一条消息
- end：结束会话
- chat：交互式对话（prompt_toolkit），exit/quit 时结束会话

技术栈：
- Typer：CLI 框架（基于 Click，支持类型注解自动生成帮助文档）
- Rich：终端美化输出（表格、彩色文本）
- prompt_toolkit：交互式输入（历史记录、行编辑）

日志：SDK 本身不配置 loguru 的输出目标，由 CLI 根据 --verbose 和配置中的 log_level 设置。
"""

import asyncio
import sys

import typer
from loguru import logger
from rich.console import Console
from rich.table import Table
from rich.text import Text

from prompt_toolkit import PromptSession
from prompt_toolkit.formatted_text import HTML
from prompt_toolkit.history import FileHistory
from prompt_toolkit.patch_stdout import patch_stdout

from einsteinbot import __logo__, __version__
from einsteinbot.errors import EinsteinBotError, SessionNotFoundError

# 创建 Typer 应用实例（CLI 根命令）
app = typer.Typer(
    name="einsteinbot",
    help=f"{__logo__} einsteinbot - Einstein Bots runtime API client",
    no_args_is_help=True,
)

console = Console()
EXIT_COMMANDS = {"exit", "quit", "/exit", "/quit", ":q"}  # 退出交互模式的命令集合

_VERBOSE = False
_PROMPT_SESSION: PromptSession | None = None


# ---------------------------------------------------------------------------
# 公共辅助
# ---------------------------------------------------------------------------


def _configure_logging(level: str) -> None:
    """设置 loguru 输出：--verbose 时为 DEBUG，否则使用配置中的 log_level。"""
    logger.remove()
    logger.add(sys.stderr, level="DEBUG" if _VERBOSE else level.upper())


def _load():
    """加载配置并初始化日志。"""
    from einsteinbot.config.loader import load_config

    config = load_config()
    _configure_logging(config.log_level)
    return config


def _run(coro):
    """执行协程；SDK 异常和参数错误统一在 CLI 边界打印并以退出码 1 结束。"""
    try:
        return asyncio.run(coro)
    except (EinsteinBotError, ValueError) as e:
        logger.error(f"{type(e).__name__}: {e}")
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1) from e


def _print_bot_response(response) -> None:
    """逐条打印 Bot 回复。文本类消息显示正文，其余类型显示原始报文。"""
    from einsteinbot.utils.helpers import to_pretty_json, truncate_string

    envelope = response.response_envelope
    console.print()
    console.print(f"[cyan]{__logo__} bot[/cyan] [dim](session {envelope.session_id})[/dim]")
    for message in envelope.messages:
        text = message.display_text
        if text:
            console.print(Text(text))
        else:
            console.print(f"[dim]{message.type}[/dim] {truncate_string(to_pretty_json(message.to_payload()), 500)}")
    console.print()


def _text_request(text: str):
    from einsteinbot.client.model import BotSendMessageRequest
    from einsteinbot.models import TextMessage

    return BotSendMessageRequest(message=TextMessage(text=text))


def version_callback(value: bool):
    """版本号回调：当用户传入 --version/-v 参数时，打印版本号并退出。"""
    if value:
        console.print(f"{__logo__} einsteinbot v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        None, "--version", "-v", callback=version_callback, is_eager=True
    ),
    verbose: bool = typer.Option(False, "--verbose", help="Show debug logs"),
):
    """einsteinbot CLI 根命令回调。处理全局选项（--version、--verbose）。"""
    global _VERBOSE
    _VERBOSE = verbose


# ============================================================================
# Onboard / Setup
# ============================================================================


@app.command()
def onboard():
    """在 ~/.einsteinbot/ 下创建默认配置文件 config.json。"""
    from einsteinbot.config.loader import get_config_path, save_config
    from einsteinbot.config.schema import Config

    config_path = get_config_path()

    if config_path.exists():
        console.print(f"[yellow]Config already exists at {config_path}[/yellow]")
        if not typer.confirm("Overwrite?"):
            raise typer.Exit()

    save_config(Config())
    console.print(f"[green]✓[/green] Created config at {config_path}")

    console.print(f"\n{__logo__} einsteinbot is ready!")
    console.print("\nNext steps:")
    console.print("  1. Fill in [cyan]auth[/cyan] and [cyan]bot[/cyan] in [cyan]~/.einsteinbot/config.json[/cyan]")
    console.print("  2. Check credentials: [cyan]einsteinbot token[/cyan]")
    console.print("  3. Chat: [cyan]einsteinbot chat[/cyan]")


# ============================================================================
# Auth / Runtime info
# ============================================================================


@app.command()
def token():
    """获取 OAuth 令牌并脱敏显示。"""
    from einsteinbot.client import create_auth

    config = _load()

    async def run():
        auth = create_auth(config.auth)
        try:
            value = await auth.get_token()
        finally:
            await auth.aclose()
        console.print(f"Token: [green]{value[:8]}...[/green] ({len(value)} chars)")
        console.print(f"Source: {config.auth.login_endpoint} (app {config.auth.connected_app_id})")

    _run(run())


@app.command()
def status():
    """显示本地配置状态和运行时健康状态。"""
    from einsteinbot.client import create_client
    from einsteinbot.config.loader import get_config_path

    config_path = get_config_path()
    config = _load()

    console.print(f"{__logo__} einsteinbot Status\n")
    console.print(f"Config: {config_path} {'[green]✓[/green]' if config_path.exists() else '[red]✗[/red]'}")
    key_path = config.auth.key_path
    console.print(f"Private key: {key_path} {'[green]✓[/green]' if key_path.exists() else '[red]✗[/red]'}")
    console.print(f"Cache: {config.cache.backend}")

    if not config_path.exists():
        return

    async def run():
        client = create_client(config)
        try:
            health = await client.get_health_status(config.request_config())
        finally:
            await client.aclose()
        console.print(f"Runtime: [green]{health.status}[/green]")

    _run(run())


@app.command()
def versions():
    """列出运行时支持的 API 版本。"""
    from einsteinbot.client import API_VERSION, create_client

    config = _load()

    async def run():
        client = create_client(config)
        try:
            result = await client.basic_client.get_supported_versions(config.request_config())
        finally:
            await client.aclose()

        table = Table(title="Supported API versions")
        table.add_column("Version", style="cyan")
        table.add_column("Status")
        table.add_column("URL", style="dim")
        for v in result.versions:
            marker = " (sdk)" if v.version_number == API_VERSION else ""
            table.add_row(v.version_number + marker, v.status or "", v.url or "")
        console.print(table)

    _run(run())


# ============================================================================
# Conversation
# ============================================================================


@app.command()
def send(
    message: str = typer.Argument(..., help="Text message to send"),
    session: str = typer.Option(..., "--session", "-s", help="External session key"),
):
    """通过会话托管客户端发送一条消息（没有进行中的会话时自动开启）。"""
    from einsteinbot.client import ExternalSessionId, create_client

    config = _load()

    async def run():
        client = create_client(config)
        try:
            response = await client.send_message(
                config.request_config(), ExternalSessionId(session), _text_request(message)
            )
        finally:
            await client.aclose()
        _print_bot_response(response)

    _run(run())


@app.command()
def end(
    session: str = typer.Option(..., "--session", "-s", help="External session key"),
    reason: str = typer.Option("UserRequest", "--reason", "-r", help="End session reason"),
):
    """结束会话。"""
    from einsteinbot.client import BotEndSessionRequest, ExternalSessionId, create_client
    from einsteinbot.models import EndSessionReason

    config = _load()

    async def run():
        request = BotEndSessionRequest(end_session_reason=EndSessionReason(reason))
        client = create_client(config)
        try:
            await client.end_chat_session(config.request_config(), ExternalSessionId(session), request)
        finally:
            await client.aclose()
        console.print(f"[green]✓[/green] Ended session {session}")

    _run(run())


# ---------------------------------------------------------------------------
# CLI 输入：使用 prompt_toolkit 实现编辑和历史记录
# ---------------------------------------------------------------------------


def _init_prompt_session() -> None:
    """创建 prompt_toolkit 会话，历史记录保存在 ~/.einsteinbot/history/cli_history。"""
    global _PROMPT_SESSION

    from einsteinbot.utils.helpers import ensure_dir, get_data_path

    history_file = ensure_dir(get_data_path() / "history") / "cli_history"

    _PROMPT_SESSION = PromptSession(
        history=FileHistory(str(history_file)),
        enable_open_in_editor=False,
        multiline=False,
    )


async def _read_interactive_input_async() -> str:
    """使用 prompt_toolkit 异步读取用户输入。"""
    if _PROMPT_SESSION is None:
        raise RuntimeError("Call _init_prompt_session() first")
    try:
        with patch_stdout():
            return await _PROMPT_SESSION.prompt_async(HTML("<b fg='ansiblue'>You:</b> "))
    except EOFError as exc:
        raise KeyboardInterrupt from exc


def _is_exit_command(command: str) -> bool:
    return command.lower() in EXIT_COMMANDS


@app.command()
def chat(
    session: str = typer.Option(None, "--session", "-s", help="External session key (random if omitted)"),
):
    """
    交互式对话。

    每行输入作为一条文本消息发送；输入 exit/quit 或 Ctrl+C/Ctrl+D 时
    以 UserRequest 原因结束会话后退出。
    """
    from einsteinbot.client import BotEndSessionRequest, ExternalSessionId, create_client
    from einsteinbot.utils.helpers import new_random_uuid

    config = _load()
    external_id = ExternalSessionId(session or f"cli-{new_random_uuid()}")

    _init_prompt_session()
    console.print(
        f"{__logo__} Interactive mode, session [cyan]{external_id.value}[/cyan] "
        "(type [bold]exit[/bold] or [bold]Ctrl+C[/bold] to quit)\n"
    )

    async def run_interactive():
        client = create_client(config)
        request_config = config.request_config()
        try:
            while True:
                try:
                    user_input = await _read_interactive_input_async()
                except KeyboardInterrupt:
                    break
                command = user_input.strip()
                if not command:
                    continue
                if _is_exit_command(command):
                    break

                with console.status("[dim]bot is thinking...[/dim]", spinner="dots"):
                    response = await client.send_message(
                        request_config, external_id, _text_request(command)
                    )
                _print_bot_response(response)

            try:
                await client.end_chat_session(request_config, external_id, BotEndSessionRequest())
            except SessionNotFoundError:
                logger.debug(f"No session to end for {external_id.value}")
        finally:
            await client.aclose()
        console.print("\nGoodbye!")

    _run(run_interactive())


if __name__ == "__main__":
    app()
