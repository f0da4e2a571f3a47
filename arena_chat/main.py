"""arena-chat CLI entry point and dependency wiring."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from pathlib import Path

import click
import yaml

from arena_chat.channels.cli import ChatREPL, REPLConfig, add_file_to_store
from arena_chat.clients import ArenaEditPairClient, ChatCompletionsClient, build_completion_client
from arena_chat.config import ArenaSettings, load_settings
from arena_chat.context.store import ContextStore
from arena_chat.context.workspace import DirectoryWorkspaceSummary
from arena_chat.conversation.manager import ConversationManager
from arena_chat.core.logging import setup_logging
from arena_chat.core.telemetry import init_tracing, resource_attributes, shutdown_tracing
from arena_chat.errors import ArenaChatError

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class ChatSession:
    store: ContextStore
    manager: ConversationManager
    client: ArenaEditPairClient | ChatCompletionsClient

    async def aclose(self) -> None:
        await self.client.aclose()


def build_session(settings: ArenaSettings, workspace_root: Path | None) -> ChatSession:
    store = ContextStore(
        settings.context.max_chars,
        terminal_max_chars=settings.context.terminal_max_chars,
    )
    client = build_completion_client(settings.server)
    manager = ConversationManager(
        store,
        client,
        DirectoryWorkspaceSummary(workspace_root),
        settings=settings,
    )
    return ChatSession(store=store, manager=manager, client=client)


def _prepare(config_path: Path | None) -> ArenaSettings:
    try:
        settings = load_settings(config_path)
    except (FileNotFoundError, ValueError, yaml.YAMLError) as exc:
        raise click.ClickException(str(exc)) from exc
    setup_logging(settings.logging.level, json_output=settings.logging.json_output)
    if settings.telemetry.endpoint:
        init_tracing(
            endpoint=settings.telemetry.endpoint,
            env=settings.telemetry.env,
            attributes=resource_attributes(settings),
        )
    return settings


_config_option = click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="YAML config file; defaults and ARENA_* env vars apply when omitted.",
)
_workspace_option = click.option(
    "--workspace",
    "workspace_root",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=None,
    help="Workspace folder described to the model.",
)


@click.group()
def cli() -> None:
    """Chat with a code model about your workspace."""


@cli.command("ask")
@click.argument("message")
@click.option(
    "--file",
    "files",
    multiple=True,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="File to include as context; repeatable.",
)
@click.option(
    "--terminal-file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="File holding terminal output to include as context.",
)
@click.option("--model", default=None, help="Model to ask; must be one of `arena-chat models`.")
@_workspace_option
@_config_option
def ask_command(
    message: str,
    files: tuple[Path, ...],
    terminal_file: Path | None,
    model: str | None,
    workspace_root: Path | None,
    config_path: Path | None,
) -> None:
    """Ask a single question and print the answer."""
    settings = _prepare(config_path)

    async def _run() -> str:
        session = build_session(settings, workspace_root)
        try:
            for path in files:
                add_file_to_store(session.store, path, workspace_root)
            if terminal_file is not None:
                output = terminal_file.read_text(encoding="utf-8", errors="replace")
                session.store.add_terminal_output(output)
            if model is not None:
                session.manager.set_model(model)
            return await session.manager.send(message)
        finally:
            await session.aclose()

    try:
        answer = asyncio.run(_run())
    except ArenaChatError as exc:
        raise click.ClickException(str(exc)) from exc
    finally:
        shutdown_tracing()
    click.echo(answer)


@cli.command("models")
@_config_option
def models_command(config_path: Path | None) -> None:
    """List the models that can be selected."""
    settings = _prepare(config_path)
    for name in settings.models.available:
        marker = "*" if name == settings.models.default else " "
        click.echo(f"{marker} {name}")


@cli.command("chat")
@_workspace_option
@_config_option
@click.option("--no-color", is_flag=True, default=False, help="Disable colored answers.")
def chat_command(workspace_root: Path | None, config_path: Path | None, no_color: bool) -> None:
    """Start an interactive chat session."""
    settings = _prepare(config_path)

    async def _run() -> None:
        session = build_session(settings, workspace_root)
        repl = ChatREPL(
            session.manager,
            session.store,
            REPLConfig(color=not no_color, workspace_root=workspace_root),
        )
        try:
            await repl.run()
        finally:
            await session.aclose()

    try:
        asyncio.run(_run())
    except KeyboardInterrupt:
        logger.info("Chat session interrupted")
    finally:
        shutdown_tracing()


if __name__ == "__main__":
    cli()
