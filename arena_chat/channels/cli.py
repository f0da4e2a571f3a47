"""Interactive terminal chat session.

Reads from stdin, writes answers to stdout. This is the only layer that
touches the filesystem for context: files named by ``/add`` are read here and
handed to the store as plain text.
"""

from __future__ import annotations

import asyncio
import sys
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from pathlib import Path

import click

from arena_chat.context.store import ContextStore
from arena_chat.conversation.manager import ConversationManager
from arena_chat.errors import ArenaChatError

_LANGUAGE_BY_SUFFIX: dict[str, str] = {
    ".py": "python",
    ".ts": "typescript",
    ".tsx": "typescriptreact",
    ".js": "javascript",
    ".jsx": "javascriptreact",
    ".rs": "rust",
    ".go": "go",
    ".java": "java",
    ".c": "c",
    ".h": "c",
    ".cpp": "cpp",
    ".cs": "csharp",
    ".rb": "ruby",
    ".sh": "shellscript",
    ".md": "markdown",
    ".json": "json",
    ".yaml": "yaml",
    ".yml": "yaml",
    ".toml": "toml",
    ".html": "html",
    ".css": "css",
    ".sql": "sql",
}

_HELP_LINES = (
    "/help              show this message",
    "/quit              exit the session",
    "/clear             clear the conversation",
    "/regenerate        ask again for the last answer",
    "/export [PATH]     print or write the conversation as Markdown",
    "/model [NAME]      show or switch the model",
    "/models            list available models",
    "/add PATH          add a file to the context",
    "/context           list context items",
    "/drop KEY          remove a context item",
    "/clear-context     remove all context items",
)

_ASSISTANT_COLOR = "cyan"


def language_for(path: Path) -> str | None:
    return _LANGUAGE_BY_SUFFIX.get(path.suffix.lower())


def add_file_to_store(store: ContextStore, path: Path, workspace_root: Path | None = None) -> str:
    """Read ``path`` and store it as a file item; returns the item key."""
    resolved = path.resolve()
    content = resolved.read_text(encoding="utf-8", errors="replace")
    relative = resolved.name
    if workspace_root is not None:
        try:
            relative = resolved.relative_to(workspace_root.resolve()).as_posix()
        except ValueError:
            relative = resolved.as_posix()
    return store.add_file(
        resolved.as_uri(),
        content,
        relative_path=relative,
        language=language_for(resolved),
    )


@dataclass
class REPLConfig:
    prompt: str = "arena> "
    color: bool = True
    workspace_root: Path | None = None


class ChatREPL:
    """Line-oriented chat loop over one :class:`ConversationManager`."""

    def __init__(
        self,
        manager: ConversationManager,
        store: ContextStore,
        config: REPLConfig | None = None,
    ) -> None:
        self._manager = manager
        self._store = store
        self._config = config or REPLConfig()
        # Honor explicit config, but fall back to a TTY check so piped output stays clean.
        self._color = self._config.color and sys.stdout.isatty()
        self._streamed = False

    async def run(self) -> None:
        self._print_welcome()
        loop = asyncio.get_running_loop()
        while True:
            line = await loop.run_in_executor(None, self._read_line)
            if line is None:
                break
            if not await self.handle_line(line):
                break

    def _read_line(self) -> str | None:
        """Blocking readline, run inside an executor thread."""
        try:
            return input(self._config.prompt)
        except EOFError:
            return None

    async def handle_line(self, line: str) -> bool:
        """Process one input line. Returns False when the session should end."""
        text = line.strip()
        if not text:
            return True
        if text.startswith("/"):
            return await self._handle_command(text)
        await self._ask(lambda: self._manager.send(text, on_progress=self._on_progress))
        return True

    async def _handle_command(self, text: str) -> bool:
        command, _, argument = text.partition(" ")
        command = command.lower()
        argument = argument.strip()

        if command == "/quit":
            return False
        if command == "/help":
            for help_line in _HELP_LINES:
                click.echo(help_line)
        elif command == "/clear":
            self._manager.clear_history()
            click.echo("Chat cleared")
        elif command == "/regenerate":
            await self._ask(lambda: self._manager.regenerate(on_progress=self._on_progress))
        elif command == "/export":
            self._export(argument)
        elif command == "/model":
            self._model(argument)
        elif command == "/models":
            current = self._manager.get_model()
            for model in self._manager.get_available_models():
                marker = "*" if model == current else " "
                click.echo(f"{marker} {model}")
        elif command == "/add":
            self._add(argument)
        elif command == "/context":
            self._list_context()
        elif command == "/drop":
            self._drop(argument)
        elif command == "/clear-context":
            self._store.clear()
            click.echo("Context cleared")
        else:
            click.echo(f"Unknown command: {command} (try /help)")
        return True

    async def _ask(self, call: Callable[[], Awaitable[str]]) -> None:
        self._streamed = False
        try:
            answer = await call()
        except ArenaChatError as exc:
            if self._streamed:
                click.echo()
            click.echo(f"Chat error: {exc}", err=True)
            return

        if self._streamed:
            click.echo()
        else:
            self._echo_answer(answer)

    def _on_progress(self, chunk: str) -> None:
        # Single-shot clients report the whole answer once; print it as-is.
        self._streamed = True
        click.echo(self._style(chunk), nl=False)

    def _echo_answer(self, answer: str) -> None:
        click.echo(self._style(answer))

    def _style(self, text: str) -> str:
        if self._color:
            return click.style(text, fg=_ASSISTANT_COLOR, bold=True)
        return text

    def _export(self, argument: str) -> None:
        markdown = self._manager.export_conversation()
        if not argument:
            click.echo(markdown)
            return
        target = Path(argument)
        try:
            target.write_text(markdown, encoding="utf-8")
        except OSError as exc:
            click.echo(f"Export failed: {exc}", err=True)
            return
        click.echo(f"Conversation written to {target}")

    def _model(self, argument: str) -> None:
        if not argument:
            click.echo(self._manager.get_model())
            return
        try:
            self._manager.set_model(argument)
        except ArenaChatError as exc:
            click.echo(str(exc), err=True)
            return
        click.echo(f"Switched to {argument}")

    def _add(self, argument: str) -> None:
        if not argument:
            click.echo("Usage: /add PATH", err=True)
            return
        path = Path(argument)
        if not path.is_file():
            click.echo(f"No such file: {path}", err=True)
            return
        try:
            key = add_file_to_store(self._store, path, self._config.workspace_root)
        except OSError as exc:
            click.echo(f"Cannot read {path}: {exc}", err=True)
            return
        click.echo(f"Added {key} to context")

    def _drop(self, key: str) -> None:
        if key not in self._store:
            click.echo(f"No context item with key {key}", err=True)
            return
        self._store.remove(key)
        click.echo(f"Removed {key}")

    def _list_context(self) -> None:
        entries = self._store.entries()
        if not entries:
            click.echo("Context is empty")
            return
        for key, item in entries:
            description = f" ({item.description})" if item.description else ""
            click.echo(f"[{item.kind.value}] {item.label}{description}  key={key}")

    def _print_welcome(self) -> None:
        click.echo(f"Arena chat, model {self._manager.get_model()}")
        click.echo("Type /help for commands, /quit to exit.")


__all__ = ["ChatREPL", "REPLConfig", "add_file_to_store", "language_for"]
