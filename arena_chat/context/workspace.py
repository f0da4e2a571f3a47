"""Workspace summary providers consumed when building the system prompt."""

from __future__ import annotations

from pathlib import Path

NO_WORKSPACE = "No workspace folder open."

_PROJECT_MARKERS: tuple[tuple[str, str], ...] = (
    ("package.json", "Node.js/JavaScript"),
    ("requirements.txt", "Python"),
    ("Cargo.toml", "Rust"),
)


class DirectoryWorkspaceSummary:
    """Describe a workspace folder by name, path and detected project types."""

    def __init__(self, root: str | Path | None) -> None:
        self._root = Path(root) if root is not None else None

    def describe(self) -> str:
        root = self._root
        if root is None or not root.is_dir():
            return NO_WORKSPACE

        resolved = root.resolve()
        info = f"Workspace: {resolved.name}\n"
        info += f"Path: {resolved}\n"
        for marker, project_type in _PROJECT_MARKERS:
            if (resolved / marker).exists():
                info += f"Project Type: {project_type}\n"
        return info


class StaticWorkspaceSummary:
    def __init__(self, text: str = NO_WORKSPACE) -> None:
        self._text = text

    def describe(self) -> str:
        return self._text


__all__ = ["NO_WORKSPACE", "DirectoryWorkspaceSummary", "StaticWorkspaceSummary"]
