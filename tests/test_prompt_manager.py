from __future__ import annotations

from pathlib import Path

from arena_chat.config import PromptConfig
from arena_chat.core.prompt_manager import PromptManager


def test_builtin_template_includes_workspace_and_context() -> None:
    manager = PromptManager()
    prompt = manager.render_system(workspace_info="Workspace: demo", context="\n## File: a.py\n```\nx\n```\n")

    assert prompt.startswith("You are an expert AI coding assistant")
    assert "Workspace: demo" in prompt
    assert "Additional context:" in prompt
    assert "## File: a.py" in prompt
    assert prompt.endswith("use proper markdown formatting with language specifiers.")
    assert manager.source == "builtin:system"
    assert manager.version == "builtin"


def test_builtin_template_omits_empty_context_section() -> None:
    prompt = PromptManager().render_system(workspace_info="No workspace folder open.", context="")
    assert "Additional context:" not in prompt
    assert "No workspace folder open." in prompt


def test_config_template_and_variables() -> None:
    manager = PromptManager(
        PromptConfig(
            template="{{ persona }} | {{ workspace_info }} | {{ context }}",
            version="v7",
            variables={"persona": "Terse"},
        )
    )
    assert manager.render_system(workspace_info="ws", context="ctx") == "Terse | ws | ctx"
    assert manager.source == "config:prompt.template"
    assert manager.version == "v7"


def test_prompt_file_wins_and_version_is_read(tmp_path: Path) -> None:
    path = tmp_path / "system.j2"
    path.write_text("<!-- version: 2024-05 -->\nFile prompt for {{ workspace_info }}\n", encoding="utf-8")
    manager = PromptManager(PromptConfig(path=path, template="ignored"))

    assert manager.render_system(workspace_info="demo", context="") == (
        "<!-- version: 2024-05 -->\nFile prompt for demo"
    )
    assert manager.source == str(path)
    assert manager.version == "2024-05"


def test_missing_prompt_file_falls_back(tmp_path: Path) -> None:
    manager = PromptManager(PromptConfig(path=tmp_path / "absent.j2", template="fallback {{ context }}"))
    assert manager.render_system(workspace_info="", context="c") == "fallback c"
