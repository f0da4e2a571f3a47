from __future__ import annotations

import logging
import re

from jinja2 import Environment, StrictUndefined, Template

from arena_chat.config import PromptConfig

logger = logging.getLogger(__name__)

_VERSION_RE = re.compile(r"<!--\s*(?:prompt[-_ ]?)?version\s*:\s*([^>]+?)\s*-->")

DEFAULT_SYSTEM_TEMPLATE = (
    "You are an expert AI coding assistant integrated into the editor.\n"
    "You have access to the following workspace information:\n"
    "{{ workspace_info }}\n\n"
    "{% if context %}Additional context:\n{{ context }}{% endif %}\n\n"
    "Provide clear, concise, and accurate responses. When providing code, "
    "use proper markdown formatting with language specifiers."
)


class PromptManager:
    """Resolve and render the system prompt sent ahead of every request.

    The source selection order is:
    1) ``prompt.path`` from configuration,
    2) ``prompt.template`` from configuration,
    3) the built-in template.
    """

    def __init__(
        self,
        prompt_config: PromptConfig | None = None,
        *,
        fallback_template: str = DEFAULT_SYSTEM_TEMPLATE,
    ) -> None:
        self._config = prompt_config or PromptConfig()
        self._fallback_template = fallback_template
        self._jinja = Environment(undefined=StrictUndefined, autoescape=False)
        self._template: Template | None = None
        self.source: str | None = None
        self.version: str | None = None

    def render_system(self, *, workspace_info: str, context: str) -> str:
        template = self._resolve_template()
        render_context: dict[str, object] = {
            **self._config.variables,
            "workspace_info": workspace_info,
            "context": context,
        }
        return template.render(render_context).strip()

    def _resolve_template(self) -> Template:
        if self._template is not None:
            return self._template

        text, source = self._resolve_source()
        self.source = source
        self.version = self._config.version or _extract_version(text) or "builtin"
        logger.info("Active system prompt version=%s source=%s", self.version, source)
        self._template = self._jinja.from_string(text)
        return self._template

    def _resolve_source(self) -> tuple[str, str]:
        path = self._config.path
        if path is not None:
            if path.exists():
                text = path.read_text(encoding="utf-8").strip()
                if text:
                    return text, str(path)
                logger.warning("Configured prompt path is empty: %s", path)
            else:
                logger.warning("Configured prompt path not found: %s", path)

        template = self._config.template
        if template is not None and template.strip():
            return template.strip(), "config:prompt.template"

        return self._fallback_template, "builtin:system"


def _extract_version(template: str) -> str | None:
    for line in template.splitlines()[:5]:
        match = _VERSION_RE.match(line.strip())
        if match:
            return match.group(1).strip() or None
    return None


__all__ = ["DEFAULT_SYSTEM_TEMPLATE", "PromptManager"]
