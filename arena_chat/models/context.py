from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, Field, model_validator


class ContextKind(StrEnum):
    file = "file"
    selection = "selection"
    symbol = "symbol"
    terminal = "terminal"


class ContextItem(BaseModel):
    kind: ContextKind
    label: str = Field(min_length=1)
    description: str | None = None
    content: str | None = None
    language: str | None = None
    path: str | None = None
    line_start: int | None = Field(default=None, ge=1)
    line_end: int | None = Field(default=None, ge=1)

    @model_validator(mode="after")
    def _validate_line_span(self) -> ContextItem:
        if self.line_start is not None and self.line_end is not None:
            if self.line_end < self.line_start:
                raise ValueError("line_end must not precede line_start")
        return self


__all__ = ["ContextItem", "ContextKind"]
