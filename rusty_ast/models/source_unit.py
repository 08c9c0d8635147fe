"""Source unit data models."""

from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field


INLINE_SOURCE_NAME = "<code>"


class SourceLocation(BaseModel):
    """1-indexed position inside a source unit."""

    line: int = Field(..., ge=1, description="Line number (1-indexed)")
    column: int = Field(..., ge=1, description="Column number (1-indexed)")

    def __str__(self) -> str:
        return f"{self.line}:{self.column}"


class SourceUnit(BaseModel):
    """One self-contained piece of source handed to a front-end."""

    name: str = Field(..., description="File path, or <code> for inline source")
    text: str = Field(..., description="Complete source text")
    path: Optional[Path] = Field(None, description="Path the text was read from")

    @property
    def is_inline(self) -> bool:
        return self.path is None
