"""Render option models."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class OutputFormat(str, Enum):
    """Output format produced by a renderer."""

    TEXT = "text"
    JSON = "json"


MIN_INDENT = 1
MAX_INDENT = 16


class RenderOptions(BaseModel):
    """Options applied to a single render call."""

    indent: int = Field(
        2, ge=MIN_INDENT, le=MAX_INDENT, description="Spaces per depth level in text output"
    )
    json_indent: Optional[int] = Field(
        2, ge=0, le=MAX_INDENT, description="Indentation of pretty-printed JSON"
    )
    compact_json: bool = Field(False, description="Emit JSON on a single line")
