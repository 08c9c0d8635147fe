"""
Exceptions raised by the render pipeline.

The source-unit adapter is the only place these surface. Traversal and the
renderers are total over a valid tree and raise nothing.
"""

from typing import Optional

from rusty_ast.models.source_unit import SourceLocation


class RenderError(Exception):
    """Base exception for render failures."""
    pass


class ParseFailed(RenderError):
    """The front-end could not build a tree from the source unit."""

    def __init__(
        self,
        message: str,
        source_name: str = "<code>",
        location: Optional[SourceLocation] = None,
    ):
        self.message = message
        self.source_name = source_name
        self.location = location
        super().__init__(str(self))

    def __str__(self) -> str:
        if self.location is not None:
            return f"{self.source_name}:{self.location}: {self.message}"
        return f"{self.source_name}: {self.message}"


class InvalidConfiguration(RenderError):
    """Render options were rejected before traversal began."""
    pass


class SourceUnavailable(RenderError):
    """A source file could not be read or decoded."""
    pass
