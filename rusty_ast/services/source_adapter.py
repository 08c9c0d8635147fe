"""
Source-unit adapter.

Entry point of the render pipeline: loads a source unit, asks a language
front-end for its syntax tree, and drives one traversal per requested output
format. Nothing is cached between calls; each call owns its tree and its
renderers.
"""

import time
from functools import lru_cache
from pathlib import Path
from typing import TYPE_CHECKING, Any, Dict, Iterable, Optional, Union

from pydantic import ValidationError

from rusty_ast.config import settings
from rusty_ast.errors import InvalidConfiguration, ParseFailed, SourceUnavailable
from rusty_ast.models.options import OutputFormat, RenderOptions
from rusty_ast.models.source_unit import INLINE_SOURCE_NAME, SourceUnit
from rusty_ast.models.syntax_node import SyntaxNode
from rusty_ast.renderers.json import JsonRenderer
from rusty_ast.renderers.text import TextRenderer
from rusty_ast.traversal.walker import count_nodes
from rusty_ast.utils.logging import get_logger, log_parse_failure, log_render_completed

if TYPE_CHECKING:
    from frontends.base import LanguageFrontend
    from frontends.manager import FrontendManager

logger = get_logger(__name__)

Source = Union[str, Path, SourceUnit]
Renderer = Union[TextRenderer, JsonRenderer]


@lru_cache(maxsize=1)
def _default_manager() -> "FrontendManager":
    # Front-ends hold configuration only, so one manager serves every call
    from frontends.manager import get_frontend_manager

    return get_frontend_manager()


def make_options(**values: Any) -> RenderOptions:
    """
    Build validated render options.

    Values that are omitted or None fall back to the application settings.

    Raises:
        InvalidConfiguration: If any option is out of range
    """
    merged: Dict[str, Any] = {
        "indent": settings.indent,
        "json_indent": settings.json_indent,
        "compact_json": settings.compact_json,
    }
    merged.update({name: value for name, value in values.items() if value is not None})

    try:
        return RenderOptions(**merged)
    except ValidationError as e:
        raise InvalidConfiguration(f"Invalid render options: {e}") from e


def coerce_format(output_format: Union[str, OutputFormat]) -> OutputFormat:
    try:
        return OutputFormat(output_format)
    except ValueError as e:
        choices = ", ".join(f.value for f in OutputFormat)
        raise InvalidConfiguration(
            f"Unknown output format {output_format!r} (expected one of: {choices})"
        ) from e


def load_source_unit(source: Source) -> SourceUnit:
    """
    Turn inline code or a file path into a source unit.

    A ``str`` is always inline code; files must be passed as ``Path``.

    Args:
        source: Inline code, a path to a file, or an existing source unit

    Returns:
        SourceUnit ready for parsing

    Raises:
        SourceUnavailable: If the file cannot be read as UTF-8 text
    """
    if isinstance(source, SourceUnit):
        return source

    if isinstance(source, Path):
        try:
            text = source.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise SourceUnavailable(f"Cannot read {source}: {e}") from e
        return SourceUnit(name=str(source), text=text, path=source)

    return SourceUnit(name=INLINE_SOURCE_NAME, text=source)


def select_frontend(unit: SourceUnit) -> "LanguageFrontend":
    """
    Pick the front-end for a source unit.

    Files are matched by extension; inline code and unknown extensions use the
    configured default language.

    Raises:
        InvalidConfiguration: If no front-end serves the default language
    """
    manager = _default_manager()

    if unit.path is not None:
        frontend = manager.get_frontend_for_file(unit.path)
        if frontend is not None:
            return frontend

    frontend = manager.get_frontend(settings.default_language)
    if frontend is None:
        raise InvalidConfiguration(
            f"No front-end registered for language '{settings.default_language}'"
        )
    return frontend


def build_tree(unit: SourceUnit, frontend: Optional["LanguageFrontend"] = None) -> SyntaxNode:
    """
    Parse a source unit into a syntax tree.

    Args:
        unit: Source unit to parse
        frontend: Front-end to use; selected automatically when omitted

    Returns:
        Root node of the tree

    Raises:
        ParseFailed: If the source is malformed
    """
    if frontend is None:
        frontend = select_frontend(unit)

    try:
        return frontend.parse(unit)
    except ParseFailed as e:
        location = e.location
        log_parse_failure(
            logger.with_context(language=frontend.language_name),
            unit.name,
            e.message,
            line=location.line if location else None,
            column=location.column if location else None,
        )
        raise


def make_renderer(output_format: Union[str, OutputFormat], options: RenderOptions) -> Renderer:
    """
    Create a fresh renderer for one traversal.

    Raises:
        InvalidConfiguration: If the format or the options are rejected
    """
    output_format = coerce_format(output_format)
    if output_format == OutputFormat.TEXT:
        return TextRenderer(indent_width=options.indent)
    return JsonRenderer(indent=options.json_indent, compact=options.compact_json)


def render_tree(
    tree: SyntaxNode,
    output_format: Union[str, OutputFormat] = OutputFormat.TEXT,
    options: Optional[RenderOptions] = None,
) -> str:
    """Render an already-built tree with a single traversal."""
    renderer = make_renderer(output_format, options or make_options())
    return renderer.render(tree)


def render(
    source: Source,
    output_format: Union[str, OutputFormat] = OutputFormat.TEXT,
    options: Optional[RenderOptions] = None,
    frontend: Optional["LanguageFrontend"] = None,
) -> str:
    """
    Parse a source unit and render its tree.

    Options are validated before parsing, so a bad configuration fails before
    any traversal and a parse failure never yields partial output.

    Args:
        source: Inline code (``str``), a file (``Path``) or a SourceUnit
        output_format: 'text' or 'json'
        options: Render options; defaults come from settings
        frontend: Front-end override

    Returns:
        Rendered output

    Raises:
        InvalidConfiguration: If the format or options are invalid
        SourceUnavailable: If a file cannot be read
        ParseFailed: If the source is malformed
    """
    start_time = time.perf_counter()
    renderer = make_renderer(output_format, options or make_options())
    unit = load_source_unit(source)
    tree = build_tree(unit, frontend)
    output = renderer.render(tree)

    log_render_completed(
        logger,
        unit.name,
        coerce_format(output_format).value,
        count_nodes(tree),
        duration_ms=(time.perf_counter() - start_time) * 1000,
    )
    return output


def render_formats(
    source: Source,
    formats: Iterable[Union[str, OutputFormat]] = tuple(OutputFormat),
    options: Optional[RenderOptions] = None,
    frontend: Optional["LanguageFrontend"] = None,
) -> Dict[OutputFormat, str]:
    """
    Parse once and render the tree in several formats.

    Each format gets its own renderer and its own traversal.

    Returns:
        Mapping of format to rendered output, in request order
    """
    options = options or make_options()
    renderers = {coerce_format(f): make_renderer(f, options) for f in formats}

    unit = load_source_unit(source)
    tree = build_tree(unit, frontend)
    node_count = count_nodes(tree)

    outputs: Dict[OutputFormat, str] = {}
    for output_format, renderer in renderers.items():
        start_time = time.perf_counter()
        outputs[output_format] = renderer.render(tree)
        log_render_completed(
            logger,
            unit.name,
            output_format.value,
            node_count,
            duration_ms=(time.perf_counter() - start_time) * 1000,
        )
    return outputs
