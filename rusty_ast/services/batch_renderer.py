"""
Batch rendering of many source files.

Each file is an independent source unit rendered on a worker thread. Units
share no state, so a failing unit is recorded as an ErrorRecord and never
affects its siblings. Results come back in input order.
"""

from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Union

from pydantic import BaseModel

from rusty_ast.config import settings
from rusty_ast.errors import ParseFailed, RenderError, SourceUnavailable
from rusty_ast.models.error import ErrorRecord
from rusty_ast.models.options import OutputFormat, RenderOptions
from rusty_ast.services.source_adapter import (
    build_tree,
    load_source_unit,
    make_options,
    make_renderer,
    select_frontend,
)
from rusty_ast.traversal.walker import count_nodes
from rusty_ast.utils.logging import get_logger, log_error_with_context
from rusty_ast.utils.metrics import RenderMetrics, emit_metric, track_render

logger = get_logger(__name__)


class UnitResult(BaseModel):
    """Outcome of rendering one source unit."""

    source: str
    output: Optional[str] = None
    error: Optional[ErrorRecord] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def discover_sources(
    directory: Path,
    extensions: Iterable[str],
    recursive: bool = False,
) -> List[Path]:
    """
    Find source files in a directory.

    Args:
        directory: Directory to scan
        extensions: File extensions to include (e.g. ['.rs'])
        recursive: Descend into subdirectories

    Returns:
        Sorted list of matching files

    Raises:
        SourceUnavailable: If the directory does not exist
    """
    if not directory.is_dir():
        raise SourceUnavailable(f"Not a directory: {directory}")

    wanted = set(extensions)
    candidates = directory.rglob("*") if recursive else directory.iterdir()
    return sorted(path for path in candidates if path.is_file() and path.suffix in wanted)


class BatchRenderer:
    """Renders many files concurrently with a per-unit failure policy."""

    def __init__(self, max_workers: Optional[int] = None):
        """
        Initialize the batch renderer.

        Args:
            max_workers: Worker threads; defaults to settings.max_workers
        """
        self.max_workers = max(1, max_workers or settings.max_workers)

    def render_paths(
        self,
        paths: Sequence[Path],
        output_format: Union[str, OutputFormat] = OutputFormat.TEXT,
        options: Optional[RenderOptions] = None,
        metrics: Optional[RenderMetrics] = None,
    ) -> List[UnitResult]:
        """
        Render every path as its own source unit.

        Args:
            paths: Files to render
            output_format: 'text' or 'json'
            options: Render options shared by all units
            metrics: Collector to record the run into

        Returns:
            One UnitResult per path, in input order

        Raises:
            InvalidConfiguration: If the format or options are invalid
        """
        options = options or make_options()
        # Reject bad configuration once, before any unit is parsed
        make_renderer(output_format, options)

        if metrics is not None:
            metrics.start()

        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            results = list(executor.map(
                lambda path: self._render_unit(path, output_format, options, metrics),
                paths,
            ))

        if metrics is not None:
            metrics.complete()

        failed = sum(1 for result in results if not result.ok)
        emit_metric("batch_units_failed", failed, units=len(results))
        logger.info(
            f"Batch render finished: {len(results) - failed} rendered, {failed} failed",
            extra={"units": len(results), "units_failed": failed},
        )
        return results

    def render_directory(
        self,
        directory: Path,
        output_format: Union[str, OutputFormat] = OutputFormat.TEXT,
        recursive: bool = False,
        options: Optional[RenderOptions] = None,
        metrics: Optional[RenderMetrics] = None,
    ) -> List[UnitResult]:
        """Render every supported source file in a directory."""
        from frontends.manager import get_frontend_manager

        extensions = get_frontend_manager().list_supported_extensions()
        paths = discover_sources(directory, extensions, recursive=recursive)
        logger.debug(
            f"Discovered {len(paths)} source files in {directory}",
            extra={"source": str(directory)},
        )
        return self.render_paths(paths, output_format, options=options, metrics=metrics)

    def _render_unit(
        self,
        path: Path,
        output_format: Union[str, OutputFormat],
        options: RenderOptions,
        metrics: Optional[RenderMetrics],
    ) -> UnitResult:
        source = str(path)
        try:
            with track_render(metrics) as result:
                unit = load_source_unit(path)
                tree = build_tree(unit, select_frontend(unit))
                result["node_count"] = count_nodes(tree)
                output = make_renderer(output_format, options).render(tree)
            return UnitResult(source=source, output=output)

        except ParseFailed as e:
            location = e.location
            return UnitResult(source=source, error=ErrorRecord(
                source=source,
                error_type=type(e).__name__,
                message=e.message,
                line=location.line if location else None,
                column=location.column if location else None,
            ))

        except RenderError as e:
            logger.warning(f"Failed to render {source}: {e}", extra={"source": source})
            return UnitResult(source=source, error=ErrorRecord(
                source=source,
                error_type=type(e).__name__,
                message=str(e),
            ))

        except Exception as e:
            log_error_with_context(logger, f"Unexpected error rendering {source}", e, source=source)
            return UnitResult(source=source, error=ErrorRecord(
                source=source,
                error_type=type(e).__name__,
                message=str(e),
            ))
