"""
Command-line interface for rusty-ast.

Renders inline code, a single file, or every source file in a directory as an
indented text outline or a JSON document. Rendered output goes to stdout;
logs, errors and run statistics go to stderr.
"""

import argparse
import json
import sys
from pathlib import Path
from typing import List, Optional, Union

from rusty_ast.config import settings
from rusty_ast.errors import InvalidConfiguration, ParseFailed, RenderError
from rusty_ast.models.options import OutputFormat, RenderOptions
from rusty_ast.services.batch_renderer import BatchRenderer
from rusty_ast.services.source_adapter import (
    build_tree,
    coerce_format,
    load_source_unit,
    make_options,
    render_tree,
)
from rusty_ast.traversal.walker import count_nodes
from rusty_ast.utils.logging import setup_logging
from rusty_ast.utils.metrics import RenderMetrics, track_render

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_INVALID_CONFIG = 2


def parse_args(args: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="rusty-ast",
        description="Render the syntax tree of Rust source as a text outline or JSON",
    )

    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument(
        "--code",
        "-c",
        type=str,
        help="Inline Rust code to render",
    )
    source.add_argument(
        "--file",
        "-f",
        type=Path,
        help="Rust source file to render",
    )
    source.add_argument(
        "--directory",
        "-d",
        type=Path,
        help="Render every Rust source file in this directory",
    )

    parser.add_argument(
        "--format",
        type=str,
        dest="output_format",
        choices=[f.value for f in OutputFormat],
        help=f"Output format (default: {settings.default_format})",
    )

    parser.add_argument(
        "--indent",
        "-i",
        type=int,
        help=f"Spaces per depth level in text output (default: {settings.indent})",
    )

    parser.add_argument(
        "--compact",
        action="store_true",
        help="Emit JSON on a single line",
    )

    parser.add_argument(
        "--recursive",
        "-r",
        action="store_true",
        help="Descend into subdirectories (with --directory)",
    )

    parser.add_argument(
        "--log-level",
        type=str,
        help=f"Log level for stderr diagnostics (default: {settings.log_level})",
    )

    parser.add_argument(
        "--stats",
        action="store_true",
        help="Print a render metrics summary to stderr",
    )

    parsed = parser.parse_args(args)
    if parsed.recursive and parsed.directory is None:
        parser.error("--recursive requires --directory")
    return parsed


def _report_error(source: str, error: RenderError) -> None:
    if isinstance(error, ParseFailed):
        # Already prefixed with the source name and location
        print(f"error: {error}", file=sys.stderr)
    else:
        print(f"error: {source}: {error}", file=sys.stderr)


def _emit(output: str) -> None:
    # An empty source unit renders as zero lines
    if output:
        print(output)


def _render_single(
    source: Union[str, Path],
    output_format: OutputFormat,
    options: RenderOptions,
    metrics: Optional[RenderMetrics],
) -> int:
    source_name = str(source) if isinstance(source, Path) else "<code>"
    if metrics is not None:
        metrics.start()

    try:
        with track_render(metrics) as result:
            unit = load_source_unit(source)
            tree = build_tree(unit)
            result["node_count"] = count_nodes(tree)
            output = render_tree(tree, output_format, options)
    except InvalidConfiguration:
        raise
    except RenderError as e:
        _report_error(source_name, e)
        return EXIT_FAILURE
    finally:
        if metrics is not None:
            metrics.complete()

    _emit(output)
    return EXIT_OK


def _render_directory(
    directory: Path,
    output_format: OutputFormat,
    options: RenderOptions,
    recursive: bool,
    metrics: Optional[RenderMetrics],
) -> int:
    try:
        results = BatchRenderer().render_directory(
            directory,
            output_format,
            recursive=recursive,
            options=options,
            metrics=metrics,
        )
    except InvalidConfiguration:
        raise
    except RenderError as e:
        _report_error(str(directory), e)
        return EXIT_FAILURE

    exit_code = EXIT_OK
    for result in results:
        if result.ok:
            print(f"==> {result.source} <==")
            _emit(result.output or "")
            continue

        exit_code = EXIT_FAILURE
        error = result.error
        location = f":{error.line}:{error.column}" if error.line is not None else ""
        print(f"error: {result.source}{location}: {error.message}", file=sys.stderr)

    return exit_code


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the CLI."""
    args = parse_args(argv)
    try:
        setup_logging(args.log_level or settings.log_level)
    except ValueError as e:
        print(f"error: invalid log level: {e}", file=sys.stderr)
        return EXIT_INVALID_CONFIG

    try:
        output_format = coerce_format(args.output_format or settings.default_format)
        options = make_options(
            indent=args.indent,
            compact_json=True if args.compact else None,
        )
    except InvalidConfiguration as e:
        print(f"error: {e}", file=sys.stderr)
        return EXIT_INVALID_CONFIG

    metrics = RenderMetrics(run_name=str(args.directory or args.file or "<code>")) if args.stats else None

    try:
        if args.directory is not None:
            exit_code = _render_directory(
                args.directory, output_format, options, args.recursive, metrics
            )
        elif args.file is not None:
            exit_code = _render_single(args.file, output_format, options, metrics)
        else:
            exit_code = _render_single(args.code, output_format, options, metrics)
    except InvalidConfiguration as e:
        print(f"error: {e}", file=sys.stderr)
        return EXIT_INVALID_CONFIG

    if metrics is not None:
        print(json.dumps(metrics.get_metrics_summary(), indent=2), file=sys.stderr)

    return exit_code


if __name__ == "__main__":
    sys.exit(main())
