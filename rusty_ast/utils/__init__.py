"""
Utility modules for the Rust AST renderer.
"""

from rusty_ast.utils.logging import (
    get_logger,
    setup_logging,
    log_render_completed,
    log_parse_failure,
    log_error_with_context,
)
from rusty_ast.utils.metrics import (
    RenderMetrics,
    track_render,
    emit_metric,
)

__all__ = [
    "get_logger",
    "setup_logging",
    "log_render_completed",
    "log_parse_failure",
    "log_error_with_context",
    "RenderMetrics",
    "track_render",
    "emit_metric",
]
