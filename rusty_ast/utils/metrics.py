"""
Metrics collection and emission for render runs.

This module provides metrics tracking for:
- Run duration
- Units rendered and failed
- Nodes rendered
- Per-unit render latency
"""

import threading
import time
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Any, Dict, Iterator, List, Optional

from rusty_ast.utils.logging import get_logger

logger = get_logger(__name__)


class RenderMetrics:
    """
    Collects metrics during a batch render run.

    Units may be recorded from worker threads; recording is serialized with a
    lock. Each unit's render itself shares nothing with its siblings.
    """

    def __init__(self, run_name: str = "render"):
        """
        Initialize metrics collector.

        Args:
            run_name: Label for the run (e.g. the directory being rendered)
        """
        self.run_name = run_name

        # Timing metrics
        self.start_time: Optional[datetime] = None
        self.end_time: Optional[datetime] = None
        self.duration_ms: Optional[int] = None

        # Unit metrics
        self.units_rendered: int = 0
        self.units_failed: int = 0
        self.nodes_rendered: int = 0
        self.unit_latencies: List[float] = []
        self.failures: Dict[str, int] = {}

        self.status: str = "pending"
        self._lock = threading.Lock()

    def start(self) -> None:
        """Mark run start."""
        self.start_time = datetime.now(timezone.utc)
        self.status = "running"
        logger.debug(f"Metrics collection started for {self.run_name}")

    def complete(self, status: Optional[str] = None) -> None:
        """
        Mark run completion.

        Args:
            status: Final status; derived from failures when omitted
        """
        self.end_time = datetime.now(timezone.utc)
        if status is None:
            status = "completed_with_errors" if self.units_failed else "completed"
        self.status = status

        if self.start_time:
            duration = (self.end_time - self.start_time).total_seconds()
            self.duration_ms = int(duration * 1000)

        logger.info(
            f"Render run {self.run_name} {self.status}",
            extra={
                "status": self.status,
                "duration_ms": self.duration_ms,
                "units_rendered": self.units_rendered,
                "units_failed": self.units_failed,
                "nodes_rendered": self.nodes_rendered,
            }
        )

    def record_unit(
        self,
        duration_ms: float,
        node_count: int = 0,
        error_type: Optional[str] = None,
    ) -> None:
        """
        Record one source unit.

        Args:
            duration_ms: Time spent on the unit in milliseconds
            node_count: Nodes rendered (0 for failed units)
            error_type: Exception class name if the unit failed
        """
        with self._lock:
            self.unit_latencies.append(duration_ms)
            if error_type:
                self.units_failed += 1
                self.failures[error_type] = self.failures.get(error_type, 0) + 1
            else:
                self.units_rendered += 1
                self.nodes_rendered += node_count

    def get_metrics_summary(self) -> Dict[str, Any]:
        """
        Get summary of collected metrics.

        Returns:
            Dictionary of metrics
        """
        summary: Dict[str, Any] = {
            "run_name": self.run_name,
            "status": self.status,
            "start_time": self.start_time.isoformat() if self.start_time else None,
            "end_time": self.end_time.isoformat() if self.end_time else None,
            "duration_ms": self.duration_ms,
            "units_rendered": self.units_rendered,
            "units_failed": self.units_failed,
            "nodes_rendered": self.nodes_rendered,
        }

        if self.unit_latencies:
            latencies = self.unit_latencies
            summary["unit_latency"] = {
                "count": len(latencies),
                "min_ms": round(min(latencies), 2),
                "max_ms": round(max(latencies), 2),
                "avg_ms": round(sum(latencies) / len(latencies), 2),
            }

        if self.failures:
            summary["failures"] = dict(self.failures)

        return summary


@contextmanager
def track_render(
    metrics_collector: Optional[RenderMetrics],
    node_count: int = 0,
) -> Iterator[Dict[str, Any]]:
    """
    Context manager to time one unit and record it.

    The body may set ``result["node_count"]`` once the tree is known.

    Usage:
        with track_render(metrics) as result:
            tree = build_tree(unit)
            result["node_count"] = count_nodes(tree)

    Args:
        metrics_collector: Metrics collector (optional)
        node_count: Initial node count

    Yields:
        Mutable result dict
    """
    result: Dict[str, Any] = {"node_count": node_count}
    start_time = time.perf_counter()
    error_type = None

    try:
        yield result
    except Exception as e:
        error_type = type(e).__name__
        raise
    finally:
        duration_ms = (time.perf_counter() - start_time) * 1000
        if metrics_collector:
            metrics_collector.record_unit(
                duration_ms,
                node_count=result["node_count"],
                error_type=error_type,
            )


def emit_metric(metric_name: str, value: float, **tags: Any) -> None:
    """
    Emit a metric by logging it.

    Args:
        metric_name: Metric name
        value: Metric value
        **tags: Metric tags/labels
    """
    logger.info(
        f"Metric: {metric_name}",
        extra={
            "metric_name": metric_name,
            "metric_value": value,
            "metric_tags": tags,
        }
    )
