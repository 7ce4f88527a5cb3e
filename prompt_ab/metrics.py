"""
Datadog metric emission with log fallback.
A failed metric must never break a prompt build.
"""
from typing import List, Optional, Union

from datadog import statsd

from prompt_ab.config import config
from prompt_ab.logging_config import setup_logging

logger = setup_logging()


def emit_metric(
    metric_type: str,
    name: str,
    value: Union[int, float] = 1,
    tags: Optional[List[str]] = None,
) -> None:
    """
    Emit a metric to the local dogstatsd agent.

    Args:
        metric_type: 'gauge', 'increment', 'histogram'
        name: Metric name
        value: Metric value
        tags: List of tags

    Raises:
        ValueError: for an unknown metric type.
    """
    if metric_type not in ("gauge", "increment", "histogram"):
        raise ValueError(f"Unknown metric type: {metric_type}")
    if not config.METRICS_ENABLED:
        return

    try:
        if metric_type == "gauge":
            statsd.gauge(name, value, tags=tags)
        elif metric_type == "increment":
            statsd.increment(name, value=value, tags=tags)
        else:
            statsd.histogram(name, value, tags=tags)
    except Exception as e:
        # FALLBACK: emit to logs instead of Datadog metrics
        logger.warning(
            f"metric:{name} type:{metric_type} value:{value} tags:{','.join(tags or [])}",
            extra={"error": str(e), "reason": "statsd_failure"},
        )
