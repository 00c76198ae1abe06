"""Pure numeric helpers shared by the parsers and calculators."""

from math import ceil
from typing import Dict, Iterable, Sequence

PERCENTILE_POINTS = (50, 95, 99)


def percentile(sorted_values: Sequence[float], point: float) -> float:
    """Nearest-rank percentile of an ascending sequence (0 when empty)."""
    if not sorted_values:
        return 0
    index = ceil((point / 100) * len(sorted_values)) - 1
    index = min(max(0, index), len(sorted_values) - 1)
    return sorted_values[index]


def average(values: Iterable[float]) -> float:
    values_list = list(values)
    if not values_list:
        return 0
    return sum(values_list) / len(values_list)


def maximum(values: Iterable[float]) -> float:
    values_list = list(values)
    if not values_list:
        return 0
    return max(values_list)


def safe_divide(numerator: float, denominator: float) -> float:
    return numerator / denominator if denominator > 0 else 0


def last(values: Sequence[float]) -> float:
    return values[-1] if values else 0


def compute_percentile_metrics(values: Iterable[float]) -> Dict[str, float]:
    """Summarize a value sequence as avg, p50, p95, p99 and max."""
    values_list = list(values)
    if not values_list:
        return empty_percentile_metrics()

    sorted_values = sorted(values_list)
    metrics: Dict[str, float] = {"avg": average(values_list)}
    for point in PERCENTILE_POINTS:
        metrics[f"p{point}"] = percentile(sorted_values, point)
    metrics["max"] = sorted_values[-1]
    return metrics


def empty_percentile_metrics() -> Dict[str, float]:
    """Return the all-zero percentile structure."""
    return {"avg": 0, "p50": 0, "p95": 0, "p99": 0, "max": 0}


def time_span_seconds(timestamps_ms: Sequence[float]) -> float:
    """Seconds between the first and last timestamp, 1 when fewer than two."""
    if len(timestamps_ms) <= 1:
        return 1
    return (max(timestamps_ms) - min(timestamps_ms)) / 1000
