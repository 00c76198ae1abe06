"""Parser for Kibana server stats logs."""

import logging
from pathlib import Path
from typing import Any, Dict, List, Union

from ..models import KibanaStatsData
from ..stats import time_span_seconds
from .common import as_number, dig, iter_log_samples, read_log_lines

logger = logging.getLogger(__name__)

# (series name, path into the sample body)
_SCALAR_FIELDS = (
    ("event_loop_delays", ("process", "event_loop_delay")),
    ("event_loop_delay_p50", ("process", "event_loop_delay_histogram", "percentiles", "50")),
    ("event_loop_delay_p95", ("process", "event_loop_delay_histogram", "percentiles", "95")),
    ("event_loop_delay_p99", ("process", "event_loop_delay_histogram", "percentiles", "99")),
    ("event_loop_utilizations", ("process", "event_loop_utilization", "utilization")),
    ("es_client_active_sockets", ("elasticsearch_client", "total_active_sockets")),
    ("es_client_idle_sockets", ("elasticsearch_client", "total_idle_sockets")),
    ("es_client_queued_requests", ("elasticsearch_client", "total_queued_requests")),
    ("response_times", ("response_times", "avg_ms")),
    ("max_response_times", ("response_times", "max_ms")),
    ("heap_bytes", ("process", "memory", "heap", "used_bytes")),
    ("rss_bytes", ("process", "memory", "resident_set_size_bytes")),
    ("request_totals", ("requests", "total")),
    ("request_disconnects", ("requests", "disconnects")),
    ("os_load_1m", ("os", "load", "1m")),
    ("os_load_5m", ("os", "load", "5m")),
    ("os_load_15m", ("os", "load", "15m")),
)


def request_error_rate(requests: Dict[str, Any]) -> float:
    """Percentage of requests answered with a 4xx/5xx status in one sample."""
    total = as_number(requests.get("total")) or 0
    error_count = 0
    for code, count in requests["status_codes"].items():
        try:
            status = int(code)
        except (TypeError, ValueError):
            continue
        if status >= 400 and as_number(count) is not None:
            error_count += count
    return (error_count / total) * 100 if total > 0 else 0


def parse_kibana_stats(path: Union[str, Path]) -> KibanaStatsData:
    """Parse a Kibana stats log into event loop, client, memory and request series."""
    lines = read_log_lines(path, "Kibana stats log file")

    series: Dict[str, List[float]] = {name: [] for name, _ in _SCALAR_FIELDS}
    request_error_rates: List[float] = []
    timestamps: List[float] = []

    for timestamp, data in iter_log_samples(lines):
        timestamps.append(timestamp)
        if data is None:
            continue

        for name, keys in _SCALAR_FIELDS:
            value = as_number(dig(data, *keys))
            if value is not None:
                series[name].append(value)

        requests = data.get("requests")
        if isinstance(requests, dict) and isinstance(requests.get("status_codes"), dict):
            request_error_rates.append(request_error_rate(requests))

    logger.debug("Parsed %d Kibana stats samples from %s", len(timestamps), path)
    return KibanaStatsData(
        **series,
        request_error_rates=request_error_rates,
        timestamps=timestamps,
        time_span_seconds=time_span_seconds(timestamps),
    )
