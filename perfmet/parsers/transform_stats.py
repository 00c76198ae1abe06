"""Parser for transform stats logs.

Transforms report cumulative counters (total search time, total searches,
...). Latency per operation for one sampling interval is recovered by
differencing consecutive samples of the same transform. Small increments are
ignored because dividing by a handful of operations amplifies noise; the
minimum increment scales with the detected sampling interval so that a log
sampled every second is judged like one sampled every five seconds.
"""

import logging
from dataclasses import dataclass
from math import floor
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from ..models import (
    ENTITY_TYPES,
    EntityTypeData,
    ExponentialAverageSeries,
    TransformStateCounts,
    TransformStatsData,
)
from .common import (
    TRANSFORM_LINE_PATTERN,
    as_number,
    parse_json_object,
    parse_timestamp_ms,
    read_log_lines,
)

logger = logging.getLogger(__name__)

DEFAULT_SAMPLING_INTERVAL_MS = 5000
MAX_REASONABLE_SAMPLING_INTERVAL_MS = 300_000
BATCH_TOLERANCE_MS = 100

# Minimum incremental op-count at the default 5s cadence.
BASE_SEARCH_THRESHOLD = 5
BASE_INDEX_THRESHOLD = 10
BASE_PROCESSING_THRESHOLD = 5


@dataclass(frozen=True)
class IncrementThresholds:
    search: int
    index: int
    processing: int


@dataclass(frozen=True)
class PreviousCounters:
    """Last cumulative timing counters seen for one transform."""

    search_time: float
    search_total: float
    index_time: float
    index_total: float
    processing_time: float
    processing_total: float

    @classmethod
    def from_stats(cls, stats: Dict[str, Any]) -> "PreviousCounters":
        return cls(
            search_time=_counter(stats, "search_time_in_ms"),
            search_total=_counter(stats, "search_total"),
            index_time=_counter(stats, "index_time_in_ms"),
            index_total=_counter(stats, "index_total"),
            processing_time=_counter(stats, "processing_time_in_ms"),
            processing_total=_counter(stats, "processing_total"),
        )


def _counter(stats: Dict[str, Any], key: str) -> float:
    return as_number(stats.get(key)) or 0


def collect_batch_timestamps(lines: List[str]) -> List[int]:
    """Return one timestamp per sampling batch.

    Transforms are logged one after another at each sampling tick, so entries
    within ``BATCH_TOLERANCE_MS`` of the current batch start are folded into it.
    """
    batch_timestamps: List[int] = []
    last_batch_time: Optional[int] = None
    for line in lines:
        match = TRANSFORM_LINE_PATTERN.match(line.strip())
        if not match:
            continue
        timestamp = parse_timestamp_ms(match.group(1))
        if timestamp is None:
            continue
        if last_batch_time is None or abs(timestamp - last_batch_time) > BATCH_TOLERANCE_MS:
            batch_timestamps.append(timestamp)
            last_batch_time = timestamp
    return batch_timestamps


def detect_sampling_interval(batch_timestamps: List[int]) -> float:
    """Median gap between batches, ignoring gaps outside (0, 5 min]."""
    intervals = [
        current - previous
        for previous, current in zip(batch_timestamps, batch_timestamps[1:])
        if 0 < current - previous <= MAX_REASONABLE_SAMPLING_INTERVAL_MS
    ]
    if not intervals:
        return DEFAULT_SAMPLING_INTERVAL_MS
    intervals.sort()
    return intervals[len(intervals) // 2]


def compute_thresholds(sampling_interval_ms: float) -> IncrementThresholds:
    multiplier = sampling_interval_ms / DEFAULT_SAMPLING_INTERVAL_MS
    return IncrementThresholds(
        search=max(1, floor(BASE_SEARCH_THRESHOLD * multiplier)),
        index=max(1, floor(BASE_INDEX_THRESHOLD * multiplier)),
        processing=max(1, floor(BASE_PROCESSING_THRESHOLD * multiplier)),
    )


def infer_entity_type(transform_id: str) -> Optional[str]:
    """Map a transform id to an entity type by substring.

    The first of host, user, service, generic contained in the id wins, so an
    id such as ``user-hosts`` is counted as ``host``. Known to be heuristic.
    """
    for entity_type in ENTITY_TYPES:
        if entity_type in transform_id:
            return entity_type
    return None


def incremental_latency(
    current_time: float,
    current_total: float,
    previous_time: float,
    previous_total: float,
    threshold: int,
) -> Optional[float]:
    """Latency per operation over one interval, or None when the increment is rejected."""
    incremental_time = current_time - previous_time
    incremental_total = current_total - previous_total
    if incremental_total >= threshold and incremental_time >= 0:
        return incremental_time / incremental_total
    return None


class _SeriesBuilder:
    """Mutable accumulators behind a TransformStatsData."""

    def __init__(self):
        self.aggregate = _empty_series()
        self.per_entity_type = {entity_type: _empty_series() for entity_type in ENTITY_TYPES}
        self.exponential_averages: Dict[str, List[float]] = {
            "checkpoint_duration": [],
            "documents_indexed": [],
            "documents_processed": [],
        }
        self.timestamps: List[float] = []
        self.search_failures = 0
        self.index_failures = 0
        self.indexing = 0
        self.started = 0

    def append(self, series: str, value: float, entity_type: Optional[str]) -> None:
        self.aggregate[series].append(value)
        if entity_type:
            self.per_entity_type[entity_type][series].append(value)

    def build(self, sampling_interval_ms: float) -> TransformStatsData:
        return TransformStatsData(
            **self.aggregate,
            search_failures=self.search_failures,
            index_failures=self.index_failures,
            timestamps=self.timestamps,
            exponential_averages=ExponentialAverageSeries(**self.exponential_averages),
            transform_states=TransformStateCounts(indexing=self.indexing, started=self.started),
            per_entity_type={
                entity_type: EntityTypeData(**series)
                for entity_type, series in self.per_entity_type.items()
            },
            sampling_interval_ms=sampling_interval_ms,
        )


def _empty_series() -> Dict[str, List[float]]:
    return {
        "search_latencies": [],
        "index_latencies": [],
        "processing_latencies": [],
        "documents_processed": [],
        "documents_indexed": [],
        "pages_processed": [],
        "trigger_counts": [],
    }


_LATENCY_SERIES = (
    # (series, time counter, total counter, threshold attribute)
    ("search_latencies", "search_time", "search_total", "search"),
    ("index_latencies", "index_time", "index_total", "index"),
    ("processing_latencies", "processing_time", "processing_total", "processing"),
)

_CUMULATIVE_SERIES = (
    ("documents_processed", "documents_processed"),
    ("documents_indexed", "documents_indexed"),
    ("pages_processed", "pages_processed"),
    ("trigger_counts", "trigger_count"),
)

_EXPONENTIAL_AVERAGES = (
    ("checkpoint_duration", "exponential_avg_checkpoint_duration_ms"),
    ("documents_indexed", "exponential_avg_documents_indexed"),
    ("documents_processed", "exponential_avg_documents_processed"),
)


def _record_sample(
    builder: _SeriesBuilder,
    transform_id: str,
    transform: Dict[str, Any],
    previous: Dict[str, PreviousCounters],
    thresholds: IncrementThresholds,
) -> None:
    stats = transform["stats"]
    entity_type = infer_entity_type(transform_id)

    state = transform.get("state")
    if state == "indexing":
        builder.indexing += 1
    elif state == "started":
        builder.started += 1

    current = PreviousCounters.from_stats(stats)
    prior = previous.get(transform_id)
    previous[transform_id] = current
    if prior is None:
        # The first sample of a transform only seeds its counters.
        return

    for series, time_attr, total_attr, threshold_attr in _LATENCY_SERIES:
        latency = incremental_latency(
            getattr(current, time_attr),
            getattr(current, total_attr),
            getattr(prior, time_attr),
            getattr(prior, total_attr),
            getattr(thresholds, threshold_attr),
        )
        if latency is not None:
            builder.append(series, latency, entity_type)

    for series, key in _CUMULATIVE_SERIES:
        value = as_number(stats.get(key))
        if value is not None:
            builder.append(series, value, entity_type)

    for series, key in _EXPONENTIAL_AVERAGES:
        value = as_number(stats.get(key))
        if value is not None and value > 0:
            builder.exponential_averages[series].append(value)

    builder.search_failures += as_number(stats.get("search_failures")) or 0
    builder.index_failures += as_number(stats.get("index_failures")) or 0


def parse_transform_stats(path: Union[str, Path]) -> TransformStatsData:
    """Parse a transform stats log into incremental latency and counter series."""
    lines = read_log_lines(path, "Transform stats log file")

    sampling_interval_ms = detect_sampling_interval(collect_batch_timestamps(lines))
    thresholds = compute_thresholds(sampling_interval_ms)
    logger.debug(
        "Detected sampling interval %sms for %s (thresholds search=%d index=%d processing=%d)",
        sampling_interval_ms,
        path,
        thresholds.search,
        thresholds.index,
        thresholds.processing,
    )

    builder = _SeriesBuilder()
    previous: Dict[str, PreviousCounters] = {}

    for line in lines:
        match = TRANSFORM_LINE_PATTERN.match(line.strip())
        if not match:
            continue
        timestamp = parse_timestamp_ms(match.group(1))
        if timestamp is None:
            continue
        builder.timestamps.append(timestamp)

        data = parse_json_object(match.group(3))
        if data is None:
            continue
        transforms = data.get("transforms")
        if not isinstance(transforms, list) or not transforms:
            continue
        transform = transforms[0]
        if not isinstance(transform, dict) or not isinstance(transform.get("stats"), dict):
            continue

        _record_sample(builder, match.group(2), transform, previous, thresholds)

    result = builder.build(sampling_interval_ms)
    logger.debug(
        "Parsed %d transform stats lines for %d transforms from %s",
        len(result.timestamps),
        len(previous),
        path,
    )
    return result


def create_empty_transform_data() -> TransformStatsData:
    """Transform data for runs that did not log transform stats."""
    return TransformStatsData()
