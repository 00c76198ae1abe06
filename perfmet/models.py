"""Core domain models used by the parsers, calculators and baseline store."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

ENTITY_TYPES = ("host", "user", "service", "generic")


@dataclass(frozen=True)
class EntityTypeData:
    """Latency and counter series for one entity type."""

    search_latencies: List[float] = field(default_factory=list)
    index_latencies: List[float] = field(default_factory=list)
    processing_latencies: List[float] = field(default_factory=list)
    documents_processed: List[float] = field(default_factory=list)
    documents_indexed: List[float] = field(default_factory=list)
    pages_processed: List[float] = field(default_factory=list)
    trigger_counts: List[float] = field(default_factory=list)


@dataclass(frozen=True)
class ExponentialAverageSeries:
    """Vendor-reported smoothed averages, non-zero samples only."""

    checkpoint_duration: List[float] = field(default_factory=list)
    documents_indexed: List[float] = field(default_factory=list)
    documents_processed: List[float] = field(default_factory=list)


@dataclass(frozen=True)
class TransformStateCounts:
    indexing: int = 0
    started: int = 0


def _empty_per_entity_type() -> Dict[str, EntityTypeData]:
    return {entity_type: EntityTypeData() for entity_type in ENTITY_TYPES}


@dataclass(frozen=True)
class TransformStatsData:
    """Time series reconstructed from a transform stats log.

    Latency sequences hold incremental ms/op values; counter sequences hold
    cumulative snapshots exactly as logged.
    """

    search_latencies: List[float] = field(default_factory=list)
    index_latencies: List[float] = field(default_factory=list)
    processing_latencies: List[float] = field(default_factory=list)
    documents_processed: List[float] = field(default_factory=list)
    documents_indexed: List[float] = field(default_factory=list)
    pages_processed: List[float] = field(default_factory=list)
    trigger_counts: List[float] = field(default_factory=list)
    search_failures: int = 0
    index_failures: int = 0
    timestamps: List[float] = field(default_factory=list)
    exponential_averages: ExponentialAverageSeries = field(default_factory=ExponentialAverageSeries)
    transform_states: TransformStateCounts = field(default_factory=TransformStateCounts)
    per_entity_type: Dict[str, EntityTypeData] = field(default_factory=_empty_per_entity_type)
    sampling_interval_ms: float = 5000


@dataclass(frozen=True)
class NodeStatsData:
    cpu_percentages: List[float] = field(default_factory=list)
    heap_percentages: List[float] = field(default_factory=list)
    heap_bytes: List[float] = field(default_factory=list)
    cpu_per_node: Dict[str, List[float]] = field(default_factory=dict)
    timestamps: List[float] = field(default_factory=list)


@dataclass(frozen=True)
class ClusterHealthData:
    statuses: List[str] = field(default_factory=list)
    active_shards: List[float] = field(default_factory=list)
    unassigned_shards: List[float] = field(default_factory=list)


@dataclass(frozen=True)
class KibanaStatsData:
    """Point-in-time Kibana server samples.

    Sequences may have different lengths: a field absent from a sample is
    simply not appended.
    """

    event_loop_delays: List[float] = field(default_factory=list)
    event_loop_delay_p50: List[float] = field(default_factory=list)
    event_loop_delay_p95: List[float] = field(default_factory=list)
    event_loop_delay_p99: List[float] = field(default_factory=list)
    event_loop_utilizations: List[float] = field(default_factory=list)
    es_client_active_sockets: List[float] = field(default_factory=list)
    es_client_idle_sockets: List[float] = field(default_factory=list)
    es_client_queued_requests: List[float] = field(default_factory=list)
    response_times: List[float] = field(default_factory=list)
    max_response_times: List[float] = field(default_factory=list)
    heap_bytes: List[float] = field(default_factory=list)
    rss_bytes: List[float] = field(default_factory=list)
    request_totals: List[float] = field(default_factory=list)
    request_error_rates: List[float] = field(default_factory=list)
    request_disconnects: List[float] = field(default_factory=list)
    os_load_1m: List[float] = field(default_factory=list)
    os_load_5m: List[float] = field(default_factory=list)
    os_load_15m: List[float] = field(default_factory=list)
    timestamps: List[float] = field(default_factory=list)
    time_span_seconds: float = 1


@dataclass(frozen=True)
class TestConfig:
    """Parameters of the load test that produced the logs."""

    __test__ = False

    entity_count: int = 0
    logs_per_entity: int = 0
    upload_count: Optional[int] = None
    interval_ms: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "entity_count": self.entity_count,
            "logs_per_entity": self.logs_per_entity,
        }
        if self.upload_count is not None:
            data["upload_count"] = self.upload_count
        if self.interval_ms is not None:
            data["interval_ms"] = self.interval_ms
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TestConfig":
        return cls(
            entity_count=data.get("entity_count", 0),
            logs_per_entity=data.get("logs_per_entity", 0),
            upload_count=data.get("upload_count"),
            interval_ms=data.get("interval_ms"),
        )


@dataclass(frozen=True)
class BaselineMetrics:
    """A summarized performance snapshot of one test run.

    Identified by ``test_name`` plus ``timestamp``; never mutated after
    creation. Use ``dataclasses.replace`` to derive a renamed copy.
    """

    test_name: str
    timestamp: str
    test_config: TestConfig
    metrics: Dict[str, Any]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "test_name": self.test_name,
            "timestamp": self.timestamp,
            "test_config": self.test_config.to_dict(),
            "metrics": self.metrics,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "BaselineMetrics":
        """Build a baseline from its JSON document; raises KeyError/TypeError when malformed."""
        if not isinstance(data, dict):
            raise TypeError(f"baseline document must be an object, got {type(data).__name__}")
        return cls(
            test_name=data["test_name"],
            timestamp=data["timestamp"],
            test_config=TestConfig.from_dict(data.get("test_config") or {}),
            metrics=data["metrics"],
        )


def baseline_key(baseline: BaselineMetrics) -> str:
    """Storage name of a baseline: test name plus a filename-safe timestamp."""
    safe_timestamp = baseline.timestamp.replace(":", "-").replace(".", "-")
    return f"{baseline.test_name}-{safe_timestamp}"
