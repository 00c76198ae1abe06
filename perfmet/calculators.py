"""Pure calculators that summarize parsed time series."""

from typing import Dict, Optional

from .models import (
    ENTITY_TYPES,
    ClusterHealthData,
    EntityTypeData,
    KibanaStatsData,
    NodeStatsData,
    TransformStatsData,
)
from .stats import (
    average,
    compute_percentile_metrics,
    empty_percentile_metrics,
    last,
    maximum,
    percentile,
    safe_divide,
    time_span_seconds,
)


def calculate_latency_metrics(transform_data: TransformStatsData) -> Dict:
    """Compute search, intake and processing latency percentiles."""
    return {
        "search_latency": compute_percentile_metrics(transform_data.search_latencies),
        "intake_latency": compute_percentile_metrics(transform_data.index_latencies),
        "processing_latency": compute_percentile_metrics(transform_data.processing_latencies),
    }


def calculate_entity_type_metrics(entity_data: EntityTypeData) -> Dict:
    """Summarize one entity type.

    Counters are cumulative snapshots, so the maximum is the final value;
    summing them would count the same documents once per sample.
    """
    return {
        "search_latency": compute_percentile_metrics(entity_data.search_latencies),
        "intake_latency": compute_percentile_metrics(entity_data.index_latencies),
        "processing_latency": compute_percentile_metrics(entity_data.processing_latencies),
        "documents_processed": maximum(entity_data.documents_processed),
        "documents_indexed": maximum(entity_data.documents_indexed),
        "pages_processed": maximum(entity_data.pages_processed),
        "trigger_count": maximum(entity_data.trigger_counts),
        "sample_counts": {
            "search": len(entity_data.search_latencies),
            "index": len(entity_data.index_latencies),
            "processing": len(entity_data.processing_latencies),
        },
    }


def calculate_entity_metrics(transform_data: TransformStatsData) -> Dict[str, Dict]:
    """Compute per-entity-type metrics for host, user, service and generic."""
    return {
        entity_type: calculate_entity_type_metrics(
            transform_data.per_entity_type.get(entity_type, EntityTypeData())
        )
        for entity_type in ENTITY_TYPES
    }


def _entity_total(per_entity_type: Dict[str, Dict], key: str) -> float:
    return sum(per_entity_type[entity_type][key] for entity_type in ENTITY_TYPES)


def calculate_system_metrics(
    transform_data: TransformStatsData,
    node_data: NodeStatsData,
    per_entity_type: Dict[str, Dict],
) -> Dict:
    """Compute CPU, memory, throughput and transform totals.

    ``per_entity_type`` is the output of ``calculate_entity_metrics``; totals
    are the sum over entity types of each type's final counter value.
    """
    avg_cpu_per_node = {
        node_name: average(cpu_values) for node_name, cpu_values in node_data.cpu_per_node.items()
    }

    time_span = time_span_seconds(transform_data.timestamps)
    total_documents_processed = _entity_total(per_entity_type, "documents_processed")
    total_documents_indexed = _entity_total(per_entity_type, "documents_indexed")
    total_pages_processed = _entity_total(per_entity_type, "pages_processed")
    total_trigger_count = _entity_total(per_entity_type, "trigger_count")

    documents_samples = len(transform_data.documents_processed)
    peak_documents_per_second = (
        maximum(transform_data.documents_processed) / (time_span / documents_samples)
        if documents_samples > 0 and time_span > 0
        else 0
    )

    exponential_averages = transform_data.exponential_averages

    return {
        "cpu": {
            "avg": average(node_data.cpu_percentages),
            "peak": maximum(node_data.cpu_percentages),
            "avg_per_node": avg_cpu_per_node,
        },
        "memory": {
            "avg_heap_percent": average(node_data.heap_percentages),
            "peak_heap_percent": maximum(node_data.heap_percentages),
            "avg_heap_bytes": average(node_data.heap_bytes),
            "peak_heap_bytes": maximum(node_data.heap_bytes),
        },
        "throughput": {
            "avg_documents_per_second": safe_divide(total_documents_processed, time_span),
            "peak_documents_per_second": peak_documents_per_second,
        },
        "index_efficiency": {
            "avg_ratio": safe_divide(total_documents_indexed, total_documents_processed),
            "total_documents_indexed": total_documents_indexed,
            "total_documents_processed": total_documents_processed,
        },
        "pages_processed": {
            "total": total_pages_processed,
            "avg_per_sample": safe_divide(total_pages_processed, len(transform_data.pages_processed)),
        },
        "trigger_count": {
            "total": total_trigger_count,
            "avg_per_transform": safe_divide(total_trigger_count, len(transform_data.trigger_counts)),
        },
        "exponential_averages": {
            "checkpoint_duration": last(exponential_averages.checkpoint_duration),
            "documents_indexed": last(exponential_averages.documents_indexed),
            "documents_processed": last(exponential_averages.documents_processed),
        },
    }


def calculate_kibana_metrics(kibana_data: Optional[KibanaStatsData]) -> Dict:
    """Compute Kibana server metrics, all zero when the run logged none."""
    if kibana_data is None:
        return empty_kibana_metrics()

    max_request_total = maximum(kibana_data.request_totals)
    requests_per_second = (
        max_request_total / kibana_data.time_span_seconds
        if kibana_data.request_totals and kibana_data.time_span_seconds > 0
        else 0
    )

    return {
        "event_loop": {
            "delay": {
                "avg": average(kibana_data.event_loop_delays),
                "p50": percentile(sorted(kibana_data.event_loop_delay_p50), 50),
                "p95": percentile(sorted(kibana_data.event_loop_delay_p95), 95),
                "p99": percentile(sorted(kibana_data.event_loop_delay_p99), 99),
                "max": maximum(kibana_data.event_loop_delays),
            },
            "utilization": {
                "avg": average(kibana_data.event_loop_utilizations),
                "peak": maximum(kibana_data.event_loop_utilizations),
            },
        },
        "elasticsearch_client": {
            "avg_active_sockets": average(kibana_data.es_client_active_sockets),
            "avg_idle_sockets": average(kibana_data.es_client_idle_sockets),
            "peak_queued_requests": maximum(kibana_data.es_client_queued_requests),
        },
        "response_times": {
            "avg": average(kibana_data.response_times),
            "max": maximum(kibana_data.max_response_times),
        },
        "memory": {
            "avg_heap_bytes": average(kibana_data.heap_bytes),
            "peak_heap_bytes": maximum(kibana_data.heap_bytes),
            "avg_rss_bytes": average(kibana_data.rss_bytes),
            "peak_rss_bytes": maximum(kibana_data.rss_bytes),
        },
        "requests": {
            "total": max_request_total,
            "avg_per_second": requests_per_second,
            "error_rate": average(kibana_data.request_error_rates),
            "disconnects": maximum(kibana_data.request_disconnects),
        },
        "os_load": {
            "avg_1m": average(kibana_data.os_load_1m),
            "avg_5m": average(kibana_data.os_load_5m),
            "avg_15m": average(kibana_data.os_load_15m),
            "peak_1m": maximum(kibana_data.os_load_1m),
        },
    }


def empty_kibana_metrics() -> Dict:
    """Return empty Kibana metrics structure."""
    return {
        "event_loop": {
            "delay": empty_percentile_metrics(),
            "utilization": {"avg": 0, "peak": 0},
        },
        "elasticsearch_client": {
            "avg_active_sockets": 0,
            "avg_idle_sockets": 0,
            "peak_queued_requests": 0,
        },
        "response_times": {"avg": 0, "max": 0},
        "memory": {
            "avg_heap_bytes": 0,
            "peak_heap_bytes": 0,
            "avg_rss_bytes": 0,
            "peak_rss_bytes": 0,
        },
        "requests": {
            "total": 0,
            "avg_per_second": 0,
            "error_rate": 0,
            "disconnects": 0,
        },
        "os_load": {"avg_1m": 0, "avg_5m": 0, "avg_15m": 0, "peak_1m": 0},
    }


def calculate_cluster_health(cluster_data: ClusterHealthData) -> Dict:
    """Summarize cluster health: final status, mean active and worst unassigned shards."""
    return {
        "status": cluster_data.statuses[-1] if cluster_data.statuses else "unknown",
        "avg_active_shards": average(cluster_data.active_shards),
        "unassigned_shards": maximum(cluster_data.unassigned_shards),
    }


def calculate_error_metrics(transform_data: TransformStatsData) -> Dict:
    return {
        "search_failures": transform_data.search_failures,
        "index_failures": transform_data.index_failures,
        "total_failures": transform_data.search_failures + transform_data.index_failures,
    }
