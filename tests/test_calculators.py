import math

from perfmet.calculators import (
    calculate_cluster_health,
    calculate_entity_metrics,
    calculate_error_metrics,
    calculate_kibana_metrics,
    calculate_latency_metrics,
    calculate_system_metrics,
    empty_kibana_metrics,
)
from perfmet.models import (
    ClusterHealthData,
    EntityTypeData,
    ExponentialAverageSeries,
    KibanaStatsData,
    NodeStatsData,
    TransformStatsData,
)


def _transform_data() -> TransformStatsData:
    return TransformStatsData(
        search_latencies=[2.0, 4.0, 6.0],
        index_latencies=[1.0],
        documents_processed=[100, 400, 300, 600],
        documents_indexed=[80, 300, 250, 500],
        pages_processed=[1, 4, 2, 5],
        trigger_counts=[1, 2, 1, 3],
        search_failures=2,
        index_failures=3,
        timestamps=[0, 5000, 10000, 20000],
        exponential_averages=ExponentialAverageSeries(
            checkpoint_duration=[100.0, 150.0],
            documents_indexed=[],
            documents_processed=[12.0],
        ),
        per_entity_type={
            "host": EntityTypeData(
                search_latencies=[2.0, 6.0],
                documents_processed=[100, 400],
                documents_indexed=[80, 300],
                pages_processed=[1, 4],
                trigger_counts=[1, 2],
            ),
            "user": EntityTypeData(
                search_latencies=[4.0],
                index_latencies=[1.0],
                documents_processed=[300, 600],
                documents_indexed=[250, 500],
                pages_processed=[2, 5],
                trigger_counts=[1, 3],
            ),
            "service": EntityTypeData(),
            "generic": EntityTypeData(),
        },
    )


def test_calculate_latency_metrics():
    result = calculate_latency_metrics(_transform_data())

    assert result["search_latency"] == {"avg": 4.0, "p50": 4.0, "p95": 6.0, "p99": 6.0, "max": 6.0}
    assert result["intake_latency"]["avg"] == 1.0
    assert result["processing_latency"] == {"avg": 0, "p50": 0, "p95": 0, "p99": 0, "max": 0}


def test_calculate_entity_metrics_uses_max_of_cumulative_counters():
    result = calculate_entity_metrics(_transform_data())

    assert set(result) == {"host", "user", "service", "generic"}
    assert result["host"]["documents_processed"] == 400
    assert result["user"]["documents_processed"] == 600
    assert result["user"]["documents_indexed"] == 500
    assert result["user"]["trigger_count"] == 3
    assert result["host"]["sample_counts"] == {"search": 2, "index": 0, "processing": 0}
    assert result["service"]["documents_processed"] == 0
    assert result["service"]["search_latency"]["p99"] == 0


def test_calculate_entity_metrics_is_pure():
    data = _transform_data()

    assert calculate_entity_metrics(data) == calculate_entity_metrics(data)


def test_calculate_system_metrics():
    data = _transform_data()
    node_data = NodeStatsData(
        cpu_percentages=[10, 30, 50],
        heap_percentages=[40, 60],
        heap_bytes=[1000, 3000],
        cpu_per_node={"es-1": [10, 50], "es-2": [30]},
    )

    result = calculate_system_metrics(data, node_data, calculate_entity_metrics(data))

    assert result["cpu"] == {"avg": 30, "peak": 50, "avg_per_node": {"es-1": 30, "es-2": 30}}
    assert result["memory"] == {
        "avg_heap_percent": 50,
        "peak_heap_percent": 60,
        "avg_heap_bytes": 2000,
        "peak_heap_bytes": 3000,
    }
    # 400 (host) + 600 (user) documents over 20 seconds
    assert result["throughput"]["avg_documents_per_second"] == 50
    assert result["throughput"]["peak_documents_per_second"] == 600 / (20 / 4)
    assert result["index_efficiency"] == {
        "avg_ratio": 0.8,
        "total_documents_indexed": 800,
        "total_documents_processed": 1000,
    }
    assert result["pages_processed"] == {"total": 9, "avg_per_sample": 9 / 4}
    assert result["trigger_count"] == {"total": 5, "avg_per_transform": 5 / 4}
    assert result["exponential_averages"] == {
        "checkpoint_duration": 150.0,
        "documents_indexed": 0,
        "documents_processed": 12.0,
    }


def test_calculate_system_metrics_with_no_data_is_all_zero():
    data = TransformStatsData()

    result = calculate_system_metrics(data, NodeStatsData(), calculate_entity_metrics(data))

    assert result["cpu"] == {"avg": 0, "peak": 0, "avg_per_node": {}}
    assert result["throughput"] == {"avg_documents_per_second": 0, "peak_documents_per_second": 0}
    assert result["index_efficiency"]["avg_ratio"] == 0
    assert result["pages_processed"]["avg_per_sample"] == 0


def test_calculate_kibana_metrics_without_data_is_all_zero():
    result = calculate_kibana_metrics(None)

    assert result == empty_kibana_metrics()
    assert result["event_loop"]["delay"] == {"avg": 0, "p50": 0, "p95": 0, "p99": 0, "max": 0}
    assert result["requests"]["avg_per_second"] == 0


def test_calculate_kibana_metrics():
    data = KibanaStatsData(
        event_loop_delays=[10, 30],
        event_loop_delay_p50=[9, 11],
        event_loop_delay_p95=[20, 25],
        event_loop_delay_p99=[40, 35],
        event_loop_utilizations=[0.2, 0.4],
        es_client_active_sockets=[2, 4],
        es_client_idle_sockets=[1, 1],
        es_client_queued_requests=[0, 3],
        response_times=[40, 60],
        max_response_times=[100, 250],
        heap_bytes=[100, 300],
        rss_bytes=[1000, 2000],
        request_totals=[100, 200],
        request_error_rates=[5.0, 0.0],
        request_disconnects=[1, 2],
        os_load_1m=[1.0, 3.0],
        os_load_5m=[1.0, 1.0],
        os_load_15m=[0.5, 0.5],
        time_span_seconds=10,
    )

    result = calculate_kibana_metrics(data)

    assert result["event_loop"]["delay"] == {"avg": 20, "p50": 9, "p95": 25, "p99": 40, "max": 30}
    assert math.isclose(result["event_loop"]["utilization"]["avg"], 0.3)
    assert result["event_loop"]["utilization"]["peak"] == 0.4
    assert result["elasticsearch_client"] == {
        "avg_active_sockets": 3,
        "avg_idle_sockets": 1,
        "peak_queued_requests": 3,
    }
    assert result["response_times"] == {"avg": 50, "max": 250}
    assert result["memory"]["peak_rss_bytes"] == 2000
    assert result["requests"] == {"total": 200, "avg_per_second": 20, "error_rate": 2.5, "disconnects": 2}
    assert result["os_load"] == {"avg_1m": 2, "avg_5m": 1, "avg_15m": 0.5, "peak_1m": 3.0}


def test_calculate_cluster_health():
    data = ClusterHealthData(statuses=["green", "yellow"], active_shards=[10, 20], unassigned_shards=[0, 4, 1])

    assert calculate_cluster_health(data) == {"status": "yellow", "avg_active_shards": 15, "unassigned_shards": 4}
    assert calculate_cluster_health(ClusterHealthData()) == {
        "status": "unknown",
        "avg_active_shards": 0,
        "unassigned_shards": 0,
    }


def test_calculate_error_metrics():
    assert calculate_error_metrics(_transform_data()) == {
        "search_failures": 2,
        "index_failures": 3,
        "total_failures": 5,
    }
