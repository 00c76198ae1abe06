"""Shared fixtures for writing synthetic run logs."""

import json
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

BASE_TIME = datetime(2025, 11, 13, 15, 0, 0, tzinfo=timezone.utc)
LOG_PREFIX = "tmp-all-2025-11-13T15:00:00"

PERFMET_ENV_VARS = (
    "PERFMET_LOGS_DIR",
    "PERFMET_BASELINES_DIR",
    "PERFMET_DATABASE_URL",
    "PERFMET_LOG_LEVEL",
)


def iso_at(offset_ms: int) -> str:
    moment = BASE_TIME + timedelta(milliseconds=offset_ms)
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def json_line(offset_ms: int, body: dict) -> str:
    return f"{iso_at(offset_ms)} - {json.dumps(body)}"


def transform_line(offset_ms: int, transform_id: str, stats: dict, state: str = "indexing") -> str:
    body = {"count": 1, "transforms": [{"id": transform_id, "state": state, "stats": stats}]}
    return f"{iso_at(offset_ms)} - Transform {transform_id} stats: {json.dumps(body)}"


def write_lines(path: Path, lines) -> Path:
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return path


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch):
    """Keep PERFMET_* variables from the host (or a loaded .env) out of tests."""
    for name in PERFMET_ENV_VARS:
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)


@pytest.fixture
def logs_dir(tmp_path: Path) -> Path:
    directory = tmp_path / "logs"
    directory.mkdir()
    return directory


@pytest.fixture
def baselines_dir(tmp_path: Path) -> Path:
    return tmp_path / "data" / "baselines"


@pytest.fixture
def required_logs(logs_dir: Path) -> Path:
    """Cluster health and node stats logs for LOG_PREFIX."""
    write_lines(
        logs_dir / f"{LOG_PREFIX}-cluster-health.log",
        [
            json_line(0, {"status": "green", "active_shards": 10, "unassigned_shards": 0}),
            json_line(5000, {"status": "yellow", "active_shards": 12, "unassigned_shards": 2}),
        ],
    )
    write_lines(
        logs_dir / f"{LOG_PREFIX}-node-stats.log",
        [
            json_line(
                0,
                {
                    "nodes": [
                        {
                            "node_name": "es-1",
                            "cpu": {"percent": 20},
                            "jvm": {"mem": {"heap_used_percent": 40, "heap_used_in_bytes": 1000}},
                        },
                        {
                            "node_name": "es-2",
                            "cpu": {"percent": 60},
                            "jvm": {"mem": {"heap_used_percent": 50, "heap_used_in_bytes": 3000}},
                        },
                    ]
                },
            ),
        ],
    )
    return logs_dir


@pytest.fixture
def full_logs(required_logs: Path) -> Path:
    """Required logs plus transform and Kibana stats logs for LOG_PREFIX."""
    write_lines(
        required_logs / f"{LOG_PREFIX}-transform-stats.log",
        [
            transform_line(
                0,
                "entities-v1-latest-host-default",
                {"search_total": 100, "search_time_in_ms": 500, "documents_processed": 1000},
            ),
            transform_line(
                10,
                "entities-v1-latest-user-default",
                {"search_total": 50, "search_time_in_ms": 100, "documents_processed": 400},
            ),
            transform_line(
                5000,
                "entities-v1-latest-host-default",
                {
                    "search_total": 110,
                    "search_time_in_ms": 560,
                    "index_total": 40,
                    "index_time_in_ms": 80,
                    "documents_processed": 1500,
                    "documents_indexed": 1200,
                    "pages_processed": 30,
                    "trigger_count": 6,
                    "search_failures": 1,
                    "exponential_avg_checkpoint_duration_ms": 250.5,
                },
            ),
            transform_line(
                5010,
                "entities-v1-latest-user-default",
                {
                    "search_total": 60,
                    "search_time_in_ms": 130,
                    "documents_processed": 500,
                    "documents_indexed": 300,
                    "pages_processed": 10,
                    "trigger_count": 4,
                    "index_failures": 2,
                },
                state="started",
            ),
        ],
    )
    write_lines(
        required_logs / f"{LOG_PREFIX}-kibana-stats.log",
        [
            json_line(
                0,
                {
                    "process": {"event_loop_delay": 10, "memory": {"heap": {"used_bytes": 100}}},
                    "requests": {"total": 100, "disconnects": 1, "status_codes": {"200": 95, "500": 5}},
                },
            ),
            json_line(
                10000,
                {
                    "process": {"event_loop_delay": 30, "memory": {"heap": {"used_bytes": 300}}},
                    "requests": {"total": 200, "disconnects": 2, "status_codes": {"200": 200}},
                },
            ),
        ],
    )
    return required_logs
