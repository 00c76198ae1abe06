"""Application service orchestrating parsers, calculators and a baseline store."""

import logging
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, List, Optional, Tuple, Union

from .calculators import (
    calculate_cluster_health,
    calculate_entity_metrics,
    calculate_error_metrics,
    calculate_kibana_metrics,
    calculate_latency_metrics,
    calculate_system_metrics,
)
from .config import load_settings
from .exceptions import LogDirectoryError, MissingLogFilesError
from .models import BaselineMetrics, TestConfig
from .parsers import (
    create_empty_transform_data,
    parse_cluster_health,
    parse_kibana_stats,
    parse_node_stats,
    parse_transform_stats,
)
from .ports import BaselineRepository

logger = logging.getLogger(__name__)

CLUSTER_HEALTH_MARKER = "cluster-health"
NODE_STATS_MARKER = "node-stats"
TRANSFORM_STATS_MARKER = "transform-stats"
KIBANA_STATS_MARKER = "kibana-stats"


@dataclass(frozen=True)
class LogFileSet:
    """Log files found for one run prefix; only the first two are required."""

    cluster_health: Optional[Path]
    node_stats: Optional[Path]
    transform_stats: Optional[Path]
    kibana_stats: Optional[Path]

    def describe(self) -> Dict[str, Optional[str]]:
        return {
            "cluster_health": _name(self.cluster_health),
            "node_stats": _name(self.node_stats),
            "transform_stats": _name(self.transform_stats),
            "kibana_stats": _name(self.kibana_stats),
        }

    def present(self) -> List[Path]:
        return [
            path
            for path in (self.cluster_health, self.node_stats, self.transform_stats, self.kibana_stats)
            if path is not None
        ]


def _name(path: Optional[Path]) -> Optional[str]:
    return path.name if path is not None else None


def find_log_files(logs_dir: Union[str, Path], log_prefix: str) -> LogFileSet:
    """Locate the log files of a run: names starting with the prefix and containing a kind marker."""
    directory = Path(logs_dir)
    if not directory.is_dir():
        raise LogDirectoryError(directory)
    try:
        names = sorted(entry.name for entry in directory.iterdir())
    except OSError as exc:
        raise LogDirectoryError(directory, exc) from exc

    def first_with(marker: str) -> Optional[Path]:
        for name in names:
            if name.startswith(log_prefix) and marker in name:
                return directory / name
        return None

    return LogFileSet(
        cluster_health=first_with(CLUSTER_HEALTH_MARKER),
        node_stats=first_with(NODE_STATS_MARKER),
        transform_stats=first_with(TRANSFORM_STATS_MARKER),
        kibana_stats=first_with(KIBANA_STATS_MARKER),
    )


def _utc_timestamp() -> str:
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def extract_baseline_metrics(
    log_prefix: str,
    test_config: TestConfig,
    logs_dir: Optional[Union[str, Path]] = None,
) -> BaselineMetrics:
    """Extract a baseline from the logs of one run.

    Cluster health and node stats logs are required. Runs without transform
    or Kibana stats logs get empty transform data and a zeroed Kibana section.
    """
    if logs_dir is None:
        logs_dir = load_settings().logs_dir

    log_files = find_log_files(logs_dir, log_prefix)
    if log_files.cluster_health is None or log_files.node_stats is None:
        raise MissingLogFilesError(log_prefix, log_files.describe())

    logger.info("Parsing logs: %s", ", ".join(path.name for path in log_files.present()))

    transform_data = (
        parse_transform_stats(log_files.transform_stats)
        if log_files.transform_stats is not None
        else create_empty_transform_data()
    )
    node_data = parse_node_stats(log_files.node_stats)
    cluster_data = parse_cluster_health(log_files.cluster_health)
    kibana_data = (
        parse_kibana_stats(log_files.kibana_stats) if log_files.kibana_stats is not None else None
    )

    # System totals are built from the per-entity-type final counter values.
    per_entity_type = calculate_entity_metrics(transform_data)
    latency_metrics = calculate_latency_metrics(transform_data)
    system_metrics = calculate_system_metrics(transform_data, node_data, per_entity_type)

    metrics = {
        **latency_metrics,
        **system_metrics,
        "per_entity_type": per_entity_type,
        "transform_states": {
            "indexing": transform_data.transform_states.indexing,
            "started": transform_data.transform_states.started,
        },
        "errors": calculate_error_metrics(transform_data),
        "cluster_health": calculate_cluster_health(cluster_data),
        "kibana": calculate_kibana_metrics(kibana_data),
    }

    return BaselineMetrics(
        test_name=log_prefix,
        timestamp=_utc_timestamp(),
        test_config=test_config,
        metrics=metrics,
    )


class BaselineService:
    """Facade that extracts baselines and hands them to a repository."""

    def __init__(self, repo: BaselineRepository, logs_dir: Union[str, Path]):
        self.repo = repo
        self.logs_dir = Path(logs_dir)

    def create_baseline(
        self,
        log_prefix: str,
        test_config: TestConfig,
        name: Optional[str] = None,
    ) -> Tuple[BaselineMetrics, str]:
        baseline = extract_baseline_metrics(log_prefix, test_config, logs_dir=self.logs_dir)
        if name:
            baseline = replace(baseline, test_name=name)
        reference = self.repo.save(baseline)
        return baseline, reference

    def list_baselines(self) -> List[str]:
        return list(self.repo.list())

    def load_baseline(self, reference: str) -> BaselineMetrics:
        return self.repo.load(reference)

    def resolve_baseline(self, pattern: Optional[str] = None) -> Tuple[BaselineMetrics, str]:
        return self.repo.load_with_pattern(pattern)
