"""Log parsers, one per log kind."""

from .cluster_health import parse_cluster_health
from .common import read_file_safely
from .kibana_stats import parse_kibana_stats
from .node_stats import parse_node_stats
from .transform_stats import create_empty_transform_data, parse_transform_stats

__all__ = [
    "create_empty_transform_data",
    "parse_cluster_health",
    "parse_kibana_stats",
    "parse_node_stats",
    "parse_transform_stats",
    "read_file_safely",
]
