"""Parser for cluster node stats logs."""

import logging
from pathlib import Path
from typing import Dict, List, Union

from ..models import NodeStatsData
from .common import as_number, dig, iter_log_samples, read_log_lines

logger = logging.getLogger(__name__)


def parse_node_stats(path: Union[str, Path]) -> NodeStatsData:
    """Parse a node stats log into CPU and JVM heap series.

    CPU samples are also kept per node so a single hot node stays visible
    next to the cluster-wide average.
    """
    lines = read_log_lines(path, "Node stats log file")

    cpu_percentages: List[float] = []
    heap_percentages: List[float] = []
    heap_bytes: List[float] = []
    cpu_per_node: Dict[str, List[float]] = {}
    timestamps: List[float] = []

    for timestamp, data in iter_log_samples(lines):
        timestamps.append(timestamp)
        if data is None:
            continue
        nodes = data.get("nodes")
        if not isinstance(nodes, list):
            continue

        for node in nodes:
            if not isinstance(node, dict):
                continue
            node_name = node.get("node_name") or node.get("node_id") or "unknown"

            cpu = as_number(dig(node, "cpu", "percent"))
            if cpu is not None:
                cpu_percentages.append(cpu)
                cpu_per_node.setdefault(node_name, []).append(cpu)

            heap_percent = as_number(dig(node, "jvm", "mem", "heap_used_percent"))
            if heap_percent is not None:
                heap_percentages.append(heap_percent)

            heap_used = as_number(dig(node, "jvm", "mem", "heap_used_in_bytes"))
            if heap_used is not None:
                heap_bytes.append(heap_used)

    logger.debug(
        "Parsed %d node stats samples across %d nodes from %s",
        len(timestamps),
        len(cpu_per_node),
        path,
    )
    return NodeStatsData(
        cpu_percentages=cpu_percentages,
        heap_percentages=heap_percentages,
        heap_bytes=heap_bytes,
        cpu_per_node=cpu_per_node,
        timestamps=timestamps,
    )
