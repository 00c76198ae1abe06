"""Parser for cluster health logs."""

import logging
from pathlib import Path
from typing import List, Union

from ..models import ClusterHealthData
from .common import as_number, iter_log_samples, read_log_lines

logger = logging.getLogger(__name__)


def parse_cluster_health(path: Union[str, Path]) -> ClusterHealthData:
    """Parse a cluster health log into status and shard series."""
    lines = read_log_lines(path, "Cluster health log file")

    statuses: List[str] = []
    active_shards: List[float] = []
    unassigned_shards: List[float] = []

    for _, data in iter_log_samples(lines):
        if data is None:
            continue
        status = data.get("status")
        if isinstance(status, str) and status:
            statuses.append(status)
        active = as_number(data.get("active_shards"))
        if active is not None:
            active_shards.append(active)
        unassigned = as_number(data.get("unassigned_shards"))
        if unassigned is not None:
            unassigned_shards.append(unassigned)

    logger.debug("Parsed %d cluster health samples from %s", len(statuses), path)
    return ClusterHealthData(
        statuses=statuses,
        active_shards=active_shards,
        unassigned_shards=unassigned_shards,
    )
