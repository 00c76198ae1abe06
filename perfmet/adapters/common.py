"""Helpers shared by the baseline store adapters."""

import json
import logging
import sys
from pathlib import Path
from typing import NoReturn, Optional, Union

from ..exceptions import BaselineLoadError
from ..models import BaselineMetrics

logger = logging.getLogger(__name__)

JSON_SUFFIX = ".json"
BASELINES_PREFIX = "baselines/"


def select_prefix_match(keys, pattern: str, recency) -> Optional[str]:
    """Pick the key a name prefix refers to.

    An exact match wins outright; otherwise the most recent of the keys that
    start with ``pattern`` according to ``recency(key)``.
    """
    matching = [key for key in keys if key.startswith(pattern)]
    if not matching:
        return None
    if pattern in matching:
        return pattern
    if len(matching) == 1:
        return matching[0]
    return max(matching, key=recency)


def strip_pattern(pattern: str) -> str:
    """Drop a ``.json`` suffix and a leading ``baselines/`` from a user pattern."""
    if pattern.endswith(JSON_SUFFIX):
        pattern = pattern[: -len(JSON_SUFFIX)]
    if pattern.startswith(BASELINES_PREFIX):
        pattern = pattern[len(BASELINES_PREFIX):]
    return pattern


def exit_baseline_not_found(pattern: Optional[str]) -> NoReturn:
    if pattern:
        logger.error("Baseline not found: %s", pattern)
        logger.error("Tried pattern matching and direct path, but no matches found.")
    else:
        logger.error("No baselines found. Create one first with the create-baseline command.")
    sys.exit(1)


def load_baseline_file(reference: Union[str, Path]) -> BaselineMetrics:
    """Read one baseline JSON document, raising BaselineLoadError when unusable."""
    path = Path(reference)
    if not path.exists():
        raise BaselineLoadError(path)
    try:
        content = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise BaselineLoadError(path, exc) from exc
    try:
        return BaselineMetrics.from_dict(json.loads(content))
    except (ValueError, KeyError, TypeError) as exc:
        raise BaselineLoadError(path, exc) from exc
