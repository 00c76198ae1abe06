"""Module-level baseline store bound to the configured baselines directory."""

from pathlib import Path
from typing import List, Optional, Tuple, Union

from .adapters.file_store import FileBaselineStore
from .config import load_settings
from .models import BaselineMetrics


def default_store() -> FileBaselineStore:
    """File store rooted at ``PERFMET_BASELINES_DIR`` (default ``<cwd>/data/baselines``)."""
    return FileBaselineStore(load_settings().baselines_dir)


def save_baseline(baseline: BaselineMetrics) -> str:
    return default_store().save(baseline)


def load_baseline(path: Union[str, Path]) -> BaselineMetrics:
    return default_store().load(path)


def list_baselines() -> List[str]:
    return default_store().list()


def find_baseline_by_pattern(pattern: str) -> Optional[str]:
    return default_store().find_by_pattern(pattern)


def load_baseline_with_pattern(pattern: Optional[str] = None) -> Tuple[BaselineMetrics, str]:
    return default_store().load_with_pattern(pattern)
