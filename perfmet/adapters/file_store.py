"""Baseline store that keeps one pretty-printed JSON file per baseline."""

import json
import logging
import os
from pathlib import Path
from typing import List, Optional, Tuple, Union

from ..models import BaselineMetrics, baseline_key
from .common import (
    JSON_SUFFIX,
    exit_baseline_not_found,
    load_baseline_file,
    select_prefix_match,
    strip_pattern,
)

logger = logging.getLogger(__name__)


class FileBaselineStore:
    """Reads and writes ``<test_name>-<timestamp>.json`` files in one directory."""

    def __init__(self, baselines_dir: Union[str, Path]):
        self.baselines_dir = Path(baselines_dir)

    def save(self, baseline: BaselineMetrics) -> str:
        self.baselines_dir.mkdir(parents=True, exist_ok=True)
        path = self.baselines_dir / f"{baseline_key(baseline)}{JSON_SUFFIX}"
        path.write_text(json.dumps(baseline.to_dict(), indent=2), encoding="utf-8")
        logger.info("Baseline saved to: %s", path)
        return str(path)

    def load(self, reference: Union[str, Path]) -> BaselineMetrics:
        return load_baseline_file(reference)

    def _json_files(self) -> List[Path]:
        if not self.baselines_dir.is_dir():
            return []
        return [
            path
            for path in self.baselines_dir.iterdir()
            if path.name.endswith(JSON_SUFFIX) and path.is_file()
        ]

    def list(self) -> List[str]:
        """All baseline files, sorted by file name descending."""
        return [str(path) for path in sorted(self._json_files(), key=lambda p: p.name, reverse=True)]

    def find_by_pattern(self, pattern: str) -> Optional[str]:
        """Resolve a name prefix, a ``baselines/`` relative name or an absolute path.

        Among several prefix matches the most recently modified file wins.
        """
        if not self.baselines_dir.is_dir():
            return None

        search_pattern = strip_pattern(pattern)
        if os.path.isabs(search_pattern) and self.baselines_dir.name in search_pattern:
            search_pattern = Path(search_pattern).name

        files = {path.name[: -len(JSON_SUFFIX)]: path for path in self._json_files()}
        match = select_prefix_match(files, search_pattern, lambda stem: files[stem].stat().st_mtime)
        return str(files[match]) if match is not None else None

    def load_with_pattern(self, pattern: Optional[str] = None) -> Tuple[BaselineMetrics, str]:
        """Load by pattern (falling back to a literal path) or the latest baseline.

        Exits the process when nothing can be resolved.
        """
        if pattern:
            matched = self.find_by_pattern(pattern)
            if matched is not None:
                logger.info("Using baseline: %s (matched pattern: %s)", matched, pattern)
                return self.load(matched), matched
            if Path(pattern).exists():
                logger.info("Using baseline: %s", pattern)
                return self.load(pattern), pattern
            exit_baseline_not_found(pattern)

        baselines = self.list()
        if not baselines:
            exit_baseline_not_found(None)
        logger.info("Using latest baseline: %s", baselines[0])
        return self.load(baselines[0]), baselines[0]
