"""SQLAlchemy repository adapter for baselines."""

import json
import logging
from pathlib import Path
from typing import List, Optional, Tuple

from sqlalchemy import text
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..exceptions import BaselineLoadError, BaselineSaveError
from ..models import BaselineMetrics, baseline_key
from .common import (
    exit_baseline_not_found,
    load_baseline_file,
    select_prefix_match,
    strip_pattern,
)

logger = logging.getLogger(__name__)


class SQLAlchemyBaselineRepository:
    """Stores baseline documents in a relational ``baselines`` table.

    References are baseline keys (the same names the file store uses without
    ``.json``). Among several prefix matches the newest ``created_at`` wins.
    """

    def __init__(self, db: Session):
        self.db = db

    def ensure_schema(self) -> None:
        self.db.execute(
            text(
                """
                CREATE TABLE IF NOT EXISTS baselines (
                    baseline_key VARCHAR(512) PRIMARY KEY,
                    test_name VARCHAR(255) NOT NULL,
                    created_at VARCHAR(64) NOT NULL,
                    document TEXT NOT NULL
                )
                """
            )
        )
        self.db.commit()

    def save(self, baseline: BaselineMetrics) -> str:
        key = baseline_key(baseline)
        try:
            self.db.execute(
                text(
                    """
                    INSERT INTO baselines (baseline_key, test_name, created_at, document)
                    VALUES (:baseline_key, :test_name, :created_at, :document)
                    """
                ),
                {
                    "baseline_key": key,
                    "test_name": baseline.test_name,
                    "created_at": baseline.timestamp,
                    "document": json.dumps(baseline.to_dict(), indent=2),
                },
            )
            self.db.commit()
        except IntegrityError as exc:
            self.db.rollback()
            raise BaselineSaveError(key, exc) from exc
        logger.info("Baseline saved as: %s", key)
        return key

    def load(self, reference: str) -> BaselineMetrics:
        row = self.db.execute(
            text("SELECT document FROM baselines WHERE baseline_key = :baseline_key"),
            {"baseline_key": reference},
        ).fetchone()
        if row is None:
            raise BaselineLoadError(reference)
        try:
            return BaselineMetrics.from_dict(json.loads(row.document))
        except (ValueError, KeyError, TypeError) as exc:
            raise BaselineLoadError(reference, exc) from exc

    def list(self) -> List[str]:
        rows = self.db.execute(
            text("SELECT baseline_key FROM baselines ORDER BY baseline_key DESC")
        ).fetchall()
        return [row.baseline_key for row in rows]

    def find_by_pattern(self, pattern: str) -> Optional[str]:
        rows = self.db.execute(text("SELECT baseline_key, created_at FROM baselines")).fetchall()
        created_at = {row.baseline_key: row.created_at for row in rows}
        return select_prefix_match(created_at, strip_pattern(pattern), created_at.get)

    def load_with_pattern(self, pattern: Optional[str] = None) -> Tuple[BaselineMetrics, str]:
        """Load by key prefix (falling back to a baseline file path) or the latest key."""
        if pattern:
            matched = self.find_by_pattern(pattern)
            if matched is not None:
                logger.info("Using baseline: %s (matched pattern: %s)", matched, pattern)
                return self.load(matched), matched
            if Path(pattern).exists():
                logger.info("Using baseline: %s", pattern)
                return load_baseline_file(pattern), pattern
            exit_baseline_not_found(pattern)

        keys = self.list()
        if not keys:
            exit_baseline_not_found(None)
        logger.info("Using latest baseline: %s", keys[0])
        return self.load(keys[0]), keys[0]
