"""Baseline store adapters."""

from .file_store import FileBaselineStore
from .sqlalchemy_repo import SQLAlchemyBaselineRepository

__all__ = ["FileBaselineStore", "SQLAlchemyBaselineRepository"]
