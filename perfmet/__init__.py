"""perfmet - baseline performance metrics extracted from load-test logs."""

from .adapters import FileBaselineStore, SQLAlchemyBaselineRepository
from .exceptions import (
    BaselineLoadError,
    BaselineSaveError,
    LogDirectoryError,
    LogFileError,
    MissingLogFilesError,
    PerfMetError,
)
from .models import BaselineMetrics, TestConfig
from .service import BaselineService, extract_baseline_metrics, find_log_files
from .storage import (
    find_baseline_by_pattern,
    list_baselines,
    load_baseline,
    load_baseline_with_pattern,
    save_baseline,
)

__all__ = [
    "BaselineLoadError",
    "BaselineSaveError",
    "BaselineMetrics",
    "BaselineService",
    "FileBaselineStore",
    "LogDirectoryError",
    "LogFileError",
    "MissingLogFilesError",
    "PerfMetError",
    "SQLAlchemyBaselineRepository",
    "TestConfig",
    "extract_baseline_metrics",
    "find_baseline_by_pattern",
    "find_log_files",
    "list_baselines",
    "load_baseline",
    "load_baseline_with_pattern",
    "save_baseline",
]

__version__ = "0.1.0"
