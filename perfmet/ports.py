"""Port definition for persisting and looking up baselines."""

from typing import Optional, Protocol, Sequence, Tuple

from .models import BaselineMetrics


class BaselineRepository(Protocol):
    """Repository interface that baseline stores implement for any backend.

    References are opaque to callers: a file path for the file store, a
    baseline key for relational stores.
    """

    def save(self, baseline: BaselineMetrics) -> str:
        """Persist a baseline and return its reference."""

    def load(self, reference: str) -> BaselineMetrics:
        """Load a baseline, raising BaselineLoadError when missing or malformed."""

    def list(self) -> Sequence[str]:
        """Return all references, most recent-looking name first."""

    def find_by_pattern(self, pattern: str) -> Optional[str]:
        """Resolve a name prefix to a single reference."""

    def load_with_pattern(self, pattern: Optional[str] = None) -> Tuple[BaselineMetrics, str]:
        """Load the baseline a pattern resolves to, or the latest one."""
