"""Index module - single-flight coordination of the external indexing engine.

Public API:
- IndexCoordinator: gates project and file indexing requests
- IndexOutcome, CoordinatorState, CoordinatorStatus: result and state types
- IndexingEngine: engine protocol; CoreProcessEngine: PHP core subprocess adapter
"""

from php_integrator.index.coordinator import (
    CoordinatorState,
    CoordinatorStatus,
    FileIndexEntry,
    IndexCoordinator,
    IndexOutcome,
    PendingSource,
)
from php_integrator.index.engine import CoreProcessEngine, IndexingEngine

__all__ = [
    "CoordinatorState",
    "CoordinatorStatus",
    "CoreProcessEngine",
    "FileIndexEntry",
    "IndexCoordinator",
    "IndexOutcome",
    "IndexingEngine",
    "PendingSource",
]
