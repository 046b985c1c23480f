"""localesync pipeline package.

This package contains the synchronization orchestrator and its stage
telemetry helpers.
"""

from .orchestrator import SyncPipeline

__all__ = ["SyncPipeline"]
