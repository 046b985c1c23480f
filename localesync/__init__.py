"""Top-level package for localesync.

This package keeps parallel per-locale HTML document trees in sync by
translating each source document's `#content` region into every target
locale. The main orchestration entry point is `SyncPipeline`.
"""

from .pipeline import SyncPipeline

__all__ = ["SyncPipeline", "__version__"]

__version__ = "0.1.0"
