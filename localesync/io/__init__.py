"""Input/output components for localesync.

This package contains source document discovery used by the pipeline.
"""

from .discovery import discover_source_documents

__all__ = ["discover_source_documents"]
