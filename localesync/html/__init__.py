"""HTML document components: text-unit collection, merge, and persistence."""

from .collector import TextUnitCollector
from .documents import TemplateBootstrapper
from .merger import DocumentMerger

__all__ = ["DocumentMerger", "TemplateBootstrapper", "TextUnitCollector"]
