"""Data models used by localesync modules."""

from .datatypes import DocumentResult, RunReport, TextUnit

__all__ = ["DocumentResult", "RunReport", "TextUnit"]
