"""Telemetry components for localesync."""

from .logger import RunLogger

__all__ = ["RunLogger"]
