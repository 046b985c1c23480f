"""Core datatypes shared across localesync modules.

Responsibilities:
- Represent records exchanged between collector, translator, merger, and orchestrator.
- Provide explicit typing for per-document and per-run reporting.

Key types:
- `TextUnit`, `DocumentResult`, and `RunReport`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from bs4.element import NavigableString


@dataclass(frozen=True, slots=True)
class TextUnit:
    """One translatable text leaf bound to its place in a parsed document.

    Attributes:
        location: The text leaf inside the parsed source tree.
        original: Raw leaf text as parsed.
        normalized: Whitespace-collapsed, trimmed form of `original`.
    """

    location: NavigableString
    original: str
    normalized: str


@dataclass(frozen=True, slots=True)
class DocumentResult:
    """Outcome of synchronizing one source document into one target locale.

    Attributes:
        source_path: Source-locale document path.
        target_path: Target-locale document path, when it could be derived.
        target_locale: Target locale tag.
        status: `synced`, `dry_run`, `skipped`, or `failed`.
        unit_count: Number of collected text units.
        template_policy: Bootstrap policy used for the target (`existing`,
            `sibling`, `source`), or `None` when no bootstrap ran.
        detail: Human-readable reason for `skipped`/`failed` outcomes.
    """

    source_path: Path
    target_path: Path | None
    target_locale: str
    status: str
    unit_count: int = 0
    template_policy: str | None = None
    detail: str = ""


@dataclass(slots=True)
class RunReport:
    """Aggregate record of one synchronization run.

    Attributes:
        source_locale: Source locale tag.
        target_locales: Target locale tags in processing order.
        provider: Provider identifier used for the run.
        dry_run: Whether the run skipped translation and all writes.
        documents: Per-document outcomes in processing order.
        provider_calls: Outbound translate calls issued (batch calls count once).
        unit_failures: Texts that fell back to their original wording.
        cache_hits: Cache lookups served from a locale cache.
        cache_misses: Cache lookups that required translation.
        retry_attempts: Provider retries performed after recoverable failures.
    """

    source_locale: str
    target_locales: tuple[str, ...]
    provider: str
    dry_run: bool = False
    documents: list[DocumentResult] = field(default_factory=list)
    provider_calls: int = 0
    unit_failures: int = 0
    cache_hits: int = 0
    cache_misses: int = 0
    retry_attempts: int = 0

    def count(self, status: str) -> int:
        """Return the number of document outcomes with a given status."""

        return sum(1 for item in self.documents if item.status == status)

    @property
    def total_units(self) -> int:
        """Return the number of text units collected across all documents."""

        return sum(item.unit_count for item in self.documents)
