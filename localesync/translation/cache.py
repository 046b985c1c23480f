"""Per-locale persistent translation cache.

Responsibilities:
- Map fingerprints (normalized text + target locale) to translated text.
- Load one JSON mapping per target locale at the start of that locale's run.
- Save the full mapping once, atomically, at the end of that locale's run.
- Track basic cache telemetry (hits/misses) for run summaries.

Key types:
- `LocaleCache`: in-memory, append-only mapping for one locale.
- `TranslationCacheStore`: filesystem load/save/clear for locale caches.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import json
import os
from pathlib import Path
import tempfile

from ..telemetry.logger import RunLogger


@dataclass(slots=True)
class LocaleCache:
    """In-memory fingerprint-to-translation mapping for one target locale."""

    locale: str
    entries: dict[str, str] = field(default_factory=dict)
    hits: int = 0
    misses: int = 0

    def get(self, cache_key: str) -> str | None:
        """Return cached translation for key and update hit/miss telemetry counters."""

        if cache_key in self.entries:
            self.hits += 1
            return self.entries[cache_key]
        self.misses += 1
        return None

    def put(self, cache_key: str, value: str) -> None:
        """Store a translation under a fingerprint."""

        self.entries[cache_key] = value

    def __len__(self) -> int:
        return len(self.entries)


class TranslationCacheStore:
    """Filesystem-backed store with one `<locale>.json` file per target locale."""

    def __init__(self, cache_dir: Path, run_logger: RunLogger | None = None) -> None:
        """Initialize the store with its cache directory."""

        self.cache_dir = cache_dir
        self._run_logger = run_logger

    def path_for(self, locale: str) -> Path:
        """Return the cache file path for a locale."""

        return self.cache_dir / f"{locale}.json"

    def load(self, locale: str) -> LocaleCache:
        """Load a locale cache, resetting to empty when the file is missing or corrupt."""

        path = self.path_for(locale)
        if not path.exists():
            return LocaleCache(locale=locale)

        try:
            payload = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
            self._warn_reset(locale, path, type(exc).__name__)
            return LocaleCache(locale=locale)

        if not isinstance(payload, dict) or not all(
            isinstance(key, str) and isinstance(value, str) for key, value in payload.items()
        ):
            self._warn_reset(locale, path, "invalid_mapping")
            return LocaleCache(locale=locale)

        return LocaleCache(locale=locale, entries=dict(payload))

    def save(self, locale: str, cache: LocaleCache) -> Path:
        """Serialize the full mapping once, replacing any prior file atomically."""

        path = self.path_for(locale)
        path.parent.mkdir(parents=True, exist_ok=True)
        serialized = json.dumps(cache.entries, ensure_ascii=False, indent=2, sort_keys=True)
        fd, temp_name = tempfile.mkstemp(prefix=f".{locale}.", suffix=".tmp", dir=path.parent)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(serialized)
            os.replace(temp_name, path)
        except BaseException:
            Path(temp_name).unlink(missing_ok=True)
            raise
        return path

    def clear(self, locale: str) -> bool:
        """Delete a locale cache file and report whether one existed."""

        path = self.path_for(locale)
        if not path.exists():
            return False
        path.unlink()
        return True

    def _warn_reset(self, locale: str, path: Path, reason: str) -> None:
        """Report that an unreadable cache file is being treated as empty."""

        if self._run_logger is not None:
            self._run_logger.warning(
                "cache",
                "corrupt_reset",
                locale=locale,
                path=path.name,
                reason=reason,
            )
