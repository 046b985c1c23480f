"""Deduplicating, cache-aware translation of a document's text units.

Responsibilities:
- Resolve cache hits and pass through empty text without provider calls.
- Collapse duplicate texts (same fingerprint) into one provider request.
- Prefer one batch request when the provider supports it; fall back to
  bounded per-text requests when it does not or when the batch fails.
- Degrade a failed text to its original wording without aborting the document.

Key types:
- `BatchTranslator`: per-run translator bound to one provider and source locale.
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
import threading
from typing import Sequence

from ..errors import ProviderError
from ..models.datatypes import TextUnit
from ..telemetry.logger import RunLogger
from ..text.filters import Glossary, PhraseBlacklist
from ..text.normalizer import fingerprint, normalize_text
from .cache import LocaleCache
from .providers.base import TranslationProvider


class BatchTranslator:
    """Translate ordered texts into one target locale, index-aligned with input."""

    def __init__(
        self,
        provider: TranslationProvider,
        *,
        source_locale: str,
        glossary: Glossary | None = None,
        blacklist: PhraseBlacklist | None = None,
        concurrency: int = 1,
        run_logger: RunLogger | None = None,
    ) -> None:
        """Initialize provider binding, post-processing filters, and worker bound."""

        if concurrency < 1:
            raise ValueError("`concurrency` must be a positive integer.")
        self.provider = provider
        self.source_locale = source_locale
        self.glossary = glossary if glossary is not None else Glossary()
        self.blacklist = blacklist if blacklist is not None else PhraseBlacklist()
        self.concurrency = concurrency
        self._run_logger = run_logger
        self._counter_lock = threading.Lock()
        self.provider_calls = 0
        self.unit_failures = 0
        self.batch_failures = 0

    def translate_all(
        self,
        units: Sequence[TextUnit],
        target_locale: str,
        cache: LocaleCache,
        *,
        document: str = "",
    ) -> list[str]:
        """Translate collected units; output index `i` belongs to unit `i`."""

        return self.translate_texts(
            [unit.original for unit in units],
            target_locale,
            cache,
            document=document,
        )

    def translate_texts(
        self,
        texts: Sequence[str],
        target_locale: str,
        cache: LocaleCache,
        *,
        document: str = "",
    ) -> list[str]:
        """Translate raw texts; output index `i` belongs to `texts[i]`."""

        outputs: list[str | None] = [None] * len(texts)
        resolved: dict[str, str] = {}
        pending_indices: dict[str, list[int]] = {}
        pending_texts: dict[str, str] = {}

        for index, text in enumerate(texts):
            normalized = normalize_text(text)
            if not normalized:
                outputs[index] = text
                continue
            cache_key = fingerprint(normalized, target_locale)
            if cache_key in resolved:
                outputs[index] = resolved[cache_key]
                continue
            if cache_key in pending_indices:
                pending_indices[cache_key].append(index)
                continue
            cached = cache.get(cache_key)
            if cached is not None:
                resolved[cache_key] = cached
                outputs[index] = cached
                continue
            pending_indices[cache_key] = [index]
            pending_texts[cache_key] = text

        if pending_indices:
            cache_keys = list(pending_indices)
            translated = self._translate_pending(
                [pending_texts[key] for key in cache_keys],
                target_locale,
                document,
            )
            for cache_key, value in zip(cache_keys, translated):
                if value is not None:
                    cache.put(cache_key, value)
                for index in pending_indices[cache_key]:
                    outputs[index] = value if value is not None else texts[index]

        return [item if item is not None else texts[index] for index, item in enumerate(outputs)]

    def _translate_pending(
        self,
        sources: list[str],
        target_locale: str,
        document: str,
    ) -> list[str | None]:
        """Translate unique cache misses; `None` marks a text that failed."""

        source_code = self.provider.language_code(self.source_locale)
        target_code = self.provider.language_code(target_locale)

        if self.provider.supports_batch:
            try:
                return self._translate_batch(sources, source_code, target_code)
            except Exception as exc:
                self.batch_failures += 1
                if self._run_logger is not None:
                    self._run_logger.warning(
                        "translate",
                        "batch_failed",
                        document=document,
                        locale=target_locale,
                        error_type=type(exc).__name__,
                        texts=len(sources),
                    )

        results = self._translate_each(sources, source_code, target_code, target_locale, document)
        self.unit_failures += sum(1 for item in results if item is None)
        return results

    def _translate_batch(
        self, sources: list[str], source_code: str, target_code: str
    ) -> list[str | None]:
        """Issue one batch request and post-process every result."""

        self._count_call()
        translated = self.provider.translate_many(sources, source_code, target_code)
        if len(translated) != len(sources):
            raise ProviderError(
                f"Batch returned {len(translated)} result(s) for {len(sources)} text(s).",
                failure_kind="batch_mismatch",
            )
        return [self._postprocess(item) for item in translated]

    def _translate_each(
        self,
        sources: list[str],
        source_code: str,
        target_code: str,
        target_locale: str,
        document: str,
    ) -> list[str | None]:
        """Translate texts one by one on a bounded worker pool, preserving order."""

        def _translate_one(text: str) -> str | None:
            self._count_call()
            try:
                return self._postprocess(
                    self.provider.translate_one(text, source_code, target_code)
                )
            except Exception as exc:
                if self._run_logger is not None:
                    self._run_logger.warning(
                        "translate",
                        "unit_failed",
                        document=document,
                        locale=target_locale,
                        error_type=type(exc).__name__,
                        error=str(exc),
                    )
                return None

        if self.concurrency == 1 or len(sources) <= 1:
            return [_translate_one(text) for text in sources]
        with ThreadPoolExecutor(max_workers=min(self.concurrency, len(sources))) as executor:
            return list(executor.map(_translate_one, sources))

    def _postprocess(self, translated: str) -> str:
        """Apply glossary substitution, then blacklist removal."""

        return self.blacklist.apply(self.glossary.apply(translated))

    def _count_call(self) -> None:
        with self._counter_lock:
            self.provider_calls += 1
