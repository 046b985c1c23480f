"""Pipeline orchestration for localesync.

Responsibilities:
- Resolve configuration, settings, and the translation provider once per run.
- Process target locales and source documents strictly in sequence.
- Keep a per-document failure local to that document.
- Load and save each locale's cache exactly once.

Key types:
- `SyncPipeline`: orchestration facade returning a `RunReport`.
"""

from __future__ import annotations

from collections.abc import Callable
import os
from pathlib import Path
import time

from bs4 import BeautifulSoup
from bs4.element import Tag

from ..config import (
    ConfigLoader,
    ProviderRuntimeConfig,
    RuntimeConfigSources,
    SyncConfig,
    SyncSettings,
)
from ..errors import PipelineStageError
from ..html.collector import TextUnitCollector
from ..html.documents import (
    TemplateBootstrapper,
    find_content_region,
    parse_html,
    read_markup,
    save_document,
    target_path_for,
)
from ..html.merger import DocumentMerger
from ..io.discovery import discover_source_documents
from ..locales import KNOWN_LOCALE_MARKERS
from ..models.datatypes import DocumentResult, RunReport, TextUnit
from ..provider_factory import ProviderFactory
from ..telemetry.logger import RunLogger
from ..text.filters import Glossary, PhraseBlacklist, load_glossary_csv
from ..translation.batch import BatchTranslator
from ..translation.cache import LocaleCache, TranslationCacheStore
from ..translation.providers.base import TranslationProvider
from ..translation.rate_limiter import RateLimiter
from ..translation.retry import RetryPolicy
from .telemetry import PipelineTelemetryMixin


class SyncPipeline(PipelineTelemetryMixin):
    """Coordinate all stages for a single synchronization run."""

    def __init__(
        self,
        run_logger: RunLogger | None = None,
        stage_progress_callback: Callable[[str, int, int], None] | None = None,
        document_callback: Callable[[int, int, DocumentResult], None] | None = None,
        provider: TranslationProvider | None = None,
        sleeper: Callable[[float], None] = time.sleep,
    ) -> None:
        """Initialize optional logging/progress hooks and test seams.

        Args:
            run_logger: Structured phase logger.
            stage_progress_callback: Called with `(stage, index, total)` on stage start.
            document_callback: Called with `(position, total, result)` per document.
            provider: Pre-built provider; when omitted one is created from config.
            sleeper: Sleep function for page, pacing, and backoff delays.
        """

        self._run_logger = run_logger
        self._stage_progress_callback = stage_progress_callback
        self._document_callback = document_callback
        self._provider = provider
        self._sleeper = sleeper

    def run(self, config: SyncConfig) -> RunReport:
        """Synchronize every discovered source document into every target locale."""

        self._validate_config(config)
        root = config.root.resolve()
        runtime = self._resolve_runtime_config(config)
        settings = self._load_settings(config)
        collector = self._build_collector(settings)
        blacklist = PhraseBlacklist(settings.phrase_blacklist)

        sources = self._run_stage(
            "discover",
            lambda: discover_source_documents(
                root, config.source_locale, config.scope, config.files
            ),
        )

        provider: TranslationProvider | None = None
        retry_policy: RetryPolicy | None = None
        if not config.dry_run:
            provider, retry_policy = self._create_provider(config, runtime)

        report = RunReport(
            source_locale=config.source_locale,
            target_locales=tuple(config.target_locales),
            provider=runtime.provider,
            dry_run=config.dry_run,
        )
        merger = DocumentMerger(
            source_locale=config.source_locale,
            known_markers=(*KNOWN_LOCALE_MARKERS, *config.target_locales),
        )
        bootstrapper = TemplateBootstrapper()
        cache_store = TranslationCacheStore(config.cache_dir, run_logger=self._run_logger)

        total = len(sources) * len(config.target_locales)
        position = 0
        for locale in config.target_locales:
            translator: BatchTranslator | None = None
            cache: LocaleCache | None = None
            if provider is not None:
                translator = BatchTranslator(
                    provider,
                    source_locale=config.source_locale,
                    glossary=self._load_glossary(config, locale),
                    blacklist=blacklist,
                    concurrency=config.node_concurrency,
                    run_logger=self._run_logger,
                )
                cache = cache_store.load(locale)

            for source_path in sources:
                if position > 0 and not config.dry_run and config.page_sleep_ms > 0:
                    self._sleeper(config.page_sleep_ms / 1000.0)
                position += 1
                result = self._sync_document_safely(
                    source_path,
                    locale,
                    root=root,
                    config=config,
                    collector=collector,
                    translator=translator,
                    cache=cache,
                    merger=merger,
                    bootstrapper=bootstrapper,
                )
                report.documents.append(result)
                if self._document_callback is not None:
                    self._document_callback(position, total, result)

            if translator is not None and cache is not None:
                self._save_cache(cache_store, locale, cache)
                report.provider_calls += translator.provider_calls
                report.unit_failures += translator.unit_failures
                report.cache_hits += cache.hits
                report.cache_misses += cache.misses

        if retry_policy is not None:
            report.retry_attempts = retry_policy.retry_attempt_count
        elif provider is not None:
            report.retry_attempts = provider.retry_attempt_count
        return report

    def _sync_document_safely(
        self,
        source_path: Path,
        locale: str,
        *,
        root: Path,
        **kwargs: object,
    ) -> DocumentResult:
        """Run one document, turning stage failures into a `failed` result."""

        try:
            return self._sync_document(source_path, locale, root=root, **kwargs)
        except PipelineStageError as exc:
            self._warn(
                exc.stage,
                "document_failed",
                document=self._document_label(source_path, root),
                locale=locale,
            )
            return DocumentResult(
                source_path=source_path,
                target_path=None,
                target_locale=locale,
                status="failed",
                detail=exc.detail,
            )

    def _sync_document(
        self,
        source_path: Path,
        locale: str,
        *,
        root: Path,
        config: SyncConfig,
        collector: TextUnitCollector,
        translator: BatchTranslator | None,
        cache: LocaleCache | None,
        merger: DocumentMerger,
        bootstrapper: TemplateBootstrapper,
    ) -> DocumentResult:
        """Load, collect, translate, merge, and persist one document for one locale."""

        label = self._document_label(source_path, root)
        context = {"document": label, "locale": locale}
        target_path = self._target_path(source_path, config.source_locale, locale, root)

        source_document = self._run_stage(
            "load", lambda: self._load(source_path, "load"), **context
        )
        content = find_content_region(source_document)
        if content is None:
            self._warn("load", "missing_content", **context)
            return DocumentResult(
                source_path=source_path,
                target_path=target_path,
                target_locale=locale,
                status="skipped",
                detail="Source document has no `#content` region.",
            )

        units = self._run_stage("collect", lambda: collector.collect(content), **context)
        if translator is None or cache is None:
            return DocumentResult(
                source_path=source_path,
                target_path=target_path,
                target_locale=locale,
                status="dry_run",
                unit_count=len(units),
            )

        policy, target_markup, target_document = self._run_stage(
            "template",
            lambda: self._prepare_target(bootstrapper, source_path, target_path),
            **context,
        )
        translated = self._run_stage(
            "translate",
            lambda: translator.translate_all(units, locale, cache, document=label),
            **context,
        )
        self._run_stage(
            "merge",
            lambda: self._merge(merger, content, units, translated, target_document, locale),
            **context,
        )
        self._run_stage(
            "persist",
            lambda: self._persist(target_path, target_document, target_markup),
            **context,
        )
        return DocumentResult(
            source_path=source_path,
            target_path=target_path,
            target_locale=locale,
            status="synced",
            unit_count=len(units),
            template_policy=policy,
        )

    def _target_path(
        self, source_path: Path, source_locale: str, locale: str, root: Path
    ) -> Path:
        """Map a source path into the target locale tree."""

        try:
            return target_path_for(source_path, source_locale, locale, root)
        except ValueError as exc:
            raise PipelineStageError(
                stage="discover",
                detail=str(exc),
                hint="Source documents must live under `<root>/<from>/`.",
            ) from exc

    def _load(self, path: Path, stage: str) -> BeautifulSoup:
        """Read and parse one document."""

        return parse_html(self._read(path, stage))

    def _read(self, path: Path, stage: str) -> str:
        """Read one document's markup, mapping I/O failures to a stage error."""

        try:
            return read_markup(path)
        except (OSError, UnicodeDecodeError) as exc:
            raise PipelineStageError(
                stage=stage,
                detail=f"Failed to read document `{path}`: {exc}",
                hint="Verify the file exists, is readable, and is UTF-8 encoded.",
            ) from exc

    def _prepare_target(
        self,
        bootstrapper: TemplateBootstrapper,
        source_path: Path,
        target_path: Path,
    ) -> tuple[str, str, BeautifulSoup]:
        """Ensure the target document exists, then read and parse it."""

        try:
            policy = bootstrapper.ensure(source_path, target_path)
        except OSError as exc:
            raise PipelineStageError(
                stage="template",
                detail=f"Failed to create target document `{target_path}`: {exc}",
                hint="Verify the target locale directory is writable.",
            ) from exc
        markup = self._read(target_path, "template")
        return policy, markup, parse_html(markup)

    def _merge(
        self,
        merger: DocumentMerger,
        content: Tag,
        units: list[TextUnit],
        translated: list[str],
        target_document: BeautifulSoup,
        locale: str,
    ) -> None:
        """Merge translated content into the target document."""

        try:
            merger.merge(content, units, translated, target_document, locale)
        except ValueError as exc:
            raise PipelineStageError(
                stage="merge",
                detail=str(exc),
                hint="Re-run the document; translations must align with text units.",
            ) from exc

    def _persist(
        self, target_path: Path, target_document: BeautifulSoup, original_markup: str
    ) -> Path:
        """Write the merged target document over its original markup."""

        try:
            return save_document(target_path, target_document, original_markup)
        except OSError as exc:
            raise PipelineStageError(
                stage="persist",
                detail=f"Failed to write target document `{target_path}`: {exc}",
                hint="Verify the target locale directory is writable.",
            ) from exc

    def _save_cache(self, cache_store: TranslationCacheStore, locale: str, cache: LocaleCache) -> None:
        """Persist one locale cache; a failure here aborts the run."""

        try:
            cache_store.save(locale, cache)
        except OSError as exc:
            raise PipelineStageError(
                stage="persist",
                detail=f"Failed to save translation cache for `{locale}`: {exc}",
                hint=f"Verify `{cache_store.cache_dir}` is writable.",
            ) from exc

    def _create_provider(
        self, config: SyncConfig, runtime: ProviderRuntimeConfig
    ) -> tuple[TranslationProvider, RetryPolicy | None]:
        """Return the injected provider, or build one with shared pacing and retry."""

        if self._provider is not None:
            return self._provider, None

        rate_limiter = RateLimiter(
            min_interval_seconds=config.request_interval_ms / 1000.0,
            sleeper=self._sleeper,
        )
        retry_policy = RetryPolicy(
            max_retries=config.max_retries,
            base_delay_seconds=config.retry_base_ms / 1000.0,
            sleeper=self._sleeper,
            run_logger=self._run_logger,
        )
        provider = ProviderFactory.create(
            runtime,
            rate_limiter=rate_limiter,
            retry_policy=retry_policy,
            argos_script=config.resolved_argos_script,
        )
        return provider, retry_policy

    def _load_settings(self, config: SyncConfig) -> SyncSettings:
        """Load project settings, mapping failures to a config stage error."""

        try:
            return ConfigLoader.load_settings(config.settings_path, self._run_logger)
        except (OSError, UnicodeDecodeError, ValueError) as exc:
            raise PipelineStageError(
                stage="config",
                detail=f"Failed to load settings `{config.settings_path}`: {exc}",
                hint="Fix `ignoreSelectors`/`phraseBlacklist` in the settings file.",
            ) from exc

    def _build_collector(self, settings: SyncSettings) -> TextUnitCollector:
        """Compile ignore selectors once for the whole run."""

        try:
            return TextUnitCollector(settings.ignore_selectors)
        except ValueError as exc:
            raise PipelineStageError(
                stage="config",
                detail=str(exc),
                hint="Fix `ignoreSelectors` in the settings file.",
            ) from exc

    def _load_glossary(self, config: SyncConfig, locale: str) -> Glossary:
        """Load one locale's glossary, mapping read failures to a config stage error."""

        path = config.glossary_dir / f"{locale}.csv"
        try:
            return load_glossary_csv(path)
        except (OSError, UnicodeDecodeError) as exc:
            raise PipelineStageError(
                stage="config",
                detail=f"Failed to load glossary `{path}`: {exc}",
                hint="Verify the glossary is a readable UTF-8 CSV file.",
            ) from exc

    def _validate_config(self, config: SyncConfig) -> None:
        """Validate top-level configuration and map failures to stage-aware error."""

        try:
            config.validate()
        except ValueError as exc:
            raise PipelineStageError(
                stage="config",
                detail=str(exc),
                hint="Update locale/provider options and rerun the command.",
            ) from exc

    def _resolve_runtime_config(self, config: SyncConfig) -> ProviderRuntimeConfig:
        """Resolve runtime provider settings with deterministic source precedence."""

        try:
            env_source = config.runtime_sources.env or os.environ
            runtime_sources = RuntimeConfigSources(
                cli=config.runtime_sources.cli,
                secure=config.runtime_sources.secure,
                env=env_source,
            )
            return config.resolved_provider_runtime(runtime_sources)
        except ValueError as exc:
            raise PipelineStageError(
                stage="config",
                detail=str(exc),
                hint="Set a supported provider in CLI, environment, or config defaults.",
            ) from exc

    @staticmethod
    def _document_label(source_path: Path, root: Path) -> str:
        """Return a root-relative label for logs and reports."""

        if source_path.is_relative_to(root):
            return source_path.relative_to(root).as_posix()
        return source_path.as_posix()
