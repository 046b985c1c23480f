"""Configuration model and loaders for localesync.

Responsibilities:
- Define runtime configuration as a typed dataclass.
- Provide deterministic precedence resolution for provider endpoints and credentials.
- Load YAML run configs and the per-project `i18n/config.json` settings file.

Key types:
- `SyncConfig`: normalized runtime settings for a synchronization run.
- `ProviderRuntimeConfig`: resolved provider identifier, endpoints, and credentials.
- `RuntimeConfigSources`: optional value sources for precedence resolution.
- `SyncSettings`: project-level ignore selectors and phrase blacklist.
- `ConfigLoader`: static construction helpers for `SyncConfig` and `SyncSettings`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping

import yaml

from .parsing import (
    normalize_optional_string,
    parse_csv_list,
    parse_permissive_boolean,
)
from .telemetry.logger import RunLogger


DEFAULT_SOURCE_LOCALE = "kor"
DEFAULT_TARGET_LOCALES = ("chn", "vtn")
DEFAULT_SCOPE = "esg"
DEFAULT_PROVIDER = "google"
DEFAULT_ARGOS_SCRIPT = Path("scripts") / "py" / "argos_translate.py"
SUPPORTED_PROVIDER_IDS = frozenset({"argos", "google", "libre", "papago"})

# Each runtime key may be read from several environment variables; the first
# non-blank one wins.
_RUNTIME_ENV_KEYS: Mapping[str, tuple[str, ...]] = {
    "provider": ("LOCALESYNC_PROVIDER",),
    "google_url": ("LOCALESYNC_GOOGLE_URL",),
    "libre_url": ("LOCALESYNC_LIBRE_URL",),
    "papago_url": ("LOCALESYNC_PAPAGO_URL",),
    "papago_client_id": ("NCP_APIGW_API_KEY_ID", "PAPAGO_CLIENT_ID"),
    "papago_client_secret": ("NCP_APIGW_API_KEY", "PAPAGO_CLIENT_SECRET"),
}


@dataclass(frozen=True, slots=True)
class RuntimeConfigSources:
    """Source mappings used for deterministic runtime value precedence.

    Attributes:
        cli: Values explicitly provided by CLI arguments.
        secure: Values loaded from secure local credential storage.
        env: Values loaded from environment variables.
    """

    cli: Mapping[str, str] = field(default_factory=dict)
    secure: Mapping[str, str] = field(default_factory=dict)
    env: Mapping[str, str] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class ProviderRuntimeConfig:
    """Resolved provider settings for one run.

    Attributes:
        provider: Provider identifier (`google`, `papago`, `libre`, `argos`).
        google_url: Optional Google web endpoint override.
        libre_url: LibreTranslate server base URL.
        papago_url: Optional Papago endpoint override.
        papago_client_id: Papago client id (not persisted in reports).
        papago_client_secret: Papago client secret (not persisted in reports).
    """

    provider: str
    google_url: str | None = None
    libre_url: str | None = None
    papago_url: str | None = None
    papago_client_id: str | None = None
    papago_client_secret: str | None = None


@dataclass(frozen=True, slots=True)
class SyncSettings:
    """Project-level extraction and post-processing settings.

    Attributes:
        ignore_selectors: CSS selectors whose elements (and descendants) are
            never collected for translation.
        phrase_blacklist: Phrases removed from every translated text.
    """

    ignore_selectors: tuple[str, ...] = ()
    phrase_blacklist: tuple[str, ...] = ()


@dataclass(slots=True)
class SyncConfig:
    """Runtime configuration for one synchronization run.

    Attributes:
        root: Project root holding locale trees and the `i18n/` directory.
        source_locale: Locale tag of the source tree.
        target_locales: Target locale tags, processed in order.
        scope: Sub-directory of the source tree to synchronize.
        provider: Default provider identifier.
        google_url: Optional Google web endpoint override.
        libre_url: Optional LibreTranslate base URL.
        papago_url: Optional Papago endpoint override.
        argos_script: Argos helper script; relative paths resolve against `root`.
        papago_client_id: Optional Papago client id.
        papago_client_secret: Optional Papago client secret.
        files: Explicit source paths or glob patterns replacing the scope glob.
        node_concurrency: Upper bound of concurrent per-text provider calls.
        request_interval_ms: Minimum spacing between provider calls.
        max_retries: Retries after the first attempt for recoverable failures.
        retry_base_ms: Base of the exponential backoff.
        page_sleep_ms: Delay between documents (skipped in dry-run).
        dry_run: Collect and report only; no translation and no writes.
        runtime_sources: Optional runtime source overrides injected by CLI.
    """

    root: Path
    source_locale: str = DEFAULT_SOURCE_LOCALE
    target_locales: tuple[str, ...] = DEFAULT_TARGET_LOCALES
    scope: str = DEFAULT_SCOPE
    provider: str = DEFAULT_PROVIDER
    google_url: str | None = None
    libre_url: str | None = None
    papago_url: str | None = None
    argos_script: Path = DEFAULT_ARGOS_SCRIPT
    papago_client_id: str | None = None
    papago_client_secret: str | None = None
    files: tuple[str, ...] = ()
    node_concurrency: int = 1
    request_interval_ms: int = 800
    max_retries: int = 5
    retry_base_ms: int = 1000
    page_sleep_ms: int = 1000
    dry_run: bool = False
    runtime_sources: RuntimeConfigSources = field(default_factory=RuntimeConfigSources)

    @property
    def i18n_dir(self) -> Path:
        """Return the project's `i18n/` directory."""

        return self.root / "i18n"

    @property
    def cache_dir(self) -> Path:
        """Return the directory holding per-locale cache files."""

        return self.i18n_dir / "cache"

    @property
    def glossary_dir(self) -> Path:
        """Return the directory holding per-locale glossary files."""

        return self.i18n_dir / "glossary"

    @property
    def settings_path(self) -> Path:
        """Return the project settings file path."""

        return self.i18n_dir / "config.json"

    @property
    def resolved_argos_script(self) -> Path:
        """Return the Argos helper path, anchored at `root` when relative."""

        if self.argos_script.is_absolute():
            return self.argos_script
        return self.root / self.argos_script

    def validate(self) -> None:
        """Validate runtime configuration values before pipeline execution."""

        self._require_non_empty(self.source_locale, "source_locale")
        self._require_non_empty(self.scope, "scope")
        if not self.target_locales:
            raise ValueError("`target_locales` must list at least one locale.")
        for locale in self.target_locales:
            self._require_non_empty(locale, "target_locales")
        if self.source_locale in self.target_locales:
            raise ValueError(
                f"Source locale `{self.source_locale}` cannot also be a target locale."
            )
        if len(set(self.target_locales)) != len(self.target_locales):
            raise ValueError("`target_locales` must not contain duplicates.")
        self._validate_provider_id(self.provider, "provider")
        if self.node_concurrency <= 0:
            raise ValueError("`node_concurrency` must be a positive integer.")
        for field_name in ("request_interval_ms", "max_retries", "retry_base_ms", "page_sleep_ms"):
            if getattr(self, field_name) < 0:
                raise ValueError(f"`{field_name}` must be zero or a positive integer.")

    def resolved_provider_runtime(
        self, sources: RuntimeConfigSources | None = None
    ) -> ProviderRuntimeConfig:
        """Resolve provider settings with deterministic source precedence.

        Precedence for each key is:
        `cli` > `secure` > `env` > config field default.
        """

        resolved_sources = sources if sources is not None else self.runtime_sources

        provider = self._resolve_runtime_value("provider", self.provider, resolved_sources)
        if provider is None:
            raise ValueError(
                "`provider` could not be resolved from CLI, secure storage, env, or defaults."
            )
        provider = provider.lower()
        self._validate_provider_id(provider, "provider")

        return ProviderRuntimeConfig(
            provider=provider,
            google_url=self._resolve_runtime_value("google_url", self.google_url, resolved_sources),
            libre_url=self._resolve_runtime_value("libre_url", self.libre_url, resolved_sources),
            papago_url=self._resolve_runtime_value("papago_url", self.papago_url, resolved_sources),
            papago_client_id=self._resolve_runtime_value(
                "papago_client_id", self.papago_client_id, resolved_sources
            ),
            papago_client_secret=self._resolve_runtime_value(
                "papago_client_secret", self.papago_client_secret, resolved_sources
            ),
        )

    def _resolve_runtime_value(
        self,
        key: str,
        default_value: str | None,
        sources: RuntimeConfigSources,
    ) -> str | None:
        """Resolve one runtime value from sources in deterministic precedence order."""

        cli_value = self._normalized_lookup(sources.cli, key)
        if cli_value is not None:
            return cli_value

        secure_value = self._normalized_lookup(sources.secure, key)
        if secure_value is not None:
            return secure_value

        for env_key in _RUNTIME_ENV_KEYS.get(key, ()):
            env_value = self._normalized_lookup(sources.env, env_key)
            if env_value is not None:
                return env_value

        return normalize_optional_string(default_value)

    @staticmethod
    def _normalized_lookup(mapping: Mapping[str, str], key: str) -> str | None:
        """Return a stripped mapping value for a key or `None` when missing/blank."""

        if key not in mapping:
            return None
        return normalize_optional_string(mapping.get(key))

    @staticmethod
    def _validate_provider_id(provider_id: str, field_name: str) -> None:
        """Validate provider identifiers against supported providers."""

        if provider_id not in SUPPORTED_PROVIDER_IDS:
            supported = ", ".join(sorted(SUPPORTED_PROVIDER_IDS))
            raise ValueError(
                f"Unsupported `{field_name}` value `{provider_id}`; supported: {supported}."
            )

    @staticmethod
    def _require_non_empty(value: str, field_name: str) -> None:
        """Validate that runtime string fields are not empty."""

        if not isinstance(value, str) or not value.strip():
            raise ValueError(f"`{field_name}` must be a non-empty string.")


class ConfigLoader:
    """Factory methods for creating `SyncConfig` and `SyncSettings` from files."""

    _REQUIRED_YAML_KEYS = frozenset({"root"})
    _SUPPORTED_YAML_KEYS = frozenset(
        {
            "root",
            "from",
            "to",
            "scope",
            "provider",
            "google_url",
            "libre_url",
            "papago_url",
            "argos_script",
            "files",
            "node_concurrency",
            "req_interval_ms",
            "retry",
            "retry_base_ms",
            "page_sleep_ms",
            "dry_run",
        }
    )
    _SUPPORTED_SETTINGS_KEYS = frozenset({"ignoreSelectors", "phraseBlacklist"})

    @staticmethod
    def from_yaml(path: Path) -> SyncConfig:
        """Create a validated config from a YAML run config.

        Relative `root` values resolve against the config file's directory.
        Credentials are deliberately not accepted here; use keyring or env.
        """

        payload = ConfigLoader._parse_mapping_payload(
            path.read_text(encoding="utf-8"), f"YAML config `{path}`"
        )
        source_label = f"YAML `{path}`"
        ConfigLoader._validate_yaml_keys(payload, source_label)

        root = Path(ConfigLoader._required_string(payload, "root", source_label))
        if not root.is_absolute():
            root = path.parent / root

        argos_script = ConfigLoader._optional_string(payload, "argos_script")
        target_locales = parse_csv_list(payload.get("to")) or DEFAULT_TARGET_LOCALES

        config = SyncConfig(
            root=root,
            source_locale=ConfigLoader._optional_string(payload, "from") or DEFAULT_SOURCE_LOCALE,
            target_locales=target_locales,
            scope=ConfigLoader._optional_string(payload, "scope") or DEFAULT_SCOPE,
            provider=(ConfigLoader._optional_string(payload, "provider") or DEFAULT_PROVIDER).lower(),
            google_url=ConfigLoader._optional_string(payload, "google_url"),
            libre_url=ConfigLoader._optional_string(payload, "libre_url"),
            papago_url=ConfigLoader._optional_string(payload, "papago_url"),
            argos_script=Path(argos_script) if argos_script else DEFAULT_ARGOS_SCRIPT,
            files=parse_csv_list(payload.get("files")),
            node_concurrency=ConfigLoader._optional_int(
                payload, "node_concurrency", source_label, default=1, minimum=1
            ),
            request_interval_ms=ConfigLoader._optional_int(
                payload, "req_interval_ms", source_label, default=800
            ),
            max_retries=ConfigLoader._optional_int(payload, "retry", source_label, default=5),
            retry_base_ms=ConfigLoader._optional_int(
                payload, "retry_base_ms", source_label, default=1000
            ),
            page_sleep_ms=ConfigLoader._optional_int(
                payload, "page_sleep_ms", source_label, default=1000
            ),
            dry_run=ConfigLoader._optional_boolean(payload, "dry_run", source_label, default=False),
        )
        config.validate()
        return config

    @staticmethod
    def load_settings(path: Path, run_logger: RunLogger | None = None) -> SyncSettings:
        """Load `ignoreSelectors` and `phraseBlacklist` from a settings file.

        A missing file yields empty settings. JSON content is parsed by the
        YAML loader, so both formats are accepted. Other keys are ignored with
        a warning.
        """

        if not path.exists():
            return SyncSettings()

        source_label = f"Settings file `{path}`"
        payload = ConfigLoader._parse_mapping_payload(path.read_text(encoding="utf-8"), source_label)
        unknown = sorted(
            str(key) for key in set(payload).difference(ConfigLoader._SUPPORTED_SETTINGS_KEYS)
        )
        if unknown and run_logger is not None:
            run_logger.warning(
                "config", "settings_keys_ignored", path=path.name, keys=",".join(unknown)
            )

        return SyncSettings(
            ignore_selectors=ConfigLoader._optional_string_list(
                payload, "ignoreSelectors", source_label
            ),
            phrase_blacklist=ConfigLoader._optional_string_list(
                payload, "phraseBlacklist", source_label
            ),
        )

    @staticmethod
    def _parse_mapping_payload(raw_text: str, source_label: str) -> Mapping[str, Any]:
        """Parse YAML/JSON text and enforce a mapping root payload."""

        try:
            payload = yaml.safe_load(raw_text)
        except yaml.YAMLError as exc:
            raise ValueError(f"{source_label} is not valid YAML/JSON: {exc}") from exc

        if payload is None:
            payload = {}
        if not isinstance(payload, Mapping):
            raise ValueError(f"{source_label} must contain a top-level mapping/object.")
        return payload

    @staticmethod
    def _validate_yaml_keys(payload: Mapping[str, Any], source_label: str) -> None:
        """Validate supported and required YAML keys."""

        unknown = sorted(str(key) for key in set(payload).difference(ConfigLoader._SUPPORTED_YAML_KEYS))
        if unknown:
            key_list = ", ".join(unknown)
            raise ValueError(f"{source_label} includes unsupported key(s): {key_list}.")

        missing = sorted(key for key in ConfigLoader._REQUIRED_YAML_KEYS if key not in payload)
        if missing:
            key_list = ", ".join(missing)
            raise ValueError(f"{source_label} is missing required key(s): {key_list}.")

    @staticmethod
    def _required_string(payload: Mapping[str, Any], key: str, source_label: str) -> str:
        """Read a required non-empty string field from a payload."""

        value = ConfigLoader._optional_string(payload, key)
        if value is None:
            raise ValueError(f"{source_label} requires non-empty `{key}`.")
        return value

    @staticmethod
    def _optional_string(payload: Mapping[str, Any], key: str) -> str | None:
        """Read an optional string field and normalize blank values to `None`."""

        if key not in payload:
            return None
        return normalize_optional_string(payload[key])

    @staticmethod
    def _optional_int(
        payload: Mapping[str, Any],
        key: str,
        source_label: str,
        *,
        default: int,
        minimum: int = 0,
    ) -> int:
        """Read and validate an integer payload field bounded below by `minimum`."""

        if key not in payload:
            return default

        raw_value = payload[key]
        if isinstance(raw_value, bool):
            raise ValueError(f"{source_label} field `{key}` must be an integer >= {minimum}.")
        if isinstance(raw_value, int):
            parsed = raw_value
        else:
            normalized = normalize_optional_string(raw_value)
            if normalized is None:
                return default
            try:
                parsed = int(normalized)
            except ValueError as exc:
                raise ValueError(
                    f"{source_label} field `{key}` must be an integer >= {minimum}."
                ) from exc

        if parsed < minimum:
            raise ValueError(f"{source_label} field `{key}` must be an integer >= {minimum}.")
        return parsed

    @staticmethod
    def _optional_boolean(
        payload: Mapping[str, Any], key: str, source_label: str, default: bool
    ) -> bool:
        """Read and validate a boolean field from a payload."""

        if key not in payload:
            return default

        parsed = parse_permissive_boolean(payload[key])
        if parsed is None:
            raise ValueError(
                f"{source_label} field `{key}` must be a boolean value "
                "(`true`/`false`, `1`/`0`, `yes`/`no`)."
            )
        return parsed

    @staticmethod
    def _optional_string_list(
        payload: Mapping[str, Any], key: str, source_label: str
    ) -> tuple[str, ...]:
        """Read an optional list of non-blank strings."""

        if key not in payload or payload[key] is None:
            return ()
        raw = payload[key]
        if not isinstance(raw, list):
            raise ValueError(f"{source_label} field `{key}` must be a list of strings.")

        items: list[str] = []
        for raw_item in raw:
            if not isinstance(raw_item, str):
                raise ValueError(f"{source_label} field `{key}` must be a list of strings.")
            normalized = normalize_optional_string(raw_item)
            if normalized is None:
                raise ValueError(f"{source_label} field `{key}` contains a blank entry.")
            items.append(normalized)
        return tuple(items)
