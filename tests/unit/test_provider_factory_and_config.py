"""Unit tests for runtime provider precedence and provider construction."""

from __future__ import annotations

from pathlib import Path

import pytest

from localesync.config import (
    ProviderRuntimeConfig,
    RuntimeConfigSources,
    SyncConfig,
)
from localesync.errors import PipelineStageError
from localesync.provider_factory import ProviderFactory
from localesync.translation.providers import (
    ArgosSubprocessProvider,
    GoogleWebProvider,
    LibreTranslateProvider,
    PapagoProvider,
)
from localesync.translation.rate_limiter import RateLimiter
from localesync.translation.retry import RetryPolicy


def _create(runtime: ProviderRuntimeConfig, argos_script: Path = Path("argos.py")):
    return ProviderFactory.create(
        runtime,
        rate_limiter=RateLimiter(0.0),
        retry_policy=RetryPolicy(max_retries=0),
        argos_script=argos_script,
    )


def test_runtime_precedence_is_cli_then_secure_then_env_then_default(tmp_path: Path) -> None:
    """Each key resolves independently through the precedence chain."""

    config = SyncConfig(root=tmp_path, provider="google", libre_url="http://default.local")
    sources = RuntimeConfigSources(
        cli={"provider": " PAPAGO "},
        secure={"papago_client_id": "secure-id"},
        env={
            "NCP_APIGW_API_KEY_ID": "env-id",
            "NCP_APIGW_API_KEY": "env-secret",
            "LOCALESYNC_GOOGLE_URL": "http://env-google.local",
        },
    )

    runtime = config.resolved_provider_runtime(sources)

    assert runtime.provider == "papago"
    assert runtime.papago_client_id == "secure-id"
    assert runtime.papago_client_secret == "env-secret"
    assert runtime.google_url == "http://env-google.local"
    assert runtime.libre_url == "http://default.local"


def test_runtime_env_falls_back_to_legacy_papago_variable_names(tmp_path: Path) -> None:
    """`PAPAGO_CLIENT_ID/SECRET` are read when the NCP names are unset or blank."""

    config = SyncConfig(root=tmp_path, provider="papago")
    sources = RuntimeConfigSources(
        env={
            "NCP_APIGW_API_KEY_ID": "  ",
            "PAPAGO_CLIENT_ID": "legacy-id",
            "PAPAGO_CLIENT_SECRET": "legacy-secret",
        }
    )

    runtime = config.resolved_provider_runtime(sources)

    assert runtime.papago_client_id == "legacy-id"
    assert runtime.papago_client_secret == "legacy-secret"


def test_runtime_uses_config_sources_when_none_passed(tmp_path: Path) -> None:
    """Sources injected on the config are used by default."""

    config = SyncConfig(
        root=tmp_path,
        runtime_sources=RuntimeConfigSources(env={"LOCALESYNC_PROVIDER": "argos"}),
    )

    assert config.resolved_provider_runtime().provider == "argos"


def test_runtime_rejects_unknown_provider_from_any_source(tmp_path: Path) -> None:
    """An unsupported provider id is a configuration error."""

    config = SyncConfig(root=tmp_path)

    with pytest.raises(ValueError, match="Unsupported `provider` value `deepl`"):
        config.resolved_provider_runtime(RuntimeConfigSources(cli={"provider": "deepl"}))


def test_factory_builds_google_with_default_or_overridden_endpoint() -> None:
    """Google needs no configuration beyond an optional endpoint override."""

    default = _create(ProviderRuntimeConfig(provider="google"))
    custom = _create(ProviderRuntimeConfig(provider="google", google_url="http://proxy.local/"))

    assert isinstance(default, GoogleWebProvider)
    assert default.endpoint == GoogleWebProvider.DEFAULT_URL
    assert custom.endpoint == "http://proxy.local"


def test_factory_requires_papago_credentials() -> None:
    """Missing Papago credentials fail the `credentials` stage with a setup hint."""

    with pytest.raises(PipelineStageError) as exc_info:
        _create(ProviderRuntimeConfig(provider="papago", papago_client_id="id"))

    assert exc_info.value.stage == "credentials"
    assert exc_info.value.hint is not None
    assert "localesync credentials --set-papago" in exc_info.value.hint


def test_factory_builds_papago_with_credentials() -> None:
    """Complete credentials produce a Papago provider."""

    provider = _create(
        ProviderRuntimeConfig(
            provider="papago", papago_client_id="id", papago_client_secret="secret"
        )
    )

    assert isinstance(provider, PapagoProvider)
    assert provider.language_code("chn") == "zh-CN"


def test_factory_requires_libre_url() -> None:
    """LibreTranslate is self-hosted and has no default server."""

    with pytest.raises(PipelineStageError) as exc_info:
        _create(ProviderRuntimeConfig(provider="libre"))

    assert exc_info.value.stage == "config"


def test_factory_uses_bare_codes_for_libre_and_argos(tmp_path: Path) -> None:
    """Libre and Argos take `zh` rather than `zh-CN` for Chinese."""

    libre = _create(ProviderRuntimeConfig(provider="libre", libre_url="http://libre.local"))
    argos = _create(ProviderRuntimeConfig(provider="argos"), argos_script=tmp_path / "a.py")

    assert isinstance(libre, LibreTranslateProvider)
    assert isinstance(argos, ArgosSubprocessProvider)
    assert libre.language_code("chn") == "zh"
    assert argos.language_code("chn") == "zh"
    assert argos.script_path == tmp_path / "a.py"


def test_factory_rejects_unknown_provider() -> None:
    """Unknown ids that bypassed config validation still fail deterministically."""

    with pytest.raises(PipelineStageError) as exc_info:
        _create(ProviderRuntimeConfig(provider="deepl"))

    assert exc_info.value.stage == "config"
