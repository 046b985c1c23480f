"""Provider factory for translation backends.

Responsibilities:
- Resolve a provider identifier to a concrete backend once per run.
- Wire the shared rate limiter, retry policy, and locale-code table into it.
- Keep orchestration independent from concrete provider class construction.
"""

from __future__ import annotations

from pathlib import Path

from .config import ProviderRuntimeConfig
from .errors import PipelineStageError
from .locales import BARE_LANGUAGE_OVERRIDES, LocaleCodeTable
from .translation.providers import (
    ArgosSubprocessProvider,
    GoogleWebProvider,
    LibreTranslateProvider,
    PapagoProvider,
    TranslationProvider,
)
from .translation.rate_limiter import RateLimiter
from .translation.retry import RetryPolicy


class ProviderFactory:
    """Factory for the translation provider used by the pipeline."""

    @staticmethod
    def create(
        runtime: ProviderRuntimeConfig,
        *,
        rate_limiter: RateLimiter,
        retry_policy: RetryPolicy,
        argos_script: Path,
    ) -> TranslationProvider:
        """Create a provider for a resolved runtime configuration.

        Raises:
            PipelineStageError: When the provider is unknown or misconfigured.
        """

        provider_id = runtime.provider
        if provider_id == "google":
            return GoogleWebProvider(
                endpoint=runtime.google_url or GoogleWebProvider.DEFAULT_URL,
                rate_limiter=rate_limiter,
                retry_policy=retry_policy,
            )

        if provider_id == "papago":
            if not runtime.papago_client_id or not runtime.papago_client_secret:
                raise PipelineStageError(
                    stage="credentials",
                    detail="Papago API credentials are missing.",
                    hint=(
                        "Run `localesync credentials --set-papago`, or set "
                        "NCP_APIGW_API_KEY_ID and NCP_APIGW_API_KEY."
                    ),
                )
            return PapagoProvider(
                client_id=runtime.papago_client_id,
                client_secret=runtime.papago_client_secret,
                endpoint=runtime.papago_url or PapagoProvider.DEFAULT_URL,
                rate_limiter=rate_limiter,
                retry_policy=retry_policy,
            )

        if provider_id == "libre":
            if not runtime.libre_url:
                raise PipelineStageError(
                    stage="config",
                    detail="The `libre` provider requires a LibreTranslate server URL.",
                    hint="Pass `--libre-url` or set LOCALESYNC_LIBRE_URL.",
                )
            return LibreTranslateProvider(
                endpoint=runtime.libre_url,
                rate_limiter=rate_limiter,
                retry_policy=retry_policy,
                codes=LocaleCodeTable(overrides=BARE_LANGUAGE_OVERRIDES),
            )

        if provider_id == "argos":
            return ArgosSubprocessProvider(
                script_path=argos_script,
                rate_limiter=rate_limiter,
                codes=LocaleCodeTable(overrides=BARE_LANGUAGE_OVERRIDES),
            )

        raise PipelineStageError(
            stage="config",
            detail=f"Unsupported translation provider `{provider_id}`.",
            hint="Use one of: argos, google, libre, papago.",
        )
