"""Papago NMT provider (credentialed, one-shot only)."""

from __future__ import annotations

from typing import Any

from ...errors import ProviderError
from ...locales import LocaleCodeTable
from ..rate_limiter import RateLimiter
from ..retry import RetryPolicy
from .base import HttpTranslationProvider


class PapagoProvider(HttpTranslationProvider):
    """Naver Cloud Papago translation API client."""

    provider_id = "papago"

    DEFAULT_URL = "https://naveropenapi.apigw.ntruss.com/nmt/v1/translation"

    def __init__(
        self,
        *,
        client_id: str,
        client_secret: str,
        endpoint: str = DEFAULT_URL,
        rate_limiter: RateLimiter | None = None,
        retry_policy: RetryPolicy | None = None,
        codes: LocaleCodeTable | None = None,
        timeout_seconds: float = 30.0,
    ) -> None:
        """Initialize credentials; both the key id and the key are required."""

        if not client_id.strip() or not client_secret.strip():
            raise ValueError("Papago requires both an API key id and an API key.")
        super().__init__(
            endpoint=endpoint,
            rate_limiter=rate_limiter,
            retry_policy=retry_policy,
            codes=codes,
            timeout_seconds=timeout_seconds,
        )
        self._client_id = client_id.strip()
        self._client_secret = client_secret.strip()

    def translate_one(self, text: str, source_code: str, target_code: str) -> str:
        """Translate one text with rate limiting and retry."""

        return self._call(lambda: self._request_translation(text, source_code, target_code))

    def _request_translation(self, text: str, source_code: str, target_code: str) -> str:
        """Issue one form-encoded request and extract the translated text."""

        payload = self._request_json(
            "POST",
            self.endpoint,
            headers={
                "Content-Type": "application/x-www-form-urlencoded; charset=UTF-8",
                "X-NCP-APIGW-API-KEY-ID": self._client_id,
                "X-NCP-APIGW-API-KEY": self._client_secret,
            },
            data={"source": source_code, "target": target_code, "text": text},
        )
        return self._extract_translation(payload)

    @staticmethod
    def _extract_translation(payload: Any) -> str:
        """Read `message.result.translatedText` from a response payload."""

        try:
            translated = payload["message"]["result"]["translatedText"]
        except (KeyError, TypeError) as exc:
            raise ProviderError(
                "papago response missing `message.result.translatedText`.",
                failure_kind="invalid_response",
            ) from exc
        if not isinstance(translated, str):
            raise ProviderError(
                "papago `translatedText` is not a string.",
                failure_kind="invalid_response",
            )
        return translated.strip()
