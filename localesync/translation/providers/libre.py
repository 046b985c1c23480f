"""Self-hosted LibreTranslate provider (one-shot only)."""

from __future__ import annotations

from typing import Any

from ...errors import ProviderError
from .base import HttpTranslationProvider


class LibreTranslateProvider(HttpTranslationProvider):
    """LibreTranslate `/translate` endpoint client."""

    provider_id = "libre"

    def translate_one(self, text: str, source_code: str, target_code: str) -> str:
        """Translate one text with rate limiting and retry."""

        return self._call(lambda: self._request_translation(text, source_code, target_code))

    def _request_translation(self, text: str, source_code: str, target_code: str) -> str:
        """Issue one JSON request against `<endpoint>/translate`."""

        payload = self._request_json(
            "POST",
            f"{self.endpoint}/translate",
            json={
                "q": text,
                "source": source_code,
                "target": target_code,
                "format": "text",
            },
        )
        return self._extract_translation(payload)

    @staticmethod
    def _extract_translation(payload: Any) -> str:
        """Read `translatedText` from a response payload."""

        if not isinstance(payload, dict):
            raise ProviderError(
                "libre response is not a JSON object.",
                failure_kind="invalid_response",
            )
        translated = payload.get("translatedText")
        if not isinstance(translated, str):
            raise ProviderError(
                "libre response missing `translatedText`.",
                failure_kind="invalid_response",
            )
        return translated.strip()
