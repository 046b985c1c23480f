"""Google web translation endpoint provider (batch-capable).

Batches are sent as one request whose texts are joined with a sentinel
separator; the response is split back on the same sentinel. A part-count
mismatch is reported as a `batch_mismatch` failure so callers can fall back
to one-shot requests.
"""

from __future__ import annotations

import re
from typing import Any, Sequence

from ...errors import ProviderError
from .base import HttpTranslationProvider


class GoogleWebProvider(HttpTranslationProvider):
    """Google `translate_a/single` endpoint client."""

    provider_id = "google"
    supports_batch = True

    DEFAULT_URL = "https://translate.googleapis.com/translate_a/single"
    BATCH_SEPARATOR = "<<<LSYNC_SEP_7F3A>>>"
    _SEPARATOR_SPLIT = re.compile(r"\s*" + re.escape(BATCH_SEPARATOR) + r"\s*")

    def translate_one(self, text: str, source_code: str, target_code: str) -> str:
        """Translate one text with rate limiting and retry."""

        return self._call(lambda: self._request_translation(text, source_code, target_code))

    def translate_many(
        self, texts: Sequence[str], source_code: str, target_code: str
    ) -> list[str]:
        """Translate all texts in one request, index-aligned with `texts`."""

        if not texts:
            return []
        joined = f"\n{self.BATCH_SEPARATOR}\n".join(texts)
        translated = self._call(
            lambda: self._request_translation(joined, source_code, target_code)
        )
        parts = self._SEPARATOR_SPLIT.split(translated)
        if len(parts) != len(texts):
            raise ProviderError(
                f"google batch returned {len(parts)} part(s) for {len(texts)} text(s).",
                failure_kind="batch_mismatch",
            )
        return parts

    def _request_translation(self, text: str, source_code: str, target_code: str) -> str:
        """Issue one endpoint request and extract the translated text."""

        payload = self._request_json(
            "GET",
            self.endpoint,
            params={
                "client": "gtx",
                "sl": source_code,
                "tl": target_code,
                "dt": "t",
                "q": text,
            },
        )
        return self._extract_translation(payload)

    @staticmethod
    def _extract_translation(payload: Any) -> str:
        """Join the translated segments of an endpoint response payload."""

        if not isinstance(payload, list) or not payload or not isinstance(payload[0], list):
            raise ProviderError(
                "google response missing translated segment list.",
                failure_kind="invalid_response",
            )
        segments: list[str] = []
        for segment in payload[0]:
            if isinstance(segment, list) and segment and isinstance(segment[0], str):
                segments.append(segment[0])
        return "".join(segments).strip()
