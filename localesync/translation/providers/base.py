"""Translation provider capability and shared HTTP plumbing.

Responsibilities:
- Define the provider capability set (`translate_one`, optional `translate_many`).
- Normalize vendor failures into `ProviderError` with a retry classification.
- Share request/response handling, rate limiting, and retry across HTTP vendors.

Key types:
- `ProviderError` (re-exported): normalized failure with `failure_kind` metadata.
- `TranslationProvider`: protocol for translation backends.
- `ProviderBase`: abstract base holding the shared rate limiter and code table.
- `HttpTranslationProvider`: requests-based base class for HTTP vendors.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
import json
import re
import socket
from typing import Any, Callable, Protocol, Sequence, TypeVar

import requests

from ...errors import ProviderError
from ...locales import LocaleCodeTable
from ..rate_limiter import RateLimiter
from ..retry import RetryPolicy

_CallResult = TypeVar("_CallResult")


class TranslationProvider(Protocol):
    """Protocol for translation providers."""

    provider_id: str
    supports_batch: bool

    def language_code(self, locale: str) -> str:
        """Return this vendor's code for an internal locale tag."""

    def translate_one(self, text: str, source_code: str, target_code: str) -> str:
        """Translate one text."""

    def translate_many(
        self, texts: Sequence[str], source_code: str, target_code: str
    ) -> list[str]:
        """Translate several texts in one call, index-aligned with `texts`."""

    @property
    def retry_attempt_count(self) -> int:
        """Return retry attempts performed by this provider."""


class ProviderBase(ABC):
    """Shared state for concrete providers.

    Subclasses implement `translate_one`; batch-capable subclasses set
    `supports_batch` and override `translate_many`.
    """

    provider_id = "base"
    supports_batch = False

    def __init__(
        self,
        *,
        rate_limiter: RateLimiter | None = None,
        codes: LocaleCodeTable | None = None,
    ) -> None:
        """Initialize the shared rate limiter and vendor locale-code table."""

        self.rate_limiter = rate_limiter if rate_limiter is not None else RateLimiter(0.0)
        self.codes = codes if codes is not None else LocaleCodeTable()

    def language_code(self, locale: str) -> str:
        """Return this vendor's code for an internal locale tag."""

        return self.codes.code_for(locale)

    @abstractmethod
    def translate_one(self, text: str, source_code: str, target_code: str) -> str:
        """Translate one text."""

    def translate_many(
        self, texts: Sequence[str], source_code: str, target_code: str
    ) -> list[str]:
        """Translate several texts in one call, index-aligned with `texts`."""

        raise NotImplementedError(
            f"Provider `{self.provider_id}` does not support batch translation."
        )

    @property
    def retry_attempt_count(self) -> int:
        """Return retry attempts performed by this provider."""

        return 0


class HttpTranslationProvider(ProviderBase):
    """Shared requests-based plumbing for HTTP translation vendors."""

    _MAX_PROVIDER_MESSAGE_CHARS = 180

    def __init__(
        self,
        *,
        endpoint: str,
        rate_limiter: RateLimiter | None = None,
        retry_policy: RetryPolicy | None = None,
        codes: LocaleCodeTable | None = None,
        timeout_seconds: float = 30.0,
    ) -> None:
        """Initialize endpoint, pacing, retry, and timeout settings."""

        super().__init__(rate_limiter=rate_limiter, codes=codes)
        self.endpoint = endpoint.rstrip("/")
        self.retry_policy = retry_policy if retry_policy is not None else RetryPolicy()
        self.timeout_seconds = timeout_seconds

    @property
    def retry_attempt_count(self) -> int:
        """Return retry attempts performed by the shared retry policy."""

        return self.retry_policy.retry_attempt_count

    def _call(self, action: Callable[[], _CallResult]) -> _CallResult:
        """Run one outbound call under the rate limiter and retry policy."""

        def _attempt() -> _CallResult:
            self.rate_limiter.acquire()
            return action()

        return self.retry_policy.run(_attempt, label=self.provider_id)

    def _request_json(self, method: str, url: str, **kwargs: Any) -> Any:
        """Execute one HTTP request and decode its JSON body, mapping failures."""

        try:
            response = requests.request(method, url, timeout=self.timeout_seconds, **kwargs)
            response.raise_for_status()
            raw_body = bytes(response.content)
        except requests.HTTPError as exc:
            raise self._http_error_to_provider_error(exc) from exc
        except requests.RequestException as exc:
            failure_kind = self._classify_transport_failure(exc)
            raise ProviderError(
                f"{self.provider_id} request transport error: "
                f"{self._short_message(str(exc))}",
                failure_kind=failure_kind,
            ) from exc
        except TimeoutError as exc:
            raise ProviderError(
                f"{self.provider_id} request timed out.",
                failure_kind="transient",
            ) from exc

        try:
            return json.loads(raw_body.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise ProviderError(
                f"{self.provider_id} returned invalid JSON payload.",
                failure_kind="invalid_response",
            ) from exc

    @staticmethod
    def _decode_error_body(exc: requests.HTTPError) -> str:
        """Decode an HTTP error body into a best-effort UTF-8 payload string."""

        response = exc.response
        if response is None:
            return ""
        try:
            return bytes(response.content).decode("utf-8", errors="replace").strip()
        except (TypeError, AttributeError):
            return ""

    @classmethod
    def _redact_sensitive_tokens(cls, text: str) -> str:
        """Redact credential-like tokens from provider error content."""

        return re.sub(
            r"(?i)(api[-_]?key[-_a-z]*[\"':= ]+)[A-Za-z0-9._-]{8,}",
            r"\1[redacted]",
            text,
        )

    @classmethod
    def _short_message(cls, text: str) -> str:
        """Normalize and cap user-facing provider message length."""

        compact = " ".join(text.split())
        if len(compact) <= cls._MAX_PROVIDER_MESSAGE_CHARS:
            return compact
        return f"{compact[: cls._MAX_PROVIDER_MESSAGE_CHARS - 1]}..."

    @staticmethod
    def _classify_http_failure(status_code: int, provider_message: str) -> str:
        """Classify HTTP errors into retryable and terminal failure kinds."""

        message_lower = provider_message.lower()
        if (
            status_code == 429
            or "too many requests" in message_lower
            or "quota" in message_lower
            or "rate limit" in message_lower
        ):
            return "rate_limited"
        if status_code in {401, 403}:
            return "invalid_credentials"
        if status_code in {408, 500, 502, 503, 504}:
            return "transient"
        return "http_error"

    @staticmethod
    def _classify_transport_failure(reason: object) -> str:
        """Classify network-layer failures; timeouts and dropped connections are transient."""

        if isinstance(
            reason,
            TimeoutError | socket.timeout | requests.Timeout | requests.ConnectionError,
        ):
            return "transient"
        return "transport"

    def _http_error_to_provider_error(self, exc: requests.HTTPError) -> ProviderError:
        """Convert HTTP errors into normalized provider exceptions with metadata."""

        status_code = exc.response.status_code if exc.response is not None else 0
        body = self._short_message(self._redact_sensitive_tokens(self._decode_error_body(exc)))
        failure_kind = self._classify_http_failure(status_code, body)
        if body:
            detail = f"{self.provider_id} request failed (HTTP {status_code}): {body}"
        else:
            detail = f"{self.provider_id} request failed (HTTP {status_code})."
        return ProviderError(detail, failure_kind=failure_kind, status_code=status_code)
