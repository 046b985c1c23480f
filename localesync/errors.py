"""Domain exceptions for pipeline and CLI diagnostics."""

from __future__ import annotations


class PipelineStageError(RuntimeError):
    """Raised when a specific pipeline stage fails."""

    def __init__(
        self,
        *,
        stage: str,
        detail: str,
        hint: str | None = None,
    ) -> None:
        """Initialize a stage-scoped pipeline error."""

        super().__init__(detail)
        self.stage = stage
        self.detail = detail
        self.hint = hint


class ProviderError(RuntimeError):
    """Raised when a translation provider call fails or returns malformed output."""

    RETRYABLE_KINDS = frozenset({"rate_limited", "transient"})

    def __init__(
        self,
        message: str,
        *,
        failure_kind: str = "unknown",
        status_code: int | None = None,
    ) -> None:
        """Initialize provider error metadata for retry decisions and diagnostics."""

        super().__init__(message)
        self.failure_kind = failure_kind
        self.status_code = status_code

    @property
    def retryable(self) -> bool:
        """Return whether the failure is a rate-limit or transient signal."""

        return self.failure_kind in self.RETRYABLE_KINDS
