"""Translation components: cache, pacing, retry, providers, and batching."""

from .batch import BatchTranslator
from .cache import LocaleCache, TranslationCacheStore
from .rate_limiter import RateLimiter
from .retry import RetryPolicy

__all__ = [
    "BatchTranslator",
    "LocaleCache",
    "RateLimiter",
    "RetryPolicy",
    "TranslationCacheStore",
]
