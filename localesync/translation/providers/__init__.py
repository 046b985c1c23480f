"""Translation provider variants.

Batch-capable: `google`. One-shot only: `argos`, `papago`, `libre`.
"""

from .argos import ArgosSubprocessProvider
from .base import (
    HttpTranslationProvider,
    ProviderBase,
    ProviderError,
    TranslationProvider,
)
from .google import GoogleWebProvider
from .libre import LibreTranslateProvider
from .papago import PapagoProvider

__all__ = [
    "ArgosSubprocessProvider",
    "GoogleWebProvider",
    "HttpTranslationProvider",
    "LibreTranslateProvider",
    "PapagoProvider",
    "ProviderBase",
    "ProviderError",
    "TranslationProvider",
]
