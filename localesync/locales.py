"""Locale tag tables shared by providers and the document merger.

Locale tags (`kor`, `chn`, `vtn`, `eng`) double as directory segments in the
document tree. Vendors accept different ISO codes for the same region, so the
mapping is table-driven with per-vendor overrides.

Key types:
- `LocaleCodeTable`: tag-to-code lookup with pass-through for unknown tags.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Mapping


DEFAULT_ISO_CODES: Mapping[str, str] = {
    "kor": "ko",
    "ko": "ko",
    "ko-KR": "ko",
    "chn": "zh-CN",
    "zh": "zh-CN",
    "zh-CN": "zh-CN",
    "vtn": "vi",
    "vi": "vi",
    "vi-VN": "vi",
    "eng": "en",
    "en": "en",
    "en-US": "en",
}

# Argos and LibreTranslate only accept the bare language code for Chinese.
BARE_LANGUAGE_OVERRIDES: Mapping[str, str] = {
    "chn": "zh",
    "zh": "zh",
    "zh-CN": "zh",
}

HTML_LANG_ATTRIBUTES: Mapping[str, str] = {
    "kor": "ko",
    "chn": "zh",
    "vtn": "vi",
    "eng": "en",
}

KNOWN_LOCALE_MARKERS: tuple[str, ...] = ("kor", "chn", "vtn", "eng")


@dataclass(frozen=True, slots=True)
class LocaleCodeTable:
    """Map internal locale tags to the codes a vendor accepts.

    Attributes:
        base: Default tag-to-code mapping.
        overrides: Vendor-specific entries that win over `base`.
    """

    base: Mapping[str, str] = field(default_factory=lambda: dict(DEFAULT_ISO_CODES))
    overrides: Mapping[str, str] = field(default_factory=dict)

    def code_for(self, locale: str) -> str:
        """Return the vendor code for a locale tag, passing unknown tags through."""

        tag = locale.strip()
        if tag in self.overrides:
            return self.overrides[tag]
        return self.base.get(tag, tag)


def path_prefix_for(locale: str) -> str:
    """Return the URL path prefix used by internal links of a locale tree."""

    return f"/{locale.strip()}/"


def html_lang_for(locale: str) -> str:
    """Return the `<html lang>` value for a locale tag."""

    tag = locale.strip()
    return HTML_LANG_ATTRIBUTES.get(tag, tag)
