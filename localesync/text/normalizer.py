"""Text canonicalization for cache keys and glossary matching."""

from __future__ import annotations

from hashlib import sha1
import re


_WHITESPACE_RUN = re.compile(r"\s+")


def normalize_text(text: str) -> str:
    """Collapse whitespace runs (newlines included) to one space and trim."""

    return _WHITESPACE_RUN.sub(" ", text).strip()


def fingerprint(normalized_text: str, target_locale: str) -> str:
    """Return the cache/dedup key for normalized text in a target locale.

    The `text::locale` sha1 layout matches cache files written by earlier
    releases of the sync tool.
    """

    return sha1(f"{normalized_text}::{target_locale}".encode("utf-8")).hexdigest()
