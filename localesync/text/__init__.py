"""Text normalization and translation post-processing."""

from .filters import Glossary, PhraseBlacklist, load_glossary_csv
from .normalizer import fingerprint, normalize_text

__all__ = ["Glossary", "PhraseBlacklist", "fingerprint", "load_glossary_csv", "normalize_text"]
