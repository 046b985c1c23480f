"""Deterministic post-processing of provider output.

Responsibilities:
- Apply forced glossary substitutions in list order (sequential, not simultaneous).
- Strip blacklisted phrases after glossary substitution.
- Load per-locale glossary CSV files.

Key types:
- `Glossary`: ordered, precompiled whole-word term substitutions.
- `PhraseBlacklist`: ordered, precompiled case-insensitive phrase removals.
"""

from __future__ import annotations

import csv
from dataclasses import dataclass, field
from pathlib import Path
import re
from typing import Iterable


@dataclass(frozen=True, slots=True)
class GlossaryEntry:
    """One forced substitution pair.

    Attributes:
        source: Term as it appears in provider output.
        target: Replacement term.
    """

    source: str
    target: str


def _whole_word_pattern(term: str) -> re.Pattern[str]:
    """Compile a literal, case-sensitive, whole-word pattern for one term."""

    return re.compile(rf"(?<!\w){re.escape(term)}(?!\w)")


@dataclass(frozen=True, slots=True)
class Glossary:
    """Ordered glossary; later entries see the output of earlier substitutions."""

    entries: tuple[GlossaryEntry, ...] = ()
    _patterns: tuple[re.Pattern[str], ...] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(
            self,
            "_patterns",
            tuple(_whole_word_pattern(entry.source) for entry in self.entries),
        )

    @classmethod
    def from_pairs(cls, pairs: Iterable[tuple[str, str]]) -> Glossary:
        """Build a glossary from `(source, target)` pairs, keeping order."""

        return cls(tuple(GlossaryEntry(source=source, target=target) for source, target in pairs))

    def apply(self, text: str) -> str:
        """Apply every substitution in list order."""

        output = text
        for entry, pattern in zip(self.entries, self._patterns):
            # Callable replacement keeps backslashes in target terms literal.
            output = pattern.sub(lambda _match, value=entry.target: value, output)
        return output

    def __len__(self) -> int:
        return len(self.entries)


@dataclass(frozen=True, slots=True)
class PhraseBlacklist:
    """Ordered phrases removed case-insensitively from translated output."""

    phrases: tuple[str, ...] = ()
    _patterns: tuple[re.Pattern[str], ...] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        for phrase in self.phrases:
            if not phrase.strip():
                raise ValueError("Blacklist phrases must be non-empty strings.")
        object.__setattr__(
            self,
            "_patterns",
            tuple(re.compile(re.escape(phrase), re.IGNORECASE) for phrase in self.phrases),
        )

    def apply(self, text: str) -> str:
        """Remove each phrase in list order, trimming after every removal."""

        output = text
        for pattern in self._patterns:
            output = pattern.sub("", output).strip()
        return output


def load_glossary_csv(path: Path) -> Glossary:
    """Load a two-column `source,target` glossary file.

    Missing files yield an empty glossary. Blank lines, `#` comment lines, and
    rows missing either column are ignored.
    """

    if not path.exists():
        return Glossary()

    pairs: list[tuple[str, str]] = []
    for raw_line in path.read_text(encoding="utf-8").splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        row = next(csv.reader([line]))
        if len(row) < 2:
            continue
        source = row[0].strip()
        target = row[1].strip()
        if source and target:
            pairs.append((source, target))
    return Glossary.from_pairs(pairs)
