"""Source document discovery.

Responsibilities:
- Expand the scope glob `<root>/<source>/<scope>/**/*.html`, or explicit
  `--files` paths/globs, into a sorted, de-duplicated document list.
- Fail the run with a `discover` stage error when nothing matches.
"""

from __future__ import annotations

import glob
from pathlib import Path
from typing import Sequence

from ..errors import PipelineStageError


def scope_pattern(root: Path, source_locale: str, scope: str) -> str:
    """Return the default recursive glob for a source locale scope."""

    return str(root / source_locale / scope / "**" / "*.html")


def expand_file_patterns(root: Path, patterns: Sequence[str]) -> list[str]:
    """Anchor relative `--files` entries at `root`."""

    return [
        pattern if Path(pattern).is_absolute() else str(root / pattern)
        for pattern in patterns
    ]


def discover_source_documents(
    root: Path,
    source_locale: str,
    scope: str,
    files: Sequence[str] = (),
) -> list[Path]:
    """Return source documents to synchronize, sorted by path.

    Raises:
        PipelineStageError: When no document matches.
    """

    patterns = expand_file_patterns(root, files) if files else [
        scope_pattern(root, source_locale, scope)
    ]
    matches: set[Path] = set()
    for pattern in patterns:
        for match in glob.glob(pattern, recursive=True):
            path = Path(match)
            if path.is_file():
                matches.add(path.resolve())

    if not matches:
        raise PipelineStageError(
            stage="discover",
            detail=f"No source documents match: {', '.join(patterns)}",
            hint="Check `--root`, `--from`, `--scope`, or the `--files` patterns.",
        )
    return sorted(matches)
