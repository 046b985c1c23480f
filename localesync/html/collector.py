"""Ordered text-unit extraction from a document's content region.

Traversal is depth-first pre-order over the region's descendant elements;
within each element only its direct child text leaves are considered, in
document order. The resulting order is what translations are aligned to.
"""

from __future__ import annotations

from typing import Sequence

from bs4.element import NavigableString, PageElement, PreformattedString, Tag
import soupsieve

from ..models.datatypes import TextUnit
from ..text.normalizer import normalize_text


ALWAYS_EXCLUDED_TAGS = ("noscript", "script", "style")


def compile_selectors(selectors: Sequence[str]) -> tuple[soupsieve.SoupSieve, ...]:
    """Compile CSS selectors, raising `ValueError` for malformed ones."""

    compiled: list[soupsieve.SoupSieve] = []
    for selector in selectors:
        try:
            compiled.append(soupsieve.compile(selector))
        except soupsieve.SelectorSyntaxError as exc:
            raise ValueError(f"Invalid ignore selector `{selector}`: {exc}") from exc
    return tuple(compiled)


def _is_text_leaf(node: PageElement) -> bool:
    """Return whether a node is plain text (not a comment, CDATA, or doctype)."""

    return isinstance(node, NavigableString) and not isinstance(node, PreformattedString)


class TextUnitCollector:
    """Collect translatable text units, skipping ignored and non-rendered elements."""

    def __init__(self, ignore_selectors: Sequence[str] = ()) -> None:
        """Compile ignore selectors once per run."""

        self.ignore_selectors = tuple(ignore_selectors)
        self._compiled_selectors = compile_selectors(self.ignore_selectors)

    def collect(self, content: Tag) -> list[TextUnit]:
        """Return the ordered text units of a content region."""

        excluded = self._excluded_element_ids(content)
        units: list[TextUnit] = []
        for element in content.find_all(True):
            if id(element) in excluded:
                continue
            for child in element.children:
                if not _is_text_leaf(child):
                    continue
                original = str(child)
                normalized = normalize_text(original)
                if not normalized:
                    continue
                units.append(TextUnit(location=child, original=original, normalized=normalized))
        return units

    def _excluded_element_ids(self, content: Tag) -> set[int]:
        """Return identities of ignored elements and all of their descendants."""

        roots: list[Tag] = list(content.find_all(list(ALWAYS_EXCLUDED_TAGS)))
        for selector in self._compiled_selectors:
            roots.extend(selector.select(content))

        excluded: set[int] = set()
        for root in roots:
            excluded.add(id(root))
            excluded.update(id(descendant) for descendant in root.find_all(True))
        return excluded
