"""Structure-preserving merge of translated text into target documents.

Responsibilities:
- Write translations back into their units' locations in the source region.
- Rewrite internal link paths from the source locale tree to the target tree.
- Replace the target document's content region with the translated markup.
- Update locale metadata (`<body>` marker class and `<html lang>`).
"""

from __future__ import annotations

from typing import Callable, Iterable, Sequence

from bs4 import BeautifulSoup
from bs4.element import NavigableString, Tag

from ..locales import KNOWN_LOCALE_MARKERS, html_lang_for, path_prefix_for
from ..models.datatypes import TextUnit
from .documents import CONTENT_REGION_ID, find_content_region, parse_html, serialize_inner


class DocumentMerger:
    """Merge one translated source content region into a target document."""

    def __init__(
        self,
        *,
        source_locale: str,
        known_markers: Iterable[str] = KNOWN_LOCALE_MARKERS,
        prefix_for: Callable[[str], str] = path_prefix_for,
    ) -> None:
        """Initialize locale marker set and link prefix mapping."""

        self.source_locale = source_locale
        self.known_markers = frozenset(known_markers) | {source_locale}
        self.prefix_for = prefix_for

    def merge(
        self,
        content: Tag,
        units: Sequence[TextUnit],
        translated: Sequence[str],
        target_document: BeautifulSoup,
        target_locale: str,
    ) -> str:
        """Run every merge step and return the spliced inner markup."""

        self.apply_translations(units, translated)
        self.rewrite_links(content, target_locale)
        inner_markup = serialize_inner(content)
        self.splice_content(target_document, inner_markup)
        self.update_locale_metadata(target_document, target_locale)
        return inner_markup

    @staticmethod
    def apply_translations(units: Sequence[TextUnit], translated: Sequence[str]) -> None:
        """Write translation `i` into unit `i`'s text leaf."""

        if len(units) != len(translated):
            raise ValueError(
                f"Got {len(translated)} translation(s) for {len(units)} text unit(s)."
            )
        for unit, text in zip(units, translated):
            unit.location.replace_with(NavigableString(text))

    def rewrite_links(self, content: Tag, target_locale: str) -> int:
        """Point `href`s under the source locale prefix at the target locale.

        Returns:
            Number of rewritten attributes.
        """

        source_prefix = self.prefix_for(self.source_locale)
        target_prefix = self.prefix_for(target_locale)
        rewritten = 0
        for element in content.find_all(href=True):
            href = element.get("href")
            if isinstance(href, str) and href.startswith(source_prefix):
                element["href"] = target_prefix + href[len(source_prefix) :]
                rewritten += 1
        return rewritten

    @staticmethod
    def splice_content(target_document: BeautifulSoup, inner_markup: str) -> Tag:
        """Replace the target content region's children, creating the region if absent."""

        region = find_content_region(target_document)
        if region is None:
            region = target_document.new_tag("div", attrs={"id": CONTENT_REGION_ID})
            container = target_document.body if target_document.body is not None else target_document
            container.append(region)
        region.clear()
        fragment = parse_html(inner_markup)
        for node in list(fragment.contents):
            region.append(node.extract())
        return region

    def update_locale_metadata(self, target_document: BeautifulSoup, target_locale: str) -> None:
        """Swap the `<body>` locale marker class and set `<html lang>`."""

        markers = self.known_markers | {target_locale}
        body = target_document.body
        if body is not None:
            classes = [
                name
                for name in (body.get("class") or [])
                if name and name not in markers
            ]
            classes.append(target_locale)
            body["class"] = classes

        html = target_document.find("html")
        if isinstance(html, Tag):
            html["lang"] = html_lang_for(target_locale)
