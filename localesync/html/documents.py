"""HTML document loading, persistence, and target-path resolution.

Responsibilities:
- Parse documents with BeautifulSoup and locate the `#content` region.
- Serialize documents without rewriting void elements or non-ASCII text.
- Write merged targets back over their original markup, changing only the
  content region and the locale attributes of `<html>` and `<body>`.
- Derive target-locale paths from source paths.
- Bootstrap missing target documents from an explicit, sorted template policy.

Key types:
- `MarkupLayout`: raw-markup offsets of the tags a merge may change.
- `TemplateBootstrapper`: creates a missing target document skeleton.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from html.parser import HTMLParser
from pathlib import Path
import shutil

from bs4 import BeautifulSoup
from bs4.dammit import EntitySubstitution
from bs4.element import Tag
from bs4.formatter import HTMLFormatter


CONTENT_REGION_ID = "content"

OUTPUT_FORMATTER = HTMLFormatter(
    entity_substitution=EntitySubstitution.substitute_xml,
    void_element_close_prefix=None,
)


def parse_html(markup: str) -> BeautifulSoup:
    """Parse markup with the standard-library-backed parser."""

    return BeautifulSoup(markup, "html.parser")


def read_markup(path: Path) -> str:
    """Read one UTF-8 HTML document as text."""

    return path.read_text(encoding="utf-8")


def find_content_region(document: BeautifulSoup) -> Tag | None:
    """Return the document's content region element, if present."""

    region = document.find(id=CONTENT_REGION_ID)
    return region if isinstance(region, Tag) else None


def serialize_document(document: BeautifulSoup) -> str:
    """Serialize a full document."""

    return document.decode(formatter=OUTPUT_FORMATTER)


def serialize_inner(element: Tag) -> str:
    """Serialize an element's children without the element's own tags."""

    return element.decode_contents(formatter=OUTPUT_FORMATTER)


@dataclass(slots=True)
class MarkupLayout:
    """Character offsets, in raw markup, of the tags a merge may change."""

    html_tag: tuple[int, int] | None = None
    html_attrs: dict[str, str] = field(default_factory=dict)
    body_tag: tuple[int, int] | None = None
    body_attrs: dict[str, str] = field(default_factory=dict)
    body_end: int | None = None
    region_found: bool = False
    region_inner: tuple[int, int] | None = None


class _LayoutScanner(HTMLParser):
    """Record tag offsets while walking raw markup with `html.parser`."""

    def __init__(self, markup: str, region_id: str) -> None:
        super().__init__(convert_charrefs=False)
        self.layout = MarkupLayout()
        self._region_id = region_id
        self._region_name: str | None = None
        self._region_depth = 0
        self._region_start = 0
        self._line_starts = [0]
        self._line_starts.extend(
            index + 1 for index, character in enumerate(markup) if character == "\n"
        )

    def _offset(self) -> int:
        line, column = self.getpos()
        return self._line_starts[line - 1] + column

    def _record_document_tag(
        self, tag: str, attrs: list[tuple[str, str | None]]
    ) -> tuple[int, int]:
        start = self._offset()
        span = (start, start + len(self.get_starttag_text() or ""))
        if tag == "html" and self.layout.html_tag is None:
            self.layout.html_tag = span
            self.layout.html_attrs = _raw_attribute_text(attrs)
        elif tag == "body" and self.layout.body_tag is None:
            self.layout.body_tag = span
            self.layout.body_attrs = _raw_attribute_text(attrs)
        return span

    def handle_starttag(self, tag: str, attrs: list[tuple[str, str | None]]) -> None:
        _, end = self._record_document_tag(tag, attrs)
        if not self.layout.region_found and dict(attrs).get("id") == self._region_id:
            self.layout.region_found = True
            self._region_name = tag
            self._region_depth = 1
            self._region_start = end
        elif self._region_name == tag and self.layout.region_inner is None:
            self._region_depth += 1

    def handle_startendtag(self, tag: str, attrs: list[tuple[str, str | None]]) -> None:
        self._record_document_tag(tag, attrs)
        if not self.layout.region_found and dict(attrs).get("id") == self._region_id:
            # Self-closed region has no inner span to replace.
            self.layout.region_found = True

    def handle_endtag(self, tag: str) -> None:
        position = self._offset()
        if tag == "body" and self.layout.body_end is None:
            self.layout.body_end = position
        if self._region_name == tag and self.layout.region_inner is None:
            self._region_depth -= 1
            if self._region_depth == 0:
                self.layout.region_inner = (self._region_start, position)


def scan_layout(markup: str, region_id: str = CONTENT_REGION_ID) -> MarkupLayout:
    """Locate the `<html>`/`<body>` start tags and the content region in raw markup."""

    scanner = _LayoutScanner(markup, region_id)
    scanner.feed(markup)
    scanner.close()
    return scanner.layout


def _raw_attribute_text(attrs: list[tuple[str, str | None]]) -> dict[str, str]:
    values: dict[str, str] = {}
    for name, value in attrs:
        text = value or ""
        values[name] = " ".join(text.split()) if name == "class" else text
    return values


def _tag_attribute_text(tag: Tag) -> dict[str, str]:
    return {
        name: " ".join(value) if isinstance(value, list) else str(value)
        for name, value in tag.attrs.items()
    }


def _render_start_tag(tag: Tag) -> str:
    shell = BeautifulSoup("", "html.parser").new_tag(tag.name, attrs=_tag_attribute_text(tag))
    rendered = shell.decode(formatter=OUTPUT_FORMATTER)
    return rendered[: rendered.rindex("</")]


def render_document(document: BeautifulSoup, original_markup: str | None = None) -> str:
    """Render a merged document, keeping original bytes outside the merged parts.

    With `original_markup`, only the content region's inner markup and any
    changed `<html>`/`<body>` start tag are rewritten; everything else is
    copied through unchanged. A region the raw scan cannot delimit (never
    closed, or self-closed) falls back to full serialization.
    """

    region = find_content_region(document)
    if original_markup is None or region is None:
        return serialize_document(document)

    layout = scan_layout(original_markup)
    edits: list[tuple[int, int, str]] = []
    if layout.region_inner is not None:
        edits.append((*layout.region_inner, serialize_inner(region)))
    elif layout.region_found:
        return serialize_document(document)
    else:
        insert_at = layout.body_end if layout.body_end is not None else len(original_markup)
        edits.append((insert_at, insert_at, region.decode(formatter=OUTPUT_FORMATTER)))

    for tag, span, raw_attrs in (
        (document.find("html"), layout.html_tag, layout.html_attrs),
        (document.body, layout.body_tag, layout.body_attrs),
    ):
        if isinstance(tag, Tag) and span is not None and _tag_attribute_text(tag) != raw_attrs:
            edits.append((*span, _render_start_tag(tag)))

    patched = original_markup
    for start, end, replacement in sorted(edits, key=lambda edit: edit[0], reverse=True):
        patched = patched[:start] + replacement + patched[end:]
    return patched


def save_document(
    path: Path, document: BeautifulSoup, original_markup: str | None = None
) -> Path:
    """Write a document as UTF-8, replacing any existing file."""

    path.write_text(render_document(document, original_markup), encoding="utf-8")
    return path


def target_path_for(
    source_path: Path,
    source_locale: str,
    target_locale: str,
    root: Path | None = None,
) -> Path:
    """Swap the first `source_locale` directory segment for `target_locale`.

    When `root` contains `source_path`, only segments below `root` are
    considered, so a project living under a directory named like a locale is
    left alone.

    Raises:
        ValueError: If no directory segment equals `source_locale`.
    """

    parts = source_path.parts
    start = 0
    if root is not None and source_path.is_relative_to(root):
        start = len(root.parts)
    for index in range(start, len(parts) - 1):
        if parts[index] == source_locale:
            return Path(*parts[:index], target_locale, *parts[index + 1 :])
    raise ValueError(
        f"Source document `{source_path}` has no `{source_locale}` directory segment."
    )


class TemplateBootstrapper:
    """Create missing target documents so header/footer/navigation are inherited.

    Policy, in order:
    1. `existing`: the target already exists and is used as is.
    2. `sibling`: copy the lexicographically first `*.html` file already in
       the target directory.
    3. `source`: copy the source document itself.
    """

    def __init__(self, pattern: str = "*.html") -> None:
        """Initialize the sibling-template glob pattern."""

        self.pattern = pattern

    def ensure(self, source_path: Path, target_path: Path) -> str:
        """Make sure `target_path` exists and return the policy that applied."""

        if target_path.exists():
            return "existing"

        target_dir = target_path.parent
        target_dir.mkdir(parents=True, exist_ok=True)
        candidates = sorted(
            candidate
            for candidate in target_dir.glob(self.pattern)
            if candidate.is_file() and candidate != target_path
        )
        if candidates:
            shutil.copyfile(candidates[0], target_path)
            return "sibling"

        shutil.copyfile(source_path, target_path)
        return "source"
