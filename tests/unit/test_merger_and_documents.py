"""Unit tests for document merge, serialization, target paths, and bootstrapping."""

from __future__ import annotations

from pathlib import Path

import pytest

from localesync.html.collector import TextUnitCollector
from localesync.html.documents import (
    TemplateBootstrapper,
    find_content_region,
    parse_html,
    read_markup,
    render_document,
    save_document,
    serialize_document,
    serialize_inner,
    target_path_for,
)
from localesync.html.merger import DocumentMerger


def _merge_into_template(source_markup: str, template_markup: str, target_locale: str = "chn"):
    source = parse_html(source_markup)
    content = find_content_region(source)
    assert content is not None
    units = TextUnitCollector([".no-translate"]).collect(content)
    translated = [f"<{target_locale}>{unit.normalized}" for unit in units]
    target = parse_html(template_markup)
    inner = DocumentMerger(source_locale="kor").merge(
        content, units, translated, target, target_locale
    )
    return target, inner


def test_merge_replaces_content_and_keeps_target_chrome(
    source_page_markup: str, target_template_markup: str
) -> None:
    """Only the content region changes; the template's header and footer survive."""

    target, _ = _merge_into_template(source_page_markup, target_template_markup)
    output = serialize_document(target)

    assert "旧内容" not in output
    assert "页脚" in output
    assert 'href="/chn/index.html"' in output
    assert "&lt;chn&gt;지속가능경영" in output
    assert "고정 문구" in output
    assert "<!-- 주석은 번역하지 않음 -->" in output


def test_merge_rewrites_source_locale_links_only(
    source_page_markup: str, target_template_markup: str
) -> None:
    """Links under `/kor/` move to `/chn/`; other locale trees are untouched."""

    target, _ = _merge_into_template(source_page_markup, target_template_markup)
    content = find_content_region(target)
    assert content is not None

    hrefs = [anchor["href"] for anchor in content.find_all("a")]

    assert hrefs == ["/chn/esg/report.html", "/eng/other.html"]


def test_rewrite_links_counts_rewritten_attributes() -> None:
    """Only `href`s starting with the source prefix are rewritten and counted."""

    content = find_content_region(
        parse_html(
            '<div id="content"><a href="/kor/esg/page.html">a</a>'
            '<a href="/korean/x.html">b</a><link href="/kor/style.css"></div>'
        )
    )
    assert content is not None

    rewritten = DocumentMerger(source_locale="kor").rewrite_links(content, "vtn")

    assert rewritten == 2
    assert [element["href"] for element in content.find_all(href=True)] == [
        "/vtn/esg/page.html",
        "/korean/x.html",
        "/vtn/style.css",
    ]


def test_locale_metadata_swaps_marker_class_and_sets_lang(source_page_markup: str) -> None:
    """A target bootstrapped from the source loses its source marker class."""

    target = parse_html(source_page_markup)

    DocumentMerger(source_locale="kor").update_locale_metadata(target, "vtn")

    assert target.body["class"] == ["main", "vtn"]
    assert target.find("html")["lang"] == "vi"


def test_locale_metadata_does_not_duplicate_target_marker(target_template_markup: str) -> None:
    """Re-running against an existing target keeps exactly one marker class."""

    target = parse_html(target_template_markup)
    merger = DocumentMerger(source_locale="kor")

    merger.update_locale_metadata(target, "chn")
    merger.update_locale_metadata(target, "chn")

    assert target.body["class"] == ["main", "chn"]
    assert target.find("html")["lang"] == "zh"


def test_splice_content_creates_region_when_target_lacks_one() -> None:
    """Targets without `#content` get a new region appended to `<body>`."""

    target = parse_html("<html><body><header>머리</header></body></html>")

    region = DocumentMerger.splice_content(target, "<p>新</p>")

    assert region.get("id") == "content"
    assert region.parent is target.body
    assert serialize_inner(region) == "<p>新</p>"


def test_apply_translations_rejects_length_mismatch() -> None:
    """Translations must be index-aligned with units."""

    content = find_content_region(parse_html('<div id="content"><p>하나</p><p>둘</p></div>'))
    assert content is not None
    units = TextUnitCollector().collect(content)

    with pytest.raises(ValueError, match="1 translation"):
        DocumentMerger.apply_translations(units, ["one"])


def test_serialization_keeps_void_elements_and_non_ascii_text(tmp_path: Path) -> None:
    """Saved documents keep `<br>` as written and store UTF-8 text unescaped."""

    document = parse_html('<html><body><div id="content"><p>가 &amp; 나<br>다</p></div></body></html>')
    path = save_document(tmp_path / "page.html", document)

    saved = path.read_text(encoding="utf-8")
    assert "<br>" in saved
    assert "<br/>" not in saved
    assert "가 &amp; 나" in saved
    assert find_content_region(parse_html(read_markup(path))) is not None


@pytest.mark.parametrize(
    ("source", "root", "expected"),
    [
        ("/site/kor/esg/index.html", None, "/site/chn/esg/index.html"),
        ("/site/kor/esg/kor/index.html", None, "/site/chn/esg/kor/index.html"),
        ("/data/kor/site/kor/a.html", "/data/kor/site", "/data/kor/site/chn/a.html"),
    ],
)
def test_target_path_swaps_first_locale_segment_below_root(
    source: str, root: str | None, expected: str
) -> None:
    """Only the first matching directory segment below the root is swapped."""

    result = target_path_for(Path(source), "kor", "chn", Path(root) if root else None)

    assert result == Path(expected)


def test_target_path_requires_a_locale_directory_segment() -> None:
    """A file name equal to the locale tag is not a directory segment."""

    with pytest.raises(ValueError, match="no `kor` directory segment"):
        target_path_for(Path("/site/esg/kor"), "kor", "chn")


def test_bootstrapper_prefers_existing_target(tmp_path: Path) -> None:
    """An existing target is used untouched."""

    source = tmp_path / "kor" / "a.html"
    target = tmp_path / "chn" / "a.html"
    source.parent.mkdir()
    target.parent.mkdir()
    source.write_text("source", encoding="utf-8")
    target.write_text("existing", encoding="utf-8")

    assert TemplateBootstrapper().ensure(source, target) == "existing"
    assert target.read_text(encoding="utf-8") == "existing"


def test_bootstrapper_copies_first_sorted_sibling(tmp_path: Path) -> None:
    """With siblings present, the lexicographically first `*.html` is the template."""

    source = tmp_path / "kor" / "new.html"
    source.parent.mkdir()
    source.write_text("source", encoding="utf-8")
    target_dir = tmp_path / "chn"
    target_dir.mkdir()
    (target_dir / "b.html").write_text("sibling-b", encoding="utf-8")
    (target_dir / "a.html").write_text("sibling-a", encoding="utf-8")
    (target_dir / "notes.txt").write_text("ignored", encoding="utf-8")

    policy = TemplateBootstrapper().ensure(source, target_dir / "new.html")

    assert policy == "sibling"
    assert (target_dir / "new.html").read_text(encoding="utf-8") == "sibling-a"


def test_bootstrapper_falls_back_to_source_and_creates_directories(tmp_path: Path) -> None:
    """Without siblings the source document itself becomes the template."""

    source = tmp_path / "kor" / "esg" / "a.html"
    source.parent.mkdir(parents=True)
    source.write_text("source", encoding="utf-8")
    target = tmp_path / "vtn" / "esg" / "a.html"

    assert TemplateBootstrapper().ensure(source, target) == "source"
    assert target.read_text(encoding="utf-8") == "source"


CHROME_TEMPLATE = (
    "<!DOCTYPE html>\n"
    '<html lang="zh">\n'
    "<head><title>ESG &amp; 报告</title></head>\n"
    '<body class="main chn">\n'
    "<header><input type=checkbox checked><a href=/chn/>首页</a></header>\n"
    '<div id="content"><p>旧内容</p><div>嵌套</div></div>\n'
    "<footer>&copy; 2024&nbsp;Corp</footer>\n"
    "</body>\n"
    "</html>\n"
)


def test_render_keeps_bytes_outside_content_region(source_page_markup: str) -> None:
    """Entities, bare attributes, and unquoted values outside `#content` survive as written."""

    target, _ = _merge_into_template(source_page_markup, CHROME_TEMPLATE)
    rendered = render_document(target, CHROME_TEMPLATE)

    region_open = '<div id="content">'
    head = CHROME_TEMPLATE[: CHROME_TEMPLATE.index(region_open) + len(region_open)]
    tail = CHROME_TEMPLATE[CHROME_TEMPLATE.index("</div>\n<footer>") :]
    region = find_content_region(target)
    assert region is not None
    assert rendered.startswith(head)
    assert rendered.endswith(tail)
    assert rendered[len(head) : len(rendered) - len(tail)] == serialize_inner(region)
    assert "旧内容" not in rendered


def test_render_rewrites_only_changed_locale_start_tags(source_page_markup: str) -> None:
    """A source-copied target gets new `<html>`/`<body>` start tags and nothing else."""

    template = CHROME_TEMPLATE.replace('lang="zh"', 'lang="ko"').replace(
        'class="main chn"', 'class="kor main"'
    )
    target, _ = _merge_into_template(source_page_markup, template)

    rendered = render_document(target, template)

    assert '<html lang="zh">' in rendered
    assert '<body class="main chn">' in rendered
    assert "<head><title>ESG &amp; 报告</title></head>" in rendered
    assert "<input type=checkbox checked>" in rendered
    assert "<footer>&copy; 2024&nbsp;Corp</footer>" in rendered


def test_render_inserts_missing_region_before_body_end(source_page_markup: str) -> None:
    """A target without `#content` gains the region just before `</body>`."""

    template = '<html lang="zh"><body class="main chn"><footer>&copy;</footer></body></html>'
    target, _ = _merge_into_template(source_page_markup, template)
    region = find_content_region(target)
    assert region is not None

    rendered = render_document(target, template)

    assert rendered == (
        '<html lang="zh"><body class="main chn"><footer>&copy;</footer>'
        f'<div id="content">{serialize_inner(region)}</div></body></html>'
    )
