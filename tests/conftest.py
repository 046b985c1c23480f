"""Shared pytest fixtures for the full localesync test suite."""

from __future__ import annotations

from pathlib import Path

import pytest


SOURCE_PAGE = """<!DOCTYPE html>
<html lang="ko">
<head><title>ESG</title><script>var greeting = "안녕";</script></head>
<body class="kor main">
<header><a href="/kor/index.html">홈</a></header>
<div id="content">
  <h1>지속가능경영</h1>
  <p>안녕하세요 <a href="/kor/esg/report.html">보고서</a> 입니다</p>
  <p>안녕하세요</p>
  <p class="no-translate">고정 문구</p>
  <!-- 주석은 번역하지 않음 -->
  <a href="/eng/other.html">English</a>
  <br>
</div>
<footer>바닥글</footer>
</body>
</html>
"""

TARGET_TEMPLATE = """<!DOCTYPE html>
<html lang="zh">
<head><title>ESG</title></head>
<body class="chn main">
<header><a href="/chn/index.html">首页</a></header>
<div id="content"><p>旧内容</p></div>
<footer>页脚</footer>
</body>
</html>
"""


@pytest.fixture
def source_page_markup() -> str:
    """Provide a source-locale page with a `#content` region."""

    return SOURCE_PAGE


@pytest.fixture
def target_template_markup() -> str:
    """Provide a target-locale page skeleton with its own chrome."""

    return TARGET_TEMPLATE


@pytest.fixture
def site_root(tmp_path: Path) -> Path:
    """Create a minimal `kor/esg` source tree with one page under a subdirectory."""

    root = tmp_path / "site"
    source_dir = root / "kor" / "esg"
    (source_dir / "sub").mkdir(parents=True)
    (source_dir / "index.html").write_text(SOURCE_PAGE, encoding="utf-8")
    (source_dir / "sub" / "detail.html").write_text(SOURCE_PAGE, encoding="utf-8")
    (root / "i18n").mkdir()
    (root / "i18n" / "config.json").write_text(
        '{"ignoreSelectors": [".no-translate"], "phraseBlacklist": []}',
        encoding="utf-8",
    )
    return root
