# services/html_parser.py

from __future__ import annotations

import re
from typing import List, Optional
import logging

from bs4 import BeautifulSoup

from models.feature_models import (
    AccessibilityFlags,
    ImageStats,
    MetaFlags,
    ResourceCounts,
    SecurityFlags,
    StructureFlags,
)
from models.site_models import AnchorLink, HeadingLists, OpenGraphTags, PageDetails

logger = logging.getLogger(__name__)

SKIP_LINK_PATTERN = re.compile(r"skip|main[-_]?content|#content", re.IGNORECASE)

ANALYTICS_MARKERS = (
    "google-analytics.com",
    "googletagmanager.com",
    "gtag(",
    "analytics.js",
    "_gaq.push",
)


def has_analytics_snippet(html: str) -> bool:
    """アナリティクスのタグが HTML 中に埋め込まれているか（部分一致）。"""
    lowered = (html or "").lower()
    return any(marker in lowered for marker in ANALYTICS_MARKERS)


def _meta_content(soup: BeautifulSoup, name: Optional[str] = None, prop: Optional[str] = None) -> Optional[str]:
    """<meta name=...> / <meta property=...> の content を取り出す。無ければ None。"""
    if name:
        tag = soup.find("meta", attrs={"name": lambda x: x and x.lower() == name})
    else:
        tag = soup.find("meta", attrs={"property": lambda x: x and x.lower() == prop})
    if tag and tag.get("content"):
        return str(tag.get("content")).strip()
    return None


def _http_equiv_present(soup: BeautifulSoup, header: str) -> bool:
    return soup.find("meta", attrs={"http-equiv": lambda x: x and x.lower() == header}) is not None


def _texts(soup: BeautifulSoup, tag_name: str) -> List[str]:
    return [t.get_text(strip=True) for t in soup.find_all(tag_name)]


def _rel_of(tag) -> str:
    # BeautifulSoup は rel を複数値属性としてリストで返す
    rel = tag.get("rel")
    if isinstance(rel, list):
        return " ".join(rel)
    return rel or ""


def _extract_body_text(soup: BeautifulSoup) -> str:
    """script/style 等を除去して本文テキストを抽出する。"""
    body = soup.body or soup
    clone = BeautifulSoup(str(body), "html.parser")
    for tag in clone(["script", "style", "noscript"]):
        tag.decompose()
    text = clone.get_text(separator=" ", strip=True)
    return re.sub(r"\s+", " ", text)


def _has_favicon(soup: BeautifulSoup) -> bool:
    for link in soup.find_all("link"):
        rel = _rel_of(link).lower().split()
        if "icon" in rel:
            return True
    return False


def _has_structured_data(soup: BeautifulSoup) -> bool:
    if soup.find("script", attrs={"type": "application/ld+json"}):
        return True
    return soup.find(attrs={"itemscope": True}) is not None


def _has_skip_links(soup: BeautifulSoup) -> bool:
    for a in soup.find_all("a", href=True):
        href = a["href"]
        if not href.startswith("#"):
            continue
        if SKIP_LINK_PATTERN.search(href) or SKIP_LINK_PATTERN.search(a.get_text(" ", strip=True)):
            return True
    return False


def _has_accessible_forms(soup: BeautifulSoup) -> bool:
    """
    すべての入力要素にラベルが対応付いているか。
    入力要素が無いページは True（違反なし）とする。
    """
    label_targets = {label.get("for") for label in soup.find_all("label") if label.get("for")}
    inputs = [
        el for el in soup.find_all(["input", "select", "textarea"])
        if (el.get("type") or "").lower() not in ("hidden", "submit", "button", "reset", "image")
    ]
    for el in inputs:
        if el.get("id") and el.get("id") in label_targets:
            continue
        if el.get("aria-label") or el.get("aria-labelledby"):
            continue
        if el.find_parent("label") is not None:
            continue
        return False
    return True


def parse_html(url: str, html: str) -> PageDetails:
    """
    HTML文字列を解析して PageDetails を生成する。
    ※ ここではネットワークアクセスは行わない（プロキシ経由で取得済み前提）
    """
    soup = BeautifulSoup(html, "html.parser")

    title = soup.title.get_text(strip=True) if soup.title else None
    description = _meta_content(soup, name="description")

    og_tags = OpenGraphTags(
        title=_meta_content(soup, prop="og:title"),
        description=_meta_content(soup, prop="og:description"),
        image=_meta_content(soup, prop="og:image"),
        url=_meta_content(soup, prop="og:url"),
    )

    headings = HeadingLists(
        h1=_texts(soup, "h1"),
        h2=_texts(soup, "h2"),
        h3=_texts(soup, "h3"),
    )

    # ----- 画像 -----
    img_tags = soup.find_all("img")
    without_alt = sum(1 for im in img_tags if not im.has_attr("alt"))
    images = ImageStats(total=len(img_tags), without_alt=without_alt)
    image_paths = [im.get("src") for im in img_tags if im.get("src")]

    # ----- リンク -----
    anchors = [AnchorLink(href=a["href"], rel=_rel_of(a)) for a in soup.find_all("a", href=True)]

    # ----- リソース数 -----
    stylesheets = [
        link for link in soup.find_all("link", href=True)
        if "stylesheet" in _rel_of(link).lower().split()
    ]
    resources = ResourceCounts(
        css=len(stylesheets),
        js=len(soup.find_all("script", src=True)),
        inline_styles=len(soup.find_all("style")) + len(soup.find_all(attrs={"style": True})),
        inline_scripts=sum(
            1 for s in soup.find_all("script")
            if not s.get("src") and (s.get("type") or "").lower() != "application/ld+json"
        ),
    )

    html_tag = soup.find("html")
    has_lang = bool(html_tag and html_tag.get("lang"))

    structure = StructureFlags(
        has_doctype="<!doctype html" in html.lower(),
        has_html_lang=has_lang,
        has_main_tag=soup.find("main") is not None,
        has_header_tag=soup.find("header") is not None,
        has_footer_tag=soup.find("footer") is not None,
        has_nav_tag=soup.find("nav") is not None,
    )

    keywords = _meta_content(soup, name="keywords")
    meta = MetaFlags(
        has_viewport=soup.find("meta", attrs={"name": lambda x: x and x.lower() == "viewport"}) is not None,
        has_charset=(
            soup.find("meta", attrs={"charset": True}) is not None
            or _http_equiv_present(soup, "content-type")
        ),
        has_keywords=bool(keywords),
        has_open_graph=og_tags.any_present(),
        has_favicon=_has_favicon(soup),
    )

    security = SecurityFlags(
        has_hsts=_http_equiv_present(soup, "strict-transport-security"),
        has_x_frame=_http_equiv_present(soup, "x-frame-options"),
        has_csp=_http_equiv_present(soup, "content-security-policy"),
        has_xss=_http_equiv_present(soup, "x-xss-protection"),
    )

    accessibility = AccessibilityFlags(
        has_aria_labels=soup.find(attrs={"aria-label": True}) is not None
        or soup.find(attrs={"aria-labelledby": True}) is not None,
        has_alt_text=without_alt == 0,
        has_skip_links=_has_skip_links(soup),
        has_lang_attribute=has_lang,
        has_accessible_forms=_has_accessible_forms(soup),
    )

    canonical = None
    for link in soup.find_all("link", href=True):
        if "canonical" in _rel_of(link).lower().split():
            canonical = link
            break

    body_text = _extract_body_text(soup)
    ratio = (len(body_text) / len(html) * 100) if html else 0.0

    details = PageDetails(
        url=url,
        title=title or None,
        description=description,
        keywords=keywords,
        robots=_meta_content(soup, name="robots"),
        author=_meta_content(soup, name="author"),
        og_tags=og_tags,
        headings=headings,
        image_paths=image_paths,
        anchors=anchors,
        body_text=body_text,
        word_count=len(body_text.split()),
        text_to_html_ratio_percent=round(ratio, 2),
        html_size_bytes=len(html.encode("utf-8")),
        resources=resources,
        images=images,
        structure=structure,
        meta=meta,
        security=security,
        accessibility=accessibility,
        has_structured_data=_has_structured_data(soup),
        has_canonical=canonical is not None,
        has_analytics=has_analytics_snippet(html),
    )

    logger.info(
        "[html_parser] parsed url=%s title=%s words=%s anchors=%s images=%s",
        url,
        bool(title),
        details.word_count,
        len(anchors),
        images.total,
    )
    return details
