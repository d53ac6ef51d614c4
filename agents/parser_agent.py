# agents/parser_agent.py

from typing import Optional
import logging
from urllib.parse import urlparse

from agents.link_agent import classify_links
from models.feature_models import ContentMetrics, FeatureRecord, HeadingCounts
from models.site_models import PageDetails
from services.crawler import FetchedPage, ProbeResults, fetch_via_proxies
from services.html_parser import parse_html

logger = logging.getLogger(__name__)


def build_feature_record(
    details: PageDetails,
    load_time_ms: int = 0,
    probes: Optional[ProbeResults] = None,
) -> FeatureRecord:
    """
    PageDetails（HTML 解析結果）に、取得時間・リンク分類・sitemap/404 プローブ結果を
    合わせて FeatureRecord を組み立てる。
    プローブ結果が無い場合（未実施・失敗）は False として扱う。
    """
    probes = probes or ProbeResults()

    content = ContentMetrics(
        word_count=details.word_count,
        text_to_html_ratio_percent=details.text_to_html_ratio_percent,
        content_length=len(details.body_text),
        has_structured_data=details.has_structured_data,
        has_canonical=details.has_canonical,
        has_sitemap=probes.has_sitemap,
        has_custom_404=probes.has_custom_404,
        has_ssl=urlparse(details.url).scheme == "https",
        has_analytics=details.has_analytics,
    )

    return FeatureRecord(
        url=details.url,
        title=details.title,
        description=details.description,
        html_size_bytes=details.html_size_bytes,
        load_time_ms=max(0, load_time_ms),
        resources=details.resources,
        headings=HeadingCounts(
            h1=len(details.headings.h1),
            h2=len(details.headings.h2),
            h3=len(details.headings.h3),
        ),
        images=details.images,
        structure=details.structure,
        meta=details.meta,
        content=content,
        security=details.security,
        accessibility=details.accessibility,
        links=classify_links(details.url, details.anchors),
    )


def fetch_and_parse(url: str) -> tuple[FetchedPage, PageDetails]:
    """
    プロキシ経由で HTML を取得し、PageDetails に変換する。
    取得失敗は services.errors の例外がそのまま上に伝わる。
    """
    logger.info("[parser_agent] Fetching HTML: %s", url)

    # ----- 1) HTML を取得 -----
    fetched = fetch_via_proxies(url)

    # ----- 2) BeautifulSoup で構造化 -----
    details = parse_html(fetched.url, fetched.html)

    logger.info(
        "[parser_agent] Parsed successfully: %s (title=%s, words=%s, load_time_ms=%s)",
        url,
        details.title,
        details.word_count,
        fetched.load_time_ms,
    )
    return fetched, details
