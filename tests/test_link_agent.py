# tests/test_link_agent.py

import pytest

from agents.link_agent import (
    absolute_link_targets,
    classify_links,
    detect_niches,
    estimate_traffic,
    summarize_backlinks,
)
from models.site_models import AnchorLink

PAGE_URL = "https://example.com/blog/post"


@pytest.fixture
def ten_links():
    return [
        # 内部 6 件（すべて異なるパス）
        AnchorLink(href="/"),
        AnchorLink(href="/about"),
        AnchorLink(href="https://example.com/contact"),
        AnchorLink(href="/blog"),
        AnchorLink(href="/pricing?plan=pro"),
        AnchorLink(href="products"),
        # 外部 4 件（partner.org と twitter.com の 2 ドメイン）
        AnchorLink(href="https://partner.org/a"),
        AnchorLink(href="https://partner.org/b", rel="nofollow"),
        AnchorLink(href="https://partner.org/c"),
        AnchorLink(href="https://twitter.com/example"),
    ]


def test_classify_links_counts(ten_links):
    metrics = classify_links(PAGE_URL, ten_links)

    assert metrics.internal.total == 6
    assert metrics.internal.unique == 6
    assert metrics.internal.paths == sorted(
        ["/", "/about", "/contact", "/blog", "/pricing", "/blog/products"]
    )
    assert metrics.external.total == 4
    assert metrics.external.unique == 2
    assert metrics.external.domains == ["partner.org", "twitter.com"]
    assert metrics.external.social == 1
    assert metrics.external.nofollow == 1


def test_classify_links_dedupes_internal_paths():
    anchors = [AnchorLink(href="/about"), AnchorLink(href="/about/"), AnchorLink(href="/about#team")]
    metrics = classify_links(PAGE_URL, anchors)

    assert metrics.internal.total == 3
    assert metrics.internal.unique == 1


def test_classify_links_skips_non_http_schemes_and_fragments():
    anchors = [
        AnchorLink(href="mailto:hello@example.com"),
        AnchorLink(href="tel:+10000000"),
        AnchorLink(href="javascript:void(0)"),
        AnchorLink(href="#top"),
        AnchorLink(href=""),
    ]
    metrics = classify_links(PAGE_URL, anchors)

    assert metrics.internal.total == 0
    assert metrics.external.total == 0


def test_classify_links_malformed_hrefs():
    anchors = [
        AnchorLink(href="//[broken", rel="nofollow"),
        AnchorLink(href="http://[broken"),
    ]
    metrics = classify_links(PAGE_URL, anchors)

    # "/" 始まりは内部扱い、それ以外は捨てる
    assert metrics.internal.total == 1
    assert metrics.external.total == 0
    assert metrics.external.nofollow == 1


def test_social_links_count_regardless_of_origin():
    metrics = classify_links(
        "https://www.facebook.com/page",
        [AnchorLink(href="/other"), AnchorLink(href="https://www.youtube.com/watch?v=1")],
    )
    assert metrics.internal.total == 1
    assert metrics.external.social == 2


def test_nofollow_checks_the_literal_rel_token():
    anchors = [
        AnchorLink(href="https://a.org/", rel="noopener nofollow"),
        AnchorLink(href="https://b.org/", rel="follow"),
        AnchorLink(href="https://c.org/"),
    ]
    assert classify_links(PAGE_URL, anchors).external.nofollow == 1


def test_summarize_backlinks_counts_every_absolute_link(ten_links):
    summary = summarize_backlinks(ten_links)

    # 同一サイトの絶対 URL も含めて数える
    assert summary.total == 5
    assert summary.nofollow == 1
    assert summary.dofollow == 4


def test_absolute_link_targets_dedupes_in_order():
    anchors = [
        AnchorLink(href="https://b.org/"),
        AnchorLink(href="/relative"),
        AnchorLink(href="https://a.org/"),
        AnchorLink(href="https://b.org/"),
    ]
    assert absolute_link_targets(anchors) == ["https://b.org/", "https://a.org/"]


# ---------- ジャンル判定 ----------


def test_detect_niches_from_text():
    assert detect_niches("We write about Technology and FINANCE.", None, None) == [
        "technology",
        "finance",
    ]


def test_detect_niches_unknown():
    assert detect_niches("hello world", "", "Home") == ["unknown"]


def test_detect_niches_uses_keywords_and_title():
    assert detect_niches("", "food, recipes", "Travel Guide") == ["travel", "food"]


def test_detect_niches_accepts_substring_matches():
    assert detect_niches("A day in the life of a businessman", None, None) == ["business"]


# ---------- トラフィック推定 ----------


def test_estimate_traffic_clamps_to_100():
    estimate = estimate_traffic(content_length=50_000, external_domains=10, social_count=3, has_analytics=True)
    assert estimate.score == 100
    assert estimate.level == "high"


@pytest.mark.parametrize(
    "content_length, has_analytics, score, level",
    [
        (0, False, 0, "low"),
        (39_999, False, 39, "low"),
        (40_000, False, 40, "medium"),
        (40_000, True, 70, "high"),
    ],
)
def test_estimate_traffic_levels(content_length, has_analytics, score, level):
    estimate = estimate_traffic(content_length, 0, 0, has_analytics)
    assert estimate.score == score
    assert estimate.level == level


def test_estimate_traffic_caps_each_term():
    # 本文 1,000,000 文字でも 100、外部ドメイン 100 件でも 50
    assert estimate_traffic(1_000_000, 0, 0, False).score == 100
    assert estimate_traffic(0, 100, 0, False).score == 50


def test_nofollow_counts_internal_links_too():
    anchors = [
        AnchorLink(href="/login", rel="nofollow"),
        AnchorLink(href="https://example.com/signup", rel="nofollow"),
        AnchorLink(href="https://partner.org/", rel="nofollow"),
    ]
    metrics = classify_links(PAGE_URL, anchors)

    # 外部ブロックに置くが、件数は内部リンクも含めた全体
    assert metrics.internal.total == 2
    assert metrics.external.total == 1
    assert metrics.external.nofollow == 3
