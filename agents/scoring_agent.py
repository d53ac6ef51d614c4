# agents/scoring_agent.py

from __future__ import annotations

from typing import List

from agents.scoring_common import build_result, rate_four_tier, rate_three_tier
from models.feature_models import FeatureRecord
from models.score_models import ScoreBundle, ScoreResult

# ============================================================
# パフォーマンス: しきい値と減点上限
# ============================================================

HTML_SOFT_LIMIT_KB = 100
HTML_HARD_LIMIT_KB = 150
HTML_MAX_PENALTY = 20

LOAD_SOFT_LIMIT_MS = 2000
LOAD_HARD_LIMIT_MS = 5000
LOAD_MAX_PENALTY = 30

EXTERNAL_RESOURCE_LIMIT = 15
EXTERNAL_RESOURCE_PENALTY_PER_FILE = 3
EXTERNAL_RESOURCE_MAX_PENALTY = 15

INLINE_LIMIT = 5
INLINE_PENALTY_PER_ITEM = 2
INLINE_MAX_PENALTY = 10

# ============================================================
# SEO: 推奨文字数レンジ
# ============================================================

TITLE_RANGE = (30, 60)
DESCRIPTION_RANGE = (120, 160)

MIN_WORD_COUNT = 300
MIN_TEXT_RATIO_PERCENT = 10


# ============================================================
# ユーティリティ
# ============================================================

def _graded_penalty(value: float, soft: float, hard: float, max_penalty: float) -> float:
    """soft を超えた分だけ線形に減点し、hard で max_penalty に達する。"""
    if value <= soft:
        return 0.0
    if value > hard:
        return float(max_penalty)
    return (value - soft) / (hard - soft) * max_penalty


def _length_check(
    label: str,
    text_length: int,
    present: bool,
    ideal: tuple,
    full_points: int,
    suggestions: List[str],
    missing_message: str,
) -> int:
    """タイトル / description 共通の文字数チェック。満点・半分・0点の3通り。"""
    if not present:
        suggestions.append(missing_message)
        return 0

    low, high = ideal
    if text_length < low:
        suggestions.append(
            f"{label} is too short ({text_length} characters, recommended {low}-{high})"
        )
        return full_points // 2
    if text_length > high:
        suggestions.append(
            f"{label} is too long ({text_length} characters, recommended {low}-{high})"
        )
        return full_points // 2
    return full_points


# ============================================================
# メインロジック
# ============================================================

def score_performance(record: FeatureRecord) -> ScoreResult:
    """
    100点から減点していくパフォーマンススコア（3段階評価）。

    - HTML サイズ: 100KB 超で線形に減点、150KB 超で上限 20 点 + 提案
    - 読み込み時間: 2秒超で線形に減点、5秒超で上限 30 点 + 提案
    - 外部 CSS + JS が 15 を超えた分（上限 15 点）
    - インライン style / script がそれぞれ 5 を超えた分（各上限 10 点）
    """
    points = 100.0
    suggestions: List[str] = []

    size_kb = record.html_size_bytes / 1024
    points -= _graded_penalty(size_kb, HTML_SOFT_LIMIT_KB, HTML_HARD_LIMIT_KB, HTML_MAX_PENALTY)
    if size_kb > HTML_HARD_LIMIT_KB:
        suggestions.append(
            f"Reduce HTML size ({size_kb:.0f} KB, recommended under {HTML_HARD_LIMIT_KB} KB)"
        )

    load_ms = record.load_time_ms
    points -= _graded_penalty(load_ms, LOAD_SOFT_LIMIT_MS, LOAD_HARD_LIMIT_MS, LOAD_MAX_PENALTY)
    if load_ms > LOAD_HARD_LIMIT_MS:
        suggestions.append(
            f"Improve page load time ({load_ms / 1000:.1f}s, recommended under {LOAD_HARD_LIMIT_MS // 1000}s)"
        )

    res = record.resources
    external = res.css + res.js
    if external > EXTERNAL_RESOURCE_LIMIT:
        excess = external - EXTERNAL_RESOURCE_LIMIT
        points -= min(EXTERNAL_RESOURCE_MAX_PENALTY, excess * EXTERNAL_RESOURCE_PENALTY_PER_FILE)
        suggestions.append(
            f"Reduce the number of external CSS/JS files ({external} found, recommended {EXTERNAL_RESOURCE_LIMIT} or fewer)"
        )

    if res.inline_styles > INLINE_LIMIT:
        excess = res.inline_styles - INLINE_LIMIT
        points -= min(INLINE_MAX_PENALTY, excess * INLINE_PENALTY_PER_ITEM)
        suggestions.append(
            f"Move inline styles into external stylesheets ({res.inline_styles} found)"
        )

    if res.inline_scripts > INLINE_LIMIT:
        excess = res.inline_scripts - INLINE_LIMIT
        points -= min(INLINE_MAX_PENALTY, excess * INLINE_PENALTY_PER_ITEM)
        suggestions.append(
            f"Move inline scripts into external files ({res.inline_scripts} found)"
        )

    return build_result(points, suggestions, rate_three_tier)


def score_seo(record: FeatureRecord) -> ScoreResult:
    """
    オンページ SEO スコア（加点方式・4段階評価）。
    タイトル 20 / description 20 / 見出し 20 / 画像 alt 20 / meta・OG 20 の計 100 点。
    """
    points = 0
    suggestions: List[str] = []

    # ----- タイトル・description -----
    points += _length_check(
        "Title",
        record.title_length,
        bool(record.title),
        TITLE_RANGE,
        20,
        suggestions,
        "Missing title tag",
    )
    points += _length_check(
        "Meta description",
        record.description_length,
        bool(record.description),
        DESCRIPTION_RANGE,
        20,
        suggestions,
        "Missing meta description",
    )

    # ----- 見出し -----
    h = record.headings
    if h.h1 == 1:
        points += 10
    elif h.h1 == 0:
        suggestions.append("Missing H1 heading")
    else:
        suggestions.append(f"Multiple H1 headings found ({h.h1}), use exactly one")

    if h.h2 > 0:
        points += 5
    else:
        suggestions.append("Add H2 subheadings to structure the content")
    if h.h3 > 0:
        points += 5
    else:
        suggestions.append("Add H3 subheadings for deeper sections")

    # ----- 画像 alt -----
    # 画像が無いページは加点も提案もしない
    img = record.images
    if img.total > 0:
        points += round(20 * img.with_alt / img.total)
        if img.without_alt > 0:
            suggestions.append(f"Add alt text to {img.without_alt} image(s)")

    # ----- meta / OG -----
    m = record.meta
    meta_checks = [
        (m.has_viewport, "Add a viewport meta tag"),
        (m.has_charset, "Declare a charset meta tag"),
        (m.has_keywords, "Add a meta keywords tag"),
        (m.has_open_graph, "Add Open Graph tags for social sharing"),
    ]
    for ok, message in meta_checks:
        if ok:
            points += 5
        else:
            suggestions.append(message)

    return build_result(points, suggestions, rate_four_tier)


def score_content_quality(record: FeatureRecord) -> ScoreResult:
    """
    コンテンツ品質スコア（4段階評価）。
    コンテンツ 40 点 + テクニカル 30 点 + アクセシビリティ 30 点。
    """
    c = record.content
    a = record.accessibility

    checks = [
        # ----- コンテンツ（最大 40） -----
        (c.word_count > MIN_WORD_COUNT, 10,
         f"Add more content ({c.word_count} words, recommended over {MIN_WORD_COUNT})"),
        (c.text_to_html_ratio_percent > MIN_TEXT_RATIO_PERCENT, 10,
         f"Increase the text to HTML ratio ({c.text_to_html_ratio_percent:.1f}%, recommended over {MIN_TEXT_RATIO_PERCENT}%)"),
        (c.has_structured_data, 10, "Add structured data (JSON-LD or microdata)"),
        (c.has_canonical, 5, "Add a canonical link tag"),
        (c.has_sitemap, 5, "Provide a sitemap.xml"),
        # ----- テクニカル（最大 30） -----
        (c.has_ssl, 10, "Serve the site over HTTPS"),
        (record.meta.has_viewport, 10, "Make the page mobile responsive (viewport meta tag)"),
        (record.meta.has_favicon, 5, "Add a favicon"),
        (c.has_custom_404, 5, "Add a custom 404 page"),
        # ----- アクセシビリティ（最大 30） -----
        (a.has_aria_labels, 6, "Add ARIA labels to interactive elements"),
        (a.has_alt_text, 6, "Provide alt text for every image"),
        (a.has_skip_links, 6, "Add a skip navigation link"),
        (a.has_lang_attribute, 6, "Set the lang attribute on the html element"),
        (a.has_accessible_forms, 6, "Associate a label with every form input"),
    ]

    points = 0
    suggestions: List[str] = []
    for ok, weight, message in checks:
        if ok:
            points += weight
        else:
            suggestions.append(message)

    return build_result(points, suggestions, rate_four_tier)


def score_all(record: FeatureRecord) -> ScoreBundle:
    """3カテゴリをまとめて採点する。入力が同じなら結果も常に同じ。"""
    return ScoreBundle(
        performance=score_performance(record),
        seo=score_seo(record),
        content_quality=score_content_quality(record),
    )
