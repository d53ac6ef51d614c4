# agents/analyzer_agent.py

from __future__ import annotations

import logging

from agents.link_agent import (
    absolute_link_targets,
    detect_niches,
    estimate_traffic,
    summarize_backlinks,
)
from agents.scoring_agent import score_all
from app.config import settings
from models.analysis_models import AnalysisResult, BrokenLinks, DomainMetrics, LinkAnalysis
from models.feature_models import FeatureRecord
from models.site_models import PageDetails
from services.link_checker import find_broken_links
from services.moz_client import get_domain_metrics

logger = logging.getLogger(__name__)


# ============================================================
# ユーティリティ
# ============================================================

def _check_broken_links(details: PageDetails) -> BrokenLinks:
    """
    リンク切れチェック（ベストエフォート）。
    失敗しても空の結果を返し、解析全体は止めない。
    """
    if not settings.link_check_enabled:
        return BrokenLinks()
    try:
        urls = find_broken_links(absolute_link_targets(details.anchors))
    except Exception as e:
        logger.warning("[analyzer] broken link check failed url=%s error=%s", details.url, e)
        return BrokenLinks()
    return BrokenLinks(total=len(urls), urls=urls)


def _lookup_domain_metrics(details: PageDetails) -> DomainMetrics:
    """外部指標の取得（ベストエフォート）。失敗時は 0 埋め。"""
    try:
        return get_domain_metrics(details.url)
    except Exception as e:
        logger.warning("[analyzer] domain metrics lookup failed url=%s error=%s", details.url, e)
        return DomainMetrics()


# ============================================================
# メインロジック
# ============================================================

def analyze_links(details: PageDetails, record: FeatureRecord) -> LinkAnalysis:
    """
    リンク・ジャンル・流入ポテンシャルの分析をまとめる。

    - リンク切れ（外部 HEAD チェック）
    - 旧来のバックリンク集計（dofollow / nofollow）
    - ジャンル判定
    - トラフィック推定
    - Moz のドメイン指標（認証情報があれば）
    """
    niche = detect_niches(details.body_text, details.keywords, details.title)
    traffic = estimate_traffic(
        content_length=record.content.content_length,
        external_domains=record.links.external.unique,
        social_count=record.links.external.social,
        has_analytics=record.content.has_analytics,
    )

    analysis = LinkAnalysis(
        broken_links=_check_broken_links(details),
        backlinks=summarize_backlinks(details.anchors),
        niche=niche,
        traffic=traffic,
        domain_metrics=_lookup_domain_metrics(details),
    )

    logger.info(
        "[analyzer] links url=%s niche=%s traffic=%s/%s broken=%s",
        details.url,
        niche,
        traffic.score,
        traffic.level,
        analysis.broken_links.total,
    )
    return analysis


def build_analysis_result(
    details: PageDetails,
    record: FeatureRecord,
    link_analysis: LinkAnalysis,
) -> AnalysisResult:
    """スコアリングを実行して、プレゼンテーション層に渡す集約結果を作る。"""
    scores = score_all(record)
    return AnalysisResult(
        url=record.url,
        details=details,
        features=record,
        performance=scores.performance,
        seo=scores.seo,
        content_quality=scores.content_quality,
        link_analysis=link_analysis,
    )
