# agents/link_agent.py

from __future__ import annotations

import logging
import re
from typing import Iterable, List, Optional, Set
from urllib.parse import urljoin, urlparse

from agents.scoring_common import clamp, clamp_score
from models.analysis_models import BacklinkSummary
from models.feature_models import ExternalLinks, InternalLinks, LinkMetrics
from models.score_models import TrafficEstimate
from models.site_models import AnchorLink

logger = logging.getLogger(__name__)

# ============================================================
# 固定の語彙・パターン
# ============================================================

SOCIAL_HOST_PATTERN = re.compile(
    r"(facebook\.com|twitter\.com|instagram\.com|linkedin\.com|youtube\.com|pinterest\.com)",
    re.IGNORECASE,
)

NICHE_VOCABULARY: List[str] = [
    "technology",
    "health",
    "finance",
    "education",
    "entertainment",
    "travel",
    "food",
    "fashion",
    "sports",
    "business",
]

UNKNOWN_NICHE = "unknown"

# ============================================================
# ユーティリティ
# ============================================================

def _has_nofollow(rel: str) -> bool:
    """rel 属性に nofollow トークンがあるか。属性が無いことから dofollow を推測はしない。"""
    return "nofollow" in (rel or "").lower().split()


def _normalize_path(path: str) -> str:
    if not path:
        return "/"
    if len(path) > 1:
        return path.rstrip("/") or "/"
    return path


def _resolve(page_url: str, href: str) -> Optional[str]:
    """href をページ URL 基準で絶対 URL に解決する。解決できなければ None。"""
    try:
        return urljoin(page_url, href)
    except ValueError:
        return None


# ============================================================
# メインロジック
# ============================================================

def classify_links(page_url: str, anchors: Iterable[AnchorLink]) -> LinkMetrics:
    """
    ページ内のリンクを内部 / 外部に分類して集計する。

    - 同一ホスト → 内部リンク（正規化したパスでユニーク化）
    - 別ホストかつ http(s) → 外部リンク（ホスト名でユニーク化）
    - SNS ホストへのリンクは内部/外部に関係なく social を加算
    - rel に nofollow があれば nofollow を加算
    - 解析できない href は "/" 始まりなら内部扱い、それ以外は捨てる
    """
    page_host = (urlparse(page_url).hostname or "").lower()

    internal_total = 0
    internal_paths: Set[str] = set()
    external_total = 0
    external_domains: Set[str] = set()
    social = 0
    nofollow = 0

    for anchor in anchors:
        href = (anchor.href or "").strip()
        if not href or href.startswith("#"):
            continue

        resolved = _resolve(page_url, href)
        try:
            parsed = urlparse(resolved) if resolved else None
            host = (parsed.hostname or "").lower() if parsed else ""
        except ValueError:
            parsed = None
            host = ""

        if parsed is None:
            # 壊れた href: "/" 始まりだけ文字列ベースで内部扱い
            if href.startswith("/"):
                internal_total += 1
                internal_paths.add(_normalize_path(href.split("?")[0].split("#")[0]))
                if _has_nofollow(anchor.rel):
                    nofollow += 1
            else:
                logger.debug("[link_agent] drop malformed href=%s", href)
            continue

        if parsed.scheme not in ("http", "https"):
            # mailto: / tel: / javascript: などはどちらにも数えない
            continue

        if SOCIAL_HOST_PATTERN.search(host):
            social += 1
        if _has_nofollow(anchor.rel):
            nofollow += 1

        if host == page_host:
            internal_total += 1
            internal_paths.add(_normalize_path(parsed.path))
        elif host:
            external_total += 1
            external_domains.add(host)

    return LinkMetrics(
        internal=InternalLinks(
            total=internal_total,
            unique=len(internal_paths),
            paths=sorted(internal_paths),
        ),
        external=ExternalLinks(
            total=external_total,
            unique=len(external_domains),
            social=social,
            nofollow=nofollow,
            domains=sorted(external_domains),
        ),
    )


def summarize_backlinks(anchors: Iterable[AnchorLink]) -> BacklinkSummary:
    """
    旧来の「バックリンク」集計。
    href が http で始まるリンクを、同一サイトかどうかに関係なくすべて数える。
    dofollow は単に nofollow でないものの数。
    """
    total = 0
    nofollow = 0
    for anchor in anchors:
        if not (anchor.href or "").startswith("http"):
            continue
        total += 1
        if _has_nofollow(anchor.rel):
            nofollow += 1
    return BacklinkSummary(total=total, dofollow=total - nofollow, nofollow=nofollow)


def absolute_link_targets(anchors: Iterable[AnchorLink]) -> List[str]:
    """死活チェック対象になる絶対 URL（http 始まり）の一覧。重複は除き出現順を保つ。"""
    seen: Set[str] = set()
    urls: List[str] = []
    for anchor in anchors:
        href = (anchor.href or "").strip()
        if not href.startswith("http") or href in seen:
            continue
        seen.add(href)
        urls.append(href)
    return urls


def detect_niches(text: str, keywords: Optional[str], title: Optional[str]) -> List[str]:
    """
    本文・meta keywords・タイトルを小文字で連結し、語彙の部分一致でジャンルを判定する。
    "businessman" が business にヒットするような部分一致はそのまま許容する。
    """
    haystack = " ".join([text or "", keywords or "", title or ""]).lower()
    detected = [niche for niche in NICHE_VOCABULARY if niche in haystack]
    return detected or [UNKNOWN_NICHE]


def traffic_level(score: int) -> str:
    if score < 40:
        return "low"
    if score < 70:
        return "medium"
    return "high"


def estimate_traffic(
    content_length: int,
    external_domains: int,
    social_count: int,
    has_analytics: bool,
) -> TrafficEstimate:
    """
    流入ポテンシャルの推定。
      本文長/1000（上限 100）+ 外部ドメイン数×2（上限 50）
      + SNS リンク数×10 + アナリティクス有りなら 30
    を合計して 0〜100 に収める。
    """
    points = (
        clamp(content_length / 1000, 0, 100)
        + clamp(external_domains * 2, 0, 50)
        + social_count * 10
        + (30 if has_analytics else 0)
    )
    score = clamp_score(points)
    return TrafficEstimate(score=score, level=traffic_level(score))
