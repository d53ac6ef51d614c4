# agents/scoring_common.py

from __future__ import annotations

from typing import Callable, Iterable, List

from models.score_models import Rating, ScoreResult

MIN_SCORE = 0
MAX_SCORE = 100


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def clamp_score(value: float) -> int:
    """0〜100 に収めて int に切り捨てる。"""
    return int(clamp(value, MIN_SCORE, MAX_SCORE))


def rate_three_tier(score: int) -> Rating:
    """パフォーマンス用の3段階評価。"""
    if score < 50:
        return "poor"
    if score < 80:
        return "fair"
    return "good"


def rate_four_tier(score: int) -> Rating:
    """SEO / コンテンツ品質用の4段階評価。"""
    if score >= 80:
        return "excellent"
    if score >= 60:
        return "good"
    if score >= 40:
        return "fair"
    return "poor"


def _dedupe(items: Iterable[str]) -> List[str]:
    seen = set()
    result: List[str] = []
    for item in items:
        if item in seen:
            continue
        seen.add(item)
        result.append(item)
    return result


def build_result(
    points: float,
    suggestions: Iterable[str],
    rater: Callable[[int], Rating],
) -> ScoreResult:
    """
    合計点から ScoreResult を組み立てる共通処理。
    - 点数は 0〜100 にクランプ
    - rating は rater（3段階 or 4段階）で決定
    - suggestions は出現順を保ったまま重複を除く
    """
    score = clamp_score(points)
    return ScoreResult(score=score, rating=rater(score), suggestions=_dedupe(suggestions))
