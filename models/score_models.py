# models/score_models.py

from __future__ import annotations

from typing import List, Literal

from pydantic import BaseModel, ConfigDict, Field


# -----------------------------------------
# Rating（評価区分）
# poor < fair < good < excellent の順序を持つ
# パフォーマンスは poor / fair / good の3段階のみ使う
# -----------------------------------------
Rating = Literal["poor", "fair", "good", "excellent"]

RATING_ORDER: List[str] = ["poor", "fair", "good", "excellent"]

TrafficLevel = Literal["low", "medium", "high"]


class ScoreResult(BaseModel):
    """1カテゴリ分のスコア結果。

    Attributes:
        score (int): 0〜100 に丸めたスコア。
        rating (Rating): score から固定しきい値で決まる評価区分。
        suggestions (List[str]): 失敗したチェックごとに1件ずつの改善提案。
    """

    model_config = ConfigDict(frozen=True)

    score: int = Field(..., ge=0, le=100)
    rating: Rating
    suggestions: List[str] = Field(default_factory=list)


class TrafficEstimate(BaseModel):
    """ヒューリスティックな流入ポテンシャル推定（実測値ではない）。"""

    model_config = ConfigDict(frozen=True)

    score: int = Field(..., ge=0, le=100)
    level: TrafficLevel


class ScoreBundle(BaseModel):
    """スコアリングエンジンの出力一式。"""

    performance: ScoreResult
    seo: ScoreResult
    content_quality: ScoreResult
