# models/analysis_models.py

from typing import List
from pydantic import BaseModel, Field

from models.feature_models import FeatureRecord
from models.score_models import ScoreResult, TrafficEstimate
from models.site_models import PageDetails


class BrokenLinks(BaseModel):
    total: int = 0
    urls: List[str] = Field(default_factory=list)


class BacklinkSummary(BaseModel):
    # 絶対URL（http で始まる href）をすべて数える旧来の集計。
    # dofollow は「nofollow ではないもの」
    total: int = 0
    dofollow: int = 0
    nofollow: int = 0


class DomainMetrics(BaseModel):
    domain_authority: float = 0
    page_authority: float = 0
    spam_score: float = 0


class LinkAnalysis(BaseModel):
    broken_links: BrokenLinks = Field(default_factory=BrokenLinks)
    backlinks: BacklinkSummary = Field(default_factory=BacklinkSummary)
    niche: List[str] = Field(default_factory=lambda: ["unknown"])
    traffic: TrafficEstimate
    domain_metrics: DomainMetrics = Field(default_factory=DomainMetrics)


class AnalysisResult(BaseModel):
    """1回の解析リクエストに対する集約結果。プレゼンテーション層へ渡す唯一の型。"""

    url: str
    details: PageDetails
    features: FeatureRecord
    performance: ScoreResult
    seo: ScoreResult
    content_quality: ScoreResult
    link_analysis: LinkAnalysis
