# models/site_models.py

from __future__ import annotations

from typing import List, Optional
from pydantic import BaseModel, Field

from models.feature_models import (
    AccessibilityFlags,
    ImageStats,
    MetaFlags,
    ResourceCounts,
    SecurityFlags,
    StructureFlags,
)


class AnchorLink(BaseModel):
    """
    <a href> 1件分。
    - href: 属性値そのまま（未解決・未正規化）
    - rel: rel 属性を空白区切りのまま保持（無ければ空文字）
    """
    href: str
    rel: str = ""


class OpenGraphTags(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    image: Optional[str] = None
    url: Optional[str] = None

    def any_present(self) -> bool:
        return any([self.title, self.description, self.image, self.url])


class HeadingLists(BaseModel):
    """見出しテキストをレベル別に保持する（表示用）。"""
    h1: List[str] = Field(default_factory=list)
    h2: List[str] = Field(default_factory=list)
    h3: List[str] = Field(default_factory=list)


class PageDetails(BaseModel):
    """
    1ページ分の HTML 解析結果。
    表示用の生データ（タイトル文字列や見出しテキストなど）と、
    FeatureRecord の材料になる集計値・フラグの両方を持つ中間モデル。
    ネットワークに依存する項目（sitemap / 404 / 読み込み時間）はここには含めない。
    """

    url: str
    title: Optional[str] = None
    description: Optional[str] = None
    keywords: Optional[str] = None
    robots: Optional[str] = None
    author: Optional[str] = None
    og_tags: OpenGraphTags = Field(default_factory=OpenGraphTags)

    headings: HeadingLists = Field(default_factory=HeadingLists)
    image_paths: List[str] = Field(default_factory=list)
    anchors: List[AnchorLink] = Field(default_factory=list)

    # 本文テキストと、その統計値
    body_text: str = ""
    word_count: int = 0
    text_to_html_ratio_percent: float = 0.0

    html_size_bytes: int = 0
    resources: ResourceCounts = Field(default_factory=ResourceCounts)
    images: ImageStats = Field(default_factory=ImageStats)
    structure: StructureFlags = Field(default_factory=StructureFlags)
    meta: MetaFlags = Field(default_factory=MetaFlags)
    security: SecurityFlags = Field(default_factory=SecurityFlags)
    accessibility: AccessibilityFlags = Field(default_factory=AccessibilityFlags)

    has_structured_data: bool = False
    has_canonical: bool = False
    has_analytics: bool = False
