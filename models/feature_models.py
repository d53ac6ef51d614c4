# models/feature_models.py

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class _Frozen(BaseModel):
    """取得時点のスナップショットなので、生成後は変更させない。"""

    model_config = ConfigDict(frozen=True)


class ResourceCounts(_Frozen):
    css: int = Field(0, ge=0)
    js: int = Field(0, ge=0)
    inline_styles: int = Field(0, ge=0)
    inline_scripts: int = Field(0, ge=0)


class HeadingCounts(_Frozen):
    h1: int = Field(0, ge=0)
    h2: int = Field(0, ge=0)
    h3: int = Field(0, ge=0)


class ImageStats(_Frozen):
    """
    画像の alt 属性の集計。
    - without_alt: alt 属性そのものが無い img の数（alt="" は「あり」扱い）
    """

    total: int = Field(0, ge=0)
    without_alt: int = Field(0, ge=0)

    @model_validator(mode="after")
    def _check_without_alt(self) -> "ImageStats":
        if self.without_alt > self.total:
            raise ValueError("without_alt must not exceed total")
        return self

    @property
    def with_alt(self) -> int:
        return self.total - self.without_alt


class StructureFlags(_Frozen):
    has_doctype: bool = False
    has_html_lang: bool = False
    has_main_tag: bool = False
    has_header_tag: bool = False
    has_footer_tag: bool = False
    has_nav_tag: bool = False


class MetaFlags(_Frozen):
    has_viewport: bool = False
    has_charset: bool = False
    has_keywords: bool = False
    has_open_graph: bool = False
    has_favicon: bool = False


class ContentMetrics(_Frozen):
    """本文まわりの指標と、サイト単位のテクニカルな有無フラグ。"""

    word_count: int = Field(0, ge=0)
    text_to_html_ratio_percent: float = Field(0.0, ge=0)
    # 本文テキストの文字数（トラフィック推定で使用）
    content_length: int = Field(0, ge=0)
    has_structured_data: bool = False
    has_canonical: bool = False
    has_sitemap: bool = False
    has_custom_404: bool = False
    has_ssl: bool = False
    has_analytics: bool = False


class SecurityFlags(_Frozen):
    """
    セキュリティ系ヘッダの宣言有無。
    プロキシ経由では対象サイトのレスポンスヘッダが見えないため、
    <meta http-equiv> での宣言から判定する。
    """

    has_hsts: bool = False
    has_x_frame: bool = False
    has_csp: bool = False
    has_xss: bool = False


class AccessibilityFlags(_Frozen):
    has_aria_labels: bool = False
    has_alt_text: bool = False
    has_skip_links: bool = False
    has_lang_attribute: bool = False
    has_accessible_forms: bool = False


class InternalLinks(_Frozen):
    total: int = Field(0, ge=0)
    unique: int = Field(0, ge=0)
    paths: List[str] = Field(default_factory=list)


class ExternalLinks(_Frozen):
    """外部リンク集計。social / nofollow は内部リンクも含む http(s) リンク全体の件数。"""

    total: int = Field(0, ge=0)
    unique: int = Field(0, ge=0)
    social: int = Field(0, ge=0)
    nofollow: int = Field(0, ge=0)
    domains: List[str] = Field(default_factory=list)

    @model_validator(mode="after")
    def _check_unique(self) -> "ExternalLinks":
        if self.unique > self.total:
            raise ValueError("unique external domains must not exceed total external links")
        return self


class LinkMetrics(_Frozen):
    """リンク集計の正規形。内部リンクはパス単位、外部リンクはホスト単位でユニーク化する。"""

    internal: InternalLinks = Field(default_factory=InternalLinks)
    external: ExternalLinks = Field(default_factory=ExternalLinks)


class FeatureRecord(_Frozen):
    """
    1ページ分の観測結果（特徴量）のスナップショット。
    スコアリングエンジンへの唯一の入力。

    すべてのフィールドにデフォルト（0 / False / None）があるため、
    抽出に失敗した項目があってもレコードとしては常に有効で、
    スコアは下がるだけでエラーにはならない。
    """

    url: str = ""
    title: Optional[str] = None
    description: Optional[str] = None

    html_size_bytes: int = Field(0, ge=0)
    load_time_ms: int = Field(0, ge=0)

    resources: ResourceCounts = Field(default_factory=ResourceCounts)
    headings: HeadingCounts = Field(default_factory=HeadingCounts)
    images: ImageStats = Field(default_factory=ImageStats)
    structure: StructureFlags = Field(default_factory=StructureFlags)
    meta: MetaFlags = Field(default_factory=MetaFlags)
    content: ContentMetrics = Field(default_factory=ContentMetrics)
    security: SecurityFlags = Field(default_factory=SecurityFlags)
    accessibility: AccessibilityFlags = Field(default_factory=AccessibilityFlags)
    links: LinkMetrics = Field(default_factory=LinkMetrics)

    @property
    def title_length(self) -> int:
        return len(self.title or "")

    @property
    def description_length(self) -> int:
        return len(self.description or "")
