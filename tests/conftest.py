# tests/conftest.py

import pytest
import requests

from app.config import ProxyConfig, settings
from models.feature_models import (
    AccessibilityFlags,
    ContentMetrics,
    FeatureRecord,
    HeadingCounts,
    ImageStats,
    MetaFlags,
    ResourceCounts,
)

JSON_PROXY = "https://relay.test/get"
RAW_PROXY = "https://raw-relay.test/"


class FakeResponse:
    """requests.Response の必要な部分だけを真似るテスト用レスポンス。"""

    def __init__(self, status_code=200, text="", json_data=None):
        self.status_code = status_code
        self.text = text
        self._json = json_data

    def json(self):
        if self._json is None:
            raise ValueError("No JSON object could be decoded")
        return self._json

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.exceptions.HTTPError(f"{self.status_code} Error")


@pytest.fixture
def fake_response():
    return FakeResponse


@pytest.fixture(autouse=True)
def test_settings(monkeypatch):
    """テスト中は架空のプロキシ2件（json → raw の順）を使い、Moz は無効にする。"""
    monkeypatch.setattr(
        settings,
        "proxies",
        [
            ProxyConfig(base_url=JSON_PROXY, mode="json"),
            ProxyConfig(base_url=RAW_PROXY, mode="raw"),
        ],
    )
    monkeypatch.setattr(settings, "moz_access_id", None)
    monkeypatch.setattr(settings, "moz_secret_key", None)
    return settings


@pytest.fixture
def perfect_record():
    """すべてのチェックに合格する FeatureRecord。"""
    return FeatureRecord(
        url="https://example.com/",
        title="A" * 45,
        description="D" * 140,
        html_size_bytes=50_000,
        load_time_ms=800,
        resources=ResourceCounts(css=3, js=4, inline_styles=1, inline_scripts=1),
        headings=HeadingCounts(h1=1, h2=3, h3=2),
        images=ImageStats(total=4, without_alt=0),
        meta=MetaFlags(
            has_viewport=True,
            has_charset=True,
            has_keywords=True,
            has_open_graph=True,
            has_favicon=True,
        ),
        content=ContentMetrics(
            word_count=800,
            text_to_html_ratio_percent=25.0,
            content_length=5000,
            has_structured_data=True,
            has_canonical=True,
            has_sitemap=True,
            has_custom_404=True,
            has_ssl=True,
            has_analytics=True,
        ),
        accessibility=AccessibilityFlags(
            has_aria_labels=True,
            has_alt_text=True,
            has_skip_links=True,
            has_lang_attribute=True,
            has_accessible_forms=True,
        ),
    )


SAMPLE_HTML = """<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="utf-8">
  <meta name="viewport" content="width=device-width, initial-scale=1">
  <meta name="description" content="A blog about technology and finance for curious readers.">
  <meta name="keywords" content="tech, money">
  <meta name="robots" content="index, follow">
  <meta name="author" content="Example Team">
  <meta property="og:title" content="Example Blog">
  <meta http-equiv="Content-Security-Policy" content="default-src 'self'">
  <title>Example Blog - Technology and Finance Notes</title>
  <link rel="icon" href="/favicon.ico">
  <link rel="canonical" href="https://example.com/blog/post">
  <link rel="stylesheet" href="/css/main.css">
  <link rel="stylesheet" href="/css/theme.css">
  <script async src="https://www.googletagmanager.com/gtag/js?id=G-TEST"></script>
  <script>window.dataLayer = window.dataLayer || []; function gtag(){dataLayer.push(arguments);} gtag('js', new Date());</script>
  <script type="application/ld+json">{"@type": "Article"}</script>
  <style>body { margin: 0; }</style>
</head>
<body>
  <a href="#main-content" class="skip">Skip to content</a>
  <header><nav aria-label="Main">
    <a href="/">Home</a>
    <a href="/about">About</a>
    <a href="https://twitter.com/example" rel="nofollow noopener">Twitter</a>
    <a href="mailto:hello@example.com">Mail</a>
  </nav></header>
  <main id="main-content">
    <h1>Technology notes</h1>
    <h2>First</h2>
    <h2>Second</h2>
    <h3>Detail</h3>
    <p style="color: red">We write about technology and finance.</p>
    <img src="/a.png" alt="Chart">
    <img src="/b.png" alt="">
    <img src="/c.png">
    <a href="https://partner.org/page">Partner</a>
    <form>
      <label for="email">Email</label>
      <input id="email" type="email">
      <input type="submit" value="Send">
    </form>
  </main>
  <footer>Footer</footer>
</body>
</html>
"""


@pytest.fixture
def sample_html():
    return SAMPLE_HTML
