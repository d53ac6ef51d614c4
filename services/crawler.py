# services/crawler.py

from __future__ import annotations

import logging
import time
import uuid
from typing import Optional, Tuple
from urllib.parse import urljoin, urlparse

import requests
from pydantic import BaseModel

from app.config import ProxyConfig, settings
from services.errors import EmptyContentError, FetchFailureError, InvalidInputError

logger = logging.getLogger(__name__)

SITEMAP_MARKERS = ("<urlset", "<sitemapindex")


class FetchedPage(BaseModel):
    url: str
    html: str
    load_time_ms: int
    proxy: str


class ProbeResults(BaseModel):
    """sitemap / 404 のベストエフォート確認結果。失敗はすべて False 扱い。"""
    has_sitemap: bool = False
    has_custom_404: bool = False


def _headers() -> dict:
    return {"User-Agent": settings.user_agent}


def validate_url(url: str) -> str:
    """
    スキーム付きの絶対 URL かどうかを検証する。
    ネットワークアクセスの前に呼び、不正なら InvalidInputError。
    """
    value = (url or "").strip()
    try:
        parsed = urlparse(value)
        host = parsed.hostname
    except ValueError:
        host = None
        parsed = None
    if parsed is None or parsed.scheme not in ("http", "https") or not host:
        raise InvalidInputError(
            "Invalid URL format. Please enter a valid URL including http:// or https://"
        )
    return value


def _relay_get(proxy: ProxyConfig, target_url: str, timeout: float) -> requests.Response:
    # `<base>?url=<エンコード済み>`。エンコードは requests の params に任せる
    return requests.get(
        proxy.base_url,
        params={"url": target_url},
        headers=_headers(),
        timeout=timeout,
    )


def _extract_body(proxy: ProxyConfig, resp: requests.Response) -> Tuple[Optional[str], Optional[int]]:
    """
    プロキシのレスポンスから (本文, 対象サイトのステータス) を取り出す。
    - json: allorigins 形式の {"contents": ..., "status": {"http_code": ...}}
    - raw : 本文そのもの。ステータスはリレーのものをそのまま使う
    """
    if proxy.mode == "json":
        data = resp.json()
        if not isinstance(data, dict):
            return None, None
        contents = data.get("contents")
        status_info = data.get("status")
        status = status_info.get("http_code") if isinstance(status_info, dict) else None
        return (contents if isinstance(contents, str) else None), status
    return resp.text, resp.status_code


def fetch_via_proxies(url: str) -> FetchedPage:
    """
    設定されたプロキシを上から順に試し、最初に本文が取れたものを返す。
    並列では投げない（単純なフォールバックチェーン）。

    - ステータスが 200 以外 / タイムアウト / 通信エラー → 次のプロキシへ
    - 200 だが本文が空 → 次のプロキシへ（全滅なら EmptyContentError）
    - すべて失敗 → FetchFailureError
    """
    target = validate_url(url)
    empty_seen = False
    last_error: Optional[str] = None

    for proxy in settings.proxies:
        logger.info("[crawler] Fetching via proxy=%s url=%s", proxy.base_url, target)
        started = time.perf_counter()
        try:
            resp = _relay_get(proxy, target, settings.fetch_timeout)
        except requests.exceptions.RequestException as e:
            last_error = f"{e.__class__.__name__}"
            logger.warning("[crawler] Proxy failed proxy=%s error=%s", proxy.base_url, e)
            continue

        if resp.status_code != 200:
            last_error = f"HTTP {resp.status_code}"
            logger.warning("[crawler] Non-200 status proxy=%s status=%s", proxy.base_url, resp.status_code)
            continue

        try:
            html, _ = _extract_body(proxy, resp)
        except ValueError as e:
            # JSON でないレスポンス
            last_error = "invalid JSON envelope"
            logger.warning("[crawler] Invalid envelope proxy=%s error=%s", proxy.base_url, e)
            continue

        load_time_ms = int((time.perf_counter() - started) * 1000)

        if not html or not html.strip():
            empty_seen = True
            logger.warning("[crawler] Empty body proxy=%s", proxy.base_url)
            continue

        logger.info(
            "[crawler] Fetched url=%s proxy=%s length=%s load_time_ms=%s",
            target,
            proxy.base_url,
            len(html),
            load_time_ms,
        )
        return FetchedPage(url=target, html=html, load_time_ms=load_time_ms, proxy=proxy.base_url)

    if empty_seen:
        raise EmptyContentError("Failed to fetch website content: the page returned no content")
    raise FetchFailureError(
        f"Failed to fetch website content via all proxies ({last_error or 'no proxy configured'})"
    )


def fetch_secondary(url: str) -> Tuple[Optional[str], Optional[int]]:
    """
    sitemap / 404 プローブ用の軽量取得。
    プロキシを順に試し、対象サイトのステータスと本文を返す。
    何も取れなければ (None, None)。例外は外に出さない。
    """
    for proxy in settings.proxies:
        try:
            resp = _relay_get(proxy, url, settings.secondary_timeout)
            if proxy.mode == "json":
                if resp.status_code != 200:
                    continue
                body, status = _extract_body(proxy, resp)
            else:
                body, status = resp.text, resp.status_code
        except (requests.exceptions.RequestException, ValueError) as e:
            logger.warning("[crawler] Secondary fetch failed proxy=%s url=%s error=%s", proxy.base_url, url, e)
            continue
        if body is None and status is None:
            continue
        return body, status
    return None, None


def _origin(url: str) -> str:
    parsed = urlparse(url)
    return f"{parsed.scheme}://{parsed.netloc}"


def check_sitemap(url: str) -> bool:
    body, status = fetch_secondary(urljoin(_origin(url), "/sitemap.xml"))
    if not body or (status is not None and status != 200):
        return False
    lowered = body.lower()
    return any(marker in lowered for marker in SITEMAP_MARKERS)


def check_custom_404(url: str) -> bool:
    """
    存在しないはずのパスを取得し、404 を返しつつ HTML 本文があれば
    カスタム 404 ページありとみなす。
    """
    probe_url = urljoin(_origin(url), f"/{uuid.uuid4().hex}-not-found")
    body, status = fetch_secondary(probe_url)
    if status != 404 or not body:
        return False
    return "<html" in body.lower() or "<body" in body.lower()


def probe_secondary(url: str) -> ProbeResults:
    """sitemap と カスタム404 をまとめて確認する。どちらも失敗しても False で返すだけ。"""
    results = ProbeResults(
        has_sitemap=check_sitemap(url),
        has_custom_404=check_custom_404(url),
    )
    logger.info(
        "[crawler] Secondary probes url=%s sitemap=%s custom_404=%s",
        url,
        results.has_sitemap,
        results.has_custom_404,
    )
    return results
