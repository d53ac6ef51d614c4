# services/moz_client.py
from __future__ import annotations

import logging
from typing import Optional

import requests
from pydantic import ValidationError

from app.config import settings
from models.analysis_models import DomainMetrics

logger = logging.getLogger(__name__)


def get_domain_metrics(url: str, timeout: Optional[float] = None) -> DomainMetrics:
    """
    Moz Links API (url_metrics) からドメイン/ページオーソリティを取得する。

    - MOZ_ACCESS_ID / MOZ_SECRET_KEY が未設定なら 0 埋めで返す
    - API エラーや想定外のレスポンス形式でも 0 埋めで返す（解析全体は止めない）
    """
    access_id = settings.moz_access_id
    secret_key = settings.moz_secret_key

    if not access_id or not secret_key:
        logger.info("[moz] credentials are not set. access_id=%s secret_key=%s", bool(access_id), bool(secret_key))
        return DomainMetrics()

    try:
        resp = requests.post(
            settings.moz_api_url,
            json={"targets": [url]},
            auth=(access_id, secret_key),
            timeout=timeout if timeout is not None else settings.moz_timeout,
        )
        resp.raise_for_status()
        data = resp.json()
    except (requests.exceptions.RequestException, ValueError) as e:
        logger.warning("[moz] Failed to fetch metrics url=%s error=%s", url, e)
        return DomainMetrics()

    results = data.get("results") if isinstance(data, dict) else None
    if not isinstance(results, list) or not results:
        logger.warning("[moz] results is empty or not a list. type=%s", type(results).__name__)
        return DomainMetrics()

    item = results[0]
    if not isinstance(item, dict):
        logger.warning("[moz] unexpected result item. type=%s", type(item).__name__)
        return DomainMetrics()

    try:
        return DomainMetrics(
            domain_authority=item.get("domain_authority") or 0,
            page_authority=item.get("page_authority") or 0,
            spam_score=item.get("spam_score") or 0,
        )
    except (KeyError, TypeError, AttributeError, ValidationError) as e:
        logger.warning("[moz] Invalid metrics payload url=%s error=%s", url, e)
        return DomainMetrics()
