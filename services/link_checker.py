# services/link_checker.py

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Dict, Iterable, List

import requests

from app.config import settings

logger = logging.getLogger(__name__)

MAX_REDIRECTS = 5


def is_broken(url: str, timeout: float) -> bool:
    """
    HEAD で1件だけ確認する。
    4xx/5xx・タイムアウト・通信エラーはすべて「リンク切れ」とみなす。
    """
    session = requests.Session()
    session.max_redirects = MAX_REDIRECTS
    try:
        resp = session.head(
            url,
            headers={"User-Agent": settings.user_agent},
            timeout=timeout,
            allow_redirects=True,
        )
        return resp.status_code >= 400
    except requests.exceptions.RequestException as e:
        logger.debug("[link_checker] url=%s error=%s", url, e.__class__.__name__)
        return True
    finally:
        session.close()


def find_broken_links(urls: Iterable[str]) -> List[str]:
    """
    複数 URL の死活を並列に確認し、すべて終わってから集計する。
    1件が遅くても他の確認は止まらない（各リクエストに個別のタイムアウト）。
    返り値は入力順のリンク切れ URL 一覧。
    """
    targets = list(dict.fromkeys(urls))
    if not targets:
        return []

    timeout = settings.link_check_timeout
    workers = max(1, min(settings.link_check_workers, len(targets)))
    outcomes: Dict[str, bool] = {}

    logger.info("[link_checker] Checking %s links workers=%s timeout=%s", len(targets), workers, timeout)

    with ThreadPoolExecutor(max_workers=workers) as pool:
        futures = {pool.submit(is_broken, url, timeout): url for url in targets}
        for fut in as_completed(futures):
            url = futures[fut]
            try:
                outcomes[url] = fut.result()
            except Exception as e:
                logger.warning("[link_checker] Unexpected error url=%s error=%s", url, e)
                outcomes[url] = True

    broken = [url for url in targets if outcomes.get(url)]
    logger.info("[link_checker] Done checked=%s broken=%s", len(targets), len(broken))
    return broken
