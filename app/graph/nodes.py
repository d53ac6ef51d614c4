# app/graph/nodes.py
from __future__ import annotations

import logging
from typing import List

from app.graph.lg_state import GraphState
from agents.analyzer_agent import analyze_links, build_analysis_result
from agents.parser_agent import build_feature_record, fetch_and_parse
from services.crawler import ProbeResults, probe_secondary, validate_url

logger = logging.getLogger(__name__)


def _log_progress(state: GraphState, node: str, message: str) -> GraphState:
    """
    進捗ログを state に積むユーティリティ。
    state は dict (GraphState) として扱う。
    """
    line = f"[{node}] {message}"

    messages: List[str] = list(state.get("progress_messages", []))
    messages.append(line)

    state["progress_messages"] = messages
    state["current_node"] = node

    logger.info(line)
    return state


# ---------- Validate ノード ----------


def validate_node(state: GraphState) -> GraphState:
    """URL の形式チェック。不正なら InvalidInputError がそのまま上がる。"""
    state = _log_progress(state, "validate", "start: validating url")
    state["url"] = validate_url(state["url"])
    state = _log_progress(state, "validate", "done: url is valid")
    return state


# ---------- Fetch ノード ----------


def fetch_node(state: GraphState) -> GraphState:
    """
    Fetch ノード:
    プロキシ経由で HTML を取得し、PageDetails に変換する。
    全プロキシ失敗 / 空コンテンツは例外として上に伝える。
    """
    state = _log_progress(state, "fetch", "start: fetching page via proxies")

    fetched, details = fetch_and_parse(state["url"])
    state["fetched"] = fetched
    state["details"] = details

    state = _log_progress(
        state,
        "fetch",
        f"done: fetched {len(fetched.html)} chars in {fetched.load_time_ms} ms via {fetched.proxy}",
    )
    return state


# ---------- Enrich ノード ----------


def enrich_node(state: GraphState) -> GraphState:
    """
    Enrich ノード:
    sitemap / 404 のプローブ結果と取得時間を合わせて FeatureRecord を作り、
    リンク分析を行う。ここでの失敗は解析全体を止めない。
    """
    state = _log_progress(state, "enrich", "start: secondary probes and link analysis")

    fetched = state["fetched"]
    details = state["details"]

    try:
        probes = probe_secondary(fetched.url)
    except Exception as e:
        logger.warning("[enrich_node] secondary probes failed url=%s error=%s", fetched.url, e)
        probes = ProbeResults()
    state["probes"] = probes

    record = build_feature_record(details, load_time_ms=fetched.load_time_ms, probes=probes)
    state["features"] = record

    state["link_analysis"] = analyze_links(details, record)

    state = _log_progress(
        state,
        "enrich",
        f"done: sitemap={probes.has_sitemap} custom_404={probes.has_custom_404} "
        f"internal={record.links.internal.unique} external={record.links.external.unique}",
    )
    return state


# ---------- Score ノード ----------


def score_node(state: GraphState) -> GraphState:
    """Score ノード: スコアリングエンジンを実行して AnalysisResult を state に詰める。"""
    state = _log_progress(state, "score", "start: scoring")

    result = build_analysis_result(
        details=state["details"],
        record=state["features"],
        link_analysis=state["link_analysis"],
    )
    state["result"] = result

    state = _log_progress(
        state,
        "score",
        f"done: performance={result.performance.score} seo={result.seo.score} "
        f"content_quality={result.content_quality.score}",
    )
    return state
