# app/graph/lg_workflow.py
from __future__ import annotations

import logging

from app.graph.lg_state import GraphState, create_initial_state
from app.graph import nodes

logger = logging.getLogger(__name__)


def run_analysis(url: str) -> GraphState:
    """
    /api/analyze 用のシンプルな直列ワークフロー。

    validate → fetch → enrich → score

    validate / fetch で発生した AnalysisError はそのまま呼び出し元へ伝わる
    （解析全体が中断される）。enrich 内の失敗は各ノードで吸収される。
    """
    logger.info("[lg_workflow] run_analysis start url=%s", url)

    state = create_initial_state(url=url)

    # 1) URL 検証（ネットワークアクセス前）
    state = nodes.validate_node(state)

    # 2) プロキシ経由で取得 → HTML パース
    state = nodes.fetch_node(state)

    # 3) sitemap / 404 プローブ、特徴量の組み立て、リンク分析
    state = nodes.enrich_node(state)

    # 4) スコアリング → AnalysisResult
    state = nodes.score_node(state)

    logger.info(
        "[lg_workflow] run_analysis done url=%s current_node=%s",
        url,
        state.get("current_node"),
    )
    return state
