# app/api/routes.py
from __future__ import annotations

import logging
from typing import List

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

from agents.scoring_agent import score_all
from app.graph.lg_workflow import run_analysis
from models.analysis_models import AnalysisResult
from models.feature_models import FeatureRecord
from models.score_models import ScoreBundle
from services.errors import AnalysisError, InvalidInputError

logger = logging.getLogger(__name__)

router = APIRouter()


# --------- Request / Response モデル ---------


class AnalyzeRequest(BaseModel):
    url: str


class AnalyzeResponse(BaseModel):
    result: AnalysisResult
    progress_messages: List[str] = []


# --------- エンドポイント ---------


@router.post("/analyze", response_model=AnalyzeResponse)
def api_analyze(payload: AnalyzeRequest) -> AnalyzeResponse:
    """
    1ページ分の解析をまとめて実行するメインAPI。

    1) URL 検証
    2) プロキシ経由で取得 → HTML パース
    3) sitemap / 404 プローブ、リンク分析
    4) スコアリング

    失敗時はエラーメッセージ1件だけを返す（部分的な結果は返さない）。
    """
    logger.info("[api.analyze] start url=%s", payload.url)

    try:
        state = run_analysis(payload.url)
    except InvalidInputError as e:
        logger.info("[api.analyze] invalid input url=%s", payload.url)
        raise HTTPException(status_code=422, detail=e.message)
    except AnalysisError as e:
        logger.warning("[api.analyze] failed url=%s error=%s", payload.url, e.message)
        raise HTTPException(status_code=502, detail=e.message)

    logger.info(
        "[api.analyze] done url=%s nodes=%s",
        payload.url,
        state.get("current_node"),
    )

    return AnalyzeResponse(
        result=state["result"],
        progress_messages=state.get("progress_messages", []),
    )


@router.post("/score", response_model=ScoreBundle)
def api_score(record: FeatureRecord) -> ScoreBundle:
    """
    取得済みの FeatureRecord を直接採点するシンプルAPI。
    スコアリングエンジン単体の動作確認用。
    """
    logger.info("[api.score] url=%s", record.url or "(none)")
    return score_all(record)
