# app/config.py

from functools import lru_cache
from typing import List, Literal

from pydantic import BaseModel
from pydantic_settings import BaseSettings, SettingsConfigDict


class ProxyConfig(BaseModel):
    """
    CORS リレー（プロキシ）1件分の設定。
    - base_url: `<base_url>?url=<エンコード済みURL>` の形で呼び出す
    - mode: "json" は allorigins 形式（contents フィールドに本文）、
            "raw" は本文をそのまま返すパススルー形式
    """

    base_url: str
    mode: Literal["json", "raw"] = "raw"


DEFAULT_PROXIES: List[ProxyConfig] = [
    ProxyConfig(base_url="https://api.allorigins.win/get", mode="json"),
    ProxyConfig(base_url="https://api.allorigins.win/raw", mode="raw"),
    ProxyConfig(base_url="https://corsproxy.io/", mode="raw"),
]


class Settings(BaseSettings):
    """
    アプリ全体で使う設定クラス。
    .env から環境変数を読み込み、属性として参照できるようにする。
    """

    # ---------- 取得（プロキシ経由） ----------
    # 上から順に試し、最初に成功したものを採用する
    # PROXIES='[{"base_url": "...", "mode": "json"}]' のように JSON で上書き可能
    proxies: List[ProxyConfig] = list(DEFAULT_PROXIES)

    fetch_timeout: float = 10.0
    # sitemap / 404 プローブ用（ベストエフォートなので短め）
    secondary_timeout: float = 5.0

    user_agent: str = "site-score-analyzer/0.1 (+dev)"

    # ---------- リンク死活チェック ----------
    link_check_enabled: bool = True
    link_check_timeout: float = 5.0
    link_check_workers: int = 10

    # ---------- Moz（任意） ----------
    # MOZ_ACCESS_ID / MOZ_SECRET_KEY を .env に書く想定
    # 未設定ならドメイン指標はすべて 0 で返す
    moz_access_id: str | None = None
    moz_secret_key: str | None = None
    moz_api_url: str = "https://lsapi.seomoz.com/v2/url_metrics"
    moz_timeout: float = 10.0

    # ---------- ログ ----------
    log_level: str = "INFO"

    # ---------- Pydantic Settings 設定 ----------
    model_config = SettingsConfigDict(
        env_file=".env",            # .env を読む
        env_file_encoding="utf-8",
        extra="ignore",             # 定義外の環境変数があっても無視（エラーにしない）
    )


@lru_cache
def get_settings() -> Settings:
    """Settings をシングルトン的に使うためのヘルパ。"""
    return Settings()


# 他のモジュールからは `from app.config import settings` で利用
settings = get_settings()
