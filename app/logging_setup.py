# app/logging_setup.py

import logging


def setup_logging(level: str = "INFO") -> None:
    """
    ルートロガーにコンソール出力のハンドラを1つだけ付ける。
    すでにハンドラがある場合（uvicorn 起動時など）は追加しない。
    """
    root = logging.getLogger()
    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(
            logging.Formatter(
                "[%(asctime)s] [%(levelname)s] %(name)s - %(message)s",
                "%Y-%m-%d %H:%M:%S",
            )
        )
        root.addHandler(handler)

    root.setLevel(level.upper())
