# app/main.py
from fastapi import FastAPI

from app.config import settings
from app.logging_setup import setup_logging
from app.api.routes import router as api_router

setup_logging(settings.log_level)

app = FastAPI(title="Site Score Analyzer")

app.include_router(api_router, prefix="/api")
