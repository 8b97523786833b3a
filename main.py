"""
Household Hub — Entry Point.

Single entry point: `python main.py` starts the HTTP API.
"""

import logging

from src.config import settings

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)

import uvicorn

if __name__ == "__main__":
    uvicorn.run("src.api.app:app", host=settings.API_HOST, port=settings.API_PORT)
