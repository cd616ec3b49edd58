from __future__ import annotations

from typing import Any, Dict

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger

from jewelgst.api.router import api_router
from jewelgst.config import settings
from jewelgst.database.postgres_client import get_postgres_client
from jewelgst.logging_setup import configure_logging


app = FastAPI(
    title="JewelGST Backend",
    version="1.0.0",
    description="GST reporting (HSN summary, GSTR-1 export) for jewellery shops",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api_router)


@app.on_event("startup")
async def _startup() -> None:
    configure_logging()
    logger.info("jewelgst starting (env={})", settings.APP_ENV)


@app.get("/health")
async def health() -> Dict[str, Any]:
    status: Dict[str, Any] = {"ok": True, "service": "jewelgst-backend"}

    try:
        get_postgres_client().ping()
        status["postgres"] = True
    except Exception as e:
        logger.warning("Postgres health check failed: {}", str(e))
        status["postgres"] = False

    return status
