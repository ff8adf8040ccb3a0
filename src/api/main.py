import logging
import sys
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI

from src.api.deps import get_rules, get_settings
from src.api.routes import discounts

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler for startup/shutdown."""
    settings = get_settings()

    # Load rules on startup (fail-fast)
    try:
        rules = get_rules(settings)
    except (FileNotFoundError, ValueError) as e:
        print(f"CRITICAL: Rules load failed: {e}", file=sys.stderr)
        sys.exit(1)

    logging.basicConfig(level=rules.logging.level)
    logger.info("Rules loaded from %s", settings.rules_path)

    yield


app = FastAPI(
    title="Daisychain Discount Function",
    version="0.1.0",
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

app.include_router(discounts.router, prefix="/api/discounts", tags=["Discounts"])


@app.get("/health")
def health_check() -> dict[str, Any]:
    """Health check endpoint."""
    return {"status": "ok", "service": "discounts"}
