"""
Vendor Onboarding — FastAPI Backend
Registration endpoint for the marketplace vendor wizard.
"""

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from vendor_api.config import settings
from vendor_api.db.database import create_tables, engine
from vendor_api.routers import vendor_applications

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events."""
    await create_tables()
    logger.info("🚀 Vendor onboarding API starting...")
    yield
    await engine.dispose()
    logger.info("🛑 Vendor onboarding API shut down.")


app = FastAPI(
    title="Vendor Onboarding API",
    description="Marketplace vendor registration backend",
    version="1.0.0",
    lifespan=lifespan,
)

# ── CORS ───────────────────────────────────────────────────
app.add_middleware(
    CORSMiddleware,
    allow_origins=[o.strip() for o in settings.cors_origins.split(",") if o.strip()],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ── Routers ────────────────────────────────────────────────
app.include_router(
    vendor_applications.router,
    prefix="/api/vendor-onboarding",
    tags=["Vendor Onboarding"],
)


@app.exception_handler(Exception)
async def unhandled_exception(request: Request, exc: Exception):
    logger.exception("Error processing %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=500,
        content={"success": False, "message": "Internal server error. Please try again later."},
    )


@app.get("/health")
async def health_check():
    return {"status": "healthy", "service": "Vendor Onboarding API"}


def main() -> None:
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    uvicorn.run(app, host="0.0.0.0", port=8000, log_level=settings.log_level.lower())


if __name__ == "__main__":
    main()
