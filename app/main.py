"""FastAPI application entrypoint. No business logic; only wiring and logging."""

from dotenv import load_dotenv

load_dotenv()

from fastapi import FastAPI

from app.api import functions
from app.api.v1 import router as v1_router
from app.core.config import settings
from app.core.logging import configure_logging

configure_logging()

app = FastAPI(
    title="Plant Access API",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

app.include_router(v1_router, prefix=settings.API_V1_PREFIX)
# CORS for privileged functions is answered by the functions router itself
app.include_router(functions.router, prefix=settings.FUNCTIONS_PREFIX, tags=["functions"])


@app.get("/")
def root() -> dict[str, str]:
    """Root route; minimal payload for discovery."""
    return {"message": "Plant Access API"}
