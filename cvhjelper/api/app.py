"""FastAPI application."""

import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse
from fastapi.staticfiles import StaticFiles
from slowapi.errors import RateLimitExceeded

from cvhjelper.api.errors import APIError
from cvhjelper.api.limiter import limiter
from cvhjelper.config import settings
from cvhjelper.logging_config import configure_logging

logger = logging.getLogger(__name__)

ALLOWED_ORIGINS = [origin.strip() for origin in settings.cors_origins.split(",") if origin.strip()]

FRONTEND_DIR = Path(__file__).parent.parent.parent / "frontend" / "dist"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Configure logging on startup."""
    configure_logging()
    logger.info(f"CV Hjelper API starting (default provider: {settings.default_provider})")
    yield


app = FastAPI(
    title="CV Hjelper API",
    description="AI-powered CV analysis and customization",
    version="0.1.0",
    lifespan=lifespan,
)

app.state.limiter = limiter


@app.exception_handler(RateLimitExceeded)
async def rate_limit_handler(request: Request, exc: RateLimitExceeded):
    """Return 429 with a clear message when rate limit is exceeded."""
    return JSONResponse(
        status_code=429,
        content={"detail": f"Rate limit exceeded: {exc.detail}"},
    )


@app.exception_handler(APIError)
async def api_error_handler(request: Request, exc: APIError):
    """Render route errors as {error, details?, logs?, timeTaken?}."""
    if exc.status_code >= 500:
        logger.error(f"{request.url.path} failed: {exc.error} ({exc.details})")
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict(),
        headers={"Cache-Control": "no-cache, no-store, must-revalidate"},
    )


app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST"],
    allow_headers=["Content-Type", "Authorization"],
)


# Import and include routers
from cvhjelper.api.routes import analysis, catalog, customization, diagnostics, documents  # noqa: E402

app.include_router(analysis.router, tags=["Analysis"])
app.include_router(customization.router, prefix="/cv-customization", tags=["Customization"])
app.include_router(documents.router, tags=["Documents"])
app.include_router(catalog.router, tags=["Catalog"])
app.include_router(diagnostics.router, prefix="/diagnostics", tags=["Diagnostics"])


@app.get("/health")
def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}


def mount_frontend(app: FastAPI, build_dir: Path) -> None:
    """Serve the built frontend; unknown paths fall back to index.html for client-side routing."""
    index = build_dir / "index.html"
    app.mount("/assets", StaticFiles(directory=build_dir / "assets"), name="assets")

    @app.get("/{full_path:path}", include_in_schema=False)
    async def frontend(full_path: str):
        target = (build_dir / full_path).resolve()
        if target.is_file() and target.is_relative_to(build_dir.resolve()):
            return FileResponse(target)
        return FileResponse(index)


if FRONTEND_DIR.exists():
    mount_frontend(app, FRONTEND_DIR)
