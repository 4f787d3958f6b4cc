from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import FileResponse
from fastapi.staticfiles import StaticFiles

from buildproxy.config import Settings
from buildproxy.router import router as build_router
from buildproxy.upstream import NutrientBuildBackend
from buildproxy.utils.error_handling import internal_error_response
from buildproxy.utils.http_client import HTTPClientFactory, ServiceType, lifespan_http_clients
from buildproxy.utils.logging_config import get_logger


logger = get_logger("buildproxy.app")

static_dir = Path(__file__).parent / "buildproxy" / "static"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Load settings and create the upstream client for the lifetime of the app."""
    settings = Settings.from_env()
    factory = HTTPClientFactory.from_settings(settings)

    app.state.settings = settings
    app.state.backend = NutrientBuildBackend(
        factory.create_client(ServiceType.NUTRIENT),
        settings.upstream_url,
    )

    logger.info(f"Starting build proxy with {settings!r}")
    if not settings.is_configured:
        logger.warning("NUTRIENT_API_KEY is not set; /api/build will answer 500 until it is")

    async with lifespan_http_clients(factory):
        yield


app = FastAPI(title="Build Proxy", lifespan=lifespan)

app.include_router(build_router)

app.mount("/static", StaticFiles(directory=str(static_dir)), name="static")


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Answer anything that escapes a route with a generic 500."""
    logger.exception(f"Unhandled error on {request.url.path}")
    return internal_error_response()


@app.get("/", response_class=FileResponse)
async def demo_page():
    """Serve the demo page."""
    page = static_dir / "index.html"
    if not page.exists():
        raise HTTPException(status_code=404, detail="Demo page not found")
    return FileResponse(page, media_type="text/html")


@app.get("/ping")
async def general_ping():
    return {"success": True, "data": "PONG!"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("app:app", host="0.0.0.0", port=8000)
