import asyncio
from contextlib import asynccontextmanager
from datetime import timedelta

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from shorturl_app.config import settings
from shorturl_app.api.v1 import urls, redirect
from shorturl_app.dependencies import get_url_store, get_event_logger
from shorturl_app.middleware.access_log import AccessLogMiddleware
from shorturl_app.services.exceptions import ShortURLError
from shorturl_app.services.url_service import URLService
from shorturl_app.sweeper.expiry_worker import ExpirySweeper


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Start the expiry sweeper (if enabled) and flush pending log events on shutdown"""
    sweeper = None
    sweeper_task = None
    if settings.expired_retention_minutes is not None:
        service = URLService(store=get_url_store(), events=get_event_logger())
        sweeper = ExpirySweeper(
            service,
            retention=timedelta(minutes=settings.expired_retention_minutes),
            interval=settings.sweep_interval_seconds,
        )
        sweeper_task = asyncio.create_task(sweeper.start())

    yield

    if sweeper_task is not None:
        sweeper.stop()
        sweeper_task.cancel()
        await sweeper_task
    await get_event_logger().aclose()


# Create FastAPI app
app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="A URL shortener service with click analytics built with FastAPI",
    debug=settings.debug,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)
# Added last so it wraps CORS and also logs preflight responses
app.add_middleware(AccessLogMiddleware, logger_provider=get_event_logger, stack=settings.log_stack)


@app.exception_handler(ShortURLError)
async def short_url_error_handler(request: Request, exc: ShortURLError):
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(status_code=exc.status_code, content={"error": exc.detail})


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Malformed bodies are client errors (400), named after the offending field"""
    messages = {"url": "Invalid URL", "validity": "Invalid validity", "shortcode": "Invalid shortcode"}
    message = "Invalid request body"
    for error in exc.errors():
        field = next((part for part in error.get("loc", ()) if part in messages), None)
        if field:
            message = messages[field]
            break
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"error": message})


@app.get("/")
def read_root():
    """Root endpoint with API information"""
    return {
        "message": f"Welcome to {settings.app_name}",
        "version": settings.app_version,
        "docs": "/docs",
    }


@app.get("/health")
def health_check():
    """Health check endpoint"""
    return {"status": "healthy", "environment": settings.environment}


######## Include routers (redirect last: it matches any single path segment)
app.include_router(urls.router)
app.include_router(redirect.router)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=settings.host, port=settings.port)
