"""
Main FastAPI application serving the place-info and oauth functions
"""
import logging
from contextlib import asynccontextmanager
from datetime import datetime

import httpx
import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.api.v1.main import router as v1_router
from app.config import settings
from app.core.errors import ServiceError
from app.services.place_info_service import RefreshRegistry

# Set up logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager - handles startup and shutdown"""
    logger.info("Starting place API...")
    app.state.http_client = httpx.AsyncClient(timeout=settings.HTTP_TIMEOUT_SECONDS)
    app.state.refresh_registry = RefreshRegistry()
    if not settings.SUPABASE_URL or not settings.SUPABASE_ANON_KEY:
        logger.warning("⚠️  SUPABASE_URL / SUPABASE_ANON_KEY not set, requests will fail")

    yield  # Application runs here

    logger.info("Shutting down place API...")
    await app.state.http_client.aclose()


app = FastAPI(
    title="Place API",
    description="Kakao sign-in and cached place metadata",
    version="1.0.0",
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ALLOW_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["authorization", "x-client-info", "apikey", "content-type"],
)


@app.exception_handler(ServiceError)
async def service_error_handler(request: Request, exc: ServiceError):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=exc.body())


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled error on {request.method} {request.url.path}: {exc}", exc_info=True)
    return JSONResponse(status_code=500, content={"message": str(exc)})


# Same paths the Supabase edge functions were served under
app.include_router(v1_router, prefix="/functions/v1")


@app.get("/health")
async def health_check():
    return {
        "status": "healthy",
        "message": "Place API is running",
        "timestamp": datetime.now().isoformat(),
        "version": "1.0.0"
    }


@app.get("/")
async def root():
    return {
        "message": "Welcome to Place API",
        "health": "/health",
        "docs": "/docs",
        "api": "/functions/v1"
    }


def serve():
    uvicorn.run("app.main:app", host=settings.API_HOST, port=settings.API_PORT, reload=settings.API_RELOAD)


if __name__ == "__main__":
    serve()
