"""
Hamara Shehar Civic API - Main Application
Issue reporting, department workflow and location search backend
"""
import logging
from contextlib import asynccontextmanager
from fastapi import Depends, FastAPI, Request
from fastapi.exception_handlers import http_exception_handler
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.config import settings
from app.core.rate_limit import rate_limiter
from app.api.v1.router import api_router
from app.api import locations
from app.services.geocoding_service import geocoding_service
from app.services.issue_store import IssueStore
from app.services.seed_data import build_demo_issues, build_demo_users
from app.services.user_service import UserDirectory

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s"
)
logger = logging.getLogger(__name__)

AVAILABLE_ENDPOINTS = [
    "GET /",
    "GET /api/find-location",
    "GET /api/v1/issues/",
    "GET /api/v1/departments/"
]


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifecycle"""
    logger.info(f"🚀 {settings.APP_NAME} starting in {settings.ENVIRONMENT} mode")

    seed = settings.SEED_DEMO_DATA
    app.state.user_directory = UserDirectory(build_demo_users() if seed else [])
    app.state.issue_store = IssueStore(
        issues=build_demo_issues() if seed else [],
        latency=settings.STORE_LATENCY_SECONDS,
        one_vote_per_user=settings.ONE_VOTE_PER_USER
    )
    app.state.geocoding_service = geocoding_service
    logger.info(f"✓ Issue store ready with {len(app.state.issue_store.issues)} issues")

    yield

    logger.info("👋 Shutting down")


# FastAPI application
app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="""
    ## Hamara Shehar Civic API

    Citizens report municipal problems, vote on them and follow their
    resolution; authorities and NGOs track and resolve them.

    ### Features
    - Issue reporting with heuristic severity analysis and department routing
    - Filtering by category, status, text and distance
    - Votes, comments, status updates
    - Worker assignment, information requests, group sharing
    - Location search (OpenCage geocoding proxy)
    """,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    lifespan=lifespan,
    dependencies=[Depends(rate_limiter)]
)

# CORS Middleware (open in development)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=settings.ENVIRONMENT != "development",
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    logger.info(f"{request.method} {request.url.path}")
    return await call_next(request)


# Location search
app.include_router(locations.router, prefix="/api", tags=["Locations"])

# API Router
app.include_router(api_router, prefix="/api/v1")


# Root endpoint
@app.get("/", tags=["Root"])
async def root():
    """API status"""
    return {
        "status": "healthy",
        "message": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "environment": settings.ENVIRONMENT,
        "endpoints": {
            "locationSearch": "/api/find-location?q=:query",
            "issues": "/api/v1/issues/",
            "docs": "/docs"
        }
    }


@app.get("/health", tags=["Health"])
async def health_check():
    """Health check"""
    return {
        "status": "healthy",
        "environment": settings.ENVIRONMENT,
        "debug": settings.DEBUG
    }


@app.exception_handler(StarletteHTTPException)
async def not_found_handler(request: Request, exc: StarletteHTTPException):
    """Unknown routes get the JSON envelope; everything else keeps `detail`"""
    if exc.status_code == 404 and exc.detail == "Not Found":
        return JSONResponse(
            status_code=404,
            content={
                "success": False,
                "error": "Endpoint not found",
                "availableEndpoints": AVAILABLE_ENDPOINTS
            }
        )
    return await http_exception_handler(request, exc)


# Error handling
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Global error handler"""
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")

    content = {"success": False, "error": "Internal server error"}
    if not settings.is_production:
        content["message"] = str(exc)
    return JSONResponse(status_code=500, content=content)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "app.main:app",
        host="0.0.0.0",
        port=5000,
        reload=settings.DEBUG
    )
