"""
FastAPI application factory.
Builds the application context, middleware, exception handlers and routers.
"""

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException
from contextlib import asynccontextmanager
from sqlalchemy.exc import SQLAlchemyError
from typing import Optional
import logging

from room_rental.config import Settings, get_settings
from room_rental.context import AppContext
from room_rental.database import check_database_connection, create_tables
from room_rental.middleware import RequestLoggingMiddleware
from room_rental.routers import auth, profile, rooms, images, saved_rooms
from room_rental.services.error_handler import ErrorHandlerService
from room_rental.store.base import StoreError
from room_rental.utils.exceptions import APIException

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.
    Checks the database, creates tables when configured and disposes the engine on shutdown.
    """
    context: AppContext = app.state.context
    settings = context.settings
    logger.info(f"Starting {settings.app_name} v{settings.app_version}")
    logger.info(f"Environment: {settings.environment}")
    
    if await check_database_connection(context.session_factory):
        if settings.auto_create_tables:
            await create_tables(context.engine)
    else:
        logger.error("Failed to connect to database on startup")
    
    yield
    
    logger.info("Shutting down application")
    await context.dispose()


def register_exception_handlers(app: FastAPI) -> None:
    """Route every error through ErrorHandlerService."""
    
    @app.exception_handler(APIException)
    async def api_exception_handler(request: Request, exc: APIException):
        return ErrorHandlerService.handle_api_exception(exc, request)
    
    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        return ErrorHandlerService.handle_validation_error(exc, request)
    
    @app.exception_handler(StoreError)
    async def store_exception_handler(request: Request, exc: StoreError):
        return ErrorHandlerService.handle_store_error(exc, request)
    
    @app.exception_handler(SQLAlchemyError)
    async def database_exception_handler(request: Request, exc: SQLAlchemyError):
        return ErrorHandlerService.handle_store_error(exc, request)
    
    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return ErrorHandlerService.handle_http_exception(exc, request)
    
    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        return ErrorHandlerService.handle_unexpected_error(exc, request)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the application.
    
    Args:
        settings: Settings to use; read from the environment when omitted
        
    Returns:
        Configured FastAPI application with its AppContext on app.state.context
    """
    settings = settings or get_settings()
    
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    
    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="""
    Room rental marketplace API.
    
    ## Features
    
    * **Listings**: Search available rooms by location, rent, layout and tenant preference
    * **Owner dashboard**: Create, update and delete your own listings and their images
    * **Saved rooms**: Bookmark rooms you are interested in
    * **Authentication**: Email/password sign-up with email confirmation
    
    ## Authentication
    
    Log in through `/api/auth/login`, then send the access token as `Bearer <token>`
    or rely on the session cookie set by the login response.
    """,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_tags=[
            {"name": "Authentication", "description": "Sign-up, login and sessions"},
            {"name": "Profile", "description": "The signed-in user's profile"},
            {"name": "Rooms", "description": "Room listings, search and owner management"},
            {"name": "Images", "description": "Room image galleries"},
            {"name": "Saved Rooms", "description": "Bookmarked rooms"},
            {"name": "Health", "description": "Service health"},
        ],
        lifespan=lifespan,
    )
    
    app.state.context = AppContext.from_settings(settings)
    
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID", "X-Processing-Time"],
    )
    app.add_middleware(RequestLoggingMiddleware, slow_request_threshold=2.0)
    
    register_exception_handlers(app)
    
    app.include_router(auth.router, prefix=settings.api_prefix)
    app.include_router(auth.callback_router)
    app.include_router(profile.router, prefix=settings.api_prefix)
    app.include_router(rooms.router, prefix=settings.api_prefix)
    app.include_router(images.router, prefix=settings.api_prefix)
    app.include_router(saved_rooms.router, prefix=settings.api_prefix)
    
    app.mount(
        settings.storage_public_path,
        StaticFiles(directory=settings.storage_dir, check_dir=False),
        name="storage",
    )
    
    @app.get("/health", tags=["Health"])
    async def health_check(request: Request):
        """
        Health check endpoint with database connectivity test.
        Used by Docker health checks and load balancers.
        """
        context: AppContext = request.app.state.context
        db_healthy = await check_database_connection(context.session_factory)
        
        body = {
            "status": "healthy" if db_healthy else "unhealthy",
            "service": settings.app_name,
            "version": settings.app_version,
            "environment": settings.environment,
            "database": "connected" if db_healthy else "unreachable",
        }
        return JSONResponse(status_code=200 if db_healthy else 503, content=body)
    
    return app


if __name__ == "__main__":
    import uvicorn
    
    settings = get_settings()
    uvicorn.run(
        "room_rental.main:create_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        reload=settings.debug
    )
