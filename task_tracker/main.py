"""
FastAPI Application Entry Point - Application initialization and configuration
"""

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
import logging
import sys
import time

from task_tracker.core.config import settings, validate_config, is_production
from task_tracker.database import check_db_connection, close_db_connections, get_pool_stats, init_db
from task_tracker.api.errors import setup_exception_handlers

# Configure application logging with timestamp and log level
logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[logging.StreamHandler(sys.stdout)]
)
logger = logging.getLogger(__name__)

def create_application() -> FastAPI:
    """
    Factory function to create and configure FastAPI application.
    Using factory pattern allows easier testing with different configurations.
    """
    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        debug=settings.DEBUG,
        docs_url=f"{settings.API_PREFIX}/docs" if not is_production() else None,  # Hide Swagger docs in production
        redoc_url=f"{settings.API_PREFIX}/redoc" if not is_production() else None,
        description="Multi-user task tracker with a review workflow"
    )

    setup_middleware(app)  # Configure CORS and request logging
    setup_exception_handlers(app)  # Typed errors -> {"success": false, "error": {...}}
    setup_event_handlers(app)  # Configure startup/shutdown hooks
    setup_routers(app)  # Mount API route handlers

    return app

def setup_middleware(app: FastAPI) -> None:
    """Configure application middleware - runs on every request/response"""

    # CORS middleware - the single page frontend runs on a different origin
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        """Log every request with method, path, status, and processing time"""
        start_time = time.time()
        logger.info(f"➡️  {request.method} {request.url.path}")

        response = await call_next(request)

        process_time = time.time() - start_time
        logger.info(
            f"⬅️  {request.method} {request.url.path} "
            f"- Status: {response.status_code} - Time: {process_time:.2f}s"
        )
        response.headers["X-Process-Time"] = str(process_time)  # Timing header for debugging
        return response

def setup_event_handlers(app: FastAPI) -> None:
    """Configure startup and shutdown event handlers"""

    @app.on_event("startup")
    async def startup_event():
        """
        Validate config and check dependencies.
        Fail fast: If checks fail, application won't start.
        """
        logger.info("🚀 Starting Task Tracker...")

        try:
            validate_config()
        except ValueError as e:
            logger.error(f"❌ Configuration validation failed: {e}")
            sys.exit(1)

        if not check_db_connection():
            logger.error("❌ Cannot connect to database. Exiting.")
            sys.exit(1)

        if settings.AUTO_CREATE_TABLES:
            init_db()

        logger.info(f"📊 Database pool: {get_pool_stats()}")
        logger.info("✅ Application started successfully")
        logger.info(f"🌍 Environment: {settings.ENVIRONMENT}")
        logger.info(f"🔧 Debug mode: {settings.DEBUG}")

    @app.on_event("shutdown")
    async def shutdown_event():
        """Run on application shutdown - clean up resources gracefully"""
        logger.info("🛑 Shutting down Task Tracker...")
        close_db_connections()
        logger.info("✅ Shutdown complete")

def setup_routers(app: FastAPI) -> None:
    """Mount the health check and the versioned API routers"""

    @app.get("/health", tags=["Health"])
    async def health_check():
        """
        Health check endpoint for monitoring and load balancers.
        Returns application status, database connectivity, and version info.
        """
        db_healthy = check_db_connection()
        return {
            "status": "healthy" if db_healthy else "unhealthy",
            "database": "connected" if db_healthy else "disconnected",
            "pool_stats": get_pool_stats(),
            "timestamp": time.time(),
            "version": settings.APP_VERSION
        }

    from task_tracker.api import auth, tasks, users
    prefix = settings.API_PREFIX
    app.include_router(auth.router, prefix=f"{prefix}/auth", tags=["Authentication"])
    app.include_router(users.router, prefix=f"{prefix}/auth/users", tags=["Users"])
    app.include_router(tasks.router, prefix=f"{prefix}/tasks", tags=["Tasks"])

# Create application instance
app = create_application()

if __name__ == "__main__":
    """
    Direct execution entry point - for development only.
    Production: Use `uvicorn task_tracker.main:app --host 0.0.0.0 --port 8000`
    """
    import uvicorn
    uvicorn.run(
        "task_tracker.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG,
        log_level="debug" if settings.DEBUG else "info"
    )
