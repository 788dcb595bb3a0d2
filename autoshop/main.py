"""
Main FastAPI application entry point.
"""
import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from autoshop.config import get_settings
from autoshop.database import init_db
from autoshop.exceptions import InvalidTransitionError, ValidationError
from autoshop.routers import (
    companies,
    components,
    customers,
    reports,
    service_records,
    specializations,
    technicians,
    upcoming_services,
    vehicles,
)

settings = get_settings()

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

# Reduce verbosity of third-party libraries
logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan events for the application.
    Handles startup and shutdown events.
    """
    logger.info("🚀 Starting Auto Shop Service API...")
    await init_db()
    logger.info(f"🌐 API available at: {settings.api_v1_prefix}")
    logger.info("📖 Interactive docs: http://localhost:8000/docs")

    yield

    logger.info("👋 Shutting down Auto Shop Service API...")


# Create FastAPI application
app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="""
    ## 🔧 Auto Shop Service API

    Back office for an automotive repair shop.

    ### Entities:
    * **Companies / Customers / Vehicles**: who owns what
    * **Technicians**: staff, specializations and earnings percentage
    * **Components**: parts catalog with stock levels and price history
    * **Service Records**: jobs with priced line items, labor and totals
    * **Upcoming Services**: appointment calendar and arrival workflow
    * **Reports**: dashboard, inventory, usage and earnings
    """,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(ValidationError)
async def business_validation_handler(request: Request, exc: ValidationError):
    logger.warning(f"Rejected input for {request.url.path}: {exc}")
    return JSONResponse(status_code=400, content={"detail": str(exc)})


@app.exception_handler(InvalidTransitionError)
async def invalid_transition_handler(request: Request, exc: InvalidTransitionError):
    return JSONResponse(
        status_code=409,
        content={"detail": str(exc), "current_status": exc.current, "requested_status": exc.target},
    )


# Include routers
app.include_router(companies.router, prefix=settings.api_v1_prefix)
app.include_router(customers.router, prefix=settings.api_v1_prefix)
app.include_router(vehicles.router, prefix=settings.api_v1_prefix)
app.include_router(specializations.router, prefix=settings.api_v1_prefix)
app.include_router(technicians.router, prefix=settings.api_v1_prefix)
app.include_router(components.router, prefix=settings.api_v1_prefix)
app.include_router(service_records.router, prefix=settings.api_v1_prefix)
app.include_router(upcoming_services.router, prefix=settings.api_v1_prefix)
app.include_router(reports.router, prefix=settings.api_v1_prefix)


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": "Welcome to Auto Shop Service API",
        "version": settings.app_version,
        "docs": "/docs",
        "redoc": "/redoc",
    }


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "version": settings.app_version,
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "autoshop.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.debug,
    )
