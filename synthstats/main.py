"""
FastAPI application entry point.

SynthStats - read-only view of the synthetic population and disease
prevalence counters maintained by the record store interceptors.
"""
from fastapi import FastAPI, HTTPException
from fastapi.responses import JSONResponse
from sqlalchemy import text
from synthstats.config import settings, ensure_directories, configure_logging
from synthstats.database import init_db
from synthstats.routers import stats
from synthstats.schemas.stats import HealthResponse
import logging

logger = logging.getLogger(__name__)

# Create FastAPI application
app = FastAPI(
    title=settings.PROJECT_NAME,
    version=settings.VERSION,
    description="""
    **SynthStats API**

    Population and disease prevalence counters for counties and county
    subdivisions (towns), kept in step with Patient and Condition writes.

    ## Key Features

    * **Population**: totals by sex and population per square mile
    * **Disease Prevalence**: active case counts per tracked disease

    The counters are written only by the record store interceptors;
    this API never modifies them.
    """,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json"
)


# Startup event
@app.on_event("startup")
async def startup_event():
    """Initialize application on startup."""
    configure_logging()
    ensure_directories()

    # Initialize database (create tables if not exist)
    try:
        init_db()
        logger.info("Database initialized successfully")
    except Exception as e:
        logger.warning(f"Database initialization warning: {e}")


app.include_router(
    stats.router,
    prefix=f"{settings.API_V1_PREFIX}/stats",
    tags=["Statistics"]
)


# Root endpoint
@app.get("/", tags=["Root"])
def root():
    """API root endpoint with basic information."""
    return {
        "message": "SynthStats API",
        "version": settings.VERSION,
        "docs": "/docs",
        "redoc": "/redoc",
        "endpoints": {
            "stats": f"{settings.API_V1_PREFIX}/stats",
            "health": f"{settings.API_V1_PREFIX}/health"
        }
    }


# Health check
@app.get(f"{settings.API_V1_PREFIX}/health", response_model=HealthResponse, tags=["Health"])
def health_check():
    """Health check endpoint."""
    from synthstats.database import engine

    # Check database connection
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        db_status = "healthy"
    except Exception as e:
        db_status = f"unhealthy: {str(e)}"

    return {
        "status": "healthy" if db_status == "healthy" else "degraded",
        "version": settings.VERSION,
        "database": db_status
    }


# Exception handlers
@app.exception_handler(HTTPException)
async def http_exception_handler(request, exc):
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error": exc.detail,
            "status_code": exc.status_code
        }
    )


@app.exception_handler(Exception)
async def general_exception_handler(request, exc):
    logger.exception("Unhandled error")
    return JSONResponse(
        status_code=500,
        content={
            "error": "Internal server error",
            "detail": str(exc),
            "status_code": 500
        }
    )
