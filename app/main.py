"""
Placement & Internship Portal - Admin API

FastAPI backend with:
- PostgreSQL for students, placements, internships and reference data
- JWT authentication (admin role required)
- Profile freeze/lock management with eligibility rules
- Cross-entity reports

Run: uvicorn app.main:app --reload
"""

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api.routes import api_router
from app.core.config import get_settings
from app.core.logging import setup_logging

settings = get_settings()
setup_logging(settings.log_level)
logger = logging.getLogger(__name__)

# Create FastAPI app
app = FastAPI(
    title="Placement & Internship Portal",
    description="""
    Administration backend for student placement and internship records.

    ## Features
    - **Students**: Paginated listing, freeze/unfreeze, lock/unlock (single and bulk)
    - **Eligibility**: Freeze is refused while placements are pending or internships are missing
    - **Reports**: Placement, drive, selection and internship reports per academic year
    """,
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API routes
app.include_router(api_router, prefix="/api")


@app.on_event("startup")
async def startup_event():
    logger.info("Placement portal API started")


@app.get("/health", tags=["Health"])
async def health_check():
    """Detailed health check."""
    from app.db.postgres import test_postgres_connection

    return {
        "status": "healthy",
        "postgres": "connected" if test_postgres_connection() else "disconnected",
    }
