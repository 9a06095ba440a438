"""
API Routes - Combines all route modules into single router.
"""

from fastapi import APIRouter

from app.api.routes.admin_student_routes import router as admin_student_router
from app.api.routes.report_routes import router as report_router
from app.api.routes.reference_routes import router as reference_router

# Main API router
api_router = APIRouter()

# Include all sub-routers
api_router.include_router(admin_student_router)
api_router.include_router(report_router)
api_router.include_router(reference_router)
