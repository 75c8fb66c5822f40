"""API v1 routes."""

from fastapi import APIRouter

from app.api.v1 import admin, applications, auth, jobs, offers, reports, screening

api_router = APIRouter()

# Include all route modules
api_router.include_router(auth.router, prefix="/auth", tags=["Authentication"])
api_router.include_router(jobs.router, prefix="/jobs", tags=["Jobs"])
api_router.include_router(applications.router, prefix="/applications", tags=["Applications"])

# Admin
api_router.include_router(admin.router, prefix="/admin", tags=["Admin - Jobs"])
api_router.include_router(screening.router, prefix="/admin/applications", tags=["Admin - Screening"])
api_router.include_router(offers.router, prefix="/admin/offers", tags=["Admin - Offer Letters"])
api_router.include_router(reports.router, prefix="/admin/reports", tags=["Admin - Reports"])
