"""Admin endpoints - reporting."""

from fastapi import APIRouter, Depends

from app.core.deps import get_reporting_service
from app.core.security import require_admin
from app.schemas.report import ReportSummary
from app.services.reporting_service import ReportingService

router = APIRouter(dependencies=[Depends(require_admin)])


@router.get("/summary", response_model=ReportSummary)
async def summary(reports: ReportingService = Depends(get_reporting_service)):
    """Dashboard totals, status breakdown and job counts."""
    return ReportSummary.model_validate(await reports.summary())
