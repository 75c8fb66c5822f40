"""Reporting schemas."""

from datetime import datetime
from typing import List

from app.schemas.base import ApiModel


class ReportTotals(ApiModel):
    applications: int
    shortlisted: int
    selected: int
    offer_letters: int
    offers_sent: int
    users: int


class StatusBucket(ApiModel):
    status: str
    name: str
    value: int


class JobCounts(ApiModel):
    total: int
    active: int
    expired: int


class ReportSummary(ApiModel):
    """Admin dashboard summary."""

    totals: ReportTotals
    status_breakdown: List[StatusBucket]
    jobs: JobCounts
    generated_at: datetime
