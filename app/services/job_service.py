"""
Job Posting Service
Posting CRUD, applicant-facing active listing and department management.

A posting is active while it has no expiry or its expiry is still in the
future; once expired it disappears from the public listing but stays visible
to admins.
"""

from datetime import datetime
from typing import Any, Callable, Dict, List, Optional

import structlog

from app.core.errors import AlreadyExists, InvalidArgument, NotFound
from app.db.store import ASCENDING, DEPARTMENTS, DESCENDING, JOB_POSTINGS, DocumentStore
from app.models.job import Department, JobPosting
from app.utils.constants import EMPLOYMENT_TYPES, JOB_LISTING_STATES
from app.utils.helpers import normalize_text, utc_now

logger = structlog.get_logger(__name__)


class JobPostingService:
    """Service for job postings and departments"""

    def __init__(self, store: DocumentStore, clock: Callable[[], datetime] = utc_now):
        self.store = store
        self.clock = clock

    async def create(self, posting: JobPosting) -> JobPosting:
        self._validate(posting)
        posting = posting.model_copy(update={"id": None, "posted_date": posting.posted_date or self.clock()})
        job_id = await self.store.insert(JOB_POSTINGS, posting.to_document())
        logger.info("job_posted", job_id=job_id, title=posting.job_title)
        return posting.model_copy(update={"id": job_id})

    async def update(self, job_id: str, changes: Dict[str, Any]) -> JobPosting:
        """
        Apply partial changes to a posting

        Args:
            job_id: Posting id
            changes: snake_case field -> new value

        Returns:
            Updated posting
        """
        current = await self.get(job_id)
        merged = current.model_dump()
        merged.update({k: v for k, v in changes.items() if k != "id"})
        posting = JobPosting.model_validate(merged)
        self._validate(posting)

        await self.store.update(JOB_POSTINGS, job_id, posting.to_document())
        logger.info("job_updated", job_id=job_id, fields=sorted(changes))
        return posting

    async def delete(self, job_id: str) -> None:
        if not await self.store.delete(JOB_POSTINGS, job_id):
            raise NotFound("Job posting not found", details={"job_id": job_id})
        logger.info("job_deleted", job_id=job_id)

    async def get(self, job_id: str) -> JobPosting:
        data = await self.store.get(JOB_POSTINGS, job_id)
        if data is None:
            raise NotFound("Job posting not found", details={"job_id": job_id})
        return JobPosting.from_document(data)

    async def get_active(self, job_id: str) -> JobPosting:
        """Posting as seen by applicants; expired postings do not exist for them."""
        posting = await self.get(job_id)
        if self.is_expired(posting):
            raise NotFound("Job posting not found", details={"job_id": job_id})
        return posting

    async def list_active(self, search: Optional[str] = None) -> List[JobPosting]:
        """Applicant-facing listing, newest first."""
        return [p for p in await self.list_postings("all", search) if not self.is_expired(p)]

    async def list_postings(self, state: str = "all", search: Optional[str] = None) -> List[JobPosting]:
        """
        Admin listing

        Args:
            state: "active", "expired" or "all"
            search: optional case-insensitive match on title, department or location
        """
        if state not in JOB_LISTING_STATES:
            raise InvalidArgument(f"Unknown listing state: {state}")

        documents = await self.store.find(JOB_POSTINGS, sort=[("postedDate", DESCENDING)])
        postings = [JobPosting.from_document(d) for d in documents]

        if state == "active":
            postings = [p for p in postings if not self.is_expired(p)]
        elif state == "expired":
            postings = [p for p in postings if self.is_expired(p)]

        if search:
            needle = normalize_text(search)
            postings = [
                p for p in postings
                if needle in normalize_text(f"{p.job_title} {p.department} {p.location}")
            ]
        return postings

    def is_expired(self, posting: JobPosting) -> bool:
        return posting.is_expired(self.clock())

    # Departments

    async def create_department(self, name: str, description: str = "") -> Department:
        name = (name or "").strip()
        if not name:
            raise InvalidArgument("Department name is required")

        existing = await self.store.find(DEPARTMENTS, {"name": name}, limit=1)
        if existing:
            raise AlreadyExists(f"Department '{name}' already exists")

        department = Department(name=name, description=description.strip(), created_at=self.clock())
        department_id = await self.store.insert(DEPARTMENTS, department.to_document())
        logger.info("department_created", department_id=department_id, name=name)
        return department.model_copy(update={"id": department_id})

    async def list_departments(self) -> List[Department]:
        documents = await self.store.find(DEPARTMENTS, sort=[("name", ASCENDING)])
        return [Department.from_document(d) for d in documents]

    async def delete_department(self, department_id: str) -> None:
        if not await self.store.delete(DEPARTMENTS, department_id):
            raise NotFound("Department not found", details={"department_id": department_id})
        logger.info("department_deleted", department_id=department_id)

    @staticmethod
    def _validate(posting: JobPosting) -> None:
        if not posting.job_title or not posting.job_title.strip():
            raise InvalidArgument("Job title is required")
        if posting.employment_type and posting.employment_type not in EMPLOYMENT_TYPES:
            raise InvalidArgument(f"Unknown employment type: {posting.employment_type}")
        if (
            posting.salary_min is not None
            and posting.salary_max is not None
            and posting.salary_min > posting.salary_max
        ):
            raise InvalidArgument("Minimum salary cannot exceed maximum salary")
