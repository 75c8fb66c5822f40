"""
Document store interface.

Every persistent entity lives in a named collection of keyed documents.
Services depend on this interface only; MongoDB provides the production
implementation (app.db.mongo).
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Sequence, Tuple

# Collection names
PENDING_VERIFICATIONS = "pending_verifications"
USERS = "users"
JOB_POSTINGS = "job_postings"
JOB_APPLICATIONS = "job_applications"
DEPARTMENTS = "departments"
OFFER_LETTERS = "offer_letters"

ASCENDING = 1
DESCENDING = -1

# field -> value (equality) or field -> list of values (membership, None matches a missing field)
Filters = Dict[str, Any]
Sort = Sequence[Tuple[str, int]]


class DocumentStore(ABC):
    """Keyed document read/write/delete/increment over named collections."""

    @abstractmethod
    async def get(self, collection: str, key: str) -> Optional[Dict[str, Any]]:
        """Return the document with its key under "id", or None."""

    @abstractmethod
    async def set(self, collection: str, key: str, data: Dict[str, Any]) -> None:
        """Write a document under an explicit key, replacing any existing one."""

    @abstractmethod
    async def insert(self, collection: str, data: Dict[str, Any]) -> str:
        """Insert a document under a generated key and return the key."""

    @abstractmethod
    async def update(
        self,
        collection: str,
        key: str,
        changes: Dict[str, Any],
        where: Optional[Filters] = None,
    ) -> bool:
        """
        Merge `changes` into an existing document.

        Args:
            where: optional precondition evaluated atomically with the write

        Returns:
            True if a document matched the key (and precondition)
        """

    @abstractmethod
    async def increment(self, collection: str, key: str, field: str, amount: int = 1) -> Optional[int]:
        """Atomically add `amount` to a numeric field; returns the new value, or None if the key is missing."""

    @abstractmethod
    async def delete(self, collection: str, key: str) -> bool:
        """Delete a document; returns True if one was removed."""

    @abstractmethod
    async def find(
        self,
        collection: str,
        filters: Optional[Filters] = None,
        sort: Optional[Sort] = None,
        limit: Optional[int] = None,
    ) -> List[Dict[str, Any]]:
        """Query documents by equality/membership filters."""

    @abstractmethod
    async def count(self, collection: str, filters: Optional[Filters] = None) -> int:
        """Count documents matching the filters."""

    async def ping(self) -> bool:
        """Check connectivity."""
        return True

    async def close(self) -> None:
        """Release connections."""
