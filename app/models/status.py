"""Closed status types and the application transition table."""

from enum import Enum
from typing import Dict, FrozenSet, List, NamedTuple, Optional, Union


class ApplicationStatus(str, Enum):
    """Job application status."""

    PENDING = "pending"
    ON_HOLD = "on_hold"
    SHORTLISTED = "shortlisted"
    SELECTED = "selected"
    REJECTED = "rejected"

    @classmethod
    def parse(cls, value: Union[str, "ApplicationStatus", None]) -> "ApplicationStatus":
        """Parse a stored status; a missing status means pending."""
        if value is None or value == "":
            return cls.PENDING
        return cls(value)

    @property
    def timestamp_field(self) -> str:
        """Stored field stamped when an application enters this status."""
        return _TIMESTAMP_FIELDS[self]

    @property
    def is_terminal(self) -> bool:
        return self in (ApplicationStatus.SELECTED, ApplicationStatus.REJECTED)


_TIMESTAMP_FIELDS = {
    ApplicationStatus.PENDING: "appliedAt",
    ApplicationStatus.ON_HOLD: "onHoldAt",
    ApplicationStatus.SHORTLISTED: "shortlistedAt",
    ApplicationStatus.SELECTED: "selectedAt",
    ApplicationStatus.REJECTED: "rejectedAt",
}


class Action(str, Enum):
    """Admin actions that move an application between statuses."""

    SHORTLIST = "shortlist"
    HOLD = "hold"
    REJECT = "reject"
    SELECT = "select"
    REJECT_AFTER_INTERVIEW = "reject_after_interview"


class Transition(NamedTuple):
    sources: FrozenSet[ApplicationStatus]
    target: ApplicationStatus
    needs_interview: bool = False
    needs_evaluation: bool = False


TRANSITIONS: Dict[Action, Transition] = {
    Action.SHORTLIST: Transition(
        frozenset({ApplicationStatus.PENDING, ApplicationStatus.ON_HOLD}),
        ApplicationStatus.SHORTLISTED,
        needs_interview=True,
    ),
    Action.HOLD: Transition(
        frozenset({ApplicationStatus.PENDING}),
        ApplicationStatus.ON_HOLD,
    ),
    Action.REJECT: Transition(
        frozenset({ApplicationStatus.PENDING}),
        ApplicationStatus.REJECTED,
    ),
    Action.SELECT: Transition(
        frozenset({ApplicationStatus.SHORTLISTED}),
        ApplicationStatus.SELECTED,
        needs_evaluation=True,
    ),
    Action.REJECT_AFTER_INTERVIEW: Transition(
        frozenset({ApplicationStatus.SHORTLISTED}),
        ApplicationStatus.REJECTED,
        needs_evaluation=True,
    ),
}


def transition_for(action: Action, current: ApplicationStatus) -> Optional[Transition]:
    """Return the transition for `action` from `current`, or None if illegal."""
    transition = TRANSITIONS[action]
    if current not in transition.sources:
        return None
    return transition


class OfferStatus(str, Enum):
    DRAFT = "draft"
    SENT = "sent"


class Role(str, Enum):
    """User roles."""

    USER = "user"
    ADMIN = "admin"


class InterviewMode(str, Enum):
    ONLINE = "online"
    OFFLINE = "offline"


def allowed_actions(current: ApplicationStatus) -> List[Action]:
    """Actions an admin may take on an application in `current`."""
    return [action for action, transition in TRANSITIONS.items() if current in transition.sources]
