"""Offer letter drafting and sending."""

from datetime import date

import pytest

from app.core.errors import FailedPrecondition, InternalError, InvalidArgument, NotFound
from app.db.store import OFFER_LETTERS
from app.services.offer_service import OfferLetterService


@pytest.fixture
def service(store, email, clock):
    return OfferLetterService(store, email, clock=clock)


@pytest.fixture
def selected(seed_application):
    return seed_application(status="selected")


async def test_prefill_from_application_is_not_stored(service, store, selected):
    offer = await service.get_or_prefill(selected)

    assert offer.application_id == "app-1"
    assert offer.candidate_name == "Jane Mwale"
    assert offer.candidate_email == "jane@example.com"
    assert offer.role == "Backend Engineer"
    assert offer.department == "Engineering"
    assert offer.status == "draft"
    assert store.peek(OFFER_LETTERS, "app-1") is None


async def test_save_draft_merges_and_persists(service, store, clock, selected):
    await service.save_draft(selected, {"salary": 1200000, "location": "Lusaka"})
    clock.advance(days=1)
    offer = await service.save_draft(selected, {"joining_date": "2025-07-01"})

    assert offer.salary == 1200000
    assert offer.joining_date == date(2025, 7, 1)
    stored = store.peek(OFFER_LETTERS, "app-1")
    assert stored["status"] == "draft"
    assert stored["joiningDate"] == "2025-07-01"
    assert stored["location"] == "Lusaka"
    assert stored["updatedAt"] == clock()
    assert stored["createdAt"] < stored["updatedAt"]

    assert (await service.get_or_prefill(selected)).salary == 1200000


async def test_unknown_fields_rejected(service, selected):
    with pytest.raises(InvalidArgument, match="candidate_email"):
        await service.save_draft(selected, {"candidate_email": "other@example.com"})


@pytest.mark.parametrize("status", ["pending", "on_hold", "shortlisted", "rejected"])
async def test_only_selected_applications_get_offers(service, store, seed_application, status):
    seed_application(status=status)

    with pytest.raises(FailedPrecondition, match="selected applications"):
        await service.save_draft("app-1", {"salary": 1})
    with pytest.raises(FailedPrecondition):
        await service.send("app-1", {"salary": 1, "joining_date": "2025-07-01"})
    assert store.peek(OFFER_LETTERS, "app-1") is None


async def test_missing_application(service):
    with pytest.raises(NotFound):
        await service.get_or_prefill("missing")


async def test_send_requires_salary_and_joining_date(service, store, email, selected):
    with pytest.raises(InvalidArgument, match="salary, joiningDate"):
        await service.send(selected)

    assert store.peek(OFFER_LETTERS, "app-1") is None
    assert email.sent == []


async def test_send_marks_sent_and_emails_letter(service, store, email, clock, selected):
    await service.save_draft(selected, {"salary": 1200000})

    outcome = await service.send(selected, {"joining_date": "2025-07-01", "role": "Senior Backend Engineer"})

    stored = store.peek(OFFER_LETTERS, "app-1")
    assert stored["status"] == "sent"
    assert stored["sentAt"] == clock()
    assert stored["role"] == "Senior Backend Engineer"
    assert outcome.offer.id == "app-1"
    assert outcome.notification.delivered is True

    assert email.last["to_email"] == "jane@example.com"
    assert email.last["subject"] == "Offer of Employment - Senior Backend Engineer"
    assert "₹1,200,000" in email.last["html"]
    assert "July 1, 2025" in email.last["html"]
    assert "June 1, 2025" in email.last["html"]


async def test_blank_role_falls_back_to_job_title(service, email, selected):
    outcome = await service.send(selected, {"role": "", "salary": 900000, "joining_date": "2025-07-01"})

    assert outcome.offer.role == "Backend Engineer"


async def test_email_failure_keeps_letter_sent(service, store, email, selected):
    email.fail_with = InternalError("Failed to send email")

    outcome = await service.send(selected, {"salary": 900000, "joining_date": "2025-07-01"})

    assert store.peek(OFFER_LETTERS, "app-1")["status"] == "sent"
    assert outcome.notification.delivered is False
    assert outcome.notification.error == "internal"


async def test_editing_sent_letter_returns_it_to_draft(service, store, selected):
    await service.send(selected, {"salary": 900000, "joining_date": "2025-07-01"})

    await service.save_draft(selected, {"salary": 950000})

    stored = store.peek(OFFER_LETTERS, "app-1")
    assert stored["status"] == "draft"
    assert stored["salary"] == 950000
