"""Email rendering."""

from datetime import date, datetime

import pytest

from app.config import settings
from app.core.errors import InvalidArgument
from app.models.application import InterviewDetails
from app.models.offer import OfferLetter
from app.services.email.templates import (
    format_long_date,
    format_salary,
    render_application_received,
    render_offer_email,
    render_otp_email,
    render_status_email,
)


def test_format_long_date():
    assert format_long_date(date(2025, 6, 1)) == "June 1, 2025"
    assert format_long_date(datetime(2025, 12, 25, 8, 0)) == "December 25, 2025"


def test_format_salary():
    assert format_salary(1200000, "₹") == "₹1,200,000"
    assert format_salary(950, "$") == "$950"


def test_otp_email():
    message = render_otp_email("482913", 600)

    assert message.subject == f"Your {settings.COMPANY_NAME} Verification Code"
    assert "482913" in message.html
    assert "expire in 10 minutes" in message.html


def test_application_received_escapes_input():
    message = render_application_received("<b>Eve</b>", "Analyst")

    assert message.subject == "Application Received - Analyst"
    assert "&lt;b&gt;Eve&lt;/b&gt;" in message.html
    assert "<b>Eve</b>" not in message.html


@pytest.mark.parametrize("status, subject", [
    ("on_hold", "Application Status - Analyst"),
    ("rejected", "Application Update - Analyst"),
    ("selected", "🎊 Congratulations! Job Offer - Analyst"),
])
def test_status_subjects(status, subject):
    message = render_status_email(status, "Jane", "Analyst")

    assert message.subject == subject
    assert "Jane" in message.html


def test_shortlist_email_needs_interview():
    with pytest.raises(InvalidArgument):
        render_status_email("shortlisted", "Jane", "Analyst")


def test_shortlist_email_online_and_offline():
    online = render_status_email(
        "shortlisted", "Jane", "Analyst",
        InterviewDetails(date="2025-06-10", time="14:30", mode="online", meeting_link="https://meet.example.com/x",
                         location="Should not show"),
    )
    offline = render_status_email(
        "shortlisted", "Jane", "Analyst",
        InterviewDetails(date="2025-06-10", time="09:00", mode="offline", location="HQ"),
    )

    assert online.subject == "🎉 Interview Invitation - Analyst"
    assert "https://meet.example.com/x" in online.html
    assert "Should not show" not in online.html
    assert "2025-06-10" in online.html
    assert "HQ" in offline.html
    assert "In-Person" in offline.html


@pytest.mark.parametrize("status", ["pending", "archived", None])
def test_no_email_for_other_statuses(status):
    with pytest.raises(InvalidArgument, match="Invalid status type"):
        render_status_email(status, "Jane", "Analyst")


def test_offer_email():
    offer = OfferLetter(
        application_id="app-1",
        candidate_name="Jane Mwale",
        candidate_email="jane@example.com",
        role="Analyst",
        salary=1200000,
        joining_date=date(2025, 7, 1),
        additional_terms="Probation: 3 months",
    )

    message = render_offer_email(offer, date(2025, 6, 1))

    assert message.subject == "Offer of Employment - Analyst"
    assert "July 1, 2025" in message.html
    assert "June 1, 2025" in message.html
    assert "To be confirmed" in message.html
    assert "Probation: 3 months" in message.html
    assert format_salary(1200000) in message.html


def test_offer_email_requires_salary_and_date():
    offer = OfferLetter(application_id="a", candidate_name="J", candidate_email="j@x.com", role="Analyst")

    with pytest.raises(InvalidArgument):
        render_offer_email(offer, date(2025, 6, 1))
