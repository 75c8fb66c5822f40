"""
HTML email templates rendered with Jinja2.

Every template extends a shared layout branded with COMPANY_NAME. Values are
autoescaped; applicant-supplied text never reaches the HTML raw.
"""
from datetime import date, datetime
from typing import NamedTuple, Optional, Union

from jinja2 import DictLoader, Environment, StrictUndefined, select_autoescape

from app.config import settings
from app.core.errors import InvalidArgument
from app.models.application import InterviewDetails
from app.models.offer import OfferLetter
from app.models.status import ApplicationStatus, InterviewMode


class EmailMessage(NamedTuple):
    subject: str
    html: str


LAYOUT = """\
<html>
  <body style="font-family:Arial,sans-serif;color:#333;max-width:600px;margin:0 auto;padding:20px;background:#f5f5f5">
    <div style="background:{{ header_color }};padding:30px;border-radius:10px 10px 0 0;text-align:center">
      <h1 style="color:white;margin:0;font-size:28px">{% block heading %}{{ company }}{% endblock %}</h1>
      <p style="color:#f0f0f0;margin:10px 0 0 0">{% block tagline %}{% endblock %}</p>
    </div>
    <div style="background:white;padding:30px;border-radius:0 0 10px 10px;box-shadow:0 2px 10px rgba(0,0,0,0.1)">
      {% block content %}{% endblock %}
      <p style="color:#666;font-size:16px;line-height:1.6;margin-top:30px">
        {% block signoff %}Best regards,{% endblock %}<br/>
        <strong>{{ company }} Recruitment Team</strong>
      </p>
      <hr style="border:none;border-top:1px solid #ddd;margin:30px 0"/>
      <p style="color:#999;font-size:12px;text-align:center;margin:0">
        {% block footer %}This is an automated email from {{ company }}. Please do not reply.{% endblock %}
      </p>
    </div>
  </body>
</html>
"""

APPLICATION_RECEIVED = """\
{% extends "layout.html" %}
{% block tagline %}Application Received{% endblock %}
{% block content %}
<h2 style="color:#667eea;margin-top:0">Application Received!</h2>
<p>Dear <strong>{{ applicant_name }}</strong>,</p>
<p>Thank you for applying for the position of <strong style="color:#667eea">{{ job_title }}</strong>.</p>
<p>Our recruitment team will review your application and contact you soon.</p>
{% endblock %}
"""

OTP = """\
{% extends "layout.html" %}
{% block tagline %}Email Verification{% endblock %}
{% block content %}
<h2 style="margin-top:0">Welcome to {{ company }}!</h2>
<p>Thank you for signing up. Please use the verification code below to complete your registration:</p>
<div style="background:white;border:2px dashed #667eea;border-radius:8px;padding:20px;margin:30px 0;text-align:center">
  <p style="color:#999;font-size:14px;margin:0 0 10px 0">Your Verification Code</p>
  <h1 style="color:#667eea;font-size:42px;letter-spacing:8px;margin:0;font-family:monospace">{{ otp }}</h1>
</div>
<div style="background:#fff3cd;border-left:4px solid #ffc107;padding:15px;margin:20px 0;border-radius:4px">
  <p style="margin:0;color:#856404;font-size:14px">&#9201; <strong>This code will expire in {{ expires_minutes }} minutes.</strong></p>
</div>
<p>If you didn't request this code, please ignore this email. Your account will not be created without verification.</p>
{% endblock %}
"""

SHORTLISTED = """\
{% extends "layout.html" %}
{% block heading %}🎉 Congratulations!{% endblock %}
{% block tagline %}You've Been Shortlisted{% endblock %}
{% block content %}
<h2 style="color:#059669;margin-top:0">Interview Invitation</h2>
<p>Dear <strong>{{ applicant_name }}</strong>,</p>
<p>We are delighted to inform you that your profile has been shortlisted for the position of <strong>{{ job_title }}</strong>.</p>
<p>We would like to invite you for an interview to discuss this opportunity further.</p>
<div style="background:#ecfdf5;border-radius:8px;padding:20px;margin:20px 0">
  <h3 style="margin-top:0">📅 Interview Details</h3>
  <table style="width:100%">
    <tr><td><strong>📆 Date:</strong></td><td>{{ interview.date or "To be confirmed" }}</td></tr>
    <tr><td><strong>🕐 Time:</strong></td><td>{{ interview.time or "To be confirmed" }}</td></tr>
    <tr><td><strong>💼 Mode:</strong></td><td>{{ "🖥️ Online Video Interview" if online else "🏢 In-Person Interview" }}</td></tr>
    {% if online and interview.meeting_link %}
    <tr><td><strong>🔗 Meeting Link:</strong></td><td><a href="{{ interview.meeting_link }}">{{ interview.meeting_link }}</a></td></tr>
    {% endif %}
    {% if not online and interview.location %}
    <tr><td><strong>📍 Location:</strong></td><td>{{ interview.location }}</td></tr>
    {% endif %}
  </table>
</div>
<p>⚠️ <strong>Important:</strong> Please confirm your availability by replying to this email at least 24 hours before the scheduled interview.</p>
<p>If you have any questions or need to reschedule, please don't hesitate to contact us.</p>
{% endblock %}
{% block footer %}This is an automated email from {{ company }}. Please do not reply directly to this email for confirmation.{% endblock %}
"""

ON_HOLD = """\
{% extends "layout.html" %}
{% block tagline %}Application Review in Progress{% endblock %}
{% block content %}
<h2 style="margin-top:0">Your Application is Under Review</h2>
<p>Dear <strong>{{ applicant_name }}</strong>,</p>
<p>Thank you for your interest in the <strong>{{ job_title }}</strong> position. We wanted to provide you with an update on the status of your application.</p>
<p>Your application has been placed <strong>on hold</strong> temporarily while we finalize our review process.</p>
<p>📧 <strong>What's Next:</strong> We will notify you via email as soon as a decision has been made regarding your application. No action is required from your end at this time.</p>
{% endblock %}
{% block signoff %}Thank you for your continued interest,{% endblock %}
"""

REJECTED = """\
{% extends "layout.html" %}
{% block tagline %}Application Status Update{% endblock %}
{% block content %}
<h2 style="margin-top:0">Thank You for Your Application</h2>
<p>Dear <strong>{{ applicant_name }}</strong>,</p>
<p>Thank you for taking the time to apply for the position of <strong>{{ job_title }}</strong>. We sincerely appreciate your interest in joining our team.</p>
<p>After thorough consideration, we regret to inform you that we have decided to move forward with other candidates whose profiles more closely align with our current requirements for this role.</p>
<p>Your resume will be kept in our talent database, and we will reach out to you if a suitable opportunity becomes available in the future.</p>
<p>We wish you the very best in your job search and future career endeavors.</p>
{% endblock %}
{% block signoff %}Warm regards,{% endblock %}
"""

SELECTED = """\
{% extends "layout.html" %}
{% block heading %}🎊 Congratulations! 🎊{% endblock %}
{% block tagline %}You've Been Selected!{% endblock %}
{% block content %}
<h2 style="color:#059669;margin-top:0">Welcome to Our Team!</h2>
<p>Dear <strong>{{ applicant_name }}</strong>,</p>
<p>We are absolutely thrilled to extend to you an offer for the position of <strong>{{ job_title }}</strong>!</p>
<p>📋 <strong>Next Steps:</strong> You will receive your official offer letter with details about compensation, start date and other important information via a separate email within the next 24-48 hours.</p>
<p>💚 <strong>Welcome aboard!</strong></p>
{% endblock %}
{% block signoff %}Warmest congratulations,{% endblock %}
{% block footer %}This is an automated email from {{ company }}. For questions about your offer, please contact our HR team.{% endblock %}
"""

OFFER_LETTER = """\
{% extends "layout.html" %}
{% block tagline %}Human Resources Department{% endblock %}
{% block content %}
<p style="text-align:right;color:#666">Date: {{ letter_date }}</p>
<p style="margin:0"><strong>{{ offer.candidate_name }}</strong></p>
<p style="margin:0 0 20px 0;color:#666">{{ offer.candidate_email }}</p>
<p><strong>Subject: Offer of Employment</strong></p>
<p>Dear {{ offer.candidate_name }},</p>
<p>We are pleased to offer you the position of <strong>{{ offer.role }}</strong> in the <strong>{{ offer.department or "designated" }}</strong> department at {{ company }}.</p>
<p>The details of your employment are as follows:</p>
<table style="width:100%;background:#f9fafb;border-radius:8px;padding:15px">
  <tr><td><strong>Position:</strong></td><td>{{ offer.role }}</td></tr>
  <tr><td><strong>Department:</strong></td><td>{{ offer.department or "To be confirmed" }}</td></tr>
  <tr><td><strong>Annual Salary:</strong></td><td>{{ salary }}</td></tr>
  <tr><td><strong>Joining Date:</strong></td><td>{{ joining_date }}</td></tr>
  {% if offer.location %}
  <tr><td><strong>Work Location:</strong></td><td>{{ offer.location }}</td></tr>
  {% endif %}
</table>
{% if offer.additional_terms %}
<div style="margin:20px 0">
  <p><strong>Additional Terms:</strong></p>
  <p style="white-space:pre-line">{{ offer.additional_terms }}</p>
</div>
{% endif %}
<p>⚠️ <strong>Important:</strong> This offer is contingent upon successful completion of background verification and reference checks.</p>
<p>Please confirm your acceptance by replying to this email at your earliest convenience.</p>
{% endblock %}
{% block signoff %}Sincerely,{% endblock %}
{% block footer %}This is an official offer letter from {{ company }}. For questions, please contact our HR team.{% endblock %}
"""

env = Environment(
    loader=DictLoader({
        "layout.html": LAYOUT,
        "application_received.html": APPLICATION_RECEIVED,
        "otp.html": OTP,
        "shortlisted.html": SHORTLISTED,
        "on_hold.html": ON_HOLD,
        "rejected.html": REJECTED,
        "selected.html": SELECTED,
        "offer_letter.html": OFFER_LETTER,
    }),
    autoescape=select_autoescape(default=True),
    undefined=StrictUndefined,
)

HEADER_COLORS = {
    "shortlisted.html": "linear-gradient(135deg,#10b981 0%,#059669 100%)",
    "selected.html": "linear-gradient(135deg,#f59e0b 0%,#d97706 100%)",
}
DEFAULT_HEADER_COLOR = "linear-gradient(135deg,#667eea 0%,#764ba2 100%)"

# Status -> (template, subject format)
STATUS_TEMPLATES = {
    ApplicationStatus.SHORTLISTED: ("shortlisted.html", "🎉 Interview Invitation - {job_title}"),
    ApplicationStatus.REJECTED: ("rejected.html", "Application Update - {job_title}"),
    ApplicationStatus.ON_HOLD: ("on_hold.html", "Application Status - {job_title}"),
    ApplicationStatus.SELECTED: ("selected.html", "🎊 Congratulations! Job Offer - {job_title}"),
}


def format_long_date(value: Union[date, datetime]) -> str:
    """June 1, 2025"""
    return f"{value.strftime('%B')} {value.day}, {value.year}"


def format_salary(amount: int, symbol: Optional[str] = None) -> str:
    """₹1,200,000"""
    symbol = settings.OFFER_CURRENCY_SYMBOL if symbol is None else symbol
    return f"{symbol}{int(amount):,}"


def _render(template_name: str, **context) -> str:
    context.setdefault("company", settings.COMPANY_NAME)
    context.setdefault("header_color", HEADER_COLORS.get(template_name, DEFAULT_HEADER_COLOR))
    return env.get_template(template_name).render(**context)


def render_application_received(applicant_name: str, job_title: str) -> EmailMessage:
    return EmailMessage(
        subject=f"Application Received - {job_title}",
        html=_render("application_received.html", applicant_name=applicant_name, job_title=job_title),
    )


def render_otp_email(otp: str, expires_in_seconds: int) -> EmailMessage:
    return EmailMessage(
        subject=f"Your {settings.COMPANY_NAME} Verification Code",
        html=_render("otp.html", otp=otp, expires_minutes=expires_in_seconds // 60),
    )


def render_status_email(
    status: Union[ApplicationStatus, str],
    applicant_name: str,
    job_title: str,
    interview: Optional[InterviewDetails] = None,
) -> EmailMessage:
    """
    Render the notification for an application entering `status`.

    Raises:
        InvalidArgument: no email exists for this status (e.g. pending)
    """
    try:
        template_name, subject = STATUS_TEMPLATES[ApplicationStatus.parse(status)]
    except (KeyError, ValueError):
        raise InvalidArgument("Invalid status type", details={"status": str(status)})

    context = {"applicant_name": applicant_name, "job_title": job_title}
    if template_name == "shortlisted.html":
        if interview is None:
            raise InvalidArgument("Interview details are required for a shortlist email")
        context["interview"] = interview
        context["online"] = InterviewMode(interview.mode) == InterviewMode.ONLINE

    return EmailMessage(subject=subject.format(job_title=job_title), html=_render(template_name, **context))


def render_offer_email(offer: OfferLetter, today: date) -> EmailMessage:
    """Render a complete offer letter; salary and joining date must be set."""
    if offer.salary is None or offer.joining_date is None:
        raise InvalidArgument("Missing required fields: salary, joiningDate")
    return EmailMessage(
        subject=f"Offer of Employment - {offer.role}",
        html=_render(
            "offer_letter.html",
            offer=offer,
            salary=format_salary(offer.salary),
            joining_date=format_long_date(offer.joining_date),
            letter_date=format_long_date(today),
        ),
    )
