"""Validators."""

import re
from datetime import datetime
from typing import List


def validate_email(email: str) -> bool:
    """Validate email format."""
    pattern = r'^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$'
    return bool(re.match(pattern, email))


def validate_phone(phone: str) -> bool:
    """Validate phone number."""
    # Simple validation for 10+ digits
    pattern = r'^\+?[\d\s-]{10,}$'
    return bool(re.match(pattern, phone))


def validate_url(url: str) -> bool:
    """Validate URL format."""
    pattern = r'^https?://(?:www\.)?[-a-zA-Z0-9@:%._\+~#=]{1,256}\.[a-zA-Z0-9()]{1,6}\b(?:[-a-zA-Z0-9()@:%_\+.~#?&/=]*)$'
    return bool(re.match(pattern, url))


def validate_interview_date(value: str) -> bool:
    """A real calendar date written as YYYY-MM-DD."""
    if not re.match(r'^\d{4}-\d{2}-\d{2}$', value):
        return False
    try:
        datetime.strptime(value, "%Y-%m-%d")
    except ValueError:
        return False
    return True


def validate_interview_time(value: str) -> bool:
    """HH:MM, 24-hour."""
    return bool(re.match(r'^([01]\d|2[0-3]):[0-5]\d$', value))


def missing_fields(data: dict, required: List[str]) -> List[str]:
    """Names of required fields that are absent or blank."""
    missing = []
    for name in required:
        value = data.get(name)
        if value is None or (isinstance(value, str) and not value.strip()):
            missing.append(name)
    return missing
