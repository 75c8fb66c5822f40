"""Common constants."""

# Employment types offered on postings
EMPLOYMENT_TYPES = ["Full-time", "Part-time", "Contract", "Internship"]

# Degree levels accepted on applications
DEGREE_LEVELS = ["High School", "Diploma", "UG", "PG", "PhD"]

# Screening queue tabs -> stored statuses (None matches applications with no status)
SCREENING_TABS = {
    "pending": ["pending", "on_hold", None],
    "shortlisted": ["shortlisted"],
    "processed": ["selected", "rejected"],
}

# Job listing filters for admins
JOB_LISTING_STATES = ["active", "expired", "all"]
