"""Advisory validation helpers for resume data.

None of these checks are enforced by storage; they only report problems
so the editor can point them out.
"""

import re
from typing import Any, List, Optional
from urllib.parse import urlparse
from pydantic import BaseModel
from resume_builder.models.resume_models import Resume, walk_items


EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
# Korean mobile numbers, e.g. 010-1234-5678
PHONE_PATTERN = re.compile(r"^01[016789]-?\d{3,4}-?\d{4}$")


class ValidationResult(BaseModel):
    """Outcome of validating a resume."""

    is_valid: bool
    errors: List[str]


def is_valid_email(email: str) -> bool:
    """
    Check an email address format.

    Args:
        email: Email address

    Returns:
        bool: True if the address looks like user@domain.tld
    """
    return bool(EMAIL_PATTERN.match(email))


def is_valid_url(url: str) -> bool:
    """
    Check that a string is an absolute URL.

    Args:
        url: URL text

    Returns:
        bool: True if the URL has both a scheme and a location
    """
    try:
        parsed = urlparse(url)
    except ValueError:
        return False
    return bool(parsed.scheme and (parsed.netloc or parsed.path))


def is_valid_phone_number(phone: str) -> bool:
    """
    Check a phone number format. Whitespace is ignored.

    Args:
        phone: Phone number

    Returns:
        bool: True for a Korean mobile number
    """
    return bool(PHONE_PATTERN.match(re.sub(r"\s", "", phone)))


def validate_required(value: Any, field_name: str) -> Optional[str]:
    """
    Check that a value is present.

    Args:
        value: Value to check
        field_name: Field name used in the error message

    Returns:
        Optional[str]: Error message, or None when the value is present
    """
    if not value or (isinstance(value, str) and value.strip() == ""):
        return f"{field_name} is required."
    return None


def validate_resume(resume: Resume) -> ValidationResult:
    """
    Validate a resume.

    Checks that the profile has a name and a role, that contact email and
    phone (when filled in) are well formed, and that item links are URLs.

    Args:
        resume: Resume to check

    Returns:
        ValidationResult: Validity flag and error messages
    """
    errors: List[str] = []
    profile = resume.profile

    for value, field_name in ((profile.name, "Name"), (profile.role, "Role")):
        error = validate_required(value, field_name)
        if error:
            errors.append(error)

    email = profile.contact.get("email")
    if email and not is_valid_email(email):
        errors.append("Email format is invalid.")

    phone = profile.contact.get("phone")
    if phone and not is_valid_phone_number(phone):
        errors.append("Phone number format is invalid.")

    for section in resume.sections:
        for _, item in walk_items(section.items):
            for link in item.links or []:
                if not is_valid_url(link.url):
                    errors.append(
                        f"Link '{link.label}' in section '{section.title}' is not a valid URL."
                    )

    return ValidationResult(is_valid=not errors, errors=errors)
