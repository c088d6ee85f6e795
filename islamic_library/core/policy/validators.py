# islamic_library/core/policy/validators.py
"""
Input-boundary checks driven by the policy table.

Every check returns a list of violations; an empty list means the value is
acceptable. Checks never raise on bad input, so request handlers can collect
violations from several fields and answer with a single 400/422 response.
"""

from __future__ import annotations

import logging
import re
from typing import Dict, List, NamedTuple, Optional, Tuple, Union

from islamic_library.core.config.constants import DANGEROUS_MIME_TYPES
from islamic_library.core.policy.table import PolicyTable, get_policy_table

logger = logging.getLogger(__name__)

# -----------------------------------------------------------------------------
# Type Aliases for Readability
# -----------------------------------------------------------------------------
Violation = str
EvalResult = List[Violation]

_PHONE_NOISE = re.compile(r"(?!^\+)\D")
_ISBN_NOISE = re.compile(r"[\s-]")
_DIGIT = re.compile(r"[0-9]")
_SPECIAL_CHARS = re.compile(r'[!@#$%^&*(),.?":{}|<>]')
_NAME_CHARS = re.compile(r"[a-zA-Z\u0600-\u06FF\u0750-\u077F\u08A0-\u08FF\s\-'.]+")
_SIZE_UNITS = ("Bytes", "KB", "MB", "GB", "TB")


def _table(policy: Optional[PolicyTable]) -> PolicyTable:
    return policy if policy is not None else get_policy_table()


def _matches(policy: Optional[PolicyTable], pattern: str, value: Optional[str]) -> bool:
    return isinstance(value, str) and _table(policy).regex[pattern].fullmatch(value) is not None


class PageRequest(NamedTuple):
    page: int
    limit: int

# -----------------------------------------------------------------------------
# Pattern checks
# -----------------------------------------------------------------------------
def validate_email(email: Optional[str], policy: Optional[PolicyTable] = None) -> EvalResult:
    return [] if _matches(policy, "EMAIL", email) else ["Invalid email format"]


def validate_phone(phone: Optional[str], policy: Optional[PolicyTable] = None) -> EvalResult:
    """Separators are ignored; a leading '+' is kept."""
    if not phone:
        return ["Phone number is required"]
    clean = _PHONE_NOISE.sub("", phone.strip())
    return [] if _matches(policy, "PHONE", clean) else ["Invalid phone number format"]


def validate_url(url: Optional[str], policy: Optional[PolicyTable] = None) -> EvalResult:
    return [] if _matches(policy, "URL", url) else ["Invalid URL format"]


def validate_slug(slug: Optional[str], policy: Optional[PolicyTable] = None) -> EvalResult:
    return [] if _matches(policy, "SLUG", slug) else [f"Invalid slug: {slug!r}"]


def validate_object_id(object_id: Optional[str], policy: Optional[PolicyTable] = None) -> EvalResult:
    return [] if _matches(policy, "MONGODB_OBJECTID", object_id) else ["Invalid ObjectId format"]


def contains_arabic(text: Optional[str], policy: Optional[PolicyTable] = None) -> bool:
    return isinstance(text, str) and _table(policy).regex["ARABIC"].search(text) is not None

# -----------------------------------------------------------------------------
# ISBN
# -----------------------------------------------------------------------------
def _isbn10_checksum_ok(isbn: str) -> bool:
    total = sum(int(digit) * (10 - i) for i, digit in enumerate(isbn[:9]))
    check = 10 if isbn[9] == "X" else int(isbn[9])
    return check == (11 - total % 11) % 11


def _isbn13_checksum_ok(isbn: str) -> bool:
    total = sum(int(digit) * (1 if i % 2 == 0 else 3) for i, digit in enumerate(isbn[:12]))
    return int(isbn[12]) == (10 - total % 10) % 10


def validate_isbn(isbn: Optional[str], policy: Optional[PolicyTable] = None) -> EvalResult:
    """ISBN-10 or ISBN-13, format and check digit. Spaces and hyphens are ignored."""
    if not isbn:
        return ["ISBN is required"]
    clean = _ISBN_NOISE.sub("", isbn).upper()
    if len(clean) == 10:
        if not _matches(policy, "ISBN_10", clean):
            return ["Invalid ISBN-10 format"]
        return [] if _isbn10_checksum_ok(clean) else ["Invalid ISBN-10 checksum"]
    if len(clean) == 13:
        if not _matches(policy, "ISBN_13", clean):
            return ["Invalid ISBN-13 format"]
        return [] if _isbn13_checksum_ok(clean) else ["Invalid ISBN-13 checksum"]
    return ["ISBN must be 10 or 13 characters long"]

# -----------------------------------------------------------------------------
# Length, year, paging, search
# -----------------------------------------------------------------------------
def validate_length(field: str, value: Optional[str], policy: Optional[PolicyTable] = None) -> EvalResult:
    """Check a text field (password, name, title, description, bio) against its length rule."""
    rule = _table(policy).validation.length_rule(field)
    label = field.capitalize()
    # passwords are measured as typed
    text = (value or "") if field.lower() == "password" else (value or "").strip()
    if not text and rule.min_length > 0:
        return [f"{label} is required"]
    if len(text) < rule.min_length:
        return [f"{label} must be at least {rule.min_length} characters long"]
    if len(text) > rule.max_length:
        return [f"{label} cannot exceed {rule.max_length} characters"]
    return []


def validate_year(
    year: Union[int, str, None],
    policy: Optional[PolicyTable] = None,
    allow_future: bool = False,
) -> EvalResult:
    """Publication year; the ceiling is the year the policy table was built."""
    rule = _table(policy).validation.year
    try:
        value = int(year)
    except (TypeError, ValueError, OverflowError):
        return ["Year must be a valid number"]

    violations = []
    if value < rule.min_year:
        violations.append(f"Year must be {rule.min_year} or later")
    if not allow_future and value > rule.max_year:
        violations.append(f"Year cannot be in the future (max: {rule.max_year})")
    return violations


def validate_pagination(
    page: Union[int, str, None] = None,
    limit: Union[int, str, None] = None,
    policy: Optional[PolicyTable] = None,
) -> Tuple[PageRequest, EvalResult]:
    """
    Returns the page request to use (always within bounds) and the violations
    found in the raw parameters. Missing parameters take the defaults.
    """
    paging = _table(policy).pagination
    violations = []

    try:
        page_num = paging.default_page if page is None else int(page)
    except (TypeError, ValueError, OverflowError):
        page_num = paging.default_page
        violations.append("Page must be a positive integer")
    else:
        if page_num < 1:
            violations.append("Page must be a positive integer")

    try:
        limit_num = paging.default_limit if limit is None else int(limit)
    except (TypeError, ValueError, OverflowError):
        limit_num = paging.default_limit
        violations.append(f"Limit must be between {paging.min_limit} and {paging.max_limit}")
    else:
        if not paging.min_limit <= limit_num <= paging.max_limit:
            violations.append(f"Limit must be between {paging.min_limit} and {paging.max_limit}")

    return PageRequest(page=max(1, page_num), limit=paging.clamp_limit(limit_num)), violations


def validate_search_query(query: Optional[str], policy: Optional[PolicyTable] = None) -> EvalResult:
    search = _table(policy).search
    if not isinstance(query, str) or not query.strip():
        return ["Search query is required"]
    text = query.strip()
    if len(text) < search.min_query_length:
        return [f"Search query must be at least {search.min_query_length} character(s) long"]
    if len(text) > search.max_query_length:
        return [f"Search query cannot exceed {search.max_query_length} characters"]
    return []

# -----------------------------------------------------------------------------
# Names and passwords
# -----------------------------------------------------------------------------
_STRENGTH_LEVELS = ((2, "Very Weak"), (3, "Weak"), (4, "Medium"), (5, "Strong"))


class PasswordStrength(NamedTuple):
    score: int
    level: str
    checks: Dict[str, bool]
    percentage: int


def validate_name(
    name: Optional[str],
    policy: Optional[PolicyTable] = None,
    allow_numbers: bool = False,
    allow_special_chars: bool = False,
) -> EvalResult:
    """Person or scholar name: Latin or Arabic letters, spaces, hyphens, apostrophes and dots."""
    if not isinstance(name, str) or not name.strip():
        return ["Name is required"]
    text = name.strip()
    violations = validate_length("name", text, policy)
    if not allow_numbers and _DIGIT.search(text):
        violations.append("Name cannot contain numbers")
    if not allow_special_chars and _SPECIAL_CHARS.search(text):
        violations.append("Name cannot contain special characters")
    if not _NAME_CHARS.fullmatch(text):
        violations.append("Name contains invalid characters")
    return violations


def calculate_password_strength(password: Optional[str]) -> PasswordStrength:
    """
    Score a password from 0 to 6, one point per satisfied check:
    at least 8 characters, a lowercase letter, an uppercase letter, a digit,
    a special character, at least 12 characters.
    """
    if not isinstance(password, str) or not password:
        return PasswordStrength(score=0, level="Very Weak", checks={}, percentage=0)

    checks = {
        "length": len(password) >= 8,
        "lowercase": re.search(r"[a-z]", password) is not None,
        "uppercase": re.search(r"[A-Z]", password) is not None,
        "numbers": _DIGIT.search(password) is not None,
        "special_chars": _SPECIAL_CHARS.search(password) is not None,
        "long_length": len(password) >= 12,
    }
    score = sum(checks.values())
    level = next((label for ceiling, label in _STRENGTH_LEVELS if score <= ceiling), "Very Strong")
    return PasswordStrength(score=score, level=level, checks=checks, percentage=round(score / len(checks) * 100))


def validate_password(
    password: Optional[str],
    policy: Optional[PolicyTable] = None,
    require_uppercase: bool = False,
    require_lowercase: bool = False,
    require_numbers: bool = False,
    require_special_chars: bool = False,
    min_score: int = 0,
) -> EvalResult:
    """
    Length rule plus optional complexity requirements. With min_score set,
    a password scoring lower in calculate_password_strength is reported
    with the table's PASSWORD_TOO_WEAK message.
    """
    violations = validate_length("password", password, policy)
    text = password if isinstance(password, str) else ""

    if require_uppercase and not re.search(r"[A-Z]", text):
        violations.append("Password must contain at least one uppercase letter")
    if require_lowercase and not re.search(r"[a-z]", text):
        violations.append("Password must contain at least one lowercase letter")
    if require_numbers and not _DIGIT.search(text):
        violations.append("Password must contain at least one number")
    if require_special_chars and not _SPECIAL_CHARS.search(text):
        violations.append("Password must contain at least one special character")
    if min_score and calculate_password_strength(text).score < min_score:
        violations.append(_table(policy).error_message("auth", "password_too_weak"))
    return violations

# -----------------------------------------------------------------------------
# Uploads
# -----------------------------------------------------------------------------
def format_file_size(size: int) -> str:
    """1024-based, at most two decimals: 5242880 -> '5 MB'."""
    if size <= 0:
        return "0 Bytes"
    value, index = float(size), 0
    while value >= 1024 and index < len(_SIZE_UNITS) - 1:
        value /= 1024
        index += 1
    return f"{round(value, 2):g} {_SIZE_UNITS[index]}"


def validate_upload(
    kind: str,
    content_type: Optional[str],
    size: Optional[int],
    policy: Optional[PolicyTable] = None,
) -> EvalResult:
    """
    Check an upload's declared content type and size against the file policy
    for `kind` ('book', 'cover', 'scholar_image') before it is stored.
    Raises KeyError for an unknown kind.
    """
    file_policy = _table(policy).file_policy(kind)
    violations = []

    if not content_type:
        violations.append("File mimetype is missing")
    elif content_type.lower() in DANGEROUS_MIME_TYPES:
        violations.append("File type is not allowed for security reasons")
    elif not file_policy.allows(content_type):
        violations.append(
            f"File type {content_type} is not allowed. "
            f"Allowed types: {', '.join(sorted(file_policy.allowed_types))}"
        )

    if size is None or size <= 0:
        violations.append("File size is missing")
    elif size > file_policy.max_size:
        violations.append(
            f"File size ({format_file_size(size)}) exceeds maximum allowed size "
            f"({format_file_size(file_policy.max_size)})"
        )

    if violations:
        logger.debug(f"Rejected {kind} upload ({content_type}, {size} bytes): {violations}")
    return violations


__all__ = [
    "Violation",
    "EvalResult",
    "PageRequest",
    "validate_email",
    "validate_phone",
    "validate_url",
    "validate_slug",
    "validate_object_id",
    "contains_arabic",
    "validate_isbn",
    "validate_length",
    "validate_name",
    "PasswordStrength",
    "calculate_password_strength",
    "validate_password",
    "validate_year",
    "validate_pagination",
    "validate_search_query",
    "format_file_size",
    "validate_upload",
]
