# islamic_library/core/config/constants.py
"""
LIBRARY POLICY CONSTANTS - Load-time boundaries for the catalog backend
Enumerations, limits and message text shared by every request handler
"""

from enum import Enum
from types import MappingProxyType
from typing import Any, Final, Mapping, Tuple, Type
import hashlib
import os
import re

# ============================================================================
# CLOSED ENUMERATIONS
# ============================================================================

class UserRole(str, Enum):
    """Account roles."""
    USER = "user"
    ADMIN = "admin"

class UserStatus(str, Enum):
    """Account status."""
    ACTIVE = "active"
    INACTIVE = "inactive"

class DownloadStatus(str, Enum):
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"

class DownloadSource(str, Enum):
    WEB = "web"
    MOBILE = "mobile"
    API = "api"

class EmailTemplate(str, Enum):
    WELCOME = "welcome"
    PASSWORD_RESET = "password-reset"
    ADMIN_NOTIFICATION = "admin-notification"

class LogLevel(str, Enum):
    """Log level names understood by the request logger."""
    ERROR = "error"
    WARN = "warn"
    INFO = "info"
    HTTP = "http"
    VERBOSE = "verbose"
    DEBUG = "debug"
    SILLY = "silly"

class AppEnvironment(str, Enum):
    DEVELOPMENT = "development"
    TESTING = "testing"
    STAGING = "staging"
    PRODUCTION = "production"


def is_member(enum_cls: Type[Enum], value: Any) -> bool:
    """Closed-set check: True only for a value declared on enum_cls."""
    try:
        enum_cls(value)
    except ValueError:
        return False
    return True

# ============================================================================
# CATALOG VOCABULARY
# ============================================================================

# Display order matters
ISLAMIC_CATEGORIES: Final[Tuple[str, ...]] = (
    "Islam. General Study and teaching.",
    "History & Biography.",
    "Prophet Muhammad (SAW).",
    "Prophets (AS).",
    "Islamic literature.",
    "Sacred books.",
    "Qur'an, Special parts and chapters, Works about the Qur'an.",
    "Hadith literature, Traditions, Sunnah.",
    "General works on Islam.",
    "Dogma ('Aqa'id).",
    "Theology (Kalaam).",
    "Works against Islam and the Qur'an.",
    "Works in defense of Islam.",
    "Islamic apologetics.",
    "Benevolent work. Social work. Welfare works, etc.",
    "Missionary works of Islam.",
    "Relation of Islam to other religions.",
    "Islamic sociology.",
    "The practice of Islam, the five duties of a Muslim. Pillars of Islam.",
    "Jihad (Holy War).",
    "Religious ceremonies, rites, etc.",
    "Special days and seasons, fasts, feasts, festivals, etc.",
    "Relics Shrines, sacred places, etc.",
    "Islamic religious life.",
    "Devotional literature.",
    "Sufism. Mysticism. Dervishes.",
    "Monasticism Branches, sects, etc.",
    "Shiites.",
    "Black Muslims.",
)

LANGUAGES: Final[Mapping[str, str]] = MappingProxyType({
    "ARABIC": "العربية",
    "ENGLISH": "English",
    "FRENCH": "Français",
    "GERMAN": "Deutsch",
    "URDU": "اردو",
    "PERSIAN": "فارسی",
    "TURKISH": "Türkçe",
})

SCHOLAR_SPECIALIZATIONS: Final[Tuple[str, ...]] = (
    "Islamic Jurisprudence (Fiqh)",
    "Quranic Sciences",
    "Hadith Studies",
    "Islamic Theology (Aqeedah)",
    "Prophet's Biography (Seerah)",
    "Islamic History",
    "Quranic Exegesis (Tafsir)",
    "Principles of Jurisprudence (Usul al-Fiqh)",
    "Islamic Da'wah",
    "Islamic Ethics",
    "Islamic Education",
    "Islamic Economics",
    "Islamic Philosophy",
    "Islamic Mysticism (Sufism)",
    "Objectives of Sharia (Maqasid)",
)

# ============================================================================
# UPLOAD, PAGING AND THROTTLING LIMITS
# ============================================================================

# === FILE UPLOADS ===
_IMAGE_TYPES: Final[Tuple[str, ...]] = ("image/jpeg", "image/jpg", "image/png", "image/webp")

FILE_TYPES: Final[Mapping[str, Mapping[str, Any]]] = MappingProxyType({
    "BOOK": MappingProxyType({
        "ALLOWED_TYPES": frozenset({"application/pdf"}),
        "MAX_SIZE": 50 * 1024 * 1024,
        "UPLOAD_PATH": "uploads/books/",
    }),
    "COVER": MappingProxyType({
        "ALLOWED_TYPES": frozenset(_IMAGE_TYPES),
        "MAX_SIZE": 5 * 1024 * 1024,
        "UPLOAD_PATH": "uploads/covers/",
    }),
    "SCHOLAR_IMAGE": MappingProxyType({
        "ALLOWED_TYPES": frozenset(_IMAGE_TYPES),
        "MAX_SIZE": 2 * 1024 * 1024,
        "UPLOAD_PATH": "uploads/scholars/",
    }),
})

# Never accepted, whatever the file category
DANGEROUS_MIME_TYPES: Final[frozenset] = frozenset({
    "application/x-executable",
    "application/x-msdownload",
    "application/x-msdos-program",
})

# === PAGINATION ===
DEFAULT_PAGE: Final[int] = 1
DEFAULT_LIMIT: Final[int] = 20
MAX_LIMIT: Final[int] = 100
MIN_LIMIT: Final[int] = 1

# === RATE LIMITS ===
_FIFTEEN_MINUTES_MS: Final[int] = 15 * 60 * 1000
_ONE_DAY_MS: Final[int] = 24 * 60 * 60 * 1000

RATE_LIMITS: Final[Mapping[str, Mapping[str, int]]] = MappingProxyType({
    "GENERAL": MappingProxyType({"WINDOW_MS": _FIFTEEN_MINUTES_MS, "MAX_REQUESTS": 100}),
    # login attempts
    "AUTH": MappingProxyType({"WINDOW_MS": _FIFTEEN_MINUTES_MS, "MAX_REQUESTS": 5}),
    # per regular user
    "DOWNLOAD": MappingProxyType({"WINDOW_MS": _ONE_DAY_MS, "DAILY_LIMIT": 50}),
})

# === TOKENS ===
JWT: Final[Mapping[str, str]] = MappingProxyType({
    "ACCESS_TOKEN_EXPIRE": "24h",
    "REFRESH_TOKEN_EXPIRE": "7d",
    "ISSUER": "islamic-library",
    "AUDIENCE": "islamic-library-users",
})

# === SEARCH ===
MIN_QUERY_LENGTH: Final[int] = 1
MAX_QUERY_LENGTH: Final[int] = 200
SEARCH_DEFAULT_LIMIT: Final[int] = 20
MAX_SEARCH_RESULTS: Final[int] = 1_000

# === CACHE (seconds) ===
CACHE_DURATION: Final[Mapping[str, int]] = MappingProxyType({
    "SHORT": 5 * 60,
    "MEDIUM": 30 * 60,
    "LONG": 2 * 60 * 60,
    "VERY_LONG": 24 * 60 * 60,
})

# === FIELD LENGTHS ===
# YEAR's upper bound is filled in when the policy table is built
VALIDATION: Final[Mapping[str, Mapping[str, int]]] = MappingProxyType({
    "PASSWORD": MappingProxyType({"MIN_LENGTH": 6, "MAX_LENGTH": 128}),
    "NAME": MappingProxyType({"MIN_LENGTH": 2, "MAX_LENGTH": 100}),
    "TITLE": MappingProxyType({"MIN_LENGTH": 1, "MAX_LENGTH": 200}),
    "DESCRIPTION": MappingProxyType({"MIN_LENGTH": 10, "MAX_LENGTH": 2000}),
    "BIO": MappingProxyType({"MIN_LENGTH": 50, "MAX_LENGTH": 5000}),
})
MIN_PUBLICATION_YEAR: Final[int] = 600

# ============================================================================
# SORTING
# ============================================================================

SORT_OPTIONS: Final[Mapping[str, Mapping[str, str]]] = MappingProxyType({
    "BOOKS": MappingProxyType({
        "TITLE_ASC": "title",
        "TITLE_DESC": "-title",
        "AUTHOR_ASC": "author",
        "AUTHOR_DESC": "-author",
        "DOWNLOADS_ASC": "downloads",
        "DOWNLOADS_DESC": "-downloads",
        "CREATED_ASC": "createdAt",
        "CREATED_DESC": "-createdAt",
        "YEAR_ASC": "publishedYear",
        "YEAR_DESC": "-publishedYear",
    }),
    "USERS": MappingProxyType({
        "NAME_ASC": "name",
        "NAME_DESC": "-name",
        "EMAIL_ASC": "email",
        "EMAIL_DESC": "-email",
        "DOWNLOADS_ASC": "totalDownloads",
        "DOWNLOADS_DESC": "-totalDownloads",
        "JOINED_ASC": "createdAt",
        "JOINED_DESC": "-createdAt",
    }),
    "SCHOLARS": MappingProxyType({
        "NAME_ASC": "name",
        "NAME_DESC": "-name",
        "DOWNLOADS_ASC": "totalBooksDownloads",
        "DOWNLOADS_DESC": "-totalBooksDownloads",
        "BOOKS_ASC": "booksCount",
        "BOOKS_DESC": "-booksCount",
        "VIEWS_ASC": "profileViews",
        "VIEWS_DESC": "-profileViews",
    }),
})

# ============================================================================
# HTTP
# ============================================================================

HTTP_STATUS: Final[Mapping[str, int]] = MappingProxyType({
    "OK": 200,
    "CREATED": 201,
    "NO_CONTENT": 204,
    "BAD_REQUEST": 400,
    "UNAUTHORIZED": 401,
    "FORBIDDEN": 403,
    "NOT_FOUND": 404,
    "CONFLICT": 409,
    "UNPROCESSABLE_ENTITY": 422,
    "TOO_MANY_REQUESTS": 429,
    "INTERNAL_SERVER_ERROR": 500,
    "SERVICE_UNAVAILABLE": 503,
})

API_ENDPOINTS: Final[Mapping[str, str]] = MappingProxyType({
    "AUTH": "/api/auth",
    "USERS": "/api/users",
    "BOOKS": "/api/books",
    "SCHOLARS": "/api/scholars",
    "DOWNLOADS": "/api/downloads",
    "ANALYTICS": "/api/analytics",
    "CATEGORIES": "/api/categories",
})

# ============================================================================
# PRESENTATION
# ============================================================================

COLORS: Final[Mapping[str, str]] = MappingProxyType({
    "PRIMARY": "#059669",  # emerald 600
    "SECONDARY": "#065f46",  # emerald 800
    "SUCCESS": "#10B981",
    "WARNING": "#F59E0B",
    "ERROR": "#EF4444",
    "INFO": "#3B82F6",
})

CATEGORY_COLORS: Final[Tuple[str, ...]] = (
    "#3B82F6", "#EF4444", "#10B981", "#F59E0B", "#8B5CF6",
    "#06B6D4", "#84CC16", "#F97316", "#EC4899", "#6366F1",
    "#14B8A6", "#F43F5E", "#8B5A00", "#7C3AED", "#0EA5E9",
)

# ============================================================================
# INPUT PATTERNS
# ============================================================================

REGEX: Final[Mapping[str, "re.Pattern[str]"]] = MappingProxyType({
    "EMAIL": re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$"),
    "PHONE": re.compile(r"^\+?[1-9]\d{7,14}$"),
    "URL": re.compile(
        r"^https?://(www\.)?[-a-zA-Z0-9@:%._+~#=]{1,256}\.[a-zA-Z0-9()]{1,6}\b"
        r"([-a-zA-Z0-9()@:%_+.~#?&/=]*)$"
    ),
    "SLUG": re.compile(r"^[a-z0-9]+(?:-[a-z0-9]+)*$"),
    "ARABIC": re.compile(r"[\u0600-\u06FF\u0750-\u077F\u08A0-\u08FF]"),
    "MONGODB_OBJECTID": re.compile(r"^[0-9a-fA-F]{24}$"),
    "ISBN_10": re.compile(r"^[0-9]{9}[0-9X]$"),
    "ISBN_13": re.compile(r"^[0-9]{13}$"),
})

# ============================================================================
# MESSAGES
# ============================================================================

ERROR_MESSAGES: Final[Mapping[str, Mapping[str, str]]] = MappingProxyType({
    "GENERAL": MappingProxyType({
        "INVALID_INPUT": "Invalid input provided",
        "SERVER_ERROR": "Internal server error",
        "NOT_FOUND": "Resource not found",
        "UNAUTHORIZED": "Unauthorized access",
        "FORBIDDEN": "Access forbidden",
        "VALIDATION_FAILED": "Validation failed",
    }),
    "AUTH": MappingProxyType({
        "INVALID_CREDENTIALS": "Invalid email or password",
        "TOKEN_EXPIRED": "Token has expired",
        "TOKEN_INVALID": "Invalid token",
        "ACCOUNT_INACTIVE": "Account is inactive",
        "PASSWORD_TOO_WEAK": "Password is too weak",
    }),
    "USER": MappingProxyType({
        "EMAIL_EXISTS": "Email already exists",
        "USER_NOT_FOUND": "User not found",
        "CANNOT_DELETE_ADMIN": "Cannot delete admin user",
    }),
    "BOOK": MappingProxyType({
        "BOOK_NOT_FOUND": "Book not found",
        "INVALID_CATEGORY": "Invalid book category",
        "FILE_REQUIRED": "Book file is required",
    }),
    "SCHOLAR": MappingProxyType({
        "SCHOLAR_NOT_FOUND": "Scholar not found",
        "HAS_BOOKS": "Cannot delete scholar with associated books",
    }),
    "DOWNLOAD": MappingProxyType({
        "DAILY_LIMIT_EXCEEDED": "Daily download limit exceeded",
        "FILE_NOT_FOUND": "Book file not found",
        "DOWNLOAD_FAILED": "Download failed",
    }),
})

SUCCESS_MESSAGES: Final[Mapping[str, Mapping[str, str]]] = MappingProxyType({
    "GENERAL": MappingProxyType({
        "OPERATION_SUCCESSFUL": "Operation completed successfully",
    }),
    "AUTH": MappingProxyType({
        "LOGIN_SUCCESSFUL": "Login successful",
        "LOGOUT_SUCCESSFUL": "Logout successful",
        "PASSWORD_CHANGED": "Password changed successfully",
        "PASSWORD_RESET_SENT": "Password reset email sent",
    }),
    "USER": MappingProxyType({
        "USER_CREATED": "User created successfully",
        "USER_UPDATED": "User updated successfully",
        "USER_DELETED": "User deleted successfully",
    }),
    "BOOK": MappingProxyType({
        "BOOK_CREATED": "Book created successfully",
        "BOOK_UPDATED": "Book updated successfully",
        "BOOK_DELETED": "Book deleted successfully",
        "FILE_UPLOADED": "File uploaded successfully",
    }),
    "SCHOLAR": MappingProxyType({
        "SCHOLAR_CREATED": "Scholar created successfully",
        "SCHOLAR_UPDATED": "Scholar updated successfully",
        "SCHOLAR_DELETED": "Scholar deleted successfully",
    }),
})

# ============================================================================
# ENVIRONMENT
# ============================================================================

ENV_VAR_ENVIRONMENT: Final[str] = "ISLAMIC_LIBRARY_ENV"
ENV_VAR_POLICY_FILE: Final[str] = "ISLAMIC_LIBRARY_POLICY_FILE"

# === COMPATIBILITY HASH ===
def _generate_policy_hash() -> str:
    """Generate hash of the limit-bearing constants for drift detection"""
    constants_data = {
        "FILE_MAX_SIZES": {k: v["MAX_SIZE"] for k, v in FILE_TYPES.items()},
        "MAX_LIMIT": MAX_LIMIT,
        "RATE_LIMITS": {k: dict(v) for k, v in RATE_LIMITS.items()},
        "MAX_QUERY_LENGTH": MAX_QUERY_LENGTH,
        "MAX_SEARCH_RESULTS": MAX_SEARCH_RESULTS,
    }
    json_str = str(sorted(constants_data.items()))
    return hashlib.sha256(json_str.encode()).hexdigest()[:16]

POLICY_CONSTANTS_HASH: Final[str] = _generate_policy_hash()

# ============================================================================
# VALIDATION FUNCTIONS
# ============================================================================

class PolicyBoundaryError(RuntimeError):
    """Error raised when a policy value or override violates its boundaries"""
    pass

def _is_count(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value > 0

def validate_policy_overrides(config: dict) -> None:
    """Validate override values against the hard limits; never loosen them"""
    violations = []

    file_sizes = config.get("file_max_sizes") or {}
    if not isinstance(file_sizes, dict):
        violations.append("file_max_sizes must be a mapping of file type to bytes")
        file_sizes = {}
    for kind, max_size in file_sizes.items():
        builtin = FILE_TYPES.get(str(kind).upper())
        if builtin is None:
            violations.append(f"unknown file type '{kind}'")
        elif not _is_count(max_size):
            violations.append(f"file_max_sizes.{kind} must be a positive integer")
        elif max_size > builtin["MAX_SIZE"]:
            violations.append(f"file_max_sizes.{kind} exceeds hard limit of {builtin['MAX_SIZE']} bytes")

    max_limit = config.get("max_limit")
    if max_limit is not None and (not _is_count(max_limit) or not MIN_LIMIT <= max_limit <= MAX_LIMIT):
        violations.append(f"max_limit must be between {MIN_LIMIT} and {MAX_LIMIT}")

    default_limit = config.get("default_limit")
    if default_limit is not None and (not _is_count(default_limit) or default_limit < MIN_LIMIT):
        violations.append(f"default_limit must be an integer of at least {MIN_LIMIT}")

    rate_limits = config.get("rate_limits") or {}
    if not isinstance(rate_limits, dict):
        violations.append("rate_limits must be a mapping of limiter name to settings")
        rate_limits = {}
    for kind, rule in rate_limits.items():
        builtin = RATE_LIMITS.get(str(kind).upper())
        if builtin is None:
            violations.append(f"unknown rate limit '{kind}'")
            continue
        if not isinstance(rule or {}, dict):
            violations.append(f"rate_limits.{kind} must be a mapping of settings")
            continue
        for key, value in (rule or {}).items():
            upper = str(key).upper()
            if upper not in builtin:
                violations.append(f"rate_limits.{kind}.{key} is not a known setting")
            elif not _is_count(value):
                violations.append(f"rate_limits.{kind}.{key} must be a positive integer")
            elif upper == "WINDOW_MS" and value < builtin[upper]:
                violations.append(f"rate_limits.{kind}.{key} is below the hard minimum of {builtin[upper]} ms")
            elif upper != "WINDOW_MS" and value > builtin[upper]:
                violations.append(f"rate_limits.{kind}.{key} exceeds hard limit of {builtin[upper]}")

    max_results = config.get("max_search_results")
    if max_results is not None and (not _is_count(max_results) or max_results > MAX_SEARCH_RESULTS):
        violations.append(f"max_search_results must be between 1 and {MAX_SEARCH_RESULTS}")

    if violations:
        raise PolicyBoundaryError(
            "Policy override violations:\n" +
            "\n".join(f"  • {v}" for v in violations)
        )

def get_policy_summary(policy: Any = None) -> dict:
    """Get a JSON-friendly summary of the limits in force (overrides included)"""
    if policy is None:
        from islamic_library.core.policy.table import get_policy_table
        policy = get_policy_table()
    return policy.summary()

def get_environment() -> AppEnvironment:
    """Read the running environment from ISLAMIC_LIBRARY_ENV (default: development)"""
    raw = os.getenv(ENV_VAR_ENVIRONMENT, AppEnvironment.DEVELOPMENT.value).strip().lower()
    if not is_member(AppEnvironment, raw):
        raise PolicyBoundaryError(
            f"{ENV_VAR_ENVIRONMENT}={raw!r} is not one of: "
            + ", ".join(e.value for e in AppEnvironment)
        )
    return AppEnvironment(raw)

# Export
__all__ = [
    "UserRole",
    "UserStatus",
    "DownloadStatus",
    "DownloadSource",
    "EmailTemplate",
    "LogLevel",
    "AppEnvironment",
    "is_member",
    "ISLAMIC_CATEGORIES",
    "LANGUAGES",
    "SCHOLAR_SPECIALIZATIONS",
    "FILE_TYPES",
    "DANGEROUS_MIME_TYPES",
    "DEFAULT_PAGE",
    "DEFAULT_LIMIT",
    "MAX_LIMIT",
    "MIN_LIMIT",
    "RATE_LIMITS",
    "JWT",
    "MIN_QUERY_LENGTH",
    "MAX_QUERY_LENGTH",
    "SEARCH_DEFAULT_LIMIT",
    "MAX_SEARCH_RESULTS",
    "CACHE_DURATION",
    "VALIDATION",
    "MIN_PUBLICATION_YEAR",
    "SORT_OPTIONS",
    "HTTP_STATUS",
    "API_ENDPOINTS",
    "COLORS",
    "CATEGORY_COLORS",
    "REGEX",
    "ERROR_MESSAGES",
    "SUCCESS_MESSAGES",
    "ENV_VAR_ENVIRONMENT",
    "ENV_VAR_POLICY_FILE",
    "POLICY_CONSTANTS_HASH",
    "PolicyBoundaryError",
    "validate_policy_overrides",
    "get_policy_summary",
    "get_environment",
]
