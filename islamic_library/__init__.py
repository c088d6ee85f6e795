"""
Islamic Library - shared policy table for the catalog backend
Enumerations, limits, validation rules and message text in one read-only place.

This package provides:
- Literal constants (roles, categories, languages, upload limits, messages)
- A validated, process-wide PolicyTable built once at import
- Optional YAML overrides that may tighten, never loosen, hard limits
- Sort alias decoding for list endpoints
- Input-boundary validators that read the table
"""

__version__ = "1.0.0"

# ============================================================================
# CONSTANTS & BOUNDARIES
# ============================================================================

from .core.config.constants import (
    UserRole,
    UserStatus,
    DownloadStatus,
    DownloadSource,
    EmailTemplate,
    LogLevel,
    AppEnvironment,
    is_member,
    POLICY_CONSTANTS_HASH,
    PolicyBoundaryError,
    validate_policy_overrides,
    get_policy_summary,
    get_environment,
)

# ============================================================================
# POLICY TABLE
# ============================================================================

from .core.policy.table import (
    PolicyTable,
    build_policy_table,
    get_policy_table,
    POLICY,
)
from .core.policy.sorting import (
    SortDirection,
    SortSpec,
    decode_sort_alias,
    encode_sort_alias,
    parse_sort,
)

# ============================================================================
# VALIDATORS
# ============================================================================

from .core.policy.validators import (
    PageRequest,
    PasswordStrength,
    validate_email,
    validate_phone,
    validate_url,
    validate_slug,
    validate_object_id,
    contains_arabic,
    validate_isbn,
    validate_length,
    validate_name,
    validate_password,
    calculate_password_strength,
    validate_year,
    validate_pagination,
    validate_search_query,
    validate_upload,
    format_file_size,
)

__all__ = [
    "__version__",
    # Constants
    "UserRole",
    "UserStatus",
    "DownloadStatus",
    "DownloadSource",
    "EmailTemplate",
    "LogLevel",
    "AppEnvironment",
    "is_member",
    "POLICY_CONSTANTS_HASH",
    "PolicyBoundaryError",
    "validate_policy_overrides",
    "get_policy_summary",
    "get_environment",
    # Table
    "PolicyTable",
    "build_policy_table",
    "get_policy_table",
    "POLICY",
    "SortDirection",
    "SortSpec",
    "decode_sort_alias",
    "encode_sort_alias",
    "parse_sort",
    # Validators
    "PageRequest",
    "PasswordStrength",
    "validate_email",
    "validate_phone",
    "validate_url",
    "validate_slug",
    "validate_object_id",
    "contains_arabic",
    "validate_isbn",
    "validate_length",
    "validate_name",
    "validate_password",
    "calculate_password_strength",
    "validate_year",
    "validate_pagination",
    "validate_search_query",
    "validate_upload",
    "format_file_size",
]
