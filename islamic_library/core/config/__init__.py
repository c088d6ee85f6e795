from .constants import (
    PolicyBoundaryError,
    POLICY_CONSTANTS_HASH,
    validate_policy_overrides,
    get_policy_summary,
    get_environment,
    is_member,
)

__all__ = [
    "PolicyBoundaryError",
    "POLICY_CONSTANTS_HASH",
    "validate_policy_overrides",
    "get_policy_summary",
    "get_environment",
    "is_member",
]
