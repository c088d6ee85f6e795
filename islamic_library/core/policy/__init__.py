from .models import (
    parse_duration,
    FileTypePolicy,
    PaginationPolicy,
    SearchPolicy,
    RateLimitRule,
    TokenPolicy,
    LengthRule,
    YearRule,
    ValidationRules,
    CacheDurations,
    ColorPalette,
)
from .sorting import SortDirection, SortSpec, decode_sort_alias, encode_sort_alias, parse_sort
from .table import PolicyTable, build_policy_table, get_policy_table, POLICY

__all__ = [
    "parse_duration",
    "FileTypePolicy",
    "PaginationPolicy",
    "SearchPolicy",
    "RateLimitRule",
    "TokenPolicy",
    "LengthRule",
    "YearRule",
    "ValidationRules",
    "CacheDurations",
    "ColorPalette",
    "SortDirection",
    "SortSpec",
    "decode_sort_alias",
    "encode_sort_alias",
    "parse_sort",
    "PolicyTable",
    "build_policy_table",
    "get_policy_table",
    "POLICY",
]
