# islamic_library/core/policy/models.py
"""
Policy Records – typed, self-validating value objects for the policy table.

Each nested group of the constants table (upload rules, paging, throttling,
token lifetimes, field lengths, ...) becomes a frozen pydantic model. The
invariants of a group are checked when the record is built, so a bad literal
or a bad override stops the process at startup instead of surfacing as a
confusing rejection at request time.
"""

from __future__ import annotations

import re
from datetime import timedelta
from typing import FrozenSet, Optional, Tuple

from pydantic import BaseModel, Field, field_validator, model_validator

# -----------------------------------------------------------------------------
# Duration literals ("24h", "7d", "15m")
# -----------------------------------------------------------------------------
_DURATION_PATTERN = re.compile(r"^(\d+)\s*(s|m|h|d|w)$")
_DURATION_UNITS = {
    "s": timedelta(seconds=1),
    "m": timedelta(minutes=1),
    "h": timedelta(hours=1),
    "d": timedelta(days=1),
    "w": timedelta(weeks=1),
}

_HEX_COLOR = re.compile(r"^#[0-9A-Fa-f]{6}$")


def parse_duration(literal: str) -> timedelta:
    """
    Convert a duration literal such as "24h" or "7d" into a timedelta.
    Raises ValueError for anything that is not <positive int><unit>.
    """
    match = _DURATION_PATTERN.match(literal.strip()) if isinstance(literal, str) else None
    if not match:
        raise ValueError(f"Invalid duration literal: {literal!r}")
    amount = int(match.group(1))
    if amount <= 0:
        raise ValueError(f"Duration must be positive: {literal!r}")
    return amount * _DURATION_UNITS[match.group(2)]


class PolicyRecord(BaseModel):
    """Base for all policy records: immutable, no unknown fields."""

    class Config:
        frozen = True
        extra = "forbid"

# -----------------------------------------------------------------------------
# Uploads
# -----------------------------------------------------------------------------
class FileTypePolicy(PolicyRecord):
    """Upload rules for one file category (book, cover, scholar image)."""
    allowed_types: FrozenSet[str] = Field(..., description="Accepted MIME types")
    max_size: int = Field(..., gt=0, description="Maximum size in bytes")
    upload_path: str = Field(..., description="Relative storage directory")

    @field_validator("allowed_types")
    def validate_allowed_types(cls, v: FrozenSet[str]) -> FrozenSet[str]:
        if not v:
            raise ValueError("allowed_types must not be empty")
        return v

    @field_validator("upload_path")
    def validate_upload_path(cls, v: str) -> str:
        if not v or v.startswith("/") or ".." in v.split("/"):
            raise ValueError(f"upload_path must be a relative path inside the upload root: {v!r}")
        return v

    def allows(self, content_type: str) -> bool:
        return content_type.lower() in self.allowed_types

# -----------------------------------------------------------------------------
# Paging and search
# -----------------------------------------------------------------------------
class PaginationPolicy(PolicyRecord):
    default_page: int = Field(1, ge=1)
    default_limit: int
    max_limit: int
    min_limit: int = Field(1, ge=1)

    @model_validator(mode="after")
    def check_bounds(self) -> "PaginationPolicy":
        if not self.min_limit <= self.default_limit <= self.max_limit:
            raise ValueError(
                f"pagination requires min_limit <= default_limit <= max_limit, "
                f"got {self.min_limit} / {self.default_limit} / {self.max_limit}"
            )
        return self

    def clamp_limit(self, limit: int) -> int:
        return min(self.max_limit, max(self.min_limit, limit))


class SearchPolicy(PolicyRecord):
    min_query_length: int = Field(..., ge=0)
    max_query_length: int
    default_limit: int = Field(..., gt=0)
    max_results: int = Field(..., gt=0)

    @model_validator(mode="after")
    def check_bounds(self) -> "SearchPolicy":
        if self.max_query_length <= self.min_query_length:
            raise ValueError("max_query_length must be greater than min_query_length")
        if self.default_limit > self.max_results:
            raise ValueError("default_limit cannot exceed max_results")
        return self

# -----------------------------------------------------------------------------
# Throttling
# -----------------------------------------------------------------------------
class RateLimitRule(PolicyRecord):
    """
    A fixed-window limit. General and auth limits count requests per window;
    the download limit counts downloads per day.
    """
    window_ms: int = Field(..., gt=0)
    max_requests: Optional[int] = Field(None, gt=0)
    daily_limit: Optional[int] = Field(None, gt=0)

    @model_validator(mode="after")
    def check_limit_present(self) -> "RateLimitRule":
        if self.max_requests is None and self.daily_limit is None:
            raise ValueError("rate limit needs max_requests or daily_limit")
        return self

    @property
    def window(self) -> timedelta:
        return timedelta(milliseconds=self.window_ms)

    @property
    def limit(self) -> int:
        return self.max_requests if self.max_requests is not None else self.daily_limit

# -----------------------------------------------------------------------------
# Tokens
# -----------------------------------------------------------------------------
class TokenPolicy(PolicyRecord):
    access_token_expire: str
    refresh_token_expire: str
    issuer: str = Field(..., min_length=1)
    audience: str = Field(..., min_length=1)

    @field_validator("access_token_expire", "refresh_token_expire")
    def validate_duration(cls, v: str) -> str:
        parse_duration(v)
        return v

    @model_validator(mode="after")
    def check_lifetimes(self) -> "TokenPolicy":
        if self.access_lifetime >= self.refresh_lifetime:
            raise ValueError("access token must expire before the refresh token")
        return self

    @property
    def access_lifetime(self) -> timedelta:
        return parse_duration(self.access_token_expire)

    @property
    def refresh_lifetime(self) -> timedelta:
        return parse_duration(self.refresh_token_expire)

# -----------------------------------------------------------------------------
# Field validation rules
# -----------------------------------------------------------------------------
class LengthRule(PolicyRecord):
    min_length: int = Field(..., ge=0)
    max_length: int

    @model_validator(mode="after")
    def check_bounds(self) -> "LengthRule":
        if self.min_length > self.max_length:
            raise ValueError(f"min_length {self.min_length} exceeds max_length {self.max_length}")
        return self

    def contains(self, length: int) -> bool:
        return self.min_length <= length <= self.max_length


class YearRule(PolicyRecord):
    """Publication year bounds. max_year is a snapshot taken when the table was built."""
    min_year: int
    max_year: int

    @model_validator(mode="after")
    def check_bounds(self) -> "YearRule":
        if self.min_year > self.max_year:
            raise ValueError(f"min_year {self.min_year} exceeds max_year {self.max_year}")
        return self

    def contains(self, year: int) -> bool:
        return self.min_year <= year <= self.max_year


class ValidationRules(PolicyRecord):
    password: LengthRule
    name: LengthRule
    title: LengthRule
    description: LengthRule
    bio: LengthRule
    year: YearRule

    def length_rule(self, field: str) -> LengthRule:
        """Look up a length rule by field name (case-insensitive)."""
        key = field.lower()
        if key not in ("password", "name", "title", "description", "bio"):
            raise KeyError(f"No length rule for field '{field}'")
        return getattr(self, key)

# -----------------------------------------------------------------------------
# Cache tiers
# -----------------------------------------------------------------------------
class CacheDurations(PolicyRecord):
    """Cache lifetimes in seconds; tiers must be strictly increasing."""
    short: int = Field(..., gt=0)
    medium: int = Field(..., gt=0)
    long: int = Field(..., gt=0)
    very_long: int = Field(..., gt=0)

    @model_validator(mode="after")
    def check_monotonic(self) -> "CacheDurations":
        if not self.short < self.medium < self.long < self.very_long:
            raise ValueError("cache tiers must satisfy SHORT < MEDIUM < LONG < VERY_LONG")
        return self

# -----------------------------------------------------------------------------
# Colors
# -----------------------------------------------------------------------------
class ColorPalette(PolicyRecord):
    primary: str
    secondary: str
    success: str
    warning: str
    error: str
    info: str
    category_colors: Tuple[str, ...]

    @field_validator("primary", "secondary", "success", "warning", "error", "info")
    def validate_hex(cls, v: str) -> str:
        if not _HEX_COLOR.match(v):
            raise ValueError(f"Invalid hex color: {v!r}")
        return v

    @field_validator("category_colors")
    def validate_category_colors(cls, v: Tuple[str, ...]) -> Tuple[str, ...]:
        if not v:
            raise ValueError("category_colors must not be empty")
        bad = [c for c in v if not _HEX_COLOR.match(c)]
        if bad:
            raise ValueError(f"Invalid hex colors in palette: {bad}")
        return v

    def color_for(self, index: int) -> str:
        """Palette color for the index-th category; the palette repeats."""
        return self.category_colors[index % len(self.category_colors)]


__all__ = [
    "parse_duration",
    "PolicyRecord",
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
]
