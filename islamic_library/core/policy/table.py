# islamic_library/core/policy/table.py
"""
The process-wide policy table.

`build_policy_table` turns the literal constants (plus optional YAML
overrides) into typed, validated records and freezes them into a single
`PolicyTable`. `POLICY` is built eagerly when this module is imported and is
never mutated afterwards, so it can be read from any thread without locking.

The maximum publication year is the only computed value: it is the calendar
year at the moment the table is built. A long-running process keeps the
year it started with; it is not recomputed per call.
"""

import logging
import os
import re
from dataclasses import dataclass
from datetime import date
from enum import Enum
from functools import lru_cache
from http import HTTPStatus
from types import MappingProxyType
from typing import Any, Dict, Final, FrozenSet, Mapping, Optional, Tuple, Type

import yaml
from pydantic import ValidationError

from islamic_library.core.config.constants import (
    API_ENDPOINTS,
    AppEnvironment,
    CACHE_DURATION,
    CATEGORY_COLORS,
    COLORS,
    DEFAULT_LIMIT,
    DEFAULT_PAGE,
    DownloadSource,
    DownloadStatus,
    EmailTemplate,
    ENV_VAR_POLICY_FILE,
    ERROR_MESSAGES,
    FILE_TYPES,
    HTTP_STATUS,
    ISLAMIC_CATEGORIES,
    JWT,
    LANGUAGES,
    LogLevel,
    MAX_LIMIT,
    MAX_QUERY_LENGTH,
    MAX_SEARCH_RESULTS,
    MIN_LIMIT,
    MIN_PUBLICATION_YEAR,
    MIN_QUERY_LENGTH,
    POLICY_CONSTANTS_HASH,
    PolicyBoundaryError,
    RATE_LIMITS,
    REGEX,
    SCHOLAR_SPECIALIZATIONS,
    SEARCH_DEFAULT_LIMIT,
    SORT_OPTIONS,
    SUCCESS_MESSAGES,
    UserRole,
    UserStatus,
    VALIDATION,
    get_environment,
    validate_policy_overrides,
)
from islamic_library.core.policy.models import (
    CacheDurations,
    ColorPalette,
    FileTypePolicy,
    LengthRule,
    PaginationPolicy,
    RateLimitRule,
    SearchPolicy,
    TokenPolicy,
    ValidationRules,
    YearRule,
)
from islamic_library.core.policy.sorting import SortDirection, SortSpec, decode_sort_alias

logger = logging.getLogger(__name__)

OVERRIDE_KEYS: Final[FrozenSet[str]] = frozenset({
    "file_max_sizes",
    "default_limit",
    "max_limit",
    "rate_limits",
    "max_search_results",
})


def _current_year() -> int:
    return date.today().year


def _values(enum_cls: Type[Enum]) -> FrozenSet[str]:
    return frozenset(member.value for member in enum_cls)


@dataclass(frozen=True)
class PolicyTable:
    """Read-only view of every enumeration, limit and message string."""
    roles: FrozenSet[str]
    statuses: FrozenSet[str]
    categories: Tuple[str, ...]
    languages: Mapping[str, str]
    specializations: Tuple[str, ...]
    download_statuses: FrozenSet[str]
    download_sources: FrozenSet[str]
    file_types: Mapping[str, FileTypePolicy]
    pagination: PaginationPolicy
    rate_limits: Mapping[str, RateLimitRule]
    token: TokenPolicy
    email_templates: FrozenSet[str]
    sort_options: Mapping[str, Mapping[str, SortSpec]]
    http_status: Mapping[str, int]
    cache: CacheDurations
    search: SearchPolicy
    validation: ValidationRules
    colors: ColorPalette
    regex: Mapping[str, "re.Pattern[str]"]
    error_messages: Mapping[str, Mapping[str, str]]
    success_messages: Mapping[str, Mapping[str, str]]
    api_endpoints: Mapping[str, str]
    log_levels: FrozenSet[str]
    environments: FrozenSet[str]

    def file_policy(self, kind: str) -> FileTypePolicy:
        """Upload policy for 'book', 'cover' or 'scholar_image'. KeyError otherwise."""
        return self.file_types[kind.upper()]

    def rate_limit(self, kind: str) -> RateLimitRule:
        return self.rate_limits[kind.upper()]

    def sort_spec(self, entity: str, option: str) -> SortSpec:
        """e.g. sort_spec('books', 'title_desc') -> SortSpec('title', DESCENDING)"""
        return self.sort_options[entity.upper()][option.upper()]

    def sortable_fields(self, entity: str) -> FrozenSet[str]:
        return frozenset(spec.field for spec in self.sort_options[entity.upper()].values())

    def error_message(self, domain: str, kind: str) -> str:
        return self.error_messages[domain.upper()][kind.upper()]

    def success_message(self, domain: str, kind: str) -> str:
        return self.success_messages[domain.upper()][kind.upper()]

    def is_category(self, category: str) -> bool:
        return category in self.categories

    def category_color(self, category: str) -> str:
        """Palette color for a category, by its position in the display order."""
        try:
            index = self.categories.index(category)
        except ValueError:
            raise KeyError(f"Unknown category: {category!r}") from None
        return self.colors.color_for(index)

    def summary(self) -> Dict[str, Any]:
        """JSON-friendly view of the limits in force, for diagnostics endpoints."""
        return {
            "constants_hash": POLICY_CONSTANTS_HASH,
            "environment": get_environment().value,
            "uploads": {
                kind.lower(): {
                    "allowed_types": sorted(policy.allowed_types),
                    "max_size": policy.max_size,
                    "upload_path": policy.upload_path,
                }
                for kind, policy in self.file_types.items()
            },
            "pagination": {
                "default_page": self.pagination.default_page,
                "default_limit": self.pagination.default_limit,
                "min_limit": self.pagination.min_limit,
                "max_limit": self.pagination.max_limit,
            },
            "rate_limits": {
                kind.lower(): {
                    key: value
                    for key, value in (
                        ("window_ms", rule.window_ms),
                        ("max_requests", rule.max_requests),
                        ("daily_limit", rule.daily_limit),
                    )
                    if value is not None
                }
                for kind, rule in self.rate_limits.items()
            },
            "search": {
                "min_query_length": self.search.min_query_length,
                "max_query_length": self.search.max_query_length,
                "default_limit": self.search.default_limit,
                "max_results": self.search.max_results,
            },
            "cache_seconds": {
                "short": self.cache.short,
                "medium": self.cache.medium,
                "long": self.cache.long,
                "very_long": self.cache.very_long,
            },
        }


# -----------------------------------------------------------------------------
# Construction
# -----------------------------------------------------------------------------
def _require_unique(label: str, items: Tuple[str, ...]) -> None:
    seen = set()
    duplicates = []
    for item in items:
        if item in seen:
            duplicates.append(item)
        seen.add(item)
    if duplicates:
        raise PolicyBoundaryError(f"{label} contains duplicate entries: {duplicates}")


def _check_http_status(table: Mapping[str, int]) -> None:
    for name, code in table.items():
        member = HTTPStatus.__members__.get(name)
        if member is None or member.value != code:
            raise PolicyBoundaryError(f"HTTP status {name}={code} is not a standard status code")


def _build_sort_options() -> Mapping[str, Mapping[str, SortSpec]]:
    entities = {}
    for entity, aliases in SORT_OPTIONS.items():
        specs = {}
        for option, alias in aliases.items():
            try:
                spec = decode_sort_alias(alias)
            except ValueError as e:
                raise PolicyBoundaryError(f"{entity}.{option}: {e}") from e
            expected = SortDirection.DESCENDING if option.endswith("_DESC") else SortDirection.ASCENDING
            if spec.direction is not expected:
                raise PolicyBoundaryError(f"{entity}.{option} alias {alias!r} has the wrong direction")
            specs[option] = spec
        entities[entity] = MappingProxyType(specs)
    return MappingProxyType(entities)


def _freeze_nested(table: Mapping[str, Mapping[str, str]]) -> Mapping[str, Mapping[str, str]]:
    return MappingProxyType({k: MappingProxyType(dict(v)) for k, v in table.items()})


def _load_overrides(path: Optional[str]) -> Dict[str, Any]:
    """Read YAML overrides; a missing file means no overrides."""
    if not path:
        return {}
    if not os.path.exists(path):
        logger.warning(f"Policy overrides file {path} not found, using built-in limits")
        return {}
    with open(path, "r") as f:
        raw = yaml.safe_load(f)
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        logger.error(f"Policy overrides file {path} must contain a mapping")
        raise PolicyBoundaryError(f"Policy overrides file {path} must contain a mapping")

    unknown = sorted(str(k) for k in raw if k not in OVERRIDE_KEYS)
    if unknown:
        logger.warning(f"Ignoring unknown policy override keys: {unknown}")
    overrides = {k: v for k, v in raw.items() if k in OVERRIDE_KEYS}
    try:
        validate_policy_overrides(overrides)
    except PolicyBoundaryError as e:
        logger.error(f"Rejected policy overrides from {path}: {e}")
        raise
    logger.info(f"Loaded policy overrides from {path}: {sorted(overrides)}")
    return overrides


def _build_records(overrides: Dict[str, Any], current_year: int) -> Dict[str, Any]:
    size_overrides = {str(k).upper(): v for k, v in (overrides.get("file_max_sizes") or {}).items()}
    file_types = {
        kind: FileTypePolicy(
            allowed_types=spec["ALLOWED_TYPES"],
            max_size=size_overrides.get(kind, spec["MAX_SIZE"]),
            upload_path=spec["UPLOAD_PATH"],
        )
        for kind, spec in FILE_TYPES.items()
    }

    rate_overrides = {
        str(k).upper(): {str(key).upper(): value for key, value in (v or {}).items()}
        for k, v in (overrides.get("rate_limits") or {}).items()
    }
    rate_limits = {}
    for kind, rule in RATE_LIMITS.items():
        merged = {**rule, **rate_overrides.get(kind, {})}
        rate_limits[kind] = RateLimitRule(
            window_ms=merged["WINDOW_MS"],
            max_requests=merged.get("MAX_REQUESTS"),
            daily_limit=merged.get("DAILY_LIMIT"),
        )

    # a tighter max_limit pulls the built-in default down with it
    max_limit = overrides.get("max_limit", MAX_LIMIT)

    lengths = {
        field.lower(): LengthRule(min_length=rule["MIN_LENGTH"], max_length=rule["MAX_LENGTH"])
        for field, rule in VALIDATION.items()
    }

    return {
        "file_types": MappingProxyType(file_types),
        "pagination": PaginationPolicy(
            default_page=DEFAULT_PAGE,
            default_limit=overrides.get("default_limit", min(DEFAULT_LIMIT, max_limit)),
            max_limit=max_limit,
            min_limit=MIN_LIMIT,
        ),
        "rate_limits": MappingProxyType(rate_limits),
        "token": TokenPolicy(
            access_token_expire=JWT["ACCESS_TOKEN_EXPIRE"],
            refresh_token_expire=JWT["REFRESH_TOKEN_EXPIRE"],
            issuer=JWT["ISSUER"],
            audience=JWT["AUDIENCE"],
        ),
        "cache": CacheDurations(
            short=CACHE_DURATION["SHORT"],
            medium=CACHE_DURATION["MEDIUM"],
            long=CACHE_DURATION["LONG"],
            very_long=CACHE_DURATION["VERY_LONG"],
        ),
        "search": SearchPolicy(
            min_query_length=MIN_QUERY_LENGTH,
            max_query_length=MAX_QUERY_LENGTH,
            default_limit=SEARCH_DEFAULT_LIMIT,
            max_results=overrides.get("max_search_results", MAX_SEARCH_RESULTS),
        ),
        "validation": ValidationRules(
            **lengths,
            year=YearRule(min_year=MIN_PUBLICATION_YEAR, max_year=current_year),
        ),
        "colors": ColorPalette(
            **{name.lower(): value for name, value in COLORS.items()},
            category_colors=CATEGORY_COLORS,
        ),
    }


def build_policy_table(
    overrides_file: Optional[str] = None,
    current_year: Optional[int] = None,
) -> PolicyTable:
    """
    Build and validate a policy table.

    overrides_file defaults to $ISLAMIC_LIBRARY_POLICY_FILE. current_year
    defaults to today's calendar year and becomes the publication-year ceiling.
    Raises PolicyBoundaryError if any invariant does not hold.
    """
    if overrides_file is None:
        overrides_file = os.getenv(ENV_VAR_POLICY_FILE)
    year = current_year if current_year is not None else _current_year()

    overrides = _load_overrides(overrides_file)

    _require_unique("ISLAMIC_CATEGORIES", ISLAMIC_CATEGORIES)
    _require_unique("SCHOLAR_SPECIALIZATIONS", SCHOLAR_SPECIALIZATIONS)
    _check_http_status(HTTP_STATUS)

    try:
        records = _build_records(overrides, year)
    except ValidationError as exc:
        logger.error(f"Policy table failed validation: {exc}")
        raise PolicyBoundaryError(f"Invalid policy table: {exc}") from exc

    table = PolicyTable(
        roles=_values(UserRole),
        statuses=_values(UserStatus),
        categories=ISLAMIC_CATEGORIES,
        languages=LANGUAGES,
        specializations=SCHOLAR_SPECIALIZATIONS,
        download_statuses=_values(DownloadStatus),
        download_sources=_values(DownloadSource),
        email_templates=_values(EmailTemplate),
        sort_options=_build_sort_options(),
        http_status=HTTP_STATUS,
        regex=REGEX,
        error_messages=_freeze_nested(ERROR_MESSAGES),
        success_messages=_freeze_nested(SUCCESS_MESSAGES),
        api_endpoints=API_ENDPOINTS,
        log_levels=_values(LogLevel),
        environments=_values(AppEnvironment),
        **records,
    )
    logger.info(
        f"Built policy table: {len(table.categories)} categories, "
        f"{len(table.file_types)} upload policies, max publication year {year}"
    )
    return table


@lru_cache(maxsize=1)
def get_policy_table() -> PolicyTable:
    """The process-wide table; built once, shared by every caller."""
    return build_policy_table()


POLICY: Final[PolicyTable] = get_policy_table()

__all__ = [
    "PolicyTable",
    "build_policy_table",
    "get_policy_table",
    "POLICY",
]
