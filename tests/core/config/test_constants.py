import pytest
import yaml

from islamic_library.core.config.constants import (
    AppEnvironment,
    DownloadSource,
    DownloadStatus,
    EmailTemplate,
    FILE_TYPES,
    ISLAMIC_CATEGORIES,
    LANGUAGES,
    LogLevel,
    MAX_LIMIT,
    POLICY_CONSTANTS_HASH,
    PolicyBoundaryError,
    REGEX,
    SCHOLAR_SPECIALIZATIONS,
    UserRole,
    UserStatus,
    get_environment,
    get_policy_summary,
    is_member,
    validate_policy_overrides,
)
from islamic_library.core.policy.table import build_policy_table


@pytest.mark.parametrize("enum_cls, expected", [
    (UserRole, {"user", "admin"}),
    (UserStatus, {"active", "inactive"}),
    (DownloadStatus, {"completed", "failed", "cancelled"}),
    (DownloadSource, {"web", "mobile", "api"}),
    (EmailTemplate, {"welcome", "password-reset", "admin-notification"}),
    (LogLevel, {"error", "warn", "info", "http", "verbose", "debug", "silly"}),
    (AppEnvironment, {"development", "testing", "staging", "production"}),
])
def test_enumerations_are_closed(enum_cls, expected):
    assert {member.value for member in enum_cls} == expected
    for value in expected:
        assert is_member(enum_cls, value)
    assert not is_member(enum_cls, "superuser")


def test_catalog_vocabulary_sizes_and_order():
    assert len(ISLAMIC_CATEGORIES) == 29
    assert ISLAMIC_CATEGORIES[0] == "Islam. General Study and teaching."
    assert ISLAMIC_CATEGORIES[-1] == "Black Muslims."
    assert len(SCHOLAR_SPECIALIZATIONS) == 15
    assert SCHOLAR_SPECIALIZATIONS[0] == "Islamic Jurisprudence (Fiqh)"
    assert len(LANGUAGES) == 7
    assert LANGUAGES["ARABIC"] == "العربية"


def test_constant_tables_are_read_only():
    with pytest.raises(TypeError):
        LANGUAGES["SPANISH"] = "Español"
    with pytest.raises(TypeError):
        FILE_TYPES["BOOK"]["MAX_SIZE"] = 1


def test_file_type_sizes():
    assert FILE_TYPES["BOOK"]["MAX_SIZE"] == 52_428_800
    assert FILE_TYPES["COVER"]["MAX_SIZE"] == 5_242_880
    assert FILE_TYPES["SCHOLAR_IMAGE"]["MAX_SIZE"] == 2_097_152


@pytest.mark.parametrize("name, good, bad", [
    ("EMAIL", "user@example.com", "not-an-email"),
    ("SLUG", "my-book-title", "My Book Title"),
    ("MONGODB_OBJECTID", "507f1f77bcf86cd799439011", "507f1f77bcf86cd79943901"),
    ("PHONE", "+966501234567", "0501234567"),
    ("URL", "https://www.example.com/books?id=1", "ftp://example.com"),
    ("ISBN_10", "030640615X", "03064061X5"),
    ("ISBN_13", "9780306406157", "978030640615"),
])
def test_regex_canonical_examples(name, good, bad):
    assert REGEX[name].match(good)
    assert not REGEX[name].match(bad)


def test_arabic_detection():
    assert REGEX["ARABIC"].search("كتاب التوحيد")
    assert not REGEX["ARABIC"].search("Book of Tawhid")


def test_constants_hash_is_stable():
    assert len(POLICY_CONSTANTS_HASH) == 16
    int(POLICY_CONSTANTS_HASH, 16)


def test_validate_overrides_accepts_tighter_limits():
    validate_policy_overrides({
        "file_max_sizes": {"book": 10 * 1024 * 1024},
        "max_limit": 50,
        "rate_limits": {"auth": {"max_requests": 3}},
    })


def test_validate_overrides_collects_all_violations():
    with pytest.raises(PolicyBoundaryError) as exc_info:
        validate_policy_overrides({
            "file_max_sizes": {"book": 100 * 1024 * 1024, "video": 10},
            "max_limit": MAX_LIMIT + 1,
            "rate_limits": {"auth": {"max_requests": 0}, "upload": {}},
        })
    message = str(exc_info.value)
    assert "exceeds hard limit" in message
    assert "unknown file type 'video'" in message
    assert "max_limit" in message
    assert "rate_limits.auth.max_requests" in message
    assert "unknown rate limit 'upload'" in message


def test_validate_overrides_rejects_looser_rate_limits():
    with pytest.raises(PolicyBoundaryError) as exc_info:
        validate_policy_overrides({
            "rate_limits": {
                "auth": {"max_requests": 1000, "window_ms": 1},
                "download": {"daily_limit": 51},
            },
        })
    message = str(exc_info.value)
    assert "rate_limits.auth.max_requests exceeds hard limit of 5" in message
    assert "rate_limits.auth.window_ms is below the hard minimum" in message
    assert "rate_limits.download.daily_limit exceeds hard limit of 50" in message


def test_validate_overrides_rejects_malformed_shapes():
    with pytest.raises(PolicyBoundaryError) as exc_info:
        validate_policy_overrides({
            "file_max_sizes": [1, 2],
            "rate_limits": {"auth": 5},
            "max_limit": True,
            "default_limit": False,
        })
    message = str(exc_info.value)
    assert "file_max_sizes must be a mapping" in message
    assert "rate_limits.auth must be a mapping" in message
    assert "max_limit must be between" in message
    assert "default_limit must be an integer" in message


def test_validate_overrides_rejects_non_mapping_rate_limits():
    with pytest.raises(PolicyBoundaryError, match="rate_limits must be a mapping"):
        validate_policy_overrides({"rate_limits": [5]})


def test_policy_summary():
    summary = get_policy_summary()
    assert summary["constants_hash"] == POLICY_CONSTANTS_HASH
    assert summary["uploads"]["book"]["allowed_types"] == ["application/pdf"]
    assert summary["pagination"]["max_limit"] == MAX_LIMIT
    assert summary["rate_limits"]["download"]["daily_limit"] == 50


def test_policy_summary_follows_the_given_table(tmp_path):
    path = tmp_path / "policy.yaml"
    path.write_text(yaml.dump({"max_limit": 25}))
    summary = get_policy_summary(build_policy_table(overrides_file=str(path)))
    assert summary["pagination"]["max_limit"] == 25
    assert summary["constants_hash"] == POLICY_CONSTANTS_HASH


def test_environment_defaults_to_development(monkeypatch):
    monkeypatch.delenv("ISLAMIC_LIBRARY_ENV", raising=False)
    assert get_environment() is AppEnvironment.DEVELOPMENT


def test_environment_from_variable(monkeypatch):
    monkeypatch.setenv("ISLAMIC_LIBRARY_ENV", "Production")
    assert get_environment() is AppEnvironment.PRODUCTION


def test_environment_rejects_unknown_value(monkeypatch):
    monkeypatch.setenv("ISLAMIC_LIBRARY_ENV", "qa")
    with pytest.raises(PolicyBoundaryError):
        get_environment()
