import pytest
from islamic_library.core.policy.table import POLICY, build_policy_table
from islamic_library.core.policy.validators import (
    PageRequest,
    calculate_password_strength,
    contains_arabic,
    format_file_size,
    validate_email,
    validate_isbn,
    validate_length,
    validate_name,
    validate_object_id,
    validate_pagination,
    validate_password,
    validate_phone,
    validate_search_query,
    validate_slug,
    validate_upload,
    validate_url,
    validate_year,
)


def test_email():
    assert validate_email("user@example.com") == []
    assert validate_email("not-an-email") == ["Invalid email format"]
    assert validate_email(None) == ["Invalid email format"]


def test_phone_ignores_separators():
    assert validate_phone("+966 50-123-4567") == []
    assert validate_phone("(050) 123 4567") == ["Invalid phone number format"]
    assert validate_phone("") == ["Phone number is required"]


def test_url_slug_object_id():
    assert validate_url("https://example.com/path?q=1") == []
    assert validate_url("javascript:alert(1)") == ["Invalid URL format"]
    assert validate_slug("my-book-title") == []
    assert validate_slug("My Book Title") != []
    assert validate_object_id("507f1f77bcf86cd799439011") == []
    assert validate_object_id("507f1f77bcf86cd79943901") == ["Invalid ObjectId format"]


@pytest.mark.parametrize("check, value", [
    (validate_email, "user@example.com\n"),
    (validate_object_id, "507f1f77bcf86cd799439011\n"),
    (validate_slug, "my-book\n"),
    (validate_url, "https://example.com\n"),
])
def test_trailing_newline_is_rejected(check, value):
    assert check(value) != []


def test_contains_arabic():
    assert contains_arabic("Sahih al-Bukhari صحيح البخاري")
    assert not contains_arabic("Sahih al-Bukhari")
    assert not contains_arabic(None)


@pytest.mark.parametrize("isbn", ["0306406152", "0-306-40615-2", "080442957X", "978-0-306-40615-7"])
def test_valid_isbn(isbn):
    assert validate_isbn(isbn) == []


@pytest.mark.parametrize("isbn, message", [
    ("0306406153", "Invalid ISBN-10 checksum"),
    ("9780306406158", "Invalid ISBN-13 checksum"),
    ("03064X6152", "Invalid ISBN-10 format"),
    ("97803064061X7", "Invalid ISBN-13 format"),
    ("12345", "ISBN must be 10 or 13 characters long"),
    ("", "ISBN is required"),
])
def test_invalid_isbn(isbn, message):
    assert validate_isbn(isbn) == [message]


def test_length_rules():
    assert validate_length("password", "secret") == []
    assert validate_length("password", "12345") == ["Password must be at least 6 characters long"]
    assert validate_length("password", "x" * 129) == ["Password cannot exceed 128 characters"]
    assert validate_length("name", "  ") == ["Name is required"]
    assert validate_length("bio", "short bio") == ["Bio must be at least 50 characters long"]
    assert validate_length("TITLE", "Riyad as-Salihin") == []
    with pytest.raises(KeyError):
        validate_length("isbn", "123")


def test_year_bounds():
    max_year = POLICY.validation.year.max_year
    assert validate_year(1400) == []
    assert validate_year(str(max_year)) == []
    assert validate_year(599) == ["Year must be 600 or later"]
    assert validate_year(max_year + 1) == [f"Year cannot be in the future (max: {max_year})"]
    assert validate_year(max_year + 1, allow_future=True) == []
    assert validate_year("MCMXCIX") == ["Year must be a valid number"]


def test_year_out_of_integer_range():
    assert validate_year(float("inf")) == ["Year must be a valid number"]
    assert validate_year(float("nan")) == ["Year must be a valid number"]


def test_year_uses_the_table_snapshot():
    table = build_policy_table(overrides_file="", current_year=2000)
    assert validate_year(2001, policy=table) == ["Year cannot be in the future (max: 2000)"]


def test_pagination_defaults():
    assert validate_pagination() == (PageRequest(page=1, limit=20), [])


def test_pagination_clamps_and_reports():
    request, violations = validate_pagination(page="0", limit="500")
    assert request == PageRequest(page=1, limit=100)
    assert violations == ["Page must be a positive integer", "Limit must be between 1 and 100"]

    request, violations = validate_pagination(page="abc", limit="x")
    assert request == PageRequest(page=1, limit=20)
    assert len(violations) == 2


def test_pagination_out_of_integer_range():
    request, violations = validate_pagination(page=float("inf"), limit=float("-inf"))
    assert request == PageRequest(page=1, limit=20)
    assert violations == ["Page must be a positive integer", "Limit must be between 1 and 100"]


def test_search_query():
    assert validate_search_query("  tafsir ") == []
    assert validate_search_query("   ") == ["Search query is required"]
    assert validate_search_query("q" * 201) == ["Search query cannot exceed 200 characters"]


def test_format_file_size():
    assert format_file_size(0) == "0 Bytes"
    assert format_file_size(512) == "512 Bytes"
    assert format_file_size(1536) == "1.5 KB"
    assert format_file_size(5 * 1024 * 1024) == "5 MB"
    assert format_file_size(50 * 1024 * 1024) == "50 MB"


def test_upload_accepted():
    assert validate_upload("book", "application/pdf", 10 * 1024 * 1024) == []
    assert validate_upload("cover", "image/webp", 1024) == []


def test_upload_rejects_wrong_type_and_size():
    violations = validate_upload("scholar_image", "application/pdf", 3 * 1024 * 1024)
    assert len(violations) == 2
    assert violations[0].startswith("File type application/pdf is not allowed")
    assert violations[1] == "File size (3 MB) exceeds maximum allowed size (2 MB)"


def test_upload_rejects_dangerous_type():
    assert validate_upload("book", "application/x-msdownload", 100) == [
        "File type is not allowed for security reasons"
    ]


def test_upload_missing_metadata():
    assert validate_upload("cover", None, None) == ["File mimetype is missing", "File size is missing"]


def test_upload_unknown_kind():
    with pytest.raises(KeyError):
        validate_upload("video", "video/mp4", 100)


def test_name_accepts_latin_and_arabic():
    assert validate_name("Ibn Qayyim al-Jawziyya") == []
    assert validate_name("Abd'Allah") == []
    assert validate_name("عبد الله بن المبارك") == []


def test_name_rejects_digits_and_symbols():
    assert validate_name("Ahmad2") == ["Name cannot contain numbers", "Name contains invalid characters"]
    assert validate_name("Ali!") == ["Name cannot contain special characters", "Name contains invalid characters"]
    assert validate_name("Ahmad2", allow_numbers=True) == ["Name contains invalid characters"]


def test_name_required_and_length():
    assert validate_name("   ") == ["Name is required"]
    assert validate_name(None) == ["Name is required"]
    assert validate_name(" A ") == ["Name must be at least 2 characters long"]
    assert validate_name("a" * 101) == ["Name cannot exceed 100 characters"]


@pytest.mark.parametrize("password, score, level", [
    ("", 0, "Very Weak"),
    ("abcdef", 1, "Very Weak"),
    ("abcdefgh", 2, "Very Weak"),
    ("abcdefg1", 3, "Weak"),
    ("Abcdef12", 4, "Medium"),
    ("Abcdef12!", 5, "Strong"),
    ("Abcdef12!xyz", 6, "Very Strong"),
])
def test_password_strength_levels(password, score, level):
    strength = calculate_password_strength(password)
    assert strength.score == score
    assert strength.level == level
    assert strength.percentage == round(score / 6 * 100)


def test_password_strength_checks():
    checks = calculate_password_strength("Abcdef12").checks
    assert checks["length"] and checks["uppercase"] and checks["numbers"]
    assert not checks["special_chars"]
    assert not checks["long_length"]


def test_password_length_only_by_default():
    assert validate_password("secret") == []
    assert validate_password("") == ["Password is required"]
    assert validate_password("12345") == ["Password must be at least 6 characters long"]


def test_password_complexity_requirements():
    assert validate_password("secret", require_uppercase=True, require_numbers=True) == [
        "Password must contain at least one uppercase letter",
        "Password must contain at least one number",
    ]
    assert validate_password("SECRET", require_lowercase=True, require_special_chars=True) == [
        "Password must contain at least one lowercase letter",
        "Password must contain at least one special character",
    ]
    assert validate_password("Secret1!", require_uppercase=True, require_lowercase=True,
                             require_numbers=True, require_special_chars=True) == []


def test_password_minimum_strength():
    assert validate_password("secret", min_score=4) == [POLICY.error_message("auth", "password_too_weak")]
    assert validate_password("Abcdef12", min_score=4) == []
