import pytest
from islamic_library.core.policy.sorting import (
    SortDirection,
    SortSpec,
    decode_sort_alias,
    encode_sort_alias,
    parse_sort,
)
from islamic_library.core.policy.table import POLICY


def test_decode_descending_alias():
    assert decode_sort_alias("-title") == SortSpec("title", SortDirection.DESCENDING)


def test_decode_ascending_alias():
    assert decode_sort_alias("title") == SortSpec("title", SortDirection.ASCENDING)


@pytest.mark.parametrize("alias", ["", "-", "--title", "   "])
def test_decode_rejects_malformed_alias(alias):
    with pytest.raises(ValueError):
        decode_sort_alias(alias)


def test_every_configured_alias_round_trips():
    for entity, options in POLICY.sort_options.items():
        for option, spec in options.items():
            assert decode_sort_alias(spec.alias) == spec
            assert encode_sort_alias(spec) == spec.alias


def test_parse_sort_with_allowed_fields():
    specs, violations = parse_sort("-downloads, title", allowed_fields={"title", "downloads"})
    assert violations == []
    assert specs == [
        SortSpec("downloads", SortDirection.DESCENDING),
        SortSpec("title", SortDirection.ASCENDING),
    ]


def test_parse_sort_reports_disallowed_field():
    specs, violations = parse_sort("-password,name", allowed_fields={"name"})
    assert specs == [SortSpec("name")]
    assert violations == ["Sort field 'password' is not allowed"]


def test_parse_sort_empty_parameter():
    assert parse_sort(None) == ([], [])
    assert parse_sort("") == ([], [])


def test_parse_sort_repeated_field_last_direction_wins():
    assert parse_sort("-title,title") == ([SortSpec("title")], [])
    specs, _ = parse_sort("title,-downloads,-title")
    assert specs == [
        SortSpec("title", SortDirection.DESCENDING),
        SortSpec("downloads", SortDirection.DESCENDING),
    ]
