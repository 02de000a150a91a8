"""Tests for query string encoding."""

import pytest

from ghsteps.github.client import decode_query, encode_query


def test_scalars_are_stringified():
    assert encode_query({"state": "open", "per_page": 30}) == "state=open&per_page=30"


def test_booleans_are_lowercase():
    assert encode_query({"draft": True, "locked": False}) == "draft=true&locked=false"


def test_none_values_are_dropped():
    assert encode_query({"state": None, "page": 2}) == "page=2"


def test_lists_repeat_the_key():
    assert encode_query({"labels": ["a", "b"]}) == "labels=a&labels=b"


def test_nested_mappings_use_brackets():
    assert encode_query({"filter": {"state": "open"}}) == "filter%5Bstate%5D=open"


def test_special_characters_are_escaped():
    assert encode_query({"q": "is:open label:bug"}) == "q=is%3Aopen+label%3Abug"


def test_decode_accepts_leading_question_mark():
    assert decode_query("?a=1") == {"a": "1"}


@pytest.mark.parametrize(
    "params",
    [
        {"state": "open", "sort": "created"},
        {"labels": ["bug", "help wanted"], "page": "2"},
        {"filter": {"state": "closed", "since": "2024-01-01T00:00:00Z"}},
        {"q": "emoji 🎉 & symbols =?/"},
    ],
)
def test_round_trip(params):
    assert decode_query(encode_query(params)) == params
