import pytest

from kebab.errors import Issue, ValidationError
from kebab.validation import parse_identifier, require_title, validate_title


@pytest.mark.parametrize("title", ["a", " ", "To Do", "é" * 255, "a" * 255])
def test_valid_titles(title):
    assert validate_title(title) == []
    assert require_title(title) == title


@pytest.mark.parametrize(
    "value, issue",
    [
        (None, "is required"),
        ("", "must be at least 1 character"),
        ("a" * 256, "must be at most 255 characters"),
        (12, "must be a string"),
        (["a"], "must be a string"),
    ],
)
def test_invalid_titles(value, issue):
    assert validate_title(value) == [Issue("title", issue)]


def test_require_title_raises_with_issues():
    with pytest.raises(ValidationError) as exc_info:
        require_title("", field="name")
    assert exc_info.value.issues == [Issue("name", "must be at least 1 character")]
    assert exc_info.value.status_code == 400


def test_parse_identifier_canonicalizes():
    value = "3F2504E0-4F89-11D3-9A0C-0305E82C3301"
    assert parse_identifier(value) == value.lower()


@pytest.mark.parametrize(
    "value",
    [
        "not-a-uuid",
        "",
        "3f2504e04f8911d39a0c0305e82c3301",
        "{3f2504e0-4f89-11d3-9a0c-0305e82c3301}",
        "3f2504e0-4f89-11d3-9a0c-0305e82c330",
    ],
)
def test_parse_identifier_rejects_malformed(value):
    with pytest.raises(ValidationError) as exc_info:
        parse_identifier(value)
    assert exc_info.value.issues == [Issue("id", "must be a valid UUID")]


def test_title_must_encode_as_utf8():
    assert validate_title("\ud800") == [Issue("title", "must be valid UTF-8")]
