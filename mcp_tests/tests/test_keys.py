import pytest

from core.errors import ValidationError
from core.keys import make_key, sanitize_key


def test_sanitize_key_replaces_disallowed_chars():
    assert sanitize_key("recipe:Borscht soup!") == "recipe:Borscht_soup_"
    assert sanitize_key("user_42.v1-x") == "user_42.v1-x"


@pytest.mark.parametrize("bad", [None, "", "   ", 42])
def test_sanitize_key_rejects_invalid(bad):
    with pytest.raises(ValidationError):
        sanitize_key(bad)


def test_make_key_joins_kind_and_id():
    assert make_key("logs", "2024-01-05") == "logs:2024-01-05"


def test_sanitize_key_keeps_trailing_whitespace_distinct():
    assert sanitize_key("a ") == "a_"
    assert sanitize_key(" a") == "_a"
    assert sanitize_key("a") == "a"
