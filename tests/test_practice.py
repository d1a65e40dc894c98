import pytest

from app.utils.practice import pick_numbered

TOKENS = ["goes", "She", "to", "school"]


def test_numbers_pick_tokens_in_typed_order():
    assert pick_numbered(TOKENS, "2 1 3 4") == ["She", "goes", "to", "school"]


@pytest.mark.parametrize("raw", ["0 1 2 3", "-1 1 2 3", "1 2 3 5", "one two", "1.5"])
def test_out_of_range_or_non_numeric_input_is_rejected(raw):
    assert pick_numbered(TOKENS, raw) is None
