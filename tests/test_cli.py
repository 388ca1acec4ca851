from mmsim.cli import NOTIONAL_PER_TRADE, separated_string


def test_separated_string_notional():
    assert separated_string(NOTIONAL_PER_TRADE) == "100,000"


def test_separated_string_small_and_large():
    assert separated_string(999.0) == "999"
    assert separated_string(1234567.0) == "1,234,567"


def test_separated_string_exact_thousand():
    assert separated_string(1000.0) == "1,000"
    assert separated_string(0.0) == "0"


def test_separated_string_strips_commas_back_to_number():
    for value in (5.0, 42.0, 12345.0, 987654321.0):
        assert float(separated_string(value).replace(",", "")) == value


def test_separated_string_groups_are_three_digits():
    text = separated_string(987654321.0)
    head, *rest = text.split(",")
    assert 1 <= len(head) <= 3
    assert rest
    assert all(len(group) == 3 for group in rest)