import math

import numpy as np
import pytest

from common.errors import ParseError
from transformations.numeric_parser import (
    is_irregular_k_token,
    parse_income_token,
    parse_plain_number,
)


@pytest.mark.parametrize(
    "token, expected",
    [
        ("12.3k", 12300),
        ("0.5k", 500),
        ("45", 45),
        ("1450.5", 1450.5),
        ("-3", -3),
    ],
)
def test_parse_income_token(token, expected):
    assert parse_income_token(token) == expected


def test_plain_numbers_round_trip():
    for value in [0.0, 1.0, 980.0, 1234.5678, 1e-3, 123456789.0]:
        assert parse_income_token(str(value)) == value


def test_k_rule_is_strip_digits_times_100():
    # only exact with one fractional digit; the rule is kept as-is
    assert parse_income_token("12k") == 1200
    assert parse_income_token("12.34k") == 123400
    assert parse_income_token("1,2.3k") == 12300


def test_uppercase_k_is_not_a_suffix():
    with pytest.raises(ParseError):
        parse_income_token("12.3K")


def test_numeric_cells_pass_through():
    assert parse_income_token(980) == 980.0
    assert parse_income_token(np.float64(1.5)) == 1.5


@pytest.mark.parametrize("token", ["abc", "", "k", "..k", "12.3 k x"])
def test_invalid_tokens_raise(token):
    with pytest.raises(ParseError) as excinfo:
        parse_income_token(token)
    assert excinfo.value.token == token


@pytest.mark.parametrize("token", ["inf", "-inf", "nan", "Infinity", float("inf")])
def test_non_finite_income_values_raise(token):
    with pytest.raises(ParseError) as excinfo:
        parse_income_token(token)
    assert excinfo.value.reason == "non-finite value"


@pytest.mark.parametrize("token", ["inf", "-inf", "nan", float("nan")])
def test_non_finite_plain_numbers_raise(token):
    with pytest.raises(ParseError) as excinfo:
        parse_plain_number(token)
    assert excinfo.value.reason == "non-finite value"


def test_parse_error_is_a_value_error():
    with pytest.raises(ValueError):
        parse_income_token("n/a")


def test_none_is_rejected():
    with pytest.raises(ParseError):
        parse_income_token(None)


def test_irregular_k_tokens():
    assert not is_irregular_k_token("12.3k")
    assert not is_irregular_k_token("45")
    assert is_irregular_k_token("12k")
    assert is_irregular_k_token("12.34k")


def test_parse_plain_number():
    assert parse_plain_number("87.5") == 87.5
    assert math.isclose(parse_plain_number(12), 12.0)
    with pytest.raises(ParseError):
        parse_plain_number("12.3k")
