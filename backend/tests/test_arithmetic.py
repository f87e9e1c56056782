import pytest

from campaignforge.processors.arithmetic import evaluate_arithmetic, format_number, tokenize


@pytest.mark.parametrize(
    "expression,expected",
    [
        ("2+3*4", 14),
        ("(2+3)*4", 20),
        ("-5+2", -3),
        ("10/4", 2.5),
        ("8-3-2", 3),
        ("2*-3", -6),
        ("1-(-2)", 3),
        (" 7 / 2 ", 3.5),
        ("1.5*2", 3),
    ],
)
def test_evaluates_expressions(expression, expected):
    assert evaluate_arithmetic(expression) == expected


@pytest.mark.parametrize(
    "expression",
    ["1/0", "1..2", "abc", "", "(1+2", "1+2)", "2+", "*3", "4/(2-2)", "[Level]/2"],
)
def test_invalid_expressions_return_none(expression):
    assert evaluate_arithmetic(expression) is None


def test_evaluation_is_deterministic():
    for expression in ("3*(4+1)", "1/0"):
        assert evaluate_arithmetic(expression) == evaluate_arithmetic(expression)


def test_tokenize_splits_numbers_and_operators():
    assert tokenize("12+(3.5*2)") == ["12", "+", "(", "3.5", "*", "2", ")"]
    assert tokenize("1.2.3") is None


def test_format_number_drops_integral_fraction():
    assert format_number(3.0) == "3"
    assert format_number(3.5) == "3.5"
    assert format_number(-2) == "-2"


HUGE = "1" + "0" * 400


@pytest.mark.parametrize(
    "expression",
    [
        HUGE,
        f"{HUGE}/2",
        f"0.5*{HUGE}",
        f"-{HUGE}+1",
        "9" * 400 + ".5",
        "1" + "0" * 200 + "*1" + "0" * 200,
        "1" + "0" * 300 + ".0*1" + "0" * 10,
    ],
)
def test_numbers_past_float_range_return_none(expression):
    assert evaluate_arithmetic(expression) is None


def test_large_finite_numbers_still_evaluate():
    assert evaluate_arithmetic("1" + "0" * 300 + "/1" + "0" * 298) == 100
    assert evaluate_arithmetic("0" * 5000 + "1+1") == 2
