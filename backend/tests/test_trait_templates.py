import pytest

from campaignforge.processors.trait_templates import (
    js_round,
    render_template,
    resolve_bare_expressions,
    resolve_rounded_expressions,
    token_to_number,
    token_to_string,
)
from campaignforge.schemas.monster import DiceSize


@pytest.mark.parametrize(
    "template,context,expected",
    [
        ("[Foo]", {}, "?"),
        ("(ceil([Foo]))", {}, "?"),
        ("([Level]/2)", {"Level": 7}, "3.5"),
        ("(ceil([Level]/2))", {"Level": 7}, "4"),
        ("(floor([Level]/2))", {"Level": 7}, "3"),
        ("(round([Level]/2))", {"Level": 5}, "3"),
        ("([Level]*2)", {"Level": 7}, "14"),
        ("([Level]/3)", {"Level": 2}, "0.67"),
    ],
)
def test_render_template(template, context, expected):
    assert render_template(template, context) == expected


def test_parentheses_without_tokens_are_left_alone():
    text = "Gain a bonus (see page 12) on (ceil(3/2)) rolls."
    assert render_template(text, {}) == text


def test_die_sizes_render_lowercase_and_count_as_numbers():
    context = {"MonsterAttack": "D8", "Bravery": DiceSize.D10}
    assert render_template("Roll [MonsterAttack] and [Bravery]", context) == "Roll d8 and d10"
    assert render_template("((ceil([MonsterAttack]/3)))", context) == "(3)"
    assert token_to_number(context, "Bravery") == 10


def test_non_numeric_tokens_inside_expressions_are_unknown():
    assert render_template("([Name]+1)", {"Name": "Goblin"}) == "?"
    assert render_template("([Level]/0)", {"Level": 3}) == "?"


def test_token_display_forms():
    context = {"Name": "Goblin", "Level": 3.0, "Flag": True, "Missing": None}
    assert token_to_string(context, "Name") == "Goblin"
    assert token_to_string(context, "Level") == "3"
    assert token_to_string(context, "Flag") == "?"
    assert token_to_string(context, "Missing") == "?"


def test_phases_run_in_order():
    context = {"Level": 7}
    rounded = resolve_rounded_expressions("(ceil([Level]/2)) and ([Level]/2)", context)
    assert rounded == "4 and ([Level]/2)"
    assert resolve_bare_expressions(rounded, context) == "4 and 3.5"


def test_rendering_resolved_text_is_idempotent():
    context = {"MonsterName": "Ogre", "MonsterLevel": 4}
    once = render_template("[MonsterName] heals (ceil([MonsterLevel]/3)) wounds.", context)
    assert once == "Ogre heals 2 wounds."
    assert render_template(once, context) == once


def test_js_round_rounds_half_up():
    assert js_round(2.5) == 3
    assert js_round(-2.5) == -2
    assert js_round(2.4) == 2


def test_empty_template():
    assert render_template("", {"Level": 1}) == ""


@pytest.mark.parametrize("value", [10**400, float("inf"), float("nan")])
def test_non_finite_context_values_render_unknown(value):
    context = {"X": value}
    assert render_template("Deals [X] damage", context) == "Deals ? damage"
    assert render_template("Deals (ceil([X]/2)) damage", context) == "Deals ? damage"
    assert token_to_number(context, "X") is None


def test_expression_overflowing_float_range_renders_unknown():
    assert render_template("([Level]*1" + "0" * 400 + ")", {"Level": 2}) == "?"
