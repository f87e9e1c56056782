"""
Trait and attribute template rendering.

Templates hold [Token] references and parenthesised arithmetic. Rendering runs
three text -> text phases in a fixed order, each seeing only what the previous
phase left behind:

1. (ceil(...)), (floor(...)), (round(...)) are evaluated and rounded
2. remaining bare (...) expressions are evaluated without rounding
3. remaining [Token]s are replaced by their display form

Anything unknown renders as "?".
"""

import math
import re
from collections.abc import Callable, Mapping
from enum import Enum
from typing import Any

from campaignforge.processors.arithmetic import evaluate_arithmetic, format_number, is_finite

ROUNDED_EXPRESSION = re.compile(r'\((ceil|floor|round)\s*\(\s*([^()]*)\s*\)\)')
BARE_EXPRESSION = re.compile(r'\(([^()]*)\)')
TOKEN = re.compile(r'\[([A-Za-z0-9]+)\]')
DIE_SIZE = re.compile(r'^D(4|6|8|10|12)$')

UNKNOWN = "?"

RenderContext = Mapping[str, Any]
Phase = Callable[[str, RenderContext], str]


def js_round(value: float) -> int:
    """Half-up rounding (2.5 -> 3, -2.5 -> -2)."""
    return math.floor(value + 0.5)


ROUNDERS: dict[str, Callable[[float], int]] = {
    "ceil": math.ceil,
    "floor": math.floor,
    "round": js_round,
}


def _is_number(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return is_finite(value)


def _lookup(context: RenderContext, key: str) -> Any:
    value = context.get(key)
    if isinstance(value, Enum):
        return value.value
    return value


def token_to_number(context: RenderContext, key: str) -> int | float | None:
    value = _lookup(context, key)
    if value is None:
        return None
    if _is_number(value):
        return value
    if isinstance(value, str):
        match = DIE_SIZE.match(value)
        if match:
            return int(match.group(1))
    return None


def token_to_string(context: RenderContext, key: str) -> str:
    value = _lookup(context, key)
    if value is None:
        return UNKNOWN
    if isinstance(value, str):
        match = DIE_SIZE.match(value)
        if match:
            return f"d{match.group(1)}"
        return value
    if _is_number(value):
        return format_number(value)
    return UNKNOWN


def evaluate_expression(expression: str, context: RenderContext, wrapper: str | None) -> str | None:
    """
    Evaluate one parenthesised expression.

    Returns the replacement text, or None when the text should be left alone
    (no tokens inside, so it is prose rather than a templated expression).
    """
    expression = expression.strip()
    if not expression:
        return UNKNOWN if wrapper else None
    if not TOKEN.search(expression):
        return None

    def substitute(match: re.Match) -> str:
        number = token_to_number(context, match.group(1))
        return UNKNOWN if number is None else format_number(number)

    replaced = TOKEN.sub(substitute, expression)
    if UNKNOWN in replaced:
        return UNKNOWN

    value = evaluate_arithmetic(replaced)
    if value is None:
        return UNKNOWN

    if wrapper:
        return str(ROUNDERS[wrapper](value))

    as_int = math.trunc(value)
    if abs(value - as_int) < 1e-9:
        return str(as_int)
    return format_number(math.floor(value * 100 + 0.5) / 100)


def resolve_rounded_expressions(text: str, context: RenderContext) -> str:
    def replace(match: re.Match) -> str:
        evaluated = evaluate_expression(match.group(2), context, match.group(1))
        return match.group(0) if evaluated is None else evaluated

    return ROUNDED_EXPRESSION.sub(replace, text)


def resolve_bare_expressions(text: str, context: RenderContext) -> str:
    def replace(match: re.Match) -> str:
        evaluated = evaluate_expression(match.group(1), context, None)
        return match.group(0) if evaluated is None else evaluated

    return BARE_EXPRESSION.sub(replace, text)


def resolve_tokens(text: str, context: RenderContext) -> str:
    return TOKEN.sub(lambda match: token_to_string(context, match.group(1)), text)


PHASES: tuple[Phase, ...] = (
    resolve_rounded_expressions,
    resolve_bare_expressions,
    resolve_tokens,
)


def render_template(template: str, context: RenderContext) -> str:
    """Render a template against a token context. Pure and deterministic."""
    if not template:
        return template
    text = template
    for phase in PHASES:
        text = phase(text, context)
    return text
