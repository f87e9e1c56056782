"""
Restricted arithmetic evaluation for trait and attribute templates.

Supports numbers, + - * / and parentheses. Parsing is shunting-yard into
postfix, then a stack machine. Nothing here raises for bad input: any
expression that cannot be computed evaluates to None.
"""

import math
import re

ALLOWED_CHARS = re.compile(r'^[0-9+\-*/().]+$')
NUMBER_CHARS = re.compile(r'[0-9.]')
NUMBER_TOKEN = re.compile(r'^[0-9.]+$')

OPERATORS = "+-*/()"
PRECEDENCE = {"+": 1, "-": 1, "*": 2, "/": 2}


def format_number(value: int | float) -> str:
    """Render a number the way rules text shows it: 3, 3.5, -2."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def is_finite(value: int | float) -> bool:
    """True when the value fits in a float and is neither inf nor nan."""
    try:
        return math.isfinite(value)
    except OverflowError:
        return False


def _parse_number(token: str) -> int | float | None:
    try:
        as_float = float(token)
        if not math.isfinite(as_float):
            return None
        return as_float if "." in token else int(token.lstrip("0") or "0")
    except ValueError:
        return None


def tokenize(expression: str) -> list[str] | None:
    """Split a whitespace-free expression into operator and number tokens."""
    tokens: list[str] = []
    i = 0
    while i < len(expression):
        ch = expression[i]
        if ch in OPERATORS:
            tokens.append(ch)
            i += 1
            continue
        if NUMBER_CHARS.match(ch):
            j = i + 1
            while j < len(expression) and NUMBER_CHARS.match(expression[j]):
                j += 1
            number = expression[i:j]
            if number.count(".") > 1:
                return None
            tokens.append(number)
            i = j
            continue
        return None
    return tokens


def to_postfix(tokens: list[str]) -> list[str] | None:
    """Shunting-yard. A leading or post-operator minus becomes 0 - x."""
    output: list[str] = []
    ops: list[str] = []

    for index, token in enumerate(tokens):
        prev = tokens[index - 1] if index > 0 else None

        if token == "-" and (prev is None or prev == "(" or prev in PRECEDENCE):
            output.append("0")
            ops.append("-")
            continue

        if NUMBER_TOKEN.match(token):
            if _parse_number(token) is None:
                return None
            output.append(token)
            continue

        if token == "(":
            ops.append(token)
            continue

        if token == ")":
            while ops and ops[-1] != "(":
                output.append(ops.pop())
            if not ops or ops.pop() != "(":
                return None
            continue

        if token in PRECEDENCE:
            while ops and ops[-1] in PRECEDENCE and PRECEDENCE[ops[-1]] >= PRECEDENCE[token]:
                output.append(ops.pop())
            ops.append(token)
            continue

        return None

    while ops:
        op = ops.pop()
        if op in "()":
            return None
        output.append(op)

    return output


def evaluate_postfix(postfix: list[str]) -> int | float | None:
    stack: list[int | float] = []
    for token in postfix:
        if NUMBER_TOKEN.match(token):
            number = _parse_number(token)
            if number is None:
                return None
            stack.append(number)
            continue

        if len(stack) < 2:
            return None
        b = stack.pop()
        a = stack.pop()

        try:
            if token == "+":
                result = a + b
            elif token == "-":
                result = a - b
            elif token == "*":
                result = a * b
            elif token == "/":
                if b == 0:
                    return None
                result = a / b
            else:
                return None
        except OverflowError:
            return None
        # results past the float range count as infinite
        if not is_finite(result):
            return None
        stack.append(result)

    if len(stack) != 1:
        return None
    return stack[0]


def evaluate_arithmetic(expression: str) -> int | float | None:
    """
    Evaluate an arithmetic expression without eval().

    Returns None for empty input, characters outside [0-9+-*/().],
    malformed numbers, mismatched parentheses, division by zero, or any
    number outside the float range.
    """
    text = re.sub(r'\s+', '', expression or "")
    if not text or not ALLOWED_CHARS.match(text):
        return None

    tokens = tokenize(text)
    if tokens is None:
        return None

    postfix = to_postfix(tokens)
    if postfix is None:
        return None

    return evaluate_postfix(postfix)
