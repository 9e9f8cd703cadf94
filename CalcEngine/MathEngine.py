# MathEngine.py
"""""
Scalar calculation engine.

Pipeline
--------
1) Substitution: constants and caller variable bindings are written into the text.
2) Tokenizer: converts the raw input string into a flat list of tokens.
3) Shunting-yard: reorders the infix tokens into postfix (Reverse Polish) order.
4) Evaluator: runs the postfix stream on a value stack and records every step.
5) Formatter: renders floats for display (decimal places or fractions).

Nothing in this module keeps state between calls.
"""""

import math
import re
import fractions
from collections import namedtuple

from . import config_manager as config_manager
from . import ScientificEngine
from . import error as E


# Token kinds
NUMBER = "number"
VARIABLE = "variable"
OPERATOR = "operator"
FUNCTION = "function"
LEFT_PAREN = "("
RIGHT_PAREN = ")"
SEPARATOR = ","

# Supported binary operators ('×' is the matrix-multiply symbol, plain product on scalars)
Operations = ["+", "-", "*", "/", "^", "×"]

# Internal symbol for unary minus; never produced by the tokenizer
NEGATE = "neg"

PRECEDENCE = {
    "+": 1,
    "-": 1,
    "*": 2,
    "/": 2,
    NEGATE: 2.5,
    "^": 3,
    "×": 4,
}

NUMBER_PATTERN = re.compile(r"(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")
DIGITS = "0123456789"
LETTER = r"[^\W\d_]"


# -----------------------------
# Utilities / small helpers
# -----------------------------

def _is_digit(char):
    return char != "" and char in DIGITS


def trace_number(value):
    """Compact rendering used in trace lines: 4.0 -> '4', 0.1 -> '0.1'."""
    if value == 0:
        value = 0.0  # no '-0' in traces
    return format(value, ".15g")


class Token(namedtuple("Token", ["kind", "value"])):
    """Immutable lexical token. Parentheses and separators carry no value."""
    __slots__ = ()

    @property
    def precedence(self):
        if self.kind == OPERATOR:
            return PRECEDENCE.get(self.value, 0)
        return 0

    def __str__(self):
        if self.kind == NUMBER:
            return trace_number(self.value)
        if self.kind in (LEFT_PAREN, RIGHT_PAREN, SEPARATOR):
            return self.kind
        return str(self.value)


# -----------------------------
# Substitution of constants and variables
# -----------------------------

def _is_exponent_marker(text, start, end):
    """True for the 'e' in '2e5' or '1.5E-3', which must never become Euler's number."""
    if text[start:end] not in ("e", "E"):
        return False
    before = text[start - 1] if start > 0 else ""
    return (_is_digit(before) or before == ".") and re.match(r"[+-]?\d", text[end:end + 2]) is not None


def _replace_name(text, name, value, ignore_case=False, skip_calls=False):
    pattern = rf"(?<!{LETTER}){re.escape(name)}(?!{LETTER})"
    if skip_calls:
        pattern += r"(?!\s*\()"
    compiled = re.compile(pattern, re.IGNORECASE if ignore_case else 0)

    def replacement(match):
        if _is_exponent_marker(text, match.start(), match.end()):
            return match.group()
        return f"({float(value)!r})"

    return compiled.sub(replacement, text)


def validate_variables(variables):
    """Reject bindings that could never be substituted unambiguously."""
    for name, value in variables.items():
        if not isinstance(name, str) or not name.isalpha():
            raise E.InvalidArgument(E.ERROR_MESSAGES["5001"] + repr(name), code="5001")
        if ScientificEngine.isConstant(name) or ScientificEngine.isFunction(name):
            raise E.InvalidArgument(
                E.ERROR_MESSAGES["5001"] + f"'{name}' is a reserved constant or function name", code="5001")
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise E.InvalidArgument(
                E.ERROR_MESSAGES["5001"] + f"'{name}' is not bound to a number", code="5001")


def substitute(expression, variables=None):
    """Write constants (case-insensitive) and bound variables (case-sensitive) into the text.

    A constant that doubles as a function name ('gamma') is left alone when it is
    called, so 'gamma(5)' stays a function call while '2 gamma' is the constant.
    """
    text = expression
    for name, value in ScientificEngine.CONSTANTS.items():
        text = _replace_name(text, name, value, ignore_case=True,
                             skip_calls=ScientificEngine.isFunction(name))

    if variables:
        validate_variables(variables)
        for name, value in variables.items():
            text = _replace_name(text, name, value)
    return text


# -----------------------------
# Tokenizer
# -----------------------------

def tokenize(problem, lenient=False):
    """Convert raw input into tokens (numbers, operators, parens, separators, names).

    Unary signs are left to the converter. Any other character is an
    InvalidExpression unless lenient is set, in which case it is skipped.
    """
    tokens = []
    b = 0

    while b < len(problem):
        current_char = problem[b]

        # --- Numbers: digits, decimal separator, exponent ---
        if _is_digit(current_char) or (current_char == "." and _is_digit(problem[b + 1:b + 2])):
            match = NUMBER_PATTERN.match(problem, b)
            b = match.end()
            if b < len(problem) and problem[b] == ".":
                raise E.InvalidExpression(code="3008")
            tokens.append(Token(NUMBER, float(match.group())))
            continue

        # --- Operators ---
        elif current_char in Operations:
            tokens.append(Token(OPERATOR, current_char))

        # --- Whitespace (ignored) ---
        elif current_char.isspace():
            pass

        # --- Parentheses and argument separator ---
        elif current_char == "(":
            tokens.append(Token(LEFT_PAREN, None))
        elif current_char == ")":
            tokens.append(Token(RIGHT_PAREN, None))
        elif current_char == ",":
            tokens.append(Token(SEPARATOR, None))

        # --- Special symbols ---
        elif current_char == "√":
            tokens.append(Token(FUNCTION, "sqrt"))
        elif current_char == "π":
            tokens.append(Token(NUMBER, math.pi))

        # --- Names: functions (case-insensitive) or variables (case kept) ---
        elif current_char.isalpha():
            end = b
            while end < len(problem) and problem[end].isalpha():
                end += 1
            # trailing digits belong to names like log10 and log2
            digits_end = end
            while digits_end < len(problem) and _is_digit(problem[digits_end]):
                digits_end += 1
            if digits_end > end and ScientificEngine.isFunction(problem[b:digits_end]):
                end = digits_end
            word = problem[b:end]
            if ScientificEngine.isFunction(word):
                tokens.append(Token(FUNCTION, word.lower()))
            else:
                tokens.append(Token(VARIABLE, word))
            b = end
            continue

        elif lenient:
            pass

        else:
            raise E.InvalidExpression(E.ERROR_MESSAGES["3013"] + repr(current_char), code="3013")

        b += 1

    return tokens


def insert_implicit_multiplication(tokens):
    """Insert '*' where juxtaposition means a product: '2x', '2(3)', '(1)(2)', '3sin(x)'."""
    result = []
    for token in tokens:
        if result:
            previous = result[-1]
            ends_operand = previous.kind in (NUMBER, VARIABLE, RIGHT_PAREN)
            starts_operand = (token.kind in (VARIABLE, FUNCTION, LEFT_PAREN) or
                              (token.kind == NUMBER and previous.kind != NUMBER))
            if ends_operand and starts_operand:
                result.append(Token(OPERATOR, "*"))
        result.append(token)
    return result


# -----------------------------
# Shunting-yard conversion
# -----------------------------

def _is_prefix_position(previous):
    return previous is None or previous.kind in (OPERATOR, FUNCTION, LEFT_PAREN, SEPARATOR)


def _pop_until_left_paren(operator_stack, output):
    while operator_stack and operator_stack[-1].kind != LEFT_PAREN:
        output.append(operator_stack.pop())


def to_postfix(tokens):
    """Reorder infix tokens into postfix order.

    All binary operators are left-associative ('^' included). A '-' in prefix
    position becomes the unary NEGATE operator; a prefix '+' is dropped.
    """
    output = []
    operator_stack = []
    previous = None

    for token in tokens:
        if token.kind in (NUMBER, VARIABLE):
            output.append(token)

        elif token.kind in (FUNCTION, LEFT_PAREN):
            operator_stack.append(token)

        elif token.kind == RIGHT_PAREN:
            _pop_until_left_paren(operator_stack, output)
            if not operator_stack:
                raise E.UnmatchedParentheses()
            operator_stack.pop()
            if operator_stack and operator_stack[-1].kind == FUNCTION:
                output.append(operator_stack.pop())

        elif token.kind == SEPARATOR:
            _pop_until_left_paren(operator_stack, output)
            if not operator_stack:
                raise E.InvalidExpression("Argument separator ',' outside of a function call.")

        elif token.kind == OPERATOR and _is_prefix_position(previous):
            if token.value == "-":
                operator_stack.append(Token(OPERATOR, NEGATE))
            elif token.value != "+":
                raise E.InvalidExpression(f"Missing number before '{token.value}'.")

        elif token.kind == OPERATOR:
            while operator_stack:
                top = operator_stack[-1]
                if top.kind == FUNCTION or (top.kind == OPERATOR and top.precedence >= token.precedence):
                    output.append(operator_stack.pop())
                else:
                    break
            operator_stack.append(token)

        else:
            raise E.InvalidExpression(f"Unexpected token: {token}")

        previous = token

    while operator_stack:
        top = operator_stack.pop()
        if top.kind == LEFT_PAREN:
            raise E.UnmatchedParentheses()
        output.append(top)

    return output


# -----------------------------
# Postfix evaluation
# -----------------------------

def power(base, exponent):
    if base == 0 and exponent < 0:
        raise E.DivisionByZero()
    try:
        return math.pow(base, exponent)
    except ValueError:
        # negative base with a fractional exponent: no real result
        return math.nan


def apply_operator(operator, a, b):
    if operator == "+":
        return a + b
    elif operator == "-":
        return a - b
    elif operator in ("*", "×"):
        return a * b
    elif operator == "/":
        if b == 0:
            raise E.DivisionByZero()
        return a / b
    elif operator == "^":
        return power(a, b)
    else:
        raise E.UnsupportedOperation(operator)


def evaluate_postfix(tokens, degree_mode=False):
    """Run a postfix token stream. Returns (value, steps).

    Binary operators pop b then a and push a OP b; functions pop as many
    operands as they take. The stack must end with exactly one value.
    """
    stack = []
    steps = []

    try:
        for token in tokens:
            if token.kind == NUMBER:
                stack.append(token.value)

            elif token.kind == VARIABLE:
                raise E.InvalidExpression(E.ERROR_MESSAGES["3014"] + token.value, code="3014")

            elif token.kind == OPERATOR and token.value == NEGATE:
                if not stack:
                    raise E.InvalidExpression()
                a = stack.pop()
                result = -a
                stack.append(result)
                steps.append(f"-({trace_number(a)}) = {trace_number(result)}")

            elif token.kind == OPERATOR:
                if len(stack) < 2:
                    raise E.InvalidExpression()
                b = stack.pop()
                a = stack.pop()
                result = apply_operator(token.value, a, b)
                stack.append(result)
                steps.append(f"{trace_number(a)} {token.value} {trace_number(b)} = {trace_number(result)}")

            elif token.kind == FUNCTION:
                count = ScientificEngine.arity(token.value)
                if len(stack) < count:
                    raise E.InvalidExpression()
                arguments = stack[len(stack) - count:]
                del stack[len(stack) - count:]
                result = ScientificEngine.apply_function(token.value, arguments, degree_mode)
                stack.append(result)
                call = ", ".join(trace_number(a) for a in arguments)
                steps.append(f"{token.value}({call}) = {trace_number(result)}")

            else:
                raise E.InvalidExpression(f"Unexpected token: {token}")

    except OverflowError:
        raise E.CalculationError(code="3026")

    if len(stack) != 1:
        raise E.InvalidExpression()
    return stack[0], steps


def evaluate_scalar(expression, variables=None, settings=None):
    """Substitute, tokenize, convert and evaluate a plain arithmetic expression."""
    settings = config_manager.resolve_settings(settings)

    text = substitute(expression, variables)
    tokens = insert_implicit_multiplication(tokenize(text, lenient=settings["lenient_tokenizer"]))
    if not tokens:
        raise E.InvalidExpression("Empty expression.")

    postfix = to_postfix(tokens)
    if settings["debug"]:
        print("Tokens:", [str(t) for t in tokens])
        print("Postfix:", [str(t) for t in postfix])

    steps = ["Converted to postfix: " + " ".join(str(t) for t in postfix)]
    value, evaluation_steps = evaluate_postfix(postfix, degree_mode=settings["degree_mode"])
    steps.extend(evaluation_steps)
    return value, steps


# -----------------------------
# Result formatting
# -----------------------------

def cleanup(ergebnis, decimal_places=6, use_fractions=False):
    """Format a float as a fraction or a rounded decimal.

    Returns:
        (rendered_value, rounding_flag)
    where rounding_flag tells whether the rendering is not exact.
    """
    ergebnis = float(ergebnis)
    if not math.isfinite(ergebnis):
        return str(ergebnis), False

    if use_fractions and not ergebnis.is_integer():
        gekuerzter_bruch = fractions.Fraction(ergebnis).limit_denominator(100000)
        rounding = gekuerzter_bruch != fractions.Fraction(ergebnis)
        zaehler = gekuerzter_bruch.numerator
        nenner = gekuerzter_bruch.denominator
        if abs(zaehler) > nenner:
            # Mixed fraction form (e.g., 3/2 -> "1 1/2")
            ganzzahl = zaehler // nenner
            rest_zaehler = zaehler % nenner
            if rest_zaehler == 0:
                return str(ganzzahl), rounding
            # Adjust for negatives so that the remainder part is positive
            if ganzzahl < 0 and rest_zaehler > 0:
                ganzzahl += 1
                rest_zaehler = abs(nenner - rest_zaehler)
            return f"{ganzzahl} {rest_zaehler}/{nenner}", rounding
        return str(gekuerzter_bruch), rounding

    if ergebnis.is_integer():
        if abs(ergebnis) < 1e15:
            return str(int(ergebnis)), False
        return format(ergebnis, ".15g"), False

    decimal_places = max(int(decimal_places), 0)
    gerundet = round(ergebnis, decimal_places)
    text = f"{gerundet:.{decimal_places}f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    if text == "-0":
        text = "0"
    return text, gerundet != ergebnis


def format_number(value, decimal_places=6, use_fractions=False):
    return cleanup(value, decimal_places, use_fractions)[0]
