# Cas.py
"""""
Linear solver for one variable.

Basic concept: a*x + b = c  ->  x = (c - b) / a

Only that shape is accepted. The unknown appears exactly once, on the left,
next to plain numbers; the right side is a number expression. Everything
else is rejected with EquationTooComplex instead of being guessed at.
"""""

import re

from . import config_manager as config_manager
from . import MathEngine
from . import error as E


# Names that are skipped while looking for the unknown
KNOWN_FUNCTIONS = ("sin", "cos", "tan", "log", "ln", "sqrt")

NUMERIC_CHARS = r"[\d\s+\-*/.]"


def find_variable(equation):
    """First letter of the first word that is not a function name, or None."""
    for match in re.finditer(r"[^\W\d_]+", equation):
        word = match.group()
        if word.lower() in KNOWN_FUNCTIONS:
            continue
        return word[0]
    return None


def is_simple_linear(left_side, right_side, variable):
    left_ok = re.fullmatch(f"{NUMERIC_CHARS}*{re.escape(variable)}{NUMERIC_CHARS}*", left_side)
    right_ok = re.fullmatch(f"{NUMERIC_CHARS}+", right_side)
    return left_ok is not None and right_ok is not None


def split_terms(side):
    """Split into signed additive terms: '2x - 3 + 1' -> ['2x', '-3', '+1'].

    A sign right after '*', '/' or another sign belongs to the current term.
    """
    terms = []
    current = ""
    for char in re.sub(r"\s+", "", side):
        if char in "+-" and current and current[-1] not in "*/+-":
            terms.append(current)
            current = char
        else:
            current += char
    if current:
        terms.append(current)
    return terms


def extract_coefficient(term, variable):
    """'2x' -> 2, 'x' -> 1, '-x' -> -1, '-2.5*x' -> -2.5, 'x/4' -> 0.25."""
    match = re.fullmatch(rf"([+-]?)(\d*\.?\d*)\*?{re.escape(variable)}(?:/(\d*\.?\d+))?", term)
    if match is None:
        raise E.EquationTooComplex()

    sign, digits, divisor = match.groups()
    if digits == "":
        coefficient = 1.0
    else:
        try:
            coefficient = float(digits)
        except ValueError:
            raise E.EquationTooComplex()
    if sign == "-":
        coefficient = -coefficient
    if divisor is not None:
        if float(divisor) == 0:
            raise E.DivisionByZero()
        coefficient /= float(divisor)
    return coefficient


def solve(equation, settings=None):
    """Solve 'ax + b = c'. Returns (solution_text, steps)."""
    settings = config_manager.resolve_settings(settings)
    steps = [f"Original equation: {equation}"]

    parts = equation.split("=")
    if len(parts) != 2:
        raise E.InvalidEquation(E.ERROR_MESSAGES["3012"] + equation, equation=equation)

    left_side = parts[0].strip()
    right_side = parts[1].strip()
    if not left_side or not right_side:
        raise E.InvalidEquation(E.ERROR_MESSAGES["3022"] + equation, code="3022", equation=equation)

    variable = find_variable(equation)
    if variable is None:
        raise E.NoVariableFound(equation=equation)
    steps.append(f"Solving for variable: {variable}")

    if not is_simple_linear(left_side, right_side, variable):
        raise E.EquationTooComplex(equation=equation)

    steps.append(f"Moving all terms with {variable} to the left side, and all other terms to the right side")
    steps.append(f"Rearranging to: {left_side} - ({right_side}) = 0")

    coefficient = None
    left_constant = 0.0
    for term in split_terms(left_side):
        if variable in term:
            coefficient = extract_coefficient(term, variable)
        else:
            value, _ = MathEngine.evaluate_scalar(term, settings=settings)
            left_constant += value
    right_constant, _ = MathEngine.evaluate_scalar(right_side, settings=settings)

    a = MathEngine.trace_number(coefficient)
    b = MathEngine.trace_number(left_constant)
    c = MathEngine.trace_number(right_constant)
    constant_term = right_constant - left_constant

    steps.append(f"Coefficient of {variable}: {a}")
    steps.append(f"Constant term on left: {b}")
    steps.append(f"Constant term on right: {c}")
    steps.append(f"Rearranged equation: {a}{variable} = {c} - {b}")
    steps.append(f"{a}{variable} = {MathEngine.trace_number(constant_term)}")

    if coefficient == 0:
        if constant_term == 0:
            return "Infinite solutions", steps
        return "No solution", steps

    solution = constant_term / coefficient
    steps.append(f"{variable} = {MathEngine.trace_number(constant_term)} / {a}")
    steps.append(f"{variable} = {MathEngine.trace_number(solution)}")

    rendered = MathEngine.format_number(solution, settings["decimal_places"], settings["fractions"])
    return f"{variable} = {rendered}", steps
