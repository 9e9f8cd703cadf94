# ComplexEngine.py
"""""
Complex number literals ('3+4i', '-2 - 1.5i') and their arithmetic.

The operation is read from the text that is left once the literals are cut
out, so the sign inside a literal never counts as an operator.
"""""

import cmath
import re

from . import MathEngine
from . import error as E


# <real><sign><imag>i, not glued to a preceding number or a following word
COMPLEX_PATTERN = re.compile(
    r"(?<![\d.])(\d+(?:\.\d+)?)\s*([-+])\s*(\d+(?:\.\d+)?)i(?![^\W\d_])")

# Characters after which a '-' is a sign rather than a subtraction
PREFIX_CHARS = "(,+-*/×"

BINARY_OPERATIONS = ("+", "-", "*", "/")
UNARY_OPERATIONS = ("conj", "real", "imag", "arg", "abs")


def find_literals(expression):
    """Yield (start, end, value) for every complex literal.

    A '-' in front of the real part is taken into the literal when it opens
    the expression or follows '(' or an operator: '-2+1i' is one literal,
    in '1+2i - 3+1i' the '-' is the operation.
    """
    for match in COMPLEX_PATTERN.finditer(expression):
        start = match.start()
        real = float(match.group(1))
        before = expression[:start].rstrip()
        if before.endswith("-"):
            previous = before[:-1].rstrip()
            if not previous or previous[-1] in PREFIX_CHARS:
                start = len(before) - 1
                real = -real
        imag = float(match.group(3))
        if match.group(2) == "-":
            imag = -imag
        yield start, match.end(), complex(real, imag)


def contains_complex(expression):
    return COMPLEX_PATTERN.search(expression) is not None


def parse_complex_numbers(expression):
    return [value for _, _, value in find_literals(expression)]


def complex_to_string(z):
    sign = "-" if z.imag < 0 else "+"
    return f"{MathEngine.trace_number(z.real)} {sign} {MathEngine.trace_number(abs(z.imag))}i"


def identify_operation(expression):
    outside = ""
    position = 0
    for start, end, _ in find_literals(expression):
        outside += expression[position:start] + " "
        position = end
    outside = (outside + expression[position:]).replace("×", "*").lower()
    for symbol in BINARY_OPERATIONS:
        if symbol in outside:
            return symbol
    for keyword in ("conj", "real", "imag", "arg"):
        if keyword in outside:
            return keyword
    return "abs"


def perform_operation(numbers, operation):
    if not numbers:
        raise E.InvalidExpression("No complex number found in expression.")

    if operation in BINARY_OPERATIONS:
        if len(numbers) != 2:
            raise E.InvalidExpression(f"Complex operation '{operation}' needs exactly two numbers.")
        a, b = numbers
        if operation == "+":
            return a + b
        elif operation == "-":
            return a - b
        elif operation == "*":
            return a * b
        if b == 0:
            raise E.DivisionByZero()
        return a / b

    if operation in UNARY_OPERATIONS:
        if len(numbers) != 1:
            raise E.InvalidExpression(f"Complex operation '{operation}' needs exactly one number.")
        z = numbers[0]
        if operation == "conj":
            return z.conjugate()
        elif operation == "real":
            return complex(z.real, 0.0)
        elif operation == "imag":
            return complex(z.imag, 0.0)
        elif operation == "arg":
            return complex(cmath.phase(z), 0.0)
        return complex(abs(z), 0.0)

    raise E.UnsupportedOperation(operation)


def evaluate_complex_expr(expression):
    """Returns (complex result, steps); 'abs' and friends give (value, 0)."""
    numbers = parse_complex_numbers(expression)
    operation = identify_operation(expression)

    steps = [f"z{index + 1} = {complex_to_string(z)}" for index, z in enumerate(numbers)]
    steps.append(f"Complex Operation: {operation}")

    result = perform_operation(numbers, operation)
    steps.append(f"Result: {complex_to_string(result)}")
    return result, steps
