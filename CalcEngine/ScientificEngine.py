# ScientificEngine
import math

from . import error as E


# Euler-Mascheroni constant
EULER_GAMMA = 0.5772156649015329

CONSTANTS = {
    "pi": math.pi,
    "π": math.pi,
    "e": math.e,
    "phi": (1 + math.sqrt(5)) / 2,
    "gamma": EULER_GAMMA,
}

TRIG_INPUT = ("sin", "cos", "tan")
TRIG_OUTPUT = ("asin", "acos", "atan")


# Largest n with n! below the float limit
MAX_FACTORIAL = 170
# C(n, k) >= 2^k for k <= n/2, and 2^1024 is past the float limit
MAX_COMBINATION_K = 1023


def isConstant(name):
    return name.lower() in CONSTANTS


def _check_counting_argument(name, value):
    if not math.isfinite(value) or value < 0 or not float(value).is_integer():
        raise E.InvalidArgument(
            E.ERROR_MESSAGES["2005"] + f"{name}({value})", code="2005")
    return int(value)


def factorial(n):
    n = _check_counting_argument("factorial", n)
    if n > MAX_FACTORIAL:
        raise E.CalculationError(code="3026")
    return float(math.factorial(n))


def permutation(n, r):
    n = _check_counting_argument("permutation", n)
    r = _check_counting_argument("permutation", r)
    # P(n, r) >= r!
    if r <= n and r > MAX_FACTORIAL:
        raise E.CalculationError(code="3026")
    return float(math.perm(n, r))


def combination(n, r):
    n = _check_counting_argument("combination", n)
    r = _check_counting_argument("combination", r)
    if r <= n and min(r, n - r) > MAX_COMBINATION_K:
        raise E.CalculationError(code="3026")
    return float(math.comb(n, r))


def cbrt(x):
    root = math.copysign(abs(x) ** (1.0 / 3.0), x)
    if math.isfinite(root) and round(root) ** 3 == x:
        return float(round(root))
    return root


def beta(a, b):
    return math.gamma(a) * math.gamma(b) / math.gamma(a + b)


# name -> (number of arguments, implementation)
FUNCTIONS = {
    "sin": (1, math.sin),
    "cos": (1, math.cos),
    "tan": (1, math.tan),
    "asin": (1, math.asin),
    "acos": (1, math.acos),
    "atan": (1, math.atan),
    "sinh": (1, math.sinh),
    "cosh": (1, math.cosh),
    "tanh": (1, math.tanh),
    "asinh": (1, math.asinh),
    "acosh": (1, math.acosh),
    "atanh": (1, math.atanh),
    "log": (1, math.log10),
    "log10": (1, math.log10),
    "log2": (1, math.log2),
    "ln": (1, math.log),
    "sqrt": (1, math.sqrt),
    "cbrt": (1, cbrt),
    "abs": (1, abs),
    "exp": (1, math.exp),
    "factorial": (1, factorial),
    "permutation": (2, permutation),
    "combination": (2, combination),
    "gamma": (1, math.gamma),
    "erf": (1, math.erf),
    "erfc": (1, math.erfc),
    "beta": (2, beta),
}


def isFunction(name):
    return name.lower() in FUNCTIONS


def arity(name):
    """Number of operands the function takes; unknown names raise UnsupportedFunction."""
    try:
        return FUNCTIONS[name.lower()][0]
    except KeyError:
        raise E.UnsupportedFunction(name)


def apply_function(name, arguments, degree_mode=False):
    """Run a named function on already evaluated float arguments.

    In degree mode sin/cos/tan read their argument in degrees and
    asin/acos/atan report degrees. Domain errors (sqrt(-1), log(0), ...)
    surface as InvalidArgument; OverflowError is left to the caller.
    """
    name = name.lower()
    if name not in FUNCTIONS:
        raise E.UnsupportedFunction(name)
    expected, implementation = FUNCTIONS[name]
    if len(arguments) != expected:
        raise E.InvalidExpression(
            f"{name} expects {expected} argument(s), got {len(arguments)}.")

    if degree_mode and name in TRIG_INPUT:
        arguments = [math.radians(arguments[0])]

    try:
        result = implementation(*arguments)
    except ValueError:
        call = ", ".join(str(a) for a in arguments)
        raise E.InvalidArgument(E.ERROR_MESSAGES["2002"] + f"{name}({call})")

    result = float(result)
    if degree_mode and name in TRIG_OUTPUT:
        result = math.degrees(result)
    return result
