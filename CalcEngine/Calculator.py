# Calculator.py
"""""
Public entry points of the engine.

    evaluate(expression, variables)      -> (value, steps)
    solve_equation(expression)           -> (solution_text, steps)
    generate_points(function, low, high) -> iterable of (x, y)
    format_result(value)                 -> display string

Routing
-------
The expression is classified once, up front:

    contains '[' and ']'          -> MATRIX   (MatrixEngine)
    contains a literal like 3+4i  -> COMPLEX  (ComplexEngine)
    contains '='                  -> EQUATION (Cas)
    anything else                 -> SCALAR   (MathEngine)

An '=' on the matrix or complex path is an InvalidEquation: the solver only
handles real linear equations.

Value types of evaluate(): float for scalars and 1x1 matrix results,
MatrixResult for larger matrices, complex for the complex path and the
solution text for equations.
"""""

import enum
import math

from . import config_manager as config_manager
from . import MathEngine
from . import MatrixEngine
from . import ComplexEngine
from . import Cas
from . import error as E


class ExpressionKind(enum.Enum):
    SCALAR = "scalar"
    MATRIX = "matrix"
    COMPLEX = "complex"
    EQUATION = "equation"


def classify(expression):
    if "[" in expression and "]" in expression:
        return ExpressionKind.MATRIX
    if ComplexEngine.contains_complex(expression):
        return ExpressionKind.COMPLEX
    if "=" in expression:
        return ExpressionKind.EQUATION
    return ExpressionKind.SCALAR


def _run(expression, action):
    """Attach the input to engine errors and give unexpected ones a code."""
    try:
        return action()
    # Known numeric overflow
    except OverflowError:
        raise E.CalculationError(code="3026", equation=expression)
    except ZeroDivisionError:
        raise E.DivisionByZero(equation=expression)
    # Re-raise our domain errors after attaching the source equation
    except E.MathError as e:
        e.equation = expression
        raise e
    # Convert unexpected Python exceptions to our unified error type
    except Exception as e:
        raise E.MathError(message=E.ERROR_MESSAGES["9999"] + str(e), code="9999", equation=expression) from e


def evaluate(expression, variables=None, settings=None):
    """Evaluate any supported expression. Returns (value, steps)."""
    settings = config_manager.resolve_settings(settings)
    kind = classify(expression)
    if settings["debug"]:
        print(f"Classified {expression!r} as {kind.value}")

    def action():
        steps = [f"Evaluating: {expression}"]
        if kind in (ExpressionKind.MATRIX, ExpressionKind.COMPLEX) and "=" in expression:
            raise E.InvalidEquation(E.ERROR_MESSAGES["3012"] + expression)
        if kind is ExpressionKind.MATRIX:
            value, more_steps = MatrixEngine.evaluate_matrix_expr(expression)
        elif kind is ExpressionKind.COMPLEX:
            value, more_steps = ComplexEngine.evaluate_complex_expr(expression)
        elif kind is ExpressionKind.EQUATION:
            value, more_steps = Cas.solve(expression, settings=settings)
        else:
            value, more_steps = MathEngine.evaluate_scalar(expression, variables=variables, settings=settings)
        steps.extend(more_steps)
        return value, steps

    return _run(expression, action)


def solve_equation(expression, settings=None):
    """Solve a linear equation 'ax + b = c'. Returns (solution_text, steps)."""
    settings = config_manager.resolve_settings(settings)
    return _run(expression, lambda: Cas.solve(expression, settings=settings))


class PointSeries:
    """Lazy, restartable sequence of (x, y) samples of a function of x.

    Every iteration evaluates the function again. Samples that fail, are not
    finite or are not plain numbers are left out.
    """

    def __init__(self, function, domain_low, domain_high, sample_count, variables=None, settings=None):
        if sample_count < 1 or not domain_low <= domain_high:
            raise E.InvalidArgument(code="5002")
        self.function = function
        self.domain_low = float(domain_low)
        self.domain_high = float(domain_high)
        self.sample_count = int(sample_count)
        self.variables = dict(variables or {})
        self.settings = config_manager.resolve_settings(settings)

    def x_values(self):
        if self.sample_count == 1:
            yield self.domain_low
            return
        dx = (self.domain_high - self.domain_low) / (self.sample_count - 1)
        for i in range(self.sample_count):
            yield self.domain_low + i * dx

    def __iter__(self):
        for x in self.x_values():
            bindings = dict(self.variables)
            bindings["x"] = x
            try:
                y, _ = evaluate(self.function, variables=bindings, settings=self.settings)
            except E.MathError as e:
                if self.settings["debug"]:
                    print(f"Skipping x={x}: {e.message}")
                continue
            if isinstance(y, float) and math.isfinite(y):
                yield (x, y)


def generate_points(function, domain_low=None, domain_high=None, sample_count=None, variables=None, settings=None):
    """Sample a function of x over [domain_low, domain_high].

    Missing bounds and sample count come from the 'graph_domain' and
    'graph_samples' settings.
    """
    settings = config_manager.resolve_settings(settings)
    default_low, default_high = settings["graph_domain"]
    return PointSeries(
        function,
        default_low if domain_low is None else domain_low,
        default_high if domain_high is None else domain_high,
        settings["graph_samples"] if sample_count is None else sample_count,
        variables=variables,
        settings=settings,
    )


def format_result(value, settings=None):
    """Render any evaluate() value for display ('≈' marks rounded numbers)."""
    settings = config_manager.resolve_settings(settings)

    if isinstance(value, str):
        return value
    if isinstance(value, MatrixEngine.MatrixResult):
        return "\n".join(
            "[" + ", ".join(MathEngine.format_number(v, settings["decimal_places"]) for v in row) + "]"
            for row in value.rows)
    if isinstance(value, complex):
        real = MathEngine.format_number(value.real, settings["decimal_places"])
        imag = MathEngine.format_number(abs(value.imag), settings["decimal_places"])
        sign = "-" if value.imag < 0 else "+"
        return f"{real} {sign} {imag}i"

    rendered, rounding = MathEngine.cleanup(float(value), settings["decimal_places"], settings["fractions"])
    ungefaehr_zeichen = "\u2248"  # "≈"
    if rounding:
        return f"{ungefaehr_zeichen} {rendered}"
    return rendered
