"""Expression evaluation engine: scalars, matrices, complex numbers and linear equations."""

from .Calculator import (
    ExpressionKind,
    classify,
    evaluate,
    format_result,
    generate_points,
    solve_equation,
)
from .MatrixEngine import MatrixResult
from . import error

__all__ = [
    "ExpressionKind",
    "MatrixResult",
    "classify",
    "error",
    "evaluate",
    "format_result",
    "generate_points",
    "solve_equation",
]
