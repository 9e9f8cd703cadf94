# MatrixEngine.py
"""""
Matrix literals and matrix algebra.

Literal syntax: '[1,2;3,4]' (rows separated by ';', entries by ','). Every
bracket group in an expression is one matrix, read left to right. The
operation is chosen from the text outside the brackets:

    '×' or '*'  -> multiply        (two matrices)
    '+'         -> add             (two matrices)
    '-'         -> subtract        (two matrices)
    'transpose' / 'trace' / 'inv'  (one matrix)
    otherwise   -> determinant     (one matrix)

Determinants use cofactor expansion along the first row, which is exponential
in the matrix order. Fine for editor sized input (up to 5x5), not beyond.
"""""

import re

from . import MathEngine
from . import error as E


MATRIX_PATTERN = re.compile(r"\[([^\[\]]*)\]")

# Pivot magnitude below which a matrix counts as singular
SINGULAR_EPSILON = 1e-12

BINARY_OPERATIONS = ("×", "+", "-")
UNARY_OPERATIONS = ("transpose", "trace", "inv", "det")


class MatrixResult:
    """A matrix valued outcome, kept apart from scalar results."""

    def __init__(self, rows):
        self.rows = [list(row) for row in rows]

    @property
    def shape(self):
        return (len(self.rows), len(self.rows[0]) if self.rows else 0)

    def __eq__(self, other):
        if isinstance(other, MatrixResult):
            return self.rows == other.rows
        return self.rows == other

    def __repr__(self):
        return f"MatrixResult({self.rows})"

    def __str__(self):
        return matrix_to_string(self.rows)


# -----------------------------
# Parsing / rendering
# -----------------------------

def _parse_literal(body):
    rows = []
    for row_text in body.split(";"):
        row = []
        for entry in row_text.split(","):
            entry = entry.strip()
            try:
                row.append(float(entry))
            except ValueError:
                raise E.InvalidExpression(E.ERROR_MESSAGES["3042"] + f"[{body}]", code="3042")
        rows.append(row)

    if any(len(row) != len(rows[0]) for row in rows):
        raise E.InvalidExpression(E.ERROR_MESSAGES["3042"] + f"[{body}] (rows differ in length)", code="3042")
    return rows


def parse_matrices(expression):
    """Return every bracketed matrix literal in order of appearance."""
    return [_parse_literal(match.group(1)) for match in MATRIX_PATTERN.finditer(expression)]


def matrix_to_string(matrix):
    """Render in literal syntax, so parse_matrices() reads the output back."""
    return "[" + "; ".join(", ".join(MathEngine.trace_number(v) for v in row) for row in matrix) + "]"


def identify_operation(expression):
    outside = MATRIX_PATTERN.sub(" ", expression).replace("*", "×")
    for symbol in BINARY_OPERATIONS:
        if symbol in outside:
            return symbol
    lowered = outside.lower()
    for keyword in ("transpose", "trace", "inv"):
        if keyword in lowered:
            return keyword
    return "det"


# -----------------------------
# Operations
# -----------------------------

def _shape(matrix):
    return len(matrix), len(matrix[0])


def add(a, b):
    if _shape(a) != _shape(b):
        raise E.MatrixDimensionMismatch()
    return [[x + y for x, y in zip(row_a, row_b)] for row_a, row_b in zip(a, b)]


def subtract(a, b):
    if _shape(a) != _shape(b):
        raise E.MatrixDimensionMismatch()
    return [[x - y for x, y in zip(row_a, row_b)] for row_a, row_b in zip(a, b)]


def multiply(a, b):
    """Row-by-column product; a's column count must equal b's row count."""
    m, n = _shape(a)
    rows_b, p = _shape(b)
    if n != rows_b:
        raise E.MatrixDimensionMismatch()

    result = [[0.0] * p for _ in range(m)]
    for i in range(m):
        for j in range(p):
            for k in range(n):
                result[i][j] += a[i][k] * b[k][j]
    return result


def determinant(matrix):
    n, columns = _shape(matrix)
    if n != columns:
        raise E.MatrixDimensionMismatch()

    if n == 1:
        return matrix[0][0]
    if n == 2:
        return matrix[0][0] * matrix[1][1] - matrix[0][1] * matrix[1][0]

    det = 0.0
    for j in range(n):
        minor = [[row[k] for k in range(n) if k != j] for row in matrix[1:]]
        sign = 1.0 if j % 2 == 0 else -1.0
        det += sign * matrix[0][j] * determinant(minor)
    return det


def transpose(matrix):
    return [list(column) for column in zip(*matrix)]


def trace(matrix):
    n, columns = _shape(matrix)
    if n != columns:
        raise E.MatrixDimensionMismatch()
    return sum(matrix[i][i] for i in range(n))


def inverse(matrix):
    """Gauss-Jordan elimination with partial pivoting."""
    n, columns = _shape(matrix)
    if n != columns:
        raise E.MatrixDimensionMismatch()

    augmented = [list(row) + [1.0 if i == j else 0.0 for j in range(n)] for i, row in enumerate(matrix)]

    for column in range(n):
        pivot_row = max(range(column, n), key=lambda r: abs(augmented[r][column]))
        if abs(augmented[pivot_row][column]) < SINGULAR_EPSILON:
            raise E.SingularMatrix()
        augmented[column], augmented[pivot_row] = augmented[pivot_row], augmented[column]

        pivot = augmented[column][column]
        augmented[column] = [value / pivot for value in augmented[column]]
        for r in range(n):
            if r != column and augmented[r][column] != 0:
                factor = augmented[r][column]
                augmented[r] = [value - factor * pivot_value
                                for value, pivot_value in zip(augmented[r], augmented[column])]

    return [row[n:] for row in augmented]


def perform_operation(matrices, operation):
    if not matrices:
        raise E.InvalidExpression("No matrix found in expression.")

    if operation in BINARY_OPERATIONS:
        if len(matrices) != 2:
            raise E.InvalidExpression(f"Matrix operation '{operation}' needs exactly two matrices.")
        a, b = matrices
        if operation == "×":
            return multiply(a, b)
        elif operation == "+":
            return add(a, b)
        return subtract(a, b)

    if operation in UNARY_OPERATIONS:
        if len(matrices) != 1:
            raise E.InvalidExpression(f"Matrix operation '{operation}' needs exactly one matrix.")
        matrix = matrices[0]
        if operation == "det":
            return [[determinant(matrix)]]
        elif operation == "trace":
            return [[trace(matrix)]]
        elif operation == "transpose":
            return transpose(matrix)
        return inverse(matrix)

    raise E.UnsupportedOperation(operation)


def evaluate_matrix_expr(expression):
    """Parse, pick the operation and run it. Returns (result, steps).

    A 1x1 result comes back as a float, anything larger as MatrixResult.
    """
    steps = []
    matrices = parse_matrices(expression)
    operation = identify_operation(expression)

    for index, matrix in enumerate(matrices):
        steps.append(f"Matrix {chr(ord('A') + index)}: {matrix_to_string(matrix)}")
    steps.append(f"Matrix Operation: {operation}")

    result = perform_operation(matrices, operation)
    steps.append(f"Result: {matrix_to_string(result)}")

    if len(result) == 1 and len(result[0]) == 1:
        return result[0][0], steps
    return MatrixResult(result), steps
