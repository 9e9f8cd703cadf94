"""
Tests for matrix literals and matrix algebra (MatrixEngine)

Checks:
1. Literal parsing and rejection of malformed literals
2. Operation selection from the text outside the brackets
3. Add / subtract / multiply / determinant, plus transpose, trace and inverse
4. Dimension rules and singular matrices
5. Scalar vs MatrixResult outcome
6. Rendering back to literal syntax
"""

import pytest

from CalcEngine import MatrixEngine
from CalcEngine import error as E
from CalcEngine.MatrixEngine import MatrixResult, evaluate_matrix_expr


class TestParseMatrices:
    """Tests for parse_matrices"""

    def test_two_literals_in_order(self):
        assert MatrixEngine.parse_matrices("[1,2;3,4] × [5,6;7,8]") == [
            [[1.0, 2.0], [3.0, 4.0]],
            [[5.0, 6.0], [7.0, 8.0]],
        ]

    def test_signed_decimal_entries_and_spaces(self):
        assert MatrixEngine.parse_matrices("[ -1.5, 2 ; 3 , 4e1 ]") == [[[-1.5, 2.0], [3.0, 40.0]]]

    def test_no_literal(self):
        assert MatrixEngine.parse_matrices("1 + 2") == []

    def test_non_numeric_entry(self):
        with pytest.raises(E.InvalidExpression):
            MatrixEngine.parse_matrices("[1,a]")

    def test_empty_entry(self):
        with pytest.raises(E.InvalidExpression):
            MatrixEngine.parse_matrices("[1,;2,3]")

    def test_ragged_rows(self):
        with pytest.raises(E.InvalidExpression):
            MatrixEngine.parse_matrices("[1,2;3]")


class TestIdentifyOperation:
    """Tests for identify_operation"""

    def test_priority_order(self):
        assert MatrixEngine.identify_operation("[1] × [2] + [3]") == "×"
        assert MatrixEngine.identify_operation("[1] - [2] + [3]") == "+"

    def test_star_means_multiply(self):
        assert MatrixEngine.identify_operation("[1] * [2]") == "×"

    def test_negative_entries_do_not_select_subtraction(self):
        assert MatrixEngine.identify_operation("[-1,2;3,-4]") == "det"

    def test_keywords(self):
        assert MatrixEngine.identify_operation("transpose([1,2])") == "transpose"
        assert MatrixEngine.identify_operation("TRACE([1,2;3,4])") == "trace"
        assert MatrixEngine.identify_operation("inv([1,2;3,4])") == "inv"
        assert MatrixEngine.identify_operation("det([1,2;3,4])") == "det"


class TestOperations:
    """Tests for evaluate_matrix_expr"""

    def test_multiply(self):
        result, steps = evaluate_matrix_expr("[1,2;3,4] × [5,6;7,8]")
        assert isinstance(result, MatrixResult)
        assert result == [[19.0, 22.0], [43.0, 50.0]]
        assert "Matrix Operation: ×" in steps

    def test_multiply_shape(self):
        result, _ = evaluate_matrix_expr("[1,2,3;4,5,6] × [1;1;1]")
        assert result.shape == (2, 1)
        assert result == [[6.0], [15.0]]

    def test_one_by_one_result_is_scalar(self):
        result, _ = evaluate_matrix_expr("[1,2] × [3;4]")
        assert result == 11.0
        assert isinstance(result, float)

    def test_add(self):
        result, _ = evaluate_matrix_expr("[1,2;3,4] + [1,1;1,1]")
        assert result == [[2.0, 3.0], [4.0, 5.0]]

    def test_subtract(self):
        result, _ = evaluate_matrix_expr("[5,6;7,8] - [1,2;3,4]")
        assert result == [[4.0, 4.0], [4.0, 4.0]]

    def test_determinant_2x2(self):
        result, _ = evaluate_matrix_expr("det([1,2;3,4])")
        assert result == -2.0

    def test_determinant_3x3(self):
        result, _ = evaluate_matrix_expr("[6,1,1;4,-2,5;2,8,7]")
        assert result == pytest.approx(-306.0)

    def test_determinant_1x1(self):
        assert MatrixEngine.determinant([[7.0]]) == 7.0

    def test_transpose(self):
        result, _ = evaluate_matrix_expr("transpose([1,2;3,4])")
        assert result == [[1.0, 3.0], [2.0, 4.0]]

    def test_trace(self):
        result, _ = evaluate_matrix_expr("trace([1,2;3,4])")
        assert result == 5.0

    def test_inverse(self):
        result, _ = evaluate_matrix_expr("inv([4,7;2,6])")
        expected = [[0.6, -0.7], [-0.2, 0.4]]
        for row, expected_row in zip(result.rows, expected):
            assert row == pytest.approx(expected_row)

    def test_inverse_of_singular_matrix(self):
        with pytest.raises(E.SingularMatrix):
            evaluate_matrix_expr("inv([1,2;2,4])")


class TestDimensionRules:
    """Operand count and dimension checks"""

    def test_add_mismatch(self):
        with pytest.raises(E.MatrixDimensionMismatch):
            evaluate_matrix_expr("[1,2;3,4] + [1,2,3;4,5,6]")

    def test_multiply_mismatch(self):
        with pytest.raises(E.MatrixDimensionMismatch):
            evaluate_matrix_expr("[1,2;3,4] × [1,2,3]")

    def test_determinant_of_non_square(self):
        with pytest.raises(E.MatrixDimensionMismatch):
            evaluate_matrix_expr("det([1,2,3;4,5,6])")

    def test_binary_operation_needs_two_matrices(self):
        with pytest.raises(E.InvalidExpression):
            evaluate_matrix_expr("[1,2] +")

    def test_determinant_needs_one_matrix(self):
        with pytest.raises(E.InvalidExpression):
            evaluate_matrix_expr("[1,2;3,4] [5,6;7,8]")


class TestMatrixToString:
    """Tests for matrix_to_string"""

    def test_literal_syntax(self):
        assert MatrixEngine.matrix_to_string([[1.0, 2.0], [3.0, 4.0]]) == "[1, 2; 3, 4]"

    def test_reparse_gives_equal_matrix(self):
        matrix = [[1.5, -2.0], [3.25, 1e-7]]
        reparsed = MatrixEngine.parse_matrices(MatrixEngine.matrix_to_string(matrix))[0]
        for row, original in zip(reparsed, matrix):
            assert row == pytest.approx(original)

    def test_matrix_result_str(self):
        assert str(MatrixResult([[1.0, 0.0], [0.0, 1.0]])) == "[1, 0; 0, 1]"
