"""
Tests for the scientific function table (ScientificEngine)

Checks:
1. Function values for the logarithm, root and special function families
2. Factorial, permutation and combination domain checks
3. Degree mode for trigonometric functions
4. Error kinds for domain errors, unknown names and wrong argument counts
"""

import math

import pytest

from CalcEngine import ScientificEngine
from CalcEngine import error as E
from CalcEngine.MathEngine import evaluate_scalar
from CalcEngine.ScientificEngine import apply_function


class TestApplyFunction:
    """Tests for apply_function"""

    def test_log_is_base_ten(self):
        assert apply_function("log", [100.0]) == pytest.approx(2.0)

    def test_natural_log(self):
        assert apply_function("ln", [math.e]) == pytest.approx(1.0)

    def test_log2(self):
        assert apply_function("log2", [8.0]) == pytest.approx(3.0)

    def test_cube_root_of_negative(self):
        assert apply_function("cbrt", [-27.0]) == pytest.approx(-3.0)

    def test_cube_root_is_exact_for_cubes(self):
        assert apply_function("cbrt", [27.0]) == 3.0
        assert apply_function("cbrt", [-64.0]) == -4.0
        assert apply_function("cbrt", [2.0]) == pytest.approx(1.2599210498948732)

    def test_beta(self):
        assert apply_function("beta", [2.0, 3.0]) == pytest.approx(1 / 12)

    def test_erf_and_erfc(self):
        assert apply_function("erf", [0.0]) == 0.0
        assert apply_function("erfc", [0.0]) == pytest.approx(1.0)

    def test_hyperbolic_inverse(self):
        assert apply_function("asinh", [0.0]) == 0.0

    def test_name_is_case_insensitive(self):
        assert apply_function("SQRT", [9.0]) == 3.0

    @pytest.mark.parametrize("name, argument", [("sqrt", -1.0), ("log", 0.0), ("asin", 2.0), ("gamma", 0.0)])
    def test_domain_errors(self, name, argument):
        with pytest.raises(E.InvalidArgument):
            apply_function(name, [argument])

    def test_unknown_function(self):
        with pytest.raises(E.UnsupportedFunction):
            apply_function("foo", [1.0])

    def test_wrong_argument_count(self):
        with pytest.raises(E.InvalidExpression):
            apply_function("sin", [1.0, 2.0])

    def test_degree_mode_input(self):
        assert apply_function("cos", [180.0], degree_mode=True) == pytest.approx(-1.0)

    def test_degree_mode_output(self):
        assert apply_function("atan", [1.0], degree_mode=True) == pytest.approx(45.0)


class TestCountingFunctions:
    """Tests for factorial, permutation and combination"""

    def test_factorial(self):
        assert ScientificEngine.factorial(5.0) == 120.0
        assert ScientificEngine.factorial(0.0) == 1.0

    def test_permutation(self):
        assert ScientificEngine.permutation(5.0, 2.0) == 20.0

    def test_combination(self):
        assert ScientificEngine.combination(5.0, 2.0) == 10.0

    @pytest.mark.parametrize("value", [-1.0, 2.5, math.inf, math.nan])
    def test_factorial_rejects_non_counting_numbers(self, value):
        with pytest.raises(E.InvalidArgument) as excinfo:
            ScientificEngine.factorial(value)
        assert excinfo.value.code == "2005"

    def test_combination_rejects_negative(self):
        with pytest.raises(E.InvalidArgument):
            ScientificEngine.combination(5.0, -1.0)

    def test_two_argument_call_through_pipeline(self):
        value, steps = evaluate_scalar("permutation(5, 2)", settings={})
        assert value == 20
        assert "permutation(5, 2) = 20" in steps

    def test_factorial_overflow(self):
        with pytest.raises(E.CalculationError) as excinfo:
            evaluate_scalar("factorial(171)", settings={})
        assert excinfo.value.code == "3026"


class TestNames:
    """Tests for isConstant / isFunction / arity"""

    def test_constants(self):
        assert ScientificEngine.isConstant("PI")
        assert ScientificEngine.isConstant("phi")
        assert not ScientificEngine.isConstant("x")
        assert ScientificEngine.CONSTANTS["phi"] == pytest.approx(1.618033988749895)

    def test_functions(self):
        assert ScientificEngine.isFunction("Combination")
        assert not ScientificEngine.isFunction("foo")

    def test_arity(self):
        assert ScientificEngine.arity("sin") == 1
        assert ScientificEngine.arity("beta") == 2

    @pytest.mark.parametrize(
        "call",
        [
            lambda: ScientificEngine.factorial(20000000.0),
            lambda: ScientificEngine.permutation(1e9, 5e8),
            lambda: ScientificEngine.combination(1e300, 1e100),
        ],
    )
    def test_huge_arguments_fail_before_computing(self, call):
        """Results past the float limit are refused up front"""
        with pytest.raises(E.CalculationError) as excinfo:
            call()
        assert excinfo.value.code == "3026"

    def test_large_but_representable(self):
        assert ScientificEngine.factorial(170.0) == pytest.approx(7.257415615307994e306)
        assert ScientificEngine.combination(1e6, 2.0) == 499999500000.0
        assert ScientificEngine.permutation(3.0, 5.0) == 0.0


class TestLogarithmNamesInPipeline:
    """Names ending in digits are read as one function"""

    def test_log10(self):
        value, steps = evaluate_scalar("log10(100)", settings={})
        assert value == pytest.approx(2.0)
        assert steps[0] == "Converted to postfix: 100 log10"

    def test_log2(self):
        assert evaluate_scalar("log2(8)", settings={})[0] == pytest.approx(3.0)

    def test_upper_case(self):
        assert evaluate_scalar("LOG10(1000)", settings={})[0] == pytest.approx(3.0)

    def test_implicit_product_after_log2(self):
        assert evaluate_scalar("2log2(8)", settings={})[0] == pytest.approx(6.0)
