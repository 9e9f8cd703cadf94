
class MathError(Exception):
    code = "9999"

    def __init__(self, message=None, code=None, equation=None):
        if code is not None:
            self.code = code
        if message is None:
            message = ERROR_MESSAGES.get(self.code, ERROR_MESSAGES["9999"])
        super().__init__(message)
        self.message = message
        self.equation = equation

    @property
    def area(self):
        """Error area from the first code digit, e.g. "Calculator Error"."""
        return Error_Dictionary.get(self.code[0], Error_Dictionary["9"])

class ParseError(MathError):
    pass

class CalculationError(MathError):
    pass

class SolverError(MathError):
    pass

class MatrixError(MathError):
    pass


# Concrete kinds. Each one owns its code; the message comes from ERROR_MESSAGES
# unless the raise site passes a more specific one.

class InvalidExpression(ParseError):
    code = "3011"

class UnmatchedParentheses(ParseError):
    code = "3009"

class DivisionByZero(CalculationError):
    code = "3003"

class UnsupportedOperation(CalculationError):
    code = "3004"

    def __init__(self, symbol, equation=None):
        super().__init__(ERROR_MESSAGES[self.code] + str(symbol), equation=equation)
        self.symbol = symbol

class UnsupportedFunction(CalculationError):
    code = "2004"

    def __init__(self, name, equation=None):
        super().__init__(ERROR_MESSAGES[self.code] + str(name), equation=equation)
        self.name = name

class InvalidArgument(CalculationError):
    code = "2002"

class MatrixDimensionMismatch(MatrixError):
    code = "3040"

class SingularMatrix(MatrixError):
    code = "3041"

class NoVariableFound(SolverError):
    code = "3001"

class InvalidEquation(SolverError):
    code = "3012"

class EquationTooComplex(SolverError):
    code = "3005"




Error_Dictionary = {

    "1" : "Missing Files",
    "2" : "Scientific Calculation Error",
    "3" : "Calculator Error",
    "5" : "Configuration Error",
    "9" : "Runtime Error"

}

#Error Messages are structured in:
# 1. Digit: Main Error
# 2. Digit: Sub-area
# 3. and 4. Digit: Error Number



ERROR_MESSAGES = {
    "2002" : "Invalid argument for function: ", # + function call
    "2004" : "Unsupported function: ", # + function name
    "2005" : "Factorial, permutation and combination need non-negative integers: ", # + argument


    "3001" : "No variable found to solve for.",
    "3003" : "Division by zero",
    "3004" : "Unsupported operation: ", # + operator
    "3005" : "Equation too complex for this solver.",
    "3008" : "More than one '.' in one number.",
    "3009" : "Unmatched parentheses.",
    "3011" : "Invalid expression.",
    "3012" : "Invalid equation: ", # + equation
    "3013" : "Unexpected character: ", # + character
    "3014" : "Unknown variable: ", # + variable name
    "3022" : "One of the equation sides is empty: ", # + equation
    "3026" : "Number too large (Arithmetic overflow).",
    "3040" : "Matrix dimensions do not match.",
    "3041" : "Matrix is singular (non-invertible).",
    "3042" : "Invalid matrix literal: ", # + literal


    "5001" : "Invalid variable name: ", # + name
    "5002" : "Invalid graph range.",



    "9999" : "Unexpected error: " #+error
}
