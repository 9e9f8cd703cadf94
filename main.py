# Main.py
""""" Entry point for the calculation engine.

   Responsibilities:
   - Detect run mode (script vs PyInstaller.exe)
   - Verify required files exist in development mode
   - Load configuration, then evaluate one expression or run a small REPL
   - Clipboard integration: read the expression from / copy the result to it

"""""
import sys
import json
import argparse
from pathlib import Path

import pyperclip

from CalcEngine import config_manager as config_manager
from CalcEngine import Calculator
from CalcEngine import MathEngine
from CalcEngine import error as E


# Resolve project root depending on run mode (Script or .exe)

if getattr(sys, 'frozen', False):
    PROJECT_ROOT = Path(sys._MEIPASS)
else:
    PROJECT_ROOT = Path(__file__).resolve().parent


def check_files_exist():

    """
      Fail fast in development if engine modules are missing / moved / renamed.
      In production (.exe) the files are embedded by the bundler and this check is skipped.
    """

    engine_dir = PROJECT_ROOT / "CalcEngine"
    REQUIRED = [
        engine_dir / "Calculator.py",
        engine_dir / "MathEngine.py",
        engine_dir / "ScientificEngine.py",
        engine_dir / "MatrixEngine.py",
        engine_dir / "ComplexEngine.py",
        engine_dir / "Cas.py",
        engine_dir / "config_manager.py",
        engine_dir / "error.py",
    ]

    missing_files = [file_path.name for file_path in REQUIRED if not file_path.exists()]

    if missing_files:
        print("Error: The following files are missing or in the wrong location:")
        for file_name in missing_files:
            print(f"- {file_name}")
        sys.exit(1)


def parse_binding(text):
    """'x=3.5' -> ('x', 3.5)"""
    name, separator, value = text.partition("=")
    if not separator:
        raise argparse.ArgumentTypeError(f"expected NAME=VALUE, got {text!r}")
    try:
        return name.strip(), float(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"value of {name.strip()!r} is not a number")


def parse_setting(text):
    """'decimal_places=4' -> ('decimal_places', 4); values are read as JSON when possible."""
    key, separator, value = text.partition("=")
    if not separator:
        raise argparse.ArgumentTypeError(f"expected KEY=VALUE, got {text!r}")
    try:
        return key.strip(), json.loads(value)
    except json.JSONDecodeError:
        return key.strip(), value


def build_parser():
    parser = argparse.ArgumentParser(description="Evaluate expressions, matrices, complex numbers and linear equations.")
    parser.add_argument("expression", nargs="?", help="expression to evaluate; starts a REPL when omitted")
    parser.add_argument("--var", dest="variables", action="append", type=parse_binding, default=[],
                        metavar="NAME=VALUE", help="bind a variable (repeatable)")
    parser.add_argument("--paste", action="store_true", help="read the expression from the clipboard")
    parser.add_argument("--copy", action="store_true", help="copy the result to the clipboard")
    parser.add_argument("--graph", action="store_true", help="print (x, y) samples of a function of x")
    parser.add_argument("--range", nargs=2, type=float, metavar=("LOW", "HIGH"), help="graph domain")
    parser.add_argument("--samples", type=int, help="number of graph samples")
    parser.add_argument("--set", dest="new_settings", action="append", type=parse_setting, default=[],
                        metavar="KEY=VALUE", help="store a setting in config.json")
    return parser


def show(expression, variables, settings, copy_result):
    """Evaluate and print one expression. Returns the process exit code."""
    try:
        value, steps = Calculator.evaluate(expression, variables=variables, settings=settings)
    except E.MathError as e:
        print(f"Error: {e.message}")
        if settings["debug"]:
            print(f"{e.area} {e.code}: {e.equation}")
        return 1

    if settings["show_steps"]:
        for step in steps:
            print(f"  {step}")
    rendered = Calculator.format_result(value, settings=settings)
    print(rendered)

    if copy_result:
        pyperclip.copy(rendered)
    return 0


def show_graph(function, variables, settings, domain, samples):
    low, high = domain if domain else (None, None)
    try:
        points = Calculator.generate_points(function, low, high, samples, variables=variables, settings=settings)
    except E.MathError as e:
        print(f"Error: {e.message}")
        return 1
    for x, y in points:
        print(f"{x:.6g}, {y:.6g}")
    return 0


def repl(variables, settings, copy_result):
    """Read-eval-print loop. 'let NAME = EXPR' stores a variable, 'quit' leaves."""
    print("Enter the problem ('quit' to leave): ")
    while True:
        try:
            problem = input("> ").strip()
        except EOFError:
            break
        if problem in ("quit", "exit"):
            break
        if not problem:
            continue

        if problem.startswith("let ") and "=" in problem:
            name, _, expression = problem[4:].partition("=")
            name = name.strip()
            try:
                value, _ = Calculator.evaluate(expression.strip(), variables=variables, settings=settings)
                if not isinstance(value, float):
                    raise E.InvalidArgument(E.ERROR_MESSAGES["5001"] + f"'{name}' is not bound to a number", code="5001")
                MathEngine.validate_variables({name: value})
            except E.MathError as e:
                print(f"Error: {e.message}")
                continue
            variables[name] = value
            print(f"{name} = {Calculator.format_result(value, settings=settings)}")
            continue

        show(problem, variables, settings, copy_result)
    return 0


def main(argv=None):

    """
    Load configuration and dispatch.
    - Keep this thin: no business logic here.
    """

    args = build_parser().parse_args(argv)

    if args.new_settings:
        all_settings = config_manager.load_setting_value("all")
        all_settings.update(dict(args.new_settings))
        config_manager.save_setting(all_settings)

    settings = config_manager.load_setting_value("all")
    variables = dict(args.variables)
    copy_result = args.copy or settings["copy_result"]

    expression = args.expression
    if args.paste:
        expression = pyperclip.paste().strip()

    if expression is None:
        if args.new_settings:
            return 0
        return repl(variables, settings, copy_result)

    if args.graph:
        return show_graph(expression, variables, settings, args.range, args.samples)
    return show(expression, variables, settings, copy_result)


if __name__ == "__main__":
    is_running_as_exe = getattr(sys, 'frozen', False)

    if not is_running_as_exe:
        check_files_exist()
    sys.exit(main())
