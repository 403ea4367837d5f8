# Main.py
""""" Entry point for the calculator core.

   Responsibilities:
   - Verify required files exist in development mode
   - Load configuration and run a small interactive shell over the engine

   Usage:
   - plain lines are typed into the expression ('3+4', 'sin PI')
   - ':command args' invokes an engine command (':term NUM1 ADD NUM2', ':execute', ':sign')
   - ':quit' exits
"""""
import sys
from pathlib import Path
from CalcCore import config_manager as config_manager
from CalcCore import error as E
from CalcCore import ExpressionRenderer
from CalcCore.CalculatorEngine import CalculatorEngine
from CalcCore.history import history_plugin
from CalcCore.terms import TokenType


PROJECT_ROOT = Path(__file__).resolve().parent

QUIT_COMMANDS = (":quit", ":q", ":exit")


def check_files_exist():

    """
      Fail fast in development if required files are missing / moved / renamed.
    """

    modules_dir = PROJECT_ROOT / "CalcCore"

    REQUIRED = [
        modules_dir / "CalculatorEngine.py",
        modules_dir / "MathEngine.py",
        modules_dir / "ScientificEngine.py",
        modules_dir / "ExpressionRenderer.py",
        modules_dir / "config_manager.py",
        modules_dir / "config.json",
    ]

    missing_files = []
    for file_path in REQUIRED:
        if not file_path.exists():
            missing_files.append(file_path.name)

    if missing_files:
        print("Error: The following files are missing or in the wrong location:")
        for file_name in missing_files:
            print(f"- {file_name}")
        sys.exit(1)


def display(rendered):
    """Plain text of rendered terms, exponents written with '^(...)'."""
    text = ""
    for term in rendered:
        if term.type == TokenType.EXPONENT:
            text += "^(" + display(term.value) + ")"
        elif isinstance(term.label, list):
            text += display(term.label)
        else:
            text += str(term.label).replace("<sup>", "^").replace("</sup>", "") \
                .replace("<sub>", "_").replace("</sub>", "")
    return text


def handle_line(engine, line):
    """Apply one input line to the engine. Returns False when the shell must stop."""
    line = line.strip()
    if not line:
        return True

    if line in QUIT_COMMANDS:
        return False

    if line.startswith(":"):
        parts = line[1:].split(maxsplit=1)
        if not parts:
            return True
        engine.invoke(parts[0], *parts[1:])
    else:
        engine.insert(line)

    return True


def main():

    """
    Load configuration and start the shell.
    - Keep this thin: no business logic here.
    """

    all_settings = config_manager.load_setting_value("all")
    print("Config loaded:", all_settings)

    engine = CalculatorEngine(plugins={"history": history_plugin})

    engine.on("result", lambda result: print(f"= {result}"))
    engine.on("syntaxerror", lambda error: print(f"Error {error.code}: {error.message}"))
    engine.on("error", lambda error: print(E.describe(error)))

    while True:
        try:
            line = input(f"{display(ExpressionRenderer.nest_exponents(engine.render()))} > ")
        except EOFError:
            break

        if not handle_line(engine, line):
            break


if __name__ == "__main__":
    print("Developer Mode: Checking file paths...")
    check_files_exist()
    main()
