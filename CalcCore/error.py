# error.py


class MathError(Exception):
    def __init__(self, message, code="9999", equation=None):
        super().__init__(message)
        self.message = message
        self.code = code
        self.equation = equation

class SyntaxError(MathError):
    pass

class CalculationError(MathError):
    pass

class TermError(MathError):
    pass

class VariableError(MathError):
    pass

class CommandError(MathError):
    pass

class ConfigError(MathError):
    pass



Error_Dictionary= {

    "1" : "Missing Files",
    "2" : "Scientific Calculation Error",
    "3" : "Calculator Error",
    "5" : "Configuration Error",
    "6" : "Engine Error",
    "9" : "Runtime Error"

}

#Error Messages are structured in:
# 1. Digit: Main Error
# 2. Digit: Sub-category
# 3. and 4. Digit: Error Number



ERROR_MESSAGES = {
    "2001" : "Wrong number of arguments for: ", # + function

    "3009" : "Missing ')'.",
    "3010" : "Missing '('.",
    "3011" : "Unexpected token: ", # + Token
    "3012" : "Invalid expression: ", # + Expression
    "3026" : "Number too big.",
    "3027" : "Missing Number.",
    "3030" : "Unknown variable: ", # + variable
    "3031" : "Unknown function: ", # + function
    "3032" : "Expression nested too deeply.",

    "5001" : "Invalid configuration: ", # + setting

    "6001" : "Invalid term: ", # + term name
    "6002" : "Invalid variable: ", # + variable name
    "6003" : "Invalid command: ", # + command name

    "9999" : "Unexpected Error: " #+error
}


def error_message(code, detail=""):
    """Message of an error code, followed by the detail (token, name...)."""
    return ERROR_MESSAGES.get(code, ERROR_MESSAGES["9999"]) + str(detail)


def describe(error):
    """Return 'family: message' for a MathError, using its code."""
    family = Error_Dictionary.get(str(error.code)[:1], Error_Dictionary["9"])
    return f"{family}: {error.message}"
