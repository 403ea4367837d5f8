# terms.py
"""""
Term registry of the calculator.

Every item the expression language knows about is described once here:
its literal value (what is typed into the expression), its display label,
its type, and the side on which it opens an exponent notation (if any).
"""""

import re

rePrefixedTerm = re.compile(r"^@[a-zA-Z_]\w*$")
reKeywordOnly = re.compile(r"^[a-zA-Z_]\w*$")


# -----------------------------
# Label helpers
# -----------------------------

def exponent(x):
    return f"<sup>{x}</sup>"


def subscript(x):
    return f"<sub>{x}</sub>"


def exponent_right(a, x):
    return a + exponent(x)


def exponent_left(a, x):
    return exponent(x) + a


def subscript_right(a, x):
    return a + subscript(x)


symbols = {
    "minusOne": "\uFE631",
    "minus": "\u2212",
    "plus": "+",
    "positive": "+",
    "negative": "-",
    "multiply": "\u00D7",
    "divide": "\u00F7",
    "squareRoot": "\u221A",
    "cubeRoot": "\u221B",
    "fourthRoot": "\u221C",
    "ellipsis": "\u2026",
    "pi": "\u03C0",
    "euler": "e",
}


# -----------------------------
# Types
# -----------------------------

class TokenType:
    """Names of the term types (plain strings, compared by value)."""
    TERM = "term"
    DIGIT = "digit"
    AGGREGATOR = "aggregator"
    SEPARATOR = "separator"
    OPERATOR = "operator"
    UNARY = "unary"
    VARIABLE = "variable"
    CONSTANT = "constant"
    FUNCTION = "function"
    EXPONENT = "exponent"
    UNKNOWN = "unknown"
    ERROR = "error"

    ALL = (TERM, DIGIT, AGGREGATOR, SEPARATOR, OPERATOR, UNARY, VARIABLE,
           CONSTANT, FUNCTION, EXPONENT, UNKNOWN, ERROR)


def is_token_type(name):
    return isinstance(name, str) and name in TokenType.ALL


class Term:
    """Registry entry. `token` is the identifier (NUM0, LPAR, SIN...)."""
    def __init__(self, token, label, value, type, exponent=False):
        self.token = token
        self.label = label
        self.value = value
        self.type = type
        self.exponent = exponent

    def copy(self, **changes):
        """Return a new Term with some fields replaced (the registry stays untouched)."""
        fields = {
            "token": self.token,
            "label": self.label,
            "value": self.value,
            "type": self.type,
            "exponent": self.exponent,
        }
        fields.update(changes)
        return Term(**fields)

    def __eq__(self, other):
        if not isinstance(other, Term):
            return NotImplemented
        return (self.token, self.label, self.value, self.type, self.exponent) == \
               (other.token, other.label, other.value, other.type, other.exponent)

    def __hash__(self):
        return hash((self.token, self.value, self.type))

    def __repr__(self):
        return f"Term({self.token!r}, value={self.value!r}, type={self.type!r})"


# -----------------------------
# Registry
# -----------------------------

_definitions = [
    # Digits
    ("NUM0", "0", "0", TokenType.DIGIT, False),
    ("NUM1", "1", "1", TokenType.DIGIT, False),
    ("NUM2", "2", "2", TokenType.DIGIT, False),
    ("NUM3", "3", "3", TokenType.DIGIT, False),
    ("NUM4", "4", "4", TokenType.DIGIT, False),
    ("NUM5", "5", "5", TokenType.DIGIT, False),
    ("NUM6", "6", "6", TokenType.DIGIT, False),
    ("NUM7", "7", "7", TokenType.DIGIT, False),
    ("NUM8", "8", "8", TokenType.DIGIT, False),
    ("NUM9", "9", "9", TokenType.DIGIT, False),
    ("DOT", ".", ".", TokenType.DIGIT, False),
    ("EXP10", symbols["multiply"] + "10", "e", TokenType.DIGIT, "right"),

    # Aggregators and separators
    ("LPAR", "(", "(", TokenType.AGGREGATOR, False),
    ("RPAR", ")", ")", TokenType.AGGREGATOR, False),
    ("COMMA", ",", ",", TokenType.SEPARATOR, False),
    ("ELLIPSIS", symbols["ellipsis"], "~", TokenType.SEPARATOR, False),

    # Operators (SUB/ADD come before NEG/POS: same literal, first one wins in the tokenizer)
    ("SUB", symbols["minus"], "-", TokenType.OPERATOR, False),
    ("NEG", symbols["negative"], "-", TokenType.OPERATOR, False),
    ("ADD", symbols["plus"], "+", TokenType.OPERATOR, False),
    ("POS", symbols["positive"], "+", TokenType.OPERATOR, False),
    ("MUL", symbols["multiply"], "*", TokenType.OPERATOR, False),
    ("DIV", symbols["divide"], "/", TokenType.OPERATOR, False),
    ("MOD", "modulo", "%", TokenType.OPERATOR, False),
    ("POW", "^", "^", TokenType.OPERATOR, "right"),
    ("FAC", "!", "!", TokenType.UNARY, False),
    ("ASSIGN", "=", "=", TokenType.OPERATOR, False),
    ("PERCENT", "%", "#", TokenType.UNARY, False),

    # Variables
    ("VAR_ANS", "Ans", "ans", TokenType.VARIABLE, False),
    ("VAR_MEM", "Mem", "mem", TokenType.VARIABLE, False),

    # Constants
    ("PI", symbols["pi"], "PI", TokenType.CONSTANT, False),
    ("E", symbols["euler"], "E", TokenType.CONSTANT, False),
    ("TEN", "10", "TEN", TokenType.CONSTANT, False),

    # Errors
    ("NAN", "Error", "NaN", TokenType.ERROR, False),
    ("INFINITY", "Infinity", "Infinity", TokenType.ERROR, False),
    ("ERROR", "Syntax error", "Syntax", TokenType.ERROR, False),

    # Functions
    ("EXP", "exp", "exp", TokenType.FUNCTION, "right"),
    ("SQRT", symbols["squareRoot"], "sqrt", TokenType.FUNCTION, False),
    ("CBRT", exponent_left(symbols["squareRoot"], "3"), "cbrt", TokenType.FUNCTION, False),
    ("NTHRT", symbols["squareRoot"], "nthrt", TokenType.FUNCTION, "left"),
    ("FLOOR", "floor", "floor", TokenType.FUNCTION, False),
    ("CEIL", "ceil", "ceil", TokenType.FUNCTION, False),
    ("ROUND", "round", "round", TokenType.FUNCTION, False),
    ("TRUNC", "trunc", "trunc", TokenType.FUNCTION, False),
    ("SIN", "sin", "sin", TokenType.FUNCTION, False),
    ("COS", "cos", "cos", TokenType.FUNCTION, False),
    ("TAN", "tan", "tan", TokenType.FUNCTION, False),
    ("ASIN", exponent_right("sin", symbols["minusOne"]), "asin", TokenType.FUNCTION, False),
    ("ACOS", exponent_right("cos", symbols["minusOne"]), "acos", TokenType.FUNCTION, False),
    ("ATAN", exponent_right("tan", symbols["minusOne"]), "atan", TokenType.FUNCTION, False),
    ("SINH", "sinh", "sinh", TokenType.FUNCTION, False),
    ("COSH", "cosh", "cosh", TokenType.FUNCTION, False),
    ("TANH", "tanh", "tanh", TokenType.FUNCTION, False),
    ("ASINH", exponent_right("sinh", symbols["minusOne"]), "asinh", TokenType.FUNCTION, False),
    ("ACOSH", exponent_right("cosh", symbols["minusOne"]), "acosh", TokenType.FUNCTION, False),
    ("ATANH", exponent_right("tanh", symbols["minusOne"]), "atanh", TokenType.FUNCTION, False),
    ("LN", "ln", "ln", TokenType.FUNCTION, False),
    ("LOG", "ln", "log", TokenType.FUNCTION, False),
    ("LG", subscript_right("log", "10"), "lg", TokenType.FUNCTION, False),
    ("LOG10", subscript_right("log", "10"), "log10", TokenType.FUNCTION, False),
    ("ABS", "abs", "abs", TokenType.FUNCTION, False),
    ("RAND", "random", "random", TokenType.FUNCTION, False),
]

terms = {}
for (_token, _label, _value, _type, _exponent) in _definitions:
    terms[_token] = Term(_token, _label, _value, _type, _exponent)


def is_prefixed_term(name):
    """True for identifiers like '@NTHRT' (a function used as a binary operator)."""
    return isinstance(name, str) and rePrefixedTerm.match(name) is not None


def is_function_operator(name):
    """True when the value is an '@'-prefixed keyword ('@nthrt').

    Registry identifiers of left-exponent functions (NTHRT) are accepted too,
    those functions only ever work between two operands.
    """
    if not isinstance(name, str):
        return False
    if rePrefixedTerm.match(name):
        return True
    term = terms.get(name)
    return term is not None and term.type == TokenType.FUNCTION and term.exponent == "left"


def is_keyword(term):
    return reKeywordOnly.match(term.value) is not None


def keywords():
    """Identifier -> value for every alphabetic term (sin, PI, ans, e...)."""
    return {name: term.value for name, term in terms.items() if is_keyword(term)}


def symbol_literals():
    """Identifier -> value for every non alphabetic term ('(', '+', '!'...)."""
    return {name: term.value for name, term in terms.items() if not is_keyword(term)}


def digit_literals():
    """Identifier -> value of the terms a numeric literal can be made of."""
    return {name: term.value for name, term in terms.items()
            if term.type == TokenType.DIGIT or term.value in ("-", "+")}
