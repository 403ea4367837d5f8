# tokens.py
"""""
Type classifier.

Every predicate is built on `get_type`, which accepts the three shapes the
rest of the code hands around:
- a type tag ('digit', 'operator'...), returned as is,
- a registry identifier ('NUM1', 'LPAR'...), resolved to its term's type,
- an object (Token, Term, RenderTerm): its `type` is resolved as above,
  falling back to its `token` attribute.
Anything else gives None. Nothing in here raises.
"""""

from .terms import terms, Term, TokenType, is_token_type
from .terms import is_function_operator as _is_function_operator


# -----------------------------
# Discrimination helpers
# -----------------------------

def _type_of_name(name):
    if is_token_type(name):
        return name
    term = terms.get(name)
    if term is not None:
        return term.type
    return None


def get_type(token):
    """Return the TokenType of a type tag, a registry key, or a token-like object."""
    if token is None:
        return None

    if isinstance(token, str):
        return _type_of_name(token)

    token_type = _type_of_name(getattr(token, "type", None))
    if token_type is None:
        token_type = _type_of_name(getattr(token, "token", None))
    return token_type


def get_term(token):
    """Return the registry Term behind a key, a Token or a RenderTerm (None when unknown)."""
    if token is None:
        return None
    if isinstance(token, Term):
        return token
    if isinstance(token, str):
        return terms.get(token)

    for attribute in ("token", "type"):
        name = getattr(token, attribute, None)
        if isinstance(name, str) and name in terms:
            return terms[name]
    return None


def get_token(token):
    """Return the registry identifier of a key, a Term, a Token or a RenderTerm."""
    if token is None:
        return None
    if isinstance(token, str):
        return token
    if isinstance(token, Term):
        return token.token

    name = getattr(token, "token", None)
    if isinstance(name, str):
        return name
    return getattr(token, "type", None)


def get_exponent(token):
    """Side on which the term opens an exponent ('left', 'right' or False)."""
    term = get_term(token)
    if term is None:
        return getattr(token, "exponent", False) or False
    return term.exponent


# -----------------------------
# Predicates
# -----------------------------

def is_digit(token):
    return get_type(token) == TokenType.DIGIT


def is_operator(token):
    return get_type(token) in (TokenType.OPERATOR, TokenType.UNARY)


def is_binary_operator(token):
    return get_type(token) == TokenType.OPERATOR


def is_unary_operator(token):
    return get_type(token) == TokenType.UNARY


def is_operand(token):
    return get_type(token) not in (TokenType.OPERATOR, TokenType.UNARY,
                                   TokenType.AGGREGATOR, TokenType.SEPARATOR)


def is_value(token):
    return get_type(token) in (TokenType.DIGIT, TokenType.CONSTANT, TokenType.VARIABLE,
                               TokenType.TERM, TokenType.ERROR)


def is_aggregator(token):
    return get_type(token) == TokenType.AGGREGATOR


def is_error(token):
    return get_type(token) == TokenType.ERROR


def is_constant(token):
    return get_type(token) == TokenType.CONSTANT


def is_variable(token):
    return get_type(token) in (TokenType.VARIABLE, TokenType.TERM)


def is_function(token):
    return get_type(token) == TokenType.FUNCTION


def is_exponent(token):
    return get_type(token) == TokenType.EXPONENT


def is_identifier(token):
    return get_type(token) in (TokenType.CONSTANT, TokenType.VARIABLE, TokenType.TERM,
                               TokenType.FUNCTION, TokenType.ERROR)


def is_separator(token):
    return get_type(token) in (TokenType.OPERATOR, TokenType.UNARY,
                               TokenType.AGGREGATOR, TokenType.SEPARATOR)


def is_modifier(token):
    # postfix operators close their operand, they do not modify what follows
    return get_type(token) in (TokenType.OPERATOR, TokenType.FUNCTION)


def is_sign_operator(token):
    return get_token(token) in ("SUB", "NEG", "ADD", "POS")


# -----------------------------
# Values
# -----------------------------

def string_value(expression):
    """Text of an expression given as a string, an evaluation result, a token or None."""
    if isinstance(expression, str):
        return expression
    if expression is None:
        return ""

    if hasattr(expression, "result"):
        expression = expression.result
    elif hasattr(expression, "value"):
        expression = expression.value
    return str(expression)


def is_function_operator(token):
    """True for a function used as a binary operator ('@nthrt', or the NTHRT identifier)."""
    if token is None:
        return False
    if isinstance(token, str):
        return _is_function_operator(token)
    return _is_function_operator(getattr(token, "value", None)) or _is_function_operator(get_token(token))
