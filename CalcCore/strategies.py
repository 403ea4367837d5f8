# strategies.py
"""""
Editing strategies consulted by the calculator engine when a term is added.

A strategy is a plain function that either answers (a value, a change
descriptor, a boolean...) or returns None to let the next one try.
The strategies are grouped in ordered lists, the first answer wins:

- prefix / suffix:    glue ('*' or ' ') to put around the value of a new term
- limit:              reject a term that would break the expression
- replace_expression: replace the whole expression by the new term
- replace_operator:   number of trailing operators replaced by the new one
- sign:               change descriptor toggling the sign of an operand
- trigger:            evaluate the expression before adding an operator
- correct:            clean up an expression before evaluating it
"""""

from .terms import terms, is_prefixed_term
from .tokenizer import Token
from .counter import Counter
from . import tokens as H


# -----------------------------
# Helpers
# -----------------------------

def apply_strategies(args, strategies):
    """Return the first answer (not None) given by the strategies, or None."""
    for strategy in strategies:
        result = strategy(*args)
        if result is not None:
            return result
    return None


def apply_context_strategies(tokens, strategies):
    return apply_strategies([tokens], strategies)


def apply_change_strategies(index, tokens, strategies):
    return apply_strategies([index, tokens], strategies)


def apply_value_strategies(value, previous, next, strategies):
    """Apply the action of the first strategy whose predicate matches (previous, next)."""
    for strategy in strategies:
        if strategy.predicate(previous, next):
            return strategy.action(value)
    return value


def apply_list_strategies(tokens, strategies):
    """Chain the strategies, each one receives the list produced by the previous one."""
    for strategy in strategies:
        tokens = strategy(tokens)
    return tokens


class ValueStrategy:
    """A glue rule: when predicate(previous, next) holds, action(value) decorates the value."""
    def __init__(self, name, predicate, action):
        self.name = name
        self.predicate = predicate
        self.action = action

    def __repr__(self):
        return f"ValueStrategy({self.name!r})"


def multiply_before(value):
    return terms["MUL"].value + value


def multiply_after(value):
    return value + terms["MUL"].value


def space_before(value):
    return " " + value


def space_after(value):
    return value + " "


def _is(token, name):
    return H.get_token(token) == name


def _not_left_exponent(token):
    return H.get_exponent(token) != "left"


def _is_plain_identifier(token):
    return H.is_identifier(token) and not H.is_function(token)


# -----------------------------
# Prefix glue (previous term, new term)
# -----------------------------

prefix_strategies = [
    ValueStrategy(
        "opening parenthesis after a value",
        lambda previous, next: _is(next, "LPAR") and (
            _is(previous, "RPAR") or H.is_value(previous) or H.is_unary_operator(previous)),
        multiply_before,
    ),
    ValueStrategy(
        "operand after a closing parenthesis",
        lambda previous, next: _is(previous, "RPAR") and _not_left_exponent(next) and (
            H.is_value(next) or H.is_function(next)),
        multiply_before,
    ),
    ValueStrategy(
        "identifier after a value",
        lambda previous, next: (H.is_value(previous) or H.is_unary_operator(previous)) and
        H.is_identifier(next) and _not_left_exponent(next),
        multiply_before,
    ),
    ValueStrategy(
        "digit after an identifier",
        lambda previous, next: _is_plain_identifier(previous) and H.is_digit(next),
        multiply_before,
    ),
    ValueStrategy(
        "value after a postfix operator",
        lambda previous, next: H.is_unary_operator(previous) and H.is_value(next),
        multiply_before,
    ),
    ValueStrategy(
        "operand after a function",
        lambda previous, next: H.is_function(previous) and (
            H.is_identifier(next) or not H.is_separator(next)),
        space_before,
    ),
]


# -----------------------------
# Suffix glue (new term, next term)
# -----------------------------

suffix_strategies = [
    ValueStrategy(
        "closed operand before a value",
        lambda previous, next: (_is(previous, "RPAR") or H.is_unary_operator(previous)) and (
            _is(next, "LPAR") or H.is_value(next) or H.is_function(next)),
        multiply_after,
    ),
    ValueStrategy(
        "value before an opening parenthesis",
        lambda previous, next: _is(next, "LPAR") and (
            H.is_value(previous) or H.is_unary_operator(previous) or _is_plain_identifier(previous)),
        multiply_after,
    ),
    ValueStrategy(
        "identifier before an operand",
        lambda previous, next: _is_plain_identifier(previous) and not H.is_separator(next),
        multiply_after,
    ),
    ValueStrategy(
        "digit before an identifier",
        lambda previous, next: (H.is_digit(previous) or H.is_unary_operator(previous)) and
        H.is_identifier(next),
        multiply_after,
    ),
    ValueStrategy(
        "function before an operand",
        lambda previous, next: H.is_function(previous) and not H.is_separator(next),
        space_after,
    ),
]


# -----------------------------
# Limit: reject terms that would break the expression
# -----------------------------

cannot_start = ["MUL", "DIV", "MOD", "POW", "FAC", "ASSIGN", "PERCENT", "NTHRT", "RPAR", "COMMA"]


def limit_expression_start(tokens):
    """A term needing a left operand cannot be first, nor follow only signs and functions.

    A function typed as an operator ('@nthrt') may start the expression.
    """
    if not tokens:
        return None

    if H.get_token(tokens[-1]) not in cannot_start or is_prefixed_term(H.string_value(tokens[-1])):
        return None

    for token in tokens[:-1]:
        plain_function = H.is_function(token) and not H.is_function_operator(token)
        if not (H.is_sign_operator(token) or plain_function):
            return None
    return True


def limit_decimal_dot(tokens):
    """Only one dot per number, and none in the exponent part."""
    if len(tokens) < 2 or not _is(tokens[-1], "DOT"):
        return None

    for token in reversed(tokens[:-1]):
        if not H.is_digit(token):
            break
        if _is(token, "DOT") or _is(token, "EXP10"):
            return True
    return None


def limit_expression_close(tokens):
    """Closing parenthesis and postfix operators need an operand to close."""
    if len(tokens) < 2:
        return None

    new_token = tokens[-1]
    current_token = tokens[-2]

    is_closing = _is(new_token, "RPAR")
    is_postfixing = H.is_unary_operator(new_token)
    is_open = _is(current_token, "LPAR") or H.is_function(current_token)
    is_operator = H.is_binary_operator(current_token)

    if (is_closing and (is_open or is_operator)) or (is_postfixing and is_open):
        return True

    if is_closing:
        count = 0
        for token in tokens:
            if _is(token, "RPAR"):
                count -= 1
            elif _is(token, "LPAR"):
                count += 1
        if count < 0:
            return True

    return None


limit_strategies = [
    limit_expression_start,
    limit_decimal_dot,
    limit_expression_close,
]


# -----------------------------
# Replace the whole expression
# -----------------------------

def replace_expression(tokens):
    """A lone 0 or a lone last result is replaced by the next non operator term."""
    if len(tokens) != 2:
        return False

    current_token, new_token = tokens
    if H.get_term(new_token) is None:
        return False
    if H.is_operator(new_token) or H.is_function_operator(new_token):
        return False

    if _is(current_token, "NUM0") and not _is(new_token, "DOT"):
        return True
    return _is(current_token, "VAR_ANS")


replace_expression_strategies = [
    replace_expression,
]


# -----------------------------
# Replace the trailing operators
# -----------------------------

def _is_operator_like(token):
    return H.is_binary_operator(token) or H.is_function_operator(token)


def replace_operator(tokens):
    """Count of trailing operators the new operator replaces.

    None when nothing has to be replaced. A minus after a non sign operator
    gives 0: it is inserted as a sign ('3*-').
    """
    if len(tokens) < 2:
        return None

    new_token = tokens[-1]
    current_tokens = tokens[:-1]

    if H.get_term(new_token) is None:
        return None
    if not (H.is_operator(new_token) or H.is_function_operator(new_token)):
        return None
    if not _is_operator_like(current_tokens[-1]):
        return None

    count = 0
    if H.get_token(new_token) in ("SUB", "NEG"):
        for token in reversed(current_tokens):
            if not H.is_sign_operator(token):
                break
            count += 1
        return count

    for token in reversed(current_tokens):
        if not _is_operator_like(token):
            break
        count += 1
    return count


replace_operator_strategies = [
    replace_operator,
]


# -----------------------------
# Sign toggle
# -----------------------------

refuse_explicit_positive = ["LPAR", "SUB", "ADD", "MUL", "DIV", "MOD", "POW", "ASSIGN"]


def accept_explicit_positive(token):
    return token is None or (not H.is_function(token) and H.get_token(token) not in refuse_explicit_positive)


def insert_negative_sign(token):
    value = terms["SUB"].value
    return {
        "offset": token.offset,
        "length": 0,
        "value": value,
        "move": len(value),
    }


def replace_by_negative_sign(token):
    value = terms["SUB"].value
    return {
        "offset": token.offset,
        "length": len(token.value),
        "value": value,
        "move": len(value) - len(token.value),
    }


def replace_by_positive_sign(token, index, tokens):
    allow_explicit = index > 0 and accept_explicit_positive(tokens[index - 1])
    value = terms["ADD"].value if allow_explicit else ""
    return {
        "offset": token.offset,
        "length": len(token.value),
        "value": value,
        "move": len(value) - len(token.value),
    }


def _token_at(tokens, index):
    if 0 <= index < len(tokens):
        return tokens[index]
    return None


def apply_sign_change(index, tokens):
    """Toggle the sign of the operand following the token at index."""
    token = _token_at(tokens, index)
    next_token = _token_at(tokens, index + 1)

    if token is None:
        return None

    if H.is_operator(token):
        if _is(token, "SUB") or _is(token, "NEG"):
            return replace_by_positive_sign(token, index, tokens)
        if _is(token, "ADD") or _is(token, "POS"):
            return replace_by_negative_sign(token)
        if next_token is not None:
            return insert_negative_sign(next_token)
    elif next_token is not None and (H.is_function(token) or _is(token, "LPAR")):
        return insert_negative_sign(next_token)

    return None


def strategy_numeric(index, tokens):
    token = _token_at(tokens, index)
    if not H.is_digit(token):
        return None

    # walk back to the first token on the left of the number
    while index and H.is_digit(token):
        index -= 1
        token = tokens[index]

    if H.is_digit(token) and index == 0:
        return insert_negative_sign(token)
    return apply_sign_change(index, tokens)


def strategy_operator(index, tokens):
    token = _token_at(tokens, index)
    if not H.is_operator(token):
        return None

    if _is(token, "SUB") or _is(token, "NEG"):
        return replace_by_positive_sign(token, index, tokens)
    if _is(token, "ADD") or _is(token, "POS"):
        return replace_by_negative_sign(token)
    if H.is_unary_operator(token) and index > 0:
        # postfix operator: the sign belongs to its operand
        return apply_change_strategies(index - 1, tokens, sign_strategies)
    return None


def strategy_identifier(index, tokens):
    token = _token_at(tokens, index)
    if not H.is_identifier(token):
        return None

    if index == 0:
        return insert_negative_sign(token)
    return apply_sign_change(index - 1, tokens)


def strategy_expression(index, tokens):
    token = _token_at(tokens, index)
    if not H.is_aggregator(token):
        return None

    count = 1 if _is(token, "RPAR") else 0

    # find the opening parenthesis
    while index and (not _is(token, "LPAR") or count):
        index -= 1
        token = tokens[index]
        if _is(token, "RPAR"):
            count += 1
        if _is(token, "LPAR"):
            count -= 1

    if count or not _is(token, "LPAR"):
        return None
    if index == 0:
        return insert_negative_sign(token)
    return apply_sign_change(index - 1, tokens)


sign_strategies = [
    strategy_numeric,
    strategy_operator,
    strategy_identifier,
    strategy_expression,
]


# -----------------------------
# Evaluation trigger (instant mode)
# -----------------------------

def trigger_evaluation(tokens):
    """True when adding the new operator should evaluate the expression first."""
    if len(tokens) < 4:
        return False

    current_tokens = tokens[:-1]
    new_token = tokens[-1]

    if H.get_term(new_token) is None or _is(new_token, "ASSIGN"):
        return False
    if not H.is_function_operator(new_token) and not H.is_binary_operator(new_token):
        return False

    # the operand of a function is still missing
    last = current_tokens[-1]
    if H.is_function(last) and not H.is_function_operator(last):
        return False

    operands = Counter()
    operators = Counter()
    parenthesis = 0
    for token in current_tokens:
        function_operator = H.is_function_operator(token)
        operands.check(H.is_operand(token) and not function_operator)
        operators.check(H.is_binary_operator(token) or function_operator)

        if _is(token, "RPAR"):
            parenthesis -= 1
        elif _is(token, "LPAR"):
            parenthesis += 1
    operands.check()
    operators.check()

    return (parenthesis == 0 and operands.count > 1 and operators.count > 0
            and operands.count > operators.count)


trigger_strategies = [
    trigger_evaluation,
]


# -----------------------------
# Correction before evaluation
# -----------------------------

def _ends_with_dummy_term(tokens):
    last = tokens[-1]
    return H.is_binary_operator(last) or H.is_function(last) or _is(last, "LPAR")


def remove_dummy_operators(tokens):
    """Drop the trailing operators, functions and opening parenthesis."""
    tokens = list(tokens)
    while tokens and _ends_with_dummy_term(tokens):
        tokens.pop()
    return tokens


def correct_parenthesis(tokens):
    """Close the parenthesis left open."""
    tokens = list(tokens)
    parenthesis = 0
    for token in tokens:
        if _is(token, "RPAR"):
            parenthesis -= 1
        elif _is(token, "LPAR"):
            parenthesis += 1

    value = terms["RPAR"].value
    while parenthesis > 0:
        offset = 0
        if tokens:
            offset = tokens[-1].offset + len(tokens[-1].value)
        tokens.append(Token("RPAR", value, value, offset))
        parenthesis -= 1

    return tokens


correct_strategies = [
    remove_dummy_operators,
    correct_parenthesis,
]
