# ExpressionRenderer.py
"""""
Turns an expression into a list of displayable terms.

Pipeline
--------
1) render(): each token becomes a RenderTerm (label, type, sign, exponent side).
   Exponent anchors are only recorded during this pass.
2) Exponent discovery: for each anchor, the operand on its left or right side
   is tagged with the id of the exponent group (start and end markers).
3) nest_exponents(): collapses each group into a nested 'exponent' term,
   ready to be displayed as a superscript.

Also hosts the small helpers working on results (error check, rounding).
"""""

import re
from decimal import Decimal, ROUND_HALF_UP, InvalidOperation

from .terms import terms, TokenType, rePrefixedTerm
from .tokenizer import Tokenizer
from . import tokens as H

lastResultVariableName = terms["VAR_ANS"].value

reErrorValue = re.compile(r"NaN|[+-]?Infinity")
reAnsVar = re.compile(r"\b" + lastResultVariableName + r"\b")

# tokens representing a sign or a sum
signOperators = ["NEG", "POS", "SUB", "ADD"]

# operators continuing an exponent chain
continueExponent = ["POW", "NTHRT"]

defaultDecimalDigits = 5


class RenderTerm:
    """A displayable term. start_exponent / end_exponent hold exponent group ids."""
    def __init__(self, type, token, value, label=None, exponent=False):
        self.type = type
        self.token = token
        self.value = value
        self.label = value if label is None else label
        self.exponent = exponent
        self.start_exponent = None
        self.end_exponent = []
        self.prefixed = False
        self.elide = False

    def __repr__(self):
        if self.type == TokenType.EXPONENT:
            return f"RenderTerm(exponent, {self.value!r})"
        return f"RenderTerm({self.token!r}, {self.label!r})"


# -----------------------------
# Result helpers
# -----------------------------

def contains_error(expression):
    """True when the expression (or result) holds NaN or Infinity."""
    return reErrorValue.search(H.string_value(expression)) is not None


def replace_last_result(expression, value):
    """Replace every 'ans' of the expression by the given value."""
    replacement = H.string_value(value or "0")
    return reAnsVar.sub(lambda match: replacement, H.string_value(expression))


def _strip_zeros(text):
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


def round_variable(variable, decimals=defaultDecimalDigits):
    """Display value of a variable, rounded to a number of decimals.

    An ellipsis is appended when the rounding actually shortened the value.
    Plain strings are returned unchanged.
    """
    full_string = H.string_value(variable)
    result = getattr(variable, "result", None)
    if not isinstance(result, Decimal) or not result.is_finite():
        return full_string

    result_string = full_string
    try:
        if terms["EXP10"].value in full_string.lower():
            result_string = format(result, f".{decimals}e")
        elif full_string.find(terms["DOT"].value) > 0:
            pattern = Decimal(1).scaleb(-decimals)
            result_string = _strip_zeros(format(result.quantize(pattern, rounding=ROUND_HALF_UP), "f"))
    except InvalidOperation:
        return full_string

    if len(result_string) < len(full_string):
        return result_string + terms["ELLIPSIS"].value
    return full_string


def round_all_variables(variables, decimals=defaultDecimalDigits):
    """Return a new dict with the rounded display value of each variable."""
    return {name: round_variable(variable, decimals) for name, variable in (variables or {}).items()}


def round_last_result_variable(variables, decimals=defaultDecimalDigits):
    """Round the last result variable in place, return the variables."""
    if variables and lastResultVariableName in variables:
        variables[lastResultVariableName] = round_variable(variables[lastResultVariableName], decimals)
    return variables


def render_sign(expression):
    """Replace the sign operators by their display symbol."""
    text = H.string_value(expression)
    text = text.replace(terms["SUB"].value, terms["NEG"].label, 1)
    return text.replace(terms["ADD"].value, terms["POS"].label, 1)


def build(tokens):
    """Rebuild the text of an expression from its tokens, keeping their offsets."""
    text = ""
    for token in tokens:
        if token.offset > len(text):
            text += " " * (token.offset - len(text))
        text += token.value
    return text


# -----------------------------
# Rendering
# -----------------------------

def render(expression, variables=None, tokenizer=None):
    """Render an expression (text or token list) into a flat list of RenderTerm."""
    variables = variables or {}
    rendered = []
    exponents = []
    previous = None

    if isinstance(expression, list):
        tokens = expression
    else:
        if tokenizer is None:
            tokenizer = Tokenizer()
        tokens = tokenizer.tokenize(expression)

    def to_sign_operator(term, token):
        if previous is None or H.is_modifier(previous.type) or \
                previous.token == "LPAR" or previous.token == "EXP10":
            term.label = terms[token].label
            term.token = token

    for index, token in enumerate(tokens):
        term = RenderTerm(token.type, token.type, token.value)
        term.prefixed = rePrefixedTerm.match(token.value) is not None

        registered = terms.get(token.type)
        if registered is not None:
            term.type = registered.type
            term.value = registered.value
            term.label = registered.label
            term.exponent = registered.exponent

            # the last result is displayed through its actual value
            if term.value == lastResultVariableName and lastResultVariableName in variables:
                term.label = render(variables[lastResultVariableName], variables, tokenizer)
        elif term.token == TokenType.TERM:
            if term.value in variables:
                term.type = TokenType.VARIABLE
            else:
                term.type = TokenType.UNKNOWN

        if term.token == "SUB":
            to_sign_operator(term, "NEG")
        elif term.token == "ADD":
            to_sign_operator(term, "POS")

        rendered.append(term)

        # exponents are processed in a second pass
        if term.exponent:
            exponents.append(index)

        previous = term

    for index in exponents:
        term = rendered[index]
        if term.exponent == "left" and index > 0:
            exponent_on_the_left(rendered, index)
        elif term.exponent == "right" and index < len(rendered) - 1:
            exponent_on_the_right(rendered, index)

    return rendered


def _term_at(rendered, index):
    if 0 <= index < len(rendered):
        return rendered[index]
    return None


def exponent_on_the_left(rendered, index):
    """Tag the operand on the left of the anchor as an exponent group."""
    group = index
    parenthesis = 0
    next = rendered[index]
    index -= 1
    term = rendered[index]

    if not (H.is_operand(term.type) or term.token == "RPAR"):
        return

    term.end_exponent.append(group)

    if term.token == "RPAR":
        # find the opening parenthesis
        parenthesis += 1
        while index > 0 and parenthesis > 0:
            next = term
            index -= 1
            term = rendered[index]
            if term.token == "RPAR":
                parenthesis += 1
            elif term.token == "LPAR":
                parenthesis -= 1

        # keep the function attached to the parenthesis, prefixed functions are operators
        if index > 0 and H.is_function(rendered[index - 1].type) and not rendered[index - 1].prefixed:
            next = term
            index -= 1
            term = rendered[index]
    elif H.is_digit(term.type):
        # a chain of digits is a single operand
        while index and H.is_digit(term.type):
            next = term
            index -= 1
            term = rendered[index]
        if not H.is_digit(term.type):
            term = next

    term.start_exponent = group


def exponent_on_the_right(rendered, index):
    """Tag the operand on the right of the anchor as an exponent group, chained exponents included."""
    group = index
    last = len(rendered) - 1
    start_at = index
    parenthesis = 0
    previous = rendered[index]
    index += 1
    term = rendered[index]

    if not (H.is_operand(term.type) or term.token == "LPAR" or term.token in signOperators):
        return

    term.start_exponent = group

    while True:
        # functions and signs stick to their operand
        while index < last and (H.is_function(term.type) or term.token in signOperators):
            previous = term
            index += 1
            term = rendered[index]

        if term.token == "LPAR":
            # find the closing parenthesis
            parenthesis += 1
            while index < last and parenthesis > 0:
                previous = term
                index += 1
                term = rendered[index]
                if term.token == "LPAR":
                    parenthesis += 1
                elif term.token == "RPAR":
                    parenthesis -= 1
        elif H.is_digit(term.type):
            # a chain of digits is a single operand
            while index < last and H.is_digit(term.type):
                previous = term
                index += 1
                term = rendered[index]
            if not H.is_digit(term.type):
                term = previous
                index -= 1
                previous = _term_at(rendered, index - 1)

        # a factorial stays attached to its operand
        while index < last and rendered[index + 1].token == "FAC":
            previous = term
            index += 1
            term = rendered[index]

        # a sub exponent continues the chain
        if index < last - 1 and rendered[index + 1].token in continueExponent:
            previous = rendered[index + 1]
            index += 2
            term = rendered[index]
            continue
        break

    term.end_exponent.append(group)

    # the power operator is hidden when its right operand is displayed as an exponent
    if 0 < start_at < last and rendered[start_at].token == "POW" and \
            rendered[start_at + 1].start_exponent is not None:
        rendered[start_at].elide = True


# -----------------------------
# Nesting
# -----------------------------

def extract_exponent(rendered, index=0):
    """Extract the terms of the exponent group starting at index.

    Returns (terms, length), length counting the nested terms too.
    """
    extract = []
    first = _term_at(rendered, index)
    level = first.start_exponent if first is not None else None
    start_index = index

    done = False
    while not done and index < len(rendered):
        term = rendered[index]

        if term.start_exponent is not None and term.start_exponent != level:
            nested, length = extract_exponent(rendered, index)
            extract.append(RenderTerm(TokenType.EXPONENT, TokenType.EXPONENT, nested))
            index += length
            # the group may end with the nested one
            term = rendered[index - 1]
        else:
            if not term.elide:
                extract.append(term)
            index += 1

        done = level in term.end_exponent

    return extract, index - start_index


def nest_exponents(rendered):
    """Collapse the exponent groups into nested terms of type 'exponent'. Elided terms are dropped."""
    nested = []
    index = 0

    while index < len(rendered):
        term = rendered[index]

        if term.start_exponent is not None:
            extract, length = extract_exponent(rendered, index)
            term = RenderTerm(TokenType.EXPONENT, TokenType.EXPONENT, extract)
            index += length
        else:
            index += 1
            if term.elide:
                continue

        nested.append(term)

    return nested
