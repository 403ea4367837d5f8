# MathEngine.py
"""""
Evaluator behind the calculator engine.

Pipeline
--------
1) Tokenizer: the shared calculator tokenizer turns the text into terms
   (digits are single tokens, numbers are assembled back by the parser).
2) Parser (AST): recursive descent, precedence aware:
   assignment / equality → sum → term → unary → power → postfix → primary
3) Evaluator: walks the AST with Decimal arithmetic inside a local context,
   where division by zero gives Infinity and invalid operations give NaN.
4) Result: MathResult(expression, variables, result, value), the result is
   rounded to the configured precision and normalized ('5' instead of '5.0').
"""""

from decimal import Decimal, localcontext, Overflow, DivisionByZero, InvalidOperation

from . import ScientificEngine
from . import error as E
from . import config_manager as config_manager
from .terms import terms, TokenType, rePrefixedTerm
from .tokenizer import tokenize
from . import tokens as H

# Debug toggle for optional prints in this module
debug = config_manager.load_setting_value("debug") == True

NUMBER_TOKENS = ["NUM0", "NUM1", "NUM2", "NUM3", "NUM4", "NUM5", "NUM6", "NUM7", "NUM8", "NUM9", "DOT"]
SIGN_TOKENS = ["SUB", "NEG", "ADD", "POS"]


class MathResult:
    """Outcome of an evaluation.

    expression: the evaluated text
    variables:  the variables the expression was evaluated with (assignments included)
    result:     Decimal (or bool for an equality)
    value:      the result as a native Python number
    """
    def __init__(self, expression, variables, result, value):
        self.expression = expression
        self.variables = variables
        self.result = result
        self.value = value

    def __str__(self):
        return str(self.result)

    def __repr__(self):
        return f"MathResult({self.expression!r}, result={self.result!r})"


def native(result):
    """Decimal to int/float, booleans unchanged."""
    if isinstance(result, bool) or not isinstance(result, Decimal):
        return result
    if result.is_finite() and result == result.to_integral_value():
        return int(result)
    return float(result)


# -----------------------------
# AST node types
# -----------------------------

class Number:
    """AST node for a numeric literal backed by Decimal."""
    def __init__(self, value):
        if not isinstance(value, Decimal):
            value = Decimal(str(value))
        self.value = value

    def evaluate(self, evaluator):
        return self.value

    def __repr__(self):
        return f"Number({self.value})"


class Variable:
    """AST node for a bound variable, the value is read at evaluation time."""
    def __init__(self, name):
        self.name = name

    def evaluate(self, evaluator):
        return evaluator.variable_value(self.name)

    def __repr__(self):
        return f"Variable('{self.name}')"


class BinOp:
    """AST node for a binary operation: left <operator> right."""
    def __init__(self, left, operator, right):
        self.left = left
        self.operator = operator
        self.right = right

    def evaluate(self, evaluator):
        left_value = self.left.evaluate(evaluator)
        right_value = self.right.evaluate(evaluator)

        if self.operator == 'ADD':
            return left_value + right_value
        elif self.operator == 'SUB':
            return left_value - right_value
        elif self.operator == 'MUL':
            return left_value * right_value
        elif self.operator == 'DIV':
            return left_value / right_value
        elif self.operator == 'MOD':
            return left_value % right_value
        elif self.operator == 'POW':
            return left_value ** right_value
        elif self.operator == 'NTHRT':
            return ScientificEngine.nthrt(left_value, right_value)
        elif self.operator == 'ASSIGN':
            # equality is evaluated to a boolean
            return left_value == right_value
        else:
            raise E.CalculationError(E.error_message("3011", self.operator), code="3011")

    def __repr__(self):
        return f"BinOp({self.operator!r}, left={self.left}, right={self.right})"


class UnaryOp:
    """AST node for a sign or a postfix operator applied to one operand."""
    def __init__(self, operator, operand):
        self.operator = operator
        self.operand = operand

    def evaluate(self, evaluator):
        value = self.operand.evaluate(evaluator)

        if self.operator in ('SUB', 'NEG'):
            return -value
        elif self.operator in ('ADD', 'POS'):
            return value
        elif self.operator == 'FAC':
            return ScientificEngine.factorial(value)
        elif self.operator == 'PERCENT':
            return ScientificEngine.percent(value)
        else:
            raise E.CalculationError(E.error_message("3011", self.operator), code="3011")

    def __repr__(self):
        return f"UnaryOp({self.operator!r}, {self.operand})"


class Function:
    """AST node for a scientific function call."""
    def __init__(self, name, args):
        self.name = name
        self.args = args

    def evaluate(self, evaluator):
        values = [arg.evaluate(evaluator) for arg in self.args]
        return ScientificEngine.call(self.name, values, degree=evaluator.degree)

    def __repr__(self):
        return f"Function({self.name!r}, {self.args})"


# -----------------------------
# Parser (recursive descent)
# -----------------------------

def _follows(previous, token):
    """True when the token is glued to the previous one (no space in between)."""
    return token.offset == previous.offset + len(previous.value)


def read_number(tokens):
    """Assemble the leading digit tokens into a Decimal literal."""
    first = tokens.pop(0)
    text = first.value
    previous = first

    while tokens and tokens[0].type in NUMBER_TOKENS and _follows(previous, tokens[0]):
        previous = tokens.pop(0)
        text += previous.value

    # exponent part: e, optional sign, digits
    if tokens and tokens[0].type == 'EXP10' and _follows(previous, tokens[0]):
        previous = tokens.pop(0)
        text += 'e'
        if tokens and tokens[0].type in SIGN_TOKENS and _follows(previous, tokens[0]):
            previous = tokens.pop(0)
            text += '-' if previous.type in ('SUB', 'NEG') else '+'
        if not tokens or tokens[0].type not in NUMBER_TOKENS or not _follows(previous, tokens[0]):
            raise E.SyntaxError(E.error_message("3027"), code="3027")
        while tokens and tokens[0].type in NUMBER_TOKENS and _follows(previous, tokens[0]):
            previous = tokens.pop(0)
            text += previous.value

    try:
        return Decimal(text)
    except InvalidOperation:
        raise E.SyntaxError(E.error_message("3011", text), code="3011")


def _is_function_operator(tokens):
    """True when the next token is a function used as a binary operator ('4 @nthrt 16')."""
    if not tokens:
        return False
    token = tokens[0]
    if rePrefixedTerm.match(token.value):
        return True
    term = terms.get(token.type)
    is_left_function = term is not None and term.type == TokenType.FUNCTION and term.exponent == 'left'
    return is_left_function and not (len(tokens) > 1 and tokens[1].type == 'LPAR')


def ast(tokens, variables):
    """Parse a token list into an AST.

    Returns (tree, assigned_name), assigned_name is None unless the expression
    is an assignment ('x = 3 + 2').
    """
    tokens = list(tokens)

    def peek(offset=0):
        if len(tokens) > offset:
            return tokens[offset]
        return None

    def expect(token_type, code):
        if not tokens or tokens[0].type != token_type:
            raise E.SyntaxError(E.error_message(code), code=code)
        return tokens.pop(0)

    def parse_arguments():
        """Parenthesized, comma separated argument list."""
        expect('LPAR', "3010")
        args = []
        if peek() is not None and peek().type == 'RPAR':
            tokens.pop(0)
            return args
        args.append(parse_sum())
        while peek() is not None and peek().type == 'COMMA':
            tokens.pop(0)
            args.append(parse_sum())
        expect('RPAR', "3009")
        return args

    def parse_primary():
        """Numbers, constants, variables and sub-expressions in '()'."""
        token = peek()
        if token is None:
            raise E.SyntaxError(E.error_message("3027"), code="3027")

        if token.type in NUMBER_TOKENS:
            return Number(read_number(tokens))

        tokens.pop(0)

        if token.type == 'LPAR':
            tree = parse_sum()
            expect('RPAR', "3009")
            return tree

        elif token.type in ScientificEngine.constants:
            return Number(ScientificEngine.constants[token.type])

        elif token.type == 'ERROR' or token.type == 'syntaxError':
            raise E.SyntaxError(E.error_message("3011", token.value), code="3011")

        elif token.type in ('VAR_ANS', 'VAR_MEM', TokenType.TERM):
            if token.value not in variables:
                raise E.SyntaxError(E.error_message("3030", token.value), code="3030")
            return Variable(token.value)

        elif H.is_function(token.type) and ScientificEngine.is_function(token.type):
            return Function(token.type, parse_arguments())

        elif token.type == 'prefixed' or H.is_function(token.type):
            raise E.SyntaxError(E.error_message("3031", token.value), code="3031")

        else:
            raise E.SyntaxError(E.error_message("3011", token.value), code="3011")

    def parse_postfix():
        """Factorial '!' and percent '#'."""
        tree = parse_primary()
        while peek() is not None and peek().type in ('FAC', 'PERCENT'):
            operator = tokens.pop(0).type
            tree = UnaryOp(operator, tree)
        return tree

    def parse_power():
        """Exponentiation '^' and function operators, right associative."""
        tree = parse_postfix()
        if peek() is not None and (peek().type == 'POW' or _is_function_operator(tokens)):
            token = tokens.pop(0)
            operator = 'POW' if token.type == 'POW' else token.type
            if operator != 'POW' and operator != 'NTHRT':
                raise E.SyntaxError(E.error_message("3031", token.value), code="3031")
            right = parse_unary()
            tree = BinOp(tree, operator, right)
        return tree

    def parse_unary():
        """Leading signs, and functions written without parenthesis ('sin 3')."""
        token = peek()
        if token is not None and token.type in SIGN_TOKENS:
            tokens.pop(0)
            return UnaryOp(token.type, parse_unary())

        if token is not None and H.is_function(token.type) and not _is_function_operator(tokens) \
                and not (peek(1) is not None and peek(1).type == 'LPAR'):
            if not ScientificEngine.is_function(token.type):
                raise E.SyntaxError(E.error_message("3031", token.value), code="3031")
            tokens.pop(0)
            minimum, maximum = ScientificEngine.arity(token.type)
            if maximum == 0:
                return Function(token.type, [])
            return Function(token.type, [parse_unary()])

        return parse_power()

    def parse_term():
        """Multiplication, division and modulo."""
        tree = parse_unary()
        while peek() is not None and peek().type in ('MUL', 'DIV', 'MOD'):
            operator = tokens.pop(0).type
            right = parse_unary()
            tree = BinOp(tree, operator, right)
        return tree

    def parse_sum():
        """Addition and subtraction."""
        tree = parse_term()
        while peek() is not None and peek().type in ('ADD', 'SUB', 'POS', 'NEG'):
            operator = 'SUB' if tokens.pop(0).type in ('SUB', 'NEG') else 'ADD'
            if debug == True:
                print("Currently at: " + str(operator) + " in parse_sum")
            right = parse_term()
            tree = BinOp(tree, operator, right)
        return tree

    def parse_equation():
        """Assignment 'name = sum', or equality 'sum = sum'."""
        first = peek()
        second = peek(1)
        if first is not None and second is not None and second.type == 'ASSIGN' and \
                first.type in (TokenType.TERM, 'VAR_ANS', 'VAR_MEM'):
            tokens.pop(0)
            tokens.pop(0)
            return parse_sum(), first.value

        left = parse_sum()
        if peek() is not None and peek().type == 'ASSIGN':
            operator = tokens.pop(0).type
            right = parse_sum()
            return BinOp(left, operator, right), None
        return left, None

    if not tokens:
        raise E.SyntaxError(E.error_message("3027"), code="3027")

    tree, assigned = parse_equation()

    if tokens:
        raise E.SyntaxError(E.error_message("3011", tokens[0].value), code="3011")

    if debug == True:
        print("Final AST:")
        print(tree)

    return tree, assigned


# -----------------------------
# Evaluator
# -----------------------------

class MathEvaluator:
    """Evaluate calculator expressions.

    evaluator = MathEvaluator(degree=True)
    evaluator("cos 180").result  ->  Decimal('-1')
    """
    def __init__(self, degree=False, precision=50, internal_precision=100):
        self.degree = degree
        self.precision = precision
        self.internal_precision = internal_precision
        self.variables = {}

    def variable_value(self, name):
        variable = self.variables.get(name)
        if variable is None:
            raise E.SyntaxError(E.error_message("3030", name), code="3030")
        return to_decimal(variable)

    def cleanup(self, result):
        """Round to the configured precision, then drop the meaningless zeros."""
        if isinstance(result, bool):
            return result

        with localcontext() as ctx:
            ctx.prec = self.precision
            ctx.traps[InvalidOperation] = False
            result = +result

            if not result.is_finite():
                return result
            if result == 0:
                return Decimal(0)
            if result == result.to_integral_value() and result.adjusted() < self.precision:
                return result.quantize(Decimal(1))
            return result.normalize()

    def __call__(self, expression, variables=None):
        if isinstance(expression, MathResult):
            if variables is None:
                variables = expression.variables
            expression = expression.expression

        text = H.string_value(expression)
        self.variables = dict(variables or {})

        try:
            tree, assigned = ast(tokenize(text), self.variables)

            with localcontext() as ctx:
                ctx.prec = self.internal_precision
                ctx.traps[DivisionByZero] = False
                ctx.traps[InvalidOperation] = False
                ctx.traps[Overflow] = True
                result = tree.evaluate(self)

            result = self.cleanup(result)

        except Overflow:
            raise E.CalculationError(
                message=E.error_message("3026"),
                code="3026",
                equation=text
            )
        # parser and tree are recursive, too many nested levels exhaust the stack
        except RecursionError:
            raise E.CalculationError(
                message=E.error_message("3032"),
                code="3032",
                equation=text
            )
        # Re-raise our domain errors after attaching the source expression
        except E.MathError as e:
            e.equation = text
            raise e

        variables = dict(self.variables)
        if assigned is not None:
            variables[assigned] = MathResult(str(result), None, result, native(result))

        if debug == True:
            print(f"{text} = {result}")

        return MathResult(text, variables, result, native(result))


def to_decimal(variable):
    """Decimal value of a variable: a MathResult, a number or a string."""
    if isinstance(variable, MathResult):
        variable = variable.result
    if isinstance(variable, bool):
        return Decimal(int(variable))
    if isinstance(variable, Decimal):
        return variable
    try:
        return Decimal(H.string_value(variable).strip())
    except InvalidOperation:
        raise E.SyntaxError(E.error_message("3030", variable), code="3030")


def calculate(problem, variables=None, degree=None):
    """Evaluate an expression with the configured settings."""
    settings = config_manager.load_settings()
    if degree is None:
        degree = settings["degree"]
    evaluator = MathEvaluator(degree, settings["precision"], settings["internal_precision"])
    return evaluator(problem, variables)
