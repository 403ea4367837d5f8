# ScientificEngine.py
"""""
Constants and scientific functions working on Decimal values.

Roots, logarithms and exponentials stay in Decimal arithmetic. Trigonometric
and hyperbolic functions go through `math` (float precision): their results
are converted back to Decimal, and the ones below EPSILON become 0 so that
sin(π) gives 0 instead of a rounding residue.

Invalid operations give NaN instead of raising.
"""""

import math
import random as _random
from decimal import Decimal, ROUND_FLOOR, ROUND_CEILING, ROUND_HALF_UP, ROUND_DOWN

from . import error as E

EPSILON = 2.0 ** -52

PI = Decimal("3.14159265358979323846264338327950288419716939937510582097494459230781640628620899862803482534211706798")
EULER = Decimal("2.71828182845904523536028747135266249775724709369995957496696762772407663035354759457138217852516642743")
TEN = Decimal(10)

NAN = Decimal("NaN")
INFINITY = Decimal("Infinity")

# largest factorial computed exactly
MAX_FACTORIAL = 100000


# -----------------------------
# Conversions
# -----------------------------

def to_decimal(value):
    """Float (or int) to Decimal, tiny values flushed to 0."""
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float) and math.isfinite(value) and abs(value) < EPSILON:
        return Decimal(0)
    return Decimal(str(value))


def to_float(value):
    return float(value)


def to_radians(x, degree):
    x = to_float(x)
    if degree:
        return math.radians(x)
    return x


def from_radians(x, degree):
    if degree:
        return math.degrees(x)
    return x


def _float_function(function, x):
    """Apply a math function, domain errors give NaN, overflows give a signed Infinity."""
    try:
        return to_decimal(function(x))
    except ValueError:
        return NAN
    except OverflowError:
        return INFINITY if x > 0 or function is math.cosh else -INFINITY


# -----------------------------
# Trigonometry
# -----------------------------

def sin(x, degree=False):
    if not x.is_finite():
        return NAN
    return _float_function(math.sin, to_radians(x, degree))


def cos(x, degree=False):
    if not x.is_finite():
        return NAN
    return _float_function(math.cos, to_radians(x, degree))


def tan(x, degree=False):
    if not x.is_finite():
        return NAN
    angle = to_radians(x, degree)
    # right angle
    if abs(math.cos(angle)) < EPSILON:
        return NAN
    return _float_function(math.tan, angle)


def asin(x, degree=False):
    if not x.is_finite():
        return NAN
    try:
        return to_decimal(from_radians(math.asin(to_float(x)), degree))
    except ValueError:
        return NAN


def acos(x, degree=False):
    if not x.is_finite():
        return NAN
    try:
        return to_decimal(from_radians(math.acos(to_float(x)), degree))
    except ValueError:
        return NAN


def atan(x, degree=False):
    if x.is_nan():
        return NAN
    return to_decimal(from_radians(math.atan(to_float(x)), degree))


def sinh(x, degree=False):
    return _float_function(math.sinh, to_float(x))


def cosh(x, degree=False):
    return _float_function(math.cosh, to_float(x))


def tanh(x, degree=False):
    return _float_function(math.tanh, to_float(x))


def asinh(x, degree=False):
    return _float_function(math.asinh, to_float(x))


def acosh(x, degree=False):
    return _float_function(math.acosh, to_float(x))


def atanh(x, degree=False):
    return _float_function(math.atanh, to_float(x))


# -----------------------------
# Roots, powers and logarithms
# -----------------------------

def sqrt(x, degree=False):
    return x.sqrt()


def nthrt(n, x, degree=False):
    """n-th root of x. Odd roots of negative numbers are negative, even ones are NaN."""
    if not n.is_finite() or n == 0 or x.is_nan():
        return NAN
    if x < 0:
        if n == n.to_integral_value() and int(n) % 2:
            return -((-x) ** (1 / n))
        return NAN
    return x ** (1 / n)


def cbrt(x, degree=False):
    return nthrt(Decimal(3), x)


def exp(x, degree=False):
    return x.exp()


def ln(x, degree=False):
    return x.ln()


def log(x, base=None, degree=False):
    """Natural logarithm, or logarithm in the given base."""
    if base is None:
        return x.ln()
    return x.ln() / base.ln()


def log10(x, degree=False):
    return x.log10()


# -----------------------------
# Rounding and misc
# -----------------------------

def floor(x, degree=False):
    return x.to_integral_value(rounding=ROUND_FLOOR)


def ceil(x, degree=False):
    return x.to_integral_value(rounding=ROUND_CEILING)


def round(x, degree=False):
    return x.to_integral_value(rounding=ROUND_HALF_UP)


def trunc(x, degree=False):
    return x.to_integral_value(rounding=ROUND_DOWN)


def absolute(x, degree=False):
    return abs(x)


def rand(degree=False):
    return to_decimal(_random.random())


def factorial(x):
    """x!, through the gamma function for non integers. Negative integers give NaN."""
    if not x.is_finite():
        return NAN
    if x == x.to_integral_value():
        if x < 0:
            return NAN
        if x > MAX_FACTORIAL:
            raise E.CalculationError(E.error_message("3026"), code="3026")
        return Decimal(math.factorial(int(x)))
    try:
        return to_decimal(math.gamma(to_float(x) + 1))
    except ValueError:
        return NAN
    except OverflowError:
        raise E.CalculationError(E.error_message("3026"), code="3026")


def percent(x):
    return x / 100


# -----------------------------
# Dispatch
# -----------------------------

# term identifier -> (function, minimum arguments, maximum arguments)
functions = {
    "EXP": (exp, 1, 1),
    "SQRT": (sqrt, 1, 1),
    "CBRT": (cbrt, 1, 1),
    "NTHRT": (nthrt, 2, 2),
    "FLOOR": (floor, 1, 1),
    "CEIL": (ceil, 1, 1),
    "ROUND": (round, 1, 1),
    "TRUNC": (trunc, 1, 1),
    "SIN": (sin, 1, 1),
    "COS": (cos, 1, 1),
    "TAN": (tan, 1, 1),
    "ASIN": (asin, 1, 1),
    "ACOS": (acos, 1, 1),
    "ATAN": (atan, 1, 1),
    "SINH": (sinh, 1, 1),
    "COSH": (cosh, 1, 1),
    "TANH": (tanh, 1, 1),
    "ASINH": (asinh, 1, 1),
    "ACOSH": (acosh, 1, 1),
    "ATANH": (atanh, 1, 1),
    "LN": (ln, 1, 1),
    "LOG": (log, 1, 2),
    "LG": (log10, 1, 1),
    "LOG10": (log10, 1, 1),
    "ABS": (absolute, 1, 1),
    "RAND": (rand, 0, 0),
}

constants = {
    "PI": PI,
    "E": EULER,
    "TEN": TEN,
    "NAN": NAN,
    "INFINITY": INFINITY,
}


def is_function(name):
    return name in functions


def arity(name):
    """(minimum, maximum) number of arguments of a function."""
    function, minimum, maximum = functions[name]
    return minimum, maximum


def call(name, args, degree=False):
    """Apply the function registered under the term identifier."""
    if name not in functions:
        raise E.SyntaxError(E.error_message("3031", name), code="3031")

    function, minimum, maximum = functions[name]
    if not minimum <= len(args) <= maximum:
        raise E.SyntaxError(E.error_message("2001", name), code="2001")

    return function(*args, degree=degree)
