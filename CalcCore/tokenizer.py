# tokenizer.py
"""""
Tokenizer for calculator expressions.

Two lexers work together:
1) the main lexer recognizes whitespace, numbers, keywords ('sin', 'PI',
   '@nthrt'), symbol literals ('(', '+', '!') and a catch-all error token;
2) a digit lexer splits each number into atomic terms (NUM0-9, DOT, EXP10
   and signs), so that '42e15' gives digit tokens and an EXP10 marker
   instead of colliding with a keyword lookup.
Malformed input never raises, it ends up in a 'syntaxError' token.
"""""

import re

from . import terms as T
from .tokens import string_value

reSpace = re.compile(r"\s+")
reNumber = re.compile(r"[-+]?\d*\.?\d+(?:[eE][-+]?\d+)?")
rePrefixedKeyword = re.compile(r"@[a-zA-Z_]\w*")
reKeyword = re.compile(r"[a-zA-Z_]\w*")


class Token:
    """A term found in an expression: identifier (or tag), value, raw text and offset."""
    def __init__(self, type, value, text=None, offset=0):
        self.type = type
        self.value = value
        self.text = value if text is None else text
        self.offset = offset

    def __eq__(self, other):
        if not isinstance(other, Token):
            return NotImplemented
        return (self.type, self.value, self.text, self.offset) == \
               (other.type, other.value, other.text, other.offset)

    def __repr__(self):
        return f"Token({self.type!r}, {self.value!r}, offset={self.offset})"


def _merge(registered, configured):
    """Registry definitions first, configured ones only add new identifiers."""
    merged = dict(registered)
    for name, literal in (configured or {}).items():
        merged.setdefault(name, literal)
    return merged


def _literal_rules(literals):
    """(identifier, literal) pairs, longest literal first, first registered wins on duplicates."""
    rules = []
    seen = set()
    for name, literal in literals.items():
        if literal in seen:
            continue
        seen.add(literal)
        rules.append((name, literal))
    rules.sort(key=lambda rule: len(rule[1]), reverse=True)
    return rules


class Tokenizer:
    """Calculator tokenizer.

    The optional config can extend the vocabulary:
        {"keywords": {ID: text}, "symbols": {ID: text}, "digits": {ID: text}}
    Registry definitions keep the priority over the configured ones.
    """
    def __init__(self, config=None):
        config = config or {}

        keywords = _merge(T.keywords(), config.get("keywords"))
        symbols = _merge(T.symbol_literals(), config.get("symbols"))
        digits = _merge(T.digit_literals(), config.get("digits"))

        # keyword text -> identifier, the first identifier wins for a given text
        self.keywords = {}
        for name, text in keywords.items():
            self.keywords.setdefault(text, name)

        self.symbols = _literal_rules(symbols)
        self.digits = _literal_rules(digits)
        # the exponent marker of a number is case insensitive ('1E5')
        self.digits.append(("EXP10", "E"))

    # -----------------------------
    # Main lexer
    # -----------------------------

    def _keyword_type(self, text):
        return self.keywords.get(text)

    def _next_main(self, text, offset):
        """Return (token, next_offset) for the token starting at offset, token None when ignored."""
        match = reSpace.match(text, offset)
        if match:
            return None, match.end()

        match = reNumber.match(text, offset)
        if match:
            return Token("number", match.group(), match.group(), offset), match.end()

        match = rePrefixedKeyword.match(text, offset)
        if match:
            value = match.group()
            token_type = self._keyword_type(value[1:]) or "prefixed"
            return Token(token_type, value, value, offset), match.end()

        match = reKeyword.match(text, offset)
        if match:
            value = match.group()
            token_type = self._keyword_type(value) or "term"
            return Token(token_type, value, value, offset), match.end()

        for name, literal in self.symbols:
            if text.startswith(literal, offset):
                return Token(name, literal, literal, offset), offset + len(literal)

        # nothing matches: the rest of the input is a syntax error
        value = text[offset:]
        return Token("syntaxError", value, value, offset), len(text)

    # -----------------------------
    # Digit lexer
    # -----------------------------

    def _split_number(self, number):
        """Split a number token into digit tokens, offsets relative to the whole expression."""
        tokens = []
        position = 0
        while position < len(number.value):
            for name, literal in self.digits:
                if number.value.startswith(literal, position):
                    tokens.append(Token(name, literal, literal, number.offset + position))
                    position += len(literal)
                    break
            else:
                value = number.value[position:]
                tokens.append(Token("syntaxError", value, value, number.offset + position))
                break
        return tokens

    # -----------------------------
    # Public API
    # -----------------------------

    def iterator(self, expression):
        """Return a function giving the next token of the expression on each call (None at the end)."""
        text = string_value(expression)
        state = {"offset": 0, "pending": []}

        def next_token():
            if state["pending"]:
                return state["pending"].pop(0)

            while state["offset"] < len(text):
                token, state["offset"] = self._next_main(text, state["offset"])
                if token is None:
                    continue
                if token.type == "number":
                    state["pending"] = self._split_number(token)
                    return state["pending"].pop(0)
                return token
            return None

        return next_token

    def tokenize(self, expression):
        """Return the list of tokens of the expression."""
        next_token = self.iterator(expression)
        tokens = []
        token = next_token()
        while token is not None:
            tokens.append(token)
            token = next_token()
        return tokens


_default_tokenizer = None


def tokenize(expression):
    """Tokenize with a shared default tokenizer (the tokenizer holds no per-call state)."""
    global _default_tokenizer
    if _default_tokenizer is None:
        _default_tokenizer = Tokenizer()
    return _default_tokenizer.tokenize(expression)
