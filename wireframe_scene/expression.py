#
# PROJECT: wireframe-scene-viewer
# MODULE: wireframe_scene/expression.py
# STATUS: Level 2 - Implementation
# LOG_REF: 2026-10-19
#

"""
Small arithmetic/color expression language used by scene values.

    fill   = 0.5 + 0.5 * sin(t)
    stroke = #ff8800
    fill   = rgb(1, 0.5, 0)
    rotate = 0, Math.sin(t) * 45, 0

Values are floats or colors ((r, g, b) tuples, 0-255). Nothing here executes
host code; unknown names and malformed input raise ExpressionError.
"""

import math
import re
from typing import Dict, Optional, Tuple, Union

from .color import NAMED_COLORS, gray, parse_hex_color
from .errors import ExpressionError

Color = Tuple[int, int, int]
Value = Union[float, Color]

TOKEN_SPEC = [
    ('NUMBER',   r'(?:\d+\.\d*|\.\d+|\d+)(?:[eE][+-]?\d+)?'),
    ('COLOR',    r'#(?:[0-9A-Fa-f]{6}|[0-9A-Fa-f]{3})(?![0-9A-Za-z_])'),
    ('NAME',     r'[A-Za-z_][A-Za-z0-9_]*(?:\.[A-Za-z_][A-Za-z0-9_]*)?'),
    ('POW',      r'\*\*'),
    ('OP',       r'[-+*/%]'),
    ('LPAREN',   r'\('),
    ('RPAREN',   r'\)'),
    ('COMMA',    r','),
    ('SKIP',     r'[ \t]+'),
    ('MISMATCH', r'.'),
]
TOK_REGEX = re.compile('|'.join(f'(?P<{n}>{p})' for n, p in TOKEN_SPEC))

CONSTANTS = {
    'PI': math.pi,
    'pi': math.pi,
    'TAU': math.tau,
    'E': math.e,
}


def _clamp(x, lo, hi):
    return max(lo, min(hi, x))


def _rgb(r, g, b):
    return tuple(int(round(_clamp(c, 0.0, 1.0) * 255)) for c in (r, g, b))


# name -> (callable, min args, max args)
FUNCTIONS = {
    'sin': (math.sin, 1, 1),
    'cos': (math.cos, 1, 1),
    'tan': (math.tan, 1, 1),
    'asin': (math.asin, 1, 1),
    'acos': (math.acos, 1, 1),
    'atan': (math.atan, 1, 1),
    'atan2': (math.atan2, 2, 2),
    'abs': (abs, 1, 1),
    'sqrt': (math.sqrt, 1, 1),
    'pow': (math.pow, 2, 2),
    'exp': (math.exp, 1, 1),
    'log': (math.log, 1, 2),
    'min': (min, 2, 16),
    'max': (max, 2, 16),
    'floor': (math.floor, 1, 1),
    'ceil': (math.ceil, 1, 1),
    'round': (round, 1, 1),
    'clamp': (_clamp, 3, 3),
    'radians': (math.radians, 1, 1),
    'degrees': (math.degrees, 1, 1),
}
COLOR_FUNCTIONS = {
    'rgb': (_rgb, 3, 3),
    'gray': (gray, 1, 1),
}


class Token:
    __slots__ = ('type', 'val', 'pos')

    def __init__(self, type_, val, pos):
        self.type = type_
        self.val = val
        self.pos = pos

    def __repr__(self):
        return f"Token({self.type},{self.val})"


def tokenize(src: str):
    tokens = []
    for m in TOK_REGEX.finditer(src):
        kind = m.lastgroup
        val = m.group(kind)
        if kind == 'SKIP':
            continue
        if kind == 'MISMATCH':
            raise ExpressionError(f"Unexpected character '{val}' at position {m.start()}")
        tokens.append(Token(kind, val, m.start()))
    tokens.append(Token('EOF', '', len(src)))
    return tokens


def _bare_name(name: str) -> str:
    return name[5:] if name.startswith('Math.') else name


def uses_time(src: str) -> bool:
    return any(tok.type == 'NAME' and tok.val == 't' for tok in tokenize(src))


class _Parser:
    """Recursive-descent evaluator over a token list.

    expr    := term (('+' | '-') term)*
    term    := unary (('*' | '/' | '%') unary)*
    unary   := ('+' | '-') unary | power
    power   := primary ('**' unary)?
    primary := NUMBER | COLOR | NAME | NAME '(' args ')' | '(' expr ')'
    """

    def __init__(self, tokens, variables: Dict[str, float], lenient: bool = False):
        self.toks = tokens
        self.i = 0
        self.variables = variables
        # lenient: domain errors give NaN instead of raising
        self.lenient = lenient

    def peek(self):
        return self.toks[self.i]

    def next(self):
        t = self.toks[self.i]
        self.i += 1
        return t

    def expect(self, kind):
        t = self.peek()
        if t.type != kind:
            found = repr(t.val) if t.val else 'end of input'
            raise ExpressionError(f"Expected {kind} but found {found}")
        return self.next()

    def parse(self) -> Value:
        value = self.expr()
        self.expect('EOF')
        return value

    def expr(self):
        left = self.term()
        while self.peek().type == 'OP' and self.peek().val in '+-':
            op = self.next().val
            right = self.term()
            left = self._arith(op, left, right)
        return left

    def term(self):
        left = self.unary()
        while self.peek().type == 'OP' and self.peek().val in '*/%':
            op = self.next().val
            right = self.unary()
            left = self._arith(op, left, right)
        return left

    def unary(self):
        t = self.peek()
        if t.type == 'OP' and t.val in '+-':
            self.next()
            operand = self._number(self.unary(), t.val)
            return -operand if t.val == '-' else operand
        return self.power()

    def power(self):
        base = self.primary()
        if self.peek().type == 'POW':
            self.next()
            exponent = self.unary()
            return self._arith('**', base, exponent)
        return base

    def primary(self):
        t = self.next()
        if t.type == 'NUMBER':
            return float(t.val)
        if t.type == 'COLOR':
            return parse_hex_color(t.val)
        if t.type == 'LPAREN':
            value = self.expr()
            self.expect('RPAREN')
            return value
        if t.type == 'NAME':
            if self.peek().type == 'LPAREN':
                return self.call(t.val)
            return self.lookup(t.val)
        found = repr(t.val) if t.val else 'end of input'
        raise ExpressionError(f"Unexpected {found} at position {t.pos}")

    def call(self, name):
        self.expect('LPAREN')
        args = []
        if self.peek().type != 'RPAREN':
            args.append(self.expr())
            while self.peek().type == 'COMMA':
                self.next()
                args.append(self.expr())
        self.expect('RPAREN')

        fname = _bare_name(name)
        entry = FUNCTIONS.get(fname) or COLOR_FUNCTIONS.get(fname)
        if entry is None:
            raise ExpressionError(f"Unknown function '{name}'")
        fn, lo, hi = entry
        if not lo <= len(args) <= hi:
            raise ExpressionError(f"{fname}() takes {lo}..{hi} arguments, got {len(args)}")
        nums = [self._number(a, fname) for a in args]
        try:
            result = fn(*nums)
        except (ValueError, OverflowError, ZeroDivisionError) as e:
            if self.lenient:
                return math.nan
            raise ExpressionError(f"{fname}(): {e}") from e
        except TypeError as e:
            raise ExpressionError(f"{fname}(): {e}") from e
        return result if isinstance(result, tuple) else float(result)

    def lookup(self, name):
        if name in self.variables:
            return float(self.variables[name])
        bare = _bare_name(name)
        if bare in CONSTANTS:
            return CONSTANTS[bare]
        rgb = NAMED_COLORS.get(name.lower())
        if rgb is not None:
            return rgb
        raise ExpressionError(f"Unknown name '{name}'")

    @staticmethod
    def _number(value, where):
        if isinstance(value, tuple):
            raise ExpressionError(f"Color used where a number is expected ({where})")
        return value

    def _arith(self, op, left, right):
        a = self._number(left, op)
        b = self._number(right, op)
        try:
            if op == '+':
                return a + b
            if op == '-':
                return a - b
            if op == '*':
                return a * b
            if op == '/':
                return a / b
            if op == '%':
                return math.fmod(a, b)
            return float(a ** b)
        except (ZeroDivisionError, OverflowError, ValueError, TypeError) as e:
            # TypeError: negative base with fractional exponent yields a complex number
            if self.lenient:
                return math.nan
            raise ExpressionError(f"'{op}': {e}") from e


class ExpressionEvaluator:
    """
    Evaluates scene value expressions.

    Instances are callable, so one can be handed straight to parse_scene()
    as the validity check for shade/fill/stroke values.
    """

    def __init__(self, variables: Optional[Dict[str, float]] = None):
        self.variables = {'t': 0.0}
        if variables:
            self.variables.update(variables)

    def evaluate(self, source, **variables) -> Value:
        if not isinstance(source, str):
            raise ExpressionError(f"Expected an expression string, got {type(source).__name__}")
        if not source.strip():
            raise ExpressionError("Empty expression")
        scope = dict(self.variables, **variables) if variables else self.variables
        value = self._run(source, scope)
        if isinstance(value, float) and not math.isfinite(value):
            raise ExpressionError(f"Expression '{source}' is not a finite number")
        return value

    __call__ = evaluate

    @staticmethod
    def _run(source, scope, lenient=False) -> Value:
        try:
            return _Parser(tokenize(source), scope, lenient).parse()
        except RecursionError as e:
            raise ExpressionError(f"Expression nested too deeply: '{source[:40]}'") from e

    def check(self, source) -> Value:
        """
        Validate a scene value at t = 0.

        An expression that uses `t` only has to be well formed: a domain
        error at t = 0 (`1 / t`, `sqrt(t - 1)`) may not hold at other times.
        """
        try:
            return self.evaluate(source)
        except ExpressionError:
            if not isinstance(source, str) or not uses_time(source):
                raise
        return self._run(source, self.variables, lenient=True)

    def number(self, source, **variables) -> float:
        value = self.evaluate(source, **variables)
        if isinstance(value, tuple):
            raise ExpressionError(f"Expected a number, got color '{source}'")
        return value

    def color(self, source, **variables) -> Color:
        """Evaluate to a color; a number is read as a 0..1 grey level."""
        value = self.evaluate(source, **variables)
        if isinstance(value, tuple):
            return value
        return gray(value)
