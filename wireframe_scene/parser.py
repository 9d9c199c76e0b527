#
# PROJECT: wireframe-scene-viewer
# MODULE: wireframe_scene/parser.py
# STATUS: Level 2 - Implementation
# LOG_REF: 2026-10-19
#

"""
Scene compiler: turns scene.ini text into a display list.

Each non-comment line is a `key = value` record (or the shorthand
`key value`). Records accumulate on the current SceneObject until an object
boundary is reached:

  * a blank line after some content (unless the object is a pending push),
  * a `shape` or `model` key while the object already has fields,
  * a `command = push` / `command = pop` record,
  * the start of a loop iteration whose body declares a shape or model;
    this is handled like a blank line.

Errors never stop compilation; they are collected next to the objects.
"""

import logging
from dataclasses import dataclass, field
from typing import Callable, Dict, List, NamedTuple, Optional, Tuple, Union

from .color import is_color as default_is_color
from .errors import ErrorKind, ParseError, UnrollLimitError
from .expression import ExpressionEvaluator
from .preprocessor import DEFAULT_MAX_ITERATIONS, DEFAULT_MAX_LINES, expand, split_lines

logger = logging.getLogger(__name__)

SHAPES = ('box', 'torus', 'cone', 'cylinder', 'sphere', 'plane', 'grid')
TRANSFORM_KEYS = ('move', 'rotate', 'scale')
COLOR_KEYS = ('fill', 'stroke', 'background')
RESERVED_KEYS = ('shape', 'model', 'shade', 'fill', 'stroke', 'strokeWeight',
                 'background', 'anaglyph', 'move', 'rotate', 'scale', 'command')
COMMANDS = ('push', 'pop')

FieldValue = Union[str, List[str]]


@dataclass
class TransformOp:
    kind: str
    values: Tuple[str, str, str]
    line: int


@dataclass
class SceneObject:
    """One display-list entry: free-form fields plus an ordered transform list."""
    fields: Dict[str, FieldValue] = field(default_factory=dict)
    field_lines: Dict[str, int] = field(default_factory=dict)
    transforms: List[TransformOp] = field(default_factory=list)
    start_line: Optional[int] = None

    @property
    def has_content(self) -> bool:
        return bool(self.fields) or bool(self.transforms)

    @property
    def command(self) -> Optional[str]:
        value = self.fields.get('command')
        return value if value in COMMANDS else None

    @property
    def shape(self) -> Optional[FieldValue]:
        return self.fields.get('shape')

    @property
    def model(self) -> Optional[FieldValue]:
        return self.fields.get('model')

    def __contains__(self, key):
        return key in self.fields

    def __getitem__(self, key):
        return self.fields[key]

    def get(self, key, default=None):
        return self.fields.get(key, default)

    def line_of(self, key) -> Optional[int]:
        return self.field_lines.get(key)

    def _touch(self, line: int):
        if self.start_line is None:
            self.start_line = line

    def set(self, key: str, value: FieldValue, line: int):
        self._touch(line)
        self.fields[key] = value
        self.field_lines[key] = line

    def add_transform(self, op: TransformOp):
        self._touch(op.line)
        self.transforms.append(op)

    def as_dict(self) -> dict:
        """Flat record with `_<key>_line` bookkeeping, as shown by `--check`."""
        out = {'_lineStart': self.start_line,
               'transform': [{'type': op.kind, 'value': list(op.values), '_line': op.line}
                             for op in self.transforms]}
        for key, value in self.fields.items():
            out[key] = value
            out[f'_{key}_line'] = self.field_lines[key]
        return out


class ParseResult(NamedTuple):
    objects: List[SceneObject]
    errors: List[ParseError]


def split_values(raw: str) -> FieldValue:
    """
    Split a raw value on top-level commas. Commas inside parentheses stay,
    so `rgb(1, 0, 0)` is one value. A single item comes back as a string.
    """
    parts = []
    buf = []
    depth = 0
    for ch in raw:
        if ch == '(':
            depth += 1
        elif ch == ')' and depth > 0:
            depth -= 1
        elif ch == ',' and depth == 0:
            parts.append(''.join(buf).strip())
            buf = []
            continue
        buf.append(ch)
    parts.append(''.join(buf).strip())
    return parts[0] if len(parts) == 1 else parts


def split_assignment(trimmed: str) -> Optional[Tuple[str, str]]:
    """Return (key, raw_value) for a trimmed line, or None if it has no `=`.

    A line without `=` but with a space is read as `key value`; this means a
    free-text value containing spaces is split at its first space.
    """
    if '=' not in trimmed and ' ' in trimmed:
        key, _, rest = trimmed.partition(' ')
        trimmed = key + '=' + rest
    key, sep, rest = trimmed.partition('=')
    key = key.strip()
    if not key or not sep:
        return None
    return key, rest.strip()


def should_flush(current: SceneObject, key: Optional[str], value=None) -> bool:
    """
    Decide whether `current` is finished before the incoming record.

    key is None for a blank line or the start of an object-declaring loop
    iteration. A shape or model only closes an object that already carries
    fields, so transforms written above a shape stay with it.
    """
    if not current.has_content:
        return False
    if key is None:
        return current.command != 'push'
    if key in ('shape', 'model'):
        return bool(current.fields)
    return key == 'command' and value in COMMANDS


def _accepts(evaluator: Callable, value: FieldValue) -> bool:
    items = value if isinstance(value, list) else [value]
    for item in items:
        try:
            evaluator(item)
        except Exception:  # any evaluator failure marks the value invalid
            return False
    return True


def _raw(value: FieldValue) -> str:
    return ', '.join(value) if isinstance(value, list) else value


def validate(key: str, value: FieldValue, line: int, evaluator: Callable,
             is_color: Callable) -> Optional[ParseError]:
    """Semantic check for reserved keys; None when the value is acceptable."""
    if key == 'shape':
        if value not in SHAPES:
            return ParseError(
                ErrorKind.SEMANTIC,
                f"Invalid shape on line {line}: \"{_raw(value)}\". "
                f"Valid values are: {', '.join(SHAPES)}.", line)
    elif key == 'shade':
        if value not in ('on', 'off') and not _accepts(evaluator, value):
            return ParseError(
                ErrorKind.SEMANTIC,
                f"Invalid value for shade on line {line}: \"{_raw(value)}\". "
                f"Valid values are: off, on, or an expression.", line)
    elif key in COLOR_KEYS:
        if value == 'off' or (isinstance(value, str) and is_color(value)):
            return None
        if not _accepts(evaluator, value):
            return ParseError(
                ErrorKind.SEMANTIC,
                f"Invalid value for {key} on line {line}: \"{_raw(value)}\".", line)
    elif key == 'anaglyph':
        if value not in ('on', 'off'):
            return ParseError(
                ErrorKind.SEMANTIC,
                f"Invalid value for anaglyph on line {line}: \"{_raw(value)}\". "
                f"Valid values are: off, on.", line)
    return None


def _transform(key: str, value: FieldValue, line: int):
    values = value if isinstance(value, list) else [value] * 3
    if len(values) != 3:
        return None, ParseError(
            ErrorKind.SEMANTIC,
            f"Invalid value for {key} on line {line}: expected 1 or 3 values, "
            f"got {len(values)}.", line)
    return TransformOp(key, tuple(values), line), None


def parse_scene(text: str, evaluator: Optional[Callable] = None,
                is_color: Optional[Callable] = None, *,
                max_lines: int = DEFAULT_MAX_LINES,
                max_iterations: int = DEFAULT_MAX_ITERATIONS) -> ParseResult:
    """
    Compile scene text into (objects, errors).

    Args:
        text: Scene source.
        evaluator: Callable taking an expression string; raising means the
            value is invalid. Defaults to ExpressionEvaluator().check.
        is_color: Predicate for named/hex colors. Defaults to color.is_color.
        max_lines, max_iterations: Loop unrolling limits.
    """
    evaluator = evaluator or ExpressionEvaluator().check
    is_color = is_color or default_is_color

    try:
        pre = expand(split_lines(text), 1,
                     max_lines=max_lines, max_iterations=max_iterations)
    except UnrollLimitError as e:
        logger.warning(f"Scene rejected: {e}")
        return ParseResult([], [ParseError(ErrorKind.RESOURCE_LIMIT, str(e), e.line)])

    objects: List[SceneObject] = []
    errors: List[ParseError] = list(pre.errors)
    current = SceneObject()
    breaks = set(pre.breaks)

    for index, (text_line, number) in enumerate(zip(pre.lines, pre.line_map)):
        trimmed = text_line.strip()

        if (index in breaks or not trimmed) and should_flush(current, None):
            objects.append(current)
            current = SceneObject()
        if not trimmed or trimmed.startswith(('#', ';')):
            continue

        parsed = split_assignment(trimmed)
        if parsed is None:
            if trimmed not in COMMANDS:
                errors.append(ParseError(
                    ErrorKind.SYNTAX, f"Syntax error on line {number}: missing '='", number))
            continue

        key, raw = parsed
        value = split_values(raw)

        if should_flush(current, key, value):
            objects.append(current)
            current = SceneObject()

        error = validate(key, value, number, evaluator, is_color)
        if error is not None:
            errors.append(error)

        if key in TRANSFORM_KEYS:
            op, error = _transform(key, value, number)
            if error is not None:
                errors.append(error)
            else:
                current.add_transform(op)
        else:
            current.set(key, value, number)

    if current.has_content:
        objects.append(current)

    # Transforms nearest the shape are applied first.
    for obj in objects:
        obj.transforms.reverse()

    logger.debug(f"Parsed {len(objects)} scene objects with {len(errors)} errors "
                 f"from {len(pre.lines)} expanded lines")
    return ParseResult(objects, errors)


parse = parse_scene
