#
# PROJECT: wireframe-scene-viewer
# MODULE: wireframe_scene/preprocessor.py
# STATUS: Level 2 - Implementation
# LOG_REF: 2026-10-19
#

"""
Textual rewrite pass run before the scene parser.

  loop i from 1 to 3 [step 1]     repeated once per value of i, with every
    ...                           whole-word `i` in the body replaced by
  end                             the current value

  group                           command = push
    ...                    ->       ...
  end                             command = pop

The output is a flat list of lines plus a line map pointing every output line
back to the 1-based source line it came from.
"""

import logging
import re
from typing import Dict, Iterator, List, NamedTuple, Optional, Sequence, Tuple

from .errors import ErrorKind, ParseError, UnrollLimitError

logger = logging.getLogger(__name__)

DEFAULT_MAX_LINES = 100_000
DEFAULT_MAX_ITERATIONS = 10_000

_BOUND = r'(-?\d+|[A-Za-z_]\w*)'
LOOP_HEADER_RE = re.compile(
    r'^\s*loop\s+([A-Za-z_]\w*)\s+from\s+' + _BOUND + r'\s+to\s+' + _BOUND +
    r'(?:\s+step\s+' + _BOUND + r')?\s*$'
)
_INT_RE = re.compile(r'-?\d+')
_WORD_RE = re.compile(r'[A-Za-z0-9_]+')
_OBJECT_KEY_RE = re.compile(r'^\s*(?:shape|model)\s*(?:=|\s)')

Scope = Dict[str, int]


class SourceLine(NamedTuple):
    number: int
    text: str


class LoopFrame(NamedTuple):
    """An unexpanded `loop VAR from A to B [step S]` ... `end` block."""
    var: str
    start: int
    stop: int
    step: int
    line: int
    body: List[SourceLine]

    def count(self) -> int:
        if self.step > 0 and self.stop >= self.start:
            return (self.stop - self.start) // self.step + 1
        if self.step < 0 and self.start >= self.stop:
            return (self.start - self.stop) // -self.step + 1
        return 0

    def iterations(self) -> Iterator[int]:
        val = self.start
        if self.step > 0:
            while val <= self.stop:
                yield val
                val += self.step
        else:
            while val >= self.stop:
                yield val
                val += self.step


class PreprocessResult(NamedTuple):
    lines: List[str]
    line_map: List[int]
    errors: List[ParseError]
    # Output indexes where an iteration of an object-declaring loop starts.
    breaks: List[int]


class _Budget:
    """Caps the work one expand() call may do. Created per call, never shared."""

    def __init__(self, max_lines: int, max_iterations: int):
        self.max_lines = max_lines
        self.max_iterations = max_iterations
        self.emitted = 0

    def emit(self, number: int):
        self.emitted += 1
        if self.emitted > self.max_lines:
            raise UnrollLimitError(
                f"Scene expands to more than {self.max_lines} lines "
                f"(limit reached at line {number})", number)

    def check_loop(self, frame: LoopFrame):
        if frame.count() > self.max_iterations:
            raise UnrollLimitError(
                f"Loop on line {frame.line} runs {frame.count()} times, "
                f"more than the limit of {self.max_iterations}", frame.line)


def split_lines(text: str) -> List[str]:
    """Split on `\\n` or `\\r\\n` only; a final newline does not add a line."""
    lines = text.split('\n')
    if len(lines) > 1 and lines[-1] == '':
        lines.pop()
    return [line[:-1] if line.endswith('\r') else line for line in lines]


def _declares_object(body: Sequence[SourceLine]) -> bool:
    return any(_OBJECT_KEY_RE.match(src.text) for src in body)


def _first_word(stripped: str) -> str:
    return stripped.split(None, 1)[0] if stripped else ''


def _indent_of(text: str) -> str:
    return text[:len(text) - len(text.lstrip())]


def substitute(text: str, scope: Scope) -> str:
    """Replace every whole alphanumeric/underscore token bound in scope."""
    if not scope:
        return text

    def repl(m):
        word = m.group(0)
        return str(scope[word]) if word in scope else word

    return _WORD_RE.sub(repl, text)


def _resolve_bound(token: str, scope: Scope) -> Optional[int]:
    if _INT_RE.fullmatch(token):
        return int(token)
    return scope.get(token)


def _find_end(lines: Sequence[str], header_index: int) -> Optional[int]:
    """Index of the `end` closing the loop at header_index, or None."""
    depth = 1
    for j in range(header_index + 1, len(lines)):
        stripped = lines[j].strip()
        if _first_word(stripped) == 'loop' or stripped == 'group':
            depth += 1
        elif stripped == 'end':
            depth -= 1
            if depth == 0:
                return j
    return None


def _read_loop(lines: Sequence[str], index: int, base_line: int,
               scope: Scope) -> Tuple[Optional[LoopFrame], Optional[ParseError], int]:
    """
    Parse the loop header at lines[index] and collect its body.

    Returns (frame, error, next_index). A rejected header drops its block
    through the matching `end`; with no matching `end` only the header line
    is skipped and the body is scanned as plain lines.
    """
    number = base_line + index
    end_index = _find_end(lines, index)
    skip_to = index + 1 if end_index is None else end_index + 1

    m = LOOP_HEADER_RE.match(lines[index])
    if not m:
        return None, ParseError(
            ErrorKind.STRUCTURAL,
            f"Invalid loop header on line {number}: \"{lines[index].strip()}\". "
            f"Expected: loop <name> from <int> to <int> [step <int>]",
            number), skip_to

    var, raw_start, raw_stop, raw_step = m.groups()
    start = _resolve_bound(raw_start, scope)
    stop = _resolve_bound(raw_stop, scope)
    if start is None or stop is None:
        bad = raw_start if start is None else raw_stop
        return None, ParseError(
            ErrorKind.STRUCTURAL,
            f"Invalid loop bound on line {number}: \"{bad}\" is not a number "
            f"or an enclosing loop variable", number), skip_to

    if raw_step is None:
        step = 1 if stop >= start else -1
    else:
        step = _resolve_bound(raw_step, scope)
        if step is None:
            return None, ParseError(
                ErrorKind.STRUCTURAL,
                f"Invalid loop step on line {number}: \"{raw_step}\"", number), skip_to
    if step == 0:
        return None, ParseError(
            ErrorKind.STRUCTURAL,
            f"Invalid step 0 in loop on line {number}", number), skip_to

    if end_index is None:
        return None, ParseError(
            ErrorKind.STRUCTURAL,
            f"Missing 'end' for loop opened on line {number}", number), index + 1

    body = [SourceLine(base_line + j, lines[j]) for j in range(index + 1, end_index)]
    return LoopFrame(var, start, stop, step, number, body), None, end_index + 1


def _expand(lines: Sequence[str], base_line: int, scope: Scope,
            budget: _Budget) -> PreprocessResult:
    out: List[str] = []
    line_map: List[int] = []
    errors: List[ParseError] = []
    breaks: List[int] = []
    open_groups: List[int] = []

    i = 0
    while i < len(lines):
        text = lines[i]
        number = base_line + i
        stripped = text.strip()

        if _first_word(stripped) == 'loop':
            frame, error, i = _read_loop(lines, i, base_line, scope)
            if error is not None:
                errors.append(error)
                continue
            budget.check_loop(frame)
            logger.debug(f"Unrolling loop '{frame.var}' on line {frame.line}: "
                         f"{frame.start}..{frame.stop} step {frame.step} "
                         f"({len(frame.body)} body lines)")
            body_text = [src.text for src in frame.body]
            declares = _declares_object(frame.body)
            for val in frame.iterations():
                child = _expand(body_text, frame.line + 1, {**scope, frame.var: val}, budget)
                offset = len(out)
                if declares and child.lines:
                    breaks.append(offset)
                for b in child.breaks:
                    if offset + b not in breaks:
                        breaks.append(offset + b)
                out.extend(child.lines)
                line_map.extend(child.line_map)
                errors.extend(child.errors)
            continue

        if stripped == 'group':
            open_groups.append(number)
            out.append(_indent_of(text) + 'command = push')
        elif stripped == 'end':
            if open_groups:
                open_groups.pop()
                out.append(_indent_of(text) + 'command = pop')
            else:
                errors.append(ParseError(
                    ErrorKind.STRUCTURAL,
                    f"Unexpected 'end' on line {number} without an open group or loop",
                    number))
                out.append(text)
        else:
            out.append(substitute(text, scope))
        line_map.append(number)
        budget.emit(number)
        i += 1

    for number in open_groups:
        errors.append(ParseError(
            ErrorKind.STRUCTURAL,
            f"Missing 'end' for group opened on line {number}", number))

    return PreprocessResult(out, line_map, errors, breaks)


def expand(lines, base_line: int = 1, scope: Optional[Scope] = None, *,
           max_lines: int = DEFAULT_MAX_LINES,
           max_iterations: int = DEFAULT_MAX_ITERATIONS) -> PreprocessResult:
    """
    Unroll loops and lower groups.

    Args:
        lines: Source text or a sequence of lines (without newlines).
        base_line: 1-based source number of lines[0].
        scope: Initial variable bindings.
        max_lines: Cap on the number of emitted lines.
        max_iterations: Cap on the iteration count of any single loop.

    Raises:
        UnrollLimitError: when either cap is exceeded.
    """
    if isinstance(lines, str):
        lines = split_lines(lines)
    budget = _Budget(max_lines, max_iterations)
    return _expand(list(lines), base_line, dict(scope or {}), budget)
