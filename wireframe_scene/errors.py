#
# PROJECT: wireframe-scene-viewer
# MODULE: wireframe_scene/errors.py
# STATUS: Level 2 - Implementation
# LOG_REF: 2026-10-19
#

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class ErrorKind(Enum):
    STRUCTURAL = "structural"
    SYNTAX = "syntax"
    SEMANTIC = "semantic"
    RESOURCE_LIMIT = "resource-limit"


@dataclass(frozen=True)
class ParseError:
    """
    One diagnostic collected while compiling a scene.

    Errors are values, not exceptions: the preprocessor and parser append them
    to a list and keep going, so the caller always gets a best-effort display
    list together with everything that went wrong.
    """
    kind: ErrorKind
    message: str
    line: Optional[int] = None

    def __str__(self):
        return self.message


class UnrollLimitError(Exception):
    """Raised when loop expansion exceeds the configured line or iteration cap."""

    def __init__(self, message: str, line: Optional[int] = None):
        super().__init__(message)
        self.line = line


class ExpressionError(ValueError):
    """Raised by the expression evaluator for anything it cannot evaluate."""
