#
# PROJECT: wireframe-scene-viewer
# MODULE: wireframe_scene/__init__.py
# STATUS: Level 2 - Implementation
# LOG_REF: 2026-10-19
#

from .errors import ErrorKind, ParseError, UnrollLimitError, ExpressionError
from .preprocessor import expand, SourceLine, LoopFrame, PreprocessResult
from .parser import parse_scene, SceneObject, TransformOp, ParseResult
from .expression import ExpressionEvaluator
from .math_utils import Vec3, Mat4, MatrixStack
from .config import ViewerConfig
from .color import parse_hex_color, is_color
from .canvas import Canvas
from .mesh import Mesh
from .camera import FlyCamera, OrbitCamera
from .loader import SceneLoader, LoadedScene
from .renderer import SceneRenderer

__version__ = "0.1.0"
