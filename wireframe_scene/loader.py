#
# PROJECT: wireframe-scene-viewer
# MODULE: wireframe_scene/loader.py
# STATUS: Level 2 - Implementation
# LOG_REF: 2026-10-19
#

import logging
import os
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from .config import ViewerConfig
from .errors import ParseError
from .mesh import Mesh, model_asset_paths
from .parser import SceneObject, parse_scene

logger = logging.getLogger(__name__)


@dataclass
class LoadedScene:
    """A compiled scene plus the geometry its `model` entries refer to."""
    path: Optional[str]
    objects: List[SceneObject] = field(default_factory=list)
    errors: List[ParseError] = field(default_factory=list)
    meshes: Dict[str, Mesh] = field(default_factory=dict)
    textures: Dict[str, str] = field(default_factory=dict)


class SceneLoader:
    """
    Reads scene files and resolves models.

    Meshes are cached per loader by model path and mtime, so reloading a scene
    after an edit does not re-read unchanged OBJ files.
    """

    def __init__(self, config: Optional[ViewerConfig] = None):
        self.config = config or ViewerConfig()
        self._meshes: Dict[tuple, Mesh] = {}

    def load(self, path: str) -> LoadedScene:
        """Read and compile a scene file. OSError propagates to the caller."""
        with open(path, 'r', encoding='utf-8') as f:
            text = f.read()
        scene = self.compile(text, base_dir=os.path.dirname(os.path.abspath(path)))
        scene.path = path
        logger.info(f"Loaded scene '{path}': {len(scene.objects)} objects, "
                    f"{len(scene.errors)} errors")
        return scene

    def compile(self, text: str, base_dir: str = '.') -> LoadedScene:
        result = parse_scene(text, **self.config.parse_limits)
        for error in result.errors:
            logger.info(error.message)

        scene = LoadedScene(None, result.objects, result.errors)
        for obj in result.objects:
            model = obj.model
            if model is None:
                continue
            if not isinstance(model, str):
                logger.warning(f"Ignoring model list on line {obj.line_of('model')}")
                continue
            scene.meshes[model] = self._mesh(model, base_dir)
            assets = model_asset_paths(model)
            if assets.kit not in scene.textures:
                texture = os.path.join(base_dir, assets.texture)
                if not os.path.exists(texture):
                    logger.debug(f"No texture for model '{model}' at {texture}")
                scene.textures[assets.kit] = texture
        return scene

    def _mesh(self, model: str, base_dir: str) -> Mesh:
        path = model if os.path.isabs(model) else os.path.join(base_dir, model)
        try:
            key = (path, os.path.getmtime(path))
        except OSError:
            key = (path, None)
        mesh = self._meshes.get(key)
        if mesh is None:
            mesh = self._meshes[key] = Mesh.from_obj(path)
        return mesh
