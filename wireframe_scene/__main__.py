#
# PROJECT: wireframe-scene-viewer
# MODULE: wireframe_scene/__main__.py
# STATUS: Level 2 - Implementation
# LOG_REF: 2026-10-19
#

import sys

from .cli import main

sys.exit(main())
