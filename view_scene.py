#!/usr/bin/env python3
#
# PROJECT: wireframe-scene-viewer
# MODULE: view_scene.py
# STATUS: Level 2 - Implementation
# LOG_REF: 2026-10-19
#

import sys
import os

# Ensure local package is importable
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from wireframe_scene.cli import main


if __name__ == "__main__":
    sys.exit(main())
