#
# PROJECT: wireframe-scene-viewer
# MODULE: wireframe_scene/viewer.py
# STATUS: Level 2 - Implementation
# LOG_REF: 2026-10-19
#

import curses
import logging
import time

from .camera import FlyCamera, OrbitCamera
from .color import ColorPairs
from .config import ViewerConfig
from .loader import LoadedScene, SceneLoader
from .renderer import SceneRenderer

logger = logging.getLogger(__name__)

ORBIT_STEP = 0.1
PAN_STEP = 20.0
ZOOM_STEP = 25.0


class ViewerApp:
    """
    Interactive curses viewer: loads a scene file, renders it every frame
    under an orbit camera, shows a HUD and an optional error panel.
    """

    def __init__(self, stdscr, scene_path: str, config: ViewerConfig):
        self.stdscr = stdscr
        self.running = True
        self.config = config
        self.scene_path = scene_path

        curses.curs_set(0)
        stdscr.nodelay(True)

        self.pairs = ColorPairs(config.use_color)
        self.pairs.start()
        self.loader = SceneLoader(config)
        self.renderer = SceneRenderer(config)
        self.orbit_camera = OrbitCamera(near=config.near_clip, far=config.far_plane)
        self.fly_camera = FlyCamera(near=config.near_clip, far=config.far_plane)
        self.camera = self.orbit_camera

        self.status = ''
        self.scene = LoadedScene(scene_path)
        self.reload()
        self.show_errors = bool(self.scene.errors)

        self.start_time = time.time()
        self.frame_count = 0
        self.fps = 0
        self.last_fps_time = self.start_time

    def reload(self):
        """Re-read the scene file; on failure the previous scene stays up."""
        try:
            self.scene = self.loader.load(self.scene_path)
            self.status = f"loaded {self.scene_path}"
        except OSError as e:
            logger.error(f"Cannot read scene '{self.scene_path}': {e}")
            self.status = f"cannot read {self.scene_path}: {e.strerror or e}"

    # ────────────────────────────────────────────────────────────────────
    # Input
    # ────────────────────────────────────────────────────────────────────
    @property
    def flying(self) -> bool:
        return self.camera is self.fly_camera

    def toggle_fly(self):
        """Swap orbit and fly cameras; the field of view carries over."""
        target = self.orbit_camera if self.flying else self.fly_camera
        target.fov = self.camera.fov
        self.camera = target

    def _orbit_key(self, key) -> bool:
        camera = self.orbit_camera
        if key == curses.KEY_UP:
            camera.orbit(0.0, ORBIT_STEP)
        elif key == curses.KEY_DOWN:
            camera.orbit(0.0, -ORBIT_STEP)
        elif key == curses.KEY_RIGHT:
            camera.orbit(ORBIT_STEP, 0.0)
        elif key == curses.KEY_LEFT:
            camera.orbit(-ORBIT_STEP, 0.0)
        elif key == ord('w'):
            camera.pan(0.0, -PAN_STEP)
        elif key == ord('s'):
            camera.pan(0.0, PAN_STEP)
        elif key == ord('a'):
            camera.pan(-PAN_STEP, 0.0)
        elif key == ord('d'):
            camera.pan(PAN_STEP, 0.0)
        elif key in (ord('='), ord('+')):
            camera.zoom(-ZOOM_STEP)
        elif key == ord('-'):
            camera.zoom(ZOOM_STEP)
        else:
            return False
        return True

    def _fly_key(self, key) -> bool:
        camera = self.fly_camera
        step = FlyCamera.LOOK_STEP
        if key == curses.KEY_UP:
            camera.look(0.0, step)
        elif key == curses.KEY_DOWN:
            camera.look(0.0, -step)
        elif key == curses.KEY_RIGHT:
            camera.look(step, 0.0)
        elif key == curses.KEY_LEFT:
            camera.look(-step, 0.0)
        elif key == ord('w'):
            camera.thrust(forward=1.0)
        elif key == ord('s'):
            camera.thrust(forward=-1.0)
        elif key == ord('a'):
            camera.thrust(right=-1.0)
        elif key == ord('d'):
            camera.thrust(right=1.0)
        elif key == ord(' '):
            camera.thrust(up=1.0)
        elif key == ord('x'):
            camera.thrust(up=-1.0)
        else:
            return False
        return True

    def handle_input(self):
        try:
            key = self.stdscr.getch()
        except curses.error:
            key = -1

        if key == -1:
            return

        camera = self.camera
        config = self.config

        handled = self._fly_key(key) if self.flying else self._orbit_key(key)
        if handled:
            return

        if key == ord('q'):
            self.running = False
        elif key == ord('f'):
            self.toggle_fly()
        elif key == ord('['):
            camera.adjust_fov(-5)
        elif key == ord(']'):
            camera.adjust_fov(5)
        elif key == ord('0'):
            camera.reset()
        elif key == ord('r'):
            self.reload()
        elif key == ord('e'):
            self.show_errors = not self.show_errors
        # Runtime toggles
        elif key == ord('c'):
            config.use_color = not config.use_color
        elif key == ord('b'):
            config.use_braille = not config.use_braille
        elif key == ord('z'):
            config.use_zbuffer = not config.use_zbuffer

    # ────────────────────────────────────────────────────────────────────
    # Overlays
    # ────────────────────────────────────────────────────────────────────
    def draw_hud(self, ms: float):
        th, tw = self.stdscr.getmaxyx()
        cfg = self.config
        modestr = (f"{'FLY' if self.flying else 'ORB'} "
                   f"{'COL' if cfg.use_color else 'MON'} "
                   f"{'BRA' if cfg.use_braille else 'ASC'} "
                   f"{'Z+' if cfg.use_zbuffer else 'Z-'}"
                   f"{' 3D' if self.renderer.stereo else ''}")
        hdr = (f" OBJ:{len(self.scene.objects)}"
               f" | ERR:{len(self.scene.errors)}"
               f" | FPS:{self.fps}"
               f" | {ms:.1f}ms"
               f" | [{modestr}] ")
        try:
            self.stdscr.addstr(0, 0, hdr.center(tw - 1, '=')[:tw - 1],
                               curses.color_pair(0) | curses.A_BOLD)
            footer = f" {self.status} | f: fly/orbit  e: errors  r: reload  q: quit "
            self.stdscr.addstr(th - 1, 0, footer[:tw - 1], curses.color_pair(0))
        except curses.error:
            pass

    def draw_errors(self):
        errors = self.scene.errors
        if not errors:
            return
        th, tw = self.stdscr.getmaxyx()
        room = max(0, min(len(errors), th // 3))
        top = th - 1 - room
        for row, error in enumerate(errors[:room]):
            try:
                self.stdscr.addstr(top + row, 0, f" ! {error.message}"[:tw - 1].ljust(tw - 1),
                                   curses.color_pair(0) | curses.A_REVERSE)
            except curses.error:
                pass

    # ────────────────────────────────────────────────────────────────────
    # Main loop
    # ────────────────────────────────────────────────────────────────────
    def run(self):
        while self.running:
            start_time = time.time()

            self.handle_input()
            self.camera.update()

            self.renderer.frame(self.stdscr, self.scene.objects, self.camera, self.pairs,
                                t=start_time - self.start_time, meshes=self.scene.meshes)

            self.frame_count += 1
            now = time.time()
            if now - self.last_fps_time >= 1.0:
                self.fps = self.frame_count
                self.frame_count = 0
                self.last_fps_time = now

            self.draw_hud((now - start_time) * 1000)
            if self.show_errors:
                self.draw_errors()

            self.stdscr.refresh()
            # ~60 fps cap keeps the loop from spinning on an idle scene
            time.sleep(max(0.0, 1 / 60 - (time.time() - start_time)))


def main(stdscr, scene_path, config):
    """Entry point called from curses.wrapper."""
    app = ViewerApp(stdscr, scene_path, config)
    app.run()
