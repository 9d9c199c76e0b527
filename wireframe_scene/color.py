#
# PROJECT: wireframe-scene-viewer
# MODULE: wireframe_scene/color.py
# STATUS: Level 2 - Implementation
# LOG_REF: 2026-10-19
#

import curses
import logging

logger = logging.getLogger(__name__)

# CSS basic colors plus the common extended names scene files tend to use.
NAMED_COLORS = {
    'black': (0, 0, 0),
    'silver': (192, 192, 192),
    'gray': (128, 128, 128),
    'grey': (128, 128, 128),
    'white': (255, 255, 255),
    'maroon': (128, 0, 0),
    'red': (255, 0, 0),
    'purple': (128, 0, 128),
    'fuchsia': (255, 0, 255),
    'magenta': (255, 0, 255),
    'green': (0, 128, 0),
    'lime': (0, 255, 0),
    'olive': (128, 128, 0),
    'yellow': (255, 255, 0),
    'navy': (0, 0, 128),
    'blue': (0, 0, 255),
    'teal': (0, 128, 128),
    'aqua': (0, 255, 255),
    'cyan': (0, 255, 255),
    'orange': (255, 165, 0),
    'brown': (165, 42, 42),
    'pink': (255, 192, 203),
    'gold': (255, 215, 0),
    'indigo': (75, 0, 130),
    'violet': (238, 130, 238),
    'turquoise': (64, 224, 208),
    'salmon': (250, 128, 114),
    'coral': (255, 127, 80),
    'crimson': (220, 20, 60),
    'khaki': (240, 230, 140),
    'beige': (245, 245, 220),
    'lightgray': (211, 211, 211),
    'lightgrey': (211, 211, 211),
    'darkgray': (169, 169, 169),
    'darkgrey': (169, 169, 169),
    'skyblue': (135, 206, 235),
    'steelblue': (70, 130, 180),
    'forestgreen': (34, 139, 34),
    'darkgreen': (0, 100, 0),
    'darkred': (139, 0, 0),
    'darkblue': (0, 0, 139),
    'chocolate': (210, 105, 30),
    'tan': (210, 180, 140),
}


def parse_hex_color(hex_str):
    """
    Parse a hex color string to an (r, g, b) tuple.
    Accepts: '#RRGGBB', 'RRGGBB', '#RGB' or 'RGB' (case-insensitive).
    Returns: (r, g, b) tuple with values 0-255, or None on failure.
    """
    if hex_str is None:
        return None
    val = str(hex_str).strip().lstrip('#')
    if len(val) == 3:
        val = ''.join(ch * 2 for ch in val)
    if len(val) != 6:
        return None
    try:
        return (int(val[0:2], 16), int(val[2:4], 16), int(val[4:6], 16))
    except ValueError:
        return None


def to_rgb(value):
    """Resolve a named or '#'-prefixed hex color to (r, g, b), else None."""
    if not isinstance(value, str):
        return None
    name = value.strip()
    rgb = NAMED_COLORS.get(name.lower())
    if rgb is not None:
        return rgb
    if name.startswith('#'):
        return parse_hex_color(name)
    return None


def is_color(value) -> bool:
    """True for a color name or a '#RGB' / '#RRGGBB' string."""
    return to_rgb(value) is not None


def gray(level: float):
    """Map a 0..1 grey level to an (r, g, b) tuple, clamping out-of-range input."""
    v = int(round(max(0.0, min(1.0, float(level))) * 255))
    return (v, v, v)


def scale_rgb(rgb, factor: float):
    r, g, b = rgb
    f = max(0.0, min(1.0, factor))
    return (int(r * f), int(g * f), int(b * f))


# --- xterm-256 nearest match ---

# The 6x6x6 color cube occupies indices 16-231.
# Each axis has values: 0, 95, 135, 175, 215, 255
_CUBE_VALUES = [0, 95, 135, 175, 215, 255]

# ANSI 0-7 approximate RGB values
_ANSI8 = [
    (0, 0, 0),       # 0  black
    (128, 0, 0),     # 1  red
    (0, 128, 0),     # 2  green
    (128, 128, 0),   # 3  yellow
    (0, 0, 128),     # 4  blue
    (128, 0, 128),   # 5  magenta
    (0, 128, 128),   # 6  cyan
    (192, 192, 192), # 7  white
]


def _nearest_cube_index(v):
    return min(range(6), key=lambda i: abs(v - _CUBE_VALUES[i]))


def rgb_to_nearest_xterm(r, g, b):
    """Find the nearest xterm-256 index for an (r, g, b) color.
    Searches the 6x6x6 cube and the grayscale ramp for best match."""
    ri, gi, bi = _nearest_cube_index(r), _nearest_cube_index(g), _nearest_cube_index(b)
    cube_idx = 16 + ri * 36 + gi * 6 + bi
    cr, cg, cb = _CUBE_VALUES[ri], _CUBE_VALUES[gi], _CUBE_VALUES[bi]
    cube_dist = (r - cr) ** 2 + (g - cg) ** 2 + (b - cb) ** 2

    # Grayscale ramp: indices 232-255, values 8, 18, ..., 238
    gray_step = max(0, min(23, ((r + g + b) // 3 - 8 + 5) // 10))
    gv = 8 + gray_step * 10
    gray_dist = (r - gv) ** 2 + (g - gv) ** 2 + (b - gv) ** 2

    return 232 + gray_step if gray_dist < cube_dist else cube_idx


def rgb_to_nearest_ansi8(r, g, b):
    """Nearest basic ANSI color index (0-7), for terminals with only 8 colors."""
    return min(range(8), key=lambda i: (r - _ANSI8[i][0]) ** 2 +
                                       (g - _ANSI8[i][1]) ** 2 +
                                       (b - _ANSI8[i][2]) ** 2)


class ColorPairs:
    """
    Lazily allocates curses color pairs for RGB colors seen while drawing.

    Pair 0 is returned whenever colors are unavailable or the terminal runs
    out of pairs. start() must be called after curses initialisation.
    """

    def __init__(self, use_color: bool = True):
        self.use_color = use_color
        self.enabled = False
        self.num_colors = 0
        self.max_pairs = 0
        self.default_bg = curses.COLOR_BLACK
        self.background = None
        self._pairs = {}

    def start(self):
        if not self.use_color:
            return
        try:
            if not curses.has_colors():
                return
            curses.start_color()
            try:
                curses.use_default_colors()
                self.default_bg = -1
            except curses.error:
                pass
            self.num_colors = curses.COLORS
            self.max_pairs = curses.COLOR_PAIRS
            self.enabled = self.num_colors >= 8
        except curses.error as e:
            logger.warning(f"Color initialisation failed: {e}")
            self.enabled = False

    def _slot(self, rgb):
        if self.num_colors >= 256:
            return rgb_to_nearest_xterm(*rgb)
        return rgb_to_nearest_ansi8(*rgb)

    def set_background(self, rgb):
        if rgb != self.background:
            self.background = rgb
            self._pairs.clear()

    def pair_for(self, rgb) -> int:
        """Return a curses attribute for drawing rgb on the current background."""
        if not self.enabled or rgb is None:
            return curses.color_pair(0)
        pair = self._pairs.get(rgb)
        if pair is None:
            pair_id = len(self._pairs) + 1
            if pair_id >= self.max_pairs:
                return curses.color_pair(0)
            bg = self._slot(self.background) if self.background is not None else self.default_bg
            try:
                curses.init_pair(pair_id, self._slot(rgb), bg)
            except curses.error:
                return curses.color_pair(0)
            self._pairs[rgb] = pair = pair_id
        return curses.color_pair(pair)

    def background_attr(self) -> int:
        if not self.enabled or self.background is None:
            return curses.color_pair(0)
        return self.pair_for(self.background)
