GRID_ROWS = 4
GRID_COLS = 4

# Flavor rank that wins the game (index into the flavor table, "Ginger Root Beer").
WIN_RANK = 10
# Chance that a spawned tile is the second-lowest flavor instead of the lowest.
RARE_SPAWN_CHANCE = 0.1
INITIAL_TILES = 2

# ============================================================================
# ANIMATION TIMING (seconds)
# ============================================================================
CONTACT_DURATION = 0.14      # slide from origin offset to destination
MERGE_DURATION = 0.145       # merged cells swap kind and pop
SPAWN_DURATION = 0.12        # appearance transition of the new tile
SPAWN_LAG = 0.02             # spawn delay after contact when nothing merged
MERGE_SPAWN_FRACTION = 0.6   # spawn starts this far into the merge window
WATCHDOG_TIMEOUT = 0.7       # forced cleanup ceiling measured from move acceptance
MAX_QUEUED_DIRECTIONS = 2

# ============================================================================
# LAYOUT
# ============================================================================
WINDOW_WIDTH = 600
WINDOW_HEIGHT = 780
BOARD_MAX_WIDTH_PCT = 0.85
BOARD_MAX_HEIGHT_PCT = 0.70
BOTTOM_MARGIN = 40
HEADER_HEIGHT = 150
TILE_GAP_PCT = 0.08          # gap as a fraction of the tile size
MIN_TILE_SIZE = 24
# Stride used when the board layout has not been measured yet (tile 100 + gap 10).
DEFAULT_TILE_STRIDE = 110.0

# ============================================================================
# KEYS (arcade.key values)
# ============================================================================
KEY_UP = 65362
KEY_DOWN = 65364
KEY_LEFT = 65361
KEY_RIGHT = 65363
KEY_W = 119
KEY_A = 97
KEY_S = 115
KEY_D = 100
KEY_N = 110
KEY_C = 99
KEY_ENTER = 65293
KEY_ESCAPE = 65307

# Arcade uses 1 for the left mouse button (arcade.MOUSE_BUTTON_LEFT)
MOUSE_BUTTON_LEFT = 1
