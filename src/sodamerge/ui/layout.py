from sodamerge.constants import (
    BOARD_MAX_HEIGHT_PCT,
    BOARD_MAX_WIDTH_PCT,
    BOTTOM_MARGIN,
    GRID_COLS,
    GRID_ROWS,
    HEADER_HEIGHT,
    MIN_TILE_SIZE,
    TILE_GAP_PCT,
)


def compute_board_geometry(window_width: int, window_height: int, rows: int = GRID_ROWS, cols: int = GRID_COLS):
    """Return (tile_size, gap, start_x, start_y) for the board.

    The board may not exceed the configured fraction of the window below the
    header. ``gap`` separates neighbouring cells and pads the board edge, so the
    distance between neighbouring cell centres is ``tile_size + gap``.
    """
    max_board_w = window_width * BOARD_MAX_WIDTH_PCT
    max_board_h = (window_height - HEADER_HEIGHT - BOTTOM_MARGIN) * BOARD_MAX_HEIGHT_PCT
    cell_by_w = max_board_w / (cols + TILE_GAP_PCT * (cols + 1))
    cell_by_h = max_board_h / (rows + TILE_GAP_PCT * (rows + 1))
    tile_size = int(min(cell_by_w, cell_by_h))
    if tile_size < MIN_TILE_SIZE:
        tile_size = MIN_TILE_SIZE
    gap = max(2, int(tile_size * TILE_GAP_PCT))
    board_width = cols * tile_size + (cols + 1) * gap
    start_x = (window_width - board_width) / 2
    start_y = BOTTOM_MARGIN
    return tile_size, gap, start_x, start_y


def board_extent(tile_size: int, gap: int, rows: int = GRID_ROWS, cols: int = GRID_COLS):
    """Return (width, height) of the board including its padding."""
    return cols * tile_size + (cols + 1) * gap, rows * tile_size + (rows + 1) * gap
