# puyo_layout.py
from dataclasses import dataclass
from puyo_config import CONFIG, HIDDEN_ROWS


@dataclass
class Dims:
    cell: int
    margin: int
    panel_w: int
    board_w: int
    board_h: int
    total_w: int
    total_h: int
    board_x: int
    board_y: int
    panel_x: int
    panel_y: int
    cols: int
    rows: int


def compute_dims(cols: int, rows: int) -> Dims:
    """Pixel layout for a cols x rows visible board plus the side panel.

    The hidden spawn row directly above the field is drawn too, so the
    falling pair is visible as it enters.
    """
    cell = int(CONFIG["CELL_SIZE"])
    margin = 16
    panel_w = 200
    headroom = cell * (HIDDEN_ROWS - 1)

    board_w = cols * cell
    board_h = rows * cell

    total_w = margin + board_w + margin + panel_w + margin
    total_h = margin + headroom + board_h + margin

    board_x = margin
    board_y = margin + headroom
    panel_x = board_x + board_w + margin
    panel_y = margin

    return Dims(
        cell=cell, margin=margin, panel_w=panel_w,
        board_w=board_w, board_h=board_h,
        total_w=total_w, total_h=total_h,
        board_x=board_x, board_y=board_y,
        panel_x=panel_x, panel_y=panel_y,
        cols=cols, rows=rows,
    )
