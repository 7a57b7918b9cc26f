"""Live draw ("tombola") over active buyer coupons."""

from .animation import SpinFrame, initial_window, reveal_frame, spin_frames
from .engine import DrawNotice, DrawState, DrawTombola
from .export import (
    build_draw_results,
    draw_csv_filename,
    export_draw_csv,
    mask_phone,
    winners_to_csv,
)
from .selection import QuickDrawResult, pick_winner, quick_draw, remaining_pool

__all__ = [
    "DrawNotice",
    "DrawState",
    "DrawTombola",
    "QuickDrawResult",
    "SpinFrame",
    "build_draw_results",
    "draw_csv_filename",
    "export_draw_csv",
    "initial_window",
    "mask_phone",
    "pick_winner",
    "quick_draw",
    "remaining_pool",
    "reveal_frame",
    "spin_frames",
    "winners_to_csv",
]
