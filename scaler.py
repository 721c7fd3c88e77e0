#!filepath: scaler.py
import math

from encoder import Resolution

UPSCALE_FACTOR = 1.5
DOWNSCALE_FACTOR = 2.0 / 3.0
MIN_WIDTH = 320

def scale(source: Resolution, mode: str) -> Resolution:
    """
    Computes the target size for 'up' (x1.5) or 'down' (x2/3) scaling, keeping
    the aspect ratio, even dimensions, and a minimum width of 320.
    """
    if mode not in ('up', 'down'):
        raise ValueError(f"Unknown scale mode '{mode}'.")
    ratio = source.width / source.height
    factor = DOWNSCALE_FACTOR if mode == 'down' else UPSCALE_FACTOR

    height = _round_half_up(source.height * factor)
    width = _round_half_up(height * ratio)
    width -= width % 2
    height -= height % 2

    if width < MIN_WIDTH:
        width = MIN_WIDTH
        height = int(width / ratio)
        height -= height % 2

    return Resolution(width, height)

def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))
