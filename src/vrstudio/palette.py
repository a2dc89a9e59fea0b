from typing import Callable, List, Sequence

import numpy as np

Palette = Callable[[int], Sequence[str]]


def to_hex(rgb) -> str:
    """Convert an [r, g, b] triple in 0-1 to a '#rrggbb' string."""
    r, g, b = (int(round(float(c) * 255)) for c in np.clip(rgb, 0, 1))
    return f"#{r:02x}{g:02x}{b:02x}"


def rainbow(n: int) -> List[str]:
    """
    Return `n` evenly spaced colours around the hue circle.

    Hue i/n is mapped to rgb with the piecewise-linear red/green/blue ramps,
    so rainbow(1) is pure red and neighbouring levels stay distinguishable.
    """
    if n < 1:
        return []
    hue = np.arange(n) / n
    # shifted sawtooth ramps, one per channel
    colors = np.zeros((n, 3))
    colors[:, 0] = np.clip(np.abs(hue * 6 - 3) - 1, 0, 1)
    colors[:, 1] = np.clip(2 - np.abs(hue * 6 - 2), 0, 1)
    colors[:, 2] = np.clip(2 - np.abs(hue * 6 - 4), 0, 1)
    return [to_hex(c) for c in colors]


def grey(n: int) -> List[str]:
    """`n` greys from dark to light."""
    if n < 1:
        return []
    if n == 1:
        return [to_hex([0.3, 0.3, 0.3])]
    return [to_hex([v, v, v]) for v in np.linspace(0.2, 0.8, n)]
