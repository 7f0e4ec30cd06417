from __future__ import annotations

from pathlib import Path

import matplotlib.pyplot as plt

BACKGROUND = "#1F2937"
PIXELS_PER_INCH = 100.0


def save_figure(path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    plt.savefig(path, facecolor=BACKGROUND)
    plt.close()
    return path
