from __future__ import annotations

from pathlib import Path
from typing import Optional

import matplotlib.pyplot as plt
import numpy as np


def render_field(field: np.ndarray, out_path: Path, title: Optional[str] = None) -> Path:
    """Grayscale PNG of a sampled field, with -1 drawn black and 1 white."""
    plt.figure(figsize=(6, 6))
    # Transposed so x runs left to right and y upward
    plt.imshow(field.T, cmap="gray", vmin=-1.0, vmax=1.0, origin="lower", interpolation="nearest")
    plt.colorbar(fraction=0.046, pad=0.04)
    plt.xlabel("x")
    plt.ylabel("y")
    if title:
        plt.title(title)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    plt.savefig(out_path, dpi=150, bbox_inches="tight")
    plt.close()
    return out_path


def render_histogram(field: np.ndarray, out_path: Path, title: Optional[str] = None, bins: int = 64) -> Path:
    plt.figure(figsize=(6, 4))
    plt.hist(field.ravel(), bins=bins, range=(-1.0, 1.0))
    plt.xlabel("value")
    plt.ylabel("count")
    if title:
        plt.title(title)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    plt.savefig(out_path, dpi=150, bbox_inches="tight")
    plt.close()
    return out_path
