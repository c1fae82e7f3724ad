from __future__ import annotations

import matplotlib.pyplot as plt
import numpy as np


class Visualizer:
    """Plot helpers (only used when --show). No implicit showing in library paths."""

    @staticmethod
    def show_image(img: np.ndarray, title: str = "Image", show: bool = True) -> plt.Figure:
        h, w = img.shape[:2]
        fig, ax = plt.subplots(figsize=(6, 6 * h / max(w, 1)))
        cmap = "gray" if img.ndim == 2 else None
        ax.imshow(img, cmap=cmap, vmin=0, vmax=255)
        ax.set_title(title)
        ax.axis("off")
        fig.tight_layout()
        if show:
            plt.show()
        return fig
