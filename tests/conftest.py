import matplotlib

matplotlib.use("Agg")

import numpy as np
import pytest


@pytest.fixture
def rgb_image() -> np.ndarray:
    """Small non-square RGB image with distinct pixel values (3 rows x 4 cols)."""
    return np.arange(3 * 4 * 3, dtype=np.uint8).reshape(3, 4, 3) * 5
