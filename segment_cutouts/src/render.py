"""Render single-class cutouts and the colormap overlay.

Every call allocates its own output buffer, so renders over the same
image and prediction can run concurrently.
"""

from typing import Optional

import numpy as np

from .errors import RenderError
from .palette import COLORMAP_ALPHA, assign_colors
from .prediction import COLORMAP, PredictionResult
from .registry import VOC_REGISTRY, ClassRegistry


def _check_inputs(image: np.ndarray, prediction: PredictionResult) -> np.ndarray:
    """Return the segmentation map reshaped to the image (H, W)."""
    if image.ndim != 3 or image.shape[2] != 4 or image.dtype != np.uint8:
        raise RenderError(f'Expected (H, W, 4) uint8 RGBA image, got {image.shape} {image.dtype}')
    h, w = image.shape[:2]
    if prediction.seg_map.size != h * w:
        raise RenderError(
            f'Segmentation map has {prediction.seg_map.size} pixels, image has {h}x{w}={h * w}'
        )
    return prediction.seg_map.reshape(h, w)


def render_cutout(
    image: np.ndarray,
    prediction: PredictionResult,
    class_name: str,
    registry: ClassRegistry = VOC_REGISTRY,
) -> np.ndarray:
    """Keep pixels of class_name unchanged and zero the alpha everywhere else.

    A registered class that was not detected yields a fully transparent image.
    """
    class_id = registry.id_of(class_name)
    seg = _check_inputs(image, prediction)
    out = image.copy()
    out[..., 3] = np.where(seg == class_id, image[..., 3], 0)
    return out


def render_colormap(image: np.ndarray, prediction: PredictionResult) -> np.ndarray:
    """Recolor every detected non-background pixel with its assigned palette color."""
    seg = _check_inputs(image, prediction)
    out = np.zeros_like(image)
    # ids without an assignment (background included) stay (0, 0, 0, 0)
    for class_id, color in assign_colors(prediction.class_ids).items():
        m = seg == class_id
        out[m, :3] = color
        out[m, 3] = COLORMAP_ALPHA
    return out


def render_segment(
    image: np.ndarray,
    prediction: PredictionResult,
    segment: str,
    registry: Optional[ClassRegistry] = None,
) -> np.ndarray:
    """Render 'colormap' or a class cutout by segment name."""
    if segment == COLORMAP:
        return render_colormap(image, prediction)
    return render_cutout(image, prediction, segment, registry or VOC_REGISTRY)
