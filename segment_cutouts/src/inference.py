"""Semantic segmentation inference (mmseg, PASCAL VOC label space).

The model receives the canonical RGB image and returns one class id per
pixel. Runs on CUDA, MPS (Apple Silicon, falls back to CPU) or CPU.
"""

import logging
import warnings
from pathlib import Path
from typing import Any, Optional, Union

import numpy as np
import torch

from .errors import InferenceError

logger = logging.getLogger(__name__)


def get_device(prefer: Optional[str] = None) -> str:
    """Resolve the torch device; 'cuda' (or auto) degrades to cpu without a GPU."""
    if prefer and prefer != 'cuda':
        return prefer
    return 'cuda:0' if torch.cuda.is_available() else 'cpu'


def _load_mmseg_model(config_path: str, checkpoint_path: str, device: str):
    from mmseg.apis import init_model
    return init_model(config_path, checkpoint_path, device=device)


def _predict_label_map(model: Any, image_bgr: np.ndarray) -> np.ndarray:
    """(H,W,3) BGR in, (H,W) int32 class ids out."""
    from mmseg.apis import inference_model

    labels = inference_model(model, image_bgr).pred_sem_seg.data
    labels = labels.cpu().numpy() if hasattr(labels, 'cpu') else np.asarray(labels)
    return labels.reshape(labels.shape[-2:]).astype(np.int32)


def _device_for_inference(device: str) -> str:
    """MPS adaptive pooling rejects sizes that do not divide evenly (513 does not), so run on CPU."""
    if device != 'mps':
        return device
    warnings.warn(
        'Using CPU for inference instead of MPS to avoid adaptive pooling limitation '
        '(see https://github.com/pytorch/pytorch/issues/96056). Set --device cpu to silence.'
    )
    return 'cpu'


class Segmentor:
    """Single segmentation model wrapper (mmseg)."""

    def __init__(
        self,
        name: str,
        config_path: Union[str, Path],
        checkpoint_path: Union[str, Path],
        device: Optional[str] = None,
    ):
        self.name = name
        self.device = _device_for_inference(device or get_device())
        logger.info("Loading model %s on %s", name, self.device)
        try:
            self.model = _load_mmseg_model(str(config_path), str(checkpoint_path), self.device)
        except Exception as e:
            raise InferenceError(f"failed to load model '{name}' from {checkpoint_path} - {e}") from e

    def __call__(self, image_rgb: np.ndarray) -> np.ndarray:
        # mmseg's ndarray pipeline expects BGR, like cv2.imread
        return _predict_label_map(self.model, np.ascontiguousarray(image_rgb[..., ::-1]))

    def predict_flat(self, image_rgb: np.ndarray) -> np.ndarray:
        """Return the row-major flat class-id map for an (H,W,3) image."""
        return predict_flat(self, image_rgb)


def predict_flat(segmentor, image_rgb: np.ndarray) -> np.ndarray:
    """Run any callable segmentor and flatten its (H,W) output, checking the size."""
    h, w = image_rgb.shape[:2]
    with torch.no_grad():
        pred = np.asarray(segmentor(image_rgb))
    if pred.shape != (h, w):
        raise InferenceError(f'model returned a {pred.shape} map for a {h}x{w} image')
    return pred.reshape(-1)
