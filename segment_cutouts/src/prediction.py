"""Parse the flat per-pixel class-id map returned by the model.

Produces the detected-class inventory (sorted ids, names, exact pixel
counts) and keeps the map itself for later masking.
"""

from dataclasses import dataclass, field
from typing import Dict, Optional, Sequence, Tuple

import numpy as np
from scipy import ndimage

from .errors import ClassIdOutOfRangeError, EmptyPredictionError
from .registry import VOC_REGISTRY, ClassRegistry

COLORMAP = 'colormap'

# 8-connectivity for region counting
_REGION_STRUCTURE = np.ones((3, 3), dtype=bool)


@dataclass(frozen=True, eq=False)
class PredictionResult:
    class_ids: Tuple[int, ...]
    class_names: Tuple[str, ...]
    pixel_counts: Dict[str, int]
    seg_map: np.ndarray = field(repr=False)
    shape: Tuple[int, int]

    @property
    def found_segments(self) -> Tuple[str, ...]:
        """Every name that can be shown or saved: detected classes plus the colormap."""
        return self.class_names + (COLORMAP,)

    @property
    def num_pixels(self) -> int:
        return int(self.seg_map.size)


def parse_prediction(
    model_output: Sequence[int],
    shape: Optional[Tuple[int, int]] = None,
    registry: ClassRegistry = VOC_REGISTRY,
) -> PredictionResult:
    """
    Build a PredictionResult from the model output.
    shape is (height, width) of the canonical resolution; when omitted the
    map is treated as a single row.
    """
    seg_map = np.array(model_output, dtype=np.int64).ravel()
    n = seg_map.size
    if n == 0:
        raise EmptyPredictionError('Model returned an empty segmentation map')
    if shape is None:
        shape = (1, n)
    shape = (int(shape[0]), int(shape[1]))
    if shape[0] * shape[1] != n:
        raise ValueError(f'Segmentation map has {n} pixels, expected {shape[0]}x{shape[1]}')

    lo, hi = int(seg_map.min()), int(seg_map.max())
    if lo < 0 or hi >= len(registry):
        bad = lo if lo < 0 else hi
        raise ClassIdOutOfRangeError(f'Class id {bad} out of range [0, {len(registry) - 1}]')

    counts = np.bincount(seg_map, minlength=len(registry))
    class_ids = tuple(int(c) for c in np.flatnonzero(counts))
    class_names = tuple(registry.name_of(c) for c in class_ids)
    pixel_counts = {registry.name_of(c): int(counts[c]) for c in class_ids}

    seg_map.setflags(write=False)
    return PredictionResult(
        class_ids=class_ids,
        class_names=class_names,
        pixel_counts=pixel_counts,
        seg_map=seg_map,
        shape=shape,
    )


def count_regions(prediction: PredictionResult) -> Dict[str, int]:
    """For each detected class, count 8-connected regions in the 2-D map."""
    mask2d = prediction.seg_map.reshape(prediction.shape)
    out = {}
    for c, name in zip(prediction.class_ids, prediction.class_names):
        _, num = ndimage.label(mask2d == c, structure=_REGION_STRUCTURE)
        out[name] = int(num)
    return out
