"""Shared fixtures: small synthetic maps and RGBA images."""

import numpy as np
import pytest

from segment_cutouts.src.prediction import parse_prediction
from segment_cutouts.src.registry import ClassRegistry

# VOC ids
CAT = 8
DOG = 12

SCENARIO_MAP = [
    0, 0, 1, 1,
    0, 0, 1, 1,
    2, 2, 0, 0,
    2, 2, 0, 0,
]


@pytest.fixture
def toy_registry():
    return ClassRegistry(["background", "cat", "dog"])


@pytest.fixture
def scenario_prediction(toy_registry):
    return parse_prediction(SCENARIO_MAP, shape=(4, 4), registry=toy_registry)


@pytest.fixture
def voc_prediction():
    """Same layout as the scenario map, with VOC ids for cat and dog."""
    lut = {0: 0, 1: CAT, 2: DOG}
    return parse_prediction([lut[v] for v in SCENARIO_MAP], shape=(4, 4))


@pytest.fixture
def rgba_image():
    rng = np.random.default_rng(7)
    img = rng.integers(0, 256, size=(4, 4, 4), dtype=np.uint8)
    img[..., 3] = 255
    return img
