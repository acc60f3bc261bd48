import numpy as np
import pytest

from segment_cutouts.src.errors import ClassIdOutOfRangeError, EmptyPredictionError
from segment_cutouts.src.prediction import COLORMAP, count_regions, parse_prediction
from segment_cutouts.src.registry import VOC_REGISTRY

from conftest import CAT


def test_scenario_counts_and_order(scenario_prediction):
    assert scenario_prediction.pixel_counts == {"background": 8, "cat": 4, "dog": 4}
    assert scenario_prediction.class_ids == (0, 1, 2)
    assert scenario_prediction.class_names == ("background", "cat", "dog")
    assert scenario_prediction.found_segments == ("background", "cat", "dog", COLORMAP)
    assert scenario_prediction.shape == (4, 4)
    assert scenario_prediction.num_pixels == 16


@pytest.mark.parametrize("size", [1, 7, 64, 513 * 3])
def test_pixel_counts_sum_to_map_length(size):
    rng = np.random.default_rng(size)
    seg = rng.integers(0, len(VOC_REGISTRY), size=size)
    result = parse_prediction(seg)
    assert sum(result.pixel_counts.values()) == size


def test_ids_sorted_and_unique_for_any_pixel_order():
    rng = np.random.default_rng(0)
    seg = np.repeat([15, 3, 0, 20, 8], [5, 2, 9, 1, 3])
    expected = (0, 3, 8, 15, 20)
    for _ in range(5):
        result = parse_prediction(rng.permutation(seg))
        assert result.class_ids == expected
        assert result.class_names == tuple(VOC_REGISTRY.name_of(c) for c in expected)


def test_background_only_when_present():
    result = parse_prediction([CAT, CAT, 12])
    assert result.class_names == ("cat", "dog")
    assert "background" not in result.pixel_counts


def test_empty_prediction_fails():
    with pytest.raises(EmptyPredictionError):
        parse_prediction([])


@pytest.mark.parametrize("bad", [21, -1])
def test_out_of_range_id_fails(bad):
    with pytest.raises(ClassIdOutOfRangeError):
        parse_prediction([0, bad, 1])


def test_shape_must_match_length():
    with pytest.raises(ValueError):
        parse_prediction([0] * 6, shape=(4, 4))


def test_map_is_read_only_and_input_untouched():
    raw = np.array([0, 1, 1, 0])
    result = parse_prediction(raw, shape=(2, 2))
    with pytest.raises(ValueError):
        result.seg_map[0] = 5
    raw[0] = 3
    assert result.seg_map[0] == 0


def test_count_regions_uses_8_connectivity():
    seg = [
        CAT, CAT, 0, CAT,
        0, 0, 0, CAT,
        0, 12, 0, 0,
        12, 0, 0, 0,
    ]
    regions = count_regions(parse_prediction(seg, shape=(4, 4)))
    assert regions == {"background": 1, "cat": 2, "dog": 1}
