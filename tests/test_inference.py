import sys
import types

import numpy as np
import pytest
import torch

from segment_cutouts.src import inference
from segment_cutouts.src.errors import InferenceError
from segment_cutouts.src.inference import Segmentor, get_device, predict_flat
from segment_cutouts.src.run_pipeline import build_segmentor, parse_args


def test_get_device(mocker):
    assert get_device("cpu") == "cpu"
    assert get_device("mps") == "mps"
    mocker.patch.object(inference.torch.cuda, "is_available", return_value=False)
    assert get_device() == "cpu"
    assert get_device("cuda") == "cpu"


def test_mps_falls_back_to_cpu():
    with pytest.warns(UserWarning, match="MPS"):
        assert inference._device_for_inference("mps") == "cpu"
    assert inference._device_for_inference("cuda:0") == "cuda:0"


def test_segmentor_predict_flat(mocker):
    load = mocker.patch.object(inference, "_load_mmseg_model", return_value="model")
    run = mocker.patch.object(
        inference, "_predict_label_map", return_value=np.arange(6, dtype=np.int32).reshape(2, 3)
    )
    seg = Segmentor("voc", "cfg.py", "ckpt.pth", device="cpu")
    image = np.zeros((2, 3, 3), dtype=np.uint8)
    image[..., 0] = 255  # pure red in RGB

    flat = seg.predict_flat(image)

    load.assert_called_once_with("cfg.py", "ckpt.pth", "cpu")
    (model, fed), _ = run.call_args
    assert model == "model"
    assert fed[0, 0].tolist() == [0, 0, 255]
    assert image[0, 0].tolist() == [255, 0, 0]
    assert flat.tolist() == [0, 1, 2, 3, 4, 5]


def test_segmentor_load_failure(mocker):
    mocker.patch.object(inference, "_load_mmseg_model", side_effect=ImportError("No module named 'mmseg'"))
    with pytest.raises(InferenceError, match="mmseg"):
        Segmentor("voc", "cfg.py", "ckpt.pth", device="cpu")


def test_predict_flat_checks_shape():
    with pytest.raises(InferenceError):
        predict_flat(lambda img: np.zeros((3, 3)), np.zeros((2, 2, 3), dtype=np.uint8))


def test_build_segmentor_without_checkpoint(tmp_path):
    args = parse_args(["photo.jpg", "--device", "cpu", "--checkpoint-dir", str(tmp_path)])
    with pytest.raises(InferenceError, match="Checkpoint missing"):
        build_segmentor(args)


def test_build_segmentor_needs_config_and_checkpoint():
    args = parse_args(["photo.jpg", "--device", "cpu", "--config", "cfg.py"])
    with pytest.raises(InferenceError, match="together"):
        build_segmentor(args)


def test_predict_label_map_squeezes_batch_dim(monkeypatch):
    fed = {}

    def fake_inference_model(model, image):
        fed["image"] = image
        data = torch.arange(6).reshape(1, 2, 3)
        return types.SimpleNamespace(pred_sem_seg=types.SimpleNamespace(data=data))

    monkeypatch.setitem(sys.modules, "mmseg.apis", types.SimpleNamespace(inference_model=fake_inference_model))
    labels = inference._predict_label_map("model", np.zeros((2, 3, 3), dtype=np.uint8))

    assert labels.shape == (2, 3)
    assert labels.dtype == np.int32
    assert labels[1, 2] == 5
    assert fed["image"].shape == (2, 3, 3)
