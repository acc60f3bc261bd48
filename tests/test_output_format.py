import json

from segment_cutouts.src.output_format import build_output_json


def test_report_for_voc_prediction(voc_prediction):
    out = build_output_json("some/dir/photo.jpg", voc_prediction, model_name="fake")
    json.dumps(out)

    image = out["image"]
    assert image["file_path"] == "photo.jpg"
    assert (image["height"], image["width"]) == (4, 4)
    assert image["detected_class"] == ["background", "cat", "dog"]
    assert image["detected_class_id"] == [0, 8, 12]
    assert image["model_name"] == "fake"

    preds = {p["label"]: p for p in out["predictions"]}
    assert preds["background"]["pixels"] == 8
    assert preds["cat"]["fraction"] == 0.25
    assert preds["background"]["color_hex"] is None
    assert preds["cat"]["color_hex"] == "#008000"
    assert preds["dog"]["color_hex"] == "#FF0000"
    assert preds["dog"]["regions"] == 1
