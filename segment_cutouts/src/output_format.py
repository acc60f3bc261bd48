"""Build the JSON report of one processed image: image entry plus one entry per detected class."""

from pathlib import Path
from typing import Any, Dict, List, Optional

from .palette import get_class_id_to_hex
from .prediction import PredictionResult, count_regions


def build_image_entry(
    file_path: str,
    height: int,
    width: int,
    detected_class: List[str],
    detected_class_id: List[int],
    model_name: Optional[str] = None,
) -> Dict[str, Any]:
    return {
        "file_path": file_path,
        "height": height,
        "width": width,
        "model_name": model_name or "unknown",
        "detected_class": detected_class,
        "detected_class_id": detected_class_id,
    }


def build_predictions_semantic(
    prediction: PredictionResult,
    class_id_to_hex: Optional[Dict[int, str]] = None,
    regions: Optional[Dict[str, int]] = None,
) -> List[Dict[str, Any]]:
    """
    One prediction per detected class with its exact pixel count.
    If class_id_to_hex is provided, each prediction gets a color_hex field
    (None for classes never colored, i.e. background).
    """
    total = prediction.num_pixels
    predictions = []
    for c_id, c_name in zip(prediction.class_ids, prediction.class_names):
        pixels = prediction.pixel_counts[c_name]
        pred = {
            "label": c_name,
            "class_id": c_id,
            "pixels": pixels,
            "fraction": round(pixels / total, 6),
        }
        if regions is not None:
            pred["regions"] = regions.get(c_name, 0)
        if class_id_to_hex is not None:
            pred["color_hex"] = class_id_to_hex.get(int(c_id))
        predictions.append(pred)
    return predictions


def build_output_json(
    image_path: str,
    prediction: PredictionResult,
    model_name: Optional[str] = None,
) -> Dict[str, Any]:
    """Final report dict for one image."""
    height, width = prediction.shape
    return {
        "image": build_image_entry(
            file_path=Path(image_path).name,
            height=height,
            width=width,
            detected_class=list(prediction.class_names),
            detected_class_id=list(prediction.class_ids),
            model_name=model_name,
        ),
        "predictions": build_predictions_semantic(
            prediction,
            class_id_to_hex=get_class_id_to_hex(prediction.class_ids),
            regions=count_regions(prediction),
        ),
    }
