#!/usr/bin/env python3
"""
Semantic segmentation cutout tool.

- Decodes one image and canonicalizes it to the model resolution (513x513)
- Runs a PASCAL VOC segmentation model (mmseg) to get one class id per pixel
- Reports the detected classes, or shows / saves per-class cutouts and a colormap overlay

Usage:
  python -m segment_cutouts.src.run_pipeline photo.jpg
  python -m segment_cutouts.src.run_pipeline photo.jpg --show=cat
  python -m segment_cutouts.src.run_pipeline photo.jpg --save=all
"""

import argparse
import json
import sys
from pathlib import Path
from typing import Any, Callable, Optional, Tuple

import numpy as np

from segment_cutouts.model_zoo import DEFAULT_CHECKPOINT_DIR, DEFAULT_MODEL, get_model_spec, list_models
from segment_cutouts.src.errors import InferenceError, InvalidInputError
from segment_cutouts.src.export import Exporter
from segment_cutouts.src.image_io import load_canonical_image, validate_input
from segment_cutouts.src.inference import Segmentor, get_device, predict_flat
from segment_cutouts.src.logging_config import configure_logging
from segment_cutouts.src.output_format import build_output_json
from segment_cutouts.src.prediction import PredictionResult, parse_prediction
from segment_cutouts.src.segment_request import SegmentRequest


def parse_args(argv=None):
    p = argparse.ArgumentParser(description="Segment an image and show or save per-class cutouts")
    p.add_argument("filename", nargs="?", default=None, help="Input image (bmp, gif, jpg, jpeg, png)")
    p.add_argument("--show", nargs="?", const=True, default=None, metavar="NAME", help="Show a detected class or 'colormap' in the terminal")
    p.add_argument("--save", nargs="?", const=True, default=None, metavar="NAME", help="Save a detected class, 'colormap' or 'all' as <image>-<segment>.png")
    p.add_argument("--model", type=str, default=DEFAULT_MODEL, choices=list_models(), help="VOC model from the model zoo")
    p.add_argument("--config", type=str, default=None, help="mmseg config .py (overrides --model, needs --checkpoint)")
    p.add_argument("--checkpoint", type=str, default=None, help="mmseg checkpoint .pth (overrides --model, needs --config)")
    p.add_argument("--checkpoint-dir", type=str, default=None, help="Checkpoint directory for --model (default: mmsegmentation/checkpoints)")
    p.add_argument("--device", type=str, default=None, choices=["cuda", "mps", "cpu"], help="Device (default: auto)")
    p.add_argument("--json", type=str, default=None, help="Write a JSON report of the detected classes to this path")
    p.add_argument("--workers", type=int, default=None, help="Parallel writers for --save=all (default: executor default)")
    p.add_argument("--log-level", type=str, default="WARNING", help="DEBUG, INFO, WARNING or ERROR")
    p.add_argument("--log-file", type=str, default=None, help="Also write logs to this file")
    return p.parse_args(argv)


def build_segmentor(args) -> Segmentor:
    """Segmentor from explicit --config/--checkpoint or from the model zoo."""
    device = get_device(args.device)
    if args.config or args.checkpoint:
        if not (args.config and args.checkpoint):
            raise InferenceError("--config and --checkpoint must be given together")
        return Segmentor(Path(args.config).stem, args.config, args.checkpoint, device=device)
    ckpt_dir = Path(args.checkpoint_dir) if args.checkpoint_dir else DEFAULT_CHECKPOINT_DIR
    config_path, ckpt_path = get_model_spec(args.model, ckpt_dir)
    if ckpt_path is None:
        raise InferenceError(
            f"Checkpoint missing for {args.model} in {ckpt_dir}. "
            "Download it from the mmsegmentation model zoo or pass --config/--checkpoint."
        )
    return Segmentor(args.model, config_path, ckpt_path, device=device)


def segment_image(path: Path, segmentor: Callable[[np.ndarray], Any]) -> Tuple[np.ndarray, PredictionResult]:
    """Decode, canonicalize, predict and parse. Any failure becomes InferenceError."""
    image = load_canonical_image(path)
    try:
        seg_map = predict_flat(segmentor, np.ascontiguousarray(image[..., :3]))
        prediction = parse_prediction(seg_map, shape=image.shape[:2])
    except InferenceError:
        raise
    except Exception as e:
        raise InferenceError(f"prediction failed for '{path}' - {e}") from e
    return image, prediction


def write_report(json_path: str, image_path: str, prediction: PredictionResult, model_name: Optional[str]) -> None:
    out = build_output_json(image_path, prediction, model_name=model_name)
    try:
        with open(json_path, "w") as f:
            json.dump(out, f, indent=2)
    except OSError as e:
        print(f"error writing report '{json_path}' for '{image_path}' - {e}", file=sys.stderr)
        return
    print(f"Wrote {json_path}")


def process_image(
    filename: Optional[str],
    show: SegmentRequest,
    save: SegmentRequest,
    segmentor_factory: Callable[[], Any],
    json_path: Optional[str] = None,
    max_workers: Optional[int] = None,
    progress: bool = True,
) -> int:
    """Run the whole pipeline for one image. Returns the process exit code."""
    try:
        path = validate_input(filename)
    except InvalidInputError as e:
        print(e, file=sys.stderr)
        return 1

    try:
        segmentor = segmentor_factory()
        image, prediction = segment_image(path, segmentor)
    except InferenceError as e:
        print(f"error processing image - {e}", file=sys.stderr)
        return 1

    exporter = Exporter(filename, image, prediction, max_workers=max_workers, progress=progress)
    exporter.run(show, save)

    if json_path:
        write_report(json_path, filename, prediction, getattr(segmentor, "name", None))
    return 0


def main(argv=None) -> int:
    args = parse_args(argv)
    configure_logging(args.log_level, args.log_file)
    return process_image(
        args.filename,
        show=SegmentRequest.from_cli_value(args.show),
        save=SegmentRequest.from_cli_value(args.save),
        segmentor_factory=lambda: build_segmentor(args),
        json_path=args.json,
        max_workers=args.workers,
        progress=sys.stderr.isatty(),
    )


if __name__ == "__main__":
    sys.exit(main())
