"""
PASCAL VOC (21-class) models usable by the pipeline.
Config paths are relative to repo root; checkpoints are looked up by filename
prefix in the checkpoint directory (download them from the mmsegmentation
model zoo).
"""
import os
from pathlib import Path
from typing import Dict, List, Optional, Tuple

# Repo root (parent of segment_cutouts)
REPO_ROOT = Path(__file__).resolve().parents[1]
DEFAULT_CHECKPOINT_DIR = Path(
    os.environ.get("SEGMENT_CUTOUTS_CHECKPOINT_DIR", REPO_ROOT / "mmsegmentation" / "checkpoints")
)
DEFAULT_MODEL = "deeplabv3plus_r50"

# Model name -> (config_path_from_repo_root, checkpoint_filename_prefix)
VOC_MODELS: Dict[str, Tuple[str, str]] = {
    "deeplabv3plus_r50": (
        "mmsegmentation/configs/deeplabv3plus/deeplabv3plus_r50-d8_4xb4-40k_voc12aug-512x512.py",
        "deeplabv3plus_r50-d8_512x512_40k_voc12aug",
    ),
    "deeplabv3plus_r101": (
        "mmsegmentation/configs/deeplabv3plus/deeplabv3plus_r101-d8_4xb4-40k_voc12aug-512x512.py",
        "deeplabv3plus_r101-d8_512x512_40k_voc12aug",
    ),
    "deeplabv3_r50": (
        "mmsegmentation/configs/deeplabv3/deeplabv3_r50-d8_4xb4-40k_voc12aug-512x512.py",
        "deeplabv3_r50-d8_512x512_40k_voc12aug",
    ),
    "pspnet_r50": (
        "mmsegmentation/configs/pspnet/pspnet_r50-d8_4xb4-40k_voc12aug-512x512.py",
        "pspnet_r50-d8_512x512_40k_voc12aug",
    ),
}


def list_models() -> List[str]:
    return list(VOC_MODELS.keys())


def find_checkpoint(prefix: str, checkpoint_dir: Path) -> Optional[Path]:
    """Newest .pth in checkpoint_dir whose name starts with prefix, or None."""
    matches = sorted(Path(checkpoint_dir).glob(f"{prefix}*.pth"))
    return matches[-1] if matches else None


def get_model_spec(
    name: str,
    checkpoint_dir: Path = DEFAULT_CHECKPOINT_DIR,
) -> Tuple[str, Optional[Path]]:
    """
    Returns (config_path_abs, checkpoint_path_or_None) for a VOC model name.
    """
    if name not in VOC_MODELS:
        raise KeyError(f"Unknown model: {name}. Choose from {list_models()}")
    config_rel, prefix = VOC_MODELS[name]
    config_abs = (REPO_ROOT / config_rel).resolve()
    return str(config_abs), find_checkpoint(prefix, checkpoint_dir)
