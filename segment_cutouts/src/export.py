"""Decide which renders to produce for --show / --save and route them.

Show renders go to the terminal; save renders become one PNG per segment.
"save all" fans out one task per segment and joins them all before
returning, collecting a per-segment outcome instead of aborting.
"""

import logging
import sys
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, List, Optional

import numpy as np
from tqdm import tqdm

from .errors import SegmentCutoutsError, UnknownSegmentError
from .image_io import display_in_terminal, encode_png, output_path_for, write_png
from .prediction import PredictionResult
from .render import render_segment
from .segment_request import SegmentRequest

logger = logging.getLogger(__name__)

SHOW_HINT = (
    "\nAfter the --show flag, provide an object name from the list above, "
    "or 'colormap' to view the highlighted object colormap."
)
SAVE_HINT = (
    "\nAfter the --save flag, provide an object name from the list above, "
    "or 'all' to save each segment individually."
)

Renderer = Callable[[np.ndarray, PredictionResult, str], np.ndarray]


@dataclass
class SaveOutcome:
    segment: str
    path: Path
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class ExportSummary:
    shown: Optional[str] = None
    saves: List[SaveOutcome] = field(default_factory=list)
    hints: List[str] = field(default_factory=list)

    @property
    def failed_saves(self) -> List[SaveOutcome]:
        return [s for s in self.saves if not s.ok]


def _describe(e: Exception) -> str:
    if isinstance(e, (SegmentCutoutsError, OSError)):
        return str(e)
    return f"{type(e).__name__}: {e}"


def format_report(image_path, prediction: PredictionResult) -> str:
    names = ', '.join(prediction.class_names)
    return f"The image '{image_path}' contains the following segments: {names}."


class Exporter:
    """Routes rendered segments to the terminal or to PNG files.

    renderer, encoder, display and writer are injectable so tests can run
    without a terminal or filesystem.
    """

    def __init__(
        self,
        image_path,
        image: np.ndarray,
        prediction: PredictionResult,
        renderer: Renderer = render_segment,
        encoder: Callable[[np.ndarray], bytes] = encode_png,
        display: Callable[[bytes], None] = display_in_terminal,
        writer: Callable[[Path, bytes], object] = write_png,
        max_workers: Optional[int] = None,
        progress: bool = False,
    ):
        self.image_path = image_path
        self.image = image
        self.prediction = prediction
        self.renderer = renderer
        self.encoder = encoder
        self.display = display
        self.writer = writer
        self.max_workers = max_workers
        self.progress = progress

    def _resolve(self, request: SegmentRequest) -> str:
        segment = request.target_in(self.prediction.found_segments)
        if segment is None:
            what = f"'{request.name}'" if request.name is not None else "no segment name"
            raise UnknownSegmentError(
                f"{what} is not a segment of '{self.image_path}'; "
                f"available: {', '.join(self.prediction.found_segments)}"
            )
        return segment

    def render_png(self, segment: str) -> bytes:
        return self.encoder(self.renderer(self.image, self.prediction, segment))

    def show(self, segment: str) -> bool:
        try:
            self.display(self.render_png(segment))
        except Exception as e:
            # a failed segment is reported, never fatal for the run
            print(f"error showing '{segment}' from '{self.image_path}' - {_describe(e)}", file=sys.stderr)
            return False
        return True

    def save(self, segment: str) -> SaveOutcome:
        """Render and write one segment; failures are captured in the outcome."""
        out_path = output_path_for(self.image_path, segment)
        try:
            self.writer(out_path, self.render_png(segment))
        except Exception as e:
            logger.debug("Saving %s failed", out_path, exc_info=True)
            return SaveOutcome(segment, out_path, error=_describe(e))
        return SaveOutcome(segment, out_path)

    def save_all(self) -> List[SaveOutcome]:
        """Save every found segment concurrently and wait for all of them."""
        segments = self.prediction.found_segments
        outcomes = []
        with ThreadPoolExecutor(max_workers=self.max_workers) as pool:
            futures = [pool.submit(self.save, seg) for seg in segments]
            for fut in tqdm(
                as_completed(futures),
                total=len(futures),
                desc="saving",
                unit="file",
                disable=not self.progress,
            ):
                outcomes.append(fut.result())
        order = {seg: i for i, seg in enumerate(segments)}
        outcomes.sort(key=lambda o: order[o.segment])
        return outcomes

    def run(self, show: SegmentRequest, save: SegmentRequest) -> ExportSummary:
        summary = ExportSummary()
        show_target = show.target_in(self.prediction.found_segments)

        if show_target is None:
            print(format_report(self.image_path, self.prediction))
        elif self.show(show_target):
            summary.shown = show_target

        if not show.is_absent and show_target is None:
            summary.hints.append(SHOW_HINT)
            print(SHOW_HINT)

        if not save.is_absent:
            if save.is_all:
                summary.saves = self.save_all()
            else:
                try:
                    summary.saves = [self.save(self._resolve(save))]
                except UnknownSegmentError as e:
                    logger.info("%s", e)
                    summary.hints.append(SAVE_HINT)
                    print(SAVE_HINT)

        for outcome in summary.saves:
            if outcome.ok:
                print(f"saved {outcome.path}")
            else:
                print(
                    f"error saving '{outcome.path}' from '{self.image_path}' - {outcome.error}",
                    file=sys.stderr,
                )
        return summary
