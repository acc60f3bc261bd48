"""Exception taxonomy for the segmentation cutout pipeline."""


class SegmentCutoutsError(Exception):
    """Base exception for the package."""


class InvalidInputError(SegmentCutoutsError):
    """Missing input file or unsupported image extension."""


class InferenceError(SegmentCutoutsError):
    """Image decode or model prediction failure."""


class UnknownSegmentError(SegmentCutoutsError):
    """A show/save request names a segment that was not detected."""


class RenderError(SegmentCutoutsError):
    """Failure while producing a single cutout or colormap."""


class UnknownClassError(SegmentCutoutsError, LookupError):
    """Class name is not part of the registry."""


class ClassIdOutOfRangeError(SegmentCutoutsError, IndexError):
    """Class id outside the registry range."""


class EmptyPredictionError(SegmentCutoutsError, ValueError):
    """The model returned an empty segmentation map."""
