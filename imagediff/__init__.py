"""SSIM-based image comparison with difference-region detection."""
from .models.errors import (
    ErrorKind,
    ImageDiffError,
    ImageLoadFailure,
    ImageSaveFailure,
    InvalidInput,
    NotComputedYet,
)
from .models.image import Image
from .models.similarity import Channel, Region, SimilarityScores
from .pipeline.similarity_report import SimilarityReport, compare_images

__version__ = "1.0.0"
