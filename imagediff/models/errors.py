from enum import Enum


class ErrorKind(Enum):
    INVALID_INPUT = "invalid_input"
    IMAGE_LOAD_FAILURE = "image_load_failure"
    IMAGE_SAVE_FAILURE = "image_save_failure"
    NOT_COMPUTED_YET = "not_computed_yet"


class ImageDiffError(Exception):
    """
    Base class for every error raised by the comparison pipeline.
    Carries a human-readable message and the kind of failure.
    """
    kind: ErrorKind

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidInput(ImageDiffError):
    """A required image is unset, or the two images cannot be compared."""
    kind = ErrorKind.INVALID_INPUT


class ImageLoadFailure(ImageDiffError):
    kind = ErrorKind.IMAGE_LOAD_FAILURE


class ImageSaveFailure(ImageDiffError):
    kind = ErrorKind.IMAGE_SAVE_FAILURE


class NotComputedYet(ImageDiffError):
    kind = ErrorKind.NOT_COMPUTED_YET

    def __init__(self, message: str = "The SSIM has not been calculated yet."):
        super().__init__(message)
