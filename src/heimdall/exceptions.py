"""
exceptions.py
Domain errors shared by the evaluator, the vision clients and the HTTP layer.
"""


class HeimdallError(Exception):
    """Base class for all Heimdall errors."""


class InvalidInputError(HeimdallError):
    """Detection data is structurally broken (not just empty)."""


class ImagePayloadError(HeimdallError):
    """The submitted image could not be decoded."""


class VisionServiceError(HeimdallError):
    """The protective-equipment detection service failed."""


class ImageTooLargeError(ImagePayloadError):
    """The image is bigger than the detection service accepts."""
