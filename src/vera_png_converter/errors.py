"""Exception types raised while converting images for VERA."""

from __future__ import annotations


class ConversionError(Exception):
    """Base class for every conversion failure."""


class InvalidOptionError(ConversionError):
    """Raised when conversion options are malformed or not allowed for a mode."""


class SourceImageError(ConversionError):
    """Raised when the input PNG cannot be found or decoded."""


class CapacityExceededError(ConversionError):
    """Raised when the quantized palette does not fit in the VERA palette."""

    def __init__(self, color_count: int, original_count: int, limit: int = 256):
        self.color_count = color_count
        self.original_count = original_count
        self.limit = limit
        super().__init__(
            f"The image has {original_count} colors. A conversion would result in "
            f"{color_count} colors. Maximum is {limit}."
        )


class TransparentColorNotFoundError(ConversionError):
    """Raised when the requested transparent color does not occur in the image."""

    def __init__(self, color: str):
        self.color = color
        super().__init__(f"The specified transparent color {color} was not found in the image.")


class DimensionMismatchError(ConversionError):
    """Raised when the image size does not suit the requested conversion."""


class OutputWriteError(ConversionError):
    """Raised when an output file cannot be written."""

    def __init__(self, path, cause: OSError):
        self.path = path
        super().__init__(f"Failed to write {path}: {cause}")


class InternalConsistencyError(ConversionError):
    """Raised when packing meets a color that palette building never indexed."""
