from __future__ import annotations


class ImageToolError(Exception):
    """Base class for every error the tool reports to the user."""


class DecodeError(ImageToolError):
    """Input file missing, unreadable or not a supported image."""


class EncodeError(ImageToolError):
    """Output could not be encoded or written."""


class InvalidArgument(ImageToolError, ValueError):
    """A user supplied value is malformed (e.g. a crop string)."""


class OutOfBounds(ImageToolError, ValueError):
    """Crop rectangle does not fit inside the source image."""


class UsageError(ImageToolError):
    """Missing or incompatible subcommand / flag combination."""
