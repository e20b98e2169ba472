"""
Error types raised by the gallery pipeline.

Every fatal precondition failure is a ``VigError``; only the command line
entry point turns them into an exit status.
"""


class VigError(Exception):
    """Base class for all gallery errors."""


class InputNotFoundError(VigError, FileNotFoundError):
    """The input video path is missing or does not exist."""


class UnsupportedContainerError(VigError, ValueError):
    """The container kind is not one of the allowed families."""


class NoVideoStreamError(VigError, ValueError):
    """The container has no decodable video stream."""


class GridSizeError(VigError, ValueError):
    """The requested grid is malformed or larger than allowed."""


class DecodeError(VigError, RuntimeError):
    """The decoder failed while reading frames."""
