"""
vig: video image gallery

Builds a single contact-sheet JPEG from a video: a grid of evenly spaced
thumbnails under a header with resolution, duration and file name.
"""

__version__ = "1.0"

from .assembler import ImageAssembler
from .config import GridSpec, HeaderStyle, SheetConfig
from .extractor import DecodeOrchestrator, ThumbnailStore
from .layout import GridCompositor
from .sampling import select_targets
from .text import FontService, TextOverlay

__all__ = [
    'ImageAssembler',
    'GridSpec',
    'HeaderStyle',
    'SheetConfig',
    'DecodeOrchestrator',
    'ThumbnailStore',
    'GridCompositor',
    'select_targets',
    'FontService',
    'TextOverlay'
]
