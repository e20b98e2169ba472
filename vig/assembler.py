"""
Gallery Assembly Module

Runs the whole pipeline for one video: validation, frame sampling,
thumbnail extraction, grid layout, header text and JPEG output.
"""

import logging
import os
import tempfile
from datetime import datetime
from typing import Callable, Optional

from .codec import ImageCodec
from .config import SheetConfig
from .errors import InputNotFoundError, UnsupportedContainerError
from .extractor import DecodeOrchestrator, ThumbnailStore
from .layout import GridCompositor
from .processor import (OpenCVColorConverter, VideoProcessor,
                        is_allowed_container, probe_container)
from .sampling import select_targets
from .text import FontService, TextOverlay, format_header

logger = logging.getLogger(__name__)


def output_name(stem: str, now: datetime) -> str:
    """``gallery-DD-MM-YYYY-HH-MM-SS-<stem>.jpg``"""
    return f"gallery-{now.strftime('%d-%m-%Y-%H-%M-%S')}-{stem}.jpg"


class ImageAssembler:
    """
    Build one gallery image for a video file.

    Every resource (decoder, scratch directory) is released on every exit
    path, and the final JPEG only appears once it has been fully written.
    """

    def __init__(self,
                 input_path: str,
                 config: Optional[SheetConfig] = None,
                 decoder_factory: Callable = VideoProcessor,
                 converter=None,
                 font: Optional[FontService] = None,
                 codec: Optional[ImageCodec] = None,
                 clock: Callable[[], datetime] = datetime.now):
        """
        Args:
            input_path: Video file to summarize
            config: Layout, header style, JPEG quality and output directory
            decoder_factory: Opens a video path; the result must be a context
                manager with ``get_metadata()`` and ``frames()``
            converter: Color converter for decoded frames
            font: Glyph provider for the header
            codec: JPEG codec for scratch thumbnails and the final image
            clock: Source of the timestamp embedded in the output name
        """
        self.input_path = str(input_path)
        self.config = config or SheetConfig()
        self.decoder_factory = decoder_factory
        self.converter = converter or OpenCVColorConverter()
        self.font = font
        self.codec = codec or ImageCodec(self.config.quality)
        self.clock = clock

    def _validate_input(self):
        if not self.input_path or not os.path.exists(self.input_path):
            raise InputNotFoundError(f"file: '{self.input_path}' does not exist.")
        if not os.path.isfile(self.input_path):
            raise InputNotFoundError(f"'{self.input_path}' is not a file.")

        kind = probe_container(self.input_path)
        if not is_allowed_container(kind):
            raise UnsupportedContainerError("Only MP4, MOV, and WMV files.")
        logger.debug("[Assemble] Container: %s", kind)

    def _header_font(self) -> FontService:
        if self.font is not None:
            return self.font
        if self.config.header.font_path:
            return FontService.from_path(self.config.header.font_path)
        return FontService.system()

    def run(self) -> str:
        """
        Produce the gallery image.

        Returns:
            Path of the written JPEG
        """
        self._validate_input()
        grid = self.config.grid
        font = self._header_font()

        with tempfile.TemporaryDirectory(prefix="frames-vig-") as scratch:
            store = ThumbnailStore(scratch, self.codec)
            store.clear()

            with self.decoder_factory(self.input_path) as video:
                metadata = video.get_metadata()
                targets = select_targets(metadata.total_frames, grid.sample_count)
                logger.info("[Assemble] %d frames, targets %s",
                            metadata.total_frames, targets)

                orchestrator = DecodeOrchestrator(targets, self.converter, store.save)
                extracted = orchestrator.run(video.frames())
                logger.info("[Assemble] Extracted %d of %d thumbnails",
                            extracted, grid.sample_count)

            canvas = GridCompositor(grid).compose(store)

        filename = os.path.basename(self.input_path)
        header = format_header(filename, metadata, grid.cols)
        TextOverlay(font, self.config.header).draw(
            canvas, header, grid.pad_left, grid.pad_top + self.config.header.offset_y)

        stem = os.path.splitext(filename)[0]
        output_path = os.path.join(self.config.output_dir,
                                   output_name(stem, self.clock()))
        partial_path = output_path + ".part"
        try:
            self.codec.save(canvas, partial_path, self.config.quality)
            os.replace(partial_path, output_path)
        finally:
            if os.path.exists(partial_path):
                os.remove(partial_path)

        logger.info("[Assemble] Wrote %s", output_path)
        return output_path
