"""
Overlay Layout
==============

Stacks overlay text lines from a screen corner outwards.

All lines share one pitch measured from a reference glyph string, so
consecutive lines never overlap regardless of their content.
"""

from typing import List, Sequence, Tuple

import numpy as np

from omnipane.config import TextPosition
from omnipane.interfaces import ImageProcessor

MAX_OVERLAY_LINES = 256
REFERENCE_GLYPHS = "Hg"


class OverlayLayout:
    """
    Computes where overlay line `i` goes for a given corner.

    Args:
        processor: ImageProcessor used to measure text
        position: Anchor corner
        padding: Gap between the screen edge and the text, and between lines
        first_line_offset: Extra distance of line 0 from the anchored edge

    Example:
        >>> layout = OverlayLayout(processor, TextPosition.BOTTOM_RIGHT)
        >>> x, y = layout.line_origin("Temp.: 21.5 °C", 0, image_size=(1920, 1080))
    """

    def __init__(
        self,
        processor: ImageProcessor,
        position: TextPosition = TextPosition.BOTTOM_RIGHT,
        padding: int = 10,
        first_line_offset: int = 60,
    ):
        self.processor = processor
        self.position = position
        self.padding = padding
        self.first_line_offset = first_line_offset

        (_, glyph_height), baseline = processor.text_size(REFERENCE_GLYPHS)
        self.glyph_height = glyph_height
        self.baseline = baseline
        self.line_height = glyph_height + baseline + padding

    def line_origin(
        self, text: str, line_index: int, image_size: Tuple[int, int]
    ) -> Tuple[int, int]:
        """
        Bottom-left origin of `text` drawn as line `line_index`.

        Args:
            text: Line text (its width matters for right-anchored corners)
            line_index: 0 = closest to the anchored edge
            image_size: (width, height)
        """
        width, height = image_size
        offset = self.first_line_offset + self.padding + line_index * self.line_height

        if self.position.is_left:
            x = self.padding
        else:
            (text_width, _), _ = self.processor.text_size(text)
            x = width - text_width - self.padding

        if self.position.is_top:
            y = offset + self.glyph_height
        else:
            y = height - offset - self.baseline

        return x, y

    def compose(self, image: np.ndarray, lines: Sequence[str]) -> List[Tuple[int, int]]:
        """
        Draw lines onto `image` in order, at most MAX_OVERLAY_LINES.

        Returns:
            Origins the lines were drawn at, in line order
        """
        image_size = (image.shape[1], image.shape[0])
        origins = []
        for line_index, text in enumerate(lines[:MAX_OVERLAY_LINES]):
            origin = self.line_origin(text, line_index, image_size)
            self.processor.put_text(image, text, origin)
            origins.append(origin)
        return origins
