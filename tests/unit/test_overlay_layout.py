"""
Unit tests for overlay line placement

FakeImageProcessor glyphs: 10 px per character, 20 px high, baseline 5,
so with the default padding of 10 the line pitch is 35 px.
"""

import numpy as np
import pytest

from omnipane.config import TextPosition
from omnipane.video import MAX_OVERLAY_LINES, OverlayLayout

from fakes import FakeImageProcessor


WIDTH, HEIGHT = 640, 480


@pytest.fixture
def processor():
    return FakeImageProcessor()


def image():
    return np.zeros((HEIGHT, WIDTH, 3), dtype=np.uint8)


class TestLineOrigin:
    def test_line_pitch(self, processor):
        layout = OverlayLayout(processor)

        assert layout.line_height == 35

    def test_bottom_right(self, processor):
        layout = OverlayLayout(processor, TextPosition.BOTTOM_RIGHT)

        # 4 chars -> 40 px wide
        assert layout.line_origin("abcd", 0, (WIDTH, HEIGHT)) == (WIDTH - 40 - 10, HEIGHT - 70 - 5)
        assert layout.line_origin("abcd", 1, (WIDTH, HEIGHT)) == (WIDTH - 40 - 10, HEIGHT - 105 - 5)

    def test_top_left(self, processor):
        layout = OverlayLayout(processor, TextPosition.TOP_LEFT)

        assert layout.line_origin("abcd", 0, (WIDTH, HEIGHT)) == (10, 70 + 20)
        assert layout.line_origin("abcd", 1, (WIDTH, HEIGHT)) == (10, 105 + 20)

    def test_top_right_aligns_on_text_width(self, processor):
        layout = OverlayLayout(processor, TextPosition.TOP_RIGHT)

        short_x, _ = layout.line_origin("ab", 0, (WIDTH, HEIGHT))
        long_x, _ = layout.line_origin("abcdef", 0, (WIDTH, HEIGHT))

        assert short_x + 20 == WIDTH - 10
        assert long_x + 60 == WIDTH - 10

    def test_bottom_left(self, processor):
        layout = OverlayLayout(processor, TextPosition.BOTTOM_LEFT)

        assert layout.line_origin("abcd", 0, (WIDTH, HEIGHT)) == (10, HEIGHT - 75)


class TestCompose:
    @pytest.mark.parametrize("position", list(TextPosition))
    def test_lines_never_share_a_row(self, processor, position):
        layout = OverlayLayout(processor, position)

        origins = layout.compose(image(), ["one", "two", "three", "four"])

        rows = [y for _, y in origins]
        assert len(set(rows)) == 4
        # Every line moves one full pitch away from the anchored edge
        steps = [abs(b - a) for a, b in zip(rows, rows[1:])]
        assert steps == [layout.line_height] * 3

    def test_lines_drawn_in_order(self, processor):
        layout = OverlayLayout(processor)

        layout.compose(image(), ["first", "second"])

        assert [text for text, _ in processor.texts] == ["first", "second"]

    def test_no_lines(self, processor):
        layout = OverlayLayout(processor)

        assert layout.compose(image(), []) == []
        assert processor.texts == []

    def test_line_count_is_capped(self, processor):
        layout = OverlayLayout(processor)

        origins = layout.compose(image(), [f"line {i}" for i in range(MAX_OVERLAY_LINES + 44)])

        assert len(origins) == MAX_OVERLAY_LINES
        assert len(processor.texts) == MAX_OVERLAY_LINES
