"""
Image Processor
===============

OpenCV-backed image primitives for motion detection and overlay text.
Motion rectangles are drawn with a supervision BoxAnnotator.
"""

import functools
from typing import List, Sequence, Tuple

import cv2
import numpy as np
import supervision as sv

from omnipane.interfaces import ImageProcessingError
from omnipane.motion.schema import MotionRegion


def _wrap_cv2(operation: str):
    """Convert cv2.error raised by the decorated method into ImageProcessingError."""
    def decorator(method):
        @functools.wraps(method)
        def wrapper(*args, **kwargs):
            try:
                return method(*args, **kwargs)
            except cv2.error as e:
                raise ImageProcessingError(f"{operation} failed: {e}") from e
        return wrapper
    return decorator


class OpenCVImageProcessor:
    """
    Image primitives used by MotionDetector and overlay composition.

    Args:
        blur_kernel_size: Gaussian kernel applied in to_comparison_form (odd)
        box_color: Motion rectangle colour
        box_thickness: Motion rectangle line thickness
        text_color: Overlay text colour (BGR)
        font_scale: Overlay font scale
        font_thickness: Overlay font thickness

    Example:
        >>> processor = OpenCVImageProcessor()
        >>> gray = processor.to_comparison_form(frame)
        >>> mask = processor.threshold(processor.abs_diff(gray, background), 10)
    """

    FONT = cv2.FONT_HERSHEY_SIMPLEX

    def __init__(
        self,
        blur_kernel_size: int = 19,
        box_color: sv.Color = sv.Color.RED,
        box_thickness: int = 3,
        text_color: Tuple[int, int, int] = (0, 255, 0),
        font_scale: float = 1.0,
        font_thickness: int = 2,
    ):
        self.blur_kernel_size = blur_kernel_size
        self.text_color = text_color
        self.font_scale = font_scale
        self.font_thickness = font_thickness

        self.box_annotator = sv.BoxAnnotator(
            color=box_color,
            thickness=box_thickness,
        )
        self._dilate_kernel = cv2.getStructuringElement(cv2.MORPH_RECT, (3, 3))

    # ========================================================================
    # Motion pipeline
    # ========================================================================

    @_wrap_cv2("to_comparison_form")
    def to_comparison_form(self, image: np.ndarray) -> np.ndarray:
        gray = cv2.cvtColor(image, cv2.COLOR_BGR2GRAY)
        k = self.blur_kernel_size
        return cv2.GaussianBlur(gray, (k, k), 0)

    @_wrap_cv2("abs_diff")
    def abs_diff(self, image: np.ndarray, background: np.ndarray) -> np.ndarray:
        return cv2.absdiff(image, background)

    @_wrap_cv2("threshold")
    def threshold(self, diff: np.ndarray, level: float) -> np.ndarray:
        _, mask = cv2.threshold(diff, level, 255, cv2.THRESH_BINARY)
        return mask

    @_wrap_cv2("dilate")
    def dilate(self, mask: np.ndarray, iterations: int) -> np.ndarray:
        if iterations == 0:
            return mask
        return cv2.dilate(mask, self._dilate_kernel, iterations=iterations)

    @_wrap_cv2("find_external_contours")
    def find_external_contours(self, mask: np.ndarray) -> List[np.ndarray]:
        contours, _ = cv2.findContours(mask, cv2.RETR_EXTERNAL, cv2.CHAIN_APPROX_SIMPLE)
        return list(contours)

    @_wrap_cv2("contour_area")
    def contour_area(self, contour: np.ndarray) -> float:
        return float(cv2.contourArea(contour))

    @_wrap_cv2("bounding_rect")
    def bounding_rect(self, contour: np.ndarray) -> Tuple[int, int, int, int]:
        x, y, w, h = cv2.boundingRect(contour)
        return int(x), int(y), int(w), int(h)

    # ========================================================================
    # Drawing
    # ========================================================================

    def draw_regions(self, image: np.ndarray, regions: Sequence[MotionRegion]) -> np.ndarray:
        """Draw motion rectangles in place and return the image."""
        if not regions:
            return image

        detections = sv.Detections(
            xyxy=np.array([region.xyxy for region in regions], dtype=np.float32),
            # Single class: every motion box takes the annotator colour
            class_id=np.zeros(len(regions), dtype=int),
        )
        annotated = self.box_annotator.annotate(scene=image, detections=detections)
        if annotated is not image:
            np.copyto(image, annotated)
        return image

    @_wrap_cv2("put_text")
    def put_text(self, image: np.ndarray, text: str, origin: Tuple[int, int]) -> None:
        cv2.putText(
            image,
            text,
            origin,
            self.FONT,
            self.font_scale,
            self.text_color,
            self.font_thickness,
            cv2.LINE_8,
        )

    def text_size(self, text: str) -> Tuple[Tuple[int, int], int]:
        (width, height), baseline = cv2.getTextSize(
            text, self.FONT, self.font_scale, self.font_thickness
        )
        return (width, height), baseline
