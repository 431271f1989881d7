"""
Display Window
==============

Full-screen OpenCV window the viewer presents frames on.
"""

import cv2
import numpy as np

from omnipane.logging_utils import get_component_logger

logger = get_component_logger(__name__, "display")


class DisplaySurfaceError(RuntimeError):
    """Window creation or presentation failed."""
    pass


class DisplayWindow:
    """
    Full-screen highgui window.

    Args:
        window_name: Window title
        quit_key: Key that stops the viewer

    Raises:
        DisplaySurfaceError: If the window cannot be created or made full-screen
    """

    def __init__(self, window_name: str = "Main Camera", quit_key: str = "q"):
        self.window_name = window_name
        self.quit_key = quit_key

        try:
            cv2.namedWindow(window_name, cv2.WND_PROP_FULLSCREEN)
            cv2.setWindowProperty(
                window_name, cv2.WND_PROP_FULLSCREEN, cv2.WINDOW_FULLSCREEN
            )
        except cv2.error as e:
            self._destroy()
            raise DisplaySurfaceError(f"Failed to create window {window_name!r}: {e}") from e

        logger.info(
            f"Display window {window_name!r} created",
            extra={"event": "window_created"},
        )

    def display_frame(self, image: np.ndarray) -> None:
        try:
            cv2.imshow(self.window_name, image)
        except cv2.error as e:
            raise DisplaySurfaceError(f"Failed to present frame: {e}") from e

    def stop_key_pressed(self, timeout: float) -> bool:
        """
        Wait up to `timeout` seconds for a key press.

        highgui needs at least 1 ms to process window events, so the wait
        never goes below that.
        """
        wait_ms = max(int(timeout * 1000), 1)
        key = cv2.waitKey(wait_ms)
        return key != -1 and (key & 0xFF) == ord(self.quit_key)

    def close(self) -> None:
        self._destroy()
        logger.info("Display window closed", extra={"event": "window_closed"})

    def _destroy(self) -> None:
        try:
            cv2.destroyWindow(self.window_name)
        except cv2.error:
            # Window was never created or is already gone
            pass
