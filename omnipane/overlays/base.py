"""
Overlay Text Provider
=====================

Base class for components that produce one overlay line.
"""

import threading
from abc import ABC, abstractmethod


class OverlayTextProvider(ABC):
    """
    Produces one line of overlay text on demand.

    get_text() is called from the render thread once per frame and must not
    block. Providers that refresh their data in the background override
    start_service() / stop_service(); the defaults do nothing.
    """

    name: str = "overlay"

    @abstractmethod
    def get_text(self) -> str:
        ...

    def start_service(self, cancel_event: threading.Event) -> None:
        """Start background refresh; runs until `cancel_event` is set."""
        return None

    def stop_service(self, timeout: float = 5.0) -> None:
        """Stop background refresh and wait up to `timeout` seconds."""
        return None
