"""
Motion Schema
=============

Pydantic models describing detected motion.
"""

from typing import List, Optional, Tuple

from pydantic import BaseModel, Field


class MotionRegion(BaseModel):
    """Bounding rectangle of one moving area (top-left + size format)"""

    x: int = Field(ge=0, description="Left edge")
    y: int = Field(ge=0, description="Top edge")
    width: int = Field(ge=0, description="Rectangle width")
    height: int = Field(ge=0, description="Rectangle height")

    @property
    def xyxy(self) -> Tuple[int, int, int, int]:
        """Corner format (x1, y1, x2, y2)"""
        return (self.x, self.y, self.x + self.width, self.y + self.height)

    @property
    def area(self) -> int:
        return self.width * self.height


class MotionState(BaseModel):
    """Latest motion check outcome of a channel, drawn on every frame"""

    regions: List[MotionRegion] = Field(
        default_factory=list, description="Regions found by the last successful diff"
    )
    last_update_at: Optional[float] = Field(
        default=None, description="Monotonic instant the regions were computed"
    )
