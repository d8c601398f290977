"""Core data types for the layout canvas."""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Callable, List
from enum import Enum


class Mode(Enum):
    """Exclusive interaction modes of the canvas."""
    VIEW = "view"   # shapes selectable/draggable
    GRAB = "grab"   # canvas pans on drag
    DRAW = "draw"   # next pointer-down starts a draft


class Variant(Enum):
    """Editor variants."""
    BASE = "base"            # general canvas
    OPERATION = "operation"  # operation-settings canvas, one shape per zone


class Cursor(Enum):
    """Cursor style tokens for the host renderer."""
    AUTO = "auto"
    GRAB = "grab"
    GRABBING = "grabbing"
    CROSSHAIR = "crosshair"


@dataclass
class Point:
    x: float = 0.0
    y: float = 0.0

    def as_tuple(self) -> tuple:
        return (self.x, self.y)


@dataclass
class ViewParams:
    """View transformation parameters (scale and pan offset)."""
    scale: float = 1.0
    offx: float = 0.0
    offy: float = 0.0

    def copy(self) -> ViewParams:
        return ViewParams(self.scale, self.offx, self.offy)


@dataclass
class DraftShape:
    """In-progress rectangle in logical coordinates; extents may be signed."""
    x: float
    y: float
    width: float = 0.0
    height: float = 0.0


@dataclass
class PersistedShape:
    """A committed rectangle. Rotation is in degrees about the top-left corner."""
    id: int
    x: float
    y: float
    width: float
    height: float
    rotation: float = 0.0
    points: List[Point] = field(default_factory=list)

    def copy(self) -> PersistedShape:
        return PersistedShape(
            id=self.id, x=self.x, y=self.y,
            width=self.width, height=self.height,
            rotation=self.rotation,
            points=[Point(p.x, p.y) for p in self.points],
        )


@dataclass
class ZoneConfig:
    """Passenger overlay configuration for one zone."""
    title: str
    passenger_count: int = 350
    line_count: int = 10
    circle_size: float = 1.0

    @classmethod
    def from_dict(cls, data: dict) -> ZoneConfig:
        return cls(
            title=str(data["title"]),
            passenger_count=int(data.get("passenger_count", 350)),
            line_count=int(data.get("line_count", 10)),
            circle_size=float(data.get("circle_size", 1)),
        )


@dataclass
class LoadedImage:
    """A decoded image file, not yet fitted to a viewport."""
    path: str
    data_url: str
    width: int
    height: int


@dataclass
class BackgroundImage:
    """Backdrop fitted to the viewport. Position is in logical coordinates."""
    source: str
    data_url: str
    natural_width: int
    natural_height: int
    display_scale: float = 1.0
    x: float = 0.0
    y: float = 0.0

    @property
    def display_width(self) -> float:
        return self.natural_width * self.display_scale

    @property
    def display_height(self) -> float:
        return self.natural_height * self.display_scale


@dataclass
class LoadTask:
    """A task for the async image loader."""
    path: str
    generation: int
    callback: Callable
    timestamp: float = 0.0


@dataclass
class UIEvent:
    """An event to be processed on the main/UI thread."""
    callback: Callable
    args: tuple


@dataclass
class Notice:
    """User-visible warning with an expiry time."""
    message: str
    expires_at: float

