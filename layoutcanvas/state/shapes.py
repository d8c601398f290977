"""Shape state - persisted rectangles, selection and passenger overlay points."""

from __future__ import annotations
import math
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from ..types import DraftShape, PersistedShape, Point, ZoneConfig
from ..math_utils import rotate_point
from ..handles import topmost_at
from ..logging import log


class ShapeError(Exception):
    """Raised for shape operations that cannot be applied."""


def overlay_points(shape: PersistedShape, zone: ZoneConfig) -> List[Point]:
    """Grid of passenger points inside a (possibly rotated) shape.

    The shape is split into line_count columns and ceil(passengers /
    line_count) rows. Each point sits at the center of its cell in the
    unrotated frame, is rotated about the shape's top-left corner and then
    translated to the shape's position. Points are ordered column by
    column, top to bottom within a column.
    """
    if zone.line_count <= 0:
        raise ShapeError(f"line count must be positive, got {zone.line_count}")
    if zone.passenger_count <= 0:
        return []

    per_line = math.ceil(zone.passenger_count / zone.line_count)
    sub_w = shape.width / zone.line_count
    sub_h = shape.height / per_line

    points: List[Point] = []
    for i in range(zone.line_count):
        for j in range(per_line):
            dx = sub_w * (i + 0.5)
            dy = sub_h * (j + 0.5)
            rx, ry = rotate_point(dx, dy, shape.rotation)
            points.append(Point(shape.x + rx, shape.y + ry))
    return points


@dataclass
class ShapeCollection:
    """Owns the list of persisted shapes. Nothing else mutates it."""
    shapes: List[PersistedShape] = field(default_factory=list)
    selected_id: Optional[int] = None
    next_id: int = 0

    def __len__(self) -> int:
        return len(self.shapes)

    def __iter__(self):
        return iter(self.shapes)

    @property
    def selected(self) -> Optional[PersistedShape]:
        if self.selected_id is None:
            return None
        return self.find(self.selected_id)

    def find(self, shape_id: int) -> Optional[PersistedShape]:
        for shape in self.shapes:
            if shape.id == shape_id:
                return shape
        return None

    def get(self, shape_id: int) -> PersistedShape:
        shape = self.find(shape_id)
        if shape is None:
            raise ShapeError(f"unknown shape id {shape_id}")
        return shape

    def index_of(self, shape_id: int) -> int:
        for i, shape in enumerate(self.shapes):
            if shape.id == shape_id:
                return i
        raise ShapeError(f"unknown shape id {shape_id}")

    def add(self, rect: DraftShape) -> PersistedShape:
        """Persist a committed draft. Extents must already be positive."""
        shape = PersistedShape(
            id=self.next_id,
            x=rect.x, y=rect.y,
            width=rect.width, height=rect.height,
        )
        self.next_id += 1
        self.shapes.append(shape)
        log(f"[SHAPES] Added #{shape.id} ({shape.x:.1f}, {shape.y:.1f}) "
            f"{shape.width:.1f}x{shape.height:.1f}")
        return shape

    def hit_test(self, pos: Tuple[float, float]) -> Optional[PersistedShape]:
        """Topmost shape under a logical point."""
        return topmost_at(self.shapes, pos[0], pos[1])

    def select(self, shape_id: Optional[int]) -> None:
        if shape_id is not None and self.find(shape_id) is None:
            raise ShapeError(f"unknown shape id {shape_id}")
        self.selected_id = shape_id

    def start_drag(self, shape_id: int) -> None:
        """Overlay points go stale as soon as the shape starts moving."""
        self.get(shape_id).points = []

    def drag(self, shape_id: int, pos: Tuple[float, float]) -> None:
        """Move a shape. Only x and y change."""
        shape = self.get(shape_id)
        shape.x = pos[0]
        shape.y = pos[1]
        shape.points = []

    def start_transform(self, shape_id: int) -> None:
        self.get(shape_id).points = []

    def transform(
        self,
        shape_id: int,
        x: float,
        y: float,
        width: float,
        height: float,
        rotation: float,
        scale_x: float = 1.0,
        scale_y: float = 1.0
    ) -> PersistedShape:
        """Apply new bounds from a transform handle.

        The handle's scale is read once and folded into width/height, so the
        stored size is always absolute and the scale is back to 1.
        """
        shape = self.get(shape_id)
        shape.x = x
        shape.y = y
        shape.width = width * scale_x
        shape.height = height * scale_y
        shape.rotation = rotation
        shape.points = []
        log(f"[SHAPES] Transformed #{shape_id}: ({x:.1f}, {y:.1f}) "
            f"{shape.width:.1f}x{shape.height:.1f} rot={rotation:.1f}")
        return shape

    def remove(self, index: int) -> PersistedShape:
        """Remove a shape by index. Only the last shape may be removed."""
        if not self.shapes or index != len(self.shapes) - 1:
            raise ShapeError(f"only the last shape can be removed (index {index})")
        shape = self.shapes.pop()
        if self.selected_id == shape.id:
            self.selected_id = None
        log(f"[SHAPES] Removed #{shape.id}")
        return shape

    def draw_lines(self, index: int, zone: ZoneConfig) -> List[Point]:
        """Regenerate the overlay points of the shape at index."""
        if not 0 <= index < len(self.shapes):
            raise ShapeError(f"no shape at index {index}")
        shape = self.shapes[index]
        shape.points = overlay_points(shape, zone)
        log(f"[SHAPES] {zone.title}: {len(shape.points)} points on #{shape.id}")
        return shape.points
