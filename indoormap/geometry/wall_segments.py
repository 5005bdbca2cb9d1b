"""
Wall segmentation.

Converts a wall with relatively positioned doors and windows into an ordered
list of wall, door and window segments with absolute coordinates.
"""

from typing import List, Tuple

from indoormap.core.models import Point2D, Wall, WallSegment, WallSegmentType


def _ordered(a: Point2D, b: Point2D) -> Tuple[Point2D, Point2D]:
    """Order two points by (x, y) ascending."""
    if (b.x, b.y) < (a.x, a.y):
        return b, a
    return a, b


def _door_segments(wall: Wall) -> List[WallSegment]:
    start = wall.start()
    direction = wall.end() - start
    unit = direction.normalized()

    segments = []
    for i, door in enumerate(wall.doors):
        # The door opens from its position towards the hinge side
        door_start = start + direction * door.at_line_pos
        door_end = door_start + unit * (-door.width if door.left_right else door.width)
        door_start, door_end = _ordered(door_start, door_end)
        segments.append(WallSegment(
            segment_type=WallSegmentType.DOOR,
            list_index=i,
            start=door_start,
            end=door_end,
        ))
    return segments


def _window_segments(wall: Wall) -> List[WallSegment]:
    start = wall.start()
    direction = wall.end() - start
    unit = direction.normalized()

    segments = []
    for i, window in enumerate(wall.windows):
        center = start + direction * window.at_line_pos
        half = unit * (window.width / 2.0)
        window_start, window_end = _ordered(center - half, center + half)
        segments.append(WallSegment(
            segment_type=WallSegmentType.WINDOW,
            list_index=i,
            start=window_start,
            end=window_end,
        ))
    return segments


def _filler(start: Point2D, end: Point2D) -> WallSegment:
    return WallSegment(
        segment_type=WallSegmentType.WALL,
        start=start.model_copy(),
        end=end.model_copy(),
    )


def generate_wall_segments(wall: Wall) -> List[WallSegment]:
    """
    Split a wall into wall, door and window segments.

    Segments run from the wall endpoint with the smaller (x, y) to the other
    one and consecutive segments share their endpoints. Doors and windows
    must not overlap; this is not checked.

    Cuts starting at the same point keep declaration order, doors first.

    Args:
        wall: Wall with its doors and windows

    Returns:
        Ordered list of segments covering the whole wall
    """
    wall_start, wall_end = _ordered(wall.start(), wall.end())

    if not wall.doors and not wall.windows:
        return [_filler(wall_start, wall_end)]

    cuts = _door_segments(wall) + _window_segments(wall)
    # sorted() is stable
    cuts = sorted(cuts, key=lambda seg: (seg.start.x, seg.start.y))

    segments = [_filler(wall_start, cuts[0].start)]
    for i, cut in enumerate(cuts):
        segments.append(cut)
        if i < len(cuts) - 1:
            segments.append(_filler(cut.end, cuts[i + 1].start))
        else:
            segments.append(_filler(cut.end, wall_end))

    return segments


def apply_wall_segments(wall: Wall) -> Wall:
    """Replace `wall.segments` with freshly generated segments."""
    wall.segments = generate_wall_segments(wall)
    return wall
