"""
SVG rendering of indoor maps.

SvgListener is an IndoorListener that draws outlines, wall segments, access
points, ground truth points and points of interest while the map is parsed.
The map's y axis points up, SVG's points down: y is negated when drawing and
the whole drawing is translated by the maximum y afterwards.
"""

import copy
import math
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple, Union
from loguru import logger
from lxml import etree

from indoormap.core.config import Config, get_default_config
from indoormap.core.models import (
    AccessPoint,
    Floor,
    GroundtruthPoint,
    Map,
    Outline,
    Point2D,
    PointOfInterest,
    PolygonMethod,
    Wall,
    WallMaterial,
    WallSegment,
    WallSegmentType,
)
from indoormap.parsers.listener import IndoorListener

SVG_NS = "http://www.w3.org/2000/svg"


def _fmt(value: float) -> str:
    """Compact number formatting for SVG attributes."""
    text = f"{float(value) + 0.0:.6f}".rstrip("0").rstrip(".")
    return "0" if text == "-0" else text


def _hex_color(rgb: Tuple[int, int, int]) -> str:
    return "#%02X%02X%02X" % rgb


def _tag(name: str) -> str:
    return f"{{{SVG_NS}}}{name}"


class SvgListener(IndoorListener):
    """Renders a map into an SVG document while it is parsed."""

    def __init__(self, config: Optional[Config] = None):
        """
        Initialize SVG listener.

        Args:
            config: Colors and drawing options (None = bundled default)
        """
        self.config = config or get_default_config()
        self.max_x = 0.0
        self.max_y = 0.0

        self.color_map: Dict[WallMaterial, Tuple[int, int, int]] = {
            material: self.config.get_material_color(material) for material in WallMaterial
        }

        self.marker_radius = float(self.config.get_render_option("marker_radius", 0.125))
        self.label_offset = float(self.config.get_render_option("label_offset", 0.25))
        self.font = self.config.get_render_option("font", "font: 0.5px sans-serif;")
        self.door_leaf_ratio = float(self.config.get_render_option("door_leaf_ratio", 0.9))
        self.opening_stroke_reduction = float(
            self.config.get_render_option("opening_stroke_reduction", 0.1)
        )

        self._content = etree.Element(_tag("g"), nsmap={None: SVG_NS})
        self._groups: List[etree._Element] = [self._content]

    def set_material_color(self, material: WallMaterial, r: int, g: int, b: int) -> None:
        """Set the stroke color of walls made of `material`. Channels are clamped to 0-255."""
        self.color_map[material] = (
            max(0, min(255, r)),
            max(0, min(255, g)),
            max(0, min(255, b)),
        )

    # Drawing helpers

    @property
    def _group(self) -> etree._Element:
        return self._groups[-1]

    def _add(self, tag: str, text: Optional[str] = None, **attrs: str) -> etree._Element:
        element = etree.SubElement(
            self._group,
            _tag(tag),
            attrib={k.replace("_", "-"): v for k, v in attrs.items()},
        )
        if text is not None:
            element.text = text
        return element

    def _track(self, point: Point2D) -> None:
        self.max_x = max(self.max_x, point.x)
        self.max_y = max(self.max_y, point.y)

    def _path_str(self, points: Sequence[Point2D], closed: bool = False) -> str:
        if len(points) < 2:
            return ""

        parts = []
        for i, point in enumerate(points):
            self._track(point)
            command = "M" if i == 0 else "L"
            parts.append(f"{command}{_fmt(point.x)} {_fmt(-point.y)}")

        if closed:
            parts.append("Z")
        return " ".join(parts)

    def _arc_str(self, center: Point2D, radius: float, start_angle: float, end_angle: float) -> str:
        start = Point2D.from_polar(center, radius, start_angle)
        end = Point2D.from_polar(center, radius, end_angle)
        self._track(start)
        self._track(end)

        large_arc = "0" if end_angle - start_angle <= math.pi else "1"
        return (f"M {_fmt(start.x)} {_fmt(-start.y)} "
                f"A {_fmt(radius)} {_fmt(radius)} 0 {large_arc} 0 "
                f"{_fmt(end.x)} {_fmt(-end.y)}")

    def _marker(self, x: float, y: float, fill: str, label: str) -> None:
        self._track(Point2D(x=x, y=y))
        self._add("circle", cx=_fmt(x), cy=_fmt(-y), r=_fmt(self.marker_radius),
                  fill=fill, stroke="none")
        self._add("text", label, x=_fmt(x + self.label_offset), y=_fmt(-y),
                  style=self.font, text_anchor="start")

    # Output

    def svg_string(self) -> str:
        """Get the SVG document for everything rendered so far."""
        svg = etree.Element(
            _tag("svg"),
            nsmap={None: SVG_NS},
            viewBox=f"0 0 {_fmt(self.max_x)} {_fmt(self.max_y)}",
        )
        translated = etree.SubElement(
            svg, _tag("g"), transform=f"translate(0, {_fmt(self.max_y)})"
        )
        for child in self._content:
            translated.append(copy.deepcopy(child))

        return etree.tostring(svg, pretty_print=True, encoding="unicode")

    def save_svg_to_file(self, file_path: Union[str, Path]) -> None:
        """Write the SVG document to a file."""
        path = Path(file_path)
        path.write_text(self.svg_string(), encoding="utf-8")
        logger.info(f"Wrote SVG: {path}")

    # Listener hooks

    def enter_floor(self, floor: Floor) -> bool:
        group = etree.SubElement(self._group, _tag("g"), id=f"floor_{floor.name}")
        self._groups.append(group)
        return True

    def leave_floor(self, floor: Floor) -> None:
        self._groups.pop()

    def leave_outline(self, outline: Outline) -> None:
        for polygon in outline.polygons:
            if polygon.method == PolygonMethod.REMOVE:
                color = self.config.get_outline_color("remove", "#FFFFFF")
            elif polygon.is_outdoor:
                color = self.config.get_outline_color("outdoor", "#4E9A06")
            else:
                color = self.config.get_outline_color("add", "#C8C8C8")

            self._add("path", d=self._path_str(polygon.points), stroke="none", fill=color)

    def leave_wall(self, wall: Wall) -> None:
        opening_width = _fmt(wall.thickness - self.opening_stroke_reduction)

        for seg in wall.segments:
            if seg.segment_type == WallSegmentType.WALL:
                self._add("path", d=self._path_str([seg.start, seg.end]),
                          stroke=_hex_color(self.color_map[wall.material]),
                          stroke_width=_fmt(wall.thickness), fill="none")
            elif seg.segment_type == WallSegmentType.WINDOW:
                self._add("path", d=self._path_str([seg.start, seg.end]),
                          stroke="#0000FF", stroke_width=opening_width,
                          stroke_dasharray="0.2, 0.1", fill="none")
            elif seg.segment_type == WallSegmentType.DOOR:
                self._draw_door(wall, seg, opening_width)

    def _draw_door(self, wall: Wall, seg: WallSegment, stroke_width: str) -> None:
        # TODO: draw sliding and revolving doors differently
        door = wall.doors[seg.list_index]

        open_dir = (seg.end - seg.start).orthogonal().normalized()
        if door.in_out:
            open_dir = open_dir * -1

        hinge = seg.end if door.left_right else seg.start
        lock = seg.start if door.left_right else seg.end
        leaf = hinge + open_dir * door.width

        hinge_to_lock = lock - hinge
        start_angle = math.atan2(hinge_to_lock.y, hinge_to_lock.x)
        end_angle = math.atan2(open_dir.y, open_dir.x)

        if door.in_out:
            start_angle, end_angle = end_angle, start_angle
        if door.left_right:
            start_angle, end_angle = end_angle, start_angle

        self._add("path", d=self._path_str([seg.start, seg.end]),
                  stroke="#000000", stroke_width=stroke_width,
                  stroke_dasharray="0.2, 0.1", fill="none")
        self._add("path", d=self._arc_str(hinge, self.door_leaf_ratio * door.width,
                                          start_angle, end_angle),
                  stroke="#000000", stroke_width=stroke_width, fill="none")
        self._add("path", d=self._path_str([hinge, leaf]),
                  stroke="#000000", stroke_width=stroke_width, fill="none")

    def leave_groundtruth_points(self, gt_points: List[GroundtruthPoint]) -> None:
        for point in gt_points:
            self._marker(point.x, point.y, "#000000", str(point.id))

    def leave_access_points(self, access_points: List[AccessPoint]) -> None:
        for ap in access_points:
            self._marker(ap.x, ap.y, "#FF0000", f"{ap.name} ({ap.mac_address})")

    def leave_points_of_interest(self, pois: List[PointOfInterest]) -> None:
        for poi in pois:
            self._track(Point2D(x=poi.x, y=poi.y))
            self._add("text", poi.name, x=_fmt(poi.x), y=_fmt(-poi.y - self.label_offset),
                      style=self.font, text_anchor="middle")

    def leave_map(self, indoor_map: Map) -> None:
        logger.debug(f"Rendered map: viewBox 0 0 {_fmt(self.max_x)} {_fmt(self.max_y)}")
