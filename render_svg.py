#!/usr/bin/env python
"""
Render an indoor map XML file as SVG.

Usage:
    python render_svg.py input.xml output.svg
    python render_svg.py input.xml  # outputs to input.svg
"""

import sys
from pathlib import Path

from indoormap.core.exceptions import MapReadError
from indoormap.core.logging_config import setup_logging
from indoormap.parsers.listener import MapListener
from indoormap.parsers.map_parser import MapParser
from indoormap.rendering.svg_listener import SvgListener


class _RenderAndCapture(SvgListener):
    """SvgListener that also keeps the parsed map for the summary."""

    def __init__(self):
        super().__init__()
        self.capture = MapListener()

    def leave_map(self, indoor_map):
        super().leave_map(indoor_map)
        self.capture.leave_map(indoor_map)


def main():
    if len(sys.argv) < 2:
        print("Usage: python render_svg.py input.xml [output.svg]")
        sys.exit(1)

    map_file = sys.argv[1]
    output_file = sys.argv[2] if len(sys.argv) >= 3 else str(Path(map_file).with_suffix('.svg'))

    setup_logging(level="WARNING")

    print("=" * 60)
    print("indoormap - Map to SVG")
    print("=" * 60)
    print(f"Input:  {map_file}")
    print(f"Output: {output_file}")
    print()

    listener = _RenderAndCapture()
    try:
        MapParser().read_from_file(map_file, listener)
    except MapReadError as e:
        print(f"Error: {e.message}")
        sys.exit(1)

    indoor_map = listener.capture.map
    print(f"Map: {indoor_map.width} x {indoor_map.depth}, "
          f"{len(indoor_map.earth_registration.correspondences)} earth correspondences")
    for floor in indoor_map.floors:
        segments = sum(len(wall.segments) for wall in floor.walls)
        print(f"  [OK] {floor.name or '<unnamed>'}: {len(floor.walls)} walls "
              f"({segments} segments), {len(floor.access_points)} APs, "
              f"{len(floor.beacons)} beacons, {len(floor.pois)} POIs")

    listener.save_svg_to_file(output_file)
    print()
    print(f"Written: {output_file}")


if __name__ == "__main__":
    main()
