"""
indoormap - Indoor Map Parser

Parses indoor building maps (floors, walls with doors and windows, radio
beacons, access points, ground truth and fingerprint locations) from XML into
a typed model, driving a listener at every element boundary.
"""

__version__ = "0.1.0"

from indoormap.core.models import Map
from indoormap.parsers.map_parser import MapParser, parse_map, parse_map_string
from indoormap.parsers.listener import IndoorListener, MapListener
from indoormap.geometry.wall_segments import generate_wall_segments
from indoormap.rendering.svg_listener import SvgListener

__all__ = [
    "Map",
    "MapParser",
    "parse_map",
    "parse_map_string",
    "IndoorListener",
    "MapListener",
    "generate_wall_segments",
    "SvgListener",
]
