"""
Indoor map XML parser using lxml.

Walks the map document depth-first, builds the Map model and notifies an
IndoorListener at every element boundary.
"""

import math
from pathlib import Path
from typing import List, Optional, Union
from loguru import logger
from lxml import etree

from indoormap.core.config import Config, get_default_config
from indoormap.core.exceptions import MapFileNotFoundError, MapParseError, MapReadError
from indoormap.core.models import (
    AccessPoint,
    Beacon,
    DoorType,
    EarthPosMapPos,
    EarthRegistration,
    FingerprintLocation,
    Floor,
    GroundtruthPoint,
    Map,
    ObstacleType,
    Outline,
    Point2D,
    POIType,
    PointOfInterest,
    Polygon2D,
    PolygonMethod,
    Wall,
    WallDoor,
    WallMaterial,
    WallWindow,
)
from indoormap.geometry.wall_segments import apply_wall_segments
from indoormap.parsers.listener import IndoorListener, MapListener
from indoormap.parsers.xml_attributes import (
    bool_attribute,
    enum_attribute,
    float_attribute,
    int_attribute,
    str_attribute,
)

ROOT_TAG = "map"


class MapParser:
    """
    Parser for indoor map files.

    Use read_map_from_file() to simply obtain a Map, or read_from_file() with
    any IndoorListener implementation for custom logic.

    A parser holds the listener of the running parse, so one instance must not
    be used for overlapping parses. Sequential parses are fine.
    """

    def __init__(self, config: Optional[Config] = None):
        """
        Initialize map parser.

        Args:
            config: Configuration for parser defaults (None = bundled default)
        """
        self.config = config or get_default_config()
        self.default_wall_thickness = float(
            self.config.get_parser_default("wall_thickness", 0.15)
        )
        self.listener: IndoorListener = IndoorListener()

    def read_map_from_file(self, file_path: Union[str, Path]) -> Map:
        """
        Parse a map file into a Map.

        Raises:
            MapFileNotFoundError: If the file doesn't exist
            MapReadError: If the file cannot be read
            MapParseError: If the file is not a well-formed map document
        """
        map_listener = MapListener()
        self.read_from_file(file_path, map_listener)
        return map_listener.map

    def read_map_from_string(self, content: Union[str, bytes]) -> Map:
        """Parse an in-memory map document into a Map."""
        map_listener = MapListener()
        self.read_from_string(content, map_listener)
        return map_listener.map

    def read_from_file(
        self,
        file_path: Union[str, Path],
        listener: Optional[IndoorListener] = None,
    ) -> None:
        """
        Parse a map file and drive the given listener.

        Args:
            file_path: Path to the map XML file
            listener: Listener to notify (None = no-op listener)
        """
        path = Path(file_path)
        logger.info(f"Parsing indoor map file: {path}")

        if not path.is_file():
            msg = f"Indoor map file not found: '{path}'"
            logger.error(msg)
            raise MapFileNotFoundError(msg, {"file_path": str(path)})

        try:
            content = path.read_bytes()
        except OSError as e:
            msg = f"Cannot read indoor map file '{path}': {e}"
            logger.error(msg)
            raise MapReadError(msg, {"file_path": str(path)}) from e

        self._read(content, listener, source=str(path))

    def read_from_string(
        self,
        content: Union[str, bytes],
        listener: Optional[IndoorListener] = None,
    ) -> None:
        """
        Parse an in-memory map document and drive the given listener.

        Args:
            content: XML document (str is encoded as UTF-8)
            listener: Listener to notify (None = no-op listener)
        """
        logger.info("Parsing indoor map from string")
        self._read(content, listener, source="<string>")

    def _read(
        self,
        content: Union[str, bytes],
        listener: Optional[IndoorListener],
        source: str,
    ) -> None:
        if isinstance(content, str):
            # The text is already decoded, so any encoding declaration is stale
            content = content.encode("utf-8")
            xml_parser = etree.XMLParser(encoding="utf-8", resolve_entities=False, no_network=True)
        else:
            xml_parser = etree.XMLParser(resolve_entities=False, no_network=True)
        try:
            root = etree.fromstring(content, parser=xml_parser)
        except etree.XMLSyntaxError as e:
            logger.error(f"XML parser error in {source}: {e}")
            raise MapParseError(f"XML parser error: {e}", {"source": source}) from e

        if root.tag != ROOT_TAG:
            msg = f"Expected <{ROOT_TAG}> root element, found <{root.tag}>"
            logger.error(f"{msg} in {source}")
            raise MapParseError(msg, {"source": source})

        self.listener = listener if listener is not None else IndoorListener()
        try:
            indoor_map = self._process_map(root)
        finally:
            self.listener = IndoorListener()

        logger.success(
            f"Parsed indoor map from {source}: {len(indoor_map.floors)} floors"
        )

    def _process_map(self, x_map: etree._Element) -> Map:
        indoor_map = Map(
            width=float_attribute(x_map, "width"),
            depth=float_attribute(x_map, "depth"),
        )

        self.listener.enter_map(indoor_map)

        x_earth_reg = x_map.find("earthReg")
        if x_earth_reg is not None:
            indoor_map.earth_registration = self._process_earth_registration(x_earth_reg)

        x_floors = x_map.find("floors")
        if x_floors is not None:
            for x_floor in x_floors.iterchildren("floor"):
                floor = self._process_floor(x_floor)
                if floor is not None:
                    indoor_map.floors.append(floor)

        self.listener.leave_map(indoor_map)
        return indoor_map

    def _process_earth_registration(self, x_earth_reg: etree._Element) -> EarthRegistration:
        earth_reg = EarthRegistration()

        self.listener.enter_earth_registration(earth_reg)

        x_correspondences = x_earth_reg.find("correspondences")
        if x_correspondences is not None:
            for x_point in x_correspondences.iterchildren("point"):
                pos = EarthPosMapPos(
                    lat=float_attribute(x_point, "lat"),
                    lon=float_attribute(x_point, "lon"),
                    alt=float_attribute(x_point, "alt"),
                    x=float_attribute(x_point, "mx"),
                    y=float_attribute(x_point, "my"),
                    z=float_attribute(x_point, "mz"),
                )
                self.listener.enter_earth_pos_map_pos(pos)
                self.listener.leave_earth_pos_map_pos(pos)
                earth_reg.correspondences.append(pos)

        self.listener.leave_earth_registration(earth_reg)
        return earth_reg

    def _process_floor(self, x_floor: etree._Element) -> Optional[Floor]:
        floor = Floor(
            at_height=float_attribute(x_floor, "atHeight"),
            height=float_attribute(x_floor, "height"),
            name=str_attribute(x_floor, "name"),
        )

        if not self.listener.enter_floor(floor):
            logger.debug(f"Skipping floor {floor.name!r}")
            return None

        x_outline = x_floor.find("outline")
        if x_outline is not None:
            outline = self._process_outline(x_outline)
            if outline is not None:
                floor.outline = outline

        x_obstacles = x_floor.find("obstacles")
        if x_obstacles is not None:
            self._process_obstacles(x_obstacles, floor)

        x_pois = x_floor.find("pois")
        if x_pois is not None:
            self._process_points_of_interest(x_pois, floor.pois)

        x_gt_points = x_floor.find("gtpoints")
        if x_gt_points is not None:
            self._process_groundtruth_points(x_gt_points, floor)

        x_access_points = x_floor.find("accesspoints")
        if x_access_points is not None:
            self._process_access_points(x_access_points, floor)

        x_beacons = x_floor.find("beacons")
        if x_beacons is not None:
            self._process_beacons(x_beacons, floor)

        x_fingerprints = x_floor.find("fingerprints")
        if x_fingerprints is not None:
            self._process_fingerprints(x_fingerprints, floor)

        logger.debug(
            f"Floor {floor.name!r}: {len(floor.outline.polygons)} polygons, "
            f"{len(floor.walls)} walls, {len(floor.access_points)} access points, "
            f"{len(floor.beacons)} beacons, {len(floor.groundtruth_points)} gt points, "
            f"{len(floor.fingerprint_locations)} fingerprint locations, {len(floor.pois)} pois"
        )

        self.listener.leave_floor(floor)
        return floor

    def _process_outline(self, x_outline: etree._Element) -> Optional[Outline]:
        outline = Outline()

        if not self.listener.enter_outline(outline):
            return None

        for x_polygon in x_outline.iterchildren("polygon"):
            polygon = Polygon2D(
                name=str_attribute(x_polygon, "name"),
                method=enum_attribute(x_polygon, "method", PolygonMethod, PolygonMethod.ADD),
                is_outdoor=bool_attribute(x_polygon, "outdoor"),
            )
            for x_point in x_polygon.iterchildren("point"):
                polygon.points.append(Point2D(
                    x=float_attribute(x_point, "x"),
                    y=float_attribute(x_point, "y"),
                ))
            outline.polygons.append(polygon)

        self.listener.leave_outline(outline)
        return outline

    def _process_points_of_interest(
        self, x_pois: etree._Element, pois: List[PointOfInterest]
    ) -> None:
        self.listener.enter_points_of_interest(pois)

        for x_poi in x_pois.iterchildren("poi"):
            pois.append(PointOfInterest(
                name=str_attribute(x_poi, "name"),
                poi_type=enum_attribute(x_poi, "type", POIType, POIType.ROOM),
                x=float_attribute(x_poi, "x"),
                y=float_attribute(x_poi, "y"),
            ))

        self.listener.leave_points_of_interest(pois)

    def _process_groundtruth_points(self, x_gt_points: etree._Element, floor: Floor) -> None:
        self.listener.enter_groundtruth_points(floor.groundtruth_points)

        for x_gt_point in x_gt_points.iterchildren("gtpoint"):
            height_above_floor = float_attribute(x_gt_point, "z")
            floor.groundtruth_points.append(GroundtruthPoint(
                id=int_attribute(x_gt_point, "id"),
                x=float_attribute(x_gt_point, "x"),
                y=float_attribute(x_gt_point, "y"),
                z=floor.absolute_z(height_above_floor),
                height_above_floor=height_above_floor,
            ))

        self.listener.leave_groundtruth_points(floor.groundtruth_points)

    def _process_access_points(self, x_access_points: etree._Element, floor: Floor) -> None:
        self.listener.enter_access_points(floor.access_points)

        for x_ap in x_access_points.iterchildren("accesspoint"):
            height_above_floor = float_attribute(x_ap, "z")
            floor.access_points.append(AccessPoint(
                name=str_attribute(x_ap, "name"),
                mac_address=str_attribute(x_ap, "mac"),
                x=float_attribute(x_ap, "x"),
                y=float_attribute(x_ap, "y"),
                z=floor.absolute_z(height_above_floor),
                height_above_floor=height_above_floor,
                mdl_txp=float_attribute(x_ap, "mdl_txp"),
                mdl_exp=float_attribute(x_ap, "mdl_exp"),
                mdl_waf=float_attribute(x_ap, "mdl_waf"),
            ))

        self.listener.leave_access_points(floor.access_points)

    def _process_beacons(self, x_beacons: etree._Element, floor: Floor) -> None:
        self.listener.enter_beacons(floor.beacons)

        for x_beacon in x_beacons.iterchildren("beacon"):
            height_above_floor = float_attribute(x_beacon, "z")
            floor.beacons.append(Beacon(
                name=str_attribute(x_beacon, "name"),
                mac_address=str_attribute(x_beacon, "mac"),
                uuid=str_attribute(x_beacon, "uuid"),
                major=str_attribute(x_beacon, "major"),
                minor=str_attribute(x_beacon, "minor"),
                x=float_attribute(x_beacon, "x"),
                y=float_attribute(x_beacon, "y"),
                z=floor.absolute_z(height_above_floor),
                height_above_floor=height_above_floor,
                mdl_txp=float_attribute(x_beacon, "mdl_txp"),
                mdl_exp=float_attribute(x_beacon, "mdl_exp"),
                mdl_waf=float_attribute(x_beacon, "mdl_waf"),
            ))

        self.listener.leave_beacons(floor.beacons)

    def _process_fingerprints(self, x_fingerprints: etree._Element, floor: Floor) -> None:
        self.listener.enter_fingerprint_locations(floor.fingerprint_locations)

        for x_location in x_fingerprints.iterchildren("location"):
            height_above_floor = float_attribute(x_location, "dz")
            floor.fingerprint_locations.append(FingerprintLocation(
                name=str_attribute(x_location, "name"),
                x=float_attribute(x_location, "x"),
                y=float_attribute(x_location, "y"),
                z=floor.absolute_z(height_above_floor),
                height_above_floor=height_above_floor,
            ))

        self.listener.leave_fingerprint_locations(floor.fingerprint_locations)

    def _process_obstacles(self, x_obstacles: etree._Element, floor: Floor) -> None:
        # Other obstacles (line, circle, door, object) are not parsed
        self.listener.enter_walls(floor.walls)

        for x_wall in x_obstacles.iterchildren("wall"):
            wall = self._process_wall(x_wall, floor)
            if wall is not None:
                floor.walls.append(wall)

        self.listener.leave_walls(floor.walls)

    def _process_wall(self, x_wall: etree._Element, floor: Floor) -> Optional[Wall]:
        height = float_attribute(x_wall, "height", math.nan)
        if math.isnan(height) or height == 0.0:
            height = floor.height

        thickness = float_attribute(x_wall, "thickness", math.nan)
        if math.isnan(thickness):
            thickness = self.default_wall_thickness

        wall = Wall(
            material=enum_attribute(x_wall, "material", WallMaterial, WallMaterial.UNKNOWN),
            obstacle_type=enum_attribute(x_wall, "type", ObstacleType, ObstacleType.UNKNOWN),
            x1=float_attribute(x_wall, "x1"),
            y1=float_attribute(x_wall, "y1"),
            x2=float_attribute(x_wall, "x2"),
            y2=float_attribute(x_wall, "y2"),
            thickness=thickness,
            height=height,
        )

        if not self.listener.enter_wall(wall):
            return None

        for x_door in x_wall.iterchildren("door"):
            door = WallDoor(
                door_type=enum_attribute(x_door, "type", DoorType, DoorType.UNKNOWN),
                material=enum_attribute(x_door, "material", WallMaterial, WallMaterial.UNKNOWN),
                at_line_pos=float_attribute(x_door, "x01"),
                width=float_attribute(x_door, "width"),
                height=float_attribute(x_door, "heigth"),  # sic, as written by the map editor
                left_right=bool_attribute(x_door, "lr"),
                in_out=bool_attribute(x_door, "io"),
            )
            if self.listener.enter_wall_door(door):
                self.listener.leave_wall_door(door)
                wall.doors.append(door)

        for x_window in x_wall.iterchildren("window"):
            window = WallWindow(
                material=enum_attribute(x_window, "material", WallMaterial, WallMaterial.UNKNOWN),
                at_line_pos=float_attribute(x_window, "x01"),
                at_height=float_attribute(x_window, "y"),
                width=float_attribute(x_window, "width"),
                height=float_attribute(x_window, "height"),
                in_out=bool_attribute(x_window, "io"),
            )
            if self.listener.enter_wall_window(window):
                self.listener.leave_wall_window(window)
                wall.windows.append(window)

        apply_wall_segments(wall)
        self.listener.leave_wall(wall)
        return wall


def parse_map(file_path: Union[str, Path], config: Optional[Config] = None) -> Map:
    """
    Parse a map file into a Map.

    Args:
        file_path: Path to map XML file
        config: Parser configuration (None = bundled default)

    Returns:
        Fully built Map

    Raises:
        MapFileNotFoundError: If file doesn't exist
        MapParseError: If file is not a well-formed map document
    """
    return MapParser(config).read_map_from_file(file_path)


def parse_map_string(content: Union[str, bytes], config: Optional[Config] = None) -> Map:
    """Parse an in-memory map document into a Map."""
    return MapParser(config).read_map_from_string(content)
