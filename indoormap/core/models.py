"""
Core data models for the indoor map.

All models use Pydantic so listeners can inspect and mutate records in place.
"""

import math
from enum import IntEnum
from typing import List, Optional
from pydantic import BaseModel, Field


class PolygonMethod(IntEnum):
    """How an outline polygon contributes to the walkable area."""
    ADD = 0
    REMOVE = 1


class POIType(IntEnum):
    """Kinds of points of interest."""
    ROOM = 0


class WallMaterial(IntEnum):
    """Wall, door and window materials as coded in the map file."""
    UNKNOWN = 0
    CONCRETE = 1
    WOOD = 2
    DRYWALL = 3
    GLASS = 4
    METAL = 5
    METALIZED_GLASS = 6


class DoorType(IntEnum):
    """Door mechanisms."""
    UNKNOWN = 0
    SWING = 1
    DOUBLE_SWING = 2
    SLIDE = 3
    DOUBLE_SLIDE = 4
    REVOLVING = 5


class ObstacleType(IntEnum):
    """Obstacle kinds a wall element can represent."""
    UNKNOWN = 0
    WALL = 1
    WINDOW = 2
    HANDRAIL = 3
    PILLAR = 4


class WallSegmentType(IntEnum):
    """Kind of a piece of a segmented wall."""
    WALL = 0
    DOOR = 1
    WINDOW = 2


class Point2D(BaseModel):
    """2D point (or vector) in floor space."""
    x: float = 0.0
    y: float = 0.0

    def __add__(self, other: "Point2D") -> "Point2D":
        return Point2D(x=self.x + other.x, y=self.y + other.y)

    def __sub__(self, other: "Point2D") -> "Point2D":
        return Point2D(x=self.x - other.x, y=self.y - other.y)

    def __mul__(self, value: float) -> "Point2D":
        return Point2D(x=self.x * value, y=self.y * value)

    def __truediv__(self, value: float) -> "Point2D":
        return Point2D(x=self.x / value, y=self.y / value)

    def __hash__(self) -> int:
        return hash((round(self.x, 6), round(self.y, 6)))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Point2D):
            return False
        return abs(self.x - other.x) < 1e-6 and abs(self.y - other.y) < 1e-6

    def orthogonal(self) -> "Point2D":
        """Rotate by 90 degrees counter-clockwise."""
        return Point2D(x=-self.y, y=self.x)

    def length(self) -> float:
        """Euclidean norm."""
        return math.sqrt(self.x * self.x + self.y * self.y)

    def normalized(self) -> "Point2D":
        """
        Unit vector in the same direction.

        A zero-length vector normalizes to (0, 0).
        """
        length = self.length()
        if length == 0.0:
            return Point2D(x=0.0, y=0.0)
        return self / length

    def distance_to(self, other: "Point2D") -> float:
        """Calculate Euclidean distance to another point."""
        return (self - other).length()

    @staticmethod
    def from_polar(center: "Point2D", radius: float, angle: float) -> "Point2D":
        """Point at `radius` from `center` in direction `angle` (radians)."""
        return Point2D(
            x=center.x + radius * math.cos(angle),
            y=center.y + radius * math.sin(angle),
        )

    def __str__(self) -> str:
        return f"({self.x}; {self.y})"


class Polygon2D(BaseModel):
    """
    Part of a floor outline.

    REMOVE polygons cut non-walkable areas out of the polygons before them.
    """
    name: str = ""
    method: PolygonMethod = PolygonMethod.ADD
    is_outdoor: bool = False  # e.g. a yard
    points: List[Point2D] = Field(default_factory=list)


class Outline(BaseModel):
    """Walkable area of a floor, made of ordered polygons."""
    polygons: List[Polygon2D] = Field(default_factory=list)


class PointOfInterest(BaseModel):
    """Named marker, typically a room label."""
    name: str = ""
    poi_type: POIType = POIType.ROOM
    x: float = 0.0
    y: float = 0.0


class GroundtruthPoint(BaseModel):
    """
    Orientation point for reference walks.

    A ground truth path is defined as a list of point ids.
    """
    id: int = 0
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0
    height_above_floor: float = 0.0


class FingerprintLocation(BaseModel):
    """Location where fingerprints are recorded (not the fingerprints themselves)."""
    name: str = ""
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0
    height_above_floor: float = 0.0


class AccessPoint(BaseModel):
    """
    WiFi access point.

    Model parameters follow the log-distance path loss model:
    mdl_txp is the sending power, mdl_exp the path loss exponent and
    mdl_waf the attenuation per ceiling/floor.
    """
    name: str = ""
    mac_address: str = ""
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0
    height_above_floor: float = 0.0
    mdl_txp: float = 0.0
    mdl_exp: float = 0.0
    mdl_waf: float = 0.0


class Beacon(AccessPoint):
    """Bluetooth beacon."""
    uuid: str = ""
    major: str = ""
    minor: str = ""


class WallElement(BaseModel):
    """Base for doors and windows positioned relative to a wall."""
    material: WallMaterial = WallMaterial.UNKNOWN
    width: float = 0.0
    height: float = 0.0
    at_line_pos: float = 0.0  # 0 at the wall's start point, 1 at its end


class WallDoor(WallElement):
    """Door on a wall."""
    door_type: DoorType = DoorType.UNKNOWN
    left_right: bool = False  # True if the hinge is on the right
    in_out: bool = False  # opening direction


class WallWindow(WallElement):
    """Window on a wall."""
    at_height: float = 0.0  # sill height relative to the wall
    in_out: bool = False


class WallSegment(BaseModel):
    """Piece of a wall that is uniformly wall, door or window."""
    segment_type: WallSegmentType
    list_index: int = -1  # index into Wall.doors / Wall.windows, -1 for plain wall
    start: Point2D = Field(default_factory=Point2D)
    end: Point2D = Field(default_factory=Point2D)

    def length(self) -> float:
        return self.start.distance_to(self.end)

    def __str__(self) -> str:
        return f"WallSegment({self.segment_type.name}, {self.start} -> {self.end})"


class Wall(BaseModel):
    """Wall as a thick 2D line with optional doors and windows."""
    material: WallMaterial = WallMaterial.UNKNOWN
    obstacle_type: ObstacleType = ObstacleType.UNKNOWN

    x1: float = 0.0
    y1: float = 0.0
    x2: float = 0.0
    y2: float = 0.0

    thickness: float = 0.15
    height: float = 0.0  # falls back to the floor height when parsed as 0 or NaN

    doors: List[WallDoor] = Field(default_factory=list)
    windows: List[WallWindow] = Field(default_factory=list)

    # Filled by generate_wall_segments() once doors and windows are known
    segments: List[WallSegment] = Field(default_factory=list)

    def start(self) -> Point2D:
        return Point2D(x=self.x1, y=self.y1)

    def end(self) -> Point2D:
        return Point2D(x=self.x2, y=self.y2)

    def length(self) -> float:
        """Calculate wall length."""
        return self.start().distance_to(self.end())

    def __str__(self) -> str:
        return (f"Wall({self.start()} -> {self.end()}, doors={len(self.doors)}, "
                f"windows={len(self.windows)})")


class Floor(BaseModel):
    """Single floor of the building."""
    at_height: float = 0.0  # z of the ground
    height: float = 0.0  # also the default height of every wall
    name: str = ""

    outline: Outline = Field(default_factory=Outline)
    walls: List[Wall] = Field(default_factory=list)

    access_points: List[AccessPoint] = Field(default_factory=list)
    beacons: List[Beacon] = Field(default_factory=list)
    groundtruth_points: List[GroundtruthPoint] = Field(default_factory=list)
    fingerprint_locations: List[FingerprintLocation] = Field(default_factory=list)
    pois: List[PointOfInterest] = Field(default_factory=list)

    def absolute_z(self, height_above_floor: float) -> float:
        """Absolute z of something placed `height_above_floor` over this floor."""
        return self.at_height + height_above_floor

    def groundtruth_point_by_id(self, point_id: int) -> Optional[GroundtruthPoint]:
        """Get the first ground truth point with the given id."""
        for point in self.groundtruth_points:
            if point.id == point_id:
                return point
        return None

    def __str__(self) -> str:
        return f"Floor({self.name!r}, at={self.at_height}, walls={len(self.walls)})"


class EarthPosMapPos(BaseModel):
    """Correspondence between an earth position and a map position."""
    lat: float = 0.0
    lon: float = 0.0
    alt: float = 0.0

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0


class EarthRegistration(BaseModel):
    """Correspondences used to transform map coordinates to GPS coordinates."""
    correspondences: List[EarthPosMapPos] = Field(default_factory=list)


class Map(BaseModel):
    """Root object of every map file."""
    width: float = 0.0
    depth: float = 0.0

    earth_registration: EarthRegistration = Field(default_factory=EarthRegistration)
    floors: List[Floor] = Field(default_factory=list)

    def floor_by_name(self, name: str) -> Optional[Floor]:
        """Get the first floor with the given name."""
        for floor in self.floors:
            if floor.name == name:
                return floor
        return None
