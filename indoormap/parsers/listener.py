"""
Listener interface for the map parser.

Each enter_* hook is called after the element's attributes are decoded, but
before any child element is processed. When a leave_* hook is called the
element is fully processed (for walls this includes the segments).

Hooks in FilteringHooks return a bool: returning False skips the element.
Its children are not processed, it is not added to its parent and its
leave_* hook is not called. Hooks in ObservingHooks cannot skip anything.
See indoormap.rendering.svg_listener for an example implementation.
"""

from typing import List, Optional

from indoormap.core.models import (
    AccessPoint,
    Beacon,
    EarthPosMapPos,
    EarthRegistration,
    FingerprintLocation,
    Floor,
    GroundtruthPoint,
    Map,
    Outline,
    PointOfInterest,
    Wall,
    WallDoor,
    WallWindow,
)


class FilteringHooks:
    """enter_* hooks that can veto descent into a subtree."""

    def enter_floor(self, floor: Floor) -> bool:
        return True

    def enter_outline(self, outline: Outline) -> bool:
        return True

    def enter_wall(self, wall: Wall) -> bool:
        return True

    def enter_wall_door(self, door: WallDoor) -> bool:
        return True

    def enter_wall_window(self, window: WallWindow) -> bool:
        return True


class ObservingHooks:
    """Informational hooks. Return values are ignored."""

    def enter_map(self, indoor_map: Map) -> None:
        pass

    def leave_map(self, indoor_map: Map) -> None:
        pass

    def enter_earth_registration(self, earth_reg: EarthRegistration) -> None:
        pass

    def leave_earth_registration(self, earth_reg: EarthRegistration) -> None:
        pass

    def enter_earth_pos_map_pos(self, earth_map_pos: EarthPosMapPos) -> None:
        pass

    def leave_earth_pos_map_pos(self, earth_map_pos: EarthPosMapPos) -> None:
        pass

    def leave_floor(self, floor: Floor) -> None:
        pass

    def leave_outline(self, outline: Outline) -> None:
        pass

    def enter_points_of_interest(self, pois: List[PointOfInterest]) -> None:
        pass

    def leave_points_of_interest(self, pois: List[PointOfInterest]) -> None:
        pass

    def enter_groundtruth_points(self, gt_points: List[GroundtruthPoint]) -> None:
        pass

    def leave_groundtruth_points(self, gt_points: List[GroundtruthPoint]) -> None:
        pass

    def enter_access_points(self, access_points: List[AccessPoint]) -> None:
        pass

    def leave_access_points(self, access_points: List[AccessPoint]) -> None:
        pass

    def enter_beacons(self, beacons: List[Beacon]) -> None:
        pass

    def leave_beacons(self, beacons: List[Beacon]) -> None:
        pass

    def enter_fingerprint_locations(self, fp_locations: List[FingerprintLocation]) -> None:
        pass

    def leave_fingerprint_locations(self, fp_locations: List[FingerprintLocation]) -> None:
        pass

    def enter_walls(self, walls: List[Wall]) -> None:
        pass

    def leave_walls(self, walls: List[Wall]) -> None:
        pass

    def leave_wall(self, wall: Wall) -> None:
        pass

    def leave_wall_door(self, door: WallDoor) -> None:
        pass

    def leave_wall_window(self, window: WallWindow) -> None:
        pass


class IndoorListener(FilteringHooks, ObservingHooks):
    """No-op listener. Subclass and override the hooks you need."""
    pass


class MapListener(IndoorListener):
    """Captures the fully built Map."""

    def __init__(self) -> None:
        self.map: Optional[Map] = None

    def leave_map(self, indoor_map: Map) -> None:
        self.map = indoor_map
