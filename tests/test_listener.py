"""Tests for listener hook sequencing and vetoes."""

import pytest

from indoormap.core.models import WallSegmentType
from indoormap.parsers.listener import IndoorListener, MapListener
from indoormap.parsers.map_parser import MapParser


class RecordingListener(IndoorListener):
    """Records every hook call as (hook name, label)."""

    def __init__(self):
        self.events = []

    def enter_map(self, indoor_map):
        self.events.append(("enter_map", None))

    def leave_map(self, indoor_map):
        self.events.append(("leave_map", len(indoor_map.floors)))

    def enter_earth_registration(self, earth_reg):
        self.events.append(("enter_earth_registration", None))

    def leave_earth_registration(self, earth_reg):
        self.events.append(("leave_earth_registration", len(earth_reg.correspondences)))

    def enter_earth_pos_map_pos(self, earth_map_pos):
        self.events.append(("enter_earth_pos_map_pos", earth_map_pos.lat))

    def enter_floor(self, floor):
        self.events.append(("enter_floor", floor.name))
        return True

    def leave_floor(self, floor):
        self.events.append(("leave_floor", floor.name))

    def enter_outline(self, outline):
        self.events.append(("enter_outline", len(outline.polygons)))
        return True

    def leave_outline(self, outline):
        self.events.append(("leave_outline", len(outline.polygons)))

    def enter_walls(self, walls):
        self.events.append(("enter_walls", len(walls)))

    def leave_walls(self, walls):
        self.events.append(("leave_walls", len(walls)))

    def enter_wall(self, wall):
        self.events.append(("enter_wall", (wall.x1, len(wall.doors), len(wall.segments))))
        return True

    def leave_wall(self, wall):
        self.events.append(("leave_wall", (wall.x1, len(wall.doors), len(wall.segments))))

    def enter_wall_door(self, door):
        self.events.append(("enter_wall_door", door.at_line_pos))
        return True

    def leave_wall_door(self, door):
        self.events.append(("leave_wall_door", door.at_line_pos))

    def enter_wall_window(self, window):
        self.events.append(("enter_wall_window", window.at_line_pos))
        return True

    def leave_wall_window(self, window):
        self.events.append(("leave_wall_window", window.at_line_pos))

    def enter_groundtruth_points(self, gt_points):
        self.events.append(("enter_groundtruth_points", len(gt_points)))

    def leave_groundtruth_points(self, gt_points):
        self.events.append(("leave_groundtruth_points", len(gt_points)))

    def leave_earth_pos_map_pos(self, earth_map_pos):
        self.events.append(("leave_earth_pos_map_pos", earth_map_pos.lat))

    def enter_points_of_interest(self, pois):
        self.events.append(("enter_points_of_interest", len(pois)))

    def leave_points_of_interest(self, pois):
        self.events.append(("leave_points_of_interest", len(pois)))

    def enter_access_points(self, access_points):
        self.events.append(("enter_access_points", len(access_points)))

    def leave_access_points(self, access_points):
        self.events.append(("leave_access_points", len(access_points)))

    def enter_beacons(self, beacons):
        self.events.append(("enter_beacons", len(beacons)))

    def leave_beacons(self, beacons):
        self.events.append(("leave_beacons", len(beacons)))

    def enter_fingerprint_locations(self, fp_locations):
        self.events.append(("enter_fingerprint_locations", len(fp_locations)))

    def leave_fingerprint_locations(self, fp_locations):
        self.events.append(("leave_fingerprint_locations", len(fp_locations)))

    def names(self):
        return [name for name, _ in self.events]


def test_hooks_are_paired_and_nested(sample_map_path):
    listener = RecordingListener()
    MapParser().read_from_file(sample_map_path, listener)

    names = listener.names()
    assert names[0] == "enter_map"
    assert names[-1] == "leave_map"
    assert listener.events[-1] == ("leave_map", 2)
    assert names.count("enter_floor") == names.count("leave_floor") == 2
    assert names.count("enter_wall") == names.count("leave_wall") == 4
    assert ("leave_earth_registration", 2) in listener.events

    first_leave_floor = names.index("leave_floor")
    assert names.index("enter_outline") < names.index("leave_outline") < names.index("enter_walls")
    assert names.index("leave_walls") < names.index("enter_groundtruth_points") < first_leave_floor


def test_enter_hooks_see_attributes_but_no_children(sample_map_path):
    listener = RecordingListener()
    MapParser().read_from_file(sample_map_path, listener)

    assert ("enter_outline", 0) in listener.events
    assert ("leave_outline", 3) in listener.events
    assert ("enter_groundtruth_points", 0) in listener.events
    assert ("leave_groundtruth_points", 2) in listener.events
    # door wall: no doors and no segments on enter, all of them on leave
    assert ("enter_wall", (0.0, 0, 0)) in listener.events
    assert ("leave_wall", (0.0, 1, 3)) in listener.events


def test_container_hooks_see_empty_then_full_lists(sample_map_path):
    listener = RecordingListener()
    MapParser().read_from_file(sample_map_path, listener)
    events = listener.events

    # ground floor: one poi, one access point, one beacon, one fingerprint location
    for hook in ("points_of_interest", "access_points", "beacons", "fingerprint_locations"):
        enter = events.index((f"enter_{hook}", 0))
        leave = events.index((f"leave_{hook}", 1))
        assert enter < leave

    # first floor: access points only
    assert events.count(("enter_access_points", 0)) == 2
    assert events.count(("leave_access_points", 1)) == 2
    assert listener.names().count("enter_beacons") == 1


def test_earth_pos_hooks_are_paired_in_document_order(sample_map_path):
    listener = RecordingListener()
    MapParser().read_from_file(sample_map_path, listener)
    earth_events = [e for e in listener.events if "earth" in e[0]]

    assert earth_events == [
        ("enter_earth_registration", None),
        ("enter_earth_pos_map_pos", 49.1),
        ("leave_earth_pos_map_pos", 49.1),
        ("enter_earth_pos_map_pos", 49.2),
        ("leave_earth_pos_map_pos", 49.2),
        ("leave_earth_registration", 2),
    ]


def test_door_hooks_fire_between_wall_hooks(sample_map_path):
    listener = RecordingListener()
    MapParser().read_from_file(sample_map_path, listener)
    names = listener.names()

    enter_wall = names.index("enter_wall")
    leave_wall = names.index("leave_wall")
    assert enter_wall < names.index("enter_wall_door") < names.index("leave_wall_door") < leave_wall


class VetoListener(RecordingListener):
    def __init__(self, floors=(), walls=(), doors=(), windows=(), outline=False):
        super().__init__()
        self.skip_floors = floors
        self.skip_walls = walls
        self.skip_doors = doors
        self.skip_windows = windows
        self.skip_outline = outline

    def enter_floor(self, floor):
        super().enter_floor(floor)
        return floor.name not in self.skip_floors

    def enter_outline(self, outline):
        super().enter_outline(outline)
        return not self.skip_outline

    def enter_wall(self, wall):
        super().enter_wall(wall)
        return wall.x1 not in self.skip_walls

    def enter_wall_door(self, door):
        super().enter_wall_door(door)
        return door.at_line_pos not in self.skip_doors

    def enter_wall_window(self, window):
        super().enter_wall_window(window)
        return window.at_line_pos not in self.skip_windows


def test_vetoed_floor_is_skipped(sample_map_path):
    listener = VetoListener(floors=("ground",))
    capture = MapListener()
    parser = MapParser()

    parser.read_from_file(sample_map_path, listener)
    parser.read_from_file(sample_map_path, capture)

    assert ("leave_floor", "ground") not in listener.events
    assert ("leave_floor", "first") in listener.events
    assert listener.events[-1] == ("leave_map", 1)
    # nothing below the vetoed floor was visited
    assert listener.names().count("enter_wall") == 1
    assert len(capture.map.floors) == 2


def test_vetoed_outline_leaves_empty_outline():
    class Skip(VetoListener):
        def leave_map(self, indoor_map):
            super().leave_map(indoor_map)
            self.map = indoor_map

    xml = ("<map><floors><floor><outline><polygon><point x='1'/></polygon></outline>"
           "</floor></floors></map>")
    listener = Skip(outline=True)
    MapParser().read_from_string(xml, listener)

    assert listener.map.floors[0].outline.polygons == []
    assert "leave_outline" not in listener.names()


def test_vetoed_wall_is_skipped(sample_map_path):
    class Capture(VetoListener):
        def leave_map(self, indoor_map):
            super().leave_map(indoor_map)
            self.map = indoor_map

    listener = Capture(walls=(20.0,))
    MapParser().read_from_file(sample_map_path, listener)

    walls = listener.map.floors[0].walls
    assert len(walls) == 2
    assert all(wall.x1 != 20.0 for wall in walls)
    assert ("leave_wall", (20.0, 0, 0)) not in listener.events
    # windows of the vetoed wall were never decoded
    assert "enter_wall_window" not in listener.names()


def test_vetoed_door_is_not_cut_out(sample_map_path):
    class Capture(VetoListener):
        def leave_map(self, indoor_map):
            super().leave_map(indoor_map)
            self.map = indoor_map

    listener = Capture(doors=(0.5,), windows=(0.25,))
    MapParser().read_from_file(sample_map_path, listener)

    door_wall, window_wall = listener.map.floors[0].walls[:2]
    assert door_wall.doors == []
    assert window_wall.windows == []
    assert [s.segment_type for s in door_wall.segments] == [WallSegmentType.WALL]
    assert [s.segment_type for s in window_wall.segments] == [WallSegmentType.WALL]
    assert "leave_wall_door" not in listener.names()
    assert "leave_wall_window" not in listener.names()


def test_listener_can_mutate_records():
    class Rename(IndoorListener):
        def enter_floor(self, floor):
            floor.name = floor.name.upper()
            return True

        def enter_wall(self, wall):
            wall.x2 = 4.0
            return True

        def leave_map(self, indoor_map):
            self.map = indoor_map

    xml = "<map><floors><floor name='eg'><obstacles><wall x2='10'/></obstacles></floor></floors></map>"
    listener = Rename()
    MapParser().read_from_string(xml, listener)

    floor = listener.map.floors[0]
    assert floor.name == "EG"
    assert floor.walls[0].segments[0].end.x == pytest.approx(4.0)


def test_listener_exception_propagates():
    class Boom(IndoorListener):
        def enter_floor(self, floor):
            raise RuntimeError("boom")

    with pytest.raises(RuntimeError):
        MapParser().read_from_string("<map><floors><floor/></floors></map>", Boom())


def test_default_listener_hooks_are_noops():
    listener = IndoorListener()

    assert listener.enter_floor(None) is True
    assert listener.enter_outline(None) is True
    assert listener.enter_wall(None) is True
    assert listener.enter_wall_door(None) is True
    assert listener.enter_wall_window(None) is True
    assert listener.enter_map(None) is None
    assert listener.leave_walls([]) is None
