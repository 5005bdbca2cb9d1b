from pathlib import Path

import pytest

from indoormap.core.models import Wall, WallDoor, WallWindow

DATA_DIR = Path(__file__).parent / "data"


@pytest.fixture
def sample_map_path() -> Path:
    return DATA_DIR / "sample_map.xml"


@pytest.fixture
def sample_map_xml(sample_map_path) -> str:
    return sample_map_path.read_text(encoding="utf-8")


@pytest.fixture
def door_wall() -> Wall:
    """10m wall along x with one 1m door in the middle, hinge on the right."""
    return Wall(
        x1=0.0, y1=0.0, x2=10.0, y2=0.0,
        doors=[WallDoor(at_line_pos=0.5, width=1.0, left_right=True)],
    )


@pytest.fixture
def mixed_wall() -> Wall:
    """20m wall along x with two doors and two windows, declared out of order."""
    return Wall(
        x1=0.0, y1=0.0, x2=20.0, y2=0.0,
        doors=[
            WallDoor(at_line_pos=0.75, width=1.0, left_right=False),
            WallDoor(at_line_pos=0.1, width=1.0, left_right=False),
        ],
        windows=[
            WallWindow(at_line_pos=0.5, width=2.0),
            WallWindow(at_line_pos=0.3, width=1.0),
        ],
    )
