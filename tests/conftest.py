import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"

# Allow running the suite from a checkout without installing the package.
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from maptransform import Transform


@pytest.fixture
def world_transform():
    """Zoom 0 camera whose 512x512 viewport shows exactly the whole world."""

    return Transform(tile_size=512, center=(0.0, 0.0), zoom=0, width=512, height=512)
