import sys
from pathlib import Path

import pytest

# Ensure 'src' is on sys.path for test imports without installing the package
ROOT = Path(__file__).resolve().parents[1]
src = ROOT / "src"
if str(src) not in sys.path:
    sys.path.insert(0, str(src))

from gloomdelve.map import Grid  # noqa: E402


@pytest.fixture
def open_room():
    """7x5 grid: wall ring around a 5x3 floor area."""
    return Grid.from_lines(
        [
            "#######",
            "#.....#",
            "#.....#",
            "#.....#",
            "#######",
        ]
    )
