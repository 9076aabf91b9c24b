"""Shared pytest configuration.

Makes the source tree importable when pytest is run from the project root
without an editable install, and provides the Ordnance Survey worked example
used across the test modules.
"""

import os
import sys

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from osgrid.core.datums import DatumId  # noqa: E402
from osgrid.domain.schemas import GeodeticPoint, GridRef  # noqa: E402

# OS 'A guide to coordinate systems in Great Britain', Annex C worked example
# (OSGB36): 52°39'27.2531"N 1°43'4.5177"E  <->  E 651409.903, N 313177.270
OS_EXAMPLE_LAT = 52 + 39 / 60 + 27.2531 / 3600
OS_EXAMPLE_LON = 1 + 43 / 60 + 4.5177 / 3600
OS_EXAMPLE_E = 651409.903
OS_EXAMPLE_N = 313177.270


@pytest.fixture
def os_example_point():
    return GeodeticPoint(latitude=OS_EXAMPLE_LAT, longitude=OS_EXAMPLE_LON, datum=DatumId.OSGB36)


@pytest.fixture
def os_example_gridref():
    return GridRef(easting=OS_EXAMPLE_E, northing=OS_EXAMPLE_N)
