"""
Intersections of probe transects with a region-of-interest boundary.

Two geometry modes are supported and requested explicitly per call:

1. **PLANAR**: straight lines in longitude/latitude space, intersected with
   shapely. This is how the transects appear on a plain lon/lat plot, so the
   crossings line up with plotted linework.

2. **SPHERICAL**: geodesics on the WGS84 ellipsoid. Boundary edges are
   densified along their geodesics, then both the boundary and the transect
   are projected into an azimuthal equidistant frame centred on the tower,
   where every geodesic from the tower is a straight radial line, and
   intersected with shapely. These are the crossings used for fetch
   distances.

The two modes disagree slightly (more so for long boundary edges), which is
why both are kept.
"""

import logging
from enum import Enum
from typing import Dict, Iterable, List, Optional

import numpy as np
import pyproj
from shapely.geometry import Point
from shapely.geometry.base import BaseGeometry

from czechglobe.fetchbound.constants import ELLIPSOID, PLANAR, SPHERICAL
from czechglobe.fetchbound.models import Transect

from .projection import apply_transformer, get_aeqd_transformers
from .spatial_utils import extract_points, geodesic_densify

logger = logging.getLogger(__name__)


class GeometryMode(Enum):
    """Geometry model used to intersect transects with the boundary."""

    PLANAR = PLANAR
    SPHERICAL = SPHERICAL


class IntersectionMissError(Exception):
    """Raised when one or more transects do not cross the ROI boundary."""

    def __init__(self, azimuths: List[float], mode: GeometryMode):
        self.azimuths = list(azimuths)
        self.mode = mode
        super().__init__(
            f"{len(self.azimuths)} transect(s) did not cross the region of interest "
            f"boundary in {mode.value} mode (azimuths: "
            f"{', '.join(f'{a:g}' for a in self.azimuths)}); increase the probe "
            f"distance or check the region of interest"
        )


def spherical_crossings(transect: Transect, boundary: BaseGeometry) -> List[Point]:
    """
    Geodesic crossings between one transect and the boundary.

    Args:
        transect: Probe transect (lon/lat), starting at the tower
        boundary: Boundary linework (lon/lat) densified along its geodesics,
                  see spatial_utils.geodesic_densify

    Returns:
        List of crossing Points (lon/lat)
    """
    to_local, to_wgs = get_aeqd_transformers(*transect.start)

    local_boundary = apply_transformer(to_local, boundary)
    local_line = apply_transformer(to_local, transect.line)

    points = extract_points(local_boundary.intersection(local_line))
    return [apply_transformer(to_wgs, p) for p in points]


def planar_crossings(transect: Transect, boundary: BaseGeometry) -> List[Point]:
    return extract_points(boundary.intersection(transect.line))


def nearest_crossing(
    transect: Transect,
    points: List[Point],
    mode: GeometryMode,
    geod: pyproj.Geod,
) -> Optional[Point]:
    if not points:
        return None

    if mode is GeometryMode.PLANAR:
        origin = Point(transect.start)
        return min(points, key=origin.distance)

    lon0, lat0 = transect.start
    _, _, distances = geod.inv(
        [lon0] * len(points),
        [lat0] * len(points),
        [p.x for p in points],
        [p.y for p in points],
    )
    return points[int(np.argmin(distances))]


def intersect_transects(
    boundary: BaseGeometry,
    transects: Iterable[Transect],
    mode: GeometryMode = GeometryMode.SPHERICAL,
    geod: Optional[pyproj.Geod] = None,
) -> Dict[float, Point]:
    """
    Find the crossing of each transect with the boundary nearest the tower.

    Args:
        boundary: Boundary linework (lon/lat), see spatial_utils.boundary_linework
        transects: Probe transects sharing the boundary's coordinate system
        mode: Geometry model for this call
        geod: Geodesic used to densify the boundary and rank spherical
              crossings (default: WGS84)

    Returns:
        Mapping of azimuth to the nearest crossing Point

    Raises:
        IntersectionMissError: If any transect does not reach the boundary;
                               lists every missed azimuth
    """
    mode = GeometryMode(mode)
    if geod is None:
        geod = pyproj.Geod(ellps=ELLIPSOID)

    if mode is GeometryMode.SPHERICAL:
        boundary = geodesic_densify(boundary, geod)

    crossings = {}
    missed = []
    for transect in transects:
        if mode is GeometryMode.PLANAR:
            points = planar_crossings(transect, boundary)
        else:
            points = spherical_crossings(transect, boundary)

        nearest = nearest_crossing(transect, points, mode, geod)
        if nearest is None:
            missed.append(transect.azimuth)
        else:
            crossings[transect.azimuth] = nearest

    if missed:
        raise IntersectionMissError(missed, mode)

    logger.debug(f"Found {len(crossings)} {mode.value} intersections")
    return crossings
