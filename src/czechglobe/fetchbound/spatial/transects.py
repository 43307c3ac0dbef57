"""
Radial probe transects from the tower.
"""

import logging
from typing import Iterable, List, Optional

import numpy as np
import pyproj
from shapely.geometry import LineString

from czechglobe.fetchbound.constants import (
    DEFAULT_AZIMUTH_STEP,
    DEFAULT_PROBE_DISTANCE,
    ELLIPSOID,
)
from czechglobe.fetchbound.models import ReferencePoint, Transect

logger = logging.getLogger(__name__)

AZIMUTH_DECIMALS = 9


def azimuth_range(step: float = DEFAULT_AZIMUTH_STEP) -> List[float]:
    """
    Azimuths from north (0) up to, but excluding, 360 in fixed steps.

    Each azimuth is computed as a multiple of the step and rounded, so
    fractional steps do not accumulate floating point drift.
    """
    if not 0 < step <= 360:
        raise ValueError(f"Azimuth step must be in (0, 360], got {step}")
    count = int(np.ceil(360 / step - 1e-9))
    return [round(float(i * step), AZIMUTH_DECIMALS) for i in range(count)]


def generate_transects(
    reference: ReferencePoint,
    azimuths: Optional[Iterable[float]] = None,
    probe_distance: float = DEFAULT_PROBE_DISTANCE,
    geod: Optional[pyproj.Geod] = None,
) -> List[Transect]:
    """
    Build one probe line per azimuth from the tower to the geodesic
    destination point at probe_distance.

    The probe distance has to be large enough to cross the region of
    interest in every direction; the default of 1000 km assures that for
    any site-scale polygon.

    Args:
        reference: Tower location in WGS84
        azimuths: Compass bearings in degrees (default: every 5 degrees)
        probe_distance: Transect length in metres
        geod: Geodesic used for the destination points (default: WGS84)

    Returns:
        List of Transect, in azimuth order as given
    """
    if probe_distance <= 0:
        raise ValueError(f"Probe distance must be positive, got {probe_distance}")

    if azimuths is None:
        azimuths = azimuth_range()
    azimuths = [float(a) for a in azimuths]

    if geod is None:
        geod = pyproj.Geod(ellps=ELLIPSOID)

    lons, lats, _ = geod.fwd(
        [reference.longitude] * len(azimuths),
        [reference.latitude] * len(azimuths),
        azimuths,
        [probe_distance] * len(azimuths),
    )

    transects = [
        Transect(azimuth, LineString([reference.coords, (lon, lat)]))
        for azimuth, lon, lat in zip(azimuths, lons, lats)
    ]

    logger.debug(f"Generated {len(transects)} transects of {probe_distance} m")
    return transects
