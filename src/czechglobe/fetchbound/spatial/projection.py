"""
Projection helpers for moving between WGS84 and the tower's UTM zone, and
for the tower-centred azimuthal equidistant frame used by the intersection
engine.
"""

from functools import lru_cache
from typing import Optional, Tuple

import pyproj
import shapely

from czechglobe.fetchbound.constants import ELLIPSOID, WGS84


def utm_zone_for(longitude: float) -> int:
    """
    Return the 6-degree UTM zone containing the given longitude.
    """
    if not -180 <= longitude <= 180:
        raise ValueError(f"Longitude {longitude} is outside [-180, 180]")
    return min(int((longitude + 180) / 6) + 1, 60)


def utm_crs(zone: int, south: bool = False) -> str:
    """
    Returns a proj string for the given UTM zone on the WGS84 datum.
    """
    if not 1 <= zone <= 60:
        raise ValueError(f"UTM zone must be between 1 and 60, got {zone}")
    hemisphere = "+south" if south else "+north"
    return f"+proj=utm +zone={zone} {hemisphere} +datum=WGS84 +units=m +no_defs"


def aeqd_crs(longitude: float, latitude: float) -> str:
    """
    Returns a proj string for an azimuthal equidistant projection centred on
    the given point. Distances and azimuths from the centre are geodesic.
    """
    return (
        f"+proj=aeqd +lat_0={latitude} +lon_0={longitude} "
        f"+ellps={ELLIPSOID} +units=m +no_defs"
    )


@lru_cache(maxsize=128)
def get_utm_transformers(zone: int, south: bool = False) -> Tuple:
    """
    Get cached transformers for a UTM zone.

    Returns:
    --------
    tuple : (to_utm, to_wgs) transformer objects
    """
    proj_string = utm_crs(zone, south)
    to_utm = pyproj.Transformer.from_crs(WGS84, proj_string, always_xy=True)
    to_wgs = pyproj.Transformer.from_crs(proj_string, WGS84, always_xy=True)

    return to_utm, to_wgs


@lru_cache(maxsize=128)
def get_aeqd_transformers(longitude: float, latitude: float) -> Tuple:
    """
    Get cached transformers for the azimuthal equidistant frame of a point.

    Returns:
    --------
    tuple : (to_local, to_wgs) transformer objects
    """
    proj_string = aeqd_crs(longitude, latitude)
    to_local = pyproj.Transformer.from_crs(WGS84, proj_string, always_xy=True)
    to_wgs = pyproj.Transformer.from_crs(proj_string, WGS84, always_xy=True)

    return to_local, to_wgs


def resolve_zone(longitude: float, zone: Optional[int]) -> int:
    return zone if zone is not None else utm_zone_for(longitude)


def apply_transformer(transformer: pyproj.Transformer, geom):
    """Run a pyproj transformer over every coordinate of a shapely geometry."""
    return shapely.transform(geom, transformer.transform, interleaved=False)


def to_utm(geom, zone: int, south: bool = False):
    """Project a shapely geometry from WGS84 degrees into UTM metres."""
    forward, _ = get_utm_transformers(zone, south)
    return apply_transformer(forward, geom)


def to_wgs84(geom, zone: int, south: bool = False):
    """Project a shapely geometry from UTM metres back to WGS84 degrees."""
    _, inverse = get_utm_transformers(zone, south)
    return apply_transformer(inverse, geom)
