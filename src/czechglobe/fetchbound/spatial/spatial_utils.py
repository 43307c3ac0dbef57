"""
Utility functions for spatial geometry operations.

This module contains shared utilities used by the intersection engine for
handling boundary linework and for densifying boundary edges along geodesics.
"""

import logging
from typing import List

import pyproj
from shapely import force_2d
from shapely.geometry import LineString, MultiLineString, Point
from shapely.geometry.base import BaseGeometry

logger = logging.getLogger(__name__)

# Maximum geodesic length (metres) of a densified boundary edge
DENSIFY_SPACING = 100.0


def boundary_linework(geom: BaseGeometry) -> BaseGeometry:
    """
    Convert a polygonal region of interest to its boundary lines.

    Polygons (and multipolygons, including any holes) become their rings as
    (Multi)LineStrings; linear input is returned unchanged. Any Z coordinate
    is dropped.

    Args:
        geom: A Polygon, MultiPolygon, LineString or MultiLineString

    Returns:
        A LineString or MultiLineString
    """
    geom = force_2d(geom)

    if geom.is_empty:
        raise ValueError("Region of interest geometry is empty")

    if geom.geom_type in ("Polygon", "MultiPolygon"):
        return geom.boundary
    if geom.geom_type in ("LineString", "LinearRing", "MultiLineString"):
        return geom

    raise ValueError(f"Unsupported region of interest geometry: {geom.geom_type}")


def line_parts(geom: BaseGeometry) -> List[LineString]:
    if isinstance(geom, MultiLineString):
        return list(geom.geoms)
    return [LineString(geom.coords)]


def geodesic_densify(
    geom: BaseGeometry,
    geod: pyproj.Geod,
    spacing: float = DENSIFY_SPACING,
) -> BaseGeometry:
    """
    Insert points along each edge so that it follows the geodesic between
    its vertices, no two consecutive points more than spacing metres apart.

    Args:
        geom: Boundary linework in lon/lat
        geod: Geodesic used for the intermediate points
        spacing: Maximum distance between consecutive points in metres

    Returns:
        A LineString or MultiLineString in lon/lat
    """
    parts = []
    for part in line_parts(geom):
        coords = list(part.coords)
        dense = [coords[0]]
        for (x0, y0), (x1, y1) in zip(coords[:-1], coords[1:]):
            _, _, length = geod.inv(x0, y0, x1, y1)
            count = int(length // spacing)
            if count > 0:
                dense.extend(geod.npts(x0, y0, x1, y1, count))
            dense.append((x1, y1))
        parts.append(LineString(dense))

    logger.debug(f"Densified {len(parts)} boundary part(s) at {spacing} m")
    return parts[0] if len(parts) == 1 else MultiLineString(parts)


def extract_points(geom: BaseGeometry) -> List[Point]:
    """
    Collect every point from an intersection result.

    Overlapping (collinear) pieces contribute their vertices.
    """
    if geom.is_empty:
        return []
    if geom.geom_type == "Point":
        return [geom]
    if geom.geom_type in ("LineString", "LinearRing"):
        return [Point(c) for c in geom.coords]
    if hasattr(geom, "geoms"):
        points = []
        for part in geom.geoms:
            points.extend(extract_points(part))
        return points

    logger.debug(f"Ignoring {geom.geom_type} in intersection result")
    return []
