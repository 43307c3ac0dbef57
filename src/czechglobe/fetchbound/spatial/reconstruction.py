"""
Reconstruction of a fetch boundary polygon from a fetch-distance vector.

A fetch vector holds N distances (metres) for N equally spaced azimuth sectors,
the first one centred on true north. Each sector is drawn as an arc at its
fetch distance, so the polygon shows how the vector is interpreted at its
angular resolution. Comparing it with the region of interest the vector was
derived from reveals discrepancies caused by too coarse a resolution.

Algorithm:
    1. Densify every sector into angles spaced by the subdivision step
    2. Project the tower into its UTM zone
    3. Offset each (distance, azimuth) sample from the projected tower
    4. Close the ring and build the polygon
    5. Transform the polygon back to WGS84
"""

import logging
import math
import warnings
from typing import List, Optional, Sequence, Tuple

from shapely.geometry import Polygon

from czechglobe.fetchbound.constants import DEFAULT_SUBDIVISION_STEP, VERTEX_DECIMALS
from czechglobe.fetchbound.models import AngleSamples, ReconstructionResult, ReferencePoint

from .projection import resolve_zone, to_utm, to_wgs84, utm_crs

logger = logging.getLogger(__name__)

# Guards the inclusive upper sector edge against floating point drift
STEP_TOLERANCE = 1e-10


class ResolutionWarning(UserWarning):
    """Raised when the subdivision step is coarser than the sector width."""

    pass


class InsufficientVerticesError(ValueError):
    """Raised when fewer than 3 distinct vertices are available for a polygon."""

    pass


def angular_resolution(boundary: Sequence[float]) -> float:
    if len(boundary) < 1:
        raise ValueError("Fetch boundary must contain at least one distance")
    return 360 / len(boundary)


def sample_angles(
    boundary: Sequence[float], subdivision_step: float = DEFAULT_SUBDIVISION_STEP
) -> AngleSamples:
    """
    Densify each sector of a fetch vector into evenly stepped azimuths.

    Sector k is centred on azimuth k * 360/N and spans half the angular
    resolution to either side. Both edges are included, so adjacent sectors
    share their edge azimuth (each at its own distance).

    Args:
        boundary: Fetch distances in metres, first value at true north
        subdivision_step: Angular step in degrees used within a sector

    Returns:
        AngleSamples with one distance per generated angle

    Raises:
        ValueError: If the boundary is empty or holds non-positive distances,
                    or if the step is not positive
    """
    orig_res = angular_resolution(boundary)

    if subdivision_step <= 0:
        raise ValueError(f"Subdivision step must be positive, got {subdivision_step}")

    if any(d <= 0 for d in boundary):
        raise ValueError("Fetch distances must be positive")

    # A step equal to the sector width still yields both sector edges
    if subdivision_step > orig_res:
        message = (
            f"Subdivision step {subdivision_step} is larger than the angular "
            f"resolution {orig_res} of the fetch boundary - reduce the step"
        )
        logger.warning(message)
        warnings.warn(message, ResolutionWarning, stacklevel=2)

    half = orig_res / 2
    per_sector = math.floor(orig_res / subdivision_step + STEP_TOLERANCE) + 1

    angles = []
    distances = []
    for k, distance in enumerate(boundary):
        start = k * orig_res - half
        angles.extend(start + i * subdivision_step for i in range(per_sector))
        distances.extend([float(distance)] * per_sector)

    logger.debug(
        f"Sampled {len(angles)} angles ({per_sector} per sector) "
        f"for {len(boundary)} sectors"
    )
    return AngleSamples(angles, distances)


def polar_to_cartesian(
    origin: Tuple[float, float], distance: float, azimuth: float
) -> Tuple[float, float]:
    """
    Offset a planar point by a distance along a compass azimuth.

    Azimuth is in degrees clockwise from north, so 0 maps to +Y and 90 to +X.
    """
    theta = math.pi / 2 - azimuth / 180 * math.pi
    x = distance * math.cos(theta) + origin[0]
    y = distance * math.sin(theta) + origin[1]
    return (x, y)


def close_ring(points: Sequence[Tuple[float, float]]) -> List[Tuple[float, float]]:
    """
    Close an ordered vertex sequence by repeating its first point at the end.

    The vertices are neither deduplicated nor checked for self-intersection.

    Raises:
        InsufficientVerticesError: If fewer than 3 distinct points are given
    """
    distinct = {
        (round(x, VERTEX_DECIMALS), round(y, VERTEX_DECIMALS)) for x, y in points
    }
    if len(distinct) < 3:
        raise InsufficientVerticesError(
            f"Need at least 3 distinct vertices to build a polygon, got {len(distinct)}"
        )

    ring = [tuple(p) for p in points]
    ring.append(ring[0])
    return ring


def build_polygon(points: Sequence[Tuple[float, float]]) -> Polygon:
    """Build a closed shapely Polygon from ordered, unclosed vertices."""
    polygon = Polygon(close_ring(points))

    if not polygon.is_valid:
        logger.warning(
            "Reconstructed polygon is not simple; consider a finer subdivision step"
        )

    return polygon


def sample_points(
    origin: Tuple[float, float], samples: AngleSamples
) -> List[Tuple[float, float]]:
    # polar_to_cartesian is scalar, apply it sample by sample
    return [
        polar_to_cartesian(origin, distance, angle) for angle, distance in samples
    ]


def reconstruct_boundary(
    boundary: Sequence[float],
    reference: ReferencePoint,
    subdivision_step: float = DEFAULT_SUBDIVISION_STEP,
    utm_zone: Optional[int] = None,
) -> ReconstructionResult:
    """
    Reconstruct the fetch boundary polygon around a tower.

    Args:
        boundary: Fetch distances in metres, first value at true north
        reference: Tower location in WGS84
        subdivision_step: Angular step in degrees within each sector
        utm_zone: UTM zone used for the planar construction; derived from the
                  tower longitude when omitted

    Returns:
        ReconstructionResult with the polygon in UTM and in WGS84
    """
    zone = resolve_zone(reference.longitude, utm_zone)
    south = reference.latitude < 0
    crs = utm_crs(zone, south)

    samples = sample_angles(boundary, subdivision_step)

    tower_utm = to_utm(reference.as_point(), zone, south)
    projected = build_polygon(sample_points((tower_utm.x, tower_utm.y), samples))
    geographic = to_wgs84(projected, zone, south)

    logger.info(
        f"Reconstructed fetch boundary with {len(projected.exterior.coords)} "
        f"vertices in UTM zone {zone}"
    )

    return ReconstructionResult(
        samples=samples,
        projected=projected,
        geographic=geographic,
        utm_crs=crs,
    )
