import logging
from pathlib import Path
from typing import Dict, Optional

import pandas as pd
import pyproj
from shapely.geometry import Point

from czechglobe.fetchbound.constants import AZIMUTH_COLUMN, ELLIPSOID, FETCH_COLUMN
from czechglobe.fetchbound.models import ReferencePoint

logger = logging.getLogger(__name__)


def fetch_table(
    reference: ReferencePoint,
    intersections: Dict[float, Point],
    geod: Optional[pyproj.Geod] = None,
) -> pd.DataFrame:
    """
    Returns the fetch table: one row per azimuth with the geodesic distance
    (metres, WGS84 ellipsoid) from the tower to that azimuth's intersection.
    Rows are sorted by ascending azimuth.
    """
    if not intersections:
        raise ValueError("No intersections to report")

    if geod is None:
        geod = pyproj.Geod(ellps=ELLIPSOID)

    azimuths = sorted(intersections)
    points = [intersections[a] for a in azimuths]
    _, _, distances = geod.inv(
        [reference.longitude] * len(points),
        [reference.latitude] * len(points),
        [p.x for p in points],
        [p.y for p in points],
    )

    if all(float(a).is_integer() for a in azimuths):
        azimuths = [int(a) for a in azimuths]

    return pd.DataFrame({AZIMUTH_COLUMN: azimuths, FETCH_COLUMN: list(distances)})


def write_fetch_table(table: pd.DataFrame, path) -> Path:
    """
    Writes the fetch table as CSV with an 'Azimuth,Fetch' header and no index.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    table.to_csv(path, index=False, columns=[AZIMUTH_COLUMN, FETCH_COLUMN])
    logger.info(f"Wrote {len(table)} fetch distances to {path}")
    return path
