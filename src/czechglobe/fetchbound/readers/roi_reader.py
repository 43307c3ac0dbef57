"""ROI and Site File Reader.

This module reads the spatial inputs of the extraction pipeline (the region of
interest polygon and the tower location) from vector files such as KML
exported by Google Earth or shapefiles, and the fetch vector from a CSV file.
"""

import logging
from pathlib import Path
from typing import List

import geopandas as gpd
import pandas as pd
from shapely import force_2d
from shapely.geometry.base import BaseGeometry
from shapely.ops import unary_union

from czechglobe.fetchbound.constants import FETCH_COLUMN, WGS84
from czechglobe.fetchbound.models import ReferencePoint

logger = logging.getLogger(__name__)


def read_vector_file(file_path: str) -> gpd.GeoDataFrame:
    """Read a vector file with geopandas and return it in WGS84.

    Z coordinates are dropped. Files without a CRS are assumed to hold
    WGS84 longitude/latitude.

    Raises:
        FileNotFoundError: If the file doesn't exist
        ValueError: If the file holds no features
    """
    if not Path(file_path).exists():
        raise FileNotFoundError(f"Unable to find spatial file {file_path}")

    gdf = gpd.read_file(file_path)
    if gdf.empty:
        raise ValueError(f"No features found in {file_path}")

    flattened = gpd.GeoSeries(
        [force_2d(g) for g in gdf.geometry], index=gdf.index, crs=gdf.crs
    )
    gdf = gdf.set_geometry(flattened)

    if gdf.crs is None:
        logger.warning(f"{file_path} has no CRS, assuming {WGS84}")
        gdf = gdf.set_crs(WGS84)
    elif not gdf.crs.is_geographic or gdf.crs.to_epsg() != 4326:
        logger.info(f"Reprojecting {file_path} from {gdf.crs.name} to {WGS84}")
        gdf = gdf.to_crs(WGS84)

    return gdf


def read_roi(file_path: str) -> BaseGeometry:
    """Read the region of interest as a single (multi)polygon in WGS84.

    All polygonal features in the file are merged.

    Raises:
        ValueError: If the file holds no polygons
    """
    gdf = read_vector_file(file_path)
    polygons = [g for g in gdf.geometry if g.geom_type in ("Polygon", "MultiPolygon")]

    if not polygons:
        raise ValueError(f"No polygon features found in {file_path}")

    roi = unary_union(polygons) if len(polygons) > 1 else polygons[0]
    logger.debug(f"Read region of interest from {file_path} ({roi.geom_type})")
    return roi


def read_tower(file_path: str) -> ReferencePoint:
    """Read the tower location from the first point feature of a vector file."""
    gdf = read_vector_file(file_path)
    points = [g for g in gdf.geometry if g.geom_type == "Point"]

    if not points:
        raise ValueError(f"No point features found in {file_path}")
    if len(points) > 1:
        logger.warning(f"{file_path} holds {len(points)} points, using the first")

    return ReferencePoint(points[0].x, points[0].y)


def read_fetch_vector(file_path: str) -> List[float]:
    """Read fetch distances (metres) from a CSV file.

    Uses the 'Fetch' column when present, otherwise the only column. Rows are
    taken in file order, the first at true north.
    """
    df = pd.read_csv(file_path)

    if FETCH_COLUMN in df.columns:
        column = df[FETCH_COLUMN]
    elif len(df.columns) == 1:
        column = df.iloc[:, 0]
    else:
        raise ValueError(
            f"{file_path} must have a '{FETCH_COLUMN}' column or a single column"
        )

    if column.isna().any():
        raise ValueError(f"{file_path} contains missing fetch distances")

    return [float(d) for d in column]


def parse_fetch_distances(value: str) -> List[float]:
    """Parse a comma or whitespace separated list of distances."""
    parts = value.replace(",", " ").split()
    try:
        return [float(p) for p in parts]
    except ValueError as e:
        raise ValueError(f"Unable to parse fetch distances '{value}'") from e
