"""
Data models for the fetchbound package.

This module contains dataclasses passed between the reconstruction and
extraction pipelines.
"""

import dataclasses
from typing import Dict, List, Optional

import pandas as pd
from shapely.geometry import LineString, Point, Polygon


@dataclasses.dataclass(frozen=True)
class ReferencePoint:
    """
    Geographic location of the measurement tower (WGS84 degrees).
    """

    longitude: float
    latitude: float

    @property
    def coords(self):
        return (self.longitude, self.latitude)

    def as_point(self) -> Point:
        return Point(self.longitude, self.latitude)


@dataclasses.dataclass(frozen=True)
class AngleSamples:
    """
    Parallel sequences of azimuths (degrees) and fetch distances (metres)
    produced by densifying each sector of a fetch vector.
    """

    angles: List[float]
    distances: List[float]

    def __len__(self):
        return len(self.angles)

    def __iter__(self):
        return iter(zip(self.angles, self.distances))


@dataclasses.dataclass(frozen=True)
class Transect:
    """Probe line from the tower along one azimuth."""

    azimuth: float
    line: LineString

    @property
    def start(self):
        return self.line.coords[0]

    @property
    def end(self):
        return self.line.coords[-1]


@dataclasses.dataclass
class ReconstructionResult:
    samples: AngleSamples
    projected: Polygon  # UTM metres
    geographic: Polygon  # WGS84 degrees
    utm_crs: str
    metrics: Optional[Dict[str, float]] = None

    @property
    def vertices(self) -> int:
        """Number of ring coordinates including the closing one."""
        return len(self.projected.exterior.coords)


@dataclasses.dataclass
class ExtractionResult:
    reference: ReferencePoint
    transects: List[Transect]
    planar: Dict[float, Point]
    spherical: Dict[float, Point]
    table: pd.DataFrame
