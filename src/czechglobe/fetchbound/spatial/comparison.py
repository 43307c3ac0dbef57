"""
Agreement metrics between a reconstructed fetch boundary and the ROI.
"""

import logging
from typing import Dict

from shapely.geometry.base import BaseGeometry
from shapely.validation import make_valid

from .projection import to_utm

logger = logging.getLogger(__name__)


def compare_polygons(
    reconstructed: BaseGeometry, roi: BaseGeometry, zone: int, south: bool = False
) -> Dict[str, float]:
    """
    Compare the reconstructed boundary with the region of interest.

    Both geometries are given in WGS84 and compared in UTM so that areas are
    in square metres.

    Returns:
    --------
    dict with keys:
        - iou: intersection over union
        - area_ratio: reconstructed area / ROI area
        - roi_covered: share of the ROI inside the reconstruction
        - reconstructed_area, roi_area: areas in m^2
    """
    reconstructed = make_valid(to_utm(reconstructed, zone, south))
    roi = make_valid(to_utm(roi, zone, south))

    overlap = reconstructed.intersection(roi).area
    union = reconstructed.union(roi).area

    metrics = {
        "iou": overlap / union if union > 0 else 0.0,
        "area_ratio": reconstructed.area / roi.area if roi.area > 0 else float("inf"),
        "roi_covered": overlap / roi.area if roi.area > 0 else 0.0,
        "reconstructed_area": reconstructed.area,
        "roi_area": roi.area,
    }

    logger.debug(f"Comparison metrics: {metrics}")
    return metrics
