"""
Spatial computations for fetchbound.

This module provides the geometry behind the two pipelines:

1. **reconstruction.reconstruct_boundary**: fetch vector to polygon
   - Densifies sectors, offsets samples from the tower in UTM
   - Used to visually check a fetch vector against the region of interest

2. **transects + intersection**: region of interest to fetch distances
   - Geodesic probes from the tower, crossed with the ROI boundary
   - Planar and spherical modes requested explicitly per call

For direct access import from the specific module:
    from czechglobe.fetchbound.spatial.reconstruction import reconstruct_boundary
    from czechglobe.fetchbound.spatial.intersection import intersect_transects
"""

__all__ = []
