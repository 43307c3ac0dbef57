"""
Tests for the transects and intersection modules.
"""

import pyproj
import pytest
from shapely.geometry import LineString, MultiPolygon, Point, Polygon, box

from czechglobe.fetchbound.models import ReferencePoint, Transect
from czechglobe.fetchbound.spatial.intersection import (
    GeometryMode,
    IntersectionMissError,
    intersect_transects,
    planar_crossings,
    spherical_crossings,
)
from czechglobe.fetchbound.spatial.spatial_utils import (
    boundary_linework,
    extract_points,
    geodesic_densify,
    line_parts,
)
from czechglobe.fetchbound.spatial.transects import azimuth_range, generate_transects

HALF_WIDTH = 0.005


@pytest.fixture
def tower():
    return ReferencePoint(15.0787731, 49.5732575)


@pytest.fixture
def roi(tower):
    return box(
        tower.longitude - HALF_WIDTH,
        tower.latitude - HALF_WIDTH,
        tower.longitude + HALF_WIDTH,
        tower.latitude + HALF_WIDTH,
    )


@pytest.fixture
def equator_transect():
    return Transect(90.0, LineString([(0, 0), (10, 0)]))


@pytest.fixture
def geod():
    return pyproj.Geod(ellps="WGS84")


class TestTransects:
    """Test suite for probe generation."""

    def test_default_azimuths(self):
        azimuths = azimuth_range()

        assert len(azimuths) == 72
        assert azimuths[0] == 0
        assert azimuths[-1] == 355

    @pytest.mark.parametrize("step,count", [(0.1, 3600), (2.5, 144), (7, 52), (360, 1)])
    def test_fractional_steps_are_exact(self, step, count):
        """Test azimuths are exact multiples of the step."""
        azimuths = azimuth_range(step)

        assert len(azimuths) == count
        assert azimuths[0] == 0.0
        assert all(isinstance(a, float) for a in azimuths)
        assert all(a == round(i * step, 9) for i, a in enumerate(azimuths))

    def test_tenth_degree_step_has_no_drift(self):
        azimuths = azimuth_range(0.1)

        assert azimuths[3] == 0.3
        assert azimuths[-1] == 359.9

    @pytest.mark.parametrize("step", [0, -5, 361])
    def test_invalid_azimuth_step(self, step):
        with pytest.raises(ValueError):
            azimuth_range(step)

    def test_one_transect_per_azimuth(self, tower):
        transects = generate_transects(tower)

        assert len(transects) == 72
        assert [t.azimuth for t in transects] == azimuth_range()
        for t in transects:
            assert t.start == pytest.approx(tower.coords)

    def test_transect_length_is_probe_distance(self, tower, geod):
        transects = generate_transects(tower, [0, 90, 215], probe_distance=5000)

        for t in transects:
            azimuth, _, d = geod.inv(*t.start, *t.end)
            assert d == pytest.approx(5000)
            assert (azimuth - t.azimuth + 180) % 360 - 180 == pytest.approx(0, abs=1e-6)

    def test_non_positive_probe_distance(self, tower):
        with pytest.raises(ValueError):
            generate_transects(tower, [0], probe_distance=0)


class TestSpatialUtils:
    def test_polygon_linework(self, roi):
        line = boundary_linework(roi)
        assert line.geom_type == "LineString"
        assert line.is_closed

    def test_linework_drops_z(self):
        polygon = Polygon([(0, 0, 10), (1, 0, 10), (1, 1, 10)])
        assert not boundary_linework(polygon).has_z

    def test_multipolygon_linework(self):
        mp = MultiPolygon([box(0, 0, 1, 1), box(2, 2, 3, 3)])
        parts = line_parts(boundary_linework(mp))

        assert len(parts) == 2
        assert all(len(p.coords) == 5 for p in parts)

    def test_point_is_not_linework(self):
        with pytest.raises(ValueError):
            boundary_linework(Point(0, 0))

    def test_extract_points_from_overlap(self):
        line = LineString([(0, 0), (2, 0)])
        points = extract_points(line.intersection(LineString([(1, 0), (3, 0)])))

        assert len(points) == 2

    def test_densify_keeps_vertices(self, roi, geod):
        line = boundary_linework(roi)
        dense = geodesic_densify(line, geod, spacing=50)

        for vertex in line.coords:
            assert vertex in list(dense.coords)
        assert dense.is_closed

    def test_densify_spacing(self, geod):
        """Test consecutive points are no further apart than the spacing."""
        dense = geodesic_densify(LineString([(15.0, 49.5), (15.1, 49.6)]), geod, spacing=100)
        coords = list(dense.coords)

        assert len(coords) > 2
        for (x0, y0), (x1, y1) in zip(coords[:-1], coords[1:]):
            _, _, d = geod.inv(x0, y0, x1, y1)
            assert d <= 100 + 1e-6

    def test_densify_follows_meridian(self, geod):
        dense = geodesic_densify(LineString([(5, -1), (5, 1)]), geod)

        assert all(x == pytest.approx(5) for x, _ in dense.coords)

    def test_densify_short_edge_unchanged(self, geod):
        line = LineString([(15.0, 49.5), (15.0001, 49.5)])
        assert list(geodesic_densify(line, geod).coords) == list(line.coords)


class TestCrossings:
    """Test suite for single-transect crossings."""

    def test_spherical_crossing_on_equator(self, equator_transect, geod):
        boundary = geodesic_densify(LineString([(5, -1), (5, 1)]), geod)
        points = spherical_crossings(equator_transect, boundary)

        assert len(points) == 1
        assert points[0].x == pytest.approx(5)
        assert points[0].y == pytest.approx(0, abs=1e-9)

    def test_planar_crossing_on_equator(self, equator_transect):
        points = planar_crossings(equator_transect, LineString([(5, -1), (5, 1)]))

        assert len(points) == 1
        assert points[0].equals(Point(5, 0))

    def test_spherical_edge_behind_tower(self, equator_transect, geod):
        boundary = geodesic_densify(LineString([(-5, -1), (-5, 1)]), geod)
        assert spherical_crossings(equator_transect, boundary) == []

    def test_spherical_edge_beyond_probe(self, equator_transect, geod):
        boundary = geodesic_densify(LineString([(12, -1), (12, 1)]), geod)
        assert spherical_crossings(equator_transect, boundary) == []

    @pytest.mark.parametrize("mode", [GeometryMode.PLANAR, GeometryMode.SPHERICAL])
    def test_nearest_crossing_is_kept(self, equator_transect, mode):
        boundary = boundary_linework(box(3, -1, 7, 1))
        crossings = intersect_transects(boundary, [equator_transect], mode)

        assert crossings[90.0].x == pytest.approx(3)
        assert crossings[90.0].y == pytest.approx(0, abs=1e-9)


class TestIntersectTransects:
    """Test suite for the intersection engine."""

    @pytest.mark.parametrize("mode", [GeometryMode.PLANAR, GeometryMode.SPHERICAL, "planar", "spherical"])
    def test_every_transect_crosses(self, tower, roi, mode):
        crossings = intersect_transects(boundary_linework(roi), generate_transects(tower), mode)

        assert sorted(crossings) == azimuth_range()

    @pytest.mark.parametrize("mode", [GeometryMode.PLANAR, GeometryMode.SPHERICAL])
    def test_north_crossing(self, tower, roi, mode):
        crossings = intersect_transects(
            boundary_linework(roi), generate_transects(tower, [0]), mode
        )

        assert crossings[0.0].x == pytest.approx(tower.longitude)
        assert crossings[0.0].y == pytest.approx(tower.latitude + HALF_WIDTH)

    def test_spherical_crossings_lie_on_boundary(self, tower, roi):
        boundary = boundary_linework(roi)
        crossings = intersect_transects(boundary, generate_transects(tower), GeometryMode.SPHERICAL)

        for point in crossings.values():
            assert boundary.distance(point) < 1e-6

    def test_spherical_crossings_lie_on_transect_geodesic(self, tower, roi, geod):
        """Test each crossing is reached from the tower along its azimuth."""
        crossings = intersect_transects(
            boundary_linework(roi), generate_transects(tower), GeometryMode.SPHERICAL
        )

        for azimuth, point in crossings.items():
            forward, _, _ = geod.inv(tower.longitude, tower.latitude, point.x, point.y)
            assert (forward - azimuth + 180) % 360 - 180 == pytest.approx(0, abs=1e-6)

    def test_spherical_north_fetch_is_geodesic(self, tower, roi, geod):
        crossings = intersect_transects(
            boundary_linework(roi), generate_transects(tower, [0]), GeometryMode.SPHERICAL
        )
        _, _, expected = geod.inv(*tower.coords, tower.longitude, tower.latitude + HALF_WIDTH)
        _, _, fetch = geod.inv(*tower.coords, crossings[0.0].x, crossings[0.0].y)

        assert fetch == pytest.approx(expected, abs=0.05)

    def test_modes_are_independent(self, tower, roi):
        """Test interleaved calls in both modes give stable results."""
        boundary = boundary_linework(roi)
        transects = generate_transects(tower)

        spherical = intersect_transects(boundary, transects, GeometryMode.SPHERICAL)
        planar = intersect_transects(boundary, transects, GeometryMode.PLANAR)
        spherical_again = intersect_transects(boundary, transects, GeometryMode.SPHERICAL)

        assert planar.keys() == spherical.keys()
        for azimuth in spherical:
            assert spherical[azimuth].equals(spherical_again[azimuth])

    @pytest.mark.parametrize("mode", [GeometryMode.PLANAR, GeometryMode.SPHERICAL])
    def test_short_probe_misses_every_azimuth(self, tower, roi, mode):
        transects = generate_transects(tower, probe_distance=10)

        with pytest.raises(IntersectionMissError) as excinfo:
            intersect_transects(boundary_linework(roi), transects, mode)

        assert excinfo.value.azimuths == azimuth_range()
        assert excinfo.value.mode is mode

    def test_partial_miss_lists_missed_azimuths(self, equator_transect):
        """Test only the azimuths without a crossing are reported."""
        north = Transect(0.0, LineString([(0, 0), (0, 10)]))
        boundary = LineString([(5, -1), (5, 1)])

        with pytest.raises(IntersectionMissError) as excinfo:
            intersect_transects(boundary, [north, equator_transect], GeometryMode.SPHERICAL)

        assert excinfo.value.azimuths == [0.0]
