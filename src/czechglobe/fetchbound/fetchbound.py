import configparser
import logging
import os.path
import sys
from pathlib import Path

import geopandas as gpd
import pyproj
from funcy import decorator
from pyfiglet import Figlet
from rich.prompt import Confirm, Prompt

from czechglobe.fetchbound import config
from czechglobe.fetchbound import constants
from czechglobe.fetchbound import report
from czechglobe.fetchbound.models import ExtractionResult, ReconstructionResult, ReferencePoint
from czechglobe.fetchbound.readers import roi_reader
from czechglobe.fetchbound.spatial import comparison, reconstruction, transects
from czechglobe.fetchbound.spatial.intersection import GeometryMode, intersect_transects
from czechglobe.fetchbound.spatial.projection import resolve_zone
from czechglobe.fetchbound.spatial.spatial_utils import boundary_linework


LOGGER_NAME = 'czechglobe.fetchbound'
CONSOLE_FORMAT = "%(message)s"
LOGFILE_FORMAT = "%(asctime)s|%(levelname)s|%(name)s|%(message)s"

def init_logging(logfile="fetchbound.log"):
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(logging.DEBUG)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(logging.INFO)
    console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    logger.addHandler(console_handler)

    logfile_handler = logging.FileHandler(logfile, "w")
    logfile_handler.setLevel(logging.DEBUG)
    logfile_handler.setFormatter(logging.Formatter(LOGFILE_FORMAT))
    logger.addHandler(logfile_handler)

    return logger

@decorator
def log(call):
    logging.getLogger(LOGGER_NAME).debug(f"Starting {call._func.__name__}")
    return call()

def banner():
    """
    Displays the name of this utility using incredible ASCII-art.
    """
    f = Figlet(font='slant')
    return f.renderText('fetchbound')

def init_config(configuration_file):
    """
    Prompts the user for configuration values and then creates a valid configuration file.
    """
    print("""This utility will create a fetch boundary configuration file by prompting """
          """you for values for each of the configuration parameters.""")
    print()
    if not configuration_file:
        configuration_file = Prompt.ask("configuration file name", default="example.ini")
    else:
        print(f'Creating configuration file {configuration_file}')
        print()

    if (os.path.exists(configuration_file)):
        print(f'WARNING: The {configuration_file} already exists.')
        overwrite = Confirm.ask("Overwrite?")
        if not overwrite:
            print('Not overwriting existing file. Exiting.')
            exit(1)

    cfg_parser = configparser.ConfigParser()

    print()
    print(f'{constants.SITE_SECTION_NAME} Parameters')
    print('--------------------------------------------------')
    cfg_parser.add_section(constants.SITE_SECTION_NAME)
    cfg_parser.set(constants.SITE_SECTION_NAME, "tower_longitude", Prompt.ask("Tower longitude (WGS84 degrees)", default=""))
    cfg_parser.set(constants.SITE_SECTION_NAME, "tower_latitude", Prompt.ask("Tower latitude (WGS84 degrees)", default=""))
    cfg_parser.set(constants.SITE_SECTION_NAME, "tower_file", Prompt.ask("Tower vector file (used when coordinates are blank)", default=""))
    cfg_parser.set(constants.SITE_SECTION_NAME, "utm_zone", Prompt.ask("UTM zone (blank to derive from longitude)", default=""))

    print()
    print(f'{constants.BOUNDARY_SECTION_NAME} Parameters')
    print('--------------------------------------------------')
    cfg_parser.add_section(constants.BOUNDARY_SECTION_NAME)
    cfg_parser.set(constants.BOUNDARY_SECTION_NAME, "fetch_distances", Prompt.ask("Fetch distances in metres, comma separated, first at north", default=""))
    cfg_parser.set(constants.BOUNDARY_SECTION_NAME, "fetch_file", Prompt.ask("Fetch distance CSV file (used when distances are blank)", default=""))
    cfg_parser.set(constants.BOUNDARY_SECTION_NAME, "subdivision_step", Prompt.ask("Subdivision step (degrees)", default=str(constants.DEFAULT_SUBDIVISION_STEP)))

    print()
    print(f'{constants.ROI_SECTION_NAME} Parameters')
    print('--------------------------------------------------')
    cfg_parser.add_section(constants.ROI_SECTION_NAME)
    cfg_parser.set(constants.ROI_SECTION_NAME, "roi_file", Prompt.ask("Region of interest vector file", default=""))
    cfg_parser.set(constants.ROI_SECTION_NAME, "azimuth_step", Prompt.ask("Azimuth step (degrees)", default=str(constants.DEFAULT_AZIMUTH_STEP)))
    cfg_parser.set(constants.ROI_SECTION_NAME, "probe_distance", Prompt.ask("Probe distance (metres)", default=str(constants.DEFAULT_PROBE_DISTANCE)))

    print()
    print(f'{constants.DESTINATION_SECTION_NAME} Parameters')
    print('--------------------------------------------------')
    cfg_parser.add_section(constants.DESTINATION_SECTION_NAME)
    cfg_parser.set(constants.DESTINATION_SECTION_NAME, "output_dir", Prompt.ask("Output directory", default=constants.DEFAULT_OUTPUT_DIR))
    cfg_parser.set(constants.DESTINATION_SECTION_NAME, "fetch_filename", Prompt.ask("Fetch table file name", default=constants.DEFAULT_FETCH_FILENAME))
    cfg_parser.set(constants.DESTINATION_SECTION_NAME, "boundary_filename", Prompt.ask("Reconstructed boundary file name", default=constants.DEFAULT_BOUNDARY_FILENAME))
    cfg_parser.set(constants.DESTINATION_SECTION_NAME, "intersections_filename", Prompt.ask("Intersections file name", default=constants.DEFAULT_INTERSECTIONS_FILENAME))

    print()
    print(f'Saving new configuration: {configuration_file}')
    with open(configuration_file, "tw") as file:
        cfg_parser.write(file)

    return configuration_file

def checked(configuration: config.Config, skip=()) -> config.Config:
    valid, errors = config.validate(configuration, skip)
    if not valid:
        raise ValueError('Invalid configuration: ' + ' '.join(errors))
    return configuration

def tower(configuration: config.Config) -> ReferencePoint:
    """
    Returns the tower location from coordinates or, failing that, the tower file.
    """
    if configuration.tower_longitude is not None and configuration.tower_latitude is not None:
        return ReferencePoint(configuration.tower_longitude, configuration.tower_latitude)
    if configuration.tower_file is not None:
        return roi_reader.read_tower(configuration.tower_file)
    raise ValueError('No tower location configured')

def fetch_vector(configuration: config.Config) -> list:
    if configuration.fetch_distances:
        return configuration.fetch_distances
    if configuration.fetch_file is not None:
        return roi_reader.read_fetch_vector(configuration.fetch_file)
    raise ValueError('No fetch distances configured (fetch_distances or fetch_file)')

# -------------------------------------------------------------------

@log
def reconstruct(configuration: config.Config, write: bool = True) -> ReconstructionResult:
    """
    Rebuilds the fetch boundary polygon from the configured fetch vector and,
    if a region of interest is configured, compares the two. The region of
    interest is optional here, so a missing roi_file only fails when read.
    """
    configuration = checked(configuration, skip=("roi_file",))
    logger = logging.getLogger(LOGGER_NAME)

    reference = tower(configuration)
    boundary = fetch_vector(configuration)
    logger.info(f'Reconstructing boundary from {len(boundary)} fetch distances '
                f'around ({reference.longitude}, {reference.latitude})')

    result = reconstruction.reconstruct_boundary(
        boundary,
        reference,
        subdivision_step=configuration.subdivision_step,
        utm_zone=configuration.utm_zone,
    )

    if configuration.roi_file is not None:
        roi = roi_reader.read_roi(configuration.roi_file)
        zone = resolve_zone(reference.longitude, configuration.utm_zone)
        result.metrics = comparison.compare_polygons(
            result.geographic, roi, zone, south=reference.latitude < 0
        )
        logger.info(f"IoU with region of interest: {result.metrics['iou']:.3f}, "
                    f"area ratio: {result.metrics['area_ratio']:.3f}")

    if write:
        write_boundary(result, configuration.boundary_path())

    return result

def write_boundary(result: ReconstructionResult, path) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    properties = {'vertices': [result.vertices]}
    for k, v in (result.metrics or {}).items():
        properties[k] = [v]

    gdf = gpd.GeoDataFrame(properties, geometry=[result.geographic], crs=constants.WGS84)
    gdf.to_file(path, driver='GeoJSON')
    logging.getLogger(LOGGER_NAME).info(f'Wrote reconstructed boundary to {path}')
    return path

@log
def extract(configuration: config.Config, write: bool = True) -> ExtractionResult:
    """
    Derives per-azimuth fetch distances from the region of interest boundary.

    Intersections are computed in both geometry modes: spherical crossings
    give the reported distances, planar crossings are kept for overlays on
    lon/lat plots.
    """
    configuration = checked(configuration)
    logger = logging.getLogger(LOGGER_NAME)

    if configuration.roi_file is None:
        raise ValueError('No roi_file configured')

    reference = tower(configuration)
    roi = roi_reader.read_roi(configuration.roi_file)
    boundary = boundary_linework(roi)

    probes = transects.generate_transects(
        reference,
        transects.azimuth_range(configuration.azimuth_step),
        configuration.probe_distance,
    )
    logger.info(f'Intersecting {len(probes)} transects with {configuration.roi_file}')

    planar = intersect_transects(boundary, probes, GeometryMode.PLANAR)
    spherical = intersect_transects(boundary, probes, GeometryMode.SPHERICAL)
    log_mode_discrepancy(planar, spherical)

    table = report.fetch_table(reference, spherical)
    result = ExtractionResult(reference, probes, planar, spherical, table)

    if write:
        report.write_fetch_table(table, configuration.fetch_path())
        write_intersections(result, configuration.intersections_path())

    return result

def log_mode_discrepancy(planar: dict, spherical: dict):
    """
    Logs the largest offset between planar and spherical crossings.
    """
    geod = pyproj.Geod(ellps=constants.ELLIPSOID)
    offsets = {}
    for azimuth, p in planar.items():
        s = spherical[azimuth]
        _, _, offsets[azimuth] = geod.inv(p.x, p.y, s.x, s.y)

    if offsets:
        worst = max(offsets, key=offsets.get)
        logging.getLogger(LOGGER_NAME).info(
            f'Largest planar/spherical intersection offset: {offsets[worst]:.2f} m '
            f'at azimuth {worst:g}'
        )

def write_intersections(result: ExtractionResult, path) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    rows = []
    for mode, crossings in ((constants.PLANAR, result.planar), (constants.SPHERICAL, result.spherical)):
        rows.extend((azimuth, mode, point) for azimuth, point in sorted(crossings.items()))

    gdf = gpd.GeoDataFrame(
        {
            'azimuth': [r[0] for r in rows],
            'mode': [r[1] for r in rows],
        },
        geometry=[r[2] for r in rows],
        crs=constants.WGS84,
    )
    gdf.to_file(path, driver='GeoJSON')
    logging.getLogger(LOGGER_NAME).info(f'Wrote {len(rows)} intersections to {path}')
    return path
