import configparser
import dataclasses
import os.path
from typing import List, Optional

from czechglobe.fetchbound import constants
from czechglobe.fetchbound.readers.roi_reader import parse_fetch_distances


@dataclasses.dataclass
class Config:
    tower_longitude: Optional[float]
    tower_latitude: Optional[float]
    tower_file: Optional[str]
    utm_zone: Optional[int]
    fetch_distances: Optional[List[float]]
    fetch_file: Optional[str]
    subdivision_step: float
    roi_file: Optional[str]
    azimuth_step: float
    probe_distance: float
    output_dir: str
    fetch_filename: str
    boundary_filename: str
    intersections_filename: str

    def show(self):
        print()
        print('Using configuration:')
        for k, v in self.__dict__.items():
            print(f'  + {k}: {v}')

    def fetch_path(self):
        return os.path.join(self.output_dir, self.fetch_filename)

    def boundary_path(self):
        return os.path.join(self.output_dir, self.boundary_filename)

    def intersections_path(self):
        return os.path.join(self.output_dir, self.intersections_filename)


def config_parser_factory(configuration_file):
    """
    Returns a ConfigParser by reading the specified file.
    """
    if configuration_file is None or not os.path.exists(configuration_file):
        raise ValueError(f'Unable to find configuration file {configuration_file}')
    cfg_parser = configparser.ConfigParser(interpolation=configparser.ExtendedInterpolation())
    cfg_parser.read(configuration_file)
    return cfg_parser


def _get_configuration_value(section, name, value_type, config_parser, overrides):
    """
    Returns a value from the provided config parser; any value for the key that
    is provided in the 'overrides' dictionary will take precedence. Missing or
    blank optional values are returned as None.
    """
    if overrides.get(name) is not None:
        return overrides.get(name)

    if not config_parser.has_option(section, name):
        return None

    raw = config_parser.get(section, name)
    if raw is None or raw.strip() == '':
        return None

    if value_type is int:
        return config_parser.getint(section, name)
    elif value_type is float:
        return config_parser.getfloat(section, name)
    elif value_type is list:
        return parse_fetch_distances(raw)
    else:
        return raw


def configuration(config_parser, overrides):
    """
    Returns a valid Config object that is populated from the provided config
    parser, with values overriden with anything provided in 'overrides'.
    """
    defaults = {
        constants.BOUNDARY_SECTION_NAME: {
            'subdivision_step': constants.DEFAULT_SUBDIVISION_STEP,
        },
        constants.ROI_SECTION_NAME: {
            'azimuth_step': constants.DEFAULT_AZIMUTH_STEP,
            'probe_distance': constants.DEFAULT_PROBE_DISTANCE,
        },
        constants.DESTINATION_SECTION_NAME: {
            'output_dir': constants.DEFAULT_OUTPUT_DIR,
            'fetch_filename': constants.DEFAULT_FETCH_FILENAME,
            'boundary_filename': constants.DEFAULT_BOUNDARY_FILENAME,
            'intersections_filename': constants.DEFAULT_INTERSECTIONS_FILENAME,
        },
    }

    def value(section, name, value_type=str):
        v = _get_configuration_value(section, name, value_type, config_parser, overrides)
        if v is None:
            return defaults.get(section, {}).get(name)
        return v

    site = constants.SITE_SECTION_NAME
    boundary = constants.BOUNDARY_SECTION_NAME
    roi = constants.ROI_SECTION_NAME
    destination = constants.DESTINATION_SECTION_NAME

    try:
        return Config(
            value(site, 'tower_longitude', float),
            value(site, 'tower_latitude', float),
            value(site, 'tower_file'),
            value(site, 'utm_zone', int),
            value(boundary, 'fetch_distances', list),
            value(boundary, 'fetch_file'),
            value(boundary, 'subdivision_step', float),
            value(roi, 'roi_file'),
            value(roi, 'azimuth_step', float),
            value(roi, 'probe_distance', float),
            value(destination, 'output_dir'),
            value(destination, 'fetch_filename'),
            value(destination, 'boundary_filename'),
            value(destination, 'intersections_filename'),
        )
    except ValueError as e:
        raise ValueError(f'Unable to read the configuration file: {e}') from e


def validate(configuration, skip=()):
    """
    Validates each value in the configuration. Names listed in 'skip' are
    not checked.
    """
    validations = [
        ['tower_file', lambda f: f is None or os.path.exists(f), 'The tower_file does not exist.'],
        ['fetch_file', lambda f: f is None or os.path.exists(f), 'The fetch_file does not exist.'],
        ['roi_file', lambda f: f is None or os.path.exists(f), 'The roi_file does not exist.'],
        ['utm_zone', lambda z: z is None or 1 <= z <= 60, 'The utm_zone must be between 1 and 60.'],
        ['tower_longitude', lambda x: x is None or -180 <= x <= 180, 'The tower_longitude must be within [-180, 180].'],
        ['tower_latitude', lambda y: y is None or -90 <= y <= 90, 'The tower_latitude must be within [-90, 90].'],
        ['subdivision_step', lambda s: s > 0, 'The subdivision_step must be positive.'],
        ['azimuth_step', lambda s: 0 < s <= 360, 'The azimuth_step must be within (0, 360].'],
        ['probe_distance', lambda d: d > 0, 'The probe_distance must be positive.'],
        ['fetch_distances', lambda ds: ds is None or (len(ds) > 0 and all(d > 0 for d in ds)), 'The fetch_distances must all be positive.'],
    ]
    errors = [msg for name, fn, msg in validations
              if name not in skip and not fn(getattr(configuration, name))]

    has_coordinates = configuration.tower_longitude is not None and configuration.tower_latitude is not None
    if not has_coordinates and configuration.tower_file is None:
        errors.append('Either tower_longitude and tower_latitude or tower_file must be given.')

    return len(errors) == 0, errors
