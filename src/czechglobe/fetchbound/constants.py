# Default configuration values
DEFAULT_SUBDIVISION_STEP = 1.0
DEFAULT_AZIMUTH_STEP = 5.0
DEFAULT_PROBE_DISTANCE = 1e6
DEFAULT_OUTPUT_DIR = 'output'
DEFAULT_FETCH_FILENAME = 'fetch.csv'
DEFAULT_BOUNDARY_FILENAME = 'fetch_boundary.geojson'
DEFAULT_INTERSECTIONS_FILENAME = 'intersections.geojson'

# Configuration sections
SITE_SECTION_NAME = 'Site'
BOUNDARY_SECTION_NAME = 'Boundary'
ROI_SECTION_NAME = 'ROI'
DESTINATION_SECTION_NAME = 'Destination'

# Coordinate reference systems
WGS84 = 'EPSG:4326'
ELLIPSOID = 'WGS84'

# Fetch table columns
AZIMUTH_COLUMN = 'Azimuth'
FETCH_COLUMN = 'Fetch'

# Geometry computation modes
PLANAR = 'planar'
SPHERICAL = 'spherical'

# Rounding used when counting distinct planar vertices (metres)
VERTEX_DECIMALS = 6
