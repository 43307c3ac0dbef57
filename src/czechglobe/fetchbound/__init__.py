__version__ = "v0.1.0"


__all__ = ["__version__", "cli", "config", "constants", "fetchbound", "models", "report"]

from . import cli
from . import config
from . import constants
from . import fetchbound
from . import models
from . import report
