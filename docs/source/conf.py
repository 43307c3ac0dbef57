import sys
from pathlib import Path

sys.path.insert(0, str(Path("..", "..", "src").resolve()))

project = "fetchbound"
copyright = "2026, CzechGlobe"
author = "CzechGlobe Ecosystem Fluxes Group"
release = "v0.1.0"
version = "v0.1.0"

extensions = [
    "myst_parser",
    "sphinx.ext.autodoc",
    "sphinx.ext.autosummary",
    "sphinx.ext.napoleon",
]

exclude_patterns = ["_build", "Thumbs.db", ".DS_Store", ".venv"]
intersphinx_disabled_domains = ["std"]

templates_path = ["_templates"]

always_document_param_types = True
html_theme = "alabaster"

html_static_path = ["_static"]
