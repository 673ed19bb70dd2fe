"""Version information for zone01-profile."""

__version__ = "1.0.0"
__version_date__ = "2026-10-19"

__title__ = "zone01_profile"
__description__ = "Zone01 student profile dashboard: GraphQL metrics and SVG charts"
__url__ = "https://github.com/zone01-athens/zone01-profile"

__author__ = "Zone01 Profile Contributors"

__license__ = "MIT"
__copyright__ = "Copyright 2026 Zone01 Profile Contributors"

__all__ = [
    "__version__",
    "__version_date__",
    "__title__",
    "__description__",
    "__url__",
    "__author__",
    "__license__",
    "__copyright__",
]
