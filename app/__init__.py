"""
App layer — async forecast service, file exports and the command-line entry point.
"""

from .service import ForecastRun, ForecastService
from .exports import export_projection

__all__ = [
    "ForecastRun",
    "ForecastService",
    "export_projection",
]
