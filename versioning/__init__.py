"""
Versioning — immutable named snapshots of projections, the async store
contract, its file-backed implementation, retry policy and the display cache.
"""

from .snapshot import NewVersion, VersionSnapshot
from .store import VersionStore, InMemoryVersionStore
from .file_store import JsonFileVersionStore
from .retry import RetryingVersionStore
from .cache import CachedForecast, ForecastCache

__all__ = [
    "NewVersion",
    "VersionSnapshot",
    "VersionStore",
    "InMemoryVersionStore",
    "JsonFileVersionStore",
    "RetryingVersionStore",
    "CachedForecast",
    "ForecastCache",
]
