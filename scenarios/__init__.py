"""
Scenarios — named multiplier sets and how they scale drivers before projecting.
"""

from .config import ScenarioConfig, neutral_scenario
from .table import (
    DEFAULT_SCENARIOS,
    ScenarioTable,
    ScenarioSource,
    StaticScenarioSource,
    get_default_scenarios,
)
from .apply import ScenarioDrivers, apply_scenario

__all__ = [
    "ScenarioConfig",
    "neutral_scenario",
    "DEFAULT_SCENARIOS",
    "ScenarioTable",
    "ScenarioSource",
    "StaticScenarioSource",
    "get_default_scenarios",
    "ScenarioDrivers",
    "apply_scenario",
]
