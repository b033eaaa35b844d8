"""
Data layer for the referral matching service.

Submodules:
- models: Pydantic data models/schemas
- loader: JSON scenario files for the CLI and simulations
"""

from .loader import Scenario, ScenarioLoadError, load_scenario

__all__ = [
    "Scenario",
    "ScenarioLoadError",
    "load_scenario",
]
