"""
Scenario file loading.

A scenario is a JSON document holding one referral, the candidate
openings and their provider context, and optional config overrides:

    {
        "referral": {...},
        "openings": [...],
        "organizations": [...],
        "sites": [...],
        "licenses": [...],
        "capability_profiles": [...],
        "config": {"weights": {...}, "thresholds": {...}}
    }
"""

import json
from pathlib import Path
from typing import Any, Optional

from pydantic import Field, ValidationError

from referral_match.utils.logger import get_logger

from .models import (
    CapabilityProfile,
    EmbeddedModel,
    LicenseInstance,
    Opening,
    Organization,
    Referral,
    Site,
)

logger = get_logger(__name__)


class ScenarioLoadError(ValueError):
    """Raised when a scenario file cannot be read or validated."""


class Scenario(EmbeddedModel):
    """A referral together with everything needed to match it."""

    referral: Referral
    openings: list[Opening] = Field(default_factory=list)
    organizations: list[Organization] = Field(default_factory=list)
    sites: list[Site] = Field(default_factory=list)
    licenses: list[LicenseInstance] = Field(default_factory=list)
    capability_profiles: list[CapabilityProfile] = Field(default_factory=list)
    config: Optional[dict[str, Any]] = None


def load_scenario(path: str | Path) -> Scenario:
    """
    Load and validate a scenario JSON file.

    Args:
        path: Path to the scenario file

    Returns:
        Validated Scenario

    Raises:
        ScenarioLoadError: If the file is missing, not JSON, or fails validation
    """
    path = Path(path)

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ScenarioLoadError(f"Cannot read scenario file {path}: {e}") from e

    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise ScenarioLoadError(f"Invalid JSON in {path}: {e}") from e

    try:
        scenario = Scenario.model_validate(data)
    except ValidationError as e:
        raise ScenarioLoadError(f"Invalid scenario in {path}: {e}") from e

    logger.debug(
        f"Loaded scenario {path.name}: {len(scenario.openings)} openings, "
        f"{len(scenario.organizations)} organizations, {len(scenario.sites)} sites"
    )
    return scenario
