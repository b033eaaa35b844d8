"""
Matching configuration resolver.

Merges caller overrides over the defaults, one sub-object at a time.
Defaults are never mutated; every call returns a new MatchingConfig.
"""

from collections.abc import Mapping
from typing import Any

from referral_match.data.models import (
    MatchConstraints,
    MatchingConfig,
    MatchThresholds,
    ScoringWeights,
)
from referral_match.utils.constants import (
    DEFAULT_CONSTRAINTS,
    DEFAULT_THRESHOLDS,
    DEFAULT_WEIGHTS,
)

DEFAULT_CONFIG = MatchingConfig()

ConfigOverrides = MatchingConfig | Mapping[str, Any] | None


def _merge(defaults: Mapping[str, Any], overrides: Any) -> dict[str, Any]:
    """Shallow merge; None values in the overrides leave the default in place."""
    if overrides is None:
        return dict(defaults)
    if hasattr(overrides, "model_dump"):
        overrides = overrides.model_dump()
    merged = dict(defaults)
    merged.update({k: v for k, v in overrides.items() if v is not None})
    return merged


def resolve_config(overrides: ConfigOverrides = None) -> MatchingConfig:
    """
    Build a fully populated matching configuration.

    Args:
        overrides: None, an existing MatchingConfig, or a mapping with any of
            the keys "weights", "constraints" and "thresholds", each holding
            a partial mapping

    Returns:
        A new MatchingConfig with every field populated
    """
    if overrides is None:
        return DEFAULT_CONFIG
    if isinstance(overrides, MatchingConfig):
        return overrides

    return MatchingConfig(
        weights=ScoringWeights(**_merge(DEFAULT_WEIGHTS, overrides.get("weights"))),
        constraints=MatchConstraints(**_merge(DEFAULT_CONSTRAINTS, overrides.get("constraints"))),
        thresholds=MatchThresholds(**_merge(DEFAULT_THRESHOLDS, overrides.get("thresholds"))),
    )
