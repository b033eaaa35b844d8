"""
Matching configuration models.

Weights, hard constraints and thresholds are immutable value objects.
Nothing here enforces that weights total 100 or that thresholds are
ordered; validation_issues() reports such problems for display and the
engine scores with whatever numbers it is given.
"""

from typing import Any

from pydantic import Field

from referral_match.utils.constants import (
    DEFAULT_CONSTRAINTS,
    DEFAULT_THRESHOLDS,
    DEFAULT_WEIGHTS,
    FACTOR_WEIGHT_KEYS,
)

from .base import FrozenModel, WholeNumber


class ScoringWeights(FrozenModel):
    """Maximum points each factor can contribute."""

    county_match: float = DEFAULT_WEIGHTS["county_match"]
    funding_match: float = DEFAULT_WEIGHTS["funding_match"]
    gender_match: float = DEFAULT_WEIGHTS["gender_match"]
    age_match: float = DEFAULT_WEIGHTS["age_match"]
    availability_match: float = DEFAULT_WEIGHTS["availability_match"]
    capability_match: float = DEFAULT_WEIGHTS["capability_match"]
    location_proximity: float = DEFAULT_WEIGHTS["location_proximity"]
    placement_success: float = DEFAULT_WEIGHTS["placement_success"]
    preferences_match: float = DEFAULT_WEIGHTS["preferences_match"]
    services_match: float = DEFAULT_WEIGHTS["services_match"]

    def for_factor(self, factor: str) -> float:
        """Weight for a score breakdown key such as "county"."""
        return getattr(self, FACTOR_WEIGHT_KEYS[factor])

    @property
    def total_weight(self) -> float:
        """Calculate sum of all weights."""
        return sum(self.model_dump().values())


class MatchConstraints(FrozenModel):
    """Hard gates; an opening failing any enabled gate is never scored."""

    require_funding_match: bool = DEFAULT_CONSTRAINTS["require_funding_match"]
    # Carried for configuration parity; no distance data exists to enforce them
    require_county_proximity: bool = DEFAULT_CONSTRAINTS["require_county_proximity"]
    max_county_distance: float = DEFAULT_CONSTRAINTS["max_county_distance"]
    require_gender_match: bool = DEFAULT_CONSTRAINTS["require_gender_match"]
    require_age_range_match: bool = DEFAULT_CONSTRAINTS["require_age_range_match"]
    require_verified_license: bool = DEFAULT_CONSTRAINTS["require_verified_license"]
    max_distance_miles: float = DEFAULT_CONSTRAINTS["max_distance_miles"]


class MatchThresholds(FrozenModel):
    """Quality bands and the result cap."""

    minimum_score: float = DEFAULT_THRESHOLDS["minimum_score"]
    good_score: float = DEFAULT_THRESHOLDS["good_score"]
    excellent_score: float = DEFAULT_THRESHOLDS["excellent_score"]
    max_results: WholeNumber = DEFAULT_THRESHOLDS["max_results"]


class MatchingConfig(FrozenModel):
    """Fully resolved configuration for one matching run."""

    weights: ScoringWeights = Field(default_factory=ScoringWeights)
    constraints: MatchConstraints = Field(default_factory=MatchConstraints)
    thresholds: MatchThresholds = Field(default_factory=MatchThresholds)

    def validation_issues(self) -> list[str]:
        """
        Describe configuration problems without rejecting the config.

        Returns:
            Human-readable issues, empty when the config is well formed
        """
        issues = []

        total = self.weights.total_weight
        if total != 100:
            issues.append(f"Weights total {total:g}, expected 100")

        negative = [k for k, v in self.weights.model_dump().items() if v < 0]
        if negative:
            issues.append(f"Negative weights: {', '.join(negative)}")

        t = self.thresholds
        if not t.minimum_score <= t.good_score <= t.excellent_score:
            issues.append(
                "Thresholds must satisfy minimum_score <= good_score <= excellent_score "
                f"(got {t.minimum_score:g}, {t.good_score:g}, {t.excellent_score:g})"
            )

        if t.max_results < 1:
            issues.append(f"max_results is {t.max_results}, no results can be returned")

        return issues

    def to_dict(self) -> dict[str, Any]:
        """Convert to a plain nested dictionary."""
        return self.model_dump()
