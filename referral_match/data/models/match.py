"""
Match output models.

Defines the per-opening score breakdown, ranked match results and the
run metadata returned by the matching engine.
"""

from typing import Optional

from pydantic import Field

from referral_match.utils.constants import FACTOR_KEYS, MatchQuality, ViolationType

from .base import EmbeddedModel
from .config import MatchingConfig
from .opening import Opening
from .provider import Organization, Site


class ScoreBreakdown(EmbeddedModel):
    """Points earned by each of the ten scoring factors."""

    county: float = 0.0
    funding: float = 0.0
    gender: float = 0.0
    age: float = 0.0
    availability: float = 0.0
    capability: float = 0.0
    location_proximity: float = 0.0
    placement_success: float = 0.0
    preferences: float = 0.0
    services: float = 0.0

    @property
    def total_score(self) -> float:
        """Calculate total of all factor scores."""
        return sum(self.as_dict().values())

    def as_dict(self) -> dict[str, float]:
        """Factor scores keyed by factor name, in factor order."""
        return {key: getattr(self, key) for key in FACTOR_KEYS}


class ConstraintViolation(EmbeddedModel):
    """A hard constraint an opening failed."""

    type: ViolationType
    message: str


class MatchResult(EmbeddedModel):
    """One opening that survived filtering, with its score and explanation."""

    opening_id: Optional[str] = None
    opening: Opening
    organization: Optional[Organization] = None
    site: Optional[Site] = None

    score: int  # rounded total
    raw_score: float  # unrounded total, for re-explaining
    score_breakdown: ScoreBreakdown
    match_explanation: str = ""
    quality: MatchQuality = MatchQuality.FAIR
    risk_flags: list[str] = Field(default_factory=list)


class MatchRunMeta(EmbeddedModel):
    """Summary of one matching run."""

    openings_searched: int = 0
    matches_found: int = 0
    top_match_score: int = 0
    avg_match_score: int = 0
    ineligible_openings: int = 0
    excluded_by_constraints: int = 0
    below_minimum_score: int = 0
    latency_ms: Optional[int] = None  # set by the engine wrapper
    config_used: MatchingConfig = Field(default_factory=MatchingConfig)


class MatchRun(EmbeddedModel):
    """Ranked results plus run metadata."""

    results: list[MatchResult] = Field(default_factory=list)
    meta: MatchRunMeta = Field(default_factory=MatchRunMeta)

    @property
    def top_match(self) -> Optional[MatchResult]:
        """Best result, if any."""
        return self.results[0] if self.results else None
