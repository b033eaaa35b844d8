"""
Application-wide constants for the referral matching service.

This module contains all constant values used throughout the application.
Modify these values to customize behavior without changing code logic.
"""

from enum import Enum
from types import MappingProxyType
from typing import Final, Mapping


# =============================================================================
# Application Constants
# =============================================================================

APP_NAME: Final[str] = "referral-match"
APP_DISPLAY_NAME: Final[str] = "Provider Referral Matching Engine"
VERSION: Final[str] = "0.1.0"


# =============================================================================
# Scoring Defaults
# =============================================================================

# Default factor weights (sum to 100)
DEFAULT_WEIGHTS: Final[Mapping[str, float]] = MappingProxyType({
    "county_match": 18,
    "funding_match": 18,
    "gender_match": 12,
    "age_match": 12,
    "availability_match": 10,
    "capability_match": 10,
    "location_proximity": 8,
    "placement_success": 6,
    "preferences_match": 4,
    "services_match": 2,
})

# Hard constraints evaluated before scoring
DEFAULT_CONSTRAINTS: Final[Mapping[str, bool | float]] = MappingProxyType({
    "require_funding_match": True,
    "require_county_proximity": False,
    "max_county_distance": 50,
    "require_gender_match": True,
    "require_age_range_match": True,
    "require_verified_license": True,
    "max_distance_miles": 100,
})

# Quality bands and result cap
DEFAULT_THRESHOLDS: Final[Mapping[str, int]] = MappingProxyType({
    "minimum_score": 40,
    "good_score": 70,
    "excellent_score": 85,
    "max_results": 10,
})

# Score breakdown key -> weight key, in breakdown order
FACTOR_WEIGHT_KEYS: Final[Mapping[str, str]] = MappingProxyType({
    "county": "county_match",
    "funding": "funding_match",
    "gender": "gender_match",
    "age": "age_match",
    "availability": "availability_match",
    "capability": "capability_match",
    "location_proximity": "location_proximity",
    "placement_success": "placement_success",
    "preferences": "preferences_match",
    "services": "services_match",
})

FACTOR_KEYS: Final[tuple[str, ...]] = tuple(FACTOR_WEIGHT_KEYS)

FACTOR_LABELS: Final[Mapping[str, str]] = MappingProxyType({
    "county": "location in same county",
    "funding": "funding source compatibility",
    "gender": "gender alignment",
    "age": "age appropriateness",
    "availability": "immediate availability",
    "capability": "care capability match",
    "location_proximity": "proximity to client location",
    "placement_success": "proven placement success rate",
    "preferences": "client preference alignment",
    "services": "specialized services availability",
})


# =============================================================================
# Factor Tuning
# =============================================================================

# Partial credit multipliers
COUNTY_SERVED_CREDIT: Final[float] = 0.9
MA_FAMILY_FUNDING_CREDIT: Final[float] = 0.7
AGE_NEAR_MISS_CREDIT: Final[float] = 0.5
AGE_GRACE_YEARS: Final[int] = 2
AVAILABILITY_DAILY_DECAY: Final[float] = 0.1
AVAILABILITY_FLOOR: Final[float] = 0.3
THERAPY_NEED_CREDIT: Final[float] = 0.8
UNKNOWN_FACTOR_CREDIT: Final[float] = 0.5

# No geocoding: every non-matching county pair is treated as this far apart
ASSUMED_INTER_COUNTY_MILES: Final[float] = 30
PROXIMITY_CREDITS: Final[Mapping[str, float]] = MappingProxyType({
    "within_preference": 0.7,
    "near_preference": 0.4,
    "default": 0.3,
})
PROXIMITY_NEAR_FACTOR: Final[float] = 1.5

SIMILAR_PROFILE_FULL_BONUS: Final[int] = 10

# Capability gap penalties (fraction of capability weight)
CAPABILITY_PENALTIES: Final[Mapping[str, float]] = MappingProxyType({
    "aggression_unsupported": 0.4,
    "severe_aggression_mild_support": 0.3,
    "elopement_unsupported": 0.3,
    "tube_feeding_unsupported": 0.5,
    "ventilator_unsupported": 0.5,
    "seizure_unsupported": 0.3,
})


# =============================================================================
# Clinical Keywords
# =============================================================================

# Substring matches against lowercased free text, no negation handling
CLINICAL_KEYWORDS: Final[Mapping[str, tuple[str, ...]]] = MappingProxyType({
    "aggression": ("aggression", "aggressive"),
    "severe": ("severe",),
    "wandering": ("elopement", "wander"),
    "tube_feeding": ("tube feed", "g-tube"),
    "ventilator": ("ventilator", "vent"),
    "seizure": ("seizure",),
    "violence": ("aggression", "violence"),
    "self_harm": ("self-harm", "self-injury"),
    "flight_risk": ("elopement", "flight risk"),
    "airway": ("ventilator", "trach"),
})


# =============================================================================
# Presentation
# =============================================================================

# Explanation prefixes. These bands are independent of the configured
# good/excellent thresholds used for MatchQuality.
EXPLANATION_BANDS: Final[tuple[tuple[float, str], ...]] = (
    (90, "Excellent Match"),
    (75, "Strong Match"),
    (60, "Good Match"),
)
EXPLANATION_FALLBACK_BAND: Final[str] = "Acceptable Match"
EXPLANATION_TOP_FACTORS: Final[int] = 3
EXPLANATION_CAUTION_BELOW: Final[float] = 85

LOW_MATCH_CONFIDENCE_SCORE: Final[float] = 60


# =============================================================================
# Prominence Ranking
# =============================================================================

PLAN_BOOSTS: Final[Mapping[str, float]] = MappingProxyType({
    "free": 1.0,
    "basic": 1.05,
    "professional": 1.10,
    "enterprise": 1.15,
})
RELIABILITY_BOUNDS: Final[tuple[float, float]] = (0.8, 1.2)
SCORE_BAND_WIDTH: Final[float] = 5
MIN_HISTORY_FOR_ACCEPTANCE: Final[int] = 5


# =============================================================================
# Enums
# =============================================================================


class OpeningStatus(str, Enum):
    """Lifecycle status of a provider opening."""

    ACTIVE = "active"
    PAUSED = "paused"
    FILLED = "filled"
    CLOSED = "closed"


class UrgencyLevel(str, Enum):
    """How quickly a referral needs a placement."""

    ROUTINE = "routine"
    URGENT = "urgent"
    CRISIS = "crisis"


class LicenseStatus(str, Enum):
    """Verification state of a license record."""

    VERIFIED = "verified"
    PENDING = "pending"
    EXPIRED = "expired"
    REJECTED = "rejected"


class ViolationType(str, Enum):
    """Hard constraint that excluded an opening."""

    FUNDING = "funding"
    GENDER = "gender"
    AGE = "age"
    LICENSE = "license"


class MatchQuality(str, Enum):
    """Quality label attached to every returned match."""

    EXCELLENT = "excellent"
    GOOD = "good"
    FAIR = "fair"

    @classmethod
    def from_score(
        cls, score: float, good_score: float, excellent_score: float
    ) -> "MatchQuality":
        """Convert a numeric score to a quality label using configured thresholds."""
        if score >= excellent_score:
            return cls.EXCELLENT
        elif score >= good_score:
            return cls.GOOD
        return cls.FAIR
