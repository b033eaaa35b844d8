"""
Pydantic data models for the referral matching service.

This module provides the read-only input entities supplied by the
surrounding application, the matching configuration, and the engine's
output models.
"""

# Base models
from .base import EmbeddedModel, EntityModel, Flag, FrozenModel, StrList, WholeNumber

# Referral models
from .referral import ClientPreferences, Referral, SpecificNeeds

# Opening models
from .opening import Amenities, Opening, PlacementSuccessMetrics, ServicesOffered

# Provider models
from .provider import (
    BehavioralCapabilities,
    CapabilityProfile,
    LicenseInstance,
    MedicalCapabilities,
    Organization,
    ReferralOutcome,
    Site,
    Subscription,
)

# Configuration models
from .config import MatchConstraints, MatchingConfig, MatchThresholds, ScoringWeights

# Match models
from .match import (
    ConstraintViolation,
    MatchResult,
    MatchRun,
    MatchRunMeta,
    ScoreBreakdown,
)

__all__ = [
    # Base
    "EmbeddedModel",
    "EntityModel",
    "Flag",
    "FrozenModel",
    "StrList",
    "WholeNumber",
    # Referral
    "ClientPreferences",
    "Referral",
    "SpecificNeeds",
    # Opening
    "Amenities",
    "Opening",
    "PlacementSuccessMetrics",
    "ServicesOffered",
    # Provider
    "BehavioralCapabilities",
    "CapabilityProfile",
    "LicenseInstance",
    "MedicalCapabilities",
    "Organization",
    "ReferralOutcome",
    "Site",
    "Subscription",
    # Config
    "MatchConstraints",
    "MatchingConfig",
    "MatchThresholds",
    "ScoringWeights",
    # Match
    "ConstraintViolation",
    "MatchResult",
    "MatchRun",
    "MatchRunMeta",
    "ScoreBreakdown",
]
