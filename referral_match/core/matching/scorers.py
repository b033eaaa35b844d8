"""
Factor scorers.

Each scorer is a pure function of (referral, opening, context, weights)
returning the points that factor contributes, between 0 and the factor's
weight. All ten run for every opening that passes the constraint filter.
"""

from collections.abc import Callable
from dataclasses import dataclass
from datetime import date
from typing import Optional

from referral_match.data.models import (
    CapabilityProfile,
    LicenseInstance,
    Opening,
    Organization,
    Referral,
    ScoreBreakdown,
    ScoringWeights,
    Site,
)
from referral_match.utils.constants import (
    AGE_GRACE_YEARS,
    AGE_NEAR_MISS_CREDIT,
    ASSUMED_INTER_COUNTY_MILES,
    AVAILABILITY_DAILY_DECAY,
    AVAILABILITY_FLOOR,
    CAPABILITY_PENALTIES,
    COUNTY_SERVED_CREDIT,
    MA_FAMILY_FUNDING_CREDIT,
    PROXIMITY_CREDITS,
    PROXIMITY_NEAR_FACTOR,
    SIMILAR_PROFILE_FULL_BONUS,
    THERAPY_NEED_CREDIT,
    UNKNOWN_FACTOR_CREDIT,
)

from .signals import ClinicalTextSignals, keyword_signals


@dataclass(frozen=True)
class ScoringContext:
    """Provider records and run-wide inputs resolved for one opening."""

    organization: Optional[Organization] = None
    site: Optional[Site] = None
    license: Optional[LicenseInstance] = None
    capability: Optional[CapabilityProfile] = None
    reference_date: Optional[date] = None
    signals: ClinicalTextSignals = keyword_signals


Scorer = Callable[[Referral, Opening, ScoringContext, ScoringWeights], float]


def score_county(referral, opening, ctx, weights) -> float:
    """Full weight for the site's county, 90% if the organization serves it."""
    if not referral.client_county:
        return 0.0

    county = referral.client_county.lower()
    site_county = ctx.site.county if ctx.site else None
    if site_county and site_county.lower() == county:
        return weights.county_match

    served = ctx.organization.counties_served if ctx.organization else []
    if any(c.lower() == county for c in served):
        return weights.county_match * COUNTY_SERVED_CREDIT

    return 0.0


def score_funding(referral, opening, ctx, weights) -> float:
    """Exact funding match, or partial credit within the MA family."""
    if not referral.funding_source or not opening.funding_accepted:
        return 0.0

    funding = referral.funding_source.upper()
    if any(f.upper() == funding for f in opening.funding_accepted):
        return weights.funding_match

    if "MA" in funding and any("MA" in f for f in opening.funding_accepted):
        return weights.funding_match * MA_FAMILY_FUNDING_CREDIT

    return 0.0


def score_gender(referral, opening, ctx, weights) -> float:
    client = referral.client_gender
    required = opening.gender_requirement
    if not client or not required or "any" in (client.lower(), required.lower()):
        return weights.gender_match

    if client.lower() == required.lower():
        return weights.gender_match

    return 0.0


def score_age(referral, opening, ctx, weights) -> float:
    """
    Full weight inside the range, half for unknown age or a near miss.

    A near miss is a shortfall of at most two years beyond the nearest bound.
    """
    age = referral.client_age
    if age is None:
        return weights.age_match * AGE_NEAR_MISS_CREDIT

    age_min, age_max = opening.age_min, opening.age_max
    if age_min is None and age_max is None:
        return weights.age_match

    below = age_min - age if age_min is not None and age < age_min else 0
    above = age - age_max if age_max is not None and age > age_max else 0
    shortfall = below + above

    if shortfall == 0:
        return weights.age_match
    if shortfall <= AGE_GRACE_YEARS:
        return weights.age_match * AGE_NEAR_MISS_CREDIT
    return 0.0


def score_availability(referral, opening, ctx, weights) -> float:
    """
    Full weight when the opening is available by the desired start date.

    Loses 10% per day the opening lags the desired date, never below 30%.
    """
    if not opening.is_open:
        return 0.0

    today = ctx.reference_date or date.today()
    available = opening.available_date
    desired = referral.desired_start_date

    if available is None or available <= today or desired is None or available <= desired:
        return weights.availability_match

    days_late = (available - desired).days
    return weights.availability_match * max(AVAILABILITY_FLOOR, 1 - days_late * AVAILABILITY_DAILY_DECAY)


def score_capability(referral, opening, ctx, weights) -> float:
    """
    Start from full weight and subtract penalties for unsupported needs.

    Needs are read from the referral's free text; unknown capability
    (no profile) earns half weight.
    """
    profile = ctx.capability
    if profile is None:
        return weights.capability_match * UNKNOWN_FACTOR_CREDIT

    signals = ctx.signals
    behavioral = profile.behavioral_levels
    medical = profile.medical_support
    penalties = 0.0

    if signals.mentions_aggression(referral):
        if behavioral.aggression_physical == "none":
            penalties += CAPABILITY_PENALTIES["aggression_unsupported"]
        elif behavioral.aggression_physical == "mild" and signals.mentions_severity(referral):
            penalties += CAPABILITY_PENALTIES["severe_aggression_mild_support"]

    if signals.mentions_wandering(referral):
        if behavioral.elopement_risk in ("none", "low"):
            penalties += CAPABILITY_PENALTIES["elopement_unsupported"]

    if signals.needs_tube_feeding(referral) and not medical.tube_feeding:
        penalties += CAPABILITY_PENALTIES["tube_feeding_unsupported"]

    if signals.needs_ventilator(referral) and not medical.ventilator:
        penalties += CAPABILITY_PENALTIES["ventilator_unsupported"]

    if signals.needs_seizure_management(referral) and medical.seizure_management == "none":
        penalties += CAPABILITY_PENALTIES["seizure_unsupported"]

    return weights.capability_match * max(0.0, 1 - penalties)


def score_location_proximity(referral, opening, ctx, weights) -> float:
    """
    Same county earns full weight; otherwise compare an assumed
    inter-county distance against the client's preferred distance.
    """
    site_county = ctx.site.county if ctx.site else None
    if not site_county or not referral.client_county:
        return 0.0

    if site_county.lower() == referral.client_county.lower():
        return weights.location_proximity

    preferred = referral.preferences.preferred_location_proximity
    if preferred:
        if ASSUMED_INTER_COUNTY_MILES <= preferred:
            return weights.location_proximity * PROXIMITY_CREDITS["within_preference"]
        if ASSUMED_INTER_COUNTY_MILES <= preferred * PROXIMITY_NEAR_FACTOR:
            return weights.location_proximity * PROXIMITY_CREDITS["near_preference"]

    return weights.location_proximity * PROXIMITY_CREDITS["default"]


def score_placement_success(referral, opening, ctx, weights) -> float:
    """
    Half the weight scaled by the 90-day success rate, plus up to half
    as a bonus for placements of clients with a similar profile.
    """
    metrics = opening.placement_success_metrics
    if metrics is None:
        return 0.0

    score = 0.0
    total = metrics.total_placements_last_year or 0
    if total > 0:
        success_rate = (metrics.successful_placements_90_days or 0) / total
        score += weights.placement_success * 0.5 * min(1.0, max(0.0, success_rate))

    similar = metrics.similar_profile_placements or 0
    if similar > 0:
        score += weights.placement_success * 0.5 * min(1.0, similar / SIMILAR_PROFILE_FULL_BONUS)

    return score


def score_preferences(referral, opening, ctx, weights) -> float:
    """Share of stated preferences the opening's amenities satisfy."""
    prefs = referral.preferences
    amenities = opening.amenity_set
    matched = 0
    stated = 0

    if prefs.pets_allowed is not None:
        stated += 1
        if prefs.pets_allowed == amenities.pets_allowed:
            matched += 1

    if prefs.community_type and prefs.community_type != "any":
        stated += 1
        if prefs.community_type == amenities.community_type:
            matched += 1

    if prefs.private_room:
        stated += 1
        if amenities.private_rooms_available:
            matched += 1

    if prefs.smoking_environment and prefs.smoking_environment != "no_preference":
        stated += 1
        wants_smoking = prefs.smoking_environment == "smoking_allowed"
        if wants_smoking == amenities.smoking_permitted:
            matched += 1

    if prefs.dietary_restrictions:
        stated += 1
        if all(_offered(diet, amenities.dietary_accommodations) for diet in prefs.dietary_restrictions):
            matched += 1

    if prefs.language_needs:
        stated += 1
        if any(_offered(lang, amenities.languages_spoken) for lang in prefs.language_needs):
            matched += 1

    if stated == 0:
        return weights.preferences_match * UNKNOWN_FACTOR_CREDIT

    return weights.preferences_match * (matched / stated)


def score_services(referral, opening, ctx, weights) -> float:
    """Share of stated specific needs the opening meets; therapy counts 0.8."""
    needs = referral.needs
    services = opening.service_set
    amenities = opening.amenity_set
    matched = 0.0
    stated = 0

    if needs.transportation_to_services:
        stated += 1
        if amenities.transportation_provided:
            matched += 1

    if needs.specialized_therapy_access:
        stated += 1
        if all(_offered(t, services.on_site_therapy) for t in needs.specialized_therapy_access):
            matched += THERAPY_NEED_CREDIT

    if needs.day_program_access:
        stated += 1
        if services.day_program_partnership:
            matched += 1

    if needs.wheelchair_accessible:
        stated += 1
        if amenities.wheelchair_accessible:
            matched += 1

    if stated == 0:
        return weights.services_match * UNKNOWN_FACTOR_CREDIT

    return weights.services_match * (matched / stated)


def _offered(wanted: str, offered: list[str]) -> bool:
    """Case-insensitive containment of one wanted item in any offered item."""
    wanted = wanted.lower()
    return any(wanted in o.lower() for o in offered)


# Breakdown key -> scorer, in breakdown order
FACTOR_SCORERS: dict[str, Scorer] = {
    "county": score_county,
    "funding": score_funding,
    "gender": score_gender,
    "age": score_age,
    "availability": score_availability,
    "capability": score_capability,
    "location_proximity": score_location_proximity,
    "placement_success": score_placement_success,
    "preferences": score_preferences,
    "services": score_services,
}


def score_opening(
    referral: Referral,
    opening: Opening,
    ctx: ScoringContext,
    weights: ScoringWeights,
) -> ScoreBreakdown:
    """Run every factor scorer and collect the breakdown."""
    return ScoreBreakdown(**{
        factor: scorer(referral, opening, ctx, weights)
        for factor, scorer in FACTOR_SCORERS.items()
    })
