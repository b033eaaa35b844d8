"""
Tests for referral_match.core.matching.scorers — the ten factor scorers.
"""

from datetime import date

import pytest

from referral_match.core.matching.scorers import (
    FACTOR_SCORERS,
    ScoringContext,
    score_age,
    score_availability,
    score_capability,
    score_county,
    score_funding,
    score_gender,
    score_location_proximity,
    score_opening,
    score_placement_success,
    score_preferences,
    score_services,
)
from referral_match.data.models import Organization, ScoringWeights
from referral_match.utils.constants import FACTOR_KEYS


# ── score_county ─────────────────────────────────────────────────────────────


class TestScoreCounty:
    def test_same_county_full_weight(self, make_referral, make_opening, make_context, weights):
        assert score_county(make_referral(), make_opening(), make_context(), weights) == 18

    def test_case_insensitive(self, make_referral, make_opening, make_context, make_site, weights):
        ctx = make_context(site=make_site(county="HENNEPIN"))
        assert score_county(make_referral(client_county="hennepin"), make_opening(), ctx, weights) == 18

    def test_served_county_partial(self, make_referral, make_opening, make_context, make_site, weights):
        ctx = make_context(site=make_site(county="Anoka"))
        assert score_county(make_referral(), make_opening(), ctx, weights) == pytest.approx(16.2)

    def test_unserved_county_zero(
        self, make_referral, make_opening, make_context, make_site, make_organization, weights
    ):
        ctx = make_context(
            site=make_site(county="Anoka"),
            organization=make_organization(counties_served=["Ramsey"]),
        )
        assert score_county(make_referral(), make_opening(), ctx, weights) == 0

    def test_missing_client_county(self, make_referral, make_opening, make_context, weights):
        assert score_county(make_referral(client_county=None), make_opening(), make_context(), weights) == 0

    def test_no_site_falls_back_to_organization(self, make_referral, make_opening, weights):
        ctx = ScoringContext(organization=Organization(counties_served=["Hennepin"]))
        assert score_county(make_referral(), make_opening(), ctx, weights) == pytest.approx(16.2)


# ── score_funding ────────────────────────────────────────────────────────────


class TestScoreFunding:
    def test_exact_match(self, make_referral, make_opening, make_context, weights):
        assert score_funding(make_referral(), make_opening(), make_context(), weights) == 18

    def test_case_insensitive(self, make_referral, make_opening, make_context, weights):
        opening = make_opening(funding_accepted=["cadi"])
        assert score_funding(make_referral(), opening, make_context(), weights) == 18

    def test_ma_family_partial(self, make_referral, make_opening, make_context, weights):
        referral = make_referral(funding_source="MA_Waiver")
        opening = make_opening(funding_accepted=["MA"])
        assert score_funding(referral, opening, make_context(), weights) == pytest.approx(12.6)

    def test_no_match(self, make_referral, make_opening, make_context, weights):
        opening = make_opening(funding_accepted=["Private_Pay"])
        assert score_funding(make_referral(), opening, make_context(), weights) == 0

    def test_empty_accepted_list(self, make_referral, make_opening, make_context, weights):
        opening = make_opening(funding_accepted=[])
        assert score_funding(make_referral(), opening, make_context(), weights) == 0

    def test_missing_funding_source(self, make_referral, make_opening, make_context, weights):
        assert score_funding(make_referral(funding_source=None), make_opening(), make_context(), weights) == 0


# ── score_gender ─────────────────────────────────────────────────────────────


class TestScoreGender:
    def test_any_requirement(self, make_referral, make_opening, make_context, weights):
        assert score_gender(make_referral(), make_opening(), make_context(), weights) == 12

    def test_same_gender_case_insensitive(self, make_referral, make_opening, make_context, weights):
        opening = make_opening(gender_requirement="MALE")
        assert score_gender(make_referral(), opening, make_context(), weights) == 12

    def test_mismatch(self, make_referral, make_opening, make_context, weights):
        opening = make_opening(gender_requirement="female")
        assert score_gender(make_referral(), opening, make_context(), weights) == 0

    def test_missing_requirement(self, make_referral, make_opening, make_context, weights):
        opening = make_opening(gender_requirement=None)
        assert score_gender(make_referral(), opening, make_context(), weights) == 12


# ── score_age ────────────────────────────────────────────────────────────────


class TestScoreAge:
    def test_inside_range(self, make_referral, make_opening, make_context, weights):
        assert score_age(make_referral(), make_opening(), make_context(), weights) == 12

    def test_on_bounds(self, make_referral, make_opening, make_context, weights):
        assert score_age(make_referral(client_age=18), make_opening(), make_context(), weights) == 12
        assert score_age(make_referral(client_age=65), make_opening(), make_context(), weights) == 12

    def test_near_miss_half(self, make_referral, make_opening, make_context, weights):
        assert score_age(make_referral(client_age=16), make_opening(), make_context(), weights) == 6
        assert score_age(make_referral(client_age=67), make_opening(), make_context(), weights) == 6

    def test_outside_grace_zero(self, make_referral, make_opening, make_context, weights):
        assert score_age(make_referral(client_age=10), make_opening(), make_context(), weights) == 0

    def test_unknown_age_half(self, make_referral, make_opening, make_context, weights):
        assert score_age(make_referral(client_age=None), make_opening(), make_context(), weights) == 6

    def test_age_zero_is_known(self, make_referral, make_opening, make_context, weights):
        opening = make_opening(age_min=0, age_max=5)
        assert score_age(make_referral(client_age=0), opening, make_context(), weights) == 12

    def test_open_ended_range(self, make_referral, make_opening, make_context, weights):
        opening = make_opening(age_min=None, age_max=None)
        assert score_age(make_referral(client_age=90), opening, make_context(), weights) == 12


# ── score_availability ───────────────────────────────────────────────────────


class TestScoreAvailability:
    def test_no_dates_full(self, make_referral, make_opening, make_context, weights):
        assert score_availability(make_referral(), make_opening(), make_context(), weights) == 10

    def test_available_before_reference_date(self, make_referral, make_opening, make_context, weights):
        referral = make_referral(desired_start_date="2025-02-01")
        opening = make_opening(available_date="2025-02-20")
        assert score_availability(referral, opening, make_context(), weights) == 10

    def test_five_days_late(self, make_referral, make_opening, make_context, weights):
        referral = make_referral(desired_start_date="2025-03-05")
        opening = make_opening(available_date="2025-03-10")
        assert score_availability(referral, opening, make_context(), weights) == pytest.approx(5.0)

    def test_floor(self, make_referral, make_opening, make_context, weights):
        referral = make_referral(desired_start_date="2025-03-02")
        opening = make_opening(available_date="2025-04-30")
        assert score_availability(referral, opening, make_context(), weights) == pytest.approx(3.0)

    def test_available_by_desired_date(self, make_referral, make_opening, make_context, weights):
        referral = make_referral(desired_start_date="2025-04-01")
        opening = make_opening(available_date="2025-03-15")
        assert score_availability(referral, opening, make_context(), weights) == 10

    def test_reference_date_drives_result(self, make_referral, make_opening, make_context, weights):
        referral = make_referral(desired_start_date="2025-03-05")
        opening = make_opening(available_date="2025-03-10")
        later = make_context(reference_date=date(2025, 3, 11))
        assert score_availability(referral, opening, later, weights) == 10

    def test_closed_opening_zero(self, make_referral, make_opening, make_context, weights):
        opening = make_opening(status="filled")
        assert score_availability(make_referral(), opening, make_context(), weights) == 0


# ── score_capability ─────────────────────────────────────────────────────────


class TestScoreCapability:
    def test_no_profile_half(self, make_referral, make_opening, make_context, weights):
        assert score_capability(make_referral(), make_opening(), make_context(), weights) == 5

    def test_no_needs_full(self, make_referral, make_opening, make_context, make_capability, weights):
        ctx = make_context(capability=make_capability())
        assert score_capability(make_referral(), make_opening(), ctx, weights) == 10

    def test_aggression_unsupported(self, make_referral, make_opening, make_context, make_capability, weights):
        referral = make_referral(behavioral_summary="History of aggression toward staff")
        ctx = make_context(capability=make_capability(behavioral={"aggression_physical": "none"}))
        assert score_capability(referral, make_opening(), ctx, weights) == pytest.approx(6.0)

    def test_severe_aggression_mild_support(
        self, make_referral, make_opening, make_context, make_capability, weights
    ):
        referral = make_referral(behavioral_summary="Severe aggressive episodes")
        ctx = make_context(capability=make_capability(behavioral={"aggression_physical": "mild"}))
        assert score_capability(referral, make_opening(), ctx, weights) == pytest.approx(7.0)

    def test_negated_text_still_penalized(
        self, make_referral, make_opening, make_context, make_capability, weights
    ):
        referral = make_referral(behavioral_summary="No history of aggression")
        ctx = make_context(capability=make_capability(behavioral={"aggression_physical": "none"}))
        assert score_capability(referral, make_opening(), ctx, weights) == pytest.approx(6.0)

    def test_elopement_low_support(self, make_referral, make_opening, make_context, make_capability, weights):
        referral = make_referral(behavioral_summary="Tends to wander at night")
        ctx = make_context(capability=make_capability(behavioral={"elopement_risk": "low"}))
        assert score_capability(referral, make_opening(), ctx, weights) == pytest.approx(7.0)

    def test_penalties_floor_at_zero(self, make_referral, make_opening, make_context, make_capability, weights):
        referral = make_referral(
            behavioral_summary="aggression and elopement",
            medical_summary="g-tube, ventilator dependent, seizures",
        )
        ctx = make_context(capability=make_capability(behavioral={}, medical={"seizure_management": "none"}))
        assert score_capability(referral, make_opening(), ctx, weights) == 0

    def test_medical_supported(self, make_referral, make_opening, make_context, make_capability, weights):
        referral = make_referral(medical_summary="Tube feeding and seizure disorder")
        ctx = make_context(capability=make_capability())
        assert score_capability(referral, make_opening(), ctx, weights) == 10


# ── score_location_proximity ─────────────────────────────────────────────────


class TestScoreLocationProximity:
    def test_same_county(self, make_referral, make_opening, make_context, weights):
        assert score_location_proximity(make_referral(), make_opening(), make_context(), weights) == 8

    def test_within_preference(self, make_referral, make_opening, make_context, make_site, weights):
        referral = make_referral(client_preferences={"preferred_location_proximity": 30})
        ctx = make_context(site=make_site(county="Anoka"))
        assert score_location_proximity(referral, make_opening(), ctx, weights) == pytest.approx(5.6)

    def test_near_preference(self, make_referral, make_opening, make_context, make_site, weights):
        referral = make_referral(client_preferences={"preferred_location_proximity": 25})
        ctx = make_context(site=make_site(county="Anoka"))
        assert score_location_proximity(referral, make_opening(), ctx, weights) == pytest.approx(3.2)

    def test_default_credit(self, make_referral, make_opening, make_context, make_site, weights):
        ctx = make_context(site=make_site(county="Anoka"))
        assert score_location_proximity(make_referral(), make_opening(), ctx, weights) == pytest.approx(2.4)

    def test_missing_site_county(self, make_referral, make_opening, make_context, make_site, weights):
        ctx = make_context(site=make_site(county=None))
        assert score_location_proximity(make_referral(), make_opening(), ctx, weights) == 0


# ── score_placement_success ──────────────────────────────────────────────────


class TestScorePlacementSuccess:
    def test_rate_and_similar_bonus(self, make_referral, make_opening, make_context, weights):
        opening = make_opening(placement_success_metrics={
            "successful_placements_90_days": 9,
            "total_placements_last_year": 10,
            "similar_profile_placements": 5,
        })
        assert score_placement_success(make_referral(), opening, make_context(), weights) == pytest.approx(4.2)

    def test_bonus_capped(self, make_referral, make_opening, make_context, weights):
        opening = make_opening(placement_success_metrics={"similar_profile_placements": 40})
        assert score_placement_success(make_referral(), opening, make_context(), weights) == pytest.approx(3.0)

    def test_rate_clamped(self, make_referral, make_opening, make_context, weights):
        opening = make_opening(placement_success_metrics={
            "successful_placements_90_days": 20,
            "total_placements_last_year": 10,
        })
        assert score_placement_success(make_referral(), opening, make_context(), weights) == pytest.approx(3.0)

    def test_zero_total_ignores_rate(self, make_referral, make_opening, make_context, weights):
        opening = make_opening(placement_success_metrics={
            "successful_placements_90_days": 3,
            "total_placements_last_year": 0,
        })
        assert score_placement_success(make_referral(), opening, make_context(), weights) == 0

    def test_no_metrics(self, make_referral, make_opening, make_context, weights):
        assert score_placement_success(make_referral(), make_opening(), make_context(), weights) == 0


# ── score_preferences ────────────────────────────────────────────────────────


class TestScorePreferences:
    def test_no_preferences_half(self, make_referral, make_opening, make_context, weights):
        assert score_preferences(make_referral(), make_opening(), make_context(), weights) == 2

    def test_all_matched(self, make_referral, make_opening, make_context, weights):
        referral = make_referral(client_preferences={"pets_allowed": True, "private_room": True})
        opening = make_opening(amenities={"pets_allowed": True, "private_rooms_available": True})
        assert score_preferences(referral, opening, make_context(), weights) == 4

    def test_partial(self, make_referral, make_opening, make_context, weights):
        referral = make_referral(client_preferences={
            "pets_allowed": False,
            "smoking_environment": "non_smoking",
        })
        opening = make_opening(amenities={"pets_allowed": False, "smoking_permitted": True})
        assert score_preferences(referral, opening, make_context(), weights) == 2

    def test_any_and_no_preference_not_counted(self, make_referral, make_opening, make_context, weights):
        referral = make_referral(client_preferences={
            "community_type": "any",
            "smoking_environment": "no_preference",
        })
        assert score_preferences(referral, make_opening(), make_context(), weights) == 2

    def test_dietary_requires_all(self, make_referral, make_opening, make_context, weights):
        referral = make_referral(client_preferences={"dietary_restrictions": ["gluten", "halal"]})
        opening = make_opening(amenities={"dietary_accommodations": ["Gluten-free"]})
        assert score_preferences(referral, opening, make_context(), weights) == 0

    def test_language_requires_any(self, make_referral, make_opening, make_context, weights):
        referral = make_referral(client_preferences={"language_needs": ["somali", "hmong"]})
        opening = make_opening(amenities={"languages_spoken": ["English", "Somali"]})
        assert score_preferences(referral, opening, make_context(), weights) == 4


# ── score_services ───────────────────────────────────────────────────────────


class TestScoreServices:
    def test_no_needs_half(self, make_referral, make_opening, make_context, weights):
        assert score_services(make_referral(), make_opening(), make_context(), weights) == 1

    def test_therapy_partial_credit(self, make_referral, make_opening, make_context, weights):
        referral = make_referral(specific_needs={"specialized_therapy_access": ["speech"]})
        opening = make_opening(services_offered={"on_site_therapy": ["Speech", "Occupational"]})
        assert score_services(referral, opening, make_context(), weights) == pytest.approx(1.6)

    def test_mixed(self, make_referral, make_opening, make_context, weights):
        referral = make_referral(specific_needs={
            "transportation_to_services": True,
            "day_program_access": True,
        })
        opening = make_opening(amenities={"transportation_provided": True})
        assert score_services(referral, opening, make_context(), weights) == pytest.approx(1.0)

    def test_null_flags_not_stated(self, make_referral, make_opening, make_context, weights):
        referral = make_referral(specific_needs={
            "wheelchair_accessible": None,
            "specialized_therapy_access": None,
        })
        assert score_services(referral, make_opening(), make_context(), weights) == 1


# ── score_opening ────────────────────────────────────────────────────────────


class TestScoreOpening:
    def test_breakdown_has_every_factor(self, make_referral, make_opening, make_context, weights):
        breakdown = score_opening(make_referral(), make_opening(), make_context(), weights)
        assert tuple(breakdown.as_dict()) == FACTOR_KEYS
        assert tuple(FACTOR_SCORERS) == FACTOR_KEYS

    def test_each_factor_within_weight(self, make_referral, make_opening, make_context, make_capability, weights):
        referral = make_referral(
            behavioral_summary="aggression",
            client_preferences={"pets_allowed": True},
            specific_needs={"day_program_access": True},
        )
        opening = make_opening(placement_success_metrics={"similar_profile_placements": 100})
        breakdown = score_opening(referral, opening, make_context(capability=make_capability()), weights)
        for factor, score in breakdown.as_dict().items():
            assert 0 <= score <= weights.for_factor(factor)

    def test_custom_weights(self, make_referral, make_opening, make_context):
        custom = ScoringWeights(county_match=50)
        breakdown = score_opening(make_referral(), make_opening(), make_context(), custom)
        assert breakdown.county == 50
