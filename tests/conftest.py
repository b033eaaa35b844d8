"""
Shared test fixtures for the referral matching test suite.

Sets environment variables before any package imports so settings load
in testing mode, then provides factory fixtures for the input models.
"""

import os

# === Set environment BEFORE any referral_match imports ===
os.environ.setdefault("APP_ENVIRONMENT", "testing")
os.environ.setdefault("LOG_CONSOLE_OUTPUT", "false")

from datetime import date
from typing import Any, Optional

import pytest

from referral_match.core.matching import MatchingEngine, ProviderLookup, ScoringContext
from referral_match.data.models import (
    CapabilityProfile,
    LicenseInstance,
    Opening,
    Organization,
    Referral,
    ScoringWeights,
    Site,
)
from referral_match.utils.config import AppSettings


REFERENCE_DATE = date(2025, 3, 1)


# ---------------------------------------------------------------------------
# Factory fixtures for input models
# ---------------------------------------------------------------------------


@pytest.fixture
def make_referral():
    """Factory for Referral models; defaults match a typical adult CADI referral."""

    def _factory(**overrides: Any) -> Referral:
        data = {
            "id": "ref-1",
            "client_county": "Hennepin",
            "client_gender": "male",
            "client_age": 35,
            "funding_source": "CADI",
        }
        data.update(overrides)
        return Referral.model_validate(data)

    return _factory


@pytest.fixture
def make_opening():
    """Factory for Opening models; defaults to an active, broadly eligible opening."""

    def _factory(**overrides: Any) -> Opening:
        data = {
            "id": "op-1",
            "organization_id": "org-1",
            "site_id": "site-1",
            "title": "Lakeside House",
            "status": "active",
            "spots_available": 2,
            "funding_accepted": ["CADI"],
            "gender_requirement": "any",
            "age_min": 18,
            "age_max": 65,
        }
        data.update(overrides)
        return Opening.model_validate(data)

    return _factory


@pytest.fixture
def make_organization():
    def _factory(**overrides: Any) -> Organization:
        data = {"id": "org-1", "legal_name": "Lakeside Supports LLC", "counties_served": ["Hennepin"]}
        data.update(overrides)
        return Organization.model_validate(data)

    return _factory


@pytest.fixture
def make_site():
    def _factory(**overrides: Any) -> Site:
        data = {"id": "site-1", "organization_id": "org-1", "county": "Hennepin", "city": "Minneapolis"}
        data.update(overrides)
        return Site.model_validate(data)

    return _factory


@pytest.fixture
def make_license():
    def _factory(**overrides: Any) -> LicenseInstance:
        data = {"id": "lic-1", "organization_id": "org-1", "status": "verified"}
        data.update(overrides)
        return LicenseInstance.model_validate(data)

    return _factory


@pytest.fixture
def make_capability():
    def _factory(**overrides: Any) -> CapabilityProfile:
        data = {
            "id": "cap-1",
            "site_id": "site-1",
            "organization_id": "org-1",
            "behavioral": {"aggression_physical": "moderate", "elopement_risk": "moderate"},
            "medical": {"tube_feeding": True, "ventilator": True, "seizure_management": "full"},
        }
        data.update(overrides)
        return CapabilityProfile.model_validate(data)

    return _factory


@pytest.fixture
def make_context(make_organization, make_site):
    """Factory for ScoringContext with the default organization and site."""

    def _factory(
        capability: Optional[CapabilityProfile] = None,
        site: Optional[Site] = None,
        organization: Optional[Organization] = None,
        reference_date: date = REFERENCE_DATE,
        **kwargs,
    ) -> ScoringContext:
        return ScoringContext(
            organization=organization if organization is not None else make_organization(),
            site=site if site is not None else make_site(),
            capability=capability,
            reference_date=reference_date,
            **kwargs,
        )

    return _factory


@pytest.fixture
def weights():
    """Default scoring weights."""
    return ScoringWeights()


@pytest.fixture
def lookup(make_organization, make_site, make_license):
    """Lookup holding the default organization, site and verified license."""
    return ProviderLookup.build([make_organization()], [make_site()], [make_license()], [])


# ---------------------------------------------------------------------------
# Matching engine fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def matching_engine():
    """MatchingEngine with default config and testing settings."""
    return MatchingEngine(settings=AppSettings(environment="testing"))
