"""
Provider-side records: organizations, sites, licenses and capability profiles.

These are lookup context for scoring; the engine never modifies them.
"""

from datetime import date
from typing import Optional

from pydantic import Field

from .base import EmbeddedModel, EntityModel, Flag, StrList


class Organization(EntityModel):
    """A provider organization."""

    legal_name: Optional[str] = None
    counties_served: StrList = Field(default_factory=list)
    verification_status: Optional[str] = None  # verified, unverified, pending


class Site(EntityModel):
    """A physical location operated by an organization."""

    organization_id: Optional[str] = None
    name: Optional[str] = None
    county: Optional[str] = None
    city: Optional[str] = None


class LicenseInstance(EntityModel):
    """A license held by an organization."""

    organization_id: Optional[str] = None
    license_type: Optional[str] = None
    status: Optional[str] = None
    expiration_date: Optional[date] = None


class BehavioralCapabilities(EmbeddedModel):
    """Highest behavioral acuity a provider supports (none/mild/moderate/severe)."""

    aggression_physical: Optional[str] = None
    aggression_verbal: Optional[str] = None
    self_injury: Optional[str] = None
    elopement_risk: Optional[str] = None


class MedicalCapabilities(EmbeddedModel):
    """Medical support a provider can deliver."""

    tube_feeding: Flag = False
    ventilator: Flag = False
    tracheostomy: Flag = False
    seizure_management: Optional[str] = None


class CapabilityProfile(EntityModel):
    """Care capabilities declared for a site, or organization-wide."""

    site_id: Optional[str] = None
    organization_id: Optional[str] = None
    behavioral: Optional[BehavioralCapabilities] = None
    medical: Optional[MedicalCapabilities] = None

    @property
    def behavioral_levels(self) -> BehavioralCapabilities:
        return self.behavioral or BehavioralCapabilities()

    @property
    def medical_support(self) -> MedicalCapabilities:
        return self.medical or MedicalCapabilities()


class Subscription(EntityModel):
    """A provider's listing plan, used only for prominence ranking."""

    organization_id: Optional[str] = None
    plan: Optional[str] = None  # free, basic, professional, enterprise
    status: Optional[str] = None
    priority_boost_factor: Optional[float] = None


class ReferralOutcome(EntityModel):
    """A past referral sent to an organization and how it ended."""

    organization_id: Optional[str] = None
    status: Optional[str] = None  # accepted, placed, declined, withdrawn
