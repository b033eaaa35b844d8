"""
Opening data models.

An opening is a provider's available placement at one site, with the
eligibility rules, amenities, services and track record the engine
scores against.
"""

from datetime import date, datetime
from typing import Optional

from pydantic import Field

from referral_match.utils.constants import OpeningStatus

from .base import EmbeddedModel, EntityModel, Flag, StrList


class Amenities(EmbeddedModel):
    """Living-environment features of an opening."""

    pets_allowed: Optional[bool] = None
    community_type: Optional[str] = None
    private_rooms_available: Flag = False
    smoking_permitted: Optional[bool] = None
    dietary_accommodations: StrList = Field(default_factory=list)
    languages_spoken: StrList = Field(default_factory=list)
    transportation_provided: Flag = False
    wheelchair_accessible: Flag = False


class ServicesOffered(EmbeddedModel):
    """Clinical and day services available to residents."""

    on_site_therapy: StrList = Field(default_factory=list)
    day_program_partnership: Flag = False


class PlacementSuccessMetrics(EmbeddedModel):
    """Provider placement outcomes reported for this opening."""

    successful_placements_90_days: Optional[float] = None
    total_placements_last_year: Optional[float] = None
    similar_profile_placements: Optional[float] = None


class Opening(EntityModel):
    """An available placement offered by a provider site."""

    organization_id: Optional[str] = None
    site_id: Optional[str] = None
    title: Optional[str] = None

    status: Optional[str] = None
    spots_available: Optional[float] = None

    funding_accepted: StrList = Field(default_factory=list)
    gender_requirement: Optional[str] = None  # male, female, any
    age_min: Optional[float] = None
    age_max: Optional[float] = None
    available_date: Optional[date] = None
    last_confirmed_at: Optional[datetime] = None

    amenities: Optional[Amenities] = None
    services_offered: Optional[ServicesOffered] = None
    placement_success_metrics: Optional[PlacementSuccessMetrics] = None

    @property
    def is_open(self) -> bool:
        """Check that the opening is active and has at least one spot."""
        return self.status == OpeningStatus.ACTIVE.value and (self.spots_available or 0) > 0

    @property
    def amenity_set(self) -> Amenities:
        """Amenities, or an empty set when none were recorded."""
        return self.amenities or Amenities()

    @property
    def service_set(self) -> ServicesOffered:
        """Services, or an empty set when none were recorded."""
        return self.services_offered or ServicesOffered()
