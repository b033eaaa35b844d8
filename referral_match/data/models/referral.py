"""
Referral data models.

A referral describes one client who needs a placement: demographics,
funding, clinical free text, preferences and specific needs.
"""

from datetime import date
from typing import Optional

from pydantic import Field

from .base import EmbeddedModel, EntityModel, Flag, StrList


class ClientPreferences(EmbeddedModel):
    """Preferences the client or guardian stated explicitly."""

    pets_allowed: Optional[bool] = None
    community_type: Optional[str] = None  # urban, suburban, rural, any
    private_room: Optional[bool] = None
    smoking_environment: Optional[str] = None  # smoking_allowed, non_smoking, no_preference
    dietary_restrictions: StrList = Field(default_factory=list)
    language_needs: StrList = Field(default_factory=list)
    preferred_location_proximity: Optional[float] = None  # miles


class SpecificNeeds(EmbeddedModel):
    """Service needs that an opening should be able to meet."""

    transportation_to_services: Flag = False
    specialized_therapy_access: StrList = Field(default_factory=list)
    day_program_access: Flag = False
    wheelchair_accessible: Flag = False


class Referral(EntityModel):
    """A client referral awaiting placement."""

    client_name: Optional[str] = None
    client_county: Optional[str] = None
    client_gender: Optional[str] = None
    client_age: Optional[float] = None
    funding_source: Optional[str] = None
    desired_start_date: Optional[date] = None

    behavioral_summary: Optional[str] = None
    medical_summary: Optional[str] = None

    client_preferences: Optional[ClientPreferences] = None
    specific_needs: Optional[SpecificNeeds] = None

    urgency: Optional[str] = None  # routine, urgent, crisis

    @property
    def preferences(self) -> ClientPreferences:
        """Stated preferences, or an empty set when none were given."""
        return self.client_preferences or ClientPreferences()

    @property
    def needs(self) -> SpecificNeeds:
        """Stated needs, or an empty set when none were given."""
        return self.specific_needs or SpecificNeeds()
