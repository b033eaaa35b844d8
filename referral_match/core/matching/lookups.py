"""
Pre-indexed provider lookup tables.

Built once per batch of matching runs so that every opening resolves its
organization, site, license and capability profile in O(1).
"""

from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Optional

from referral_match.data.models import CapabilityProfile, LicenseInstance, Organization, Site


@dataclass(frozen=True)
class ProviderLookup:
    """Id-keyed views over the provider collections."""

    organizations: dict[str, Organization] = field(default_factory=dict)
    sites: dict[str, Site] = field(default_factory=dict)
    licenses: dict[str, LicenseInstance] = field(default_factory=dict)
    site_capabilities: dict[str, CapabilityProfile] = field(default_factory=dict)
    org_capabilities: dict[str, CapabilityProfile] = field(default_factory=dict)

    @classmethod
    def build(
        cls,
        organizations: Iterable[Organization] = (),
        sites: Iterable[Site] = (),
        licenses: Iterable[LicenseInstance] = (),
        capability_profiles: Iterable[CapabilityProfile] = (),
    ) -> "ProviderLookup":
        """
        Index provider records by id.

        Licenses are keyed by organization. A capability profile with a
        site_id is site-specific; otherwise it applies organization-wide.
        Later records replace earlier ones with the same key.
        """
        site_caps: dict[str, CapabilityProfile] = {}
        org_caps: dict[str, CapabilityProfile] = {}
        for profile in capability_profiles or ():
            if profile.site_id:
                site_caps[profile.site_id] = profile
            elif profile.organization_id:
                org_caps[profile.organization_id] = profile

        return cls(
            organizations={o.id: o for o in organizations or () if o.id},
            sites={s.id: s for s in sites or () if s.id},
            licenses={l.organization_id: l for l in licenses or () if l.organization_id},
            site_capabilities=site_caps,
            org_capabilities=org_caps,
        )

    def organization(self, organization_id: Optional[str]) -> Optional[Organization]:
        return self.organizations.get(organization_id) if organization_id else None

    def site(self, site_id: Optional[str]) -> Optional[Site]:
        return self.sites.get(site_id) if site_id else None

    def license(self, organization_id: Optional[str]) -> Optional[LicenseInstance]:
        return self.licenses.get(organization_id) if organization_id else None

    def capability(
        self, site_id: Optional[str], organization_id: Optional[str]
    ) -> Optional[CapabilityProfile]:
        """Site profile first, then the organization-wide profile."""
        if site_id and site_id in self.site_capabilities:
            return self.site_capabilities[site_id]
        if organization_id:
            return self.org_capabilities.get(organization_id)
        return None
