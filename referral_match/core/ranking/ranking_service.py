"""
Prominence ranking for matched openings.

Reorders engine results using listing plan, provider reliability and how
recently the opening was confirmed. Compatibility comes first: results
are grouped into bands of similar base score and only reordered within a
band, so a boost never lifts a clearly weaker match above a stronger one.
"""

from collections import defaultdict
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import Optional

from referral_match.data.models import (
    LicenseInstance,
    MatchResult,
    Opening,
    Organization,
    ReferralOutcome,
    Subscription,
)
from referral_match.utils.constants import (
    LicenseStatus,
    MIN_HISTORY_FOR_ACCEPTANCE,
    PLAN_BOOSTS,
    RELIABILITY_BOUNDS,
    SCORE_BAND_WIDTH,
)
from referral_match.utils.logger import get_logger

logger = get_logger(__name__)


def _as_utc(value: datetime) -> datetime:
    """Read a naive timestamp as UTC."""
    return value.replace(tzinfo=timezone.utc) if value.tzinfo is None else value


@dataclass
class RankedMatch:
    """A match result with its prominence multipliers."""

    result: MatchResult
    base_score: float
    paid_multiplier: float = 1.0
    reliability_multiplier: float = 1.0
    freshness_score: float = 0.5
    final_score: float = 0.0
    tier: str = "free"

    @property
    def is_paid(self) -> bool:
        return self.paid_multiplier > 1.0


@dataclass
class RankingExplanation:
    """Why a ranked match sits where it does."""

    matched_because: list[str] = field(default_factory=list)
    potential_concerns: list[str] = field(default_factory=list)
    freshness_hours: Optional[int] = None
    verification_status: str = "unknown"


class RankingService:
    """Applies bounded prominence boosts and score-band interleaving."""

    def paid_multiplier(self, subscription: Optional[Subscription]) -> float:
        """Plan boost for an active subscription, 1.0 otherwise."""
        if subscription is None or subscription.status != "active":
            return 1.0
        return subscription.priority_boost_factor or PLAN_BOOSTS.get(subscription.plan or "", 1.0)

    def reliability_multiplier(
        self,
        organization: Optional[Organization],
        licenses: Iterable[LicenseInstance] = (),
        referral_history: Iterable[ReferralOutcome] = (),
        today: Optional[date] = None,
    ) -> float:
        """
        Multiplier from verification, live licenses and acceptance history.

        Returns:
            Multiplier clamped to [0.8, 1.2]
        """
        today = today or date.today()
        multiplier = 1.0

        status = organization.verification_status if organization else None
        if status == "verified":
            multiplier += 0.1
        elif status == "unverified":
            multiplier -= 0.1

        if any(
            lic.status == LicenseStatus.VERIFIED.value
            and lic.expiration_date is not None
            and lic.expiration_date > today
            for lic in licenses
        ):
            multiplier += 0.05

        history = list(referral_history)
        if len(history) >= MIN_HISTORY_FOR_ACCEPTANCE:
            accepted = sum(1 for r in history if r.status in ("accepted", "placed"))
            rate = accepted / len(history)
            if rate >= 0.8:
                multiplier += 0.05
            elif rate < 0.3:
                multiplier -= 0.1

        low, high = RELIABILITY_BOUNDS
        return max(low, min(high, multiplier))

    def hours_since_confirmed(self, opening: Opening, now: Optional[datetime] = None) -> Optional[int]:
        """Whole hours since the provider last confirmed the opening."""
        if opening.last_confirmed_at is None:
            return None
        confirmed = _as_utc(opening.last_confirmed_at)
        now = _as_utc(now) if now else datetime.now(tz=timezone.utc)
        return int((now - confirmed).total_seconds() / 3600)

    def freshness_score(self, opening: Opening, now: Optional[datetime] = None) -> float:
        """Score 0-1; recently confirmed openings score higher."""
        hours = self.hours_since_confirmed(opening, now)
        if hours is None:
            return 0.5
        if hours > 48:
            return 0.0
        if hours <= 12:
            return 1.0
        if hours <= 24:
            return 0.9
        if hours <= 36:
            return 0.8
        return 0.7

    def rank(
        self,
        results: Iterable[MatchResult],
        subscriptions: Iterable[Subscription] = (),
        licenses: Iterable[LicenseInstance] = (),
        referral_history: Iterable[ReferralOutcome] = (),
        now: Optional[datetime] = None,
    ) -> list[RankedMatch]:
        """
        Rank match results with prominence boosts.

        Args:
            results: Engine results (scores are not modified)
            subscriptions: Listing plans, keyed by organization
            licenses: License records, grouped by organization
            referral_history: Past referral outcomes, grouped by organization
            now: Reference time for freshness

        Returns:
            Ranked matches, best first
        """
        subs_by_org = {s.organization_id: s for s in subscriptions if s.organization_id}
        licenses_by_org = defaultdict(list)
        for lic in licenses:
            licenses_by_org[lic.organization_id].append(lic)
        history_by_org = defaultdict(list)
        for outcome in referral_history:
            history_by_org[outcome.organization_id].append(outcome)

        today = now.date() if now else None
        enriched = []
        for result in results:
            org_id = result.opening.organization_id
            subscription = subs_by_org.get(org_id)
            paid = self.paid_multiplier(subscription)
            reliability = self.reliability_multiplier(
                result.organization, licenses_by_org[org_id], history_by_org[org_id], today
            )
            freshness = self.freshness_score(result.opening, now)
            enriched.append(RankedMatch(
                result=result,
                base_score=result.score,
                paid_multiplier=paid,
                reliability_multiplier=reliability,
                freshness_score=freshness,
                final_score=result.score * reliability * paid * freshness,
                tier=(subscription.plan if subscription and subscription.plan else "free"),
            ))

        ranked = []
        for band in self.group_into_score_bands(enriched):
            band.sort(
                key=lambda m: (
                    m.paid_multiplier,
                    m.reliability_multiplier,
                    m.freshness_score,
                    m.base_score,
                ),
                reverse=True,
            )
            ranked.extend(band)

        logger.debug(f"Ranked {len(ranked)} matches")
        return ranked

    def group_into_score_bands(self, matches: list[RankedMatch]) -> list[list[RankedMatch]]:
        """Split matches into bands within SCORE_BAND_WIDTH of each band's top score."""
        bands: list[list[RankedMatch]] = []
        band_top: Optional[float] = None

        for m in sorted(matches, key=lambda m: m.base_score, reverse=True):
            if band_top is not None and band_top - m.base_score <= SCORE_BAND_WIDTH:
                bands[-1].append(m)
            else:
                bands.append([m])
                band_top = m.base_score

        return bands

    def explain(self, ranked: RankedMatch, now: Optional[datetime] = None) -> RankingExplanation:
        """Build the matched-because and concerns lists for one ranked match."""
        explanation = RankingExplanation(
            freshness_hours=self.hours_since_confirmed(ranked.result.opening, now),
        )
        organization = ranked.result.organization
        if organization and organization.verification_status:
            explanation.verification_status = organization.verification_status

        if ranked.base_score >= 80:
            explanation.matched_because.append("Excellent compatibility match")
        if ranked.freshness_score >= 0.9:
            explanation.matched_because.append("Recently confirmed availability")
        if ranked.reliability_multiplier > 1.05:
            explanation.matched_because.append("Highly reliable provider")

        if ranked.freshness_score < 0.8 and explanation.freshness_hours is not None:
            explanation.potential_concerns.append(
                f"Not confirmed recently ({explanation.freshness_hours}h ago)"
            )
        if ranked.reliability_multiplier < 1.0:
            explanation.potential_concerns.append("Lower historical responsiveness")

        return explanation
