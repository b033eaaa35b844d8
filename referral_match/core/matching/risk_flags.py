"""
Risk flag identification.

Advisory flags for case managers, read from the referral's free text and
urgency plus the match score. Independent of scoring.
"""

from typing import Optional

from referral_match.data.models import MatchResult, Referral
from referral_match.utils.constants import LOW_MATCH_CONFIDENCE_SCORE, UrgencyLevel

from .signals import ClinicalTextSignals, keyword_signals


def identify_risk_flags(
    referral: Referral,
    match_result: Optional[MatchResult] = None,
    signals: ClinicalTextSignals = keyword_signals,
) -> list[str]:
    """
    List risk flags for a referral, optionally against one match.

    Flags come out in a fixed order: aggression, self-injury, elopement,
    complex medical needs, crisis placement, low match confidence.

    Args:
        referral: The client referral
        match_result: A scored match, to flag low confidence
        signals: Free-text reader

    Returns:
        Flag strings, empty when nothing applies
    """
    flags = []

    if signals.mentions_violence(referral):
        flags.append("Physical aggression noted")
    if signals.mentions_self_harm(referral):
        flags.append("Self-injurious behavior")
    if signals.mentions_flight_risk(referral):
        flags.append("Elopement risk")
    if signals.needs_airway_support(referral):
        flags.append("Complex medical needs")
    if referral.urgency == UrgencyLevel.CRISIS.value:
        flags.append("Crisis placement")

    if match_result is not None and match_result.score < LOW_MATCH_CONFIDENCE_SCORE:
        flags.append("Low match confidence")

    return flags
