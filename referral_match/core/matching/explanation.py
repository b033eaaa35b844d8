"""
Match explanation generator.

Turns a score breakdown into a short prose summary: a quality prefix,
the strongest factors, notable highlights and, for weaker matches, the
factor worth reviewing. Template driven and deterministic.
"""

from collections.abc import Mapping
from typing import Optional

from referral_match.data.models import (
    Opening,
    Organization,
    Referral,
    ScoreBreakdown,
    ScoringWeights,
    Site,
)
from referral_match.utils.constants import (
    EXPLANATION_BANDS,
    EXPLANATION_CAUTION_BELOW,
    EXPLANATION_FALLBACK_BAND,
    EXPLANATION_TOP_FACTORS,
    FACTOR_LABELS,
)

_DEFAULT_WEIGHTS = ScoringWeights()


def quality_prefix(total_score: float) -> str:
    """Presentation band for the explanation, independent of MatchQuality."""
    for cutoff, label in EXPLANATION_BANDS:
        if total_score >= cutoff:
            return label
    return EXPLANATION_FALLBACK_BAND


def _ratio(score: float, weight: float) -> float:
    return score / weight if weight > 0 else 0.0


def _highlights(breakdown: Mapping[str, float], opening: Opening, referral: Referral) -> list[str]:
    highlights = []

    metrics = opening.placement_success_metrics
    if breakdown.get("placement_success", 0) > 0 and metrics:
        if (metrics.similar_profile_placements or 0) > 0:
            highlights.append(
                f"{metrics.similar_profile_placements:g} successful placements "
                "with similar client profiles"
            )

    if breakdown.get("preferences", 0) > 0 and referral.client_preferences:
        prefs = referral.client_preferences
        amenities = opening.amenity_set
        matched = []
        if prefs.pets_allowed and amenities.pets_allowed:
            matched.append("pets allowed")
        if prefs.private_room and amenities.private_rooms_available:
            matched.append("private room available")
        if matched:
            highlights.append(f"matches {', '.join(matched)}")

    therapy = opening.service_set.on_site_therapy
    if breakdown.get("services", 0) > 0 and therapy:
        highlights.append(f"offers {', '.join(therapy)} therapy")

    return highlights


def explain(
    score_breakdown: ScoreBreakdown | Mapping[str, float],
    total_score: float,
    opening: Opening,
    referral: Referral,
    organization: Optional[Organization] = None,
    site: Optional[Site] = None,
    weights: Optional[ScoringWeights] = None,
) -> str:
    """
    Generate a human-readable explanation for one scored opening.

    Args:
        score_breakdown: Per-factor scores, as a model or a stored mapping
        total_score: Total match score
        opening: The scored opening
        referral: The referral it was scored against
        organization: Opening's organization (accepted for context)
        site: Opening's site (accepted for context)
        weights: Weights the scores were computed with; defaults when omitted

    Returns:
        Explanation text, never empty
    """
    weights = weights or _DEFAULT_WEIGHTS
    if isinstance(score_breakdown, ScoreBreakdown):
        breakdown = score_breakdown.as_dict()
    else:
        breakdown = {k: v for k, v in score_breakdown.items() if k in FACTOR_LABELS}

    # Stable sort keeps factor order among ties
    scored = sorted(
        ((factor, score) for factor, score in breakdown.items() if score > 0),
        key=lambda item: item[1],
        reverse=True,
    )

    parts = [f"{quality_prefix(total_score)}: "]

    strengths = [
        f"{FACTOR_LABELS[factor]} ({round(_ratio(score, weights.for_factor(factor)) * 100)}%)"
        for factor, score in scored[:EXPLANATION_TOP_FACTORS]
    ]
    if strengths:
        parts.append(", ".join(strengths) + ". ")

    highlights = _highlights(breakdown, opening, referral)
    if highlights:
        parts.append("Notable: " + "; ".join(highlights) + ". ")

    # Weakest relative to its own weight; ties go to the earlier factor
    if total_score < EXPLANATION_CAUTION_BELOW and scored:
        weakest = min(
            breakdown,
            key=lambda factor: (
                breakdown[factor] <= 0,
                _ratio(breakdown[factor], weights.for_factor(factor)),
            ),
        )
        parts.append(f"Review {FACTOR_LABELS[weakest]} carefully.")

    return "".join(parts).strip()
