"""Prominence ranking applied to matching results."""

from .ranking_service import RankedMatch, RankingExplanation, RankingService

__all__ = [
    "RankedMatch",
    "RankingExplanation",
    "RankingService",
]
