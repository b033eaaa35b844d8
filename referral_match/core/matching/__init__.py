"""Referral-to-opening matching engine module."""

from .config import DEFAULT_CONFIG, resolve_config
from .constraints import check_constraints
from .explanation import explain, quality_prefix
from .lookups import ProviderLookup
from .matching_engine import (
    MatchingEngine,
    get_matching_engine,
    match,
    round_half_up,
    run_match,
)
from .risk_flags import identify_risk_flags
from .scorers import FACTOR_SCORERS, ScoringContext, score_opening
from .signals import ClinicalTextSignals, KeywordSignals, keyword_signals

__all__ = [
    "DEFAULT_CONFIG",
    "resolve_config",
    "check_constraints",
    "explain",
    "quality_prefix",
    "ProviderLookup",
    "MatchingEngine",
    "get_matching_engine",
    "match",
    "round_half_up",
    "run_match",
    "identify_risk_flags",
    "FACTOR_SCORERS",
    "ScoringContext",
    "score_opening",
    "ClinicalTextSignals",
    "KeywordSignals",
    "keyword_signals",
]
