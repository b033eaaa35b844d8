"""
Referral-to-opening matching engine.

Filters a referral's candidate openings through eligibility and hard
constraints, scores the survivors across ten weighted factors, ranks
them, labels their quality and explains each result.

run_match() is the pure core: no clock reads beyond an optional
reference date and no I/O. MatchingEngine wraps it with input coercion,
timing, risk flags and logging.
"""

import math
import time
from collections.abc import Iterable, Mapping, Sequence
from datetime import date
from typing import Any, Optional, TypeVar

from pydantic import BaseModel

from referral_match.data.models import (
    CapabilityProfile,
    LicenseInstance,
    MatchingConfig,
    MatchResult,
    MatchRun,
    MatchRunMeta,
    Opening,
    Organization,
    Referral,
    Site,
)
from referral_match.utils.config import AppSettings, get_settings
from referral_match.utils.constants import MatchQuality
from referral_match.utils.logger import get_logger

from .config import ConfigOverrides, resolve_config
from .constraints import check_constraints
from .explanation import explain
from .lookups import ProviderLookup
from .risk_flags import identify_risk_flags
from .scorers import ScoringContext, score_opening
from .signals import ClinicalTextSignals, keyword_signals

logger = get_logger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero for positives."""
    return math.floor(value + 0.5)


def run_match(
    referral: Referral,
    openings: Sequence[Opening],
    lookup: ProviderLookup,
    config: MatchingConfig,
    reference_date: Optional[date] = None,
    signals: ClinicalTextSignals = keyword_signals,
) -> MatchRun:
    """
    Match one referral against a pool of openings.

    Args:
        referral: The client referral
        openings: Candidate openings, in a deterministic order
        lookup: Pre-indexed provider records
        config: Fully resolved matching configuration
        reference_date: "Today" for availability scoring (default: date.today())
        signals: Free-text reader for capability scoring

    Returns:
        MatchRun with ranked results; meta.latency_ms is left unset
    """
    thresholds = config.thresholds
    reference_date = reference_date or date.today()

    candidates: list[MatchResult] = []
    ineligible = excluded = below_minimum = 0

    for opening in openings:
        if not opening.is_open:
            ineligible += 1
            continue

        organization = lookup.organization(opening.organization_id)
        site = lookup.site(opening.site_id)
        license = lookup.license(opening.organization_id)

        violations = check_constraints(referral, opening, license, config.constraints)
        if violations:
            excluded += 1
            logger.debug(
                f"Opening {opening.id} excluded: "
                f"{', '.join(v.message for v in violations)}"
            )
            continue

        ctx = ScoringContext(
            organization=organization,
            site=site,
            license=license,
            capability=lookup.capability(opening.site_id, opening.organization_id),
            reference_date=reference_date,
            signals=signals,
        )
        breakdown = score_opening(referral, opening, ctx, config.weights)
        total = breakdown.total_score

        if total < thresholds.minimum_score:
            below_minimum += 1
            continue

        score = round_half_up(total)
        candidates.append(MatchResult(
            opening_id=opening.id,
            opening=opening,
            organization=organization,
            site=site,
            score=score,
            raw_score=total,
            score_breakdown=breakdown,
            quality=MatchQuality.from_score(
                score, thresholds.good_score, thresholds.excellent_score
            ),
        ))

    # sort() is stable, so ties keep input order
    candidates.sort(key=lambda r: r.score, reverse=True)
    results = candidates[:max(0, thresholds.max_results)]

    for result in results:
        result.match_explanation = explain(
            result.score_breakdown,
            result.raw_score,
            result.opening,
            referral,
            result.organization,
            result.site,
            weights=config.weights,
        )

    scores = [r.score for r in results]
    meta = MatchRunMeta(
        openings_searched=len(openings),
        matches_found=len(results),
        top_match_score=scores[0] if scores else 0,
        avg_match_score=round_half_up(sum(scores) / len(scores)) if scores else 0,
        ineligible_openings=ineligible,
        excluded_by_constraints=excluded,
        below_minimum_score=below_minimum,
        config_used=config,
    )
    return MatchRun(results=results, meta=meta)


def _as_models(items: Optional[Iterable[Any]], model: type[ModelT]) -> list[ModelT]:
    """Accept model instances or plain mappings from the store."""
    return [
        item if isinstance(item, model) else model.model_validate(item)
        for item in items or ()
    ]


class MatchingEngine:
    """
    Engine for matching referrals to provider openings.

    Uses a constraint-then-score approach:
    - Eligibility (active, spots available)
    - Hard constraints (funding, gender, age, license)
    - Ten weighted factor scores, summed and ranked
    - Template explanation and advisory risk flags per result
    """

    def __init__(
        self,
        config: ConfigOverrides = None,
        settings: Optional[AppSettings] = None,
        signals: Optional[ClinicalTextSignals] = None,
    ):
        """
        Initialize the matching engine.

        Args:
            config: Default config overrides for every run
            settings: Application settings (default: global settings)
            signals: Free-text reader (default: keyword matching)
        """
        self.config = resolve_config(config)
        self.settings = settings or get_settings()
        self.signals = signals or keyword_signals

        for issue in self.config.validation_issues():
            logger.warning(f"Matching config: {issue}")

    def _effective_config(self, overrides: ConfigOverrides) -> MatchingConfig:
        config = self.config if overrides is None else resolve_config(overrides)
        if overrides is not None:
            for issue in config.validation_issues():
                logger.warning(f"Matching config: {issue}")

        cap = self.settings.matching.max_results_cap
        if config.thresholds.max_results > cap:
            logger.warning(f"max_results {config.thresholds.max_results} capped at {cap}")
            config = config.model_copy(update={
                "thresholds": config.thresholds.model_copy(update={"max_results": cap}),
            })
        return config

    def build_lookup(
        self,
        organizations: Iterable[Organization | Mapping] = (),
        sites: Iterable[Site | Mapping] = (),
        licenses: Iterable[LicenseInstance | Mapping] = (),
        capability_profiles: Iterable[CapabilityProfile | Mapping] = (),
    ) -> ProviderLookup:
        """Index provider records once for reuse across runs."""
        return ProviderLookup.build(
            _as_models(organizations, Organization),
            _as_models(sites, Site),
            _as_models(licenses, LicenseInstance),
            _as_models(capability_profiles, CapabilityProfile),
        )

    def match(
        self,
        referral: Referral | Mapping,
        openings: Iterable[Opening | Mapping],
        organizations: Iterable[Organization | Mapping] = (),
        sites: Iterable[Site | Mapping] = (),
        licenses: Iterable[LicenseInstance | Mapping] = (),
        capability_profiles: Iterable[CapabilityProfile | Mapping] = (),
        config: ConfigOverrides = None,
        lookup: Optional[ProviderLookup] = None,
        reference_date: Optional[date] = None,
    ) -> MatchRun:
        """
        Match a referral against openings and time the run.

        Args:
            referral: Client referral
            openings: Candidate openings
            organizations: Provider organizations
            sites: Provider sites
            licenses: License records
            capability_profiles: Capability profiles
            config: Per-call config overrides (default: engine config)
            lookup: Pre-built lookup; provider collections are ignored when given
            reference_date: "Today" for availability scoring

        Returns:
            MatchRun with results, meta and latency
        """
        started = time.perf_counter()

        referral = referral if isinstance(referral, Referral) else Referral.model_validate(referral)
        openings = _as_models(openings, Opening)
        if lookup is None:
            lookup = self.build_lookup(organizations, sites, licenses, capability_profiles)
        effective = self._effective_config(config)

        run = run_match(referral, openings, lookup, effective, reference_date, self.signals)

        if self.settings.matching.include_risk_flags:
            for result in run.results:
                result.risk_flags = identify_risk_flags(referral, result, self.signals)

        latency_ms = round_half_up((time.perf_counter() - started) * 1000)
        run = run.model_copy(update={
            "meta": run.meta.model_copy(update={"latency_ms": latency_ms}),
        })

        meta = run.meta
        logger.info(
            f"Matched referral {referral.id or '<unsaved>'}: "
            f"{meta.matches_found}/{meta.openings_searched} openings, "
            f"top {meta.top_match_score}, avg {meta.avg_match_score}, {latency_ms} ms"
        )
        if latency_ms > self.settings.matching.slow_run_warning_ms:
            logger.warning(f"Slow matching run: {latency_ms} ms for {meta.openings_searched} openings")

        return run

    def match_many(
        self,
        referrals: Iterable[Referral | Mapping],
        openings: Iterable[Opening | Mapping],
        organizations: Iterable[Organization | Mapping] = (),
        sites: Iterable[Site | Mapping] = (),
        licenses: Iterable[LicenseInstance | Mapping] = (),
        capability_profiles: Iterable[CapabilityProfile | Mapping] = (),
        config: ConfigOverrides = None,
        reference_date: Optional[date] = None,
    ) -> list[MatchRun]:
        """
        Match several referrals against the same opening pool.

        Provider records are indexed once and shared by every run.

        Returns:
            One MatchRun per referral, in input order
        """
        lookup = self.build_lookup(organizations, sites, licenses, capability_profiles)
        openings = _as_models(openings, Opening)
        return [
            self.match(
                referral,
                openings,
                config=config,
                lookup=lookup,
                reference_date=reference_date,
            )
            for referral in referrals
        ]


# Singleton instance
_matching_engine: Optional[MatchingEngine] = None


def get_matching_engine() -> MatchingEngine:
    """Get the matching engine singleton instance."""
    global _matching_engine
    if _matching_engine is None:
        _matching_engine = MatchingEngine()
    return _matching_engine


def match(
    referral: Referral | Mapping,
    openings: Iterable[Opening | Mapping],
    organizations: Iterable[Organization | Mapping] = (),
    sites: Iterable[Site | Mapping] = (),
    licenses: Iterable[LicenseInstance | Mapping] = (),
    capability_profiles: Iterable[CapabilityProfile | Mapping] = (),
    config: ConfigOverrides = None,
) -> MatchRun:
    """Match with the shared engine; see MatchingEngine.match()."""
    return get_matching_engine().match(
        referral, openings, organizations, sites, licenses, capability_profiles, config=config,
    )
