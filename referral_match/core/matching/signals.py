"""
Clinical signals read from referral free text.

Capability scoring and risk flags ask questions of the behavioral and
medical summaries through ClinicalTextSignals. KeywordSignals answers
them with case-insensitive substring matching: no stemming and no
negation handling, so "no history of aggression" still reports
aggression.
"""

from abc import ABC, abstractmethod
from typing import Optional

from referral_match.data.models import Referral
from referral_match.utils.constants import CLINICAL_KEYWORDS


class ClinicalTextSignals(ABC):
    """
    Abstract base class for reading clinical signals from a referral.

    Behavioral questions read behavioral_summary; medical questions read
    medical_summary.
    """

    @abstractmethod
    def mentions_aggression(self, referral: Referral) -> bool:
        """Aggressive behavior is described."""

    @abstractmethod
    def mentions_severity(self, referral: Referral) -> bool:
        """Behavior is described as severe."""

    @abstractmethod
    def mentions_wandering(self, referral: Referral) -> bool:
        """Elopement or wandering is described."""

    @abstractmethod
    def mentions_violence(self, referral: Referral) -> bool:
        """Aggression or violence is described."""

    @abstractmethod
    def mentions_self_harm(self, referral: Referral) -> bool:
        """Self-harm or self-injury is described."""

    @abstractmethod
    def mentions_flight_risk(self, referral: Referral) -> bool:
        """Elopement or flight risk is described."""

    @abstractmethod
    def needs_tube_feeding(self, referral: Referral) -> bool:
        """Tube feeding is described."""

    @abstractmethod
    def needs_ventilator(self, referral: Referral) -> bool:
        """Ventilator support is described."""

    @abstractmethod
    def needs_seizure_management(self, referral: Referral) -> bool:
        """Seizures are described."""

    @abstractmethod
    def needs_airway_support(self, referral: Referral) -> bool:
        """Ventilator or tracheostomy care is described."""


class KeywordSignals(ClinicalTextSignals):
    """Keyword substring matcher over the lowercased summaries."""

    def __init__(self, keywords: Optional[dict[str, tuple[str, ...]]] = None):
        self.keywords = dict(keywords or CLINICAL_KEYWORDS)

    def _behavioral(self, referral: Referral, group: str) -> bool:
        return self._contains(referral.behavioral_summary, group)

    def _medical(self, referral: Referral, group: str) -> bool:
        return self._contains(referral.medical_summary, group)

    def _contains(self, text: Optional[str], group: str) -> bool:
        lowered = (text or "").lower()
        return any(kw in lowered for kw in self.keywords.get(group, ()))

    def mentions_aggression(self, referral: Referral) -> bool:
        return self._behavioral(referral, "aggression")

    def mentions_severity(self, referral: Referral) -> bool:
        return self._behavioral(referral, "severe")

    def mentions_wandering(self, referral: Referral) -> bool:
        return self._behavioral(referral, "wandering")

    def mentions_violence(self, referral: Referral) -> bool:
        return self._behavioral(referral, "violence")

    def mentions_self_harm(self, referral: Referral) -> bool:
        return self._behavioral(referral, "self_harm")

    def mentions_flight_risk(self, referral: Referral) -> bool:
        return self._behavioral(referral, "flight_risk")

    def needs_tube_feeding(self, referral: Referral) -> bool:
        return self._medical(referral, "tube_feeding")

    def needs_ventilator(self, referral: Referral) -> bool:
        return self._medical(referral, "ventilator")

    def needs_seizure_management(self, referral: Referral) -> bool:
        return self._medical(referral, "seizure")

    def needs_airway_support(self, referral: Referral) -> bool:
        return self._medical(referral, "airway")


# Shared default instance
keyword_signals = KeywordSignals()
