"""
Verdict Registry
================

Enumerations shared by every calculator in the engine.

All enums subclass ``str`` so results stay plain data: a ``Verdict`` compares
equal to its string value and serializes without a custom encoder.

- Verdict: outcome of an exposure test (NEN-EN 689, mixture index)
- Distribution: distribution family assumed for a measurement series
- ComplianceMethod: which NEN-EN 689 test produced a verdict
- ExposureBand: tier-1 screening band A-D
- RiskLevel: outcome of a physical-workload evaluation
- OcraCategory: OCRA checklist colour category
- PostureVerdict: EN 1005-4 posture observation verdict
"""
from __future__ import annotations

from enum import Enum


class Verdict(str, Enum):
    """Outcome of an exposure compliance test."""
    ACCEPTABLE = "acceptable"
    UNACCEPTABLE = "unacceptable"
    UNCERTAIN = "uncertain"
    INSUFFICIENT = "insufficient"

    @property
    def is_decided(self) -> bool:
        """True for the two verdicts that close an assessment."""
        return self in (Verdict.ACCEPTABLE, Verdict.UNACCEPTABLE)


class Distribution(str, Enum):
    LOG_NORMAL = "log-normal"
    NORMAL = "normal"

    @classmethod
    def from_value(cls, value: "str | Distribution | None") -> "Distribution":
        """
        Resolve a distribution label, defaulting to log-normal when unset.

        :param value: Enum member, its string value, or None
        :returns: Distribution member
        :raises ValueError: If the label is not a known family
        """
        if value is None:
            return cls.LOG_NORMAL
        try:
            return cls(value)
        except ValueError:
            raise ValueError(
                f"Unknown distribution: {value!r}. Available: {[d.value for d in cls]}"
            )


class ComplianceMethod(str, Enum):
    NONE = "none"
    PRELIMINARY = "preliminary"   # NEN-EN 689 5.5.2, 3 <= n < 6
    ANNEX_F = "annex-f"           # NEN-EN 689 5.5.3 + Annex F, n >= 6


class ExposureBand(str, Enum):
    A = "A"
    B = "B"
    C = "C"
    D = "D"


class RiskLevel(str, Enum):
    """Outcome of a physical-workload evaluation, ordered by severity."""
    ACCEPTABLE = "acceptable"
    MODERATE = "moderate"
    HIGH = "high"
    INSUFFICIENT = "insufficient"

    @property
    def severity(self) -> int:
        return _RISK_SEVERITY[self]


_RISK_SEVERITY = {
    RiskLevel.INSUFFICIENT: -1,
    RiskLevel.ACCEPTABLE: 0,
    RiskLevel.MODERATE: 1,
    RiskLevel.HIGH: 2,
}


class OcraCategory(str, Enum):
    GREEN = "green"
    YELLOW = "yellow"
    LIGHT_ORANGE = "light-orange"
    ORANGE = "orange"
    RED = "red"


class PostureVerdict(str, Enum):
    ACCEPTABLE = "acceptable"
    CONDITIONALLY = "conditionally"
    NOT_ACCEPTABLE = "not-acceptable"
