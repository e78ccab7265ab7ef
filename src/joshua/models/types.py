"""Enumerations shared by risk scoring and consensus reconciliation."""

from enum import Enum

from joshua.core.exceptions import InvalidWeightError


class RiskCategory(str, Enum):
    """Closed classification of a risk factor's domain."""

    NUCLEAR_ARSENAL_CHANGES = "nuclear_arsenal_changes"
    ARMS_CONTROL_BREAKDOWN = "arms_control_breakdown"
    REGIONAL_CONFLICTS = "regional_conflicts"
    LEADERSHIP_INSTABILITY = "leadership_instability"
    TECHNICAL_INCIDENTS = "technical_incidents"
    COMMUNICATION_FAILURES = "communication_failures"
    EMERGING_TECH_RISKS = "emerging_tech_risks"
    ECONOMIC_PRESSURE = "economic_pressure"

    @classmethod
    def parse(cls, name: "str | RiskCategory") -> "RiskCategory":
        """Resolve a category from its value, member name or legacy alias.

        Args:
            name: Category value ("regional_conflicts"), member name
                ("REGIONAL_CONFLICTS") or legacy key ("leadership_rhetoric").

        Returns:
            The matching RiskCategory.

        Raises:
            InvalidWeightError: If the name matches no category.
        """
        if isinstance(name, cls):
            return name
        key = str(name).strip().lower()
        try:
            return cls(key)
        except ValueError:
            pass
        if key in CATEGORY_ALIASES:
            return CATEGORY_ALIASES[key]
        raise InvalidWeightError(
            f"Unknown risk category '{name}'",
            field="category",
            value=name,
            expected=", ".join(c.value for c in cls),
        )

    @property
    def default_weight(self) -> float:
        """Default weight of this category in the composite score."""
        return DEFAULT_CATEGORY_WEIGHTS[self]


# Keys used by older configuration files and analysis payloads
CATEGORY_ALIASES: dict[str, RiskCategory] = {
    "arsenal_changes": RiskCategory.NUCLEAR_ARSENAL_CHANGES,
    "doctrine_and_posture": RiskCategory.ARMS_CONTROL_BREAKDOWN,
    "doctrine_changes": RiskCategory.ARMS_CONTROL_BREAKDOWN,
    "leadership_and_rhetoric": RiskCategory.LEADERSHIP_INSTABILITY,
    "leadership_rhetoric": RiskCategory.LEADERSHIP_INSTABILITY,
    "communication_breakdown": RiskCategory.COMMUNICATION_FAILURES,
    "emerging_technology": RiskCategory.EMERGING_TECH_RISKS,
    "economic_factors": RiskCategory.ECONOMIC_PRESSURE,
}

DEFAULT_CATEGORY_WEIGHTS: dict[RiskCategory, float] = {
    RiskCategory.NUCLEAR_ARSENAL_CHANGES: 0.15,
    RiskCategory.ARMS_CONTROL_BREAKDOWN: 0.15,
    RiskCategory.REGIONAL_CONFLICTS: 0.20,
    RiskCategory.LEADERSHIP_INSTABILITY: 0.10,
    RiskCategory.TECHNICAL_INCIDENTS: 0.15,
    RiskCategory.COMMUNICATION_FAILURES: 0.10,
    RiskCategory.EMERGING_TECH_RISKS: 0.10,
    RiskCategory.ECONOMIC_PRESSURE: 0.05,
}


class ConfidenceLevel(str, Enum):
    """Ordinal confidence annotation on a factor or analysis."""

    VERY_LOW = "very_low"  # 0.2
    LOW = "low"  # 0.4
    MODERATE = "moderate"  # 0.6
    HIGH = "high"  # 0.8
    VERY_HIGH = "very_high"  # 1.0

    @property
    def score(self) -> float:
        """Numeric weight of this confidence level (0.2 - 1.0)."""
        return CONFIDENCE_SCORES[self]

    @classmethod
    def from_score(cls, score: float) -> "ConfidenceLevel":
        """Map a numeric confidence back onto the ordinal scale."""
        if score < 0.3:
            return cls.VERY_LOW
        elif score < 0.5:
            return cls.LOW
        elif score < 0.7:
            return cls.MODERATE
        elif score < 0.9:
            return cls.HIGH
        else:
            return cls.VERY_HIGH


CONFIDENCE_SCORES: dict[ConfidenceLevel, float] = {
    ConfidenceLevel.VERY_LOW: 0.2,
    ConfidenceLevel.LOW: 0.4,
    ConfidenceLevel.MODERATE: 0.6,
    ConfidenceLevel.HIGH: 0.8,
    ConfidenceLevel.VERY_HIGH: 1.0,
}


class TrendDirection(str, Enum):
    """Direction of a factor or of the overall assessment."""

    IMPROVING = "improving"
    DETERIORATING = "deteriorating"
    STABLE = "stable"
    UNCERTAIN = "uncertain"


class RiskLevel(str, Enum):
    """Risk level bucket, most severe first (ascending scaled value)."""

    CRITICAL = "critical"  # [0, 100)
    SEVERE = "severe"  # [100, 200)
    HIGH = "high"  # [200, 400)
    MODERATE = "moderate"  # [400, 600)
    LOW = "low"  # [600, 900)
    MINIMAL = "minimal"  # [900, max]

    @property
    def rank(self) -> int:
        """Position in RISK_LEVEL_ORDER; 0 is the most severe."""
        return RISK_LEVEL_ORDER.index(self)

    # Compare by rank, not by the string value
    def __lt__(self, other: object) -> bool:
        if not isinstance(other, RiskLevel):
            return NotImplemented
        return self.rank < other.rank

    def __le__(self, other: object) -> bool:
        if not isinstance(other, RiskLevel):
            return NotImplemented
        return self.rank <= other.rank

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, RiskLevel):
            return NotImplemented
        return self.rank > other.rank

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, RiskLevel):
            return NotImplemented
        return self.rank >= other.rank


RISK_LEVEL_ORDER: list[RiskLevel] = [
    RiskLevel.CRITICAL,
    RiskLevel.SEVERE,
    RiskLevel.HIGH,
    RiskLevel.MODERATE,
    RiskLevel.LOW,
    RiskLevel.MINIMAL,
]


class ImpactLevel(str, Enum):
    """Impact of a critical development."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"
