"""Unit tests for scale translation and trend classification."""

import pytest

from joshua.config.engine import ScaleConfig
from joshua.models.factor import RiskFactor
from joshua.models.types import RiskCategory, RiskLevel, TrendDirection
from joshua.risk.scale import (
    ScaleTranslator,
    TrendClassifier,
    delta_from_previous,
    describe_delta,
    primary_drivers,
    round_half_up,
)
from joshua.risk.weights import CategoryWeightTable


@pytest.fixture
def translator() -> ScaleTranslator:
    """Create translator on the default scale."""
    return ScaleTranslator()


def create_factor(
    name: str = "factor",
    category: RiskCategory = RiskCategory.REGIONAL_CONFLICTS,
    value: float = 0.5,
    trend: TrendDirection | None = None,
) -> RiskFactor:
    """Helper to create a RiskFactor for testing."""
    return RiskFactor(category=category, name=name, value=value, trend=trend)


# =============================================================================
# Scale Translation Tests
# =============================================================================


class TestToScaled:
    """Tests for score to scale translation."""

    def test_anchors(self, translator: ScaleTranslator) -> None:
        """Test fixed points of the scale."""
        assert translator.to_scaled(0.0) == 1440
        assert translator.to_scaled(1.0) == 0
        assert translator.to_scaled(0.5) == 720

    def test_strictly_decreasing(self, translator: ScaleTranslator) -> None:
        """Test higher scores map to lower scaled values."""
        values = [translator.to_scaled(i / 100) for i in range(101)]
        assert all(a > b for a, b in zip(values, values[1:]))

    def test_round_half_up(self) -> None:
        """Test halves round up rather than to even."""
        assert round_half_up(0.5) == 1
        assert round_half_up(2.5) == 3
        assert round_half_up(719.5) == 720
        assert round_half_up(719.49) == 719

    def test_to_score_inverse(self, translator: ScaleTranslator) -> None:
        """Test to_score inverts to_scaled on the anchors."""
        assert translator.to_score(1440) == 0.0
        assert translator.to_score(0) == 1.0
        assert translator.to_score(720) == pytest.approx(0.5)

    def test_custom_max_scale(self) -> None:
        """Test a custom scale maximum."""
        translator = ScaleTranslator(
            ScaleConfig(max_scale=100, critical=10, severe=20, high=40, moderate=60, low=90)
        )
        assert translator.to_scaled(0.0) == 100
        assert translator.to_scaled(0.25) == 75


class TestRiskLevel:
    """Tests for risk level classification."""

    @pytest.mark.parametrize(
        ("scaled", "expected"),
        [
            (50, RiskLevel.CRITICAL),
            (150, RiskLevel.SEVERE),
            (300, RiskLevel.HIGH),
            (500, RiskLevel.MODERATE),
            (750, RiskLevel.LOW),
            (1000, RiskLevel.MINIMAL),
        ],
    )
    def test_levels(self, translator: ScaleTranslator, scaled: int, expected: RiskLevel) -> None:
        """Test representative values of each level."""
        assert translator.risk_level(scaled) == expected

    @pytest.mark.parametrize(
        ("scaled", "expected"),
        [
            (0, RiskLevel.CRITICAL),
            (99, RiskLevel.CRITICAL),
            (100, RiskLevel.SEVERE),
            (199, RiskLevel.SEVERE),
            (200, RiskLevel.HIGH),
            (400, RiskLevel.MODERATE),
            (600, RiskLevel.LOW),
            (899, RiskLevel.LOW),
            (900, RiskLevel.MINIMAL),
            (1440, RiskLevel.MINIMAL),
        ],
    )
    def test_boundaries_closed_open(
        self, translator: ScaleTranslator, scaled: int, expected: RiskLevel
    ) -> None:
        """Test a cut point belongs to the less severe level."""
        assert translator.risk_level(scaled) == expected

    def test_cut_points_must_ascend(self) -> None:
        """Test ScaleConfig rejects unordered cut points."""
        with pytest.raises(ValueError):
            ScaleConfig(critical=300, severe=200)


# =============================================================================
# Trend Tests
# =============================================================================


class TestTrendClassifier:
    """Tests for TrendClassifier."""

    def test_deteriorating(self) -> None:
        """Test deteriorating wins above twice the improving count."""
        factors = [create_factor(trend=TrendDirection.DETERIORATING) for _ in range(3)]
        factors.append(create_factor(trend=TrendDirection.IMPROVING))
        assert TrendClassifier.classify(factors) == TrendDirection.DETERIORATING

    def test_improving(self) -> None:
        """Test improving wins above twice the deteriorating count."""
        factors = [create_factor(trend=TrendDirection.IMPROVING)]
        assert TrendClassifier.classify(factors) == TrendDirection.IMPROVING

    def test_exactly_double_is_stable(self) -> None:
        """Test a two-to-one ratio is not enough."""
        factors = [
            create_factor(trend=TrendDirection.DETERIORATING),
            create_factor(trend=TrendDirection.DETERIORATING),
            create_factor(trend=TrendDirection.IMPROVING),
        ]
        assert TrendClassifier.classify(factors) == TrendDirection.STABLE

    def test_untagged_is_stable(self) -> None:
        """Test factors without trend tags are stable."""
        assert TrendClassifier.classify([create_factor(), create_factor()]) == TrendDirection.STABLE


# =============================================================================
# Primary Driver Tests
# =============================================================================


class TestPrimaryDrivers:
    """Tests for primary driver ranking."""

    def test_sorted_by_weighted_contribution(self) -> None:
        """Test drivers rank by value times category weight."""
        weights = CategoryWeightTable.default()
        drivers = primary_drivers(
            [
                create_factor("economic", RiskCategory.ECONOMIC_PRESSURE, 1.0),
                create_factor("regional", RiskCategory.REGIONAL_CONFLICTS, 0.5),
                create_factor("technical", RiskCategory.TECHNICAL_INCIDENTS, 0.9),
            ],
            weights,
        )
        assert [d.name for d in drivers] == ["technical", "regional", "economic"]
        assert drivers[0].contribution == pytest.approx(0.135)

    def test_limited_to_top_five(self, sample_factors: list[RiskFactor]) -> None:
        """Test at most five drivers are kept."""
        drivers = primary_drivers(sample_factors, CategoryWeightTable.default())
        assert len(drivers) == 5
        assert drivers[0].name == "Active conflict"
        contributions = [d.contribution for d in drivers]
        assert contributions == sorted(contributions, reverse=True)

    def test_ties_keep_input_order(self) -> None:
        """Test equal contributions keep input order."""
        drivers = primary_drivers(
            [create_factor("first"), create_factor("second"), create_factor("third")],
            CategoryWeightTable.default(),
        )
        assert [d.name for d in drivers] == ["first", "second", "third"]

    def test_unweighted_category_contributes_zero(self) -> None:
        """Test categories missing from the table contribute nothing."""
        weights = CategoryWeightTable({RiskCategory.REGIONAL_CONFLICTS: 1.0})
        drivers = primary_drivers(
            [create_factor("econ", RiskCategory.ECONOMIC_PRESSURE, 1.0)], weights
        )
        assert drivers[0].contribution == 0.0


# =============================================================================
# Delta Tests
# =============================================================================


class TestDelta:
    """Tests for change since the previous assessment."""

    def test_risk_increased(self) -> None:
        """Test a negative delta means risk increased."""
        delta = delta_from_previous(85, 90)
        assert delta == -5
        assert describe_delta(delta) == "-5 seconds (risk increased)"

    def test_risk_decreased(self) -> None:
        """Test a positive delta means risk decreased."""
        assert describe_delta(delta_from_previous(100, 90)) == "+10 seconds (risk decreased)"

    def test_unchanged(self) -> None:
        """Test a zero delta."""
        assert describe_delta(delta_from_previous(90, 90)) == "0 seconds (unchanged)"

    def test_no_previous(self) -> None:
        """Test the first assessment has no delta."""
        assert delta_from_previous(90, None) is None
        assert describe_delta(None) == "no previous assessment"
