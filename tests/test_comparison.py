from decimal import Decimal

import pytest

from emi_calc.comparison import (
    candidate_durations,
    compare_contribution_levels,
    compare_durations,
    compare_payment_levels,
    prepayment_impact,
)
from emi_calc.data_models import ComparisonCandidate, LoanComparison, PaymentPlan
from emi_calc.errors import InvalidInput, NonConvergent


class TestCandidateDurations:
    def test_selected_is_in_base(self):
        assert candidate_durations(20) == [5, 10, 15, 20]

    def test_selected_is_added(self):
        assert candidate_durations(Decimal("12.5")) == [5, 10, Decimal("12.5")]

    def test_short_selection(self):
        assert candidate_durations(3) == [3]

    def test_custom_base(self):
        assert candidate_durations(7, base=(1, 2, 30)) == [1, 2, 7]


class TestCompareDurations:
    def test_home_loan(self, home_loan):
        comparison = compare_durations(
            home_loan.principal,
            home_loan.annual_rate_percent,
            candidate_durations(20),
            selected_years=20,
        )
        durations = [c.duration_or_payment for c in comparison.candidates]
        assert durations == [5, 10, 15, 20]
        assert comparison.best.duration_or_payment == 5
        assert comparison.selected.duration_or_payment == 20
        assert comparison.selected.plan.term_months == 240
        assert comparison.savings_vs_selected > 0
        assert comparison.savings_vs_selected == abs(
            comparison.best.plan.total_interest - comparison.selected.plan.total_interest
        )

    def test_total_cost(self, home_loan):
        comparison = compare_durations(home_loan.principal, home_loan.annual_rate_percent, [10, 20])
        for candidate in comparison.candidates:
            assert candidate.total_cost == home_loan.principal + candidate.plan.total_interest
        assert comparison.selected is None
        assert comparison.savings_vs_selected is None

    def test_savings_is_absolute(self):
        cheap = ComparisonCandidate(5, PaymentPlan(Decimal("2000"), 60, Decimal("20000")), Decimal("120000"))
        dear = ComparisonCandidate(10, PaymentPlan(Decimal("1200"), 120, Decimal("44000")), Decimal("144000"))
        assert LoanComparison((cheap, dear), best=cheap, selected=dear).savings_vs_selected == Decimal("24000")
        assert LoanComparison((cheap, dear), best=dear, selected=cheap).savings_vs_selected == Decimal("24000")

    def test_durations_above_selection_are_ignored(self, home_loan):
        comparison = compare_durations(
            home_loan.principal, home_loan.annual_rate_percent, [5, 10, 25, 30], selected_years=10
        )
        assert [c.duration_or_payment for c in comparison.candidates] == [5, 10]

    def test_unordered_input_is_evaluated_ascending(self, home_loan):
        comparison = compare_durations(home_loan.principal, home_loan.annual_rate_percent, [25, 5, 15])
        assert [c.duration_or_payment for c in comparison.candidates] == [5, 15, 25]

    def test_ties_favour_shorter_duration(self):
        """Interest-free loans cost the same at any duration."""
        comparison = compare_durations(Decimal("100000"), 0, [3, 1, 2])
        assert comparison.best.duration_or_payment == 1

    def test_ranked_by_total_cost(self, home_loan):
        comparison = compare_durations(home_loan.principal, home_loan.annual_rate_percent, [5, 10, 15])
        ranked = comparison.ranked()
        assert ranked[0] is comparison.best
        costs = [c.total_cost for c in ranked]
        assert costs == sorted(costs)

    def test_nothing_to_compare(self, home_loan):
        with pytest.raises(InvalidInput):
            compare_durations(home_loan.principal, home_loan.annual_rate_percent, [10, 15], selected_years=5)


class TestComparePaymentLevels:
    def test_highest_payment_is_cheapest(self, remaining_loan):
        comparison = compare_payment_levels(
            remaining_loan["principal"],
            remaining_loan["annual_rate_percent"],
            [Decimal("30000"), Decimal("25000"), Decimal("35000")],
        )
        assert [c.duration_or_payment for c in comparison.candidates] == [25000, 30000, 35000]
        assert comparison.best.duration_or_payment == 35000
        months = [c.plan.term_months for c in comparison.candidates]
        assert months == sorted(months, reverse=True)

    def test_unbounded_levels_are_skipped(self, remaining_loan):
        comparison = compare_payment_levels(
            remaining_loan["principal"],
            remaining_loan["annual_rate_percent"],
            [Decimal("15000"), Decimal("25000")],
        )
        assert [c.duration_or_payment for c in comparison.candidates] == [25000]

    def test_no_level_converges(self, remaining_loan):
        with pytest.raises(NonConvergent):
            compare_payment_levels(
                remaining_loan["principal"], remaining_loan["annual_rate_percent"], [Decimal("10000")]
            )


class TestPrepaymentImpact:
    def test_additional_payment_saves(self, remaining_loan):
        impact = prepayment_impact(
            remaining_loan["principal"],
            remaining_loan["annual_rate_percent"],
            remaining_loan["monthly_payment"],
            Decimal("5000"),
        )
        assert impact.baseline.term_months == 223
        assert impact.accelerated.term_months == 158
        assert impact.accelerated.monthly_payment == Decimal("30000")
        assert impact.months_saved == 65
        assert impact.interest_saved > 0
        assert impact.beneficial

    def test_zero_rate_saves_nothing(self):
        impact = prepayment_impact(Decimal("120000"), 0, Decimal("10000"), Decimal("2000"))
        assert impact.months_saved == 2
        assert impact.interest_saved == 0
        assert not impact.beneficial

    @pytest.mark.parametrize("additional", [Decimal("0"), Decimal("-100")])
    def test_additional_must_be_positive(self, remaining_loan, additional):
        with pytest.raises(InvalidInput):
            prepayment_impact(
                remaining_loan["principal"],
                remaining_loan["annual_rate_percent"],
                remaining_loan["monthly_payment"],
                additional,
            )

    def test_current_emi_too_low(self, remaining_loan):
        with pytest.raises(NonConvergent):
            prepayment_impact(
                remaining_loan["principal"], remaining_loan["annual_rate_percent"], Decimal("15000"), Decimal("1000")
            )


class TestCompareContributionLevels:
    def test_longest_duration_gains_most(self, sip_plan):
        comparison = compare_contribution_levels(
            sip_plan["monthly_contribution"],
            sip_plan["annual_rate_percent"],
            candidate_durations(10),
            selected_years=10,
        )
        assert [p.months for p in comparison.candidates] == [60, 120]
        assert comparison.best.months == 120

    def test_ties_favour_shorter_duration(self):
        comparison = compare_contribution_levels(Decimal("5000"), 0, [5, 10, 15])
        assert comparison.best.months == 60
        assert all(p.gain == 0 for p in comparison.candidates)
