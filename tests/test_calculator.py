from datetime import date

import pytest

from components.core.exceptions import InvalidArgument
from components.prediction.calculator import (
    SEASONAL_FACTORS,
    calculate_current_monthly_cost,
    check_cost_threshold,
    generate_emi,
    generate_transaction_id,
    plan_progress,
    predict_annual_cost,
    recalculate_installment,
    round_money,
)


class Rx:
    def __init__(self, monthly_cost):
        self.monthly_cost = monthly_cost


def test_monthly_cost_sums_entries():
    assert calculate_current_monthly_cost([Rx(100), Rx(250.5), {"monthly_cost": "49.5"}]) == 400.0


def test_monthly_cost_empty_is_zero():
    assert calculate_current_monthly_cost([]) == 0


def test_monthly_cost_ignores_missing_and_non_numeric():
    items = [Rx(None), Rx("abc"), {"monthly_cost": ""}, {}, Rx(10)]
    assert calculate_current_monthly_cost(items) == 10


def test_emi_divides_evenly():
    assert generate_emi(1200, 12) == 100.00


def test_emi_rounds_to_two_decimals():
    assert generate_emi(100, 3) == 33.33


def test_emi_default_tenure_is_twelve():
    assert generate_emi(600) == 50.00


@pytest.mark.parametrize("tenure", [0, -1])
def test_emi_rejects_non_positive_tenure(tenure):
    with pytest.raises(InvalidArgument):
        generate_emi(1200, tenure)


@pytest.mark.parametrize("cost,severity,is_high", [
    (0, "info", False),
    (999.99, "info", False),
    (1000.00, "warning", True),
    (1999.99, "warning", True),
    (2000.00, "error", True),
    (-5, "info", False),
])
def test_threshold_bands(cost, severity, is_high):
    result = check_cost_threshold(cost)
    assert result.severity == severity
    assert result.is_high is is_high


def test_threshold_message_carries_amount():
    assert "₹1500.00" in check_cost_threshold(1500).message
    assert "critical threshold" in check_cost_threshold(2500).message


def test_flat_prediction_repeats_current_cost():
    result = predict_annual_cost([Rx(300), Rx(200)], policy="flat", start=date(2026, 3, 10))
    assert [m.cost for m in result.monthly_breakdown] == [500.00] * 12
    assert result.annual_cost == 6000.00
    assert result.policy == "flat"


def test_prediction_starts_at_current_month_and_wraps():
    result = predict_annual_cost([Rx(100)], policy="flat", start=date(2026, 11, 1))
    months = [m.month for m in result.monthly_breakdown]
    assert months[:3] == ["November", "December", "January"]
    assert months[-1] == "October"
    assert len(months) == 12


def test_seasonal_prediction_applies_growth_and_factors():
    result = predict_annual_cost([Rx(100)], policy="seasonal", start=date(2026, 1, 1))
    growth = 1 + 0.05
    expected = [100.0 * growth ** (i / 12) * SEASONAL_FACTORS[i] for i in range(12)]

    assert result.monthly_breakdown[0].cost == 100.00
    assert [m.cost for m in result.monthly_breakdown] == [round_money(v) for v in expected]
    assert result.annual_cost == round_money(sum(expected))


def test_unknown_prediction_policy_is_rejected():
    with pytest.raises(InvalidArgument):
        predict_annual_cost([Rx(100)], policy="exponential")


def test_recalculate_keeps_paid_history():
    # tenure 12, 3 payments totalling 300, new monthly cost 150 -> total 1800
    total, emi = recalculate_installment(150, 12, 3, 300)
    assert total == 1800.00
    assert emi == round_money(1500 / 9)


def test_recalculate_floors_remaining_months_at_one():
    total, emi = recalculate_installment(100, 6, 6, 500)
    assert total == 600.00
    assert emi == 100.00


def test_recalculate_total_covers_paid_amount():
    # 3 x 300 already paid, new cost would only be 120 for the year
    total, emi = recalculate_installment(10, 12, 3, 900)
    assert total == 900.00
    assert emi == 0


def test_plan_progress():
    progress = plan_progress(1200, 12, [100, 100, 100])
    assert progress.paid_emis == 3
    assert progress.remaining_emis == 9
    assert progress.total_paid == 300.00
    assert progress.remaining_amount == 900.00
    assert progress.progress_percentage == 25.0


def test_plan_progress_caps_at_hundred_percent():
    progress = plan_progress(300, 2, [100, 100, 100])
    assert progress.remaining_emis == 0
    assert progress.remaining_amount == 0
    assert progress.progress_percentage == 100.0


def test_transaction_id_format():
    txn = generate_transaction_id()
    assert txn.startswith("TXN")
    assert txn[3:-9].isdigit()
    assert txn[-9:].isalnum() and txn[-9:].upper() == txn[-9:]
    assert generate_transaction_id() != txn
