"""Cost and payment arithmetic.

Pure functions shared by the prescription, prediction, plan and payment
components. Money is handled as float at the edges and rounded half-up to
two decimals through :func:`round_money`.
"""

import calendar
import random
import string
import time
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any, Iterable, List, Optional, Tuple

from components.core.config import get_settings
from components.core.exceptions import InvalidArgument

settings = get_settings()

FLAT_POLICY = "flat"
SEASONAL_POLICY = "seasonal"
PREDICTION_POLICIES = (FLAT_POLICY, SEASONAL_POLICY)

# Indexed by calendar month, January first
SEASONAL_FACTORS = [1.0, 1.0, 1.1, 1.05, 1.0, 1.0, 1.0, 1.05, 1.1, 1.15, 1.2, 1.15]

MONTH_NAMES = list(calendar.month_name)[1:]

_TXN_ALPHABET = string.digits + string.ascii_uppercase


@dataclass
class MonthlyCost:
    month: str
    cost: float


@dataclass
class AnnualPrediction:
    annual_cost: float
    monthly_breakdown: List[MonthlyCost] = field(default_factory=list)
    policy: str = FLAT_POLICY


@dataclass
class ThresholdResult:
    is_high: bool
    message: str
    severity: str


@dataclass
class PlanProgress:
    total_emis: int
    paid_emis: int
    remaining_emis: int
    total_paid: float
    remaining_amount: float
    progress_percentage: float


def round_money(value: Any) -> float:
    """Round to two decimals, half away from zero."""
    return float(Decimal(str(value)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


def _to_amount(value: Any) -> float:
    if value is None or value == "":
        return 0.0
    try:
        amount = Decimal(str(value))
    except (InvalidOperation, ValueError):
        return 0.0
    if not amount.is_finite():
        return 0.0
    return float(amount)


def _monthly_cost_of(prescription: Any) -> Any:
    if isinstance(prescription, dict):
        return prescription.get("monthly_cost")
    return getattr(prescription, "monthly_cost", None)


def calculate_current_monthly_cost(prescriptions: Iterable[Any]) -> float:
    """Sum the monthly_cost of every prescription; unusable values count as zero."""
    return sum((_to_amount(_monthly_cost_of(p)) for p in prescriptions), 0.0)


def predict_annual_cost(
    prescriptions: Iterable[Any],
    policy: Optional[str] = None,
    start: Optional[date] = None,
) -> AnnualPrediction:
    """
    Project twelve months of cost starting with the month of ``start``.

    ``flat`` repeats the current monthly cost; ``seasonal`` compounds the
    annual growth rate per month and applies the seasonal factor of each
    calendar month. Each month is rounded for display while the annual
    total is the rounded sum of the unrounded months.
    """
    policy = policy or settings.PREDICTION_POLICY
    if policy not in PREDICTION_POLICIES:
        raise InvalidArgument(f"Unknown prediction policy: {policy}")

    current_monthly_cost = calculate_current_monthly_cost(prescriptions)
    first_month = (start or date.today()).month - 1
    growth_factor = 1 + settings.ANNUAL_GROWTH_RATE

    breakdown = []
    total_cost = 0.0
    for i in range(12):
        month_index = (first_month + i) % 12
        if policy == SEASONAL_POLICY:
            monthly_cost = (
                current_monthly_cost
                * growth_factor ** (i / 12)
                * SEASONAL_FACTORS[month_index]
            )
        else:
            monthly_cost = current_monthly_cost

        breakdown.append(MonthlyCost(month=MONTH_NAMES[month_index], cost=round_money(monthly_cost)))
        total_cost += monthly_cost

    return AnnualPrediction(
        annual_cost=round_money(total_cost),
        monthly_breakdown=breakdown,
        policy=policy,
    )


def generate_emi(total_amount: float, tenure_months: int = 12) -> float:
    """Equal monthly installment for ``total_amount`` over ``tenure_months``."""
    if tenure_months is None or tenure_months <= 0:
        raise InvalidArgument("Tenure must be a positive number of months")
    return round_money(Decimal(str(total_amount)) / Decimal(tenure_months))


def format_money(amount: float) -> str:
    return f"{settings.CURRENCY_SYMBOL}{amount:.2f}"


def check_cost_threshold(monthly_cost: float) -> ThresholdResult:
    """Classify a monthly cost as info, warning or error."""
    cost = format_money(monthly_cost)

    if monthly_cost >= settings.CRITICAL_COST_THRESHOLD:
        return ThresholdResult(
            is_high=True,
            message=(
                f"High monthly cost detected: {cost}. This exceeds the critical threshold. "
                "Consider reviewing your prescriptions or exploring generic alternatives."
            ),
            severity="error",
        )
    if monthly_cost >= settings.COST_THRESHOLD:
        return ThresholdResult(
            is_high=True,
            message=f"Your monthly cost of {cost} is above average. We can help you set up a payment plan.",
            severity="warning",
        )
    return ThresholdResult(
        is_high=False,
        message=f"Your monthly cost of {cost} is within the normal range.",
        severity="info",
    )


def generate_transaction_id() -> str:
    """Time based id with a random suffix. Collisions are unlikely, not impossible."""
    suffix = "".join(random.choice(_TXN_ALPHABET) for _ in range(9))
    return f"TXN{int(time.time() * 1000)}{suffix}"


def recalculate_installment(
    monthly_cost: float,
    tenure_months: int,
    paid_count: int,
    paid_amount: float,
) -> Tuple[float, float]:
    """
    Recompute a plan's total and installment after its prescriptions changed.

    Returns ``(total_amount, monthly_emi)``. Payments already made are
    subtracted from the new total and spread over the months still left,
    which never drops below one. The total never falls below what was
    already paid.
    """
    if tenure_months is None or tenure_months <= 0:
        raise InvalidArgument("Tenure must be a positive number of months")

    paid_amount = round_money(paid_amount)
    total_amount = max(round_money(monthly_cost * tenure_months), paid_amount)
    remaining_months = max(tenure_months - paid_count, 1)
    remaining_amount = total_amount - paid_amount
    return total_amount, round_money(remaining_amount / remaining_months)


def plan_progress(total_amount: float, tenure_months: int, payment_amounts: Iterable[Any]) -> PlanProgress:
    amounts = [_to_amount(a) for a in payment_amounts]
    paid_emis = len(amounts)
    total_paid = round_money(sum(amounts))
    percentage = min(100.0, paid_emis / tenure_months * 100) if tenure_months > 0 else 0.0
    return PlanProgress(
        total_emis=tenure_months,
        paid_emis=paid_emis,
        remaining_emis=max(tenure_months - paid_emis, 0),
        total_paid=total_paid,
        remaining_amount=max(round_money(_to_amount(total_amount) - total_paid), 0.0),
        progress_percentage=round(percentage, 2),
    )
