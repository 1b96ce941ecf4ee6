from datetime import date

import pytest

from components.alert.repository import AlertRepository
from components.core.exceptions import NotFound, PreconditionFailed
from components.payment.repository import PaymentRepository
from components.plan import models
from components.plan.repository import PlanRepository
from components.prediction.repository import PredictionRepository
from tests.conftest import add_prescription, make_user


async def _user_with_plan(session, monthly_cost, tenure):
    user = await make_user(session)
    await add_prescription(session, user.id, monthly_cost=monthly_cost)
    await PredictionRepository(session).generate(user.id, policy="flat", today=date(2026, 5, 1))
    plan = await PlanRepository(session).create(user.id, tenure)
    return user, plan


def test_paying_every_installment_completes_plan(run_db):
    async def body(session):
        # 12 x 100.01 = 1200.12 over 18 months -> emi 66.67, last one settles the rest
        user, plan = await _user_with_plan(session, monthly_cost=100.01, tenure=18)
        payments = PaymentRepository(session)

        results = [await payments.pay_installment(user.id) for _ in range(18)]

        amounts = [float(p.amount) for p, _, _ in results]
        assert amounts[:17] == [66.67] * 17
        assert round(sum(amounts), 2) == 1200.12
        assert [done for _, _, done in results] == [False] * 17 + [True]

        await session.refresh(plan)
        assert plan.status == models.COMPLETED
        assert not plan.is_active and not plan.auto_pay_enabled

        alert_types = {a.alert_type for a in await AlertRepository(session).get_for_user(user.id)}
        assert {"payment_plan_completed", "next_steps"} <= alert_types

        with pytest.raises(NotFound):
            await payments.pay_installment(user.id)

    run_db(body)


def test_payments_never_exceed_total(run_db):
    async def body(session):
        user, plan = await _user_with_plan(session, monthly_cost=100, tenure=6)
        # An inflated installment is capped at what is left
        payments = PaymentRepository(session)
        await payments.pay_installment(user.id)
        await payments.pay_installment(user.id)

        plan.monthly_emi = 1000
        await session.commit()
        payment, _, _ = await payments.pay_installment(user.id)

        assert float(payment.amount) == 800.00
        progress = await PlanRepository(session).get_progress(plan)
        assert progress.total_paid == 1200.00
        assert progress.remaining_amount == 0

    run_db(body)


def test_payment_without_plan(run_db):
    async def body(session):
        user = await make_user(session)
        with pytest.raises(NotFound):
            await PaymentRepository(session).pay_installment(user.id)

    run_db(body)


def test_payment_records_manual_method_and_transaction(run_db):
    async def body(session):
        user, plan = await _user_with_plan(session, monthly_cost=100, tenure=12)
        payment, _, completed = await PaymentRepository(session).pay_installment(user.id)

        assert payment.payment_method == "Manual Payment"
        assert payment.status == "completed"
        assert payment.transaction_id.startswith("TXN")
        assert not completed

        listed = await PaymentRepository(session).get_for_plan(user.id, plan.id)
        assert [p.id for p in listed] == [payment.id]

    run_db(body)


def test_plan_with_nothing_to_pay_takes_no_payment(run_db):
    async def body(session):
        user, plan = await _user_with_plan(session, monthly_cost=0.0, tenure=6)
        assert float(plan.total_amount) == 0

        with pytest.raises(PreconditionFailed):
            await PaymentRepository(session).pay_installment(user.id)
        assert await PlanRepository(session).get_payment_amounts(plan.id) == []

    run_db(body)
