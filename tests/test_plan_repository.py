from datetime import date

import pytest
from sqlalchemy import update

from components.alert.repository import AlertRepository
from components.core.exceptions import ConcurrentUpdate, InvalidArgument, NotFound, PreconditionFailed
from components.payment.repository import PaymentRepository
from components.plan import models
from components.plan.models import PaymentPlan
from components.plan.repository import PlanRepository
from components.prediction.repository import PredictionRepository
from components.prescription.repository import PrescriptionRepository
from components.prescription.schemas import PrescriptionUpdate
from tests.conftest import add_prescription, make_user

TODAY = date(2026, 1, 15)


async def _user_with_plan(session, monthly_cost=100.0, tenure=12):
    user = await make_user(session)
    await add_prescription(session, user.id, monthly_cost=monthly_cost)
    await PredictionRepository(session).generate(user.id, policy="flat", today=TODAY)
    plan = await PlanRepository(session).create(user.id, tenure, today=TODAY)
    return user, plan


def test_create_plan_from_latest_prediction(run_db):
    async def body(session):
        user, plan = await _user_with_plan(session)
        assert float(plan.total_amount) == 1200.00
        assert float(plan.monthly_emi) == 100.00
        assert plan.tenure_months == 12
        assert plan.is_active and plan.status == models.ACTIVE
        assert not plan.auto_pay_enabled

    run_db(body)


def test_create_plan_requires_prediction(run_db):
    async def body(session):
        user = await make_user(session)
        with pytest.raises(PreconditionFailed):
            await PlanRepository(session).create(user.id, 12)

    run_db(body)


def test_create_plan_rejects_unknown_tenure(run_db):
    async def body(session):
        user, _ = await _user_with_plan(session)
        with pytest.raises(InvalidArgument):
            await PlanRepository(session).create(user.id, 7)

    run_db(body)


def test_new_plan_supersedes_active_one(run_db):
    async def body(session):
        user, first = await _user_with_plan(session)
        repo = PlanRepository(session)
        second = await repo.create(user.id, 6, today=TODAY)

        plans = await repo.get_for_user(user.id)
        active = [p for p in plans if p.is_active]
        assert [p.id for p in active] == [second.id]

        await session.refresh(first)
        assert first.status == models.SUPERSEDED
        assert float(second.monthly_emi) == 200.00

        alert_types = [a.alert_type for a in await AlertRepository(session).get_for_user(user.id)]
        assert "payment_plan_reset" in alert_types

    run_db(body)


def test_adjust_keeps_paid_installments(run_db):
    async def body(session):
        user, plan = await _user_with_plan(session)
        payments = PaymentRepository(session)
        for _ in range(3):
            await payments.pay_installment(user.id)

        # Monthly cost goes from 100 to 150
        await add_prescription(session, user.id, name="amlodipine", monthly_cost=50.0)
        repo = PlanRepository(session)
        adjusted = await repo.adjust_on_prescription_change(user.id)

        assert float(adjusted.total_amount) == 1800.00
        assert float(adjusted.monthly_emi) == 166.67
        assert await repo.get_payment_amounts(plan.id) == [100.0, 100.0, 100.0]

        # Running again with no change gives the same numbers
        again = await repo.adjust_on_prescription_change(user.id)
        assert float(again.total_amount) == 1800.00
        assert float(again.monthly_emi) == 166.67

    run_db(body)


def test_adjust_without_active_plan_is_noop(run_db):
    async def body(session):
        user = await make_user(session)
        await add_prescription(session, user.id)
        assert await PlanRepository(session).adjust_on_prescription_change(user.id) is None

    run_db(body)


def test_stale_plan_write_is_rejected(run_db):
    async def body(session):
        user, plan = await _user_with_plan(session)
        # Another request bumps the version behind our back
        await session.execute(
            update(PaymentPlan)
            .where(PaymentPlan.id == plan.id)
            .values(version=PaymentPlan.version + 1)
            .execution_options(synchronize_session=False)
        )
        await session.commit()

        with pytest.raises(ConcurrentUpdate):
            await PlanRepository(session)._conditional_update(plan, monthly_emi=1)

    run_db(body)


def test_toggle_auto_pay(run_db):
    async def body(session):
        user, plan = await _user_with_plan(session)
        repo = PlanRepository(session)
        updated = await repo.set_auto_pay(user.id, True)
        assert updated.auto_pay_enabled
        assert updated.version == 2

        payment, _, _ = await PaymentRepository(session).pay_installment(user.id)
        assert payment.payment_method == "Auto Pay"

    run_db(body)


def test_toggle_auto_pay_without_plan(run_db):
    async def body(session):
        user = await make_user(session)
        with pytest.raises(NotFound):
            await PlanRepository(session).set_auto_pay(user.id, True)

    run_db(body)


def test_preview_uses_latest_prediction(run_db):
    async def body(session):
        user, _ = await _user_with_plan(session)
        preview = await PlanRepository(session).preview(user.id, 18)
        assert preview["total_amount"] == 1200.00
        assert preview["monthly_emi"] == 66.67

    run_db(body)


def test_adjust_below_paid_amount_completes_plan(run_db):
    async def body(session):
        user, plan = await _user_with_plan(session)
        payments = PaymentRepository(session)
        for _ in range(3):
            await payments.pay_installment(user.id)

        # Monthly cost drops from 100 to 10: a year now costs less than what was paid
        prescriptions = await PrescriptionRepository(session).get_for_user(user.id)
        await PrescriptionRepository(session).update(
            user.id, prescriptions[0].id, PrescriptionUpdate(monthly_cost=10)
        )
        repo = PlanRepository(session)
        adjusted = await repo.adjust_on_prescription_change(user.id)

        assert float(adjusted.total_amount) == 300.00
        assert float(adjusted.monthly_emi) == 0
        assert adjusted.status == models.COMPLETED
        assert not adjusted.is_active
        assert await repo.get_active(user.id) is None

        progress = await repo.get_progress(adjusted)
        assert progress.total_paid <= float(adjusted.total_amount)

        with pytest.raises(NotFound):
            await payments.pay_installment(user.id)
        assert await repo.get_payment_amounts(plan.id) == [100.0, 100.0, 100.0]

        types = [a.alert_type for a in await AlertRepository(session).get_for_user(user.id)]
        assert "payment_plan_completed" in types

    run_db(body)
