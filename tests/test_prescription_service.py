from components.alert.repository import AlertRepository
from components.core.exceptions import ConcurrentUpdate
from components.plan.repository import PlanRepository
from components.prescription import schemas
from components.prescription.repository import PrescriptionRepository
from components.prescription.service import on_prescriptions_changed
from components.medicine.models import MedicinePrice
from tests.conftest import add_prescription, make_user


def test_crossing_threshold_raises_alert_once(run_db):
    async def body(session):
        user = await make_user(session)
        repo = PrescriptionRepository(session)

        await add_prescription(session, user.id, monthly_cost=900)
        await on_prescriptions_changed(session, user.id, 0)

        await add_prescription(session, user.id, name="insulin", monthly_cost=200)
        await on_prescriptions_changed(session, user.id, 900)

        # Still in the warning band: no second alert
        await add_prescription(session, user.id, name="aspirin", monthly_cost=50)
        await on_prescriptions_changed(session, user.id, 1100)

        alerts = await AlertRepository(session).get_for_user(user.id)
        assert [(a.alert_type, a.severity) for a in alerts] == [("high_cost", "warning")]
        assert await repo.monthly_cost(user.id) == 1150

    run_db(body)


def test_selected_medicines_scale_with_quantity(run_db):
    async def body(session):
        user = await make_user(session)
        created = await PrescriptionRepository(session).create_from_selection(user.id, [
            schemas.SelectedMedicine(name="metformin", dosage="500mg", quantity=2, monthly_cost=180),
        ])
        assert float(created[0].monthly_cost) == 360.00
        assert created[0].frequency == "As prescribed"

    run_db(body)


def test_suggestions_drop_unpriced_medicines(run_db):
    async def body(session):
        session.add(MedicinePrice(medicine_name="Metformin", monthly_cost=180, disease_type="Diabetes"))
        await session.commit()

        suggestions = await PrescriptionRepository(session).suggest_from_text(
            "Tab Metformin 500mg\nTab Amlodipine 5mg"
        )
        assert [(s.name, s.keyword, s.monthly_cost, s.disease_type) for s in suggestions] == [
            ("Metformin", "metformin", 180.0, "Diabetes")
        ]

    run_db(body)


def test_update_and_delete_are_owner_scoped(run_db):
    async def body(session):
        user = await make_user(session)
        other = await make_user(session, email="other@example.com")
        prescription = await add_prescription(session, user.id, monthly_cost=100)
        repo = PrescriptionRepository(session)

        assert await repo.update(other.id, prescription.id, schemas.PrescriptionUpdate(is_active=False)) is None
        updated = await repo.update(user.id, prescription.id, schemas.PrescriptionUpdate(is_active=False))
        assert not updated.is_active
        assert await repo.monthly_cost(user.id) == 0

        assert not await repo.delete(other.id, prescription.id)
        assert await repo.delete(user.id, prescription.id)
        assert await repo.get_for_user(user.id) == []

    run_db(body)


def test_quantity_change_rescales_monthly_cost(run_db):
    async def body(session):
        user = await make_user(session)
        repo = PrescriptionRepository(session)
        created = await repo.create_from_selection(user.id, [
            schemas.SelectedMedicine(name="Metformin", quantity=2, monthly_cost=180),
        ])

        updated = await repo.update(user.id, created[0].id, schemas.PrescriptionUpdate(quantity=4))
        assert updated.quantity == 4
        assert float(updated.monthly_cost) == 720.00
        assert await repo.monthly_cost(user.id) == 720.00

        # An explicit cost wins over rescaling
        updated = await repo.update(
            user.id, created[0].id, schemas.PrescriptionUpdate(quantity=1, monthly_cost=150)
        )
        assert float(updated.monthly_cost) == 150.00

    run_db(body)


def test_selected_medicine_keeps_price_list_name(run_db):
    async def body(session):
        session.add(MedicinePrice(medicine_name="Metformin", monthly_cost=180, disease_type="Diabetes"))
        await session.commit()
        user = await make_user(session)
        repo = PrescriptionRepository(session)

        suggestions = await repo.suggest_from_text("Tab Metformin 500mg")
        created = await repo.create_from_selection(user.id, [
            schemas.SelectedMedicine(**s.model_dump(exclude={"keyword"})) for s in suggestions
        ])
        assert [p.medicine_name for p in created] == ["Metformin"]

    run_db(body)


def test_high_cost_alert_survives_plan_conflict(run_db, monkeypatch):
    async def conflict(self, user_id):
        raise ConcurrentUpdate("Payment plan was changed by another request, please retry")

    monkeypatch.setattr(PlanRepository, "adjust_on_prescription_change", conflict)

    async def body(session):
        user = await make_user(session)
        prescription = await add_prescription(session, user.id, monthly_cost=2500)

        assert await on_prescriptions_changed(session, user.id, 0) is None

        alerts = await AlertRepository(session).get_for_user(user.id)
        assert [(a.alert_type, a.severity) for a in alerts] == [("high_cost", "error")]
        # The prescription itself stays stored and usable
        assert prescription.medicine_name == "metformin"

    run_db(body)
