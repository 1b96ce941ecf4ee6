"""Script to seed demo data into the database."""

import asyncio
from datetime import date
from sqlalchemy.sql import text

from components.core.init_db import db_manager, get_db
from components.core.security import get_password_hash
from components.medicine.models import MedicinePrice
from components.payment.repository import PaymentRepository
from components.plan.repository import PlanRepository
from components.prediction.repository import PredictionRepository
from components.prescription.models import Prescription
from components.user.models import User

MEDICINE_PRICES = [
    ("metformin", 180.00, "Diabetes"),
    ("glimepiride", 220.00, "Diabetes"),
    ("insulin", 950.00, "Diabetes"),
    ("amlodipine", 120.00, "Hypertension"),
    ("telmisartan", 260.00, "Hypertension"),
    ("atorvastatin", 310.00, "Cholesterol"),
    ("levothyroxine", 140.00, "Thyroid"),
    ("pantoprazole", 160.00, "Gastric"),
    ("montelukast", 280.00, "Respiratory"),
    ("paracetamol", 40.00, "General"),
]


async def seed_data():
    """Seed demo data into the database."""
    await db_manager.create_tables()

    async for db in get_db():
        # Clear existing data, children first
        for table in ("payments", "payment_plans", "cost_predictions", "alerts",
                      "prescriptions", "medicine_prices", "users"):
            await db.execute(text(f"DELETE FROM {table}"))
        await db.commit()

        db.add_all(
            MedicinePrice(medicine_name=name, monthly_cost=cost, disease_type=disease)
            for name, cost, disease in MEDICINE_PRICES
        )

        user = User(
            email="patient@example.com",
            full_name="Demo Patient",
            password=get_password_hash("password123"),
            registration_date=date.today(),
        )
        db.add(user)
        await db.commit()
        await db.refresh(user)

        db.add_all([
            Prescription(user_id=user.id, medicine_name="metformin", dosage="500 mg",
                         frequency="Twice daily", disease_type="Diabetes", monthly_cost=180.00),
            Prescription(user_id=user.id, medicine_name="telmisartan", dosage="40 mg",
                         frequency="Once daily", disease_type="Hypertension", monthly_cost=260.00),
            Prescription(user_id=user.id, medicine_name="atorvastatin", dosage="10 mg",
                         frequency="Once daily", disease_type="Cholesterol", monthly_cost=310.00),
        ])
        await db.commit()

        prediction = await PredictionRepository(db).generate(user.id)
        plan = await PlanRepository(db).create(user.id, 12)
        payments = PaymentRepository(db)
        for _ in range(2):
            await payments.pay_installment(user.id)

        print(f"Seeded user {user.email} (password: password123)")
        print(f"Prediction {prediction.id}: {float(prediction.annual_predicted_cost):.2f}")
        print(f"Plan {plan.id}: {float(plan.monthly_emi):.2f} x {plan.tenure_months} months")
        break

if __name__ == "__main__":
    asyncio.run(seed_data())
