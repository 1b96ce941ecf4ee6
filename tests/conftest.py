import asyncio
from datetime import date

import pytest
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import StaticPool

from components.core.database import DatabaseManager
# Register every table on Base
import components.user.models
import components.medicine.models
import components.prescription.models
import components.prediction.models
import components.plan.models
import components.payment.models
import components.alert.models
from components.prescription.models import Prescription
from components.user.models import User


@pytest.fixture
def run_db():
    """Run an async test body against a fresh in-memory database session."""

    def run(test_body):
        async def main():
            engine = create_async_engine(
                "sqlite+aiosqlite:///:memory:",
                poolclass=StaticPool,
                connect_args={"check_same_thread": False},
            )
            manager = DatabaseManager(engine=engine)
            await manager.create_tables()
            try:
                async with manager.get_db() as session:
                    return await test_body(session)
            finally:
                await engine.dispose()

        return asyncio.run(main())

    return run


async def make_user(session, email="patient@example.com"):
    user = User(email=email, full_name="Test Patient", password="salt:hash", registration_date=date(2026, 1, 1))
    session.add(user)
    await session.commit()
    await session.refresh(user)
    return user


async def add_prescription(session, user_id, name="metformin", monthly_cost=100.0, is_active=True):
    prescription = Prescription(
        user_id=user_id,
        medicine_name=name,
        dosage="500 mg",
        frequency="Once daily",
        disease_type="Diabetes",
        monthly_cost=monthly_cost,
        is_active=is_active,
    )
    session.add(prescription)
    await session.commit()
    await session.refresh(prescription)
    return prescription
