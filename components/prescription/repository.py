"""Repository for prescription operations."""

import logging
from typing import List, Optional
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from components.medicine.repository import MedicinePriceRepository
from components.prediction.calculator import calculate_current_monthly_cost, round_money
from components.prescription import ocr
from components.prescription.models import Prescription
from components.prescription import schemas

logger = logging.getLogger(__name__)


class PrescriptionRepository:
    """Repository for prescription operations."""

    def __init__(self, session: AsyncSession):
        """Initialize repository with database session."""
        self.session = session

    async def get_for_user(self, user_id: int, active_only: bool = False) -> List[Prescription]:
        """Get a user's prescriptions, latest first."""
        query = select(Prescription).where(Prescription.user_id == user_id)
        if active_only:
            query = query.where(Prescription.is_active.is_(True))
        query = query.order_by(Prescription.created_at.desc(), Prescription.id.desc())
        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def get(self, user_id: int, prescription_id: int) -> Optional[Prescription]:
        result = await self.session.execute(
            select(Prescription).where(
                Prescription.id == prescription_id,
                Prescription.user_id == user_id,
            )
        )
        return result.scalar_one_or_none()

    async def monthly_cost(self, user_id: int) -> float:
        """Aggregate monthly cost of the user's active prescriptions."""
        return calculate_current_monthly_cost(await self.get_for_user(user_id, active_only=True))

    async def create(self, user_id: int, prescription: schemas.PrescriptionCreate) -> Prescription:
        db_prescription = Prescription(user_id=user_id, is_active=True, **prescription.model_dump())
        self.session.add(db_prescription)
        await self.session.commit()
        await self.session.refresh(db_prescription)
        logger.info("User %s added prescription %s", user_id, db_prescription.id)
        return db_prescription

    async def create_from_selection(
        self, user_id: int, medicines: List[schemas.SelectedMedicine]
    ) -> List[Prescription]:
        """Insert detected medicines the user selected; cost scales with quantity."""
        created = [
            Prescription(
                user_id=user_id,
                medicine_name=med.name,
                dosage=med.dosage,
                frequency=ocr.DEFAULT_DOSAGE,
                disease_type=med.disease_type,
                quantity=med.quantity,
                monthly_cost=round_money(med.monthly_cost * med.quantity),
                is_active=True,
            )
            for med in medicines
        ]
        self.session.add_all(created)
        await self.session.commit()
        for prescription in created:
            await self.session.refresh(prescription)
        logger.info("User %s added %d prescriptions from a scan", user_id, len(created))
        return created

    async def update(
        self, user_id: int, prescription_id: int, changes: schemas.PrescriptionUpdate
    ) -> Optional[Prescription]:
        """
        Apply a partial update. A new quantity without a new monthly cost
        rescales the stored cost, which always covers the whole quantity.
        """
        db_prescription = await self.get(user_id, prescription_id)
        if not db_prescription:
            return None

        values = {k: v for k, v in changes.model_dump(exclude_unset=True).items() if v is not None}
        old_quantity = db_prescription.quantity or 1
        if "quantity" in values and "monthly_cost" not in values and values["quantity"] != old_quantity:
            unit_cost = float(db_prescription.monthly_cost) / old_quantity
            values["monthly_cost"] = round_money(unit_cost * values["quantity"])

        for key, value in values.items():
            setattr(db_prescription, key, value)

        await self.session.commit()
        await self.session.refresh(db_prescription)
        return db_prescription

    async def delete(self, user_id: int, prescription_id: int) -> bool:
        db_prescription = await self.get(user_id, prescription_id)
        if not db_prescription:
            return False

        await self.session.delete(db_prescription)
        await self.session.commit()
        logger.info("User %s deleted prescription %s", user_id, prescription_id)
        return True

    async def suggest_from_text(self, text: str) -> List[schemas.DetectedMedicine]:
        """Match OCR text against the price list. Keywords without a price are dropped."""
        prices = MedicinePriceRepository(self.session)
        suggestions = []
        for match in ocr.detect_medicines(text):
            price = await prices.find_by_keyword(match.name)
            if price is None:
                continue
            suggestions.append(schemas.DetectedMedicine(
                name=price.medicine_name,
                keyword=match.name,
                dosage=match.dosage,
                quantity=1,
                monthly_cost=float(price.monthly_cost),
                disease_type=price.disease_type,
            ))
        return suggestions
