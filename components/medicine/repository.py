"""Repository for the medicine price list."""

import csv
import logging
from typing import BinaryIO, Dict, List, Optional, Tuple

import pandas as pd
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from components.medicine.models import MedicinePrice

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = ("medicine_name", "monthly_cost", "disease_type")


class MedicinePriceRepository:
    """Repository for medicine price operations."""

    def __init__(self, session: AsyncSession):
        """Initialize repository with database session."""
        self.session = session

    async def get_all(self) -> List[MedicinePrice]:
        result = await self.session.execute(
            select(MedicinePrice).order_by(MedicinePrice.medicine_name)
        )
        return list(result.scalars().all())

    async def find_by_keyword(self, keyword: str) -> Optional[MedicinePrice]:
        """Case-insensitive substring lookup; the first match wins."""
        pattern = f"%{keyword.lower()}%"
        result = await self.session.execute(
            select(MedicinePrice)
            .where(func.lower(MedicinePrice.medicine_name).like(pattern))
            .order_by(MedicinePrice.id)
            .limit(1)
        )
        return result.scalar_one_or_none()

    async def upload_prices_from_csv(self, file_content: BinaryIO) -> Tuple[bool, str, List[Dict]]:
        """
        Upload medicine prices from a tab-separated CSV file.

        Args:
            file_content: The CSV file content

        Returns:
            Tuple containing:
            - Success status (bool)
            - Message (str)
            - List of errors if any (List[Dict])
        """
        errors = []

        try:
            content_str = file_content.read().decode('utf-8')
        except UnicodeDecodeError:
            return False, "File must be UTF-8 encoded", []

        csv_rows = list(csv.DictReader(content_str.splitlines(), delimiter='\t'))
        if not csv_rows:
            return False, "CSV file is empty", []

        result = await self.session.execute(select(func.lower(MedicinePrice.medicine_name)))
        known_names = set(result.scalars().all())
        seen_names = set()
        parsed = []

        # Validate every row before inserting anything
        for row_num, row in enumerate(csv_rows, start=2):  # Start at 2 to account for header row
            if not all(field in row for field in REQUIRED_COLUMNS):
                return False, "CSV file must contain 'medicine_name', 'monthly_cost', and 'disease_type' columns", []

            name = (row['medicine_name'] or '').strip()
            if not name:
                errors.append({"row": row_num, "message": "Medicine name cannot be empty"})
                continue

            try:
                cost = float(row['monthly_cost'])
            except (TypeError, ValueError):
                errors.append({"row": row_num, "message": f"Invalid monthly_cost value: {row['monthly_cost']}"})
                continue
            if pd.isna(cost) or cost < 0:
                errors.append({"row": row_num, "message": "Monthly cost must be a non-negative number"})
                continue

            key = name.lower()
            if key in known_names or key in seen_names:
                errors.append({"row": row_num, "message": f"Medicine '{name}' already exists in the price list"})
                continue
            seen_names.add(key)

            parsed.append(MedicinePrice(
                medicine_name=name,
                monthly_cost=cost,
                disease_type=(row['disease_type'] or '').strip() or "General",
            ))

        if errors:
            return False, "Validation errors occurred", errors

        self.session.add_all(parsed)
        await self.session.commit()
        logger.info("Imported %d medicine prices", len(parsed))
        return True, f"{len(parsed)} medicine prices uploaded successfully", []
