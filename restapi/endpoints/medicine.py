"""Medicine price list endpoints for the API."""

import io
from typing import List
from fastapi import APIRouter, Depends, File, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from components.core.init_db import get_db
from components.medicine import schemas
from components.medicine.repository import MedicinePriceRepository
from components.user.models import User
from restapi.endpoints.auth import get_current_user

router = APIRouter(
    prefix="/medicines",
    tags=["medicines"],
    responses={404: {"description": "Not found"}},
)


@router.get("/", response_model=List[schemas.MedicinePriceRead])
async def list_medicine_prices(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Get the reference price list used for scanned prescriptions."""
    return await MedicinePriceRepository(db).get_all()


@router.post("/upload", response_model=schemas.PriceUploadResponse)
async def upload_medicine_prices(
    file: UploadFile = File(...),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """
    Upload medicine prices from a tab-separated CSV file.

    The CSV file must have the following columns:
    - medicine_name: Name matched against scanned prescriptions
    - monthly_cost: Cost of one month of treatment (non-negative)
    - disease_type: Disease category, e.g. Diabetes

    Nothing is inserted if any row fails validation.
    """
    if not file.filename.endswith('.csv'):
        return schemas.PriceUploadResponse(
            success=False,
            message="Invalid file format. Only CSV files (.csv) are supported."
        )

    file_content = await file.read()
    success, message, errors = await MedicinePriceRepository(db).upload_prices_from_csv(io.BytesIO(file_content))

    if not success:
        return schemas.PriceUploadResponse(
            success=False,
            message=message,
            errors=[schemas.PriceUploadError(**error) for error in errors]
        )

    return schemas.PriceUploadResponse(success=True, message=message)
