"""Prescription endpoints for the API."""

import logging
from typing import List
from fastapi import APIRouter, Depends, File, HTTPException, UploadFile
from fastapi.concurrency import run_in_threadpool
from sqlalchemy.ext.asyncio import AsyncSession

from components.core.init_db import get_db
from components.prediction.calculator import calculate_current_monthly_cost
from components.prescription import ocr
from components.prescription import schemas
from components.prescription.repository import PrescriptionRepository
from components.prescription.service import on_prescriptions_changed
from components.user.models import User
from restapi.endpoints.auth import get_current_user

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/prescriptions",
    tags=["prescriptions"],
    responses={404: {"description": "Not found"}},
)


@router.get("/", response_model=schemas.PrescriptionList)
async def list_prescriptions(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Get all prescriptions of the user with the current monthly cost."""
    prescriptions = await PrescriptionRepository(db).get_for_user(current_user.id)
    active = [p for p in prescriptions if p.is_active]
    return schemas.PrescriptionList(
        total_monthly_cost=calculate_current_monthly_cost(active),
        prescriptions=[schemas.Prescription.model_validate(p) for p in prescriptions],
    )


@router.post("/", response_model=schemas.Prescription, status_code=201)
async def add_prescription(
    prescription: schemas.PrescriptionCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Add a prescription entered by hand."""
    repo = PrescriptionRepository(db)
    previous_cost = await repo.monthly_cost(current_user.id)
    created = await repo.create(current_user.id, prescription)
    await on_prescriptions_changed(db, current_user.id, previous_cost)
    return created


@router.post("/scan", response_model=schemas.ScanResult)
async def scan_prescription(
    file: UploadFile = File(...),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """
    Read a prescription image and suggest medicines found in it.

    Suggestions carry the reference monthly cost from the price list and
    are not saved; send the chosen ones to ``/prescriptions/bulk``.
    """
    if file.content_type and not file.content_type.startswith("image/"):
        raise HTTPException(status_code=400, detail="Only image files are supported")

    text = await run_in_threadpool(ocr.extract_text, await file.read())
    medicines = await PrescriptionRepository(db).suggest_from_text(text)
    logger.info("Scan for user %s suggested %d medicines", current_user.id, len(medicines))
    return schemas.ScanResult(text=text, medicines=medicines)


@router.post("/bulk", response_model=List[schemas.Prescription], status_code=201)
async def add_selected_medicines(
    selection: schemas.BulkPrescriptionCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Save the medicines the user picked from a scan."""
    repo = PrescriptionRepository(db)
    previous_cost = await repo.monthly_cost(current_user.id)
    created = await repo.create_from_selection(current_user.id, selection.medicines)
    await on_prescriptions_changed(db, current_user.id, previous_cost)
    return created


@router.patch("/{prescription_id}", response_model=schemas.Prescription)
async def update_prescription(
    prescription_id: int,
    changes: schemas.PrescriptionUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Update dosage, quantity, cost or the active flag of a prescription."""
    repo = PrescriptionRepository(db)
    previous_cost = await repo.monthly_cost(current_user.id)
    updated = await repo.update(current_user.id, prescription_id, changes)
    if updated is None:
        raise HTTPException(status_code=404, detail="Prescription not found")
    await on_prescriptions_changed(db, current_user.id, previous_cost)
    return updated


@router.delete("/{prescription_id}")
async def delete_prescription(
    prescription_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Delete a prescription."""
    repo = PrescriptionRepository(db)
    previous_cost = await repo.monthly_cost(current_user.id)
    if not await repo.delete(current_user.id, prescription_id):
        raise HTTPException(status_code=404, detail="Prescription not found")
    await on_prescriptions_changed(db, current_user.id, previous_cost)
    return {"message": "Prescription deleted successfully"}
