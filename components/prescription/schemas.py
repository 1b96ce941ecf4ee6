"""Pydantic schemas for prescription data validation."""

from datetime import date, datetime
from typing import List, Optional
from pydantic import BaseModel, Field


class PrescriptionBase(BaseModel):
    """Base prescription schema."""
    medicine_name: str = Field(..., min_length=1, max_length=100)
    dosage: str = "As prescribed"
    frequency: str = "As prescribed"
    disease_type: str = "General"
    quantity: int = Field(1, ge=1)
    monthly_cost: float = Field(..., ge=0)  # For the whole quantity
    start_date: Optional[date] = None


class PrescriptionCreate(PrescriptionBase):
    """Schema for prescription creation."""
    pass


class PrescriptionUpdate(BaseModel):
    """Schema for partial prescription update."""
    dosage: Optional[str] = None
    frequency: Optional[str] = None
    quantity: Optional[int] = Field(None, ge=1)
    monthly_cost: Optional[float] = Field(None, ge=0)
    is_active: Optional[bool] = None


class Prescription(PrescriptionBase):
    """Schema for prescription response."""
    id: int
    is_active: bool
    created_at: datetime

    class Config:
        from_attributes = True


class PrescriptionList(BaseModel):
    total_monthly_cost: float
    prescriptions: List[Prescription]


class DetectedMedicine(BaseModel):
    """A medicine suggested from a scanned prescription. Not persisted."""
    name: str  # As listed in the price list
    keyword: str  # As matched in the scanned text
    dosage: str
    quantity: int = 1
    monthly_cost: float
    disease_type: str


class ScanResult(BaseModel):
    text: str
    medicines: List[DetectedMedicine]


class SelectedMedicine(BaseModel):
    """A detected medicine the user chose to keep."""
    name: str
    dosage: str = "As prescribed"
    quantity: int = Field(1, ge=1)
    monthly_cost: float = Field(..., ge=0)  # Cost of one unit for a month
    disease_type: str = "General"


class BulkPrescriptionCreate(BaseModel):
    medicines: List[SelectedMedicine] = Field(..., min_length=1)
