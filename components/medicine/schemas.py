from typing import List, Optional
from pydantic import BaseModel, Field


class MedicinePriceBase(BaseModel):
    medicine_name: str
    monthly_cost: float = Field(..., ge=0)
    disease_type: str = "General"


class MedicinePriceCreate(MedicinePriceBase):
    """Schema for adding a medicine to the price list."""
    pass


class MedicinePriceRead(MedicinePriceBase):
    id: int

    class Config:
        from_attributes = True


class PriceUploadError(BaseModel):
    """Schema for price list upload error."""
    row: int
    message: str


class PriceUploadResponse(BaseModel):
    """Schema for price list upload response."""
    success: bool
    message: str
    errors: Optional[List[PriceUploadError]] = None
