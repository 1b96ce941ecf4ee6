"""Prescription model for the database."""

from sqlalchemy import Boolean, Column, Date, DateTime, ForeignKey, Integer, Numeric, String, func
from sqlalchemy.orm import relationship

from components.core.database import Base


class Prescription(Base):
    """A medicine the user is currently (or was) taking."""
    __tablename__ = "prescriptions"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    medicine_name = Column(String(100), nullable=False)
    dosage = Column(String(50), nullable=False, default="As prescribed")
    frequency = Column(String(50), nullable=False, default="As prescribed")
    disease_type = Column(String(100), nullable=False, default="General")
    quantity = Column(Integer, nullable=False, default=1)
    monthly_cost = Column(Numeric(10, 2), nullable=False, default=0)
    start_date = Column(Date, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, nullable=False, server_default=func.now())
    updated_at = Column(DateTime, nullable=False, server_default=func.now(), onupdate=func.now())

    user = relationship("User", back_populates="prescriptions")
