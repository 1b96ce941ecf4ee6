"""User model for the database."""

from sqlalchemy import Column, Integer, String, Date
from sqlalchemy.orm import relationship

from components.core.database import Base


class User(Base):
    """User model representing a patient in the system."""
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), unique=True, nullable=False)
    full_name = Column(String(255), nullable=False, default="")
    phone = Column(String(32), nullable=True)
    password = Column(String(255), nullable=False)  # Hashed password
    registration_date = Column(Date, nullable=False)

    # Relationships
    prescriptions = relationship("Prescription", back_populates="user", cascade="all, delete-orphan")
    predictions = relationship("CostPrediction", back_populates="user", cascade="all, delete-orphan")
    payment_plans = relationship("PaymentPlan", back_populates="user", cascade="all, delete-orphan")
    alerts = relationship("Alert", back_populates="user", cascade="all, delete-orphan")
