"""Cost prediction model for the database."""

from sqlalchemy import Column, Date, DateTime, ForeignKey, Integer, JSON, Numeric, String, func
from sqlalchemy.orm import relationship

from components.core.database import Base


class CostPrediction(Base):
    """Twelve month cost projection. Rows are never updated."""
    __tablename__ = "cost_predictions"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    annual_predicted_cost = Column(Numeric(10, 2), nullable=False)
    monthly_breakdown = Column(JSON, nullable=False)  # [{"month": "January", "cost": 500.0}, ...]
    policy = Column(String(20), nullable=False)
    prediction_date = Column(Date, nullable=False)
    created_at = Column(DateTime, nullable=False, server_default=func.now())

    user = relationship("User", back_populates="predictions")
    payment_plans = relationship("PaymentPlan", back_populates="prediction")
