"""Payment plan model for the database."""

from sqlalchemy import Boolean, Column, Date, DateTime, ForeignKey, Integer, Numeric, String, func
from sqlalchemy.orm import relationship

from components.core.database import Base

ACTIVE = "active"
COMPLETED = "completed"
SUPERSEDED = "superseded"


class PaymentPlan(Base):
    """EMI plan spreading a predicted annual cost over a tenure."""
    __tablename__ = "payment_plans"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    prediction_id = Column(Integer, ForeignKey("cost_predictions.id"), nullable=True)
    total_amount = Column(Numeric(10, 2), nullable=False)
    monthly_emi = Column(Numeric(10, 2), nullable=False)
    tenure_months = Column(Integer, nullable=False)
    start_date = Column(Date, nullable=False)
    is_active = Column(Boolean, nullable=False, default=True)
    auto_pay_enabled = Column(Boolean, nullable=False, default=False)
    status = Column(String(20), nullable=False, default=ACTIVE)
    # Bumped on every write; updates are conditional on the version that was read
    version = Column(Integer, nullable=False, default=1)
    created_at = Column(DateTime, nullable=False, server_default=func.now())
    updated_at = Column(DateTime, nullable=False, server_default=func.now(), onupdate=func.now())

    # Relationships
    user = relationship("User", back_populates="payment_plans")
    prediction = relationship("CostPrediction", back_populates="payment_plans")
    payments = relationship("Payment", back_populates="payment_plan")
