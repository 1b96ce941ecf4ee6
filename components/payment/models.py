"""Payment model for the database."""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, Numeric, String, func
from sqlalchemy.orm import relationship

from components.core.database import Base


class Payment(Base):
    """Installment paid against a payment plan. Rows are append-only."""
    __tablename__ = "payments"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    payment_plan_id = Column(Integer, ForeignKey("payment_plans.id"), nullable=True, index=True)
    amount = Column(Numeric(10, 2), nullable=False)
    payment_date = Column(DateTime, nullable=False, server_default=func.now())
    payment_method = Column(String(50), nullable=False)
    status = Column(String(20), nullable=False, default="completed")
    transaction_id = Column(String(64), unique=True, nullable=False)
    created_at = Column(DateTime, nullable=False, server_default=func.now())

    # Relationships
    payment_plan = relationship("PaymentPlan", back_populates="payments")
